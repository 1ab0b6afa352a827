from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from .clock import Scheduler
from .colors import ColorModel, manhattan_distance
from .countdown import CountdownTimer
from .game_core import (
    CENTER,
    FieldCoordinate,
    GameState,
    Phase,
    Pin,
    RandomSource,
    Round,
    SeededRng,
    StateObservers,
    append_round,
    complete_game,
    new_game_state,
    record_answer,
)
from .gradient_field import FIELD_HEIGHT, FIELD_WIDTH, FieldFactory, GradientField
from .scoring import TOTAL_ROUNDS, round_score, total_score
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MapGameConfig:
    total_rounds: int = TOTAL_ROUNDS
    time_limit_s: int = 60
    field_width: int = FIELD_WIDTH
    field_height: int = FIELD_HEIGHT
    randomize_corners: bool = False


class MapRoundEngine:
    """Map mode: drop a pin where the field shows the target color, against the clock.

    While a round awaits selection the pin may be placed any number of
    times. ``submit_guess`` and the timer's expiry both go through the same
    phase guard, so whichever arrives first scores the round and the other
    becomes a no-op. On expiry without a pin, a pin is dropped at the field
    center so every round resolves to a score.
    """

    def __init__(
        self,
        *,
        colors: ColorModel,
        fields: FieldFactory,
        timer: CountdownTimer,
        viewport: ViewportTransform | None = None,
        config: MapGameConfig | None = None,
    ) -> None:
        cfg = config or MapGameConfig()
        if cfg.total_rounds <= 0:
            raise ValueError("total_rounds must be > 0")
        if cfg.time_limit_s <= 0:
            raise ValueError("time_limit_s must be > 0")

        self._colors = colors
        self._fields = fields
        self._timer = timer
        self._viewport = viewport or ViewportTransform()
        self._config = cfg
        self._observers = StateObservers()

        self._field: GradientField | None = None
        self._pin: Pin | None = None
        self._state = new_game_state(self._create_round(1), time_limit_s=cfg.time_limit_s)

        self._unsubscribe_timer: Callable[[], None] | None = timer.subscribe(self._on_timeout)
        self._timer.start(cfg.time_limit_s)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def config(self) -> MapGameConfig:
        return self._config

    @property
    def field(self) -> GradientField:
        assert self._field is not None
        return self._field

    @property
    def pin(self) -> Pin | None:
        return self._pin

    @property
    def viewport(self) -> ViewportTransform:
        return self._viewport

    @property
    def timer(self) -> CountdownTimer:
        return self._timer

    def current_round(self) -> Round | None:
        return self._state.current_round

    def is_active(self) -> bool:
        return self._state.is_active

    def time_remaining_s(self) -> int:
        return self._timer.remaining_s

    def subscribe(self, callback: Callable[[GameState], None]) -> Callable[[], None]:
        return self._observers.subscribe(callback)

    def start(self) -> None:
        self._timer.reset()
        if self._unsubscribe_timer is None:
            self._unsubscribe_timer = self._timer.subscribe(self._on_timeout)
        self._pin = None
        self._state = new_game_state(self._create_round(1), time_limit_s=self._config.time_limit_s)
        self._timer.start(self._config.time_limit_s)
        self._observers.notify(self._state)
        logger.debug("map game started")

    def replay(self) -> None:
        self.start()

    def reset(self) -> None:
        self.start()

    def place_pin(self, coordinate: FieldCoordinate) -> None:
        if self._state.phase is not Phase.AWAITING_SELECTION:
            logger.debug("place_pin ignored in phase %s", self._state.phase)
            return
        coordinate = coordinate.clamped()
        self._pin = Pin(coordinate=coordinate, color=self.field.color_at(coordinate))
        self._observers.notify(self._state)

    def place_pin_at_screen(
        self,
        screen_x: float,
        screen_y: float,
        canvas_width: float,
        canvas_height: float,
    ) -> None:
        coord = self._viewport.screen_to_field(screen_x, screen_y, canvas_width, canvas_height)
        self.place_pin(coord)

    def submit_guess(self) -> None:
        current = self._state.current_round
        pin = self._pin
        if current is None or self._state.phase is not Phase.AWAITING_SELECTION or pin is None:
            logger.debug("submit_guess ignored (phase=%s, pin=%s)", self._state.phase, pin is not None)
            return

        self._timer.stop()
        distance = manhattan_distance(current.target_color, pin.color)
        target_coordinate = current.target_coordinate or CENTER
        answered = replace(
            current,
            selected_color=pin.color,
            distance=distance,
            score=round_score(distance),
            pin=pin,
            target_pin=Pin(coordinate=target_coordinate, color=current.target_color),
            time_remaining_s=self._timer.remaining_s,
        )
        state = record_answer(self._state, answered)
        self._state = replace(state, total_score=total_score(state.rounds))
        self._observers.notify(self._state)
        logger.debug(
            "round %d answered: distance=%d score=%d remaining=%ds",
            answered.round_number,
            distance,
            answered.score,
            answered.time_remaining_s,
        )

    def advance(self) -> None:
        if self._state.phase is not Phase.ROUND_ANSWERED:
            logger.debug("advance ignored in phase %s", self._state.phase)
            return

        if self._state.current_round_index + 1 >= self._config.total_rounds:
            self._timer.reset()
            self._state = complete_game(self._state)
            self._observers.notify(self._state)
            logger.info("map game completed: total_score=%d", self._state.total_score)
            return

        answered = self._state.rounds[self._state.current_round_index]
        self._pin = None
        self._state = append_round(self._state, self._create_round(answered.round_number + 1))
        self._timer.start(self._config.time_limit_s)
        self._observers.notify(self._state)
        logger.debug("round %d started", answered.round_number + 1)

    def dispose(self) -> None:
        """Stop the clock and detach from the timer. A later ``start`` re-attaches."""

        self._timer.stop()
        if self._unsubscribe_timer is not None:
            self._unsubscribe_timer()
            self._unsubscribe_timer = None

    def _on_timeout(self) -> None:
        if self._state.phase is not Phase.AWAITING_SELECTION:
            return
        if self._pin is None:
            self._pin = Pin(coordinate=CENTER, color=self.field.color_at(CENTER))
        logger.debug(
            "round timed out; submitting pin at (%.3f, %.3f)",
            self._pin.coordinate.x,
            self._pin.coordinate.y,
        )
        self.submit_guess()

    def _create_round(self, round_number: int) -> Round:
        # The target coordinate is kept on the round: the field cannot be
        # inverted from color back to position.
        field = self._fields.new_field()
        self._field = field
        self._viewport.reset()
        rng = self._colors.rng
        coordinate = FieldCoordinate(float(rng.random()), float(rng.random()))
        return Round(
            round_number=round_number,
            target_color=field.color_at(coordinate),
            target_coordinate=coordinate,
        )


def build_map_game(
    *,
    scheduler: Scheduler,
    seed: int,
    config: MapGameConfig | None = None,
    rng: RandomSource | None = None,
) -> MapRoundEngine:
    cfg = config or MapGameConfig()
    colors = ColorModel(rng or SeededRng(seed))
    fields = FieldFactory(
        colors,
        width=cfg.field_width,
        height=cfg.field_height,
        randomize_corners=cfg.randomize_corners,
    )
    return MapRoundEngine(
        colors=colors,
        fields=fields,
        timer=CountdownTimer(scheduler),
        config=cfg,
    )
