from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from .colors import PALETTE_SIZE, ColorModel, manhattan_distance
from .game_core import (
    GameState,
    Phase,
    RandomSource,
    Rgb,
    Round,
    SeededRng,
    StateObservers,
    append_round,
    complete_game,
    new_game_state,
    record_answer,
)
from .scoring import TOTAL_ROUNDS, round_score, total_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClassicGameConfig:
    total_rounds: int = TOTAL_ROUNDS
    palette_size: int = PALETTE_SIZE


class RoundEngine:
    """Classic mode: pick the target white out of a 25-swatch palette.

    Phases: AWAITING_SELECTION -> ROUND_ANSWERED -> (next round | COMPLETED).
    Actions called in the wrong phase are ignored; re-read ``state`` to see
    whether anything happened.
    """

    def __init__(self, *, colors: ColorModel, config: ClassicGameConfig | None = None) -> None:
        cfg = config or ClassicGameConfig()
        if cfg.total_rounds <= 0:
            raise ValueError("total_rounds must be > 0")
        if cfg.palette_size <= 0:
            raise ValueError("palette_size must be > 0")

        self._colors = colors
        self._config = cfg
        self._observers = StateObservers()
        self._state = new_game_state(self._create_round(1))

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def config(self) -> ClassicGameConfig:
        return self._config

    def current_round(self) -> Round | None:
        return self._state.current_round

    def is_active(self) -> bool:
        return self._state.is_active

    def subscribe(self, callback: Callable[[GameState], None]) -> Callable[[], None]:
        return self._observers.subscribe(callback)

    def start(self) -> None:
        self._set_state(new_game_state(self._create_round(1)))
        logger.debug("classic game started")

    def replay(self) -> None:
        self.start()

    def reset(self) -> None:
        self.start()

    def select_color(self, color: Rgb) -> None:
        current = self._state.current_round
        if current is None or self._state.phase is not Phase.AWAITING_SELECTION:
            logger.debug("select_color ignored in phase %s", self._state.phase)
            return

        distance = manhattan_distance(current.target_color, color)
        answered = replace(
            current,
            selected_color=color,
            distance=distance,
            score=round_score(distance),
        )
        state = record_answer(self._state, answered)
        self._set_state(replace(state, total_score=total_score(state.rounds)))
        logger.debug(
            "round %d answered: distance=%d score=%d",
            answered.round_number,
            distance,
            answered.score,
        )

    def select_code(self, code: int) -> None:
        """Select the palette swatch labelled ``code``; unknown codes are ignored."""

        current = self._state.current_round
        if current is None:
            return
        for p in current.palette:
            if p.code == code:
                self.select_color(p.color)
                return

    def advance(self) -> None:
        if self._state.phase is not Phase.ROUND_ANSWERED:
            logger.debug("advance ignored in phase %s", self._state.phase)
            return

        if self._state.current_round_index + 1 >= self._config.total_rounds:
            self._set_state(complete_game(self._state))
            logger.info("classic game completed: total_score=%d", self._state.total_score)
            return

        answered = self._state.rounds[self._state.current_round_index]
        self._set_state(append_round(self._state, self._create_round(answered.round_number + 1)))
        logger.debug("round %d started", answered.round_number + 1)

    def _create_round(self, round_number: int) -> Round:
        target = self._colors.generate_color()
        palette = self._colors.random_palette(target, self._config.palette_size)
        return Round(round_number=round_number, target_color=target, palette=palette)

    def _set_state(self, state: GameState) -> None:
        self._state = state
        self._observers.notify(state)


def build_classic_game(
    *,
    seed: int,
    config: ClassicGameConfig | None = None,
    rng: RandomSource | None = None,
) -> RoundEngine:
    return RoundEngine(colors=ColorModel(rng or SeededRng(seed)), config=config)
