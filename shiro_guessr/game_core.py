from __future__ import annotations

import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Uniform random source consumed by color and target sampling."""

    def randint(self, a: int, b: int) -> int:
        """Return an integer in [a, b] (inclusive)."""
        ...

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""
        ...

    def sample(self, population: Sequence[T], k: int) -> list[T]: ...


class Phase(str, Enum):
    AWAITING_SELECTION = "awaiting_selection"
    ROUND_ANSWERED = "round_answered"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Rgb:
    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True, slots=True)
class PaletteColor:
    code: int  # 1-based label shown on the swatch
    color: Rgb


@dataclass(frozen=True, slots=True)
class FieldCoordinate:
    """Normalized field position; (0, 0) is top-left, (1, 1) bottom-right."""

    x: float
    y: float

    def clamped(self) -> "FieldCoordinate":
        return FieldCoordinate(clamp01(self.x), clamp01(self.y))


CENTER = FieldCoordinate(0.5, 0.5)


@dataclass(frozen=True, slots=True)
class Pin:
    coordinate: FieldCoordinate
    color: Rgb


@dataclass(frozen=True, slots=True)
class Round:
    round_number: int
    target_color: Rgb
    selected_color: Rgb | None = None
    distance: int | None = None
    score: int | None = None
    palette: tuple[PaletteColor, ...] = ()  # classic mode only
    target_coordinate: FieldCoordinate | None = None  # map mode only
    pin: Pin | None = None
    target_pin: Pin | None = None  # display only, revealed after answering
    time_remaining_s: int | None = None

    @property
    def is_answered(self) -> bool:
        return self.selected_color is not None

    def palette_contains(self, color: Rgb) -> bool:
        return any(p.color == color for p in self.palette)


@dataclass(frozen=True, slots=True)
class GameState:
    """Read-only snapshot of a game. Replaced wholesale on every mutation."""

    rounds: tuple[Round, ...]
    current_round_index: int
    is_completed: bool
    total_score: int
    time_limit_s: int | None = None

    @property
    def current_round(self) -> Round | None:
        if self.is_completed or self.current_round_index >= len(self.rounds):
            return None
        return self.rounds[self.current_round_index]

    @property
    def phase(self) -> Phase:
        current = self.current_round
        if current is None:
            return Phase.COMPLETED
        if current.is_answered:
            return Phase.ROUND_ANSWERED
        return Phase.AWAITING_SELECTION

    @property
    def is_active(self) -> bool:
        return self.phase is Phase.AWAITING_SELECTION

    def answered_rounds(self) -> tuple[Round, ...]:
        return tuple(r for r in self.rounds if r.is_answered)


def new_game_state(first_round: Round, *, time_limit_s: int | None = None) -> GameState:
    return GameState(
        rounds=(first_round,),
        current_round_index=0,
        is_completed=False,
        total_score=0,
        time_limit_s=time_limit_s,
    )


def record_answer(state: GameState, answered: Round) -> GameState:
    """Swap the active round for its answered version. The caller re-totals."""

    rounds = list(state.rounds)
    rounds[state.current_round_index] = answered
    return replace(state, rounds=tuple(rounds))


def append_round(state: GameState, next_round: Round) -> GameState:
    return replace(
        state,
        rounds=state.rounds + (next_round,),
        current_round_index=state.current_round_index + 1,
    )


def complete_game(state: GameState) -> GameState:
    return replace(state, is_completed=True)


class StateObservers:
    """Plain observer list for "state changed" notifications."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[GameState], None]] = []

    def subscribe(self, callback: Callable[[GameState], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def notify(self, state: GameState) -> None:
        for callback in list(self._callbacks):
            callback(state)


class SeededRng:
    """Simple seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(int(seed))

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        return self._rng.sample(population, k)


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x <= lo else hi if x >= hi else x


def clamp01(x: float) -> float:
    if math.isnan(x):
        return 0.0
    return 0.0 if x <= 0.0 else 1.0 if x >= 1.0 else float(x)


def clamp_channel(v: int) -> int:
    return 0 if v <= 0 else 255 if v >= 255 else int(v)


def round_half_up(x: float) -> int:
    # Halves round toward +inf, so 247.5 -> 248 and -0.5 -> 0.
    return int(math.floor(x + 0.5))
