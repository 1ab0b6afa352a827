from __future__ import annotations

from dataclasses import dataclass

from .game_core import GameState, Rgb
from .scoring import (
    MAX_ROUND_SCORE,
    TOTAL_ROUNDS,
    GameRating,
    PerformanceLevel,
    game_rating,
    performance_level,
    score_percentage,
)

SHARE_TAG = "#白Guessr"


@dataclass(frozen=True, slots=True)
class RoundResult:
    round_number: int
    target: Rgb
    selected: Rgb | None
    distance: int | None
    score: int
    level: PerformanceLevel | None


@dataclass(frozen=True, slots=True)
class GameResult:
    """End-of-game summary for the results screen and share text.

    Built from any GameState; rounds that were never answered score 0 and
    carry no performance level.
    """

    total_score: int
    max_score: int
    percentage: int
    rating: GameRating
    is_completed: bool
    rounds: tuple[RoundResult, ...]


def game_result_from_state(state: GameState, *, total_rounds: int = TOTAL_ROUNDS) -> GameResult:
    """Build a GameResult from a (normally finished) GameState."""

    max_score = MAX_ROUND_SCORE * max(int(total_rounds), len(state.rounds))
    rounds = tuple(
        RoundResult(
            round_number=r.round_number,
            target=r.target_color,
            selected=r.selected_color,
            distance=r.distance,
            score=int(r.score or 0),
            level=None if r.distance is None else performance_level(r.distance),
        )
        for r in state.rounds
    )
    return GameResult(
        total_score=int(state.total_score),
        max_score=max_score,
        percentage=score_percentage(state.total_score, max_score),
        rating=game_rating(state.total_score),
        is_completed=bool(state.is_completed),
        rounds=rounds,
    )


def share_text(state: GameState, *, total_rounds: int = TOTAL_ROUNDS) -> str:
    result = game_result_from_state(state, total_rounds=total_rounds)
    breakdown = " | ".join(f"R{i + 1}: {r.score}" for i, r in enumerate(result.rounds))
    return f"{result.total_score}/{result.max_score} ({result.percentage}%)\n{breakdown}\n{SHARE_TAG}"
