from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .game_core import Round, round_half_up

MAX_ROUND_SCORE = 1000
# |255-245| * 3 channels.
MAX_DISTANCE = 30
TOTAL_ROUNDS = 5
MAX_GAME_SCORE = MAX_ROUND_SCORE * TOTAL_ROUNDS

EXCELLENT_GAME_THRESHOLD = 4500
GOOD_GAME_THRESHOLD = 3500


class PerformanceLevel(str, Enum):
    PERFECT = "perfect"
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"


class GameRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    TRY_AGAIN = "try_again"


@dataclass(frozen=True, slots=True)
class Feedback:
    title: str
    message: str


_ROUND_FEEDBACK = {
    PerformanceLevel.PERFECT: Feedback("Perfect Match!", "You found the exact color."),
    PerformanceLevel.EXCELLENT: Feedback("Excellent!", "Very close match."),
    PerformanceLevel.GOOD: Feedback("Good Job!", "Keep refining your eye."),
    PerformanceLevel.FAIR: Feedback("Nice Try!", "Practice makes perfect."),
}

_GAME_FEEDBACK = {
    GameRating.EXCELLENT: Feedback("Excellent!", "You have an amazing eye for subtle color differences."),
    GameRating.GOOD: Feedback("Good Job!", "Your color perception is quite good. Keep practicing."),
    GameRating.TRY_AGAIN: Feedback("Try Again!", "Practice makes perfect. Challenge yourself again."),
}


def round_score(distance: int | float) -> int:
    """Linear score: 1000 at distance 0 down to 0 at distance 30 (clamped)."""

    if math.isnan(distance):
        return 0
    d = 0.0 if distance <= 0 else float(MAX_DISTANCE) if distance >= MAX_DISTANCE else float(distance)
    return round_half_up(MAX_ROUND_SCORE * (MAX_DISTANCE - d) / MAX_DISTANCE)


def total_score(rounds: Iterable[Round]) -> int:
    """Sum of round scores; unanswered rounds count 0."""

    return sum(r.score or 0 for r in rounds)


def performance_level(distance: int) -> PerformanceLevel:
    if distance <= 0:
        return PerformanceLevel.PERFECT
    if distance <= 5:
        return PerformanceLevel.EXCELLENT
    if distance <= 15:
        return PerformanceLevel.GOOD
    return PerformanceLevel.FAIR


def round_feedback(distance: int) -> Feedback:
    return _ROUND_FEEDBACK[performance_level(distance)]


def game_rating(total: int) -> GameRating:
    if total >= EXCELLENT_GAME_THRESHOLD:
        return GameRating.EXCELLENT
    if total >= GOOD_GAME_THRESHOLD:
        return GameRating.GOOD
    return GameRating.TRY_AGAIN


def game_feedback(total: int) -> Feedback:
    return _GAME_FEEDBACK[game_rating(total)]


def score_percentage(total: int, max_score: int = MAX_GAME_SCORE) -> int:
    if max_score <= 0:
        return 0
    return round_half_up(total / max_score * 100.0)
