from __future__ import annotations

from shiro_guessr.classic_game import ClassicGameConfig, build_classic_game
from shiro_guessr.game_core import GameState, Rgb, Round
from shiro_guessr.results import game_result_from_state, share_text
from shiro_guessr.scoring import GameRating, PerformanceLevel

T = Rgb(250, 250, 250)


def _perfect_round(n: int) -> Round:
    return Round(round_number=n, target_color=T, selected_color=T, distance=0, score=1000)


def test_share_text_for_perfect_game() -> None:
    state = GameState(
        rounds=tuple(_perfect_round(n) for n in range(1, 6)),
        current_round_index=4,
        is_completed=True,
        total_score=5000,
    )

    assert share_text(state) == (
        "5000/5000 (100%)\nR1: 1000 | R2: 1000 | R3: 1000 | R4: 1000 | R5: 1000\n#白Guessr"
    )


def test_game_result_counts_unanswered_rounds_as_zero() -> None:
    state = GameState(
        rounds=(
            _perfect_round(1),
            Round(round_number=2, target_color=T, selected_color=Rgb(245, 250, 250), distance=5, score=833),
            Round(round_number=3, target_color=T),
        ),
        current_round_index=2,
        is_completed=False,
        total_score=1833,
    )

    result = game_result_from_state(state)

    assert result.total_score == 1833
    assert result.max_score == 5000
    assert result.percentage == 37
    assert result.rating is GameRating.TRY_AGAIN
    assert result.is_completed is False
    assert [r.score for r in result.rounds] == [1000, 833, 0]
    assert [r.level for r in result.rounds] == [PerformanceLevel.PERFECT, PerformanceLevel.EXCELLENT, None]
    assert share_text(state).splitlines()[1] == "R1: 1000 | R2: 833 | R3: 0"


def test_short_game_is_scored_out_of_its_own_round_count() -> None:
    engine = build_classic_game(seed=17, config=ClassicGameConfig(total_rounds=3))
    for _ in range(3):
        current = engine.current_round()
        assert current is not None
        engine.select_color(current.target_color)
        engine.advance()

    state = engine.state
    assert state.is_completed is True

    result = game_result_from_state(state, total_rounds=engine.config.total_rounds)
    assert result.max_score == 3000
    assert result.percentage == 100
    assert share_text(state, total_rounds=3).splitlines()[0] == "3000/3000 (100%)"
    assert game_result_from_state(state).max_score == 5000
