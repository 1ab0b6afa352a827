from __future__ import annotations

from shiro_guessr.classic_game import build_classic_game
from shiro_guessr.colors import manhattan_distance
from shiro_guessr.game_core import Phase
from shiro_guessr.results import game_result_from_state, share_text
from shiro_guessr.scoring import round_score


def test_headless_sim_full_game_with_worst_picks_keeps_invariants() -> None:
    engine = build_classic_game(seed=2024)
    expected_total = 0

    for round_no in range(1, 6):
        state = engine.state
        assert engine.phase is Phase.AWAITING_SELECTION
        assert len(state.rounds) == state.current_round_index + 1
        assert state.current_round_index == round_no - 1

        current = engine.current_round()
        assert current is not None
        worst = max(current.palette, key=lambda p: manhattan_distance(p.color, current.target_color))
        engine.select_color(worst.color)

        answered = engine.current_round()
        assert answered is not None
        expected_total += round_score(manhattan_distance(worst.color, current.target_color))
        assert answered.score == round_score(answered.distance or 0)
        assert engine.state.total_score == expected_total
        assert engine.state.total_score == sum(r.score or 0 for r in engine.state.rounds)

        engine.advance()

    state = engine.state
    assert state.is_completed is True
    assert state.total_score == expected_total
    assert [r.round_number for r in state.rounds] == [1, 2, 3, 4, 5]
    assert all(r.is_answered for r in state.rounds)

    result = game_result_from_state(state)
    assert result.total_score == expected_total
    assert len(result.rounds) == 5
    assert share_text(state).startswith(f"{expected_total}/5000 (")


def test_headless_sim_answered_rounds_are_never_rewritten() -> None:
    engine = build_classic_game(seed=77)
    history = []

    for _ in range(5):
        current = engine.current_round()
        assert current is not None
        engine.select_color(current.palette[-1].color)
        answered = engine.current_round()
        history.append(answered)
        engine.select_color(current.target_color)  # ignored: already answered
        assert engine.current_round() == answered
        engine.advance()

    assert list(engine.state.rounds) == history
