from __future__ import annotations

import pytest

from shiro_guessr.game_core import CENTER, FieldCoordinate
from shiro_guessr.viewport import MAX_ZOOM, MIN_ZOOM, ViewportTransform


def test_initial_state() -> None:
    vt = ViewportTransform()

    assert vt.zoom_level == 1.0
    assert vt.offset == (0.0, 0.0)
    assert vt.state.center == CENTER


def test_pan_accumulates_exactly_and_leaves_zoom() -> None:
    vt = ViewportTransform()
    vt.pan(10, 20)
    vt.pan(5, -10)

    assert vt.offset == (15, 10)
    assert vt.zoom_level == 1.0


def test_pan_ignores_non_finite_deltas() -> None:
    vt = ViewportTransform()
    vt.pan(3, 4)
    vt.pan(float("nan"), 1)
    vt.pan(1, float("inf"))

    assert vt.offset == (3, 4)


def test_zoom_clamps_regardless_of_cumulative_delta() -> None:
    vt = ViewportTransform()
    for _ in range(50):
        vt.zoom(0.7)
        assert MIN_ZOOM <= vt.zoom_level <= MAX_ZOOM
    assert vt.zoom_level == MAX_ZOOM

    vt.zoom(-1000)
    assert vt.zoom_level == MIN_ZOOM

    vt.zoom(0.25)
    assert vt.zoom_level == pytest.approx(0.75)


def test_zoom_without_pivot_keeps_offset() -> None:
    vt = ViewportTransform()
    vt.pan(10, 20)
    vt.zoom(1.0)

    assert vt.zoom_level == 2.0
    assert vt.offset == (10, 20)


def test_zoom_with_pivot_rescales_offset() -> None:
    vt = ViewportTransform()
    vt.pan(10, 20)
    vt.zoom(1.0, CENTER)

    assert vt.zoom_level == 2.0
    assert vt.offset == pytest.approx((20, 40))

    # Clamped zoom uses the clamped ratio.
    vt.zoom(10.0, CENTER)
    assert vt.zoom_level == MAX_ZOOM
    assert vt.offset == pytest.approx((40, 80))


def test_reset_restores_defaults() -> None:
    vt = ViewportTransform()
    vt.pan(30, -5)
    vt.zoom(1.5)
    vt.reset()

    assert vt.zoom_level == 1.0
    assert vt.offset == (0.0, 0.0)
    assert vt.state.center == FieldCoordinate(0.5, 0.5)


def test_screen_to_field_identity_view() -> None:
    vt = ViewportTransform()

    assert vt.screen_to_field(400, 300, 800, 600) == FieldCoordinate(0.5, 0.5)
    assert vt.screen_to_field(0, 0, 800, 600) == FieldCoordinate(0.0, 0.0)
    assert vt.screen_to_field(800, 600, 800, 600) == FieldCoordinate(1.0, 1.0)


def test_screen_to_field_subtracts_pan_offset() -> None:
    vt = ViewportTransform()
    vt.pan(80, 60)

    assert vt.screen_to_field(480, 360, 800, 600) == FieldCoordinate(0.5, 0.5)


def test_screen_to_field_applies_zoom_and_centering_correction() -> None:
    vt = ViewportTransform()
    vt.zoom(1.0)  # zoom 2, correction (1 - 2) / 4 = -0.25

    coord = vt.screen_to_field(800, 600, 800, 600)
    assert coord.x == pytest.approx(0.25)
    assert coord.y == pytest.approx(0.25)

    vt.zoom(-1.5)  # zoom 0.5, correction 0.5
    coord = vt.screen_to_field(100, 60, 800, 600)
    assert coord.x == pytest.approx(0.25 + 0.5)
    assert coord.y == pytest.approx(0.2 + 0.5)


def test_screen_to_field_clamps_to_unit_square() -> None:
    vt = ViewportTransform()

    assert vt.screen_to_field(-100, -100, 800, 600) == FieldCoordinate(0.0, 0.0)
    assert vt.screen_to_field(10_000, 10_000, 800, 600) == FieldCoordinate(1.0, 1.0)


def test_field_to_screen_inverts_screen_to_field() -> None:
    vt = ViewportTransform()
    vt.zoom(0.5)
    vt.pan(12, -7)

    original = FieldCoordinate(0.3, 0.7)
    sx, sy = vt.field_to_screen(original, 640, 480)
    back = vt.screen_to_field(sx, sy, 640, 480)

    assert back.x == pytest.approx(original.x)
    assert back.y == pytest.approx(original.y)


def test_degenerate_canvas_does_not_divide_by_zero() -> None:
    vt = ViewportTransform()
    coord = vt.screen_to_field(0.5, 0.5, 0, 0)

    assert coord == FieldCoordinate(0.5, 0.5)
