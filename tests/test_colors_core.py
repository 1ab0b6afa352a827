from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from shiro_guessr.colors import (
    ColorModel,
    enumerate_range,
    interpolate,
    manhattan_distance,
    to_display_string,
    to_hex_string,
)
from shiro_guessr.game_core import Rgb, SeededRng

T = TypeVar("T")


class FirstItemsRng:
    """Deterministic stand-in: lowest values, first items of every sample."""

    def randint(self, a: int, b: int) -> int:
        return a

    def random(self) -> float:
        return 0.0

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        return list(population[:k])


def test_manhattan_distance_is_symmetric_and_zero_only_for_equal_colors() -> None:
    a = Rgb(245, 250, 255)
    b = Rgb(255, 245, 250)

    assert manhattan_distance(a, b) == 20
    assert manhattan_distance(b, a) == 20
    assert manhattan_distance(a, a) == 0
    assert manhattan_distance(a, Rgb(245, 250, 254)) == 1


def test_manhattan_distance_of_constrained_extremes_is_thirty() -> None:
    assert manhattan_distance(Rgb(245, 245, 245), Rgb(255, 255, 255)) == 30


def test_interpolate_endpoints_and_clamping() -> None:
    a = Rgb(245, 250, 255)
    b = Rgb(255, 245, 245)

    assert interpolate(a, b, 0.0) == a
    assert interpolate(a, b, 1.0) == b
    assert interpolate(a, b, -0.5) == a
    assert interpolate(a, b, 1.5) == b


def test_interpolate_midpoint_rounds_half_up() -> None:
    assert interpolate(Rgb(245, 245, 245), Rgb(255, 255, 255), 0.5) == Rgb(250, 250, 250)
    assert interpolate(Rgb(245, 245, 245), Rgb(250, 250, 250), 0.5) == Rgb(248, 248, 248)
    # Descending channels round the same way.
    assert interpolate(Rgb(250, 250, 250), Rgb(245, 245, 245), 0.5) == Rgb(248, 248, 248)


def test_interpolate_is_monotonic_per_channel() -> None:
    a = Rgb(245, 246, 247)
    b = Rgb(255, 254, 253)
    previous = a
    for step in range(1, 21):
        c = interpolate(a, b, step / 20)
        assert c.r >= previous.r
        assert c.g >= previous.g
        assert c.b >= previous.b
        previous = c
    assert previous == b


def test_enumerate_constrained_range_has_1331_distinct_colors() -> None:
    colors = list(enumerate_range(245, 255))

    assert len(colors) == 1331
    assert len(set(colors)) == 1331
    assert colors[0] == Rgb(245, 245, 245)
    assert colors[-1] == Rgb(255, 255, 255)
    assert all(245 <= ch <= 255 for c in colors for ch in c.as_tuple())


def test_enumerate_range_swaps_inverted_bounds() -> None:
    assert list(enumerate_range(1, 0)) == list(enumerate_range(0, 1))
    assert len(list(enumerate_range(0, 1))) == 8


def test_generate_color_stays_in_requested_range() -> None:
    model = ColorModel(SeededRng(7))
    for _ in range(200):
        c = model.generate_color()
        assert all(245 <= ch <= 255 for ch in c.as_tuple())
    for _ in range(200):
        c = model.generate_color(0, 255)
        assert all(0 <= ch <= 255 for ch in c.as_tuple())


def test_generate_color_is_deterministic_for_same_seed() -> None:
    m1 = ColorModel(SeededRng(123))
    m2 = ColorModel(SeededRng(123))

    assert [m1.generate_color() for _ in range(10)] == [m2.generate_color() for _ in range(10)]


def test_random_palette_is_unique_numbered_and_contains_target() -> None:
    model = ColorModel(SeededRng(99))
    for _ in range(20):
        target = model.generate_color()
        palette = model.random_palette(target)

        assert len(palette) == 25
        assert len({p.color for p in palette}) == 25
        assert [p.code for p in palette] == list(range(1, 26))
        assert any(p.color == target for p in palette)


def test_random_palette_forces_missing_target_into_first_slot() -> None:
    model = ColorModel(FirstItemsRng())
    target = Rgb(255, 255, 255)

    palette = model.random_palette(target)

    assert palette[0].color == target
    assert palette[0].code == 1
    assert palette[1].color == Rgb(245, 245, 246)
    assert len({p.color for p in palette}) == 25


def test_random_palette_leaves_sampled_target_in_place() -> None:
    model = ColorModel(FirstItemsRng())
    target = Rgb(245, 245, 250)

    palette = model.random_palette(target)

    assert palette[0].color == Rgb(245, 245, 245)
    assert palette[5].color == target


def test_display_strings() -> None:
    assert to_display_string(Rgb(250, 251, 252)) == "rgb(250, 251, 252)"
    assert to_hex_string(Rgb(245, 250, 255)) == "#f5faff"
