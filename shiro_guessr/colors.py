from __future__ import annotations

from collections.abc import Iterator

from .game_core import PaletteColor, RandomSource, Rgb, clamp01, clamp_channel, round_half_up

# Playable range: every channel of a gameplay color sits in [245, 255].
MIN_WHITE = 245
MAX_WHITE = 255
PALETTE_SIZE = 25


def manhattan_distance(a: Rgb, b: Rgb) -> int:
    """|dr| + |dg| + |db|; at most 30 for two constrained colors."""

    return abs(a.r - b.r) + abs(a.g - b.g) + abs(a.b - b.b)


def interpolate(a: Rgb, b: Rgb, t: float) -> Rgb:
    """Per-channel linear blend from ``a`` (t=0) to ``b`` (t=1); t is clamped."""

    t = clamp01(t)
    if t == 0.0:
        return a
    if t == 1.0:
        return b
    return Rgb(
        round_half_up(a.r + (b.r - a.r) * t),
        round_half_up(a.g + (b.g - a.g) * t),
        round_half_up(a.b + (b.b - a.b) * t),
    )


def to_display_string(color: Rgb) -> str:
    return f"rgb({color.r}, {color.g}, {color.b})"


def to_hex_string(color: Rgb) -> str:
    return f"#{color.r:02x}{color.g:02x}{color.b:02x}"


def enumerate_range(min_channel: int = MIN_WHITE, max_channel: int = MAX_WHITE) -> Iterator[Rgb]:
    """Every color of the cube [min, max]^3, red-major."""

    lo, hi = _bounds(min_channel, max_channel)
    for r in range(lo, hi + 1):
        for g in range(lo, hi + 1):
            for b in range(lo, hi + 1):
                yield Rgb(r, g, b)


def _bounds(min_channel: int, max_channel: int) -> tuple[int, int]:
    lo = clamp_channel(min_channel)
    hi = clamp_channel(max_channel)
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi


class ColorModel:
    """Random color generation over an injected RandomSource."""

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng
        self._white_cube: tuple[Rgb, ...] | None = None

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def generate_color(self, min_channel: int = MIN_WHITE, max_channel: int = MAX_WHITE) -> Rgb:
        lo, hi = _bounds(min_channel, max_channel)
        return Rgb(
            int(self._rng.randint(lo, hi)),
            int(self._rng.randint(lo, hi)),
            int(self._rng.randint(lo, hi)),
        )

    def random_palette(self, target: Rgb, size: int = PALETTE_SIZE) -> tuple[PaletteColor, ...]:
        """Sample ``size`` distinct constrained colors, always including ``target``.

        When the sample misses the target it replaces slot 0, so the round
        always has an exact answer on the board.
        """

        cube = self._constrained_cube()
        size = max(1, min(int(size), len(cube)))
        colors = list(self._rng.sample(cube, size))
        if target not in colors:
            colors[0] = target
        return tuple(PaletteColor(code=i + 1, color=c) for i, c in enumerate(colors))

    def _constrained_cube(self) -> tuple[Rgb, ...]:
        if self._white_cube is None:
            self._white_cube = tuple(enumerate_range(MIN_WHITE, MAX_WHITE))
        return self._white_cube
