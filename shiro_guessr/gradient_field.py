from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .colors import ColorModel, interpolate
from .game_core import FieldCoordinate, Rgb

FIELD_WIDTH = 50
FIELD_HEIGHT = 50

# Top-left, top-right, bottom-left, bottom-right.
DEFAULT_CORNERS = (
    Rgb(245, 245, 245),
    Rgb(255, 245, 255),
    Rgb(245, 255, 255),
    Rgb(255, 255, 245),
)

BYTES_PER_PIXEL = 4


@dataclass(frozen=True, slots=True)
class GradientField:
    """Rectangular color field defined by four corner colors.

    ``width`` and ``height`` only matter for rasterization; ``color_at``
    works on normalized coordinates and is resolution independent.
    """

    width: int
    height: int
    corners: tuple[Rgb, Rgb, Rgb, Rgb]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("field dimensions must be > 0")
        if len(self.corners) != 4:
            raise ValueError("a gradient field needs exactly four corner colors")

    @classmethod
    def from_corners(cls, width: int, height: int, corners: Sequence[Rgb]) -> "GradientField":
        if len(corners) != 4:
            raise ValueError("a gradient field needs exactly four corner colors")
        tl, tr, bl, br = corners
        return cls(width=int(width), height=int(height), corners=(tl, tr, bl, br))

    @property
    def top_left(self) -> Rgb:
        return self.corners[0]

    @property
    def top_right(self) -> Rgb:
        return self.corners[1]

    @property
    def bottom_left(self) -> Rgb:
        return self.corners[2]

    @property
    def bottom_right(self) -> Rgb:
        return self.corners[3]

    def color_at(self, coord: FieldCoordinate) -> Rgb:
        """Bilinear sample: blend both horizontal edges along x, then those along y."""

        tl, tr, bl, br = self.corners
        top = interpolate(tl, tr, coord.x)
        bottom = interpolate(bl, br, coord.x)
        return interpolate(top, bottom, coord.y)

    def buffer_size(self) -> int:
        return self.width * self.height * BYTES_PER_PIXEL

    def rasterize(self, buffer: bytearray | memoryview) -> None:
        """Write row-major RGBA pixels (alpha 255) into ``buffer``."""

        if len(buffer) < self.buffer_size():
            raise ValueError(f"buffer too small: need {self.buffer_size()} bytes, got {len(buffer)}")

        x_den = float(self.width - 1)
        y_den = float(self.height - 1)
        i = 0
        for py in range(self.height):
            ny = 0.0 if y_den == 0.0 else py / y_den
            for px in range(self.width):
                nx = 0.0 if x_den == 0.0 else px / x_den
                c = self.color_at(FieldCoordinate(nx, ny))
                buffer[i] = c.r
                buffer[i + 1] = c.g
                buffer[i + 2] = c.b
                buffer[i + 3] = 255
                i += BYTES_PER_PIXEL

    def to_rgba_bytes(self) -> bytearray:
        buf = bytearray(self.buffer_size())
        self.rasterize(buf)
        return buf


class FieldFactory:
    """Builds the field for each map round."""

    def __init__(
        self,
        color_model: ColorModel,
        *,
        width: int = FIELD_WIDTH,
        height: int = FIELD_HEIGHT,
        randomize_corners: bool = False,
    ) -> None:
        self._colors = color_model
        self._width = int(width)
        self._height = int(height)
        self._randomize_corners = bool(randomize_corners)

    def new_field(self) -> GradientField:
        if not self._randomize_corners:
            return GradientField(self._width, self._height, DEFAULT_CORNERS)
        corners = tuple(self._colors.generate_color() for _ in range(4))
        return GradientField.from_corners(self._width, self._height, corners)
