from __future__ import annotations

import math
from dataclasses import dataclass, replace

from .game_core import CENTER, FieldCoordinate, clamp, clamp01

MIN_ZOOM = 0.5
MAX_ZOOM = 4.0


@dataclass(frozen=True, slots=True)
class ViewportState:
    zoom: float = 1.0
    offset_x: float = 0.0  # pan, in screen pixels
    offset_y: float = 0.0
    center: FieldCoordinate = CENTER  # only restored by reset()


class ViewportTransform:
    """Pan/zoom state mapping screen pixels to normalized field coordinates.

    The field is drawn scaled by ``zoom`` with a centering correction, then
    translated by the pan offset. ``screen_to_field`` undoes that and clamps
    to the field; ``field_to_screen`` is its unclamped inverse.
    """

    def __init__(self) -> None:
        self._state = ViewportState()

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def zoom_level(self) -> float:
        return self._state.zoom

    @property
    def offset(self) -> tuple[float, float]:
        return (self._state.offset_x, self._state.offset_y)

    def pan(self, dx: float, dy: float) -> None:
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return
        s = self._state
        self._state = replace(s, offset_x=s.offset_x + dx, offset_y=s.offset_y + dy)

    def zoom(self, delta: float, pivot: FieldCoordinate | None = None) -> None:
        if not math.isfinite(delta):
            return
        s = self._state
        new_zoom = clamp(s.zoom + delta, MIN_ZOOM, MAX_ZOOM)
        offset_x, offset_y = s.offset_x, s.offset_y
        if pivot is not None:
            # Rescale the pan so the pivot keeps its apparent screen position.
            ratio = new_zoom / s.zoom
            offset_x *= ratio
            offset_y *= ratio
        self._state = replace(s, zoom=new_zoom, offset_x=offset_x, offset_y=offset_y)

    def reset(self) -> None:
        self._state = ViewportState()

    def screen_to_field(
        self,
        screen_x: float,
        screen_y: float,
        canvas_width: float,
        canvas_height: float,
    ) -> FieldCoordinate:
        s = self._state
        w = max(1.0, float(canvas_width))
        h = max(1.0, float(canvas_height))
        centering = (1.0 - s.zoom) / (2.0 * s.zoom)
        fx = (screen_x - s.offset_x) / w / s.zoom + centering
        fy = (screen_y - s.offset_y) / h / s.zoom + centering
        return FieldCoordinate(clamp01(fx), clamp01(fy))

    def field_to_screen(
        self,
        coord: FieldCoordinate,
        canvas_width: float,
        canvas_height: float,
    ) -> tuple[float, float]:
        s = self._state
        w = max(1.0, float(canvas_width))
        h = max(1.0, float(canvas_height))
        centering = (1.0 - s.zoom) / (2.0 * s.zoom)
        sx = (coord.x - centering) * s.zoom * w + s.offset_x
        sy = (coord.y - centering) * s.zoom * h + s.offset_y
        return (sx, sy)
