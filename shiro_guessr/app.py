"""Pygame UI shell for 白Guessr.

Two modes hang off the main menu:
- Classic: pick the target white out of a 5x5 palette
- Map: pin the target white on a gradient field before the clock runs out

Deterministic scoring/RNG/state lives in shiro_guessr/* (core modules); this
module only draws snapshots and forwards input.
"""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import pygame

from .classic_game import RoundEngine, build_classic_game
from .clock import ClockScheduler, RealClock
from .colors import to_display_string
from .countdown import format_time, is_time_low
from .game_core import FieldCoordinate, GameState, Phase, Pin, Rgb
from .gradient_field import GradientField
from .map_game import MapRoundEngine, build_map_game
from .results import game_result_from_state, share_text
from .scoring import game_feedback, round_feedback

logger = logging.getLogger(__name__)

SEED_ENV = "SHIRO_GUESSR_SEED"

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

BG = (24, 26, 32)
PANEL_BG = (36, 39, 48)
BORDER = (210, 214, 226)
TEXT_MAIN = (238, 240, 246)
TEXT_MUTED = (160, 166, 182)
ACCENT = (96, 165, 250)
PIN_GUESS = (239, 68, 68)
PIN_TARGET = (16, 185, 129)

PALETTE_COLS = 5
ZOOM_STEP = 0.1


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str
    action: Callable[[], None]


class App:
    def __init__(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        self._surface = surface
        self._font = font
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def font(self) -> pygame.font.Font:
        return self._font

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the last/root screen; root handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


class MenuScreen:
    def __init__(self, app: App, title: str, items: list[MenuItem], *, is_root: bool = False) -> None:
        self._app = app
        self._title = title
        self._items = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 48)
        self._item_font = pygame.font.Font(None, 34)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key in (pygame.K_UP, pygame.K_w):
            self._move(-1)
        elif event.key in (pygame.K_DOWN, pygame.K_s):
            self._move(1)
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            if self._items:
                self._items[self._selected].action()
        elif event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            if self._is_root:
                self._app.quit()
            else:
                self._app.pop()

    def _move(self, delta: int) -> None:
        if not self._items:
            return
        self._selected = (self._selected + delta) % len(self._items)

    def render(self, surface: pygame.Surface) -> None:
        w, h = surface.get_size()
        surface.fill(BG)

        title = self._title_font.render(self._title, True, TEXT_MAIN)
        surface.blit(title, title.get_rect(midtop=(w // 2, max(30, h // 8))))

        row_h = 46
        top = h // 3
        for i, item in enumerate(self._items):
            rect = pygame.Rect(0, 0, min(420, w - 80), row_h - 8)
            rect.center = (w // 2, top + i * row_h)
            active = i == self._selected
            pygame.draw.rect(surface, ACCENT if active else PANEL_BG, rect, border_radius=6)
            label = self._item_font.render(item.label, True, BG if active else TEXT_MAIN)
            surface.blit(label, label.get_rect(center=rect.center))

        hint = self._hint_font.render("Up/Down to move, Enter to select, Esc to go back", True, TEXT_MUTED)
        surface.blit(hint, hint.get_rect(midbottom=(w // 2, h - 16)))


def _draw_swatch(surface: pygame.Surface, rect: pygame.Rect, color: Rgb, *, outline: tuple[int, int, int]) -> None:
    pygame.draw.rect(surface, color.as_tuple(), rect, border_radius=6)
    pygame.draw.rect(surface, outline, rect, 2, border_radius=6)


def _draw_lines(
    surface: pygame.Surface,
    font: pygame.font.Font,
    lines: list[str],
    *,
    x: int,
    y: int,
    color: tuple[int, int, int] = TEXT_MAIN,
    spacing: int = 6,
) -> int:
    for line in lines:
        img = font.render(line, True, color)
        surface.blit(img, (x, y))
        y += img.get_height() + spacing
    return y


def _results_lines(state: GameState, total_rounds: int) -> list[str]:
    result = game_result_from_state(state, total_rounds=total_rounds)
    feedback = game_feedback(result.total_score)
    lines = [
        feedback.title,
        feedback.message,
        "",
        f"Total: {result.total_score} / {result.max_score} ({result.percentage}%)",
        "",
    ]
    for r in result.rounds:
        selected = "-" if r.selected is None else to_display_string(r.selected)
        lines.append(f"R{r.round_number}: {r.score:4d}  target {to_display_string(r.target)}  picked {selected}")
    lines += ["", *share_text(state, total_rounds=total_rounds).splitlines(), "", "R to replay, Esc to return."]
    return lines


def _answer_lines(state: GameState) -> list[str]:
    current = state.current_round
    if current is None or current.distance is None or current.selected_color is None:
        return []
    feedback = round_feedback(current.distance)
    return [
        feedback.title,
        f"Target: {to_display_string(current.target_color)}",
        f"Yours:  {to_display_string(current.selected_color)}",
        f"Distance: {current.distance}   Score: {current.score}",
        "Enter for next round.",
    ]


class ClassicGameScreen:
    def __init__(self, app: App, *, engine_factory: Callable[[], RoundEngine]) -> None:
        self._app = app
        self._engine = engine_factory()
        self._cursor = 0
        self._font = pygame.font.Font(None, 28)
        self._big_font = pygame.font.Font(None, 40)
        self._cell_rects: list[pygame.Rect] = []

    @property
    def engine(self) -> RoundEngine:
        return self._engine

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i, rect in enumerate(self._cell_rects):
                if rect.collidepoint(event.pos):
                    self._cursor = i
                    self._select_cursor()
                    return
            return
        if event.type != pygame.KEYDOWN:
            return

        key = event.key
        if key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._app.pop()
        elif key == pygame.K_r:
            self._engine.replay()
            self._cursor = 0
        elif key in (pygame.K_LEFT, pygame.K_a):
            self._move(-1)
        elif key in (pygame.K_RIGHT, pygame.K_d):
            self._move(1)
        elif key in (pygame.K_UP, pygame.K_w):
            self._move(-PALETTE_COLS)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self._move(PALETTE_COLS)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            if self._engine.phase is Phase.AWAITING_SELECTION:
                self._select_cursor()
            else:
                self._engine.advance()
        elif key == pygame.K_n:
            self._engine.advance()

    def _move(self, delta: int) -> None:
        current = self._engine.current_round()
        if current is None or not current.palette:
            return
        self._cursor = (self._cursor + delta) % len(current.palette)

    def _select_cursor(self) -> None:
        current = self._engine.current_round()
        if current is None or self._cursor >= len(current.palette):
            return
        self._engine.select_code(current.palette[self._cursor].code)

    def render(self, surface: pygame.Surface) -> None:
        w, h = surface.get_size()
        surface.fill(BG)
        state = self._engine.state

        if state.phase is Phase.COMPLETED:
            self._cell_rects = []
            _draw_lines(surface, self._font, _results_lines(state, self._engine.config.total_rounds), x=40, y=40)
            return

        current = state.current_round
        assert current is not None
        header = f"Classic  |  Round {current.round_number} / {self._engine.config.total_rounds}"
        header += f"  |  Score {state.total_score}"
        surface.blit(self._big_font.render(header, True, TEXT_MAIN), (24, 16))

        target_rect = pygame.Rect(24, 70, max(120, w // 4), max(120, w // 4))
        _draw_swatch(surface, target_rect, current.target_color, outline=BORDER)
        surface.blit(self._font.render("Find this white", True, TEXT_MUTED), (24, target_rect.bottom + 8))

        rows = max(1, (len(current.palette) + PALETTE_COLS - 1) // PALETTE_COLS)
        grid_left = target_rect.right + 40
        cell = max(24, min((w - grid_left - 24) // PALETTE_COLS, (h - 140) // rows) - 8)
        self._cell_rects = []
        for i, p in enumerate(current.palette):
            row, col = divmod(i, PALETTE_COLS)
            rect = pygame.Rect(grid_left + col * (cell + 8), 70 + row * (cell + 8), cell, cell)
            self._cell_rects.append(rect)
            outline = BORDER
            if current.selected_color == p.color:
                outline = PIN_GUESS
            if current.is_answered and p.color == current.target_color:
                outline = PIN_TARGET
            if i == self._cursor and not current.is_answered:
                outline = ACCENT
            _draw_swatch(surface, rect, p.color, outline=outline)

        if current.is_answered:
            _draw_lines(surface, self._font, _answer_lines(state), x=24, y=target_rect.bottom + 44)


class MapGameScreen:
    def __init__(self, app: App, *, engine_factory: Callable[[], MapRoundEngine]) -> None:
        self._app = app
        self._engine = engine_factory()
        self._font = pygame.font.Font(None, 28)
        self._big_font = pygame.font.Font(None, 40)
        self._canvas = pygame.Rect(0, 0, 1, 1)
        self._dragging = False
        self._field_surface: pygame.Surface | None = None
        self._field_for_surface: GradientField | None = None
        self._scaled: pygame.Surface | None = None

    @property
    def engine(self) -> MapRoundEngine:
        return self._engine

    def handle_event(self, event: pygame.event.Event) -> None:
        viewport = self._engine.viewport
        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1 and self._canvas.collidepoint(event.pos):
                x, y = self._local(event.pos)
                self._engine.place_pin_at_screen(x, y, self._canvas.width, self._canvas.height)
            elif event.button == 3:
                self._dragging = True
            return
        if event.type == pygame.MOUSEBUTTONUP and event.button == 3:
            self._dragging = False
            return
        if event.type == pygame.MOUSEMOTION and self._dragging:
            dx, dy = event.rel
            viewport.pan(dx, dy)
            return
        if event.type == pygame.MOUSEWHEEL:
            x, y = self._local(pygame.mouse.get_pos())
            pivot = viewport.screen_to_field(x, y, self._canvas.width, self._canvas.height)
            viewport.zoom(ZOOM_STEP * event.y, pivot)
            return
        if event.type != pygame.KEYDOWN:
            return

        key = event.key
        if key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._engine.dispose()
            self._app.pop()
        elif key == pygame.K_r:
            self._engine.replay()
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            if self._engine.phase is Phase.AWAITING_SELECTION:
                self._engine.submit_guess()
            else:
                self._engine.advance()
        elif key == pygame.K_n:
            self._engine.advance()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            viewport.zoom(ZOOM_STEP)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            viewport.zoom(-ZOOM_STEP)
        elif key == pygame.K_0:
            viewport.reset()

    def _local(self, pos: tuple[int, int]) -> tuple[float, float]:
        return (float(pos[0] - self._canvas.x), float(pos[1] - self._canvas.y))

    def _surface_for(self, field: GradientField) -> pygame.Surface:
        if self._field_surface is None or self._field_for_surface is not field:
            pixels = bytes(field.to_rgba_bytes())
            self._field_surface = pygame.image.frombuffer(pixels, (field.width, field.height), "RGBA").copy()
            self._field_for_surface = field
            self._scaled = None
        return self._field_surface

    def _scaled_field(self, size: tuple[int, int]) -> pygame.Surface:
        base = self._surface_for(self._engine.field)
        if self._scaled is None or self._scaled.get_size() != size:
            self._scaled = pygame.transform.smoothscale(base, size)
        return self._scaled

    def render(self, surface: pygame.Surface) -> None:
        w, h = surface.get_size()
        surface.fill(BG)
        state = self._engine.state

        if state.phase is Phase.COMPLETED:
            _draw_lines(surface, self._font, _results_lines(state, self._engine.config.total_rounds), x=40, y=40)
            return

        current = state.current_round
        assert current is not None
        remaining = self._engine.time_remaining_s()
        header = f"Map  |  Round {current.round_number} / {self._engine.config.total_rounds}"
        header += f"  |  Score {state.total_score}"
        surface.blit(self._big_font.render(header, True, TEXT_MAIN), (24, 16))
        clock_color = PIN_GUESS if is_time_low(remaining) else TEXT_MAIN
        clock_img = self._big_font.render(format_time(remaining), True, clock_color)
        surface.blit(clock_img, clock_img.get_rect(topright=(w - 24, 16)))

        side = max(160, w // 4)
        self._canvas = pygame.Rect(24, 64, max(1, w - side - 72), max(1, h - 88))
        self._draw_field(surface)

        panel_x = self._canvas.right + 24
        target_rect = pygame.Rect(panel_x, 64, side, side // 2)
        _draw_swatch(surface, target_rect, current.target_color, outline=BORDER)
        y = _draw_lines(surface, self._font, ["Target"], x=panel_x, y=target_rect.bottom + 8, color=TEXT_MUTED)
        pin = self._engine.pin
        if pin is not None:
            pin_rect = pygame.Rect(panel_x, y + 4, side, side // 2)
            _draw_swatch(surface, pin_rect, pin.color, outline=PIN_GUESS)
            y = _draw_lines(surface, self._font, ["Your pin"], x=panel_x, y=pin_rect.bottom + 8, color=TEXT_MUTED)
        if current.is_answered:
            _draw_lines(surface, self._font, _answer_lines(state), x=panel_x, y=y + 8)
        else:
            hint = ["Click to pin", "Enter to submit", "Wheel / +- zoom", "Right-drag to pan"]
            _draw_lines(surface, self._font, hint, x=panel_x, y=y + 8, color=TEXT_MUTED)

    def _draw_field(self, surface: pygame.Surface) -> None:
        viewport = self._engine.viewport
        cw, ch = self._canvas.width, self._canvas.height
        x0, y0 = viewport.field_to_screen(FieldCoordinate(0.0, 0.0), cw, ch)
        x1, y1 = viewport.field_to_screen(FieldCoordinate(1.0, 1.0), cw, ch)
        size = (max(1, int(round(x1 - x0))), max(1, int(round(y1 - y0))))
        scaled = self._scaled_field(size)

        pygame.draw.rect(surface, PANEL_BG, self._canvas)
        previous_clip = surface.get_clip()
        surface.set_clip(self._canvas)
        surface.blit(scaled, (self._canvas.x + int(round(x0)), self._canvas.y + int(round(y0))))

        current = self._engine.current_round()
        if current is not None and current.target_pin is not None:
            self._draw_pin(surface, current.target_pin, PIN_TARGET)
        if self._engine.pin is not None:
            self._draw_pin(surface, self._engine.pin, PIN_GUESS)
        surface.set_clip(previous_clip)
        pygame.draw.rect(surface, BORDER, self._canvas, 2)

    def _draw_pin(self, surface: pygame.Surface, pin: Pin, color: tuple[int, int, int]) -> None:
        sx, sy = self._engine.viewport.field_to_screen(pin.coordinate, self._canvas.width, self._canvas.height)
        center = (self._canvas.x + int(round(sx)), self._canvas.y + int(round(sy)))
        pygame.draw.circle(surface, color, center, 9)
        pygame.draw.circle(surface, BORDER, center, 9, 2)


def _new_seed() -> int:
    raw = os.environ.get(SEED_ENV, "").strip()
    if raw:
        try:
            return int(raw)
        except ValueError:
            logger.warning("ignoring non-integer %s=%r", SEED_ENV, raw)
    return random.SystemRandom().randint(1, 2**31 - 1)


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    scheduler: ClockScheduler | None = None,
) -> int:
    pygame.init()

    pygame.display.set_caption("白Guessr")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 36)
    clock = pygame.time.Clock()

    app = App(surface=surface, font=font)

    ticker = scheduler or ClockScheduler(RealClock())

    def open_classic() -> None:
        seed = _new_seed()
        logger.debug("opening classic game with seed %d", seed)
        app.push(ClassicGameScreen(app, engine_factory=lambda: build_classic_game(seed=seed)))

    def open_map() -> None:
        seed = _new_seed()
        logger.debug("opening map game with seed %d", seed)
        app.push(MapGameScreen(app, engine_factory=lambda: build_map_game(scheduler=ticker, seed=seed)))

    main_items = [
        MenuItem("Classic", open_classic),
        MenuItem("Map", open_map),
        MenuItem("Quit", app.quit),
    ]

    app.push(MenuScreen(app, "白Guessr", main_items, is_root=True))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            ticker.pump()
            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    return 0
