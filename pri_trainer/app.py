"""Pygame UI shell for the PRI Trainer.

Screens:
- Home menu (time limit, Symbol Search, Coding, Statistics, theme, quit)
- Session screen (renders the live trial and forwards answers)
- Result screen (Processing Speed Index for the finished session)
- Statistics screen (PRI history chart)

Deterministic timing/scoring/RNG/state lives in pri_trainer/* (core modules);
this module only draws snapshots and forwards input.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pygame

from .clock import RealClock
from .coding import CODING_DIGITS, CodingTrial
from .cognitive_core import (
    TIME_LIMIT_CHOICES,
    Feedback,
    GameMode,
    Phase,
    SessionSnapshot,
    time_limit_label,
)
from .glyphs import draw_symbol
from .persistence import SummaryStore
from .results import SessionOutcome, SessionSummary, history_points
from .scoring import INDEX_CENTER, INDEX_MAX, INDEX_MIN
from .session import SessionEngine
from .settings import AppSettings, SettingsStore, build_summary_store
from .symbol_search import SymbolSearchTrial

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

PALETTES: dict[str, dict[str, Color]] = {
    "dark": {
        "bg": (9, 9, 11),
        "panel": (24, 24, 27),
        "header": (39, 39, 42),
        "border": (63, 63, 70),
        "text": (244, 244, 245),
        "muted": (161, 161, 170),
        "accent": (129, 140, 248),
        "active_bg": (63, 63, 70),
        "good": (74, 222, 128),
        "bad": (248, 113, 113),
        "coding": (52, 211, 153),
    },
    "light": {
        "bg": (250, 250, 250),
        "panel": (255, 255, 255),
        "header": (244, 244, 245),
        "border": (212, 212, 216),
        "text": (24, 24, 27),
        "muted": (113, 113, 122),
        "accent": (79, 70, 229),
        "active_bg": (228, 228, 231),
        "good": (22, 163, 74),
        "bad": (239, 68, 68),
        "coding": (5, 150, 105),
    },
}

MODE_LABELS: dict[GameMode, str] = {
    GameMode.MATCH: "Symbol Search",
    GameMode.CODING: "Coding",
}


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str | Callable[[], str]
    action: Callable[[], None]
    adjust: Callable[[int], None] | None = None

    def text(self) -> str:
        return self.label() if callable(self.label) else self.label


class App:
    """Root controller: owns the screen stack, theme, settings and history."""

    def __init__(
        self,
        surface: pygame.Surface,
        *,
        settings: SettingsStore,
        store: SummaryStore,
    ) -> None:
        self._surface = surface
        self._screens: list[Screen] = []
        self._running = True
        self._settings = settings
        self._history: list[SessionSummary] = store.load_summaries()
        logger.info("Loaded %d stored sessions", len(self._history))

    @property
    def running(self) -> bool:
        return self._running

    @property
    def settings(self) -> AppSettings:
        return self._settings.settings

    @property
    def palette(self) -> dict[str, Color]:
        return PALETTES[self.settings.theme]

    @property
    def history(self) -> list[SessionSummary]:
        return list(self._history)

    def toggle_theme(self) -> None:
        self._settings.update(self.settings.toggled_theme())

    def cycle_time_limit(self, delta: int) -> None:
        choices = TIME_LIMIT_CHOICES
        idx = choices.index(self.settings.time_limit_s) if self.settings.time_limit_s in choices else 0
        nxt = choices[(idx + delta) % len(choices)]
        self._settings.update(AppSettings(theme=self.settings.theme, time_limit_s=nxt))

    def record_outcome(self, outcome: SessionOutcome) -> None:
        if outcome.summary is not None:
            self._history.append(outcome.summary)

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the last/root screen; root handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def replace(self, screen: Screen) -> None:
        self.pop()
        self.push(screen)

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


def _fit_label(font: pygame.font.Font, label: str, max_width: int) -> str:
    if max_width <= 0:
        return ""
    if font.size(label)[0] <= max_width:
        return label
    clipped = label
    while clipped and font.size(f"{clipped}...")[0] > max_width:
        clipped = clipped[:-1]
    return f"{clipped}..." if clipped else "..."


def _draw_dashed_hline(
    surface: pygame.Surface, color: Color, x0: int, x1: int, y: int, *, dash: int = 6, gap: int = 5
) -> None:
    x = x0
    while x < x1:
        pygame.draw.line(surface, color, (x, y), (min(x + dash, x1), y), 1)
        x += dash + gap


def _choice_from_key(key: int) -> int | None:
    mapping = {
        pygame.K_1: 1,
        pygame.K_2: 2,
        pygame.K_3: 3,
        pygame.K_4: 4,
        pygame.K_5: 5,
        pygame.K_KP1: 1,
        pygame.K_KP2: 2,
        pygame.K_KP3: 3,
        pygame.K_KP4: 4,
        pygame.K_KP5: 5,
    }
    return mapping.get(key)


class MenuScreen:
    def __init__(
        self,
        app: App,
        title: str,
        items: list[MenuItem],
        *,
        subtitle: str = "",
        is_root: bool = False,
    ) -> None:
        self._app = app
        self._title = title
        self._subtitle = subtitle
        self._items = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 42)
        self._item_font = pygame.font.Font(None, 32)
        self._hint_font = pygame.font.Font(None, 22)
        self._row_hitboxes: list[pygame.Rect] = []

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            self._handle_key(event.key)
            return

        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 0) == 1:
            pos = getattr(event, "pos", None)
            if pos is None:
                return
            for idx, row in enumerate(self._row_hitboxes):
                if row.collidepoint(pos):
                    self._selected = idx
                    self._activate()
                    return

    def _handle_key(self, key: int) -> None:
        if key in (pygame.K_UP, pygame.K_w):
            self._move(-1)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self._move(1)
        elif key in (pygame.K_LEFT, pygame.K_a):
            self._adjust(-1)
        elif key in (pygame.K_RIGHT, pygame.K_d):
            self._adjust(1)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._activate()
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._back()

    def _move(self, delta: int) -> None:
        if not self._items:
            return
        self._selected = (self._selected + delta) % len(self._items)

    def _adjust(self, delta: int) -> None:
        if not self._items:
            return
        item = self._items[self._selected]
        if item.adjust is not None:
            item.adjust(delta)

    def _activate(self) -> None:
        if not self._items:
            return
        self._items[self._selected].action()

    def _back(self) -> None:
        if self._is_root:
            self._app.quit()
        else:
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        pal = self._app.palette
        w, h = surface.get_size()
        surface.fill(pal["bg"])

        frame_margin = max(10, min(26, w // 34))
        frame = pygame.Rect(
            frame_margin,
            frame_margin,
            max(260, w - frame_margin * 2),
            max(220, h - frame_margin * 2),
        )
        pygame.draw.rect(surface, pal["panel"], frame, border_radius=18)
        pygame.draw.rect(surface, pal["border"], frame, 1, border_radius=18)

        title = self._title_font.render(self._title, True, pal["text"])
        surface.blit(title, title.get_rect(midtop=(frame.centerx, frame.y + 18)))
        content_top = frame.y + 18 + title.get_height() + 8
        if self._subtitle:
            sub = self._hint_font.render(self._subtitle, True, pal["muted"])
            surface.blit(sub, sub.get_rect(midtop=(frame.centerx, content_top)))
            content_top += sub.get_height() + 12

        content_bottom = frame.bottom - max(44, h // 12)
        list_rect = pygame.Rect(
            frame.x + max(14, w // 44),
            content_top,
            frame.w - max(28, w // 22),
            max(120, content_bottom - content_top),
        )

        item_count = max(1, len(self._items))
        gap = max(4, min(10, list_rect.h // max(10, item_count * 3)))
        row_h = max(30, min(44, (list_rect.h - gap * (item_count + 1)) // item_count))
        total_h = row_h * item_count + gap * (item_count - 1)
        y = list_rect.y + max(8, (list_rect.h - total_h) // 2)

        self._row_hitboxes = []
        for idx, item in enumerate(self._items):
            row = pygame.Rect(list_rect.x + 12, y, list_rect.w - 24, row_h)
            self._row_hitboxes.append(row)
            selected = idx == self._selected
            if selected:
                pygame.draw.rect(surface, pal["active_bg"], row, border_radius=10)
                pygame.draw.rect(surface, pal["accent"], row, 2, border_radius=10)
            else:
                pygame.draw.rect(surface, pal["header"], row, border_radius=10)

            label = _fit_label(self._item_font, item.text(), row.w - 20)
            text = self._item_font.render(label, True, pal["text"])
            surface.blit(text, (row.x + 14, row.y + (row.h - text.get_height()) // 2))
            y += row_h + gap

        footer = "Enter/Space: Select  |  Left/Right: Change  |  Esc: Back"
        foot = self._hint_font.render(footer, True, pal["muted"])
        surface.blit(foot, foot.get_rect(midbottom=(frame.centerx, frame.bottom - 10)))


class SessionScreen:
    def __init__(self, app: App, *, engine: SessionEngine, mode: GameMode, time_limit_s: int | None) -> None:
        self._app = app
        self._engine = engine
        self._mode = mode
        self._time_limit_s = time_limit_s
        self._engine.start_session(mode, time_limit_s)

        self._small_font = pygame.font.Font(None, 24)
        self._mid_font = pygame.font.Font(None, 36)
        self._big_font = pygame.font.Font(None, 150)

        # answer -> rect, refreshed during render.
        self._hitboxes: list[tuple[pygame.Rect, bool | int]] = []
        self._stop_hitbox: pygame.Rect | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        snap = self._engine.snapshot()
        if snap.phase is not Phase.ACTIVE:
            return

        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_ESCAPE, pygame.K_F12):
                self._leave()
                return
            if event.key == pygame.K_s and self._engine.can_stop():
                self._engine.stop_session()
                return
            answer = self._answer_from_key(event.key, snap)
            if answer is not None:
                self._engine.submit_answer(answer)
            return

        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 0) == 1:
            pos = getattr(event, "pos", None)
            if pos is None:
                return
            if self._stop_hitbox is not None and self._stop_hitbox.collidepoint(pos):
                self._engine.stop_session()
                return
            for rect, answer in self._hitboxes:
                if rect.collidepoint(pos):
                    self._engine.submit_answer(answer)
                    return

    def _answer_from_key(self, key: int, snap: SessionSnapshot) -> bool | int | None:
        trial = snap.trial
        if isinstance(trial, SymbolSearchTrial):
            if key in (pygame.K_y, pygame.K_LEFT, pygame.K_1, pygame.K_KP1):
                return True
            if key in (pygame.K_n, pygame.K_RIGHT, pygame.K_2, pygame.K_KP2):
                return False
            return None
        if isinstance(trial, CodingTrial):
            # Number keys pick buttons by on-screen position.
            slot = _choice_from_key(key)
            if slot is None or slot > len(trial.button_order):
                return None
            return trial.button_order[slot - 1]
        return None

    def _leave(self) -> None:
        self._engine.abandon()
        self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        self._engine.update()
        snap = self._engine.snapshot()

        if snap.phase is Phase.FINALIZED:
            outcome = self._engine.outcome
            assert outcome is not None
            self._app.replace(ResultScreen(self._app, engine=self._engine, outcome=outcome))
            return

        pal = self._app.palette
        surface.fill(pal["bg"])
        w, h = surface.get_size()
        self._hitboxes = []

        header = self._render_header(surface, snap)
        body = pygame.Rect(24, header.bottom + 16, w - 48, h - header.bottom - 40)

        if isinstance(snap.trial, SymbolSearchTrial):
            self._render_symbol_search(surface, body, snap.trial)
        elif isinstance(snap.trial, CodingTrial):
            self._render_coding(surface, body, snap.trial)

        if snap.feedback is not None:
            overlay = pygame.Surface((w, h), pygame.SRCALPHA)
            tint = pal["good"] if snap.feedback is Feedback.CORRECT else pal["bad"]
            overlay.fill((*tint, 50))
            surface.blit(overlay, (0, 0))

    def _render_header(self, surface: pygame.Surface, snap: SessionSnapshot) -> pygame.Rect:
        pal = self._app.palette
        w, _ = surface.get_size()
        header = pygame.Rect(0, 0, w, 56)
        pygame.draw.rect(surface, pal["header"], header)
        pygame.draw.line(surface, pal["border"], (0, header.bottom), (w, header.bottom), 1)

        title = self._small_font.render(snap.title, True, pal["muted"])
        surface.blit(title, (24, header.centery - title.get_height() // 2))

        warn = snap.time_limit_s is not None and snap.displayed_time_s <= 10
        time_txt = self._mid_font.render(f"TIME {snap.displayed_time_s}s", True, pal["bad"] if warn else pal["text"])
        time_pos = (24 + title.get_width() + 24, header.centery - time_txt.get_height() // 2)
        surface.blit(time_txt, time_pos)

        self._stop_hitbox = None
        if self._engine.can_stop():
            stop = self._small_font.render("STOP (S)", True, pal["bad"])
            stop_rect = stop.get_rect(midleft=(time_pos[0] + time_txt.get_width() + 18, header.centery))
            self._stop_hitbox = stop_rect.inflate(16, 10)
            pygame.draw.rect(surface, pal["panel"], self._stop_hitbox, border_radius=10)
            surface.blit(stop, stop_rect)

        mistakes = self._mid_font.render(f"x {snap.mistakes}", True, pal["bad"])
        score = self._mid_font.render(f"ok {snap.score}", True, pal["good"])
        surface.blit(mistakes, mistakes.get_rect(midright=(w - 24, header.centery)))
        surface.blit(score, score.get_rect(midright=(w - 48 - mistakes.get_width(), header.centery)))
        return header

    def _render_symbol_search(self, surface: pygame.Surface, body: pygame.Rect, trial: SymbolSearchTrial) -> None:
        pal = self._app.palette
        cell = min(72, body.h // 5)

        label = self._small_font.render("TARGETS", True, pal["muted"])
        surface.blit(label, label.get_rect(midtop=(body.centerx, body.y)))
        targets_rect = pygame.Rect(0, 0, cell * len(trial.targets) + 24, cell + 16)
        targets_rect.midtop = (body.centerx, body.y + 24)
        self._draw_symbol_row(surface, targets_rect, trial.targets, cell)

        label = self._small_font.render("SEARCH GROUP", True, pal["muted"])
        surface.blit(label, label.get_rect(midtop=(body.centerx, targets_rect.bottom + 18)))
        search_rect = pygame.Rect(0, 0, cell * len(trial.search_set) + 48, cell + 16)
        search_rect.midtop = (body.centerx, targets_rect.bottom + 42)
        self._draw_symbol_row(surface, search_rect, trial.search_set, cell)

        btn_w, btn_h = 180, 56
        yes = pygame.Rect(0, 0, btn_w, btn_h)
        no = pygame.Rect(0, 0, btn_w, btn_h)
        yes.topright = (body.centerx - 10, search_rect.bottom + 32)
        no.topleft = (body.centerx + 10, search_rect.bottom + 32)
        for rect, text, color, answer in (
            (yes, "PRESENT (Y)", pal["accent"], True),
            (no, "ABSENT (N)", pal["bad"], False),
        ):
            pygame.draw.rect(surface, color, rect, border_radius=14)
            txt = self._mid_font.render(text, True, (255, 255, 255))
            surface.blit(txt, txt.get_rect(center=rect.center))
            self._hitboxes.append((rect, answer))

    def _render_coding(self, surface: pygame.Surface, body: pygame.Rect, trial: CodingTrial) -> None:
        pal = self._app.palette
        cell = min(64, body.h // 6)

        label = self._small_font.render("KEY", True, pal["muted"])
        surface.blit(label, label.get_rect(midtop=(body.centerx, body.y)))
        key_rect = pygame.Rect(0, 0, (cell + 12) * len(CODING_DIGITS) + 24, cell + 40)
        key_rect.midtop = (body.centerx, body.y + 22)
        pygame.draw.rect(surface, pal["panel"], key_rect, border_radius=14)
        pygame.draw.rect(surface, pal["border"], key_rect, 1, border_radius=14)
        x = key_rect.x + 12
        for digit in CODING_DIGITS:
            num = self._small_font.render(str(digit), True, pal["muted"])
            surface.blit(num, num.get_rect(midtop=(x + cell // 2 + 6, key_rect.y + 6)))
            box = pygame.Rect(x + 6, key_rect.y + 28, cell, cell)
            draw_symbol(surface, trial.symbol_for(digit), box, pal["text"], background=pal["panel"])
            x += cell + 12

        target = self._big_font.render(str(trial.target_digit), True, pal["text"])
        target_rect = target.get_rect(midtop=(body.centerx, key_rect.bottom + 8))
        surface.blit(target, target_rect)

        btn = cell + 16
        total = btn * len(trial.button_order) + 14 * (len(trial.button_order) - 1)
        x = body.centerx - total // 2
        y = min(body.bottom - btn, target_rect.bottom + 8)
        for slot, digit in enumerate(trial.button_order, start=1):
            rect = pygame.Rect(x, y, btn, btn)
            pygame.draw.rect(surface, pal["panel"], rect, border_radius=14)
            pygame.draw.rect(surface, pal["coding"], rect, 2, border_radius=14)
            draw_symbol(surface, trial.symbol_for(digit), rect.inflate(-16, -16), pal["text"], background=pal["panel"])
            hint = self._small_font.render(str(slot), True, pal["muted"])
            surface.blit(hint, hint.get_rect(midtop=(rect.centerx, rect.bottom + 4)))
            self._hitboxes.append((rect, digit))
            x += btn + 14

    def _draw_symbol_row(self, surface: pygame.Surface, rect: pygame.Rect, symbols: tuple, cell: int) -> None:
        pal = self._app.palette
        pygame.draw.rect(surface, pal["panel"], rect, border_radius=14)
        pygame.draw.rect(surface, pal["border"], rect, 2, border_radius=14)
        x = rect.centerx - (cell * len(symbols)) // 2
        for sym in symbols:
            box = pygame.Rect(x, rect.y + 8, cell, cell)
            draw_symbol(surface, sym, box.inflate(-10, -10), pal["text"], background=pal["panel"])
            x += cell


class ResultScreen:
    def __init__(self, app: App, *, engine: SessionEngine, outcome: SessionOutcome) -> None:
        self._app = app
        self._engine = engine
        self._outcome = outcome
        self._small_font = pygame.font.Font(None, 26)
        self._mid_font = pygame.font.Font(None, 40)
        self._big_font = pygame.font.Font(None, 120)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._retry()
        elif event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._engine.reset()
            self._app.pop()

    def _retry(self) -> None:
        self._engine.reset()
        self._app.replace(
            SessionScreen(
                self._app,
                engine=self._engine,
                mode=self._outcome.mode,
                time_limit_s=self._outcome.time_limit_s,
            )
        )

    def render(self, surface: pygame.Surface) -> None:
        pal = self._app.palette
        o = self._outcome
        w, h = surface.get_size()
        surface.fill(pal["bg"])

        head = self._small_font.render("PROCESSING SPEED INDEX", True, pal["muted"])
        surface.blit(head, head.get_rect(midtop=(w // 2, 40)))
        mode = self._small_font.render(MODE_LABELS[o.mode], True, pal["muted"])
        surface.blit(mode, mode.get_rect(midtop=(w // 2, 66)))

        if o.measurable:
            value = self._big_font.render(str(o.index), True, pal["accent"])
            surface.blit(value, value.get_rect(midtop=(w // 2, 100)))
            note = self._small_font.render(f"Estimated PRI (mean {INDEX_CENTER})", True, pal["muted"])
        else:
            value = self._mid_font.render("Measurement not possible", True, pal["muted"])
            surface.blit(value, value.get_rect(midtop=(w // 2, 130)))
            note = self._small_font.render("(session too short)", True, pal["muted"])
        surface.blit(note, note.get_rect(midtop=(w // 2, 200)))

        rt = "n/a" if o.mean_response_time_s is None else f"{o.mean_response_time_s * 1000.0:.0f} ms"
        rows = [
            ("Correct", str(o.score), pal["good"]),
            ("Mistakes", str(o.mistakes), pal["bad"]),
            ("Accuracy", f"{o.accuracy_pct}%", pal["text"]),
            ("Time", f"{o.elapsed_s}s", pal["text"]),
            ("Mean RT", rt, pal["text"]),
        ]
        y = 250
        for label, val, color in rows:
            lt = self._small_font.render(label, True, pal["muted"])
            vt = self._small_font.render(val, True, color)
            surface.blit(lt, (w // 2 - 160, y))
            surface.blit(vt, vt.get_rect(topright=(w // 2 + 160, y)))
            y += 30

        hint = self._small_font.render("Enter: Play again  |  Esc: Home", True, pal["muted"])
        surface.blit(hint, hint.get_rect(midbottom=(w // 2, h - 20)))


class StatsScreen:
    def __init__(self, app: App) -> None:
        self._app = app
        self._title_font = pygame.font.Font(None, 42)
        self._small_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key in (
            pygame.K_ESCAPE,
            pygame.K_BACKSPACE,
            pygame.K_RETURN,
        ):
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        pal = self._app.palette
        w, h = surface.get_size()
        surface.fill(pal["bg"])

        title = self._title_font.render("Training Statistics", True, pal["text"])
        surface.blit(title, (40, 28))
        hint = self._small_font.render("Esc: Back", True, pal["muted"])
        surface.blit(hint, hint.get_rect(topright=(w - 40, 40)))

        points = history_points(self._app.history)
        if not points:
            empty = self._small_font.render("No data yet. Play a session to start your history.", True, pal["muted"])
            surface.blit(empty, empty.get_rect(center=(w // 2, h // 2)))
            return

        chart = pygame.Rect(80, 90, w - 130, h - 160)
        span = float(INDEX_MAX - INDEX_MIN)

        def y_for(value: int) -> int:
            return int(chart.bottom - (value - INDEX_MIN) / span * chart.h)

        for tick in range(INDEX_MIN, INDEX_MAX + 1, 30):
            y = y_for(tick)
            if tick == INDEX_CENTER:
                _draw_dashed_hline(surface, pal["muted"], chart.x, chart.right, y)
            else:
                pygame.draw.line(surface, pal["border"], (chart.x, y), (chart.right, y), 1)
            lbl = self._small_font.render(str(tick), True, pal["muted"])
            surface.blit(lbl, lbl.get_rect(midright=(chart.x - 8, y)))

        n = len(points)
        step = chart.w / max(1, n - 1)
        coords = [
            (int(chart.x + (i * step if n > 1 else chart.w / 2)), y_for(p.index)) for i, p in enumerate(points)
        ]
        if n > 1:
            pygame.draw.lines(surface, pal["accent"], False, coords, 3)

        label_every = max(1, n // 8)
        for i, (p, (x, y)) in enumerate(zip(points, coords)):
            color = pal["accent"] if p.mode is GameMode.MATCH else pal["coding"]
            pygame.draw.circle(surface, pal["bg"], (x, y), 6)
            pygame.draw.circle(surface, color, (x, y), 4)
            if i % label_every == 0 or i == n - 1:
                lbl = self._small_font.render(p.label, True, pal["muted"])
                surface.blit(lbl, lbl.get_rect(midtop=(x, chart.bottom + 8)))

        legend_x = chart.x
        for mode in GameMode:
            color = pal["accent"] if mode is GameMode.MATCH else pal["coding"]
            pygame.draw.circle(surface, color, (legend_x + 6, h - 28), 5)
            txt = self._small_font.render(MODE_LABELS[mode], True, pal["muted"])
            surface.blit(txt, (legend_x + 16, h - 28 - txt.get_height() // 2))
            legend_x += txt.get_width() + 40


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    data_directory: Path | None = None,
) -> int:
    pygame.init()

    pygame.display.set_caption("PRI Training")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    clock = pygame.time.Clock()

    if data_directory is None:
        settings = SettingsStore.default()
    else:
        settings = SettingsStore(data_directory / "settings.json")
    store = build_summary_store(data_directory)
    app = App(surface=surface, settings=settings, store=store)

    engine = SessionEngine(
        clock=RealClock(),
        store=store,
        seed_factory=_new_seed,
        on_finalize=app.record_outcome,
    )

    def open_session(mode: GameMode) -> None:
        app.push(SessionScreen(app, engine=engine, mode=mode, time_limit_s=app.settings.time_limit_s))

    main_items = [
        MenuItem(
            lambda: f"Time limit:  < {time_limit_label(app.settings.time_limit_s)} >",
            lambda: app.cycle_time_limit(1),
            adjust=app.cycle_time_limit,
        ),
        MenuItem("Symbol Search", lambda: open_session(GameMode.MATCH)),
        MenuItem("Coding", lambda: open_session(GameMode.CODING)),
        MenuItem("Statistics", lambda: app.push(StatsScreen(app))),
        MenuItem(lambda: f"Theme: {app.settings.theme}", app.toggle_theme),
        MenuItem("Quit", app.quit),
    ]

    app.push(
        MenuScreen(
            app,
            "PRI Training",
            main_items,
            subtitle="Processing speed training with two timed games",
            is_root=True,
        )
    )

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        engine.abandon()
        pygame.quit()

    return 0
