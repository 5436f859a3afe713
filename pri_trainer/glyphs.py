from __future__ import annotations

import math

import pygame

from .symbols import Symbol

Color = tuple[int, int, int]
Point = tuple[float, float]


def _regular_polygon(cx: float, cy: float, r: float, n: int, rotation_deg: float = -90.0) -> list[Point]:
    pts: list[Point] = []
    for i in range(n):
        a = math.radians(rotation_deg + 360.0 * i / n)
        pts.append((cx + r * math.cos(a), cy + r * math.sin(a)))
    return pts


def _star(cx: float, cy: float, r: float) -> list[Point]:
    pts: list[Point] = []
    for i in range(10):
        rr = r if i % 2 == 0 else r * 0.45
        a = math.radians(-90.0 + 36.0 * i)
        pts.append((cx + rr * math.cos(a), cy + rr * math.sin(a)))
    return pts


def _heart(cx: float, cy: float, r: float) -> list[Point]:
    pts: list[Point] = []
    scale = r / 17.0
    for i in range(36):
        t = 2.0 * math.pi * i / 36
        x = 16.0 * math.sin(t) ** 3
        y = 13.0 * math.cos(t) - 5.0 * math.cos(2 * t) - 2.0 * math.cos(3 * t) - math.cos(4 * t)
        pts.append((cx + x * scale, cy - y * scale - r * 0.1))
    return pts


def _teardrop(cx: float, cy: float, r: float, *, wobble: float = 0.0) -> list[Point]:
    # Point at the top, round at the bottom; wobble bends the tip sideways.
    body_r = r * 0.6
    body_cy = cy + r * 0.3
    pts: list[Point] = [(cx + wobble * r, cy - r)]
    for i in range(19):
        a = math.radians(-20.0 + 220.0 * i / 18)
        pts.append((cx + body_r * math.cos(a), body_cy + body_r * math.sin(a)))
    return pts


def draw_symbol(
    surface: pygame.Surface,
    symbol: Symbol,
    rect: pygame.Rect,
    color: Color,
    *,
    background: Color,
    width: int = 3,
) -> None:
    """Draw one catalogue symbol centred in ``rect``."""

    cx, cy = float(rect.centerx), float(rect.centery)
    r = min(rect.w, rect.h) * 0.42
    w = max(1, int(width))

    if symbol is Symbol.STAR:
        pygame.draw.polygon(surface, color, _star(cx, cy, r), w)
    elif symbol is Symbol.CIRCLE:
        pygame.draw.circle(surface, color, (cx, cy), r, w)
    elif symbol is Symbol.TRIANGLE:
        pygame.draw.polygon(surface, color, _regular_polygon(cx, cy + r * 0.15, r, 3), w)
    elif symbol is Symbol.SQUARE:
        side = r * 1.5
        pygame.draw.rect(surface, color, pygame.Rect(cx - side / 2, cy - side / 2, side, side), w)
    elif symbol is Symbol.HEXAGON:
        pygame.draw.polygon(surface, color, _regular_polygon(cx, cy, r, 6, rotation_deg=0.0), w)
    elif symbol is Symbol.DIAMOND:
        pygame.draw.polygon(surface, color, [(cx, cy - r), (cx + r * 0.7, cy), (cx, cy + r), (cx - r * 0.7, cy)], w)
    elif symbol is Symbol.CLOUD:
        pygame.draw.circle(surface, color, (cx - r * 0.45, cy + r * 0.1), r * 0.4, w)
        pygame.draw.circle(surface, color, (cx + r * 0.1, cy - r * 0.15), r * 0.5, w)
        pygame.draw.circle(surface, color, (cx + r * 0.55, cy + r * 0.15), r * 0.35, w)
        pygame.draw.line(surface, color, (cx - r * 0.85, cy + r * 0.5), (cx + r * 0.9, cy + r * 0.5), w)
    elif symbol is Symbol.SUN:
        pygame.draw.circle(surface, color, (cx, cy), r * 0.4, w)
        for i in range(8):
            a = math.radians(45.0 * i)
            p0 = (cx + r * 0.6 * math.cos(a), cy + r * 0.6 * math.sin(a))
            p1 = (cx + r * math.cos(a), cy + r * math.sin(a))
            pygame.draw.line(surface, color, p0, p1, w)
    elif symbol is Symbol.MOON:
        pygame.draw.circle(surface, color, (cx, cy), r * 0.85)
        pygame.draw.circle(surface, background, (cx + r * 0.4, cy - r * 0.25), r * 0.72)
    elif symbol is Symbol.HEART:
        pygame.draw.polygon(surface, color, _heart(cx, cy, r), w)
    elif symbol is Symbol.ZAP:
        bolt = [
            (cx + r * 0.15, cy - r),
            (cx - r * 0.55, cy + r * 0.1),
            (cx - r * 0.05, cy + r * 0.1),
            (cx - r * 0.2, cy + r),
            (cx + r * 0.55, cy - r * 0.15),
            (cx + r * 0.05, cy - r * 0.15),
        ]
        pygame.draw.polygon(surface, color, bolt, w)
    elif symbol is Symbol.FLAME:
        pygame.draw.polygon(surface, color, _teardrop(cx, cy, r, wobble=0.2), w)
        pygame.draw.polygon(surface, color, _teardrop(cx, cy + r * 0.35, r * 0.4), w)
    elif symbol is Symbol.DROPLET:
        pygame.draw.polygon(surface, color, _teardrop(cx, cy, r), w)
    elif symbol is Symbol.LEAF:
        left = [(cx - r * 0.7, cy + r * 0.7)]
        right = [(cx - r * 0.7, cy + r * 0.7)]
        for i in range(1, 13):
            t = i / 12.0
            bx = cx - r * 0.7 + 1.4 * r * t
            by = cy + r * 0.7 - 1.4 * r * t
            bulge = math.sin(math.pi * t) * r * 0.45
            left.append((bx - bulge, by - bulge))
            right.append((bx + bulge, by + bulge))
        pygame.draw.polygon(surface, color, left + list(reversed(right)), w)
        pygame.draw.line(surface, color, (cx - r * 0.9, cy + r * 0.9), (cx + r * 0.55, cy - r * 0.55), w)
    elif symbol is Symbol.SNOWFLAKE:
        for i in range(6):
            a = math.radians(60.0 * i - 90.0)
            tip = (cx + r * math.cos(a), cy + r * math.sin(a))
            pygame.draw.line(surface, color, (cx, cy), tip, w)
            mid = (cx + r * 0.6 * math.cos(a), cy + r * 0.6 * math.sin(a))
            for da in (-40.0, 40.0):
                b = a + math.radians(da)
                pygame.draw.line(
                    surface,
                    color,
                    mid,
                    (mid[0] + r * 0.25 * math.cos(b), mid[1] + r * 0.25 * math.sin(b)),
                    max(1, w - 1),
                )
