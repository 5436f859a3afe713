from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import TypeVar

from .cognitive_core import SeededRng, shuffle_in_place

T = TypeVar("T")


class Symbol(StrEnum):
    STAR = "star"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    SQUARE = "square"
    HEXAGON = "hexagon"
    DIAMOND = "diamond"
    CLOUD = "cloud"
    SUN = "sun"
    MOON = "moon"
    HEART = "heart"
    ZAP = "zap"
    FLAME = "flame"
    DROPLET = "droplet"
    LEAF = "leaf"
    SNOWFLAKE = "snowflake"


SYMBOL_POOL: tuple[Symbol, ...] = tuple(Symbol)


def shuffled(pool: Sequence[T], rng: SeededRng) -> list[T]:
    """Return a fresh permutation of ``pool``; the input is left untouched."""

    out = list(pool)
    shuffle_in_place(out, rng)
    return out


def sample(pool: Sequence[T], k: int, rng: SeededRng) -> list[T]:
    """Draw ``k`` distinct elements (first ``k`` of a fresh shuffle)."""

    if not (0 <= k <= len(pool)):
        raise ValueError(f"k must be in [0, {len(pool)}]")
    return shuffled(pool, rng)[:k]
