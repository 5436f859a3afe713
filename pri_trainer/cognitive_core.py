from __future__ import annotations

import math
import random
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Protocol, TypeVar

T = TypeVar("T")


class GameMode(StrEnum):
    """The two supported micro-games. Closed set: there is no third mode."""

    MATCH = "match"
    CODING = "coding"


class Phase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    FINALIZED = "finalized"


class Feedback(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


# None means an unbounded (count-up) session.
TIME_LIMIT_CHOICES: tuple[int | None, ...] = (30, 60, 120, None)

# Sessions shorter than this cannot be measured and are never persisted.
MIN_MEASURABLE_S = 10


@dataclass(frozen=True, slots=True)
class AnswerFeedback:
    correct: bool
    trial_index: int

    @property
    def feedback(self) -> Feedback:
        return Feedback.CORRECT if self.correct else Feedback.INCORRECT


@dataclass(frozen=True, slots=True)
class TrialEvent:
    index: int
    mode: GameMode
    expected: str
    response: str
    is_correct: bool
    presented_at_s: float
    answered_at_s: float
    response_time_s: float


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """View model for the UI (pure data)."""

    title: str
    phase: Phase
    mode: GameMode | None
    time_limit_s: int | None
    displayed_time_s: int
    score: int
    mistakes: int
    trial: object | None = None
    feedback: Feedback | None = None
    accepting_input: bool = False


class RoundGenerator(Protocol):
    """Deterministic per-mode trial source."""

    def next_trial(self) -> object:
        ...

    def accepts_answer(self, answer: object) -> bool:
        """True when the answer has the shape this mode expects."""
        ...

    def is_correct(self, trial: object, answer: object) -> bool:
        ...


class SeededRng:
    """Simple seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(int(seed))

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def coin(self) -> bool:
        return self._rng.random() < 0.5


def shuffle_in_place(items: MutableSequence[T], rng: SeededRng) -> None:
    """Fisher-Yates shuffle: every permutation is equally likely."""

    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def time_limit_label(time_limit_s: int | None) -> str:
    return "endless" if time_limit_s is None else f"{time_limit_s}s"


def round_half_up(x: float) -> int:
    # Halves round toward +inf, so 80.5 -> 81 and -0.5 -> 0.
    return int(math.floor(x + 0.5))


def clamp_int(x: int, lo: int, hi: int) -> int:
    return lo if x < lo else hi if x > hi else x
