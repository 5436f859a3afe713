from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .cognitive_core import SeededRng
from .symbols import SYMBOL_POOL, Symbol, shuffled

CODING_DIGITS: tuple[int, ...] = (1, 2, 3, 4, 5)


@dataclass(frozen=True, slots=True)
class CodingConfig:
    feedback_delay_s: float = 0.100


@dataclass(frozen=True, slots=True)
class CodingTrial:
    key: tuple[Symbol, ...]  # key[d - 1] is the symbol assigned to digit d
    button_order: tuple[int, ...]
    target_digit: int

    @property
    def mapping(self) -> dict[int, Symbol]:
        return {d: self.key[d - 1] for d in CODING_DIGITS}

    def symbol_for(self, digit: int) -> Symbol:
        return self.key[digit - 1]

    @property
    def target_symbol(self) -> Symbol:
        return self.symbol_for(self.target_digit)


class CodingGenerator:
    """Digit-to-symbol trials with a fresh key every round.

    The key is reassigned on every trial and the on-screen button order is an
    independent shuffle, so the player cannot learn a stable layout. The
    target digit never repeats the immediately preceding one; older history
    is not considered.
    """

    def __init__(self, *, rng: SeededRng, pool: Sequence[Symbol] = SYMBOL_POOL) -> None:
        if len(set(pool)) != len(pool):
            raise ValueError("pool must not contain duplicates")
        if len(pool) < len(CODING_DIGITS):
            raise ValueError(f"pool must hold at least {len(CODING_DIGITS)} symbols")
        self._rng = rng
        self._pool = tuple(pool)
        self._last_digit: int | None = None

    def next_trial(self) -> CodingTrial:
        deck = shuffled(self._pool, self._rng)
        key = tuple(deck[: len(CODING_DIGITS)])
        button_order = tuple(shuffled(CODING_DIGITS, self._rng))

        lo, hi = CODING_DIGITS[0], CODING_DIGITS[-1]
        digit = self._rng.randint(lo, hi)
        while digit == self._last_digit:
            digit = self._rng.randint(lo, hi)
        self._last_digit = digit

        return CodingTrial(key=key, button_order=button_order, target_digit=digit)

    def accepts_answer(self, answer: object) -> bool:
        # bool is an int subclass; True must not pass as digit 1.
        return isinstance(answer, int) and not isinstance(answer, bool) and answer in CODING_DIGITS

    def is_correct(self, trial: object, answer: object) -> bool:
        assert isinstance(trial, CodingTrial)
        if not self.accepts_answer(answer):
            raise ValueError(f"coding answers must be a digit 1-5, got {answer!r}")
        return answer == trial.target_digit
