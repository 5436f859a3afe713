from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .cognitive_core import SeededRng, shuffle_in_place
from .symbols import SYMBOL_POOL, Symbol, shuffled


@dataclass(frozen=True, slots=True)
class SymbolSearchConfig:
    target_count: int = 2
    search_size: int = 5
    # Pause between answer and next trial; input is locked meanwhile.
    feedback_delay_s: float = 0.150


@dataclass(frozen=True, slots=True)
class SymbolSearchTrial:
    targets: tuple[Symbol, ...]
    search_set: tuple[Symbol, ...]
    is_match: bool

    def contains_target(self) -> bool:
        return any(t in self.search_set for t in self.targets)


class SymbolSearchGenerator:
    """Deterministic generator for "is a target in the search set?" trials.

    Each trial reshuffles the full pool. The first symbols become targets and
    a fair coin decides whether one of them is planted in the search set. On
    the no-match branch the search set is a slice disjoint from the targets,
    so ``is_match`` always agrees with the set contents.
    """

    def __init__(
        self,
        *,
        rng: SeededRng,
        pool: Sequence[Symbol] = SYMBOL_POOL,
        config: SymbolSearchConfig | None = None,
    ) -> None:
        cfg = config or SymbolSearchConfig()
        if cfg.target_count < 1:
            raise ValueError("target_count must be >= 1")
        if cfg.search_size < 2:
            raise ValueError("search_size must be >= 2")
        if len(set(pool)) != len(pool):
            raise ValueError("pool must not contain duplicates")
        if len(pool) < cfg.target_count + cfg.search_size:
            raise ValueError("pool too small for targets plus search set")

        self._rng = rng
        self._pool = tuple(pool)
        self._cfg = cfg

    def next_trial(self) -> SymbolSearchTrial:
        deck = shuffled(self._pool, self._rng)
        n_targets = self._cfg.target_count
        size = self._cfg.search_size

        targets = tuple(deck[:n_targets])
        rest = deck[n_targets:]
        is_match = self._rng.coin()

        if is_match:
            planted = targets[self._rng.randint(0, n_targets - 1)]
            search = [planted, *rest[: size - 1]]
            shuffle_in_place(search, self._rng)
        else:
            search = rest[:size]

        return SymbolSearchTrial(targets=targets, search_set=tuple(search), is_match=is_match)

    def accepts_answer(self, answer: object) -> bool:
        return isinstance(answer, bool)

    def is_correct(self, trial: object, answer: object) -> bool:
        assert isinstance(trial, SymbolSearchTrial)
        if not self.accepts_answer(answer):
            raise ValueError(f"match answers must be bool, got {answer!r}")
        return answer == trial.is_match
