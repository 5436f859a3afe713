from __future__ import annotations

import pytest

from pri_trainer.cognitive_core import SeededRng
from pri_trainer.symbol_search import SymbolSearchConfig, SymbolSearchGenerator, SymbolSearchTrial
from pri_trainer.symbols import SYMBOL_POOL, Symbol


def test_generator_determinism_same_seed_same_sequence() -> None:
    g1 = SymbolSearchGenerator(rng=SeededRng(2468))
    g2 = SymbolSearchGenerator(rng=SeededRng(2468))

    assert [g1.next_trial() for _ in range(25)] == [g2.next_trial() for _ in range(25)]


def test_is_match_agrees_with_search_set_over_many_trials() -> None:
    gen = SymbolSearchGenerator(rng=SeededRng(1234))
    branches = {True: 0, False: 0}

    for _ in range(2000):
        t = gen.next_trial()
        assert len(t.targets) == 2
        assert t.targets[0] != t.targets[1]
        assert len(t.search_set) == 5
        assert len(set(t.search_set)) == 5
        assert t.is_match == any(s in t.search_set for s in t.targets)
        if not t.is_match:
            assert not set(t.targets) & set(t.search_set)
        branches[t.is_match] += 1

    assert branches[True] > 0 and branches[False] > 0


def test_coin_flip_is_roughly_balanced() -> None:
    gen = SymbolSearchGenerator(rng=SeededRng(8))
    matches = sum(1 for _ in range(2000) if gen.next_trial().is_match)
    assert 850 < matches < 1150


def test_match_trials_plant_exactly_one_target() -> None:
    gen = SymbolSearchGenerator(rng=SeededRng(42))
    for _ in range(500):
        t = gen.next_trial()
        if t.is_match:
            assert sum(1 for s in t.targets if s in t.search_set) == 1


def test_answer_evaluation() -> None:
    gen = SymbolSearchGenerator(rng=SeededRng(1))
    present = SymbolSearchTrial(
        targets=(Symbol.STAR, Symbol.MOON),
        search_set=(Symbol.SUN, Symbol.MOON, Symbol.LEAF, Symbol.ZAP, Symbol.HEART),
        is_match=True,
    )
    absent = SymbolSearchTrial(
        targets=(Symbol.STAR, Symbol.MOON),
        search_set=(Symbol.SUN, Symbol.CLOUD, Symbol.LEAF, Symbol.ZAP, Symbol.HEART),
        is_match=False,
    )

    assert present.contains_target() is True
    assert absent.contains_target() is False
    assert gen.is_correct(present, True) is True
    assert gen.is_correct(present, False) is False
    assert gen.is_correct(absent, False) is True
    assert gen.is_correct(absent, True) is False


@pytest.mark.parametrize("answer", [1, 0, 3, "yes", None])
def test_non_bool_answers_are_rejected(answer: object) -> None:
    gen = SymbolSearchGenerator(rng=SeededRng(3))
    trial = gen.next_trial()

    assert gen.accepts_answer(answer) is False
    with pytest.raises(ValueError):
        gen.is_correct(trial, answer)


def test_rejects_pool_too_small_or_with_duplicates() -> None:
    with pytest.raises(ValueError):
        SymbolSearchGenerator(rng=SeededRng(1), pool=SYMBOL_POOL[:6])
    with pytest.raises(ValueError):
        SymbolSearchGenerator(rng=SeededRng(1), pool=(Symbol.STAR,) * 10)


def test_custom_config_sizes_are_respected() -> None:
    gen = SymbolSearchGenerator(
        rng=SeededRng(11),
        config=SymbolSearchConfig(target_count=2, search_size=4),
    )
    for _ in range(200):
        t = gen.next_trial()
        assert len(t.search_set) == 4
        assert t.is_match == t.contains_target()
