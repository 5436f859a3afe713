from __future__ import annotations

import time

import pytest

from pri_trainer.cognitive_core import GameMode, TrialEvent
from pri_trainer.results import (
    SessionSummary,
    accuracy_pct,
    history_points,
    mean_response_time_s,
    parse_time_limit,
)


def _event(i: int, rt: float) -> TrialEvent:
    return TrialEvent(
        index=i,
        mode=GameMode.CODING,
        expected="3",
        response="3",
        is_correct=True,
        presented_at_s=float(i),
        answered_at_s=float(i) + rt,
        response_time_s=rt,
    )


def test_accuracy_percentage() -> None:
    assert accuracy_pct(0, 0) == 0
    assert accuracy_pct(7, 3) == 70
    assert accuracy_pct(2, 1) == 67
    assert accuracy_pct(5, 0) == 100


def test_mean_response_time() -> None:
    assert mean_response_time_s([]) is None
    assert mean_response_time_s([_event(0, 0.4), _event(1, 0.8)]) == pytest.approx(0.6)


def test_parse_time_limit_labels() -> None:
    assert parse_time_limit("30s") == 30
    assert parse_time_limit("120") == 120
    assert parse_time_limit(60) == 60
    assert parse_time_limit("endless") is None
    with pytest.raises(ValueError):
        parse_time_limit("forever")
    with pytest.raises(ValueError):
        parse_time_limit("0s")


def test_summary_from_dict_rejects_bad_records() -> None:
    with pytest.raises(TypeError):
        SessionSummary.from_dict(["id", 1])
    with pytest.raises(KeyError):
        SessionSummary.from_dict({"id": "x"})
    with pytest.raises(ValueError):
        SessionSummary.from_dict(
            {
                "id": "x",
                "timestamp_ms": 0,
                "mode": "sudoku",
                "index": 100,
                "score": 1,
                "mistakes": 0,
                "time_limit": "60s",
                "elapsed_s": 60,
            }
        )


def test_history_points_keep_order_and_label_by_day() -> None:
    stamps = [1_700_000_000_000, 1_700_300_000_000]
    summaries = [
        SessionSummary(f"s{i}", ts, mode, 100 + i, 10, 1, 60, 60)
        for i, (ts, mode) in enumerate(zip(stamps, (GameMode.MATCH, GameMode.CODING)))
    ]

    points = history_points(summaries)

    assert [p.index for p in points] == [100, 101]
    assert [p.mode for p in points] == [GameMode.MATCH, GameMode.CODING]
    t = time.localtime(stamps[0] / 1000.0)
    assert points[0].label == f"{t.tm_mon}/{t.tm_mday}"
