from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass

from .cognitive_core import GameMode, TrialEvent, time_limit_label


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Persisted record of one finished, measurable session. Never mutated."""

    summary_id: str
    timestamp_ms: int
    mode: GameMode
    index: int
    score: int
    mistakes: int
    time_limit_s: int | None
    elapsed_s: int

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.summary_id,
            "timestamp_ms": self.timestamp_ms,
            "mode": self.mode.value,
            "index": self.index,
            "score": self.score,
            "mistakes": self.mistakes,
            "time_limit": time_limit_label(self.time_limit_s),
            "elapsed_s": self.elapsed_s,
        }

    @classmethod
    def from_dict(cls, data: object) -> "SessionSummary":
        """Parse one stored record. Raises ValueError/KeyError/TypeError on bad input."""

        if not isinstance(data, dict):
            raise TypeError("summary record must be an object")
        return cls(
            summary_id=str(data["id"]),
            timestamp_ms=int(data["timestamp_ms"]),
            mode=GameMode(str(data["mode"])),
            index=int(data["index"]),
            score=int(data["score"]),
            mistakes=int(data["mistakes"]),
            time_limit_s=parse_time_limit(data["time_limit"]),
            elapsed_s=int(data["elapsed_s"]),
        )


@dataclass(frozen=True, slots=True)
class SessionOutcome:
    """What the result view shows after a session is finalized."""

    mode: GameMode
    index: int
    measurable: bool
    score: int
    mistakes: int
    elapsed_s: int
    time_limit_s: int | None
    accuracy_pct: int
    mean_response_time_s: float | None
    summary: SessionSummary | None = None


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    label: str
    index: int
    mode: GameMode


def parse_time_limit(raw: object) -> int | None:
    text = str(raw).strip().lower()
    if text in ("endless", "none", ""):
        return None
    if text.endswith("s"):
        text = text[:-1]
    value = int(text)
    if value <= 0:
        raise ValueError("time limit must be > 0")
    return value


def accuracy_pct(score: int, mistakes: int) -> int:
    total = score + mistakes
    if total == 0:
        return 0
    return int(round(score / total * 100.0))


def mean_response_time_s(events: Sequence[TrialEvent]) -> float | None:
    if not events:
        return None
    return sum(e.response_time_s for e in events) / len(events)


def history_points(summaries: Sequence[SessionSummary]) -> list[HistoryPoint]:
    """Chart rows in stored (chronological) order, labelled month/day."""

    points: list[HistoryPoint] = []
    for s in summaries:
        t = time.localtime(s.timestamp_ms / 1000.0)
        points.append(HistoryPoint(label=f"{t.tm_mon}/{t.tm_mday}", index=s.index, mode=s.mode))
    return points
