from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from .cognitive_core import time_limit_label
from .results import SessionSummary

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class SummaryStore(Protocol):
    """Append-only history of finished sessions."""

    def load_summaries(self) -> list[SessionSummary]:
        """Return stored summaries in insertion order; never raises."""
        ...

    def append_summary(self, summary: SessionSummary) -> None:
        ...


def open_db(path: Path) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        _migrate(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def _migrate(conn: sqlite3.Connection) -> None:
    row = conn.execute("PRAGMA user_version;").fetchone()
    ver = int(row[0]) if row else 0
    if ver >= SCHEMA_VERSION:
        return

    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS session_summary (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                summary_id TEXT NOT NULL UNIQUE,
                timestamp_ms INTEGER NOT NULL,
                mode TEXT NOT NULL,
                pri INTEGER NOT NULL,
                score INTEGER NOT NULL,
                mistakes INTEGER NOT NULL,
                time_limit TEXT NOT NULL,
                elapsed_s INTEGER NOT NULL
            );
            """
        )
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION};")


class SqliteSummaryStore:
    """Default store: one row per summary, ordered by insertion sequence."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_summaries(self) -> list[SessionSummary]:
        if not self._path.exists():
            return []
        try:
            conn = open_db(self._path)
        except sqlite3.Error as exc:
            logger.warning("History database %s is unreadable (%s); starting empty", self._path, exc)
            return []
        try:
            rows = conn.execute(
                """
                SELECT summary_id, timestamp_ms, mode, pri, score, mistakes, time_limit, elapsed_s
                FROM session_summary
                ORDER BY seq
                """
            ).fetchall()
        except sqlite3.Error as exc:
            logger.warning("Could not read history from %s (%s); starting empty", self._path, exc)
            return []
        finally:
            conn.close()

        out: list[SessionSummary] = []
        for r in rows:
            record = {
                "id": r[0],
                "timestamp_ms": r[1],
                "mode": r[2],
                "index": r[3],
                "score": r[4],
                "mistakes": r[5],
                "time_limit": r[6],
                "elapsed_s": r[7],
            }
            try:
                out.append(SessionSummary.from_dict(record))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history row %r", r[0])
        return out

    def append_summary(self, summary: SessionSummary) -> None:
        conn = open_db(self._path)
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO session_summary(
                        summary_id, timestamp_ms, mode, pri, score, mistakes, time_limit, elapsed_s
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        summary.summary_id,
                        int(summary.timestamp_ms),
                        summary.mode.value,
                        int(summary.index),
                        int(summary.score),
                        int(summary.mistakes),
                        time_limit_label(summary.time_limit_s),
                        int(summary.elapsed_s),
                    ),
                )
        finally:
            conn.close()


class JsonSummaryStore:
    """Flat JSON array of summaries, rewritten atomically on each append."""

    _version = 1

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_summaries(self) -> list[SessionSummary]:
        if not self._path.exists():
            return []
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("History file %s is unreadable (%s); starting empty", self._path, exc)
            return []

        # Accept both a bare list and the versioned wrapper.
        raw = payload.get("summaries") if isinstance(payload, dict) else payload
        if not isinstance(raw, list):
            logger.warning("History file %s has unexpected layout; starting empty", self._path)
            return []

        out: list[SessionSummary] = []
        for item in raw:
            try:
                out.append(SessionSummary.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history record in %s", self._path)
        return out

    def append_summary(self, summary: SessionSummary) -> None:
        records = [s.to_dict() for s in self.load_summaries()]
        records.append(summary.to_dict())
        payload = {"version": self._version, "summaries": records}

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self._path)
