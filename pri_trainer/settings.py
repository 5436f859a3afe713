from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .cognitive_core import TIME_LIMIT_CHOICES
from .persistence import JsonSummaryStore, SqliteSummaryStore, SummaryStore

logger = logging.getLogger(__name__)

HOME_ENV = "PRI_TRAINER_HOME"
STORE_ENV = "PRI_TRAINER_STORE"
SETTINGS_PATH_ENV = "PRI_TRAINER_SETTINGS_PATH"
LOG_LEVEL_ENV = "PRI_TRAINER_LOG_LEVEL"

THEMES = ("dark", "light")


@dataclass(frozen=True, slots=True)
class AppSettings:
    theme: str = "dark"
    time_limit_s: int | None = 60

    def to_dict(self) -> dict[str, Any]:
        return {"theme": self.theme, "time_limit_s": self.time_limit_s}

    @classmethod
    def from_dict(cls, data: object) -> "AppSettings":
        defaults = cls()
        if not isinstance(data, dict):
            return defaults
        theme = str(data.get("theme", defaults.theme))
        if theme not in THEMES:
            theme = defaults.theme
        limit = data.get("time_limit_s", defaults.time_limit_s)
        if isinstance(limit, bool) or limit not in TIME_LIMIT_CHOICES:
            limit = defaults.time_limit_s
        return cls(theme=theme, time_limit_s=None if limit is None else int(limit))

    def toggled_theme(self) -> "AppSettings":
        return replace(self, theme="light" if self.theme == "dark" else "dark")


def data_dir() -> Path:
    explicit = os.environ.get(HOME_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / ".pri_trainer"


def settings_path() -> Path:
    explicit = os.environ.get(SETTINGS_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return data_dir() / "settings.json"


def build_summary_store(directory: Path | None = None) -> SummaryStore:
    base = directory if directory is not None else data_dir()
    backend = os.environ.get(STORE_ENV, "sqlite").strip().lower()
    if backend == "json":
        return JsonSummaryStore(base / "history.json")
    if backend != "sqlite":
        logger.warning("Unknown %s=%r; using sqlite", STORE_ENV, backend)
    return SqliteSummaryStore(base / "history.sqlite3")


class SettingsStore:
    _version = 1

    def __init__(self, path: Path) -> None:
        self._path = path
        self._settings = AppSettings()
        self._load()

    @classmethod
    def default(cls) -> "SettingsStore":
        return cls(settings_path())

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def update(self, settings: AppSettings) -> None:
        self._settings = settings
        self.save()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return
        self._settings = AppSettings.from_dict(payload)

    def save(self) -> None:
        payload = {"version": self._version, **self._settings.to_dict()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            logger.warning("Could not save settings to %s: %s", self._path, exc)
