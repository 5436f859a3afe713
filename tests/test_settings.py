from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pri_trainer.logging_utils import PACKAGE_LOGGER, configure_logging, resolve_level
from pri_trainer.persistence import JsonSummaryStore, SqliteSummaryStore
from pri_trainer.settings import (
    HOME_ENV,
    SETTINGS_PATH_ENV,
    STORE_ENV,
    AppSettings,
    SettingsStore,
    build_summary_store,
    data_dir,
    settings_path,
)


def test_missing_settings_file_gives_defaults(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    assert store.settings == AppSettings(theme="dark", time_limit_s=60)


def test_settings_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "cfg" / "settings.json"
    store = SettingsStore(path)
    store.update(AppSettings(theme="light", time_limit_s=None))

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {"version": 1, "theme": "light", "time_limit_s": None}
    assert SettingsStore(path).settings == AppSettings(theme="light", time_limit_s=None)


def test_corrupt_settings_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{oops", encoding="utf-8")
    assert SettingsStore(path).settings == AppSettings()


@pytest.mark.parametrize(
    "payload",
    [
        {"theme": "neon", "time_limit_s": 45},
        {"theme": 3, "time_limit_s": "60"},
        {"time_limit_s": True},
        ["dark", 60],
    ],
)
def test_invalid_settings_values_fall_back(payload: object) -> None:
    assert AppSettings.from_dict(payload) == AppSettings()


def test_toggled_theme_flips() -> None:
    s = AppSettings(theme="dark", time_limit_s=30)
    assert s.toggled_theme() == AppSettings(theme="light", time_limit_s=30)
    assert s.toggled_theme().toggled_theme() == s


def test_paths_follow_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(HOME_ENV, str(tmp_path / "home"))
    monkeypatch.delenv(SETTINGS_PATH_ENV, raising=False)
    assert data_dir() == tmp_path / "home"
    assert settings_path() == tmp_path / "home" / "settings.json"

    monkeypatch.setenv(SETTINGS_PATH_ENV, str(tmp_path / "elsewhere.json"))
    assert settings_path() == tmp_path / "elsewhere.json"


def test_build_summary_store_selects_backend(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(STORE_ENV, raising=False)
    default = build_summary_store(tmp_path)
    assert isinstance(default, SqliteSummaryStore)
    assert default.path == tmp_path / "history.sqlite3"

    monkeypatch.setenv(STORE_ENV, "JSON")
    json_store = build_summary_store(tmp_path)
    assert isinstance(json_store, JsonSummaryStore)
    assert json_store.path == tmp_path / "history.json"

    monkeypatch.setenv(STORE_ENV, "postgres")
    assert isinstance(build_summary_store(tmp_path), SqliteSummaryStore)


def test_resolve_level() -> None:
    assert resolve_level(None) == logging.WARNING
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Info ") == logging.INFO
    assert resolve_level("chatty", default=logging.ERROR) == logging.ERROR


def test_configure_logging_installs_one_handler() -> None:
    logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(logger.handlers)
    try:
        configure_logging(logging.INFO)
        configure_logging(logging.DEBUG)
        ours = [h for h in logger.handlers if getattr(h, "_pri_trainer", False)]
        assert len(ours) == 1
        assert logger.level == logging.DEBUG
    finally:
        for h in list(logger.handlers):
            if h not in before:
                logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)
