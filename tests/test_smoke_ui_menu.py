from __future__ import annotations

import json
import os
from pathlib import Path

import pytest


def _key(pygame_mod, key: int) -> None:
    pygame_mod.event.post(pygame_mod.event.Event(pygame_mod.KEYDOWN, {"key": key, "unicode": ""}))


def test_ui_smoke_symbol_search_then_statistics(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Headless SDL for CI.
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
    monkeypatch.delenv("PRI_TRAINER_STORE", raising=False)

    import pygame

    from pri_trainer.app import run

    def inject(frame: int) -> None:
        # Home -> Symbol Search -> answer once -> back -> Statistics -> back
        script = {
            1: pygame.K_DOWN,
            2: pygame.K_RETURN,
            3: pygame.K_y,
            5: pygame.K_ESCAPE,
            6: pygame.K_DOWN,
            7: pygame.K_DOWN,
            8: pygame.K_RETURN,
            10: pygame.K_ESCAPE,
        }
        if frame in script:
            _key(pygame, script[frame])

    assert run(max_frames=14, event_injector=inject, data_directory=tmp_path) == 0

    from pri_trainer.persistence import SqliteSummaryStore

    assert SqliteSummaryStore(tmp_path / "history.sqlite3").load_summaries() == []


def test_ui_smoke_endless_coding_stop_and_return(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
    monkeypatch.setenv("PRI_TRAINER_STORE", "json")

    import pygame

    from pri_trainer.app import run

    def inject(frame: int) -> None:
        # 60s -> 120s -> endless, then Coding, one answer, stop, leave results.
        script = {
            1: pygame.K_RIGHT,
            2: pygame.K_RIGHT,
            3: pygame.K_DOWN,
            4: pygame.K_DOWN,
            5: pygame.K_RETURN,
            6: pygame.K_1,
            8: pygame.K_s,
            10: pygame.K_ESCAPE,
        }
        if frame in script:
            _key(pygame, script[frame])

    assert run(max_frames=14, event_injector=inject, data_directory=tmp_path) == 0

    payload = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert payload["time_limit_s"] is None

    # Stopped well under ten seconds, so nothing is measurable or stored.
    assert not (tmp_path / "history.json").exists()
