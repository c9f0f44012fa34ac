# ReelList test scripts
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture()
def config_base(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    from rl_platform.storage import reset_store

    monkeypatch.setenv("CONFIG_BASE", str(tmp_path))
    monkeypatch.delenv("BLOB_READ_WRITE_TOKEN", raising=False)
    monkeypatch.delenv("REELLIST_STORAGE_BACKEND", raising=False)
    reset_store()
    yield tmp_path
    reset_store()


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kw: Any) -> None:
        self.now = self.now + timedelta(**kw)


@pytest.fixture()
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    from rl_platform import records

    c = FakeClock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(records, "_utcnow", c)
    return c


@pytest.fixture()
def store(config_base: Path, monkeypatch: pytest.MonkeyPatch):
    from rl_platform.storage import FileMovieStore
    from services import movies

    st = FileMovieStore(config_base / "movies.json")
    monkeypatch.setattr(movies, "get_store", lambda: st)
    return st


@pytest.fixture()
def api_client(store):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from api import moviesAPI

    app = FastAPI()
    moviesAPI.register(app)
    return TestClient(app)
