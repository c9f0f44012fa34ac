# ReelList test scripts
from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rl_platform.config_base import load_config, redact_config, save_config


def _client() -> TestClient:
    from api import configAPI

    app = FastAPI()
    app.include_router(configAPI.router)
    return TestClient(app)


def test_defaults_when_no_config_file(config_base: Path) -> None:
    cfg = load_config()
    assert cfg["storage"]["backend"] == "auto"
    assert cfg["storage"]["document"] == "movies.json"
    assert cfg["ui"]["port"] == 8787


def test_user_file_merges_over_defaults(config_base: Path) -> None:
    (config_base / "config.json").write_text(
        json.dumps({"storage": {"backend": "file"}, "runtime": {"debug": True}}),
        encoding="utf-8",
    )
    cfg = load_config()
    assert cfg["storage"]["backend"] == "file"
    assert cfg["storage"]["document"] == "movies.json"
    assert cfg["runtime"]["debug"] is True


def test_environment_overrides(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLOB_READ_WRITE_TOKEN", "vercel_blob_rw_x")
    monkeypatch.setenv("REELLIST_STORAGE_BACKEND", "blob")
    cfg = load_config()
    assert cfg["storage"]["blob_token"] == "vercel_blob_rw_x"
    assert cfg["storage"]["backend"] == "blob"


def test_redact_masks_token_only_when_set() -> None:
    assert redact_config({"storage": {"blob_token": "abc"}})["storage"]["blob_token"] == "••••••••"
    assert redact_config({"storage": {"blob_token": ""}})["storage"]["blob_token"] == ""


def test_config_api_redacts_and_keeps_masked_secret(config_base: Path) -> None:
    save_config({"storage": {"blob_token": "secret"}})
    client = _client()

    r = client.get("/api/config")
    assert r.status_code == 200
    assert r.json()["storage"]["blob_token"] == "••••••••"

    r = client.post("/api/config", json={"storage": {"blob_token": "••••••••", "backend": "file"}})
    assert r.json() == {"ok": True}

    saved = json.loads((config_base / "config.json").read_text(encoding="utf-8"))
    assert saved["storage"]["blob_token"] == "secret"
    assert saved["storage"]["backend"] == "file"


def test_config_api_does_not_persist_environment_token(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLOB_READ_WRITE_TOKEN", "from-env")
    _client().post("/api/config", json={"runtime": {"debug": True}})

    saved = json.loads((config_base / "config.json").read_text(encoding="utf-8"))
    assert saved["storage"]["blob_token"] == ""
    assert saved["runtime"]["debug"] is True
