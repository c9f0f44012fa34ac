# api/configAPI.py
# ReelList - Configuration API
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from rl_platform import config_base
from rl_platform.config_base import load_config, redact_config, save_config
from rl_platform.storage import reset_store

router = APIRouter(prefix="/api", tags=["config"])

_SECRETS = (("storage", "blob_token"),)


def _nostore(res: JSONResponse) -> JSONResponse:
    res.headers["Cache-Control"] = "no-store"
    return res


def _blank(v: Any) -> bool:
    s = ("" if v is None else str(v)).strip()
    return s in {"", "••••••••"}


@router.get("/config")
def api_config() -> JSONResponse:
    return _nostore(JSONResponse(redact_config(load_config())))


@router.post("/config")
def api_config_save(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    incoming = dict(payload or {})
    current = dict(load_config() or {})
    merged = config_base._deep_merge(current, incoming)

    # masked or empty secrets keep their stored value
    for section, key in _SECRETS:
        inc = incoming.get(section)
        if isinstance(inc, dict) and key in inc and _blank(inc[key]):
            merged.setdefault(section, {})[key] = (current.get(section) or {}).get(key, "")

    # environment-provided values are never written to disk
    for env_name, (section, key) in config_base._ENV_OVERRIDES:
        env_val = (os.getenv(env_name) or "").strip()
        blk = merged.get(section)
        if env_val and isinstance(blk, dict) and blk.get(key) == env_val:
            blk[key] = config_base.DEFAULT_CFG[section][key]

    save_config(merged)
    reset_store()
    return {"ok": True}
