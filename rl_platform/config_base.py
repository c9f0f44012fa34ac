# rl_platform/config_base.py
from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict

# ------------------------------------------------------------
# Base dir resolution
# ------------------------------------------------------------
def CONFIG_BASE() -> Path:
    """
    Determine the base directory for config files and the local movie file.

    Priority:
      1) $CONFIG_BASE if set
      2) Project root (one level up from this file)
    """
    env = os.getenv("CONFIG_BASE")
    if env:
        return Path(env)

    return Path(__file__).resolve().parents[1]

# Default config structure
DEFAULT_CFG: Dict[str, Any] = {
    # --- Storage -------------------------------------------------------------
    "storage": {
        "backend": "auto",                              # "auto" | "blob" | "file". auto = blob when a token is set
        "document": "movies.json",                      # Name of the single JSON document holding the collection
        "blob_token": "",                               # Read/write token; $BLOB_READ_WRITE_TOKEN wins when set
        "blob_api_url": "https://blob.vercel-storage.com",
        "blob_api_version": "7",                        # Sent as x-api-version
        "timeout": 10.0,                                # HTTP timeout (seconds) for blob calls
    },

    # --- Runtime / Diagnostics ----------------------------------------------
    "runtime": {
        "debug": False,                                 # Extra verbose logging (debug level)
        "debug_http": False,                            # uvicorn access log for every request
        "log_json": "",                                 # Optional path for a JSON-lines log sink
    },

    # --- Web UI / server -----------------------------------------------------
    "ui": {
        "host": "0.0.0.0",
        "port": 8787,
    },
}

_SECRET_PATHS = (("storage", "blob_token"),)
_MASK = "••••••••"

_ENV_OVERRIDES = (
    ("BLOB_READ_WRITE_TOKEN", ("storage", "blob_token")),
    ("REELLIST_STORAGE_BACKEND", ("storage", "backend")),
)


# ------------------------------------------------------------
# Helpers: paths, IO, merging
# ------------------------------------------------------------
def _cfg_file() -> Path:
    return CONFIG_BASE() / "config.json"

def config_path() -> Path:
    """Public accessor for the config.json location."""
    return _cfg_file()


def _read_json(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def _write_json_atomic(p: Path, data: Dict[str, Any]) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    import secrets, threading, time
    suffix = f".{time.time_ns()}.{os.getpid()}.{threading.get_ident()}.{secrets.token_hex(4)}.tmp"
    tmp = p.with_suffix(suffix)

    with tmp.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp.replace(p)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)  # type: ignore[assignment]
        else:
            out[k] = v
    return out


def _apply_env(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, (section, key) in _ENV_OVERRIDES:
        val = (os.getenv(env_name) or "").strip()
        if not val:
            continue
        blk = cfg.get(section)
        if not isinstance(blk, dict):
            blk = {}
            cfg[section] = blk
        blk[key] = val
    return cfg


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Read config.json, fill defaults, then apply environment overrides.
    """
    p = _cfg_file()
    user_cfg: Dict[str, Any] = {}
    if p.exists():
        try:
            user_cfg = _read_json(p)
        except Exception:
            user_cfg = {}
    if not isinstance(user_cfg, dict):
        user_cfg = {}

    return _apply_env(_deep_merge(DEFAULT_CFG, user_cfg))


def save_config(cfg: Dict[str, Any]) -> None:
    """
    Write to config.json
    """
    _write_json_atomic(_cfg_file(), dict(cfg or {}))


def redact_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(cfg or {})
    for section, key in _SECRET_PATHS:
        blk = out.get(section)
        if isinstance(blk, dict) and str(blk.get(key) or "").strip():
            blk[key] = _MASK
    return out
