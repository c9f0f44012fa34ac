# /reellist.py
# ReelList - Personal movie watchlist
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI, Request

from _logging import configure_from_config, log
from api import register as register_api
from rl_platform.config_base import config_path, load_config
from rl_platform.storage import get_store

_DEBUG_HTTP_CACHE = {"ts": 0.0, "val": False}


# Debug helpers
def _is_http_debug_enabled() -> bool:
    try:
        now = time.time()
        if now - _DEBUG_HTTP_CACHE["ts"] > 2.0:
            cfg = load_config()
            _DEBUG_HTTP_CACHE["val"] = bool(((cfg.get("runtime") or {}).get("debug_http") or False))
            _DEBUG_HTTP_CACHE["ts"] = now
        return bool(_DEBUG_HTTP_CACHE["val"])
    except Exception:
        return False


@asynccontextmanager
async def _lifespan(app: FastAPI):
    cfg = load_config()
    configure_from_config(cfg)
    try:
        store = get_store()
        log.child("APP").info(f"storage backend: {store.name} ({store.document})")
    except ValueError as e:
        log.child("APP").error(f"storage not configured: {e}")
    yield


# API
app = FastAPI(title="ReelList", lifespan=_lifespan)


@app.middleware("http")
async def conditional_access_logger(request: Request, call_next):
    t0 = time.time()
    client = request.client
    response = None
    err = None
    status = 0
    try:
        response = await call_next(request)
        status = getattr(response, "status_code", 0) or 0
    except Exception as e:
        err = e
        status = 500
    finally:
        # full access logs come from uvicorn when debug_http=true
        if not _is_http_debug_enabled() and (err is not None or status >= 500):
            dt_ms = int((time.time() - t0) * 1000)
            host = f"{client.host}:{client.port}" if client else "-"
            path = request.url.path
            path_qs = path + (f"?{request.url.query}" if request.url.query else "")
            proto = f"HTTP/{request.scope.get('http_version', '1.1')}"
            print(f'{host} - "{request.method} {path_qs} {proto}" {status} ({dt_ms} ms)')

    if err is not None:
        raise err
    return response


# Middleware to disable caching for API responses
@app.middleware("http")
async def cache_headers_for_api(request: Request, call_next):
    resp = await call_next(request)
    if request.url.path.startswith("/api/"):
        resp.headers["Cache-Control"] = "no-store"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.get("/healthz", tags=["health"])
def healthz() -> Dict[str, Any]:
    try:
        backend = get_store().name
    except ValueError as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True, "backend": backend}


register_api(app)


# Entry point
def main(host: str | None = None, port: int | None = None) -> None:
    cfg = load_config()
    ui = cfg.get("ui") or {}
    host = host or str(ui.get("host") or "0.0.0.0")
    port = int(port or ui.get("port") or 8787)

    print("\nReelList running:")
    print(f"  Local:   http://127.0.0.1:{port}")
    print(f"  Bind:    {host}:{port}")
    print(f"  Config:  {config_path()} (JSON)\n")

    debug = bool((cfg.get("runtime") or {}).get("debug"))
    debug_http = bool((cfg.get("runtime") or {}).get("debug_http"))

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=("debug" if debug else "warning"),
        access_log=debug_http,
    )

if __name__ == "__main__":
    main()
