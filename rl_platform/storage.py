# rl_platform/storage.py
# ReelList - Object store adapter for the single movies.json document
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Mapping

import requests

from _logging import log as _root_log
from rl_platform.config_base import CONFIG_BASE, load_config

log = _root_log.child("STORE")

__all__ = [
    "MovieStore",
    "BlobMovieStore",
    "FileMovieStore",
    "store_from_config",
    "get_store",
    "reset_store",
]


def _coerce_list(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        return []
    return [x for x in data if isinstance(x, dict)]


def _dumps(movies: list[dict[str, Any]]) -> str:
    return json.dumps(list(movies), indent=2, ensure_ascii=False)


class MovieStore:
    """Whole-document storage for the movie collection.

    ``get_all`` never raises: a missing or unreadable document is an empty
    collection. ``replace_all`` deletes the old document (best effort) and
    writes the new one, reporting the outcome as a bool.
    """

    name = "base"

    def __init__(self, document: str = "movies.json") -> None:
        self.document = document

    # backend hooks
    def _read(self) -> Any:
        raise NotImplementedError

    def _delete(self) -> None:
        raise NotImplementedError

    def _write(self, payload: str) -> None:
        raise NotImplementedError

    # public API
    def get_all(self) -> list[dict[str, Any]]:
        try:
            data = self._read()
        except Exception as e:
            log.error(f"read {self.document} failed: {e}")
            return []
        if data is None:
            return []
        if not isinstance(data, list):
            log.warn(f"{self.document} does not hold a JSON array; treating as empty")
            return []
        return _coerce_list(data)

    def replace_all(self, movies: list[dict[str, Any]]) -> bool:
        try:
            try:
                self._delete()
            except Exception as e:
                log.info(f"no existing {self.document} to delete or delete failed: {e}")
            self._write(_dumps(movies))
            log.debug(f"wrote {len(movies)} movies to {self.document} ({self.name})")
            return True
        except Exception as e:
            log.error(f"write {self.document} failed: {e}")
            return False


class BlobMovieStore(MovieStore):
    name = "blob"

    def __init__(
        self,
        token: str,
        *,
        document: str = "movies.json",
        api_url: str = "https://blob.vercel-storage.com",
        api_version: str = "7",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(document)
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.api_version = str(api_version)
        self.timeout = float(timeout)
        self.session = session or requests.Session()

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        h = {
            "Authorization": f"Bearer {self.token}",
            "x-api-version": self.api_version,
        }
        if extra:
            h.update(extra)
        return h

    def _find(self) -> dict[str, Any] | None:
        r = self.session.get(
            f"{self.api_url}/",
            params={"prefix": self.document},
            headers=self._headers(),
            timeout=self.timeout,
        )
        r.raise_for_status()
        body = r.json() or {}
        for blob in body.get("blobs") or []:
            if isinstance(blob, dict) and blob.get("pathname") == self.document:
                return blob
        return None

    def _read(self) -> Any:
        blob = self._find()
        if not blob or not blob.get("url"):
            return None
        r = self.session.get(str(blob["url"]), timeout=self.timeout)
        if not r.ok:
            log.warn(f"fetch {self.document} returned HTTP {r.status_code}")
            return None
        return r.json()

    def _delete(self) -> None:
        blob = self._find()
        if not blob or not blob.get("url"):
            return
        r = self.session.post(
            f"{self.api_url}/delete",
            json={"urls": [blob["url"]]},
            headers=self._headers(),
            timeout=self.timeout,
        )
        r.raise_for_status()

    def _write(self, payload: str) -> None:
        r = self.session.put(
            f"{self.api_url}/{self.document}",
            data=payload.encode("utf-8"),
            headers=self._headers(
                {
                    "x-content-type": "application/json",
                    "x-add-random-suffix": "0",
                }
            ),
            timeout=self.timeout,
        )
        r.raise_for_status()


class FileMovieStore(MovieStore):
    name = "file"

    def __init__(self, path: Path, *, document: str | None = None) -> None:
        super().__init__(document or path.name)
        self.path = Path(path)

    def _read(self) -> Any:
        if not self.path.exists():
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _delete(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(f".{os.getpid()}.{threading.get_ident()}.tmp")
        with tmp.open("w", encoding="utf-8", newline="\n") as f:
            f.write(payload)
            f.write("\n")
        tmp.replace(self.path)


def store_from_config(cfg: Mapping[str, Any]) -> MovieStore:
    scfg = cfg.get("storage") or {}
    document = str(scfg.get("document") or "movies.json").strip() or "movies.json"
    token = str(scfg.get("blob_token") or "").strip()
    backend = str(scfg.get("backend") or "auto").strip().lower()

    if backend == "auto":
        backend = "blob" if token else "file"

    if backend == "blob":
        if not token:
            raise ValueError("storage.backend is 'blob' but no blob token is configured")
        return BlobMovieStore(
            token,
            document=document,
            api_url=str(scfg.get("blob_api_url") or "https://blob.vercel-storage.com"),
            api_version=str(scfg.get("blob_api_version") or "7"),
            timeout=float(scfg.get("timeout") or 10.0),
        )
    if backend == "file":
        return FileMovieStore(CONFIG_BASE() / document)
    raise ValueError(f"unknown storage backend: {backend!r}")


_STORE: MovieStore | None = None
_STORE_LOCK = threading.Lock()


def get_store() -> MovieStore:
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = store_from_config(load_config())
            log.info(f"using {_STORE.name} storage for {_STORE.document}")
        return _STORE


def reset_store() -> None:
    global _STORE
    with _STORE_LOCK:
        _STORE = None
