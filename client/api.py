# client/api.py
# ReelList - HTTP client for the movie API
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import json
from typing import Any

import requests

__all__ = ["ClientError", "MoviesClient", "safe_json"]


class ClientError(Exception):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def safe_json(resp: requests.Response) -> Any:
    try:
        if not (resp.text or "").strip():
            return {}
        ctype = (resp.headers.get("Content-Type") or "").lower()
        if "json" in ctype:
            return resp.json()
        return json.loads(resp.text)
    except ValueError:
        return {}


class MoviesClient:
    """Thin wrapper over the /api/movies routes.

    Network failures and non-2xx responses raise ClientError; the message is
    the server's ``error`` field when it sent one.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8787",
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str = "") -> str:
        return f"{self.base_url}/api/movies{path}"

    def _send(self, method: str, path: str, default_error: str, **kwargs: Any) -> tuple[int, Any]:
        try:
            resp = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ClientError(f"{default_error}: {e}") from e
        body = safe_json(resp)
        if not resp.ok:
            msg = body.get("error") if isinstance(body, dict) else None
            raise ClientError(str(msg or default_error), resp.status_code)
        return resp.status_code, body

    def _request(self, method: str, path: str, default_error: str, **kwargs: Any) -> Any:
        return self._send(method, path, default_error, **kwargs)[1]

    def list_movies(self) -> list[dict[str, Any]]:
        data = self._request("GET", "", "Failed to fetch movies")
        if not isinstance(data, list):
            raise ClientError("Failed to fetch movies")
        return data

    def add_movie(self, title: str, year: int, status: str) -> int:
        status_code, data = self._send(
            "POST", "", "Failed to add movie",
            json={"title": title, "year": year, "status": status},
        )
        try:
            return int(data["id"])
        except (KeyError, TypeError, ValueError):
            raise ClientError("Failed to add movie", status_code) from None

    def update_status(self, movie_id: int, status: str) -> dict[str, Any]:
        data = self._request("PUT", f"/{movie_id}", "Failed to update movie", json={"status": status})
        return dict(data.get("movie") or {}) if isinstance(data, dict) else {}

    def delete_movie(self, movie_id: int) -> None:
        self._request("DELETE", f"/{movie_id}", "Failed to delete movie")

    def export(self) -> list[dict[str, Any]]:
        data = self._request("GET", "/export", "Failed to export movies")
        return data if isinstance(data, list) else []

    def stats(self) -> dict[str, Any]:
        data = self._request("GET", "/stats", "Failed to load statistics")
        return data if isinstance(data, dict) else {}
