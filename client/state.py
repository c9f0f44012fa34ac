# client/state.py
# ReelList - Client-side watchlist state: one fetch, local patches, derived view
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any, Callable, Literal

from _logging import log as _root_log
from services.movies import filter_movies
from services.statistics import compute_stats

from .api import ClientError, MoviesClient

log = _root_log.child("CLIENT")

Phase = Literal["loading", "ready"]
StatusFilter = Literal["all", "watched", "unwatched"]
NotifyFn = Callable[[str, str], None]

_FILTERS = ("all", "watched", "unwatched")


def _log_notify(level: str, message: str) -> None:
    log(message, level=level)


class WatchlistState:
    """In-memory copy of the collection held by a UI.

    The collection is fetched once by ``load()`` and afterwards only patched
    after the server confirmed a mutation. ``view`` is rebuilt lazily whenever
    the collection, the search text or the status filter changed.
    """

    def __init__(self, client: MoviesClient, *, notify: NotifyFn | None = None) -> None:
        self.client = client
        self.notify: NotifyFn = notify if notify is not None else _log_notify
        self.phase: Phase = "loading"
        self.updating = False
        self.deleting = False
        self._movies: list[dict[str, Any]] = []
        self._search = ""
        self._status: StatusFilter = "all"
        self._view: list[dict[str, Any]] | None = None

    # source of truth
    @property
    def movies(self) -> list[dict[str, Any]]:
        return list(self._movies)

    def _set_movies(self, movies: list[dict[str, Any]]) -> None:
        self._movies = list(movies)
        self._view = None

    def _find(self, movie_id: int) -> dict[str, Any] | None:
        for m in self._movies:
            if m.get("id") == movie_id:
                return m
        return None

    def load(self) -> None:
        self.phase = "loading"
        try:
            self._set_movies(self.client.list_movies())
        except ClientError as e:
            log.error(f"error fetching movies: {e.message}")
            self._set_movies([])
            self.notify("error", "Failed to load movies")
        finally:
            self.phase = "ready"

    # filters
    @property
    def search(self) -> str:
        return self._search

    def set_search(self, text: str) -> None:
        text = text or ""
        if text != self._search:
            self._search = text
            self._view = None

    @property
    def status_filter(self) -> StatusFilter:
        return self._status

    def set_status_filter(self, status: str) -> None:
        st = (status or "all").strip().lower()
        if st not in _FILTERS:
            raise ValueError(f"unknown status filter: {status!r}")
        if st != self._status:
            self._status = st  # type: ignore[assignment]
            self._view = None

    # derived
    @property
    def view(self) -> list[dict[str, Any]]:
        if self._view is None:
            self._view = filter_movies(self._movies, self._search, self._status)
        return list(self._view)

    @property
    def stats(self) -> dict[str, Any]:
        return compute_stats(self._movies)

    # mutations
    def toggle_status(self, movie_id: int, status: str) -> None:
        """Update a movie's status on the server, then locally.

        Failures are reported through ``notify`` and re-raised so a caller can
        keep its dialog open.
        """
        self.updating = True
        try:
            if self._find(movie_id) is None:
                raise ClientError("Movie not found", 404)
            self.client.update_status(movie_id, status)
            self._set_movies([
                {**m, "status": status} if m.get("id") == movie_id else m
                for m in self._movies
            ])
            self.notify("success", f"Movie marked as {status}")
        except ClientError as e:
            log.error(f"error updating movie {movie_id}: {e.message}")
            self.notify("error", e.message or "Failed to update movie")
            raise
        finally:
            self.updating = False

    def remove(self, movie_id: int) -> bool:
        self.deleting = True
        try:
            self.client.delete_movie(movie_id)
        except ClientError as e:
            log.error(f"error deleting movie {movie_id}: {e.message}")
            self.notify("error", e.message or "Failed to delete movie")
            return False
        finally:
            self.deleting = False
        self._set_movies([m for m in self._movies if m.get("id") != movie_id])
        self.notify("success", "Movie deleted successfully")
        return True

    def add(self, title: str, year: int, status: str) -> int | None:
        try:
            new_id = self.client.add_movie(title, year, status)
        except ClientError as e:
            log.error(f"error adding movie: {e.message}")
            self.notify("error", e.message or "Failed to add movie")
            return None
        self.notify("success", "Movie added successfully")
        self.load()
        return new_id
