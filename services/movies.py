# services/movies.py
# ReelList - Movie collection operations (read-modify-write over one document)
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from _logging import log as _root_log
from rl_platform.records import (
    MovieCreate,
    MoviePatch,
    create_movie,
    movie_id_of,
    touch,
)
from rl_platform.storage import get_store

log = _root_log.child("MOVIES")

__all__ = [
    "MovieError",
    "MovieValidationError",
    "MovieNotFound",
    "StorageWriteError",
    "list_movies",
    "add_movie",
    "update_movie",
    "delete_movie",
    "export_movies",
    "filter_movies",
    "matches_search",
]

_FIELD_MESSAGES = {
    "title": "Title is required",
    "year": "Valid year is required",
    "status": "Valid status is required",
}


class MovieError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MovieValidationError(MovieError):
    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class MovieNotFound(MovieError):
    status_code = 404


class StorageWriteError(MovieError):
    status_code = 500


def _validation_error(exc: ValidationError) -> MovieValidationError:
    errs = exc.errors()
    first = errs[0] if errs else {}
    loc = first.get("loc") or ("",)
    field = str(loc[0]) if loc else ""
    if first.get("type") == "extra_forbidden":
        return MovieValidationError(field, f"Unknown field: {field}")
    return MovieValidationError(field, _FIELD_MESSAGES.get(field, f"Invalid value for {field}"))


def _sort_key(movie: dict[str, Any]) -> int:
    mid = movie_id_of(movie)
    return mid if mid is not None else -1


# Search / filter (shared with client.state)
def matches_search(movie: Mapping[str, Any], query: str) -> bool:
    q = (query or "").strip()
    if not q:
        return True
    title = str(movie.get("title") or "").lower()
    year = movie.get("year")
    return q.lower() in title or (year is not None and q in str(year))


def filter_movies(
    movies: Iterable[dict[str, Any]],
    search: str = "",
    status: str = "all",
) -> list[dict[str, Any]]:
    st = (status or "all").strip().lower()
    out: list[dict[str, Any]] = []
    for m in movies:
        if not matches_search(m, search):
            continue
        if st != "all" and m.get("status") != st:
            continue
        out.append(m)
    return out


# Collection
def list_movies() -> list[dict[str, Any]]:
    movies = get_store().get_all()
    return sorted(movies, key=_sort_key, reverse=True)


def add_movie(payload: Any) -> dict[str, Any]:
    """Validate, append and persist a new movie. Returns the stored record."""
    if not isinstance(payload, dict):
        raise MovieValidationError("title", _FIELD_MESSAGES["title"])
    try:
        body = MovieCreate.model_validate(
            {k: payload.get(k) for k in ("title", "year", "status")}
        )
    except ValidationError as e:
        raise _validation_error(e) from None

    store = get_store()
    movies = store.get_all()
    movie = create_movie(body.title, body.year, body.status, existing=movies)
    movies.append(movie)

    if not store.replace_all(movies):
        raise StorageWriteError("Failed to save movie")
    log.info(f"added '{movie['title']}' ({movie['year']}) as {movie['status']}")
    return movie


def export_movies() -> list[dict[str, Any]]:
    movies = get_store().get_all()
    if not movies:
        raise MovieNotFound("No movie watchlist found")
    return movies


# Item
def update_movie(movie_id: int, payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise MovieValidationError("status", _FIELD_MESSAGES["status"])
    try:
        patch = MoviePatch.model_validate(payload)
    except ValidationError as e:
        raise _validation_error(e) from None

    store = get_store()
    movies = store.get_all()
    for i, m in enumerate(movies):
        if movie_id_of(m) == movie_id:
            field = patch.conflict_with(m)
            if field:
                raise MovieValidationError(field, f"Field is read-only: {field}")
            updated = touch({**m, **patch.changes()})
            movies[i] = updated
            break
    else:
        raise MovieNotFound("Movie not found")

    if not store.replace_all(movies):
        raise StorageWriteError("Failed to update movie")
    log.info(f"movie {movie_id} marked as {updated['status']}")
    return updated


def delete_movie(movie_id: int) -> dict[str, Any]:
    store = get_store()
    movies = store.get_all()
    kept = [m for m in movies if movie_id_of(m) != movie_id]
    if len(kept) == len(movies):
        raise MovieNotFound("Movie not found")
    removed = next(m for m in movies if movie_id_of(m) == movie_id)

    if not store.replace_all(kept):
        raise StorageWriteError("Failed to delete movie")
    log.info(f"deleted movie {movie_id} '{removed.get('title', '')}'")
    return removed
