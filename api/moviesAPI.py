# /api/moviesAPI.py
# ReelList - Movie collection and item endpoints
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import json
from typing import Any, Callable, Literal

from fastapi import APIRouter, Body, FastAPI, Path as FPath, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from _logging import log as _root_log
from services.movies import (
    MovieError,
    add_movie,
    delete_movie,
    export_movies,
    filter_movies,
    list_movies,
    update_movie,
)
from services.statistics import compute_stats

log = _root_log.child("API")

router = APIRouter(prefix="/api/movies", tags=["movies"])


def _err(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _guard(fn: Callable[[], Response], fallback: str) -> Response:
    try:
        return fn()
    except MovieError as e:
        if e.status_code >= 500:
            log.error(f"{fallback}: {e.message}")
        return _err(e.message, e.status_code)
    except Exception as e:
        log.error(f"{fallback}: {e.__class__.__name__}: {e}")
        return _err(fallback, 500)


@router.get("", include_in_schema=False)
@router.get("/")
def api_movies(
    q: str = Query("", description="Case-insensitive title or year search"),
    status: Literal["all", "watched", "unwatched"] = Query("all", description="Status filter"),
) -> Response:
    def _run() -> Response:
        movies = list_movies()
        if q.strip() or status != "all":
            movies = filter_movies(movies, q, status)
        return JSONResponse(movies)

    return _guard(_run, "Failed to fetch movies")


@router.post("", include_in_schema=False)
@router.post("/")
def api_movies_add(payload: Any = Body(None)) -> Response:
    def _run() -> Response:
        movie = add_movie(payload)
        return JSONResponse(
            {"message": "Movie added successfully", "id": movie["id"]},
            status_code=201,
        )

    return _guard(_run, "Failed to add movie")


@router.get("/export")
def api_movies_export() -> Response:
    def _run() -> Response:
        movies = export_movies()
        return Response(
            content=json.dumps(movies, indent=2, ensure_ascii=False),
            media_type="application/json",
            headers={"Content-Disposition": 'attachment; filename="movies.json"'},
        )

    return _guard(_run, "Failed to export movies")


@router.get("/stats")
def api_movies_stats() -> Response:
    return _guard(lambda: JSONResponse(compute_stats(list_movies())), "Failed to compute statistics")


@router.put("/{movie_id}")
def api_movie_update(
    movie_id: int = FPath(..., description="Movie id"),
    payload: Any = Body(None),
) -> Response:
    def _run() -> Response:
        movie = update_movie(movie_id, payload)
        return JSONResponse({"message": "Movie updated successfully", "movie": movie})

    return _guard(_run, "Failed to update movie")


@router.delete("/{movie_id}")
def api_movie_delete(movie_id: int = FPath(..., description="Movie id")) -> Response:
    def _run() -> Response:
        delete_movie(movie_id)
        return JSONResponse({"message": "Movie deleted successfully", "id": movie_id})

    return _guard(_run, "Failed to delete movie")


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errs = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errs):
        return _err("Invalid JSON body", 400)
    loc = errs[0].get("loc") if errs else None
    where = ".".join(str(x) for x in (loc or ()) if x not in ("body", "path", "query"))
    return _err(f"Invalid request: {where}" if where else "Invalid request", 400)


def register(app: FastAPI) -> None:
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
