# rl_platform/records.py
# ReelList - Movie record factory and request payload models
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, field_validator

STATUSES: tuple[str, ...] = ("watched", "unwatched")
MIN_YEAR = 1900
YEAR_AHEAD = 5

Status = Literal["watched", "unwatched"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_ts(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def max_year(now: datetime | None = None) -> int:
    return (now or _utcnow()).year + YEAR_AHEAD


def movie_id_of(movie: Any) -> int | None:
    if not isinstance(movie, dict):
        return None
    v = movie.get("id")
    if isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def create_movie(
    title: str,
    year: int,
    status: str,
    *,
    existing: Iterable[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a new movie record.

    The id is the creation time in epoch milliseconds. When the current
    collection is passed in, the id is raised above its highest id so two
    records created within the same millisecond stay distinct.
    """
    now = _utcnow()
    new_id = int(now.timestamp() * 1000)
    if existing is not None:
        ids = [i for i in (movie_id_of(m) for m in existing) if i is not None]
        if ids and max(ids) >= new_id:
            new_id = max(ids) + 1
    ts = iso_ts(now)
    return {
        "id": new_id,
        "title": str(title).strip(),
        "year": year,
        "status": status,
        "created_at": ts,
        "updated_at": ts,
    }


def touch(movie: dict[str, Any]) -> dict[str, Any]:
    out = dict(movie)
    out["updated_at"] = iso_ts(_utcnow())
    return out


# Request payloads
class MovieCreate(BaseModel):
    title: str
    year: int
    status: Status

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title is blank")
        return v

    @field_validator("year")
    @classmethod
    def _year_in_range(cls, v: int) -> int:
        if v < MIN_YEAR or v > max_year():
            raise ValueError("year out of range")
        return v


class MoviePatch(BaseModel):
    """Partial update. Only ``status`` is applied. The other record fields may
    be echoed back by a client but must match the stored record. Anything else
    is rejected."""

    model_config = ConfigDict(extra="forbid")

    status: Status
    id: Any = None
    title: Any = None
    year: Any = None
    created_at: Any = None
    updated_at: Any = None

    def changes(self) -> dict[str, Any]:
        return {"status": self.status}

    def conflict_with(self, movie: dict[str, Any]) -> str | None:
        """Name of the first echoed field whose value differs from ``movie``."""
        for name in ("id", "title", "year"):
            sent = getattr(self, name)
            if sent is None:
                continue
            if str(sent).strip() != str(movie.get(name, "")).strip():
                return name
        return None


__all__ = [
    "STATUSES",
    "MIN_YEAR",
    "Status",
    "MovieCreate",
    "MoviePatch",
    "create_movie",
    "touch",
    "iso_ts",
    "max_year",
    "movie_id_of",
]
