# services/statistics.py
# ReelList - Watchlist statistics
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any, Iterable


def _title_of(d: dict[str, Any]) -> str:
    return str(d.get("title") or "").strip()


def percent(part: int, total: int) -> float:
    if total <= 0:
        return 0
    return round(part * 100.0 / total, 1)


def compute_stats(movies: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Counts and title lists for watched vs. unwatched movies.

    ``percent_watched`` is 0 for an empty collection.
    """
    watched: list[str] = []
    unwatched: list[str] = []
    for m in movies or []:
        if not isinstance(m, dict):
            continue
        if m.get("status") == "watched":
            watched.append(_title_of(m))
        else:
            unwatched.append(_title_of(m))

    total = len(watched) + len(unwatched)
    return {
        "total": total,
        "watched": len(watched),
        "unwatched": len(unwatched),
        "percent_watched": percent(len(watched), total),
        "watched_titles": watched,
        "unwatched_titles": unwatched,
    }


__all__ = ["compute_stats", "percent"]
