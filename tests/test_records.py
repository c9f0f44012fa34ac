# ReelList test scripts
from __future__ import annotations

import pytest
from pydantic import ValidationError

from rl_platform.records import MovieCreate, MoviePatch, create_movie, max_year, touch


def test_create_movie_trims_title_and_stamps_times(clock) -> None:
    m = create_movie("  Dune  ", 2021, "unwatched")

    assert m["title"] == "Dune"
    assert m["year"] == 2021
    assert m["status"] == "unwatched"
    assert m["id"] == int(clock.now.timestamp() * 1000)
    assert m["created_at"] == m["updated_at"] == "2026-03-01T12:00:00.000Z"


def test_create_movie_steps_past_existing_ids(clock) -> None:
    first = create_movie("A", 2000, "watched")
    second = create_movie("B", 2001, "watched", existing=[first])

    assert second["id"] == first["id"] + 1


def test_create_movie_keeps_clock_id_when_ahead_of_collection(clock) -> None:
    old = {"id": 5, "title": "Old", "year": 1999, "status": "watched"}
    m = create_movie("New", 2020, "watched", existing=[old, {"id": "junk"}])

    assert m["id"] == int(clock.now.timestamp() * 1000)


def test_touch_returns_copy_with_fresh_updated_at(clock) -> None:
    m = create_movie("Alien", 1979, "watched")
    clock.advance(seconds=3)

    t = touch(m)

    assert t is not m
    assert t["updated_at"] == "2026-03-01T12:00:03.000Z"
    assert m["updated_at"] == "2026-03-01T12:00:00.000Z"
    assert {k: v for k, v in t.items() if k != "updated_at"} == {
        k: v for k, v in m.items() if k != "updated_at"
    }


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"title": "   ", "year": 2000, "status": "watched"}, "title"),
        ({"year": 2000, "status": "watched"}, "title"),
        ({"title": "X", "year": 1899, "status": "watched"}, "year"),
        ({"title": "X", "year": max_year() + 1, "status": "watched"}, "year"),
        ({"title": "X", "year": None, "status": "watched"}, "year"),
        ({"title": "X", "year": 2000, "status": "seen"}, "status"),
    ],
)
def test_movie_create_rejects_bad_fields(payload, field) -> None:
    with pytest.raises(ValidationError) as exc:
        MovieCreate.model_validate(payload)
    assert exc.value.errors()[0]["loc"][0] == field


def test_movie_create_accepts_range_edges() -> None:
    assert MovieCreate(title="Old", year=1900, status="watched").year == 1900
    assert MovieCreate(title="Soon", year=max_year(), status="unwatched").year == max_year()


def test_movie_patch_changes_only_status() -> None:
    patch = MoviePatch.model_validate(
        {"id": 1, "title": "Changed", "year": 1800, "status": "watched", "created_at": "x"}
    )
    assert patch.changes() == {"status": "watched"}


def test_movie_patch_conflict_with_stored_record() -> None:
    stored = {"id": 7, "title": "Heat", "year": 1995, "status": "unwatched"}

    assert MoviePatch.model_validate({"status": "watched"}).conflict_with(stored) is None
    same = MoviePatch.model_validate({"id": "7", "title": " Heat", "year": 1995, "status": "watched"})
    assert same.conflict_with(stored) is None
    assert MoviePatch.model_validate({"title": "Ronin", "status": "watched"}).conflict_with(stored) == "title"
    assert MoviePatch.model_validate({"year": 1998, "status": "watched"}).conflict_with(stored) == "year"


def test_movie_patch_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError) as exc:
        MoviePatch.model_validate({"status": "watched", "rating": 5})
    assert exc.value.errors()[0]["type"] == "extra_forbidden"
