# ReelList test scripts
from __future__ import annotations

import io
import json
from pathlib import Path

from fastapi.testclient import TestClient


def test_healthz_reports_backend_and_api_is_not_cached(config_base: Path) -> None:
    import reellist

    client = TestClient(reellist.app)

    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "backend": "file"}

    r = client.get("/api/movies")
    assert r.status_code == 200
    assert r.json() == []
    assert r.headers["cache-control"] == "no-store"


def test_logger_child_shares_json_sink(tmp_path: Path) -> None:
    from _logging import Logger

    root = Logger(stream=io.StringIO(), use_color=False, show_time=False)
    child = root.child("STORE")
    sink = tmp_path / "log.jsonl"
    root.enable_json(str(sink))

    child.info("wrote 2 movies", extra={"count": 2})

    assert root.stream.getvalue().strip() == "[STORE] INFO wrote 2 movies"
    (line,) = sink.read_text(encoding="utf-8").splitlines()
    payload = json.loads(line)
    assert payload["msg"] == "wrote 2 movies"
    assert payload["ctx"] == {"module": "STORE"}
    assert payload["extra"] == {"count": 2}
