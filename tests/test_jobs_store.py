from __future__ import annotations

import json
import os
import re
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from pdf_toolkit.core.data_file import DataFile
from pdf_toolkit.jobs.store import JobsStore, error_excerpt, make_run_id, tail_text
from pdf_toolkit.jobs.types import Failed, JobRecord, Succeeded


def _job(job_id: str, **kwargs) -> JobRecord:
    return JobRecord(id=job_id, started_at_utc="2025-01-01T00:00:00+00:00", command=("pdf-toolkit",), **kwargs)


def test_load_missing_file_is_empty(store: JobsStore):
    assert store.load() == []


@pytest.mark.parametrize(
    "content",
    [
        "",
        "not json",
        "[1, 2, 3]",
        '"text"',
        '{"jobs": {"id": "x"}}',
        '{"jobs": "nope"}',
        "null",
        pytest.param('{"jobs": ' + "[" * 100_000 + "]" * 100_000 + "}", id="deeply-nested"),
    ],
)
def test_load_malformed_data_is_empty(data_file: DataFile, content: str):
    os.makedirs(os.path.dirname(data_file.path), exist_ok=True)
    with open(data_file.path, "w", encoding="utf-8") as f:
        f.write(content)

    assert JobsStore(data_file).load() == []


def test_load_skips_malformed_entries(data_file: DataFile):
    good = _job("a").to_dict()
    data_file.write({"jobs": [good, {"id": 5}, "junk", {"id": "b"}]})

    jobs = JobsStore(data_file).load()

    assert [j.id for j in jobs] == ["a"]


def test_upsert_inserts_newest_first(store: JobsStore):
    store.upsert(_job("first"))
    store.upsert(_job("second"))

    assert [j.id for j in store.load()] == ["second", "first"]


def test_upsert_same_id_replaces_in_place(store: JobsStore):
    store.upsert(_job("a"))
    store.upsert(_job("b"))
    store.upsert(_job("c"))

    store.upsert(_job("b", exit_code=0, outcome=Succeeded(), ended_at_utc="2025-01-01T00:01:00+00:00"))

    jobs = store.load()
    assert [j.id for j in jobs] == ["c", "b", "a"]
    assert [j.id for j in jobs].count("b") == 1
    assert jobs[1].status == "ok"
    assert jobs[1].exit_code == 0


def test_upsert_is_idempotent(store: JobsStore):
    job = _job("a", outcome=Failed("boom"), exit_code=3)
    store.upsert(job)
    first = store.data_file.read()

    store.upsert(job)

    assert store.data_file.read() == first
    assert store.load() == [job]


def test_upsert_caps_at_200_and_evicts_oldest(store: JobsStore):
    for i in range(201):
        store.upsert(_job(f"job-{i:03d}"))

    jobs = store.load()
    assert len(jobs) == 200
    assert jobs[0].id == "job-200"
    assert jobs[-1].id == "job-001"
    assert "job-000" not in {j.id for j in jobs}


def test_save_truncates_to_cap(data_file: DataFile):
    store = JobsStore(data_file, max_records=3)
    store.save([_job(str(i)) for i in range(5)])

    assert [j.id for j in store.load()] == ["0", "1", "2"]


def test_save_preserves_other_persisted_state(data_file: DataFile):
    data_file.write({"cli_command": "/opt/pdf-toolkit", "output_root": "out", "jobs": []})

    JobsStore(data_file).upsert(_job("a"))

    raw = json.loads(open(data_file.path, encoding="utf-8").read())
    assert raw["cli_command"] == "/opt/pdf-toolkit"
    assert raw["output_root"] == "out"
    assert [j["id"] for j in raw["jobs"]] == ["a"]


def test_get_by_id(store: JobsStore):
    store.upsert(_job("a"))
    store.upsert(_job("b"))

    assert store.get("a").id == "a"
    assert store.get("missing") is None


def test_record_round_trip_keeps_outcome(store: JobsStore):
    job = replace(_job("a", job_type="split"), outcome=Failed("bad range"), exit_code=2)
    store.upsert(job)

    loaded = store.get("a")
    assert loaded == job
    assert loaded.error == "bad range"


@pytest.mark.parametrize("length", [0, 1, 19_999, 20_000])
def test_tail_text_keeps_short_text(length):
    text = "x" * length
    assert tail_text(text) == text


@pytest.mark.parametrize("length", [20_001, 50_000])
def test_tail_text_keeps_last_20000_chars(length):
    text = "".join(str(i % 10) for i in range(length))

    out = tail_text(text)

    assert len(out) == 20_000
    assert out == text[-20_000:]


def test_error_excerpt_strips_and_keeps_tail():
    stderr = "\n" + "a" * 3000 + "Traceback: boom\n\n"

    out = error_excerpt(stderr)

    assert len(out) == 2000
    assert out.endswith("Traceback: boom")


def test_make_run_id_shape_and_uniqueness():
    now = datetime(2025, 3, 4, 5, 6, 7, 890123, tzinfo=timezone.utc)

    run_id = make_run_id(now)

    assert re.fullmatch(r"2025-03-04T05-06-07-890Z_[0-9a-f]{6}", run_id)
    assert len({make_run_id(now) for _ in range(50)}) > 1
