import pytest

from pdf_toolkit.jobs.types import Failed, JobRecord, JobType, Running, Succeeded


def _record(**kw) -> JobRecord:
    return JobRecord(id="r1", started_at_utc="2025-01-01T00:00:00+00:00", command=("cli", "render"), **kw)


def test_job_type_values():
    assert [t.value for t in JobType] == ["render", "split", "rotate", "page-images"]
    assert JobType("page-images") is JobType.PAGE_IMAGES


def test_status_follows_outcome():
    assert _record().status is None
    assert _record(outcome=Succeeded()).status == "ok"
    assert _record(outcome=Failed("x")).status == "error"
    assert _record(outcome=Running()).error is None


def test_only_failed_records_carry_error_key():
    assert "error" not in _record(outcome=Succeeded(), exit_code=0).to_dict()
    assert "error" not in _record().to_dict()
    assert _record(outcome=Failed("boom"), exit_code=1).to_dict()["error"] == "boom"


def test_round_trip():
    job = _record(
        job_type="rotate",
        ended_at_utc="2025-01-01T00:00:05+00:00",
        outcome=Failed("bad degrees"),
        exit_code=2,
        input_path="a.pdf",
        output_dir="out/r1",
        manifest_path="out/r1/manifest.json",
        stdout_tail="",
        stderr_tail="bad degrees\n",
    )

    assert JobRecord.from_dict(job.to_dict()) == job


def test_from_dict_tolerates_odd_fields():
    job = JobRecord.from_dict(
        {"id": "r1", "started_at_utc": "t", "command": ["cli"], "status": "weird", "exit_code": True, "input_path": 3}
    )

    assert job.status is None
    assert job.exit_code is None
    assert job.input_path is None


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"started_at_utc": "t", "command": []},
        {"id": "", "started_at_utc": "t"},
        {"id": "r1"},
        {"id": "r1", "started_at_utc": "t", "command": "cli render"},
        {"id": "r1", "started_at_utc": "t", "command": ["cli", 2]},
    ],
)
def test_from_dict_rejects_unusable_shapes(data):
    with pytest.raises(ValueError):
        JobRecord.from_dict(data)
