"""Formatting helpers for the Jobs view."""

from __future__ import annotations

import pandas as pd

from pdf_toolkit.jobs.types import JobRecord


def format_timestamp(ts: str | None) -> str | None:
    """Return an ISO timestamp truncated to seconds (YYYY-MM-DDTHH:MM:SS)."""
    if not ts:
        return None
    s = str(ts)

    # Fast-path: keep only the first 19 chars, which correspond to seconds.
    if len(s) >= 19 and s[4] == "-" and s[10] == "T":
        return s[:19]

    t = pd.to_datetime(s, utc=True, errors="coerce")
    if pd.isna(t):
        return None
    return t.strftime("%Y-%m-%dT%H:%M:%S")


def status_label(job: JobRecord) -> str:
    exit_text = "" if job.exit_code is None else f" (exit {job.exit_code})"
    if job.status is None and job.ended_at_utc is not None:
        return f"unknown{exit_text}"
    return f"{job.status or 'running/unknown'}{exit_text}"


def duration_seconds(job: JobRecord) -> float | None:
    if not job.ended_at_utc:
        return None
    start = pd.to_datetime(job.started_at_utc, utc=True, errors="coerce")
    end = pd.to_datetime(job.ended_at_utc, utc=True, errors="coerce")
    if pd.isna(start) or pd.isna(end):
        return None
    return float((end - start).total_seconds())


def jobs_to_frame(jobs: list[JobRecord]) -> pd.DataFrame:
    """Summary table of the ledger, most recent first (ledger order)."""
    columns = ["id", "operation", "status", "started", "duration_s", "input", "output"]
    rows = [
        {
            "id": j.id,
            "operation": j.job_type or "",
            "status": status_label(j),
            "started": format_timestamp(j.started_at_utc),
            "duration_s": duration_seconds(j),
            "input": j.input_path or "",
            "output": j.output_dir or "",
        }
        for j in jobs
    ]
    return pd.DataFrame(rows, columns=columns)


def filter_jobs(jobs: list[JobRecord], *, job_type: str | None = None, status: str | None = None) -> list[JobRecord]:
    """Filter ledger rows by operation and/or status ("ok", "error", "running")."""
    out = jobs
    if job_type:
        out = [j for j in out if j.job_type == job_type]
    if status == "running":
        out = [j for j in out if j.status is None]
    elif status:
        out = [j for j in out if j.status == status]
    return out
