from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Iterable

from pdf_toolkit.config import ERROR_TAIL_LIMIT, MAX_JOB_RECORDS, OUTPUT_TAIL_LIMIT
from pdf_toolkit.core.config_resolver import JOBS_KEY, default_data_file
from pdf_toolkit.core.data_file import WRITE_LOCK, DataFile
from pdf_toolkit.jobs.types import JobRecord

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_run_id(now: datetime | None = None) -> str:
    """Create a sortable run id: UTC timestamp plus a short random suffix."""
    t = now or datetime.now(timezone.utc)
    stamp = t.strftime("%Y-%m-%dT%H-%M-%S-") + f"{t.microsecond // 1000:03d}Z"
    return f"{stamp}_{secrets.token_hex(3)}"


def tail_text(value: str, limit: int = OUTPUT_TAIL_LIMIT) -> str:
    """Keep the trailing `limit` characters; failures are usually reported last."""
    if len(value) <= limit:
        return value
    return value[-limit:]


def error_excerpt(stderr: str, limit: int = ERROR_TAIL_LIMIT) -> str:
    return stderr.strip()[-limit:]


class JobsStore:
    """Bounded, most-recent-first job ledger inside the host data file."""

    def __init__(self, data_file: DataFile | None = None, *, max_records: int = MAX_JOB_RECORDS):
        self.data_file = data_file or default_data_file()
        self.max_records = max_records

    def load(self) -> list[JobRecord]:
        jobs = self.data_file.read().get(JOBS_KEY)
        if not isinstance(jobs, list):
            return []
        out: list[JobRecord] = []
        for item in jobs:
            try:
                out.append(JobRecord.from_dict(item))
            except ValueError as exc:
                logger.warning("Skipping malformed job record: %s", exc)
        return out

    def save(self, records: Iterable[JobRecord]) -> None:
        payload: list[dict[str, Any]] = [r.to_dict() for r in records][: self.max_records]
        self.data_file.merge({JOBS_KEY: payload})

    def upsert(self, record: JobRecord) -> None:
        with WRITE_LOCK:
            jobs = self.load()
            idx = next((i for i, j in enumerate(jobs) if j.id == record.id), None)
            if idx is not None:
                jobs[idx] = record
            else:
                jobs.insert(0, record)
            self.save(jobs[: self.max_records])

    def get(self, job_id: str) -> JobRecord | None:
        return next((j for j in self.load() if j.id == job_id), None)
