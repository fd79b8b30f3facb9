from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from pdf_toolkit.core.config_resolver import default_data_file
from pdf_toolkit.jobs.store import JobsStore
from pdf_toolkit.jobs.types import JobRecord

app = FastAPI(
    title="PDF Toolkit Jobs API",
    description="Read-only access to the pdf-toolkit job ledger.",
    version="1.0.0",
)


# Pydantic model for one ledger entry
class JobRecordOut(BaseModel):
    id: str
    job_type: Optional[str] = None
    started_at_utc: str
    ended_at_utc: Optional[str] = None
    status: Optional[str] = None
    exit_code: Optional[int] = None
    command: List[str]
    input_path: Optional[str] = None
    output_dir: Optional[str] = None
    manifest_path: Optional[str] = None
    stdout_tail: Optional[str] = None
    stderr_tail: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_record(cls, job: JobRecord) -> "JobRecordOut":
        return cls(**job.to_dict())


def get_store() -> JobsStore:
    return JobsStore(default_data_file())


@app.get("/health", summary="Health check", response_description="API health status")
async def health_check():
    """
    Checks the health of the API.
    """
    return {"status": "ok"}


@app.get("/jobs", response_model=List[JobRecordOut], summary="List recent runs")
async def list_jobs(
    limit: int = Query(50, ge=1, le=200),
    store: JobsStore = Depends(get_store),
):
    """
    Returns the most recent runs first, as stored in the ledger.
    """
    return [JobRecordOut.from_record(j) for j in store.load()[:limit]]


@app.get("/jobs/{job_id}", response_model=JobRecordOut, summary="Get one run")
async def get_job(job_id: str, store: JobsStore = Depends(get_store)):
    job = store.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail=f"Unknown job id: {job_id}")
    return JobRecordOut.from_record(job)
