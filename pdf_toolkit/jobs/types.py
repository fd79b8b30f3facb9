from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional, Union


class JobType(str, Enum):
    RENDER = "render"
    SPLIT = "split"
    ROTATE = "rotate"
    PAGE_IMAGES = "page-images"


JobStatus = Literal["ok", "error"]


@dataclass(frozen=True)
class Running:
    pass


@dataclass(frozen=True)
class Succeeded:
    pass


@dataclass(frozen=True)
class Failed:
    summary: str = ""


JobOutcome = Union[Running, Succeeded, Failed]


@dataclass(frozen=True)
class JobRecord:
    """Persisted summary of one run.

    `id` is assigned at creation and never changes; the store replaces records
    in place by id. Finished records are derived with dataclasses.replace.
    """

    id: str
    started_at_utc: str
    command: tuple[str, ...]
    job_type: Optional[str] = None
    ended_at_utc: Optional[str] = None
    outcome: JobOutcome = field(default_factory=Running)
    exit_code: Optional[int] = None
    input_path: Optional[str] = None
    output_dir: Optional[str] = None
    manifest_path: Optional[str] = None
    stdout_tail: Optional[str] = None
    stderr_tail: Optional[str] = None

    @property
    def status(self) -> Optional[JobStatus]:
        if isinstance(self.outcome, Succeeded):
            return "ok"
        if isinstance(self.outcome, Failed):
            return "error"
        return None

    @property
    def error(self) -> Optional[str]:
        return self.outcome.summary if isinstance(self.outcome, Failed) else None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "job_type": self.job_type,
            "started_at_utc": self.started_at_utc,
            "ended_at_utc": self.ended_at_utc,
            "status": self.status,
            "exit_code": self.exit_code,
            "command": list(self.command),
            "input_path": self.input_path,
            "output_dir": self.output_dir,
            "manifest_path": self.manifest_path,
            "stdout_tail": self.stdout_tail,
            "stderr_tail": self.stderr_tail,
        }
        if isinstance(self.outcome, Failed):
            d["error"] = self.outcome.summary
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "JobRecord":
        """Parse a persisted record; raise ValueError when the shape is unusable."""
        if not isinstance(d, dict):
            raise ValueError("job record must be an object")
        job_id = d.get("id")
        started = d.get("started_at_utc")
        command = d.get("command") or []
        if not isinstance(job_id, str) or not job_id:
            raise ValueError("job record has no id")
        if not isinstance(started, str):
            raise ValueError(f"job record {job_id} has no start time")
        if not isinstance(command, list) or not all(isinstance(c, str) for c in command):
            raise ValueError(f"job record {job_id} has a malformed command")

        status = d.get("status")
        if status == "ok":
            outcome: JobOutcome = Succeeded()
        elif status == "error":
            outcome = Failed(str(d.get("error") or ""))
        else:
            outcome = Running()

        exit_code = d.get("exit_code")
        if isinstance(exit_code, bool) or not isinstance(exit_code, (int, type(None))):
            exit_code = None

        return cls(
            id=job_id,
            started_at_utc=started,
            command=tuple(command),
            job_type=_opt_str(d.get("job_type")),
            ended_at_utc=_opt_str(d.get("ended_at_utc")),
            outcome=outcome,
            exit_code=exit_code,
            input_path=_opt_str(d.get("input_path")),
            output_dir=_opt_str(d.get("output_dir")),
            manifest_path=_opt_str(d.get("manifest_path")),
            stdout_tail=_opt_str(d.get("stdout_tail")),
            stderr_tail=_opt_str(d.get("stderr_tail")),
        )


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
