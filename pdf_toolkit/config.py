# pdf_toolkit/config.py

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

# --- Base paths ---
# Workspace root can be overridden if needed (e.g. for tests or deployment).
# Every relative path handed to the engine resolves against it.
BASE_DIR = os.path.abspath(os.getenv("PDF_TOOLKIT_BASE_DIR", os.getcwd()))


# ---------------------------
# Structured configuration
# ---------------------------

@dataclass(frozen=True)
class PathsConfig:
    """Filesystem and path configuration.

    Values can be overridden via environment variables:
    - PDF_TOOLKIT_BASE_DIR
    - PDF_TOOLKIT_DATA_FILE
    """

    base_dir: str = field(
        default_factory=lambda: os.path.abspath(os.getenv("PDF_TOOLKIT_BASE_DIR", BASE_DIR))
    )
    data_file: str = field(
        default_factory=lambda: os.getenv(
            "PDF_TOOLKIT_DATA_FILE",
            os.path.join(
                os.path.abspath(os.getenv("PDF_TOOLKIT_BASE_DIR", BASE_DIR)),
                ".pdf-toolkit",
                "data.json",
            ),
        )
    )

    def to_abs(self, relative: str) -> str:
        if os.path.isabs(relative):
            return relative
        return os.path.join(self.base_dir, *relative.replace("\\", "/").split("/"))


@dataclass(frozen=True)
class LimitsConfig:
    """Bounds applied to persisted job state."""

    output_tail_chars: int = 20_000
    error_tail_chars: int = 2_000
    max_job_records: int = 200


VERBOSITY_LEVELS = ("quiet", "normal", "verbose")


@dataclass(frozen=True)
class Settings:
    """User-mutable settings, persisted next to the job ledger.

    `cli_command` must be configured explicitly (no PATH assumptions).
    Examples:
    - "/opt/venv/bin/pdf-toolkit"
    - "/opt/venv/bin/python" with cli_args_prefix ("-m", "pdf_toolkit_cli")
    """

    cli_command: str = ""
    cli_args_prefix: Tuple[str, ...] = ()
    output_root: str = "pdf-toolkit_Output"
    default_verbosity: str = "quiet"
    reveal_after_success: bool = True
    # None waits for the engine indefinitely.
    engine_timeout_s: Optional[float] = None


PATHS = PathsConfig()
LIMITS = LimitsConfig()
DEFAULT_SETTINGS = Settings()

# Flat aliases
OUTPUT_TAIL_LIMIT = LIMITS.output_tail_chars
ERROR_TAIL_LIMIT = LIMITS.error_tail_chars
MAX_JOB_RECORDS = LIMITS.max_job_records
