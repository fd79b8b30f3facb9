"""Host capabilities injected into the orchestrator.

The interfaces are deliberately small so that hosts (CLI, Streamlit, tests)
can provide their own without the orchestrator importing any of them.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)

NoticeLevel = Literal["info", "success", "error"]


class OptionsPrompt(Protocol):
    async def request(self, job_type: str, *, error: Optional[str] = None) -> Optional[Mapping[str, Any]]:
        """Return raw option input for `job_type`, or None if the user abandoned.

        `error` carries the rejection reason of the previous attempt, if any.
        """


class DirectoryCreator(Protocol):
    def create(self, relative_dir: str) -> None:
        """Create a workspace-relative directory (and parents); raise OSError on failure."""


class Notifier(Protocol):
    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        """Show a short user-facing notice."""


class OutputRevealer(Protocol):
    def reveal(self, relative_path: str) -> None:
        """Reveal a workspace-relative path in the host's file browser."""


class FileOpener(Protocol):
    def open_file(self, relative_path: str) -> None:
        """Open a workspace-relative file with the host's default application."""


class ViewRefresher(Protocol):
    def refresh(self) -> None:
        """Re-render any live view of the job history."""


class StaticPrompt:
    """Prompt that answers once with fixed input.

    After a rejection it gives up (returns None) instead of asking again,
    which suits non-interactive hosts like the CLI.
    """

    def __init__(self, raw: Optional[Mapping[str, Any]]):
        self.raw = raw
        self.rejections: list[str] = []

    async def request(self, job_type: str, *, error: Optional[str] = None) -> Optional[Mapping[str, Any]]:
        if error is not None:
            self.rejections.append(error)
            return None
        return self.raw


class LocalDirectoryCreator:
    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

    def create(self, relative_dir: str) -> None:
        (self.base_dir / relative_dir).mkdir(parents=True, exist_ok=True)


class PrintNotifier:
    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        stream = sys.stderr if level == "error" else sys.stdout
        print(f"[pdf-toolkit] {message}", file=stream)


class SystemOpener:
    """Open paths with the desktop's default handler (best-effort)."""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

    def _open(self, path: Path) -> None:
        if sys.platform.startswith("win"):
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.Popen(["open", str(path)])
        else:
            subprocess.Popen(["xdg-open", str(path)])

    def reveal(self, relative_path: str) -> None:
        self._open(self.base_dir / relative_path)

    def open_file(self, relative_path: str) -> None:
        self._open(self.base_dir / relative_path)


class NullRevealer:
    def reveal(self, relative_path: str) -> None:
        logger.debug("Reveal skipped for %s", relative_path)
