"""Per-operation job lifecycle.

created -> running -> {ok | error}

For every operation the orchestrator collects validated options, allocates a
run id and output folder, persists a "running" record, executes the engine,
persists the finished record under the same id, then notifies the host.
Every failure ends the current run only; the orchestrator stays ready for the
next one.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Iterator, Mapping, Optional, Sequence

from pdf_toolkit.config import PATHS, PathsConfig, Settings
from pdf_toolkit.core.contracts import RotateOptions, RunOptions
from pdf_toolkit.core.run_config import (
    OptionsError,
    build_page_images_options,
    build_render_options,
    build_rotate_options,
    build_split_options,
)
from pdf_toolkit.jobs.arguments import RunPaths, operation_args, verbosity_args
from pdf_toolkit.jobs.collaborators import (
    DirectoryCreator,
    Notifier,
    OptionsPrompt,
    OutputRevealer,
    ViewRefresher,
)
from pdf_toolkit.jobs.runner import RunResult, run_engine
from pdf_toolkit.jobs.store import JobsStore, error_excerpt, make_run_id, tail_text, utc_now_iso
from pdf_toolkit.jobs.types import Failed, JobRecord, JobType, Succeeded

logger = logging.getLogger(__name__)

EngineRunner = Callable[..., Awaitable[RunResult]]
Builder = Callable[[Optional[Mapping[str, Any]]], Optional[RunOptions]]

_BUILDERS: dict[JobType, Builder] = {
    JobType.RENDER: build_render_options,
    JobType.SPLIT: build_split_options,
    JobType.ROTATE: build_rotate_options,
    JobType.PAGE_IMAGES: build_page_images_options,
}

_LABELS = {
    JobType.RENDER: "Render",
    JobType.SPLIT: "Split",
    JobType.ROTATE: "Rotate",
    JobType.PAGE_IMAGES: "Page image processing",
}


class OperationBusy(RuntimeError):
    """An exclusive operation is already in flight."""


class OperationGuard:
    """In-flight flags keyed by operation kind.

    Acquire with `hold()`; the flag is released on every exit path, including
    exceptions and cancellation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._held: set[JobType] = set()

    def is_held(self, kind: JobType) -> bool:
        with self._lock:
            return kind in self._held

    @contextmanager
    def hold(self, kind: JobType) -> Iterator[None]:
        with self._lock:
            if kind in self._held:
                raise OperationBusy(kind.value)
            self._held.add(kind)
        try:
            yield
        finally:
            with self._lock:
                self._held.discard(kind)


class Orchestrator:
    def __init__(
        self,
        settings: Settings,
        store: JobsStore,
        *,
        prompt: OptionsPrompt,
        directories: DirectoryCreator,
        notifier: Notifier,
        revealer: OutputRevealer,
        views: Sequence[ViewRefresher] = (),
        runner: EngineRunner = run_engine,
        paths: PathsConfig = PATHS,
        guard: OperationGuard | None = None,
    ):
        self.settings = settings
        self.store = store
        self.prompt = prompt
        self.directories = directories
        self.notifier = notifier
        self.revealer = revealer
        self.views = list(views)
        self.runner = runner
        self.paths = paths
        self.guard = guard or OperationGuard()

    # ---- public operations ----

    async def render_pdf(self, pdf_path: str) -> JobRecord | None:
        return await self._run_pdf_operation(JobType.RENDER, pdf_path)

    async def split_pdf(self, pdf_path: str) -> JobRecord | None:
        return await self._run_pdf_operation(JobType.SPLIT, pdf_path)

    async def rotate_pdf(self, pdf_path: str) -> JobRecord | None:
        return await self._run_pdf_operation(JobType.ROTATE, pdf_path)

    async def page_images(self) -> JobRecord | None:
        if not self._ensure_cli_configured():
            return None
        try:
            with self.guard.hold(JobType.PAGE_IMAGES):
                options = await self._collect_options(JobType.PAGE_IMAGES)
                if options is None:
                    return None
                return await self._execute(JobType.PAGE_IMAGES, options, options.in_dir)
        except OperationBusy:
            self.notifier.notify("Page-images flow is already running.", "error")
            return None

    # ---- lifecycle steps ----

    async def _run_pdf_operation(self, kind: JobType, pdf_path: str) -> JobRecord | None:
        if not self._ensure_cli_configured():
            return None
        if not pdf_path or not pdf_path.lower().endswith(".pdf"):
            self.notifier.notify("Open a PDF file first.", "error")
            return None
        options = await self._collect_options(kind)
        if options is None:
            return None
        return await self._execute(kind, options, pdf_path.replace("\\", "/"))

    def _ensure_cli_configured(self) -> bool:
        if not self.settings.cli_command.strip():
            self.notifier.notify("Set the CLI command path in settings first.", "error")
            return False
        return True

    async def _collect_options(self, kind: JobType) -> RunOptions | None:
        error: str | None = None
        while True:
            try:
                raw = await self.prompt.request(kind.value, error=error)
            except Exception:  # noqa: BLE001
                logger.exception("Options prompt for %s failed", kind.value)
                self.notifier.notify(f"Could not open {kind.value} options.", "error")
                return None
            try:
                return _BUILDERS[kind](raw)
            except OptionsError as exc:
                error = str(exc)
                self.notifier.notify(error, "error")

    def _run_output_dir(self, run_id: str) -> str:
        return str(PurePosixPath(self.settings.output_root) / run_id)

    def build_command(self, options: RunOptions, paths: RunPaths) -> list[str]:
        return [
            self.settings.cli_command,
            *self.settings.cli_args_prefix,
            *verbosity_args(self.settings.default_verbosity),
            *operation_args(options, paths),
        ]

    async def _execute(self, kind: JobType, options: RunOptions, input_path: str) -> JobRecord | None:
        run_id = make_run_id()
        out_dir = self._run_output_dir(run_id)
        manifest = f"{out_dir}/manifest.json"
        out_pdf = None
        if isinstance(options, RotateOptions):
            out_pdf = f"{out_dir}/{PurePosixPath(input_path).stem}.rotated.pdf"

        try:
            self.directories.create(out_dir)
        except OSError as exc:
            logger.error("Could not create output folder %s: %s", out_dir, exc)
            self.notifier.notify("Could not create output folder.", "error")
            return None

        to_abs = self.paths.to_abs
        command = self.build_command(
            options,
            RunPaths(
                input_path=to_abs(input_path),
                out_dir=to_abs(out_dir),
                manifest=to_abs(manifest),
                out_pdf=to_abs(out_pdf) if out_pdf else None,
            ),
        )

        job = JobRecord(
            id=run_id,
            job_type=kind.value,
            started_at_utc=utc_now_iso(),
            command=tuple(command),
            input_path=input_path,
            output_dir=out_dir,
            manifest_path=manifest,
        )
        self._record_job(job)

        logger.info("Starting %s run %s", kind.value, run_id)
        try:
            result = await self.runner(
                command[0],
                command[1:],
                self.paths.base_dir,
                timeout=self.settings.engine_timeout_s,
            )
        except Exception:  # noqa: BLE001
            logger.exception("Engine run %s could not complete", run_id)
            result = RunResult(exit_code=None, stdout="", stderr="")
        job = self._finish(job, result)
        self._record_job(job)
        logger.info("Run %s finished: %s (exit %s)", run_id, job.status, job.exit_code)

        label = _LABELS[kind]
        if isinstance(job.outcome, Succeeded):
            self.notifier.notify(f"{label} complete.", "success")
            if self.settings.reveal_after_success and job.output_dir:
                self._reveal(job.output_dir)
        else:
            self.notifier.notify(f"{label} failed (see Jobs).", "error")
        return job

    def _finish(self, job: JobRecord, result: RunResult) -> JobRecord:
        outcome = Succeeded() if result.exit_code == 0 else Failed(error_excerpt(result.stderr))
        return replace(
            job,
            ended_at_utc=utc_now_iso(),
            exit_code=result.exit_code,
            stdout_tail=tail_text(result.stdout),
            stderr_tail=tail_text(result.stderr),
            outcome=outcome,
        )

    def _record_job(self, job: JobRecord) -> None:
        try:
            self.store.upsert(job)
        except OSError:
            logger.exception("Failed to record job %s", job.id)

        for view in self.views:
            try:
                view.refresh()
            except Exception:  # noqa: BLE001
                logger.exception("Failed to refresh jobs view")

    def _reveal(self, out_dir: str) -> None:
        try:
            self.revealer.reveal(out_dir)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to reveal output folder %s", out_dir)

