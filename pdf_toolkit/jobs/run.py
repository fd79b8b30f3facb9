"""Command-line host for the job orchestrator.

Purpose:
- Run one engine operation without the Streamlit UI.
- Inspect the job ledger and edit persisted settings.

Raw options are passed through unchanged; validation happens in the same
builders the UI uses.

Exit status: 0 when the run succeeded, 1 when it failed, 2 when nothing ran.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Sequence

from pdf_toolkit.config import PATHS, PathsConfig
from pdf_toolkit.core.config_resolver import (
    SETTING_KEYS,
    load_settings,
    settings_to_dict,
    update_setting,
)
from pdf_toolkit.core.contracts import PAGE_IMAGES_MODES, SPLIT_STRATEGIES, SYMMETRY_STRATEGIES
from pdf_toolkit.core.data_file import DataFile
from pdf_toolkit.jobs.collaborators import (
    LocalDirectoryCreator,
    NullRevealer,
    PrintNotifier,
    StaticPrompt,
    SystemOpener,
)
from pdf_toolkit.jobs.orchestrator import Orchestrator
from pdf_toolkit.jobs.store import JobsStore
from pdf_toolkit.jobs.types import JobRecord, JobType

EXIT_OK, EXIT_FAILED, EXIT_NOT_RUN = 0, 1, 2


def _add_pdf_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument("--pdf", required=True, help="PDF path, absolute or relative to the workspace root.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pdf-toolkit-jobs",
        description="Run pdf-toolkit engine operations and record them in the job ledger.",
    )
    p.add_argument("--log-level", default="WARNING", help="Python logging level (default: WARNING).")
    p.add_argument("--no-reveal", action="store_true", help="Do not open the output folder after success.")
    sub = p.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render PDF pages to images.")
    _add_pdf_arg(render)
    render.add_argument("--dpi")
    render.add_argument("--pages")
    render.add_argument("--overwrite", action="store_true")

    split = sub.add_parser("split", help="Split a PDF into parts.")
    _add_pdf_arg(split)
    split.add_argument("--strategy", choices=SPLIT_STRATEGIES)
    split.add_argument("--ranges")
    split.add_argument("--pages-per-file", dest="pages_per_file")
    split.add_argument("--overwrite", action="store_true")

    rotate = sub.add_parser("rotate", help="Rotate PDF pages.")
    _add_pdf_arg(rotate)
    rotate.add_argument("--degrees")
    rotate.add_argument("--pages")

    images = sub.add_parser("page-images", help="Split spreads and crop page images in a folder.")
    images.add_argument("--in-dir", dest="in_dir", required=True)
    images.add_argument("--mode", choices=PAGE_IMAGES_MODES)
    images.add_argument("--glob")
    images.add_argument("--gutter-trim-px", dest="gutter_trim_px")
    images.add_argument("--edge-inset-px", dest="edge_inset_px")
    images.add_argument("--outer-margin-percent", dest="outer_margin_percent")
    images.add_argument("--symmetry-strategy", dest="symmetry_strategy", choices=SYMMETRY_STRATEGIES)
    images.add_argument("--overwrite", action="store_true")
    images.add_argument("--debug", action="store_true")

    jobs = sub.add_parser("jobs", help="List recent runs.")
    jobs.add_argument("--limit", type=int, default=20)

    config = sub.add_parser("config", help="Show or change persisted settings.")
    config_sub = config.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show")
    set_p = config_sub.add_parser("set")
    set_p.add_argument("key", choices=SETTING_KEYS)
    set_p.add_argument("value")

    return p


_RAW_KEYS = {
    JobType.RENDER: ("dpi", "pages", "overwrite"),
    JobType.SPLIT: ("strategy", "ranges", "pages_per_file", "overwrite"),
    JobType.ROTATE: ("degrees", "pages"),
    JobType.PAGE_IMAGES: (
        "in_dir",
        "mode",
        "glob",
        "gutter_trim_px",
        "edge_inset_px",
        "outer_margin_percent",
        "symmetry_strategy",
        "overwrite",
        "debug",
    ),
}


def raw_options(job_type: JobType, args: argparse.Namespace, paths: PathsConfig | None = None) -> dict[str, Any]:
    """Collect the raw option mapping for `job_type`, dropping unset flags."""
    raw = {k: getattr(args, k) for k in _RAW_KEYS[job_type] if getattr(args, k, None) is not None}
    if job_type == JobType.PAGE_IMAGES and "in_dir" in raw:
        raw["in_dir"] = workspace_relative(raw["in_dir"], paths)
    return raw


def workspace_relative(path: str, paths: PathsConfig | None = None) -> str:
    """Express `path` relative to the workspace root when it lies inside it."""
    paths = paths or PATHS
    if not os.path.isabs(path):
        return path.replace("\\", "/")
    try:
        rel = os.path.relpath(path, paths.base_dir)
    except ValueError:
        return path
    if rel.startswith(".."):
        return path
    return rel.replace(os.sep, "/")


def format_job_line(job: JobRecord) -> str:
    status = job.status or "running/unknown"
    exit_text = "" if job.exit_code is None else f" (exit {job.exit_code})"
    return f"{job.id}  {job.job_type or '-':<11}  {status}{exit_text}"


def _run_operation(args: argparse.Namespace, data_file: DataFile) -> int:
    job_type = JobType(args.command)
    settings = load_settings(data_file)
    notifier = PrintNotifier()
    orchestrator = Orchestrator(
        settings,
        JobsStore(data_file),
        prompt=StaticPrompt(raw_options(job_type, args)),
        directories=LocalDirectoryCreator(PATHS.base_dir),
        notifier=notifier,
        revealer=NullRevealer() if args.no_reveal else SystemOpener(PATHS.base_dir),
        paths=PATHS,
    )

    if job_type == JobType.RENDER:
        coro = orchestrator.render_pdf(workspace_relative(args.pdf))
    elif job_type == JobType.SPLIT:
        coro = orchestrator.split_pdf(workspace_relative(args.pdf))
    elif job_type == JobType.ROTATE:
        coro = orchestrator.rotate_pdf(workspace_relative(args.pdf))
    else:
        coro = orchestrator.page_images()

    job = asyncio.run(coro)
    if job is None:
        return EXIT_NOT_RUN
    print(f"[pdf-toolkit] run {job.id} -> {job.output_dir}")
    if job.error:
        print(job.error, file=sys.stderr)
    return EXIT_OK if job.status == "ok" else EXIT_FAILED


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    data_file = DataFile(PATHS.data_file)

    if args.command == "jobs":
        jobs = JobsStore(data_file).load()[: max(0, args.limit)]
        if not jobs:
            print("No runs yet.")
        for job in jobs:
            print(format_job_line(job))
        return EXIT_OK

    if args.command == "config":
        if args.config_command == "show":
            for key, value in settings_to_dict(load_settings(data_file)).items():
                print(f"{key} = {value!r}")
            return EXIT_OK
        try:
            update_setting(args.key, args.value, data_file)
        except ValueError as exc:
            print(f"[pdf-toolkit] {exc}", file=sys.stderr)
            return EXIT_NOT_RUN
        return EXIT_OK

    return _run_operation(args, data_file)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
