"""Declarative engine argument specs.

Each operation maps its RunOptions to an ordered list of (flag, value) pairs.
A string value is emitted as `flag value`, True as a bare `flag`, and
None/False drops the flag entirely, so optional flags never need conditional
pushes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from pdf_toolkit.core.contracts import (
    PageImagesOptions,
    RenderOptions,
    RotateOptions,
    RunOptions,
    SplitOptions,
)

FlagValue = Union[str, bool, None]
ArgSpec = Sequence[tuple[str, FlagValue]]


@dataclass(frozen=True)
class RunPaths:
    """Absolute paths of one run, as handed to the engine."""

    input_path: str
    out_dir: str
    manifest: str
    out_pdf: str | None = None


def verbosity_args(verbosity: str) -> list[str]:
    if verbosity == "quiet":
        return ["--quiet"]
    if verbosity == "verbose":
        return ["--verbose"]
    return []


def _positive(n: int) -> str | None:
    return str(n) if n > 0 else None


def render_spec(options: RenderOptions, paths: RunPaths) -> ArgSpec:
    return [
        ("--pdf", paths.input_path),
        ("--out_dir", paths.out_dir),
        ("--manifest", paths.manifest),
        ("--dpi", str(options.dpi)),
        ("--pages", options.pages),
        ("--overwrite", options.overwrite),
    ]


def split_spec(options: SplitOptions, paths: RunPaths) -> ArgSpec:
    ranges = options.ranges if options.strategy == "ranges" else None
    per_file = options.pages_per_file if options.strategy == "pages_per_file" else None
    return [
        ("--pdf", paths.input_path),
        ("--out_dir", paths.out_dir),
        ("--manifest", paths.manifest),
        ("--ranges", ranges or None),
        ("--pages_per_file", str(per_file) if per_file else None),
        ("--overwrite", options.overwrite),
    ]


def rotate_spec(options: RotateOptions, paths: RunPaths) -> ArgSpec:
    if paths.out_pdf is None:
        raise ValueError("rotate requires an output PDF path")
    return [
        ("--pdf", paths.input_path),
        ("--out_pdf", paths.out_pdf),
        ("--manifest", paths.manifest),
        ("--degrees", str(options.degrees)),
        ("--pages", options.pages),
    ]


def page_images_spec(options: PageImagesOptions, paths: RunPaths) -> ArgSpec:
    # outer_margin_frac and symmetry_strategy are not engine flags yet.
    return [
        ("--in_dir", paths.input_path),
        ("--out_dir", paths.out_dir),
        ("--manifest", paths.manifest),
        ("--glob", options.glob),
        ("--mode", options.mode),
        ("--gutter_trim_px", _positive(options.gutter_trim_px)),
        ("--edge_inset_px", _positive(options.edge_inset_px)),
        ("--overwrite", options.overwrite),
        ("--debug", options.debug),
    ]


def flatten(spec: ArgSpec) -> list[str]:
    out: list[str] = []
    for flag, value in spec:
        if value is None or value is False:
            continue
        if value is True:
            out.append(flag)
        else:
            out.extend([flag, value])
    return out


def operation_args(options: RunOptions, paths: RunPaths) -> list[str]:
    """Return the subcommand words followed by the operation's flags."""
    if isinstance(options, RenderOptions):
        return ["render", *flatten(render_spec(options, paths))]
    if isinstance(options, SplitOptions):
        return ["split", *flatten(split_spec(options, paths))]
    if isinstance(options, RotateOptions):
        return ["rotate", "pdf", *flatten(rotate_spec(options, paths))]
    if isinstance(options, PageImagesOptions):
        return ["page-images", *flatten(page_images_spec(options, paths))]
    raise TypeError(f"Unsupported run options: {type(options).__name__}")
