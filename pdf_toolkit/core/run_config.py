"""Run option builders.

Each builder turns a raw, unchecked mapping (as produced by a form, the CLI or
an API payload) into one frozen RunOptions value, or rejects it with
OptionsError carrying a user-facing reason. The first violated constraint
wins.

A raw value of None means the user abandoned the interaction; builders return
None for it so callers can tell "cancelled" apart from "rejected".
"""

from __future__ import annotations

import math
import os
import re
from pathlib import Path
from typing import Any, Mapping

from pdf_toolkit.core.contracts import (
    PAGE_IMAGES_MODES,
    ROTATE_DEGREES,
    SPLIT_STRATEGIES,
    SYMMETRY_STRATEGIES,
    PageImagesOptions,
    RenderOptions,
    RotateOptions,
    SplitOptions,
)

DPI_MIN, DPI_MAX = 36, 1200
DEFAULT_DPI = 200
PAGES_PER_FILE_MIN, PAGES_PER_FILE_MAX = 1, 10_000
DEFAULT_PAGES_PER_FILE = 120
OUTER_MARGIN_PERCENT_MAX = 25.0

_INT_RE = re.compile(r"^[+-]?\d+$")
_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class OptionsError(ValueError):
    """Raw run options failed validation; str(exc) is shown to the user."""


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_int(value: Any, *, label: str, default: int | None = None) -> int:
    if _is_blank(value):
        if default is None:
            raise OptionsError(f"{label} is required.")
        return default
    if isinstance(value, bool):
        raise OptionsError(f"{label} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value.strip()):
        return int(value.strip())
    raise OptionsError(f"{label} must be an integer.")


def parse_number(value: Any, *, label: str, default: float | None = None) -> float:
    if _is_blank(value):
        if default is None:
            raise OptionsError(f"{label} is required.")
        return default
    if isinstance(value, bool):
        raise OptionsError(f"{label} must be a number.")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise OptionsError(f"{label} must be a number.") from None
    if not math.isfinite(number):
        raise OptionsError(f"{label} must be a finite number.")
    return number


def parse_bool(value: Any, *, label: str, default: bool = False) -> bool:
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    raise OptionsError(f"{label} must be true or false.")


def parse_choice(value: Any, *, label: str, choices: tuple[str, ...], default: str) -> str:
    if _is_blank(value):
        return default
    v = str(value).strip()
    if v not in choices:
        raise OptionsError(f"{label} must be one of: {', '.join(choices)}.")
    return v


def parse_optional_text(value: Any) -> str | None:
    if _is_blank(value):
        return None
    return str(value).strip()


def is_hidden_or_system_folder(path: str) -> bool:
    return any(segment.startswith(".") for segment in path.replace("\\", "/").split("/"))


def list_input_folders(root: str | Path) -> list[str]:
    """Return workspace-relative folders eligible as page-images input.

    Hidden/system-style folders (any segment starting with ".") and
    everything below them are excluded.
    """
    root = Path(root)
    out: list[str] = []
    for dirpath, dirnames, _filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        rel = Path(dirpath).relative_to(root).as_posix()
        if rel != ".":
            out.append(rel)
    return sorted(out)


def list_workspace_pdfs(root: str | Path) -> list[str]:
    """Return workspace-relative PDF files outside hidden folders."""
    root = Path(root)
    out: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for name in filenames:
            if name.lower().endswith(".pdf") and not name.startswith("."):
                out.append((Path(dirpath) / name).relative_to(root).as_posix())
    return sorted(out)


def build_render_options(raw: Mapping[str, Any] | None) -> RenderOptions | None:
    if raw is None:
        return None
    dpi = parse_int(raw.get("dpi"), label="DPI", default=DEFAULT_DPI)
    if dpi < DPI_MIN or dpi > DPI_MAX:
        raise OptionsError(f"DPI must be an integer from {DPI_MIN} to {DPI_MAX}.")
    return RenderOptions(
        dpi=dpi,
        pages=parse_optional_text(raw.get("pages")),
        overwrite=parse_bool(raw.get("overwrite"), label="Overwrite"),
    )


def build_split_options(raw: Mapping[str, Any] | None) -> SplitOptions | None:
    if raw is None:
        return None
    strategy = parse_choice(
        raw.get("strategy"), label="Split strategy", choices=SPLIT_STRATEGIES, default="ranges"
    )
    overwrite = parse_bool(raw.get("overwrite"), label="Overwrite")

    if strategy == "ranges":
        ranges = parse_optional_text(raw.get("ranges"))
        if not ranges:
            raise OptionsError("Ranges is required when split strategy is Ranges.")
        return SplitOptions(strategy="ranges", ranges=ranges, overwrite=overwrite)

    try:
        pages_per_file = parse_int(
            raw.get("pages_per_file"), label="Pages per file", default=DEFAULT_PAGES_PER_FILE
        )
    except OptionsError:
        pages_per_file = None
    if (
        pages_per_file is None
        or pages_per_file < PAGES_PER_FILE_MIN
        or pages_per_file > PAGES_PER_FILE_MAX
    ):
        raise OptionsError(
            f"Pages per file must be an integer from {PAGES_PER_FILE_MIN} to {PAGES_PER_FILE_MAX}."
        )
    return SplitOptions(strategy="pages_per_file", pages_per_file=pages_per_file, overwrite=overwrite)


def build_rotate_options(raw: Mapping[str, Any] | None) -> RotateOptions | None:
    if raw is None:
        return None
    try:
        degrees = parse_int(raw.get("degrees"), label="Degrees", default=ROTATE_DEGREES[0])
    except OptionsError:
        degrees = None
    if degrees not in ROTATE_DEGREES:
        raise OptionsError("Degrees must be one of 90, 180 or 270.")
    return RotateOptions(degrees=degrees, pages=parse_optional_text(raw.get("pages")))


def build_page_images_options(raw: Mapping[str, Any] | None) -> PageImagesOptions | None:
    if raw is None:
        return None

    in_dir = parse_optional_text(raw.get("in_dir"))
    if not in_dir:
        raise OptionsError("Input folder is required.")
    in_dir = in_dir.replace("\\", "/").strip("/")
    if not in_dir or is_hidden_or_system_folder(in_dir):
        raise OptionsError("Input folder must not be a hidden or system folder.")

    mode = parse_choice(raw.get("mode"), label="Mode", choices=PAGE_IMAGES_MODES, default="auto")

    glob = "*.png" if raw.get("glob") is None else str(raw.get("glob")).strip()
    if not glob:
        raise OptionsError("Glob pattern cannot be empty.")

    gutter_trim_px = _non_negative_int(raw.get("gutter_trim_px"), "Gutter trim (px)")
    edge_inset_px = _non_negative_int(raw.get("edge_inset_px"), "Edge inset (px)")

    try:
        percent = parse_number(raw.get("outer_margin_percent"), label="Outer margin", default=0.0)
    except OptionsError:
        percent = math.nan
    if not math.isfinite(percent) or percent < 0 or percent > OUTER_MARGIN_PERCENT_MAX:
        raise OptionsError("Outer margin clamp (%) must be a number from 0 to 25.")

    symmetry_strategy = parse_choice(
        raw.get("symmetry_strategy"),
        label="Symmetry strategy",
        choices=SYMMETRY_STRATEGIES,
        default="independent",
    )

    return PageImagesOptions(
        in_dir=in_dir,
        mode=mode,  # type: ignore[arg-type]
        glob=glob,
        gutter_trim_px=gutter_trim_px,
        edge_inset_px=edge_inset_px,
        outer_margin_frac=percent / 100,
        symmetry_strategy=symmetry_strategy,  # type: ignore[arg-type]
        overwrite=parse_bool(raw.get("overwrite"), label="Overwrite"),
        debug=parse_bool(raw.get("debug"), label="Debug overlay"),
    )


def _non_negative_int(value: Any, label: str) -> int:
    try:
        n = parse_int(value, label=label, default=0)
    except OptionsError:
        n = -1
    if n < 0:
        raise OptionsError(f"{label} must be an integer >= 0.")
    return n
