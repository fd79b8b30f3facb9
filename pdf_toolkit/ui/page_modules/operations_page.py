"""Operation tabs: one form per engine operation.

Forms only collect raw values; validation and execution happen in the
orchestrator so the CLI and UI share one code path.
"""

from __future__ import annotations

import asyncio
from typing import Any

import streamlit as st

from pdf_toolkit.config import PATHS
from pdf_toolkit.core.contracts import PAGE_IMAGES_MODES, ROTATE_DEGREES, SPLIT_STRATEGIES, SYMMETRY_STRATEGIES
from pdf_toolkit.core.run_config import (
    DEFAULT_DPI,
    DEFAULT_PAGES_PER_FILE,
    DPI_MAX,
    DPI_MIN,
    list_input_folders,
    list_workspace_pdfs,
)
from pdf_toolkit.jobs.types import JobType
from pdf_toolkit.ui.state import make_orchestrator

_SYMMETRY_LABELS = {
    "independent": "Independent",
    "match_max_width": "Match max width",
    "mirror_from_gutter": "Mirror from gutter",
}


def _build_render_raw(*, dpi: Any, pages: str, overwrite: bool) -> dict[str, Any]:
    return {"dpi": dpi, "pages": pages.strip(), "overwrite": bool(overwrite)}


def _build_split_raw(*, strategy: str, ranges: str, pages_per_file: str, overwrite: bool) -> dict[str, Any]:
    return {
        "strategy": strategy,
        "ranges": ranges.strip(),
        "pages_per_file": pages_per_file.strip(),
        "overwrite": bool(overwrite),
    }


def _build_rotate_raw(*, degrees: Any, pages: str) -> dict[str, Any]:
    return {"degrees": degrees, "pages": pages.strip()}


def _build_page_images_raw(
    *,
    in_dir: str,
    mode: str,
    glob: str,
    gutter_trim_px: str,
    edge_inset_px: str,
    outer_margin_percent: str,
    symmetry_strategy: str,
    overwrite: bool,
    debug: bool,
) -> dict[str, Any]:
    return {
        "in_dir": in_dir,
        "mode": mode,
        "glob": glob.strip(),
        "gutter_trim_px": gutter_trim_px.strip(),
        "edge_inset_px": edge_inset_px.strip(),
        "outer_margin_percent": outer_margin_percent.strip(),
        "symmetry_strategy": symmetry_strategy,
        "overwrite": bool(overwrite),
        "debug": bool(debug),
    }


def _run(job_type: JobType, raw: dict[str, Any], pdf_path: str | None = None) -> None:
    orchestrator = make_orchestrator(raw)
    with st.spinner(f"Running {job_type.value}..."):
        if job_type == JobType.RENDER:
            job = asyncio.run(orchestrator.render_pdf(pdf_path or ""))
        elif job_type == JobType.SPLIT:
            job = asyncio.run(orchestrator.split_pdf(pdf_path or ""))
        elif job_type == JobType.ROTATE:
            job = asyncio.run(orchestrator.rotate_pdf(pdf_path or ""))
        else:
            job = asyncio.run(orchestrator.page_images())
    if job is not None:
        st.caption(f"Run `{job.id}` → `{job.output_dir}`")


def _select_pdf(key: str) -> str | None:
    pdfs = list_workspace_pdfs(PATHS.base_dir)
    if not pdfs:
        st.info("No PDF files found in the workspace.")
        return None
    return st.selectbox("PDF", options=pdfs, key=key)


def render_render_tab() -> None:
    st.subheader("Render PDF to images")
    pdf = _select_pdf("render_pdf")
    with st.form("render_form"):
        dpi = st.number_input("DPI", min_value=DPI_MIN, max_value=DPI_MAX, value=DEFAULT_DPI, step=1)
        pages = st.text_input("Pages (optional)", placeholder="all", help='Examples: "1-5,8,10-"')
        overwrite = st.checkbox("Overwrite existing files")
        submitted = st.form_submit_button("Run", disabled=pdf is None)
    if submitted and pdf:
        _run(JobType.RENDER, _build_render_raw(dpi=int(dpi), pages=pages, overwrite=overwrite), pdf)


def render_split_tab() -> None:
    st.subheader("Split PDF into parts")
    pdf = _select_pdf("split_pdf")
    with st.form("split_form"):
        strategy = st.selectbox(
            "Split strategy",
            options=list(SPLIT_STRATEGIES),
            format_func=lambda s: "Ranges" if s == "ranges" else "Pages per file",
        )
        ranges = st.text_input("Ranges", help='Used when strategy is "Ranges". Example: "1-120,121-240".')
        pages_per_file = st.text_input(
            "Pages per file",
            value=str(DEFAULT_PAGES_PER_FILE),
            help='Used when strategy is "Pages per file". Must be from 1 to 10000.',
        )
        overwrite = st.checkbox("Overwrite existing files")
        submitted = st.form_submit_button("Run", disabled=pdf is None)
    if submitted and pdf:
        raw = _build_split_raw(strategy=strategy, ranges=ranges, pages_per_file=pages_per_file, overwrite=overwrite)
        _run(JobType.SPLIT, raw, pdf)


def render_rotate_tab() -> None:
    st.subheader("Rotate PDF pages")
    pdf = _select_pdf("rotate_pdf")
    with st.form("rotate_form"):
        degrees = st.selectbox("Degrees", options=list(ROTATE_DEGREES))
        pages = st.text_input("Pages (optional)", placeholder="all", help='Examples: "1-5,8,10-"')
        st.caption("Output is always written to a run-local PDF file.")
        submitted = st.form_submit_button("Run", disabled=pdf is None)
    if submitted and pdf:
        _run(JobType.ROTATE, _build_rotate_raw(degrees=degrees, pages=pages), pdf)


def render_page_images_tab() -> None:
    st.subheader("Split spreads + crop images in folder")
    folders = list_input_folders(PATHS.base_dir)
    if not folders:
        st.info("No folders are available in this workspace.")
        return

    with st.form("page_images_form"):
        in_dir = st.selectbox("Input folder", options=folders, help="Folder containing page images.")
        mode = st.selectbox(
            "Mode", options=list(PAGE_IMAGES_MODES), help="auto=split wides, split=always split, crop=never split"
        )
        glob = st.text_input("Glob pattern", value="*.png")
        gutter = st.text_input("Gutter trim (px)", value="0", help="Shave pixels on both sides of the gutter after split.")
        inset = st.text_input("Edge inset (px)", value="0", help="Inset final crop box inward to remove faint borders.")
        margin = st.text_input("Outer margin clamp (%)", value="", help="Clamp away from outer edge. Allowed: 0 to 25%.")
        symmetry = st.selectbox(
            "Symmetry strategy",
            options=list(SYMMETRY_STRATEGIES),
            format_func=lambda s: _SYMMETRY_LABELS.get(s, s),
            help="Apply after left/right crop boxes are computed.",
        )
        overwrite = st.checkbox("Overwrite existing files")
        debug = st.checkbox("Debug overlay", help="Write decision overlays to _debug inside the run output folder.")
        submitted = st.form_submit_button("Run")

    if submitted:
        raw = _build_page_images_raw(
            in_dir=in_dir,
            mode=mode,
            glob=glob,
            gutter_trim_px=gutter,
            edge_inset_px=inset,
            outer_margin_percent=margin,
            symmetry_strategy=symmetry,
            overwrite=overwrite,
            debug=debug,
        )
        _run(JobType.PAGE_IMAGES, raw)
