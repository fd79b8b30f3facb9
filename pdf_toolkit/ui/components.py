"""Reusable UI components for the job ledger.

Components are stateless: they take data (and the Streamlit module) and
render it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pdf_toolkit.jobs.types import JobRecord
from pdf_toolkit.ui.formatting import format_timestamp, status_label


def render_status_badge(st, job: JobRecord) -> None:
    label = status_label(job)
    if job.status == "ok":
        st.success(label)
    elif job.status == "error":
        st.error(label)
    else:
        st.info(label)


def read_manifest(base_dir: str, job: JobRecord) -> Any | None:
    """Return the parsed manifest of a run, or None if absent/unreadable."""
    if not job.manifest_path:
        return None
    path = Path(base_dir) / job.manifest_path
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None


def render_job_record(st, job: JobRecord, *, base_dir: str, opener=None) -> None:
    """Render one ledger entry: status, error, command, output tails, actions."""
    with st.container(border=True):
        st.code(job.id, language=None)
        render_status_badge(st, job)

        col_op, col_started, col_ended = st.columns(3)
        with col_op:
            st.caption("Operation")
            st.text(job.job_type or "-")
        with col_started:
            st.caption("Started")
            st.text(format_timestamp(job.started_at_utc) or "-")
        with col_ended:
            st.caption("Finished")
            st.text(format_timestamp(job.ended_at_utc) or "-")

        if job.error:
            st.error(job.error)

        st.caption("Command")
        st.code(" ".join(job.command), language=None)

        if job.stdout_tail is not None:
            with st.expander("stdout (tail)"):
                st.code(job.stdout_tail or "(empty)", language=None)
        if job.stderr_tail is not None:
            with st.expander("stderr (tail)"):
                st.code(job.stderr_tail or "(empty)", language=None)

        col_manifest, col_reveal = st.columns(2)
        with col_manifest:
            if job.manifest_path and st.button("Open manifest", key=f"manifest_{job.id}"):
                manifest = read_manifest(base_dir, job)
                if manifest is None:
                    st.warning("Manifest not found.")
                else:
                    st.json(manifest)
        with col_reveal:
            if job.output_dir and opener is not None and st.button("Reveal output folder", key=f"reveal_{job.id}"):
                try:
                    opener.reveal(job.output_dir)
                except OSError as exc:
                    st.warning(f"Could not open folder: {exc}")
