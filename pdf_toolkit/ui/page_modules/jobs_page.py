from __future__ import annotations

import streamlit as st

from pdf_toolkit.config import PATHS
from pdf_toolkit.jobs.collaborators import SystemOpener
from pdf_toolkit.jobs.types import JobType
from pdf_toolkit.ui.components import render_job_record
from pdf_toolkit.ui.formatting import filter_jobs, jobs_to_frame
from pdf_toolkit.ui.state import get_store


def render_jobs_tab() -> None:
    st.subheader("Recent runs")

    col_type, col_status, col_refresh = st.columns([2, 2, 1])
    with col_type:
        job_type = st.selectbox("Operation", options=["", *[t.value for t in JobType]], format_func=lambda v: v or "all")
    with col_status:
        status = st.selectbox("Status", options=["", "ok", "error", "running"], format_func=lambda v: v or "all")
    with col_refresh:
        st.button("Refresh")

    jobs = filter_jobs(get_store().load(), job_type=job_type or None, status=status or None)
    if not jobs:
        st.caption("No runs yet.")
        return

    st.dataframe(jobs_to_frame(jobs), use_container_width=True, hide_index=True)

    opener = SystemOpener(PATHS.base_dir)
    for job in jobs:
        render_job_record(st, job, base_dir=PATHS.base_dir, opener=opener)
