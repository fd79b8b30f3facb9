"""Streamlit UI entrypoint.

Run with:
    streamlit run pdf_toolkit/ui/app.py

Sets up the page and delegates to page modules for each tab.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure repo root is on sys.path for imports.
repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

import streamlit as st

from pdf_toolkit.ui.page_modules.jobs_page import render_jobs_tab
from pdf_toolkit.ui.page_modules.operations_page import (
    render_page_images_tab,
    render_render_tab,
    render_rotate_tab,
    render_split_tab,
)
from pdf_toolkit.ui.page_modules.settings_page import render_settings_tab


def main() -> None:
    st.set_page_config(page_title="PDF Toolkit Jobs", layout="wide")
    st.title("PDF Toolkit")

    tab_render, tab_split, tab_rotate, tab_images, tab_jobs, tab_settings = st.tabs(
        ["Render", "Split", "Rotate", "Page images", "Jobs", "Settings"]
    )
    with tab_render:
        render_render_tab()
    with tab_split:
        render_split_tab()
    with tab_rotate:
        render_rotate_tab()
    with tab_images:
        render_page_images_tab()
    with tab_jobs:
        render_jobs_tab()
    with tab_settings:
        render_settings_tab()


if __name__ == "__main__":
    main()
