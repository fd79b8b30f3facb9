from __future__ import annotations

from dataclasses import replace
from typing import Any

import streamlit as st

from pdf_toolkit.config import VERBOSITY_LEVELS, Settings
from pdf_toolkit.core.config_resolver import coerce_setting, default_data_file, load_settings, save_settings


def _settings_from_form(current: Settings, form: dict[str, Any]) -> Settings:
    """Validate raw form values into Settings; raises ValueError on the first bad value."""
    return replace(current, **{key: coerce_setting(key, value) for key, value in form.items()})


def render_settings_tab() -> None:
    st.subheader("Settings")
    data_file = default_data_file()
    current = load_settings(data_file)

    with st.form("settings_form"):
        cli_command = st.text_input(
            "CLI command",
            value=current.cli_command,
            help='Full path is recommended. Example: "/opt/venv/bin/pdf-toolkit" or ".../python".',
        )
        prefix = st.text_input(
            "CLI args prefix",
            value=" ".join(current.cli_args_prefix),
            help='Optional prefix args (e.g. to use a python module: "-m pdf_toolkit_cli"). Space-separated.',
        )
        output_root = st.text_input(
            "Output root folder (workspace-relative)",
            value=current.output_root,
            help="Where runs are written inside the workspace.",
        )
        verbosity = st.selectbox(
            "Default verbosity",
            options=list(VERBOSITY_LEVELS),
            index=list(VERBOSITY_LEVELS).index(current.default_verbosity),
            help="Controls console logging from the CLI.",
        )
        reveal = st.checkbox("Reveal output folder after success", value=current.reveal_after_success)
        timeout = st.text_input(
            "Engine timeout (seconds)",
            value="" if current.engine_timeout_s is None else str(current.engine_timeout_s),
            help="Leave empty to wait for the engine indefinitely.",
        )
        submitted = st.form_submit_button("Save")

    if submitted:
        try:
            updated = _settings_from_form(
                current,
                {
                    "cli_command": cli_command,
                    "cli_args_prefix": prefix,
                    "output_root": output_root,
                    "default_verbosity": verbosity,
                    "reveal_after_success": reveal,
                    "engine_timeout_s": timeout.strip(),
                },
            )
        except ValueError as exc:
            st.error(str(exc))
            return
        save_settings(updated, data_file)
        st.success("Settings saved.")
