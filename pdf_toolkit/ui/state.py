"""UI state management for the Streamlit app.

Provides the Streamlit-backed collaborators and a process-wide operation
guard shared by every browser session.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import streamlit as st

from pdf_toolkit.config import PATHS
from pdf_toolkit.core.config_resolver import default_data_file, load_settings
from pdf_toolkit.jobs.collaborators import LocalDirectoryCreator, NoticeLevel, StaticPrompt, SystemOpener
from pdf_toolkit.jobs.orchestrator import OperationGuard, Orchestrator
from pdf_toolkit.jobs.store import JobsStore

JOBS_VERSION_KEY = "jobs_version"


class StreamlitNotifier:
    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        if level == "success":
            st.success(message)
        elif level == "error":
            st.error(message)
        else:
            st.info(message)


class SessionViewRefresher:
    """Bumps a session counter so the Jobs tab reloads the ledger."""

    def refresh(self) -> None:
        st.session_state[JOBS_VERSION_KEY] = int(st.session_state.get(JOBS_VERSION_KEY, 0)) + 1


@st.cache_resource
def get_operation_guard() -> OperationGuard:
    return OperationGuard()


def get_store() -> JobsStore:
    return JobsStore(default_data_file())


def make_orchestrator(raw: Optional[Mapping[str, Any]]) -> Orchestrator:
    """Build an orchestrator for one form submission.

    Settings are re-read on every submission so edits in the Settings tab
    apply immediately.
    """
    return Orchestrator(
        load_settings(default_data_file()),
        get_store(),
        prompt=StaticPrompt(raw),
        directories=LocalDirectoryCreator(PATHS.base_dir),
        notifier=StreamlitNotifier(),
        revealer=SystemOpener(PATHS.base_dir),
        views=[SessionViewRefresher()],
        guard=get_operation_guard(),
    )
