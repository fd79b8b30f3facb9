"""Pytest configuration to make the project root importable as a package.

This ensures that ``import pdf_toolkit`` and ``import api`` work when tests
are run from the repository root or other locations. Also provides an
isolated workspace + data file per test.
"""

import os
import sys
from pathlib import Path

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from pdf_toolkit.config import PathsConfig  # noqa: E402
from pdf_toolkit.core.data_file import DataFile  # noqa: E402
from pdf_toolkit.jobs.store import JobsStore  # noqa: E402

FAKE_ENGINE = str(Path(__file__).with_name("fake_engine.py"))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def paths(workspace: Path) -> PathsConfig:
    return PathsConfig(base_dir=str(workspace), data_file=str(workspace / ".pdf-toolkit" / "data.json"))


@pytest.fixture
def data_file(paths: PathsConfig) -> DataFile:
    return DataFile(paths.data_file)


@pytest.fixture
def store(data_file: DataFile) -> JobsStore:
    return JobsStore(data_file)


@pytest.fixture
def fake_engine() -> str:
    return FAKE_ENGINE
