"""Config resolution: merge code defaults with user overrides.

This module provides a clean separation between:
- Code defaults in pdf_toolkit/config.py (Settings dataclass)
- User-mutable settings persisted in the host data file

The job ledger lives in the same file under `jobs`; it is never read as a
setting and settings writes never touch it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, fields, replace
from typing import Any

from pdf_toolkit.config import DEFAULT_SETTINGS, PATHS, VERBOSITY_LEVELS, Settings
from pdf_toolkit.core.data_file import DataFile

logger = logging.getLogger(__name__)

JOBS_KEY = "jobs"
SETTING_KEYS = tuple(f.name for f in fields(Settings))


def default_data_file() -> DataFile:
    return DataFile(PATHS.data_file)


def _coerce_prefix(value: Any) -> tuple[str, ...] | None:
    if isinstance(value, str):
        return tuple(s for s in (part.strip() for part in value.split(" ")) if s)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    return None


def _coerce_timeout(value: Any) -> tuple[bool, float | None]:
    if value is None or value == "":
        return True, None
    if isinstance(value, bool):
        return False, None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return False, None
    if not math.isfinite(timeout) or timeout <= 0:
        return False, None
    return True, timeout


def coerce_setting(key: str, value: Any) -> Any:
    """Validate a single setting value; raise ValueError when it is unusable."""
    if key == "cli_command":
        if not isinstance(value, str):
            raise ValueError("cli_command must be a string")
        return value.strip()
    if key == "cli_args_prefix":
        prefix = _coerce_prefix(value)
        if prefix is None:
            raise ValueError("cli_args_prefix must be a list of strings or a space-separated string")
        return prefix
    if key == "output_root":
        if not isinstance(value, str) or not value.strip():
            raise ValueError("output_root must be a non-empty string")
        return value.strip().replace("\\", "/").strip("/")
    if key == "default_verbosity":
        if value not in VERBOSITY_LEVELS:
            raise ValueError(f"default_verbosity must be one of {', '.join(VERBOSITY_LEVELS)}")
        return value
    if key == "reveal_after_success":
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
            return value.strip().lower() == "true"
        raise ValueError("reveal_after_success must be a boolean")
    if key == "engine_timeout_s":
        ok, timeout = _coerce_timeout(value)
        if not ok:
            raise ValueError("engine_timeout_s must be a positive number or empty")
        return timeout
    raise KeyError(key)


def load_settings(data_file: DataFile | None = None) -> Settings:
    """Return effective settings by merging persisted values over defaults.

    Unknown keys are ignored; invalid values fall back to the default for that
    key so a hand-edited file never blocks startup.
    """
    data = (data_file or default_data_file()).read()
    overrides: dict[str, Any] = {}
    for key in SETTING_KEYS:
        if key not in data:
            continue
        try:
            overrides[key] = coerce_setting(key, data[key])
        except ValueError as exc:
            logger.warning("Ignoring persisted setting %s: %s", key, exc)
    return replace(DEFAULT_SETTINGS, **overrides)


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    d = asdict(settings)
    d["cli_args_prefix"] = list(settings.cli_args_prefix)
    return d


def save_settings(settings: Settings, data_file: DataFile | None = None) -> None:
    """Persist settings, preserving the job ledger and any other keys."""
    (data_file or default_data_file()).merge(settings_to_dict(settings))


def update_setting(key: str, value: Any, data_file: DataFile | None = None) -> Settings:
    """Validate and persist a single setting; return the new effective settings."""
    if key not in SETTING_KEYS:
        raise KeyError(f"Unknown setting: {key}")
    df = data_file or default_data_file()
    updated = replace(load_settings(df), **{key: coerce_setting(key, value)})
    save_settings(updated, df)
    return updated
