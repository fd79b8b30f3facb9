import json

import pytest

from pdf_toolkit.config import DEFAULT_SETTINGS, PathsConfig, Settings
from pdf_toolkit.core.config_resolver import (
    coerce_setting,
    load_settings,
    save_settings,
    settings_to_dict,
    update_setting,
)
from pdf_toolkit.jobs.store import JobsStore
from pdf_toolkit.jobs.types import JobRecord


def test_load_settings_defaults_when_file_missing(data_file):
    assert load_settings(data_file) == DEFAULT_SETTINGS


def test_load_settings_merges_persisted_values(data_file):
    data_file.write(
        {
            "cli_command": "/opt/venv/bin/python",
            "cli_args_prefix": ["-m", "pdf_toolkit_cli"],
            "default_verbosity": "verbose",
            "unknown_key": 1,
        }
    )

    s = load_settings(data_file)

    assert s.cli_command == "/opt/venv/bin/python"
    assert s.cli_args_prefix == ("-m", "pdf_toolkit_cli")
    assert s.default_verbosity == "verbose"
    assert s.output_root == DEFAULT_SETTINGS.output_root


def test_invalid_persisted_values_fall_back_to_defaults(data_file):
    data_file.write({"default_verbosity": "loud", "reveal_after_success": "sometimes", "engine_timeout_s": -3})

    s = load_settings(data_file)

    assert s.default_verbosity == "quiet"
    assert s.reveal_after_success is True
    assert s.engine_timeout_s is None


def test_save_settings_keeps_job_ledger(data_file):
    store = JobsStore(data_file)
    store.upsert(JobRecord(id="r1", started_at_utc="2025-01-01T00:00:00+00:00", command=("x",)))

    save_settings(Settings(cli_command="/bin/pdf-toolkit"), data_file)

    assert [j.id for j in store.load()] == ["r1"]
    assert load_settings(data_file).cli_command == "/bin/pdf-toolkit"


def test_jobs_save_keeps_settings(data_file):
    save_settings(Settings(cli_command="/bin/pdf-toolkit", output_root="exports"), data_file)

    JobsStore(data_file).save([])

    s = load_settings(data_file)
    assert s.cli_command == "/bin/pdf-toolkit"
    assert s.output_root == "exports"


def test_settings_are_persisted_as_plain_json(data_file):
    save_settings(Settings(cli_args_prefix=("-m", "cli")), data_file)

    raw = json.loads(open(data_file.path, encoding="utf-8").read())
    assert raw["cli_args_prefix"] == ["-m", "cli"]
    assert settings_to_dict(load_settings(data_file)) == raw


def test_update_setting(data_file):
    updated = update_setting("cli_args_prefix", "-m  pdf_toolkit_cli", data_file)

    assert updated.cli_args_prefix == ("-m", "pdf_toolkit_cli")
    assert load_settings(data_file).cli_args_prefix == ("-m", "pdf_toolkit_cli")


def test_update_setting_rejects_unknown_key(data_file):
    with pytest.raises(KeyError):
        update_setting("theme", "dark", data_file)


@pytest.mark.parametrize(
    "key, value, expected",
    [
        ("cli_command", "  /bin/tool  ", "/bin/tool"),
        ("output_root", "\\out\\runs\\", "out/runs"),
        ("reveal_after_success", "False", False),
        ("engine_timeout_s", "120", 120.0),
        ("engine_timeout_s", "", None),
    ],
)
def test_coerce_setting(key, value, expected):
    assert coerce_setting(key, value) == expected


@pytest.mark.parametrize(
    "key, value",
    [
        ("cli_command", 5),
        ("output_root", "  "),
        ("default_verbosity", "chatty"),
        ("engine_timeout_s", "0"),
        ("engine_timeout_s", "nan"),
        ("engine_timeout_s", True),
        ("cli_args_prefix", [1, 2]),
    ],
)
def test_coerce_setting_rejects(key, value):
    with pytest.raises(ValueError):
        coerce_setting(key, value)


def test_paths_config_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("PDF_TOOLKIT_BASE_DIR", str(tmp_path))
    monkeypatch.delenv("PDF_TOOLKIT_DATA_FILE", raising=False)

    p = PathsConfig()

    assert p.base_dir == str(tmp_path)
    assert p.data_file == str(tmp_path / ".pdf-toolkit" / "data.json")
    assert p.to_abs("out/run 1/manifest.json") == str(tmp_path / "out" / "run 1" / "manifest.json")
    assert p.to_abs(str(tmp_path / "abs.pdf")) == str(tmp_path / "abs.pdf")
