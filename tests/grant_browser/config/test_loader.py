from __future__ import annotations

import json

import pytest

from grant_browser.config.loader import CONFIG_ENV, load_settings
from grant_browser.core.exceptions import ConfigError


def _write_config(root, payload) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "global.json").write_text(json.dumps(payload))


def test_load_settings_resolves_relative_paths(tmp_path):
    config_root = tmp_path / "config"
    _write_config(
        config_root,
        {
            "ui_title": "Test Grants",
            "data_file": "data/grants.csv",
            "debounce_delay": 0.1,
            "poll_interval_ms": 500,
        },
    )

    settings = load_settings(config_root)

    assert settings.ui_title == "Test Grants"
    assert settings.data_file == (config_root / "data" / "grants.csv").resolve()
    assert settings.debounce_delay == 0.1
    assert settings.poll_interval_ms == 500
    assert settings.paint_delay == 0.05


def test_load_settings_defaults_from_env(tmp_path, monkeypatch):
    _write_config(tmp_path, {})
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path))

    settings = load_settings()

    assert settings.config_root == tmp_path
    assert settings.data_file is None
    assert settings.debounce_delay == 0.3


def test_missing_global_json_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path)


@pytest.mark.parametrize(
    "payload",
    [
        {"debounce_delay": "fast"},
        {"paint_delay": -1},
        {"poll_interval_ms": 10},
        {"graph_width": True},
    ],
)
def test_bad_values_raise(tmp_path, payload):
    _write_config(tmp_path, payload)
    with pytest.raises(ConfigError):
        load_settings(tmp_path)


def test_invalid_json_raises(tmp_path):
    (tmp_path / "global.json").write_text("{")
    with pytest.raises(ConfigError):
        load_settings(tmp_path)
