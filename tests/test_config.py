from pathlib import Path

import pytest

from src.config import DEFAULT_SETTINGS, load_config, load_settings


def test_load_config_missing_file(tmp_path: Path):
    assert load_config(str(tmp_path / "config.yaml")) is None


def test_load_settings_defaults_without_file(tmp_path: Path):
    assert load_settings(str(tmp_path / "config.yaml")) == DEFAULT_SETTINGS


def test_load_settings_overrides_defaults(tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "settings:\n"
        "  check_interval_minutes: 5\n"
        "  downloader: command\n"
        "  downloader_path: transmission-cli\n"
        "  downloader_args: ['-w', '{directory}', '{torrent}']\n",
        encoding="utf-8",
    )

    settings = load_settings(str(config_path))

    assert settings["check_interval_minutes"] == 5
    assert settings["downloader"] == "command"
    assert settings["downloader_args"] == ["-w", "{directory}", "{torrent}"]
    assert settings["max_upload_speed"] == DEFAULT_SETTINGS["max_upload_speed"]


def test_load_settings_ignores_malformed_section(tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("settings:\n  - downloader\n", encoding="utf-8")

    assert load_settings(str(config_path)) == DEFAULT_SETTINGS


def test_load_settings_invalid_yaml_exits(tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("settings: [unclosed\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        load_settings(str(config_path))
    assert exc_info.value.code == 1
