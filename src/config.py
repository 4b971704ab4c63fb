import sys
from typing import Any

import yaml

from src.constants import (
    DEFAULT_CHECK_INTERVAL_MINUTES,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DOWNLOADER,
    DEFAULT_MAX_UPLOAD_SPEED,
    DEFAULT_NOTIFY_COMMAND,
    DEFAULT_USER_AGENT,
    NYAA_SEARCH_URL,
)
from src.utils import log

DEFAULT_SETTINGS: dict[str, Any] = {
    "check_interval_minutes": DEFAULT_CHECK_INTERVAL_MINUTES,
    "search_url": NYAA_SEARCH_URL,
    "user_agent": DEFAULT_USER_AGENT,
    "bypass_proxy": True,
    "request_timeout": None,
    "cookies": {"enable": False},
    "downloader": DEFAULT_DOWNLOADER,
    "downloader_path": None,
    "downloader_args": [],
    "max_upload_speed": DEFAULT_MAX_UPLOAD_SPEED,
    "fetch_torrent_file": False,
    "notify_command": DEFAULT_NOTIFY_COMMAND,
}


def load_config(path: str = DEFAULT_CONFIG_PATH) -> dict[str, Any] | None:
    """Loads the configuration from a YAML file."""
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        return None


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """
    Returns the effective settings: the `settings` section of the config file merged over the defaults.

    A missing file, an empty file or a malformed `settings` section fall back to the defaults.
    A file that is not valid YAML stops the program.
    """
    settings = dict(DEFAULT_SETTINGS)

    try:
        config_data = load_config(path)
    except yaml.YAMLError as e:
        log(f"❌ Не удалось прочитать {path}: {e}. Выход.")
        sys.exit(1)

    if not config_data:
        return settings

    file_settings = config_data.get("settings", {}) if isinstance(config_data, dict) else None
    if not isinstance(file_settings, dict):
        log(f"⚠️ Раздел 'settings' в {path} имеет неверный формат. Использую настройки по умолчанию.")
        return settings

    settings.update(file_settings)
    return settings
