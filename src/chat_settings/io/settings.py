"""Local storage for chat-settings: one JSON object on disk.

The file lives at $XDG_CONFIG_HOME/chat-settings/settings.json (or wherever
CHAT_SETTINGS_CONFIG points). Only StorageKeys are read or written; anything
else in the file is preserved untouched.

This module is a STABLE BOUNDARY.
Import as: import chat_settings.io.settings
"""

import json
import os
import tempfile
from enum import Enum
from pathlib import Path


class StorageKeys(str, Enum):
    USER_TOKEN = "user_token"
    APP_LANGUAGE = "app_language"


def get_config_path() -> Path:
    override = os.environ.get("CHAT_SETTINGS_CONFIG")
    if override:
        return Path(override).expanduser()
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(config_home) / "chat-settings" / "settings.json"


def load_settings() -> dict:
    """Read the whole file. Missing, unreadable or non-object content reads as {}."""
    # [LAW:dataflow-not-control-flow] {} is the "nothing stored" value; callers never branch on I/O errors.
    try:
        raw = get_config_path().read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_settings(data: dict) -> None:
    """Replace the file contents atomically (temp file in the same dir, then rename)."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".settings-", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2, sort_keys=True) + "\n")
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def get_storage_string(key: StorageKeys, default: str | None = None) -> str | None:
    """Stored string for key; non-string values count as absent."""
    value = load_settings().get(key.value)
    if isinstance(value, str):
        return value
    return default


def set_storage_string(key: StorageKeys, value: str) -> None:
    data = load_settings()
    data[key.value] = value
    save_settings(data)


def remove_storage_key(key: StorageKeys) -> None:
    """Forget key. A no-op (no write) when it is not stored."""
    data = load_settings()
    if data.pop(key.value, None) is not None:
        save_settings(data)
