"""Logging bootstrap for chat-settings.

Everything under the `chat_settings` logger goes to a per-run rotating file.
The terminal belongs to the TUI, so stderr only receives warnings and errors.

Environment:
    CHAT_SETTINGS_LOG_LEVEL  level name, default INFO
    CHAT_SETTINGS_LOG_DIR    directory for per-run files
    CHAT_SETTINGS_LOG_FILE   explicit file path (wins over the directory)

// [LAW:single-enforcer] Handler wiring for the chat_settings logger happens here only.
// [LAW:one-source-of-truth] The resolved level and file path are returned as LoggingRuntime.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Mapping
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "chat_settings"
DEFAULT_LOG_DIR = "~/.local/share/chat-settings/logs"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3


@dataclass(frozen=True)
class LoggingRuntime:
    level_name: str
    level: int
    file_path: str


_RUNTIME: LoggingRuntime | None = None


def _resolve_level(raw: str | None) -> int:
    level = logging.getLevelName(str(raw or "INFO").strip().upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def _resolve_file(env: Mapping[str, str]) -> Path:
    explicit = env.get("CHAT_SETTINGS_LOG_FILE")
    if explicit:
        return Path(explicit).expanduser()
    log_dir = Path(env.get("CHAT_SETTINGS_LOG_DIR") or DEFAULT_LOG_DIR).expanduser()
    stamp = time.strftime("%Y%m%d-%H%M%S", time.gmtime())
    return log_dir / "chat-settings-{}-{}.log".format(stamp, os.getpid())


def _handlers(level: int, file_path: Path) -> list[logging.Handler]:
    terminal = logging.StreamHandler()
    terminal.setLevel(max(level, logging.WARNING))
    terminal.setFormatter(logging.Formatter("chat-settings: %(levelname)s %(message)s"))

    disk = RotatingFileHandler(
        file_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    disk.setLevel(level)
    disk.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return [terminal, disk]


def configure() -> LoggingRuntime:
    """Wire the chat_settings logger once; later calls return the same runtime."""
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level = _resolve_level(os.environ.get("CHAT_SETTINGS_LOG_LEVEL"))
    file_path = _resolve_file(os.environ)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in _handlers(level, file_path):
        logger.addHandler(handler)
    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(
        level_name=logging.getLevelName(level),
        level=level,
        file_path=str(file_path),
    )
    logger.debug("logging configured: level=%s file=%s", _RUNTIME.level_name, file_path)
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    return _RUNTIME
