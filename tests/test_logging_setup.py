"""Tests for the logging bootstrap."""

import logging

import pytest

import chat_settings.io.logging_setup as logging_setup


@pytest.fixture
def fresh_runtime(monkeypatch, tmp_path):
    monkeypatch.setattr(logging_setup, "_RUNTIME", None)
    monkeypatch.setenv("CHAT_SETTINGS_LOG_DIR", str(tmp_path))
    monkeypatch.delenv("CHAT_SETTINGS_LOG_FILE", raising=False)
    logger = logging.getLogger("chat_settings")
    saved = (logger.level, logger.propagate, list(logger.handlers))
    yield tmp_path
    for handler in logger.handlers:
        handler.close()
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    logger.handlers[:] = saved[2]
    logging.captureWarnings(False)


def test_configure_writes_file_in_log_dir(fresh_runtime, monkeypatch):
    monkeypatch.setenv("CHAT_SETTINGS_LOG_LEVEL", "debug")
    runtime = logging_setup.configure()
    assert runtime.level == logging.DEBUG
    assert runtime.level_name == "DEBUG"
    assert runtime.file_path.startswith(str(fresh_runtime))
    logging.getLogger("chat_settings.test").debug("hello file")
    for handler in logging.getLogger("chat_settings").handlers:
        handler.flush()
    with open(runtime.file_path, encoding="utf-8") as f:
        assert "hello file" in f.read()


def test_configure_is_idempotent(fresh_runtime):
    first = logging_setup.configure()
    assert logging_setup.configure() is first
    assert logging_setup.get_runtime() is first
    assert len(logging.getLogger("chat_settings").handlers) == 2


def test_bad_level_falls_back_to_info(fresh_runtime, monkeypatch):
    monkeypatch.setenv("CHAT_SETTINGS_LOG_LEVEL", "chatty")
    assert logging_setup.configure().level == logging.INFO


def test_explicit_log_file(fresh_runtime, monkeypatch):
    target = fresh_runtime / "sub" / "explicit.log"
    monkeypatch.setenv("CHAT_SETTINGS_LOG_FILE", str(target))
    assert logging_setup.configure().file_path == str(target)
    assert target.parent.is_dir()


def test_stream_handler_stays_quiet_below_warning(fresh_runtime):
    logging_setup.configure()
    stream = [h for h in logging.getLogger("chat_settings").handlers if type(h) is logging.StreamHandler]
    assert stream[0].level == logging.WARNING
