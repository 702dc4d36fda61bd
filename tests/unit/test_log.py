"""Unit tests for resume_rag.log level handling."""

import logging

from resume_rag import log as log_module


class TestResolveLevel:
    """Tests for level resolution."""

    def test_explicit_values(self):
        assert log_module._resolve_level("debug") == logging.DEBUG
        assert log_module._resolve_level(logging.WARNING) == logging.WARNING

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert log_module._resolve_level(None) == logging.ERROR

    def test_unknown_name_is_info(self):
        assert log_module._resolve_level("chatty") == logging.INFO


class TestFileToggle:
    """Tests for the file-handler switch."""

    def test_disabled_values(self, monkeypatch):
        for value in ("0", "false", "No"):
            monkeypatch.setenv("RESUME_RAG_LOG_FILE", value)
            assert log_module._file_logging_enabled() is False
        monkeypatch.setenv("RESUME_RAG_LOG_FILE", "1")
        assert log_module._file_logging_enabled() is True


def test_get_logger_is_named():
    assert log_module.get_logger("resume_rag.tests").name == "resume_rag.tests"
