"""
Tests for logging setup — level resolution and handlers.
"""

import logging
from pathlib import Path

import pytest

from devpack.core.observability.logging_config import (
    ENV_LOG_LEVEL,
    _parse_level,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestResolveLevel:
    def test_precedence(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "INFO")
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"
        assert resolve_level() == "INFO"

    def test_default(self):
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "devpack.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("devpack.test").debug("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()

    def test_bad_level_falls_back(self):
        assert _parse_level("LOUD") == logging.WARNING
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("error") == logging.ERROR
