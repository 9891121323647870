"""
Tests for logging configuration.
"""

import logging
from pathlib import Path

import pytest

from nativebuild.core.observability.logging_config import resolve_level, setup_logging

pytestmark = pytest.mark.usefixtures("isolated_logging")


class TestResolveLevel:
    def test_flags_take_precedence(self):
        env = {"NBUILD_LOG_LEVEL": "ERROR"}
        assert resolve_level(debug=True, environ=env) == "DEBUG"
        assert resolve_level(verbose=True, environ=env) == "INFO"
        assert resolve_level(quiet=True, environ={}) == "ERROR"

    def test_env_var(self):
        assert resolve_level(environ={"NBUILD_LOG_LEVEL": "INFO"}) == "INFO"

    def test_default(self):
        assert resolve_level(environ={}) == "WARNING"


class TestSetupLogging:
    def test_console_level(self, isolated_logging):
        setup_logging("INFO")
        assert isolated_logging.level == logging.INFO
        assert len(isolated_logging.handlers) == 1

    def test_unknown_level_is_warning(self, isolated_logging):
        setup_logging("CHATTY")
        assert isolated_logging.level == logging.WARNING

    def test_file_handler_lowers_root_level(self, isolated_logging, tmp_path: Path):
        log_file = tmp_path / "build.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        assert isolated_logging.level == logging.DEBUG

        logging.getLogger("nativebuild.test").debug("configure step details")
        for handler in isolated_logging.handlers:
            handler.flush()
        assert "configure step details" in log_file.read_text()

    def test_repeat_setup_replaces_handlers(self, isolated_logging):
        setup_logging("WARNING")
        setup_logging("DEBUG")
        assert len(isolated_logging.handlers) == 1
