"""
Tests for logging setup.
"""

import logging
from pathlib import Path

from devbootstrap.core.observability.logging_config import _parse_level, setup_logging


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("WARNING") == logging.WARNING

    def test_default(self):
        assert _parse_level(None, logging.INFO) == logging.INFO
        assert _parse_level("loud", logging.INFO) == logging.INFO


class TestSetupLogging:
    def test_console_only(self):
        setup_logging(level="WARNING")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_log_file(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(level="WARNING", log_file=log_file)
        root = logging.getLogger()
        assert root.level == logging.DEBUG

        logging.getLogger("devbootstrap.test").debug("CMD apt-get update")
        for handler in root.handlers:
            handler.flush()
        assert "CMD apt-get update" in log_file.read_text()

    def test_file_level_override(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        setup_logging(level="ERROR", log_file=log_file, log_file_level="INFO")
        logging.getLogger("devbootstrap.test").debug("hidden")
        logging.getLogger("devbootstrap.test").info("shown")
        for handler in logging.getLogger().handlers:
            handler.flush()
        content = log_file.read_text()
        assert "shown" in content
        assert "hidden" not in content

    def test_reconfigure_replaces_handlers(self, tmp_path: Path):
        setup_logging(level="INFO", log_file=tmp_path / "a.log")
        setup_logging(level="INFO")
        assert len(logging.getLogger().handlers) == 1

    def test_leaves_other_loggers_alone(self):
        other = logging.getLogger("urllib3")
        other.setLevel(logging.NOTSET)
        setup_logging(level="INFO")
        assert other.level == logging.NOTSET
