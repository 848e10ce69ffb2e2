"""Unit tests for the run log setup."""

import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest
from dockstrap.core.logs import LOGGER_NAME, log_file_name, setup_logging, teardown_logging

NOW = datetime(2025, 1, 20, 10, 30, 45)


@pytest.fixture(autouse=True)
def clean_handlers() -> Iterator[None]:
    """Detach the run log after each test."""
    yield
    teardown_logging()


class TestLogFileName:
    """Tests for log_file_name function."""

    def test_timestamped(self) -> None:
        """The name carries the run start time."""
        assert log_file_name(NOW) == "install_20250120_103045.log"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_creates_directory_and_file(self, tmp_path: Path) -> None:
        """The log directory is created and messages are written."""
        log_dir = tmp_path / "var" / "log" / "docker-install"

        path = setup_logging(log_dir, now=NOW)
        logging.getLogger(f"{LOGGER_NAME}.core.pipeline").info("pipeline started")
        teardown_logging()

        assert path == log_dir / "install_20250120_103045.log"
        content = path.read_text()
        assert "[INFO]" in content
        assert "pipeline started" in content

    def test_debug_only_when_verbose(self, tmp_path: Path) -> None:
        """Command output at DEBUG is recorded only in verbose mode."""
        quiet = setup_logging(tmp_path / "quiet", now=NOW)
        logging.getLogger(LOGGER_NAME).debug("stdout of apt-get")
        verbose = setup_logging(tmp_path / "verbose", verbose=True, now=NOW)
        logging.getLogger(LOGGER_NAME).debug("stdout of apt-get")
        teardown_logging()

        assert quiet is not None and verbose is not None
        assert "stdout of apt-get" not in quiet.read_text()
        assert "[DEBUG]" in verbose.read_text()

    def test_replaces_previous_handler(self, tmp_path: Path) -> None:
        """Repeated setup does not duplicate output."""
        setup_logging(tmp_path, now=NOW)
        path = setup_logging(tmp_path, now=NOW)
        logging.getLogger(LOGGER_NAME).warning("once")
        teardown_logging()

        assert path is not None
        assert path.read_text().count("once") == 1

    def test_unwritable_directory(self, tmp_path: Path) -> None:
        """A log directory that cannot be created yields no log file."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        assert setup_logging(blocker / "logs", now=NOW) is None
