"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from kubefuzz.utils import logging_setup
from kubefuzz.utils.logging_setup import configure_logging, default_log_path, get_logging_config


@pytest.fixture
def restore_kubefuzz_logger():
    """Undo dictConfig changes to the ``kubefuzz`` logger."""
    app_logger = logging.getLogger("kubefuzz")
    saved = (app_logger.handlers[:], app_logger.level, app_logger.propagate)
    yield app_logger
    for handler in app_logger.handlers:
        if handler not in saved[0]:
            handler.close()
    handlers, level, propagate = saved
    app_logger.handlers[:] = handlers
    app_logger.setLevel(level)
    app_logger.propagate = propagate


class TestLoggingConfig:
    """Test the dictConfig payload."""

    def test_default_log_path(self, isolated_dirs: Path) -> None:
        assert default_log_path() == (
            isolated_dirs / "xdg_state_home" / "kubefuzz" / "kubefuzz.log"
        )

    def test_file_handler_only(self, tmp_path: Path) -> None:
        config = get_logging_config(tmp_path / "kf.log")

        assert list(config["handlers"]) == ["file"]
        assert config["handlers"]["file"]["filename"] == str(tmp_path / "kf.log")
        assert config["loggers"]["kubefuzz"]["level"] == "INFO"
        assert config["loggers"]["kubefuzz"]["propagate"] is False

    def test_debug_level(self, tmp_path: Path) -> None:
        assert get_logging_config(tmp_path / "kf.log", debug=True)["loggers"]["kubefuzz"][
            "level"
        ] == "DEBUG"


class TestConfigureLogging:
    """Test applying the configuration."""

    def test_writes_to_file(self, tmp_path: Path, restore_kubefuzz_logger) -> None:
        log_file = tmp_path / "logs" / "kf.log"

        assert configure_logging(str(log_file), debug=True) == log_file
        logging.getLogger("kubefuzz.test").info("hello from test")
        for handler in restore_kubefuzz_logger.handlers:
            handler.flush()

        assert "hello from test" in log_file.read_text(encoding="utf-8")

    def test_unwritable_location_falls_back(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_kubefuzz_logger
    ) -> None:
        def refuse(_config):
            raise ValueError("Unable to configure handler 'file'")

        monkeypatch.setattr(logging_setup.log_config, "dictConfig", refuse)

        assert configure_logging(str(tmp_path / "kf.log")) is None
        assert any(
            isinstance(handler, logging.NullHandler)
            for handler in restore_kubefuzz_logger.handlers
        )
