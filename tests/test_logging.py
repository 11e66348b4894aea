"""Unit tests for launchpad.logging."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from rich.console import Console
from rich.logging import RichHandler

from launchpad.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_launchpad_logger():
    yield
    logger = logging.getLogger("launchpad")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestGetLogger:
    @pytest.mark.unit
    def test_root(self):
        assert get_logger().name == "launchpad"

    @pytest.mark.unit
    def test_suffix(self):
        assert get_logger("engine").name == "launchpad.engine"

    @pytest.mark.unit
    def test_dotted_module_name(self):
        assert get_logger("launchpad.providers.base").name == "launchpad.providers.base"


class TestConfigureLogging:
    @pytest.mark.unit
    def test_default_is_quiet(self):
        logger = configure_logging(console=Console(file=io.StringIO()))
        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert handlers[0].level == logging.WARNING

    @pytest.mark.unit
    def test_verbose_enables_debug(self):
        buffer = io.StringIO()
        configure_logging(verbose=True, console=Console(file=buffer, width=200))
        get_logger("engine").debug("state changed")
        assert "state changed" in buffer.getvalue()

    @pytest.mark.unit
    def test_repeated_calls_do_not_duplicate_handlers(self):
        configure_logging(console=Console(file=io.StringIO()))
        logger = configure_logging(console=Console(file=io.StringIO()))
        assert len(logger.handlers) == 1

    @pytest.mark.unit
    def test_log_file_captures_debug(self, tmp_path: Path):
        log_file = tmp_path / "launchpad.log"
        configure_logging(log_file=log_file, console=Console(file=io.StringIO()))
        get_logger("resolver").debug("resolved 7 assets")
        for handler in logging.getLogger("launchpad").handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "resolved 7 assets" in text
        assert "launchpad.resolver" in text
