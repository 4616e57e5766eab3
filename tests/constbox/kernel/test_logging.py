"""Tests for constbox.kernel.logging."""

from __future__ import annotations

import pytest

from constbox.kernel import logging as constbox_logging
from constbox.kernel.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    configure_logging(force_reconfigure=True)


class TestLogging:
    """Loguru configuration."""

    def test_records_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="INFO", format="console", include_timestamp=False)
        get_logger("constbox.tests").info("Extracted {count} files", count=3)
        captured = capsys.readouterr()
        assert "Extracted 3 files" in captured.err
        assert "constbox.tests" in captured.err
        assert captured.out == ""

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="ERROR", format="console")
        get_logger("constbox.tests").warning("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_reconfigure_with_same_settings_is_noop(self) -> None:
        configure_logging(level="ERROR", format="json")
        handlers = list(constbox_logging._HANDLER_IDS)
        configure_logging(level="ERROR", format="json")
        assert constbox_logging._HANDLER_IDS == handlers

    def test_get_logger_is_cached(self) -> None:
        assert get_logger("constbox.same") is get_logger("constbox.same")
