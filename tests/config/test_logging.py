"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from structslot.config.logging import (
    LOGGER_NAME,
    QUIET_LOGGERS,
    add_component,
    configure_logging,
)
from structslot.domain.slots import IntegerSlot


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package_logger = logging.getLogger(LOGGER_NAME)
    package_level = package_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package_logger.setLevel(package_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("structslot.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "structslot.test"
        assert parsed["component"] == "test"
        assert "timestamp" in parsed

    def test_type_creation_logged_at_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        from structslot.domain.record import RecordType

        configure_logging(verbose=True, log_json=True)
        RecordType({"a": IntegerSlot}, name="Logged")

        lines = [json.loads(line) for line in capfd.readouterr().err.splitlines() if line]
        events = [line["event"] for line in lines]
        assert "Created Record type <RecordType Logged>" in events
        assert all(line["logger"] == "structslot.domain.base" for line in lines)
        assert all(line["component"] == "domain" for line in lines)

    def test_debug_hidden_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        from structslot.domain.record import RecordType

        configure_logging(verbose=False, log_json=True)
        RecordType({"a": IntegerSlot})
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True)
        assert len(logging.getLogger().handlers) == 1

    def test_quiet_loggers_stay_at_warning(self) -> None:
        configure_logging(verbose=True)
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestAddComponent:
    def test_tags_package_loggers(self) -> None:
        event = add_component(None, "info", {"logger": "structslot.plugins.manager"})
        assert event["component"] == "plugins"

    def test_foreign_logger_untouched(self) -> None:
        assert add_component(None, "info", {"logger": "pluggy"}) == {"logger": "pluggy"}
        assert "component" not in add_component(None, "info", {"logger": "structslotx.a"})

    def test_explicit_component_kept(self) -> None:
        event = add_component(None, "info", {"logger": "structslot.domain", "component": "x"})
        assert event["component"] == "x"
