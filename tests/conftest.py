"""Shared pytest fixtures and test helpers for structslot tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from click.testing import CliRunner

from structslot.config.settings import StructSettings
from structslot.domain.record import RecordType
from structslot.domain.registry import SLOT_REGISTRY
from structslot.domain.slots import IntegerSlot, Slot


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear STRUCTSLOT_* variables so the host environment cannot leak in."""
    for name in ("LEAK_INTERNALS", "VERBOSE", "LOG_JSON", "LOAD_PLUGINS"):
        monkeypatch.delenv(f"STRUCTSLOT_{name}", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def leaky_settings() -> StructSettings:
    """Settings with internals leaking enabled."""
    return StructSettings(leak_internals=True)


@pytest.fixture
def restore_registry() -> Generator[dict[str, Slot]]:
    """Snapshot the named-slot registry and restore it afterwards."""
    saved = dict(SLOT_REGISTRY)
    yield SLOT_REGISTRY
    SLOT_REGISTRY.clear()
    SLOT_REGISTRY.update(saved)


def range_validator(snapshot: Any) -> str | None:
    """Cross-field validator rejecting ``low > high``."""
    if snapshot["low"] > snapshot["high"]:
        return "low is greater than high"
    return None


@pytest.fixture
def range_type() -> RecordType:
    """``{low: Integer, high: Integer}`` with a ``low <= high`` invariant."""
    return RecordType(
        {"low": IntegerSlot, "high": IntegerSlot},
        validator=range_validator,
        name="Range",
    )


@pytest.fixture
def point_type() -> RecordType:
    return RecordType({"x": IntegerSlot, "y": IntegerSlot}, name="Point")
