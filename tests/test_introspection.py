"""Tests for the gated debug introspection export."""

from __future__ import annotations

import pytest

from structslot.config.settings import StructSettings
from structslot.domain.record import RecordType
from structslot.domain.slots import IntegerSlot
from structslot.errors import ConfigurationError
from structslot.introspection import leak_internals


class TestLeakInternals:
    def test_disabled_by_default(self) -> None:
        with pytest.raises(ConfigurationError, match="STRUCTSLOT_LEAK_INTERNALS"):
            leak_internals()

    def test_enabled_by_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRUCTSLOT_LEAK_INTERNALS", "TRUE")
        assert "record_instance_state" in leak_internals()

    def test_exposes_private_state(self, leaky_settings: StructSettings) -> None:
        internals = leak_internals(leaky_settings)
        counter = RecordType({"n": IntegerSlot})
        instance = counter({"n": 3})

        state = internals["record_instance_state"].get(instance)
        assert state.owner is counter
        assert state.data == {"n": 3}
        assert state.frozen is False
        assert internals["is_structured_instance"](instance)

    def test_logs_warning(
        self, leaky_settings: StructSettings, caplog: pytest.LogCaptureFixture
    ) -> None:
        leak_internals(leaky_settings)
        assert "Leaking structslot internals" in caplog.text
