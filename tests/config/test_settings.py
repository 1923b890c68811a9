"""Tests for StructSettings env vars and overrides."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from structslot.config.settings import StructSettings


class TestStructSettings:
    def test_defaults(self) -> None:
        settings = StructSettings()
        assert settings.leak_internals is False
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.load_plugins is True

    @pytest.mark.parametrize("raw", ["TRUE", "true", "1"])
    def test_leak_internals_from_env(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("STRUCTSLOT_LEAK_INTERNALS", raw)
        assert StructSettings.from_env().leak_internals is True

    def test_overrides_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRUCTSLOT_VERBOSE", "false")
        assert StructSettings.from_env(verbose=True).verbose is True

    def test_none_overrides_fall_through(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRUCTSLOT_LOG_JSON", "1")
        assert StructSettings.from_env(log_json=None).log_json is True

    def test_frozen(self) -> None:
        settings = StructSettings()
        with pytest.raises(PydanticValidationError):
            settings.verbose = True  # type: ignore[misc]
