"""Tests for the root CLI group and its commands."""

from __future__ import annotations

import json
from collections.abc import Generator

import pytest
from click.testing import CliRunner

from structslot import __version__
from structslot.cli import cli


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    import logging

    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    root.handlers = handlers


class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_without_command(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "slots" in result.output
        assert "selftest" in result.output


class TestSlotsCommand:
    def test_json_lists_builtins(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--no-plugins", "slots", "--json"])
        assert result.exit_code == 0
        entries = json.loads(result.output)
        names = {entry["name"]: entry["origin"] for entry in entries}
        assert names["integer"] == "builtin"
        assert set(names) >= {"any", "boolean", "string", "number", "integer", "float"}

    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--no-plugins", "slots"])
        assert result.exit_code == 0
        assert "Registered slots" in result.output
        assert "boolean" in result.output


class TestSelftestCommand:
    def test_refuses_without_leak_internals(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["selftest"])
        assert result.exit_code == 1
        assert "STRUCTSLOT_LEAK_INTERNALS" in result.output

    def test_returns_pytest_status(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[list[str]] = []

        def fake_main(args: list[str]) -> int:
            calls.append(args)
            return 5

        monkeypatch.setattr(pytest, "main", fake_main)
        result = cli_runner.invoke(
            cli,
            ["selftest", "tests/domain", "-k", "record"],
            env={"STRUCTSLOT_LEAK_INTERNALS": "TRUE"},
        )
        assert result.exit_code == 5
        assert calls == [["tests/domain", "-k", "record"]]
