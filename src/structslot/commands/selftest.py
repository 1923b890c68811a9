"""Command: run the test suite and exit with its status.

The suite inspects private state, so the command refuses to run unless
internals leaking is enabled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from structslot.commands._context import AppContext


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("path", default="tests", type=click.Path())
@click.argument("pytest_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def selftest(app: AppContext, path: str, pytest_args: tuple[str, ...]) -> None:
    """Run pytest on PATH (default: tests) and return its exit status."""
    if not app.settings.leak_internals:
        click.echo(
            "selftest requires STRUCTSLOT_LEAK_INTERNALS=TRUE",
            err=True,
        )
        raise SystemExit(1)

    try:
        import pytest
    except ImportError:
        click.echo("selftest requires pytest; install structslot[test]", err=True)
        raise SystemExit(1) from None

    status = pytest.main([path, *pytest_args])
    raise SystemExit(int(status))
