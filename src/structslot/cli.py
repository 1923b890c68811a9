"""Root CLI group for structslot with global flags and command registration."""

from __future__ import annotations

import click

from structslot import __version__
from structslot.commands import register_commands
from structslot.commands._context import AppContext
from structslot.config.settings import StructSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="structslot")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-plugins", is_flag=True, help="Skip loading entry-point plugins.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    no_plugins: bool,
) -> None:
    """structslot — runtime schemas for dynamically shaped data."""
    # unset flags fall through to STRUCTSLOT_* env vars
    settings = StructSettings.from_env(
        verbose=verbose or None,
        log_json=log_json or None,
        load_plugins=False if no_plugins else None,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
