"""Subcommand modules for structslot.

Provides register_commands() which uses deferred imports to keep
``structslot --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from structslot.commands.selftest import selftest
    from structslot.commands.slots import slots

    cli.add_command(slots)
    cli.add_command(selftest)
