"""Command: list the named slots available to string SlotSpecs."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from structslot.commands._context import AppContext


@click.command()
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.pass_obj
def slots(app: AppContext, json_output: bool) -> None:
    """List registered named slots (built-ins and plugin-provided)."""
    from structslot.domain.registry import SLOT_REGISTRY
    from structslot.output.console import (
        create_console,
        get_output,
        render_slot_table,
        slot_origin,
    )

    # discovery registers plugin slots as a side effect
    app.plugins  # noqa: B018

    registry = dict(SLOT_REGISTRY)
    if json_output:
        payload = [
            {"name": name, "origin": slot_origin(name, registry[name])} for name in sorted(registry)
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    console = create_console()
    render_slot_table(console, registry)
    click.echo(get_output(console), nl=False)
