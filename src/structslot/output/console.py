"""Rich Console factory and theme for structslot CLI output.

Creates Console instances that render to a StringIO buffer, so commands
build their text first and echo it through click.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from structslot.domain.slots import BUILTIN_SLOTS, Slot

STRUCT_THEME = Theme(
    {
        "struct.ok": "bold green",
        "struct.error": "bold red",
        "struct.warning": "bold yellow",
        "struct.name": "bold cyan",
        "struct.builtin": "dim",
        "struct.plugin": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=STRUCT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def slot_origin(name: str, slot: Slot) -> str:
    """``"builtin"`` for the reserved names, ``"plugin"`` otherwise."""
    return "builtin" if BUILTIN_SLOTS.get(name) is slot else "plugin"


def render_slot_table(console: Console, registry: dict[str, Slot]) -> None:
    """Print the named-slot registry as a table."""
    table = Table(title="Registered slots")
    table.add_column("Name", style="struct.name")
    table.add_column("Origin")
    table.add_column("Validator", style="struct.builtin")
    for name in sorted(registry):
        slot = registry[name]
        origin = slot_origin(name, slot)
        table.add_row(name, f"[struct.{origin}]{origin}[/]", repr(slot))
    console.print(table)
