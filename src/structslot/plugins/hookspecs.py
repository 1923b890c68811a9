"""Pluggy hook specifications for structslot extensions.

A plugin contributes named slots, which then resolve from string SlotSpecs
exactly like the built-in names::

    from structslot.plugins.hookspecs import hookimpl

    class EmailSlots:
        @hookimpl
        def register_slots(self):
            return {"email": EmailSlot}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from structslot.domain.slots import Slot

PROJECT_NAME = "structslot"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class StructslotHookSpec:
    """Hook specifications for the structslot plugin system."""

    @hookspec
    def register_slots(self) -> dict[str, Slot] | None:
        """Return name -> Slot mappings to extend the named-slot registry."""
