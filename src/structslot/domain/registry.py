"""Named slot registry and SlotSpec resolution.

A *SlotSpec* is any of the interchangeable ways a caller may name the Slot
for a field or element. It is resolved exactly once, when the type is
created, into a concrete Slot:

- a Slot handle is used as-is,
- a ``str`` is looked up by name (built-ins plus plugin registrations),
- a ``tuple``/``list`` is passed positionally to :meth:`Slot.create`,
- a ``Mapping`` is passed as keywords to :meth:`Slot.create`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from structslot.domain.slots import BUILTIN_SLOTS, Slot
from structslot.errors import ConfigurationError

# Populated with built-ins at module load; plugins may add more names.
SLOT_REGISTRY: dict[str, Slot] = {}


def _normalize(name: str) -> str:
    return name.strip().lower()


def register_slot(name: str, slot: Slot) -> None:
    """Register *slot* under *name* for string SlotSpecs.

    Built-in names are reserved. Registering the same slot twice under one
    name is a no-op; registering a different one is an error.
    """
    if not isinstance(name, str) or not _normalize(name):
        msg = "Slot name must be a non-empty string"
        raise ConfigurationError(msg)

    normalized = _normalize(name)
    if not Slot.is_slot(slot):
        msg = f"Slot {normalized!r} must be a Slot instance, got {type(slot).__name__}"
        raise ConfigurationError(msg)

    if normalized in BUILTIN_SLOTS and BUILTIN_SLOTS[normalized] is not slot:
        msg = f"Slot {normalized!r} conflicts with a built-in registration"
        raise ConfigurationError(msg)

    existing = SLOT_REGISTRY.get(normalized)
    if existing is not None and existing is not slot:
        msg = f"Slot {normalized!r} is already registered"
        raise ConfigurationError(msg)

    SLOT_REGISTRY[normalized] = slot


def unregister_slot(name: str) -> None:
    """Remove a non-built-in registration. Unknown names are ignored."""
    normalized = _normalize(name)
    if normalized in BUILTIN_SLOTS:
        msg = f"Slot {normalized!r} is built-in and cannot be removed"
        raise ConfigurationError(msg)
    SLOT_REGISTRY.pop(normalized, None)


def get_slot(name: str) -> Slot:
    """Look up a registered slot by (case-insensitive) name."""
    try:
        return SLOT_REGISTRY[_normalize(name)]
    except KeyError:
        msg = f"Unknown slot name: {name!r}"
        raise ConfigurationError(msg) from None


def resolve_slot_spec(spec: Any) -> Slot:
    """Resolve a SlotSpec to a concrete Slot.

    Raises:
        ConfigurationError: If *spec* cannot be resolved.
    """
    if Slot.is_slot(spec):
        return spec
    if isinstance(spec, str):
        return get_slot(spec)
    try:
        if isinstance(spec, (tuple, list)):
            return Slot.create(*spec)
        if isinstance(spec, Mapping):
            return Slot.create(**spec)
    except TypeError as exc:
        msg = f"Invalid inline slot arguments: {exc}"
        raise ConfigurationError(msg) from exc
    msg = f"Invalid slot spec: {spec!r}"
    raise ConfigurationError(msg)


def _register_builtins() -> None:
    """Populate :data:`SLOT_REGISTRY` with the built-in slots."""
    for name, slot in BUILTIN_SLOTS.items():
        SLOT_REGISTRY[name] = slot


_register_builtins()
