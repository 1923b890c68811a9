"""Slot wrappers and composite constraint slots.

- :func:`Optional` admits None in front of another slot.
- :func:`MemberOf` admits instances of one structured type.
- :func:`ArrayConstraintSlot` checks a sequence-shaped container.
- :func:`MapConstraintSlot` checks every key and value of a mapping.

Each factory returns a plain :class:`Slot`; the wrappers add no new
handle kinds.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, Field, StrictBool, StrictInt, model_validator

from structslot.domain.base import StructuredType, parse_flags
from structslot.domain.registry import resolve_slot_spec
from structslot.domain.sequence import SequenceInstance, is_index
from structslot.domain.slots import AnySlot, Slot
from structslot.domain.traversal import is_structured_type
from structslot.errors import ConfigurationError

NONE_TOKEN = "None"

Count = Annotated[StrictInt, Field(ge=0)]


def _require_slot(value: Any, label: str) -> Slot:
    try:
        return resolve_slot_spec(value)
    except ConfigurationError as exc:
        msg = f"{label} must be a Slot: {exc}"
        raise ConfigurationError(msg) from exc


# ---------------------------------------------------------------------------
# Optional
# ---------------------------------------------------------------------------


def Optional(inner: Slot) -> Slot:  # noqa: N802
    """Wrap *inner* so that None is always accepted.

    None never reaches *inner*; formatting None yields ``"None"``.
    """
    if not Slot.is_slot(inner):
        msg = "Optional inner value must be a Slot instance"
        raise ConfigurationError(msg)

    def validate(value: Any) -> tuple[Any, str | None]:
        if value is None:
            return None, None
        return inner.validate(value)

    def format_value(value: Any) -> str:
        if value is None:
            return NONE_TOKEN
        return inner.format(value)

    return Slot.create(validate, format_value)


# ---------------------------------------------------------------------------
# MemberOf
# ---------------------------------------------------------------------------


def MemberOf(structured_type: StructuredType) -> Slot:  # noqa: N802
    """Accept only instances created by *structured_type*.

    Formatting renders the type's display name, never the instance contents.
    """
    if not is_structured_type(structured_type):
        msg = "MemberOf requires a Record, Sequence, or Mapping type"
        raise ConfigurationError(msg)

    def validate(value: Any) -> tuple[Any, str | None]:
        if structured_type.is_instance(value):
            return value, None
        return None, f"value must be an instance of {structured_type.display_name}"

    def format_value(_value: Any) -> str:
        return structured_type.display_name

    return Slot.create(validate, format_value)


# ---------------------------------------------------------------------------
# Array constraint
# ---------------------------------------------------------------------------


class ArrayConstraint(BaseModel):
    """Bounds for :func:`ArrayConstraintSlot`."""

    model_config = {"frozen": True, "extra": "forbid"}

    min_count: Count = 0
    max_count: Count | None = None
    contiguous: StrictBool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> ArrayConstraint:
        if self.max_count is not None and self.max_count < self.min_count:
            msg = "max_count must not be less than min_count"
            raise ValueError(msg)
        return self


def _indexed_entries(value: Any) -> list[tuple[Any, Any]] | None:
    """Return ``(index, element)`` pairs of a sequence-shaped container."""
    if isinstance(value, SequenceInstance):
        return list(value.items())
    if isinstance(value, (list, tuple)):
        return list(enumerate(value, start=1))
    if isinstance(value, Mapping):
        return list(value.items())
    return None


def ArrayConstraintSlot(  # noqa: N802
    *,
    min_count: int = 0,
    max_count: int | None = None,
    contiguous: bool = True,
    element_slot: Any = AnySlot,
) -> Slot:
    """Slot for a container of indexed elements.

    Accepts a list/tuple, a sequence instance, or a mapping keyed by
    positive integer indices. The first failing element's message is
    embedded in the rejection.
    """
    bounds = parse_flags(
        ArrayConstraint,
        {"min_count": min_count, "max_count": max_count, "contiguous": contiguous},
        "ArrayConstraintSlot",
    )
    elements = _require_slot(element_slot, "ArrayConstraintSlot element_slot")

    def validate(value: Any) -> tuple[Any, str | None]:
        entries = _indexed_entries(value)
        if entries is None:
            return None, "array value must be a list, tuple, sequence instance or index mapping"

        if not all(is_index(index) for index, _ in entries):
            return None, "array indices must be positive integers"

        for index, element in sorted(entries, key=lambda entry: entry[0]):
            _accepted, message = elements.validate(element)
            if message is not None:
                return None, f"array element {index}: {message}"

        count = len(entries)
        if count < bounds.min_count:
            return None, f"array must contain at least {bounds.min_count} elements"
        if bounds.max_count is not None and count > bounds.max_count:
            return None, f"array must contain no more than {bounds.max_count} elements"

        if bounds.contiguous and sorted(index for index, _ in entries) != list(range(1, count + 1)):
            return None, "array indices must be contiguous"

        return value, None

    return Slot.create(validate)


# ---------------------------------------------------------------------------
# Map constraint
# ---------------------------------------------------------------------------


def MapConstraintSlot(*, key_slot: Any = AnySlot, value_slot: Any = AnySlot) -> Slot:  # noqa: N802
    """Slot for an arbitrary key/value container.

    Independent of :class:`~structslot.domain.mapping.MappingType`; any
    ``Mapping`` (structured or not) is accepted if all entries pass.
    """
    keys = _require_slot(key_slot, "MapConstraintSlot key_slot")
    values = _require_slot(value_slot, "MapConstraintSlot value_slot")

    def validate(value: Any) -> tuple[Any, str | None]:
        if not isinstance(value, Mapping):
            return None, "map value must be a mapping"

        for key, entry in value.items():
            _accepted, message = keys.validate(key)
            if message is not None:
                return None, f"map key {key!r}: {message}"
            _accepted, message = values.validate(entry)
            if message is not None:
                return None, f"map value {key!r}: {message}"

        return value, None

    return Slot.create(validate)
