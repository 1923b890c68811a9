"""Slot — the immutable validation + formatting unit.

Every field, element, key, and value stored in a structured instance has
passed through a Slot. A Slot pairs two callables:

- ``validator(value) -> (accepted, message)``: ``message is None`` means
  acceptance and ``accepted`` is what gets stored. A non-None ``message``
  rejects the value and then ``accepted`` must be None.
- ``formatter(value) -> str``: human-readable rendering (default ``str``).

INVARIANT: A validator that returns both a value and a message has broken
its contract; that is a ContractViolation, not a validation failure.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence, Set
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from structslot.domain.base import StructuredInstance
from structslot.domain.private import PrivateStore
from structslot.errors import (
    ConfigurationError,
    ContractViolation,
    FrozenError,
    UnsupportedOperation,
)

Validator = Callable[[Any], tuple[Any, str | None]]
Formatter = Callable[[Any], str]


class SlotOperation(StrEnum):
    """Operations a Slot can perform on a value."""

    VALIDATE = "validate"
    FORMAT = "format"


@dataclass(frozen=True)
class SlotState:
    """Private state of a Slot handle."""

    validator: Validator
    formatter: Formatter


SLOT_STATE: PrivateStore[SlotState] = PrivateStore("Slot")


class Slot:
    """Immutable validator/formatter pair.

    Usage::

        Positive = Slot(lambda v: (v, None) if v > 0 else (None, "must be positive"))
        Positive.validate(3)   # (3, None)
        Positive.validate(-1)  # (None, "must be positive")
    """

    __slots__ = ("__weakref__",)

    def __init__(self, validator: Validator, formatter: Formatter | None = None) -> None:
        if not callable(validator):
            msg = f"Slot validator must be callable, got {type(validator).__name__}"
            raise ConfigurationError(msg)

        resolved_formatter = str if formatter is None else formatter
        if not callable(resolved_formatter):
            msg = f"Slot formatter must be callable, got {type(resolved_formatter).__name__}"
            raise ConfigurationError(msg)

        SLOT_STATE.attach(self, SlotState(validator=validator, formatter=resolved_formatter))

    @classmethod
    def create(cls, validator: Validator, formatter: Formatter | None = None) -> Slot:
        """Create a Slot; equivalent to calling the class."""
        return cls(validator, formatter)

    @staticmethod
    def is_slot(value: object) -> bool:
        """True only for handles produced by :meth:`create`."""
        return isinstance(value, Slot) and SLOT_STATE.owns(value)

    @property
    def validator(self) -> Validator:
        return SLOT_STATE.get(self).validator

    @property
    def formatter(self) -> Formatter:
        return SLOT_STATE.get(self).formatter

    def operate(self, kind: SlotOperation | str, value: Any) -> Any:
        """Dispatch *kind* to :meth:`validate` or :meth:`format`.

        Raises:
            UnsupportedOperation: If *kind* is not a :class:`SlotOperation`.
        """
        try:
            operation = SlotOperation(kind)
        except ValueError:
            msg = f"Slot unknown operation: {kind!r}"
            raise UnsupportedOperation(msg) from None

        if operation is SlotOperation.VALIDATE:
            return self.validate(value)
        return self.format(value)

    def validate(self, value: Any) -> tuple[Any, str | None]:
        """Run the validator and enforce its return contract."""
        result = SLOT_STATE.get(self).validator(value)
        if not isinstance(result, tuple) or len(result) != 2:
            msg = "Slot validator must return an (accepted, message) pair"
            raise ContractViolation(msg)

        accepted, message = result
        if message is not None:
            if not isinstance(message, str):
                msg = "Slot validator message must be a string or None"
                raise ContractViolation(msg)
            if accepted is not None:
                msg = "Slot validator returned a value and an error message"
                raise ContractViolation(msg)
        return accepted, message

    def format(self, value: Any) -> str:
        """Run the formatter; the result must be a string."""
        rendered = SLOT_STATE.get(self).formatter(value)
        if not isinstance(rendered, str):
            msg = "Slot formatter did not return a string"
            raise ContractViolation(msg)
        return rendered

    def __setattr__(self, name: str, value: Any) -> None:
        msg = "Slot definition cannot be modified"
        raise FrozenError(msg)

    def __delattr__(self, name: str) -> None:
        msg = "Slot definition cannot be modified"
        raise FrozenError(msg)

    def __repr__(self) -> str:
        state = SLOT_STATE.get(self)
        name = getattr(state.validator, "__qualname__", type(state.validator).__name__)
        return f"<Slot {name}>"


# ---------------------------------------------------------------------------
# Built-in slots
# ---------------------------------------------------------------------------


def is_container(value: object) -> bool:
    """Whether *value* is a composite (mapping, sequence, set, or structured instance).

    Strings and bytes count as scalars.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Mapping, Sequence, Set, StructuredInstance))


def _validate_any(value: Any) -> tuple[Any, str | None]:
    if value is None:
        return None, "slot value must not be None"
    if is_container(value):
        return None, "slot value must not be a container"
    return value, None


def _validate_boolean(value: Any) -> tuple[Any, str | None]:
    if isinstance(value, bool):
        return value, None
    return None, "slot value must be a boolean"


def _validate_string(value: Any) -> tuple[Any, str | None]:
    if isinstance(value, str):
        return value, None
    return None, "slot value must be a string"


def _format_string(value: Any) -> str:
    return f'"{value}"'


def _validate_number(value: Any) -> tuple[Any, str | None]:
    # bool is an int subclass but not a number here
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value, None
    return None, "slot value must be a number"


def _validate_integer(value: Any) -> tuple[Any, str | None]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value, None
    return None, "slot value must be an integer"


def _validate_float(value: Any) -> tuple[Any, str | None]:
    if isinstance(value, float):
        return value, None
    return None, "slot value must be a float"


AnySlot = Slot.create(_validate_any)
BooleanSlot = Slot.create(_validate_boolean)
StringSlot = Slot.create(_validate_string, _format_string)
NumberSlot = Slot.create(_validate_number)
IntegerSlot = Slot.create(_validate_integer)
FloatSlot = Slot.create(_validate_float)

BUILTIN_SLOTS: dict[str, Slot] = {
    "any": AnySlot,
    "boolean": BooleanSlot,
    "string": StringSlot,
    "number": NumberSlot,
    "integer": IntegerSlot,
    "float": FloatSlot,
}
