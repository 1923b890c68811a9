"""Record types — named-field structured values with a closed field set.

Usage::

    Point = RecordType({"x": IntegerSlot, "y": IntegerSlot}, name="Point")
    p = Point({"x": 1, "y": 2})
    p.x = 5           # validated, then cross-validated
    dict(p)           # {"x": 5, "y": 2}
    Point.freeze(p)   # p and everything nested in it is now frozen

Fields are read and written as attributes or items. Because every public
name on a record instance is a field, instance-level operations live on the
type (``Point.is_frozen(p)``, ``Point.freeze(p)``, ``Point.validate(p)``).
"""

from __future__ import annotations

import keyword
import types
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from structslot.domain.base import (
    InstanceState,
    StructuredInstance,
    StructuredType,
    TypeFlags,
    TypeState,
    build_type_state,
    commit,
    ensure_mutable,
    keyword_options,
    parse_flags,
    register_type,
)
from structslot.domain.private import PrivateStore
from structslot.domain.registry import resolve_slot_spec
from structslot.domain.slots import Slot
from structslot.errors import (
    ConfigurationError,
    StructLookupError,
    UnknownFieldError,
    ValidationError,
)


@dataclass(eq=False)
class RecordTypeState(TypeState):
    slots: dict[str, Slot]


RECORD_TYPE_STATE: PrivateStore[RecordTypeState] = PrivateStore("Record type")
RECORD_INSTANCE_STATE: PrivateStore[InstanceState] = PrivateStore("Record instance")

# dict(record) probes for a callable ``keys`` attribute before iterating.
RESERVED_FIELD_NAMES = frozenset({"keys"})


def _check_field_name(name: object) -> str:
    if not isinstance(name, str):
        msg = f"Record field name must be a string, got {type(name).__name__}"
        raise ConfigurationError(msg)
    if not name.isidentifier() or keyword.iskeyword(name):
        msg = f"Record field name must be a Python identifier: {name!r}"
        raise ConfigurationError(msg)
    if name.startswith("_"):
        msg = f"Record field name must not start with an underscore: {name!r}"
        raise ConfigurationError(msg)
    if name in RESERVED_FIELD_NAMES:
        msg = f"Record field name is reserved: {name!r}"
        raise ConfigurationError(msg)
    return name


def _resolve_shape(shape: Any) -> dict[str, Slot]:
    """Resolve a name -> SlotSpec shape into an ordered name -> Slot dict."""
    if isinstance(shape, Mapping):
        pairs: Iterable[Any] = shape.items()
    elif isinstance(shape, Iterable) and not isinstance(shape, (str, bytes)):
        pairs = shape
    else:
        msg = "Record slots must be a non-empty mapping"
        raise ConfigurationError(msg)

    slots: dict[str, Slot] = {}
    for pair in pairs:
        try:
            raw_name, spec = pair
        except (TypeError, ValueError):
            msg = f"Record slot entries must be (name, spec) pairs, got {pair!r}"
            raise ConfigurationError(msg) from None

        name = _check_field_name(raw_name)
        if name in slots:
            msg = f"Record duplicate slot name: {name}"
            raise ConfigurationError(msg)
        try:
            slots[name] = resolve_slot_spec(spec)
        except ConfigurationError as exc:
            msg = f"Record invalid slot {name!r}: {exc}"
            raise ConfigurationError(msg) from exc

    if not slots:
        msg = "Record slots must be a non-empty mapping"
        raise ConfigurationError(msg)
    return slots


class RecordInstance(StructuredInstance):
    """Instance of a :class:`RecordType`."""

    __slots__ = ()

    _store: ClassVar[PrivateStore[InstanceState]] = RECORD_INSTANCE_STATE

    def _field(self, name: str) -> tuple[InstanceState, Slot]:
        state = RECORD_INSTANCE_STATE.get(self)
        slot = state.owner._type_state().slots.get(name)
        if slot is None:
            msg = f"Record slot not found: {name}"
            raise UnknownFieldError(msg)
        return state, slot

    def _read(self, name: str) -> Any:
        state, _slot = self._field(name)
        return state.data[name]

    def _write(self, name: str, value: Any) -> None:
        state, slot = self._field(name)
        ensure_mutable(state)

        accepted, message = slot.validate(value)
        if message is not None:
            msg = f"{name}: {message}"
            raise ValidationError(msg, field=name)

        previous = state.data[name]
        state.data[name] = accepted

        def undo() -> None:
            state.data[name] = previous

        commit(state, undo, field=name)

    def __getattr__(self, name: str) -> Any:
        # only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        return self._read(name)

    def __setattr__(self, name: str, value: Any) -> None:
        self._write(name, value)

    def __delattr__(self, name: str) -> None:
        self._field(name)
        msg = f"Record fields cannot be removed: {name}"
        raise StructLookupError(msg)

    def __getitem__(self, name: str) -> Any:
        return self._read(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._write(name, value)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(field, value)`` pairs in declaration order."""
        state = RECORD_INSTANCE_STATE.get(self)
        for name in list(state.owner._type_state().slots):
            yield name, state.data[name]

    def __len__(self) -> int:
        return len(RECORD_INSTANCE_STATE.get(self).data)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in RECORD_INSTANCE_STATE.get(self).data

    def __repr__(self) -> str:
        state = RECORD_INSTANCE_STATE.get(self)
        slots = state.owner._type_state().slots
        fields = ", ".join(
            f"{name}={slot.format(state.data[name])}" for name, slot in slots.items()
        )
        label = state.owner.name or "Record"
        return f"{label}({fields})"


class RecordType(StructuredType):
    """Factory and handle for a record schema.

    Args:
        shape: Non-empty mapping (or iterable of pairs) of field name to SlotSpec.
        freeze_instances: Every instance is born frozen.
        validator: Cross-field validator ``snapshot -> message | None``. The
            snapshot is a read-only mapping of field name to value.
        name: Display name used in messages.
    """

    __slots__ = ()

    family: ClassVar[str] = "Record"
    _type_store: ClassVar[PrivateStore[RecordTypeState]] = RECORD_TYPE_STATE
    _instance_cls: ClassVar[type[StructuredInstance]] = RecordInstance

    def __init__(self, shape: Any, **flags: Any) -> None:
        parsed = parse_flags(TypeFlags, flags, "Record type")
        slots = _resolve_shape(shape)
        register_type(self, build_type_state(parsed, RecordTypeState, slots=slots))

    @classmethod
    def create(cls, shape: Any, flags: Mapping[str, Any] | None = None) -> RecordType:
        """Create a record type from a shape and an optional flags mapping."""
        return cls(shape, **keyword_options(flags, "Record type flags"))

    @property
    def slots(self) -> dict[str, Slot]:
        """Defensive copy of the field name -> Slot mapping."""
        return dict(RECORD_TYPE_STATE.get(self).slots)

    def __call__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        frozen: bool | None = None,
    ) -> RecordInstance:
        """Construct an instance from *data*; absent fields are None."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            msg = f"Record data must be a mapping, got {type(data).__name__}"
            raise ValidationError(msg)

        is_frozen = self._resolve_frozen(frozen)

        initial: dict[str, Any] = {}
        for name, slot in RECORD_TYPE_STATE.get(self).slots.items():
            accepted, message = slot.validate(data.get(name))
            if message is not None:
                msg = f"{name}: {message}"
                raise ValidationError(msg, field=name)
            initial[name] = accepted

        instance = self._new_instance(initial, is_frozen)
        assert isinstance(instance, RecordInstance)
        return instance

    def _snapshot(self, data: dict[str, Any]) -> Mapping[str, Any]:
        return types.MappingProxyType(data)

    def _entries(self, data: dict[str, Any]) -> Iterable[tuple[str, Any]]:
        return list(data.items())
