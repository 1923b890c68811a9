"""Mapping types: open key/value structured values.

Unlike records, a mapping accepts any key its ``key_slot`` admits. Every
write validates the key and the value, then re-runs the cross-field
validator, rolling the single entry back on rejection.

Usage::

    Scores = MappingType(key_slot=StringSlot, value_slot=IntegerSlot)
    m = Scores({"alice": 3})
    m["bob"] = 5
    del m["alice"]
"""

from __future__ import annotations

import types
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
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
from structslot.domain.slots import AnySlot, Slot
from structslot.errors import ConfigurationError, UnknownKeyError, ValidationError

_MISSING = object()


@dataclass(eq=False)
class MappingTypeState(TypeState):
    key_slot: Slot
    value_slot: Slot


MAPPING_TYPE_STATE: PrivateStore[MappingTypeState] = PrivateStore("Mapping type")
MAPPING_INSTANCE_STATE: PrivateStore[InstanceState] = PrivateStore("Mapping instance")


def _validate_entry(type_state: MappingTypeState, key: Any, value: Any) -> tuple[Any, Any]:
    """Validate one key/value pair, returning the accepted pair."""
    accepted_key, message = type_state.key_slot.validate(key)
    if message is not None:
        msg = f"key {key!r}: {message}"
        raise ValidationError(msg, field=key)
    try:
        hash(accepted_key)
    except TypeError:
        msg = f"key {key!r}: mapping keys must be hashable"
        raise ValidationError(msg, field=key) from None

    accepted_value, message = type_state.value_slot.validate(value)
    if message is not None:
        msg = f"{accepted_key!r}: {message}"
        raise ValidationError(msg, field=accepted_key)
    return accepted_key, accepted_value


class MappingInstance(StructuredInstance, MutableMapping):
    """Instance of a :class:`MappingType`.

    Implements the ``MutableMapping`` protocol, so ``update``, ``pop`` and
    friends route through the same validated writes. Equality and hashing
    stay identity based.
    """

    __slots__ = ()

    _store: ClassVar[PrivateStore[InstanceState]] = MAPPING_INSTANCE_STATE

    __hash__ = object.__hash__

    def __eq__(self, other: object) -> bool:
        return self is other

    def __getitem__(self, key: Any) -> Any:
        data = MAPPING_INSTANCE_STATE.get(self).data
        try:
            return data[key]
        except (KeyError, TypeError):
            msg = f"Mapping key not found: {key!r}"
            raise UnknownKeyError(msg) from None

    def __setitem__(self, key: Any, value: Any) -> None:
        state = MAPPING_INSTANCE_STATE.get(self)
        ensure_mutable(state)
        accepted_key, accepted_value = _validate_entry(state.owner._type_state(), key, value)

        data: dict[Any, Any] = state.data
        previous = data.get(accepted_key, _MISSING)
        data[accepted_key] = accepted_value

        def undo() -> None:
            if previous is _MISSING:
                del data[accepted_key]
            else:
                data[accepted_key] = previous

        commit(state, undo, field=accepted_key)

    def __delitem__(self, key: Any) -> None:
        state = MAPPING_INSTANCE_STATE.get(self)
        ensure_mutable(state)
        data: dict[Any, Any] = state.data
        previous = self[key]
        del data[key]

        def undo() -> None:
            data[key] = previous

        commit(state, undo, field=key)

    def __contains__(self, key: object) -> bool:
        try:
            return key in MAPPING_INSTANCE_STATE.get(self).data
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Any]:
        return iter(list(MAPPING_INSTANCE_STATE.get(self).data))

    def __len__(self) -> int:
        return len(MAPPING_INSTANCE_STATE.get(self).data)

    def __repr__(self) -> str:
        state = MAPPING_INSTANCE_STATE.get(self)
        type_state = state.owner._type_state()
        entries = ", ".join(
            f"{type_state.key_slot.format(key)}: {type_state.value_slot.format(value)}"
            for key, value in state.data.items()
        )
        label = state.owner.name or "Mapping"
        return f"{label}({{{entries}}})"


class MappingType(StructuredType):
    """Factory and handle for a mapping schema.

    Args:
        key_slot: SlotSpec every key must satisfy (default ``AnySlot``).
        value_slot: SlotSpec every value must satisfy (default ``AnySlot``).
        freeze_instances: Every instance is born frozen.
        validator: Cross-entry validator; receives a read-only mapping.
        name: Display name used in messages.
    """

    __slots__ = ()

    family: ClassVar[str] = "Mapping"
    _type_store: ClassVar[PrivateStore[MappingTypeState]] = MAPPING_TYPE_STATE
    _instance_cls: ClassVar[type[StructuredInstance]] = MappingInstance

    def __init__(self, *, key_slot: Any = AnySlot, value_slot: Any = AnySlot, **flags: Any) -> None:
        parsed = parse_flags(TypeFlags, flags, "Mapping type")
        slots: dict[str, Slot] = {}
        for label, spec in (("key_slot", key_slot), ("value_slot", value_slot)):
            try:
                slots[label] = resolve_slot_spec(AnySlot if spec is None else spec)
            except ConfigurationError as exc:
                msg = f"Mapping {label}: {exc}"
                raise ConfigurationError(msg) from exc
        register_type(self, build_type_state(parsed, MappingTypeState, **slots))

    @classmethod
    def create(cls, config: Mapping[str, Any] | None = None) -> MappingType:
        """Create a mapping type from an optional config mapping."""
        return cls(**keyword_options(config, "Mapping config"))

    @property
    def key_slot(self) -> Slot:
        return MAPPING_TYPE_STATE.get(self).key_slot

    @property
    def value_slot(self) -> Slot:
        return MAPPING_TYPE_STATE.get(self).value_slot

    def __call__(
        self,
        data: Mapping[Any, Any] | None = None,
        *,
        frozen: bool | None = None,
    ) -> MappingInstance:
        """Construct an instance from an input mapping (default: empty)."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            msg = f"Mapping data must be a mapping, got {type(data).__name__}"
            raise ValidationError(msg)

        is_frozen = self._resolve_frozen(frozen)

        type_state = MAPPING_TYPE_STATE.get(self)
        initial: dict[Any, Any] = {}
        for key, value in data.items():
            accepted_key, accepted_value = _validate_entry(type_state, key, value)
            initial[accepted_key] = accepted_value

        instance = self._new_instance(initial, is_frozen)
        assert isinstance(instance, MappingInstance)
        return instance

    def _snapshot(self, data: dict[Any, Any]) -> Mapping[Any, Any]:
        return types.MappingProxyType(data)

    def _entries(self, data: dict[Any, Any]) -> Iterable[tuple[Any, Any]]:
        return list(data.items())
