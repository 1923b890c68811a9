"""Sequence types: contiguous, 1-based ordered structured values.

Usage::

    Scores = SequenceType(value_slot=IntegerSlot, name="Scores")
    s = Scores([2, 4, 6])
    s[1]          # 2
    s[4] = 8      # appends: index len + 1 is the only index past the end
    s[6] = 10     # ValidationError: sequence indices must be contiguous
    s.remove()    # 8

INVARIANT: The index domain of a sequence is exactly ``1..len(seq)``.
"""

from __future__ import annotations

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
from structslot.domain.slots import AnySlot, Slot
from structslot.errors import ConfigurationError, ValidationError


@dataclass(eq=False)
class SequenceTypeState(TypeState):
    value_slot: Slot


SEQUENCE_TYPE_STATE: PrivateStore[SequenceTypeState] = PrivateStore("Sequence type")
SEQUENCE_INSTANCE_STATE: PrivateStore[InstanceState] = PrivateStore("Sequence instance")


def is_index(value: object) -> bool:
    """Whether *value* is a valid 1-based index (``bool`` excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _check_index(index: Any) -> int:
    if not is_index(index):
        msg = f"sequence index must be a positive integer: {index!r}"
        raise ValidationError(msg, field=index)
    return int(index)


def ordered_values(data: Any) -> list[Any]:
    """Flatten an ordered input into a list of values for indices ``1..N``.

    Accepts a list/tuple, a sequence instance, any other non-string
    iterable, or a mapping of positive integer index to value.
    """
    if isinstance(data, SequenceInstance):
        return list(SEQUENCE_INSTANCE_STATE.get(data).data)
    if isinstance(data, Mapping):
        indices = list(data.keys())
        if not all(is_index(index) for index in indices):
            msg = "sequence indices must be positive integers"
            raise ValidationError(msg)
        if sorted(indices) != list(range(1, len(indices) + 1)):
            msg = "sequence indices must be contiguous"
            raise ValidationError(msg)
        return [data[index] for index in range(1, len(indices) + 1)]
    if isinstance(data, Iterable) and not isinstance(data, (str, bytes, bytearray)):
        return list(data)
    msg = f"Sequence data must be an ordered collection, got {type(data).__name__}"
    raise ValidationError(msg)


class SequenceInstance(StructuredInstance):
    """Instance of a :class:`SequenceType`. Indices start at 1."""

    __slots__ = ()

    _store: ClassVar[PrivateStore[InstanceState]] = SEQUENCE_INSTANCE_STATE

    @property
    def length(self) -> int:
        return len(SEQUENCE_INSTANCE_STATE.get(self).data)

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, index: int) -> Any:
        """Return the element at *index*, or None when out of range."""
        position = _check_index(index)
        data = SEQUENCE_INSTANCE_STATE.get(self).data
        if position > len(data):
            return None
        return data[position - 1]

    def __setitem__(self, index: int, value: Any) -> None:
        state = SEQUENCE_INSTANCE_STATE.get(self)
        ensure_mutable(state)
        position = _check_index(index)

        accepted, message = state.owner._type_state().value_slot.validate(value)
        if message is not None:
            msg = f"index {position}: {message}"
            raise ValidationError(msg, field=position)

        data: list[Any] = state.data
        if position <= len(data):
            previous = data[position - 1]
            data[position - 1] = accepted

            def undo() -> None:
                data[position - 1] = previous

        elif position == len(data) + 1:
            data.append(accepted)

            def undo() -> None:
                data.pop()

        else:
            msg = "sequence indices must be contiguous"
            raise ValidationError(msg, field=position)

        commit(state, undo, field=position)

    def append(self, value: Any) -> None:
        """Add *value* at index ``len + 1``."""
        self[self.length + 1] = value

    def remove(self, index: int | None = None) -> Any:
        """Remove and return the element at *index* (default: the last one).

        Later elements shift down by one so the indices stay contiguous.
        """
        state = SEQUENCE_INSTANCE_STATE.get(self)
        ensure_mutable(state)
        data: list[Any] = state.data

        if index is None:
            if not data:
                msg = "cannot remove from an empty sequence"
                raise ValidationError(msg)
            index = len(data)
        position = _check_index(index)
        if position > len(data):
            msg = f"sequence index out of range: {position}"
            raise ValidationError(msg, field=position)

        removed = data.pop(position - 1)

        def undo() -> None:
            data.insert(position - 1, removed)

        commit(state, undo, field=position)
        return removed

    def items(self) -> Iterator[tuple[int, Any]]:
        """Yield ``(index, value)`` pairs in index order."""
        return enumerate(list(SEQUENCE_INSTANCE_STATE.get(self).data), start=1)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(SEQUENCE_INSTANCE_STATE.get(self).data))

    def __repr__(self) -> str:
        state = SEQUENCE_INSTANCE_STATE.get(self)
        value_slot = state.owner._type_state().value_slot
        values = ", ".join(value_slot.format(value) for value in state.data)
        label = state.owner.name or "Sequence"
        return f"{label}([{values}])"


class SequenceType(StructuredType):
    """Factory and handle for a sequence schema.

    Args:
        value_slot: SlotSpec every element must satisfy (default ``AnySlot``).
        freeze_instances: Every instance is born frozen.
        validator: Cross-element validator; receives a tuple of the elements.
        name: Display name used in messages.
    """

    __slots__ = ()

    family: ClassVar[str] = "Sequence"
    _type_store: ClassVar[PrivateStore[SequenceTypeState]] = SEQUENCE_TYPE_STATE
    _instance_cls: ClassVar[type[StructuredInstance]] = SequenceInstance

    def __init__(self, *, value_slot: Any = AnySlot, **flags: Any) -> None:
        parsed = parse_flags(TypeFlags, flags, "Sequence type")
        try:
            slot = resolve_slot_spec(AnySlot if value_slot is None else value_slot)
        except ConfigurationError as exc:
            msg = f"Sequence value_slot: {exc}"
            raise ConfigurationError(msg) from exc
        register_type(self, build_type_state(parsed, SequenceTypeState, value_slot=slot))

    @classmethod
    def create(cls, config: Mapping[str, Any] | None = None) -> SequenceType:
        """Create a sequence type from an optional config mapping."""
        return cls(**keyword_options(config, "Sequence config"))

    @property
    def value_slot(self) -> Slot:
        return SEQUENCE_TYPE_STATE.get(self).value_slot

    def __call__(self, data: Any = None, *, frozen: bool | None = None) -> SequenceInstance:
        """Construct an instance from an ordered input (default: empty)."""
        values = ordered_values([] if data is None else data)
        is_frozen = self._resolve_frozen(frozen)

        value_slot = SEQUENCE_TYPE_STATE.get(self).value_slot
        initial: list[Any] = []
        for position, value in enumerate(values, start=1):
            accepted, message = value_slot.validate(value)
            if message is not None:
                msg = f"index {position}: {message}"
                raise ValidationError(msg, field=position)
            initial.append(accepted)

        instance = self._new_instance(initial, is_frozen)
        assert isinstance(instance, SequenceInstance)
        return instance

    def _snapshot(self, data: list[Any]) -> tuple[Any, ...]:
        return tuple(data)

    def _entries(self, data: list[Any]) -> Iterable[tuple[int, Any]]:
        return list(enumerate(data, start=1))
