"""Shared machinery for the three structured-type families.

A structured *type* (Record, Sequence, Mapping) is an immutable schema
handle; calling it produces structured *instances*. Both kinds of handle are
stateless objects whose data lives in per-family :class:`PrivateStore`
side-tables, which is also how the traversal engine recognizes them.

INVARIANT: After every successful construction or mutation, the owning
type's cross-field validator accepts the instance's live snapshot.
INVARIANT: ``frozen`` only ever goes from False to True.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, StrictBool
from pydantic import ValidationError as PydanticValidationError

from structslot.domain.private import PrivateStore
from structslot.errors import (
    ConfigurationError,
    ContractViolation,
    FrozenError,
    StructLookupError,
    ValidationError,
)

logger = logging.getLogger(__name__)

CrossValidator = Callable[[Any], str | None]
Undo = Callable[[], None]

ModelT = TypeVar("ModelT", bound=BaseModel)


def accept_all(_snapshot: Any) -> None:
    """Default cross-field validator: every snapshot is valid."""
    return None


# ---------------------------------------------------------------------------
# Flag models
# ---------------------------------------------------------------------------


class TypeFlags(BaseModel):
    """Flags shared by every structured type factory."""

    model_config = {"frozen": True, "extra": "forbid"}

    freeze_instances: StrictBool = False
    validator: Callable[[Any], Any] | None = None
    name: str | None = None


class InstanceFlags(BaseModel):
    """Per-instance construction flags."""

    model_config = {"frozen": True, "extra": "forbid"}

    frozen: StrictBool | None = None


def parse_flags(model_cls: type[ModelT], data: Mapping[str, Any] | None, label: str) -> ModelT:
    """Validate *data* against *model_cls*, translating failures to ConfigurationError."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        msg = f"{label} flags must be a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)
    try:
        return model_cls.model_validate(dict(data))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "flags"
        msg = f"{label} {location}: {first['msg']}"
        raise ConfigurationError(msg) from exc


def keyword_options(options: Mapping[Any, Any] | None, label: str) -> dict[str, Any]:
    """Copy an options mapping so it can be unpacked as keyword arguments."""
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        msg = f"{label} must be a mapping, got {type(options).__name__}"
        raise ConfigurationError(msg)
    for key in options:
        if not isinstance(key, str):
            msg = f"{label} keys must be strings, got {type(key).__name__}"
            raise ConfigurationError(msg)
    return dict(options)


# ---------------------------------------------------------------------------
# Private state
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class TypeState:
    """Private state common to every structured type."""

    name: str | None
    freeze_instances: bool
    validator: CrossValidator


@dataclass(eq=False)
class InstanceState:
    """Private state of a structured instance.

    ``data`` is family specific: a dict for records and mappings, a list
    for sequences.
    """

    owner: StructuredType
    data: Any
    frozen: bool = False


# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------


class StructuredInstance:
    """Base class of every structured instance handle.

    Instances carry no attributes of their own; see :class:`InstanceState`.
    """

    __slots__ = ("__weakref__",)

    _store: ClassVar[PrivateStore[InstanceState]]


class StructuredType:
    """Base class of the Record, Sequence, and Mapping type handles."""

    __slots__ = ("__weakref__",)

    family: ClassVar[str] = "Structured"
    _type_store: ClassVar[PrivateStore[Any]]
    _instance_cls: ClassVar[type[StructuredInstance]]

    # -- subclass hooks -----------------------------------------------------

    def _snapshot(self, data: Any) -> Any:
        """Read-only view of *data* handed to the cross-field validator."""
        raise NotImplementedError

    def _entries(self, data: Any) -> Iterable[tuple[Any, Any]]:
        """``(key, value)`` pairs of *data*, in enumeration order."""
        raise NotImplementedError

    # -- public surface -----------------------------------------------------

    @classmethod
    def is_type(cls, value: object) -> bool:
        """Whether *value* is a live type created by this factory."""
        return isinstance(value, cls) and cls._type_store.owns(value)

    @property
    def name(self) -> str | None:
        return self._type_state().name

    @property
    def display_name(self) -> str:
        """Name used in messages and by ``MemberOf`` formatting."""
        name = self._type_state().name
        if name:
            return name
        return f"{self.family}Type at {id(self):#x}"

    @property
    def freeze_instances(self) -> bool:
        return self._type_state().freeze_instances

    def is_instance(self, value: object) -> bool:
        """True iff *value* is a live instance created by exactly this type."""
        store = self._instance_cls._store
        if not isinstance(value, self._instance_cls) or not store.owns(value):
            return False
        return store.get(value).owner is self

    def is_frozen(self, instance: StructuredInstance) -> bool:
        return self._own(instance).frozen

    def freeze(self, instance: StructuredInstance) -> StructuredInstance:
        """Validate and freeze *instance* and every instance nested in it.

        Returns *instance* to make chaining easy.
        """
        from structslot.domain.traversal import freeze_tree

        self._own(instance)
        return freeze_tree(instance)

    def validate(self, instance: StructuredInstance) -> tuple[bool, str | None]:
        """Query form of tree validation; returns ``(ok, message)``."""
        from structslot.domain.traversal import validate_tree

        self._own(instance)
        return validate_tree(instance)

    # -- helpers shared by the families -------------------------------------

    def _type_state(self) -> Any:
        return self._type_store.get(self)

    def _own(self, instance: object) -> InstanceState:
        """Return *instance*'s state, requiring that this type created it."""
        if not self.is_instance(instance):
            kind = type(instance).__name__
            msg = f"{self.family} type method used with incompatible instance: {kind}"
            raise StructLookupError(msg)
        return self._instance_cls._store.get(instance)

    def _resolve_frozen(self, frozen: Any) -> bool:
        flags = parse_flags(
            InstanceFlags,
            {} if frozen is None else {"frozen": frozen},
            f"{self.family} instance",
        )
        state = self._type_state()
        if state.freeze_instances and flags.frozen is False:
            msg = f"{self.family} type freeze_instances requires instances to also be frozen"
            raise ConfigurationError(msg)
        return bool(flags.frozen) or state.freeze_instances

    def _check(self, data: Any) -> str | None:
        """Run the cross-field validator against *data*; return its message."""
        message = self._type_state().validator(self._snapshot(data))
        if message is not None and not isinstance(message, str):
            msg = f"{self.family} validator function must return a string message or None"
            raise ContractViolation(msg)
        return message

    def _new_instance(self, data: Any, frozen: bool) -> StructuredInstance:
        message = self._check(data)
        if message is not None:
            msg = f"{self.family.lower()} data is not valid: {message}"
            raise ValidationError(msg)

        instance = object.__new__(self._instance_cls)
        state = InstanceState(owner=self, data=data, frozen=frozen)
        self._instance_cls._store.attach(instance, state)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{self.family} type definition cannot be modified"
        raise FrozenError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{self.family} type definition cannot be modified"
        raise FrozenError(msg)

    def __repr__(self) -> str:
        name = self._type_state().name
        if name:
            return f"<{self.family}Type {name}>"
        return f"<{self.family}Type at {id(self):#x}>"


def instance_state(instance: object) -> InstanceState:
    """Look up the private state of any structured instance."""
    if not isinstance(instance, StructuredInstance):
        msg = f"Structured instance not recognized: {type(instance).__name__}"
        raise StructLookupError(msg)
    return type(instance)._store.get(instance)


def ensure_mutable(state: InstanceState) -> None:
    if state.frozen:
        msg = f"{state.owner.family} instance is frozen"
        raise FrozenError(msg)


def commit(state: InstanceState, undo: Undo, *, field: Any = None) -> None:
    """Re-check a staged mutation, rolling it back via *undo* on rejection.

    The staged change has already been applied to ``state.data``. Any
    exception escaping the cross-field validator also rolls back.
    """
    owner = state.owner
    try:
        message = owner._check(state.data)
    except BaseException:
        undo()
        raise
    if message is not None:
        undo()
        msg = f"{owner.family.lower()} data is not valid: {message}"
        raise ValidationError(msg, field=field)


def build_type_state(
    flags: TypeFlags,
    state_cls: type[TypeState],
    **extra: Any,
) -> TypeState:
    """Create a family's type state from parsed flags plus family fields."""
    return state_cls(
        name=flags.name,
        freeze_instances=flags.freeze_instances,
        validator=flags.validator or accept_all,
        **extra,
    )


def register_type(handle: StructuredType, state: TypeState) -> None:
    type(handle)._type_store.attach(handle, state)
    logger.debug("Created %s type %r", handle.family, handle)
