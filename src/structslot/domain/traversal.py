"""Generic traversal over trees of nested structured instances.

Works polymorphically across records, sequences, and mappings through the
shared :class:`StructuredInstance` / :class:`StructuredType` handles. Walks
are breadth-first from the root; each instance is visited once, tracked by
identity, so shared sub-instances and cycles do not loop forever.

``freeze_tree`` is all-or-nothing: every reachable instance is validated
before any of them is frozen.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field

from structslot.domain.base import (
    InstanceState,
    StructuredInstance,
    StructuredType,
    instance_state,
)
from structslot.errors import ValidationError

logger = logging.getLogger(__name__)


class TreeIssue(BaseModel):
    """One failing instance found by :func:`collect_tree_issues`.

    Attributes:
        path: Keys leading from the root to the instance (empty for the root).
        type_name: Display name of the instance's type.
        message: The cross-field validator's message.
    """

    model_config = {"frozen": True}

    path: tuple[Any, ...] = Field(default_factory=tuple)
    type_name: str
    message: str


def is_structured_instance(value: object) -> bool:
    """Whether *value* is a live record, sequence, or mapping instance."""
    return isinstance(value, StructuredInstance) and type(value)._store.owns(value)


def is_structured_type(value: object) -> bool:
    """Whether *value* is a live record, sequence, or mapping type."""
    return isinstance(value, StructuredType) and type(value)._type_store.owns(value)


def nested_children(instance: StructuredInstance) -> list[StructuredInstance]:
    """Structured instances held directly (one level deep) by *instance*."""
    state = instance_state(instance)
    entries = state.owner._entries(state.data)
    return [value for _key, value in entries if is_structured_instance(value)]


def _walk(
    root: StructuredInstance,
) -> Iterator[tuple[StructuredInstance, InstanceState, tuple[Any, ...]]]:
    """Yield ``(instance, state, path)`` in breadth-first order from *root*."""
    instance_state(root)
    queue: deque[tuple[StructuredInstance, tuple[Any, ...]]] = deque([(root, ())])
    seen = {id(root)}
    while queue:
        instance, path = queue.popleft()
        state = instance_state(instance)
        yield instance, state, path

        for key, value in state.owner._entries(state.data):
            if is_structured_instance(value) and id(value) not in seen:
                seen.add(id(value))
                queue.append((value, (*path, key)))


def validate_tree(root: StructuredInstance) -> tuple[bool, str | None]:
    """Check every reachable instance against its type's cross-field validator.

    Returns ``(True, None)`` when all pass, otherwise ``(False, message)``
    for the first failure in breadth-first order.
    """
    for _instance, state, _path in _walk(root):
        message = state.owner._check(state.data)
        if message is not None:
            return False, message
    return True, None


def collect_tree_issues(root: StructuredInstance) -> list[TreeIssue]:
    """Like :func:`validate_tree`, but report every failing instance."""
    issues: list[TreeIssue] = []
    for _instance, state, path in _walk(root):
        message = state.owner._check(state.data)
        if message is not None:
            issues.append(
                TreeIssue(path=path, type_name=state.owner.display_name, message=message)
            )
    return issues


def freeze_tree(root: StructuredInstance) -> StructuredInstance:
    """Validate, then freeze, *root* and every instance reachable from it.

    Raises:
        ValidationError: If any reachable instance fails validation. Nothing
            is frozen in that case.
    """
    visited = list(_walk(root))
    for _instance, state, path in visited:
        message = state.owner._check(state.data)
        if message is not None:
            msg = f"{state.owner.family.lower()} data is not valid: {message}"
            raise ValidationError(msg, field=path or None)

    for _instance, state, _path in visited:
        state.frozen = True

    logger.debug("Froze %d structured instances", len(visited))
    return root
