"""Identity-keyed private state for opaque handles.

Slots, structured types, and structured instances are public handles with no
state of their own. Their data lives in a :class:`PrivateStore` keyed weakly
by handle identity, so it is invisible through the handle's public surface
and reclaimed as soon as the handle becomes unreachable.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from typing import Generic, TypeVar

from structslot.errors import StructLookupError

StateT = TypeVar("StateT")


class PrivateStore(Generic[StateT]):
    """Weak side-table mapping a handle to its private state.

    Handles must support weak references and hash by identity
    (the default ``object`` behaviour).
    """

    def __init__(self, label: str) -> None:
        self._label = label
        self._entries: weakref.WeakKeyDictionary[object, StateT] = weakref.WeakKeyDictionary()

    @property
    def label(self) -> str:
        return self._label

    def attach(self, handle: object, state: StateT) -> None:
        """Bind *state* to *handle*. A handle is bound at most once."""
        if handle in self._entries:
            msg = f"{self._label} already initialized: {handle!r}"
            raise StructLookupError(msg)
        self._entries[handle] = state

    def get(self, handle: object) -> StateT:
        """Return the state bound to *handle*.

        Raises:
            StructLookupError: If *handle* was not created by this store's owner.
        """
        try:
            return self._entries[handle]
        except (KeyError, TypeError):
            msg = f"{self._label} not recognized: {type(handle).__name__} object"
            raise StructLookupError(msg) from None

    def owns(self, handle: object) -> bool:
        """Whether *handle* has state in this store."""
        try:
            return handle in self._entries
        except TypeError:
            # unhashable or not weak-referenceable
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[object]:
        return iter(list(self._entries.keys()))

    def __repr__(self) -> str:
        return f"<PrivateStore {self._label} entries={len(self)}>"
