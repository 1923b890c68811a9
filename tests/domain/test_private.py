"""Tests for PrivateStore, the weak identity-keyed side-table."""

from __future__ import annotations

import gc

import pytest

from structslot.domain.private import PrivateStore
from structslot.domain.record import RECORD_INSTANCE_STATE, RecordType
from structslot.domain.slots import IntegerSlot
from structslot.errors import StructLookupError


class _Handle:
    __slots__ = ("__weakref__",)


class TestPrivateStore:
    def test_attach_and_get(self) -> None:
        store: PrivateStore[int] = PrivateStore("Probe")
        handle = _Handle()
        store.attach(handle, 7)
        assert store.get(handle) == 7
        assert store.owns(handle)
        assert len(store) == 1

    def test_attach_twice_fails(self) -> None:
        store: PrivateStore[int] = PrivateStore("Probe")
        handle = _Handle()
        store.attach(handle, 1)
        with pytest.raises(StructLookupError, match="already initialized"):
            store.attach(handle, 2)

    def test_unknown_handle(self) -> None:
        store: PrivateStore[int] = PrivateStore("Probe")
        with pytest.raises(StructLookupError, match="Probe not recognized"):
            store.get(_Handle())

    def test_unhashable_is_not_owned(self) -> None:
        store: PrivateStore[int] = PrivateStore("Probe")
        assert not store.owns([])
        with pytest.raises(StructLookupError):
            store.get([])

    def test_entry_released_with_handle(self) -> None:
        store: PrivateStore[int] = PrivateStore("Probe")
        handle = _Handle()
        store.attach(handle, 1)
        del handle
        gc.collect()
        assert len(store) == 0

    def test_repr(self) -> None:
        assert repr(PrivateStore("Probe")) == "<PrivateStore Probe entries=0>"


class TestInstanceLifecycle:
    def test_instance_state_reclaimed(self) -> None:
        point = RecordType({"x": IntegerSlot})
        gc.collect()
        before = len(RECORD_INSTANCE_STATE)
        instance = point({"x": 1})
        assert len(RECORD_INSTANCE_STATE) == before + 1
        del instance
        gc.collect()
        assert len(RECORD_INSTANCE_STATE) == before
