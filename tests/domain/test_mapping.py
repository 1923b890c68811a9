"""Tests for MappingType and mapping instances."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

import pytest

from structslot.domain.mapping import MappingInstance, MappingType
from structslot.domain.slots import AnySlot, IntegerSlot, Slot, StringSlot
from structslot.errors import (
    ConfigurationError,
    FrozenError,
    StructLookupError,
    ValidationError,
)


def _lowercase_key(value: Any) -> tuple[Any, str | None]:
    if isinstance(value, str):
        return value.lower(), None
    return None, "key must be a string"


def _total_at_most_ten(snapshot: Any) -> str | None:
    if sum(snapshot.values()) > 10:
        return "total exceeds 10"
    return None


@pytest.fixture
def scores() -> MappingType:
    return MappingType(key_slot=StringSlot, value_slot=IntegerSlot, name="Scores")


class TestMappingTypeCreate:
    def test_defaults(self) -> None:
        map_type = MappingType()
        assert map_type.key_slot is AnySlot
        assert map_type.value_slot is AnySlot

    def test_create_from_config(self) -> None:
        map_type = MappingType.create({"key_slot": "string", "value_slot": "number"})
        assert map_type.key_slot is StringSlot

    @pytest.mark.parametrize("config", [{None: 1}, {1: "string"}])
    def test_create_non_string_config_keys(self, config: dict[Any, Any]) -> None:
        with pytest.raises(ConfigurationError, match="Mapping config keys must be strings"):
            MappingType.create(config)

    def test_create_unknown_config_key(self) -> None:
        with pytest.raises(ConfigurationError, match="Extra inputs"):
            MappingType.create({"keys": "string"})

    def test_bad_key_slot(self) -> None:
        with pytest.raises(ConfigurationError, match="key_slot"):
            MappingType(key_slot=object())

    def test_is_type(self, scores: MappingType) -> None:
        assert MappingType.is_type(scores)
        assert not MappingType.is_type({})


class TestMappingConstruction:
    def test_from_mapping(self, scores: MappingType) -> None:
        m = scores({"alice": 3, "bob": 4})
        assert isinstance(m, MappingInstance)
        assert isinstance(m, MutableMapping)
        assert m["alice"] == 3
        assert len(m) == 2

    def test_accepted_key_used_for_storage(self) -> None:
        lowered = MappingType(key_slot=Slot.create(_lowercase_key))
        m = lowered({"Alice": 1})
        assert list(m) == ["alice"]

    def test_key_rejection(self, scores: MappingType) -> None:
        with pytest.raises(ValidationError, match="key 1: slot value must be a string") as exc_info:
            scores({1: 1})
        assert exc_info.value.field == 1

    def test_value_rejection(self, scores: MappingType) -> None:
        with pytest.raises(ValidationError, match="'alice': slot value must be an integer"):
            scores({"alice": "three"})

    def test_unhashable_accepted_key(self) -> None:
        listy = MappingType(key_slot=Slot.create(lambda value: ([value], None)))
        with pytest.raises(ValidationError, match="hashable"):
            listy({"a": 1})

    def test_cross_validator(self) -> None:
        capped = MappingType(value_slot=IntegerSlot, validator=_total_at_most_ten)
        with pytest.raises(ValidationError, match="mapping data is not valid: total exceeds 10"):
            capped({"a": 6, "b": 5})

    def test_data_must_be_mapping(self, scores: MappingType) -> None:
        with pytest.raises(ValidationError, match="must be a mapping"):
            scores([("a", 1)])  # type: ignore[arg-type]

    def test_repr(self, scores: MappingType) -> None:
        assert repr(scores({"a": 1})) == 'Scores({"a": 1})'


class TestMappingAccess:
    def test_missing_key(self, scores: MappingType) -> None:
        m = scores()
        with pytest.raises(StructLookupError, match="key not found"):
            m["nobody"]
        with pytest.raises(StructLookupError):
            m[["unhashable"]]

    def test_get_and_contains(self, scores: MappingType) -> None:
        m = scores({"a": 1})
        assert m.get("a") == 1
        assert m.get("b") is None
        assert m.get("b", 0) == 0
        assert "a" in m
        assert "b" not in m
        assert [] not in m

    def test_items_and_iter(self, scores: MappingType) -> None:
        m = scores({"a": 1, "b": 2})
        assert dict(m.items()) == {"a": 1, "b": 2}
        assert sorted(m) == ["a", "b"]

    def test_identity_equality(self, scores: MappingType) -> None:
        first = scores({"a": 1})
        second = scores({"a": 1})
        assert first == first
        assert first != second
        assert len({first, second}) == 2


class TestMappingMutation:
    def test_set_and_delete(self, scores: MappingType) -> None:
        m = scores()
        m["a"] = 1
        m["a"] = 2
        assert m["a"] == 2
        del m["a"]
        assert "a" not in m

    def test_new_key_removed_on_rejection(self) -> None:
        capped = MappingType(value_slot=IntegerSlot, validator=_total_at_most_ten)
        m = capped({"a": 6})
        with pytest.raises(ValidationError, match="total exceeds 10") as exc_info:
            m["b"] = 5
        assert exc_info.value.field == "b"
        assert "b" not in m

    def test_prior_value_restored_on_rejection(self) -> None:
        capped = MappingType(value_slot=IntegerSlot, validator=_total_at_most_ten)
        m = capped({"a": 6, "b": 1})
        with pytest.raises(ValidationError):
            m["b"] = 5
        assert m["b"] == 1

    def test_delete_rollback(self) -> None:
        def required_key(snapshot: Any) -> str | None:
            return None if "id" in snapshot else "id is required"

        keyed = MappingType(validator=required_key)
        m = keyed({"id": 1, "other": 2})
        with pytest.raises(ValidationError, match="id is required"):
            del m["id"]
        assert m["id"] == 1

    def test_delete_missing_key(self, scores: MappingType) -> None:
        with pytest.raises(StructLookupError):
            del scores()["ghost"]

    def test_update_routes_through_validation(self, scores: MappingType) -> None:
        m = scores()
        m.update({"a": 1})
        with pytest.raises(ValidationError):
            m.update({"b": "x"})
        assert dict(m) == {"a": 1}

    def test_frozen(self, scores: MappingType) -> None:
        m = scores({"a": 1})
        scores.freeze(m)
        with pytest.raises(FrozenError, match="Mapping instance is frozen"):
            m["b"] = 2
        with pytest.raises(FrozenError):
            del m["a"]
        assert dict(m) == {"a": 1}
