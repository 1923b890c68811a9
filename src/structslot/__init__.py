"""structslot — runtime schemas for dynamically shaped data."""

from __future__ import annotations

from structslot.compat import check_python_version
from structslot.domain.constraints import (
    ArrayConstraintSlot,
    MapConstraintSlot,
    MemberOf,
    Optional,
)
from structslot.domain.mapping import MappingInstance, MappingType
from structslot.domain.record import RecordInstance, RecordType
from structslot.domain.registry import register_slot, resolve_slot_spec, unregister_slot
from structslot.domain.sequence import SequenceInstance, SequenceType
from structslot.domain.slots import (
    AnySlot,
    BooleanSlot,
    FloatSlot,
    IntegerSlot,
    NumberSlot,
    Slot,
    SlotOperation,
    StringSlot,
)
from structslot.domain.traversal import (
    TreeIssue,
    collect_tree_issues,
    freeze_tree,
    is_structured_instance,
    is_structured_type,
    nested_children,
    validate_tree,
)
from structslot.errors import (
    ConfigurationError,
    ContractViolation,
    FrozenError,
    StructError,
    StructLookupError,
    UnsupportedOperation,
    ValidationError,
)

__version__ = "0.1.0"

check_python_version()

__all__ = [
    "AnySlot",
    "ArrayConstraintSlot",
    "BooleanSlot",
    "ConfigurationError",
    "ContractViolation",
    "FloatSlot",
    "FrozenError",
    "IntegerSlot",
    "MapConstraintSlot",
    "MappingInstance",
    "MappingType",
    "MemberOf",
    "NumberSlot",
    "Optional",
    "RecordInstance",
    "RecordType",
    "SequenceInstance",
    "SequenceType",
    "Slot",
    "SlotOperation",
    "StringSlot",
    "StructError",
    "StructLookupError",
    "TreeIssue",
    "UnsupportedOperation",
    "ValidationError",
    "__version__",
    "collect_tree_issues",
    "freeze_tree",
    "is_structured_instance",
    "is_structured_type",
    "nested_children",
    "register_slot",
    "resolve_slot_spec",
    "unregister_slot",
    "validate_tree",
]
