"""Error taxonomy for structslot.

Every error raised by the library derives from :class:`StructError`, and
additionally from the closest builtin so callers can catch either.
Errors are raised synchronously at the point of detection.
"""

from __future__ import annotations

from typing import Any


class StructError(Exception):
    """Base class for all structslot errors."""


class ConfigurationError(StructError, ValueError):
    """Malformed Slot or Type construction input, or bad instance flags."""


class ValidationError(StructError, ValueError):
    """A slot validator or cross-field validator rejected a value.

    Attributes:
        field: Originating field name, sequence index, or mapping key.
            None when the failure concerns the snapshot as a whole.
    """

    def __init__(self, message: str, *, field: Any = None) -> None:
        super().__init__(message)
        self.field = field


class StructLookupError(StructError, LookupError):
    """Unknown field or key, or a type method used with a foreign instance."""


class FrozenError(StructError):
    """Mutation attempted on a frozen instance or an immutable definition."""


class ContractViolation(StructError, TypeError):
    """A user-supplied validator or formatter broke its return contract."""


class UnsupportedOperation(StructError, NotImplementedError):
    """Unrecognized slot operation kind."""


class UnknownFieldError(StructLookupError, AttributeError):
    """A record field that the type does not declare.

    Also an AttributeError, so ``getattr(record, name, default)`` and
    ``hasattr`` behave as usual for undeclared names.
    """


class UnknownKeyError(StructLookupError, KeyError):
    """A mapping key that is not present.

    Also a KeyError, so mapping-protocol helpers treat it as a missing key.
    """
