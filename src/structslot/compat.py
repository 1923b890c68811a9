"""Interpreter compatibility check, run once when the package is imported."""

from __future__ import annotations

import logging
import sys
import warnings
from collections.abc import Sequence

MIN_PYTHON: tuple[int, int] = (3, 11)

logger = logging.getLogger(__name__)


def check_python_version(version_info: Sequence[int] | None = None) -> bool:
    """Warn when running on an interpreter older than :data:`MIN_PYTHON`.

    Returns True when the interpreter is supported.
    """
    current = tuple(version_info if version_info is not None else sys.version_info)[:2]
    if current >= MIN_PYTHON:
        return True

    found = ".".join(str(part) for part in current)
    required = ".".join(str(part) for part in MIN_PYTHON)
    msg = f"structslot is untested on Python {found}; Python {required} or newer is required"
    logger.warning(msg)
    warnings.warn(msg, RuntimeWarning, stacklevel=2)
    return False
