"""Debug-only access to the private stores.

Disabled unless ``STRUCTSLOT_LEAK_INTERNALS=TRUE`` (or the equivalent
settings override). The returned structure is unstable and exists for test
harnesses and debugging sessions only.
"""

from __future__ import annotations

import logging
from typing import Any

from structslot.config.settings import StructSettings
from structslot.errors import ConfigurationError

logger = logging.getLogger(__name__)


def leak_internals(settings: StructSettings | None = None) -> dict[str, Any]:
    """Expose the private stores and traversal helpers.

    Raises:
        ConfigurationError: If internals leaking is not enabled.
    """
    settings = settings or StructSettings.from_env()
    if not settings.leak_internals:
        msg = "Internals are not exposed; set STRUCTSLOT_LEAK_INTERNALS=TRUE to enable"
        raise ConfigurationError(msg)

    from structslot.domain import traversal
    from structslot.domain.mapping import MAPPING_INSTANCE_STATE, MAPPING_TYPE_STATE
    from structslot.domain.record import RECORD_INSTANCE_STATE, RECORD_TYPE_STATE
    from structslot.domain.registry import SLOT_REGISTRY
    from structslot.domain.sequence import SEQUENCE_INSTANCE_STATE, SEQUENCE_TYPE_STATE
    from structslot.domain.slots import SLOT_STATE

    logger.warning("Leaking structslot internals; private state is now reachable")
    return {
        "slot_state": SLOT_STATE,
        "slot_registry": SLOT_REGISTRY,
        "record_type_state": RECORD_TYPE_STATE,
        "record_instance_state": RECORD_INSTANCE_STATE,
        "sequence_type_state": SEQUENCE_TYPE_STATE,
        "sequence_instance_state": SEQUENCE_INSTANCE_STATE,
        "mapping_type_state": MAPPING_TYPE_STATE,
        "mapping_instance_state": MAPPING_INSTANCE_STATE,
        "is_structured_instance": traversal.is_structured_instance,
        "is_structured_type": traversal.is_structured_type,
        "nested_children": traversal.nested_children,
    }
