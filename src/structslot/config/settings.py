"""Process-wide settings — environment variables and explicit overrides.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click, or test overrides
  2. Env vars     — ``STRUCTSLOT_*`` prefix
  3. Code defaults

Only ambient concerns live here. Schema behaviour is configured per type,
never globally.
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings


class StructSettings(BaseSettings):
    """Unified settings for the structslot library and CLI.

    Attributes:
        leak_internals: Allow :func:`structslot.introspection.leak_internals`
            to expose the private stores. Set ``STRUCTSLOT_LEAK_INTERNALS=TRUE``.
        verbose: DEBUG-level logging for the ``structslot`` logger.
        log_json: JSON log lines instead of the console renderer.
        load_plugins: Load ``structslot.plugins`` entry points in the CLI.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STRUCTSLOT_",
    }

    leak_internals: bool = False
    verbose: bool = False
    log_json: bool = False
    load_plugins: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> StructSettings:
        """Read the environment, letting non-None *overrides* win."""
        return cls(**{key: value for key, value in overrides.items() if value is not None})
