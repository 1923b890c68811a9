"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Plugins are loaded lazily so ``--help`` and
``--version`` never import third-party entry points.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from structslot.config.settings import StructSettings
    from structslot.plugins.manager import PluginManager


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: StructSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from structslot.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager, discovered on first access when enabled."""
        if self._plugins is None:
            from structslot.plugins.manager import PluginManager

            self._plugins = PluginManager()
            if self.settings.load_plugins:
                self._plugins.discover_and_load()
        return self._plugins
