"""Plugin discovery and loading.

Discovery: entry points (pip-installed) in the ``structslot.plugins`` group,
via pluggy's setuptools entry-point loader.
Capabilities: named slots for string SlotSpecs.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from structslot.plugins.hookspecs import PROJECT_NAME, StructslotHookSpec

ENTRY_POINT_GROUP = "structslot.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and slot registration."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(StructslotHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins and register the slots they provide.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        for plugin in self._pm.get_plugins():
            self._register_plugin_slots(plugin, self._plugin_name(plugin))
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly.

        Slots are registered right away when discovery has already run.
        """
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._register_plugin_slots(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance. Slots it registered stay registered."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._plugin_name(p) for p in self._pm.get_plugins()]

    def _plugin_name(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or plugin.__class__.__name__

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry points may name a class rather than an instance; hook calls
        against the class would leave ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _register_plugin_slots(plugin: object, plugin_name: str) -> list[str]:
        """Register the named slots exposed by a single plugin instance.

        Returns the names that were registered. Failures are logged and
        skipped.
        """
        from structslot.domain.registry import register_slot
        from structslot.errors import ConfigurationError

        hook = getattr(plugin, "register_slots", None)
        if hook is None:
            return []

        try:
            slot_map = hook()
        except Exception:
            logger.warning("Failed to collect slots from plugin %s", plugin_name, exc_info=True)
            return []

        if slot_map is None:
            return []
        if not isinstance(slot_map, dict):
            logger.warning("Plugin %s returned non-dict slot registrations", plugin_name)
            return []

        registered: list[str] = []
        for slot_name, slot in slot_map.items():
            try:
                register_slot(slot_name, slot)
            except ConfigurationError:
                logger.warning(
                    "Skipping slot registration %r from plugin %s",
                    slot_name,
                    plugin_name,
                    exc_info=True,
                )
                continue
            registered.append(slot_name)
        return registered

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("structslot")`` sets a ``structslot_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
