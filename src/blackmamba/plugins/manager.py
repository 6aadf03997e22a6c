"""Plugin loading and hook relay for a runtime.

Plugins come from the ``blackmamba.plugins`` entry point group and from
single ``*.py`` files in the project's local plugin directory. The runtime
reports lifecycle events through :meth:`PluginManager.notify`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

import pluggy

from blackmamba.infrastructure.loaders import load_module_file
from blackmamba.plugins.hookspecs import BlackMambaHookSpec

if TYPE_CHECKING:
    from blackmamba.config.settings import BmSettings

PROJECT_NAME = "blackmamba"
ENTRY_POINT_GROUP = "blackmamba.plugins"
LOCAL_MODULE_PREFIX = "blackmamba_local_plugin"

logger = logging.getLogger(__name__)


def has_hook_impls(obj: Any) -> bool:
    """Whether *obj* has a public method marked with ``@hookimpl``."""
    return any(
        getattr(getattr(obj, name, None), f"{PROJECT_NAME}_impl", None)
        for name in dir(obj)
        if not name.startswith("_")
    )


def plugin_classes(module: ModuleType) -> Iterator[type]:
    """Hook-carrying classes defined in *module* (imported ones are skipped)."""
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and has_hook_impls(obj):
            yield obj


class PluginManager:
    """The pluggy manager a runtime reports to.

    INVARIANT: Plugin failures are warnings, never errors. This holds for
    loading (a broken file or entry point is skipped) and for hook calls.
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BlackMambaHookSpec)

    @classmethod
    def from_settings(cls, settings: BmSettings) -> PluginManager | None:
        """Manager loaded as the ``[plugins]`` section says; None when disabled."""
        if not settings.plugins.enabled:
            logger.debug("Plugins disabled in %s", settings.config_path or "settings")
            return None
        manager = cls()
        manager.discover(local_dir=settings.plugins_dir)
        return manager

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry point plugins, then the files in *local_dir*.

        Files starting with ``_`` are skipped. Returns all plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_entry_point_classes()

        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_"):
                    self._load_local(path)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved)
        logger.debug("Registered plugin: %s", resolved)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def notify(self, hook_name: str, **payload: Any) -> None:
        """Call hook *hook_name* on every plugin; a raising plugin is logged."""
        try:
            getattr(self._pm.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)

    # ------------------------------------------------------------------

    def _instantiate_entry_point_classes(self) -> None:
        """Entry points may name a class; hooks need an instance to bind ``self``."""
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not has_hook_impls(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)

    def _load_local(self, path: Path) -> None:
        module_name = f"{LOCAL_MODULE_PREFIX}_{path.stem}"
        try:
            module = load_module_file(path, module_name)
        except Exception:
            logger.warning("Failed to load local plugin %s", path, exc_info=True)
            return

        for cls in plugin_classes(module):
            try:
                self.register_plugin(cls(), name=module_name)
            except Exception:
                logger.warning(
                    "Failed to register plugin class %s from %s", cls.__name__, path, exc_info=True
                )
