"""Registry — the per-instance lookup tables of a runtime.

Three independent tables: built modules by id, builders by id, and the
ids whose descriptor has been loaded at least once. The registry only
grows; nothing is ever removed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from blackmamba.domain.lifecycle import RegistrationState

if TYPE_CHECKING:
    from blackmamba.runtime.builder import Builder


class Registry:
    """Modules, builders and loaded-descriptor ids for one runtime."""

    def __init__(self) -> None:
        self._modules: dict[str, Any] = {}
        self._builders: dict[str, Builder] = {}
        self._loaded: set[str] = set()

    # --- modules ---

    def has_module(self, module_id: str) -> bool:
        return module_id in self._modules

    def get_module(self, module_id: str) -> Any | None:
        return self._modules.get(module_id)

    def set_module(self, module_id: str, module: Any) -> None:
        self._modules[module_id] = module

    def list_module_ids(self) -> list[str]:
        """Snapshot of module ids in insertion order."""
        return list(self._modules)

    # --- builders ---

    def has_builder(self, builder_id: str) -> bool:
        return builder_id in self._builders

    def get_builder(self, builder_id: str) -> Builder | None:
        return self._builders.get(builder_id)

    def set_builder(self, builder_id: str, builder: Builder) -> None:
        self._builders[builder_id] = builder

    # --- descriptors ---

    def mark_loaded(self, package_id: str) -> None:
        self._loaded.add(package_id)

    def is_loaded(self, package_id: str) -> bool:
        return package_id in self._loaded

    def state(self, package_id: str) -> RegistrationState:
        """Furthest lifecycle state *package_id* has reached."""
        if package_id in self._modules:
            return RegistrationState.MODULE_BUILT
        if package_id in self._builders:
            return RegistrationState.BUILDER_READY
        if package_id in self._loaded:
            return RegistrationState.DESCRIPTOR_LOADED
        return RegistrationState.UNKNOWN
