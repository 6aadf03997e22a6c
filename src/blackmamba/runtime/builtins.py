"""System modules every runtime registers for itself.

They are ordinary built modules, so a descriptor can list them under
``dependencies.packages`` to hand a module a way back into its runtime::

    {"name": "router", "source": "router.py",
     "dependencies": {"packages": ["execute"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from blackmamba.runtime.engine import BlackMamba


def system_modules(runtime: BlackMamba) -> dict[str, Any]:
    """Map system module ids to the callables they expose."""
    modules: dict[str, Any] = {
        "get_root_directory": lambda: runtime.root_directory,
        "get_sources_directory": lambda: runtime.sources_directory,
        "get_packages_directory": lambda: runtime.packages_directory,
        "execute": runtime.execute,
        "register": runtime.register,
        "has_not_module": runtime.has_not_module,
        "get_module": runtime.get_module,
    }
    if runtime.fallback_enabled:
        modules["execute_with_fallback"] = runtime.execute_with_fallback
    return modules
