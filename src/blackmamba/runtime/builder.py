"""Builder — reusable construction pipeline around a three-stage factory.

A factory has the shape ``factory(dependencies) -> constructor`` and
``constructor(settings) -> module``. Keeping the two stages apart lets one
builder stamp out many modules that share dependencies but differ in
settings::

    builder = create_builder(factory).inject({"log": log})
    loud = builder.apply_settings({"volume": 11}).build()
    quiet = builder.apply_settings({"volume": 1}).build()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeAlias

from blackmamba.domain.errors import ConstructionError

Factory: TypeAlias = Callable[[dict[str, Any]], Callable[[Any], Any]]


class Builder:
    """Owns a factory plus the dependency and settings slots it is built with.

    ``inject`` and ``apply_settings`` overwrite their slot (no merging) and
    return the builder itself. ``build`` never touches a registry.
    """

    __slots__ = ("dependencies", "factory", "settings")

    def __init__(self, factory: Factory) -> None:
        self.factory = factory
        self.dependencies: dict[str, Any] = {}
        self.settings: Any = {}

    def inject(self, dependencies: dict[str, Any]) -> Builder:
        self.dependencies = dependencies
        return self

    def apply_settings(self, settings: Any) -> Builder:
        self.settings = settings
        return self

    def build(self) -> Any:
        """Run both factory stages against the current slots.

        Raises:
            ConstructionError: if the factory is not callable, raises, or
                does not return a settings-consuming callable.
        """
        name = getattr(self.factory, "__qualname__", repr(self.factory))
        if not callable(self.factory):
            raise ConstructionError(f"factory {name} is not callable")

        try:
            constructor = self.factory(self.dependencies)
        except Exception as exc:
            raise ConstructionError(f"factory {name} failed on dependencies: {exc}") from exc

        if not callable(constructor):
            raise ConstructionError(
                f"factory {name} returned {type(constructor).__name__}, expected a callable"
            )

        try:
            return constructor(self.settings)
        except Exception as exc:
            raise ConstructionError(f"factory {name} failed on settings: {exc}") from exc

    def __repr__(self) -> str:
        name = getattr(self.factory, "__qualname__", repr(self.factory))
        return f"Builder(factory={name}, dependencies={sorted(self.dependencies)})"


def create_builder(factory: Factory) -> Builder:
    """Wrap *factory* in a fresh :class:`Builder`."""
    return Builder(factory)
