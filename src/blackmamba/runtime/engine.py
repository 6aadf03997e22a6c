"""BlackMamba — registration, build and command dispatch for one instance.

Control flow::

    execute -> register -> load_package -> DependencyResolver
            -> Builder.build -> Registry -> command handler

Every instance owns its registry, source cache, directories and default
triple. Nothing is shared between instances.

Concurrent ``register`` calls for the same not-yet-loaded id are not
coalesced: each loads and builds independently and the last one to finish
wins the registry slot.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from contextvars import ContextVar
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, TypeAlias

from blackmamba.domain.descriptors import BuilderRefDescriptor, parse_descriptor
from blackmamba.domain.errors import (
    BlackMambaError,
    ConstructionError,
    DependencyCycleError,
    DescriptorError,
    PackageLoadError,
    SourceImportError,
    ValidationError,
)
from blackmamba.domain.validation import require_non_empty_string
from blackmamba.infrastructure.loaders import import_source_file, read_json
from blackmamba.runtime.builder import Builder, Factory, create_builder
from blackmamba.runtime.builtins import system_modules
from blackmamba.runtime.dispatch import invoke, resolve_command
from blackmamba.runtime.registry import Registry
from blackmamba.runtime.resolver import DependencyResolver

if TYPE_CHECKING:
    from blackmamba.config.settings import BmSettings
    from blackmamba.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

JsonLoader: TypeAlias = Callable[[Path], Awaitable[Any]]
SourceImporter: TypeAlias = Callable[[Path], Awaitable[Any]]

# (instance id, package id) pairs being registered along the current task's call chain.
_registering: ContextVar[tuple[tuple[int, str], ...]] = ContextVar("_registering", default=())


class BlackMamba:
    """Declarative module runtime.

    Parameters:
        root_directory: Base for relative directories ("" means the cwd).
        sources_directory: Where source files live.
        packages_directory: Where ``<id>.json`` descriptors live.
        default_app, default_cmd, default_data: Fallback triple; enables
            :meth:`execute_with_fallback`.
        load_json: Descriptor loader, ``async (Path) -> Any``.
        import_file: Source loader, ``async (Path) -> module``.
        plugin_manager: Optional hook relay for lifecycle notifications.
    """

    def __init__(
        self,
        *,
        root_directory: str = "",
        sources_directory: str = "./sources",
        packages_directory: str = "./packages",
        default_app: str | None = None,
        default_cmd: str | None = None,
        default_data: Any = None,
        load_json: JsonLoader | None = None,
        import_file: SourceImporter | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        if default_app is not None or default_cmd is not None or default_data is not None:
            require_non_empty_string("default_app", default_app)
            require_non_empty_string("default_cmd", default_cmd)

        self._root_directory = root_directory
        self._sources_directory = sources_directory
        self._packages_directory = packages_directory
        self._default_app = default_app
        self._default_cmd = default_cmd
        self._default_data = default_data

        self.load_json: JsonLoader = load_json or read_json
        self.import_file: SourceImporter = import_file or import_source_file

        self._registry = Registry()
        self._sources: dict[str, Any] = {}
        self._resolver = DependencyResolver(self)
        self._plugins = plugin_manager

        for module_id, module in system_modules(self).items():
            self._registry.set_module(module_id, module)

    @classmethod
    def from_settings(
        cls,
        settings: BmSettings,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> BlackMamba:
        """Build a runtime from resolved settings.

        The root directory is :attr:`BmSettings.runtime_root`, so a relative
        ``directories.root`` is read against the project root.
        """
        dirs = settings.directories
        fallback = settings.fallback
        return cls(
            root_directory=str(settings.runtime_root),
            sources_directory=dirs.sources,
            packages_directory=dirs.packages,
            default_app=fallback.app,
            default_cmd=fallback.cmd,
            default_data=fallback.data,
            plugin_manager=plugin_manager,
        )

    # ------------------------------------------------------------------
    # Properties and registry queries
    # ------------------------------------------------------------------

    @property
    def root_directory(self) -> str:
        return self._root_directory

    @property
    def sources_directory(self) -> str:
        return self._sources_directory

    @property
    def packages_directory(self) -> str:
        return self._packages_directory

    @property
    def fallback_enabled(self) -> bool:
        """Whether a default triple was configured."""
        return self._default_app is not None

    @property
    def registry(self) -> Registry:
        return self._registry

    def has_module(self, module_id: str) -> bool:
        return self._registry.has_module(module_id)

    def has_not_module(self, module_id: str) -> bool:
        return not self._registry.has_module(module_id)

    def get_module(self, module_id: str) -> Any | None:
        return self._registry.get_module(module_id)

    def list_modules(self) -> list[str]:
        """Ids of all built modules, system modules first."""
        return self._registry.list_module_ids()

    @staticmethod
    def create_builder(factory: Factory) -> Builder:
        return create_builder(factory)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self, next_app: str = "", cmd: str = "", data: Any = None) -> Any:
        """Run command *cmd* of module *next_app* with *data*.

        The module is registered (and built) first if needed.

        Raises:
            ValidationError: *next_app* or *cmd* is not a non-empty string.
            ExecutionError: the module has no command named *cmd*.
        """
        require_non_empty_string("next_app", next_app)
        require_non_empty_string("cmd", cmd)

        if not self._registry.has_module(next_app):
            await self.register(next_app)

        module = self._registry.get_module(next_app)
        handler = resolve_command(next_app, module, cmd)
        result = await invoke(handler, data)
        self._notify("post_execute", package_id=next_app, command=cmd)
        return result

    async def execute_with_fallback(
        self, next_app: str = "", cmd: str = "", data: Any = None
    ) -> Any:
        """Like :meth:`execute`, but retry with the default triple if *next_app*
        cannot be registered.

        Only a registration failure of *next_app* triggers the fallback; the
        retry's own failures propagate.
        """
        if not self.fallback_enabled:
            raise ValidationError(
                "default_app",
                None,
                "execute_with_fallback requires default_app and default_cmd",
            )

        if not self._registry.has_module(next_app):
            try:
                await self.register(next_app)
            except BlackMambaError as exc:
                logger.warning(
                    "App %r not found, using %r as fallback instead: %s",
                    next_app,
                    self._default_app,
                    exc,
                )
                self._notify(
                    "on_fallback",
                    requested=str(next_app),
                    fallback=self._default_app,
                    error=str(exc),
                )
                next_app = self._default_app  # type: ignore[assignment]
                cmd = self._default_cmd  # type: ignore[assignment]
                data = self._default_data

        return await self.execute(next_app, cmd, data)

    async def run(self, packages: Iterable[Mapping[str, Any]] = ()) -> list[Any]:
        """Execute ``{pkg, cmd, data}`` entries one after another.

        Stops at the first failure, which propagates; later entries never run.
        Returns the result of every entry.
        """
        results: list[Any] = []
        for item in packages:
            results.append(
                await self.execute(item.get("pkg", ""), item.get("cmd", ""), item.get("data"))
            )
        return results

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def package_path(self, path: str = "") -> str:
        """``<packages_directory>[/]<path>.json``, as configured (not resolved)."""
        if path.startswith("/"):
            return f"{self._packages_directory}{path}.json"
        return f"{self._packages_directory}/{path}.json"

    def source_path(self, source_path: str) -> str:
        """``<sources_directory>/<source_path>``; ``.py`` is added when no suffix."""
        relative = source_path.lstrip("/")
        if not PurePosixPath(relative).suffix:
            relative += ".py"
        return f"{self._sources_directory}/{relative}"

    def resolve_path(self, path: str) -> Path:
        """Anchor a configured relative path at ``root_directory``."""
        p = Path(path)
        if p.is_absolute() or not self._root_directory:
            return p
        return Path(self._root_directory) / p

    async def load_package(self, path: str = "") -> Any:
        """Load the raw descriptor JSON for *path*.

        Raises:
            PackageLoadError: the loader failed; wraps the resolved path and cause.
        """
        package_path = self.package_path(path)
        logger.debug("Loading package %s", package_path)
        try:
            pkg = await self.load_json(self.resolve_path(package_path))
        except Exception as exc:
            raise PackageLoadError(package_path, exc) from exc
        self._registry.mark_loaded(path)
        return pkg

    async def import_source(self, source_path: str) -> Any:
        """Import a source, cached per instance by *source_path*.

        Raises:
            SourceImportError: the import failed; wraps the resolved path and cause.
        """
        if source_path in self._sources:
            return self._sources[source_path]

        resolved = self.source_path(source_path)
        try:
            source = await self.import_file(self.resolve_path(resolved))
        except Exception as exc:
            raise SourceImportError(resolved, exc) from exc
        self._sources[source_path] = source
        return source

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(self, package_id: str = "", build: bool = True) -> Any:
        """Register *package_id* and return its module (or its builder).

        Repeated calls with the same *build* flag return the cached value
        without touching the loaders. A ``builder`` reference descriptor is
        always built, whatever *build* says.

        Raises:
            DescriptorError: bad descriptor, unresolvable dependency, or cycle.
            PackageLoadError, SourceImportError, ConstructionError: from the
                loaders or the factory.
        """
        require_non_empty_string("id", package_id)

        if self._registry.is_loaded(package_id):
            if build and self._registry.has_module(package_id):
                return self._registry.get_module(package_id)
            if not build and self._registry.has_builder(package_id):
                return self._registry.get_builder(package_id)

        chain = _registering.get()
        key = (id(self), package_id)
        if key in chain:
            ours = [pid for owner, pid in chain if owner == key[0]]
            raise DependencyCycleError([*ours, package_id])

        token = _registering.set((*chain, key))
        try:
            registered = await self._register(package_id, build)
        finally:
            _registering.reset(token)

        self._notify(
            "post_register",
            package_id=package_id,
            built=not isinstance(registered, Builder),
        )
        return registered

    async def _register(self, package_id: str, build: bool) -> Any:
        descriptor = parse_descriptor(package_id, await self.load_package(package_id))

        if isinstance(descriptor, BuilderRefDescriptor):
            return await self._create_module_from_builder(
                package_id, descriptor.builder, descriptor.factory_settings
            )

        dependencies = await self._resolver.resolve(package_id, descriptor.dependencies)
        source = await self.import_source(descriptor.source)
        factory = getattr(source, "factory", None)
        if factory is None:
            raise ConstructionError(
                f"source {descriptor.source} of package {package_id} does not export a factory"
            )

        builder = create_builder(factory).inject(dependencies)
        self._registry.set_builder(package_id, builder)

        if build:
            return await self._create_module_from_builder(
                package_id, package_id, descriptor.factory_settings
            )
        return builder

    async def _create_module_from_builder(
        self, module_id: str, builder_id: str, settings: Any
    ) -> Any:
        if not self._registry.has_builder(builder_id):
            await self.register(builder_id, build=False)

        builder = self._registry.get_builder(builder_id)
        if builder is None:
            raise DescriptorError(
                f"package {module_id} uses builder {builder_id}, which is not a source package",
                package_id=module_id,
                dependency_id=builder_id,
            )

        module = builder.apply_settings(settings).build()
        self._registry.set_module(module_id, module)
        logger.debug("Built module %s from builder %s", module_id, builder_id)
        return module

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def _notify(self, hook_name: str, **payload: Any) -> None:
        """Dispatch a lifecycle hook. No-op without a plugin manager."""
        if self._plugins is not None:
            self._plugins.notify(hook_name, **payload)
