"""Error taxonomy for the runtime.

Every failure raised by the runtime is a :class:`BlackMambaError`. The
``code`` class attribute is stable and is what the service layer puts in
``ServiceError.code``.
"""

from __future__ import annotations

from typing import Any


class BlackMambaError(Exception):
    """Base class for all runtime failures."""

    code = "BLACKMAMBA_ERROR"

    def detail(self) -> dict[str, Any]:
        """Structured context for error payloads."""
        return {}


class ValidationError(BlackMambaError):
    """Empty or non-string identifier, command, or default."""

    code = "VALIDATION_ERROR"

    def __init__(self, prop: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.prop = prop
        self.value = value

    def detail(self) -> dict[str, Any]:
        return {"property": self.prop, "received": repr(self.value)}


class PackageLoadError(BlackMambaError):
    """Descriptor path missing or unparsable."""

    code = "PACKAGE_LOAD_ERROR"

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(
            f"package path {path} does not exist or an error occurred while loading: {cause}"
        )
        self.path = path
        self.cause = cause

    def detail(self) -> dict[str, Any]:
        return {"path": self.path, "cause": f"{type(self.cause).__name__}: {self.cause}"}


class SourceImportError(BlackMambaError):
    """Source module missing, failing to load, or lacking a requested export."""

    code = "SOURCE_IMPORT_ERROR"

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"source {path} could not be found or failed to import: {cause}")
        self.path = path
        self.cause = cause

    def detail(self) -> dict[str, Any]:
        return {"path": self.path, "cause": f"{type(self.cause).__name__}: {self.cause}"}


class DescriptorError(BlackMambaError):
    """Malformed descriptor or unresolvable dependency spec."""

    code = "DESCRIPTOR_ERROR"

    def __init__(
        self,
        message: str,
        *,
        package_id: str | None = None,
        dependency_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.package_id = package_id
        self.dependency_id = dependency_id

    def detail(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.package_id is not None:
            out["package"] = self.package_id
        if self.dependency_id is not None:
            out["dependency"] = self.dependency_id
        return out


class DependencyCycleError(DescriptorError):
    """A package transitively depends on itself."""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, chain: list[str]) -> None:
        super().__init__(f"dependency cycle: {' -> '.join(chain)}", package_id=chain[0])
        self.chain = chain

    def detail(self) -> dict[str, Any]:
        return {"cycle": list(self.chain)}


class ConstructionError(BlackMambaError):
    """Factory invocation failed or did not yield a module constructor."""

    code = "CONSTRUCTION_ERROR"


class ExecutionError(BlackMambaError):
    """Resolved module has no callable command of the requested name."""

    code = "EXECUTION_ERROR"

    def __init__(self, module_id: str, cmd: str, message: str | None = None) -> None:
        super().__init__(message or f"module {module_id} has no command {cmd!r}")
        self.module_id = module_id
        self.cmd = cmd

    def detail(self) -> dict[str, Any]:
        return {"module": self.module_id, "command": self.cmd}
