"""blackmamba — declarative module runtime."""

from blackmamba.domain.errors import (
    BlackMambaError,
    ConstructionError,
    DescriptorError,
    ExecutionError,
    PackageLoadError,
    SourceImportError,
    ValidationError,
)
from blackmamba.runtime.builder import Builder, create_builder
from blackmamba.runtime.engine import BlackMamba

__version__ = "0.3.0"

__all__ = [
    "BlackMamba",
    "BlackMambaError",
    "Builder",
    "ConstructionError",
    "DescriptorError",
    "ExecutionError",
    "PackageLoadError",
    "SourceImportError",
    "ValidationError",
    "__version__",
    "create_builder",
]
