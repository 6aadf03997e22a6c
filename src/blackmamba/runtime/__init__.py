"""Runtime layer — registry, builders, dependency resolution, dispatch.

The runtime reads descriptors and sources only through the loader
callables it is constructed with.
"""

from blackmamba.runtime.builder import Builder, create_builder
from blackmamba.runtime.engine import BlackMamba
from blackmamba.runtime.registry import Registry

__all__ = ["BlackMamba", "Builder", "Registry", "create_builder"]
