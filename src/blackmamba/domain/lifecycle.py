"""Per-identifier registration lifecycle.

unknown -> descriptor-loaded -> builder-ready -> module-built

A ``builder`` reference descriptor skips builder-ready for its own id: it
borrows another id's builder and goes straight to module-built.
"""

from __future__ import annotations

from enum import StrEnum


class RegistrationState(StrEnum):
    """Where an identifier stands inside one runtime instance."""

    UNKNOWN = "unknown"
    DESCRIPTOR_LOADED = "descriptor-loaded"
    BUILDER_READY = "builder-ready"
    MODULE_BUILT = "module-built"

