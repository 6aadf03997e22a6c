"""Infrastructure layer — file loaders and the dependency graph engine.

This layer depends on stdlib and third-party libs (NetworkX).
It must never import from domain, runtime, services, commands, or output.
"""
