"""Domain layer — descriptor models, error taxonomy, lifecycle states.

This layer depends only on stdlib and pydantic.
It must never import from runtime, services, infrastructure, commands, or config.
"""
