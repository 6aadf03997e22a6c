"""Service layer — runtime operations returning ServiceResult.

Services may import from domain, runtime and infrastructure layers.
They must never import from commands or output.
"""
