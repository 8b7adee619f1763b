"""
FastAPI integration module.

Provides helpers for automapping at application startup and resolving
dependencies from the container in FastAPI endpoints.
"""

from .integration import (
    ScopedContainerMiddleware,
    automap_lifespan,
    create_fastapi_dependency,
    create_scoped_dependency,
)

__all__ = [
    "automap_lifespan",
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "ScopedContainerMiddleware",
]
