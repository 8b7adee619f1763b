"""
Infrastructure layer - External integrations.

This layer contains module-based type enumeration and the FastAPI integration.
It depends on both Application and Domain layers.
"""

from . import fastapi_integration
from .type_enumerator import automap_modules, types_from_modules

__all__ = [
    "fastapi_integration",
    "automap_modules",
    "types_from_modules",
]
