"""
Domain layer - Core models, configuration and contracts.

This layer contains the configuration model, the marker decorators and the
interfaces the automapping engine works against. It has no dependencies on
other layers.
"""

from .config import AutomapperConfig
from .enums import Lifetime, MappingBehaviors, MarkerKind
from .exceptions import (
    AutomapperException,
    CircularDependencyError,
    ConfigurationConflictError,
    DuplicateMappingError,
    UnresolvableError,
    type_name,
)
from .interfaces import IAutomapperConfigProvider, IContainer, ILifetimeManager, IResolver
from .markers import custom_lifetime, do_not_map, get_markers, map_as, multimap, policy_injection, singleton
from .models import (
    DependencyMetadata,
    InjectionFactory,
    InjectionMember,
    MappingOptions,
    RegistrationEntry,
    TypeDirectives,
    TypeMapping,
    TypeMarker,
)

# Rebuild Pydantic models to resolve forward references
InjectionFactory.model_rebuild()

__all__ = [
    # Enums
    "Lifetime",
    "MappingBehaviors",
    "MarkerKind",
    # Exceptions
    "AutomapperException",
    "ConfigurationConflictError",
    "DuplicateMappingError",
    "CircularDependencyError",
    "UnresolvableError",
    "type_name",
    # Interfaces
    "IContainer",
    "IResolver",
    "ILifetimeManager",
    "IAutomapperConfigProvider",
    # Configuration
    "AutomapperConfig",
    # Markers
    "do_not_map",
    "singleton",
    "multimap",
    "map_as",
    "policy_injection",
    "custom_lifetime",
    "get_markers",
    # Models
    "TypeMapping",
    "TypeDirectives",
    "TypeMarker",
    "InjectionMember",
    "InjectionFactory",
    "RegistrationEntry",
    "DependencyMetadata",
    "MappingOptions",
]
