"""
automap-di: Convention-based automapping of interfaces to implementations for a DI container.

Public API exports for the automap-di package.
"""

# Application exports
from automap_di.application.container import DIContainer
from automap_di.application.controller import MappingController, automap
from automap_di.application.lifetime_manager import (
    ScopedLifetimeManager,
    SingletonLifetimeManager,
    TransientLifetimeManager,
)

# Domain exports
from automap_di.domain.config import AutomapperConfig
from automap_di.domain.enums import Lifetime, MappingBehaviors
from automap_di.domain.exceptions import (
    AutomapperException,
    CircularDependencyError,
    ConfigurationConflictError,
    DuplicateMappingError,
    UnresolvableError,
)
from automap_di.domain.interfaces import IAutomapperConfigProvider, ILifetimeManager
from automap_di.domain.markers import custom_lifetime, do_not_map, map_as, multimap, policy_injection, singleton
from automap_di.domain.models import MappingOptions, RegistrationEntry, TypeMapping

# Infrastructure exports
from automap_di.infrastructure.type_enumerator import automap_modules, types_from_modules

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "automap",
    "automap_modules",
    "types_from_modules",
    "MappingController",
    # Container
    "DIContainer",
    "ILifetimeManager",
    "TransientLifetimeManager",
    "SingletonLifetimeManager",
    "ScopedLifetimeManager",
    # Configuration
    "AutomapperConfig",
    "IAutomapperConfigProvider",
    "MappingBehaviors",
    "MappingOptions",
    "Lifetime",
    # Markers
    "do_not_map",
    "singleton",
    "multimap",
    "map_as",
    "policy_injection",
    "custom_lifetime",
    # Models
    "TypeMapping",
    "RegistrationEntry",
    # Exceptions
    "AutomapperException",
    "ConfigurationConflictError",
    "DuplicateMappingError",
    "CircularDependencyError",
    "UnresolvableError",
]
