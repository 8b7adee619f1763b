"""
Application layer - Use cases and orchestration.

This layer contains the automapping engine (configuration sources, mapping
discovery, registration) and the container it registers on. It depends only
on the Domain layer.
"""

from .circular_detector import CircularDependencyDetector
from .config_sources import build_configuration, config_from_markers, config_from_providers
from .container import DIContainer
from .controller import MappingController, automap
from .interception import Interception, InterfaceInterceptor, PolicyInjectionBehavior
from .lifetime_manager import ScopedLifetimeManager, SingletonLifetimeManager, TransientLifetimeManager
from .mapping_factory import TypeMappingFactory
from .mapping_handler import RegistrationTracker, TypeMappingHandler
from .resolver import DependencyResolver

__all__ = [
    "DIContainer",
    "DependencyResolver",
    "CircularDependencyDetector",
    "TransientLifetimeManager",
    "SingletonLifetimeManager",
    "ScopedLifetimeManager",
    "Interception",
    "InterfaceInterceptor",
    "PolicyInjectionBehavior",
    "build_configuration",
    "config_from_providers",
    "config_from_markers",
    "TypeMappingFactory",
    "TypeMappingHandler",
    "RegistrationTracker",
    "MappingController",
    "automap",
]
