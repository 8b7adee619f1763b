from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, get_args, get_origin

from automap_di.application.circular_detector import CircularDependencyDetector
from automap_di.application.interception import Interception, requires_interception
from automap_di.application.lifetime_manager import ScopedLifetimeManager, TransientLifetimeManager
from automap_di.application.resolver import DependencyResolver
from automap_di.domain import (
    DependencyMetadata,
    IContainer,
    ILifetimeManager,
    InjectionFactory,
    InjectionMember,
    IResolver,
    RegistrationEntry,
    UnresolvableError,
)

T = TypeVar("T")

RegistryKey = Tuple[Any, Optional[str]]


class DIContainer(IContainer):
    """Dependency injection container that automapped bindings are registered on.

    Registrations are keyed by ``(registered type, name)``. Registering the same key
    again replaces the earlier registration in place. Unregistered concrete types
    are auto-wired from constructor type hints.

    Attributes:
        _registry: Dictionary mapping registration keys to their metadata.
        _extensions: Extension objects attached to the container.
        _parent: The container this scope was created from, if any.
        _resolver: Component responsible for auto-wiring dependencies.
        _circular_detector: Component detecting circular dependencies.
    """

    def __init__(self) -> None:
        """Initialize the DI container with empty registry and domain components."""
        self._registry: Dict[RegistryKey, DependencyMetadata] = {}
        self._extensions: List[Any] = []
        self._parent: Optional[DIContainer] = None
        self._resolver: IResolver = DependencyResolver()
        self._circular_detector = CircularDependencyDetector()

    @property
    def registrations(self) -> List[RegistrationEntry]:
        return [metadata.registration for metadata in self._registry.values()]

    def register_type(
        self,
        from_type: Any,
        to_type: Any = None,
        name: Optional[str] = None,
        lifetime_manager: Optional[ILifetimeManager] = None,
        injection_members: Sequence[InjectionMember] = (),
    ) -> None:
        """Register a mapping from a requested type to the type that gets built.

        Args:
            from_type: The type requested on resolution. May be an open generic class
                or a parametrised generic such as ``IRepository[User]``.
            to_type: The type to build. Defaults to ``from_type``.
            name: Optional discriminator for the registration.
            lifetime_manager: Governs instance reuse. Defaults to a new transient manager.
            injection_members: Instructions applied when the registration is resolved.

        Example:
            >>> container.register_type(IClock, SystemClock, lifetime_manager=SingletonLifetimeManager())
            >>> container.register_type(ISender, SmtpSender, name="smtp")
        """
        registration = RegistrationEntry(
            registered_type=from_type,
            mapped_to_type=to_type if to_type is not None else from_type,
            name=name,
            lifetime_manager=lifetime_manager if lifetime_manager is not None else TransientLifetimeManager(),
        )
        self._registry[registration.key] = DependencyMetadata(
            registration=registration,
            injection_members=tuple(injection_members),
        )

    def is_registered(self, dependency_type: Any, name: Optional[str] = None) -> bool:
        return (dependency_type, name) in self._registry

    def resolve(self, dependency_type: Type[T], name: Optional[str] = None) -> T:
        """Resolve and return an instance of the specified type.

        Closed generic requests fall back to an open generic registration of their
        origin. Unregistered concrete types are auto-wired.

        Args:
            dependency_type: The type to resolve.
            name: Optional registration name.

        Returns:
            Instance of the requested type with all dependencies injected.

        Raises:
            UnresolvableError: If the dependency cannot be resolved.
            CircularDependencyError: If a circular dependency is detected.
        """
        self._circular_detector.push(dependency_type, name)

        try:
            found = self._find(dependency_type, name)
            if found is None:
                if name is not None:
                    raise UnresolvableError(dependency_type, f"No registration named '{name}'.")
                return self._resolver.resolve_dependencies(dependency_type, self)

            metadata, target = found
            instance = metadata.registration.lifetime_manager.get_or_create(
                self,
                dependency_type,
                lambda: self._build(metadata, target),
            )
            metadata.resolution_count += 1
            return instance

        finally:
            self._circular_detector.pop()

    def resolve_all(self, dependency_type: Type[T]) -> List[T]:
        """Resolve every named registration of the type, in registration order."""
        candidates = {dependency_type, get_origin(dependency_type)}
        return [
            self.resolve(dependency_type, name)
            for registered_type, name in list(self._registry)
            if name is not None and registered_type in candidates
        ]

    def add_extension(self, extension: Any) -> None:
        self._extensions.append(extension)

    def get_extension(self, extension_type: Type[T]) -> Optional[T]:
        return next((ext for ext in self._extensions if isinstance(ext, extension_type)), None)

    def get_registry_copy(self) -> Dict[RegistryKey, DependencyMetadata]:
        """Get a copy of the registry for scope inheritance."""
        return self._registry.copy()

    def set_registry(self, registry: Dict[RegistryKey, DependencyMetadata]) -> None:
        """Set the registry from a parent container."""
        self._registry = registry

    def create_scope(self) -> "IContainer":
        """Create a child container for scoped lifetime.

        Scoped containers inherit parent registrations and extensions. Singleton
        instances are shared with the parent, scoped instances are not.

        Example:
            >>> scoped = container.create_scope()
            >>> assert scoped.resolve(IRequestContext) is scoped.resolve(IRequestContext)
        """
        scoped_container = DIContainer()
        scoped_container.set_registry(self.get_registry_copy())
        scoped_container._extensions = list(self._extensions)
        scoped_container._parent = self
        return scoped_container

    def clear(self) -> None:
        """Clear all registrations and cached instances.

        Clearing a scope only drops the instances cached for that scope, leaving
        the parent's singletons intact.
        """
        for metadata in self._registry.values():
            manager = metadata.registration.lifetime_manager
            if self._parent is None:
                manager.clear_cache()
            elif isinstance(manager, ScopedLifetimeManager):
                manager.clear_scope(self)
        self._registry.clear()
        self._extensions.clear()
        self._circular_detector.clear()

    def _find(self, dependency_type: Any, name: Optional[str]) -> Optional[Tuple[DependencyMetadata, Any]]:
        metadata = self._registry.get((dependency_type, name))
        if metadata is not None:
            return metadata, metadata.registration.mapped_to_type

        origin = get_origin(dependency_type)
        metadata = self._registry.get((origin, name)) if origin is not None else None
        if metadata is None:
            return None

        target = metadata.registration.mapped_to_type
        if getattr(target, "__parameters__", ()):
            target = target[get_args(dependency_type)]
        return metadata, target

    def _build(self, metadata: DependencyMetadata, target: Any) -> Any:
        factory = next((m for m in metadata.injection_members if isinstance(m, InjectionFactory)), None)
        instance = factory.factory(self) if factory is not None else self._resolver.resolve_dependencies(target, self)

        if requires_interception(metadata.injection_members):
            interception = self.get_extension(Interception)
            if interception is not None:
                instance = interception.intercept(instance, metadata.registration)
        return instance
