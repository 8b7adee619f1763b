from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from automap_di.domain.enums import Lifetime
from automap_di.domain.models import DependencyMetadata, InjectionMember, RegistrationEntry

if TYPE_CHECKING:
    from automap_di.domain.config import AutomapperConfig

T = TypeVar("T")


class IContainer(ABC):
    """Abstract interface for the container that bindings are registered on."""

    @property
    @abstractmethod
    def registrations(self) -> List[RegistrationEntry]:
        """Registrations currently held by the container, in registration order."""

    @abstractmethod
    def register_type(
        self,
        from_type: Any,
        to_type: Any = None,
        name: Optional[str] = None,
        lifetime_manager: Optional["ILifetimeManager"] = None,
        injection_members: Sequence[InjectionMember] = (),
    ) -> None:
        """Register a mapping from a requested type to the type that gets built.

        Args:
            from_type: The type requested on resolution.
            to_type: The type to build. Defaults to ``from_type``.
            name: Optional discriminator for the registration.
            lifetime_manager: Governs instance reuse. Defaults to transient.
            injection_members: Instructions applied when the registration is resolved.
        """

    @abstractmethod
    def is_registered(self, dependency_type: Any, name: Optional[str] = None) -> bool:
        """Check whether a registration exists for the type and name."""

    @abstractmethod
    def resolve(self, dependency_type: Type[T], name: Optional[str] = None) -> T:
        """Resolve and return an instance of the requested type.

        Args:
            dependency_type: The type to resolve.
            name: Optional registration name.
        """

    @abstractmethod
    def resolve_all(self, dependency_type: Type[T]) -> List[T]:
        """Resolve every named registration of the requested type."""

    @abstractmethod
    def add_extension(self, extension: Any) -> None:
        """Attach an extension object to the container."""

    @abstractmethod
    def get_extension(self, extension_type: Type[T]) -> Optional[T]:
        """Return the attached extension of the given type, if any."""

    @abstractmethod
    def create_scope(self) -> "IContainer":
        """Create and return a new scoped container instance."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations and instances from the container."""

    @abstractmethod
    def get_registry_copy(self) -> Dict[Tuple[Any, Optional[str]], DependencyMetadata]:
        """Get a copy of the current registry of dependencies."""


class IResolver(ABC):
    """Abstract interface for dependency resolution operations."""

    @abstractmethod
    def resolve_dependencies(
        self,
        dependency_type: Any,
        container: IContainer,
    ) -> Any:
        """Resolve all constructor dependencies and create instance.

        Args:
            dependency_type: The type to build.
            container: The DI container to use for resolving dependencies.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If a dependency cannot be resolved.
        """


class ILifetimeManager(ABC):
    """Base class for lifetime managers.

    One lifetime manager instance is created per registration. Custom lifetimes
    are configured by passing a subclass, which is instantiated without arguments.
    """

    lifetime: Lifetime = Lifetime.TRANSIENT

    @abstractmethod
    def get_or_create(
        self,
        container: IContainer,
        dependency_type: Any,
        factory: Callable[[], Any],
    ) -> Any:
        """Get existing instance or create a new one based on lifetime.

        Args:
            container: The container the resolution was requested from.
            dependency_type: The requested type, used as cache key.
            factory: A callable to create a new instance if needed.
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Clear any cached instances managed by this lifetime manager."""


class IAutomapperConfigProvider(ABC):
    """Implemented by candidate types that contribute configuration programmatically.

    Providers found among the candidate types are instantiated without arguments.

    Example:
        >>> class AppConfig(IAutomapperConfigProvider):
        ...     def create_configuration(self):
        ...         return AutomapperConfig.create().merge_singletons(IClock)
    """

    @abstractmethod
    def create_configuration(self) -> "AutomapperConfig":
        """Return the configuration fragment contributed by this provider."""
