from typing import Any, Callable, Dict
from weakref import WeakKeyDictionary

from automap_di.domain import (
    CircularDependencyError,
    IContainer,
    ILifetimeManager,
    Lifetime,
    UnresolvableError,
)


def _create(dependency_type: Any, factory: Callable[[], Any]) -> Any:
    """Run the factory, wrapping construction failures into UnresolvableError."""
    try:
        return factory()
    except (UnresolvableError, CircularDependencyError):
        raise
    except Exception as e:
        raise UnresolvableError(dependency_type, f"Failed to create instance: {str(e)}") from e


class TransientLifetimeManager(ILifetimeManager):
    """Creates a new instance on every resolution."""

    lifetime = Lifetime.TRANSIENT

    def get_or_create(self, container: IContainer, dependency_type: Any, factory: Callable[[], Any]) -> Any:
        return _create(dependency_type, factory)

    def clear_cache(self) -> None:
        pass


class SingletonLifetimeManager(ILifetimeManager):
    """Shares one instance per requested type across a container and all of its scopes.

    Attributes:
        _singleton_cache: Cache for singleton instances, keyed by requested type.
    """

    lifetime = Lifetime.SINGLETON

    def __init__(self) -> None:
        self._singleton_cache: Dict[Any, Any] = {}

    def get_or_create(self, container: IContainer, dependency_type: Any, factory: Callable[[], Any]) -> Any:
        """Return the cached instance or create and cache a new one.

        Example:
            >>> manager = SingletonLifetimeManager()
            >>> first = manager.get_or_create(container, Clock, Clock)
            >>> assert manager.get_or_create(container, Clock, Clock) is first
        """
        if dependency_type not in self._singleton_cache:
            self._singleton_cache[dependency_type] = _create(dependency_type, factory)
        return self._singleton_cache[dependency_type]

    def clear_cache(self) -> None:
        self._singleton_cache.clear()


class ScopedLifetimeManager(ILifetimeManager):
    """Shares one instance per container scope.

    The root container and every scope created from it each get their own
    instance. Caches are dropped when the owning container is garbage collected.

    Attributes:
        _scoped_cache: Per-container caches, keyed by requested type.
    """

    lifetime = Lifetime.SCOPED

    def __init__(self) -> None:
        self._scoped_cache: "WeakKeyDictionary[IContainer, Dict[Any, Any]]" = WeakKeyDictionary()

    def get_or_create(self, container: IContainer, dependency_type: Any, factory: Callable[[], Any]) -> Any:
        cache = self._scoped_cache.setdefault(container, {})
        if dependency_type not in cache:
            cache[dependency_type] = _create(dependency_type, factory)
        return cache[dependency_type]

    def clear_cache(self) -> None:
        self._scoped_cache.clear()

    def clear_scope(self, container: IContainer) -> None:
        """Drop the instances cached for a single container scope."""
        self._scoped_cache.pop(container, None)
