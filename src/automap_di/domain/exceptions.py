from typing import Any, List, Optional, get_args, get_origin


def type_name(cls: Any) -> str:
    """Readable name for a class or a parametrised generic such as ``IRepository[User]``."""
    origin = get_origin(cls)
    if origin is not None:
        return f"{type_name(origin)}[{', '.join(type_name(arg) for arg in get_args(cls))}]"
    return getattr(cls, "__name__", repr(cls))


class AutomapperException(Exception):
    """Base exception for automapping and container errors.

    Attributes:
        partial_registrations: Registrations committed by a registration run before it failed.
    """

    def __init__(self, *args: Any) -> None:
        super().__init__(*args)
        self.partial_registrations: List[Any] = []


class ConfigurationConflictError(AutomapperException):
    """Raised when configuration sources state contradictory directives for a type.

    This occurs when:
    - A type is marked both singleton and with a custom lifetime manager.
    - A type is given two different custom lifetime managers.
    - A custom lifetime manager is not a lifetime manager at all.

    Attributes:
        cls: The type carrying the conflicting directives.
    """

    def __init__(self, cls: Any, message: str) -> None:
        self.cls = cls
        super().__init__(message)

    @classmethod
    def multiple_lifetimes(cls, offending_type: Any) -> "ConfigurationConflictError":
        return cls(offending_type, f"The type {type_name(offending_type)} has multiple lifetime managers specified.")

    @classmethod
    def invalid_lifetime(cls, offending_type: Any, kind: Any) -> "ConfigurationConflictError":
        return cls(
            offending_type,
            f"The type {type_name(offending_type)} has been marked with {kind!r} as a lifetime manager; "
            "lifetime managers must derive from ILifetimeManager.",
        )


class DuplicateMappingError(AutomapperException):
    """Raised when a binding would overwrite an existing registration.

    Attributes:
        interface: The interface being bound.
        existing_implementation: The implementation already registered.
        attempted_implementation: The implementation that was rejected.
        name: The mapping name, for named mapping collisions.
    """

    def __init__(
        self,
        interface: Any,
        existing_implementation: Any,
        attempted_implementation: Any,
        name: Optional[str] = None,
    ) -> None:
        self.interface = interface
        self.existing_implementation = existing_implementation
        self.attempted_implementation = attempted_implementation
        self.name = name
        message = (
            f"Attempted to map at least two concrete types ({type_name(existing_implementation)} and "
            f"{type_name(attempted_implementation)}) to the same interface ({type_name(interface)})"
        )
        if name is not None:
            message += f" with the same name ({name})"
        super().__init__(message + ".")


class CircularDependencyError(AutomapperException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Any]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class UnresolvableError(AutomapperException):
    """Raised when a dependency cannot be resolved.

    This occurs when:
    - The requested type is an interface with no registration.
    - Constructor parameters lack type hints.
    - Construction of the instance fails.

    Attributes:
        cls: The class type that could not be resolved.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)
