import inspect
from typing import Any, get_origin, get_type_hints

from automap_di.domain import CircularDependencyError, IContainer, IResolver, UnresolvableError


class DependencyResolver(IResolver):
    """Builds instances by resolving constructor parameters from their type hints.

    Parametrised generics (``Repository[User]``) are built through their origin
    class, so open generic registrations can serve closed requests.
    """

    def resolve_dependencies(self, dependency_type: Any, container: IContainer) -> Any:
        """Resolve all constructor dependencies and create instance.

        Args:
            dependency_type: The type to instantiate.
            container: The container to resolve dependencies from.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If any dependency cannot be resolved, lacks a type hint,
                or the type is abstract.

        Example:
            >>> class UserService:
            ...     def __init__(self, repository: IUserRepository):
            ...         self.repository = repository
            >>>
            >>> instance = DependencyResolver().resolve_dependencies(UserService, container)
        """
        cls = get_origin(dependency_type) or dependency_type
        if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
            raise UnresolvableError(dependency_type, "Abstract types must be registered before they can be resolved.")

        try:
            signature = inspect.signature(cls.__init__)
            type_hints = get_type_hints(cls.__init__)

            kwargs = {}
            for param_name, param in signature.parameters.items():
                if param_name == "self":
                    continue

                if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                    continue

                # Parameters with defaults keep them
                if param.default is not inspect.Parameter.empty:
                    continue

                if param_name not in type_hints:
                    raise UnresolvableError(
                        dependency_type,
                        f"Parameter '{param_name}' lacks type hint and has no default value.",
                    )

                try:
                    kwargs[param_name] = container.resolve(type_hints[param_name])
                except CircularDependencyError:
                    raise
                except Exception as e:
                    raise UnresolvableError(
                        dependency_type,
                        f"Failed to resolve dependency for parameter '{param_name}': {e}",
                    ) from e

            return dependency_type(**kwargs)

        except (UnresolvableError, CircularDependencyError):
            raise
        except Exception as e:
            raise UnresolvableError(
                dependency_type,
                f"Failed to auto-wire constructor for {dependency_type}: {e}",
            ) from e
