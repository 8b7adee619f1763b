from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Awaitable, Callable, Optional, Type, TypeVar

from fastapi import FastAPI, Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from automap_di.application import automap
from automap_di.domain import IContainer, MappingOptions

T = TypeVar("T")


def automap_lifespan(
    container: IContainer,
    *types: Any,
    options: Optional[MappingOptions] = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """Create a FastAPI lifespan that automaps the types onto the container at startup.

    On startup the container is stored on ``app.state.container`` and the
    registrations added by the run on ``app.state.automapped_registrations``.
    Automapping errors abort application startup. The container is cleared on
    shutdown.

    Args:
        container: The container to register on.
        *types: The candidate types.
        options: Options for the automapping run.

    Returns:
        A lifespan callable for ``FastAPI(lifespan=...)``.

    Example:
        >>> container = DIContainer()
        >>> app = FastAPI(lifespan=automap_lifespan(container, IUserRepository, SqlUserRepository))
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: IUserRepository = Depends(create_fastapi_dependency(container, IUserRepository))):
        ...     return await repo.get_all()
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container = container
        app.state.automapped_registrations = automap(container, *types, options=options)
        logger.info(f"Automapped {len(app.state.automapped_registrations)} registrations at startup")
        try:
            yield
        finally:
            container.clear()

    return lifespan


def create_fastapi_dependency(
    container: IContainer,
    dependency_type: Type[T],
    name: Optional[str] = None,
) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the DI container.

    The resolved instance lifetime follows the registration in the container.

    Args:
        container: The DI container to resolve dependencies from.
        dependency_type: The type to resolve when the dependency is called.
        name: Optional registration name.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> get_sender = create_fastapi_dependency(container, ISender, name="smtp")
        >>>
        >>> @app.post("/mail")
        >>> async def send(sender: ISender = Depends(get_sender)):
        ...     ...
    """

    def dependency() -> T:
        """Resolve the dependency from the container."""
        return container.resolve(dependency_type, name)

    return dependency


def create_scoped_dependency(dependency_type: Type[T], name: Optional[str] = None) -> Callable[[Request], T]:
    """Create a FastAPI dependency that uses the request-scoped container.

    Requires the ScopedContainerMiddleware to be installed.

    Args:
        dependency_type: The type to resolve from the scoped container.
        name: Optional registration name.

    Returns:
        A callable that resolves from the request-scoped container.
    """

    def scoped_dependency(request: Request) -> T:
        """Resolve from the request's scoped container."""
        if not hasattr(request.state, "di_container"):
            raise RuntimeError(
                "Request does not have a scoped DI container. Did you forget to add ScopedContainerMiddleware?"
            )
        scoped_container: IContainer = request.state.di_container
        return scoped_container.resolve(dependency_type, name)

    return scoped_dependency


class ScopedContainerMiddleware(BaseHTTPMiddleware):
    """Middleware that creates a scoped DI container for each request.

    Registrations with a scoped lifetime get one instance per request. The
    scoped container is accessible via ``request.state.di_container``.

    Attributes:
        container: The parent DI container to create scopes from.

    Example:
        >>> app = FastAPI(lifespan=automap_lifespan(container, *types))
        >>> app.add_middleware(ScopedContainerMiddleware, container=container)
    """

    def __init__(self, app: FastAPI, container: IContainer):
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Create a scoped container for the request and execute the endpoint."""
        scoped_container = self.container.create_scope()
        request.state.di_container = scoped_container

        try:
            response = await call_next(request)
            return response
        finally:
            # Cleanup scoped instances after request
            scoped_container.clear()
