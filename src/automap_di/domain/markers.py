"""Marker decorators describing how a type should be automapped.

Markers only record metadata on the decorated class. They are read by the
marker scanning pass when the configuration for a run is built, and are not
inherited by subclasses.

Example:
    >>> @multimap
    ... class IHandler(ABC):
    ...     ...
    >>>
    >>> @map_as("smtp")
    ... class SmtpSender(ISender):
    ...     ...
"""

from typing import Any, Callable, Tuple, Type, TypeVar

from automap_di.domain.enums import MarkerKind
from automap_di.domain.models import TypeMarker

C = TypeVar("C", bound=type)

MARKERS_ATTRIBUTE = "__automap_markers__"


def get_markers(cls: Any) -> Tuple[TypeMarker, ...]:
    """Return the markers declared directly on ``cls``."""
    return vars(cls).get(MARKERS_ATTRIBUTE, ()) if isinstance(cls, type) else ()


def _mark(cls: C, marker: TypeMarker) -> C:
    setattr(cls, MARKERS_ATTRIBUTE, get_markers(cls) + (marker,))
    return cls


def do_not_map(cls: C) -> C:
    """Exclude the type from automapping, as interface or implementation."""
    return _mark(cls, TypeMarker(kind=MarkerKind.DO_NOT_MAP))


def singleton(cls: C) -> C:
    """Register mappings from the interface with a single shared instance."""
    return _mark(cls, TypeMarker(kind=MarkerKind.SINGLETON))


def multimap(cls: C) -> C:
    """Allow several implementations to be bound to the interface."""
    return _mark(cls, TypeMarker(kind=MarkerKind.MULTIMAP))


def policy_injection(cls: C) -> C:
    """Wire mappings from the interface for policy injection."""
    return _mark(cls, TypeMarker(kind=MarkerKind.POLICY_INJECTION))


def map_as(name: str) -> Callable[[C], C]:
    """Register the implementation under an explicit mapping name."""

    def decorator(cls: C) -> C:
        return _mark(cls, TypeMarker(kind=MarkerKind.MAP_AS, value=name))

    return decorator


def custom_lifetime(kind: Type) -> Callable[[C], C]:
    """Register mappings from the interface with a custom lifetime manager type.

    The type is validated when the configuration is built, not here.
    """

    def decorator(cls: C) -> C:
        return _mark(cls, TypeMarker(kind=MarkerKind.CUSTOM_LIFETIME, value=kind))

    return decorator
