from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from automap_di.domain.enums import MappingBehaviors, MarkerKind
from automap_di.domain.exceptions import type_name

if TYPE_CHECKING:
    from automap_di.domain.interfaces import IContainer


class TypeMapping(BaseModel):
    """Value object binding an interface to one of its implementations.

    Attributes:
        from_type: The interface (or open/closed generic interface) being bound.
        to_type: The concrete implementation.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    from_type: Any = Field(..., description="The interface type to map from.")
    to_type: Any = Field(..., description="The implementation type to map to.")

    def __str__(self) -> str:
        return f"{type_name(self.from_type)} -> {type_name(self.to_type)}"


class TypeDirectives(BaseModel):
    """Directives accumulated for a single type from every configuration source."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    excluded: bool = False
    singleton: bool = False
    multimap: bool = False
    name: Optional[str] = None
    policy_injected: bool = False
    custom_lifetime: Optional[Type] = None


class TypeMarker(BaseModel):
    """A marker attached to a class by one of the marker decorators.

    Attributes:
        kind: Which directive the marker stands for.
        value: Argument of the marker (mapping name or lifetime manager type).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: MarkerKind = Field(..., description="The kind of directive the marker expresses.")
    value: Any = Field(default=None, description="Marker argument, if the kind takes one.")


class InjectionMember(BaseModel):
    """Extra instruction attached to a registration and applied at resolution time."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class InjectionFactory(InjectionMember):
    """Builds the instance with a callable instead of auto-wiring the mapped type.

    Attributes:
        factory: Receives the resolving container and returns the instance.
    """

    factory: Callable[["IContainer"], Any] = Field(..., description="Factory used to build the instance.")


class RegistrationEntry(BaseModel):
    """A single registration held by a container.

    Attributes:
        registered_type: The type requested on resolution.
        mapped_to_type: The type that gets built.
        name: Optional discriminator allowing several registrations per type.
        lifetime_manager: Lifetime manager governing instance reuse.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    registered_type: Any = Field(..., description="The registered (requested) type.")
    mapped_to_type: Any = Field(..., description="The type built on resolution.")
    name: Optional[str] = Field(default=None, description="Optional registration name.")
    lifetime_manager: Any = Field(..., description="The lifetime manager of the registration.")

    @property
    def key(self) -> Tuple[Any, Optional[str]]:
        return (self.registered_type, self.name)


class DependencyMetadata(BaseModel):
    """Tracks a registration together with its injection members.

    Attributes:
        registration: The registration entry.
        injection_members: Instructions applied when the registration is resolved.
        resolution_count: Number of times this registration has been resolved.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    registration: RegistrationEntry = Field(..., description="The registration details of the dependency.")
    injection_members: Tuple[InjectionMember, ...] = Field(
        default=(),
        description="Injection members attached to the registration.",
    )
    resolution_count: int = Field(
        default=0,
        description="Number of times this dependency has been resolved.",
    )


class MappingOptions(BaseModel):
    """Options for one automapping run.

    Attributes:
        behaviors: Behaviours guiding validation and registration.
    """

    model_config = ConfigDict(frozen=True)

    behaviors: MappingBehaviors = Field(
        default=MappingBehaviors.NONE,
        description="Behaviours guiding the registration process.",
    )
