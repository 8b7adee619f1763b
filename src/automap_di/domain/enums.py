from enum import Enum, Flag


class Lifetime(str, Enum):
    """Defines the lifetime of a dependency instance.

    Attributes:
        SINGLETON: Single instance shared across the container and its scopes.
        TRANSIENT: New instance created on each resolution.
        SCOPED: Single instance per container scope (e.g., per HTTP request).
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value


class MappingBehaviors(Flag):
    """Toggles that guide how bindings are validated and registered.

    Attributes:
        NONE: Default behaviour.
        MULTIMAP_BY_DEFAULT: Every interface may be bound to several implementations.
        COLLECTION_REGISTRATION: Multimapped interfaces are also registered as
            ``Sequence[interface]`` resolving every implementation.
    """

    NONE = 0
    MULTIMAP_BY_DEFAULT = 1
    COLLECTION_REGISTRATION = 2


class MarkerKind(str, Enum):
    """Kinds of marker that can be attached to a type with the marker decorators."""

    DO_NOT_MAP = "do_not_map"
    SINGLETON = "singleton"
    MULTIMAP = "multimap"
    MAP_AS = "map_as"
    POLICY_INJECTION = "policy_injection"
    CUSTOM_LIFETIME = "custom_lifetime"

    def __str__(self) -> str:
        return self.value
