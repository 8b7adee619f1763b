from typing import Any, Dict, Iterable, Optional, Tuple, Type

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from automap_di.domain.exceptions import ConfigurationConflictError, type_name
from automap_di.domain.interfaces import ILifetimeManager
from automap_di.domain.models import TypeDirectives, TypeMapping


class AutomapperConfig(BaseModel):
    """Immutable accumulator of per-type automapping directives.

    Every ``merge_*`` method returns a new configuration and leaves the receiver
    untouched, so earlier values can be held and reused safely. Fragments from
    different sources are combined by union: boolean directives are idempotent,
    a later name replaces an earlier one, and a singleton directive may never be
    combined with a custom lifetime manager.

    Attributes:
        directives: Directives recorded for each configured type.

    Example:
        >>> config = (
        ...     AutomapperConfig.create()
        ...     .merge_singletons(IClock)
        ...     .merge_multimaps(IHandler)
        ...     .merge_named(SmtpSender, "smtp")
        ... )
        >>> config.is_singleton(IClock)
        True
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    directives: Dict[Any, TypeDirectives] = Field(
        default_factory=dict,
        description="Directives recorded for each configured type.",
    )

    @classmethod
    def create(cls) -> "AutomapperConfig":
        """Return an empty configuration."""
        return cls()

    def merge_exclusions(self, *types: Any) -> "AutomapperConfig":
        """Mark types as never to be mapped."""
        return self._merged((dependency_type, TypeDirectives(excluded=True)) for dependency_type in types)

    def merge_singletons(self, *types: Any) -> "AutomapperConfig":
        """Mark types to be registered with a single shared instance."""
        return self._merged((dependency_type, TypeDirectives(singleton=True)) for dependency_type in types)

    def merge_multimaps(self, *types: Any) -> "AutomapperConfig":
        """Allow several implementations to be bound to each of the types."""
        return self._merged((dependency_type, TypeDirectives(multimap=True)) for dependency_type in types)

    def merge_named(self, dependency_type: Any, name: str) -> "AutomapperConfig":
        """Register mappings to the implementation type under the given name."""
        return self._merged([(dependency_type, TypeDirectives(name=name))])

    def merge_policy_injected(self, *types: Any) -> "AutomapperConfig":
        """Mark types to be wired for policy injection."""
        return self._merged((dependency_type, TypeDirectives(policy_injected=True)) for dependency_type in types)

    def merge_custom_lifetime(self, dependency_type: Any, kind: Type[ILifetimeManager]) -> "AutomapperConfig":
        """Register mappings from the type with a custom lifetime manager.

        Raises:
            ConfigurationConflictError: If ``kind`` is not an ``ILifetimeManager`` subclass,
                or the type already carries a different lifetime directive.
        """
        if not (isinstance(kind, type) and issubclass(kind, ILifetimeManager)):
            raise ConfigurationConflictError.invalid_lifetime(dependency_type, kind)
        return self._merged([(dependency_type, TypeDirectives(custom_lifetime=kind))])

    def merge(self, other: "AutomapperConfig") -> "AutomapperConfig":
        """Union this configuration with a fragment from another source."""
        return self._merged(other.directives.items())

    def directives_for(self, dependency_type: Any) -> TypeDirectives:
        return self.directives.get(dependency_type, _NO_DIRECTIVES)

    def is_mappable(self, dependency_type: Any) -> bool:
        return not self.directives_for(dependency_type).excluded

    def is_singleton(self, dependency_type: Any) -> bool:
        return self.directives_for(dependency_type).singleton

    def is_multimap(self, dependency_type: Any) -> bool:
        return self.directives_for(dependency_type).multimap

    def is_named_mapping(self, dependency_type: Any) -> bool:
        return self.directives_for(dependency_type).name is not None

    def named_mapping_for(self, mapping: TypeMapping) -> Optional[str]:
        """Name configured for the mapping's implementation type, if any."""
        return self.directives_for(mapping.to_type).name

    def is_policy_injected(self, dependency_type: Any) -> bool:
        return self.directives_for(dependency_type).policy_injected

    def custom_lifetime(self, dependency_type: Any) -> Tuple[bool, Optional[Type[ILifetimeManager]]]:
        """Return whether a custom lifetime manager is configured, and which one."""
        kind = self.directives_for(dependency_type).custom_lifetime
        return kind is not None, kind

    def _merged(self, incoming: Iterable[Tuple[Any, TypeDirectives]]) -> "AutomapperConfig":
        directives = dict(self.directives)
        for dependency_type, addition in incoming:
            directives[dependency_type] = _combine(dependency_type, directives.get(dependency_type), addition)
        return AutomapperConfig(directives=directives)


_NO_DIRECTIVES = TypeDirectives()


def _combine(dependency_type: Any, current: Optional[TypeDirectives], addition: TypeDirectives) -> TypeDirectives:
    """Union two directive records for the same type, enforcing the lifetime exclusion."""
    if current is None:
        current = _NO_DIRECTIVES

    if current.name is not None and addition.name is not None and current.name != addition.name:
        logger.warning(
            f"Type {type_name(dependency_type)} is named both '{current.name}' and '{addition.name}'; "
            f"using '{addition.name}'"
        )

    if (
        current.custom_lifetime is not None
        and addition.custom_lifetime is not None
        and current.custom_lifetime is not addition.custom_lifetime
    ):
        raise ConfigurationConflictError.multiple_lifetimes(dependency_type)

    combined = TypeDirectives(
        excluded=current.excluded or addition.excluded,
        singleton=current.singleton or addition.singleton,
        multimap=current.multimap or addition.multimap,
        name=addition.name if addition.name is not None else current.name,
        policy_injected=current.policy_injected or addition.policy_injected,
        custom_lifetime=addition.custom_lifetime or current.custom_lifetime,
    )
    if combined.singleton and combined.custom_lifetime is not None:
        raise ConfigurationConflictError.multiple_lifetimes(dependency_type)
    return combined
