"""Application layer - Configuration sources.

Two independent producers turn the candidate types into configuration fragments:
configuration providers found among the types, and the marker decorators
attached to the types. Both fragments are merged into the configuration of a run.
"""

import inspect
from typing import Any, Callable, Dict, Sequence

from loguru import logger

from automap_di.domain import AutomapperConfig, IAutomapperConfigProvider, MarkerKind, TypeMarker, get_markers, type_name

_MARKER_MERGES: Dict[MarkerKind, Callable[[AutomapperConfig, Any, TypeMarker], AutomapperConfig]] = {
    MarkerKind.DO_NOT_MAP: lambda config, cls, marker: config.merge_exclusions(cls),
    MarkerKind.SINGLETON: lambda config, cls, marker: config.merge_singletons(cls),
    MarkerKind.MULTIMAP: lambda config, cls, marker: config.merge_multimaps(cls),
    MarkerKind.MAP_AS: lambda config, cls, marker: config.merge_named(cls, marker.value),
    MarkerKind.POLICY_INJECTION: lambda config, cls, marker: config.merge_policy_injected(cls),
    MarkerKind.CUSTOM_LIFETIME: lambda config, cls, marker: config.merge_custom_lifetime(cls, marker.value),
}


def is_config_provider(cls: Any) -> bool:
    return inspect.isclass(cls) and issubclass(cls, IAutomapperConfigProvider) and not inspect.isabstract(cls)


def config_from_providers(types: Sequence[Any]) -> AutomapperConfig:
    """Instantiate every configuration provider among the types and merge their fragments.

    Args:
        types: The candidate types.

    Returns:
        The union of every provider's configuration.

    Raises:
        ConfigurationConflictError: If two fragments conflict.
    """
    config = AutomapperConfig.create()
    for cls in types:
        if not is_config_provider(cls):
            continue
        logger.debug(f"Reading configuration from provider {type_name(cls)}")
        config = config.merge(cls().create_configuration())
    return config


def config_from_markers(types: Sequence[Any]) -> AutomapperConfig:
    """Build a configuration fragment from the marker decorators on the types.

    Raises:
        ConfigurationConflictError: If a type carries contradictory lifetime markers
            or an invalid custom lifetime manager.
    """
    config = AutomapperConfig.create()
    for cls in types:
        for marker in get_markers(cls):
            config = _MARKER_MERGES[marker.kind](config, cls, marker)
    return config


def build_configuration(types: Sequence[Any]) -> AutomapperConfig:
    """Merge the provider-derived and the marker-derived configuration of the types."""
    return config_from_providers(types).merge(config_from_markers(types))
