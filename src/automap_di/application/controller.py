"""Application layer - Automapping entry points."""

from typing import Any, List, Optional

from automap_di.application.config_sources import build_configuration
from automap_di.application.mapping_factory import TypeMappingFactory
from automap_di.application.mapping_handler import TypeMappingHandler
from automap_di.domain import IContainer, MappingBehaviors, MappingOptions, RegistrationEntry


class MappingController:
    """Runs one automapping pass: configuration, mapping discovery, registration.

    Attributes:
        _container: The container registrations are made on.
        _mapping_factory: Component discovering mappings from the candidate types.
        _mapping_handler: Component registering the mappings.
    """

    def __init__(
        self,
        container: IContainer,
        mapping_factory: Optional[TypeMappingFactory] = None,
        mapping_handler: Optional[TypeMappingHandler] = None,
    ) -> None:
        self._container = container
        self._mapping_factory = mapping_factory or TypeMappingFactory()
        self._mapping_handler = mapping_handler or TypeMappingHandler()

    def register_types(self, behaviors: MappingBehaviors, *types: Any) -> List[RegistrationEntry]:
        """Automap the given types onto the container.

        Args:
            behaviors: Behaviours guiding the registration process.
            *types: The candidate types (interfaces, implementations and configuration providers).

        Returns:
            The registrations added to the container by this run.

        Raises:
            ConfigurationConflictError: If the configuration of the types is contradictory.
            DuplicateMappingError: If a mapping collides with an existing registration.
        """
        config = build_configuration(types)
        mappings = self._mapping_factory.create_mappings(behaviors, config, types)
        return self._mapping_handler.perform_registrations(self._container, mappings, behaviors, config)


def automap(container: IContainer, *types: Any, options: Optional[MappingOptions] = None) -> List[RegistrationEntry]:
    """Automap the given types onto the container.

    Example:
        >>> container = DIContainer()
        >>> added = automap(container, IClock, SystemClock, options=MappingOptions(behaviors=MappingBehaviors.NONE))
        >>> container.resolve(IClock)
    """
    options = options or MappingOptions()
    return MappingController(container).register_types(options.behaviors, *types)
