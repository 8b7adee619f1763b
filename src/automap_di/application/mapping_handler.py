"""Application layer - Registration of mappings on a container."""

from typing import Any, List, Optional, Sequence, Set, Tuple

from loguru import logger

from automap_di.application.interception import POLICY_INJECTION_MEMBERS, Interception
from automap_di.application.lifetime_manager import SingletonLifetimeManager, TransientLifetimeManager
from automap_di.domain import (
    AutomapperConfig,
    AutomapperException,
    DuplicateMappingError,
    IContainer,
    ILifetimeManager,
    InjectionFactory,
    InjectionMember,
    MappingBehaviors,
    RegistrationEntry,
    TypeMapping,
    type_name,
)


class RegistrationTracker:
    """Snapshot of a container's registration keys, used to report what a run added.

    The container must not be modified by anyone else between the snapshot and
    the call to ``get_new_registrations``.
    """

    def __init__(self, container: IContainer) -> None:
        self._container = container
        self._snapshot: Set[Tuple[Any, Optional[str]]] = {entry.key for entry in container.registrations}

    def get_new_registrations(self) -> List[RegistrationEntry]:
        return [entry for entry in self._container.registrations if entry.key not in self._snapshot]


class TypeMappingHandler:
    """Validates mappings against a container and registers them.

    Example:
        >>> handler = TypeMappingHandler()
        >>> added = handler.perform_registrations(container, mappings, MappingBehaviors.NONE, config)
    """

    def perform_registrations(
        self,
        container: IContainer,
        mappings: Sequence[TypeMapping],
        behaviors: MappingBehaviors,
        config: AutomapperConfig,
    ) -> List[RegistrationEntry]:
        """Register the mappings on the container and return the registrations that were added.

        Mappings are processed in order. The first invalid mapping aborts the run;
        registrations made before it are kept and attached to the error as
        ``partial_registrations``.

        Args:
            container: The container to register on.
            mappings: The mappings to register.
            behaviors: Behaviours guiding validation and registration.
            config: The merged configuration of the run.

        Returns:
            Registrations present after the run that were absent before it.

        Raises:
            DuplicateMappingError: If a mapping collides with an existing registration.
        """
        tracker = RegistrationTracker(container)

        if any(config.is_policy_injected(m.from_type) for m in mappings) and container.get_extension(Interception) is None:
            logger.debug("Adding interception extension to the container")
            container.add_extension(Interception())

        try:
            for mapping in mappings:
                self._register(container, mapping, behaviors, config)
        except AutomapperException as e:
            e.partial_registrations = tracker.get_new_registrations()
            raise

        new_registrations = tracker.get_new_registrations()
        logger.info(f"Registered {len(new_registrations)} new mappings from {len(mappings)} candidates")
        return new_registrations

    def _register(
        self,
        container: IContainer,
        mapping: TypeMapping,
        behaviors: MappingBehaviors,
        config: AutomapperConfig,
    ) -> None:
        multimapping = config.is_multimap(mapping.from_type) or MappingBehaviors.MULTIMAP_BY_DEFAULT in behaviors
        explicit_name = config.named_mapping_for(mapping)

        if not multimapping:
            self._check_existing_type_mapping(container, mapping)
        self._check_existing_named_mapping(container, mapping, explicit_name)

        name = explicit_name
        if name is None and multimapping:
            name = f"{mapping.to_type.__module__}.{mapping.to_type.__qualname__}"

        injection_members: Tuple[InjectionMember, ...] = ()
        if config.is_policy_injected(mapping.from_type):
            injection_members = POLICY_INJECTION_MEMBERS

        logger.debug(f"Registering {mapping} (name={name}, policy_injection={bool(injection_members)})")
        container.register_type(
            mapping.from_type,
            mapping.to_type,
            name,
            self._lifetime_manager_for(mapping.from_type, config),
            injection_members,
        )

        if multimapping and MappingBehaviors.COLLECTION_REGISTRATION in behaviors:
            self._register_collection(container, mapping.from_type)

    @staticmethod
    def _lifetime_manager_for(from_type: Any, config: AutomapperConfig) -> ILifetimeManager:
        if config.is_singleton(from_type):
            return SingletonLifetimeManager()
        has_custom_lifetime, kind = config.custom_lifetime(from_type)
        if has_custom_lifetime:
            return kind()
        return TransientLifetimeManager()

    @staticmethod
    def _check_existing_type_mapping(container: IContainer, mapping: TypeMapping) -> None:
        existing = next((r for r in container.registrations if r.registered_type == mapping.from_type), None)
        if existing is not None:
            raise DuplicateMappingError(mapping.from_type, existing.mapped_to_type, mapping.to_type)

    @staticmethod
    def _check_existing_named_mapping(container: IContainer, mapping: TypeMapping, name: Optional[str]) -> None:
        if name is None:
            return
        existing = next(
            (r for r in container.registrations if r.registered_type == mapping.from_type and r.name == name),
            None,
        )
        if existing is not None:
            raise DuplicateMappingError(mapping.from_type, existing.mapped_to_type, mapping.to_type, name)

    @staticmethod
    def _register_collection(container: IContainer, interface: Any) -> None:
        collection_type = Sequence[interface]
        if container.is_registered(collection_type):
            return
        logger.debug(f"Registering collection {type_name(collection_type)}")
        container.register_type(
            collection_type,
            list,
            injection_members=[InjectionFactory(factory=lambda c: c.resolve_all(interface))],
        )
