"""Unit tests for TypeMappingHandler."""

from abc import ABC
from typing import Sequence

import pytest

from automap_di.application.container import DIContainer
from automap_di.application.interception import Interception, InterfaceInterceptor, PolicyInjectionBehavior
from automap_di.application.lifetime_manager import (
    ScopedLifetimeManager,
    SingletonLifetimeManager,
    TransientLifetimeManager,
)
from automap_di.application.mapping_handler import RegistrationTracker, TypeMappingHandler
from automap_di.domain import AutomapperConfig, DuplicateMappingError, MappingBehaviors, TypeMapping


class IFoo(ABC):
    pass


class FooImpl(IFoo):
    pass


class FooImpl2(IFoo):
    pass


class IBar(ABC):
    pass


class BarImpl(IBar):
    pass


def mapping(from_type, to_type):
    return TypeMapping(from_type=from_type, to_type=to_type)


def register(container, mappings, config=None, behaviors=MappingBehaviors.NONE):
    return TypeMappingHandler().perform_registrations(
        container,
        mappings,
        behaviors,
        config or AutomapperConfig.create(),
    )


def implicit_name(cls):
    return f"{cls.__module__}.{cls.__qualname__}"


class TestRegistrationTracker:
    """Test cases for RegistrationTracker."""

    def test_reports_only_new_keys(self):
        """Test that registrations present at the snapshot are excluded."""
        container = DIContainer()
        container.register_type(IFoo, FooImpl)
        tracker = RegistrationTracker(container)
        container.register_type(IBar, BarImpl)

        assert [entry.registered_type for entry in tracker.get_new_registrations()] == [IBar]

    def test_nothing_new(self):
        """Test that an untouched container reports nothing."""
        container = DIContainer()
        container.register_type(IFoo, FooImpl)

        assert RegistrationTracker(container).get_new_registrations() == []


class TestPerformRegistrations:
    """Test cases for plain registrations."""

    def test_registers_transient_mapping(self):
        """Test that a mapping becomes a transient registration."""
        container = DIContainer()
        added = register(container, [mapping(IFoo, FooImpl)])

        [entry] = added
        assert entry.registered_type is IFoo
        assert entry.mapped_to_type is FooImpl
        assert entry.name is None
        assert isinstance(entry.lifetime_manager, TransientLifetimeManager)
        assert container.registrations == added

    def test_empty_mappings(self):
        """Test that no mappings register nothing."""
        container = DIContainer()

        assert register(container, []) == []
        assert container.registrations == []

    def test_returns_only_this_runs_registrations(self):
        """Test that earlier registrations are not reported again."""
        container = DIContainer()
        register(container, [mapping(IFoo, FooImpl)])

        added = register(container, [mapping(IBar, BarImpl)])

        assert [entry.registered_type for entry in added] == [IBar]
        assert len(container.registrations) == 2

    def test_does_not_register_unrelated_types(self):
        """Test that only the given mappings are registered."""
        container = DIContainer()
        register(container, [mapping(IFoo, FooImpl)])

        assert not container.is_registered(IBar)
        assert not container.is_registered(FooImpl)


class TestDuplicateMappings:
    """Test cases for duplicate detection."""

    def test_second_implementation_rejected(self):
        """Test that a second implementation of an interface fails."""
        container = DIContainer()

        with pytest.raises(DuplicateMappingError) as exc_info:
            register(container, [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)])

        error = exc_info.value
        assert error.interface is IFoo
        assert error.existing_implementation is FooImpl
        assert error.attempted_implementation is FooImpl2
        assert "FooImpl and FooImpl2" in str(error)
        assert "IFoo" in str(error)

    def test_existing_registration_rejected(self):
        """Test that registrations made before the run count as duplicates."""
        container = DIContainer()
        container.register_type(IFoo, FooImpl)

        with pytest.raises(DuplicateMappingError):
            register(container, [mapping(IFoo, FooImpl2)])

    def test_partial_registrations_attached(self):
        """Test that a failed run reports what it registered before failing."""
        container = DIContainer()

        with pytest.raises(DuplicateMappingError) as exc_info:
            register(container, [mapping(IBar, BarImpl), mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)])

        partial = exc_info.value.partial_registrations
        assert [entry.registered_type for entry in partial] == [IBar, IFoo]
        assert container.is_registered(IBar)
        assert container.registrations[1].mapped_to_type is FooImpl

    def test_multimap_by_default(self):
        """Test that MULTIMAP_BY_DEFAULT allows several implementations."""
        container = DIContainer()

        added = register(
            container,
            [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)],
            behaviors=MappingBehaviors.MULTIMAP_BY_DEFAULT,
        )

        assert [entry.name for entry in added] == [implicit_name(FooImpl), implicit_name(FooImpl2)]
        assert {type(foo) for foo in container.resolve_all(IFoo)} == {FooImpl, FooImpl2}

    def test_multimap_directive(self):
        """Test that a multimap directive allows several implementations."""
        container = DIContainer()
        config = AutomapperConfig.create().merge_multimaps(IFoo)

        added = register(container, [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)], config)

        assert len(added) == 2
        assert len(container.resolve_all(IFoo)) == 2

    def test_multimap_applies_per_interface(self):
        """Test that a multimap directive on one interface does not affect others."""

        class BarImpl2(IBar):
            pass

        config = AutomapperConfig.create().merge_multimaps(IFoo)

        with pytest.raises(DuplicateMappingError):
            register(
                DIContainer(),
                [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2), mapping(IBar, BarImpl), mapping(IBar, BarImpl2)],
                config,
            )


class TestNamedMappings:
    """Test cases for named mappings."""

    def test_named_mapping(self):
        """Test that a named implementation is registered under its name."""
        container = DIContainer()
        config = AutomapperConfig.create().merge_named(FooImpl, "foo")

        [entry] = register(container, [mapping(IFoo, FooImpl)], config)

        assert entry.name == "foo"
        assert isinstance(container.resolve(IFoo, "foo"), FooImpl)

    def test_different_names_coexist(self):
        """Test that different names for one multimap interface do not collide."""
        container = DIContainer()
        config = (
            AutomapperConfig.create()
            .merge_named(FooImpl, "one")
            .merge_named(FooImpl2, "two")
            .merge_multimaps(IFoo)
        )

        added = register(container, [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)], config)

        assert [entry.name for entry in added] == ["one", "two"]
        assert isinstance(container.resolve(IFoo, "one"), FooImpl)
        assert isinstance(container.resolve(IFoo, "two"), FooImpl2)

    def test_name_does_not_bypass_bound_interface(self):
        """Test that a named binding onto an interface that is already bound fails without multimap."""
        container = DIContainer()
        register(container, [mapping(IFoo, FooImpl)])
        config = AutomapperConfig.create().merge_named(FooImpl2, "second")

        with pytest.raises(DuplicateMappingError) as exc_info:
            register(container, [mapping(IFoo, FooImpl2)], config)

        assert exc_info.value.existing_implementation is FooImpl
        assert exc_info.value.attempted_implementation is FooImpl2
        assert exc_info.value.name is None
        assert not container.is_registered(IFoo, "second")

    def test_different_names_without_multimap_collide(self):
        """Test that two differently named implementations of a plain interface fail."""
        config = AutomapperConfig.create().merge_named(FooImpl, "one").merge_named(FooImpl2, "two")

        with pytest.raises(DuplicateMappingError):
            register(DIContainer(), [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)], config)

    def test_same_name_collides(self):
        """Test that two implementations with the same name fail even under multimap."""
        container = DIContainer()
        config = (
            AutomapperConfig.create()
            .merge_named(FooImpl, "same")
            .merge_named(FooImpl2, "same")
            .merge_multimaps(IFoo)
        )

        with pytest.raises(DuplicateMappingError) as exc_info:
            register(container, [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)], config)

        assert exc_info.value.name == "same"
        assert str(exc_info.value).endswith("with the same name (same).")


class TestLifetimes:
    """Test cases for lifetime manager selection."""

    def test_singleton(self):
        """Test that singleton interfaces get a singleton manager."""
        container = DIContainer()
        config = AutomapperConfig.create().merge_singletons(IFoo)

        [entry] = register(container, [mapping(IFoo, FooImpl)], config)

        assert isinstance(entry.lifetime_manager, SingletonLifetimeManager)
        assert container.resolve(IFoo) is container.resolve(IFoo)

    def test_custom_lifetime(self):
        """Test that custom lifetimes get a fresh manager of the given kind."""
        container = DIContainer()
        config = AutomapperConfig.create().merge_custom_lifetime(IFoo, ScopedLifetimeManager)

        [entry] = register(container, [mapping(IFoo, FooImpl)], config)

        assert isinstance(entry.lifetime_manager, ScopedLifetimeManager)

    def test_each_registration_gets_its_own_manager(self):
        """Test that managers are not shared across registrations."""
        container = DIContainer()
        config = AutomapperConfig.create().merge_singletons(IFoo, IBar)

        first, second = register(container, [mapping(IFoo, FooImpl), mapping(IBar, BarImpl)], config)

        assert first.lifetime_manager is not second.lifetime_manager


class TestPolicyInjection:
    """Test cases for interception wiring."""

    def test_adds_interception_once(self):
        """Test that the extension is added once and members are attached."""
        container = DIContainer()
        config = AutomapperConfig.create().merge_policy_injected(IFoo, IBar)

        register(container, [mapping(IFoo, FooImpl), mapping(IBar, BarImpl)], config)

        assert len([ext for ext in container._extensions if isinstance(ext, Interception)]) == 1
        members = container._registry[(IFoo, None)].injection_members
        assert any(isinstance(member, InterfaceInterceptor) for member in members)
        assert any(isinstance(member, PolicyInjectionBehavior) for member in members)

    def test_existing_extension_reused(self):
        """Test that an already attached extension is not duplicated."""
        container = DIContainer()
        extension = Interception()
        container.add_extension(extension)
        config = AutomapperConfig.create().merge_policy_injected(IFoo)

        register(container, [mapping(IFoo, FooImpl)], config)

        assert container._extensions == [extension]

    def test_no_extension_without_policy_injection(self):
        """Test that the extension is only added when needed."""
        container = DIContainer()

        register(container, [mapping(IFoo, FooImpl)])

        assert container.get_extension(Interception) is None
        assert container._registry[(IFoo, None)].injection_members == ()


class TestCollectionRegistration:
    """Test cases for collection registrations."""

    def test_registers_sequence_of_interface(self):
        """Test that multimapped interfaces are also registered as sequences."""
        container = DIContainer()
        behaviors = MappingBehaviors.MULTIMAP_BY_DEFAULT | MappingBehaviors.COLLECTION_REGISTRATION

        added = register(container, [mapping(IFoo, FooImpl), mapping(IFoo, FooImpl2)], behaviors=behaviors)

        assert [entry.registered_type for entry in added].count(Sequence[IFoo]) == 1
        assert {type(foo) for foo in container.resolve(Sequence[IFoo])} == {FooImpl, FooImpl2}

    def test_no_collection_without_multimap(self):
        """Test that single mappings are not registered as sequences."""
        container = DIContainer()

        register(container, [mapping(IFoo, FooImpl)], behaviors=MappingBehaviors.COLLECTION_REGISTRATION)

        assert not container.is_registered(Sequence[IFoo])
