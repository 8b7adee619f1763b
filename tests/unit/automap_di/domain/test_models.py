"""Unit tests for domain models."""

from typing import Generic, TypeVar

import pytest
from pydantic import ValidationError

from automap_di.application.lifetime_manager import TransientLifetimeManager
from automap_di.domain import (
    DependencyMetadata,
    InjectionFactory,
    MappingBehaviors,
    MappingOptions,
    RegistrationEntry,
    TypeDirectives,
    TypeMapping,
)

T = TypeVar("T")


class IRepository(Generic[T]):
    pass


class User:
    pass


class UserRepository(IRepository[User]):
    pass


class TestTypeMapping:
    """Test cases for TypeMapping."""

    def test_creation(self):
        """Test creating a mapping."""
        mapping = TypeMapping(from_type=IRepository, to_type=UserRepository)

        assert mapping.from_type is IRepository
        assert mapping.to_type is UserRepository

    def test_is_immutable(self):
        """Test that mappings are frozen."""
        mapping = TypeMapping(from_type=IRepository, to_type=UserRepository)

        with pytest.raises(ValidationError):
            mapping.to_type = User

    def test_identity_is_the_pair(self):
        """Test equality and hashing by value."""
        first = TypeMapping(from_type=IRepository[User], to_type=UserRepository)
        second = TypeMapping(from_type=IRepository[User], to_type=UserRepository)

        assert first == second
        assert len({first, second}) == 1

    def test_str(self):
        """Test the readable form."""
        mapping = TypeMapping(from_type=IRepository[User], to_type=UserRepository)
        assert str(mapping) == "IRepository[User] -> UserRepository"


class TestTypeDirectives:
    """Test cases for TypeDirectives."""

    def test_defaults(self):
        """Test that a new record carries no directive."""
        directives = TypeDirectives()

        assert not directives.excluded
        assert not directives.singleton
        assert not directives.multimap
        assert directives.name is None
        assert not directives.policy_injected
        assert directives.custom_lifetime is None


class TestRegistrationEntry:
    """Test cases for RegistrationEntry."""

    def test_key(self):
        """Test that the key is the registered type and name."""
        entry = RegistrationEntry(
            registered_type=IRepository,
            mapped_to_type=UserRepository,
            name="users",
            lifetime_manager=TransientLifetimeManager(),
        )
        assert entry.key == (IRepository, "users")

    def test_name_defaults_to_none(self):
        """Test that registrations are unnamed by default."""
        entry = RegistrationEntry(
            registered_type=User,
            mapped_to_type=User,
            lifetime_manager=TransientLifetimeManager(),
        )
        assert entry.name is None
        assert entry.key == (User, None)


class TestDependencyMetadata:
    """Test cases for DependencyMetadata."""

    def test_defaults(self):
        """Test default injection members and resolution count."""
        metadata = DependencyMetadata(
            registration=RegistrationEntry(
                registered_type=User,
                mapped_to_type=User,
                lifetime_manager=TransientLifetimeManager(),
            )
        )

        assert metadata.injection_members == ()
        assert metadata.resolution_count == 0

    def test_keeps_injection_factory(self):
        """Test that injection factory members are kept as given."""
        factory = InjectionFactory(factory=lambda c: User())
        metadata = DependencyMetadata(
            registration=RegistrationEntry(
                registered_type=User,
                mapped_to_type=User,
                lifetime_manager=TransientLifetimeManager(),
            ),
            injection_members=(factory,),
        )

        assert metadata.injection_members[0] is factory


class TestMappingOptions:
    """Test cases for MappingOptions."""

    def test_default_behaviors(self):
        """Test that no behaviours are enabled by default."""
        assert MappingOptions().behaviors == MappingBehaviors.NONE

    def test_combined_behaviors(self):
        """Test that combined flags are accepted."""
        behaviors = MappingBehaviors.MULTIMAP_BY_DEFAULT | MappingBehaviors.COLLECTION_REGISTRATION
        options = MappingOptions(behaviors=behaviors)

        assert MappingBehaviors.MULTIMAP_BY_DEFAULT in options.behaviors
        assert MappingBehaviors.COLLECTION_REGISTRATION in options.behaviors
