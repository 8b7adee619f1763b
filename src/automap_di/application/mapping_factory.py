"""Application layer - Discovery of interface to implementation mappings."""

import inspect
from abc import ABC, ABCMeta
from typing import Any, Dict, Generic, List, Optional, Protocol, Sequence, Set, Tuple, TypeVar, get_args, get_origin

from loguru import logger

from automap_di.domain import AutomapperConfig, MappingBehaviors, TypeMapping


def is_interface(cls: Any) -> bool:
    """Check whether a class is an interface that implementations can be mapped to.

    Interfaces are protocols, classes with abstract methods, and classes that
    declare ``ABC`` (or the ``ABCMeta`` metaclass) themselves.
    """
    if not inspect.isclass(cls):
        return False
    if getattr(cls, "_is_protocol", False) or inspect.isabstract(cls):
        return True
    if ABC in cls.__bases__:
        return True
    return isinstance(cls, ABCMeta) and not any(isinstance(base, ABCMeta) for base in cls.__bases__)


def is_implementation(cls: Any) -> bool:
    return inspect.isclass(cls) and not is_interface(cls)


class TypeMappingFactory:
    """Turns a flat list of candidate types into interface to implementation mappings.

    Only interfaces that are themselves candidates are mapped. Duplicate mappings
    to the same interface are not rejected here; that depends on registrations
    already present in the container.
    """

    def create_mappings(
        self,
        behaviors: MappingBehaviors,
        config: AutomapperConfig,
        types: Sequence[Any],
    ) -> List[TypeMapping]:
        """Create a mapping for every mappable interface of every mappable implementation.

        Generic implementations whose interface arguments are the implementation's own
        type variables are mapped in open form (``IRepository -> Repository``).
        Implementations of a parametrised interface are mapped in closed form
        (``IRepository[User] -> UserRepository``).

        Args:
            behaviors: Behaviours of the current run.
            config: The merged configuration of the run.
            types: The candidate types.

        Returns:
            The mappings, ordered by candidate type and then by base class declaration order.

        Example:
            >>> factory.create_mappings(MappingBehaviors.NONE, AutomapperConfig.create(), [IClock, SystemClock])
            [TypeMapping(from_type=IClock, to_type=SystemClock)]
        """
        interfaces = {cls for cls in types if is_interface(cls) and config.is_mappable(cls)}
        mappings: List[TypeMapping] = []

        for implementation in dict.fromkeys(types):
            if not is_implementation(implementation) or not config.is_mappable(implementation):
                continue
            for contract in self._contracts_of(implementation, interfaces):
                if config.is_mappable(contract):
                    mappings.append(TypeMapping(from_type=contract, to_type=implementation))

        logger.debug(f"Discovered {len(mappings)} mappings from {len(types)} types (behaviors={behaviors})")
        return mappings

    def _contracts_of(self, implementation: type, interfaces: Set[Any]) -> List[Any]:
        contracts: List[Any] = []
        self._collect_contracts(implementation, implementation, {}, interfaces, contracts)
        return contracts

    def _collect_contracts(
        self,
        implementation: type,
        klass: type,
        substitutions: Dict[Any, Any],
        interfaces: Set[Any],
        contracts: List[Any],
    ) -> None:
        """Walk the bases of ``klass``, carrying type arguments down the hierarchy.

        ``substitutions`` maps the type variables of ``klass`` to the arguments a
        subclass closed them with, so ``UserRepository(Repository[User])`` sees
        ``Repository``'s ``IRepository[T]`` base as ``IRepository[User]``.
        """
        for base in vars(klass).get("__orig_bases__", klass.__bases__):
            origin = get_origin(base) or base
            if origin in (Generic, Protocol) or not inspect.isclass(origin):
                continue
            args = tuple(substitutions.get(arg, arg) for arg in get_args(base))

            if origin in interfaces:
                contract = self._contract_for(implementation, origin, args)
                if contract is not None and contract not in contracts:
                    contracts.append(contract)

            params = getattr(origin, "__parameters__", ())
            nested = dict(zip(params, args)) if len(args) == len(params) else {}
            self._collect_contracts(implementation, origin, nested, interfaces, contracts)

    @staticmethod
    def _contract_for(implementation: type, interface: Any, args: Tuple[Any, ...]) -> Optional[Any]:
        if not args:
            return interface
        if any(isinstance(arg, TypeVar) for arg in args):
            # Open form only when the implementation is generic with matching arity
            if len(getattr(implementation, "__parameters__", ())) != len(interface.__parameters__):
                return None
            return interface
        return interface[args]
