import importlib
import inspect
from typing import Any, List, Optional

from loguru import logger

from automap_di.application import automap
from automap_di.domain import IContainer, MappingOptions, RegistrationEntry


def types_from_modules(*module_names: str) -> List[type]:
    """Import the named modules and return the classes defined in them.

    Classes imported into a module from elsewhere are skipped, so each class is
    returned once, by the module that defines it, in definition order.

    Args:
        *module_names: Dotted module paths.

    Returns:
        The classes, module by module.

    Raises:
        ImportError: If a module cannot be imported.
    """
    types: List[type] = []
    for module_name in module_names:
        module = importlib.import_module(module_name)
        defined = [
            obj
            for _, obj in inspect.getmembers(module, inspect.isclass)
            if obj.__module__ == module.__name__
        ]
        defined.sort(key=_definition_line)
        logger.debug(f"Found {len(defined)} types in module {module_name}")
        types.extend(defined)
    return types


def _definition_line(cls: type) -> int:
    try:
        return inspect.getsourcelines(cls)[1]
    except (OSError, TypeError):
        return 0


def automap_modules(
    container: IContainer,
    *module_names: str,
    options: Optional[MappingOptions] = None,
) -> List[RegistrationEntry]:
    """Automap every class defined in the named modules onto the container.

    Example:
        >>> container = DIContainer()
        >>> automap_modules(container, "myapp.services", "myapp.adapters")
    """
    types: List[Any] = types_from_modules(*module_names)
    logger.info(f"Automapping {len(types)} types from {len(module_names)} modules")
    return automap(container, *types, options=options)
