"""Application layer - Circular dependency detection."""

import threading
from typing import Any, List

from automap_di.domain import CircularDependencyError


class CircularDependencyDetector:
    """Detects circular dependencies during resolution.

    Uses thread-local storage to track the current resolution stack. Entries are
    ``(type, name)`` keys so that two named registrations of one interface may
    depend on each other without being reported as a cycle.

    Attributes:
        _local: Thread-local storage for resolution stacks.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _get_stack(self) -> List[Any]:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def push(self, dependency_type: Any, name: Any = None) -> None:
        """Add a dependency to the resolution stack.

        Args:
            dependency_type: The type being resolved.
            name: The registration name being resolved, if any.

        Raises:
            CircularDependencyError: If the same key is already in the stack.
        """
        stack = self._get_stack()
        key = (dependency_type, name)

        if key in stack:
            cycle_start_index = stack.index(key)
            cycle = [entry[0] for entry in stack[cycle_start_index:]] + [dependency_type]
            raise CircularDependencyError(cycle)

        stack.append(key)

    def pop(self) -> None:
        """Remove the last dependency from the resolution stack."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        if hasattr(self._local, "stack"):
            self._local.stack.clear()
