"""
Lifecycle management for container-held instances.
"""

from typing import Any, Callable, Coroutine, List
from dataclasses import dataclass
import logging

logger = logging.getLogger("cloudmail.di.lifecycle")


@dataclass
class Finalizer:
    """
    Finalizer registration.

    Finalizers run when the owning container shuts down.
    """

    name: str
    callback: Callable[[], Coroutine[Any, Any, None]]


class Lifecycle:
    """
    Deterministic disposal of container-held instances.

    Finalizers run in LIFO order; a failing finalizer is logged and the
    remaining ones still run.
    """

    __slots__ = ("_finalizers",)

    def __init__(self):
        self._finalizers: List[Finalizer] = []

    def register_finalizer(
        self,
        callback: Callable[[], Coroutine],
        *,
        name: str = "finalizer",
    ) -> None:
        """
        Register finalizer for cleanup.

        Args:
            callback: Async callback for cleanup
            name: Finalizer name for diagnostics
        """
        self._finalizers.append(Finalizer(name=name, callback=callback))

    async def run_finalizers(self) -> None:
        """Run all finalizers in LIFO order."""
        for finalizer in reversed(self._finalizers):
            try:
                await finalizer.callback()
            except Exception as e:
                logger.warning(f"Finalizer '{finalizer.name}' failed: {e}")

    def __len__(self) -> int:
        return len(self._finalizers)

    def clear(self) -> None:
        """Clear all finalizers."""
        self._finalizers.clear()
