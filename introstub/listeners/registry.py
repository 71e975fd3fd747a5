"""
Listener Registry — Ordered set of enrichment listeners

Listeners run in registration order. Order matters: later listeners
may rely on what earlier ones attached (methods are documented after
the mixins that synthesize them were recorded).

Usage:
    registry = ListenerRegistry()
    registry.register(MixinsListener(pipeline))
    registry.register(MethodsListener(pipeline))

    registry.dispatch(event)   # MixinsListener first, then MethodsListener
"""

from typing import Dict, Iterator, List

from ..core.events import NodeAdded
from .base import Listener


class ListenerRegistry:
    """
    Registry of enrichment listeners.

    Names are unique. Dispatch does not catch listener exceptions.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._listeners: Dict[str, Listener] = {}  # name -> listener, insertion ordered

    def register(self, listener: Listener) -> None:
        """
        Register a listener at the end of the dispatch order.

        Args:
            listener: Listener to register

        Raises:
            ValueError: If a listener with the same name is registered
        """
        if listener.name in self._listeners:
            raise ValueError(f"Listener {listener.name} already registered")
        self._listeners[listener.name] = listener

    def unregister(self, name: str) -> bool:
        """
        Unregister a listener by name.

        Returns:
            True if unregistered, False if not found
        """
        if name not in self._listeners:
            return False
        del self._listeners[name]
        return True

    def get(self, name: str) -> Listener:
        return self._listeners[name]

    def dispatch(self, event: NodeAdded) -> None:
        """Notify every listener once, in registration order."""
        for listener in list(self._listeners.values()):
            listener.dispatch(event)

    def names(self) -> List[str]:
        """Registered listener names in dispatch order."""
        return list(self._listeners.keys())

    def __iter__(self) -> Iterator[Listener]:
        return iter(list(self._listeners.values()))

    def __len__(self) -> int:
        """Return number of registered listeners."""
        return len(self._listeners)

    def __contains__(self, name: str) -> bool:
        """Check if a listener name is registered."""
        return name in self._listeners
