"""
Events — Work items driving the closure compiler

Every discovery and construction step is an event. The pipeline drains
a FIFO queue of them until nothing is left.

Event kinds:
- SymbolFound: a name to resolve
- ConstantFound: a resolved object bound to a name, from the unit
- ForeignConstantFound: a resolved object from outside the unit that
  the unit touches (e.g. mixes into)
- NodeAdded: a declaration node was attached to the tree; fans out to
  listeners
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Optional, Tuple


class EmptyQueueError(IndexError):
    """Raised when popping from an event queue with nothing pending."""


class UnsupportedEventError(RuntimeError):
    """An event with no dispatch rule reached the pipeline or a listener."""


class NodeKind(Enum):
    """What kind of declaration node a NodeAdded event carries."""
    CONST = "const"
    SCOPE = "scope"
    FOREIGN_SCOPE = "foreign_scope"
    METHOD = "method"


class Event:
    """Base class for all pipeline events."""


@dataclass
class SymbolFound(Event):
    symbol: str


@dataclass
class ConstantFound(Event):
    symbol: str
    constant: Any


@dataclass
class ForeignConstantFound(ConstantFound):
    pass


@dataclass
class NodeAdded(Event):
    """
    A node was created and attached to the declaration tree.

    Method events also carry the runtime signature and the ordered
    (name, kind) parameter pairs it was built from.
    """
    symbol: str
    constant: Any
    node: Any
    kind: NodeKind
    signature: Optional[Any] = None
    parameters: Tuple[Tuple[str, str], ...] = ()

    @property
    def is_foreign(self) -> bool:
        return self.kind == NodeKind.FOREIGN_SCOPE

    @property
    def is_scope(self) -> bool:
        return self.kind in (NodeKind.SCOPE, NodeKind.FOREIGN_SCOPE)


class EventQueue:
    """
    Ordered work-list of pending events.

    Events come out in the order they went in. Each one is consumed
    exactly once.
    """

    def __init__(self):
        self._events: Deque[Event] = deque()

    def push(self, event: Event) -> None:
        self._events.append(event)

    def pop(self) -> Event:
        """
        Remove and return the oldest pending event.

        Raises:
            EmptyQueueError: If nothing is pending
        """
        if not self._events:
            raise EmptyQueueError("pop from an empty event queue")
        return self._events.popleft()

    @property
    def empty(self) -> bool:
        return not self._events

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)
