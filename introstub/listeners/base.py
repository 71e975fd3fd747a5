"""
Listener base — Enrichment observer contract

A listener sees every NodeAdded event once. It may mutate the node
that is already attached to the tree and push new events through the
pipeline. It must not swallow its own failures: an exception aborts
the whole compilation.
"""

from typing import TYPE_CHECKING, Any

from ..core.events import NodeAdded, NodeKind, UnsupportedEventError

if TYPE_CHECKING:
    from ..core.pipeline import Pipeline
    from ..runtime.reflection import Reflector


class Listener:
    """
    Base class for enrichment listeners.

    Subclasses set `name` and override any of on_scope, on_const and
    on_method. Foreign scope events are ignored unless ignore() is
    overridden.
    """

    name = "listener"

    def __init__(self, pipeline: 'Pipeline'):
        self.pipeline = pipeline

    @property
    def reflector(self) -> 'Reflector':
        return self.pipeline.reflector

    def dispatch(self, event: NodeAdded) -> None:
        if self.ignore(event):
            return

        if event.kind in (NodeKind.SCOPE, NodeKind.FOREIGN_SCOPE):
            self.on_scope(event)
        elif event.kind == NodeKind.CONST:
            self.on_const(event)
        elif event.kind == NodeKind.METHOD:
            self.on_method(event)
        else:
            raise UnsupportedEventError(f"Unsupported node kind {event.kind!r}")

    def ignore(self, event: NodeAdded) -> bool:
        return event.is_foreign

    def push_type(self, annotation: Any) -> None:
        """Pull a class used in an annotation into the closure."""
        if self.reflector.is_class(annotation):
            name = self.pipeline.name_of(annotation)
            if name:
                self.pipeline.push_symbol(name)

    def on_scope(self, event: NodeAdded) -> None:
        pass

    def on_const(self, event: NodeAdded) -> None:
        pass

    def on_method(self, event: NodeAdded) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
