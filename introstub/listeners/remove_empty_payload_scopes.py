"""Drops payload scopes that ended up with nothing to declare."""

from ..core.events import NodeAdded
from .base import Listener


class RemoveEmptyPayloadScopesListener(Listener):

    name = "remove_empty_payload_scopes"

    def on_scope(self, event: NodeAdded) -> None:
        if not self.pipeline.symbol_in_payload(event.symbol):
            return
        if not event.node.is_empty():
            return
        self.pipeline.tree.remove(event.node)
