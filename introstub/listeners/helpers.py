"""Class-level markers: abstract, final, protocol."""

from ..core.events import NodeAdded
from .base import Listener


class HelpersListener(Listener):

    name = "helpers"

    def on_scope(self, event: NodeAdded) -> None:
        constant = event.constant
        if not self.reflector.is_class(constant):
            return

        helpers = event.node.helpers
        if self.reflector.is_abstract(constant) and "abstract" not in helpers:
            helpers.append("abstract")
        if self.reflector.is_final(constant) and "final" not in helpers:
            helpers.append("final")
        if self.reflector.is_protocol(constant) and "protocol" not in helpers:
            helpers.append("protocol")
