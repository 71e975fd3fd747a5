"""Explicit metaclasses of classes."""

from ..core.events import NodeAdded
from .base import Listener


# Metaclasses that other listeners already express
IMPLIED_METACLASSES = ("abc.ABCMeta", "enum.EnumMeta", "enum.EnumType")


class MetaclassListener(Listener):
    """
    Records a metaclass when the class declares it itself. A metaclass
    inherited from any base is left to that base's declaration.
    """

    name = "metaclass"

    def on_scope(self, event: NodeAdded) -> None:
        constant = event.constant
        if not self.reflector.is_class(constant):
            return

        meta = self.reflector.metaclass_of(constant)
        if meta is type:
            return
        if any(self.reflector.metaclass_of(base) is meta for base in self.reflector.bases_of(constant)):
            return

        name = self.pipeline.name_of(meta)
        if not name or name in IMPLIED_METACLASSES or name.startswith(("typing.", "typing_extensions.")):
            return

        self.pipeline.push_symbol(name)
        event.node.metaclass = name
