"""
Subconstants — Constants nested in a scope

Pushes every nested constant of a local scope as a ConstantFound, in
sorted name order. The pipeline decides what each one becomes.

Standard-environment names imported under their own name
(`from typing import Any`, `from collections import OrderedDict`) are
imports, not declarations, and are left out.
"""

from typing import Any

from ..core.events import NodeAdded
from ..core.symbols import SEPARATOR, leaf_name
from ..runtime.reflection import UNRESOLVED
from ..symbol_loader import is_typing_import
from .base import Listener


class SubconstantsListener(Listener):

    name = "subconstants"

    def on_scope(self, event: NodeAdded) -> None:
        symbol = event.symbol
        if self.pipeline.symbol_in_payload(symbol) and event.node.is_empty():
            return

        for constant_name in self.reflector.constants_of(event.constant):
            name = f"{symbol}{SEPARATOR}{constant_name}"
            subconstant = self.reflector.resolve(name)
            if subconstant is UNRESOLVED:
                continue
            if self._is_payload_import(constant_name, subconstant):
                continue
            self.pipeline.push_constant(name, subconstant)

    def _is_payload_import(self, constant_name: str, value: Any) -> bool:
        if self.reflector.is_namespace(value):
            target = self.pipeline.name_of(value)
            return (
                target is not None
                and leaf_name(target) == constant_name
                and self.pipeline.symbol_in_payload(target)
            )
        return is_typing_import(constant_name, value)
