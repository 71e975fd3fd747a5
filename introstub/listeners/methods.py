"""
Methods — Callables defined by the unit

Every function, classmethod, staticmethod and property in a scope's
own namespace whose code lives in the unit becomes a MethodNode. This
also applies to foreign scopes: methods the unit grafted onto someone
else's class are part of the unit's surface.

Each method node fires its own NodeAdded event carrying the runtime
signature, so later listeners can refine it.
"""

import inspect
from typing import List, Optional

from ..core.events import NodeAdded
from ..core.tree import MethodNode, Param
from .base import Listener


class MethodsListener(Listener):

    name = "methods"

    def ignore(self, event: NodeAdded) -> bool:
        return False

    def on_scope(self, event: NodeAdded) -> None:
        for method_name, func, kind in self.reflector.methods_of(event.constant):
            if not self.pipeline.method_in_unit(func):
                continue

            signature = self.reflector.signature_of(func)
            params = build_params(signature)
            node = MethodNode(
                name=method_name,
                owner=event.symbol,
                params=params,
                signature=str(signature) if signature is not None else "(*args, **kwargs)",
                kind=kind,
            )
            event.node.add(node)
            self.pipeline.push_method(
                event.symbol, event.constant, node, signature,
                [(p.name, p.kind) for p in params],
            )


def build_params(signature: Optional[inspect.Signature]) -> List[Param]:
    """Parameters without annotations; defaults are elided to "..."."""
    if signature is None:
        return [Param("args", "VAR_POSITIONAL"), Param("kwargs", "VAR_KEYWORD")]

    return [
        Param(
            name=param.name,
            kind=param.kind.name,
            default=None if param.default is inspect.Parameter.empty else "...",
        )
        for param in signature.parameters.values()
    ]
