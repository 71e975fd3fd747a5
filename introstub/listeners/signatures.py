"""
Signatures — Annotations for method nodes

Runs on the method events fired by the methods listener and copies
parameter and return annotations from the runtime signature onto the
node. Classes named in annotations join the closure.
"""

import inspect

from ..core.events import NodeAdded
from ..runtime.reflection import type_expression
from .base import Listener


class SignaturesListener(Listener):

    name = "signatures"

    def ignore(self, event: NodeAdded) -> bool:
        return False

    def on_method(self, event: NodeAdded) -> None:
        signature = event.signature
        if signature is None:
            return

        node = event.node
        for param in node.params:
            runtime_param = signature.parameters.get(param.name)
            if runtime_param is None or runtime_param.annotation is inspect.Parameter.empty:
                continue
            param.annotation = type_expression(runtime_param.annotation, self.pipeline.name_of)
            self.push_type(runtime_param.annotation)

        if signature.return_annotation is not inspect.Signature.empty:
            node.return_annotation = type_expression(signature.return_annotation, self.pipeline.name_of)
            self.push_type(signature.return_annotation)
