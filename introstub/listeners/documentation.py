"""Docstrings as comments on scope and method nodes."""

from typing import Any

from ..core.events import NodeAdded
from ..core.tree import Node
from ..runtime.reflection import UNRESOLVED
from .base import Listener


class DocumentationListener(Listener):

    name = "documentation"

    def on_scope(self, event: NodeAdded) -> None:
        self._document(event.node, event.constant)

    def on_method(self, event: NodeAdded) -> None:
        func = self.reflector.resolve(event.node.qualified_name)
        if func is UNRESOLVED:
            return
        self._document(event.node, func)

    def _document(self, node: Node, obj: Any) -> None:
        doc = self.reflector.docstring_of(obj)
        if doc and doc not in node.comments:
            node.comments.append(doc)
