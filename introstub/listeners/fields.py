"""Fields of dataclasses and NamedTuples."""

import dataclasses

from ..core.events import NodeAdded
from ..core.symbols import SEPARATOR
from ..core.tree import AttributeNode
from ..runtime.reflection import type_expression
from .base import Listener


class FieldsListener(Listener):
    """
    Lists declared fields, in declaration order, as annotated
    attributes. Defaults are elided to "...".
    """

    name = "fields"

    def on_scope(self, event: NodeAdded) -> None:
        if not self.reflector.is_class(event.constant):
            return

        for field_name, annotation, default in self.reflector.fields_of(event.constant):
            event.node.add(AttributeNode(
                f"{event.symbol}{SEPARATOR}{field_name}",
                annotation=type_expression(annotation, self.pipeline.name_of),
                default=None if default is dataclasses.MISSING else "...",
            ))
            self.push_type(annotation)
