"""
Enums — Members of enum classes

Members never get a declaration of their own (the pipeline drops
enum instances); they are listed here, in definition order, inside
their class.
"""

from typing import Any

from ..core.events import NodeAdded
from ..core.symbols import SEPARATOR
from ..core.tree import ConstNode
from .base import Listener


LITERAL_TYPES = (int, float, complex, str, bytes, bool, type(None))


class EnumsListener(Listener):

    name = "enums"

    def on_scope(self, event: NodeAdded) -> None:
        members = self.reflector.enum_members_of(event.constant)
        for member_name, value in members:
            event.node.add(ConstNode(
                f"{event.symbol}{SEPARATOR}{member_name}",
                value=literal(value),
            ))


def literal(value: Any) -> str:
    """repr() for plain literals, "..." for anything else."""
    if isinstance(value, LITERAL_TYPES):
        return repr(value)
    if isinstance(value, tuple) and all(isinstance(v, LITERAL_TYPES) for v in value):
        return repr(value)
    return "..."
