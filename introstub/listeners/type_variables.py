"""Generic type parameters of classes."""

from ..core.events import NodeAdded
from ..core.symbols import SEPARATOR
from .base import Listener


class TypeVariablesListener(Listener):
    """
    Records the type variables a generic class is parameterized over
    and pulls their module-level definitions into the closure.
    """

    name = "type_variables"

    def on_scope(self, event: NodeAdded) -> None:
        if not self.reflector.is_class(event.constant):
            return

        for param in self.reflector.type_parameters_of(event.constant):
            param_name = getattr(param, "__name__", None)
            if not param_name or param_name in event.node.type_parameters:
                continue
            event.node.type_parameters.append(param_name)

            module = getattr(param, "__module__", None)
            if module and module != "typing":
                self.pipeline.push_symbol(f"{module}{SEPARATOR}{param_name}")
