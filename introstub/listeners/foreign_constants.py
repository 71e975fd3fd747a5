"""
Foreign constants — Classes the unit mixed itself into

A unit often adds behaviour to classes it does not own by composing
one of its own mixins into them. When such a mixin is declared, every
target it was registered into from inside the unit is pushed as a
foreign constant, so the composition shows up in the output.
"""

from ..core.events import NodeAdded
from ..trackers import mixin
from .base import Listener


class ForeignConstantsListener(Listener):

    name = "foreign_constants"

    def on_scope(self, event: NodeAdded) -> None:
        for target, _kind, location in mixin.constants_with_mixin(event.constant):
            if not self.pipeline.unit.contains_path(mixin.location_path(location)):
                continue

            name = self.pipeline.name_of(target)
            if name:
                self.pipeline.push_foreign_constant(name, target)
