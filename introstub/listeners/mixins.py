"""
Mixins — Bases beyond the superclass, and tracked compositions

Local classes record every extra base (include) plus whatever the
mixin tracker saw composed into them. Foreign classes only record the
mixins the unit itself composed into them; the rest of a foreign
class belongs to someone else.
"""

from typing import Any, Dict

from ..core.events import NodeAdded
from ..trackers import mixin
from ..trackers.mixin import MixinKind
from .base import Listener


# typing machinery is not a capability worth declaring
FILTERED_PREFIXES = ("typing.", "typing_extensions.")


class MixinsListener(Listener):

    name = "mixins"

    def ignore(self, event: NodeAdded) -> bool:
        return False

    def on_scope(self, event: NodeAdded) -> None:
        constant = event.constant
        locations = mixin.mixin_locations_for(constant)

        self._add_tracked(event, MixinKind.PREPEND, locations[MixinKind.PREPEND])

        if not event.is_foreign and self.reflector.is_class(constant):
            superclass = self.reflector.superclass_of(constant)
            for base in self.reflector.bases_of(constant):
                if base is superclass:
                    continue
                self._add(event, MixinKind.INCLUDE, base)

        self._add_tracked(event, MixinKind.INCLUDE, locations[MixinKind.INCLUDE])
        self._add_tracked(event, MixinKind.EXTEND, locations[MixinKind.EXTEND])

    def _add_tracked(self, event: NodeAdded, kind: MixinKind, mixins: Dict[Any, str]) -> None:
        for mod, location in mixins.items():
            if event.is_foreign and not self.pipeline.unit.contains_path(mixin.location_path(location)):
                continue
            self._add(event, kind, mod)

    def _add(self, event: NodeAdded, kind: MixinKind, mod: Any) -> None:
        name = self.pipeline.name_of(mod)
        if not name or name.startswith(FILTERED_PREFIXES):
            return

        self.pipeline.push_symbol(name)
        event.node.add_mixin(kind.value, name)
