"""
Mixin tracker — Write-time registry of capability composition

Python has no hook that fires when one class is composed into another
after the fact (bases patched, metaclass-level mixins, helpers that
graft methods onto foreign classes). Code that does this calls
register() so the compiler can later tell which unit put which mixin
where.

Entries are keyed by object identity, not name, so renamed and
anonymous classes are still tracked.

Usage:
    from introstub.trackers import mixin

    mixin.install()
    mixin.register(Foreign, MyMixin, mixin.MixinKind.INCLUDE)

    mixin.constants_with_mixin(MyMixin)   # [(Foreign, MixinKind.INCLUDE, "app/patches.py:12")]
    mixin.mixin_locations_for(Foreign)    # {MixinKind.INCLUDE: {MyMixin: "app/patches.py:12"}, ...}
"""

import threading
import traceback
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class MixinKind(Enum):
    PREPEND = "prepend"
    INCLUDE = "include"
    EXTEND = "extend"


_PACKAGE_DIR = str(Path(__file__).resolve().parent.parent)

_lock = threading.Lock()
_installed = False

# id(target) -> (target, {kind: {id(mixin): (mixin, location)}})
_mixin_map: Dict[int, Tuple[Any, Dict[MixinKind, Dict[int, Tuple[Any, str]]]]] = {}
# id(mixin) -> (mixin, [(target, kind, location)])
_constant_map: Dict[int, Tuple[Any, List[Tuple[Any, MixinKind, str]]]] = {}


def install() -> bool:
    """
    Enable tracking. Call once at process start, before the code being
    inspected is imported. Returns False if already installed.
    """
    global _installed
    with _lock:
        if _installed:
            return False
        _installed = True
        return True


def is_installed() -> bool:
    return _installed


def register(target: Any, mixin: Any, kind: MixinKind, location: Optional[str] = None) -> None:
    """
    Record that mixin was composed into target.

    Args:
        target: Class receiving the mixin
        mixin: Class being mixed in
        kind: How it was composed
        location: "path:line" of the composition; defaults to the first
            caller frame outside this package

    Does nothing until install() has been called.
    """
    if not _installed:
        return
    if location is None:
        location = caller_location()

    with _lock:
        _, locations = _mixin_map.setdefault(id(target), (target, _empty_locations()))
        locations[kind][id(mixin)] = (mixin, location)

        _, constants = _constant_map.setdefault(id(mixin), (mixin, []))
        constants.append((target, kind, location))


def constants_with_mixin(mixin: Any) -> List[Tuple[Any, MixinKind, str]]:
    """Every (target, kind, location) the mixin was registered into, in order."""
    with _lock:
        entry = _constant_map.get(id(mixin))
        return list(entry[1]) if entry else []


def mixin_locations_for(target: Any) -> Dict[MixinKind, Dict[Any, str]]:
    """Mixins registered into target, per kind, mapped to their location."""
    with _lock:
        entry = _mixin_map.get(id(target))
        if entry is None:
            return {kind: {} for kind in MixinKind}
        return {
            kind: {mixin: location for mixin, location in by_id.values()}
            for kind, by_id in entry[1].items()
        }


def reset() -> None:
    """Forget every registration. Intended for tests."""
    with _lock:
        _mixin_map.clear()
        _constant_map.clear()


def caller_location() -> str:
    """ "path:line" of the nearest stack frame outside this package."""
    for frame in reversed(traceback.extract_stack()[:-1]):
        if not frame.filename.startswith(_PACKAGE_DIR):
            return f"{frame.filename}:{frame.lineno}"
    return "<unknown>:0"


def location_path(location: str) -> str:
    """Path part of a "path:line" location."""
    path, _, line = location.rpartition(":")
    return path if line.isdigit() else location


def _empty_locations() -> Dict[MixinKind, Dict[int, Tuple[Any, str]]]:
    return {kind: {} for kind in MixinKind}
