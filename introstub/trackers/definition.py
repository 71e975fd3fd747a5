"""
Definition tracker — Extra definition sites for runtime objects

Classes built dynamically (type(), factories, code generation) report
the file of whatever module called the factory, which may not be the
file that owns them. Factories call register() with the real site so
unit membership can see it.
"""

import threading
from typing import Any, Dict, Set, Tuple


_lock = threading.Lock()

# id(constant) -> (constant, files)
_files: Dict[int, Tuple[Any, Set[str]]] = {}


def register(constant: Any, path: str) -> None:
    with _lock:
        _, files = _files.setdefault(id(constant), (constant, set()))
        files.add(str(path))


def files_for(constant: Any) -> Set[str]:
    with _lock:
        entry = _files.get(id(constant))
        return set(entry[1]) if entry else set()


def reset() -> None:
    with _lock:
        _files.clear()
