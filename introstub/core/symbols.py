"""
Symbol sets — Read-only snapshots of qualified names

Payload and bootstrap sets are computed once before a run and
shared by reference. Nothing mutates them while the closure runs.

Names are stored with the root qualifier stripped, so
"builtins.int" and "int" are the same symbol.
"""

from typing import FrozenSet, Iterable, Iterator


ROOT_QUALIFIER = "builtins."
SEPARATOR = "."


def strip_root(name: str) -> str:
    """Remove a leading root qualifier from a symbol name."""
    if name.startswith(ROOT_QUALIFIER):
        return name[len(ROOT_QUALIFIER):]
    return name


def parent_name(name: str) -> str:
    """Qualified name of the enclosing namespace ("" at the root)."""
    return name.rpartition(SEPARATOR)[0]


def leaf_name(name: str) -> str:
    """Last segment of a qualified name."""
    return name.rpartition(SEPARATOR)[2]


class SymbolSet:
    """
    Immutable set of symbol names.

    Usage:
        payload = SymbolSet(["int", "collections.OrderedDict"])
        payload.contains("builtins.int")   # True
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: FrozenSet[str] = frozenset(strip_root(n) for n in names)

    def contains(self, name: str) -> bool:
        return strip_root(name) in self._names

    def union(self, other: Iterable[str]) -> 'SymbolSet':
        return SymbolSet(self._names | frozenset(strip_root(n) for n in other))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"SymbolSet({len(self._names)} names)"
