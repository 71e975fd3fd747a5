"""
Unit — The package under inspection

A unit owns one or more directories. Anything whose source lives under
them is attributed to the unit; everything else is foreign.
"""

from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Iterable, Tuple, Union


@dataclass(frozen=True)
class Unit:
    name: str
    paths: Tuple[Path, ...]

    @classmethod
    def create(cls, name: str, paths: Iterable[Union[str, Path]]) -> 'Unit':
        return cls(name=name, paths=tuple(Path(p).resolve() for p in paths))

    @classmethod
    def from_module(cls, module: ModuleType) -> 'Unit':
        """
        Build a unit from an imported module or package.

        Packages contribute every directory on their __path__; plain
        modules contribute their own file.
        """
        search = getattr(module, "__path__", None)
        if search:
            return cls.create(module.__name__, list(search))
        module_file = getattr(module, "__file__", None)
        if module_file is None:
            raise ValueError(f"Module {module.__name__} has no source location")
        return cls.create(module.__name__, [module_file])

    def contains_path(self, path: Union[str, Path]) -> bool:
        """True when the path lies under one of the unit's paths."""
        try:
            candidate = Path(path).resolve()
        except (OSError, ValueError):
            return False

        for root in self.paths:
            if candidate == root or root in candidate.parents:
                return True
        return False
