"""
Symbol Loader — Payload and unit symbol snapshots

Computed once before a run and handed to the pipeline as read-only
SymbolSets.

- payload: the standard environment (builtins and every standard
  library module already imported). Closure walks stop there.
- unit: what the unit itself defines; these are the seeds.

Usage:
    payload = payload_symbols()
    seeds = unit_symbols([pkg, pkg.models])
"""

import builtins
import inspect
import logging
import sys
import typing
from types import ModuleType
from typing import Any, Iterable, List, Optional, Set

from .core.symbols import SEPARATOR, SymbolSet


logger = logging.getLogger(__name__)

_MISSING = object()


def payload_symbols(modules: Optional[Iterable[ModuleType]] = None) -> SymbolSet:
    """
    Names of the standard environment.

    Args:
        modules: Modules to treat as standard; defaults to every loaded
            module named in sys.stdlib_module_names
    """
    names: Set[str] = set(_public_names(builtins))

    if modules is None:
        modules = _loaded_stdlib_modules()

    for module in modules:
        names.add(module.__name__)
        names.update(f"{module.__name__}{SEPARATOR}{name}" for name in _public_names(module))

    logger.debug("Payload snapshot: %d symbols", len(names))
    return SymbolSet(names)


def unit_symbols(modules: Iterable[ModuleType]) -> SymbolSet:
    """
    Names the given modules define: the modules themselves, classes whose
    home is the module, and module-level constants.
    """
    names: Set[str] = set()
    for module in modules:
        names.add(module.__name__)
        for name, value in vars(module).items():
            if name.startswith("_") or inspect.ismodule(value) or inspect.isroutine(value):
                continue
            if inspect.isclass(value):
                if value.__module__ != module.__name__:
                    continue
            elif name.lower() == name or is_typing_import(name, value):
                continue
            names.add(f"{module.__name__}{SEPARATOR}{name}")
    return SymbolSet(names)


def is_typing_import(name: str, value: Any) -> bool:
    """True when the value is the typing object of the same name (`from typing import Optional`)."""
    return getattr(typing, name, _MISSING) is value


def _public_names(module: ModuleType) -> List[str]:
    return [name for name in vars(module) if not name.startswith("_")]


def _loaded_stdlib_modules() -> List[ModuleType]:
    stdlib = sys.stdlib_module_names
    modules = []
    for name, module in list(sys.modules.items()):
        if module is None or name.partition(SEPARATOR)[0] not in stdlib:
            continue
        modules.append(module)
    return modules
