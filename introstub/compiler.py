"""
Compiler — One-call compilation of an imported package

Wires the pieces together for the common case: the unit is the given
package, its modules (and every submodule) are the seeds, and the
payload is whatever standard library is loaded.

Usage:
    import mypkg
    from introstub.compiler import compile_unit
    from introstub.core.printer import render

    result = compile_unit(mypkg)
    print(render(result.tree))
    result.missing    # seeds that produced no declaration
"""

import importlib
import logging
import pkgutil
from dataclasses import dataclass, field
from types import ModuleType
from typing import List, Optional, Sequence, Union

from .config import Config, get_config
from .core.pipeline import Pipeline
from .core.tree import DeclarationTree
from .core.unit import Unit
from .runtime.reflection import PythonReflector, Reflector
from .symbol_loader import payload_symbols, unit_symbols


logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Outcome of compiling one unit."""
    tree: DeclarationTree
    seeds: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing


def compile_unit(
    modules: Union[ModuleType, Sequence[ModuleType]],
    reflector: Optional[Reflector] = None,
    config: Optional[Config] = None,
) -> CompileResult:
    """
    Compile the declarations of a package.

    Args:
        modules: A package or module, or several; the first one names the unit
        reflector: Introspection service (PythonReflector by default)
        config: Compiler config (project/user config by default)

    Returns:
        CompileResult with the tree and the seeds that were never declared
    """
    if isinstance(modules, ModuleType):
        modules = [modules]
    modules = list(modules)
    if not modules:
        raise ValueError("compile_unit needs at least one module")

    roots = [Unit.from_module(module) for module in modules]
    unit = Unit(name=roots[0].name, paths=tuple(path for root in roots for path in root.paths))

    all_modules = _with_submodules(modules)
    bootstrap = unit_symbols(all_modules)
    payload = payload_symbols()

    pipeline = Pipeline(
        unit,
        reflector or PythonReflector(),
        payload,
        bootstrap,
        config=config or get_config(),
    )
    seeds = list(bootstrap)
    pipeline.seed_all(seeds)
    tree = pipeline.compile()

    seen = pipeline.seen_symbols
    missing = [seed for seed in seeds if seed not in seen and not pipeline.alias_namespaced(seed)]
    for seed in missing:
        logger.debug("Seed %s produced no declaration", seed)
    if missing:
        logger.info("%d of %d seeds in %s were not declared", len(missing), len(seeds), unit.name)

    return CompileResult(tree=tree, seeds=seeds, missing=missing)


def _with_submodules(modules: List[ModuleType]) -> List[ModuleType]:
    """The modules plus every importable submodule of the packages among them."""
    result: List[ModuleType] = []
    names = set()

    for module in modules:
        if module.__name__ not in names:
            names.add(module.__name__)
            result.append(module)

        search = getattr(module, "__path__", None)
        if not search:
            continue

        for info in pkgutil.walk_packages(search, prefix=module.__name__ + "."):
            if info.name in names:
                continue
            try:
                submodule = importlib.import_module(info.name)
            except ImportError as e:
                logger.warning("Skipping %s: %s", info.name, e)
                continue
            names.add(info.name)
            result.append(submodule)

    return result
