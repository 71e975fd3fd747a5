"""
introstub — Declaration stubs from live Python objects

Imports a package, walks every class, module and constant reachable
from what it defines, and builds a declaration tree describing what
was observed at runtime.

Closure model:
- Seeds are names; names resolve to objects; objects become nodes
- Each node is offered to enrichment listeners, which may add detail
  and pull more names into the closure
- Standard-library names stop the walk unless explicitly requested

Usage:
    import mypkg
    from introstub import compile_unit, render

    result = compile_unit(mypkg)
    print(render(result.tree))
"""

__version__ = "0.1.0"

# Core layer
from .core.events import (
    Event, SymbolFound, ConstantFound, ForeignConstantFound, NodeAdded, NodeKind,
    EventQueue, EmptyQueueError, UnsupportedEventError,
)
from .core.symbols import SymbolSet
from .core.unit import Unit
from .core.tree import (
    DeclarationTree, ScopeNode, ModuleNode, ClassNode, ConstNode, AttributeNode,
    MethodNode, MethodKind, Param,
)
from .core.printer import render
from .core.pipeline import Pipeline, ConstantKind

# Runtime layer
from .runtime.reflection import Reflector, PythonReflector, UNRESOLVED

# Trackers
from .trackers import mixin, definition, MixinKind

# Listeners
from .listeners import Listener, ListenerRegistry, default_registry

# Config (stays at root)
from .config import Config, ConfigManager, get_config, CompilerConfig, ListenerConfig

# Entry points
from .symbol_loader import payload_symbols, unit_symbols
from .compiler import compile_unit, CompileResult

__all__ = [
    # Core
    'Event', 'SymbolFound', 'ConstantFound', 'ForeignConstantFound', 'NodeAdded', 'NodeKind',
    'EventQueue', 'EmptyQueueError', 'UnsupportedEventError',
    'SymbolSet', 'Unit',
    'DeclarationTree', 'ScopeNode', 'ModuleNode', 'ClassNode', 'ConstNode', 'AttributeNode',
    'MethodNode', 'MethodKind', 'Param',
    'render', 'Pipeline', 'ConstantKind',
    # Runtime
    'Reflector', 'PythonReflector', 'UNRESOLVED',
    # Trackers
    'mixin', 'definition', 'MixinKind',
    # Listeners
    'Listener', 'ListenerRegistry', 'default_registry',
    # Config
    'Config', 'ConfigManager', 'get_config', 'CompilerConfig', 'ListenerConfig',
    # Entry points
    'payload_symbols', 'unit_symbols', 'compile_unit', 'CompileResult',
]
