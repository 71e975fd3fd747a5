"""
Core — Events, symbols, units and the declaration tree

The pipeline lives in core.pipeline and is imported from there; it
depends on the runtime and listener layers, which depend on these
modules.
"""

from .events import (
    Event, SymbolFound, ConstantFound, ForeignConstantFound, NodeAdded, NodeKind,
    EventQueue, EmptyQueueError, UnsupportedEventError,
)
from .symbols import SymbolSet, strip_root, ROOT_QUALIFIER, SEPARATOR
from .unit import Unit
from .tree import (
    DeclarationTree, Node, ScopeNode, ModuleNode, ClassNode, ConstNode,
    AttributeNode, MethodNode, MethodKind, Param, MixinRef,
)
from .printer import render

__all__ = [
    'Event', 'SymbolFound', 'ConstantFound', 'ForeignConstantFound', 'NodeAdded', 'NodeKind',
    'EventQueue', 'EmptyQueueError', 'UnsupportedEventError',
    'SymbolSet', 'strip_root', 'ROOT_QUALIFIER', 'SEPARATOR',
    'Unit',
    'DeclarationTree', 'Node', 'ScopeNode', 'ModuleNode', 'ClassNode', 'ConstNode',
    'AttributeNode', 'MethodNode', 'MethodKind', 'Param', 'MixinRef',
    'render',
]
