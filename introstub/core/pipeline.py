"""
Pipeline — Event-driven symbol-closure compiler

Starting from seed names, discovers every constant reachable from
them, classifies it (namespace, alias, plain value), and builds a
declaration tree. Enrichment listeners observe each node as it is
created and may extend it or push more work.

Processing model:
- Single-threaded, run-to-completion: one event at a time, FIFO
- SymbolFound -> resolve -> ConstantFound
- ConstantFound -> filter -> classify -> node + NodeAdded (+ SymbolFound
  for superclasses)
- NodeAdded -> every listener, in registration order

Termination: a name enters the seen set before its node is built and
never leaves it, so each name yields at most one declaration.

Usage:
    pipeline = Pipeline(unit, PythonReflector(), payload, bootstrap)
    pipeline.seed("pkg.models.User")
    tree = pipeline.compile()
"""

import logging
import typing
import weakref
from enum import Enum
from typing import TYPE_CHECKING, Any, FrozenSet, Iterable, List, Optional, Set, Tuple

from ..config import Config
from ..trackers import definition
from .events import (
    ConstantFound, Event, EventQueue, ForeignConstantFound, NodeAdded, NodeKind,
    SymbolFound, UnsupportedEventError,
)
from .symbols import SEPARATOR, SymbolSet, leaf_name, strip_root
from .tree import ClassNode, ConstNode, DeclarationTree, MethodNode, ModuleNode, ScopeNode
from .unit import Unit
from ..runtime.reflection import UNRESOLVED, Reflector, type_expression

if TYPE_CHECKING:
    from ..listeners import ListenerRegistry


logger = logging.getLogger(__name__)

# Aliases that are known to be noise even when the unit re-exports them
IGNORED_SYMBOLS = ("typing.Text",)

# Weak collections are implicitly generic; their parameters cannot be observed
WEAK_COLLECTIONS = {
    weakref.WeakSet: "weakref.WeakSet[Any]",
    weakref.WeakKeyDictionary: "weakref.WeakKeyDictionary[Any, Any]",
    weakref.WeakValueDictionary: "weakref.WeakValueDictionary[Any, Any]",
}

# Value classes from these namespaces are type machinery, not data
INTERNAL_TYPE_PREFIXES = ("typing._", "typing_extensions._", "_typeshed.")

_TYPE_ALIAS_TYPE = getattr(typing, "TypeAliasType", None)


class ConstantKind(Enum):
    """Closed classification of a resolved constant."""
    NAMESPACE = "namespace"  # Module or class declared under its own name
    ALIAS = "alias"          # Module or class bound under another name
    VALUE = "value"          # Anything else


class Pipeline:
    """
    Closure compiler for one unit.

    All mutable state (queue, seen set, alias namespaces, tree) belongs
    to the instance. The reflector and symbol sets are only read and
    may be shared between instances.

    Args:
        unit: Package under inspection
        reflector: Runtime introspection service
        payload_symbols: Names of the standard environment
        bootstrap_symbols: Names requested explicitly, even if in payload
        config: Compiler configuration (defaults apply when None)
        listeners: Listener registry; None installs the default listeners
    """

    def __init__(
        self,
        unit: Unit,
        reflector: Reflector,
        payload_symbols: SymbolSet,
        bootstrap_symbols: SymbolSet,
        config: Optional[Config] = None,
        listeners: Optional['ListenerRegistry'] = None,
    ):
        self.unit = unit
        self.reflector = reflector
        self.config = config or Config()
        self.tree = DeclarationTree()

        self._events = EventQueue()
        self._seen: Set[str] = set()
        self._alias_namespace: Set[str] = set()

        self._payload_symbols = payload_symbols
        self._bootstrap_symbols = bootstrap_symbols
        self._ignored_symbols: FrozenSet[str] = frozenset(IGNORED_SYMBOLS) | frozenset(
            strip_root(s) for s in self.config.compiler.ignored_symbols
        )
        self._terminal_superclasses: FrozenSet[str] = frozenset(
            strip_root(s) for s in self.config.compiler.terminal_superclasses
        )

        if listeners is None:
            from ..listeners import default_registry
            listeners = default_registry(self)
        self.listeners = listeners

    # =========================================================================
    # Entry surface
    # =========================================================================

    def seed(self, symbol: str) -> None:
        """Enqueue a starting point."""
        self.push_symbol(symbol)

    def seed_all(self, symbols: Iterable[str]) -> None:
        for symbol in symbols:
            self.push_symbol(symbol)

    def compile(self) -> DeclarationTree:
        """Drain the event queue and return the assembled tree."""
        logger.info("Compiling %s (%d pending events)", self.unit.name, len(self._events))
        processed = 0
        while not self._events.empty:
            self._dispatch(self._events.pop())
            processed += 1
        logger.info(
            "Compiled %s: %d events, %d declarations",
            self.unit.name, processed, len(self._seen),
        )
        return self.tree

    # =========================================================================
    # Event pushing
    # =========================================================================

    def push(self, event: Event) -> None:
        self._events.push(event)

    def push_symbol(self, symbol: str) -> None:
        self._events.push(SymbolFound(symbol))

    def push_constant(self, symbol: str, constant: Any) -> None:
        self._events.push(ConstantFound(symbol, constant))

    def push_foreign_constant(self, symbol: str, constant: Any) -> None:
        self._events.push(ForeignConstantFound(symbol, constant))

    def push_const(self, symbol: str, constant: Any, node: ConstNode) -> None:
        self._events.push(NodeAdded(symbol, constant, node, NodeKind.CONST))

    def push_scope(self, symbol: str, constant: Any, node: ScopeNode) -> None:
        self._events.push(NodeAdded(symbol, constant, node, NodeKind.SCOPE))

    def push_foreign_scope(self, symbol: str, constant: Any, node: ScopeNode) -> None:
        self._events.push(NodeAdded(symbol, constant, node, NodeKind.FOREIGN_SCOPE))

    def push_method(
        self,
        symbol: str,
        constant: Any,
        node: MethodNode,
        signature: Any,
        parameters: Iterable[Tuple[str, str]],
    ) -> None:
        self._events.push(NodeAdded(
            symbol, constant, node, NodeKind.METHOD,
            signature=signature, parameters=tuple(parameters),
        ))

    @property
    def pending(self) -> int:
        return len(self._events)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _dispatch(self, event: Event) -> None:
        if isinstance(event, SymbolFound):
            self._on_symbol(event)
        elif isinstance(event, ConstantFound):
            self._on_constant(event)
        elif isinstance(event, NodeAdded):
            self._on_node(event)
        else:
            raise UnsupportedEventError(f"Unsupported event {type(event).__name__}")

    def _on_symbol(self, event: SymbolFound) -> None:
        symbol = strip_root(event.symbol)
        if self._skip_symbol(symbol):
            logger.debug("Skipping payload symbol %s", symbol)
            return

        constant = self.reflector.resolve(symbol)
        if constant is UNRESOLVED:
            logger.debug("Could not resolve %s", symbol)
            return

        self.push_constant(symbol, constant)

    def _on_constant(self, event: ConstantFound) -> None:
        name = strip_root(event.symbol)
        reason = self._skip_constant(name, event.constant)
        if reason:
            logger.debug("Skipping constant %s: %s", name, reason)
            return

        self._mark_seen(name)

        if isinstance(event, ForeignConstantFound):
            self._compile_foreign_constant(name, event.constant)
        else:
            self._compile_constant(name, event.constant)

    def _on_node(self, event: NodeAdded) -> None:
        self.listeners.dispatch(event)

    # =========================================================================
    # Compiling
    # =========================================================================

    def classify(self, name: str, constant: Any) -> ConstantKind:
        if not self.reflector.is_namespace(constant):
            return ConstantKind.VALUE
        if self.name_of(constant) != name:
            return ConstantKind.ALIAS
        return ConstantKind.NAMESPACE

    def _compile_foreign_constant(self, name: str, constant: Any) -> None:
        if self.reflector.is_type_variable(constant):
            return

        scope = self._compile_scope(name, constant)
        self.push_foreign_scope(name, constant, scope)

    def _compile_constant(self, name: str, constant: Any) -> None:
        kind = self.classify(name, constant)
        if kind == ConstantKind.ALIAS:
            self._compile_alias(name, constant)
        elif kind == ConstantKind.NAMESPACE:
            self._compile_namespace(name, constant)
        else:
            self._compile_object(name, constant)

    def _compile_alias(self, name: str, constant: Any) -> None:
        if self.symbol_in_payload(name):
            return

        target = self.name_of(constant) or self._anonymous_expression(name, constant)

        self._alias_namespace.add(name + SEPARATOR)

        if name in self._ignored_symbols:
            return

        node = ConstNode(name, value=target)
        self.tree.add(node)
        self.push_const(name, constant, node)

    def _compile_object(self, name: str, value: Any) -> None:
        if self.symbol_in_payload(name):
            return

        klass = self.reflector.class_of(value)

        if self.reflector.is_type_variable(value):
            node = ConstNode(name, value=f'{klass.__name__}("{getattr(value, "__name__", leaf_name(name))}")')
            self._add_const(name, klass, node)
            return

        if self._is_type_alias(value):
            aliased = value.__value__ if _is_type_alias_type(value) else value
            node = ConstNode(name, value=type_expression(aliased, self.name_of), annotation="TypeAlias")
            self._add_const(name, klass, node)
            return

        if klass in WEAK_COLLECTIONS:
            klass_name = WEAK_COLLECTIONS[klass]
        else:
            klass_name = self._generic_name_of(klass)

        if klass_name and klass_name.startswith(INTERNAL_TYPE_PREFIXES):
            return

        node = ConstNode(name, annotation=klass_name or "Any")
        self._add_const(name, klass, node)

    def _generic_name_of(self, klass: type) -> Optional[str]:
        """Name of a value's class, with `Any` for each of its type parameters."""
        klass_name = self.name_of(klass)
        if klass_name is None:
            return None
        parameters = self.reflector.type_parameters_of(klass)
        if not parameters:
            return klass_name
        return f"{klass_name}[{', '.join('Any' for _ in parameters)}]"

    def _add_const(self, name: str, klass: Any, node: ConstNode) -> None:
        self.tree.add(node)
        self.push_const(name, klass, node)

    def _compile_namespace(self, name: str, constant: Any) -> None:
        if self.reflector.is_type_variable(constant):
            return
        if not self.defined_in_unit(constant, strict=self.config.compiler.strict_membership):
            logger.debug("Skipping %s: not defined in %s", name, self.unit.name)
            return

        scope = self._compile_scope(name, constant)
        self.push_scope(name, constant, scope)

    def _compile_scope(self, name: str, constant: Any) -> ScopeNode:
        if self.reflector.is_class(constant):
            superclass = self._compile_superclass(constant)
            scope: ScopeNode = ClassNode(name, superclass_name=superclass)
        else:
            scope = ModuleNode(name)

        self.tree.add(scope)
        return scope

    def _compile_superclass(self, constant: Any) -> Optional[str]:
        superclass = None

        while True:
            superclass = self.reflector.superclass_of(constant)
            if superclass is None:
                break

            constant_name = self.name_of(constant)
            constant = superclass

            # A class can end up with "itself" as superclass when its name
            # is rebound to a subclass:
            #
            #   class A: ...
            #   A = type("A", (A,), {})
            #
            # The old A still reports the name "A", which now resolves to
            # the new A. Compare against the object the name resolves to
            # and keep walking while it is the class we started from.
            superclass_name = self.name_of(superclass)
            if not superclass_name:
                continue

            resolved = self.reflector.resolve(superclass_name)
            if resolved is UNRESOLVED or not self.reflector.is_namespace(resolved):
                continue
            if self.name_of(resolved) == constant_name:
                continue

            break

        if superclass is None or self._is_terminal_superclass(superclass):
            return None

        name = self.name_of(superclass)
        if not name:
            return None

        self.push_symbol(name)
        return name

    def _is_terminal_superclass(self, superclass: Any) -> bool:
        if superclass is object:
            return True
        return self.name_of(superclass) in self._terminal_superclasses

    def _anonymous_expression(self, name: str, constant: Any) -> str:
        if self.reflector.is_module(constant):
            return f'types.ModuleType("{leaf_name(name)}")'
        metaclass = self.name_of(self.reflector.class_of(constant)) or "type"
        return f'{metaclass}("{getattr(constant, "__name__", leaf_name(name))}", (), {{}})'

    def _is_type_alias(self, value: Any) -> bool:
        if _is_type_alias_type(value):
            return True
        return not self.reflector.is_class(value) and typing.get_origin(value) is not None

    # =========================================================================
    # Filtering
    # =========================================================================

    def _skip_symbol(self, name: str) -> bool:
        return self.symbol_in_payload(name) and not self._bootstrap_symbols.contains(name)

    def _skip_constant(self, name: str, constant: Any) -> Optional[str]:
        """Reason to drop the constant, or None to keep it."""
        if not name.strip():
            return "blank name"
        if "<" in name or ">" in name:
            return "synthetic name"
        leaf = leaf_name(name)
        if leaf.lower() == leaf and not self._is_module_definition(name, constant):
            return "lower-case name"
        if self.alias_namespaced(name):
            return "inside an alias namespace"
        if name in self._seen:
            return "already seen"
        if self.reflector.is_enum_member(constant):
            return "enum member"
        return None

    def _is_module_definition(self, name: str, constant: Any) -> bool:
        # Module names are lower-case by convention; a module bound
        # under its own name is still a namespace worth declaring
        return self.reflector.is_module(constant) and self.reflector.canonical_name(constant) == name

    def symbol_in_payload(self, name: str) -> bool:
        return self._payload_symbols.contains(strip_root(name))

    def defined_in_unit(self, constant: Any, strict: bool = True) -> bool:
        """
        Whether the unit defines (part of) the constant.

        Candidate files are the reflector's definition files plus any
        sites registered with the definition tracker. With no candidates
        the answer is "yes" unless strict.
        """
        files = set(self.reflector.definition_files(constant)) | definition.files_for(constant)
        if not files:
            return not strict
        return any(self.unit.contains_path(path) for path in files)

    def method_in_unit(self, func: Any) -> bool:
        source = self.reflector.source_file_of(func)
        if source is None:
            return False
        return self.unit.contains_path(source)

    def alias_namespaced(self, name: str) -> bool:
        return any(name.startswith(namespace) for namespace in self._alias_namespace)

    def _mark_seen(self, name: str) -> None:
        self._seen.add(name)

    @property
    def seen_symbols(self) -> FrozenSet[str]:
        return frozenset(self._seen)

    @property
    def alias_namespaces(self) -> List[str]:
        return sorted(self._alias_namespace)

    # =========================================================================
    # Helpers
    # =========================================================================

    def name_of(self, constant: Any) -> Optional[str]:
        """
        Canonical name of the constant, but only if that name still
        resolves to this very object.
        """
        name = self.reflector.canonical_name(constant)
        if name is None:
            return None
        if self.reflector.resolve(name) is not constant:
            return None
        return name


def _is_type_alias_type(value: Any) -> bool:
    return _TYPE_ALIAS_TYPE is not None and isinstance(value, _TYPE_ALIAS_TYPE)
