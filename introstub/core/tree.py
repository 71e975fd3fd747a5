"""
Declaration Tree — Output of a compilation run

A mutable, insertion-ordered tree of declaration nodes:
- ModuleNode / ClassNode: scopes holding child nodes
- ConstNode: a name bound to a value expression or type ascription
- AttributeNode: an annotated field (dataclass / NamedTuple)
- MethodNode: a callable with its reconstructed parameters

Insertion order is significant: two runs over the same objects must
produce the same tree, node for node. to_json() and fingerprint() give
a byte-stable view for comparing runs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

import orjson
import xxhash

from .symbols import SEPARATOR


class MethodKind(Enum):
    INSTANCE = "instance"
    FUNCTION = "function"
    CLASS = "class"
    STATIC = "static"
    PROPERTY = "property"


@dataclass
class Param:
    name: str
    kind: str               # inspect.Parameter kind name, e.g. "POSITIONAL_OR_KEYWORD"
    annotation: Optional[str] = None
    default: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "annotation": self.annotation,
            "default": self.default,
        }


@dataclass
class MixinRef:
    kind: str               # "include" | "prepend" | "extend"
    name: str


@dataclass
class Node:
    name: str
    comments: List[str] = field(default_factory=list)

    node_type = "node"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.node_type, "name": self.name}
        if self.comments:
            data["comments"] = list(self.comments)
        return data


@dataclass
class ScopeNode(Node):
    children: List[Node] = field(default_factory=list)
    mixins: List[MixinRef] = field(default_factory=list)
    type_parameters: List[str] = field(default_factory=list)
    helpers: List[str] = field(default_factory=list)
    metaclass: Optional[str] = None

    node_type = "scope"

    def add(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def remove(self, child: Node) -> bool:
        for i, existing in enumerate(self.children):
            if existing is child:
                del self.children[i]
                return True
        return False

    def is_empty(self) -> bool:
        """No children and no structural facts attached."""
        return not (self.children or self.mixins or self.type_parameters or self.helpers)

    def add_mixin(self, kind: str, name: str) -> None:
        ref = MixinRef(kind=kind, name=name)
        if ref not in self.mixins:
            self.mixins.append(ref)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.mixins:
            data["mixins"] = [{"kind": m.kind, "name": m.name} for m in self.mixins]
        if self.type_parameters:
            data["type_parameters"] = list(self.type_parameters)
        if self.helpers:
            data["helpers"] = list(self.helpers)
        if self.metaclass:
            data["metaclass"] = self.metaclass
        data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class ModuleNode(ScopeNode):
    node_type = "module"


@dataclass
class ClassNode(ScopeNode):
    superclass_name: Optional[str] = None

    node_type = "class"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["superclass"] = self.superclass_name
        return data


@dataclass
class ConstNode(Node):
    value: Optional[str] = None
    annotation: Optional[str] = None

    node_type = "const"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["value"] = self.value
        data["annotation"] = self.annotation
        return data


@dataclass
class AttributeNode(Node):
    annotation: str = "Any"
    default: Optional[str] = None

    node_type = "attribute"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["annotation"] = self.annotation
        data["default"] = self.default
        return data


@dataclass
class MethodNode(Node):
    owner: str = ""
    params: List[Param] = field(default_factory=list)
    signature: str = "()"
    kind: MethodKind = MethodKind.INSTANCE
    return_annotation: Optional[str] = None

    node_type = "method"

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}{SEPARATOR}{self.name}" if self.owner else self.name

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["owner"] = self.owner
        data["kind"] = self.kind.value
        data["signature"] = self.signature
        data["params"] = [p.to_dict() for p in self.params]
        data["return_annotation"] = self.return_annotation
        return data


class DeclarationTree:
    """
    Root container for declaration nodes.

    Usage:
        tree = DeclarationTree()
        tree.add(ClassNode("pkg.Foo"))
        tree.add(ConstNode("pkg.Foo.LIMIT", annotation="int"))   # nested under pkg.Foo
        tree.fingerprint()
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self._scopes: Dict[str, ScopeNode] = {}

    def add(self, node: Node) -> Node:
        """
        Attach a node at its lexical position.

        The node goes under the nearest scope already in the tree whose
        qualified name encloses the node's name, or at the root.
        """
        owner = self._enclosing_scope(node.name)
        if owner is None:
            self.nodes.append(node)
        else:
            owner.add(node)

        if isinstance(node, ScopeNode):
            self._scopes.setdefault(node.name, node)
        return node

    def remove(self, node: Node) -> bool:
        """Detach a node wherever it sits. Returns False if it was not found."""
        removed = False
        for i, existing in enumerate(self.nodes):
            if existing is node:
                del self.nodes[i]
                removed = True
                break

        if not removed:
            for candidate in self.walk():
                if isinstance(candidate, ScopeNode) and candidate.remove(node):
                    removed = True
                    break

        if removed and isinstance(node, ScopeNode) and self._scopes.get(node.name) is node:
            del self._scopes[node.name]
        return removed

    def find(self, name: str) -> Optional[Node]:
        """First node with this qualified name, depth-first in tree order."""
        for node in self.walk():
            if node.name == name or (isinstance(node, MethodNode) and node.qualified_name == name):
                return node
        return None

    def walk(self) -> Iterator[Node]:
        """All nodes depth-first, parents before children."""
        stack = list(reversed(self.nodes))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, ScopeNode):
                stack.extend(reversed(node.children))

    def _enclosing_scope(self, name: str) -> Optional[ScopeNode]:
        prefix = name
        while SEPARATOR in prefix:
            prefix = prefix.rpartition(SEPARATOR)[0]
            scope = self._scopes.get(prefix)
            if scope is not None:
                return scope
        return None

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {"nodes": [node.to_dict() for node in self.nodes]}

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)

    def fingerprint(self) -> str:
        """Stable hash of the tree structure and order."""
        return xxhash.xxh64(self.to_json()).hexdigest()

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __repr__(self) -> str:
        return f"DeclarationTree({len(self.nodes)} root nodes)"
