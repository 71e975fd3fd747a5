"""
Printer — Deterministic text listing of a declaration tree

Root nodes are printed with their qualified name, nested nodes with
the name relative to their scope. The listing reads like a stub file
but is meant for review and diffing, not for import.
"""

from typing import List, Optional

from .symbols import SEPARATOR
from .tree import (
    AttributeNode, ClassNode, ConstNode, DeclarationTree, MethodKind,
    MethodNode, Node, Param, ScopeNode,
)


INDENT = "    "

_DECORATORS = {
    MethodKind.CLASS: "@classmethod",
    MethodKind.STATIC: "@staticmethod",
    MethodKind.PROPERTY: "@property",
}


def render(tree: DeclarationTree) -> str:
    """Render the whole tree. Ends with a newline unless the tree is empty."""
    blocks = [_render_node(node, None, 0) for node in tree.nodes]
    text = "\n\n".join("\n".join(lines) for lines in blocks)
    return text + "\n" if text else ""


def render_params(params: List[Param]) -> str:
    """Rebuild a parameter list, inserting "/" and "*" markers where needed."""
    parts: List[str] = []
    seen_positional_only = False
    seen_star = False

    for param in params:
        if param.kind == "POSITIONAL_ONLY":
            seen_positional_only = True
        elif seen_positional_only:
            parts.append("/")
            seen_positional_only = False

        if param.kind == "KEYWORD_ONLY" and not seen_star:
            parts.append("*")
            seen_star = True

        text = param.name
        if param.kind == "VAR_POSITIONAL":
            text = f"*{text}"
            seen_star = True
        elif param.kind == "VAR_KEYWORD":
            text = f"**{text}"

        if param.annotation:
            text = f"{text}: {param.annotation}"
        if param.default is not None:
            text = f"{text} = {param.default}" if param.annotation else f"{text}={param.default}"
        parts.append(text)

    if seen_positional_only:
        parts.append("/")
    return "(" + ", ".join(parts) + ")"


def _relative(name: str, scope: Optional[ScopeNode]) -> str:
    if scope is not None and name.startswith(scope.name + SEPARATOR):
        return name[len(scope.name) + 1:]
    return name


def _comment_lines(node: Node, depth: int) -> List[str]:
    pad = INDENT * depth
    lines = []
    for comment in node.comments:
        lines.extend(f"{pad}# {line}".rstrip() for line in comment.splitlines() or [""])
    return lines


def _render_node(node: Node, scope: Optional[ScopeNode], depth: int) -> List[str]:
    if isinstance(node, ScopeNode):
        return _render_scope(node, scope, depth)
    if isinstance(node, MethodNode):
        return _render_method(node, depth)

    pad = INDENT * depth
    name = _relative(node.name, scope)
    lines = _comment_lines(node, depth)

    if isinstance(node, ConstNode):
        if node.annotation and node.value is not None:
            lines.append(f"{pad}{name}: {node.annotation} = {node.value}")
        elif node.annotation:
            lines.append(f"{pad}{name}: {node.annotation}")
        else:
            lines.append(f"{pad}{name} = {node.value}")
    elif isinstance(node, AttributeNode):
        suffix = f" = {node.default}" if node.default is not None else ""
        lines.append(f"{pad}{name}: {node.annotation}{suffix}")
    else:
        lines.append(f"{pad}{name}")
    return lines


def _render_scope(node: ScopeNode, scope: Optional[ScopeNode], depth: int) -> List[str]:
    pad = INDENT * depth
    name = _relative(node.name, scope)
    lines = _comment_lines(node, depth)

    if node.helpers:
        lines.append(f"{pad}# helpers: {', '.join(node.helpers)}")
    extends = [m.name for m in node.mixins if m.kind == "extend"]
    if extends:
        lines.append(f"{pad}# extends: {', '.join(extends)}")

    if isinstance(node, ClassNode):
        bases = [m.name for m in node.mixins if m.kind == "prepend"]
        if node.superclass_name:
            bases.append(node.superclass_name)
        bases.extend(m.name for m in node.mixins if m.kind == "include")
        if node.type_parameters:
            bases.append(f"Generic[{', '.join(node.type_parameters)}]")
        if node.metaclass:
            bases.append(f"metaclass={node.metaclass}")
        header = f"{pad}class {name}({', '.join(bases)}):" if bases else f"{pad}class {name}:"
    else:
        header = f"{pad}module {name}:"
        includes = [m.name for m in node.mixins if m.kind != "extend"]
        if includes:
            lines.append(f"{pad}# includes: {', '.join(includes)}")

    lines.append(header)
    if not node.children:
        lines.append(f"{pad}{INDENT}...")
        return lines

    for child in node.children:
        lines.extend(_render_node(child, node, depth + 1))
    return lines


def _render_method(node: MethodNode, depth: int) -> List[str]:
    pad = INDENT * depth
    lines = _comment_lines(node, depth)
    decorator = _DECORATORS.get(node.kind)
    if decorator:
        lines.append(f"{pad}{decorator}")
    returns = f" -> {node.return_annotation}" if node.return_annotation else ""
    lines.append(f"{pad}def {node.name}{render_params(node.params)}{returns}: ...")
    return lines
