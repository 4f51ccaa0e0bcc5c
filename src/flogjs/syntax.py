"""Helpers for reading tree-sitter JavaScript / TypeScript syntax trees."""

from __future__ import annotations

from typing import Iterator

from tree_sitter import Node

from flogjs.reporter import ANONYMOUS

# Every construct that opens a function scope.
FUNCTION_KINDS = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",  # function expressions in older grammar releases
    "generator_function",
    "arrow_function",
    "method_definition",
})

CLASS_DECLARATION_KINDS = frozenset({"class_declaration", "abstract_class_declaration"})

MEMBER_KINDS = frozenset({"member_expression", "subscript_expression"})

JSX_ELEMENT_KINDS = frozenset({"jsx_element", "jsx_self_closing_element"})

_NAME_KINDS = frozenset({
    "identifier",
    "property_identifier",
    "private_property_identifier",
    "type_identifier",
})


def walk(root: Node) -> Iterator[tuple[Node, bool]]:
    """Depth-first walk over named nodes.

    Yields ``(node, True)`` when a node is entered and ``(node, False)`` once
    all of its descendants have been visited.
    """
    stack: list[tuple[Node, bool]] = [(root, True)]
    while stack:
        node, entering = stack.pop()
        yield node, entering
        if entering:
            stack.append((node, False))
            for child in reversed(node.named_children):
                stack.append((child, True))


def text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def lines(node: Node) -> tuple[int, int]:
    """1-based (start, end) line numbers of a node."""
    return node.start_point[0] + 1, node.end_point[0] + 1


def is_function(node: Node) -> bool:
    return node.is_named and node.type in FUNCTION_KINDS


def is_class_declaration(node: Node) -> bool:
    """Named class declarations, plus the anonymous `export default class {}`."""
    if node.type in CLASS_DECLARATION_KINDS:
        return True
    return node.type == "class" and node.parent is not None and node.parent.type == "export_statement"


def function_name(node: Node) -> str:
    """Declared name of a function or method, or the anonymous placeholder.

    Names are never inferred from an enclosing variable or property.
    """
    name = node.child_by_field_name("name")
    if name is not None and name.type in _NAME_KINDS:
        return text(name)
    return ANONYMOUS


def declared_name(node: Node) -> str | None:
    name = node.child_by_field_name("name")
    return text(name) if name is not None else None


def operator(node: Node) -> str:
    return text(node.child_by_field_name("operator"))


def unwrap(node: Node | None) -> Node | None:
    """Strip redundant parentheses around an expression."""
    while node is not None and node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if not inner:
            break
        node = inner[0]
    return node


def expressions(node: Node | None) -> list[Node]:
    """Named children that are not comments."""
    if node is None:
        return []
    return [c for c in node.named_children if c.type != "comment"]


def string_value(node: Node | None) -> str | None:
    """Value of a plain string literal, without its quotes."""
    if node is None or node.type != "string":
        return None
    raw = text(node)
    return raw[1:-1] if len(raw) >= 2 else ""


def member_depth(node: Node) -> int:
    """Length of a property-access chain, counted through its object side."""
    depth = 1
    current = node.child_by_field_name("object")
    while current is not None and current.type in MEMBER_KINDS:
        depth += 1
        current = current.child_by_field_name("object")
    return depth


def callee_name(call: Node) -> str:
    """Bare name of a called identifier, or the property of a member callee."""
    callee = call.child_by_field_name("function")
    if callee is None:
        return ""
    if callee.type == "identifier":
        return text(callee)
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        if prop is not None and prop.type == "property_identifier":
            return text(prop)
    return ""


def call_arguments(call: Node) -> list[Node]:
    return expressions(call.child_by_field_name("arguments"))


def is_fragment(node: Node) -> bool:
    """True for ``<>...</>``, which has no element name."""
    if node.type != "jsx_element":
        return False
    opening = node.child_by_field_name("open_tag")
    if opening is None:
        opening = next((c for c in node.named_children if c.type == "jsx_opening_element"), None)
    return opening is not None and opening.child_by_field_name("name") is None
