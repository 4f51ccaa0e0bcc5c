"""React component scoring mode.

Weights what makes components hard to review: conditional rendering and
iteration inside JSX, inline closures and literals passed as props, deep
element nesting, and effect / context / reducer hooks. Components are
recognised by naming convention (an uppercase function or an uppercase
variable bound to a function) and become the group of the functions
declared inside them.
"""

from __future__ import annotations

import re
from typing import ClassVar

from tree_sitter import Node

from flogjs.mode import DetectContext, DetectResult, Mode, register
from flogjs.reporter import AnalysisReport, ScopeReporter
from flogjs.syntax import (
    JSX_ELEMENT_KINDS,
    call_arguments,
    callee_name,
    declared_name,
    expressions,
    function_name,
    is_fragment,
    is_function,
    lines,
    operator,
    string_value,
    text,
    unwrap,
    walk,
)

_REACT_EXT_RE = re.compile(r"\.(jsx|tsx|mdx)$")
_PRAGMA_RE = re.compile(r"flog:mode=react")
_PRAGMA_WINDOW = 512  # leading characters searched for the pragma

REACT_IMPORTS = frozenset({"react", "react/jsx-runtime", "react/jsx-dev-runtime", "preact/compat"})
DIRECTIVES = frozenset({"use client", "use server"})

MAX_JSX_DEPTH = 5

_FUNCTION_VALUE_KINDS = frozenset({"arrow_function", "function_expression", "function"})
_INLINE_KINDS = _FUNCTION_VALUE_KINDS | {"object", "array"}


def is_component_name(name: str | None) -> bool:
    return bool(name) and name[0].isupper()


def component_name(node: Node) -> str | None:
    """Name of the component a declaration introduces, if any."""
    if node.type in ("function_declaration", "generator_function_declaration"):
        name = declared_name(node)
        return name if is_component_name(name) else None

    if node.type == "variable_declarator":
        target = node.child_by_field_name("name")
        value = unwrap(node.child_by_field_name("value"))
        if (
            target is not None
            and target.type == "identifier"
            and is_component_name(text(target))
            and value is not None
            and value.type in _FUNCTION_VALUE_KINDS
        ):
            return text(target)
    return None


def is_map_call(node: Node) -> bool:
    if node.type != "call_expression":
        return False
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "member_expression":
        return False
    prop = callee.child_by_field_name("property")
    return prop is not None and prop.type == "property_identifier" and text(prop) == "map"


def _directives(root: Node) -> list[str]:
    """String directives in the program prologue."""
    found = []
    for stmt in root.named_children:
        if stmt.type in ("comment", "hash_bang_line"):
            continue
        if stmt.type != "expression_statement":
            break
        inner = expressions(stmt)
        value = string_value(inner[0]) if len(inner) == 1 else None
        if value is None:
            break
        found.append(value)
    return found


def _has_return(body: Node) -> bool:
    return any(
        node.type == "return_statement"
        for node, entering in walk(body)
        if entering
    )


@register
class ReactMode(Mode):
    """Scores React components by conditional rendering, nesting and hooks."""

    name: ClassVar[str] = "react"
    description: ClassVar[str] = "React components: JSX conditionals, nesting depth, hooks"

    def detect(self, ctx: DetectContext) -> DetectResult:
        strong = 0
        medium = 0
        reasons: list[str] = []

        if _REACT_EXT_RE.search(ctx.extension):
            strong += 1
            reasons.append("ext")

        if _PRAGMA_RE.search(ctx.source[:_PRAGMA_WINDOW]):
            return DetectResult(mode=self.name, confidence=1.0, reasons=["pragma"], force=True)

        root = ctx.tree.root_node
        for value in _directives(root):
            if value in DIRECTIVES:
                medium += 1
                reasons.append(f"directive:{value}")

        for node, entering in walk(root):
            if not entering:
                continue
            if node.type in JSX_ELEMENT_KINDS:
                strong += 1
                reasons.append("JSX")
            elif node.type == "import_statement":
                source = string_value(node.child_by_field_name("source"))
                if source in REACT_IMPORTS:
                    medium += 1
                    reasons.append(f"import:{source}")

        if strong > 0:
            confidence = 0.95
        elif medium >= 2:
            confidence = 0.75
        else:
            confidence = 0.0
        return DetectResult(mode=self.name, confidence=confidence, reasons=reasons)

    def analyze(self, ctx: DetectContext, reporter: ScopeReporter) -> AnalysisReport:
        depth = 0
        max_depth = 0

        for node, entering in walk(ctx.tree.root_node):
            is_element = node.type in JSX_ELEMENT_KINDS and not is_fragment(node)

            if not entering:
                if is_function(node):
                    reporter.exit_function()
                if component_name(node):
                    reporter.exit_class()
                if is_element:
                    depth -= 1
                continue

            component = component_name(node)
            if component:
                reporter.enter_class(component)
            if is_function(node):
                start, end = lines(node)
                reporter.enter_function(function_name(node), start, end)

            if is_element:
                depth += 1
                max_depth = max(max_depth, depth)
            elif node.type == "jsx_expression":
                self._score_expression(node, reporter)
            elif node.type == "call_expression":
                self._score_hook(node, reporter)

        if max_depth > MAX_JSX_DEPTH:
            reporter.add(
                (max_depth - MAX_JSX_DEPTH) * self.weights.get("jsx_depth_step"),
                "jsx_depth",
                message=f"depth={max_depth}",
            )

        return reporter.finalize()

    def _add(self, reporter: ScopeReporter, pattern: str) -> None:
        weight = self.weights.get(pattern)
        if weight:
            reporter.add(weight, pattern)

    def _score_expression(self, container: Node, reporter: ScopeReporter) -> None:
        """Score the expression embedded in ``{...}`` inside JSX."""
        inner = expressions(container)
        if not inner:
            return
        expr = unwrap(inner[0])

        if expr.type == "ternary_expression":
            self._add(reporter, "jsx_ternary")
        elif expr.type == "binary_expression" and operator(expr) in ("&&", "||"):
            self._add(reporter, "jsx_logical")
        elif is_map_call(expr):
            self._add(reporter, "jsx_map")
        elif expr.type in _INLINE_KINDS:
            self._add(reporter, "jsx_inline")

    def _score_hook(self, call: Node, reporter: ScopeReporter) -> None:
        name = callee_name(call)

        if name == "useEffect":
            self._add(reporter, "use_effect")
            args = call_arguments(call)
            if len(args) > 1 and args[1].type == "array":
                for _ in expressions(args[1]):
                    self._add(reporter, "use_effect_dep")
            if args and args[0].type in _FUNCTION_VALUE_KINDS:
                body = args[0].child_by_field_name("body")
                if body is not None and _has_return(body):
                    self._add(reporter, "use_effect_cleanup")
        elif name == "useLayoutEffect":
            self._add(reporter, "use_layout_effect")
        elif name == "useContext":
            self._add(reporter, "use_context")
        elif name == "useReducer":
            self._add(reporter, "use_reducer")
