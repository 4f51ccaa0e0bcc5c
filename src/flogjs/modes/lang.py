"""General-purpose scoring mode.

Weights control flow (branches, loops, switches, exception handling),
suspension points and calls, plus a few heuristics for code that is hard to
follow: dynamic evaluation, long property chains and logical assignment.
"""

from __future__ import annotations

import re
from typing import ClassVar, Iterator

from tree_sitter import Node

from flogjs.mode import DetectContext, DetectResult, Mode, register
from flogjs.reporter import AnalysisReport, ScopeReporter
from flogjs.syntax import (
    MEMBER_KINDS,
    declared_name,
    function_name,
    is_class_declaration,
    is_function,
    lines,
    member_depth,
    operator,
    text,
    walk,
)

_SOURCE_EXT_RE = re.compile(r"\.(js|mjs|cjs|ts)$")

# node kind -> pattern id in the weight table
_NODE_PATTERNS = {
    "if_statement": "if",
    "ternary_expression": "ternary",
    "for_statement": "for",
    "while_statement": "while",
    "do_statement": "do_while",
    "switch_statement": "switch",
    "switch_case": "case",
    "switch_default": "case",
    "try_statement": "try",
    "catch_clause": "catch",
    "throw_statement": "throw",
    "await_expression": "await",
    "yield_expression": "yield",
}

LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})
LOGICAL_ASSIGN_OPERATORS = frozenset({"&&=", "||=", "??="})
DYNAMIC_CALLEES = frozenset({"eval", "Function"})
DEEP_MEMBER_DEPTH = 3


def _for_in_pattern(node: Node) -> str:
    op = operator(node)
    if not op:
        op = next((c.type for c in node.children if c.type in ("in", "of")), "in")
    return "for_of" if op == "of" else "for_in"


def is_dynamic_call(node: Node) -> bool:
    """True for ``eval(...)``, ``Function(...)`` and ``import(...)``."""
    callee = node.child_by_field_name("function")
    if callee is None:
        return False
    if callee.type == "import":
        return True
    return callee.type == "identifier" and text(callee) in DYNAMIC_CALLEES


def _is_tagged_template(node: Node) -> bool:
    args = node.child_by_field_name("arguments")
    return args is not None and args.type == "template_string"


def lang_patterns(node: Node) -> Iterator[str]:
    """Pattern ids a single node contributes, in the order they are recorded."""
    kind = node.type

    if kind in _NODE_PATTERNS:
        yield _NODE_PATTERNS[kind]
    elif kind == "for_in_statement":
        yield _for_in_pattern(node)
    elif kind == "binary_expression":
        if operator(node) in LOGICAL_OPERATORS:
            yield "logical"
    elif kind == "call_expression":
        if not _is_tagged_template(node):
            yield "call"
            if is_dynamic_call(node):
                yield "dynamic_call"
    elif kind in MEMBER_KINDS:
        if member_depth(node) > DEEP_MEMBER_DEPTH:
            yield "deep_member"
    elif kind == "augmented_assignment_expression":
        if operator(node) in LOGICAL_ASSIGN_OPERATORS:
            yield "logical_assign"


@register
class LangMode(Mode):
    """Scores any JavaScript or TypeScript unit by control flow and risky constructs."""

    name: ClassVar[str] = "lang"
    description: ClassVar[str] = "General JavaScript/TypeScript: branches, loops, exceptions, dynamic calls"

    def detect(self, ctx: DetectContext) -> DetectResult:
        if _SOURCE_EXT_RE.search(ctx.extension):
            return DetectResult(mode=self.name, confidence=0.4, reasons=["ext"])
        return DetectResult(mode=self.name, confidence=0.2, reasons=[])

    def analyze(self, ctx: DetectContext, reporter: ScopeReporter) -> AnalysisReport:
        weights = self.weights

        for node, entering in walk(ctx.tree.root_node):
            if not entering:
                if is_function(node):
                    reporter.exit_function()
                elif is_class_declaration(node):
                    reporter.exit_class()
                continue

            if is_class_declaration(node):
                reporter.enter_class(declared_name(node))
            elif is_function(node):
                start, end = lines(node)
                reporter.enter_function(function_name(node), start, end)

            for pattern in lang_patterns(node):
                weight = weights.get(pattern)
                if weight:
                    reporter.add(weight, pattern)

        return reporter.finalize()
