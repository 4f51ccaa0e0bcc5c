"""Syntax-tree producer backed by tree-sitter grammars."""

from __future__ import annotations

from pathlib import PurePath

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

JAVASCRIPT = Language(tsjs.language())
TYPESCRIPT = Language(tsts.language_typescript())
TSX = Language(tsts.language_tsx())

_GRAMMARS: dict[str, Language] = {
    ".ts": TYPESCRIPT,
    ".mts": TYPESCRIPT,
    ".cts": TYPESCRIPT,
    ".tsx": TSX,
}


class ParseError(Exception):
    """Raised when source text cannot be parsed into a clean syntax tree."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} ({line}:{column})"
        super().__init__(message)


def language_for(file_path: str) -> Language:
    """Pick the grammar for a file. The JavaScript grammar also covers JSX."""
    return _GRAMMARS.get(PurePath(file_path).suffix.lower(), JAVASCRIPT)


def _first_error(node: Node) -> Node | None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def parse_source(source: str, file_path: str = "<source>") -> Tree:
    """Parse ``source`` into a tree-sitter Tree.

    The grammars do not know the legacy import assertion form
    (`import d from "./a.json" assert { type: "json" }`), so sources
    using it fail to parse.

    Raises:
        ParseError: If the grammar reports a syntax error anywhere in the tree.
    """
    parser = Parser(language_for(file_path))
    tree = parser.parse(source.encode("utf-8"))

    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        if bad is None:
            raise ParseError(f"Syntax error in {file_path}")
        row, column = bad.start_point
        if bad.is_missing:
            message = f"Missing {bad.type!r} in {file_path}"
        else:
            message = f"Unexpected token in {file_path}"
        raise ParseError(message, line=row + 1, column=column + 1)

    return tree
