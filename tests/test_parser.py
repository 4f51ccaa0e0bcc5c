"""Tests for the tree-sitter parser wrapper."""

from __future__ import annotations

import pytest

from flogjs.parser import JAVASCRIPT, TSX, TYPESCRIPT, ParseError, language_for, parse_source


class TestLanguageFor:
    @pytest.mark.parametrize("path", ["a.js", "a.jsx", "a.mjs", "a.cjs", "README"])
    def test_javascript(self, path):
        assert language_for(path) is JAVASCRIPT

    @pytest.mark.parametrize("path", ["a.ts", "a.mts", "a.cts", "src/A.TS"])
    def test_typescript(self, path):
        assert language_for(path) is TYPESCRIPT

    def test_tsx(self):
        assert language_for("App.tsx") is TSX


class TestParseSource:
    def test_parses_program(self):
        tree = parse_source("const a = 1;", "a.js")
        assert tree.root_node.type == "program"
        assert not tree.root_node.has_error

    def test_jsx_in_js_file(self):
        tree = parse_source("const el = <div className=\"x\">{a}</div>;", "a.js")
        assert not tree.root_node.has_error

    def test_typescript_annotations(self):
        tree = parse_source("function f(x: number): string { return `${x}`; }", "a.ts")
        assert not tree.root_node.has_error

    def test_tsx_component(self):
        tree = parse_source("const App = (p: Props) => <div>{p.title}</div>;", "App.tsx")
        assert not tree.root_node.has_error

    def test_syntax_error_raises(self):
        with pytest.raises(ParseError) as exc:
            parse_source("function (", "bad.js")
        assert exc.value.line == 1
        assert "bad.js" in str(exc.value)

    def test_error_line_is_one_based(self):
        with pytest.raises(ParseError) as exc:
            parse_source("const a = 1;\nlet b = ;\n", "bad.js")
        assert exc.value.line == 2
        assert exc.value.column >= 1

    def test_typescript_in_js_file_fails(self):
        with pytest.raises(ParseError):
            parse_source("let x: number = 1;", "a.js")

    def test_import_assertion_is_unsupported(self):
        with pytest.raises(ParseError) as exc:
            parse_source('import d from "./a.json" assert { type: "json" };', "a.js")
        assert exc.value.line == 1
