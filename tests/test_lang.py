"""Tests for the general-purpose lang scoring mode."""

from __future__ import annotations

import pytest

from flogjs import analyze_source


def _only(report):
    assert len(report.functions) == 1
    return report.functions[0]


def _kinds(fn):
    return [d.kind for d in fn.all_drivers]


class TestBasics:
    def test_single_conditional(self):
        report = analyze_source("function test() { if (true) {} }", "test.js")
        fn = _only(report)
        assert fn.name == "test"
        assert fn.score == pytest.approx(1.0)
        assert report.total == pytest.approx(1.0)
        assert report.mode == "lang"

    def test_eval_is_heavy(self):
        report = analyze_source("function run(code) { return eval(code); }", "run.js")
        fn = _only(report)
        assert fn.score > 4.0
        assert fn.top_drivers[0].kind == "dynamic_call"

    def test_dynamic_import(self):
        report = analyze_source('async function load() { await import("./x.js"); }', "load.js")
        fn = _only(report)
        assert fn.score == pytest.approx(0.5 + 0.1 + 4.0)
        assert "dynamic_call" in _kinds(fn)

    def test_function_constructor(self):
        report = analyze_source('function make() { return Function("return 1"); }', "make.js")
        assert "dynamic_call" in _kinds(_only(report))

    def test_empty_source(self):
        report = analyze_source("", "empty.js")
        assert report.total == 0.0
        assert report.functions == ()


class TestControlFlow:
    def test_loops(self):
        source = """
        function loops(xs, o) {
          for (let i = 0; i < 1; i++) {}
          while (false) {}
          do {} while (false);
          for (const x of xs) {}
          for (const k in o) {}
        }
        """
        fn = _only(analyze_source(source, "loops.js"))
        assert fn.score == pytest.approx(5.0)
        assert sorted(_kinds(fn)) == ["do_while", "for", "for_in", "for_of", "while"]

    def test_switch_cases(self):
        source = "function s(x) { switch (x) { case 1: break; case 2: break; default: break; } }"
        fn = _only(analyze_source(source, "s.js"))
        assert fn.score == pytest.approx(1.0 + 3 * 0.2)

    def test_exceptions(self):
        source = 'function t() { try { throw new Error("x"); } catch (e) {} }'
        fn = _only(analyze_source(source, "t.js"))
        assert fn.score == pytest.approx(1.5 + 0.5 + 0.5)
        assert fn.top_drivers[0].kind == "try"

    def test_logical_operators(self):
        source = "function l(a, b, c) { const d = a ?? b; return (a && b) || c; }"
        fn = _only(analyze_source(source, "l.js"))
        assert fn.score == pytest.approx(1.5)

    def test_logical_assignment(self):
        fn = _only(analyze_source("function la(o) { o.x ||= 1; o.y ??= 2; }", "la.js"))
        assert fn.score == pytest.approx(0.8)

    def test_deep_member_chain(self):
        deep = _only(analyze_source("function d(a) { return a.b.c.d.e; }", "d.js"))
        shallow = _only(analyze_source("function d(a) { return a.b.c.d; }", "d.js"))
        assert deep.score == pytest.approx(0.2)
        assert shallow.score == 0.0

    def test_await_and_yield(self):
        report = analyze_source(
            "async function a(x) { await x; }\nfunction* g() { yield 1; }", "ay.js",
        )
        a, g = report.functions
        assert (a.name, a.score) == ("a", pytest.approx(0.5))
        assert (g.name, g.score) == ("g", pytest.approx(0.5))

    def test_calls(self):
        fn = _only(analyze_source("function c() { a(); b(); }", "c.js"))
        assert fn.score == pytest.approx(0.2)

    def test_tagged_template_is_not_a_call(self):
        fn = _only(analyze_source("function t() { return html`<p></p>`; }", "t.js"))
        assert fn.score == 0.0


class TestScopes:
    def test_nested_functions_do_not_roll_up(self):
        source = "function outer() { if (a) {} function inner() { while (b) {} } }"
        report = analyze_source(source, "n.js")
        assert [f.name for f in report.functions] == ["inner", "outer"]
        inner, outer = report.functions
        assert inner.score == pytest.approx(1.0)
        assert outer.score == pytest.approx(1.0)
        assert report.total == pytest.approx(2.0)

    def test_arrow_function_is_anonymous(self):
        fn = _only(analyze_source("const f = (x) => x ? 1 : 2;", "f.js"))
        assert fn.name == "<anonymous>"
        assert fn.score == pytest.approx(1.0)

    def test_line_range(self):
        source = "\nfunction f() {\n  if (a) {}\n}\n"
        fn = _only(analyze_source(source, "f.js"))
        assert fn.loc == (2, 4)

    def test_top_level_code_counts(self):
        report = analyze_source("if (a) {}\nfunction f() { if (b) {} }", "top.js")
        assert report.total == pytest.approx(2.0)

    def test_methods_only(self):
        report = analyze_source(
            "if (a) {}\nfunction f() { if (b) {} }", "top.js", methods_only=True,
        )
        assert report.total == pytest.approx(1.0)

    def test_class_methods_are_grouped(self):
        source = """
        class Calculator {
          complex(items) {
            for (const item of items) {
              if (item > 0) {
                try { process(item); } catch (e) { console.log(e); }
              }
            }
          }
          simple() { return 1; }
        }
        """
        report = analyze_source(source, "calc.js")
        by_name = {f.name: f for f in report.functions}

        assert set(by_name) == {"complex", "simple"}
        assert all(f.group == "Calculator" for f in report.functions)
        assert by_name["complex"].score > by_name["simple"].score
        assert by_name["simple"].score == 0.0

    def test_function_after_class_is_ungrouped(self):
        report = analyze_source("class A { m() {} }\nfunction free() {}", "a.js")
        m, free = report.functions
        assert m.group == "A"
        assert free.group is None

    def test_anonymous_default_class(self):
        fn = _only(analyze_source("export default class { m() {} }", "a.js"))
        assert (fn.name, fn.group) == ("m", "<anonymous>")

    def test_class_expression_is_not_a_group(self):
        fn = _only(analyze_source("const A = class { m() {} };", "a.js"))
        assert fn.group is None

    def test_typescript_class(self):
        source = "class A { m(x: number): number { return x > 0 ? x : 0; } }"
        fn = _only(analyze_source(source, "a.ts"))
        assert (fn.name, fn.group) == ("m", "A")
        assert fn.score == pytest.approx(1.0)


class TestWeights:
    def test_override(self):
        report = analyze_source("function f() { if (a) {} }", "f.js", weights={"if": 3.0})
        assert report.total == pytest.approx(3.0)

    def test_zero_weight_records_no_driver(self):
        report = analyze_source("function c() { a(); }", "c.js", weights={"call": 0.0})
        fn = _only(report)
        assert fn.score == 0.0
        assert fn.all_drivers == ()
