#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Down-levelling of ES2015+ syntax to the ES3 target."""

from __future__ import annotations

import pytest

from ts2gas import EmitError, transform


def _js(src: str) -> str:
	return transform(src).split("\n", 1)[1]


def test_let_const_become_var() -> None:
	assert _js("let a = 1;\nconst b = 2;\n") == "var a = 1;\nvar b = 2;\n"


def test_arrow_function_with_expression_body() -> None:
	assert _js('const hello = () => console.log("hi");\n') == 'var hello = function () { return console.log("hi"); };\n'


def test_arrow_captures_this() -> None:
	src = "function f() {\n    return () => this;\n}\n"
	assert _js(src) == "function f() {\n    var _this = this;\n    return function () { return _this; };\n}\n"


def test_default_parameters() -> None:
	src = "function f(a = 1) {\n    return a;\n}\n"
	assert _js(src) == "function f(a) {\n    if (a === void 0) { a = 1; }\n    return a;\n}\n"


def test_rest_parameters() -> None:
	src = "function f(...xs) {\n    return xs;\n}\n"
	assert _js(src) == (
		"function f() {\n"
		"    var xs = [];\n"
		"    for (var _i = 0; _i < arguments.length; _i++) {\n"
		"        xs[_i] = arguments[_i];\n"
		"    }\n"
		"    return xs;\n"
		"}\n"
	)


def test_destructured_parameters() -> None:
	src = "function f({ a, b }) {\n    return a + b;\n}\n"
	assert _js(src) == "function f(_a) {\n    var a = _a.a, b = _a.b;\n    return a + b;\n}\n"


def test_destructuring_declaration() -> None:
	assert _js("var [x, y] = pair;\n") == "var x = pair[0], y = pair[1];\n"


def test_template_literal() -> None:
	assert _js("var s = `a${b}c`;\n") == 'var s = "a" + b + "c";\n'


def test_template_literal_parenthesizes_low_precedence_holes() -> None:
	assert _js("var s = `sum: ${a + b}`;\n") == 'var s = "sum: " + (a + b);\n'


def test_array_spread() -> None:
	assert _js("var c = [1, ...a];\n") == "var c = [1].concat(a);\n"
	assert _js("var d = [...a];\n") == "var d = a.slice();\n"


def test_call_spread() -> None:
	assert _js("f(...args);\n") == "f.apply(void 0, args);\n"
	assert _js("o.m(1, ...args);\n") == "o.m.apply(o, [1].concat(args));\n"


def test_exponent() -> None:
	assert _js("var p = 2 ** 3;\n") == "var p = Math.pow(2, 3);\n"


def test_for_of_over_array() -> None:
	src = "for (const x of xs) {\n    log(x);\n}\n"
	assert _js(src) == (
		"for (var _i = 0, xs_1 = xs; _i < xs_1.length; _i++) {\n"
		"    var x = xs_1[_i];\n"
		"    log(x);\n"
		"}\n"
	)


def test_shorthand_property() -> None:
	assert _js("var o = { a };\n") == "var o = { a: a };\n"


def test_object_spread_uses_assign_helper() -> None:
	out = _js("var o = { ...a, b: 1 };\n")
	assert out.startswith("var __assign = ")
	assert out.endswith("var o = __assign(__assign({}, a), { b: 1 });\n")


def test_class_with_parameter_property() -> None:
	src = (
		"class Hamburger {\n"
		"    constructor(public size: number) {}\n"
		"    eat() { return this.size; }\n"
		"}\n"
	)
	assert _js(src) == (
		"var Hamburger = /** @class */ (function () {\n"
		"    function Hamburger(size) {\n"
		"        this.size = size;\n"
		"    }\n"
		"    Hamburger.prototype.eat = function () { return this.size; };\n"
		"    return Hamburger;\n"
		"}());\n"
	)


def test_derived_class_uses_extends_helper() -> None:
	src = "class B extends A {\n    constructor() {\n        super();\n    }\n}\n"
	out = _js(src)
	assert out.startswith("var __extends = ")
	assert "var B = /** @class */ (function (_super) {" in out
	assert "    __extends(B, _super);" in out
	assert "        var _this = _super.call(this) || this;" in out
	assert "        return _this;" in out
	assert out.endswith("}(A));\n")


def test_static_members() -> None:
	out = _js("class K {\n    static n = 1;\n    static make() { return new K(); }\n}\n")
	assert "    K.make = function () { return new K(); };" in out
	assert "    K.n = 1;" in out


def test_accessor_is_an_emit_error() -> None:
	with pytest.raises(EmitError) as info:
		transform("class A {\n    get x() { return 1; }\n}\n")
	assert info.value.diagnostic is not None
	assert info.value.diagnostic.span.line == 2


def test_computed_object_key_is_an_emit_error() -> None:
	with pytest.raises(EmitError):
		transform("var o = { [k]: 1 };\n")


def test_enum_declaration() -> None:
	assert _js("enum Color { Red, Green = 4, Blue }\n") == (
		"var Color;\n"
		"(function (Color) {\n"
		'    Color[Color["Red"] = 0] = "Red";\n'
		'    Color[Color["Green"] = 4] = "Green";\n'
		'    Color[Color["Blue"] = 5] = "Blue";\n'
		"})(Color || (Color = {}));\n"
	)


def test_string_enum() -> None:
	assert 'Dir["Up"] = "UP";' in _js('enum Dir { Up = "UP" }\n')


def test_namespace() -> None:
	assert _js("namespace Pop {\n    export const x = 1;\n}\n") == (
		"var Pop;\n"
		"(function (Pop) {\n"
		"    Pop.x = 1;\n"
		"})(Pop || (Pop = {}));\n"
	)


def test_reserved_property_names() -> None:
	assert _js("p.catch(f);\nvar o = { default: 1 };\n") == 'p["catch"](f);\nvar o = { "default": 1 };\n'


def test_catch_without_binding_gets_a_variable() -> None:
	src = "try {\n    f();\n}\ncatch {\n    g();\n}\n"
	assert _js(src) == "try {\n    f();\n}\ncatch (_a) {\n    g();\n}\n"


def test_logical_assignment_on_identifiers() -> None:
	assert _js("a ||= b;\n") == "a || (a = b);\n"
	assert _js("a &&= c;\n") == "a && (a = c);\n"
	assert _js("a ??= d;\n") == "a !== null && a !== void 0 ? a : (a = d);\n"


def test_logical_assignment_on_members() -> None:
	assert _js("o.p ||= 1;\n") == "o.p || (o.p = 1);\n"
	assert _js('o["k"] &&= 2;\n') == 'o["k"] && (o["k"] = 2);\n'


def test_logical_assignment_evaluates_receiver_once() -> None:
	assert _js("get().p ||= 1;\n") == "var _a;\n(_a = get()).p || (_a.p = 1);\n"


def test_logical_assignment_to_exported_variable() -> None:
	out = transform("export let n = 0;\nn ??= 3;\n")
	assert "exports.n !== null && exports.n !== void 0 ? exports.n : (exports.n = 3);" in out
	assert "??" not in out


def test_logical_assignment_to_unsupported_target() -> None:
	with pytest.raises(EmitError):
		transform("[a] ||= b;\n")


def test_destructuring_skips_holes() -> None:
	assert _js("var [, second, , fourth] = list;\n") == "var second = list[1], fourth = list[3];\n"


def test_labels_survive_lowering() -> None:
	src = "outer:\nfor (const x of xs) {\n    if (x) {\n        break outer;\n    }\n}\n"
	out = _js(src)
	assert out.startswith("outer: for (var _i = 0, xs_1 = xs; _i < xs_1.length; _i++) {\n")
	assert "break outer;" in out


def test_label_is_not_an_export_reference() -> None:
	out = transform("export const outer = 1;\nouter:\nwhile (true) {\n    break outer;\n}\n")
	assert "outer: while (true) {" in out
	assert "break outer;" in out
	assert "exports.outer = 1;" in out


def test_regex_literal_passes_through() -> None:
	assert _js("const digits = /^[0-9]+$/g;\n") == "var digits = /^[0-9]+$/g;\n"
