#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Printer layout, comment placement and the substitution chain."""

from __future__ import annotations

import pytest

from ts2gas import EmitError
from ts2gas.compiler.context import TransformationContext
from ts2gas.compiler.emitter import print_source_file, quote_string
from ts2gas.compiler.helpers import helper_texts
from ts2gas.parser import parse_source
from ts2gas.syntax.factory import create_identifier
from ts2gas.syntax.nodes import Identifier, SyntaxKind


def _print(src: str, **kwargs) -> str:
	return print_source_file(parse_source(src), **kwargs)


def test_quote_string_escapes() -> None:
	assert quote_string('a"b') == '"a\\"b"'
	assert quote_string("line\nnext") == '"line\\nnext"'
	assert quote_string("café") == '"caf\\u00E9"'


def test_statements_one_per_line() -> None:
	assert _print("var a = 1; var b = 2;") == "var a = 1;\nvar b = 2;\n"


def test_if_else_layout() -> None:
	src = "if (a) {\n  b();\n} else {\n  c();\n}\n"
	assert _print(src) == "if (a) {\n    b();\n}\nelse {\n    c();\n}\n"


def test_single_line_block_stays_on_one_line() -> None:
	assert _print("if (a) { b(); }\n") == "if (a) { b(); }\n"
	assert _print("while (a) {}\n") == "while (a) { }\n"


def test_try_catch_finally_layout() -> None:
	src = "try {\n  a();\n} catch (e) {\n  b(e);\n} finally {\n  c();\n}\n"
	assert _print(src) == "try {\n    a();\n}\ncatch (e) {\n    b(e);\n}\nfinally {\n    c();\n}\n"


def test_parentheses_follow_precedence() -> None:
	assert _print("x = (a + b) * c;\n") == "x = (a + b) * c;\n"
	assert _print("x = a + b * c;\n") == "x = a + b * c;\n"


def test_function_expression_statement_is_wrapped() -> None:
	assert _print("(function () { go(); })();\n") == "(function () { go(); })();\n"


def test_leading_semicolon_does_not_print_an_empty_statement() -> None:
	assert _print("var x = 1\n;(function () { go(); })()\n") == "var x = 1;\n(function () { go(); })();\n"


def test_labels_and_labeled_jumps() -> None:
	src = "outer:\nfor (;;) {\n    for (;;) {\n        break outer;\n    }\n    continue outer;\n}\n"
	assert _print(src) == "outer: for (;;) {\n    for (;;) {\n        break outer;\n    }\n    continue outer;\n}\n"


def test_array_holes_are_kept() -> None:
	assert _print("var a = [1, , 3];\n") == "var a = [1, , 3];\n"
	assert _print("var b = [, x];\n") == "var b = [, x];\n"
	assert _print("var c = [x, ,];\n") == "var c = [x, ,];\n"


def test_regex_literal_is_printed_verbatim() -> None:
	assert _print("var ok = /^\\d+$/i.test(s) / 2;\n") == "var ok = /^\\d+$/i.test(s) / 2;\n"


def test_own_line_and_trailing_comments() -> None:
	src = "/* head */\nvar a = 1; // a\n// before b\nvar b = 2;\n// tail\n"
	assert _print(src) == src


def test_comments_inside_blocks() -> None:
	src = "function f() {\n    // inside\n    return 1;\n    // end\n}\n"
	assert _print(src) == src


def test_remove_comments() -> None:
	assert _print("// x\nvar a = 1; /* y */\n", remove_comments=True) == "var a = 1;\n"


def test_helpers_follow_directives() -> None:
	out = _print('"use strict";\nvar a = 1;\n', helpers=helper_texts(["__export"]))
	assert out.startswith('"use strict";\nfunction __export(m) {\n')
	assert out.endswith("}\nvar a = 1;\n")


def test_unknown_helper() -> None:
	with pytest.raises(KeyError):
		helper_texts(["__awaiter"])


def test_substitution_chain_runs_in_registration_order() -> None:
	ctx = TransformationContext()
	ctx.add_substitution(SyntaxKind.IDENTIFIER, lambda n: create_identifier(n.text + "1") if isinstance(n, Identifier) else n)
	ctx.add_substitution(SyntaxKind.IDENTIFIER, lambda n: create_identifier(n.text + "2") if isinstance(n, Identifier) else n)
	assert _print("f(a);\nvar b = a;\n", context=ctx) == "f12(a12);\nvar b = a12;\n"


def test_substitution_only_for_enabled_kinds() -> None:
	ctx = TransformationContext()
	assert not ctx.is_substitution_enabled(create_identifier("a"))
	ctx.enable_substitution(SyntaxKind.IDENTIFIER)
	assert ctx.is_substitution_enabled(create_identifier("a"))
	assert ctx.on_substitute_node(create_identifier("a")).text == "a"


def test_requested_helpers_are_unique() -> None:
	ctx = TransformationContext()
	ctx.request_helper("__assign")
	ctx.request_helper("__assign")
	assert ctx.emit_helpers == ["__assign"]


def test_unprintable_node_is_an_emit_error() -> None:
	with pytest.raises(EmitError):
		_print("class A {}\n")
