#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Parser front end: tree shape, ranges, comments and diagnostics."""

from __future__ import annotations

import pytest

from ts2gas import ParseError
from ts2gas.parser import parse_source
from ts2gas.syntax.nodes import (
	ArrayBindingPattern,
	ArrayLiteralExpression,
	ArrowFunction,
	BreakStatement,
	ClassDeclaration,
	ExportDeclaration,
	ExpressionStatement,
	FunctionDeclaration,
	ImportDeclaration,
	InterfaceDeclaration,
	LabeledStatement,
	ObjectLiteralExpression,
	OmittedExpression,
	VariableStatement,
)


def test_statement_kinds() -> None:
	sf = parse_source(
		'import { a } from "b";\n'
		"interface I { x: number }\n"
		"function f(): void {}\n"
		"class C {}\n"
		'export { a } from "b";\n'
	)
	kinds = [type(s) for s in sf.statements]
	assert kinds == [ImportDeclaration, InterfaceDeclaration, FunctionDeclaration, ClassDeclaration, ExportDeclaration]


def test_ranges_cover_source_text() -> None:
	src = 'import { a } from "b";\nconst c = 1;\n'
	sf = parse_source(src)
	assert sf.statements[0].get_text() == 'import { a } from "b";'
	assert sf.statements[1].get_text() == "const c = 1;"


def test_parent_pointers_are_set() -> None:
	sf = parse_source("const c = 1;")
	stmt = sf.statements[0]
	assert stmt.parent is sf
	assert stmt.declaration_list.parent is stmt


def test_module_detection() -> None:
	assert parse_source('import "x";').is_external_module
	assert parse_source("export const a = 1;").is_external_module
	assert not parse_source("const a = 1;").is_external_module


def test_automatic_semicolons() -> None:
	sf = parse_source("var a = 1\nvar b = 2\nf()\n")
	assert [type(s) for s in sf.statements] == [VariableStatement, VariableStatement, ExpressionStatement]


def test_leading_semicolon_on_the_next_line_ends_the_statement() -> None:
	sf = parse_source("var x = 1\n;(function () {})()\n")
	assert [type(s) for s in sf.statements] == [VariableStatement, ExpressionStatement]


def test_arrow_and_object_literal_braces() -> None:
	sf = parse_source("var f = (a, b) => ({ a: a });\n")
	arrow = sf.statements[0].declaration_list.declarations[0].initializer
	assert isinstance(arrow, ArrowFunction)
	assert [p.name.text for p in arrow.parameters] == ["a", "b"]
	assert isinstance(arrow.body.expression, ObjectLiteralExpression)


def test_comments_are_collected() -> None:
	sf = parse_source("// one\nvar a = 1; /* two */\n")
	assert [c.text for c in sf.comments] == ["// one", "/* two */"]
	assert not sf.comments[0].is_multiline
	assert sf.comments[1].is_multiline


def test_parse_error_carries_position() -> None:
	with pytest.raises(ParseError) as info:
		parse_source("var a = 1;\nvar = 2;\n", "Code.ts")
	diag = info.value.diagnostic
	assert diag is not None
	assert diag.span.file == "Code.ts"
	assert diag.span.line == 2
	assert info.value.reason_code == "parse_error"


def test_unterminated_block_is_a_parse_error() -> None:
	with pytest.raises(ParseError):
		parse_source("function f() {\n")


def test_labeled_loop_with_break_and_continue() -> None:
	sf = parse_source("outer:\nfor (;;) {\n    for (;;) {\n        break outer;\n    }\n    continue outer;\n}\n")
	stmt = sf.statements[0]
	assert isinstance(stmt, LabeledStatement)
	assert stmt.label.text == "outer"
	inner = stmt.statement.statement.statements[0].statement.statements[0]
	assert isinstance(inner, BreakStatement)
	assert inner.label is not None and inner.label.text == "outer"


def test_break_label_on_the_next_line_is_a_new_statement() -> None:
	sf = parse_source("while (a) {\n    break\n    done\n}\n")
	body = sf.statements[0].statement.statements
	assert isinstance(body[0], BreakStatement)
	assert body[0].label is None
	assert isinstance(body[1], ExpressionStatement)


def test_labeled_block_is_not_an_object_literal() -> None:
	sf = parse_source("a: {\n    f();\n}\n")
	stmt = sf.statements[0]
	assert isinstance(stmt, LabeledStatement)
	assert stmt.statement.statements[0].get_text() == "f();"


def test_array_holes() -> None:
	arr = parse_source("var a = [1, , 3];\n").statements[0].declaration_list.declarations[0].initializer
	assert isinstance(arr, ArrayLiteralExpression)
	assert [type(e).__name__ for e in arr.elements] == ["NumericLiteral", "OmittedExpression", "NumericLiteral"]
	lead = parse_source("var b = [, x];\n").statements[0].declaration_list.declarations[0].initializer
	assert isinstance(lead.elements[0], OmittedExpression)
	trailing = parse_source("var c = [x, ,];\n").statements[0].declaration_list.declarations[0].initializer
	assert len(trailing.elements) == 2
	assert isinstance(trailing.elements[1], OmittedExpression)


def test_array_pattern_holes() -> None:
	pattern = parse_source("var [, second] = pair;\n").statements[0].declaration_list.declarations[0].name
	assert isinstance(pattern, ArrayBindingPattern)
	assert isinstance(pattern.elements[0], OmittedExpression)
	assert pattern.elements[1].name.text == "second"
