#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Telling regular expression literals from division."""

from __future__ import annotations

from ts2gas.parser import parse_source
from ts2gas.parser.regex import MASK, mask_regex_literals
from ts2gas.syntax.nodes import BinaryExpression, CallExpression, RegularExpressionLiteral


def _init(src: str):
	return parse_source(src).statements[0].declaration_list.declarations[0].initializer


def test_mask_keeps_length_and_positions() -> None:
	src = "var r = /a[/]b/g;"
	masked = mask_regex_literals(src)
	assert len(masked) == len(src)
	assert masked == "var r = " + MASK * len("/a[/]b/g") + ";"


def test_division_is_not_masked() -> None:
	for src in ("a / b / c", "f(x) / 2", "xs[0] / n", "i++ / 2", "a /= 2"):
		assert mask_regex_literals(src) == src


def test_strings_and_comments_are_not_masked() -> None:
	src = 'var s = "a/b/c"; // x/y/\n/* /z/ */'
	assert mask_regex_literals(src) == src


def test_regex_after_keyword() -> None:
	src = "return /x/.test(s)"
	assert mask_regex_literals(src) == "return " + MASK * 3 + ".test(s)"


def test_regex_literal_node_keeps_spelling() -> None:
	node = _init("var r = /a\\/b[/]c/gi;\n")
	assert isinstance(node, RegularExpressionLiteral)
	assert node.text == "/a\\/b[/]c/gi"


def test_regex_method_call() -> None:
	node = _init("var ok = /^\\d+$/.test(s);\n")
	assert isinstance(node, CallExpression)
	assert isinstance(node.expression.expression, RegularExpressionLiteral)


def test_division_still_parses_as_binary() -> None:
	node = _init("var q = a / b / c;\n")
	assert isinstance(node, BinaryExpression)
	assert node.operator == "/"


def test_regex_in_template_hole() -> None:
	node = _init("var t = `${/b/.source}`;\n")
	assert node.expressions[0].expression.text == "/b/"
