#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Node filter predicates used by the before/after transformers."""

from __future__ import annotations

from ts2gas.compiler.module_transform import create_es_module_marker
from ts2gas.parser import parse_source
from ts2gas.syntax.factory import create_expression_statement, create_identifier, create_numeric_literal
from ts2gas.transforms import (
	is_es_module_marker,
	is_export_from_node,
	is_exports_default,
	is_identifier_node,
	is_import_node,
)


def _first(src: str):
	return parse_source(src).statements[0]


def test_import_forms_match() -> None:
	assert is_import_node(_first('import { a } from "b";'))
	assert is_import_node(_first('import * as b from "b";'))
	assert is_import_node(_first('import "polyfill";'))
	assert is_import_node(_first('import fs = require("fs");'))


def test_non_imports_do_not_match() -> None:
	assert not is_import_node(_first("const a = 1;"))
	assert not is_import_node(_first('export { a } from "b";'))


def test_export_from_requires_module_specifier() -> None:
	assert is_export_from_node(_first('export { a } from "b";'))
	assert is_export_from_node(_first('export * from "b";'))
	assert not is_export_from_node(_first("export { a };"))
	assert not is_export_from_node(_first("export const a = 1;"))


def test_identifier_predicate() -> None:
	assert is_identifier_node(create_identifier("x"))
	assert not is_identifier_node(create_numeric_literal(1))


def test_module_marker_needs_synthetic_range() -> None:
	assert is_es_module_marker(create_es_module_marker())
	# Written by hand: same shape, but it carries a source range.
	assert not is_es_module_marker(_first("exports.__esModule = true;"))


def test_module_marker_shape() -> None:
	assert not is_es_module_marker(create_expression_statement(create_identifier("exports")))
	assert not is_es_module_marker(_first("module.__esModule = true;"))


def test_exports_default_requires_identifier_value() -> None:
	assert is_exports_default(_first("exports.default = default_1;"))
	assert not is_exports_default(_first("exports.default = 3;"))
	assert not is_exports_default(_first("exports.other = x;"))
	assert not is_exports_default(_first("foo.default = x;"))


def test_filters_reject_unrelated_nodes() -> None:
	node = create_numeric_literal(0)
	assert not is_import_node(node)
	assert not is_export_from_node(node)
	assert not is_es_module_marker(node)
	assert not is_exports_default(node)
