#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Export preamble: injected only when the tree mentions `exports`."""

from __future__ import annotations

from ts2gas.compiler.context import TransformationContext
from ts2gas.compiler.emitter import print_source_file
from ts2gas.parser import parse_source
from ts2gas.transforms import ExportScan, export_preamble_after, prepend_export_preamble, scan_for_exports

PREAMBLE = "var exports = exports || {};\nvar module = module || { exports: exports };\n"


def test_scan_finds_exports_identifier() -> None:
	assert scan_for_exports(parse_source("exports.x = 1;")) == ExportScan(found=True)
	assert scan_for_exports(parse_source("function f() { return exports; }")).found


def test_scan_ignores_strings_and_other_names() -> None:
	assert not scan_for_exports(parse_source('var a = "exports"; var exportsList = [];')).found
	assert not scan_for_exports(parse_source("const a = 1;")).found


def test_scan_is_stateless() -> None:
	assert scan_for_exports(parse_source("exports.x = 1;")).found
	assert not scan_for_exports(parse_source("const a = 1;")).found


def test_prepend_without_exports_returns_tree() -> None:
	sf = parse_source("const a = 1;")
	assert prepend_export_preamble(sf, ExportScan()) is sf


def test_prepend_puts_guards_first() -> None:
	sf = parse_source("exports.x = 1;\n")
	out = prepend_export_preamble(sf, scan_for_exports(sf))
	assert len(out.statements) == 3
	assert print_source_file(out) == PREAMBLE + "exports.x = 1;\n"


def test_after_transformer_scans_the_tree_it_is_given() -> None:
	transform = export_preamble_after(TransformationContext())
	assert print_source_file(transform(parse_source("var a = 1;\n"))) == "var a = 1;\n"
	assert print_source_file(transform(parse_source("exports.a = 1;\n"))) == PREAMBLE + "exports.a = 1;\n"
