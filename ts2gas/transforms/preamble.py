# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Export preamble.

Apps Script has no `exports` or `module` globals, so a file whose lowered
tree mentions `exports` gets two guard statements in front:

	var exports = exports || {};
	var module = module || { exports: exports };

Whether `exports` was seen is the `ExportScan` value returned by the scan;
nothing is remembered between files.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ts2gas.compiler.context import TransformationContext
from ts2gas.syntax.factory import (
	create_binary,
	create_object_literal,
	create_property_assignment,
	create_variable_statement,
	update_source_file,
)
from ts2gas.syntax.nodes import Identifier, Node, SourceFile
from ts2gas.syntax.visitor import walk

from .before import Transformer

EXPORTS = "exports"


@dataclass(frozen=True)
class ExportScan:
	found: bool = False


def scan_for_exports(tree: Node) -> ExportScan:
	"""Pre-order scan that stops at the first `exports` identifier."""
	for node in walk(tree):
		if isinstance(node, Identifier) and node.text == EXPORTS:
			return ExportScan(found=True)
	return ExportScan()


def export_preamble() -> List[Node]:
	exports_guard = create_variable_statement(
		EXPORTS,
		create_binary(Identifier(EXPORTS), "||", create_object_literal()),
	)
	module_guard = create_variable_statement(
		"module",
		create_binary(
			Identifier("module"),
			"||",
			create_object_literal([create_property_assignment(EXPORTS, Identifier(EXPORTS))]),
		),
	)
	return [exports_guard, module_guard]


def prepend_export_preamble(tree: SourceFile, scan: ExportScan) -> SourceFile:
	if not scan.found:
		return tree
	return update_source_file(tree, export_preamble() + list(tree.statements))


def export_preamble_after(context: TransformationContext) -> Transformer:
	def transform(sf: SourceFile) -> SourceFile:
		return prepend_export_preamble(sf, scan_for_exports(sf))

	return transform


__all__ = ["ExportScan", "export_preamble", "export_preamble_after", "prepend_export_preamble", "scan_for_exports"]
