# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Node filter predicates.

Pure classifiers used by the before/after transformers. They never mutate a
node and return False for any shape they do not recognize.
"""

from __future__ import annotations

from typing import Callable

from ts2gas.syntax.nodes import (
	BinaryExpression,
	ExportDeclaration,
	ExpressionStatement,
	Identifier,
	ImportDeclaration,
	ImportEqualsDeclaration,
	Node,
	PropertyAccessExpression,
)

NodeFilter = Callable[[Node], bool]


def is_import_node(node: Node) -> bool:
	"""`import x = ...` or any `import ... from` / `import "x"` statement."""
	return isinstance(node, (ImportEqualsDeclaration, ImportDeclaration))


def is_export_from_node(node: Node) -> bool:
	"""`export ... from "x"` (re-exports only; `export { a }` does not match)."""
	return isinstance(node, ExportDeclaration) and node.module_specifier is not None


def is_identifier_node(node: Node) -> bool:
	return isinstance(node, Identifier)


def _exports_member_assignment(node: Node, member: str) -> BinaryExpression | None:
	"""The `exports.<member> <op> value` expression of an expression statement."""
	if not isinstance(node, ExpressionStatement):
		return None
	expr = node.expression
	if not isinstance(expr, BinaryExpression):
		return None
	left = expr.left
	if not isinstance(left, PropertyAccessExpression):
		return None
	if not isinstance(left.expression, Identifier) or left.expression.text != "exports":
		return None
	if left.name.text != member:
		return None
	return expr


def is_es_module_marker(node: Node) -> bool:
	"""
	The compiler-injected `exports.__esModule = ...;` statement.

	Shape first; the synthetic range is the corroborating check that keeps a
	hand-written `exports.__esModule = true;` in the output.
	"""
	if _exports_member_assignment(node, "__esModule") is None:
		return False
	return node.is_synthetic


def is_exports_default(node: Node) -> bool:
	"""`exports.default = <identifier>;`"""
	expr = _exports_member_assignment(node, "default")
	return expr is not None and expr.operator == "=" and isinstance(expr.right, Identifier)


__all__ = [
	"NodeFilter",
	"is_es_module_marker",
	"is_export_from_node",
	"is_exports_default",
	"is_identifier_node",
	"is_import_node",
]
