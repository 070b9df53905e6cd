# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Transformers run on the parsed tree, before the compiler lowers anything.

  - `comment_out_before(filter)` replaces matching nodes by a statement that
    prints only `//<source text>`;
  - `no_substitution_before(filter)` flags matching identifiers so the
    printer keeps their spelling (no `module_1.x` / `exports.x` rewriting).
"""

from __future__ import annotations

from typing import Callable

from ts2gas.compiler.context import TransformationContext
from ts2gas.syntax.factory import add_synthetic_trailing_comment, create_not_emitted_statement, set_emit_flags
from ts2gas.syntax.nodes import EmitFlags, EnumDeclaration, Node, NotEmittedStatement, SourceFile
from ts2gas.syntax.visitor import visit_each_child

from .filters import NodeFilter

Transformer = Callable[[SourceFile], SourceFile]
TransformerFactory = Callable[[TransformationContext], Transformer]


def create_commented_statement(node: Node) -> NotEmittedStatement:
	"""Placeholder printing `//` + the node's exact source text, newlines escaped."""
	stmt = create_not_emitted_statement(node)
	add_synthetic_trailing_comment(stmt, node.get_text().replace("\n", "\\n"))
	return stmt


def _visit_file(sf: SourceFile, visitor: Callable[[Node], Node]) -> SourceFile:
	result = visit_each_child(sf, visitor)
	assert isinstance(result, SourceFile)
	return result


def comment_out_before(node_filter: NodeFilter) -> TransformerFactory:
	def factory(context: TransformationContext) -> Transformer:
		def visitor(node: Node) -> Node:
			if node_filter(node):
				return create_commented_statement(node)
			return visit_each_child(node, visitor)

		return lambda sf: _visit_file(sf, visitor)

	return factory


def no_substitution_before(node_filter: NodeFilter) -> TransformerFactory:
	def factory(context: TransformationContext) -> Transformer:
		def visitor(node: Node) -> Node:
			# Enum names stay substitutable so `exports.E` still prints for exported enums.
			if node_filter(node) and not isinstance(node.parent, EnumDeclaration):
				set_emit_flags(node, EmitFlags.NO_SUBSTITUTION)
			return visit_each_child(node, visitor)

		return lambda sf: _visit_file(sf, visitor)

	return factory


__all__ = [
	"Transformer",
	"TransformerFactory",
	"comment_out_before",
	"create_commented_statement",
	"no_substitution_before",
]
