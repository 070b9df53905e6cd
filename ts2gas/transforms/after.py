# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Transformers that act while the lowered tree is printed.

`suppress_after(kind, filter)` does not rewrite the tree. It appends a
substitution visitor for `kind` to the context's chain; because the chain
runs in registration order, every visitor registered earlier for the same
node has already run when the filter is checked.
"""

from __future__ import annotations

from ts2gas.compiler.context import TransformationContext
from ts2gas.syntax.factory import create_not_emitted_statement
from ts2gas.syntax.nodes import Node, SyntaxKind

from .before import Transformer, TransformerFactory
from .filters import NodeFilter, is_es_module_marker, is_export_from_node, is_exports_default


def suppress_after(kind: SyntaxKind, node_filter: NodeFilter, *, name: str = "") -> TransformerFactory:
	def factory(context: TransformationContext) -> Transformer:
		def suppress(node: Node) -> Node:
			if node_filter(node):
				return create_not_emitted_statement(node)
			return node

		context.add_substitution(kind, suppress, name=name or f"suppress_{getattr(node_filter, '__name__', 'node')}")
		return lambda sf: sf

	return factory


# Only needed by collaborators that keep `export ... from` until printing.
suppress_export_from_after = suppress_after(SyntaxKind.EXPRESSION_STATEMENT, is_export_from_node)
suppress_es_module_marker_after = suppress_after(SyntaxKind.EXPRESSION_STATEMENT, is_es_module_marker)
suppress_exports_default_after = suppress_after(SyntaxKind.EXPRESSION_STATEMENT, is_exports_default)

__all__ = [
	"suppress_after",
	"suppress_es_module_marker_after",
	"suppress_export_from_after",
	"suppress_exports_default_after",
]
