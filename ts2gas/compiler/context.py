# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Transformation context shared by every pass of one compilation.

Substitution is explicit: each registered `Substitution` names the node kind
it applies to and a visitor. The printer hands every node of an enabled kind
to `on_substitute_node`, which threads it through the registered visitors in
registration order, so later registrations always see the result of earlier
ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Set

from ts2gas.syntax.nodes import Node, SyntaxKind

SubstitutionVisitor = Callable[[Node], Node]


@dataclass(frozen=True)
class Substitution:
	"""One emit-time visitor keyed by node kind."""

	kind: SyntaxKind
	visitor: SubstitutionVisitor
	name: str = ""


@dataclass
class TransformationContext:
	"""Per-compilation state handed to every transformer factory."""

	compiler_options: Any = None
	substitutions: List[Substitution] = field(default_factory=list)
	# Helper names (`__extends`, `__assign`, ...) requested by lowering passes.
	emit_helpers: List[str] = field(default_factory=list)
	_enabled: Set[SyntaxKind] = field(default_factory=set, repr=False)

	def enable_substitution(self, kind: SyntaxKind) -> None:
		self._enabled.add(kind)

	def is_substitution_enabled(self, node: Node) -> bool:
		return node.kind in self._enabled

	def add_substitution(self, kind: SyntaxKind, visitor: SubstitutionVisitor, *, name: Optional[str] = None) -> Substitution:
		"""Enable `kind` and append `visitor` to the end of the chain."""
		self.enable_substitution(kind)
		sub = Substitution(kind, visitor, name or getattr(visitor, "__name__", ""))
		self.substitutions.append(sub)
		return sub

	def on_substitute_node(self, node: Node) -> Node:
		for sub in self.substitutions:
			if node.kind is sub.kind:
				node = sub.visitor(node)
		return node

	def request_helper(self, name: str) -> None:
		if name not in self.emit_helpers:
			self.emit_helpers.append(name)


__all__ = ["Substitution", "SubstitutionVisitor", "TransformationContext"]
