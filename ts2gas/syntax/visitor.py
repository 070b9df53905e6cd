# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic tree traversal helpers.

Rewrites are copy-on-write: `visit_each_child` returns the very same node when
no child changed and a shallow copy (with `original` pointing back) otherwise,
so emit flags set in place on untouched nodes survive into later passes.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterator, List, Optional, Sequence, Union

from .nodes import Node, child_field_names

VisitResult = Union[Node, Sequence[Node], None]
Visitor = Callable[[Node], VisitResult]


def visit_node(node: Optional[Node], visitor: Visitor) -> Optional[Node]:
	"""Visit a single-node slot; a list result must hold exactly one node."""
	if node is None:
		return None
	result = visitor(node)
	if result is None or isinstance(result, Node):
		return result
	items = list(result)
	if len(items) != 1:
		raise ValueError(f"visitor returned {len(items)} nodes for a single-node slot ({node.kind.name})")
	return items[0]


def visit_nodes(nodes: Sequence[Node], visitor: Visitor) -> List[Node]:
	"""Visit a node list; visitors may drop (None) or expand (list) entries."""
	out: List[Node] = []
	for node in nodes:
		result = visitor(node)
		if result is None:
			continue
		if isinstance(result, Node):
			out.append(result)
		else:
			out.extend(result)
	return out


def _is_node_list(value: object) -> bool:
	return isinstance(value, list) and bool(value) and all(isinstance(item, Node) for item in value)


def visit_each_child(node: Node, visitor: Visitor) -> Node:
	"""Apply `visitor` to every direct child, copying `node` only if a child changed."""
	changes: dict[str, object] = {}
	for name in child_field_names(type(node)):
		value = getattr(node, name)
		if isinstance(value, Node):
			new = visit_node(value, visitor)
			if new is not value:
				changes[name] = new
		elif _is_node_list(value):
			new_list = visit_nodes(value, visitor)
			if len(new_list) != len(value) or any(a is not b for a, b in zip(new_list, value)):
				changes[name] = new_list
	if not changes:
		return node
	return update_node(node, **changes)


def update_node(node: Node, **changes: object) -> Node:
	"""Shallow copy of `node` with `changes` applied and `original` linked back."""
	copy = replace(
		node,
		trailing_comments=list(node.trailing_comments),
		leading_comments=list(node.leading_comments),
		original=node,
		**changes,
	)
	copy.parent = node.parent
	return copy


def walk(node: Node) -> Iterator[Node]:
	"""Pre-order traversal."""
	stack = [node]
	while stack:
		cur = stack.pop()
		yield cur
		stack.extend(reversed(list(cur.children())))


def set_parent_pointers(root: Node) -> None:
	"""(Re)link `parent` on every node reachable from `root`."""
	stack = [root]
	while stack:
		cur = stack.pop()
		for child in cur.children():
			child.parent = cur
			stack.append(child)


__all__ = [
	"VisitResult",
	"Visitor",
	"set_parent_pointers",
	"update_node",
	"visit_each_child",
	"visit_node",
	"visit_nodes",
	"walk",
]
