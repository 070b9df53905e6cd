# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Syntax tree model: node kinds, node classes, emit flags, visitation."""

from . import factory
from .nodes import Comment, EmitFlags, Node, SourceFile, SyntaxKind
from .visitor import Visitor, set_parent_pointers, visit_each_child, visit_node, visit_nodes, walk

__all__ = [
	"Comment",
	"EmitFlags",
	"Node",
	"SourceFile",
	"SyntaxKind",
	"Visitor",
	"factory",
	"set_parent_pointers",
	"visit_each_child",
	"visit_node",
	"visit_nodes",
	"walk",
]
