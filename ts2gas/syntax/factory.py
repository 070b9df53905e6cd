# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Node construction helpers used by the lowering passes and the transformers."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .nodes import (
	BinaryExpression,
	Block,
	CallExpression,
	ElementAccessExpression,
	EmitFlags,
	ExpressionStatement,
	Identifier,
	Node,
	NotEmittedStatement,
	NumericLiteral,
	ObjectLiteralExpression,
	ParenthesizedExpression,
	PrefixUnaryExpression,
	PropertyAccessExpression,
	PropertyAssignment,
	ReturnStatement,
	SourceFile,
	StringLiteral,
	VariableDeclaration,
	VariableDeclarationList,
	VariableStatement,
)
from .visitor import update_node


def create_identifier(text: str, *, flags: EmitFlags = EmitFlags.NONE) -> Identifier:
	return Identifier(text, emit_flags=flags)


def clone_identifier(ident: Identifier) -> Identifier:
	"""Synthetic copy that still resolves (via `original`) like `ident`."""
	return Identifier(ident.text, emit_flags=ident.emit_flags, original=ident)


def create_string_literal(value: str) -> StringLiteral:
	return StringLiteral(value)


def create_numeric_literal(value: int | str) -> NumericLiteral:
	return NumericLiteral(str(value))


def create_property_access(expression: Node | str, name: str) -> PropertyAccessExpression:
	if isinstance(expression, str):
		expression = Identifier(expression)
	return PropertyAccessExpression(expression, Identifier(name))


def create_element_access(expression: Node, argument: Node) -> ElementAccessExpression:
	return ElementAccessExpression(expression, argument)


def create_binary(left: Node, operator: str, right: Node) -> BinaryExpression:
	return BinaryExpression(left, operator, right)


def create_assignment(left: Node, right: Node) -> BinaryExpression:
	return BinaryExpression(left, "=", right)


def create_call(expression: Node, arguments: Sequence[Node] = ()) -> CallExpression:
	return CallExpression(expression, list(arguments))


def create_paren(expression: Node) -> ParenthesizedExpression:
	return ParenthesizedExpression(expression)


def create_void_zero() -> PrefixUnaryExpression:
	return PrefixUnaryExpression("void", NumericLiteral("0"))


def create_object_literal(properties: Sequence[Node] = (), *, multi_line: bool = False) -> ObjectLiteralExpression:
	return ObjectLiteralExpression(list(properties), multi_line=multi_line)


def create_property_assignment(name: str | Node, initializer: Node) -> PropertyAssignment:
	if isinstance(name, str):
		name = Identifier(name)
	return PropertyAssignment(name, initializer)


def create_expression_statement(expression: Node) -> ExpressionStatement:
	return ExpressionStatement(expression)


def create_return(expression: Optional[Node] = None) -> ReturnStatement:
	return ReturnStatement(expression)


def create_block(statements: Sequence[Node], *, multi_line: bool = True) -> Block:
	return Block(list(statements), multi_line=multi_line)


def create_variable_statement(name: str | Node, initializer: Optional[Node] = None) -> VariableStatement:
	if isinstance(name, str):
		name = Identifier(name)
	decl = VariableDeclaration(name, initializer)
	return VariableStatement(VariableDeclarationList([decl], "var"))


def create_not_emitted_statement(original: Node) -> NotEmittedStatement:
	"""Placeholder that keeps the replaced node's range so surrounding comments still print."""
	return NotEmittedStatement(pos=original.pos, end=original.end, original=original)


def add_synthetic_trailing_comment(node: Node, text: str) -> Node:
	node.trailing_comments.append(text)
	return node


def set_emit_flags(node: Node, flags: EmitFlags) -> Node:
	node.emit_flags |= flags
	return node


def update_source_file(sf: SourceFile, statements: List[Node]) -> SourceFile:
	if statements == sf.statements:
		return sf
	new = update_node(sf, statements=statements)
	assert isinstance(new, SourceFile)
	return new


__all__ = [
	"add_synthetic_trailing_comment",
	"clone_identifier",
	"create_assignment",
	"create_binary",
	"create_block",
	"create_call",
	"create_element_access",
	"create_expression_statement",
	"create_identifier",
	"create_not_emitted_statement",
	"create_numeric_literal",
	"create_object_literal",
	"create_paren",
	"create_property_access",
	"create_property_assignment",
	"create_return",
	"create_string_literal",
	"create_variable_statement",
	"create_void_zero",
	"set_emit_flags",
	"update_source_file",
]
