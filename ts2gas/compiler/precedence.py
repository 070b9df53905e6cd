# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Operator precedence used to decide where the printer needs parentheses."""

from __future__ import annotations

from ts2gas.syntax.nodes import (
	ArrowFunction,
	BinaryExpression,
	CallExpression,
	ConditionalExpression,
	ElementAccessExpression,
	NewExpression,
	Node,
	PostfixUnaryExpression,
	PrefixUnaryExpression,
	PropertyAccessExpression,
	SpreadElement,
)

COMMA = 0
SPREAD = 1
ASSIGNMENT = 2
CONDITIONAL = 3
LOGICAL_OR = 4
LOGICAL_AND = 5
BITWISE_OR = 6
BITWISE_XOR = 7
BITWISE_AND = 8
EQUALITY = 9
RELATIONAL = 10
SHIFT = 11
ADDITIVE = 12
MULTIPLICATIVE = 13
EXPONENT = 14
UNARY = 15
POSTFIX = 16
NEW_NO_ARGS = 17
CALL = 18
MEMBER = 19
PRIMARY = 20

ASSIGNMENT_OPERATORS = frozenset(
	{"=", "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=", "&=", "|=", "^=", "&&=", "||=", "??="}
)

_BINARY = {
	",": COMMA,
	"||": LOGICAL_OR,
	"??": LOGICAL_OR,
	"&&": LOGICAL_AND,
	"|": BITWISE_OR,
	"^": BITWISE_XOR,
	"&": BITWISE_AND,
	"==": EQUALITY,
	"!=": EQUALITY,
	"===": EQUALITY,
	"!==": EQUALITY,
	"<": RELATIONAL,
	">": RELATIONAL,
	"<=": RELATIONAL,
	">=": RELATIONAL,
	"instanceof": RELATIONAL,
	"in": RELATIONAL,
	"<<": SHIFT,
	">>": SHIFT,
	">>>": SHIFT,
	"+": ADDITIVE,
	"-": ADDITIVE,
	"*": MULTIPLICATIVE,
	"/": MULTIPLICATIVE,
	"%": MULTIPLICATIVE,
	"**": EXPONENT,
}


def binary_precedence(operator: str) -> int:
	if operator in ASSIGNMENT_OPERATORS:
		return ASSIGNMENT
	return _BINARY[operator]


def is_right_associative(operator: str) -> bool:
	return operator in ASSIGNMENT_OPERATORS or operator == "**"


def precedence(node: Node) -> int:
	if isinstance(node, BinaryExpression):
		return binary_precedence(node.operator)
	if isinstance(node, ConditionalExpression):
		return CONDITIONAL
	if isinstance(node, ArrowFunction):
		return ASSIGNMENT
	if isinstance(node, SpreadElement):
		return SPREAD
	if isinstance(node, PrefixUnaryExpression):
		return UNARY
	if isinstance(node, PostfixUnaryExpression):
		return POSTFIX
	if isinstance(node, NewExpression):
		return NEW_NO_ARGS if node.arguments is None else MEMBER
	if isinstance(node, CallExpression):
		return CALL
	if isinstance(node, (PropertyAccessExpression, ElementAccessExpression)):
		return MEMBER
	return PRIMARY


__all__ = [
	"ADDITIVE",
	"ASSIGNMENT",
	"ASSIGNMENT_OPERATORS",
	"CALL",
	"COMMA",
	"CONDITIONAL",
	"MEMBER",
	"PRIMARY",
	"UNARY",
	"binary_precedence",
	"is_right_associative",
	"precedence",
]
