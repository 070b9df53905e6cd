# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
TypeScript erasure (first lowering pass).

Goal
----
Remove everything that only exists for the type checker and lower the two
TypeScript declarations that do produce code:

  - interfaces, type aliases, `declare`d statements and overload signatures
    become `NotEmittedStatement`s (their range is kept so the comments around
    them still line up);
  - type annotations, `implements` clauses, index signatures, abstract members
    and uninitialized property declarations disappear;
  - `x as T` and `x!` reduce to `x`;
  - `enum E {}` and `namespace N {}` become a `var` plus an immediately
    invoked function that fills the object in.

`export` modifiers are left in place at file level for the module pass.
Inside a namespace body they are lowered here, onto the namespace object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Union

from ts2gas.syntax.factory import (
	clone_identifier,
	create_assignment,
	create_binary,
	create_block,
	create_call,
	create_element_access,
	create_expression_statement,
	create_not_emitted_statement,
	create_numeric_literal,
	create_object_literal,
	create_paren,
	create_string_literal,
	update_source_file,
)
from ts2gas.syntax.nodes import (
	ArrayLiteralExpression,
	AsExpression,
	BinaryExpression,
	Block,
	CallExpression,
	CaseClause,
	ClassDeclaration,
	Constructor,
	DefaultClause,
	ElementAccessExpression,
	EmitFlags,
	EnumDeclaration,
	ExportDeclaration,
	ExternalModuleReference,
	FalseKeyword,
	FunctionDeclaration,
	FunctionExpression,
	Identifier,
	ImportDeclaration,
	ImportEqualsDeclaration,
	IndexSignature,
	InterfaceDeclaration,
	MethodDeclaration,
	ModuleBlock,
	ModuleDeclaration,
	NewExpression,
	Node,
	NonNullExpression,
	NullKeyword,
	NumericLiteral,
	Parameter,
	ParenthesizedExpression,
	PrefixUnaryExpression,
	PropertyAccessExpression,
	PropertyDeclaration,
	SourceFile,
	StringLiteral,
	TemplateExpression,
	ThisKeyword,
	TrueKeyword,
	TypeAliasDeclaration,
	VariableDeclaration,
	VariableDeclarationList,
	VariableStatement,
)
from ts2gas.syntax.visitor import update_node, visit_each_child

from .binder import BindResult
from .context import TransformationContext
from .errors import emit_error
from .module_transform import lower_exported_declaration

EnumValue = Union[int, float, str]

# Expressions that never need the parentheses an erased assertion leaves behind.
_SIMPLE = (
	Identifier,
	PropertyAccessExpression,
	ElementAccessExpression,
	CallExpression,
	ThisKeyword,
	NumericLiteral,
	StringLiteral,
	TrueKeyword,
	FalseKeyword,
	NullKeyword,
	ArrayLiteralExpression,
	ParenthesizedExpression,
)

_NUMERIC_OPS = {
	"+": lambda a, b: a + b,
	"-": lambda a, b: a - b,
	"*": lambda a, b: a * b,
	"/": lambda a, b: a / b,
	"%": lambda a, b: a % b,
	"**": lambda a, b: a**b,
	"<<": lambda a, b: _int32(int(a) << (int(b) & 31)),
	">>": lambda a, b: _int32(int(a)) >> (int(b) & 31),
	">>>": lambda a, b: (int(a) & 0xFFFFFFFF) >> (int(b) & 31),
	"&": lambda a, b: _int32(int(a) & int(b)),
	"|": lambda a, b: _int32(int(a) | int(b)),
	"^": lambda a, b: _int32(int(a) ^ int(b)),
}


def _int32(value: int) -> int:
	value &= 0xFFFFFFFF
	return value - 0x100000000 if value & 0x80000000 else value


def _number(text: str) -> EnumValue:
	t = text.replace("_", "")
	if t[:2].lower() in ("0x", "0o", "0b"):
		return int(t, 0)
	value = float(t)
	return int(value) if value.is_integer() else value


def format_number(value: EnumValue) -> str:
	if isinstance(value, float) and value.is_integer():
		value = int(value)
	return str(value)


def _has_modifier(node: Node, name: str) -> bool:
	return name in (getattr(node, "modifiers", None) or [])


def _is_instantiated(node: Node) -> bool:
	"""False for namespaces that only hold types (they emit nothing)."""
	if isinstance(node, ModuleDeclaration):
		if _has_modifier(node, "declare") or node.body is None:
			return False
		return _is_instantiated(node.body)
	if isinstance(node, ModuleBlock):
		return any(_is_instantiated(stmt) for stmt in node.statements)
	if isinstance(node, (InterfaceDeclaration, TypeAliasDeclaration)):
		return False
	if isinstance(node, ImportEqualsDeclaration) and not _has_modifier(node, "export"):
		return False
	return not _has_modifier(node, "declare")


@dataclass
class TypeScriptEraser:
	"""Strip type-level syntax and lower enums and namespaces."""

	context: TransformationContext
	bind: BindResult

	def rewrite_source_file(self, sf: SourceFile) -> SourceFile:
		return update_source_file(sf, self._rewrite_statements(sf.statements, None))

	# ----------------------------------------------------------- statements

	def _rewrite_statements(self, statements: List[Node], container: Optional[str]) -> List[Node]:
		"""`container` names the namespace object when rewriting a namespace body."""
		out: List[Node] = []
		declared: Set[str] = set()
		for stmt in statements:
			for new in self._rewrite_stmt(stmt, container, declared):
				if container is not None and _has_modifier(new, "export"):
					out.extend(lower_exported_declaration(new, container))
				else:
					out.append(new)
		return out

	def _rewrite_stmt(self, stmt: Node, container: Optional[str], declared: Set[str]) -> List[Node]:
		if _has_modifier(stmt, "declare") or isinstance(stmt, (InterfaceDeclaration, TypeAliasDeclaration)):
			return [create_not_emitted_statement(stmt)]
		if isinstance(stmt, FunctionDeclaration) and stmt.body is None:
			return [create_not_emitted_statement(stmt)]
		if isinstance(stmt, ExportDeclaration) and stmt.is_type_only:
			return [create_not_emitted_statement(stmt)]
		if isinstance(stmt, ImportDeclaration) and stmt.import_clause is not None and stmt.import_clause.is_type_only:
			return [create_not_emitted_statement(stmt)]
		if isinstance(stmt, EnumDeclaration):
			return self._lower_enum(stmt, declared)
		if isinstance(stmt, ModuleDeclaration):
			if not _is_instantiated(stmt):
				return [create_not_emitted_statement(stmt)]
			return self._lower_namespace(stmt, declared, _has_modifier(stmt, "export"))
		if isinstance(stmt, ImportEqualsDeclaration) and not isinstance(stmt.module_reference, ExternalModuleReference):
			return [self._lower_import_alias(stmt)]
		if isinstance(stmt, (FunctionDeclaration, ClassDeclaration)) and stmt.name is not None:
			declared.add(stmt.name.text)
		elif isinstance(stmt, VariableStatement):
			declared.update(d.name.text for d in stmt.declaration_list.declarations if isinstance(d.name, Identifier))
		return [self.visit(stmt)]

	def _lower_import_alias(self, stmt: ImportEqualsDeclaration) -> Node:
		"""`import x = A.B;` -> `var x = A.B;` (dropped when `x` is never used)."""
		if not _has_modifier(stmt, "export") and not self.bind.is_referenced(stmt.name):
			return create_not_emitted_statement(stmt)
		decl = VariableDeclaration(stmt.name, self.visit(stmt.module_reference))
		var = VariableStatement(VariableDeclarationList([decl], "var"), modifiers=[m for m in stmt.modifiers if m == "export"])
		var.pos, var.end, var.original = stmt.pos, stmt.end, stmt
		return var

	def _with_statements(self, node: Node, statements: List[Node]) -> Node:
		old = getattr(node, "statements")
		if len(old) == len(statements) and all(a is b for a, b in zip(old, statements)):
			return node
		return update_node(node, statements=statements)

	# ---------------------------------------------------------- expressions

	def visit(self, node: Node) -> Node:
		if isinstance(node, (AsExpression, NonNullExpression)):
			return self.visit(node.expression)
		if isinstance(node, ParenthesizedExpression) and isinstance(node.expression, (AsExpression, NonNullExpression)):
			inner = self.visit(node.expression)
			if isinstance(inner, _SIMPLE) or (isinstance(inner, NewExpression) and inner.arguments is not None):
				return inner
			return update_node(node, expression=inner)
		if isinstance(node, (Block, ModuleBlock, CaseClause, DefaultClause)):
			node = self._with_statements(node, self._rewrite_statements(node.statements, None))
			if isinstance(node, CaseClause):
				expr = self.visit(node.expression)
				if expr is not node.expression:
					node = update_node(node, expression=expr)
			return node
		if isinstance(node, ClassDeclaration):
			return self._erase_class(node)
		if isinstance(node, Parameter) and node.question:
			node = update_node(node, question=False)
		out = visit_each_child(node, self.visit)
		if getattr(out, "type", None) is not None:
			out = update_node(out, type=None)
		return out

	def _erase_class(self, node: ClassDeclaration) -> Node:
		members: List[Node] = []
		for member in node.members:
			if isinstance(member, IndexSignature) or _has_modifier(member, "abstract") or _has_modifier(member, "declare"):
				continue
			if isinstance(member, (MethodDeclaration, Constructor)) and member.body is None:
				continue
			if isinstance(member, PropertyDeclaration) and member.initializer is None:
				continue
			members.append(self.visit(member))
		heritage = self.visit(node.heritage) if node.heritage is not None else None
		modifiers = [m for m in node.modifiers if m != "abstract"]
		return update_node(node, members=members, heritage=heritage, implements=[], modifiers=modifiers)

	# ---------------------------------------------------------------- enums

	def _container_argument(self, name: Identifier, exported: bool) -> Node:
		"""`E || (E = {})`, or `E = exports.E || (exports.E = {})` when exported."""
		local = clone_identifier(name)
		local.emit_flags |= EmitFlags.LOCAL_NAME
		if not exported:
			target = clone_identifier(name)
			target.emit_flags |= EmitFlags.LOCAL_NAME
			inner = create_binary(local, "||", create_paren(create_assignment(target, create_object_literal())))
			return inner
		exported_ref = clone_identifier(name)
		exported_ref.emit_flags |= EmitFlags.EXPORT_NAME
		exported_target = clone_identifier(name)
		exported_target.emit_flags |= EmitFlags.EXPORT_NAME
		fallback = create_binary(exported_ref, "||", create_paren(create_assignment(exported_target, create_object_literal())))
		return create_assignment(local, fallback)

	def _iife(self, name: Identifier, body: List[Node], exported: bool, source: Node) -> Node:
		param_name = clone_identifier(name)
		param_name.emit_flags |= EmitFlags.LOCAL_NAME
		func = FunctionExpression(None, [Parameter(param_name)], create_block(body))
		call = create_call(create_paren(func), [self._container_argument(name, exported)])
		stmt = create_expression_statement(call)
		stmt.pos, stmt.end, stmt.original = source.pos, source.end, source
		return stmt

	def _local_var(self, name: Identifier, source: Node, declared: Set[str], exported: bool) -> List[Node]:
		if name.text in declared:
			return []
		declared.add(name.text)
		local = clone_identifier(name)
		local.emit_flags |= EmitFlags.LOCAL_NAME
		modifiers = ["export"] if exported else []
		var = VariableStatement(VariableDeclarationList([VariableDeclaration(local)], "var"), modifiers=modifiers)
		var.pos, var.end, var.original = source.pos, source.pos, source
		return [var]

	def _lower_enum(self, node: EnumDeclaration, declared: Set[str]) -> List[Node]:
		exported = _has_modifier(node, "export")
		body: List[Node] = []
		values: Dict[str, EnumValue] = {}
		next_value: Optional[EnumValue] = 0
		for member in node.members:
			key = member.name.text if isinstance(member.name, Identifier) else getattr(member.name, "value", "")
			if member.initializer is None:
				if not isinstance(next_value, (int, float)) or isinstance(next_value, bool):
					raise emit_error("enum member must have initializer", member)
				value: Optional[EnumValue] = next_value
				init: Optional[Node] = None
			else:
				value = self._evaluate(member.initializer, values, node.name.text)
				init = None if value is not None else self.visit(member.initializer)
			element = create_element_access(Identifier(node.name.text), create_string_literal(key))
			if isinstance(value, str):
				stmt_expr: Node = create_assignment(element, create_string_literal(value))
				next_value = None
			else:
				if init is not None:
					rhs = init
				else:
					assert value is not None
					rhs = create_numeric_literal(format_number(value))
				inner = create_assignment(element, rhs)
				outer = create_element_access(Identifier(node.name.text), inner)
				stmt_expr = create_assignment(outer, create_string_literal(key))
				next_value = value + 1 if value is not None else None
			if value is not None:
				values[key] = value
			stmt = create_expression_statement(stmt_expr)
			stmt.pos, stmt.end, stmt.original = member.pos, member.end, member
			body.append(stmt)
		return self._local_var(node.name, node, declared, exported) + [self._iife(node.name, body, exported, node)]

	def _evaluate(self, expr: Node, values: Dict[str, EnumValue], enum_name: str) -> Optional[EnumValue]:
		"""Constant value of an enum initializer, or None when it is computed at run time."""
		if isinstance(expr, NumericLiteral):
			return _number(expr.text)
		if isinstance(expr, StringLiteral):
			return expr.value
		if isinstance(expr, TemplateExpression) and not expr.expressions:
			return expr.quasis[0]
		if isinstance(expr, (ParenthesizedExpression, AsExpression, NonNullExpression)):
			return self._evaluate(expr.expression, values, enum_name)
		if isinstance(expr, Identifier):
			return values.get(expr.text)
		if isinstance(expr, PropertyAccessExpression):
			if isinstance(expr.expression, Identifier) and expr.expression.text == enum_name:
				return values.get(expr.name.text)
			return None
		if isinstance(expr, PrefixUnaryExpression) and expr.operator in ("+", "-", "~"):
			operand = self._evaluate(expr.operand, values, enum_name)
			if not isinstance(operand, (int, float)):
				return None
			if expr.operator == "-":
				return -operand
			if expr.operator == "~":
				return _int32(~int(operand))
			return operand
		if isinstance(expr, BinaryExpression) and expr.operator in _NUMERIC_OPS:
			left = self._evaluate(expr.left, values, enum_name)
			right = self._evaluate(expr.right, values, enum_name)
			if left is None or right is None:
				return None
			if expr.operator == "+" and (isinstance(left, str) or isinstance(right, str)):
				return (left if isinstance(left, str) else format_number(left)) + (
					right if isinstance(right, str) else format_number(right)
				)
			if isinstance(left, str) or isinstance(right, str):
				return None
			try:
				result = _NUMERIC_OPS[expr.operator](left, right)
			except ZeroDivisionError:
				return None
			if isinstance(result, float) and result.is_integer():
				return int(result)
			return result
		return None

	# ----------------------------------------------------------- namespaces

	def _lower_namespace(self, node: ModuleDeclaration, declared: Set[str], exported: bool) -> List[Node]:
		name = node.name
		assert isinstance(name, Identifier)
		body = node.body
		if isinstance(body, ModuleDeclaration):
			# `namespace A.B {}`: B always lands on A.
			inner = self._lower_namespace(body, set(), True)
			statements = []
			for stmt in inner:
				if _has_modifier(stmt, "export"):
					statements.extend(lower_exported_declaration(stmt, name.text))
				else:
					statements.append(stmt)
		else:
			assert isinstance(body, ModuleBlock)
			statements = self._rewrite_statements(body.statements, name.text)
		return self._local_var(name, node, declared, exported) + [self._iife(name, statements, exported, node)]


__all__ = ["TypeScriptEraser", "format_number"]
