# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
JavaScript printer for the lowered tree.

Layout
------
Four-space indentation, one statement per line, `else`/`catch`/`finally`
on the line after a closing brace, double quotes for generated strings and
the source spelling for parsed ones. Blocks and object literals stay on one
line when they were written on one line.

Substitution
------------
Every statement, and every expression printed in expression position, whose
kind is enabled on the `TransformationContext` goes through
`on_substitute_node` first. Names in declaration or property-name position
are printed as written.

Comments
--------
Source comments are printed at statement boundaries: the comments between
the previous sibling's end (or the start of the enclosing block) and a
statement's start go on their own lines before it; a comment on the same
line right after a statement stays there; whatever is left before a block's
closing brace is printed last. Synthetic trailing comments print as
`//text`. `remove_comments` drops all of them.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Set

from ts2gas.syntax.nodes import (
	ArrayLiteralExpression,
	BinaryExpression,
	Block,
	BreakStatement,
	CallExpression,
	CaseClause,
	Comment,
	ComputedPropertyName,
	ConditionalExpression,
	ContinueStatement,
	DefaultClause,
	DoStatement,
	ElementAccessExpression,
	EmitFlags,
	EmptyStatement,
	ExpressionStatement,
	FalseKeyword,
	ForInStatement,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	Identifier,
	IfStatement,
	LabeledStatement,
	NewExpression,
	Node,
	NotEmittedStatement,
	NullKeyword,
	NumericLiteral,
	ObjectLiteralExpression,
	OmittedExpression,
	Parameter,
	ParenthesizedExpression,
	PostfixUnaryExpression,
	PrefixUnaryExpression,
	PropertyAccessExpression,
	PropertyAssignment,
	RegularExpressionLiteral,
	ReturnStatement,
	SourceFile,
	SpreadElement,
	StringLiteral,
	SuperKeyword,
	SwitchStatement,
	ThisKeyword,
	ThrowStatement,
	TrueKeyword,
	TryStatement,
	VariableDeclaration,
	VariableDeclarationList,
	VariableStatement,
	WhileStatement,
)

from . import precedence as P
from .context import TransformationContext
from .errors import emit_error

INDENT = "    "

# Property names ES3 only accepts in bracket/quoted form.
ES3_RESERVED = frozenset(
	"""
	break case catch class const continue debugger default delete do else enum
	export extends false finally for function if import in instanceof new null
	return super switch this throw true try typeof var void while with
	""".split()
)

_SIMPLE_INTEGER = re.compile(r"^[0-9]+$")
_WORD_OPERATORS = frozenset({"typeof", "void", "delete", "in", "instanceof"})


def quote_string(value: str) -> str:
	"""Double-quoted JavaScript literal; non-ASCII and control characters are escaped."""
	out = ['"']
	for ch in value:
		code = ord(ch)
		if ch == '"':
			out.append('\\"')
		elif ch == "\\":
			out.append("\\\\")
		elif ch == "\n":
			out.append("\\n")
		elif ch == "\r":
			out.append("\\r")
		elif ch == "\t":
			out.append("\\t")
		elif code < 0x20 or code > 0x7E:
			if code > 0xFFFF:
				code -= 0x10000
				out.append("\\u%04X\\u%04X" % (0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)))
			else:
				out.append("\\u%04X" % code)
		else:
			out.append(ch)
	out.append('"')
	return "".join(out)


def _is_directive(stmt: Node) -> bool:
	return isinstance(stmt, ExpressionStatement) and isinstance(stmt.expression, StringLiteral)


def _leftmost(expr: Node) -> Node:
	while True:
		if isinstance(expr, (CallExpression, PropertyAccessExpression, ElementAccessExpression)):
			expr = expr.expression
		elif isinstance(expr, BinaryExpression):
			expr = expr.left
		elif isinstance(expr, ConditionalExpression):
			expr = expr.condition
		elif isinstance(expr, PostfixUnaryExpression):
			expr = expr.operand
		else:
			return expr


def _contains_call(expr: Node) -> bool:
	while isinstance(expr, (PropertyAccessExpression, ElementAccessExpression, CallExpression)):
		if isinstance(expr, CallExpression):
			return True
		expr = expr.expression
	return False


class Printer:
	"""Print one lowered `SourceFile`."""

	def __init__(self, context: Optional[TransformationContext] = None, *, remove_comments: bool = False) -> None:
		self.context = context or TransformationContext()
		self.remove_comments = remove_comments
		self._lines: List[str] = []
		self._line: List[str] = []
		self._indent = 0
		self._inline = 0
		self._text = ""
		self._comments: List[Comment] = []
		self._emitted: Set[int] = set()
		self._cursor = 0

	# ---------------------------------------------------------------- writer

	def _write(self, text: str) -> None:
		if not text:
			return
		if not self._line:
			self._line.append(INDENT * self._indent)
		self._line.append(text)

	def _newline(self) -> None:
		if self._line:
			self._lines.append("".join(self._line).rstrip())
			self._line = []

	def _write_lines(self, text: str) -> None:
		"""Write pre-formatted multi-line text at the current indentation."""
		for line in text.split("\n"):
			self._write(line)
			self._newline()

	# ------------------------------------------------------------------ file

	def print_file(self, sf: SourceFile, helpers: Sequence[str] = ()) -> str:
		self._lines, self._line = [], []
		self._text = sf.text
		self._comments = [] if self.remove_comments else sorted(sf.comments, key=lambda c: c.pos)
		self._emitted = set()
		self._cursor = 0
		statements = list(sf.statements)
		at = 0
		while at < len(statements) and _is_directive(statements[at]):
			at += 1
		self._emit_statement_list(statements[:at], None)
		for text in helpers:
			self._write_lines(text)
		self._emit_statement_list(statements[at:], None)
		self._emit_comments_before(len(self._text))
		self._newline()
		if not self._lines:
			return ""
		return "\n".join(self._lines) + "\n"

	# -------------------------------------------------------------- comments

	def _emit_comment(self, comment: Comment) -> None:
		lines = comment.text.split("\n")
		if len(lines) == 1:
			self._write(comment.text)
			return
		line_start = self._text.rfind("\n", 0, comment.pos) + 1
		column = comment.pos - line_start
		self._write(lines[0].rstrip())
		for line in lines[1:]:
			self._newline()
			stripped = line
			drop = 0
			while drop < column and drop < len(stripped) and stripped[drop] in " \t":
				drop += 1
			self._write(stripped[drop:].rstrip())

	def _emit_comments_before(self, end: int) -> None:
		"""Own-line comments in [cursor, end)."""
		for index, comment in enumerate(self._comments):
			if comment.pos < self._cursor or index in self._emitted:
				continue
			if comment.pos >= end:
				break
			self._emitted.add(index)
			if self._inline:
				if comment.is_multiline and "\n" not in comment.text:
					self._write(comment.text + " ")
				continue
			self._newline()
			self._emit_comment(comment)
			self._newline()
		self._cursor = max(self._cursor, end)

	def _emit_trailing_comments(self, end: int) -> None:
		"""Comments on the same line right after a statement ending at `end`."""
		pos = end
		for index, comment in enumerate(self._comments):
			if comment.pos < pos or index in self._emitted:
				continue
			gap = self._text[pos : comment.pos]
			if gap.strip() or "\n" in gap:
				break
			if self._inline and not comment.is_multiline:
				break
			self._emitted.add(index)
			self._write(" ")
			self._emit_comment(comment)
			pos = comment.end
			self._cursor = max(self._cursor, pos)

	# ------------------------------------------------------------ statements

	def _emit_statement_list(self, statements: Sequence[Node], container: Optional[Node]) -> None:
		real = container is not None and not container.is_synthetic
		saved = self._cursor
		if real:
			assert container is not None
			self._cursor = container.pos + 1 if isinstance(container, Block) else container.pos
		for stmt in statements:
			with_comments = not stmt.is_synthetic and not stmt.emit_flags & EmitFlags.NO_COMMENTS
			if with_comments:
				self._emit_comments_before(stmt.pos)
			self._emit_statement(stmt)
			if with_comments:
				self._cursor = max(self._cursor, stmt.end)
				self._emit_trailing_comments(stmt.end)
			if self._inline:
				if self._line and not self._line[-1].endswith(" "):
					self._write(" ")
			else:
				self._newline()
		if real:
			assert container is not None
			self._emit_comments_before(container.end - 1 if isinstance(container, Block) else container.end)
			self._cursor = max(saved, self._cursor)

	def _emit_statement(self, node: Node) -> None:
		if self.context.is_substitution_enabled(node):
			node = self.context.on_substitute_node(node)
		if not self.remove_comments:
			for text in node.leading_comments:
				self._write(text)
				self._newline()
		self._emit_statement_body(node)
		if not self.remove_comments:
			for text in node.trailing_comments:
				if self._line:
					self._write(" ")
				self._write("//" + text)

	def _emit_statement_body(self, node: Node) -> None:
		if isinstance(node, NotEmittedStatement):
			return
		if isinstance(node, VariableStatement):
			self._emit_var_list(node.declaration_list)
			self._write(";")
		elif isinstance(node, ExpressionStatement):
			if isinstance(_leftmost(node.expression), (FunctionExpression, ObjectLiteralExpression)):
				self._write("(")
				self._expr(node.expression, P.COMMA)
				self._write(")")
			else:
				self._expr(node.expression, P.COMMA)
			self._write(";")
		elif isinstance(node, FunctionDeclaration):
			self._emit_function("function " + (node.name.text if node.name else ""), node.parameters, node.body, node)
		elif isinstance(node, Block):
			self._emit_block(node)
		elif isinstance(node, ReturnStatement):
			self._write("return")
			if node.expression is not None:
				self._write(" ")
				self._expr(node.expression, P.COMMA)
			self._write(";")
		elif isinstance(node, IfStatement):
			self._emit_if(node)
		elif isinstance(node, ForStatement):
			self._write("for (")
			if isinstance(node.initializer, VariableDeclarationList):
				self._emit_var_list(node.initializer)
			elif node.initializer is not None:
				self._expr(node.initializer, P.COMMA)
			self._write(";")
			if node.condition is not None:
				self._write(" ")
				self._expr(node.condition, P.COMMA)
			self._write(";")
			if node.incrementor is not None:
				self._write(" ")
				self._expr(node.incrementor, P.COMMA)
			self._write(")")
			self._emit_embedded(node.statement)
		elif isinstance(node, ForInStatement):
			self._write("for (")
			if isinstance(node.initializer, VariableDeclarationList):
				self._emit_var_list(node.initializer)
			else:
				self._expr(node.initializer, P.CALL)
			self._write(" in ")
			self._expr(node.expression, P.COMMA)
			self._write(")")
			self._emit_embedded(node.statement)
		elif isinstance(node, WhileStatement):
			self._write("while (")
			self._expr(node.expression, P.COMMA)
			self._write(")")
			self._emit_embedded(node.statement)
		elif isinstance(node, DoStatement):
			self._write("do")
			self._emit_embedded(node.statement)
			if isinstance(node.statement, Block):
				self._write(" ")
			else:
				self._newline()
			self._write("while (")
			self._expr(node.expression, P.COMMA)
			self._write(");")
		elif isinstance(node, ThrowStatement):
			self._write("throw ")
			self._expr(node.expression, P.COMMA)
			self._write(";")
		elif isinstance(node, (BreakStatement, ContinueStatement)):
			self._write("break" if isinstance(node, BreakStatement) else "continue")
			if node.label is not None:
				self._write(" " + node.label.text)
			self._write(";")
		elif isinstance(node, LabeledStatement):
			self._write(node.label.text + ": ")
			self._emit_statement(node.statement)
		elif isinstance(node, EmptyStatement):
			self._write(";")
		elif isinstance(node, TryStatement):
			self._write("try ")
			self._emit_block(node.try_block)
			if node.catch_clause is not None:
				self._newline()
				self._write("catch")
				if node.catch_clause.variable is not None:
					self._write(" (")
					self._name(node.catch_clause.variable)
					self._write(")")
				self._write(" ")
				self._emit_block(node.catch_clause.block)
			if node.finally_block is not None:
				self._newline()
				self._write("finally ")
				self._emit_block(node.finally_block)
		elif isinstance(node, SwitchStatement):
			self._emit_switch(node)
		else:
			raise emit_error(f"cannot print {node.kind.name.lower()} for the ES3 target", node)

	def _emit_embedded(self, stmt: Node) -> None:
		if isinstance(stmt, Block):
			self._write(" ")
			self._emit_block(stmt)
			return
		self._newline()
		self._indent += 1
		self._emit_statement(stmt)
		self._indent -= 1

	def _emit_if(self, node: IfStatement) -> None:
		self._write("if (")
		self._expr(node.expression, P.COMMA)
		self._write(")")
		self._emit_embedded(node.then_statement)
		if node.else_statement is None:
			return
		self._newline()
		self._write("else")
		if isinstance(node.else_statement, IfStatement):
			self._write(" ")
			self._emit_statement(node.else_statement)
		else:
			self._emit_embedded(node.else_statement)

	def _emit_switch(self, node: SwitchStatement) -> None:
		self._write("switch (")
		self._expr(node.expression, P.COMMA)
		self._write(") {")
		self._newline()
		self._indent += 1
		for clause in node.clauses:
			if isinstance(clause, CaseClause):
				self._write("case ")
				self._expr(clause.expression, P.COMMA)
				self._write(":")
			else:
				assert isinstance(clause, DefaultClause)
				self._write("default:")
			self._newline()
			self._indent += 1
			self._emit_statement_list(clause.statements, clause)
			self._indent -= 1
		self._indent -= 1
		self._write("}")

	def _emit_block(self, block: Block) -> None:
		single = not block.multi_line or bool(block.emit_flags & EmitFlags.SINGLE_LINE)
		if single:
			if not block.statements:
				self._write("{ }")
				return
			self._write("{ ")
			self._inline += 1
			self._emit_statement_list(block.statements, block)
			self._inline -= 1
			if self._line and not self._line[-1].endswith(" "):
				self._write(" ")
			self._write("}")
			return
		inline, self._inline = self._inline, 0
		self._write("{")
		self._newline()
		self._indent += 1
		self._emit_statement_list(block.statements, block)
		self._indent -= 1
		self._write("}")
		self._inline = inline

	def _emit_var_list(self, node: VariableDeclarationList) -> None:
		self._write(node.flags + " ")
		for i, decl in enumerate(node.declarations):
			if i:
				self._write(", ")
			self._emit_var_decl(decl)

	def _emit_var_decl(self, decl: VariableDeclaration) -> None:
		self._name(decl.name)
		if decl.initializer is not None:
			self._write(" = ")
			self._expr(decl.initializer, P.ASSIGNMENT)

	def _emit_function(self, head: str, parameters: Sequence[Parameter], body: Optional[Block], node: Node) -> None:
		if body is None:
			raise emit_error("function has no body", node)
		self._write(head + "(")
		for i, param in enumerate(parameters):
			if i:
				self._write(", ")
			if param.dot_dot_dot:
				self._write("...")
			self._name(param.name)
			if param.initializer is not None:
				self._write(" = ")
				self._expr(param.initializer, P.ASSIGNMENT)
		self._write(") ")
		self._emit_block(body)

	# ------------------------------------------------------------ expressions

	def _name(self, node: Node) -> None:
		"""A name in declaration or property-name position (never substituted)."""
		if isinstance(node, Identifier):
			self._write(node.text)
		elif isinstance(node, StringLiteral):
			self._write(node.raw or quote_string(node.value))
		elif isinstance(node, NumericLiteral):
			self._write(node.text)
		elif isinstance(node, ComputedPropertyName):
			self._write("[")
			self._expr(node.expression, P.ASSIGNMENT)
			self._write("]")
		else:
			raise emit_error(f"cannot print {node.kind.name.lower()} as a name for the ES3 target", node)

	def _expr(self, node: Node, required: int) -> None:
		if self.context.is_substitution_enabled(node):
			node = self.context.on_substitute_node(node)
		if not self.remove_comments:
			for text in node.leading_comments:
				self._write(text + " ")
		wrap = P.precedence(node) < required
		if wrap:
			self._write("(")
		self._emit_expression_body(node)
		if wrap:
			self._write(")")

	def _emit_arguments(self, args: Sequence[Node]) -> None:
		self._write("(")
		for i, arg in enumerate(args):
			if i:
				self._write(", ")
			self._expr(arg, P.SPREAD)
		self._write(")")

	def _emit_expression_body(self, node: Node) -> None:
		if isinstance(node, Identifier):
			self._write(node.text)
		elif isinstance(node, NumericLiteral):
			self._write(node.text)
		elif isinstance(node, StringLiteral):
			self._write(node.raw or quote_string(node.value))
		elif isinstance(node, RegularExpressionLiteral):
			self._write(node.text)
		elif isinstance(node, OmittedExpression):
			pass
		elif isinstance(node, TrueKeyword):
			self._write("true")
		elif isinstance(node, FalseKeyword):
			self._write("false")
		elif isinstance(node, NullKeyword):
			self._write("null")
		elif isinstance(node, ThisKeyword):
			self._write("this")
		elif isinstance(node, SuperKeyword):
			self._write("super")
		elif isinstance(node, PropertyAccessExpression):
			self._expr(node.expression, P.CALL)
			name = node.name.text
			if name in ES3_RESERVED:
				self._write("[" + quote_string(name) + "]")
				return
			receiver = node.expression
			if isinstance(receiver, NumericLiteral) and _SIMPLE_INTEGER.match(receiver.text):
				self._write(".")
			self._write("." + name)
		elif isinstance(node, ElementAccessExpression):
			self._expr(node.expression, P.CALL)
			self._write("[")
			self._expr(node.argument, P.COMMA)
			self._write("]")
		elif isinstance(node, CallExpression):
			self._expr(node.expression, P.CALL)
			self._emit_arguments(node.arguments)
		elif isinstance(node, NewExpression):
			self._write("new ")
			callee = node.expression
			if _contains_call(callee):
				self._write("(")
				self._expr(callee, P.COMMA)
				self._write(")")
			else:
				self._expr(callee, P.MEMBER)
			if node.arguments is not None:
				self._emit_arguments(node.arguments)
		elif isinstance(node, ParenthesizedExpression):
			self._write("(")
			self._expr(node.expression, P.COMMA)
			self._write(")")
		elif isinstance(node, FunctionExpression):
			head = "function " + node.name.text if node.name is not None else "function "
			self._emit_function(head, node.parameters, node.body, node)
		elif isinstance(node, BinaryExpression):
			self._emit_binary(node)
		elif isinstance(node, ConditionalExpression):
			self._expr(node.condition, P.LOGICAL_OR)
			self._write(" ? ")
			self._expr(node.when_true, P.ASSIGNMENT)
			self._write(" : ")
			self._expr(node.when_false, P.ASSIGNMENT)
		elif isinstance(node, PrefixUnaryExpression):
			op = node.operator
			self._write(op)
			operand = node.operand
			if op in _WORD_OPERATORS or (
				isinstance(operand, PrefixUnaryExpression) and op in ("+", "-") and operand.operator[0] == op
			):
				self._write(" ")
			self._expr(operand, P.UNARY)
		elif isinstance(node, PostfixUnaryExpression):
			self._expr(node.operand, P.CALL)
			self._write(node.operator)
		elif isinstance(node, ArrayLiteralExpression):
			# A trailing hole needs its own comma.
			close = ",]" if node.elements and isinstance(node.elements[-1], OmittedExpression) else "]"
			self._emit_list_literal("[", close, node.elements, node.multi_line, self._emit_element)
		elif isinstance(node, ObjectLiteralExpression):
			if not node.properties:
				self._write("{}")
				return
			single = not node.multi_line or bool(node.emit_flags & EmitFlags.SINGLE_LINE)
			self._emit_list_literal("{ " if single else "{", " }" if single else "}", node.properties, not single, self._emit_property)
		elif isinstance(node, SpreadElement):
			self._write("...")
			self._expr(node.expression, P.ASSIGNMENT)
		else:
			raise emit_error(f"cannot print {node.kind.name.lower()} for the ES3 target", node)

	def _emit_element(self, node: Node) -> None:
		self._expr(node, P.SPREAD)

	def _emit_property(self, node: Node) -> None:
		if not isinstance(node, PropertyAssignment):
			raise emit_error(f"cannot print {node.kind.name.lower()} in an object literal for the ES3 target", node)
		name = node.name
		if isinstance(name, Identifier) and name.text in ES3_RESERVED:
			self._write(quote_string(name.text))
		else:
			self._name(name)
		self._write(": ")
		self._expr(node.initializer, P.ASSIGNMENT)

	def _emit_list_literal(self, open_: str, close: str, items: Sequence[Node], multi_line: bool, emit_item) -> None:
		if not multi_line:
			self._write(open_)
			for i, item in enumerate(items):
				if i:
					self._write(", ")
				emit_item(item)
			self._write(close)
			return
		inline, self._inline = self._inline, 0
		self._write(open_)
		self._newline()
		self._indent += 1
		for i, item in enumerate(items):
			emit_item(item)
			if i < len(items) - 1:
				self._write(",")
			self._newline()
		self._indent -= 1
		self._write(close)
		self._inline = inline

	def _emit_binary(self, node: BinaryExpression) -> None:
		op = node.operator
		prec = P.binary_precedence(op)
		right_assoc = P.is_right_associative(op)
		if op in P.ASSIGNMENT_OPERATORS:
			left_required = P.CALL
		else:
			left_required = prec + 1 if right_assoc else prec
		right_required = prec if right_assoc else prec + 1
		if op == ",":
			right_required = P.ASSIGNMENT
		self._expr(node.left, left_required)
		if op == ",":
			self._write(", ")
		else:
			self._write(f" {op} ")
		self._expr(node.right, right_required)


def print_source_file(
	sf: SourceFile,
	context: Optional[TransformationContext] = None,
	*,
	helpers: Sequence[str] = (),
	remove_comments: bool = False,
) -> str:
	return Printer(context, remove_comments=remove_comments).print_file(sf, helpers)


__all__ = ["ES3_RESERVED", "Printer", "print_source_file", "quote_string"]
