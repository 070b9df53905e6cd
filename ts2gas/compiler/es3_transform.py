# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Down-level ES2015+ syntax to ES3 (last lowering pass).

Goal
----
After erasure and module lowering the tree is plain JavaScript, but still
uses syntax the legacy target lacks. This pass rewrites:

  - `let`/`const` to `var`;
  - arrow functions to function expressions, `this` inside them to a
    captured `_this`;
  - template literals to string concatenation;
  - default, rest and destructured parameters to statements at the top of
    the function body;
  - destructuring declarations to one declaration per binding;
  - spread in arrays, calls and `new` to `concat`/`apply`/`bind.apply`;
  - object spread to the `__assign` helper, shorthand properties and
    methods to plain properties;
  - `for..of` over arrays to an indexed `for` loop;
  - `**` to `Math.pow`;
  - `||=`, `&&=` and `??=` to their short-circuit spelling;
  - `catch {}` without a binding to `catch (_a) {}`;
  - classes to a constructor function plus prototype assignments wrapped in
    an immediately invoked function (`__extends` for heritage).

Diagnostics policy
------------------
Constructs with no ES3 rendition (accessors, computed object keys,
destructuring assignment) raise `EmitError` pinned to the source node.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ts2gas.syntax.factory import (
	clone_identifier,
	create_assignment,
	create_binary,
	create_block,
	create_call,
	create_element_access,
	create_expression_statement,
	create_numeric_literal,
	create_object_literal,
	create_paren,
	create_property_access,
	create_return,
	create_string_literal,
	create_void_zero,
	update_source_file,
)
from ts2gas.syntax.nodes import (
	ArrayBindingPattern,
	ArrayLiteralExpression,
	ArrowFunction,
	BinaryExpression,
	BindingElement,
	Block,
	CallExpression,
	CatchClause,
	ClassDeclaration,
	ComputedPropertyName,
	ConditionalExpression,
	Constructor,
	ElementAccessExpression,
	EmitFlags,
	ExpressionStatement,
	ForInStatement,
	ForOfStatement,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	GetAccessor,
	Identifier,
	IfStatement,
	MethodDeclaration,
	NewExpression,
	Node,
	NullKeyword,
	NumericLiteral,
	ObjectBindingPattern,
	ObjectLiteralExpression,
	Parameter,
	PostfixUnaryExpression,
	PropertyAccessExpression,
	PropertyAssignment,
	PropertyDeclaration,
	SetAccessor,
	ShorthandPropertyAssignment,
	SourceFile,
	SpreadAssignment,
	SpreadElement,
	StringLiteral,
	SuperKeyword,
	TemplateExpression,
	ThisKeyword,
	VariableDeclaration,
	VariableDeclarationList,
	VariableStatement,
)
from ts2gas.syntax.visitor import update_node, visit_each_child, visit_nodes

from . import precedence as P
from .context import TransformationContext
from .errors import emit_error
from .names import NameGenerator

_IDENTIFIER_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PARAMETER_PROPERTY_MODIFIERS = frozenset({"public", "private", "protected", "readonly"})


@dataclass
class _Frame:
	"""One function body being lowered."""

	is_arrow: bool
	# Set when an arrow function below reads `this`.
	capture_this: bool = False
	# Name standing in for `this` (derived constructors after the super call).
	this_alias: Optional[str] = None
	hoisted: List[str] = field(default_factory=list)


@dataclass
class _ClassInfo:
	name: str
	has_super: bool
	static_member: bool = False


def _ref(node: Node) -> Node:
	"""A fresh reference to a simple expression that is read twice."""
	if isinstance(node, Identifier):
		return clone_identifier(node)
	if isinstance(node, ThisKeyword):
		return ThisKeyword()
	return node


def _copy_simple(node: Node) -> Node:
	if isinstance(node, NumericLiteral):
		return create_numeric_literal(node.text)
	if isinstance(node, StringLiteral):
		return create_string_literal(node.value)
	return _ref(node)


def _is_simple_receiver(node: Node) -> bool:
	return isinstance(node, (Identifier, ThisKeyword))


def member_access(target: Node, name: Node) -> Node:
	"""`target.name` or `target["name"]` for a class or object member name."""
	if isinstance(name, Identifier):
		return create_property_access(target, name.text)
	if isinstance(name, StringLiteral):
		if _IDENTIFIER_NAME.match(name.value):
			return create_property_access(target, name.value)
		return create_element_access(target, create_string_literal(name.value))
	if isinstance(name, ComputedPropertyName):
		return create_element_access(target, name.expression)
	return create_element_access(target, name)


def _default_check(name: str, value: Node) -> IfStatement:
	"""`if (name === void 0) { name = value; }`"""
	assign = create_expression_statement(create_assignment(Identifier(name), value))
	block = create_block([assign], multi_line=False)
	block.emit_flags |= EmitFlags.SINGLE_LINE
	return IfStatement(create_binary(Identifier(name), "===", create_void_zero()), block)


def _var(declarations: List[VariableDeclaration]) -> VariableStatement:
	return VariableStatement(VariableDeclarationList(declarations, "var"))


@dataclass
class Es3Lowering:
	"""Rewrite one file's syntax down to ES3."""

	context: TransformationContext
	names: NameGenerator
	_frames: List[_Frame] = field(default_factory=list)
	_classes: List[_ClassInfo] = field(default_factory=list)
	_this_name: str = "_this"

	def rewrite_source_file(self, sf: SourceFile) -> SourceFile:
		self._this_name = self.names.fresh("_this")
		frame = _Frame(is_arrow=False)
		self._frames.append(frame)
		statements = visit_nodes(sf.statements, self.visit)
		self._frames.pop()
		header = self._frame_header(frame)
		if header:
			at = self._prologue_end(statements)
			statements = statements[:at] + header + statements[at:]
		return update_source_file(sf, statements)

	@staticmethod
	def _prologue_end(statements: List[Node]) -> int:
		"""Index past the synthetic header the module pass put at the top."""
		at = 0
		while at < len(statements) and isinstance(statements[at], ExpressionStatement) and statements[at].is_synthetic:
			at += 1
		return at

	def _frame_header(self, frame: _Frame) -> List[Node]:
		header: List[Node] = []
		if frame.capture_this:
			header.append(_var([VariableDeclaration(Identifier(self._this_name), ThisKeyword())]))
		if frame.hoisted:
			header.append(_var([VariableDeclaration(Identifier(name)) for name in frame.hoisted]))
		return header

	def _hoist_temp(self) -> str:
		name = self.names.temp()
		self._frames[-1].hoisted.append(name)
		return name

	# -------------------------------------------------------------- dispatch

	def visit(self, node: Node) -> Node:
		if isinstance(node, ThisKeyword):
			return self._lower_this(node)
		if isinstance(node, ArrowFunction):
			params, body = self._lower_function_like(node.parameters, node.body, is_arrow=True)
			func = FunctionExpression(None, params, body)
			func.pos, func.end, func.original = node.pos, node.end, node
			return func
		if isinstance(node, (FunctionDeclaration, FunctionExpression)):
			if node.body is None:
				return node
			params, body = self._lower_function_like(node.parameters, node.body)
			return update_node(node, parameters=params, body=body)
		if isinstance(node, ClassDeclaration):
			return self._lower_class(node)
		if isinstance(node, VariableDeclarationList):
			return self._lower_var_list(node)
		if isinstance(node, TemplateExpression):
			return self._lower_template(node)
		if isinstance(node, ArrayLiteralExpression) and any(isinstance(e, SpreadElement) for e in node.elements):
			return self._spread_array(node.elements, as_copy=True)
		if isinstance(node, CallExpression):
			return self._lower_call(node)
		if isinstance(node, NewExpression) and node.arguments and any(isinstance(a, SpreadElement) for a in node.arguments):
			return self._lower_new_spread(node)
		if isinstance(node, PropertyAccessExpression) and isinstance(node.expression, SuperKeyword):
			return create_property_access(self._super_target(), node.name.text)
		if isinstance(node, BinaryExpression):
			return self._lower_binary(node)
		if isinstance(node, ObjectLiteralExpression):
			return self._lower_object_literal(node)
		if isinstance(node, (GetAccessor, SetAccessor)):
			raise emit_error("accessors are not supported when targeting ES3", node)
		if isinstance(node, ForOfStatement):
			return self._lower_for_of(node)
		if isinstance(node, ForInStatement):
			decls = node.initializer
			if isinstance(decls, VariableDeclarationList) and not isinstance(decls.declarations[0].name, Identifier):
				raise emit_error("destructuring in for..in is not supported when targeting ES3", decls)
		if isinstance(node, CatchClause) and node.variable is not None and not isinstance(node.variable, Identifier):
			raise emit_error("destructuring in catch clauses is not supported when targeting ES3", node.variable)
		if isinstance(node, CatchClause) and node.variable is None:
			node = update_node(node, variable=Identifier(self.names.temp()))
		return visit_each_child(node, self.visit)

	# ------------------------------------------------------------ functions

	def _lower_this(self, node: Node) -> Node:
		crossed_arrow = False
		for frame in reversed(self._frames):
			if frame.is_arrow:
				crossed_arrow = True
				continue
			if frame.this_alias is not None:
				return Identifier(frame.this_alias)
			if crossed_arrow:
				frame.capture_this = True
				return Identifier(self._this_name)
			return node
		return node

	def _lower_function_like(
		self,
		parameters: List[Parameter],
		body: Node,
		*,
		is_arrow: bool = False,
	) -> Tuple[List[Parameter], Block]:
		frame = _Frame(is_arrow=is_arrow)
		self._frames.append(frame)
		self.names.push_scope()
		try:
			params, prologue = self._lower_parameters(parameters)
			if isinstance(body, Block):
				statements = visit_nodes(body.statements, self.visit)
			else:
				statements = [create_return(self.visit(body))]
		finally:
			self.names.pop_scope()
			self._frames.pop()
		header = self._frame_header(frame) + prologue
		if isinstance(body, Block):
			block = update_node(body, statements=header + statements, multi_line=body.multi_line or bool(header))
			assert isinstance(block, Block)
			return params, block
		block = create_block(header + statements, multi_line=bool(header))
		if not header:
			block.emit_flags |= EmitFlags.SINGLE_LINE
		return params, block

	def _lower_parameters(self, parameters: List[Parameter]) -> Tuple[List[Parameter], List[Node]]:
		params: List[Parameter] = []
		prologue: List[Node] = []
		for index, param in enumerate(parameters):
			if param.dot_dot_dot:
				if not isinstance(param.name, Identifier):
					raise emit_error("destructured rest parameters are not supported when targeting ES3", param)
				prologue.extend(self._rest_prologue(param.name.text, index))
				continue
			if not isinstance(param.name, Identifier):
				temp = self.names.temp()
				value: Node = Identifier(temp)
				if param.initializer is not None:
					value = ConditionalExpression(
						create_binary(Identifier(temp), "===", create_void_zero()),
						self.visit(param.initializer),
						Identifier(temp),
					)
				decls: List[VariableDeclaration] = []
				self._flatten(param.name, value, decls)
				prologue.append(_var(decls))
				replacement = Parameter(Identifier(temp))
				replacement.pos, replacement.end, replacement.original = param.pos, param.end, param
				params.append(replacement)
				continue
			if param.initializer is not None:
				prologue.append(_default_check(param.name.text, self.visit(param.initializer)))
				param = update_node(param, initializer=None)
			params.append(param)
		return params, prologue

	def _rest_prologue(self, name: str, index: int) -> List[Node]:
		"""`var rest = []; for (var _i = n; _i < arguments.length; _i++) { rest[_i - n] = arguments[_i]; }`"""
		i = self.names.loop_variable()
		slot: Node = Identifier(i)
		if index:
			slot = create_binary(Identifier(i), "-", create_numeric_literal(index))
		copy = create_assignment(
			create_element_access(Identifier(name), slot),
			create_element_access(Identifier("arguments"), Identifier(i)),
		)
		loop = ForStatement(
			VariableDeclarationList([VariableDeclaration(Identifier(i), create_numeric_literal(index))], "var"),
			create_binary(Identifier(i), "<", create_property_access("arguments", "length")),
			PostfixUnaryExpression(Identifier(i), "++"),
			create_block([create_expression_statement(copy)]),
		)
		return [_var([VariableDeclaration(Identifier(name), ArrayLiteralExpression([]))]), loop]

	# ---------------------------------------------------------- destructuring

	def _lower_var_list(self, node: VariableDeclarationList) -> Node:
		declarations: List[VariableDeclaration] = []
		changed = node.flags != "var"
		for decl in node.declarations:
			init = self.visit(decl.initializer) if decl.initializer is not None else None
			if isinstance(decl.name, Identifier):
				if init is not decl.initializer:
					decl = update_node(decl, initializer=init)
					changed = True
				declarations.append(decl)
				continue
			if init is None:
				raise emit_error("destructuring declarations must have an initializer", decl)
			self._flatten(decl.name, init, declarations)
			changed = True
		if not changed:
			return node
		return update_node(node, declarations=declarations, flags="var")

	def _flatten(self, pattern: Node, value: Node, out: List[VariableDeclaration]) -> None:
		"""Append one declaration per binding of `pattern`, read off `value`."""
		assert isinstance(pattern, (ObjectBindingPattern, ArrayBindingPattern))
		if len(pattern.elements) != 1 and not _is_simple_receiver(value):
			temp = self.names.temp()
			out.append(VariableDeclaration(Identifier(temp), value))
			value = Identifier(temp)
		if isinstance(pattern, ObjectBindingPattern):
			keys: List[Node] = []
			for element in pattern.elements:
				if element.dot_dot_dot:
					self.context.request_helper("__rest")
					rest = create_call(Identifier("__rest"), [_ref(value), ArrayLiteralExpression(keys)])
					self._bind(element.name, None, rest, out)
					continue
				key = element.property_name or element.name
				if isinstance(key, Identifier):
					keys.append(create_string_literal(key.text))
				elif isinstance(key, StringLiteral):
					keys.append(create_string_literal(key.value))
				if isinstance(key, ComputedPropertyName):
					key = ComputedPropertyName(self.visit(key.expression))
				self._bind(element.name, element.initializer, member_access(_ref(value), key), out)
			return
		for index, element in enumerate(pattern.elements):
			if not isinstance(element, BindingElement):
				continue
			if element.dot_dot_dot:
				read: Node = create_call(create_property_access(_ref(value), "slice"), [create_numeric_literal(index)])
			else:
				read = create_element_access(_ref(value), create_numeric_literal(index))
			self._bind(element.name, element.initializer, read, out)

	def _bind(self, target: Node, default: Optional[Node], read: Node, out: List[VariableDeclaration]) -> None:
		if default is not None:
			temp = self.names.temp()
			out.append(VariableDeclaration(Identifier(temp), read))
			read = ConditionalExpression(
				create_binary(Identifier(temp), "===", create_void_zero()),
				self.visit(default),
				Identifier(temp),
			)
		if isinstance(target, Identifier):
			out.append(VariableDeclaration(target, read))
		else:
			self._flatten(target, read, out)

	# ----------------------------------------------------------- expressions

	def _lower_template(self, node: TemplateExpression) -> Node:
		"""`Hi ${a + b}!` -> `"Hi " + (a + b) + "!"`"""
		expr: Node = create_string_literal(node.quasis[0])
		for hole, text in zip(node.expressions, node.quasis[1:]):
			part = self.visit(hole)
			if P.precedence(part) <= P.ADDITIVE:
				part = create_paren(part)
			expr = create_binary(expr, "+", part)
			if text:
				expr = create_binary(expr, "+", create_string_literal(text))
		return expr

	def _spread_segments(self, elements: List[Node]) -> List[Tuple[Node, bool]]:
		"""Runs of plain elements as array literals, spreads as their operand."""
		segments: List[Tuple[Node, bool]] = []
		pending: List[Node] = []
		for element in elements:
			if isinstance(element, SpreadElement):
				if pending:
					segments.append((ArrayLiteralExpression(pending), False))
					pending = []
				segments.append((self.visit(element.expression), True))
			else:
				pending.append(self.visit(element))
		if pending or not segments:
			segments.append((ArrayLiteralExpression(pending), False))
		return segments

	def _spread_array(self, elements: List[Node], *, as_copy: bool) -> Node:
		"""`[a, ...b, c]` -> `[a].concat(b, [c])`; a lone spread is copied with `slice()` when `as_copy`."""
		segments = self._spread_segments(elements)
		first, first_is_spread = segments[0]
		if len(segments) == 1:
			if first_is_spread and as_copy:
				return create_call(create_property_access(first, "slice"))
			return first
		return create_call(create_property_access(first, "concat"), [seg for seg, _ in segments[1:]])

	def _lower_call(self, node: CallExpression) -> Node:
		callee = node.expression
		has_spread = any(isinstance(a, SpreadElement) for a in node.arguments)
		if isinstance(callee, SuperKeyword):
			raise emit_error("super calls are only supported as a constructor statement", node)
		if isinstance(callee, PropertyAccessExpression) and isinstance(callee.expression, SuperKeyword):
			# `super.m(a)` -> `_super.prototype.m.call(this, a)`
			method = create_property_access(self._super_target(), callee.name.text)
			this_arg = self._lower_this(ThisKeyword())
			if has_spread:
				args = self._spread_array(node.arguments, as_copy=False)
				return create_call(create_property_access(method, "apply"), [this_arg, args])
			return create_call(create_property_access(method, "call"), [this_arg] + [self.visit(a) for a in node.arguments])
		if not has_spread:
			return visit_each_child(node, self.visit)
		args = self._spread_array(node.arguments, as_copy=False)
		if isinstance(callee, (PropertyAccessExpression, ElementAccessExpression)):
			receiver = self.visit(callee.expression)
			if _is_simple_receiver(receiver):
				this_arg = _ref(receiver)
			else:
				temp = self._hoist_temp()
				receiver = create_paren(create_assignment(Identifier(temp), receiver))
				this_arg = Identifier(temp)
			if isinstance(callee, PropertyAccessExpression):
				target: Node = create_property_access(receiver, callee.name.text)
			else:
				target = create_element_access(receiver, self.visit(callee.argument))
		else:
			target = self.visit(callee)
			this_arg = create_void_zero()
		return create_call(create_property_access(target, "apply"), [this_arg, args])

	def _lower_new_spread(self, node: NewExpression) -> Node:
		"""`new C(...a)` -> `new (C.bind.apply(C, [void 0].concat(a)))()`"""
		assert node.arguments is not None
		ctor = self.visit(node.expression)
		if _is_simple_receiver(ctor):
			receiver, this_arg = ctor, _ref(ctor)
		else:
			temp = self._hoist_temp()
			receiver = create_paren(create_assignment(Identifier(temp), ctor))
			this_arg = Identifier(temp)
		args = self._spread_array([create_void_zero()] + list(node.arguments), as_copy=False)
		bound = create_call(create_property_access(create_property_access(receiver, "bind"), "apply"), [this_arg, args])
		return NewExpression(create_paren(bound), [])

	def _lower_binary(self, node: BinaryExpression) -> Node:
		if node.operator == "=" and isinstance(node.left, (ArrayLiteralExpression, ObjectLiteralExpression)):
			raise emit_error("destructuring assignment is not supported when targeting ES3", node)
		if node.operator in ("||=", "&&=", "??="):
			return self._lower_logical_assignment(node)
		if node.operator not in ("**", "**="):
			return visit_each_child(node, self.visit)
		left = self.visit(node.left)
		right = self.visit(node.right)
		pow_call = create_call(create_property_access("Math", "pow"), [left if node.operator == "**" else _ref(left), right])
		if node.operator == "**":
			return pow_call
		return create_assignment(left, pow_call)

	def _stable(self, node: Node) -> Tuple[Node, Callable[[], Node]]:
		"""Evaluate `node` once; the callable makes further reads of its value."""
		if isinstance(node, (Identifier, ThisKeyword, NumericLiteral, StringLiteral)):
			return node, lambda: _copy_simple(node)
		temp = self._hoist_temp()
		return create_paren(create_assignment(Identifier(temp), node)), lambda: Identifier(temp)

	def _lower_logical_assignment(self, node: BinaryExpression) -> Node:
		"""
		`a ||= b` -> `a || (a = b)`, `a &&= b` -> `a && (a = b)`,
		`a ??= b` -> `a !== null && a !== void 0 ? a : (a = b)`.
		"""
		target = node.left
		if isinstance(target, Identifier):
			first: Node = self.visit(target)
			again: Callable[[], Node] = lambda: clone_identifier(target)
		elif isinstance(target, PropertyAccessExpression) and not isinstance(target.expression, SuperKeyword):
			receiver, receiver_again = self._stable(self.visit(target.expression))
			name = target.name.text
			first = create_property_access(receiver, name)
			again = lambda: create_property_access(receiver_again(), name)
		elif isinstance(target, ElementAccessExpression):
			receiver, receiver_again = self._stable(self.visit(target.expression))
			key, key_again = self._stable(self.visit(target.argument))
			first = create_element_access(receiver, key)
			again = lambda: create_element_access(receiver_again(), key_again())
		else:
			raise emit_error(f"unsupported target for {node.operator} when targeting ES3", target)
		assign = create_assignment(again(), self.visit(node.right))
		if node.operator == "??=":
			present = create_binary(
				create_binary(first, "!==", NullKeyword()),
				"&&",
				create_binary(again(), "!==", create_void_zero()),
			)
			return ConditionalExpression(present, again(), create_paren(assign))
		return create_binary(first, node.operator[:2], assign)

	def _lower_object_literal(self, node: ObjectLiteralExpression) -> Node:
		segments: List[Node] = []
		properties: List[Node] = []
		has_spread = False
		changed = False
		for prop in node.properties:
			if isinstance(prop, (GetAccessor, SetAccessor)):
				raise emit_error("accessors are not supported when targeting ES3", prop)
			name = getattr(prop, "name", None)
			if isinstance(name, ComputedPropertyName):
				raise emit_error("computed property names are not supported when targeting ES3", name)
			if isinstance(prop, SpreadAssignment):
				has_spread = True
				if properties or not segments:
					segments.append(create_object_literal(properties, multi_line=False))
					properties = []
				segments.append(self.visit(prop.expression))
				continue
			lowered = self._lower_property(prop)
			changed = changed or lowered is not prop
			properties.append(lowered)
		if not has_spread:
			if not changed:
				return node
			return update_node(node, properties=properties)
		if properties:
			segments.append(create_object_literal(properties, multi_line=False))
		self.context.request_helper("__assign")
		acc = segments[0]
		for seg in segments[1:]:
			acc = create_call(Identifier("__assign"), [acc, seg])
		return acc

	def _lower_property(self, prop: Node) -> Node:
		if isinstance(prop, ShorthandPropertyAssignment):
			lowered: Node = PropertyAssignment(Identifier(prop.name.text), clone_identifier(prop.name))
		elif isinstance(prop, MethodDeclaration):
			assert prop.body is not None
			params, body = self._lower_function_like(prop.parameters, prop.body)
			lowered = PropertyAssignment(prop.name, FunctionExpression(None, params, body))
		else:
			return visit_each_child(prop, self.visit)
		lowered.pos, lowered.end, lowered.original = prop.pos, prop.end, prop
		return lowered

	# ------------------------------------------------------------ statements

	def _lower_for_of(self, node: ForOfStatement) -> Node:
		"""`for (const x of xs) s` -> `for (var _i = 0, xs_1 = xs; _i < xs_1.length; _i++) { var x = xs_1[_i]; s }`"""
		source = node.expression
		iterated = self.visit(source)
		index = self.names.loop_variable()
		copy = self.names.unique(source.text) if isinstance(source, Identifier) else self.names.temp()
		init = VariableDeclarationList(
			[
				VariableDeclaration(Identifier(index), create_numeric_literal(0)),
				VariableDeclaration(Identifier(copy), iterated),
			],
			"var",
		)
		cond = create_binary(Identifier(index), "<", create_property_access(copy, "length"))
		incr = PostfixUnaryExpression(Identifier(index), "++")
		element = create_element_access(Identifier(copy), Identifier(index))

		decls_list = node.initializer
		assert isinstance(decls_list, VariableDeclarationList)
		target = decls_list.declarations[0].name
		decls: List[VariableDeclaration] = []
		if isinstance(target, Identifier):
			decls.append(VariableDeclaration(target, element))
		else:
			self._flatten(target, element, decls)
		head = _var(decls)

		body = self.visit(node.statement)
		if isinstance(body, Block):
			body = update_node(body, statements=[head] + body.statements, multi_line=True)
		else:
			body = create_block([head, body])
		loop = ForStatement(init, cond, incr, body)
		loop.pos, loop.end, loop.original = node.pos, node.end, node
		return loop

	# --------------------------------------------------------------- classes

	def _super_target(self) -> Node:
		"""`_super.prototype` in instance members, `_super` in static ones."""
		info = self._classes[-1] if self._classes else None
		if info is not None and info.static_member:
			return Identifier("_super")
		return create_property_access("_super", "prototype")

	def _lower_class(self, node: ClassDeclaration) -> Node:
		"""
		class B extends A { m() {} }
		->
		var B = /** @class */ (function (_super) {
		    __extends(B, _super);
		    function B() { ... }
		    B.prototype.m = function () { };
		    return B;
		}(A));
		"""
		for member in node.members:
			if isinstance(member, (GetAccessor, SetAccessor)):
				raise emit_error("accessors are not supported when targeting ES3", member)
		name = node.name.text if node.name is not None else self.names.unique("class")
		heritage = self.visit(node.heritage) if node.heritage is not None else None
		info = _ClassInfo(name, heritage is not None)
		self._classes.append(info)
		try:
			body: List[Node] = []
			if heritage is not None:
				self.context.request_helper("__extends")
				body.append(create_expression_statement(create_call(Identifier("__extends"), [Identifier(name), Identifier("_super")])))
			ctor = next((m for m in node.members if isinstance(m, Constructor)), None)
			fields = [m for m in node.members if isinstance(m, PropertyDeclaration) and "static" not in m.modifiers]
			body.append(self._lower_constructor(info, ctor, fields))
			for member in node.members:
				if isinstance(member, MethodDeclaration):
					body.append(self._lower_method(info, member))
			for member in node.members:
				if isinstance(member, PropertyDeclaration) and "static" in member.modifiers and member.initializer is not None:
					info.static_member = True
					assign = create_assignment(member_access(Identifier(name), member.name), self.visit(member.initializer))
					info.static_member = False
					body.append(create_expression_statement(assign))
			body.append(create_return(Identifier(name)))
		finally:
			self._classes.pop()

		params = [Parameter(Identifier("_super"))] if heritage is not None else []
		func = FunctionExpression(None, params, create_block(body))
		wrapped = create_paren(create_call(func, [heritage] if heritage is not None else []))
		wrapped.leading_comments.append("/** @class */")
		class_name = node.name if node.name is not None else Identifier(name)
		stmt = VariableStatement(VariableDeclarationList([VariableDeclaration(class_name, wrapped)], "var"))
		stmt.pos, stmt.end, stmt.original = node.pos, node.end, node
		return stmt

	def _is_super_call(self, stmt: Node) -> bool:
		return (
			isinstance(stmt, ExpressionStatement)
			and isinstance(stmt.expression, CallExpression)
			and isinstance(stmt.expression.expression, SuperKeyword)
		)

	def _lower_super_call(self, stmt: ExpressionStatement) -> Node:
		"""`super(a)` -> `var _this = _super.call(this, a) || this;`"""
		call = stmt.expression
		assert isinstance(call, CallExpression)
		if any(isinstance(a, SpreadElement) for a in call.arguments):
			args = self._spread_array(call.arguments, as_copy=False)
			invoke = create_call(create_property_access("_super", "apply"), [ThisKeyword(), args])
		else:
			invoke = create_call(create_property_access("_super", "call"), [ThisKeyword()] + [self.visit(a) for a in call.arguments])
		value = create_binary(invoke, "||", ThisKeyword())
		var = _var([VariableDeclaration(Identifier(self._this_name), value)])
		var.pos, var.end, var.original = stmt.pos, stmt.end, stmt
		return var

	def _field_initializers(self, ctor: Optional[Constructor], fields: List[PropertyDeclaration]) -> List[Node]:
		"""`this.x = x;` for parameter properties, then `this.p = init;` for fields."""
		out: List[Node] = []
		if ctor is not None:
			for param in ctor.parameters:
				if _PARAMETER_PROPERTY_MODIFIERS.intersection(param.modifiers) and isinstance(param.name, Identifier):
					target = create_property_access(self._lower_this(ThisKeyword()), param.name.text)
					out.append(create_expression_statement(create_assignment(target, Identifier(param.name.text))))
		for prop in fields:
			if prop.initializer is None:
				continue
			target = member_access(self._lower_this(ThisKeyword()), prop.name)
			out.append(create_expression_statement(create_assignment(target, self.visit(prop.initializer))))
		return out

	def _lower_constructor(self, info: _ClassInfo, ctor: Optional[Constructor], fields: List[PropertyDeclaration]) -> Node:
		frame = _Frame(is_arrow=False)
		if info.has_super and (ctor is None or any(self._is_super_call(s) for s in (ctor.body.statements if ctor.body else []))):
			frame.this_alias = self._this_name
		self._frames.append(frame)
		self.names.push_scope()
		try:
			params, prologue = self._lower_parameters(ctor.parameters if ctor is not None else [])
			if ctor is None and info.has_super:
				statements = self._implicit_super_body(fields)
			else:
				inits = self._field_initializers(ctor, fields)
				statements = []
				source = ctor.body.statements if ctor is not None and ctor.body is not None else []
				for stmt in source:
					if frame.this_alias is not None and self._is_super_call(stmt):
						assert isinstance(stmt, ExpressionStatement)
						statements.append(self._lower_super_call(stmt))
						statements.extend(inits)
						inits = []
					else:
						statements.extend(visit_nodes([stmt], self.visit))
				statements = inits + statements
				if frame.this_alias is not None:
					statements.append(create_return(Identifier(frame.this_alias)))
		finally:
			self.names.pop_scope()
			self._frames.pop()
		statements = self._frame_header(frame) + prologue + statements
		if ctor is not None and ctor.body is not None:
			block = update_node(ctor.body, statements=statements, multi_line=True)
		else:
			block = create_block(statements)
		func = FunctionDeclaration(Identifier(info.name), params, block)
		if ctor is not None:
			func.pos, func.end, func.original = ctor.pos, ctor.end, ctor
		return func

	def _implicit_super_body(self, fields: List[PropertyDeclaration]) -> List[Node]:
		"""Derived class without a constructor: forward every argument to the base."""
		forward = create_binary(
			create_binary(Identifier("_super"), "!==", Identifier("null")),
			"&&",
			create_call(create_property_access("_super", "apply"), [ThisKeyword(), Identifier("arguments")]),
		)
		value = create_binary(forward, "||", ThisKeyword())
		inits = self._field_initializers(None, fields)
		if not inits:
			return [create_return(value)]
		var = _var([VariableDeclaration(Identifier(self._this_name), value)])
		return [var] + inits + [create_return(Identifier(self._this_name))]

	def _lower_method(self, info: _ClassInfo, method: MethodDeclaration) -> Node:
		assert method.body is not None
		info.static_member = "static" in method.modifiers
		try:
			params, body = self._lower_function_like(method.parameters, method.body)
		finally:
			info.static_member = False
		owner: Node = Identifier(info.name) if "static" in method.modifiers else create_property_access(info.name, "prototype")
		name = method.name
		if isinstance(name, ComputedPropertyName):
			name = ComputedPropertyName(self.visit(name.expression))
		assign = create_assignment(member_access(owner, name), FunctionExpression(None, params, body))
		stmt = create_expression_statement(assign)
		stmt.pos, stmt.end, stmt.original = method.pos, method.end, method
		return stmt


__all__ = ["Es3Lowering", "member_access"]
