# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax tree for the supported TypeScript subset.

The same node classes describe the parsed program and the lowered program
that the printer emits, so transformer passes can run at either end of the
compiler.

Guiding rules:
- `pos`/`end` are character offsets of the node's first and last token in the
  source text. Nodes created by a pass keep the sentinel `-1`/`-1` range
  unless they take over the range of the node they replace.
- `parent` is a weak back-reference filled in by `set_parent_pointers`; it is
  only trustworthy on a tree that has just been (re)linked.
- `original` points at the node this one was derived from. Text lookup and
  binder resolution follow it back to the parsed tree.
- Type-level syntax is kept as opaque `TypeNode` ranges; nothing inspects it
  beyond erasure.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field, fields
from enum import Enum, IntFlag, auto
from typing import Any, ClassVar, Iterator, List, Optional


class SyntaxKind(Enum):
	"""Node kinds; substitution hooks and filters key on these."""

	SOURCE_FILE = auto()
	IDENTIFIER = auto()
	NUMERIC_LITERAL = auto()
	STRING_LITERAL = auto()
	REGULAR_EXPRESSION_LITERAL = auto()
	TEMPLATE_EXPRESSION = auto()
	TRUE_KEYWORD = auto()
	FALSE_KEYWORD = auto()
	NULL_KEYWORD = auto()
	THIS_KEYWORD = auto()
	SUPER_KEYWORD = auto()
	ARRAY_LITERAL_EXPRESSION = auto()
	OBJECT_LITERAL_EXPRESSION = auto()
	PROPERTY_ASSIGNMENT = auto()
	SHORTHAND_PROPERTY_ASSIGNMENT = auto()
	SPREAD_ASSIGNMENT = auto()
	COMPUTED_PROPERTY_NAME = auto()
	PROPERTY_ACCESS_EXPRESSION = auto()
	ELEMENT_ACCESS_EXPRESSION = auto()
	CALL_EXPRESSION = auto()
	NEW_EXPRESSION = auto()
	PARENTHESIZED_EXPRESSION = auto()
	FUNCTION_EXPRESSION = auto()
	ARROW_FUNCTION = auto()
	PARAMETER = auto()
	BINARY_EXPRESSION = auto()
	PREFIX_UNARY_EXPRESSION = auto()
	POSTFIX_UNARY_EXPRESSION = auto()
	CONDITIONAL_EXPRESSION = auto()
	SPREAD_ELEMENT = auto()
	OMITTED_EXPRESSION = auto()
	AS_EXPRESSION = auto()
	NON_NULL_EXPRESSION = auto()
	OBJECT_BINDING_PATTERN = auto()
	ARRAY_BINDING_PATTERN = auto()
	BINDING_ELEMENT = auto()
	TYPE_NODE = auto()
	VARIABLE_STATEMENT = auto()
	VARIABLE_DECLARATION_LIST = auto()
	VARIABLE_DECLARATION = auto()
	FUNCTION_DECLARATION = auto()
	CLASS_DECLARATION = auto()
	CONSTRUCTOR = auto()
	METHOD_DECLARATION = auto()
	PROPERTY_DECLARATION = auto()
	GET_ACCESSOR = auto()
	SET_ACCESSOR = auto()
	INDEX_SIGNATURE = auto()
	ENUM_DECLARATION = auto()
	ENUM_MEMBER = auto()
	MODULE_DECLARATION = auto()
	MODULE_BLOCK = auto()
	INTERFACE_DECLARATION = auto()
	TYPE_ALIAS_DECLARATION = auto()
	IMPORT_DECLARATION = auto()
	IMPORT_CLAUSE = auto()
	NAMESPACE_IMPORT = auto()
	NAMED_IMPORTS = auto()
	IMPORT_SPECIFIER = auto()
	IMPORT_EQUALS_DECLARATION = auto()
	EXTERNAL_MODULE_REFERENCE = auto()
	EXPORT_DECLARATION = auto()
	NAMED_EXPORTS = auto()
	NAMESPACE_EXPORT = auto()
	EXPORT_SPECIFIER = auto()
	EXPORT_ASSIGNMENT = auto()
	EXPRESSION_STATEMENT = auto()
	BLOCK = auto()
	IF_STATEMENT = auto()
	FOR_STATEMENT = auto()
	FOR_IN_STATEMENT = auto()
	FOR_OF_STATEMENT = auto()
	WHILE_STATEMENT = auto()
	DO_STATEMENT = auto()
	RETURN_STATEMENT = auto()
	BREAK_STATEMENT = auto()
	CONTINUE_STATEMENT = auto()
	LABELED_STATEMENT = auto()
	THROW_STATEMENT = auto()
	TRY_STATEMENT = auto()
	CATCH_CLAUSE = auto()
	SWITCH_STATEMENT = auto()
	CASE_CLAUSE = auto()
	DEFAULT_CLAUSE = auto()
	EMPTY_STATEMENT = auto()
	NOT_EMITTED_STATEMENT = auto()


class EmitFlags(IntFlag):
	"""Per-node printer hints."""

	NONE = 0
	# The printer must not run binder substitution on this identifier.
	NO_SUBSTITUTION = auto()
	# Identifier names a local binding even though an export of the same
	# name exists (e.g. the left side of `E = exports.E || ...`).
	LOCAL_NAME = auto()
	# Identifier names the exported binding itself (`exports.E`), even for
	# declarations that also have a local (functions, classes, enums).
	EXPORT_NAME = auto()
	# Keep a block or object literal on one line.
	SINGLE_LINE = auto()
	# Skip source comments attached to this node.
	NO_COMMENTS = auto()


SENTINEL = -1


@dataclass(frozen=True)
class Comment:
	"""A source comment collected by the parser (not part of the tree)."""

	text: str
	pos: int
	end: int

	@property
	def is_multiline(self) -> bool:
		return self.text.startswith("/*")


@dataclass(eq=False)
class Node:
	"""Base class for all syntax nodes."""

	kind: ClassVar[SyntaxKind]

	pos: int = field(default=SENTINEL, kw_only=True)
	end: int = field(default=SENTINEL, kw_only=True)
	emit_flags: EmitFlags = field(default=EmitFlags.NONE, kw_only=True)
	# Single-line comment bodies printed after the node as `//text`.
	trailing_comments: List[str] = field(default_factory=list, kw_only=True)
	# Verbatim comments printed before the node (e.g. `/** @class */`).
	leading_comments: List[str] = field(default_factory=list, kw_only=True)
	original: Optional["Node"] = field(default=None, kw_only=True, repr=False)
	_parent_ref: Any = field(default=None, init=False, repr=False)

	@property
	def parent(self) -> Optional["Node"]:
		ref = self._parent_ref
		return ref() if ref is not None else None

	@parent.setter
	def parent(self, value: Optional["Node"]) -> None:
		self._parent_ref = weakref.ref(value) if value is not None else None

	@property
	def is_synthetic(self) -> bool:
		return self.pos == SENTINEL and self.end == SENTINEL

	def children(self) -> Iterator["Node"]:
		"""Yield direct child nodes in source order."""
		for name in child_field_names(type(self)):
			value = getattr(self, name)
			if isinstance(value, Node):
				yield value
			elif isinstance(value, list):
				for item in value:
					if isinstance(item, Node):
						yield item

	def get_source_file(self) -> Optional["SourceFile"]:
		node: Optional[Node] = self
		while node is not None:
			cur: Optional[Node] = node
			while cur is not None:
				if isinstance(cur, SourceFile):
					return cur
				cur = cur.parent
			node = node.original
		return None

	def get_text(self) -> str:
		"""Exact source text covered by this node (empty for synthetic nodes)."""
		node: Optional[Node] = self
		while node is not None and node.is_synthetic:
			node = node.original
		if node is None:
			return ""
		sf = node.get_source_file()
		if sf is None:
			return ""
		return sf.text[node.pos : node.end]


_BASE_FIELDS = frozenset({"pos", "end", "emit_flags", "trailing_comments", "leading_comments", "original", "_parent_ref"})
_CHILD_FIELDS: dict[type, tuple[str, ...]] = {}


def child_field_names(cls: type) -> tuple[str, ...]:
	names = _CHILD_FIELDS.get(cls)
	if names is None:
		names = tuple(f.name for f in fields(cls) if f.name not in _BASE_FIELDS)
		_CHILD_FIELDS[cls] = names
	return names


class Expression(Node):
	"""Marker base for expressions."""


class Statement(Node):
	"""Marker base for statements."""


# Type-level syntax

@dataclass(eq=False)
class TypeNode(Node):
	"""Opaque type annotation; only its source range is recorded."""

	kind = SyntaxKind.TYPE_NODE


# Names and literals

@dataclass(eq=False)
class Identifier(Expression):
	text: str
	kind = SyntaxKind.IDENTIFIER


@dataclass(eq=False)
class NumericLiteral(Expression):
	text: str
	kind = SyntaxKind.NUMERIC_LITERAL


@dataclass(eq=False)
class StringLiteral(Expression):
	"""`value` is the cooked string; `raw` keeps the source spelling with quotes."""

	value: str
	raw: Optional[str] = None
	kind = SyntaxKind.STRING_LITERAL


@dataclass(eq=False)
class RegularExpressionLiteral(Expression):
	"""Source spelling including slashes and flags."""

	text: str
	kind = SyntaxKind.REGULAR_EXPRESSION_LITERAL


@dataclass(eq=False)
class TemplateExpression(Expression):
	"""`quasis` holds the cooked text segments; len(quasis) == len(expressions) + 1."""

	quasis: List[str]
	expressions: List[Node] = field(default_factory=list)
	kind = SyntaxKind.TEMPLATE_EXPRESSION


@dataclass(eq=False)
class TrueKeyword(Expression):
	kind = SyntaxKind.TRUE_KEYWORD


@dataclass(eq=False)
class FalseKeyword(Expression):
	kind = SyntaxKind.FALSE_KEYWORD


@dataclass(eq=False)
class NullKeyword(Expression):
	kind = SyntaxKind.NULL_KEYWORD


@dataclass(eq=False)
class ThisKeyword(Expression):
	kind = SyntaxKind.THIS_KEYWORD


@dataclass(eq=False)
class SuperKeyword(Expression):
	kind = SyntaxKind.SUPER_KEYWORD


@dataclass(eq=False)
class ArrayLiteralExpression(Expression):
	elements: List[Node] = field(default_factory=list)
	multi_line: bool = False
	kind = SyntaxKind.ARRAY_LITERAL_EXPRESSION


@dataclass(eq=False)
class ObjectLiteralExpression(Expression):
	properties: List[Node] = field(default_factory=list)
	multi_line: bool = False
	kind = SyntaxKind.OBJECT_LITERAL_EXPRESSION


@dataclass(eq=False)
class ComputedPropertyName(Node):
	expression: Node
	kind = SyntaxKind.COMPUTED_PROPERTY_NAME


@dataclass(eq=False)
class PropertyAssignment(Node):
	name: Node
	initializer: Node
	kind = SyntaxKind.PROPERTY_ASSIGNMENT


@dataclass(eq=False)
class ShorthandPropertyAssignment(Node):
	name: Identifier
	kind = SyntaxKind.SHORTHAND_PROPERTY_ASSIGNMENT


@dataclass(eq=False)
class SpreadAssignment(Node):
	expression: Node
	kind = SyntaxKind.SPREAD_ASSIGNMENT


# Expressions

@dataclass(eq=False)
class PropertyAccessExpression(Expression):
	expression: Node
	name: Identifier
	kind = SyntaxKind.PROPERTY_ACCESS_EXPRESSION


@dataclass(eq=False)
class ElementAccessExpression(Expression):
	expression: Node
	argument: Node
	kind = SyntaxKind.ELEMENT_ACCESS_EXPRESSION


@dataclass(eq=False)
class CallExpression(Expression):
	expression: Node
	arguments: List[Node] = field(default_factory=list)
	kind = SyntaxKind.CALL_EXPRESSION


@dataclass(eq=False)
class NewExpression(Expression):
	"""`arguments` is None for `new X` without a parenthesized list."""

	expression: Node
	arguments: Optional[List[Node]] = None
	kind = SyntaxKind.NEW_EXPRESSION


@dataclass(eq=False)
class ParenthesizedExpression(Expression):
	expression: Node
	kind = SyntaxKind.PARENTHESIZED_EXPRESSION


@dataclass(eq=False)
class Parameter(Node):
	name: Node
	initializer: Optional[Node] = None
	type: Optional[TypeNode] = None
	dot_dot_dot: bool = False
	question: bool = False
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.PARAMETER


@dataclass(eq=False)
class FunctionExpression(Expression):
	name: Optional[Identifier]
	parameters: List[Parameter]
	body: "Block"
	type: Optional[TypeNode] = None
	kind = SyntaxKind.FUNCTION_EXPRESSION


@dataclass(eq=False)
class ArrowFunction(Expression):
	"""`body` is a Block or a single expression."""

	parameters: List[Parameter]
	body: Node
	type: Optional[TypeNode] = None
	kind = SyntaxKind.ARROW_FUNCTION


@dataclass(eq=False)
class BinaryExpression(Expression):
	"""`operator` is the token text (`+`, `===`, `=`, `+=`, `,`, `instanceof`, ...)."""

	left: Node
	operator: str
	right: Node
	kind = SyntaxKind.BINARY_EXPRESSION


@dataclass(eq=False)
class PrefixUnaryExpression(Expression):
	"""Covers `typeof`, `void` and `delete` as well as the punctuation operators."""

	operator: str
	operand: Node
	kind = SyntaxKind.PREFIX_UNARY_EXPRESSION


@dataclass(eq=False)
class PostfixUnaryExpression(Expression):
	operand: Node
	operator: str
	kind = SyntaxKind.POSTFIX_UNARY_EXPRESSION


@dataclass(eq=False)
class ConditionalExpression(Expression):
	condition: Node
	when_true: Node
	when_false: Node
	kind = SyntaxKind.CONDITIONAL_EXPRESSION


@dataclass(eq=False)
class SpreadElement(Expression):
	expression: Node
	kind = SyntaxKind.SPREAD_ELEMENT


@dataclass(eq=False)
class OmittedExpression(Expression):
	"""A hole in an array literal or array binding pattern."""

	kind = SyntaxKind.OMITTED_EXPRESSION


@dataclass(eq=False)
class AsExpression(Expression):
	expression: Node
	type: TypeNode
	kind = SyntaxKind.AS_EXPRESSION


@dataclass(eq=False)
class NonNullExpression(Expression):
	expression: Node
	kind = SyntaxKind.NON_NULL_EXPRESSION


# Binding patterns

@dataclass(eq=False)
class BindingElement(Node):
	"""`{ property_name: name = initializer }` or `[name = initializer]` element."""

	name: Node
	property_name: Optional[Node] = None
	initializer: Optional[Node] = None
	dot_dot_dot: bool = False
	kind = SyntaxKind.BINDING_ELEMENT


@dataclass(eq=False)
class ObjectBindingPattern(Node):
	elements: List[BindingElement] = field(default_factory=list)
	kind = SyntaxKind.OBJECT_BINDING_PATTERN


@dataclass(eq=False)
class ArrayBindingPattern(Node):
	"""Elements are `BindingElement`s or `OmittedExpression` holes."""

	elements: List[Node] = field(default_factory=list)
	kind = SyntaxKind.ARRAY_BINDING_PATTERN


# Statements and declarations

@dataclass(eq=False)
class VariableDeclaration(Node):
	name: Node
	initializer: Optional[Node] = None
	type: Optional[TypeNode] = None
	kind = SyntaxKind.VARIABLE_DECLARATION


@dataclass(eq=False)
class VariableDeclarationList(Node):
	"""`flags` is the declaring keyword: "var", "let" or "const"."""

	declarations: List[VariableDeclaration]
	flags: str = "var"
	kind = SyntaxKind.VARIABLE_DECLARATION_LIST


@dataclass(eq=False)
class VariableStatement(Statement):
	declaration_list: VariableDeclarationList
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.VARIABLE_STATEMENT


@dataclass(eq=False)
class Block(Statement):
	statements: List[Node] = field(default_factory=list)
	multi_line: bool = False
	kind = SyntaxKind.BLOCK


@dataclass(eq=False)
class FunctionDeclaration(Statement):
	"""`body` is None for overload signatures and ambient declarations."""

	name: Optional[Identifier]
	parameters: List[Parameter]
	body: Optional[Block] = None
	type: Optional[TypeNode] = None
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.FUNCTION_DECLARATION


@dataclass(eq=False)
class Constructor(Node):
	parameters: List[Parameter]
	body: Optional[Block] = None
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.CONSTRUCTOR


@dataclass(eq=False)
class MethodDeclaration(Node):
	"""Class method or object literal method (`modifiers` empty for the latter)."""

	name: Node
	parameters: List[Parameter]
	body: Optional[Block] = None
	type: Optional[TypeNode] = None
	modifiers: List[str] = field(default_factory=list)
	question: bool = False
	kind = SyntaxKind.METHOD_DECLARATION


@dataclass(eq=False)
class PropertyDeclaration(Node):
	name: Node
	initializer: Optional[Node] = None
	type: Optional[TypeNode] = None
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.PROPERTY_DECLARATION


@dataclass(eq=False)
class GetAccessor(Node):
	name: Node
	body: Block
	type: Optional[TypeNode] = None
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.GET_ACCESSOR


@dataclass(eq=False)
class SetAccessor(Node):
	name: Node
	parameters: List[Parameter]
	body: Block
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.SET_ACCESSOR


@dataclass(eq=False)
class IndexSignature(Node):
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.INDEX_SIGNATURE


@dataclass(eq=False)
class ClassDeclaration(Statement):
	name: Optional[Identifier]
	members: List[Node] = field(default_factory=list)
	heritage: Optional[Node] = None
	implements: List[TypeNode] = field(default_factory=list)
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.CLASS_DECLARATION


@dataclass(eq=False)
class EnumMember(Node):
	name: Node
	initializer: Optional[Node] = None
	kind = SyntaxKind.ENUM_MEMBER


@dataclass(eq=False)
class EnumDeclaration(Statement):
	name: Identifier
	members: List[EnumMember] = field(default_factory=list)
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.ENUM_DECLARATION


@dataclass(eq=False)
class ModuleBlock(Node):
	statements: List[Node] = field(default_factory=list)
	kind = SyntaxKind.MODULE_BLOCK


@dataclass(eq=False)
class ModuleDeclaration(Statement):
	"""`namespace A.B {}` nests: the body of `A` is the declaration of `B`."""

	name: Node
	body: Optional[Node] = None
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.MODULE_DECLARATION


@dataclass(eq=False)
class InterfaceDeclaration(Statement):
	name: Identifier
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.INTERFACE_DECLARATION


@dataclass(eq=False)
class TypeAliasDeclaration(Statement):
	name: Identifier
	type: Optional[TypeNode] = None
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.TYPE_ALIAS_DECLARATION


# Module syntax

@dataclass(eq=False)
class NamespaceImport(Node):
	name: Identifier
	kind = SyntaxKind.NAMESPACE_IMPORT


@dataclass(eq=False)
class ImportSpecifier(Node):
	"""`{ property_name as name }`; property_name is None without `as`."""

	name: Identifier
	property_name: Optional[Identifier] = None
	is_type_only: bool = False
	kind = SyntaxKind.IMPORT_SPECIFIER


@dataclass(eq=False)
class NamedImports(Node):
	elements: List[ImportSpecifier] = field(default_factory=list)
	kind = SyntaxKind.NAMED_IMPORTS


@dataclass(eq=False)
class ImportClause(Node):
	name: Optional[Identifier] = None
	named_bindings: Optional[Node] = None
	is_type_only: bool = False
	kind = SyntaxKind.IMPORT_CLAUSE


@dataclass(eq=False)
class ImportDeclaration(Statement):
	"""`import_clause` is None for side-effect imports (`import "x";`)."""

	import_clause: Optional[ImportClause]
	module_specifier: StringLiteral
	kind = SyntaxKind.IMPORT_DECLARATION


@dataclass(eq=False)
class ExternalModuleReference(Node):
	expression: StringLiteral
	kind = SyntaxKind.EXTERNAL_MODULE_REFERENCE


@dataclass(eq=False)
class ImportEqualsDeclaration(Statement):
	"""`import name = A.B.C` or `import name = require("x")`."""

	name: Identifier
	module_reference: Node
	modifiers: List[str] = field(default_factory=list)
	kind = SyntaxKind.IMPORT_EQUALS_DECLARATION


@dataclass(eq=False)
class ExportSpecifier(Node):
	name: Identifier
	property_name: Optional[Identifier] = None
	is_type_only: bool = False
	kind = SyntaxKind.EXPORT_SPECIFIER


@dataclass(eq=False)
class NamedExports(Node):
	elements: List[ExportSpecifier] = field(default_factory=list)
	kind = SyntaxKind.NAMED_EXPORTS


@dataclass(eq=False)
class NamespaceExport(Node):
	name: Identifier
	kind = SyntaxKind.NAMESPACE_EXPORT


@dataclass(eq=False)
class ExportDeclaration(Statement):
	"""`export {..}`, `export {..} from "x"`, `export * from "x"`.

	`export_clause` is None for `export *`; `module_specifier` is None unless a
	`from` clause is present.
	"""

	export_clause: Optional[Node] = None
	module_specifier: Optional[StringLiteral] = None
	is_type_only: bool = False
	kind = SyntaxKind.EXPORT_DECLARATION


@dataclass(eq=False)
class ExportAssignment(Statement):
	"""`export default expr` or, with is_export_equals, `export = expr`."""

	expression: Node
	is_export_equals: bool = False
	kind = SyntaxKind.EXPORT_ASSIGNMENT


@dataclass(eq=False)
class ExpressionStatement(Statement):
	expression: Node
	kind = SyntaxKind.EXPRESSION_STATEMENT


@dataclass(eq=False)
class IfStatement(Statement):
	expression: Node
	then_statement: Node
	else_statement: Optional[Node] = None
	kind = SyntaxKind.IF_STATEMENT


@dataclass(eq=False)
class ForStatement(Statement):
	initializer: Optional[Node]
	condition: Optional[Node]
	incrementor: Optional[Node]
	statement: Node
	kind = SyntaxKind.FOR_STATEMENT


@dataclass(eq=False)
class ForInStatement(Statement):
	initializer: Node
	expression: Node
	statement: Node
	kind = SyntaxKind.FOR_IN_STATEMENT


@dataclass(eq=False)
class ForOfStatement(Statement):
	initializer: Node
	expression: Node
	statement: Node
	kind = SyntaxKind.FOR_OF_STATEMENT


@dataclass(eq=False)
class WhileStatement(Statement):
	expression: Node
	statement: Node
	kind = SyntaxKind.WHILE_STATEMENT


@dataclass(eq=False)
class DoStatement(Statement):
	statement: Node
	expression: Node
	kind = SyntaxKind.DO_STATEMENT


@dataclass(eq=False)
class ReturnStatement(Statement):
	expression: Optional[Node] = None
	kind = SyntaxKind.RETURN_STATEMENT


@dataclass(eq=False)
class BreakStatement(Statement):
	label: Optional[Identifier] = None
	kind = SyntaxKind.BREAK_STATEMENT


@dataclass(eq=False)
class ContinueStatement(Statement):
	label: Optional[Identifier] = None
	kind = SyntaxKind.CONTINUE_STATEMENT


@dataclass(eq=False)
class LabeledStatement(Statement):
	label: Identifier
	statement: Node
	kind = SyntaxKind.LABELED_STATEMENT


@dataclass(eq=False)
class ThrowStatement(Statement):
	expression: Node
	kind = SyntaxKind.THROW_STATEMENT


@dataclass(eq=False)
class CatchClause(Node):
	variable: Optional[Node]
	block: Block
	kind = SyntaxKind.CATCH_CLAUSE


@dataclass(eq=False)
class TryStatement(Statement):
	try_block: Block
	catch_clause: Optional[CatchClause] = None
	finally_block: Optional[Block] = None
	kind = SyntaxKind.TRY_STATEMENT


@dataclass(eq=False)
class CaseClause(Node):
	expression: Node
	statements: List[Node] = field(default_factory=list)
	kind = SyntaxKind.CASE_CLAUSE


@dataclass(eq=False)
class DefaultClause(Node):
	statements: List[Node] = field(default_factory=list)
	kind = SyntaxKind.DEFAULT_CLAUSE


@dataclass(eq=False)
class SwitchStatement(Statement):
	expression: Node
	clauses: List[Node] = field(default_factory=list)
	kind = SyntaxKind.SWITCH_STATEMENT


@dataclass(eq=False)
class EmptyStatement(Statement):
	kind = SyntaxKind.EMPTY_STATEMENT


@dataclass(eq=False)
class NotEmittedStatement(Statement):
	"""Prints nothing but its comments; takes over the range of what it replaced."""

	kind = SyntaxKind.NOT_EMITTED_STATEMENT


@dataclass(eq=False)
class SourceFile(Node):
	statements: List[Node]
	text: str = ""
	file_name: str = "module.ts"
	comments: List[Comment] = field(default_factory=list)
	kind = SyntaxKind.SOURCE_FILE

	@property
	def is_external_module(self) -> bool:
		"""A file is a module when its parsed form has top-level import/export syntax."""
		node: Node = self
		while node.original is not None:
			node = node.original
		assert isinstance(node, SourceFile)
		return any(_is_module_indicator(stmt) for stmt in node.statements)


def _is_module_indicator(stmt: Node) -> bool:
	if isinstance(stmt, (ImportDeclaration, ExportDeclaration, ExportAssignment)):
		return True
	if isinstance(stmt, ImportEqualsDeclaration):
		return isinstance(stmt.module_reference, ExternalModuleReference) or "export" in stmt.modifiers
	return "export" in (getattr(stmt, "modifiers", None) or [])

