# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
lark front end and parse-tree to syntax-tree builder.

The grammar is LALR with a basic lexer. Regular expression literals are
masked first (`regex`); tokens are then lexed with whitespace and comments
kept, rewritten by `TokenPass` and fed to an interactive parser one by one;
this keeps all per-parse state local so the shared `Lark` object is only
ever read.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple, TypeVar

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ts2gas.core.diagnostics import Diagnostic
from ts2gas.core.errors import ParseError
from ts2gas.core.span import Span
from ts2gas.syntax.nodes import (
	ArrayBindingPattern,
	ArrayLiteralExpression,
	ArrowFunction,
	AsExpression,
	BinaryExpression,
	BindingElement,
	Block,
	BreakStatement,
	CallExpression,
	CaseClause,
	CatchClause,
	ClassDeclaration,
	Comment,
	ComputedPropertyName,
	ConditionalExpression,
	Constructor,
	ContinueStatement,
	DefaultClause,
	DoStatement,
	ElementAccessExpression,
	EmptyStatement,
	EnumDeclaration,
	EnumMember,
	ExportAssignment,
	ExportDeclaration,
	ExportSpecifier,
	ExpressionStatement,
	ExternalModuleReference,
	FalseKeyword,
	ForInStatement,
	ForOfStatement,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	GetAccessor,
	Identifier,
	IfStatement,
	ImportClause,
	ImportDeclaration,
	ImportEqualsDeclaration,
	ImportSpecifier,
	IndexSignature,
	InterfaceDeclaration,
	LabeledStatement,
	MethodDeclaration,
	ModuleBlock,
	ModuleDeclaration,
	NamedExports,
	NamedImports,
	NamespaceExport,
	NamespaceImport,
	NewExpression,
	Node,
	NonNullExpression,
	NullKeyword,
	NumericLiteral,
	ObjectBindingPattern,
	ObjectLiteralExpression,
	OmittedExpression,
	Parameter,
	ParenthesizedExpression,
	PostfixUnaryExpression,
	PrefixUnaryExpression,
	PropertyAccessExpression,
	PropertyAssignment,
	PropertyDeclaration,
	RegularExpressionLiteral,
	ReturnStatement,
	SetAccessor,
	ShorthandPropertyAssignment,
	SourceFile,
	SpreadAssignment,
	SpreadElement,
	StringLiteral,
	SuperKeyword,
	SwitchStatement,
	TemplateExpression,
	ThisKeyword,
	ThrowStatement,
	TrueKeyword,
	TryStatement,
	TypeAliasDeclaration,
	TypeNode,
	VariableDeclaration,
	VariableDeclarationList,
	VariableStatement,
	WhileStatement,
)

from .regex import mask_regex_literals, unmask
from .tokens import TokenPass

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start=["program", "expression"],
	propagate_positions=True,
	maybe_placeholders=False,
)

N = TypeVar("N", bound=Node)

# Tokens that only steer the parser and never become nodes.
_STRUCTURAL = frozenset({"VSEMI", "BLOCK_LBRACE", "FUNCTION_DECL", "ARROW_LPAR"})


def _end_token(source: str, last: Optional[Token]) -> Token:
	if last is None:
		return Token("$END", "", start_pos=0, line=1, column=1, end_line=1, end_column=1, end_pos=0)
	return Token(
		"$END",
		"",
		start_pos=len(source),
		line=last.end_line,
		column=last.end_column,
		end_line=last.end_line,
		end_column=last.end_column,
		end_pos=len(source),
	)


def run_parser(source: str, start: str = "program") -> Tuple[Tree, List[Comment]]:
	"""Lex, rewrite and parse `source`; lark errors propagate unchanged."""
	token_pass = TokenPass(expression=start == "expression")
	interactive = _PARSER.parse_interactive(start=start)
	last: Optional[Token] = None
	lexed = _PARSER.lex(mask_regex_literals(source), dont_ignore=True)
	for tok in token_pass.process(unmask(lexed, source)):
		interactive.feed_token(tok)
		last = tok
	tree = interactive.feed_token(_end_token(source, last))
	return tree, token_pass.comments


def syntax_error(err: UnexpectedInput, text: str, *, offset: int = 0, file_name: str | None = None) -> ParseError:
	"""Convert a lark error into a ParseError pinned to the source text."""
	if isinstance(err, UnexpectedToken):
		tok = err.token
		if tok.type == "$END":
			message = "unexpected end of input"
		elif tok.type == "VSEMI":
			message = "unexpected end of statement"
		else:
			message = f"unexpected token {str(tok.value)!r}"
	elif isinstance(err, UnexpectedCharacters):
		message = f"unexpected character {err.char!r}"
	elif isinstance(err, UnexpectedEOF):
		message = "unexpected end of input"
	else:
		message = "invalid syntax"
	pos = getattr(err, "pos_in_stream", None)
	if isinstance(pos, int) and pos >= 0:
		span = Span.from_offset(text, offset + pos, file=file_name)
	else:
		span = Span(file=file_name, line=getattr(err, "line", None), column=getattr(err, "column", None))
	diag = Diagnostic(message=message, code="parse_error", phase="parser", span=span)
	return ParseError(message=message, diagnostic=diag)


# String and template literal decoding

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_LINE_CONTINUATIONS = frozenset({"\n", "\r\n", "\r", "\u2028", "\u2029"})


def _cook(raw: str) -> str:
	"""Interpret JavaScript escape sequences in the body of a string literal."""

	def _replace(match: re.Match[str]) -> str:
		esc = match.group(1)
		if esc.startswith("u{"):
			return chr(int(esc[2:-1], 16))
		if len(esc) > 1 and esc[0] in "ux":
			return chr(int(esc[1:], 16))
		if esc in _LINE_CONTINUATIONS:
			return ""
		return _SIMPLE_ESCAPES.get(esc, esc)

	return _ESCAPE_RE.sub(_replace, raw)


def _split_template(body: str) -> Tuple[List[str], List[Tuple[str, int]]]:
	"""
	Split a template literal body into raw text parts and `${...}` holes.

	Returns `(quasis, holes)` where each hole is `(source, offset)` relative to
	the body; `len(quasis) == len(holes) + 1`. An unterminated hole raises
	ValueError with the hole's offset as the second argument.
	"""
	quasis: List[str] = []
	holes: List[Tuple[str, int]] = []
	text_start = 0
	i = 0
	n = len(body)
	while i < n:
		ch = body[i]
		if ch == "\\":
			i += 2
			continue
		if ch == "$" and body.startswith("{", i + 1):
			quasis.append(body[text_start:i])
			start = i + 2
			depth = 1
			quote: Optional[str] = None
			j = start
			while j < n:
				c = body[j]
				if quote is not None:
					if c == "\\":
						j += 2
						continue
					if c == quote:
						quote = None
				elif c in "'\"":
					quote = c
				elif c == "{":
					depth += 1
				elif c == "}":
					depth -= 1
					if depth == 0:
						break
				j += 1
			if j >= n:
				raise ValueError("unterminated template substitution", i)
			holes.append((body[start:j], start))
			i = j + 1
			text_start = i
			continue
		i += 1
	quasis.append(body[text_start:])
	return quasis, holes


def _name(node: Tree) -> str:
	return node.data if isinstance(node.data, str) else node.data.value


def _subtrees(tree: Tree) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree)]


def _find(tree: Tree, rule: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == rule), None)


def _has(tree: Tree, token_type: str) -> bool:
	return any(isinstance(c, Token) and c.type == token_type for c in tree.children)


def _modifiers(tree: Tree) -> List[str]:
	return [str(c.value) for c in tree.children if isinstance(c, Token) and c.type == "MODIFIER_KW"]


class TreeBuilder:
	"""
	Build `ts2gas.syntax` nodes from a lark parse tree.

	`offset` shifts every position; it is non-zero only for template-hole
	fragments, which are parsed on their own and spliced into the file.
	"""

	def __init__(self, text: str, *, offset: int = 0, file_name: str | None = None) -> None:
		self.text = text
		self.offset = offset
		self.file_name = file_name

	# ------------------------------------------------------------ positions

	def _start(self, item: Tree | Token) -> int:
		if isinstance(item, Token):
			return item.start_pos + self.offset
		return getattr(item.meta, "start_pos", -1 - self.offset) + self.offset

	def _stop(self, item: Tree | Token) -> int:
		if isinstance(item, Token):
			return item.end_pos + self.offset
		return getattr(item.meta, "end_pos", -1 - self.offset) + self.offset

	def _at(self, node: N, item: Tree | Token) -> N:
		node.pos = self._start(item)
		node.end = self._stop(item)
		return node

	def _multi_line(self, item: Tree) -> bool:
		return "\n" in self.text[self._start(item) : self._stop(item)]

	def _error(self, message: str, item: Tree | Token) -> ParseError:
		span = Span.from_offset(self.text, self._start(item), file=self.file_name)
		return ParseError(
			message=message,
			diagnostic=Diagnostic(message=message, code="parse_error", phase="parser", span=span),
		)

	# ------------------------------------------------------------- dispatch

	def build(self, item: Tree | Token) -> Node:
		if isinstance(item, Token):
			return self._token(item)
		method = getattr(self, f"_build_{_name(item)}", None)
		if method is None:
			raise self._error(f"unsupported syntax '{_name(item)}'", item)
		return method(item)

	def _items(self, tree: Tree) -> List[Tree | Token]:
		"""Children minus the tokens that only steer the parser."""
		return [c for c in tree.children if not (isinstance(c, Token) and c.type in _STRUCTURAL)]

	def _statements(self, tree: Tree) -> List[Node]:
		return [self.build(c) for c in tree.children if isinstance(c, Tree)]

	def _ident(self, tok: Token) -> Identifier:
		ident = Identifier(str(tok.value))
		self._at(ident, tok)
		return ident

	def _token(self, tok: Token) -> Node:
		ty = tok.type
		if ty in ("NAME", "ARROW_PARAM"):
			return self._ident(tok)
		if ty == "NUMBER":
			node: Node = NumericLiteral(str(tok.value))
		elif ty == "STRING":
			node = StringLiteral(_cook(tok.value[1:-1]), raw=str(tok.value))
		elif ty == "TEMPLATE":
			return self._template(tok)
		elif ty == "THIS":
			node = ThisKeyword()
		elif ty == "TRUE":
			node = TrueKeyword()
		elif ty == "FALSE":
			node = FalseKeyword()
		elif ty == "NULL":
			node = NullKeyword()
		elif ty == "REGEX":
			node = RegularExpressionLiteral(str(tok.value))
		elif ty == "OMITTED":
			node = OmittedExpression()
		else:
			raise self._error(f"unexpected token {str(tok.value)!r}", tok)
		return self._at(node, tok)

	def _template(self, tok: Token) -> TemplateExpression:
		body = tok.value[1:-1]
		body_start = tok.start_pos + self.offset + 1
		try:
			raw_quasis, holes = _split_template(body)
		except ValueError as err:
			span = Span.from_offset(self.text, body_start + err.args[1], file=self.file_name)
			raise ParseError(
				message=err.args[0],
				diagnostic=Diagnostic(message=err.args[0], code="parse_error", phase="parser", span=span),
			) from None
		expressions: List[Node] = []
		for source, rel in holes:
			hole_offset = body_start + rel
			try:
				tree, _ = run_parser(source, "expression")
			except UnexpectedInput as err:
				raise syntax_error(err, self.text, offset=hole_offset, file_name=self.file_name) from None
			fragment = TreeBuilder(self.text, offset=hole_offset, file_name=self.file_name)
			expressions.append(fragment.build(tree))
		node = TemplateExpression([_cook(q) for q in raw_quasis], expressions)
		self._at(node, tok)
		return node

	def _type(self, item: Tree | Token) -> TypeNode:
		node = TypeNode()
		self._at(node, item)
		return node

	def _type_ann(self, tree: Tree) -> Optional[TypeNode]:
		ann = _find(tree, "type_ann")
		if ann is None:
			return None
		return self._type(ann.children[0])

	def _member_name(self, item: Tree | Token) -> Node:
		if isinstance(item, Tree):
			return self.build(item)
		return self._token(item)

	def _binding(self, item: Tree | Token) -> Node:
		if isinstance(item, Token):
			return self._ident(item)
		return self.build(item)

	# ------------------------------------------------------------ program

	def build_program(self, tree: Tree) -> SourceFile:
		sf = SourceFile(self._statements(tree), text=self.text)
		sf.pos = 0
		sf.end = len(self.text)
		if self.file_name is not None:
			sf.file_name = self.file_name
		return sf

	# ----------------------------------------------------------- variables

	def _var_declarations(self, tree: Tree) -> VariableDeclarationList:
		kind = _find(tree, "var_kind")
		assert kind is not None
		decls = [self.build(c) for c in _subtrees(tree) if _name(c) == "var_decl"]
		node = VariableDeclarationList(decls, str(kind.children[0].value))
		node.pos = self._start(kind)
		node.end = decls[-1].end if decls else self._stop(kind)
		return node

	def _build_var_stmt(self, tree: Tree) -> VariableStatement:
		node = VariableStatement(self._var_declarations(tree))
		return self._at(node, tree)

	def _build_var_decl(self, tree: Tree) -> VariableDeclaration:
		items = self._items(tree)
		name = self._binding(items[0])
		type_ = self._type_ann(tree)
		rest = [c for c in items[1:] if not (isinstance(c, Tree) and _name(c) == "type_ann")]
		init = self.build(rest[0]) if rest else None
		return self._at(VariableDeclaration(name, init, type_), tree)

	def _build_object_pattern(self, tree: Tree) -> ObjectBindingPattern:
		return self._at(ObjectBindingPattern([self.build(c) for c in _subtrees(tree)]), tree)

	def _build_array_pattern(self, tree: Tree) -> ArrayBindingPattern:
		return self._at(ArrayBindingPattern([self.build(c) for c in tree.children]), tree)

	def _build_bind_prop(self, tree: Tree) -> BindingElement:
		key, target, *init = tree.children
		node = BindingElement(
			self._binding(target),
			property_name=self._member_name(key),
			initializer=self.build(init[0]) if init else None,
		)
		return self._at(node, tree)

	def _build_bind_shorthand(self, tree: Tree) -> BindingElement:
		name, *init = tree.children
		node = BindingElement(self._binding(name), initializer=self.build(init[0]) if init else None)
		return self._at(node, tree)

	def _build_bind_rest(self, tree: Tree) -> BindingElement:
		node = BindingElement(self._binding(tree.children[0]), dot_dot_dot=True)
		return self._at(node, tree)

	def _build_array_bind(self, tree: Tree) -> BindingElement:
		target, *init = tree.children
		node = BindingElement(self._binding(target), initializer=self.build(init[0]) if init else None)
		return self._at(node, tree)

	# ----------------------------------------------------------- functions

	def _parameters(self, tree: Tree) -> List[Parameter]:
		params = _find(tree, "param_list")
		if params is None:
			return []
		return [self.build(c) for c in _subtrees(params)]

	def _build_param(self, tree: Tree) -> Parameter:
		items = [c for c in tree.children if not (isinstance(c, Token) and c.type == "MODIFIER_KW")]
		name = self._binding(items[0])
		question = False
		init = None
		for item in items[1:]:
			if isinstance(item, Tree) and _name(item) == "optional_mark":
				question = True
			elif isinstance(item, Tree) and _name(item) == "type_ann":
				continue
			else:
				init = self.build(item)
		node = Parameter(name, init, self._type_ann(tree), question=question, modifiers=_modifiers(tree))
		return self._at(node, tree)

	def _build_rest_param(self, tree: Tree) -> Parameter:
		node = Parameter(self._binding(tree.children[0]), type=self._type_ann(tree), dot_dot_dot=True)
		return self._at(node, tree)

	def _body(self, tree: Tree) -> Optional[Block]:
		block = _find(tree, "block")
		return self.build(block) if block is not None else None

	def _build_function_decl(self, tree: Tree) -> FunctionDeclaration:
		name_tok = next((c for c in tree.children if isinstance(c, Token) and c.type == "NAME"), None)
		node = FunctionDeclaration(
			self._ident(name_tok) if name_tok is not None else None,
			self._parameters(tree),
			self._body(tree),
			self._type_ann(tree),
		)
		return self._at(node, tree)

	def _build_function_expr(self, tree: Tree) -> FunctionExpression:
		name_tok = next((c for c in tree.children if isinstance(c, Token) and c.type == "NAME"), None)
		body = self._body(tree)
		assert body is not None
		node = FunctionExpression(
			self._ident(name_tok) if name_tok is not None else None,
			self._parameters(tree),
			body,
			self._type_ann(tree),
		)
		return self._at(node, tree)

	def _build_arrow_function(self, tree: Tree) -> ArrowFunction:
		first = tree.children[0]
		if isinstance(first, Token) and first.type == "ARROW_PARAM":
			param = Parameter(self._ident(first))
			self._at(param, first)
			params = [param]
		else:
			params = self._parameters(tree)
		body_item = tree.children[-1]
		node = ArrowFunction(params, self.build(body_item), self._type_ann(tree))
		return self._at(node, tree)

	# ------------------------------------------------------------- classes

	def _build_class_decl(self, tree: Tree) -> ClassDeclaration:
		name_tok = next((c for c in tree.children if isinstance(c, Token) and c.type == "NAME"), None)
		heritage = None
		extends = _find(tree, "extends_clause")
		if extends is not None:
			heritage = self.build(extends.children[0])
		implements: List[TypeNode] = []
		impl = _find(tree, "implements_clause")
		if impl is not None:
			implements = [self._type(c) for c in impl.children if not (isinstance(c, Token) and c.type == "IMPLEMENTS_KW")]
		body = _find(tree, "class_body")
		assert body is not None
		members = [self.build(c) for c in _subtrees(body)]
		node = ClassDeclaration(
			self._ident(name_tok) if name_tok is not None else None,
			members,
			heritage,
			implements,
		)
		return self._at(node, tree)

	def _build_abstract_class(self, tree: Tree) -> ClassDeclaration:
		inner = self.build(_subtrees(tree)[0])
		assert isinstance(inner, ClassDeclaration)
		inner.modifiers.insert(0, "abstract")
		return self._at(inner, tree)

	def _after_modifiers(self, tree: Tree, *skip: str) -> List[Tree | Token]:
		return [c for c in self._items(tree) if not (isinstance(c, Token) and c.type in ("MODIFIER_KW",) + skip)]

	def _build_method_member(self, tree: Tree) -> Node:
		items = self._after_modifiers(tree)
		name_item = items[0]
		params = self._parameters(tree)
		body = self._body(tree)
		if isinstance(name_item, Token) and name_item.type == "NAME" and name_item.value == "constructor":
			node: Node = Constructor(params, body, _modifiers(tree))
		else:
			node = MethodDeclaration(
				self._member_name(name_item),
				params,
				body,
				self._type_ann(tree),
				_modifiers(tree),
				question=_find(tree, "optional_mark") is not None,
			)
		return self._at(node, tree)

	def _build_property_member(self, tree: Tree) -> PropertyDeclaration:
		items = self._after_modifiers(tree, "BANG")
		name = self._member_name(items[0])
		init = None
		for item in items[1:]:
			if isinstance(item, Tree) and _name(item) in ("optional_mark", "type_ann"):
				continue
			init = self.build(item)
		node = PropertyDeclaration(name, init, self._type_ann(tree), _modifiers(tree))
		return self._at(node, tree)

	def _build_get_member(self, tree: Tree) -> GetAccessor:
		items = self._after_modifiers(tree, "GET_KW")
		body = self._body(tree)
		node = GetAccessor(self._member_name(items[0]), body, self._type_ann(tree), _modifiers(tree))
		return self._at(node, tree)

	def _build_set_member(self, tree: Tree) -> SetAccessor:
		items = self._after_modifiers(tree, "SET_KW")
		body = self._body(tree)
		node = SetAccessor(self._member_name(items[0]), self._parameters(tree), body, _modifiers(tree))
		return self._at(node, tree)

	def _build_index_member(self, tree: Tree) -> IndexSignature:
		return self._at(IndexSignature(_modifiers(tree)), tree)

	def _build_computed_name(self, tree: Tree) -> ComputedPropertyName:
		return self._at(ComputedPropertyName(self.build(tree.children[0])), tree)

	# ------------------------------------------------- enums, namespaces, types

	def _build_enum_decl(self, tree: Tree) -> EnumDeclaration:
		name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
		members = [self.build(c) for c in _subtrees(tree)]
		modifiers = ["const"] if _has(tree, "CONST") else []
		node = EnumDeclaration(self._ident(name_tok), members, modifiers)
		return self._at(node, tree)

	def _build_enum_member(self, tree: Tree) -> EnumMember:
		name, *init = tree.children
		node = EnumMember(self._member_name(name), self.build(init[0]) if init else None)
		return self._at(node, tree)

	def _build_namespace_decl(self, tree: Tree) -> ModuleDeclaration:
		names = [c for c in tree.children if isinstance(c, Token) and c.type in ("NAME", "STRING")]
		block = _find(tree, "block")
		assert block is not None
		body: Node = ModuleBlock(self._statements(block))
		self._at(body, block)
		# `namespace A.B.C {}` nests innermost-last.
		for tok in reversed(names[1:]):
			inner = ModuleDeclaration(self._ident(tok), body)
			inner.pos = self._start(tok)
			inner.end = self._stop(tree)
			body = inner
		node = ModuleDeclaration(self._member_name(names[0]), body)
		return self._at(node, tree)

	def _build_interface_decl(self, tree: Tree) -> InterfaceDeclaration:
		name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
		return self._at(InterfaceDeclaration(self._ident(name_tok)), tree)

	def _build_type_alias(self, tree: Tree) -> TypeAliasDeclaration:
		items = [c for c in self._items(tree) if not (isinstance(c, Token) and c.type == "TYPE_KW")]
		name = self._ident(items[0])
		rest = [c for c in items[1:] if not (isinstance(c, Tree) and _name(c) == "type_params")]
		node = TypeAliasDeclaration(name, self._type(rest[0]) if rest else None)
		return self._at(node, tree)

	def _build_declare_stmt(self, tree: Tree) -> Node:
		inner = self.build(_subtrees(tree)[0])
		inner.modifiers.insert(0, "declare")
		return self._at(inner, tree)

	# ------------------------------------------------------------ statements

	def _build_block(self, tree: Tree) -> Block:
		node = Block(self._statements(tree), multi_line=self._multi_line(tree))
		return self._at(node, tree)

	def _build_expr_stmt(self, tree: Tree) -> ExpressionStatement:
		return self._at(ExpressionStatement(self.build(self._items(tree)[0])), tree)

	def _build_if_stmt(self, tree: Tree) -> IfStatement:
		cond, then, *rest = self._items(tree)
		node = IfStatement(self.build(cond), self.build(then), self.build(rest[0]) if rest else None)
		return self._at(node, tree)

	def _build_for_stmt(self, tree: Tree) -> ForStatement:
		parts: dict[str, Optional[Node]] = {"for_init": None, "for_cond": None, "for_update": None}
		for child in _subtrees(tree)[:-1]:
			key = _name(child)
			if key == "for_init" and _find(child, "var_kind") is not None:
				parts[key] = self._var_declarations(child)
			else:
				parts[key] = self.build(child.children[0])
		body = self.build(tree.children[-1])
		node = ForStatement(parts["for_init"], parts["for_cond"], parts["for_update"], body)
		return self._at(node, tree)

	def _loop_binding(self, tree: Tree) -> VariableDeclarationList:
		kind = _find(tree, "var_kind")
		assert kind is not None
		target = tree.children[1]
		decl = VariableDeclaration(self._binding(target))
		self._at(decl, target)
		node = VariableDeclarationList([decl], str(kind.children[0].value))
		node.pos = self._start(kind)
		node.end = decl.end
		return node

	def _build_for_in_stmt(self, tree: Tree) -> ForInStatement:
		node = ForInStatement(self._loop_binding(tree), self.build(tree.children[3]), self.build(tree.children[4]))
		return self._at(node, tree)

	def _build_for_of_stmt(self, tree: Tree) -> ForOfStatement:
		node = ForOfStatement(self._loop_binding(tree), self.build(tree.children[3]), self.build(tree.children[4]))
		return self._at(node, tree)

	def _build_while_stmt(self, tree: Tree) -> WhileStatement:
		cond, body = self._items(tree)
		return self._at(WhileStatement(self.build(cond), self.build(body)), tree)

	def _build_do_stmt(self, tree: Tree) -> DoStatement:
		body, cond = self._items(tree)[:2]
		return self._at(DoStatement(self.build(body), self.build(cond)), tree)

	def _build_return_stmt(self, tree: Tree) -> ReturnStatement:
		items = self._items(tree)
		return self._at(ReturnStatement(self.build(items[0]) if items else None), tree)

	def _label(self, tree: Tree) -> Optional[Identifier]:
		name = next((c for c in tree.children if isinstance(c, Token) and c.type == "NAME"), None)
		return self._ident(name) if name is not None else None

	def _build_break_stmt(self, tree: Tree) -> BreakStatement:
		return self._at(BreakStatement(self._label(tree)), tree)

	def _build_continue_stmt(self, tree: Tree) -> ContinueStatement:
		return self._at(ContinueStatement(self._label(tree)), tree)

	def _build_labeled_stmt(self, tree: Tree) -> LabeledStatement:
		label, statement = tree.children
		return self._at(LabeledStatement(self._ident(label), self.build(statement)), tree)

	def _build_throw_stmt(self, tree: Tree) -> ThrowStatement:
		return self._at(ThrowStatement(self.build(self._items(tree)[0])), tree)

	def _build_try_stmt(self, tree: Tree) -> TryStatement:
		block = self.build(tree.children[0])
		catch = _find(tree, "catch_clause")
		final = _find(tree, "finally_clause")
		node = TryStatement(
			block,
			self.build(catch) if catch is not None else None,
			self.build(final.children[0]) if final is not None else None,
		)
		return self._at(node, tree)

	def _build_catch_clause(self, tree: Tree) -> CatchClause:
		items = [c for c in tree.children if not (isinstance(c, Tree) and _name(c) == "type_ann")]
		variable = self._binding(items[0]) if len(items) > 1 else None
		node = CatchClause(variable, self.build(items[-1]))
		return self._at(node, tree)

	def _build_switch_stmt(self, tree: Tree) -> SwitchStatement:
		items = self._items(tree)
		node = SwitchStatement(self.build(items[0]), [self.build(c) for c in items[1:] if isinstance(c, Tree)])
		return self._at(node, tree)

	def _build_case_clause(self, tree: Tree) -> CaseClause:
		items = self._items(tree)
		node = CaseClause(self.build(items[0]), [self.build(c) for c in items[1:] if isinstance(c, Tree)])
		return self._at(node, tree)

	def _build_default_clause(self, tree: Tree) -> DefaultClause:
		return self._at(DefaultClause(self._statements(tree)), tree)

	def _build_empty_stmt(self, tree: Tree) -> EmptyStatement:
		return self._at(EmptyStatement(), tree)

	# --------------------------------------------------------- module syntax

	def _specifier(self, tree: Tree) -> StringLiteral:
		tok = next(c for c in reversed(tree.children) if isinstance(c, Token) and c.type == "STRING")
		return self._token(tok)

	def _build_import_decl(self, tree: Tree) -> ImportDeclaration:
		clause = self.build(_find(tree, "import_clause"))
		assert isinstance(clause, ImportClause)
		clause.is_type_only = _has(tree, "TYPE_KW")
		return self._at(ImportDeclaration(clause, self._specifier(tree)), tree)

	def _build_import_bare(self, tree: Tree) -> ImportDeclaration:
		return self._at(ImportDeclaration(None, self._specifier(tree)), tree)

	def _build_import_clause(self, tree: Tree) -> ImportClause:
		name = None
		bindings = None
		for child in tree.children:
			if isinstance(child, Token):
				name = self._ident(child)
			else:
				bindings = self.build(child)
		return self._at(ImportClause(name, bindings), tree)

	def _build_namespace_import(self, tree: Tree) -> NamespaceImport:
		return self._at(NamespaceImport(self._ident(tree.children[-1])), tree)

	def _build_named_imports(self, tree: Tree) -> NamedImports:
		return self._at(NamedImports([self.build(c) for c in _subtrees(tree)]), tree)

	def _spec_parts(self, tree: Tree) -> Tuple[Identifier, Optional[Identifier], bool]:
		names = [self._ident(c) for c in tree.children if isinstance(c, Token) and c.type == "NAME"]
		type_only = _has(tree, "TYPE_KW")
		if len(names) == 2:
			return names[1], names[0], type_only
		return names[0], None, type_only

	def _build_import_spec(self, tree: Tree) -> ImportSpecifier:
		name, prop, type_only = self._spec_parts(tree)
		return self._at(ImportSpecifier(name, prop, type_only), tree)

	def _build_export_spec(self, tree: Tree) -> ExportSpecifier:
		name, prop, type_only = self._spec_parts(tree)
		return self._at(ExportSpecifier(name, prop, type_only), tree)

	def _build_import_equals(self, tree: Tree) -> ImportEqualsDeclaration:
		name = self._ident(tree.children[0])
		ref = self.build(_subtrees(tree)[0])
		return self._at(ImportEqualsDeclaration(name, ref), tree)

	def _build_entity_name(self, tree: Tree) -> Node:
		toks = [c for c in tree.children if isinstance(c, Token)]
		expr: Node = self._ident(toks[0])
		for tok in toks[1:]:
			access = PropertyAccessExpression(expr, self._ident(tok))
			access.pos = expr.pos
			access.end = self._stop(tok)
			expr = access
		return expr

	def _build_external_ref(self, tree: Tree) -> ExternalModuleReference:
		func, spec = tree.children
		if func.value != "require":
			raise self._error(f"expected 'require' in import-equals declaration, found '{func}'", func)
		return self._at(ExternalModuleReference(self._token(spec)), tree)

	def _build_export_decl(self, tree: Tree) -> Node:
		inner = self.build(_subtrees(tree)[0])
		inner.modifiers.insert(0, "export")
		return self._at(inner, tree)

	def _build_export_default_decl(self, tree: Tree) -> Node:
		inner = self.build(_subtrees(tree)[0])
		inner.modifiers[0:0] = ["export", "default"]
		return self._at(inner, tree)

	def _build_export_default_expr(self, tree: Tree) -> ExportAssignment:
		return self._at(ExportAssignment(self.build(self._items(tree)[0])), tree)

	def _build_export_equals(self, tree: Tree) -> ExportAssignment:
		node = ExportAssignment(self.build(self._items(tree)[0]), is_export_equals=True)
		return self._at(node, tree)

	def _build_export_named(self, tree: Tree) -> ExportDeclaration:
		specs = [self.build(c) for c in _subtrees(tree)]
		clause = NamedExports(specs)
		if specs:
			clause.pos = specs[0].pos
			clause.end = specs[-1].end
		spec = self._specifier(tree) if _has(tree, "FROM_KW") else None
		node = ExportDeclaration(clause, spec, _has(tree, "TYPE_KW"))
		return self._at(node, tree)

	def _build_export_all(self, tree: Tree) -> ExportDeclaration:
		clause = None
		if _has(tree, "AS_KW"):
			name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
			clause = NamespaceExport(self._ident(name_tok))
			self._at(clause, name_tok)
		node = ExportDeclaration(clause, self._specifier(tree), _has(tree, "TYPE_KW"))
		return self._at(node, tree)

	# ------------------------------------------------------------ expressions

	def _binary(self, tree: Tree, left: Tree | Token, op: str, right: Tree | Token) -> BinaryExpression:
		node = BinaryExpression(self.build(left), op, self.build(right))
		return self._at(node, tree)

	def _build_comma_expr(self, tree: Tree) -> BinaryExpression:
		left, right = tree.children
		return self._binary(tree, left, ",", right)

	def _build_assign(self, tree: Tree) -> BinaryExpression:
		left, right = tree.children
		return self._binary(tree, left, "=", right)

	def _build_compound_assign(self, tree: Tree) -> BinaryExpression:
		left, op, right = tree.children
		return self._binary(tree, left, str(op), right)

	def _build_binary(self, tree: Tree) -> BinaryExpression:
		left, op, right = tree.children
		return self._binary(tree, left, str(op), right)

	def _build_cond_expr(self, tree: Tree) -> ConditionalExpression:
		cond, when_true, when_false = tree.children
		node = ConditionalExpression(self.build(cond), self.build(when_true), self.build(when_false))
		return self._at(node, tree)

	def _build_as_expr(self, tree: Tree) -> AsExpression:
		expr, _, type_ = tree.children
		return self._at(AsExpression(self.build(expr), self._type(type_)), tree)

	def _build_prefix(self, tree: Tree) -> PrefixUnaryExpression:
		op, operand = tree.children
		return self._at(PrefixUnaryExpression(str(op), self.build(operand)), tree)

	def _build_postfix(self, tree: Tree) -> PostfixUnaryExpression:
		operand, op = tree.children
		return self._at(PostfixUnaryExpression(self.build(operand), str(op)), tree)

	def _arguments(self, tree: Tree) -> List[Node]:
		return [self.build(c) for c in tree.children]

	def _build_call(self, tree: Tree) -> CallExpression:
		callee, args = tree.children
		node = CallExpression(self.build(callee), self._arguments(args))
		return self._at(node, tree)

	def _super(self, tree: Tree) -> SuperKeyword:
		node = SuperKeyword()
		node.pos = self._start(tree)
		node.end = node.pos + len("super")
		return node

	def _build_super_call(self, tree: Tree) -> CallExpression:
		node = CallExpression(self._super(tree), self._arguments(tree.children[0]))
		return self._at(node, tree)

	def _build_super_member(self, tree: Tree) -> PropertyAccessExpression:
		node = PropertyAccessExpression(self._super(tree), self._ident(tree.children[0]))
		return self._at(node, tree)

	def _build_new(self, tree: Tree) -> NewExpression:
		callee, args = tree.children
		node = NewExpression(self.build(callee), self._arguments(args))
		return self._at(node, tree)

	def _build_new_bare(self, tree: Tree) -> NewExpression:
		return self._at(NewExpression(self.build(tree.children[0])), tree)

	def _build_member(self, tree: Tree) -> PropertyAccessExpression:
		obj, name = tree.children
		node = PropertyAccessExpression(self.build(obj), self._ident(name))
		return self._at(node, tree)

	def _build_index(self, tree: Tree) -> ElementAccessExpression:
		obj, arg = tree.children
		return self._at(ElementAccessExpression(self.build(obj), self.build(arg)), tree)

	def _build_non_null(self, tree: Tree) -> NonNullExpression:
		return self._at(NonNullExpression(self.build(tree.children[0])), tree)

	def _build_spread(self, tree: Tree) -> SpreadElement:
		return self._at(SpreadElement(self.build(tree.children[0])), tree)

	def _build_paren_expr(self, tree: Tree) -> ParenthesizedExpression:
		return self._at(ParenthesizedExpression(self.build(tree.children[0])), tree)

	def _build_array_literal(self, tree: Tree) -> ArrayLiteralExpression:
		node = ArrayLiteralExpression([self.build(c) for c in tree.children], multi_line=self._multi_line(tree))
		return self._at(node, tree)

	def _build_object_literal(self, tree: Tree) -> ObjectLiteralExpression:
		node = ObjectLiteralExpression([self.build(c) for c in tree.children], multi_line=self._multi_line(tree))
		return self._at(node, tree)

	def _build_prop_assign(self, tree: Tree) -> PropertyAssignment:
		key, value = tree.children
		return self._at(PropertyAssignment(self._member_name(key), self.build(value)), tree)

	def _build_shorthand_prop(self, tree: Tree) -> ShorthandPropertyAssignment:
		return self._at(ShorthandPropertyAssignment(self._ident(tree.children[0])), tree)

	def _build_spread_prop(self, tree: Tree) -> SpreadAssignment:
		return self._at(SpreadAssignment(self.build(tree.children[0])), tree)

	def _build_method_prop(self, tree: Tree) -> MethodDeclaration:
		node = MethodDeclaration(
			self._member_name(tree.children[0]),
			self._parameters(tree),
			self._body(tree),
			self._type_ann(tree),
		)
		return self._at(node, tree)

	def _build_get_prop(self, tree: Tree) -> GetAccessor:
		node = GetAccessor(self._member_name(tree.children[1]), self._body(tree), self._type_ann(tree))
		return self._at(node, tree)

	def _build_set_prop(self, tree: Tree) -> SetAccessor:
		node = SetAccessor(self._member_name(tree.children[1]), self._parameters(tree), self._body(tree))
		return self._at(node, tree)


__all__ = ["TreeBuilder", "run_parser", "syntax_error"]
