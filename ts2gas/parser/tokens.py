# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token pass between the lark lexer and the LALR parser.

JavaScript syntax is not LALR(1) as written: statements may end at a line
break, `{` opens either a block or an object literal, `(` opens either a
parenthesized expression or an arrow-function parameter list, and many
TypeScript keywords are ordinary identifiers outside their own positions.
`TokenPass.process` resolves all of that on the token stream so the grammar
can stay a plain LALR grammar:

- `VSEMI` terminators are inserted at line breaks, before a `}` that closes a
  statement list and at end of input, wherever a statement can end and the
  next token cannot continue it;
- `{` in statement position (and the body brace of class, interface and
  namespace headers) becomes `BLOCK_LBRACE`;
- `(` whose matching `)` is followed by `=>` becomes `ARROW_LPAR`; a lone
  name followed by `=>` becomes `ARROW_PARAM`;
- `function` in statement position becomes `FUNCTION_DECL`;
- contextual keywords become the `*_KW` terminals declared in the grammar and
  reserved words used as property names become `NAME`;
- adjacent `>` tokens are merged into `>>`/`>>>` unless they close type
  arguments;
- an `OMITTED` token marks each hole in an array literal or pattern;
- the statement after `label:` is treated like one after `case x:`.

Regular expression literals are masked before lexing (see `regex`).

Whitespace and comments arrive from the lexer too (`dont_ignore=True`); they
are dropped here, comments are collected on `comments`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from lark import Token

from ts2gas.syntax.nodes import Comment

# Token types produced from reserved words (lark names anonymous keyword
# strings after their upper-cased text).
KEYWORD_TYPES = frozenset(
	{
		"BREAK", "CASE", "CATCH", "CLASS", "CONST", "CONTINUE", "DEFAULT", "DELETE", "DO",
		"ELSE", "ENUM", "EXPORT", "EXTENDS", "FALSE", "FINALLY", "FOR", "FUNCTION", "IF",
		"IMPORT", "IN", "INSTANCEOF", "LET", "NEW", "NULL", "RETURN", "SUPER", "SWITCH",
		"THIS", "THROW", "TRUE", "TRY", "TYPEOF", "VAR", "VOID", "WHILE",
	}
)

# Tokens after which a statement may end.
CAN_END = frozenset(
	{
		"NAME", "NUMBER", "STRING", "TEMPLATE", "RPAR", "RSQB", "RBRACE", "THIS", "TRUE",
		"FALSE", "NULL", "VOID", "RETURN", "BREAK", "CONTINUE", "PLUSPLUS", "MINUSMINUS",
		"BANG", "REGEX",
	}
)

# Tokens that continue the previous line instead of starting a statement.
CONTINUATION = frozenset(
	{
		"DOT", "COMMA", "RPAR", "RSQB", "QMARK", "COLON", "EQUAL", "_ARROW", "ASSIGN_OP",
		"OR_OP", "AND_OP", "BIT_OR", "BIT_AND", "BIT_XOR", "EQ_OP", "REL_OP", "LT", "GT",
		"SHIFT_OP", "PLUS", "MINUS", "STAR", "SLASH", "PERCENT", "STARSTAR", "INSTANCEOF",
		"IN", "AS_KW", "LPAR", "LSQB", "ELSE", "CATCH", "FINALLY", "EXTENDS",
		"IMPLEMENTS_KW", "FROM_KW", "OF_KW",
	}
)

# Tokens a type expression may consist of (used by the look-ahead scans).
_TYPE_SCAN = frozenset(
	{
		"NAME", "DOT", "LT", "GT", "LSQB", "RSQB", "BIT_OR", "BIT_AND", "STRING", "NUMBER",
		"VOID", "NULL", "TRUE", "FALSE", "THIS", "TYPEOF", "COMMA", "EXTENDS", "EQUAL",
	}
)

# A `(` after one of these is a call, never an arrow parameter list.
_CALLEE_END = frozenset({"NAME", "RPAR", "RSQB", "STRING", "TEMPLATE", "THIS", "SUPER", "BANG"})

MODIFIERS = frozenset({"public", "private", "protected", "readonly", "static", "override", "abstract", "declare"})

# Tokens that can never be a class/object member name or modifier target.
_NOT_MEMBER_NEXT = frozenset(
	{"COLON", "LPAR", "ARROW_LPAR", "QMARK", "COMMA", "RPAR", "RBRACE", "EQUAL", "SEMICOLON", "BANG", "LT", "$END"}
)

_BLOCK_PREV = frozenset({"SEMICOLON", "VSEMI", "RPAR", "_ARROW", "ELSE", "TRY", "FINALLY", "DO", "CATCH"})


@dataclass
class _Ctx:
	"""One open bracket: kind is stmt/class/obj/enum/paren/bracket."""

	kind: str
	opener: Optional[Token] = None
	is_params: bool = False
	is_for: bool = False
	after_do: bool = False
	module_braces: bool = False


class TokenPass:
	"""Per-parse token rewriter; create a fresh instance for every parse."""

	def __init__(self, *, expression: bool = False) -> None:
		self.comments: List[Comment] = []
		self._expression = expression

	# ------------------------------------------------------------------ setup

	def _collect(self, stream: Iterable[Token]) -> None:
		self.toks: List[Token] = []
		self.nl: List[bool] = []
		newline = False
		for tok in stream:
			if tok.type == "WS":
				if "\n" in tok.value:
					newline = True
				continue
			if tok.type == "COMMENT":
				self.comments.append(Comment(text=str(tok.value), pos=tok.start_pos, end=tok.end_pos))
				if "\n" in tok.value:
					newline = True
				continue
			self.toks.append(tok)
			self.nl.append(newline)
			newline = False
		self.nl_at_end = newline

	def _scan(self) -> None:
		toks = self.toks
		self.match: dict[int, int] = {}
		stack: List[int] = []
		pairs = {"RPAR": "LPAR", "RSQB": "LSQB", "RBRACE": "LBRACE"}
		for i, tok in enumerate(toks):
			if tok.type in ("LPAR", "LSQB", "LBRACE"):
				stack.append(i)
			elif tok.type in pairs:
				if stack and toks[stack[-1]].type == pairs[tok.type]:
					self.match[stack.pop()] = i
		self.arrow_lpar: set[int] = set()
		self.arrow_param: set[int] = set()
		self.type_gt: set[int] = set()
		for i, tok in enumerate(toks):
			if tok.type == "LPAR" and i in self.match and self._is_arrow_params(i):
				self.arrow_lpar.add(i)
			elif tok.type == "NAME" and self._type_at(i + 1) == "_ARROW":
				if i == 0 or toks[i - 1].type != "DOT":
					self.arrow_param.add(i)
			elif tok.type == "LT":
				self._scan_type_args(i)

	def _type_at(self, i: int) -> str:
		if 0 <= i < len(self.toks):
			return self.toks[i].type
		return "$END"

	def _value_at(self, i: int) -> str:
		if 0 <= i < len(self.toks):
			return str(self.toks[i].value)
		return ""

	def _is_arrow_params(self, i: int) -> bool:
		if i > 0 and self.toks[i - 1].type in _CALLEE_END:
			return False
		j = self.match[i]
		after = self._type_at(j + 1)
		if after == "_ARROW":
			return True
		if after != "COLON":
			return False
		# `(...): ReturnType =>`
		depth = 0
		k = j + 2
		while k < len(self.toks):
			ty = self.toks[k].type
			if ty == "_ARROW" and depth == 0:
				return True
			if ty not in _TYPE_SCAN or (ty in ("COMMA", "EQUAL") and depth == 0):
				return False
			if ty == "LT":
				depth += 1
			elif ty == "GT":
				depth -= 1
				if depth < 0:
					return False
			k += 1
		return False

	def _scan_type_args(self, i: int) -> None:
		depth = 0
		seen: List[int] = []
		k = i
		while k < len(self.toks):
			ty = self.toks[k].type
			if ty == "LT":
				depth += 1
			elif ty == "GT":
				depth -= 1
				seen.append(k)
				if depth == 0:
					self.type_gt.update(seen)
					return
			elif ty not in _TYPE_SCAN:
				return
			k += 1

	# ------------------------------------------------------------ predicates

	@property
	def _top(self) -> _Ctx:
		return self.stack[-1]

	def _can_end(self, tok: Optional[Token]) -> bool:
		if tok is None:
			return False
		if tok.type == "GT":
			return self.prev_index in self.type_gt
		return tok.type in CAN_END

	def _stmt_start(self, nl: bool) -> bool:
		prev = self.prev
		top = self._top
		if top.kind != "stmt":
			return False
		if prev is None or prev.type in ("SEMICOLON", "VSEMI"):
			return True
		if prev.type == "BLOCK_LBRACE" and prev is top.opener:
			return True
		if prev.type == "RBRACE" and self.prev_closed is not None and self.prev_closed.kind in ("stmt", "class"):
			return True
		if self.prev_case_colon:
			return True
		return nl and self._can_end(prev)

	def _member_start(self, nl: bool) -> bool:
		prev = self.prev
		top = self._top
		if top.kind not in ("class", "obj", "enum") or prev is None:
			return False
		if prev is top.opener:
			return True
		if top.kind in ("obj", "enum") and prev.type == "COMMA":
			return True
		if top.kind == "class":
			if prev.type in ("SEMICOLON", "VSEMI", "RBRACE"):
				return True
			if nl and self._can_end(prev):
				return True
		return prev.type in ("MODIFIER_KW", "GET_KW", "SET_KW")

	def _block_position(self, nl: bool) -> bool:
		prev = self.prev
		top = self._top
		if prev is None:
			return True
		if prev.type in _BLOCK_PREV:
			return True
		if top.kind == "stmt":
			if prev.type == "BLOCK_LBRACE" and prev is top.opener:
				return True
			if prev.type == "RBRACE" and self.prev_closed is not None and self.prev_closed.kind in ("stmt", "class"):
				return True
			if self.prev_case_colon:
				return True
			if nl and self._can_end(prev):
				return True
		return False

	# -------------------------------------------------------------- retagging

	def _retag(self, i: int, tok: Token, nl: bool) -> str:
		ty = tok.type
		prev_ty = self.prev.type if self.prev is not None else None
		nxt = self._type_at(i + 1)
		if ty in KEYWORD_TYPES:
			if prev_ty in ("DOT", "AS_KW"):
				return "NAME"
			if self._member_start(nl) and (nxt in _NOT_MEMBER_NEXT or (nxt == "NAME" and self._value_at(i + 1) == "as")):
				return "NAME"
			if ty == "FUNCTION" and (self._stmt_start(nl) or prev_ty in ("EXPORT", "DEFAULT", "DECLARE_KW")):
				return "FUNCTION_DECL"
			return ty
		if ty == "LPAR" and i in self.arrow_lpar:
			return "ARROW_LPAR"
		if ty != "NAME":
			return ty
		if i in self.arrow_param:
			return "ARROW_PARAM"
		if prev_ty == "DOT":
			return "NAME"
		value = str(tok.value)
		nxt_value = self._value_at(i + 1)
		decl_prefix = prev_ty in ("EXPORT", "DECLARE_KW", "DEFAULT")
		if value == "from":
			if self.module_stmt and nxt == "STRING":
				return "FROM_KW"
		elif value == "as":
			if (self._can_end(self.prev) or prev_ty == "STAR") and nxt not in _NOT_MEMBER_NEXT and nxt not in (
				"RSQB", "DOT", "_ARROW",
			):
				return "AS_KW"
		elif value == "of":
			if self._top.is_for and prev_ty in ("NAME", "RBRACE", "RSQB"):
				return "OF_KW"
		elif value == "type":
			if prev_ty == "IMPORT":
				if nxt in ("LBRACE", "STAR") or (nxt == "NAME" and self._type_at(i + 2) != "STRING"):
					return "TYPE_KW"
			elif prev_ty == "EXPORT" and nxt in ("LBRACE", "STAR"):
				return "TYPE_KW"
			elif self._top.module_braces and nxt == "NAME" and nxt_value != "as":
				return "TYPE_KW"
			elif nxt == "NAME" and (self._stmt_start(nl) or decl_prefix) and self._type_at(i + 2) in ("EQUAL", "LT"):
				return "TYPE_KW"
		elif value == "interface":
			if nxt == "NAME" and (self._stmt_start(nl) or decl_prefix):
				return "INTERFACE_KW"
		elif value in ("namespace", "module"):
			if nxt in ("NAME", "STRING") and (self._stmt_start(nl) or decl_prefix):
				return "NAMESPACE_KW"
		elif value == "declare":
			if self._stmt_start(nl) or prev_ty == "EXPORT":
				if nxt in ("VAR", "LET", "CONST", "FUNCTION", "CLASS", "ENUM") or (
					nxt == "NAME" and nxt_value in ("namespace", "module", "interface", "type", "abstract")
				):
					return "DECLARE_KW"
		elif value == "abstract" and nxt == "CLASS":
			if self._stmt_start(nl) or decl_prefix:
				return "ABSTRACT_KW"
		elif value == "implements":
			if self.header is not None and self.header[0] == "class":
				return "IMPLEMENTS_KW"
		if value in MODIFIERS and nxt not in _NOT_MEMBER_NEXT:
			top = self._top
			if top.kind in ("class", "obj") and self._member_start(nl):
				return "MODIFIER_KW"
			if top.is_params and prev_ty in ("LPAR", "ARROW_LPAR", "COMMA", "MODIFIER_KW"):
				return "MODIFIER_KW"
		if value in ("get", "set") and self._top.kind in ("class", "obj") and self._member_start(nl):
			if nxt in ("NAME", "STRING", "NUMBER", "LSQB") or nxt in KEYWORD_TYPES:
				return "GET_KW" if value == "get" else "SET_KW"
		return "NAME"

	def _is_params(self, i: int) -> bool:
		"""Whether the `(` at raw index i opens a function parameter list."""
		toks = self.toks
		j = i - 1
		if j >= 0 and toks[j].type == "GT":
			depth = 0
			while j >= 0:
				if toks[j].type == "GT":
					depth += 1
				elif toks[j].type == "LT":
					depth -= 1
					if depth == 0:
						break
				j -= 1
			j -= 1
		if j >= 0 and toks[j].type == "QMARK":
			j -= 1
		if j < 0:
			return False
		if toks[j].type == "FUNCTION":
			return True
		if j in self.member_names:
			return True
		return toks[j].type == "NAME" and j > 0 and toks[j - 1].type == "FUNCTION"

	# ------------------------------------------------------------ main pass

	def _needs_vsemi(self, ty: str, nl: bool) -> bool:
		prev = self.prev
		if prev is None or prev.type in ("SEMICOLON", "VSEMI"):
			return False
		if ty == "SEMICOLON":
			return False
		if self._top.kind == "obj":
			# Newline-separated members only occur in object types.
			return nl and self._can_end(prev) and ty not in CONTINUATION and ty not in ("RBRACE", "$END")
		if self._top.kind not in ("stmt", "class"):
			return False
		if ty in ("RBRACE", "$END"):
			return self._can_end(prev)
		if ty == "ELSE":
			if prev.type == "RBRACE" and self.prev_closed is not None and self.prev_closed.kind == "stmt":
				return False
			return self._can_end(prev)
		if not nl or not self._can_end(prev):
			return False
		if ty in CONTINUATION:
			return False
		if ty == "WHILE" and prev.type == "RBRACE" and self.prev_closed is not None and self.prev_closed.after_do:
			return False
		if ty == "LBRACE" and (self.header is not None or self.ret_type is not None):
			return False
		return True

	def _vsemi(self) -> Token:
		prev = self.prev
		assert prev is not None
		return Token(
			"VSEMI",
			"",
			start_pos=prev.end_pos,
			line=prev.end_line,
			column=prev.end_column,
			end_line=prev.end_line,
			end_column=prev.end_column,
			end_pos=prev.end_pos,
		)

	def _omitted(self, comma: Token) -> Token:
		return Token(
			"OMITTED",
			"",
			start_pos=comma.start_pos,
			line=comma.line,
			column=comma.column,
			end_line=comma.line,
			end_column=comma.column,
			end_pos=comma.start_pos,
		)

	def _merge_shift(self, i: int) -> tuple[Token, int]:
		"""Merge `>` `>` (`>`) starting at raw index i into one SHIFT_OP token."""
		toks = self.toks
		j = i
		while (
			j + 1 < len(toks)
			and j - i < 2
			and toks[j + 1].type == "GT"
			and toks[j + 1].start_pos == toks[j].end_pos
			and (j + 1) not in self.type_gt
		):
			j += 1
		if j == i:
			return toks[i], i
		first, last = toks[i], toks[j]
		merged = Token(
			"SHIFT_OP",
			">" * (j - i + 1),
			start_pos=first.start_pos,
			line=first.line,
			column=first.column,
			end_line=last.end_line,
			end_column=last.end_column,
			end_pos=last.end_pos,
		)
		return merged, j

	def _emit(self, tok: Token, index: int) -> Token:
		ty = tok.type
		depth = len(self.stack)
		closed: Optional[_Ctx] = None
		case_colon = False

		if ty in ("LPAR", "ARROW_LPAR"):
			prev_ty = self.prev.type if self.prev is not None else None
			self.stack.append(
				_Ctx(
					"paren",
					tok,
					is_params=ty == "ARROW_LPAR" or self._is_params(index),
					is_for=prev_ty == "FOR",
				)
			)
		elif ty == "LSQB":
			self.stack.append(_Ctx("bracket", tok))
		elif ty in ("RPAR", "RSQB"):
			if len(self.stack) > 1:
				closed = self.stack.pop()
				if ty == "RPAR" and closed.is_params and self._type_at(index + 1) == "COLON":
					self.ret_type = len(self.stack)
		elif ty == "RBRACE":
			if len(self.stack) > 1:
				closed = self.stack.pop()
		elif ty in ("LBRACE", "BLOCK_LBRACE"):
			pass  # pushed by the caller once the kind is known
		elif ty in ("SEMICOLON", "VSEMI"):
			if self.header is not None and self.header[1] == depth:
				self.header = None
			if self.ret_type == depth:
				self.ret_type = None
			if depth == 1 or self._top.kind == "stmt":
				self.module_stmt = False
		elif ty in ("EQUAL", "_ARROW"):
			if self.ret_type == depth:
				self.ret_type = None
		elif ty in ("CLASS", "INTERFACE_KW"):
			self.header = ("class", depth)
		elif ty == "NAMESPACE_KW":
			self.header = ("stmt", depth)
		elif ty == "ENUM":
			self.header = ("enum", depth)
		elif ty in ("IMPORT", "EXPORT"):
			self.module_stmt = True
		elif ty in ("CASE", "DEFAULT") and self._top.kind == "stmt":
			if not (ty == "DEFAULT" and self.prev is not None and self.prev.type == "EXPORT"):
				self.case_open = depth
		elif ty == "COLON" and self.case_open == depth:
			self.case_open = None
			case_colon = True
		elif ty == "COLON" and self.label_at is not None and self.prev_index == self.label_at:
			# The statement after a label starts like one after `case x:`.
			self.label_at = None
			case_colon = True

		self.prev = tok
		self.prev_index = index
		self.prev_closed = closed
		self.prev_case_colon = case_colon
		return tok

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		self._collect(stream)
		self._scan()
		self.stack: List[_Ctx] = [_Ctx("paren" if self._expression else "stmt")]
		self.prev: Optional[Token] = None
		self.prev_index = -1
		self.prev_closed: Optional[_Ctx] = None
		self.prev_case_colon = False
		self.header: Optional[tuple[str, int]] = None
		self.ret_type: Optional[int] = None
		self.module_stmt = False
		self.case_open: Optional[int] = None
		self.label_at: Optional[int] = None
		self.member_names: set[int] = set()

		i = 0
		toks = self.toks
		while i < len(toks):
			raw = toks[i]
			nl = self.nl[i]
			start = i
			if raw.type == "GT" and i not in self.type_gt:
				raw, i = self._merge_shift(i)
			ty = self._retag(start, raw, nl) if raw.type != "SHIFT_OP" else "SHIFT_OP"

			if ty in ("NAME", "STRING", "NUMBER") and self._member_start(nl):
				self.member_names.add(start)
			if ty == "NAME" and self._type_at(start + 1) == "COLON" and self._stmt_start(nl):
				self.label_at = start

			if self._needs_vsemi(ty, nl):
				yield self._emit(self._vsemi(), self.prev_index)

			if ty == "COMMA" and self._top.kind == "bracket" and self.prev is not None and self.prev.type in ("LSQB", "COMMA"):
				yield self._emit(self._omitted(raw), self.prev_index)

			if ty == "LBRACE":
				kind = "obj"
				depth = len(self.stack)
				if self.header is not None and self.header[1] == depth:
					kind = self.header[0]
					self.header = None
				elif self.ret_type == depth and self.prev is not None and self.prev.type != "COLON":
					kind = "stmt"
					self.ret_type = None
				elif self._block_position(nl):
					kind = "stmt"
				if kind in ("stmt", "class"):
					ty = "BLOCK_LBRACE"
				prev_ty = self.prev.type if self.prev is not None else None
				tok = raw if ty == raw.type else Token.new_borrow_pos(ty, raw.value, raw)
				yield self._emit(tok, start)
				self.stack.append(
					_Ctx(
						kind,
						tok,
						after_do=prev_ty == "DO",
						module_braces=kind == "obj" and self.module_stmt and prev_ty in ("IMPORT", "EXPORT", "TYPE_KW", "COMMA"),
					)
				)
				i += 1
				continue

			tok = raw if ty == raw.type else Token.new_borrow_pos(ty, raw.value, raw)
			yield self._emit(tok, start)
			i += 1

		if self._needs_vsemi("$END", self.nl_at_end):
			yield self._emit(self._vsemi(), self.prev_index)


__all__ = ["TokenPass", "KEYWORD_TYPES"]
