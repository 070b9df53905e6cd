# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Regular expression literals.

Whether `/` starts a regular expression or is a division operator depends on
the token before it, which a context-free lexer cannot see. `mask_regex_literals`
runs a light scan ahead of lark: every literal it recognizes is overwritten
with `MASK` characters of the same length, so the lexer sees a single `REGEX`
token with unchanged positions. `unmask` puts the source spelling back on those
tokens before the token pass runs.

A `/` starts a literal at the beginning of input, after punctuation and
after keywords that are followed by an expression (`return`, `typeof`, ...).
After a name, a number, a string, `)`, `]`, `}`, `++` or `--` it divides.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from lark import Token

MASK = "\ue000"

_EXPRESSION_KEYWORDS = frozenset(
	{
		"return", "typeof", "instanceof", "in", "of", "new", "delete", "void", "throw",
		"case", "do", "else", "yield", "await",
	}
)


def _is_name_char(ch: str) -> bool:
	return ch.isalnum() or ch in "_$"


def _skip_quoted(source: str, i: int) -> int:
	"""Index past the string or template literal opening at `i`."""
	quote = source[i]
	n = len(source)
	i += 1
	while i < n:
		ch = source[i]
		if ch == "\\":
			i += 2
			continue
		if ch == quote:
			return i + 1
		if ch == "\n" and quote != "`":
			return i
		i += 1
	return n


def _scan_literal(source: str, i: int) -> int:
	"""End of the regular expression literal at `i`, or -1 if there is none."""
	n = len(source)
	j = i + 1
	in_class = False
	while j < n:
		ch = source[j]
		if ch == "\\":
			j += 2
			continue
		if ch in "\r\n":
			return -1
		if in_class:
			if ch == "]":
				in_class = False
		elif ch == "[":
			in_class = True
		elif ch == "/":
			break
		j += 1
	if j >= n or j == i + 1:
		return -1
	j += 1
	while j < n and _is_name_char(source[j]):
		j += 1
	return j


def mask_regex_literals(source: str) -> str:
	"""`source` with each regular expression literal replaced by `MASK` runs."""
	parts = []
	last = 0
	regex_ok = True
	i = 0
	n = len(source)
	while i < n:
		ch = source[i]
		if ch.isspace():
			i += 1
		elif source.startswith("//", i):
			end = source.find("\n", i)
			i = n if end < 0 else end
		elif source.startswith("/*", i):
			end = source.find("*/", i + 2)
			i = n if end < 0 else end + 2
		elif ch in "'\"`":
			i = _skip_quoted(source, i)
			regex_ok = False
		elif _is_name_char(ch):
			j = i + 1
			while j < n and (_is_name_char(source[j]) or (ch.isdigit() and source[j] == ".")):
				j += 1
			regex_ok = source[i:j] in _EXPRESSION_KEYWORDS
			i = j
		elif ch == "/" and regex_ok:
			end = _scan_literal(source, i)
			if end < 0:
				i += 1
				continue
			parts.append(source[last:i])
			parts.append(MASK * (end - i))
			last = end
			i = end
			regex_ok = False
		elif source.startswith("++", i) or source.startswith("--", i):
			i += 2
			regex_ok = False
		else:
			i += 1
			regex_ok = ch not in ")]}"
	if not parts:
		return source
	parts.append(source[last:])
	return "".join(parts)


def unmask(tokens: Iterable[Token], source: str) -> Iterator[Token]:
	"""Restore the source spelling of `REGEX` tokens lexed from masked text."""
	for tok in tokens:
		if tok.type == "REGEX":
			tok = Token.new_borrow_pos("REGEX", source[tok.start_pos : tok.end_pos], tok)
		yield tok


__all__ = ["MASK", "mask_regex_literals", "unmask"]
