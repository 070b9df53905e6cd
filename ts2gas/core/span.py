# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by diagnostics.

A Span carries 1-based line/column information plus the raw character
offsets (`pos`/`end`) of the text it covers. Synthetic nodes have no span;
`Span()` denotes an unknown location.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus offsets)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	pos: Optional[int] = None
	end: Optional[int] = None

	@classmethod
	def from_offset(cls, text: str, pos: int, *, file: str | None = None) -> "Span":
		"""Compute line/column for a character offset into `text`."""
		if pos < 0:
			return cls(file=file)
		pos = min(pos, len(text))
		line = text.count("\n", 0, pos) + 1
		column = pos - (text.rfind("\n", 0, pos) + 1) + 1
		return cls(file=file, line=line, column=column, pos=pos, end=pos)

	def describe(self) -> str:
		"""Render `file:line:col` using whatever parts are known."""
		file = self.file or "<source>"
		if self.line is None:
			return file
		if self.column is None:
			return f"{file}:{self.line}"
		return f"{file}:{self.line}:{self.column}"


__all__ = ["Span"]
