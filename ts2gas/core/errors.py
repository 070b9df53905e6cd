# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy.

Every failure raised by the package derives from `Ts2GasError`, a
serializable dataclass exception carrying a stable `reason_code` and the
diagnostic that describes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .diagnostics import Diagnostic


@dataclass(eq=False)
class Ts2GasError(Exception):
	"""A structured, serializable error for the transpiler."""

	reason_code: str
	message: str
	diagnostic: Diagnostic | None = field(default=None, compare=False)

	def __str__(self) -> str:
		return self.format_human()

	@property
	def line(self) -> int | None:
		return self.diagnostic.line if self.diagnostic is not None else None

	@property
	def column(self) -> int | None:
		return self.diagnostic.column if self.diagnostic is not None else None

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"diagnostic": self.diagnostic.to_dict() if self.diagnostic is not None else None,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.diagnostic is not None and self.diagnostic.span.line is not None:
			parts.append(f"at {self.diagnostic.span.describe()}")
		return " ".join(parts)


@dataclass(eq=False)
class ParseError(Ts2GasError):
	"""The source text could not be turned into a syntax tree."""

	reason_code: str = "parse_error"
	message: str = "cannot parse source"


@dataclass(eq=False)
class EmitError(Ts2GasError):
	"""A construct parsed fine but has no legacy-target rendition."""

	reason_code: str = "emit_error"
	message: str = "cannot emit construct"


__all__ = ["EmitError", "ParseError", "Ts2GasError"]
