# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Core records shared by the parser, the compiler and the pipeline."""

from .diagnostics import Diagnostic
from .errors import EmitError, ParseError, Ts2GasError
from .span import Span

__all__ = ["Diagnostic", "EmitError", "ParseError", "Span", "Ts2GasError"]
