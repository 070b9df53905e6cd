# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
ts2gas: transpile TypeScript into Google Apps Script.

	>>> from ts2gas import transform
	>>> print(transform("export const pi = 3.141592;"))
"""

from ts2gas.core.errors import EmitError, ParseError, Ts2GasError
from ts2gas.metadata import __version__
from ts2gas.pipeline import transform

__all__ = ["EmitError", "ParseError", "Ts2GasError", "__version__", "transform"]
