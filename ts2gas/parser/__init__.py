# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
TypeScript parser entry point.

Parses source text into a `ts2gas.syntax.SourceFile` with parent pointers set
and the source comments attached. lark failures are converted here into
`ParseError` carrying a pinned parser diagnostic.
"""

from __future__ import annotations

from lark.exceptions import UnexpectedInput

from ts2gas.syntax.nodes import SourceFile
from ts2gas.syntax.visitor import set_parent_pointers

from . import parser as _parser


def parse_source(text: str, file_name: str = "module.ts") -> SourceFile:
	"""Parse a whole file; raises ParseError on any lexing or parsing failure."""
	try:
		tree, comments = _parser.run_parser(text, "program")
	except UnexpectedInput as err:
		raise _parser.syntax_error(err, text, file_name=file_name) from None
	sf = _parser.TreeBuilder(text, file_name=file_name).build_program(tree)
	sf.comments = comments
	set_parent_pointers(sf)
	return sf


__all__ = ["parse_source"]
