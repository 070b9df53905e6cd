# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Construction of `EmitError` pinned to the offending node."""

from __future__ import annotations

from ts2gas.core.diagnostics import Diagnostic
from ts2gas.core.errors import EmitError
from ts2gas.core.span import Span
from ts2gas.syntax.nodes import Node


def emit_error(message: str, node: Node) -> EmitError:
	span = Span()
	cur = node
	while cur.is_synthetic and cur.original is not None:
		cur = cur.original
	sf = cur.get_source_file()
	if sf is not None and not cur.is_synthetic:
		span = Span.from_offset(sf.text, cur.pos, file=sf.file_name)
	return EmitError(
		message=message,
		diagnostic=Diagnostic(message=message, code="emit_error", phase="emitter", span=span),
	)


__all__ = ["emit_error"]
