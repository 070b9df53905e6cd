#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Error taxonomy and diagnostic records."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import pytest

from ts2gas import transform
from ts2gas.core import Diagnostic, EmitError, ParseError, Span, Ts2GasError


def test_span_from_offset() -> None:
	span = Span.from_offset("ab\ncd\n", 4, file="a.ts")
	assert (span.line, span.column) == (2, 2)
	assert span.describe() == "a.ts:2:2"
	assert Span.from_offset("x", -1).line is None


def test_span_describe_unknown_parts() -> None:
	assert Span().describe() == "<source>"
	assert Span(file="a.ts", line=3).describe() == "a.ts:3"


def test_diagnostic_format_and_dict() -> None:
	diag = Diagnostic(message="bad", code="parse_error", phase="parser", span=Span(file="a.ts", line=1, column=5))
	assert diag.format_human() == "a.ts:1:5: error: bad"
	assert diag.to_dict()["line"] == 1
	assert diag.to_dict()["file"] == "a.ts"


def test_error_hierarchy() -> None:
	assert issubclass(ParseError, Ts2GasError)
	assert issubclass(EmitError, Ts2GasError)
	assert ParseError().reason_code == "parse_error"
	assert EmitError().reason_code == "emit_error"


def test_error_is_serializable() -> None:
	diag = Diagnostic(message="no getters", span=Span(file="a.ts", line=2, column=1))
	err = EmitError(message="no getters", diagnostic=diag)
	assert err.to_dict()["diagnostic"]["line"] == 2
	assert str(err) == "[emit_error] no getters at a.ts:2:1"
	assert err.line == 2 and err.column == 1


def test_errors_can_be_raised() -> None:
	with pytest.raises(Ts2GasError):
		raise ParseError(message="boom")


@contextmanager
def _scope() -> Iterator[None]:
	yield


def test_errors_cross_generator_context_managers() -> None:
	with pytest.raises(ParseError) as info:
		with _scope():
			raise ParseError(message="boom")
	assert info.value.__traceback__ is not None
	assert info.value.message == "boom"


def test_parse_error_from_transform_crosses_context_managers() -> None:
	with pytest.raises(ParseError):
		with _scope():
			transform("var = ;\n")
