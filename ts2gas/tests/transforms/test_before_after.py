#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Before transformers rewrite the parsed tree; after transformers hook the printer."""

from __future__ import annotations

from ts2gas.compiler.context import TransformationContext
from ts2gas.compiler.emitter import print_source_file
from ts2gas.compiler.module_transform import create_es_module_marker
from ts2gas.parser import parse_source
from ts2gas.syntax import walk
from ts2gas.syntax.nodes import EmitFlags, Identifier, NotEmittedStatement, SyntaxKind
from ts2gas.transforms import (
	comment_out_before,
	create_commented_statement,
	is_export_from_node,
	is_identifier_node,
	is_import_node,
	no_substitution_before,
	suppress_after,
	suppress_es_module_marker_after,
	suppress_exports_default_after,
)


def test_commented_statement_keeps_exact_text() -> None:
	sf = parse_source('import { a } from "b";')
	stmt = create_commented_statement(sf.statements[0])
	assert isinstance(stmt, NotEmittedStatement)
	assert stmt.trailing_comments == ['import { a } from "b";']
	assert stmt.original is sf.statements[0]


def test_commented_statement_escapes_newlines() -> None:
	sf = parse_source('import {\n  a,\n  b\n} from "c";')
	stmt = create_commented_statement(sf.statements[0])
	assert stmt.trailing_comments == ['import {\\n  a,\\n  b\\n} from "c";']


def test_comment_out_before_replaces_only_matching_statements() -> None:
	sf = parse_source('import { a } from "b";\nconst c = a;\nexport * from "d";\n')
	ctx = TransformationContext()
	out = comment_out_before(is_import_node)(ctx)(sf)
	out = comment_out_before(is_export_from_node)(ctx)(out)
	kinds = [type(s).__name__ for s in out.statements]
	assert kinds == ["NotEmittedStatement", "VariableStatement", "NotEmittedStatement"]
	assert out.statements[2].trailing_comments == ['export * from "d";']


def test_comment_out_prints_single_line_comment() -> None:
	sf = parse_source('import { a } from "b";\n')
	out = comment_out_before(is_import_node)(TransformationContext())(sf)
	assert print_source_file(out) == '//import { a } from "b";\n'


def test_no_substitution_flags_identifiers() -> None:
	sf = parse_source("const a = b + c;\n")
	out = no_substitution_before(is_identifier_node)(TransformationContext())(sf)
	idents = [n for n in walk(out) if isinstance(n, Identifier)]
	assert [i.text for i in idents] == ["a", "b", "c"]
	assert all(i.emit_flags & EmitFlags.NO_SUBSTITUTION for i in idents)


def test_no_substitution_skips_enum_names() -> None:
	sf = parse_source("enum Color { Red }\n")
	out = no_substitution_before(is_identifier_node)(TransformationContext())(sf)
	enum = out.statements[0]
	assert not enum.name.emit_flags & EmitFlags.NO_SUBSTITUTION
	assert enum.members[0].name.emit_flags & EmitFlags.NO_SUBSTITUTION


def test_suppress_after_registers_substitution_and_keeps_tree() -> None:
	ctx = TransformationContext()
	sf = parse_source("const a = 1;")
	assert suppress_es_module_marker_after(ctx)(sf) is sf
	assert ctx.is_substitution_enabled(create_es_module_marker())
	assert [s.kind for s in ctx.substitutions] == [SyntaxKind.EXPRESSION_STATEMENT]


def test_suppressed_marker_becomes_not_emitted() -> None:
	ctx = TransformationContext()
	suppress_es_module_marker_after(ctx)
	replaced = ctx.on_substitute_node(create_es_module_marker())
	assert isinstance(replaced, NotEmittedStatement)


def test_suppressors_leave_other_statements_alone() -> None:
	ctx = TransformationContext()
	suppress_es_module_marker_after(ctx)
	suppress_exports_default_after(ctx)
	stmt = parse_source("exports.pi = 3;").statements[0]
	assert ctx.on_substitute_node(stmt) is stmt


def test_default_export_suppressed_while_printing() -> None:
	ctx = TransformationContext()
	suppress_exports_default_after(ctx)
	sf = parse_source("var x = 1;\nexports.default = x;\n")
	assert print_source_file(sf, ctx) == "var x = 1;\n"


def test_suppress_after_runs_after_earlier_substitutions() -> None:
	ctx = TransformationContext()
	seen = []

	def rename(node):
		seen.append("rename")
		return node

	ctx.add_substitution(SyntaxKind.EXPRESSION_STATEMENT, rename)

	def never(node):
		seen.append("filter")
		return False

	suppress_after(SyntaxKind.EXPRESSION_STATEMENT, never, name="never")(ctx)
	ctx.on_substitute_node(parse_source("f();").statements[0])
	assert seen == ["rename", "filter"]
	assert ctx.substitutions[-1].name == "never"
