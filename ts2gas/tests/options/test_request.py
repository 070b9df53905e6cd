#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Layered compile request: defaults, caller options, mandatory settings."""

from __future__ import annotations

import dataclasses

import pytest

from ts2gas.options import (
	MANDATORY_COMPILER_OPTIONS,
	CompileRequest,
	CompilerOptions,
	ModuleKind,
	ScriptTarget,
	build_request,
)


def test_defaults_without_caller_options() -> None:
	opts = build_request().compiler_options
	assert opts.target is ScriptTarget.ES3
	assert opts.module is ModuleKind.NONE
	assert opts.no_implicit_use_strict
	assert opts.isolated_modules and opts.no_resolve and opts.no_lib
	assert not opts.emit_declaration_only


def test_mandatory_target_wins() -> None:
	opts = build_request({"compiler_options": {"target": "ES2017"}}).compiler_options
	assert opts.target is ScriptTarget.ES3


def test_mandatory_module_none_wins() -> None:
	opts = build_request({"compilerOptions": {"module": "CommonJS", "noLib": False}}).compiler_options
	assert opts.module is ModuleKind.NONE
	assert opts.no_lib


def test_uncontested_caller_settings_survive() -> None:
	request = build_request(
		{
			"compiler_options": {"no_implicit_use_strict": False, "remove_comments": True, "jsx": "react"},
			"renamed_dependencies": {"lodash": "lodash-es"},
		}
	)
	assert not request.compiler_options.no_implicit_use_strict
	assert request.compiler_options.remove_comments
	assert request.compiler_options.extra == {"jsx": "react"}
	assert request.renamed_dependencies == {"lodash": "lodash-es"}


def test_caller_cannot_inject_transformers() -> None:
	def mine(context):
		return lambda sf: sf

	def pipeline(context):
		return lambda sf: sf

	request = build_request({"transformers": {"before": [mine]}}, before=[pipeline])
	assert request.transformers.before == (pipeline,)
	assert request.transformers.after == ()


def test_transformer_lists_keep_order() -> None:
	def a(context):
		return lambda sf: sf

	def b(context):
		return lambda sf: sf

	request = build_request(before=[a, b], after=[b, a])
	assert request.transformers.before == (a, b)
	assert request.transformers.after == (b, a)


def test_request_is_frozen() -> None:
	request = build_request(file_name="Code.ts")
	assert isinstance(request, CompileRequest)
	assert request.file_name == "Code.ts"
	with pytest.raises(dataclasses.FrozenInstanceError):
		request.file_name = "other.ts"


def test_mandatory_table_is_read_only() -> None:
	with pytest.raises(TypeError):
		MANDATORY_COMPILER_OPTIONS["target"] = ScriptTarget.ES5


def test_enum_coercion() -> None:
	assert ScriptTarget.coerce("es5") is ScriptTarget.ES5
	assert ScriptTarget.coerce(ScriptTarget.ESNEXT) is ScriptTarget.ESNEXT
	assert ModuleKind.coerce("commonjs") is ModuleKind.COMMONJS
	assert ModuleKind.coerce("None") is ModuleKind.NONE
	with pytest.raises(ValueError):
		ScriptTarget.coerce("ES1")


def test_compiler_options_from_mapping() -> None:
	opts = CompilerOptions.from_mapping({"target": "ES5", "no_lib": True, "paths": {"a": ["b"]}})
	assert opts.target is ScriptTarget.ES5
	assert opts.no_lib is True
	assert opts.extra == {"paths": {"a": ["b"]}}


def test_boolean_options_accept_spelled_out_strings() -> None:
	opts = CompilerOptions.from_mapping({"remove_comments": "false", "no_lib": "True"})
	assert opts.remove_comments is False
	assert opts.no_lib is True


def test_boolean_options_reject_other_values() -> None:
	with pytest.raises(ValueError):
		CompilerOptions.from_mapping({"remove_comments": "no"})
	with pytest.raises(ValueError):
		build_request({"compilerOptions": {"removeComments": 1}})


def test_unread_options_pass_through_as_extra() -> None:
	opts = build_request({"compilerOptions": {"experimentalDecorators": True}}).compiler_options
	assert opts.extra == {"experimental_decorators": True}
