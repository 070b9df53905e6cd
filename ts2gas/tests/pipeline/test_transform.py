#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""End-to-end behavior of `ts2gas.transform`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pytest

from ts2gas import ParseError, transform
from ts2gas.compiler import COMPILER_VERSION, CompileResult
from ts2gas.metadata import banner
from ts2gas.options import CompileRequest, ModuleKind, ScriptTarget
from ts2gas.parser import parse_source
from ts2gas.pipeline import AFTER_TRANSFORMERS, BEFORE_TRANSFORMERS

PREAMBLE = "var exports = exports || {};\nvar module = module || { exports: exports };\n"


def _body(output: str) -> str:
	head, body = output.split("\n", 1)
	assert head == banner(COMPILER_VERSION)
	return body


def test_plain_script_gets_banner_and_no_preamble() -> None:
	out = transform("const a = 1;\n")
	assert out == banner(COMPILER_VERSION) + "\nvar a = 1;\n"


def test_banner_names_package_and_compiler() -> None:
	line = transform("var a;").split("\n", 1)[0]
	assert line.startswith("// Compiled using ts2gas ")
	assert line.endswith("(TypeScript 3.9.10)")


def test_imports_become_comments() -> None:
	src = 'import { a } from "b";\nimport * as c from "c";\nimport "d";\n'
	assert _body(transform(src)) == PREAMBLE + '//import { a } from "b";\n//import * as c from "c";\n//import "d";\n'


def test_multiline_import_is_one_comment() -> None:
	src = 'import {\n  a,\n  b\n} from "b";\n'
	assert _body(transform(src)) == PREAMBLE + '//import {\\n  a,\\n  b\\n} from "b";\n'


def test_export_from_becomes_comment_without_helper() -> None:
	body = _body(transform('export * from "lib";\nexport { a, b as c } from "lib";\n'))
	assert '//export * from "lib";' in body
	assert '//export { a, b as c } from "lib";' in body
	assert "require" not in body
	assert "__export" not in body


def test_imported_names_keep_source_spelling() -> None:
	src = 'import { foo as bar } from "lib";\nbar();\n'
	body = _body(transform(src))
	assert body.endswith("bar();\n")
	assert "lib_1" not in body


def test_export_const_gets_preamble() -> None:
	body = _body(transform("export const pi = 3.141592;\n"))
	assert body.startswith(PREAMBLE)
	assert "exports.pi = 3.141592;" in body
	assert "__esModule" not in body


def test_no_preamble_without_exports() -> None:
	assert "exports" not in transform("const a = 1;\nfunction f() { return a; }\n")


def test_export_default_value_keeps_binding_only() -> None:
	body = _body(transform("export default 3.141592;\n"))
	assert body == PREAMBLE + "var default_1 = 3.141592;\n"


def test_export_default_identifier_dropped() -> None:
	body = _body(transform("const x = 1;\nexport default x;\n"))
	assert body == PREAMBLE + "var x = 1;\n"


def test_handwritten_module_marker_survives() -> None:
	body = _body(transform("exports.__esModule = true;\n"))
	assert body == PREAMBLE + "exports.__esModule = true;\n"


def test_exported_function_and_class() -> None:
	body = _body(transform("export function f() { return 1; }\nexport class C {}\n"))
	assert "function f() { return 1; }" in body
	assert "exports.f = f;" in body
	assert "var C = /** @class */ (function () {" in body
	assert "exports.C = C;" in body


def test_exported_enum_lands_on_exports() -> None:
	body = _body(transform("export enum Color { Red, Green }\n"))
	assert body.startswith(PREAMBLE)
	assert "var Color;" in body
	assert 'Color[Color["Red"] = 0] = "Red";' in body
	assert "})(Color = exports.Color || (exports.Color = {}));" in body


def test_comments_are_kept() -> None:
	body = _body(transform("// greeting\nvar a = 1; // one\n"))
	assert body == "// greeting\nvar a = 1; // one\n"


def test_remove_comments_option() -> None:
	body = _body(transform("// greeting\nvar a = 1; // one\n", {"compilerOptions": {"removeComments": True}}))
	assert body == "var a = 1;\n"


def test_parse_error_propagates() -> None:
	with pytest.raises(ParseError) as info:
		transform("var = ;\n")
	assert info.value.diagnostic is not None
	assert info.value.diagnostic.span.line == 1


def test_pipeline_transformer_order() -> None:
	assert len(BEFORE_TRANSFORMERS) == 3
	assert len(AFTER_TRANSFORMERS) == 3


@dataclass
class RecordingCollaborator:
	version: str = "0.0.1"
	requests: List[CompileRequest] = field(default_factory=list)

	def __call__(self, source: str, request: CompileRequest) -> CompileResult:
		self.requests.append(request)
		return CompileResult("echo(" + source + ");\n", parse_source(""))


def test_collaborator_receives_layered_request() -> None:
	collab = RecordingCollaborator()
	out = transform(
		"x",
		{"compiler_options": {"target": "ES2019", "noImplicitUseStrict": False}, "unknown": 1},
		collaborator=collab,
		file_name="Code.ts",
	)
	assert out == banner("0.0.1") + "\necho(x);\n"
	(request,) = collab.requests
	assert request.file_name == "Code.ts"
	opts = request.compiler_options
	assert opts.target is ScriptTarget.ES3
	assert opts.module is ModuleKind.NONE
	assert opts.no_implicit_use_strict is False
	assert request.transformers.before == BEFORE_TRANSFORMERS
	assert request.transformers.after == AFTER_TRANSFORMERS
