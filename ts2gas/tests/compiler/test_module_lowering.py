#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""CommonJS lowering of the reference compiler, without the pipeline touch-ups."""

from __future__ import annotations

from ts2gas.compiler import COMPILER_VERSION, REFERENCE_COLLABORATOR, transpile_module
from ts2gas.options import build_request


def _compile(src: str, options=None) -> str:
	return transpile_module(src, build_request(options)).output_text


def test_reference_collaborator_version() -> None:
	assert REFERENCE_COLLABORATOR.version == COMPILER_VERSION == "3.9.10"


def test_script_has_no_module_marker() -> None:
	assert _compile("var a = 1;\n") == "var a = 1;\n"


def test_named_import_becomes_require() -> None:
	out = _compile('import { a } from "./lib";\nconsole.log(a);\n')
	assert out == 'exports.__esModule = true;\nvar lib_1 = require("./lib");\nconsole.log(lib_1.a);\n'


def test_unused_import_is_elided() -> None:
	assert _compile('import { a } from "./lib";\nvar b = 1;\n') == "exports.__esModule = true;\nvar b = 1;\n"


def test_side_effect_import_is_kept() -> None:
	assert _compile('import "./polyfill";\n') == 'exports.__esModule = true;\nrequire("./polyfill");\n'


def test_renamed_dependencies() -> None:
	out = _compile('import * as lib from "lodash";\nlib.map();\n', {"renamed_dependencies": {"lodash": "lodash-es"}})
	assert 'var lib = require("lodash-es");' in out
	assert "lib.map();" in out


def test_exported_variable_references_go_through_exports() -> None:
	out = _compile("export const n = 1;\nconsole.log(n);\n")
	assert out == "exports.__esModule = true;\nexports.n = void 0;\nexports.n = 1;\nconsole.log(exports.n);\n"


def test_export_specifier_publishes_local() -> None:
	out = _compile("var a = 1;\nexport { a as b };\n")
	assert out == "exports.__esModule = true;\nexports.b = void 0;\nvar a = 1;\nexports.b = a;\n"


def test_export_star_uses_helper() -> None:
	out = _compile('export * from "./lib";\n')
	assert "function __export(m) {" in out
	assert out.endswith('__export(require("./lib"));\n')


def test_export_from_named() -> None:
	out = _compile('export { a as b } from "./lib";\n')
	assert 'var lib_1 = require("./lib");' in out
	assert "exports.b = lib_1.a;" in out


def test_use_strict_when_implicit_strict_is_allowed() -> None:
	out = _compile("export const a = 1;\n", {"compiler_options": {"no_implicit_use_strict": False}})
	assert out.startswith('"use strict";\nexports.__esModule = true;\n')


def test_type_only_module_content_is_erased() -> None:
	out = _compile("export interface Shape { area(): number }\nexport type Id = string;\n")
	assert out == "exports.__esModule = true;\n"


def test_export_default_function() -> None:
	out = _compile("export default function () { return 1; }\n")
	assert "function default_1() { return 1; }" in out
	assert 'exports["default"] = default_1;' in out


def test_specifier_exported_enum_is_published_after_its_body() -> None:
	out = _compile("enum E { A }\nexport { E };\n")
	assert out.index("})(E || (E = {}));") < out.index("exports.E = E;")
	assert out.count("exports.E = E;") == 1


def test_specifier_exported_namespace_is_published_after_its_body() -> None:
	out = _compile("namespace N { export const a = 1; }\nexport { N as M };\n")
	assert out.index("})(N || (N = {}));") < out.index("exports.M = N;")


def test_merged_enum_is_published_once_after_the_last_body() -> None:
	out = _compile("enum E { A }\nenum E { B = 2 }\nexport { E };\n")
	assert out.count("exports.E = E;") == 1
	assert out.rindex("})(E || (E = {}));") < out.index("exports.E = E;")
