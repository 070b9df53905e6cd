# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
TypeScript -> Apps Script pipeline.

Goal
----
Compile one TypeScript file for the Apps Script runtime, which has no module
system: import and re-export statements are commented out, identifiers keep
their source spelling, the compiler's module marker and `exports.default`
binding are dropped, and files that still mention `exports` get a small
preamble defining it.

Order
-----
Before the compiler lowers anything:
  1. every identifier is flagged `NO_SUBSTITUTION` (enum names excepted);
  2. `export ... from` statements are commented out;
  3. import statements are commented out.

While printing the lowered tree:
  1. the synthetic `exports.__esModule` marker is suppressed;
  2. `exports.default = <identifier>;` is suppressed;
  3. the export preamble is prepended when `exports` occurs in the tree.

The result is the collaborator's output text under a one-line banner.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from ts2gas.compiler import REFERENCE_COLLABORATOR, CompileCollaborator
from ts2gas.metadata import banner
from ts2gas.options import CompileRequest, TransformerFactory, build_request
from ts2gas.transforms import (
	comment_out_before,
	export_preamble_after,
	is_export_from_node,
	is_identifier_node,
	is_import_node,
	no_substitution_before,
	suppress_es_module_marker_after,
	suppress_exports_default_after,
)

BEFORE_TRANSFORMERS: Tuple[TransformerFactory, ...] = (
	no_substitution_before(is_identifier_node),
	comment_out_before(is_export_from_node),
	comment_out_before(is_import_node),
)

AFTER_TRANSFORMERS: Tuple[TransformerFactory, ...] = (
	suppress_es_module_marker_after,
	suppress_exports_default_after,
	export_preamble_after,
)


def create_request(options: Optional[Mapping[str, Any]] = None, *, file_name: str = "module.ts") -> CompileRequest:
	return build_request(options, before=BEFORE_TRANSFORMERS, after=AFTER_TRANSFORMERS, file_name=file_name)


def transform(
	source: str,
	options: Optional[Mapping[str, Any]] = None,
	*,
	collaborator: Optional[CompileCollaborator] = None,
	file_name: str = "module.ts",
) -> str:
	"""
	Transpile `source` into Apps Script.

	`options` may carry `compiler_options` and `renamed_dependencies`; any
	other key is ignored and mandatory settings override the caller's.
	Raises `ParseError` (no tree) or `EmitError` (no ES3 rendition).
	"""
	collaborator = collaborator or REFERENCE_COLLABORATOR
	result = collaborator(source, create_request(options, file_name=file_name))
	return banner(collaborator.version) + "\n" + result.output_text


__all__ = ["AFTER_TRANSFORMERS", "BEFORE_TRANSFORMERS", "create_request", "transform"]
