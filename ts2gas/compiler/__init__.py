# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference compile collaborator.

`transpile_module(source, request)` runs the whole compiler on one file:

	parse -> bind -> before transformers -> TypeScript erasure
	-> CommonJS module lowering -> ES3 lowering -> after transformers -> print

The binder runs on the parsed tree, before any transformer touches it, so
references keep resolving through the `original` links of rewritten nodes.
Transformer factories are all instantiated against the shared
`TransformationContext` before the first pass runs; substitutions they
register fire while printing.

Anything that honors `CompileCollaborator` can stand in for this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from ts2gas.parser import parse_source
from ts2gas.syntax.nodes import SourceFile
from ts2gas.syntax.visitor import set_parent_pointers

from .binder import bind_source_file
from .context import Substitution, TransformationContext
from .emitter import print_source_file
from .erasure import TypeScriptEraser
from .es3_transform import Es3Lowering
from .helpers import helper_texts
from .module_transform import CommonJsModuleTransformer
from .names import NameGenerator

if TYPE_CHECKING:
	from ts2gas.options import CompileRequest

# Version of the TypeScript compiler whose output this one reproduces.
COMPILER_VERSION = "3.9.10"


@dataclass(frozen=True)
class CompileResult:
	output_text: str
	source_file: SourceFile


class CompileCollaborator(Protocol):
	version: str

	def __call__(self, source: str, request: "CompileRequest") -> CompileResult:
		...


def transpile_module(source: str, request: "CompileRequest") -> CompileResult:
	"""Compile one TypeScript file; raises ParseError or EmitError."""
	opts = request.compiler_options
	sf = parse_source(source, request.file_name)
	bind = bind_source_file(sf)

	context = TransformationContext(compiler_options=opts)
	names = NameGenerator(bind.identifiers)
	before = [factory(context) for factory in request.transformers.before]
	passes = [
		TypeScriptEraser(context, bind).rewrite_source_file,
		CommonJsModuleTransformer(context, bind, names, request.renamed_dependencies).rewrite_source_file,
		Es3Lowering(context, names).rewrite_source_file,
	]
	after = [factory(context) for factory in request.transformers.after]

	for transform in [*before, *passes, *after]:
		sf = transform(sf)
		set_parent_pointers(sf)

	text = print_source_file(
		sf,
		context,
		helpers=helper_texts(context.emit_helpers),
		remove_comments=opts.remove_comments,
	)
	return CompileResult(text, sf)


@dataclass(frozen=True)
class ReferenceCollaborator:
	"""`CompileCollaborator` backed by `transpile_module`."""

	version: str = COMPILER_VERSION

	def __call__(self, source: str, request: "CompileRequest") -> CompileResult:
		return transpile_module(source, request)


REFERENCE_COLLABORATOR = ReferenceCollaborator()

__all__ = [
	"COMPILER_VERSION",
	"CompileCollaborator",
	"CompileResult",
	"REFERENCE_COLLABORATOR",
	"ReferenceCollaborator",
	"Substitution",
	"TransformationContext",
	"transpile_module",
]
