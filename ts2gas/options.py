# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compile request construction.

Goal
----
Combine three layers of configuration into one frozen `CompileRequest`:

  1. defaults the caller may override;
  2. the caller's own options (sanitized first: only `compiler_options` and
     `renamed_dependencies` survive);
  3. mandatory settings and the pipeline's transformer lists, which always
     win.

Layers are merged as plain mappings with `merge(target, *sources)`, which
dispatches per value kind (`merge_sequence`, `merge_mapping`,
`merge_scalar`), and the result is then frozen into typed dataclasses.

Merge rules
-----------
- sequence onto sequence concatenates (target first); if either side is not
  a sequence the source replaces the target;
- mapping onto mapping merges member-wise, recursively;
- a defined scalar overwrites; `None` means "not set" and never does.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

if TYPE_CHECKING:
	from ts2gas.compiler.context import TransformationContext
	from ts2gas.syntax.nodes import SourceFile

	TransformerFactory = Callable[[TransformationContext], Callable[[SourceFile], SourceFile]]
else:
	TransformerFactory = Callable[[Any], Callable[[Any], Any]]


class ScriptTarget(Enum):
	ES3 = "ES3"
	ES5 = "ES5"
	ES2015 = "ES2015"
	ES2016 = "ES2016"
	ES2017 = "ES2017"
	ES2018 = "ES2018"
	ES2019 = "ES2019"
	ES2020 = "ES2020"
	ESNEXT = "ESNext"

	@classmethod
	def coerce(cls, value: Any) -> "ScriptTarget":
		if isinstance(value, cls):
			return value
		text = str(value).upper()
		for member in cls:
			if member.name == text:
				return member
		raise ValueError(f"unknown script target {value!r}")


class ModuleKind(Enum):
	"""Module output kind. `NONE` is a real setting, not an absent one."""

	NONE = "None"
	COMMONJS = "CommonJS"
	AMD = "AMD"
	UMD = "UMD"
	SYSTEM = "System"
	ES2015 = "ES2015"
	ESNEXT = "ESNext"

	@classmethod
	def coerce(cls, value: Any) -> "ModuleKind":
		if isinstance(value, cls):
			return value
		text = str(value).upper()
		for member in cls:
			if member.name == text:
				return member
		raise ValueError(f"unknown module kind {value!r}")


# ----------------------------------------------------------------- merging


def _is_sequence(value: Any) -> bool:
	return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def merge_sequence(target: Any, source: Sequence[Any]) -> Any:
	if _is_sequence(target):
		return [*target, *source]
	return list(source)


def merge_mapping(target: Any, source: Mapping[str, Any]) -> Dict[str, Any]:
	base = dict(target) if isinstance(target, Mapping) else {}
	return merge(base, source)


def merge_scalar(target: Any, source: Any) -> Any:
	return target if source is None else source


def merge_value(target: Any, source: Any) -> Any:
	if _is_sequence(source):
		return merge_sequence(target, source)
	if isinstance(source, Mapping):
		return merge_mapping(target, source)
	return merge_scalar(target, source)


def merge(target: Dict[str, Any], *sources: Mapping[str, Any]) -> Dict[str, Any]:
	"""Merge `sources` into `target` in order (mutates and returns `target`)."""
	for source in sources:
		for key, value in source.items():
			merged = merge_value(target.get(key), value)
			if merged is not None or key in target:
				target[key] = merged
	return target


# ----------------------------------------------------------------- layers

_CAMEL = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake(key: str) -> str:
	"""`noImplicitUseStrict` -> `no_implicit_use_strict`; snake_case passes through."""
	return _CAMEL.sub(r"_\1", key).lower()


def sanitize(options: Any) -> Dict[str, Any]:
	"""
	Keep only the caller-overridable top-level keys.

	Both `compiler_options`/`renamed_dependencies` and the camelCase
	spellings are accepted; compiler option names are normalized to
	snake_case. Anything else, including a non-mapping argument, is dropped.
	"""
	if not isinstance(options, Mapping):
		return {}
	out: Dict[str, Any] = {}
	for key, value in options.items():
		name = _snake(str(key))
		if name == "compiler_options" and isinstance(value, Mapping):
			out[name] = merge(out.get(name, {}), {_snake(str(k)): v for k, v in value.items()})
		elif name == "renamed_dependencies" and isinstance(value, Mapping):
			out[name] = merge(out.get(name, {}), value)
	return out


DEFAULT_COMPILER_OPTIONS: Mapping[str, Any] = MappingProxyType(
	{
		"no_implicit_use_strict": True,
		"target": ScriptTarget.ES3,
	}
)

MANDATORY_COMPILER_OPTIONS: Mapping[str, Any] = MappingProxyType(
	{
		"isolated_modules": True,
		"no_resolve": True,
		"no_lib": True,
		"target": ScriptTarget.ES3,
		"module": ModuleKind.NONE,
		# The reference compiler never writes declaration files.
		"emit_declaration_only": False,
	}
)


# ------------------------------------------------------------ typed request


@dataclass(frozen=True)
class CompilerOptions:
	target: ScriptTarget = ScriptTarget.ES3
	module: ModuleKind = ModuleKind.NONE
	no_implicit_use_strict: bool = False
	isolated_modules: bool = False
	no_resolve: bool = False
	no_lib: bool = False
	emit_declaration_only: bool = False
	remove_comments: bool = False
	# Options the reference compiler does not interpret, kept for other collaborators.
	extra: Mapping[str, Any] = field(default_factory=dict)

	@classmethod
	def from_mapping(cls, values: Mapping[str, Any]) -> "CompilerOptions":
		known: Dict[str, Any] = {}
		extra: Dict[str, Any] = {}
		for key, value in values.items():
			if key == "target":
				known[key] = ScriptTarget.coerce(value)
			elif key == "module":
				known[key] = ModuleKind.coerce(value)
			elif key in _BOOL_FIELDS:
				known[key] = _flag(key, value)
			else:
				extra[key] = value
		return cls(**known, extra=MappingProxyType(extra))


_BOOL_FIELDS = frozenset(
	{
		"no_implicit_use_strict",
		"isolated_modules",
		"no_resolve",
		"no_lib",
		"emit_declaration_only",
		"remove_comments",
	}
)


def _flag(key: str, value: Any) -> bool:
	"""A boolean option; JSON-ish "true"/"false" spellings are accepted, nothing else."""
	if isinstance(value, bool):
		return value
	if isinstance(value, str) and value.strip().lower() in ("true", "false"):
		return value.strip().lower() == "true"
	raise ValueError(f"compiler option {key!r} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class TransformerLists:
	before: Tuple[TransformerFactory, ...] = ()
	after: Tuple[TransformerFactory, ...] = ()


@dataclass(frozen=True)
class CompileRequest:
	compiler_options: CompilerOptions = field(default_factory=CompilerOptions)
	renamed_dependencies: Mapping[str, str] = field(default_factory=dict)
	transformers: TransformerLists = field(default_factory=TransformerLists)
	file_name: str = "module.ts"


def build_request(
	options: Optional[Mapping[str, Any]] = None,
	*,
	before: Sequence[TransformerFactory] = (),
	after: Sequence[TransformerFactory] = (),
	file_name: str = "module.ts",
) -> CompileRequest:
	"""`merge(merge({}, defaults), sanitize(options), mandatory)` frozen into a request."""
	merged = merge(
		{},
		{"compiler_options": DEFAULT_COMPILER_OPTIONS},
		sanitize(options),
		{
			"compiler_options": MANDATORY_COMPILER_OPTIONS,
			"transformers": {"before": list(before), "after": list(after)},
		},
	)
	transformers = merged.get("transformers", {})
	return CompileRequest(
		compiler_options=CompilerOptions.from_mapping(merged.get("compiler_options", {})),
		renamed_dependencies=MappingProxyType(dict(merged.get("renamed_dependencies") or {})),
		transformers=TransformerLists(
			before=tuple(transformers.get("before", ())),
			after=tuple(transformers.get("after", ())),
		),
		file_name=file_name,
	)


__all__ = [
	"CompileRequest",
	"CompilerOptions",
	"DEFAULT_COMPILER_OPTIONS",
	"MANDATORY_COMPILER_OPTIONS",
	"ModuleKind",
	"ScriptTarget",
	"TransformerFactory",
	"TransformerLists",
	"build_request",
	"merge",
	"merge_mapping",
	"merge_scalar",
	"merge_sequence",
	"merge_value",
	"sanitize",
]
