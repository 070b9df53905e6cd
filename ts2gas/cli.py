# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line front end: `ts2gas <file>` prints the Apps Script translation.

Exit codes:
  0  success
  1  the source could not be compiled (parse or emit error)
  2  usage or I/O problem (missing file, unreadable options)

With --json, failures print `{"exit_code": N, "diagnostics": [...]}` on
stdout; otherwise diagnostics go to stderr as `file:line:col: error: msg`.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from ts2gas.core.diagnostics import Diagnostic
from ts2gas.core.errors import Ts2GasError
from ts2gas.metadata import __version__
from ts2gas.options import build_request
from ts2gas.pipeline import transform


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="ts2gas", description="Transpile TypeScript into Google Apps Script")
	p.add_argument("source", nargs="?", default=None, help="TypeScript file to transpile ('-' reads stdin)")
	p.add_argument("-e", "--eval", dest="code", default=None, help="Transpile this source text instead of a file")
	p.add_argument("--out", type=Path, default=None, help="Write the result to this file instead of stdout")
	p.add_argument(
		"--options",
		type=Path,
		default=None,
		help="JSON file with `compiler_options` and/or `renamed_dependencies`",
	)
	p.add_argument("--remove-comments", action="store_true", help="Drop source comments from the output")
	p.add_argument("--json", action="store_true", help="Emit failures as machine-readable JSON")
	p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
	return p


def _load_options(path: Optional[Path]) -> Dict[str, Any]:
	if path is None:
		return {}
	obj = json.loads(path.read_text(encoding="utf-8"))
	if not isinstance(obj, dict):
		raise ValueError(f"{path}: options must be a JSON object")
	return obj


def _flag_options(args: argparse.Namespace) -> Dict[str, Any]:
	compiler_options: Dict[str, Any] = {}
	if args.remove_comments:
		compiler_options["remove_comments"] = True
	return {"compiler_options": compiler_options} if compiler_options else {}


def _diag_to_json(diag: Diagnostic, source_name: str) -> Dict[str, Any]:
	obj = diag.to_dict()
	if obj.get("file") is None:
		obj["file"] = source_name
	return obj


def _report(diags: List[Diagnostic], source_name: str, exit_code: int, as_json: bool) -> int:
	if as_json:
		payload = {"exit_code": exit_code, "diagnostics": [_diag_to_json(d, source_name) for d in diags]}
		print(json.dumps(payload))
		return exit_code
	for d in diags:
		if d.span.file is None:
			d = replace(d, span=replace(d.span, file=source_name))
		print(d.format_human(), file=sys.stderr)
	return exit_code


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	if args.code is None and args.source is None:
		p.error("a source file (or '-') or --eval is required")
		return 2

	if args.code is not None:
		source_name, file_name = "<eval>", "module.ts"
		text = args.code
	elif args.source == "-":
		source_name, file_name = "<stdin>", "module.ts"
		text = sys.stdin.read()
	else:
		path = Path(args.source)
		source_name, file_name = str(path), path.name
		try:
			text = path.read_text(encoding="utf-8")
		except OSError as err:
			return _report([Diagnostic(message=f"cannot read source: {err}", phase="io")], source_name, 2, args.json)

	try:
		options = _load_options(args.options)
	except (OSError, ValueError) as err:
		return _report([Diagnostic(message=f"cannot load options: {err}", phase="options")], source_name, 2, args.json)
	# Command line flags win over the options file.
	flags = _flag_options(args)
	if flags:
		options = {**options, "compiler_options": {**options.get("compiler_options", {}), **flags["compiler_options"]}}
	try:
		build_request(options)
	except ValueError as err:
		return _report([Diagnostic(message=f"invalid options: {err}", phase="options")], source_name, 2, args.json)

	try:
		output = transform(text, options, file_name=file_name)
	except Ts2GasError as err:
		diag = err.diagnostic or Diagnostic(message=err.message, code=err.reason_code)
		# Diagnostics name the file the compiler saw; report the path the user gave.
		if diag.span.file is None or diag.span.file == file_name:
			diag = replace(diag, span=replace(diag.span, file=source_name))
		return _report([diag], source_name, 1, args.json)

	if args.out is not None:
		try:
			args.out.write_text(output, encoding="utf-8")
		except OSError as err:
			return _report([Diagnostic(message=f"cannot write output: {err}", phase="io")], source_name, 2, args.json)
	else:
		sys.stdout.write(output)
	return 0


__all__ = ["main"]
