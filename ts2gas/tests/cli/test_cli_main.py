#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Command line front end: exit codes, output routing and diagnostics."""

from __future__ import annotations

import io
import json

import pytest

from ts2gas.cli import main


def test_file_to_stdout(tmp_path, capsys) -> None:
	src = tmp_path / "Code.ts"
	src.write_text("const a: number = 1;\n", encoding="utf-8")
	assert main([str(src)]) == 0
	out = capsys.readouterr().out
	assert out.startswith("// Compiled using ts2gas ")
	assert out.endswith("\nvar a = 1;\n")


def test_eval_source(capsys) -> None:
	assert main(["-e", 'import { a } from "b";']) == 0
	assert '//import { a } from "b";' in capsys.readouterr().out


def test_stdin(monkeypatch, capsys) -> None:
	monkeypatch.setattr("sys.stdin", io.StringIO("let x = 2;\n"))
	assert main(["-"]) == 0
	assert capsys.readouterr().out.endswith("var x = 2;\n")


def test_out_file(tmp_path, capsys) -> None:
	target = tmp_path / "Code.js"
	assert main(["-e", "var a = 1;", "--out", str(target)]) == 0
	assert capsys.readouterr().out == ""
	assert target.read_text(encoding="utf-8").endswith("var a = 1;\n")


def test_parse_error_exit_code(tmp_path, capsys) -> None:
	src = tmp_path / "Bad.ts"
	src.write_text("var = ;\n", encoding="utf-8")
	assert main([str(src)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{src}:1:")
	assert ": error: " in err


def test_emit_error_json(capsys) -> None:
	assert main(["-e", "class A {\n    get x() { return 1; }\n}\n", "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["file"] == "<eval>"
	assert diag["line"] == 2
	assert "accessors" in diag["message"]


def test_missing_file_exit_code(tmp_path, capsys) -> None:
	assert main([str(tmp_path / "nope.ts")]) == 2
	assert "cannot read source" in capsys.readouterr().err


def test_bad_options_file(tmp_path, capsys) -> None:
	opts = tmp_path / "opts.json"
	opts.write_text("[1, 2]", encoding="utf-8")
	assert main(["-e", "var a;", "--options", str(opts)]) == 2
	assert "cannot load options" in capsys.readouterr().err


def test_options_file_and_flags(tmp_path, capsys) -> None:
	opts = tmp_path / "opts.json"
	opts.write_text(json.dumps({"compilerOptions": {"removeComments": False}}), encoding="utf-8")
	assert main(["-e", "// note\nvar a;", "--options", str(opts), "--remove-comments"]) == 0
	assert "// note" not in capsys.readouterr().out


def test_source_is_required() -> None:
	with pytest.raises(SystemExit) as info:
		main([])
	assert info.value.code == 2


def test_non_boolean_option_value(tmp_path, capsys) -> None:
	opts = tmp_path / "opts.json"
	opts.write_text(json.dumps({"compilerOptions": {"removeComments": "yes"}}), encoding="utf-8")
	assert main(["-e", "var a;", "--options", str(opts)]) == 2
	assert "invalid options" in capsys.readouterr().err


def test_spelled_out_false_is_false(tmp_path, capsys) -> None:
	opts = tmp_path / "opts.json"
	opts.write_text(json.dumps({"compilerOptions": {"removeComments": "false"}}), encoding="utf-8")
	assert main(["-e", "// note\nvar a;", "--options", str(opts)]) == 0
	assert "// note" in capsys.readouterr().out
