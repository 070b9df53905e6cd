#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Layer merging rules and caller option sanitizing."""

from __future__ import annotations

from ts2gas.options import merge, merge_mapping, merge_scalar, merge_sequence, merge_value, sanitize


def test_sequences_concatenate_target_first() -> None:
	assert merge_sequence(["A"], ["B"]) == ["A", "B"]
	assert merge({"xs": ["A"]}, {"xs": ["B"]}) == {"xs": ["A", "B"]}


def test_sequence_replaces_non_sequence() -> None:
	assert merge_sequence("text", ["B"]) == ["B"]
	assert merge_sequence(None, ("B",)) == ["B"]


def test_non_sequence_replaces_sequence() -> None:
	assert merge({"x": ["A"]}, {"x": 3}) == {"x": 3}


def test_mappings_merge_recursively() -> None:
	target = {"compiler_options": {"target": "ES5", "nested": {"a": 1}}}
	source = {"compiler_options": {"no_lib": True, "nested": {"b": 2}}}
	assert merge(target, source) == {
		"compiler_options": {"target": "ES5", "no_lib": True, "nested": {"a": 1, "b": 2}},
	}


def test_mapping_onto_scalar() -> None:
	assert merge_mapping(5, {"a": 1}) == {"a": 1}


def test_none_never_overwrites() -> None:
	assert merge_scalar(1, None) == 1
	assert merge({"a": 1}, {"a": None}) == {"a": 1}
	assert merge({}, {"a": None}) == {}


def test_defined_scalar_overwrites() -> None:
	assert merge_value(1, 2) == 2
	assert merge_value(True, False) is False
	assert merge({"a": "x"}, {"a": "y"}) == {"a": "y"}


def test_merge_mutates_and_returns_target() -> None:
	target = {"a": 1}
	assert merge(target, {"b": 2}, {"c": 3}) is target
	assert target == {"a": 1, "b": 2, "c": 3}


def test_later_sources_win() -> None:
	assert merge({}, {"a": 1}, {"a": 2}, {"a": None}) == {"a": 2}


def test_sanitize_drops_unknown_keys() -> None:
	assert sanitize({"compiler_options": {"target": "ES5"}, "transformers": {"before": [1]}, "junk": 1}) == {
		"compiler_options": {"target": "ES5"},
	}


def test_sanitize_keeps_renamed_dependencies() -> None:
	assert sanitize({"renamed_dependencies": {"a": "b"}}) == {"renamed_dependencies": {"a": "b"}}


def test_sanitize_accepts_camel_case() -> None:
	assert sanitize({"compilerOptions": {"noImplicitUseStrict": False}, "renamedDependencies": {"x": "y"}}) == {
		"compiler_options": {"no_implicit_use_strict": False},
		"renamed_dependencies": {"x": "y"},
	}


def test_sanitize_merges_both_spellings() -> None:
	out = sanitize({"compilerOptions": {"removeComments": True}, "compiler_options": {"no_lib": False}})
	assert out == {"compiler_options": {"remove_comments": True, "no_lib": False}}


def test_sanitize_non_mapping() -> None:
	assert sanitize(None) == {}
	assert sanitize(["compiler_options"]) == {}
	assert sanitize({"compiler_options": "ES5"}) == {}
