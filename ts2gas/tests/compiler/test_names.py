#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Generated names never collide with source identifiers."""

from __future__ import annotations

from ts2gas.compiler.names import NameGenerator, identifier_from_module_name


def test_module_names() -> None:
	assert identifier_from_module_name("./lib/foo-bar") == "foo_bar"
	assert identifier_from_module_name("lodash") == "lodash"
	assert identifier_from_module_name("./2d") == "_2d"


def test_unique_skips_taken_names() -> None:
	names = NameGenerator({"lib_1"})
	assert names.unique("lib") == "lib_2"
	assert names.unique("lib") == "lib_3"


def test_fresh_prefers_base() -> None:
	names = NameGenerator()
	assert names.fresh("_this") == "_this"
	assert names.fresh("_this") == "_this_1"


def test_temps_are_scoped() -> None:
	names = NameGenerator({"_a"})
	assert names.temp() == "_b"
	names.push_scope()
	# Temps of enclosing scopes stay visible.
	assert names.temp() == "_c"
	assert names.temp() == "_d"
	names.pop_scope()
	assert names.temp() == "_c"


def test_temps_skip_loop_letters() -> None:
	names = NameGenerator()
	temps = [names.temp() for _ in range(14)]
	assert "_i" not in temps and "_n" not in temps
	assert names.loop_variable() == "_i"
