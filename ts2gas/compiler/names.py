# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generated identifier names.

Unique names (`module_1`, `data_1`) are unique across the whole file.
Temporary names (`_a`, `_b`, ...) restart in every function scope but never
collide with a name written in the source or handed out as a unique name.
"""

from __future__ import annotations

import re
import string
from typing import Iterable, List, Set

_NON_IDENT = re.compile(r"\W")


def identifier_from_module_name(module_name: str) -> str:
	"""`./lib/foo-bar` -> `foo_bar`; a leading digit gets an underscore."""
	base = module_name.rstrip("/").rsplit("/", 1)[-1]
	if base[:1].isdigit():
		base = "_" + base
	return _NON_IDENT.sub("_", base) or "module"


class NameGenerator:
	def __init__(self, taken: Iterable[str] = ()) -> None:
		self._taken: Set[str] = set(taken)
		self._temp_counters: List[int] = [0]
		self._scope_names: List[Set[str]] = [set()]

	def reserve(self, name: str) -> None:
		self._taken.add(name)

	def is_taken(self, name: str) -> bool:
		return name in self._taken or any(name in names for names in self._scope_names)

	def unique(self, base: str) -> str:
		i = 1
		while True:
			name = f"{base}_{i}"
			if not self.is_taken(name):
				self._taken.add(name)
				return name
			i += 1

	def fresh(self, base: str) -> str:
		"""`base` itself while it is free, else the next `base_N`."""
		if not self.is_taken(base):
			self._taken.add(base)
			return base
		return self.unique(base)

	def temp(self) -> str:
		"""Next free `_a` .. `_z`, then `_0`, `_1`, ...; `_i` and `_n` are skipped."""
		while True:
			n = self._temp_counters[-1]
			self._temp_counters[-1] += 1
			if n < 26:
				letter = string.ascii_lowercase[n]
				if letter in "in":
					continue
				name = "_" + letter
			else:
				name = f"_{n - 26}"
			if not self.is_taken(name):
				self._scope_names[-1].add(name)
				return name

	def loop_variable(self) -> str:
		if not self.is_taken("_i"):
			self._scope_names[-1].add("_i")
			return "_i"
		return self.temp()

	def push_scope(self) -> None:
		self._temp_counters.append(0)
		self._scope_names.append(set())

	def pop_scope(self) -> None:
		self._temp_counters.pop()
		self._scope_names.pop()


__all__ = ["NameGenerator", "identifier_from_module_name"]
