# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Package identity for the output banner."""

from __future__ import annotations

from importlib import metadata
from typing import Tuple

DIST_NAME = "ts2gas"
# Kept in step with pyproject.toml; used when running from a source checkout.
__version__ = "4.2.0"


def package_identity() -> Tuple[str, str]:
	"""(name, version) of the installed distribution."""
	try:
		return DIST_NAME, metadata.version(DIST_NAME)
	except metadata.PackageNotFoundError:
		return DIST_NAME, __version__


def banner(collaborator_version: str) -> str:
	name, version = package_identity()
	return f"// Compiled using {name} {version} (TypeScript {collaborator_version})"


__all__ = ["DIST_NAME", "__version__", "banner", "package_identity"]
