# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Tree touch-ups handed to the compile collaborator."""

from .after import (
	suppress_after,
	suppress_es_module_marker_after,
	suppress_export_from_after,
	suppress_exports_default_after,
)
from .before import comment_out_before, create_commented_statement, no_substitution_before
from .filters import (
	NodeFilter,
	is_es_module_marker,
	is_export_from_node,
	is_exports_default,
	is_identifier_node,
	is_import_node,
)
from .preamble import ExportScan, export_preamble_after, prepend_export_preamble, scan_for_exports

__all__ = [
	"ExportScan",
	"NodeFilter",
	"comment_out_before",
	"create_commented_statement",
	"export_preamble_after",
	"is_es_module_marker",
	"is_export_from_node",
	"is_exports_default",
	"is_identifier_node",
	"is_import_node",
	"no_substitution_before",
	"prepend_export_preamble",
	"scan_for_exports",
	"suppress_after",
	"suppress_es_module_marker_after",
	"suppress_export_from_after",
	"suppress_exports_default_after",
]
