# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
CommonJS lowering of import/export syntax.

Goal
----
Turn a module file (one whose *parsed* form has top-level import or export
syntax) into plain statements against `require`, `exports` and `module`:

  - `import x, { a } from "m"`  -> `var m_1 = require("m");`
  - `export var a = 1`          -> `exports.a = 1;`
  - `export function f() {}`    -> `function f() { }` + `exports.f = f;`
  - `export default expr`       -> `var default_1 = expr;` + `exports.default = default_1;`
  - `export = expr`             -> `module.exports = expr;`
  - `export { a as b }`         -> `exports.b = a;`
  - `export * from "m"`         -> `__export(require("m"));`

The file starts with a synthetic `exports.__esModule = true;` marker and a
`exports.a = exports.b = void 0;` chain naming every exported binding. Both
carry the sentinel range.

References to imported and exported bindings are not rewritten in the tree:
an identifier substitution is registered on the context and the printer
applies it while emitting, so identifiers flagged `NO_SUBSTITUTION` keep
their spelling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set

from ts2gas.syntax.factory import (
	clone_identifier,
	create_assignment,
	create_call,
	create_expression_statement,
	create_identifier,
	create_not_emitted_statement,
	create_property_access,
	create_string_literal,
	create_variable_statement,
	create_void_zero,
	update_source_file,
)
from ts2gas.syntax.nodes import (
	BinaryExpression,
	ClassDeclaration,
	EmitFlags,
	EnumDeclaration,
	ExportAssignment,
	ExportDeclaration,
	ExpressionStatement,
	ExternalModuleReference,
	FunctionDeclaration,
	Identifier,
	ImportDeclaration,
	ImportEqualsDeclaration,
	ModuleDeclaration,
	NamedExports,
	NamedImports,
	NamespaceExport,
	NamespaceImport,
	Node,
	SourceFile,
	StringLiteral,
	SyntaxKind,
	TrueKeyword,
	VariableStatement,
)
from ts2gas.syntax.visitor import update_node

from .binder import BindResult, SymbolKind
from .context import TransformationContext
from .errors import emit_error
from .names import NameGenerator, identifier_from_module_name


def _at(node: Node, source: Node) -> Node:
	"""Give a generated statement the range of the statement it replaces."""
	node.pos = source.pos
	node.end = source.end
	node.original = source
	return node


def create_export_assignment(container: str, name: str, value: Node) -> BinaryExpression:
	return create_assignment(create_property_access(container, name), value)


def _local_ref(ident: Identifier) -> Identifier:
	ref = clone_identifier(ident)
	ref.emit_flags |= EmitFlags.LOCAL_NAME
	return ref


def lower_exported_declaration(stmt: Node, container: str, *, default_name: Optional[str] = None) -> List[Node]:
	"""
	Rewrite one `export`-modified declaration into statements that publish it
	on `container` (`exports` or a namespace object).

	Variables become assignments; functions and classes keep their local
	declaration and are followed by `container.name = name;`.
	"""
	modifiers: List[str] = list(getattr(stmt, "modifiers", None) or [])
	is_default = "default" in modifiers
	stripped = [m for m in modifiers if m not in ("export", "default")]

	if isinstance(stmt, VariableStatement):
		kept = []
		assignments: List[Node] = []
		for decl in stmt.declaration_list.declarations:
			if not isinstance(decl.name, Identifier):
				raise emit_error("exported destructuring declarations are not supported", decl)
			if decl.name.emit_flags & EmitFlags.LOCAL_NAME:
				# `var E;` ahead of an enum or namespace body keeps its local.
				kept.append(decl)
			elif decl.initializer is not None:
				assignments.append(create_export_assignment(container, decl.name.text, decl.initializer))
		out: List[Node] = []
		if kept:
			decls = update_node(stmt.declaration_list, declarations=kept)
			out.append(update_node(stmt, declaration_list=decls, modifiers=stripped))
		if assignments:
			expr = assignments[0]
			for extra in assignments[1:]:
				expr = BinaryExpression(expr, ",", extra)
			out.append(_at(create_expression_statement(expr), stmt))
		return out or [create_not_emitted_statement(stmt)]

	if isinstance(stmt, (FunctionDeclaration, ClassDeclaration)):
		name = stmt.name
		if name is None:
			name = create_identifier(default_name or "default_1")
			decl = update_node(stmt, name=name, modifiers=stripped)
		else:
			decl = update_node(stmt, modifiers=stripped)
		exported = "default" if is_default else name.text
		publish = create_expression_statement(create_export_assignment(container, exported, _local_ref(name)))
		return [decl, publish]

	return [stmt]


def _specifier_text(node: StringLiteral, renamed: Mapping[str, str]) -> str:
	return renamed.get(node.value, node.value)


def _require(specifier: str) -> Node:
	return create_call(create_identifier("require"), [create_string_literal(specifier)])


def merged_declaration_name(stmt: Node) -> Optional[str]:
	"""Name of the enum or namespace an erased statement (`var E;` or its IIFE) stands for."""
	source = stmt.original
	if isinstance(source, (EnumDeclaration, ModuleDeclaration)) and isinstance(source.name, Identifier):
		return source.name.text
	return None


def create_es_module_marker() -> ExpressionStatement:
	"""`exports.__esModule = true;` with the sentinel range."""
	return create_expression_statement(create_assignment(create_property_access("exports", "__esModule"), TrueKeyword()))


@dataclass
class CommonJsModuleTransformer:
	"""Lower module syntax of one file; scripts only get the identifier substitution."""

	context: TransformationContext
	bind: BindResult
	names: NameGenerator
	renamed_dependencies: Mapping[str, str] = field(default_factory=dict)
	_specifier_exports: Dict[str, List[str]] = field(default_factory=dict)
	# Last IIFE of each (possibly merged) enum or namespace.
	_merged_tails: Dict[str, Node] = field(default_factory=dict)

	def rewrite_source_file(self, sf: SourceFile) -> SourceFile:
		# Namespace members are substituted in scripts too.
		self.context.add_substitution(SyntaxKind.IDENTIFIER, self.substitute_identifier, name="binding_identifiers")
		if not sf.is_external_module:
			return sf
		self._name_imports(sf.statements)
		self._collect_specifier_exports(sf.statements)
		for stmt in sf.statements:
			merged = merged_declaration_name(stmt)
			if merged is not None and isinstance(stmt, ExpressionStatement):
				self._merged_tails[merged] = stmt

		body: List[Node] = []
		for stmt in sf.statements:
			body.extend(self._rewrite_stmt(stmt))

		header: List[Node] = []
		opts = self.context.compiler_options
		if opts is not None and not getattr(opts, "no_implicit_use_strict", True):
			header.append(create_expression_statement(create_string_literal("use strict")))
		header.append(create_es_module_marker())
		chain = self._void_chain(sf.statements)
		if chain is not None:
			header.append(chain)
		return update_source_file(sf, header + body)

	# --------------------------------------------------------- substitution

	def substitute_identifier(self, node: Node) -> Node:
		if not isinstance(node, Identifier):
			return node
		if node.emit_flags & (EmitFlags.NO_SUBSTITUTION | EmitFlags.LOCAL_NAME):
			return node
		sym = self.bind.resolve(node)
		if sym is None and node.emit_flags & EmitFlags.EXPORT_NAME:
			sym = self.bind.declared_symbol(node)
		if sym is None:
			return node
		if sym.import_module is not None and sym.import_property is not None:
			return create_property_access(sym.import_module, sym.import_property)
		if sym.exported and sym.export_container and (not sym.has_local or node.emit_flags & EmitFlags.EXPORT_NAME):
			return create_property_access(sym.export_container, sym.name)
		return node

	# -------------------------------------------------------------- imports

	def _module_var(self, specifier: StringLiteral) -> str:
		return self.names.unique(identifier_from_module_name(specifier.value))

	def _name_imports(self, statements: List[Node]) -> None:
		for stmt in statements:
			if not isinstance(stmt, ImportDeclaration) or stmt.import_clause is None:
				continue
			clause = stmt.import_clause
			symbols = []
			if clause.name is not None:
				symbols.append(self.bind.declared_symbol(clause.name))
			bindings = clause.named_bindings
			module_var: Optional[str] = None
			if isinstance(bindings, NamespaceImport):
				module_var = bindings.name.text
			elif isinstance(bindings, NamedImports):
				symbols.extend(self.bind.declared_symbol(spec.name) for spec in bindings.elements)
			live = [s for s in symbols if s is not None and not s.type_only]
			if not live:
				continue
			if module_var is None:
				module_var = self._module_var(stmt.module_specifier)
			for sym in live:
				sym.import_module = module_var

	def _lower_import(self, stmt: ImportDeclaration) -> List[Node]:
		spec = _specifier_text(stmt.module_specifier, self.renamed_dependencies)
		clause = stmt.import_clause
		if clause is None:
			return [_at(create_expression_statement(_require(spec)), stmt)]
		if clause.is_type_only:
			return [create_not_emitted_statement(stmt)]
		bindings = clause.named_bindings
		idents: List[Identifier] = []
		if clause.name is not None:
			idents.append(clause.name)
		if isinstance(bindings, NamespaceImport):
			idents.append(bindings.name)
		elif isinstance(bindings, NamedImports):
			idents.extend(s.name for s in bindings.elements if not s.is_type_only)
		used = [i for i in idents if self.bind.is_referenced(i)]
		if not used:
			return [create_not_emitted_statement(stmt)]
		if isinstance(bindings, NamespaceImport):
			var_name = bindings.name.text
		else:
			sym = self.bind.declared_symbol(used[0])
			assert sym is not None and sym.import_module is not None
			var_name = sym.import_module
		return [_at(create_variable_statement(var_name, _require(spec)), stmt)]

	def _lower_import_equals(self, stmt: ImportEqualsDeclaration) -> List[Node]:
		ref = stmt.module_reference
		assert isinstance(ref, ExternalModuleReference)
		spec = _specifier_text(ref.expression, self.renamed_dependencies)
		if "export" in stmt.modifiers:
			assign = create_export_assignment("exports", stmt.name.text, _require(spec))
			return [_at(create_expression_statement(assign), stmt)]
		if not self.bind.is_referenced(stmt.name):
			return [create_not_emitted_statement(stmt)]
		return [_at(create_variable_statement(stmt.name.text, _require(spec)), stmt)]

	# -------------------------------------------------------------- exports

	def _collect_specifier_exports(self, statements: List[Node]) -> None:
		"""`export { a as b }` without `from`: local name -> exported names."""
		for stmt in statements:
			if not isinstance(stmt, ExportDeclaration) or stmt.module_specifier is not None or stmt.is_type_only:
				continue
			if not isinstance(stmt.export_clause, NamedExports):
				continue
			for spec in stmt.export_clause.elements:
				if spec.is_type_only:
					continue
				local = (spec.property_name or spec.name).text
				self._specifier_exports.setdefault(local, []).append(spec.name.text)

	def _declared_names(self, stmt: Node) -> List[str]:
		if isinstance(stmt, VariableStatement):
			return [d.name.text for d in stmt.declaration_list.declarations if isinstance(d.name, Identifier)]
		if isinstance(stmt, (FunctionDeclaration, ClassDeclaration)) and stmt.name is not None:
			return [stmt.name.text]
		return []

	def _is_local_declaration(self, name: str) -> bool:
		sym = self.bind.file_scope.symbols.get(name)
		return sym is not None and sym.import_module is None and sym.kind not in (SymbolKind.IMPORT, SymbolKind.TYPE)

	def _publish_specifiers(self, names: List[str]) -> List[Node]:
		out: List[Node] = []
		for local in names:
			for exported in self._specifier_exports.get(local, []):
				value = create_identifier(local, flags=EmitFlags.LOCAL_NAME)
				out.append(create_expression_statement(create_export_assignment("exports", exported, value)))
		return out

	def _lower_export_declaration(self, stmt: ExportDeclaration) -> List[Node]:
		if stmt.is_type_only:
			return [create_not_emitted_statement(stmt)]
		clause = stmt.export_clause
		if stmt.module_specifier is None:
			out: List[Node] = []
			assert isinstance(clause, NamedExports)
			for spec in clause.elements:
				if spec.is_type_only:
					continue
				local = spec.property_name or spec.name
				if self._is_local_declaration(local.text):
					continue
				value = self._imported_value(local)
				out.append(create_expression_statement(create_export_assignment("exports", spec.name.text, value)))
			if out:
				_at(out[0], stmt)
				return out
			return [create_not_emitted_statement(stmt)]

		spec_text = _specifier_text(stmt.module_specifier, self.renamed_dependencies)
		if clause is None:
			self.context.request_helper("__export")
			call = create_call(create_identifier("__export"), [_require(spec_text)])
			return [_at(create_expression_statement(call), stmt)]
		if isinstance(clause, NamespaceExport):
			assign = create_export_assignment("exports", clause.name.text, _require(spec_text))
			return [_at(create_expression_statement(assign), stmt)]
		assert isinstance(clause, NamedExports)
		module_var = self._module_var(stmt.module_specifier)
		out = [_at(create_variable_statement(module_var, _require(spec_text)), stmt)]
		for spec in clause.elements:
			if spec.is_type_only:
				continue
			imported = (spec.property_name or spec.name).text
			value = create_property_access(module_var, imported)
			out.append(create_expression_statement(create_export_assignment("exports", spec.name.text, value)))
		return out

	def _imported_value(self, local: Identifier) -> Node:
		sym = self.bind.file_scope.symbols.get(local.text)
		if sym is not None and sym.import_module is not None and sym.import_property is not None:
			return create_property_access(sym.import_module, sym.import_property)
		return create_identifier(local.text, flags=EmitFlags.LOCAL_NAME)

	def _lower_export_assignment(self, stmt: ExportAssignment) -> List[Node]:
		if stmt.is_export_equals:
			assign = create_assignment(create_property_access("module", "exports"), stmt.expression)
			return [_at(create_expression_statement(assign), stmt)]
		if isinstance(stmt.expression, Identifier):
			assign = create_export_assignment("exports", "default", stmt.expression)
			return [_at(create_expression_statement(assign), stmt)]
		temp = self.names.unique("default")
		binding = _at(create_variable_statement(temp, stmt.expression), stmt)
		publish = create_expression_statement(
			create_export_assignment("exports", "default", create_identifier(temp, flags=EmitFlags.LOCAL_NAME))
		)
		return [binding, publish]

	def _void_chain(self, statements: List[Node]) -> Optional[ExpressionStatement]:
		"""`exports.c = exports.b = exports.a = void 0;` over every exported name.

		Variables, classes and specifiers are listed in declaration order and
		exported functions after them; the chain assigns the last one first.
		"""
		names: List[str] = []
		functions: List[str] = []
		seen: Set[str] = set()

		def add(name: str, target: List[str]) -> None:
			if name not in seen and name != "default":
				seen.add(name)
				target.append(name)

		for stmt in statements:
			mods = getattr(stmt, "modifiers", None) or []
			if isinstance(stmt, ExportDeclaration) and not stmt.is_type_only:
				if isinstance(stmt.export_clause, NamedExports):
					for spec in stmt.export_clause.elements:
						if not spec.is_type_only:
							add(spec.name.text, names)
				elif isinstance(stmt.export_clause, NamespaceExport):
					add(stmt.export_clause.name.text, names)
				continue
			if "export" not in mods or "default" in mods:
				continue
			if isinstance(stmt, FunctionDeclaration):
				for name in self._declared_names(stmt):
					add(name, functions)
			elif isinstance(stmt, ImportEqualsDeclaration):
				add(stmt.name.text, names)
			else:
				for name in self._declared_names(stmt):
					add(name, names)
		ordered = names + functions
		if not ordered:
			return None
		expr: Node = create_void_zero()
		for name in ordered:
			expr = create_export_assignment("exports", name, expr)
		return create_expression_statement(expr)

	# ----------------------------------------------------------- statements

	def _rewrite_stmt(self, stmt: Node) -> List[Node]:
		if isinstance(stmt, ImportDeclaration):
			return self._lower_import(stmt)
		if isinstance(stmt, ImportEqualsDeclaration) and isinstance(stmt.module_reference, ExternalModuleReference):
			return self._lower_import_equals(stmt)
		if isinstance(stmt, ExportDeclaration):
			return self._lower_export_declaration(stmt)
		if isinstance(stmt, ExportAssignment):
			return self._lower_export_assignment(stmt)
		declared = self._declared_names(stmt)
		merged = merged_declaration_name(stmt)
		if merged is not None:
			# The binding only holds the object once the IIFE has run.
			declared = [merged] if self._merged_tails.get(merged) is stmt else []
		if "export" in (getattr(stmt, "modifiers", None) or []):
			default_name = None
			if isinstance(stmt, (FunctionDeclaration, ClassDeclaration)) and stmt.name is None:
				default_name = self.names.unique("default")
			out = lower_exported_declaration(stmt, "exports", default_name=default_name)
		else:
			out = [stmt]
		return out + self._publish_specifiers(declared)


__all__ = [
	"CommonJsModuleTransformer",
	"create_es_module_marker",
	"create_export_assignment",
	"lower_exported_declaration",
]
