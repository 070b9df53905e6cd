# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Scope analysis over the parsed tree.

The binder runs once, on the tree the parser produced, before any pass
rewrites it. Every identifier in a reference position is resolved against the
scope chain; the result is keyed by node identity, and lookups made on
rewritten or cloned nodes follow their `original` links back to the parsed
node.

Only what the module lowering needs is recorded: which file-level names are
imports or exports, which namespace members are exported, and whether an
import binding is ever referenced (unreferenced imports are elided).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from ts2gas.syntax.nodes import (
	ArrayBindingPattern,
	ArrowFunction,
	BindingElement,
	Block,
	BreakStatement,
	CatchClause,
	ClassDeclaration,
	Constructor,
	ContinueStatement,
	EnumDeclaration,
	EnumMember,
	ExportDeclaration,
	ExportSpecifier,
	ExternalModuleReference,
	ForInStatement,
	ForOfStatement,
	ForStatement,
	FunctionDeclaration,
	FunctionExpression,
	GetAccessor,
	Identifier,
	ImportClause,
	ImportDeclaration,
	ImportEqualsDeclaration,
	ImportSpecifier,
	InterfaceDeclaration,
	LabeledStatement,
	MethodDeclaration,
	ModuleBlock,
	ModuleDeclaration,
	NamedExports,
	NamedImports,
	NamespaceExport,
	NamespaceImport,
	Node,
	ObjectBindingPattern,
	OmittedExpression,
	Parameter,
	PropertyAccessExpression,
	PropertyAssignment,
	PropertyDeclaration,
	SetAccessor,
	SourceFile,
	TypeAliasDeclaration,
	VariableDeclaration,
	VariableDeclarationList,
	VariableStatement,
	child_field_names,
)
from ts2gas.syntax.visitor import walk


class SymbolKind(Enum):
	VAR = "var"
	LET = "let"
	CONST = "const"
	FUNCTION = "function"
	CLASS = "class"
	ENUM = "enum"
	NAMESPACE = "namespace"
	IMPORT = "import"
	PARAMETER = "parameter"
	TYPE = "type"


# Declarations that keep a local binding next to their export
# (`function f() {}` + `exports.f = f;`).
_HAS_LOCAL = frozenset({SymbolKind.FUNCTION, SymbolKind.CLASS, SymbolKind.ENUM, SymbolKind.NAMESPACE})


@dataclass(eq=False)
class Symbol:
	name: str
	kind: SymbolKind
	declaration: Node
	exported: bool = False
	# "exports" for module exports, the namespace name for namespace members.
	export_container: Optional[str] = None
	# Set by the module lowering once the `require` variable has been named.
	import_module: Optional[str] = None
	# Member read off the required module; None binds the module object itself.
	import_property: Optional[str] = None
	type_only: bool = False
	referenced: bool = False

	@property
	def has_local(self) -> bool:
		return self.kind in _HAS_LOCAL


@dataclass(eq=False)
class Scope:
	parent: Optional["Scope"]
	is_function: bool
	symbols: Dict[str, Symbol] = field(default_factory=dict)

	def lookup(self, name: str) -> Optional[Symbol]:
		scope: Optional[Scope] = self
		while scope is not None:
			sym = scope.symbols.get(name)
			if sym is not None:
				return sym
			scope = scope.parent
		return None

	def function_scope(self) -> "Scope":
		scope = self
		while not scope.is_function:
			assert scope.parent is not None
			scope = scope.parent
		return scope


# (node type, field) pairs whose Identifier is a name, never a reference.
_NAME_FIELDS = frozenset(
	{
		(VariableDeclaration, "name"),
		(Parameter, "name"),
		(BindingElement, "name"),
		(BindingElement, "property_name"),
		(FunctionDeclaration, "name"),
		(FunctionExpression, "name"),
		(ClassDeclaration, "name"),
		(EnumDeclaration, "name"),
		(EnumMember, "name"),
		(ModuleDeclaration, "name"),
		(InterfaceDeclaration, "name"),
		(TypeAliasDeclaration, "name"),
		(PropertyAccessExpression, "name"),
		(PropertyAssignment, "name"),
		(MethodDeclaration, "name"),
		(PropertyDeclaration, "name"),
		(GetAccessor, "name"),
		(SetAccessor, "name"),
		(ImportClause, "name"),
		(NamespaceImport, "name"),
		(ImportSpecifier, "name"),
		(ImportSpecifier, "property_name"),
		(ImportEqualsDeclaration, "name"),
		(ExportSpecifier, "name"),
		(ExportSpecifier, "property_name"),
		(NamespaceExport, "name"),
		(CatchClause, "variable"),
		(LabeledStatement, "label"),
	}
)

_FUNCTION_LIKE = (FunctionDeclaration, FunctionExpression, ArrowFunction, Constructor, MethodDeclaration, GetAccessor, SetAccessor)


def is_name_position(parent: Node, field_name: str) -> bool:
	return (type(parent), field_name) in _NAME_FIELDS


@dataclass
class BindResult:
	source_file: SourceFile
	file_scope: Scope
	is_module: bool
	# Every identifier spelling in the file; generated names must avoid them.
	identifiers: Set[str] = field(default_factory=set)
	references: Dict[Node, Symbol] = field(default_factory=dict)
	declarations: Dict[Node, Symbol] = field(default_factory=dict)
	# File-level exported names in declaration order, including
	# `export { a as b }` aliases (by their exported name).
	export_names: List[str] = field(default_factory=list)
	namespace_exports: Dict[Node, Dict[str, Symbol]] = field(default_factory=dict)

	def resolve(self, node: Node) -> Optional[Symbol]:
		"""Symbol referenced by `node` or by the parsed node it derives from."""
		cur: Optional[Node] = node
		while cur is not None:
			sym = self.references.get(cur)
			if sym is not None:
				return sym
			cur = cur.original
		return None

	def declared_symbol(self, node: Node) -> Optional[Symbol]:
		cur: Optional[Node] = node
		while cur is not None:
			sym = self.declarations.get(cur)
			if sym is not None:
				return sym
			cur = cur.original
		return None

	def is_referenced(self, node: Node) -> bool:
		sym = self.declared_symbol(node)
		return sym is not None and sym.referenced


class Binder:
	"""Declares every binding, then resolves the references collected on the way."""

	def __init__(self, sf: SourceFile) -> None:
		self.sf = sf
		self.file_scope = Scope(None, True)
		self.result = BindResult(sf, self.file_scope, sf.is_external_module)
		self._pending: List[tuple[Identifier, Scope]] = []
		self._export_specifiers: List[ExportSpecifier] = []

	def bind(self) -> BindResult:
		self.result.identifiers.update(n.text for n in walk(self.sf) if isinstance(n, Identifier))
		for stmt in self.sf.statements:
			self._visit(stmt, self.file_scope, container="exports" if self.result.is_module else None)
		for ident, scope in self._pending:
			sym = scope.lookup(ident.text)
			if sym is not None:
				sym.referenced = True
				self.result.references[ident] = sym
		for spec in self._export_specifiers:
			local = spec.property_name or spec.name
			sym = self.file_scope.symbols.get(local.text)
			if sym is not None:
				sym.referenced = True
		return self.result

	# ------------------------------------------------------------ declaring

	def _declare(
		self,
		ident: Identifier,
		scope: Scope,
		kind: SymbolKind,
		decl: Node,
		*,
		exported_to: Optional[str] = None,
	) -> Symbol:
		existing = scope.symbols.get(ident.text)
		if existing is not None:
			# Declaration merging (namespace + namespace, var redeclared) keeps the first symbol.
			self.result.declarations[ident] = existing
			return existing
		sym = Symbol(ident.text, kind, decl)
		if exported_to is not None:
			sym.exported = True
			sym.export_container = exported_to
			if scope is self.file_scope:
				self.result.export_names.append(ident.text)
		scope.symbols[ident.text] = sym
		self.result.declarations[ident] = sym
		return sym

	def _declare_binding(
		self,
		name: Node,
		scope: Scope,
		kind: SymbolKind,
		decl: Node,
		*,
		exported_to: Optional[str] = None,
	) -> None:
		if isinstance(name, Identifier):
			self._declare(name, scope, kind, decl, exported_to=exported_to)
			return
		if isinstance(name, (ObjectBindingPattern, ArrayBindingPattern)):
			for element in name.elements:
				if isinstance(element, OmittedExpression):
					continue
				if element.property_name is not None and not isinstance(element.property_name, Identifier):
					self._visit(element.property_name, scope)
				if element.initializer is not None:
					self._visit(element.initializer, scope)
				self._declare_binding(element.name, scope, kind, decl, exported_to=exported_to)

	# ------------------------------------------------------------- visiting

	def _visit(self, node: Node, scope: Scope, container: Optional[str] = None) -> None:
		"""`container` is where `export`-modified declarations at this level go."""
		exported_to = container if "export" in (getattr(node, "modifiers", None) or []) else None
		if "default" in (getattr(node, "modifiers", None) or []) or "declare" in (getattr(node, "modifiers", None) or []):
			exported_to = None

		if isinstance(node, VariableStatement):
			self._visit_var_list(node.declaration_list, scope, exported_to)
			return
		if isinstance(node, VariableDeclarationList):
			self._visit_var_list(node, scope, None)
			return
		if isinstance(node, FunctionDeclaration):
			if node.name is not None:
				self._declare(node.name, scope.function_scope(), SymbolKind.FUNCTION, node, exported_to=exported_to)
			self._visit_function(node, scope)
			return
		if isinstance(node, _FUNCTION_LIKE):
			self._visit_function(node, scope)
			return
		if isinstance(node, ClassDeclaration):
			if node.name is not None:
				self._declare(node.name, scope, SymbolKind.CLASS, node, exported_to=exported_to)
			if node.heritage is not None:
				self._visit(node.heritage, scope)
			for member in node.members:
				self._visit(member, scope)
			return
		if isinstance(node, EnumDeclaration):
			self._declare(node.name, scope, SymbolKind.ENUM, node, exported_to=exported_to)
			for member in node.members:
				if member.initializer is not None:
					self._visit(member.initializer, scope)
			return
		if isinstance(node, ModuleDeclaration):
			self._visit_namespace(node, scope, exported_to)
			return
		if isinstance(node, (InterfaceDeclaration, TypeAliasDeclaration)):
			self._declare(node.name, scope, SymbolKind.TYPE, node)
			return
		if isinstance(node, ImportDeclaration):
			self._visit_import(node, scope)
			return
		if isinstance(node, ImportEqualsDeclaration):
			self._declare(node.name, scope, SymbolKind.IMPORT, node, exported_to=exported_to)
			if not isinstance(node.module_reference, ExternalModuleReference):
				self._visit(node.module_reference, scope)
			return
		if isinstance(node, ExportDeclaration):
			if node.module_specifier is None and isinstance(node.export_clause, NamedExports):
				for spec in node.export_clause.elements:
					if not (spec.is_type_only or node.is_type_only):
						self._export_specifiers.append(spec)
						if scope is self.file_scope:
							self.result.export_names.append(spec.name.text)
			elif isinstance(node.export_clause, NamedExports) and not node.is_type_only:
				for spec in node.export_clause.elements:
					self.result.export_names.append(spec.name.text)
			return
		if isinstance(node, Block):
			inner = Scope(scope, False)
			for stmt in node.statements:
				self._visit(stmt, inner)
			return
		if isinstance(node, (ForStatement, ForInStatement, ForOfStatement)):
			inner = Scope(scope, False)
			self._visit_children(node, inner)
			return
		if isinstance(node, CatchClause):
			inner = Scope(scope, False)
			if node.variable is not None:
				self._declare_binding(node.variable, inner, SymbolKind.LET, node)
			for stmt in node.block.statements:
				self._visit(stmt, inner)
			return
		if isinstance(node, Identifier):
			self._pending.append((node, scope))
			return
		if isinstance(node, (BreakStatement, ContinueStatement)):
			return
		self._visit_children(node, scope)

	def _visit_children(self, node: Node, scope: Scope) -> None:
		for name in child_field_names(type(node)):
			value = getattr(node, name)
			items: Iterable[object] = value if isinstance(value, list) else (value,)
			for item in items:
				if not isinstance(item, Node):
					continue
				if isinstance(item, Identifier) and is_name_position(node, name):
					continue
				self._visit(item, scope)

	def _visit_var_list(self, decls: VariableDeclarationList, scope: Scope, exported_to: Optional[str]) -> None:
		kind = {"let": SymbolKind.LET, "const": SymbolKind.CONST}.get(decls.flags, SymbolKind.VAR)
		target = scope.function_scope() if kind is SymbolKind.VAR else scope
		for decl in decls.declarations:
			self._declare_binding(decl.name, target, kind, decl, exported_to=exported_to)
			if decl.initializer is not None:
				self._visit(decl.initializer, scope)

	def _visit_function(self, node: Node, scope: Scope) -> None:
		inner = Scope(scope, True)
		name = getattr(node, "name", None)
		if isinstance(node, FunctionExpression) and name is not None:
			self._declare(name, inner, SymbolKind.FUNCTION, node)
		elif name is not None and not isinstance(name, Identifier):
			# Computed member name.
			self._visit(name, scope)
		for param in getattr(node, "parameters", []):
			if param.initializer is not None:
				self._visit(param.initializer, inner)
			self._declare_binding(param.name, inner, SymbolKind.PARAMETER, param)
		body = getattr(node, "body", None)
		if body is None:
			return
		if isinstance(body, Block):
			for stmt in body.statements:
				self._visit(stmt, inner)
		else:
			self._visit(body, inner)

	def _visit_namespace(self, node: ModuleDeclaration, scope: Scope, exported_to: Optional[str]) -> None:
		if not isinstance(node.name, Identifier) or "declare" in node.modifiers:
			return
		self._declare(node.name, scope, SymbolKind.NAMESPACE, node, exported_to=exported_to)
		inner = Scope(scope, True)
		body = node.body
		if isinstance(body, ModuleDeclaration):
			# `namespace A.B {}`: B is an exported member of A.
			self._visit_namespace(body, inner, node.name.text)
		elif isinstance(body, ModuleBlock):
			for stmt in body.statements:
				self._visit(stmt, inner, container=node.name.text)
		self.result.namespace_exports[node] = {n: s for n, s in inner.symbols.items() if s.exported}

	def _visit_import(self, node: ImportDeclaration, scope: Scope) -> None:
		clause = node.import_clause
		if clause is None:
			return
		type_only = clause.is_type_only
		if clause.name is not None:
			sym = self._declare(clause.name, scope, SymbolKind.IMPORT, node)
			sym.import_property = "default"
			sym.type_only = type_only
		bindings = clause.named_bindings
		if isinstance(bindings, NamespaceImport):
			sym = self._declare(bindings.name, scope, SymbolKind.IMPORT, node)
			sym.type_only = type_only
		elif isinstance(bindings, NamedImports):
			for spec in bindings.elements:
				sym = self._declare(spec.name, scope, SymbolKind.IMPORT, node)
				sym.import_property = (spec.property_name or spec.name).text
				sym.type_only = type_only or spec.is_type_only


def bind_source_file(sf: SourceFile) -> BindResult:
	return Binder(sf).bind()


__all__ = ["BindResult", "Binder", "Scope", "Symbol", "SymbolKind", "bind_source_file", "is_name_position"]
