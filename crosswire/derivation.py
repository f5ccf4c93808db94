"""
Second pass: fold members from heritage into a declaration's own.

A plain reference in the heritage list is direct extension.
Anything with type arguments is structural derivation:
walk the type, find Pick / Omit / intersections of known declarations,
and copy the surviving members as the declaration's own,
with each default rewritten to read from the base by name.
"""
from typing import Optional
from . import syntax
from .ontology import TypeExpression
from .members import Member, Subroutine, ComponentDeclaration
from .space import Layer

KEEP_ONLY = "Pick"
REMOVE_NAMED = "Omit"

def resolve_heritage(session, declaration:ComponentDeclaration, heritage:list[TypeExpression], own:list[Member]) -> list[Member]:
	""" Base members first, in base order; own members replace them by name. """
	layer = Layer()
	for t in heritage:
		if syntax.reference_name(t) is not None:
			found = _extend(session, declaration, syntax.reference_name(t))
		else:
			found = members_from_type(session, declaration, t)
		for member in found:
			layer.replace(member.name, member)
	for member in own:
		layer.replace(member.name, member)
	return list(layer.each_symbol())

def _lookup(session, declaration:ComponentDeclaration, name:str) -> Optional[ComponentDeclaration]:
	base = session.require(name, declaration.path)
	if base is None:
		session.report.unresolved_reference(declaration.name, name)
	else:
		declaration.note_base(base)
	return base

def _extend(session, declaration:ComponentDeclaration, name:str) -> list[Member]:
	base = _lookup(session, declaration, name)
	if base is None: return []
	if declaration.extends is None:
		declaration.extends = base
	return [m.inherit() for m in base.members]

def members_from_type(session, declaration:ComponentDeclaration, t:TypeExpression) -> list[Member]:
	""" Members a structural type expression stands for; last one wins on duplicate names. """
	if isinstance(t, syntax.IntersectionType):
		layer = Layer()
		for part in t.types:
			for member in members_from_type(session, declaration, part):
				layer.replace(member.name, member)
		return list(layer.each_symbol())
	if isinstance(t, syntax.TypeRef) and t.arguments:
		if t.name in (KEEP_ONLY, REMOVE_NAMED) and len(t.arguments) == 2:
			subject, keys = t.arguments
			names = set(syntax.literal_names(keys))
			keep = t.name == KEEP_ONLY
			return [m for m in members_from_type(session, declaration, subject) if (m.name in names) == keep]
		return members_from_type(session, declaration, syntax.IntersectionType(t.arguments))
	name = syntax.reference_name(t)
	if name is None: return []
	base = _lookup(session, declaration, name)
	if base is None: return []
	return [_scoped(base, m) for m in base.members if not (m.synthesized or isinstance(m, Subroutine))]

def _scoped(base:ComponentDeclaration, member:Member) -> Member:
	if member.initializer is None: return member.derive(None)
	return member.derive(syntax.ScopedAccess(base.name, member.name))
