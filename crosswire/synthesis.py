"""
Third pass: members nobody wrote down but everybody downstream expects.

* Each two-way input gets `<m>Change` and `default<M>`, unless declared explicitly.
  A two-way input redefined here re-makes the companions it inherited.
* Nested defaults are gathered into one snapshot member per declaration,
  merged with whatever snapshot the extended base has.
* Components (not bare bindings) get one reader per nested member
  and a single collector for structurally nested children.
"""
from . import syntax
from .ontology import Presence, Kind, capitalize
from .members import (
	Member, TwoWayInput, OneWayInput, EventEmitter, NestedDeclaration,
	NestedSnapshot, NestedChildren, NestedAccessor, ComponentDeclaration,
)
from .space import Layer

SNAPSHOT_NAME = "__defaultNestedValues"
CHILDREN_NAME = "__nestedChildren"

def default_name(name:str) -> str: return "default" + capitalize(name)
def accessor_name(name:str) -> str: return "__getNested" + capitalize(name)

def synthesize(declaration:ComponentDeclaration, members:list[Member]) -> list[Member]:
	layer = Layer()
	for m in members:
		layer.mount(m.name, m)
	for made in _two_way_companions(layer):
		made.origin = declaration
		layer.replace(made.name, made)
	snapshot = nested_snapshot(declaration, layer)
	if snapshot is not None:
		snapshot.origin = declaration
		layer.replace(snapshot.name, snapshot)
	if declaration.kind is Kind.COMPONENT:
		for made in _nested_accessors(layer, snapshot):
			made.origin = declaration
			layer.replace(made.name, made)
	return list(layer.each_symbol())

def _two_way_companions(layer:Layer[Member]):
	made = []
	for m in layer.each_symbol():
		if not isinstance(m, TwoWayInput): continue
		name = default_name(m.name)
		if _needs_companion(layer, m, name):
			presence = Presence.OPTIONAL if m.initializer is None else Presence.REQUIRED
			made.append(_synthetic(OneWayInput(name, m.type_expr, m.initializer, presence)))
		name = m.change_name()
		if _needs_companion(layer, m, name):
			signature = syntax.FunctionType([syntax.Parameter(m.name, m.type_expr)], syntax.KeywordType("void"))
			made.append(_synthetic(EventEmitter(name, signature, syntax.Arrow(), Presence.OPTIONAL)))
	return made

def _needs_companion(layer:Layer[Member], two_way:TwoWayInput, name:str) -> bool:
	""" An own two-way input re-makes any companion it merely inherited. """
	found = layer.symbol(name)
	if found is None: return True
	return found.inherited and found.synthesized and not two_way.inherited

def _synthetic(member:Member) -> Member:
	member.synthesized = True
	return member

def nested_snapshot(declaration:ComponentDeclaration, layer:Layer[Member]):
	""" Own nested defaults first, then the extended base's entries not overridden here. """
	entries = []
	own = set()
	for m in layer.each_symbol():
		if isinstance(m, NestedDeclaration) and not m.inherited:
			own.add(m.name)
			if m.initializer is not None:
				entries.append(syntax.Entry(m.name, m.initializer))
	parent = declaration.extends
	inherited = parent.snapshot() if parent is not None else None
	if inherited is not None:
		holder = syntax.ScopedAccess(parent.name, SNAPSHOT_NAME, construct=True)
		for name in inherited.entry_names():
			if name not in own:
				entries.append(syntax.Entry(name, syntax.FieldAccess(holder, name)))
	if entries:
		return NestedSnapshot(SNAPSHOT_NAME, entries)

def _nested_accessors(layer:Layer[Member], snapshot):
	nested = [m for m in layer.each_symbol() if isinstance(m, NestedDeclaration)]
	if not nested: return []
	if snapshot is None:
		snapshot = layer.symbol(SNAPSHOT_NAME)
	defaults = snapshot.entry_names() if isinstance(snapshot, NestedSnapshot) else []
	made = [NestedChildren(CHILDREN_NAME)]
	for m in nested:
		snapshot_name = SNAPSHOT_NAME if m.name in defaults else None
		made.append(NestedAccessor(accessor_name(m.name), m, snapshot_name, CHILDREN_NAME))
	return made
