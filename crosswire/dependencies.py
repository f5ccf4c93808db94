"""
Which inputs, states, and context values does a piece of code touch?

The answer is an ordered set of identifiers in first-occurrence order.
It may be wider than strictly needed (an aggregate token stands for
all of its members) but must never miss anything, because emitters
use these sets verbatim as memo keys and invalidation lists.

Expression-level walks leave a marker wherever code reads or calls
another method or accessor of the same declaration. Member-level
analysis replaces each marker with the callee's own set. Mutually
recursive members are solved together and share one combined set.
"""
from typing import Optional, Iterable, NamedTuple, Union
from boozetools.support.foundation import Visitor, strongly_connected_components_hashable
from . import syntax
from .ontology import PROPS, CONTEXT, AGGREGATES, ValueExpression
from .members import (
	Member, MemberTable, Access, is_this_props, Subroutine, TwoWayInput, InternalState,
	ConsumerBinding, NestedDeclaration, NestedAccessor, NestedChildren, ComponentDeclaration,
)
from .synthesis import accessor_name

class DependencySet:
	""" Ordered, de-duplicated by first occurrence. Each entry remembers its aggregate source. """
	def __init__(self, items:Iterable[tuple[str, Optional[str]]]=()):
		self._order = []
		self._source = {}
		for name, source in items:
			self.add(name, source)

	def add(self, name:str, source:Optional[str]=None):
		if name not in self._source:
			self._order.append(name)
			self._source[name] = source

	def update(self, other:"DependencySet"):
		for name in other:
			self.add(name, other.source(name))

	def source(self, name:str) -> Optional[str]: return self._source[name]

	def collapsed(self) -> "DependencySet":
		""" Where an aggregate token is present, it stands in for every member of that source. """
		present = AGGREGATES.intersection(self._order)
		return DependencySet(
			(name, self._source[name]) for name in self._order
			if name in AGGREGATES or self._source[name] not in present
		)

	def names(self) -> list[str]: return list(self._order)
	def __iter__(self): return iter(self._order)
	def __len__(self): return len(self._order)
	def __contains__(self, name): return name in self._source
	def __eq__(self, other):
		if isinstance(other, DependencySet): return self._order == other._order
		if isinstance(other, list): return self._order == other
		return NotImplemented
	def __repr__(self): return "<DependencySet %r>" % self._order

class Calls(NamedTuple):
	""" Stands for "whatever the named member depends on", until member-level analysis fills it in. """
	name: str

Trail = list[Union[tuple[str, Optional[str]], Calls]]

class DependencyWalk(Visitor):
	"""
	Pre-order, left to right. In reads-only mode, an assignment target
	contributes what it would read rather than what it would write.
	"""
	trail: Trail

	def __init__(self, table:MemberTable, reads_only:bool=False):
		self._table = table
		self._reads_only = reads_only
		self.trail = []

	def walk(self, phrase) -> Trail:
		if phrase is not None:
			self.visit(phrase)
		return self.trail

	def _add(self, name:str, source:Optional[str]=None):
		self.trail.append((name, source))

	def _tour(self, items):
		for item in items: self.visit(item)

	def _read(self, access:Access):
		member = access.member
		if member is None:
			if access.through_props: self._add(access.name, PROPS)
		elif isinstance(member, NestedDeclaration) and isinstance(self._table.get(accessor_name(member.name)), NestedAccessor):
			self.trail.append(Calls(accessor_name(member.name)))
		elif isinstance(member, Subroutine):
			self.trail.append(Calls(member.name))
		elif member.aggregate == PROPS:
			self._add(member.name, PROPS)
		elif isinstance(member, InternalState):
			self._add(member.name)
		elif isinstance(member, ConsumerBinding):
			self._add(member.name, CONTEXT)
		# Mutable state, handles, and providers are not reactive.

	def _write(self, access:Access, site, reads_too:bool):
		self._table.check_writable(access, site)
		member = access.member
		if isinstance(member, TwoWayInput):
			if self._reads_only or reads_too: self._read(access)
			if not self._reads_only: self._add(member.change_name(), PROPS)
		elif isinstance(member, InternalState):
			if self._reads_only or reads_too: self._read(access)
		else:
			self._read(access)

	def visit_This(self, this:syntax.This):
		self._add(PROPS)
		self._add(CONTEXT)
		for m in self._table.each(InternalState):
			self._add(m.name)

	def visit_Name(self, name:syntax.Name): pass
	def visit_Literal(self, literal:syntax.Literal): pass
	def visit_ScopedAccess(self, sa:syntax.ScopedAccess): pass

	def visit_FieldAccess(self, fa:syntax.FieldAccess):
		access = self._table.resolve(fa)
		if access is not None: self._read(access)
		elif is_this_props(fa): self._add(PROPS)
		else: self.visit(fa.lhs)

	def visit_ElementAccess(self, ea:syntax.ElementAccess):
		self.visit(ea.lhs)
		self.visit(ea.index)

	def visit_Call(self, call:syntax.Call):
		self.visit(call.fn_exp)
		self._tour(call.args)

	def visit_New(self, new:syntax.New): self._tour(new.args)

	def visit_BinExp(self, bx:syntax.BinExp):
		self.visit(bx.lhs)
		self.visit(bx.rhs)

	def visit_UnaryExp(self, ux:syntax.UnaryExp): self.visit(ux.arg)

	def visit_Assign(self, assign:syntax.Assign):
		access = self._table.resolve(assign.target)
		if access is None: self.visit(assign.target)
		else: self._write(access, assign, assign.is_compound())
		self.visit(assign.value)

	def visit_UpdateExp(self, ux:syntax.UpdateExp):
		access = self._table.resolve(ux.arg)
		if access is None: self.visit(ux.arg)
		else: self._write(access, ux, True)

	def visit_Cond(self, cond:syntax.Cond):
		self.visit(cond.if_part)
		self.visit(cond.then_part)
		self.visit(cond.else_part)

	def visit_ArrayLiteral(self, al:syntax.ArrayLiteral): self._tour(al.elts)
	def visit_Spread(self, spread:syntax.Spread): self.visit(spread.expr)
	def visit_Entry(self, entry:syntax.Entry): self.visit(entry.value)
	def visit_ObjectLiteral(self, ol:syntax.ObjectLiteral): self._tour(ol.entries)
	def visit_Arrow(self, arrow:syntax.Arrow): self.visit(arrow.body)

	def visit_Block(self, block:syntax.Block): self._tour(block.steps)

	def visit_Return(self, ret:syntax.Return):
		if ret.expr is not None: self.visit(ret.expr)

	def visit_If(self, step:syntax.If):
		self.visit(step.test)
		self.visit(step.then_part)
		if step.else_part is not None: self.visit(step.else_part)

	def visit_Let(self, let:syntax.Let):
		pattern, init = let.pattern, let.init
		if isinstance(pattern, syntax.ObjectPattern) and is_this_props(init):
			for name in pattern.names:
				self._read(Access(name, self._table.get(name), True))
			if pattern.rest: self._add(PROPS)
		elif isinstance(pattern, syntax.ObjectPattern) and isinstance(init, syntax.This):
			for name in pattern.names:
				self._read(Access(name, self._table.get(name), False))
			if pattern.rest: self.visit(init)
		elif init is not None:
			self.visit(init)


def _settle(trail:Trail, solved:Optional[dict[str, DependencySet]]) -> DependencySet:
	result = DependencySet()
	for item in trail:
		if isinstance(item, Calls):
			if solved is not None and item.name in solved:
				result.update(solved[item.name])
		else:
			result.add(*item)
	return result.collapsed()

def dependencies(expr:ValueExpression, table:MemberTable, solved:Optional[dict[str, DependencySet]]=None) -> DependencySet:
	"""
	What an expression reads or writes. Calls to other members contribute
	nothing unless `solved` (from member_dependencies) says what they need.
	"""
	return _settle(DependencyWalk(table).walk(expr), solved)

def all_dependencies(expr:ValueExpression, table:MemberTable, solved:Optional[dict[str, DependencySet]]=None) -> DependencySet:
	""" Like `dependencies`, but an assignment counts as a read of its target. """
	return _settle(DependencyWalk(table, reads_only=True).walk(expr), solved)

def member_trail(member:Member, table:MemberTable) -> Trail:
	if isinstance(member, NestedAccessor):
		return [(member.nested.name, PROPS), Calls(member.children_name)]
	if isinstance(member, NestedChildren):
		return [("children", PROPS)]
	if isinstance(member, Subroutine):
		return DependencyWalk(table).walk(member.body)
	return DependencyWalk(table).walk(member.initializer)

def member_dependencies(declaration:ComponentDeclaration, table:Optional[MemberTable]=None) -> dict[str, DependencySet]:
	""" One set per method and accessor, with calls to sibling members expanded in place. """
	if table is None: table = MemberTable(declaration.members, declaration.name)
	trails = {m.name: member_trail(m, table) for m in declaration.members if isinstance(m, Subroutine)}
	graph = {
		name: set(item.name for item in trail if isinstance(item, Calls) and item.name in trails)
		for name, trail in trails.items()
	}
	component_of = {}
	for scc in strongly_connected_components_hashable(graph):
		component = [name for name in trails if name in scc]
		for name in component: component_of[name] = component

	solved = {}
	def solve(name:str) -> DependencySet:
		if name not in solved:
			component = component_of[name]
			result = DependencySet()
			for peer in component:
				for item in trails[peer]:
					if isinstance(item, Calls):
						if item.name in trails and item.name not in component:
							result.update(solve(item.name))
					else:
						result.add(*item)
			collapsed = result.collapsed()
			for peer in component: solved[peer] = collapsed
		return solved[name]

	return {name: solve(name) for name in trails}
