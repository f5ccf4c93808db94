"""
What a per-target emitter gets, and what it must be able to handle.

An emitter receives a LoweredComponent: the frozen declaration, the
lowered body of every method and accessor, and their dependency sets.
It must have a visit method for every member variant; the base class
here raises for each so a new target cannot silently skip a role.

How often things recompute depends on the target's discipline,
and that is worked out once, here, as a MemoPlan.
"""
from enum import Enum
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import PROPS, CONTEXT
from .members import (
	Member, ComponentDeclaration, Subroutine, ComputedAccessor, ProviderAccessor,
	ConsumerBinding,
)
from .dependencies import DependencySet

class Discipline(Enum):
	PAIRED_STATE = "paired value+setter state"
	CACHED_GETTERS = "cached getters"
	CHANGE_DETECTION = "change detection"

TARGETS = {
	"react": Discipline.PAIRED_STATE,
	"preact": Discipline.PAIRED_STATE,
	"inferno": Discipline.PAIRED_STATE,
	"vue": Discipline.CACHED_GETTERS,
	"angular": Discipline.CHANGE_DETECTION,
}

class MemoPlan:
	"""
	keys: for paired state, the memo key list of every method and accessor.
	cached: getters worth caching between renders (those handing out fresh objects).
	invalidation: identifier -> cached getters to drop when it changes.
	"""
	discipline: Discipline
	keys: dict[str, list[str]]
	cached: list[str]
	invalidation: dict[str, list[str]]

	def __init__(self, discipline:Discipline):
		self.discipline = discipline
		self.keys = {}
		self.cached = []
		self.invalidation = {}

	def invalidate(self, identifier:str, accessor:str):
		dropped = self.invalidation.setdefault(identifier, [])
		if accessor not in dropped: dropped.append(accessor)

	def invalidated_by(self, identifier:str) -> list[str]:
		return self.invalidation.get(identifier, [])

class LoweredComponent:
	def __init__(self, declaration:ComponentDeclaration, bodies:dict[str, syntax.Block], dependencies:dict[str, DependencySet]):
		assert declaration.is_frozen(), declaration
		self.declaration = declaration
		self.bodies = bodies
		self.dependencies = dependencies

	@property
	def name(self): return self.declaration.name

	def dependencies_of(self, name:str) -> DependencySet:
		return self.dependencies.get(name) or DependencySet()

	def _expand(self, identifier:str) -> list[str]:
		members = self.declaration.members
		if identifier == PROPS: return [m.name for m in members if m.aggregate == PROPS]
		if identifier == CONTEXT: return [m.name for m in members if isinstance(m, ConsumerBinding)]
		return [identifier]

	def memo_plan(self, discipline:Discipline) -> MemoPlan:
		plan = MemoPlan(discipline)
		if discipline is Discipline.PAIRED_STATE:
			for m in self.declaration.members:
				if isinstance(m, Subroutine):
					plan.keys[m.name] = self.dependencies_of(m.name).names()
			return plan
		for m in self.declaration.members:
			if isinstance(m, ProviderAccessor) or (isinstance(m, ComputedAccessor) and syntax.is_complex_type(m.type_expr)):
				plan.cached.append(m.name)
				for identifier in self.dependencies_of(m.name):
					for name in self._expand(identifier):
						plan.invalidate(name, m.name)
		return plan


class Emitter(Visitor):
	""" One method per member variant. Subclass per target. """
	def emit(self, lowered:LoweredComponent):
		return [self.visit(m, lowered) for m in lowered.declaration.members]

	def visit_OneWayInput(self, m, lowered): raise NotImplementedError(type(self))
	def visit_TwoWayInput(self, m, lowered): raise NotImplementedError(type(self))
	def visit_InternalState(self, m, lowered): raise NotImplementedError(type(self))
	def visit_MutableState(self, m, lowered): raise NotImplementedError(type(self))
	def visit_EventEmitter(self, m, lowered): raise NotImplementedError(type(self))
	def visit_TemplateSlot(self, m, lowered): raise NotImplementedError(type(self))
	def visit_Slot(self, m, lowered): raise NotImplementedError(type(self))
	def visit_NestedDeclaration(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ReferenceHandle(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ForwardedReferenceHandle(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ProviderBinding(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ConsumerBinding(self, m, lowered): raise NotImplementedError(type(self))
	def visit_Unclassified(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ApiMethod(self, m, lowered): raise NotImplementedError(type(self))
	def visit_Effect(self, m, lowered): raise NotImplementedError(type(self))
	def visit_PlainMethod(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ComputedAccessor(self, m, lowered): raise NotImplementedError(type(self))
	def visit_ProviderAccessor(self, m, lowered): raise NotImplementedError(type(self))
	def visit_NestedSnapshot(self, m, lowered): raise NotImplementedError(type(self))
	def visit_NestedChildren(self, m, lowered): raise NotImplementedError(type(self))
	def visit_NestedAccessor(self, m, lowered): raise NotImplementedError(type(self))


def _typed(m:Member) -> str:
	text = m.name + m.presence.value
	if m.type_expr is not None: text += ": %s" % m.type_expr
	if m.initializer is not None: text += " = %s" % m.initializer
	return text

class OutlineEmitter(Emitter):
	"""
	Writes one line per member, plus bodies and memo information.
	Nobody runs the output; it shows exactly what a real emitter receives.
	"""
	def __init__(self, discipline:Discipline=Discipline.PAIRED_STATE):
		self._discipline = discipline

	def outline(self, lowered:LoweredComponent) -> str:
		plan = lowered.memo_plan(self._discipline)
		lines = ["component %s (%s)" % (lowered.name, self._discipline.value)]
		for line in self.emit(lowered):
			lines.append("  " + line)
		for name in plan.cached:
			lines.append("  cache %s" % name)
		for identifier, dropped in plan.invalidation.items():
			lines.append("  on %s drop %s" % (identifier, ", ".join(dropped)))
		return "\n".join(lines)

	def _property(self, kind:str, m:Member) -> str:
		flags = []
		if m.inherited: flags.append("inherited")
		if m.synthesized: flags.append("synthesized")
		suffix = " (%s)" % ", ".join(flags) if flags else ""
		return "%s %s%s" % (kind, _typed(m), suffix)

	def _subroutine(self, kind:str, m:Subroutine, lowered:LoweredComponent) -> str:
		params = ", ".join(map(str, m.params))
		body = lowered.bodies.get(m.name)
		text = "%s %s(%s) %s" % (kind, m.name, params, "{}" if body is None else body)
		if self._discipline is Discipline.PAIRED_STATE:
			text += " deps %s" % lowered.dependencies_of(m.name).names()
		return text

	def visit_OneWayInput(self, m, lowered): return self._property("input", m)
	def visit_TwoWayInput(self, m, lowered): return self._property("two-way", m)
	def visit_InternalState(self, m, lowered): return self._property("state", m)
	def visit_MutableState(self, m, lowered): return self._property("mutable", m)
	def visit_EventEmitter(self, m, lowered): return self._property("event", m)
	def visit_TemplateSlot(self, m, lowered): return self._property("template", m)
	def visit_Slot(self, m, lowered): return self._property("slot", m)
	def visit_NestedDeclaration(self, m, lowered): return self._property("nested", m)
	def visit_ReferenceHandle(self, m, lowered): return self._property("ref", m)
	def visit_ForwardedReferenceHandle(self, m, lowered): return self._property("forward-ref", m)
	def visit_ProviderBinding(self, m, lowered): return self._property("provide %s" % _context_name(m), m)
	def visit_ConsumerBinding(self, m, lowered): return self._property("consume %s" % _context_name(m), m)
	def visit_Unclassified(self, m, lowered): return "unclassified %s: %s" % (m.name, m.diagnostic)
	def visit_ApiMethod(self, m, lowered): return self._subroutine("api", m, lowered)
	def visit_Effect(self, m, lowered): return self._subroutine("effect", m, lowered)
	def visit_PlainMethod(self, m, lowered): return self._subroutine("method", m, lowered)
	def visit_ComputedAccessor(self, m, lowered): return self._subroutine("get", m, lowered)
	def visit_ProviderAccessor(self, m, lowered): return self._subroutine("provide %s get" % _context_name(m), m, lowered)
	def visit_NestedSnapshot(self, m, lowered): return self._property("snapshot", m)
	def visit_NestedChildren(self, m, lowered): return self._subroutine("children", m, lowered)
	def visit_NestedAccessor(self, m, lowered): return self._subroutine("get", m, lowered)

def _context_name(m:Member) -> str:
	return str(m.args[0]) if m.args else "?"
