"""
Member variants, the declarations that own them, and a lookup table
the analysis passes share for recognizing member access.

Each variant class carries one Role. Class-level attributes
say which aggregate (if any) a role belongs to and whether code may assign it.
"""
from copy import copy
from pathlib import Path
from typing import Optional, Sequence, NamedTuple, Iterable
from . import syntax
from .ontology import Role, Presence, Kind, PROPS, CONTEXT, ValueExpression, TypeExpression
from .diagnostics import one_way_assignment

class Member:
	role: Role
	aggregate: Optional[str] = None  # Which aggregate token stands for "all of these"
	assignable = False
	inherited = False
	synthesized = False
	origin: Optional["ComponentDeclaration"] = None  # Where the default value lives; never ownership.
	params: Sequence[syntax.Parameter] = ()
	body: Optional[syntax.Block] = None

	def __init__(
			self,
			name: str,
			type_expr: Optional[TypeExpression] = None,
			initializer: Optional[ValueExpression] = None,
			presence: Presence = Presence.REQUIRED,
			modifiers: Sequence[str] = (),
			args: Sequence = (),
	):
		self.name = name
		self.type_expr = type_expr
		self.initializer = initializer
		self.presence = presence
		self.modifiers = tuple(modifiers)
		self.args = tuple(args)

	def __repr__(self): return "{%s:%s}" % (self.name, type(self).__name__)

	def is_optional(self): return self.presence is Presence.OPTIONAL

	def definitely_present(self) -> bool:
		"""
		Can code call this without first checking it exists?
		A default value does not count: the parent may still pass undefined.
		"""
		return self.presence is not Presence.OPTIONAL

	def inherit(self) -> "Member":
		""" The copy a derived declaration holds through direct extension. """
		twin = copy(self)
		twin.inherited = True
		return twin

	def derive(self, initializer:Optional[ValueExpression]) -> "Member":
		""" The copy a structurally derived declaration holds as its own. """
		twin = copy(self)
		twin.inherited = False
		twin.initializer = initializer
		return twin

class OneWayInput(Member):
	role = Role.ONE_WAY
	aggregate = PROPS

class TwoWayInput(Member):
	role = Role.TWO_WAY
	aggregate = PROPS
	assignable = True
	def change_name(self): return self.name + "Change"

class InternalState(Member):
	role = Role.INTERNAL_STATE
	assignable = True

class MutableState(Member):
	role = Role.MUTABLE
	assignable = True

class EventEmitter(Member):
	role = Role.EVENT
	aggregate = PROPS

class TemplateSlot(Member):
	role = Role.TEMPLATE
	aggregate = PROPS

class Slot(Member):
	role = Role.SLOT
	aggregate = PROPS

class NestedDeclaration(Member):
	role = Role.NESTED
	aggregate = PROPS
	def is_array(self): return syntax.is_array_type(self.type_expr)

class ReferenceHandle(Member):
	role = Role.REF
	assignable = True

class ForwardedReferenceHandle(Member):
	role = Role.FORWARD_REF
	assignable = True

class ProviderBinding(Member):
	role = Role.PROVIDER

class ConsumerBinding(Member):
	role = Role.CONSUMER
	aggregate = CONTEXT

class Unclassified(Member):
	role = Role.UNCLASSIFIED
	diagnostic = ""

class Subroutine(Member):
	""" Members with code of their own: methods and accessors. """
	def __init__(self, name, type_expr=None, params=(), body=None, modifiers=(), args=()):
		super().__init__(name, type_expr, None, Presence.REQUIRED, modifiers, args)
		self.params = tuple(params)
		self.body = body

class ApiMethod(Subroutine):
	role = Role.API_METHOD

class Effect(Subroutine):
	role = Role.EFFECT

class PlainMethod(Subroutine):
	role = Role.METHOD

class ComputedAccessor(Subroutine):
	role = Role.COMPUTED

class ProviderAccessor(Subroutine):
	""" A provider whose published value is computed by a getter """
	role = Role.PROVIDER

# Members the synthesizer makes up. The classifier never sees these.

class NestedSnapshot(OneWayInput):
	""" Default values for every nested member with an initializer, gathered in one place. """
	entries: list[syntax.Entry]
	def __init__(self, name:str, entries:Sequence[syntax.Entry]):
		super().__init__(name, None, syntax.ObjectLiteral(entries), Presence.OPTIONAL)
		self.entries = list(entries)
		self.synthesized = True
	def entry_names(self): return [e.key for e in self.entries]

class NestedChildren(ComputedAccessor):
	""" Collects structurally nested children out of the `children` input. """
	def __init__(self, name:str):
		super().__init__(name)
		self.synthesized = True

class NestedAccessor(ComputedAccessor):
	""" Reads one nested member: explicit value, nested child, snapshot, or undefined. """
	def __init__(self, name:str, nested:NestedDeclaration, snapshot_name:Optional[str], children_name:str):
		super().__init__(name, nested.type_expr)
		self.nested = nested
		self.snapshot_name = snapshot_name
		self.children_name = children_name
		self.synthesized = True

VARIANTS: dict[Role, type[Member]] = {
	Role.ONE_WAY: OneWayInput,
	Role.TWO_WAY: TwoWayInput,
	Role.INTERNAL_STATE: InternalState,
	Role.MUTABLE: MutableState,
	Role.EVENT: EventEmitter,
	Role.TEMPLATE: TemplateSlot,
	Role.SLOT: Slot,
	Role.NESTED: NestedDeclaration,
	Role.REF: ReferenceHandle,
	Role.FORWARD_REF: ForwardedReferenceHandle,
	Role.PROVIDER: ProviderBinding,
	Role.CONSUMER: ConsumerBinding,
	Role.UNCLASSIFIED: Unclassified,
}

SUBROUTINE_VARIANTS: dict[Role, type[Subroutine]] = {
	Role.API_METHOD: ApiMethod,
	Role.EFFECT: Effect,
	Role.METHOD: PlainMethod,
	Role.COMPUTED: ComputedAccessor,
	Role.PROVIDER: ProviderAccessor,
}


class ComponentDeclaration:
	"""
	One per parsed class. Passes fill it in during its own build;
	after that it is frozen and shared by reference.
	"""
	name: str
	path: Path
	kind: Kind
	bases: list["ComponentDeclaration"]
	extends: Optional["ComponentDeclaration"]
	members: list[Member]

	def __init__(self, name:str, path:Path, kind:Kind=Kind.PLAIN):
		self.name, self.path, self.kind = name, path, kind
		self.bases = []
		self.extends = None
		self.members = []
		self._frozen = False

	def __repr__(self): return "<Declaration %s>" % self.name

	def key(self) -> tuple[Path, str]: return self.path, self.name

	def install(self, members:Iterable[Member]):
		assert not self._frozen, self
		self.members = list(members)

	def note_base(self, base:"ComponentDeclaration"):
		assert not self._frozen, self
		if base not in self.bases: self.bases.append(base)

	def freeze(self): self._frozen = True
	def is_frozen(self): return self._frozen

	def member(self, name:str) -> Optional[Member]:
		for m in self.members:
			if m.name == name: return m

	def member_names(self): return [m.name for m in self.members]

	def each(self, variant:type) -> list:
		return [m for m in self.members if isinstance(m, variant)]

	def snapshot(self) -> Optional[NestedSnapshot]:
		for m in self.members:
			if isinstance(m, NestedSnapshot): return m


class Access(NamedTuple):
	name: str
	member: Optional[Member]
	through_props: bool

def is_this_props(expr) -> bool:
	return isinstance(expr, syntax.FieldAccess) and expr.field == PROPS and isinstance(expr.lhs, syntax.This)

class MemberTable:
	""" Answers "which member does this expression touch?" for one declaration. """
	def __init__(self, members:Iterable[Member], owner:str="?"):
		self.owner = owner
		self._members = {m.name: m for m in members}

	def get(self, name:str) -> Optional[Member]: return self._members.get(name)

	def __iter__(self): return iter(self._members.values())

	def each(self, variant:type) -> list:
		return [m for m in self if isinstance(m, variant)]

	def resolve(self, expr) -> Optional[Access]:
		""" Recognize `this.x` and `this.props.x`; anything else is not a member access. """
		if isinstance(expr, syntax.FieldAccess):
			if isinstance(expr.lhs, syntax.This) and expr.field != PROPS:
				return Access(expr.field, self.get(expr.field), False)
			if is_this_props(expr.lhs):
				return Access(expr.field, self.get(expr.field), True)

	def check_writable(self, access:Access, site):
		member = access.member
		if member is not None and member.aggregate == PROPS and not member.assignable:
			raise one_way_assignment(self.owner, member.name, site)
