"""
First pass over a raw class: every member gets exactly one role.

Annotation names are looked at here and nowhere else.
A bare property of a component is internal state.
Most trouble is soft: a warning goes on the report and the member
comes out Unclassified (or with its first recognized role).
The one hard error is a template declared beside an explicit
render or component companion of the same base name.
"""
from . import syntax
from .ontology import Role, Presence, Kind, RESERVED_NAMES
from .members import (
	Member, Unclassified, ComputedAccessor, PlainMethod, TemplateSlot,
	ComponentDeclaration, VARIANTS, SUBROUTINE_VARIANTS,
)
from .space import Layer
from .diagnostics import Report, generated_companion

ANNOTATION_ROLES = {
	"OneWay": Role.ONE_WAY,
	"TwoWay": Role.TWO_WAY,
	"InternalState": Role.INTERNAL_STATE,
	"Mutable": Role.MUTABLE,
	"Event": Role.EVENT,
	"Template": Role.TEMPLATE,
	"Slot": Role.SLOT,
	"Nested": Role.NESTED,
	"Ref": Role.REF,
	"RefProp": Role.REF,
	"ForwardRef": Role.FORWARD_REF,
	"ForwardRefProp": Role.FORWARD_REF,
	"Method": Role.API_METHOD,
	"Effect": Role.EFFECT,
	"Provider": Role.PROVIDER,
	"Consumer": Role.CONSUMER,
}

# Which roles each member shape can carry.
SHAPE_ROLES = {
	syntax.Property: frozenset(VARIANTS) - {Role.UNCLASSIFIED},
	syntax.GetAccessor: frozenset([Role.PROVIDER]),
	syntax.Method: frozenset([Role.API_METHOD, Role.EFFECT]),
}

# Roles whose names become input or state names downstream.
NAMED_ROLES = frozenset([
	Role.ONE_WAY, Role.TWO_WAY, Role.INTERNAL_STATE, Role.MUTABLE,
	Role.EVENT, Role.TEMPLATE, Role.SLOT, Role.NESTED,
])

PRESENCE = {None: Presence.REQUIRED, "": Presence.REQUIRED, "?": Presence.OPTIONAL, "!": Presence.DEFINITE}

def _unclassified(raw:syntax.ClassMember, diagnostic:str) -> Unclassified:
	member = Unclassified(raw.name, raw.type_expr, raw.initializer, PRESENCE[raw.token], raw.modifiers)
	member.diagnostic = diagnostic
	return member

def _build(role:Role, raw:syntax.ClassMember, args) -> Member:
	if isinstance(raw, syntax.Property):
		return VARIANTS[role](raw.name, raw.type_expr, raw.initializer, PRESENCE[raw.token], raw.modifiers, args)
	return SUBROUTINE_VARIANTS[role](raw.name, raw.type_expr, raw.params, raw.body, raw.modifiers, args)

def classify_member(raw:syntax.ClassMember, owner:ComponentDeclaration, report:Report) -> Member:
	member = _classify(raw, owner.name, owner.kind, report)
	member.origin = owner
	return member

def _classify(raw:syntax.ClassMember, owner:str, kind:Kind, report:Report) -> Member:
	if not raw.annotations:
		if isinstance(raw, syntax.GetAccessor):
			return ComputedAccessor(raw.name, raw.type_expr, (), raw.body, raw.modifiers)
		if isinstance(raw, syntax.Method):
			return PlainMethod(raw.name, raw.type_expr, raw.params, raw.body, raw.modifiers)
		if kind is Kind.COMPONENT:
			return _build(Role.INTERNAL_STATE, raw, ())
		report.missing_annotation(owner, raw.name)
		return _unclassified(raw, "property without decorator")
	if len(raw.annotations) > 1:
		report.multiple_annotations(owner, raw.name)
	known = [a for a in raw.annotations if a.name in ANNOTATION_ROLES]
	if not known:
		report.incorrect_annotation(owner, raw.name, raw.annotations[0].name)
		return _unclassified(raw, "unknown decorator @%s" % raw.annotations[0].name)
	annotation = known[0]
	role = ANNOTATION_ROLES[annotation.name]
	if role not in SHAPE_ROLES[type(raw)]:
		report.incorrect_annotation(owner, raw.name, annotation.name)
		return _unclassified(raw, "@%s does not fit a %s" % (annotation.name, type(raw).__name__))
	if role in NAMED_ROLES and raw.name in RESERVED_NAMES:
		report.reserved_name(owner, raw.name)
	if role is Role.NESTED and syntax.complex_type(raw.type_expr) == "any":
		report.nested_needs_complex_type(owner, raw.name)
	return _build(role, raw, annotation.args)

def template_companions(name:str) -> tuple[str, str]:
	""" The render-function and render-component names a template slot implies. """
	if name == "template": return "render", "component"
	assert name.endswith("Template"), name
	stem = name[:-len("Template")]
	return stem+"Render", stem+"Component"

def classify_declaration(declaration:ComponentDeclaration, raw:syntax.ClassDeclaration, report:Report) -> list[Member]:
	"""
	Classify the members a class declares for itself, in declared order.
	Raises ClassificationError if a template collides with an explicit companion.
	"""
	layer = Layer()
	for item in raw.members:
		if declaration.kind is Kind.BINDINGS and not isinstance(item, syntax.Property):
			report.non_property_member(declaration.name, item.name)
		member = classify_member(item, declaration, report)
		if member.name in layer:
			report.redefined(declaration.name, member.name)
		layer.replace(member.name, member)
	for member in layer.each_symbol():
		if isinstance(member, TemplateSlot) and (member.name == "template" or member.name.endswith("Template")):
			for companion in template_companions(member.name):
				if companion in layer:
					raise generated_companion(declaration.name, companion, member.name)
	return list(layer.each_symbol())
