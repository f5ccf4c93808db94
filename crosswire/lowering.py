"""
Rewrite raw member access into resolved-access nodes.

The result is a fresh tree; the raw tree is left alone, since frozen
declarations are shared. Only `this.x` and `this.props.x` shapes are
rewritten. Everything else is rebuilt around its lowered parts.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import PROPS, ValueExpression
from .members import (
	MemberTable, Access, is_this_props, Subroutine, ComputedAccessor, ProviderAccessor,
	TwoWayInput, InternalState, MutableState, ReferenceHandle, ForwardedReferenceHandle,
	ConsumerBinding, ProviderBinding, NestedDeclaration, NestedAccessor, Unclassified,
)
from .access import (
	InputRead, OverrideOrLocal, LocalRead, MutableRead, ContextRead, HandleAccess,
	AccessorRead, MethodRef, AllInputs, StateWrite, LocalWrite, MutableWrite, NestedResolution,
)
from .synthesis import accessor_name

HANDLES = (ReferenceHandle, ForwardedReferenceHandle)

class Lowering(Visitor):
	def __init__(self, table:MemberTable):
		self._table = table

	def lower(self, phrase):
		return None if phrase is None else self.visit(phrase)

	def _each(self, items): return [self.visit(i) for i in items]

	def read(self, access:Access, raw:ValueExpression) -> ValueExpression:
		member = access.member
		if member is None or isinstance(member, Unclassified): return raw
		if isinstance(member, TwoWayInput): return OverrideOrLocal(member)
		if isinstance(member, NestedDeclaration):
			accessor = self._table.get(accessor_name(member.name))
			if isinstance(accessor, NestedAccessor): return AccessorRead(accessor)
			return InputRead(member)
		if member.aggregate == PROPS: return InputRead(member)
		if isinstance(member, (InternalState, ProviderBinding)): return LocalRead(member)
		if isinstance(member, MutableState): return MutableRead(member)
		if isinstance(member, ConsumerBinding): return ContextRead(member)
		if isinstance(member, HANDLES): return HandleAccess(member)
		if isinstance(member, (ComputedAccessor, ProviderAccessor)): return AccessorRead(member)
		if isinstance(member, Subroutine): return MethodRef(member)
		raise AssertionError(member)

	def write(self, access:Access, site, arithmetic:str, value:ValueExpression) -> ValueExpression:
		"""
		Route an assignment to `access`. An empty `arithmetic` means plain `=`;
		otherwise the new value combines the current one with `value`.
		"""
		self._table.check_writable(access, site)
		member = access.member
		if isinstance(member, HANDLES) or member is None or isinstance(member, Unclassified):
			return None
		if isinstance(member, (ConsumerBinding, Subroutine)):
			# Context values and members with code of their own are not state.
			return None
		if arithmetic:
			value = syntax.BinExp(self.read(access, site), arithmetic, value)
		if isinstance(member, TwoWayInput):
			emitter = self._table.get(member.change_name())
			unconditional = emitter is not None and emitter.definitely_present()
			return StateWrite(member, value, emitter, unconditional)
		if isinstance(member, MutableState): return MutableWrite(member, value)
		if isinstance(member, (InternalState, ProviderBinding)): return LocalWrite(member, value)
		raise AssertionError(member)

	def nested_resolution(self, accessor:NestedAccessor) -> syntax.Block:
		""" The body of a synthesized nested reader. """
		nested = accessor.nested
		return syntax.Block([syntax.Return(NestedResolution(nested, nested.is_array(), accessor.snapshot_name))])

	def visit_This(self, this:syntax.This): return this
	def visit_Name(self, name:syntax.Name): return name
	def visit_Literal(self, literal:syntax.Literal): return literal
	def visit_ScopedAccess(self, sa:syntax.ScopedAccess): return sa

	def visit_FieldAccess(self, fa:syntax.FieldAccess):
		access = self._table.resolve(fa)
		if access is not None: return self.read(access, fa)
		if is_this_props(fa): return AllInputs(self._table.each(TwoWayInput))
		return syntax.FieldAccess(self.visit(fa.lhs), fa.field, fa.optional)

	def visit_ElementAccess(self, ea:syntax.ElementAccess):
		return syntax.ElementAccess(self.visit(ea.lhs), self.visit(ea.index))

	def visit_Call(self, call:syntax.Call):
		return syntax.Call(self.visit(call.fn_exp), self._each(call.args), call.optional)

	def visit_New(self, new:syntax.New):
		return syntax.New(new.class_name, self._each(new.args))

	def visit_BinExp(self, bx:syntax.BinExp):
		return syntax.BinExp(self.visit(bx.lhs), bx.op, self.visit(bx.rhs))

	def visit_UnaryExp(self, ux:syntax.UnaryExp):
		return syntax.UnaryExp(ux.op, self.visit(ux.arg))

	def visit_Assign(self, assign:syntax.Assign):
		value = self.visit(assign.value)
		access = self._table.resolve(assign.target)
		if access is not None:
			lowered = self.write(access, assign, assign.arithmetic(), value)
			if lowered is not None: return lowered
			return syntax.Assign(assign.target, assign.op, value)
		return syntax.Assign(self.visit(assign.target), assign.op, value)

	def visit_UpdateExp(self, ux:syntax.UpdateExp):
		access = self._table.resolve(ux.arg)
		if access is not None:
			lowered = self.write(access, ux, ux.arithmetic(), syntax.Literal(1))
			if lowered is not None: return lowered
			return ux
		return syntax.UpdateExp(ux.op, self.visit(ux.arg), ux.prefix)

	def visit_Cond(self, cond:syntax.Cond):
		return syntax.Cond(self.visit(cond.if_part), self.visit(cond.then_part), self.visit(cond.else_part))

	def visit_ArrayLiteral(self, al:syntax.ArrayLiteral): return syntax.ArrayLiteral(self._each(al.elts))
	def visit_Spread(self, spread:syntax.Spread): return syntax.Spread(self.visit(spread.expr))
	def visit_Entry(self, entry:syntax.Entry): return syntax.Entry(entry.key, self.visit(entry.value))
	def visit_ObjectLiteral(self, ol:syntax.ObjectLiteral): return syntax.ObjectLiteral(self._each(ol.entries))
	def visit_Arrow(self, arrow:syntax.Arrow): return syntax.Arrow(arrow.params, self.visit(arrow.body))

	def visit_Block(self, block:syntax.Block): return syntax.Block(self._each(block.steps))
	def visit_Return(self, ret:syntax.Return): return syntax.Return(self.lower(ret.expr))

	def visit_If(self, step:syntax.If):
		return syntax.If(self.visit(step.test), self.visit(step.then_part), self.lower(step.else_part))

	def visit_Let(self, let:syntax.Let):
		return syntax.Let(let.pattern, self.lower(let.init), let.kind)
