"""
Resolved member access. The lowering pass puts these where the raw
tree had `this.x` or `this.props.x`. Each target's emitter decides
how to spell them; the __str__ forms are for diagnostics and tests.
"""
from typing import Optional
from .ontology import ValueExpression
from .members import Member, TwoWayInput, NestedDeclaration, EventEmitter

class ResolvedAccess(ValueExpression):
	def __init__(self, member:Member): self.member = member
	@property
	def name(self): return self.member.name
	def __str__(self): return "%s(%s)" % (self.SPELLING, self.member.name)

class InputRead(ResolvedAccess):
	SPELLING = "input"

class OverrideOrLocal(ResolvedAccess):
	""" The parent's value when it isn't undefined, else the local mirror. """
	SPELLING = "overrideOrLocal"

class LocalRead(ResolvedAccess):
	SPELLING = "local"

class MutableRead(ResolvedAccess):
	SPELLING = "mutable"

class ContextRead(ResolvedAccess):
	SPELLING = "context"

class HandleAccess(ResolvedAccess):
	SPELLING = "handle"

class AccessorRead(ResolvedAccess):
	SPELLING = "accessor"

class MethodRef(ResolvedAccess):
	SPELLING = "method"

class AllInputs(ValueExpression):
	""" Bare `this.props`: every input, with two-way inputs already overridden-or-local. """
	def __init__(self, two_way:list[TwoWayInput]): self.two_way = list(two_way)
	def __str__(self): return "allInputs(%s)" % ", ".join(m.name for m in self.two_way)

class StateWrite(ValueExpression):
	""" Update the local mirror, then tell the parent. """
	def __init__(self, member:TwoWayInput, value:ValueExpression, emitter:Optional[EventEmitter], unconditional:bool):
		self.member, self.value, self.emitter, self.unconditional = member, value, emitter, unconditional
	def __str__(self):
		update = "setLocal(%s, %s)" % (self.member.name, self.value)
		if self.emitter is None: return "(%s)" % update
		call = "%s%s(%s)" % (self.emitter.name, "" if self.unconditional else "?.", self.value)
		return "(%s, %s)" % (update, call)

class LocalWrite(ValueExpression):
	def __init__(self, member:Member, value:ValueExpression): self.member, self.value = member, value
	def __str__(self): return "setLocal(%s, %s)" % (self.member.name, self.value)

class MutableWrite(ValueExpression):
	def __init__(self, member:Member, value:ValueExpression): self.member, self.value = member, value
	def __str__(self): return "setMutable(%s, %s)" % (self.member.name, self.value)

class NestedResolution(ValueExpression):
	"""
	Explicit input, else the first matching nested child (or all of them,
	for array types), else the snapshot entry, else undefined.
	"""
	def __init__(self, member:NestedDeclaration, is_array:bool, snapshot:Optional[str]):
		self.member, self.is_array, self.snapshot = member, is_array, snapshot
	def __str__(self):
		fallback = "%s.%s" % (self.snapshot, self.member.name) if self.snapshot else "undefined"
		return "nested(%s, %s, %s)" % (self.member.name, "all" if self.is_array else "first", fallback)
