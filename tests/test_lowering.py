import unittest

from crosswire import syntax, members, access
from crosswire.diagnostics import AssignmentError
from crosswire.lowering import Lowering
from crosswire.members import MemberTable
from crosswire.ontology import Presence

THIS = syntax.This()
def this(field): return syntax.FieldAccess(THIS, field)
def props(field=None):
	bare = syntax.FieldAccess(THIS, "props")
	return bare if field is None else syntax.FieldAccess(bare, field)
def assign(target, value, op="="): return syntax.Assign(target, op, value)

A = syntax.Name("a")

def lowering(*extra, emitter_presence=Presence.OPTIONAL):
	return Lowering(MemberTable([
		members.OneWayInput("p1"),
		members.TwoWayInput("s1"),
		members.EventEmitter("s1Change", presence=emitter_presence, initializer=syntax.Arrow()),
		members.InternalState("i1"),
		members.MutableState("m"),
		members.ReferenceHandle("div"),
		members.ConsumerBinding("theme"),
		members.ComputedAccessor("area"),
		members.ApiMethod("focus"),
		*extra,
	], "Widget"))

class ReadTests(unittest.TestCase):
	def lower(self, expr): return lowering().lower(expr)

	def test_reads_by_role(self):
		for field, node, text in [
			("p1", access.InputRead, "input(p1)"),
			("s1", access.OverrideOrLocal, "overrideOrLocal(s1)"),
			("i1", access.LocalRead, "local(i1)"),
			("m", access.MutableRead, "mutable(m)"),
			("theme", access.ContextRead, "context(theme)"),
			("div", access.HandleAccess, "handle(div)"),
			("area", access.AccessorRead, "accessor(area)"),
			("focus", access.MethodRef, "method(focus)"),
		]:
			with self.subTest(field):
				lowered = self.lower(this(field))
				self.assertIsInstance(lowered, node)
				self.assertEqual(text, str(lowered))

	def test_reads_through_props(self):
		self.assertEqual("overrideOrLocal(s1)", str(self.lower(props("s1"))))
		self.assertEqual("allInputs(s1)", str(self.lower(props())))
		self.assertEqual("this.props.children", str(self.lower(props("children"))))

	def test_handle_is_passed_through(self):
		expr = syntax.Call(syntax.FieldAccess(this("div"), "focus"))
		self.assertEqual("handle(div).focus()", str(self.lower(expr)))

	def test_lowering_leaves_the_raw_tree_alone(self):
		expr = syntax.BinExp(this("s1"), "+", this("p1"))
		self.assertEqual("overrideOrLocal(s1) + input(p1)", str(self.lower(expr)))
		self.assertEqual("this.s1 + this.p1", str(expr))

class WriteTests(unittest.TestCase):
	def test_two_way_write_notifies_when_present(self):
		lowered = lowering().lower(assign(this("s1"), A))
		self.assertIsInstance(lowered, access.StateWrite)
		self.assertFalse(lowered.unconditional)
		self.assertEqual("(setLocal(s1, a), s1Change?.(a))", str(lowered))

	def test_definite_emitter_is_called_unconditionally(self):
		lowered = lowering(emitter_presence=Presence.DEFINITE).lower(assign(this("s1"), A))
		self.assertEqual("(setLocal(s1, a), s1Change(a))", str(lowered))

	def test_compound_write_reads_first(self):
		lowered = lowering().lower(assign(this("s1"), A, "+="))
		self.assertEqual("(setLocal(s1, overrideOrLocal(s1) + a), s1Change?.(overrideOrLocal(s1) + a))", str(lowered))

	def test_local_and_mutable_writes(self):
		self.assertEqual("setLocal(i1, a)", str(lowering().lower(assign(this("i1"), A))))
		self.assertEqual("setMutable(m, mutable(m) - 1)", str(lowering().lower(syntax.UpdateExp("--", this("m")))))

	def test_handle_write_passes_through(self):
		lowered = lowering().lower(assign(this("div"), this("i1")))
		self.assertIsInstance(lowered, syntax.Assign)
		self.assertEqual("this.div = local(i1)", str(lowered))

	def test_context_and_code_writes_pass_through(self):
		for field in ["theme", "area", "focus"]:
			with self.subTest(field):
				lowered = lowering().lower(assign(this(field), A))
				self.assertIsInstance(lowered, syntax.Assign)
				self.assertEqual("this.%s = a" % field, str(lowered))
		self.assertEqual("this.theme++", str(lowering().lower(syntax.UpdateExp("++", this("theme")))))

	def test_one_way_write_is_an_error(self):
		with self.assertRaises(AssignmentError) as cm:
			lowering().lower(syntax.Block([assign(this("p1"), A)]))
		self.assertEqual("lower", cm.exception.phase)
		self.assertEqual("p1", cm.exception.issue.member)
		self.assertIn("this.p1 = a", cm.exception.issue.message)

class NestedTests(unittest.TestCase):
	def test_nested_read_goes_through_accessor(self):
		cell = members.NestedDeclaration("cell", syntax.TypeRef("Cell"))
		accessor = members.NestedAccessor("__getNestedCell", cell, "__defaultNestedValues", "__nestedChildren")
		sut = lowering(cell, accessor)
		self.assertEqual("accessor(__getNestedCell)", str(sut.lower(this("cell"))))
		self.assertEqual(
			"{return nested(cell, first, __defaultNestedValues.cell)}",
			str(sut.nested_resolution(accessor)),
		)

	def test_array_nested_without_default(self):
		rows = members.NestedDeclaration("rows", syntax.ArrayType(syntax.TypeRef("Row")))
		accessor = members.NestedAccessor("__getNestedRows", rows, None, "__nestedChildren")
		self.assertEqual("{return nested(rows, all, undefined)}", str(lowering().nested_resolution(accessor)))

	def test_nested_without_accessor_is_an_input(self):
		cell = members.NestedDeclaration("cell", syntax.TypeRef("Cell"))
		self.assertEqual("input(cell)", str(lowering(cell).lower(this("cell"))))


if __name__ == '__main__':
	unittest.main()
