import unittest

from crosswire import syntax, members
from crosswire.diagnostics import Report
from crosswire.ontology import Presence
from crosswire.session import ModuleTable, CompilationSession
from crosswire.synthesis import SNAPSHOT_NAME

def prop(name, annotation, initializer=None, token=None, type_expr=None):
	return syntax.Property(name, [syntax.Annotation(annotation)], (), token, type_expr, initializer)

def declare(name, *items, heritage=(), kind="Component"):
	return syntax.ClassDeclaration(name, [syntax.Annotation(kind)], (), list(heritage), list(items))

def build(*declarations, name=None):
	session = CompilationSession(ModuleTable([syntax.Module("m.tsx", declarations)]), Report())
	return session.require(name or declarations[-1].name, "m.tsx")

CELL = syntax.TypeRef("Cell")
CELLS = syntax.ArrayType(CELL)

class TwoWayCompanionTests(unittest.TestCase):
	def test_companions_appear_once(self):
		built = build(declare("Props", prop("p", "TwoWay", syntax.Literal(1)), kind="ComponentBindings"))
		self.assertEqual(["p", "defaultP", "pChange"], built.member_names())
		default, change = built.member("defaultP"), built.member("pChange")
		self.assertIsInstance(default, members.OneWayInput)
		self.assertEqual("1", str(default.initializer))
		self.assertIs(Presence.REQUIRED, default.presence)
		self.assertIsInstance(change, members.EventEmitter)
		self.assertIs(Presence.OPTIONAL, change.presence)
		self.assertEqual("(p) => void", str(change.type_expr))
		self.assertTrue(default.synthesized and change.synthesized)

	def test_default_without_initializer_is_optional(self):
		built = build(declare("Props", prop("p", "TwoWay"), kind="ComponentBindings"))
		self.assertIs(Presence.OPTIONAL, built.member("defaultP").presence)
		self.assertIsNone(built.member("defaultP").initializer)

	def test_explicit_companions_win(self):
		built = build(declare(
			"Props",
			prop("p", "TwoWay"),
			prop("pChange", "Event", token="!"),
			prop("defaultP", "OneWay", syntax.Literal("x")),
			kind="ComponentBindings",
		))
		self.assertEqual(["p", "pChange", "defaultP"], built.member_names())
		self.assertFalse(built.member("pChange").synthesized)
		self.assertEqual("'x'", str(built.member("defaultP").initializer))

	def test_inherited_companions_are_not_made_again(self):
		base = declare("Base", prop("p", "TwoWay"), kind="ComponentBindings")
		derived = declare("Derived", prop("q", "OneWay"), heritage=[syntax.TypeRef("Base")], kind="ComponentBindings")
		built = build(base, derived)
		self.assertEqual(["p", "defaultP", "pChange", "q"], built.member_names())

	def test_redefined_two_way_remakes_its_companions(self):
		base = declare("Base", prop("p", "TwoWay", syntax.Literal(1)), kind="ComponentBindings")
		derived = declare("Derived", prop("p", "TwoWay", syntax.Literal(5)), heritage=[syntax.TypeRef("Base")], kind="ComponentBindings")
		built = build(base, derived)
		self.assertEqual(["p", "defaultP", "pChange"], built.member_names())
		default, change = built.member("defaultP"), built.member("pChange")
		self.assertEqual("5", str(default.initializer))
		self.assertFalse(default.inherited or change.inherited)
		self.assertIs(built, default.origin)
		self.assertTrue(default.synthesized and change.synthesized)

	def test_redefined_two_way_without_default_has_optional_default(self):
		base = declare("Base", prop("p", "TwoWay", syntax.Literal(1)), kind="ComponentBindings")
		derived = declare("Derived", prop("p", "TwoWay"), heritage=[syntax.TypeRef("Base")], kind="ComponentBindings")
		built = build(base, derived)
		self.assertIs(Presence.OPTIONAL, built.member("defaultP").presence)
		self.assertIsNone(built.member("defaultP").initializer)

	def test_frozen_after_build(self):
		built = build(declare("Props", prop("p", "TwoWay"), kind="ComponentBindings"))
		self.assertTrue(built.is_frozen())
		with self.assertRaises(AssertionError):
			built.install([])

class NestedSnapshotTests(unittest.TestCase):
	def test_one_snapshot_for_all_nested_defaults(self):
		built = build(declare(
			"Grid",
			prop("cell", "Nested", syntax.New("Cell"), type_expr=CELL),
			prop("rows", "Nested", syntax.ArrayLiteral(), type_expr=CELLS),
			prop("plain", "Nested", type_expr=CELL),
		))
		snapshots = built.each(members.NestedSnapshot)
		self.assertEqual(1, len(snapshots))
		self.assertEqual(SNAPSHOT_NAME, snapshots[0].name)
		self.assertEqual(["cell", "rows"], snapshots[0].entry_names())
		self.assertEqual("{cell: new Cell(), rows: []}", str(snapshots[0].initializer))

	def test_no_nested_defaults_no_snapshot(self):
		built = build(declare("Grid", prop("plain", "Nested", type_expr=CELL)))
		self.assertIsNone(built.snapshot())

	def test_snapshot_merges_the_base(self):
		base = declare("Base", prop("cell", "Nested", syntax.New("Cell"), type_expr=CELL), prop("row", "Nested", syntax.New("Row"), type_expr=CELL))
		derived = declare("Derived", prop("row", "Nested", syntax.New("Other"), type_expr=CELL), heritage=[syntax.TypeRef("Base")])
		built = build(base, derived)
		snapshot = built.snapshot()
		self.assertFalse(snapshot.inherited)
		self.assertEqual(["row", "cell"], snapshot.entry_names())
		self.assertEqual("{row: new Other(), cell: new Base().__defaultNestedValues.cell}", str(snapshot.initializer))
		self.assertEqual(1, len(built.each(members.NestedSnapshot)))

class NestedAccessorTests(unittest.TestCase):
	def test_component_gets_accessors(self):
		built = build(declare(
			"Grid",
			prop("cell", "Nested", syntax.New("Cell"), type_expr=CELL),
			prop("rows", "Nested", type_expr=CELLS),
		))
		self.assertEqual(
			["cell", "rows", SNAPSHOT_NAME, "__nestedChildren", "__getNestedCell", "__getNestedRows"],
			built.member_names(),
		)
		cell, rows = built.member("__getNestedCell"), built.member("__getNestedRows")
		self.assertEqual(SNAPSHOT_NAME, cell.snapshot_name)
		self.assertIsNone(rows.snapshot_name)
		self.assertTrue(rows.nested.is_array())

	def test_bindings_get_no_accessors(self):
		built = build(declare("GridProps", prop("cell", "Nested", type_expr=CELL), kind="ComponentBindings"))
		self.assertEqual(["cell"], built.member_names())


if __name__ == '__main__':
	unittest.main()
