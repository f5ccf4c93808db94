import unittest

from crosswire import syntax, members
from crosswire.dependencies import DependencySet, dependencies, all_dependencies, member_dependencies
from crosswire.diagnostics import Report, AssignmentError
from crosswire.members import MemberTable
from crosswire.ontology import PROPS, CONTEXT
from crosswire.session import ModuleTable, CompilationSession

THIS = syntax.This()
def this(field): return syntax.FieldAccess(THIS, field)
def props(field=None):
	bare = syntax.FieldAccess(THIS, "props")
	return bare if field is None else syntax.FieldAccess(bare, field)
def plus(*operands):
	result = operands[0]
	for more in operands[1:]: result = syntax.BinExp(result, "+", more)
	return result
def assign(target, value, op="="): return syntax.Assign(target, op, value)

def table():
	return MemberTable([
		members.OneWayInput("p1"),
		members.TwoWayInput("s1"),
		members.EventEmitter("s1Change"),
		members.InternalState("i1"),
		members.MutableState("m"),
		members.ReferenceHandle("div"),
		members.ForwardedReferenceHandle("forwarded"),
		members.ConsumerBinding("theme"),
	], "Widget")

class DependencySetTests(unittest.TestCase):
	def test_first_occurrence_order(self):
		deps = DependencySet([("a", None), ("b", PROPS), ("a", PROPS)])
		self.assertEqual(["a", "b"], deps)
		self.assertIsNone(deps.source("a"))
		self.assertIn("b", deps)
		self.assertEqual(2, len(deps))

	def test_aggregate_replaces_its_members_in_place(self):
		deps = DependencySet([("p1", PROPS), ("i1", None), ("theme", CONTEXT), (PROPS, None), ("p2", PROPS)])
		self.assertEqual(["i1", "theme", PROPS], deps.collapsed())
		deps.add(CONTEXT)
		self.assertEqual(["i1", PROPS, CONTEXT], deps.collapsed())

class ExpressionTests(unittest.TestCase):
	def setUp(self):
		self.table = table()

	def deps(self, expr): return dependencies(expr, self.table)

	def test_reads(self):
		self.assertEqual(["p1", "s1", "i1"], self.deps(plus(this("p1"), this("s1"), this("i1"))))
		self.assertEqual(["s1", "p1"], self.deps(plus(this("s1"), props("p1"))))

	def test_non_reactive_members_contribute_nothing(self):
		expr = syntax.Call(syntax.FieldAccess(this("div"), "focus"), [this("m"), this("forwarded")])
		self.assertEqual([], self.deps(expr))

	def test_consumer(self):
		deps = self.deps(syntax.FieldAccess(this("theme"), "color"))
		self.assertEqual(["theme"], deps)
		self.assertEqual(CONTEXT, deps.source("theme"))

	def test_bare_props_and_this(self):
		self.assertEqual([PROPS], self.deps(props()))
		self.assertEqual([PROPS, CONTEXT, "i1"], self.deps(syntax.Call(syntax.Name("track"), [THIS])))

	def test_aggregate_collapses(self):
		self.assertEqual(["i1", PROPS], self.deps(plus(this("p1"), this("i1"), props(), this("s1"))))

	def test_unknown_field_through_props(self):
		self.assertEqual(["children"], self.deps(props("children")))
		self.assertEqual([], self.deps(this("unknown")))

	def test_two_way_write(self):
		expr = assign(this("s1"), syntax.Name("a"))
		self.assertEqual(["s1Change"], self.deps(expr))
		self.assertEqual(PROPS, self.deps(expr).source("s1Change"))
		self.assertEqual(["s1"], all_dependencies(expr, self.table))

	def test_write_then_value(self):
		expr = syntax.Arrow([], assign(this("s1"), this("p1")))
		self.assertEqual(["s1Change", "p1"], self.deps(expr))

	def test_internal_state_write(self):
		self.assertEqual([], self.deps(assign(this("i1"), syntax.Literal(1))))
		self.assertEqual(["i1"], all_dependencies(assign(this("i1"), syntax.Literal(1)), self.table))

	def test_compound_writes_also_read(self):
		self.assertEqual(["s1", "s1Change"], self.deps(assign(this("s1"), syntax.Literal(1), "+=")))
		self.assertEqual(["i1"], self.deps(syntax.UpdateExp("++", this("i1"))))

	def test_writes_through_handles(self):
		self.assertEqual(["p1"], self.deps(assign(this("div"), this("p1"))))

	def test_destructuring(self):
		only = syntax.Let(syntax.ObjectPattern(["p1", "height"]), props())
		self.assertEqual(["p1", "height"], self.deps(only))
		rest = syntax.Let(syntax.ObjectPattern(["p1"], "rest"), props())
		self.assertEqual([PROPS], self.deps(rest))
		from_this = syntax.Let(syntax.ObjectPattern(["i1", "m"]), THIS)
		self.assertEqual(["i1"], self.deps(from_this))

	def test_one_way_write_is_an_error(self):
		for expr in [assign(this("p1"), syntax.Literal(1)), assign(props("p1"), syntax.Literal(1)), syntax.UpdateExp("--", this("p1"))]:
			with self.subTest(str(expr)):
				with self.assertRaises(AssignmentError) as cm:
					self.deps(expr)
				issue = cm.exception.issue
				self.assertEqual(("Widget", "p1"), (issue.declaration, issue.member))
				self.assertIn(
					"Error: can't assign to a one-way input; use two-way input, internal state, reference, or forwarded reference instead",
					issue.message,
				)

	def test_extraction_is_repeatable(self):
		expr = syntax.Cond(this("i1"), plus(this("p1"), this("s1")), syntax.ArrayLiteral([this("theme"), props("p1")]))
		first, second = self.deps(expr), self.deps(expr)
		self.assertEqual(first, second)
		self.assertEqual(["i1", "p1", "s1", "theme"], first)

def method(name, *steps, annotation=None):
	annotations = [syntax.Annotation(annotation)] if annotation else []
	return syntax.Method(name, annotations, body=syntax.Block(list(steps)))

def getter(name, expr):
	return syntax.GetAccessor(name, body=syntax.Block([syntax.Return(expr)]))

def prop(name, annotation):
	return syntax.Property(name, [syntax.Annotation(annotation)])

def build(*items):
	raw = syntax.ClassDeclaration("Widget", [syntax.Annotation("Component")], members=list(items))
	session = CompilationSession(ModuleTable([syntax.Module("w.tsx", [raw])]), Report())
	return session.require("Widget", "w.tsx")

class MemberLevelTests(unittest.TestCase):
	def test_calls_expand_at_the_call_position(self):
		built = build(
			prop("p1", "OneWay"), prop("i1", "InternalState"), prop("s1", "TwoWay"),
			getter("total", plus(this("p1"), syntax.Call(this("twice"), [this("s1")]))),
			method("twice", syntax.Return(plus(this("i1"), this("i1")))),
		)
		deps = member_dependencies(built)
		self.assertEqual(["i1"], deps["twice"])
		self.assertEqual(["p1", "i1", "s1"], deps["total"])

	def test_accessor_read_expands(self):
		built = build(
			prop("p1", "OneWay"),
			getter("doubled", plus(this("p1"), this("p1"))),
			getter("quadrupled", plus(this("doubled"), this("doubled"))),
		)
		self.assertEqual(["p1"], member_dependencies(built)["quadrupled"])

	def test_mutual_recursion_shares_one_set(self):
		built = build(
			prop("p1", "OneWay"), prop("i1", "InternalState"),
			method("ping", syntax.Return(plus(this("p1"), syntax.Call(this("pong"))))),
			method("pong", syntax.Return(plus(this("i1"), syntax.Call(this("ping"))))),
			method("serve", syntax.Return(syntax.Call(this("ping")))),
		)
		deps = member_dependencies(built)
		self.assertEqual(["p1", "i1"], deps["ping"])
		self.assertEqual(["p1", "i1"], deps["pong"])
		self.assertEqual(["p1", "i1"], deps["serve"])

	def test_method_with_props_collapses(self):
		built = build(
			prop("p1", "OneWay"), prop("i1", "InternalState"),
			method("snapshot", syntax.Return(syntax.ArrayLiteral([this("i1"), this("p1"), props()])), annotation="Method"),
		)
		self.assertEqual(["i1", PROPS], member_dependencies(built)["snapshot"])

	def test_nested_reads_go_through_the_accessor(self):
		built = build(
			syntax.Property("cell", [syntax.Annotation("Nested")], (), "?", syntax.TypeRef("Cell")),
			getter("label", syntax.FieldAccess(this("cell"), "text")),
		)
		deps = member_dependencies(built)
		self.assertEqual(["children"], deps["__nestedChildren"])
		self.assertEqual(["cell", "children"], deps["__getNestedCell"])
		self.assertEqual(["cell", "children"], deps["label"])

	def test_bare_property_is_tracked_like_state(self):
		built = build(
			syntax.Property("counter", [], initializer=syntax.Literal(0)),
			getter("label", this("counter")),
		)
		self.assertIsInstance(built.member("counter"), members.InternalState)
		self.assertEqual(["counter"], member_dependencies(built)["label"])


if __name__ == '__main__':
	unittest.main()
