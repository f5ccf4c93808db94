"""
Drives the passes: classify, fold in heritage, synthesize, freeze;
then, per built declaration, work out dependencies and lower the bodies.

Hard errors stop the declaration they occur in and nothing else.
Nothing half-built ever reaches the session cache.
"""
from typing import Iterable, Union
from . import syntax
from .members import ComponentDeclaration, MemberTable, NestedAccessor, Subroutine
from .classifier import classify_declaration
from .derivation import resolve_heritage
from .synthesis import synthesize
from .dependencies import member_dependencies
from .lowering import Lowering
from .emission import LoweredComponent
from .session import Located, ModuleTable, CompilationSession
from .diagnostics import Report, Yuck

def build_declaration(session:CompilationSession, located:Located) -> ComponentDeclaration:
	raw = located.declaration
	declaration = ComponentDeclaration(raw.name, located.path, raw.kind)
	own = classify_declaration(declaration, raw, session.report)
	merged = resolve_heritage(session, declaration, raw.heritage, own)
	declaration.install(synthesize(declaration, merged))
	declaration.freeze()
	return declaration

def lower_declaration(declaration:ComponentDeclaration) -> LoweredComponent:
	table = MemberTable(declaration.members, declaration.name)
	dependencies = member_dependencies(declaration, table)
	lowering = Lowering(table)
	bodies = {}
	for m in declaration.members:
		if isinstance(m, NestedAccessor):
			bodies[m.name] = lowering.nested_resolution(m)
		elif isinstance(m, Subroutine) and m.body is not None:
			bodies[m.name] = lowering.lower(m.body)
	return LoweredComponent(declaration, bodies, dependencies)

class Compiler:
	def __init__(self, modules:Iterable[syntax.Module], report:Report):
		self.modules = list(modules)
		self.report = report
		self.session = CompilationSession(ModuleTable(self.modules), report)
		self._filed = set()

	def compile_module(self, module:syntax.Module, lower:bool=True) -> list[Union[LoweredComponent, ComponentDeclaration]]:
		results = []
		for raw in module.declarations:
			try:
				declaration = self.session.declaration(Located(module.path, raw))
				results.append(lower_declaration(declaration) if lower else declaration)
			except Yuck as ex:
				self._file(ex.issue)
		return results

	def _file(self, issue):
		# A broken base fails every declaration that requires it.
		key = issue.declaration, issue.message
		if key not in self._filed:
			self._filed.add(key)
			self.report.issue(issue)

	def compile_all(self, lower:bool=True) -> list[Union[LoweredComponent, ComponentDeclaration]]:
		results = []
		for module in self.modules:
			results.extend(self.compile_module(module, lower))
		return results

	def reset(self):
		self.session.reset()
		self._filed.clear()
		self.report.reset()
