"""
One compilation session: a cache of built declarations keyed by
(module path, declared name), and a construction stack to catch cycles.

Finding a declaration by name is the resolver's job. ModuleTable is
the in-memory resolver over modules already parsed; anything with
a `resolve(name, from_path)` method will do.
"""
from pathlib import Path
from typing import Optional, NamedTuple, Iterable
from . import syntax
from .members import ComponentDeclaration
from .diagnostics import Report, cyclic_derivation

class Located(NamedTuple):
	path: Path
	declaration: syntax.ClassDeclaration

class ModuleTable:
	""" Resolves names against local declarations first, then imports. """
	def __init__(self, modules:Iterable[syntax.Module]):
		self._modules = {m.path: m for m in modules}

	def resolve(self, name:str, from_path) -> Optional[Located]:
		return self._resolve(name, Path(from_path), set())

	def _resolve(self, name:str, path:Path, seen:set) -> Optional[Located]:
		if (path, name) in seen: return None
		seen.add((path, name))
		module = self._modules.get(path)
		if module is None: return None
		found = module.declaration(name)
		if found is not None: return Located(path, found)
		im = module.import_of(name)
		if im is not None: return self._resolve(im.exported_name, im.source_path, seen)

class CompilationSession:
	def __init__(self, resolver, report:Report):
		self.resolver = resolver
		self.report = report
		self._cache:dict[tuple[Path, str], ComponentDeclaration] = {}
		self._construction_stack:list[tuple[Path, str]] = []

	def require(self, name:str, from_path) -> Optional[ComponentDeclaration]:
		""" The built declaration `name` refers to from `from_path`, or None if nothing by that name is known. """
		located = self.resolver.resolve(name, from_path)
		if located is None: return None
		return self.declaration(located)

	def declaration(self, located:Located) -> ComponentDeclaration:
		key = (located.path, located.declaration.name)
		if key in self._cache:
			return self._cache[key]
		if key in self._construction_stack:
			depth = self._construction_stack.index(key)
			raise cyclic_derivation(self._construction_stack[depth:] + [key])
		from .compiler import build_declaration
		self._construction_stack.append(key)
		try:
			built = build_declaration(self, located)
		finally:
			self._construction_stack.pop()
		self._cache[key] = built
		self.report.info("Built", built.name, "from", located.path)
		return built

	def cached(self, path, name:str) -> Optional[ComponentDeclaration]:
		return self._cache.get((Path(path), name))

	def __len__(self): return len(self._cache)

	def reset(self):
		self._cache.clear()
		self._construction_stack.clear()
