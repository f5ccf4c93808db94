"""
The parser proper lives elsewhere. What arrives here is its tree,
serialized as JSON: every node is an object whose "node" key names
a constructor in `syntax`, and whose other keys are its arguments.
Imports arrive as {"node": "Import", "name": ..., "source_path": ...}.
"""
import json
from pathlib import Path
from typing import Union
from . import syntax
from .diagnostics import Report, Issue, Yuck

class MalformedTree(Yuck):
	pass

CONSTRUCTORS = {cls.__name__: cls for cls in syntax.PARSE_NODES}
CONSTRUCTORS["Import"] = syntax.import_from

def load_tree(data):
	""" Build parse-nodes bottom-up from plain JSON data. """
	if isinstance(data, list):
		return [load_tree(item) for item in data]
	if isinstance(data, dict):
		fields = {key: load_tree(value) for key, value in data.items() if key != "node"}
		if "node" not in data: return fields
		return CONSTRUCTORS[data["node"]](**fields)
	return data

def load_file(path:Union[str, Path], report:Report) -> list[syntax.Module]:
	""" One module or a list of modules. Raises MalformedTree after reporting the problem. """
	path = Path(path)
	try:
		with open(path) as fh:
			tree = load_tree(json.load(fh))
	except (OSError, ValueError, KeyError, TypeError, AssertionError) as ex:
		issue = Issue(path.name, None, "malformed tree: %s: %s" % (type(ex).__name__, ex))
		report.issue(issue)
		raise MalformedTree("parse", issue)
	modules = tree if isinstance(tree, list) else [tree]
	for m in modules:
		if not isinstance(m, syntax.Module):
			issue = Issue(path.name, None, "expected modules at the top level, found %r" % (m,))
			report.issue(issue)
			raise MalformedTree("parse", issue)
	report.info("Loaded", len(modules), "module(s) from", path)
	return modules
