"""
Everything that can go wrong gets reported through here.

Soft violations become warnings and compilation carries on.
Hard errors are raised as some flavor of Yuck carrying an Issue;
whoever drives the pipeline catches them one declaration at a time
and files the issue with the Report.
"""
import sys, random
from pathlib import Path
from typing import Optional, Sequence

class TooManyIssues(Exception):
	pass

class Issue:
	""" A plain error value: which declaration, which member, what happened. """
	def __init__(self, declaration:str, member:Optional[str], message:str):
		self.declaration, self.member, self.message = declaration, member, message

	def __str__(self):
		if self.member is None: return "%s: %s" % (self.declaration, self.message)
		return "%s.%s: %s" % (self.declaration, self.member, self.message)

	def __repr__(self): return "<Issue %s>" % self

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	The second is the Issue to file.
	"""
	@property
	def phase(self) -> str: return self.args[0]

	@property
	def issue(self) -> Issue: return self.args[1]

	def __str__(self): return str(self.issue)

class ClassificationError(Yuck): pass
class AssignmentError(Yuck): pass
class CyclicDerivationError(Yuck): pass

ONE_WAY_ASSIGNMENT = "Error: can't assign to a one-way input; use two-way input, internal state, reference, or forwarded reference instead"

def one_way_assignment(declaration:str, member:str, site) -> AssignmentError:
	message = "%s - %s" % (ONE_WAY_ASSIGNMENT, site)
	return AssignmentError("lower", Issue(declaration, member, message))

def generated_companion(declaration:str, companion:str, template:str) -> ClassificationError:
	pattern = "can't use '%s' property; it will be generated for '%s' template property"
	return ClassificationError("classify", Issue(declaration, companion, pattern % (companion, template)))

def cyclic_derivation(cycle:Sequence[tuple[Path, str]]) -> CyclicDerivationError:
	path = " -> ".join(name for _, name in cycle)
	message = "cyclic dependency among derived declarations: %s" % path
	return CyclicDerivationError("derive", Issue(cycle[0][1], None, message))


def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm. ", "", ""]
	complaint = ['Drat', 'Rats', 'Fiddlesticks', 'Good Grief', 'Confound it', 'Nuts', 'Blast']
	resignation = [
		'These declarations will not compile.',
		'Somebody has some explaining to do.',
		'I cannot make sense of this.',
		'I need to ask for help.',
	]
	return "%s%s! %s" % tuple(map(random.choice, (particle, complaint, resignation)))

class Report:
	""" Collects issues and warnings for one compilation session. """
	issues: list[Issue]
	warnings: list[Issue]

	def __init__(self, *, verbose:int=0, max_issues:int=10):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._max_issues = max_issues
		self.issues = []
		self.warnings = []

	def ok(self): return not self.issues
	def sick(self): return bool(self.issues)

	def issue(self, it:Issue):
		self.issues.append(it)
		if len(self.issues) == self._max_issues:
			raise TooManyIssues(self)

	def warn(self, declaration:str, member:Optional[str], message:str):
		self.warnings.append(Issue(declaration, member, message))
		if self._verbose:
			print("warning:", message, file=sys.stderr)

	def reset(self):
		self.issues.clear()
		self.warnings.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues (and any warnings) to the console. """
		if self.issues:
			print("*"*60, file=sys.stderr)
			print(_outburst(), file=sys.stderr)
		for i in self.issues:
			print("  -"*20, file=sys.stderr)
			print(i, file=sys.stderr)
		for w in self.warnings:
			print("warning:", w.message, file=sys.stderr)
		sys.stderr.flush()

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self.issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Warnings the classifier issues. The wording is what people writing
	# these declarations have long been used to seeing.

	def missing_annotation(self, declaration:str, member:str):
		self.warn(declaration, member, "%s ComponentBindings has property without decorator: %s" % (declaration, member))

	def multiple_annotations(self, declaration:str, member:str):
		self.warn(declaration, member, "%s ComponentBindings has property with multiple decorators: %s" % (declaration, member))

	def incorrect_annotation(self, declaration:str, member:str, annotation:str):
		pattern = '%s ComponentBindings has property "%s" with incorrect decorator: %s'
		self.warn(declaration, member, pattern % (declaration, member, annotation))

	def reserved_name(self, declaration:str, member:str):
		self.warn(declaration, member, "%s ComponentBindings has property with reserved name: %s" % (declaration, member))

	def nested_needs_complex_type(self, declaration:str, member:str):
		self.warn(declaration, member, 'One of "%s" Nested property\'s types should be complex type' % member)

	def non_property_member(self, declaration:str, member:str):
		self.warn(declaration, member, "%s ComponentBindings has non-property member: %s" % (declaration, member))

	def redefined(self, declaration:str, member:str):
		self.warn(declaration, member, "%s defines member '%s' more than once; the last one wins" % (declaration, member))

	# Methods the derivation resolver calls

	def unresolved_reference(self, declaration:str, name:str):
		self.info("In", declaration, "nothing to merge from unresolved", name)
