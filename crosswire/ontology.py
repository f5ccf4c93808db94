"""
These most-fundamental classes sit apart from the rest to avoid
circular-import scenarios. The parse-tree, the member variants,
and the resolved-access nodes all build on what's here.
"""
from enum import Enum

class Phrase:
	""" Anything the upstream parser can hand us. """
	def __repr__(self): return "<%s %s>" % (type(self).__name__, self)

class ValueExpression(Phrase):
	def __str__(self): raise NotImplementedError(type(self))

class Step(Phrase):
	""" Statement-shaped things found in method bodies """
	def __str__(self): raise NotImplementedError(type(self))

class TypeExpression(Phrase):
	def __str__(self): raise NotImplementedError(type(self))


class Role(Enum):
	"""
	The closed set of member roles. Annotation names map onto these
	exactly once, during classification; nothing later looks at
	annotation text again.
	"""
	ONE_WAY = "OneWay"
	TWO_WAY = "TwoWay"
	INTERNAL_STATE = "InternalState"
	MUTABLE = "Mutable"
	EVENT = "Event"
	TEMPLATE = "Template"
	SLOT = "Slot"
	NESTED = "Nested"
	REF = "Ref"
	FORWARD_REF = "ForwardRef"
	API_METHOD = "Method"
	EFFECT = "Effect"
	COMPUTED = "Computed"
	PROVIDER = "Provider"
	CONSUMER = "Consumer"
	METHOD = "PlainMethod"
	UNCLASSIFIED = "Unclassified"

class Presence(Enum):
	REQUIRED = ""
	OPTIONAL = "?"
	DEFINITE = "!"

class Kind(Enum):
	""" What sort of class a declaration is, judging by its own annotation. """
	BINDINGS = "ComponentBindings"
	COMPONENT = "Component"
	PLAIN = ""

# Aggregate dependency tokens: "all inputs" and "all context".
PROPS = "props"
CONTEXT = "context"
AGGREGATES = frozenset([PROPS, CONTEXT])

RESERVED_NAMES = frozenset(['class', 'key', 'ref', 'style'])

def capitalize(name:str) -> str:
	return name[:1].upper() + name[1:]
