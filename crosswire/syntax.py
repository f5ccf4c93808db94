"""
The set of parse-nodes in simple form.
The upstream parser (or front_end.load_tree) calls these constructors
bottom-up. Nothing here knows about member roles; that comes later.
The __str__ methods exist for diagnostics and tests, not as a pretty-printer.
"""
from pathlib import Path
from typing import Optional, Any, Sequence, Union, NamedTuple
from .ontology import ValueExpression, Step, TypeExpression, Phrase, Kind

ASSIGNMENT_OPERATORS = frozenset(["=", "+=", "-=", "*=", "/=", "%=", "**=", "&&=", "||=", "??="])
PRIMITIVE_TYPES = frozenset([
	"any", "unknown", "string", "number", "boolean", "bigint", "symbol",
	"void", "undefined", "null", "never", "object",
])

def _commas(items): return ", ".join(map(str, items))

#######################################################################
#  Value expressions

class This(ValueExpression):
	def __str__(self): return "this"

class Name(ValueExpression):
	def __init__(self, text:str): self.text = text
	def __str__(self): return self.text

class Literal(ValueExpression):
	def __init__(self, value:Any = None): self.value = value
	def __str__(self):
		if self.value is None: return "undefined"
		if self.value is True: return "true"
		if self.value is False: return "false"
		if isinstance(self.value, str): return repr(self.value)
		return str(self.value)

class FieldAccess(ValueExpression):
	def __init__(self, lhs:ValueExpression, field:str, optional:bool=False):
		self.lhs, self.field, self.optional = lhs, field, optional
	def __str__(self): return "%s%s%s" % (self.lhs, "?." if self.optional else ".", self.field)

class ElementAccess(ValueExpression):
	def __init__(self, lhs:ValueExpression, index:ValueExpression):
		self.lhs, self.index = lhs, index
	def __str__(self): return "%s[%s]" % (self.lhs, self.index)

class Call(ValueExpression):
	def __init__(self, fn_exp:ValueExpression, args:Sequence[ValueExpression]=(), optional:bool=False):
		self.fn_exp, self.args, self.optional = fn_exp, list(args), optional
	def __str__(self): return "%s%s(%s)" % (self.fn_exp, "?." if self.optional else "", _commas(self.args))

class New(ValueExpression):
	def __init__(self, class_name:str, args:Sequence[ValueExpression]=()):
		self.class_name, self.args = class_name, list(args)
	def __str__(self): return "new %s(%s)" % (self.class_name, _commas(self.args))

class BinExp(ValueExpression):
	def __init__(self, lhs:ValueExpression, op:str, rhs:ValueExpression):
		assert op not in ASSIGNMENT_OPERATORS, op
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def __str__(self): return "%s %s %s" % (self.lhs, self.op, self.rhs)

class Assign(ValueExpression):
	def __init__(self, target:ValueExpression, op:str, value:ValueExpression):
		assert op in ASSIGNMENT_OPERATORS, op
		self.target, self.op, self.value = target, op, value
	def is_compound(self): return self.op != "="
	def arithmetic(self): return self.op[:-1]
	def __str__(self): return "%s %s %s" % (self.target, self.op, self.value)

class UnaryExp(ValueExpression):
	def __init__(self, op:str, arg:ValueExpression):
		self.op, self.arg = op, arg
	def __str__(self): return "%s%s" % (self.op, self.arg)

class UpdateExp(ValueExpression):
	""" The ++ and -- operators, which both read and write their operand. """
	def __init__(self, op:str, arg:ValueExpression, prefix:bool=False):
		assert op in ("++", "--"), op
		self.op, self.arg, self.prefix = op, arg, prefix
	def arithmetic(self): return self.op[0]
	def __str__(self): return "%s%s" % (self.op, self.arg) if self.prefix else "%s%s" % (self.arg, self.op)

class Cond(ValueExpression):
	def __init__(self, if_part:ValueExpression, then_part:ValueExpression, else_part:ValueExpression):
		self.if_part, self.then_part, self.else_part = if_part, then_part, else_part
	def __str__(self): return "%s ? %s : %s" % (self.if_part, self.then_part, self.else_part)

class ArrayLiteral(ValueExpression):
	def __init__(self, elts:Sequence[ValueExpression]=()): self.elts = list(elts)
	def __str__(self): return "[%s]" % _commas(self.elts)

class Spread(ValueExpression):
	def __init__(self, expr:ValueExpression): self.expr = expr
	def __str__(self): return "...%s" % self.expr

class Entry(Phrase):
	def __init__(self, key:str, value:ValueExpression): self.key, self.value = key, value
	def __str__(self): return "%s: %s" % (self.key, self.value)

class ObjectLiteral(ValueExpression):
	def __init__(self, entries:Sequence[Union[Entry, Spread]]=()): self.entries = list(entries)
	def keys(self): return [e.key for e in self.entries if isinstance(e, Entry)]
	def __str__(self): return "{%s}" % _commas(self.entries)

class Arrow(ValueExpression):
	def __init__(self, params:Sequence[str]=(), body:Union[ValueExpression, "Block", None]=None):
		self.params = list(params)
		self.body = Block() if body is None else body
	def __str__(self): return "(%s) => %s" % (", ".join(self.params), self.body)

class ScopedAccess(ValueExpression):
	"""
	Reads a default value from a live base declaration instead of
	duplicating the base's initializer. Which spelling a target uses
	(`Base.x` or `new Base().x`) is the emitter's business;
	the `construct` flag says which one the resolver meant.
	"""
	def __init__(self, owner:str, field:str, construct:bool=False):
		self.owner, self.field, self.construct = owner, field, construct
	def __str__(self):
		return "new %s().%s" % (self.owner, self.field) if self.construct else "%s.%s" % (self.owner, self.field)

#######################################################################
#  Statements

class Block(Step):
	def __init__(self, steps:Sequence[Union[Step, ValueExpression]]=()): self.steps = list(steps)
	def __str__(self): return "{%s}" % "; ".join(map(str, self.steps))

class Return(Step):
	def __init__(self, expr:Optional[ValueExpression]=None): self.expr = expr
	def __str__(self): return "return" if self.expr is None else "return %s" % self.expr

class ObjectPattern(Phrase):
	def __init__(self, names:Sequence[str]=(), rest:Optional[str]=None):
		self.names, self.rest = list(names), rest
	def __str__(self):
		parts = list(self.names)
		if self.rest: parts.append("..." + self.rest)
		return "{%s}" % ", ".join(parts)

class Let(Step):
	def __init__(self, pattern:Union[str, ObjectPattern], init:Optional[ValueExpression]=None, kind:str="const"):
		self.pattern, self.init, self.kind = pattern, init, kind
	def __str__(self):
		if self.init is None: return "%s %s" % (self.kind, self.pattern)
		return "%s %s = %s" % (self.kind, self.pattern, self.init)

class If(Step):
	def __init__(self, test:ValueExpression, then_part, else_part=None):
		self.test, self.then_part, self.else_part = test, then_part, else_part
	def __str__(self):
		text = "if (%s) %s" % (self.test, self.then_part)
		return text if self.else_part is None else text + " else %s" % self.else_part

#######################################################################
#  Type expressions: opaque as far as emission is concerned,
#  but the resolver needs to see through Pick, Omit, and intersections.

class KeywordType(TypeExpression):
	def __init__(self, name:str): self.name = name
	def __str__(self): return self.name

class TypeRef(TypeExpression):
	def __init__(self, name:str, arguments:Sequence[TypeExpression]=()):
		self.name, self.arguments = name, list(arguments)
	def __str__(self):
		return "%s<%s>" % (self.name, _commas(self.arguments)) if self.arguments else self.name

class TypeQuery(TypeExpression):
	""" typeof X """
	def __init__(self, name:str): self.name = name
	def __str__(self): return "typeof " + self.name

class ArrayType(TypeExpression):
	def __init__(self, element:TypeExpression): self.element = element
	def __str__(self): return "%s[]" % self.element

class TupleType(TypeExpression):
	def __init__(self, elts:Sequence[TypeExpression]=()): self.elts = list(elts)
	def __str__(self): return "[%s]" % _commas(self.elts)

class UnionType(TypeExpression):
	def __init__(self, types:Sequence[TypeExpression]): self.types = list(types)
	def __str__(self): return " | ".join(map(str, self.types))

class IntersectionType(TypeExpression):
	def __init__(self, types:Sequence[TypeExpression]): self.types = list(types)
	def __str__(self): return " & ".join(map(str, self.types))

class LiteralType(TypeExpression):
	def __init__(self, value:Any): self.value = value
	def __str__(self): return repr(self.value) if isinstance(self.value, str) else str(self.value)

class Parameter(Phrase):
	def __init__(self, name:str, type_expr:Optional[TypeExpression]=None, token:Optional[str]=None):
		self.name, self.type_expr, self.token = name, type_expr, token
	def __str__(self):
		text = self.name + (self.token or "")
		return text if self.type_expr is None else "%s: %s" % (text, self.type_expr)

class FunctionType(TypeExpression):
	def __init__(self, params:Sequence[Parameter], result:TypeExpression):
		self.params, self.result = list(params), result
	def __str__(self): return "(%s) => %s" % (_commas(self.params), self.result)

def reference_name(t:Optional[TypeExpression]) -> Optional[str]:
	""" The declaration a type names directly, if it names one at all. """
	if isinstance(t, TypeRef) and not t.arguments and t.name not in PRIMITIVE_TYPES: return t.name
	if isinstance(t, TypeQuery): return t.name

def literal_names(t:Optional[TypeExpression]) -> list[str]:
	""" The key-list argument of Pick<B, K> or Omit<B, K>, in whichever spelling. """
	if isinstance(t, LiteralType): return [str(t.value)]
	if isinstance(t, (UnionType, TupleType)):
		parts = t.types if isinstance(t, UnionType) else t.elts
		return [name for part in parts for name in literal_names(part)]
	return []

def complex_type(t:Optional[TypeExpression]) -> str:
	""" The first non-primitive type named in t, or else "any". """
	if isinstance(t, TypeRef):
		if t.name == "Array" and t.arguments: return complex_type(t.arguments[0])
		return "any" if t.name in PRIMITIVE_TYPES else t.name
	if isinstance(t, TypeQuery): return t.name
	if isinstance(t, ArrayType): return complex_type(t.element)
	if isinstance(t, (UnionType, IntersectionType)):
		for part in t.types:
			found = complex_type(part)
			if found != "any": return found
	return "any"

def is_array_type(t:Optional[TypeExpression]) -> bool:
	if isinstance(t, (ArrayType, TupleType)): return True
	if isinstance(t, TypeRef): return t.name == "Array"
	if isinstance(t, UnionType): return any(map(is_array_type, t.types))
	return False

def is_complex_type(t:Optional[TypeExpression]) -> bool:
	""" Would a getter of this type hand out a fresh object every time? """
	if isinstance(t, (ArrayType, TupleType, TypeQuery, FunctionType)): return True
	if isinstance(t, TypeRef): return t.name not in PRIMITIVE_TYPES
	if isinstance(t, (UnionType, IntersectionType)): return any(map(is_complex_type, t.types))
	return False

#######################################################################
#  Declarations

class Annotation(Phrase):
	def __init__(self, name:str, args:Sequence[Any]=()):
		self.name, self.args = name, list(args)
	def __str__(self): return "@%s(%s)" % (self.name, _commas(self.args))

class ClassMember(Phrase):
	annotations: list[Annotation]
	modifiers: list[str]
	name: str
	token: Optional[str] = None
	type_expr: Optional[TypeExpression] = None
	initializer: Optional[ValueExpression] = None
	params: list[Parameter] = ()
	body: Optional[Block] = None
	def __str__(self): return self.name

class Property(ClassMember):
	def __init__(self, name:str, annotations=(), modifiers=(), token=None, type_expr=None, initializer=None):
		assert token in (None, "", "?", "!"), token
		self.name, self.token = name, token or None
		self.annotations, self.modifiers = list(annotations), list(modifiers)
		self.type_expr, self.initializer = type_expr, initializer

class Method(ClassMember):
	def __init__(self, name:str, annotations=(), modifiers=(), params=(), type_expr=None, body=None):
		self.name = name
		self.annotations, self.modifiers = list(annotations), list(modifiers)
		self.params, self.type_expr = list(params), type_expr
		self.body = Block() if body is None else body

class GetAccessor(ClassMember):
	def __init__(self, name:str, annotations=(), modifiers=(), type_expr=None, body=None):
		self.name = name
		self.annotations, self.modifiers = list(annotations), list(modifiers)
		self.type_expr = type_expr
		self.body = Block() if body is None else body

class ClassDeclaration(Phrase):
	def __init__(self, name:str, annotations=(), modifiers=(), heritage:Sequence[TypeExpression]=(), members:Sequence[ClassMember]=()):
		self.name = name
		self.annotations, self.modifiers = list(annotations), list(modifiers)
		self.heritage, self.members = list(heritage), list(members)

	@property
	def kind(self) -> Kind:
		for a in self.annotations:
			if a.name == Kind.BINDINGS.value: return Kind.BINDINGS
			if a.name == Kind.COMPONENT.value: return Kind.COMPONENT
		return Kind.PLAIN

	def __str__(self): return self.name

class Import(NamedTuple):
	name: str           # As known in the importing module
	source_path: Path
	exported_name: str  # As known in the source module

def import_from(name:str, source_path, exported_name:Optional[str]=None) -> Import:
	return Import(name, Path(source_path), exported_name or name)

class Module(Phrase):
	def __init__(self, path, declarations:Sequence[ClassDeclaration]=(), imports:Sequence[Import]=()):
		self.path = Path(path)
		self.declarations = list(declarations)
		self.imports = list(imports)

	def declaration(self, name:str) -> Optional[ClassDeclaration]:
		for d in self.declarations:
			if d.name == name: return d

	def import_of(self, name:str) -> Optional[Import]:
		for im in self.imports:
			if im.name == name: return im

	def __str__(self): return str(self.path)

# Everything the JSON front-end may construct by name:
PARSE_NODES = (
	This, Name, Literal, FieldAccess, ElementAccess, Call, New, BinExp, Assign,
	UnaryExp, UpdateExp, Cond, ArrayLiteral, Spread, Entry, ObjectLiteral, Arrow,
	Block, Return, ObjectPattern, Let, If,
	KeywordType, TypeRef, TypeQuery, ArrayType, TupleType, UnionType, IntersectionType,
	LiteralType, Parameter, FunctionType,
	Annotation, Property, Method, GetAccessor, ClassDeclaration, Module,
)
