"""
Everything that goes wrong during evaluation turns into an EvalError.

The kind is a plain string so that a compiler or test can dispatch on it
without importing anything else from here.
"""

TYPE_MISMATCH = "TypeMismatch"
MISSING_ATTR = "MissingAttr"
UNBOUND_VAR = "UnboundVar"
DUPLICATE_ATTR = "DuplicateAttr"
BAD_ATTR_NAME = "BadAttrName"
MISSING_ARG = "MissingArg"
UNEXPECTED_ARG = "UnexpectedArg"
NOT_A_FUNCTION = "NotAFunction"
COERCION_ERROR = "CoercionError"
DIV_BY_ZERO = "DivByZero"
INFINITE_RECURSION = "InfiniteRecursion"

KINDS = frozenset([
	TYPE_MISMATCH, MISSING_ATTR, UNBOUND_VAR, DUPLICATE_ATTR, BAD_ATTR_NAME,
	MISSING_ARG, UNEXPECTED_ARG, NOT_A_FUNCTION, COERCION_ERROR,
	DIV_BY_ZERO, INFINITE_RECURSION,
])

class EvalError(Exception):
	""" A failure of the program being evaluated, as opposed to a bug in the host. """
	def __init__(self, kind:str, message:str):
		assert kind in KINDS, kind
		super().__init__(kind, message)
		self.kind = kind
		self.message = message
		self.trail = []

	def __str__(self):
		if self.trail:
			return "%s: %s (while selecting '%s')" % (self.kind, self.message, ".".join(self.trail))
		return "%s: %s" % (self.kind, self.message)

	def reached_through(self, name:str):
		""" Record that the failure surfaced while selecting attribute `name`. """
		self.trail.insert(0, name)
		return self

###############################################################################

def type_mismatch(message): return EvalError(TYPE_MISMATCH, message)
def missing_attr(message): return EvalError(MISSING_ATTR, message)
def duplicate_attr(name):
	return EvalError(DUPLICATE_ATTR, "Attribute '%s' already defined." % name)
def unbound_var(name):
	return EvalError(UNBOUND_VAR, "Undefined variable '%s'." % name)
def infinite_recursion(): return EvalError(INFINITE_RECURSION, "Infinite recursion encountered.")
