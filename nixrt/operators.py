"""
The operators of the Nix language, as the compiler calls them.

Operands arrive possibly still lazy. Each operator forces only what it must
to decide its answer, always the left operand first, so that errors come
out the same way every time.

Binary operators dispatch on the pair of (forced) operand types through the
tables below. The tables fill themselves from the annotations on the
little functions named `_plus_*`, `_less_*`, and `_equal_*`.
"""
import operator
from typing import Optional

from .types import LAZY_VALUE, STRICT_VALUE
from .evaluator import force
from .values import Int, Float, Bool, Str, Path, List, Attrset, Lambda, TRUE, FALSE, NULL, to_path
from . import errors

PLUS = {}
LESS = {}
EQUAL = {}

###############################################################################

def _int_div(a:int, b:int) -> int:
	if b == 0: raise errors.EvalError(errors.DIV_BY_ZERO, "Division by zero.")
	quotient = abs(a) // abs(b)
	return quotient if (a < 0) == (b < 0) else -quotient

def _float_div(a:float, b:float) -> float:
	if b == 0: raise errors.EvalError(errors.DIV_BY_ZERO, "Division by zero.")
	return a / b

ARITHMETIC = {
	"+": (operator.add, operator.add, "add"),
	"-": (operator.sub, operator.sub, "subtract"),
	"*": (operator.mul, operator.mul, "multiply"),
	"/": (_int_div, _float_div, "divide"),
}

def _arithmetic(op:str, a:STRICT_VALUE, b:STRICT_VALUE) -> Optional[STRICT_VALUE]:
	""" Answers None if the operands are not both numbers. """
	int_fn, float_fn, _ = ARITHMETIC[op]
	if type(a) is Int and type(b) is Int: return Int(int_fn(a.value, b.value))
	if type(a) in (Int, Float) and type(b) in (Int, Float):
		return Float(float_fn(a.as_float(), b.as_float()))
	return None

def _numeric_op(op:str, lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> STRICT_VALUE:
	a = force(lhs)
	b = force(rhs)
	result = _arithmetic(op, a, b)
	if result is None:
		verb = ARITHMETIC[op][2]
		raise errors.type_mismatch("Cannot %s '%s' and '%s'." % (verb, a.type_name, b.type_name))
	return result

def neg(operand:LAZY_VALUE) -> STRICT_VALUE:
	value = force(operand)
	if type(value) is Int: return Int(-value.value)
	if type(value) is Float: return Float(-value.value)
	raise errors.type_mismatch("Cannot negate '%s'." % value.type_name)

def _plus_strings(env, a:Str, b:Str): return Str(a.text + b.text)
def _plus_path_string(env, a:Path, b:Str): return to_path(env, a.text + b.text)
def _plus_paths(env, a:Path, b:Path): return to_path(env, a.text + "/" + b.text)

def add(env, lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> STRICT_VALUE:
	a = force(lhs)
	b = force(rhs)
	result = _arithmetic("+", a, b)
	if result is not None: return result
	try: fn = PLUS[type(a), type(b)]
	except KeyError: raise errors.type_mismatch("Cannot add '%s' to '%s'." % (a.type_name, b.type_name)) from None
	return fn(env, a, b)

def sub(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> STRICT_VALUE: return _numeric_op("-", lhs, rhs)
def mul(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> STRICT_VALUE: return _numeric_op("*", lhs, rhs)
def div(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> STRICT_VALUE: return _numeric_op("/", lhs, rhs)

###############################################################################

def _as_bool(operand:LAZY_VALUE) -> Bool:
	value = force(operand)
	if not isinstance(value, Bool):
		raise errors.type_mismatch("Value is '%s' but a boolean was expected." % value.type_name)
	return value

def and_(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	return _as_bool(rhs) if _as_bool(lhs) else FALSE

def or_(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	return TRUE if _as_bool(lhs) else _as_bool(rhs)

def implication(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	return _as_bool(rhs) if _as_bool(lhs) else TRUE

def not_(operand:LAZY_VALUE) -> Bool:
	return FALSE if _as_bool(operand) else TRUE

###############################################################################

def _equal_ints(a:Int, b:Int): return a.value == b.value
def _equal_int_float(a:Int, b:Float): return a.as_float() == b.value
def _equal_float_int(a:Float, b:Int): return a.value == b.as_float()
def _equal_floats(a:Float, b:Float): return a.value == b.value
def _equal_strings(a:Str, b:Str): return a.text == b.text
def _equal_paths(a:Path, b:Path): return a.text == b.text

def _equal_lists(a:List, b:List):
	if len(a) != len(b): return False
	return all(_equal(force(x), force(y)) for x, y in zip(a, b))

def _equal_sets(a:Attrset, b:Attrset):
	if len(a) != len(b): return False
	for name, x in a.items():
		y = b.get(name)
		if y is None or not _equal(force(x), force(y)): return False
	return True

def _equal(a:STRICT_VALUE, b:STRICT_VALUE) -> bool:
	try: fn = EQUAL[type(a), type(b)]
	except KeyError: return a is b  # Booleans, null, and everything mismatched.
	return fn(a, b)

def eq(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	a = force(lhs)
	return Bool.of(_equal(a, force(rhs)))

def neq(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	return FALSE if eq(lhs, rhs) else TRUE

###############################################################################

def _less_ints(a:Int, b:Int): return a.value < b.value
def _less_int_float(a:Int, b:Float): return a.as_float() < b.value
def _less_float_int(a:Float, b:Int): return a.value < b.as_float()
def _less_floats(a:Float, b:Float): return a.value < b.value
def _less_strings(a:Str, b:Str): return a.text < b.text

def _less_lists(a:List, b:List):
	for x, y in zip(a, b):
		x, y = force(x), force(y)
		# Nix lets matching booleans and nulls slide by,
		# even though it refuses to order them otherwise.
		if x is y and (x is TRUE or x is FALSE or x is NULL): continue
		if _less(x, y): return True
		if _less(y, x): return False
	return len(a) < len(b)

def _less(a:STRICT_VALUE, b:STRICT_VALUE) -> bool:
	try: fn = LESS[type(a), type(b)]
	except KeyError: raise errors.type_mismatch("Cannot compare '%s' with '%s'." % (a.type_name, b.type_name)) from None
	return fn(a, b)

def lt(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	a = force(lhs)
	return Bool.of(_less(a, force(rhs)))

def le(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	a = force(lhs)
	return Bool.of(not _less(force(rhs), a))

def gt(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	a = force(lhs)
	return Bool.of(_less(force(rhs), a))

def ge(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Bool:
	a = force(lhs)
	return Bool.of(not _less(a, force(rhs)))

###############################################################################

def concat(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> List:
	""" The `++` operator. Neither operand changes, and no element gets forced. """
	a = force(lhs)
	b = force(rhs)
	if not (isinstance(a, List) and isinstance(b, List)):
		raise errors.type_mismatch("Cannot concatenate '%s' and '%s'." % (a.type_name, b.type_name))
	if not len(b): return a
	if not len(a): return b
	return List(a.items + b.items)

def apply(fn:LAZY_VALUE, arg:LAZY_VALUE) -> LAZY_VALUE:
	function = force(fn)
	if not isinstance(function, Lambda):
		raise errors.EvalError(errors.NOT_A_FUNCTION, "Attempt to call something which is not a function but '%s'." % function.type_name)
	return function.apply(arg)

def interpolate(operand:LAZY_VALUE) -> Str:
	""" Only strings may be spliced into strings, for now. """
	value = force(operand)
	if not isinstance(value, Str):
		raise errors.EvalError(errors.COERCION_ERROR, "Cannot coerce '%s' to a string." % value.type_name)
	return value

###############################################################################

def _collect(prefix:str, table:dict):
	for _k, _v in list(globals().items()):
		if _k.startswith(prefix):
			_a, _b = _v.__annotations__["a"], _v.__annotations__["b"]
			assert isinstance(_a, type) and isinstance(_b, type), _k
			table[_a, _b] = _v

_collect("_plus_", PLUS)
_collect("_less_", LESS)
_collect("_equal_", EQUAL)
