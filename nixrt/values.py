"""
This module defines the run-time value-types of the Nix language.

Every variant is a small class with a `type_name`, which is what `typeOf`
reports. Atomic variants carry one Python payload and compare equal (in the
Python sense) when their payloads do. Containers hold values which may still
be lazy; nothing here forces a container's elements except `recursive_force`.
"""
from abc import abstractmethod
from collections import deque
from typing import Iterable, Mapping, Optional, Sequence

from .types import NixValue, LAZY_VALUE, STRICT_VALUE, BODY
from .evaluator import Thunk, force, delay
from . import errors

_I64_SPAN = 1 << 64
_I64_MIN = -(1 << 63)

def wrap_i64(n:int) -> int:
	""" Reduce an arbitrary Python int to two's-complement 64 bits. """
	return (n - _I64_MIN) % _I64_SPAN + _I64_MIN

class Int(NixValue):
	type_name = "int"
	def __init__(self, value:int):
		self.value = wrap_i64(int(value))
	def __repr__(self): return "Int(%d)" % self.value
	def __eq__(self, other): return type(other) is Int and other.value == self.value
	def __hash__(self): return hash(self.value)
	def as_float(self) -> float: return float(self.value)

class Float(NixValue):
	type_name = "float"
	def __init__(self, value:float):
		self.value = float(value)
	def __repr__(self): return "Float(%r)" % self.value
	def __eq__(self, other): return type(other) is Float and other.value == self.value
	def __hash__(self): return hash(self.value)
	def as_float(self) -> float: return self.value

class Bool(NixValue):
	""" There are exactly two of these: TRUE and FALSE. Compare them by identity. """
	type_name = "bool"
	def __init__(self, flag:bool):
		self.flag = flag
	def __repr__(self): return "TRUE" if self.flag else "FALSE"
	def __bool__(self): return self.flag
	@staticmethod
	def of(flag) -> "Bool": return TRUE if flag else FALSE

TRUE = Bool(True)
FALSE = Bool(False)

class Null(NixValue):
	type_name = "null"
	def __repr__(self): return "NULL"

NULL = Null()

class Str(NixValue):
	type_name = "string"
	def __init__(self, text:str):
		assert isinstance(text, str), type(text)
		self.text = text
	def __repr__(self): return "Str(%r)" % self.text
	def __str__(self): return self.text
	def __eq__(self, other): return type(other) is Str and other.text == self.text
	def __hash__(self): return hash(self.text)

###############################################################################

def normalize_path(text:str) -> str:
	"""
	Drop empty and "." segments, let ".." eat the segment before it,
	and glue the rest back together with single slashes under the root.
	"""
	segments = []
	for segment in text.split("/"):
		if segment in ("", "."): continue
		if segment == "..":
			if segments: segments.pop()
		else: segments.append(segment)
	return "/" + "/".join(segments)

class Path(NixValue):
	type_name = "path"
	def __init__(self, text:str):
		if not text.startswith("/"):
			raise ValueError("Path values must be absolute: %r" % text)
		self.text = normalize_path(text)
	def __repr__(self): return "Path(%r)" % self.text
	def __str__(self): return self.text
	def __eq__(self, other): return type(other) is Path and other.text == self.text
	def __hash__(self): return hash(self.text)

def to_path(env, text) -> Path:
	""" Relative paths are relative to the directory of the script being evaluated. """
	if isinstance(text, Str): text = text.text
	if not text.startswith("/"):
		text = env.script_dir + "/" + text
	return Path(text)

###############################################################################

class List(NixValue):
	type_name = "list"
	def __init__(self, items:Iterable[LAZY_VALUE] = ()):
		self.items = tuple(items)
	def __repr__(self): return "List(%r)" % (list(self.items),)
	def __len__(self): return len(self.items)
	def __iter__(self): return iter(self.items)
	def __getitem__(self, index): return self.items[index]

class Attrset(NixValue):
	"""
	A finished attribute set: names (Python strings) mapped to possibly-lazy values.
	Construction with all the fancy rules lives in the `attrsets` module.
	"""
	type_name = "set"
	def __init__(self, bindings:Optional[Mapping[str, LAZY_VALUE]] = None):
		self._bindings = dict(bindings or ())
	def __repr__(self): return "Attrset(%r)" % (self._bindings,)
	def __len__(self): return len(self._bindings)
	def __contains__(self, name): return name in self._bindings
	def get(self, name:str) -> Optional[LAZY_VALUE]: return self._bindings.get(name)
	def names(self): return self._bindings.keys()
	def items(self): return self._bindings.items()
	def values(self): return self._bindings.values()

EMPTY_ATTRSET = Attrset()

###############################################################################

class Lambda(NixValue):
	""" A run-time object that can be applied to an argument. """
	type_name = "lambda"
	@abstractmethod
	def apply(self, arg:LAZY_VALUE) -> LAZY_VALUE: pass

class ParamLambda(Lambda):
	""" `name: body` """
	def __init__(self, env, name:str, body:BODY):
		self._env = env
		self.name = name
		self._body = body

	def __repr__(self): return "<lambda %s>" % self.name

	def apply(self, arg:LAZY_VALUE) -> LAZY_VALUE:
		# Thunk.force runs a chain of these in a loop, so tail calls do not nest.
		return Thunk(self._env.with_shadow({self.name: arg}), self._body)

class PatternLambda(Lambda):
	""" `{ p1, p2 ? default, ... }@rest: body` """
	def __init__(self, env, rest_bind:Optional[str], patterns:Sequence[tuple], body:BODY, ellipsis=True):
		self._env = env
		self.rest_bind = rest_bind
		self.patterns = tuple(patterns)
		self._body = body
		self.ellipsis = ellipsis

	def __repr__(self):
		return "<lambda {%s}>" % ", ".join(name for name, _ in self.patterns)

	def apply(self, arg:LAZY_VALUE) -> LAZY_VALUE:
		attrs = force(arg)
		if not isinstance(attrs, Attrset):
			raise errors.type_mismatch("Function expects a set argument but got '%s'." % attrs.type_name)
		frame = {}
		inner = self._env.with_shadow(frame)
		for name, default in self.patterns:
			given = attrs.get(name)
			if given is not None: frame[name] = given
			elif default is not None: frame[name] = delay(inner, default)
			else: raise errors.EvalError(errors.MISSING_ARG, "Function called without required argument '%s'." % name)
		if not self.ellipsis:
			declared = set(name for name, _ in self.patterns)
			for name in attrs.names():
				if name not in declared:
					raise errors.EvalError(errors.UNEXPECTED_ARG, "Function called with unexpected argument '%s'." % name)
		if self.rest_bind is not None:
			frame[self.rest_bind] = attrs
		return Thunk(inner, self._body)

class Primitive(Lambda):
	""" A built-in function. Its argument is strict. """
	def __init__(self, name:str, fn:callable):
		self.name = name
		self._fn = fn

	def __repr__(self): return "<primop %s>" % self.name

	def apply(self, arg:LAZY_VALUE) -> LAZY_VALUE:
		return self._fn(force(arg))

def param_lambda(env, name:str, body:BODY) -> Lambda:
	return ParamLambda(env, name, body)

def pattern_lambda(env, rest_bind:Optional[str], patterns, body:BODY, ellipsis=True) -> Lambda:
	return PatternLambda(env, rest_bind, patterns, body, ellipsis)

###############################################################################

def type_of(it:LAZY_VALUE) -> str:
	return force(it).type_name

def recursive_force(it:LAZY_VALUE) -> STRICT_VALUE:
	"""
	Push a program to completion by forcing every thunk reachable through
	lists and attribute sets. Each container is visited once, so shared
	and even cyclic structure terminates.
	"""
	root = force(it)
	seen = set()
	work = deque([root])
	while work:
		value = work.popleft()
		if isinstance(value, List): children = value.items
		elif isinstance(value, Attrset): children = value.values()
		else: continue
		if id(value) in seen: continue
		seen.add(id(value))
		work.extend(force(child) for child in children)
	return root
