"""
Construction and interrogation of attribute sets.

An entry of a set under construction is a pair (path, value). Each path
component is a Python string, a value, or a body; the value is a value or
a body. Names and values are both worked out in the environment surrounding
the set, or, for a recursive set, that environment extended with the set itself.
A name bound twice must be a set both times, and the two then merge.

Construction goes one entry at a time and may be driven from the inside:
in a recursive set, looking up a sibling's name makes progress on the
entries not yet seen. The index of the next entry advances before that
entry is processed, so the builder never processes an entry twice.
While an entry is being named, a lookup that lands on a path subtree is
infinite recursion, because that entry could still add to the subtree.
"""
from typing import Optional, Sequence

from .types import LAZY_VALUE, STRICT_VALUE, LAZY_OR_BODY, ATTR_PATH, BODY
from .evaluator import Thunk, force, delay
from .values import Str, Attrset, NULL, TRUE, FALSE
from . import errors

def attr_name(it:LAZY_VALUE, allow_null=True) -> Optional[str]:
	""" Force an attribute-name; None means the name was null. """
	name = force(it)
	if isinstance(name, Str): return name.text
	if name is NULL and allow_null: return None
	raise errors.EvalError(errors.BAD_ATTR_NAME, "Attribute name is of type '%s' but a string was expected." % name.type_name)

def _component(env, component:LAZY_OR_BODY, allow_null=True) -> Optional[str]:
	if isinstance(component, str): return component
	return attr_name(delay(env, component), allow_null)

###############################################################################

class PathSubtree(Thunk):
	"""
	The value standing at `a` after `a.b = 1; a.c = 2;`. It holds the tails
	of every path that passed through `a`, and builds them into a set when forced.
	"""
	def __init__(self, env, tails:list):
		self.tails = tails
		self.name_env = env
		super().__init__(env, self._build)

	def _build(self, env):
		return AttrsetBuilder(env, self.tails).build()

	def extended(self, tails:list) -> "PathSubtree":
		if not self.is_started():
			self.tails.extend(tails)
			return self
		# Somebody already looked inside. Leave them their answer and start afresh.
		return PathSubtree(self.name_env, self.tails + tails)

def _as_tails(name:str, value:LAZY_VALUE) -> list:
	""" A name bound twice is allowed only where both bindings are sets, whose bindings then merge. """
	it = force(value)
	if not isinstance(it, Attrset): raise errors.duplicate_attr(name)
	return [((key,), inner) for key, inner in it.items()]

class AttrsetBuilder:
	"""
	Drives the construction of one attribute set.
	Also serves as a scope frame for the bindings of a `rec` set or a `let`.
	"""
	def __init__(self, env, entries:Sequence[tuple], recursive=False):
		self._entries = list(entries)
		self._pending = 0
		self._naming = 0
		self._map = {}
		self._result = None
		self.env = env.with_shadow(self) if recursive else env

	def get(self, name:str) -> Optional[LAZY_VALUE]:
		while name not in self._map and self._pending < len(self._entries):
			self._step()
		if isinstance(self._map.get(name), PathSubtree):
			# The entry being named might yet add to this subtree.
			if self._naming: raise errors.infinite_recursion()
			self._finish()
		return self._map.get(name)

	def build(self) -> Attrset:
		if self._result is None:
			self._finish()
			# Names are strict all the way down, so nested duplicates surface now.
			for value in list(self._map.values()):
				if isinstance(value, PathSubtree): force(value)
			self._result = Attrset(self._map)
		return self._result

	def _finish(self):
		while self._pending < len(self._entries):
			self._step()

	def _step(self):
		path, value = self._entries[self._pending]
		self._pending += 1
		assert len(path), "An attribute path needs at least one component."
		self._naming += 1
		try: name = _component(self.env, path[0])
		finally: self._naming -= 1
		if name is None: return
		value = delay(self.env, value)
		existing = self._map.get(name)
		if existing is None:
			self._map[name] = PathSubtree(self.env, [(path[1:], value)]) if len(path) > 1 else value
			return
		tails = [(path[1:], value)] if len(path) > 1 else _as_tails(name, value)
		if isinstance(existing, PathSubtree): self._map[name] = existing.extended(tails)
		else: self._map[name] = PathSubtree(self.env, _as_tails(name, existing) + tails)

def attrset(env, entries:Sequence[tuple] = (), recursive=False) -> Attrset:
	return AttrsetBuilder(env, entries, recursive).build()

def let_in(env, entries:Sequence[tuple], body:BODY) -> LAZY_VALUE:
	""" A `let` is a recursive set whose bindings then go into shadowing scope. """
	builder = AttrsetBuilder(env, entries, recursive=True)
	builder.build()
	return body(builder.env)

###############################################################################

def has(value:LAZY_VALUE, path:ATTR_PATH, env=None) -> STRICT_VALUE:
	""" The `?` operator. Anything but a set simply lacks attributes. """
	current = force(value)
	last = len(path) - 1
	for index, component in enumerate(path):
		if not isinstance(current, Attrset): return FALSE
		found = current.get(_component(env, component, allow_null=False))
		if found is None: return FALSE
		if index < last: current = force(found)
	return TRUE

def select(value:LAZY_VALUE, path:ATTR_PATH, default:Optional[LAZY_VALUE]=None, env=None) -> LAZY_VALUE:
	"""
	The `.` operator, optionally with an `or` default.
	Answers the selected value without forcing it.
	Only the root must be a set; anything else along the way just lacks the attribute.
	"""
	current = force(value)
	if not isinstance(current, Attrset) and default is None:
		raise errors.type_mismatch("Value is '%s' while a set was expected." % current.type_name)
	trail = []
	last = len(path) - 1
	for index, component in enumerate(path):
		name = _component(env, component, allow_null=False)
		trail.append(name)
		found = current.get(name) if isinstance(current, Attrset) else None
		if found is None:
			if default is not None: return default
			raise errors.missing_attr("Attribute '%s' is missing." % ".".join(trail))
		if index == last: return found
		try: current = force(found)
		except errors.EvalError as ex:
			for step in reversed(trail): ex.reached_through(step)
			raise
	return current

def update(lhs:LAZY_VALUE, rhs:LAZY_VALUE) -> Attrset:
	""" The `//` operator: shallow and right-biased. Values are not forced. """
	left, right = force(lhs), force(rhs)
	if not (isinstance(left, Attrset) and isinstance(right, Attrset)):
		raise errors.type_mismatch("Cannot apply operator '//' on '%s' and '%s'." % (left.type_name, right.type_name))
	if not len(right): return left
	if not len(left): return right
	combined = dict(left.items())
	combined.update(right.items())
	return Attrset(combined)
