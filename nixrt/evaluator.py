"""
The generic machinery of laziness: thunks, forcing, and delaying.

A compiled Nix expression is a "body": any Python callable taking an Env
and returning a (possibly lazy) value. Wrapping a body with its Env in a
Thunk defers the work until somebody needs the answer.
"""

from .types import NixValue, LAZY_VALUE, STRICT_VALUE, LAZY_OR_BODY
from .errors import infinite_recursion

_ABSENT = object()
_BUSY = object()

class Thunk(NixValue):
	""" A kind of not-yet-value which can be forced. """
	def __init__(self, env, body):
		assert callable(body), type(body)
		self.env = env
		self.body = body
		self.value = _ABSENT

	def __repr__(self):
		if self.value is _ABSENT or self.value is _BUSY:
			return "<Thunk: %s>" % getattr(self.body, "__name__", "?")
		else:
			return repr(self.value)

	def is_forced(self) -> bool:
		return not (self.value is _ABSENT or self.value is _BUSY)

	def is_started(self) -> bool:
		return self.value is not _ABSENT

	def force(self) -> STRICT_VALUE:
		"""
		A body may answer another thunk, as a tail call does. Such a chain
		is run here in a loop, and every link gets the same final answer.
		"""
		if self.value is _BUSY:
			raise infinite_recursion()
		if self.value is _ABSENT:
			chain = [self]
			self.value = _BUSY
			try:
				result = self.body(self.env)
				while isinstance(result, Thunk):
					if result.value is _BUSY: raise infinite_recursion()
					if result.value is not _ABSENT:
						result = result.value
						break
					result.value = _BUSY
					chain.append(result)
					result = result.body(result.env)
			except BaseException:
				for link in chain: link.value = _ABSENT
				raise
			for link in chain:
				link.value = result
				del link.env
				del link.body
		return self.value

def force(it:LAZY_VALUE) -> STRICT_VALUE:
	"""
	Force repeatedly until the result is no longer a thunk, then return that result.
	Forcing something already strict just hands it back.
	"""
	while isinstance(it, Thunk): it = it.force()
	return it

def delay(env, it:LAZY_OR_BODY) -> LAZY_VALUE:
	# Things that are already values have no profit to delay.
	if isinstance(it, NixValue): return it
	if not callable(it): raise TypeError("Expected a value or a body, got %r" % (it,))
	# In less trivial cases, make a thunk and pass that instead.
	return Thunk(env, it)
