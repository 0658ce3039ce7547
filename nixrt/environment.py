"""
Scope for a running Nix program.

This is the canonical list-structured search, done twice: once for the
bindings that shadow (let, rec, lambda parameters) and once for the
bindings that do not (`with`). A name is found in the non-shadowing chain
only if no shadowing frame knows it. Within each chain, nearer frames win.

A frame is anything with a `get(name)` method answering a lazy value or None.
Plain dictionaries, finished attribute sets, and attribute-set builders all qualify.
"""
from typing import Any, Optional

from .types import LAZY_VALUE
from .errors import unbound_var, type_mismatch
from .evaluator import force
from .values import Attrset
from .builtins import GLOBALS

class Chain:
	""" One link of a persistent scope chain. """
	def __init__(self, frame:Any, static_link:Optional["Chain"]):
		self.frame = frame
		self.static_link = static_link

	def search(self, name:str) -> Optional[LAZY_VALUE]:
		chain = self
		while chain is not None:
			found = chain.frame.get(name)
			if found is not None: return found
			chain = chain.static_link
		return None

class Env:
	"""
	Immutable: every extension answers a new Env sharing this one's chains.
	The script directory is the anchor for relative path literals.
	"""
	def __init__(self, script_dir:str, shadow:Optional[Chain]=None, non_shadow:Optional[Chain]=None):
		if not script_dir.startswith("/"):
			raise ValueError("script_dir must be absolute: %r" % script_dir)
		self.script_dir = script_dir
		self._shadow = shadow
		self._non_shadow = non_shadow

	def with_shadow(self, frame) -> "Env":
		return Env(self.script_dir, Chain(frame, self._shadow), self._non_shadow)

	def with_non_shadow(self, frame) -> "Env":
		return Env(self.script_dir, self._shadow, Chain(frame, self._non_shadow))

	def lookup(self, name:str) -> LAZY_VALUE:
		if self._shadow is not None:
			found = self._shadow.search(name)
			if found is not None: return found
		# The globals are the outermost lexical scope, so `with` cannot hide them.
		found = GLOBALS.get(name)
		if found is not None: return found
		if self._non_shadow is not None:
			found = self._non_shadow.search(name)
			if found is not None: return found
		raise unbound_var(name)

def with_scope(env:Env, namespace:LAZY_VALUE, body) -> LAZY_VALUE:
	""" `with namespace; body` """
	attrs = force(namespace)
	if not isinstance(attrs, Attrset):
		raise type_mismatch("Value is '%s' while a set was expected in 'with'." % attrs.type_name)
	return body(env.with_non_shadow(attrs))
