"""
This module aims to express an interface agreement
between the evaluator, the operators, and the various kinds of data.
"""

from abc import ABC
from typing import Callable, Sequence, Union

class NixValue(ABC):
	""" Root for every run-time value, including not-yet-values. """
	type_name = None  # What `typeOf` reports; thunks report their forced value's.

	def __repr__(self): return "<%s>" % type(self).__name__

LAZY_VALUE = NixValue  # May still be a Thunk.
STRICT_VALUE = NixValue  # Never a Thunk.
BODY = Callable[["Env"], LAZY_VALUE]
LAZY_OR_BODY = Union[LAZY_VALUE, BODY]
ATTR_PATH = Sequence[LAZY_OR_BODY]
