"""
Show values the way Nix would print them, without forcing anything.
Unforced thunks show as «thunk», and structure that contains itself shows as «repeated».
"""
import re
from boozetools.support.foundation import Visitor

from .types import LAZY_VALUE
from .evaluator import Thunk
from . import values

_IDENTIFIER = re.compile(r"[a-zA-Z_][a-zA-Z0-9_'-]*$")
_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"}

def quote(text:str) -> str:
	body = "".join(_ESCAPES.get(c, c) for c in text).replace("${", "\\${")
	return '"%s"' % body

def attr_name(name:str) -> str:
	return name if _IDENTIFIER.match(name) else quote(name)

class Render(Visitor):
	def __init__(self):
		self._open = set()

	def visit_Int(self, it:values.Int): return str(it.value)
	def visit_Float(self, it:values.Float): return repr(it.value)
	def visit_Bool(self, it:values.Bool): return "true" if it.flag else "false"
	def visit_Null(self, it:values.Null): return "null"
	def visit_Str(self, it:values.Str): return quote(it.text)
	def visit_Path(self, it:values.Path): return it.text
	def visit_ParamLambda(self, it): return "«lambda»"
	def visit_PatternLambda(self, it): return "«lambda»"
	def visit_Primitive(self, it): return "«primop»"

	def visit_Thunk(self, it:Thunk):
		return self.visit(it.value) if it.is_forced() else "«thunk»"
	visit_PathSubtree = visit_Thunk

	def _nested(self, it, parts):
		if id(it) in self._open: return "«repeated»"
		self._open.add(id(it))
		try: return parts()
		finally: self._open.discard(id(it))

	def visit_List(self, it:values.List):
		def parts():
			return "[ %s]" % "".join(self.visit(x) + " " for x in it)
		return self._nested(it, parts)

	def visit_Attrset(self, it:values.Attrset):
		def parts():
			return "{ %s}" % "".join(
				"%s = %s; " % (attr_name(k), self.visit(v))
				for k, v in sorted(it.items())
			)
		return self._nested(it, parts)

def show(it:LAZY_VALUE) -> str:
	return Render().visit(it)
