"""
Collecting and complaining about the things that went wrong.

The kernel itself never prints. Whoever drives an evaluation hands in a
Report, which keeps the issues and says something on stderr only if asked.
"""
import sys
from typing import Any

from .errors import EvalError

class TooManyIssues(Exception):
	pass

class Report:
	""" Might this end up participating in a result-monad? """
	_issues : list

	def __init__(self, *, verbose:int = 0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	@property
	def issues(self): return tuple(self._issues)

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def evaluation_failed(self, ex:EvalError):
		self.info("Evaluation failed with", ex.kind)
		self.issue(ex)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		for ex in self._issues:
			print(" * " + str(ex), file=sys.stderr)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(message)
