"""
Overall control for evaluating one compiled program.

A compiled program is a single body: a callable taking the root Env.
The executive sets up that Env, forces the body, and turns failure
into an issue on the Report rather than an exception.
"""
from typing import Optional

from .types import BODY, STRICT_VALUE
from .errors import EvalError, INFINITE_RECURSION
from .evaluator import force, delay
from .values import recursive_force
from .environment import Env
from .diagnostics import Report
from .render import show

def run_program(body:BODY, script_dir:str, report:Optional[Report]=None, deep=True) -> Optional[STRICT_VALUE]:
	"""
	Answers the program's value, or None if it failed.
	With `deep`, everything reachable from the result gets forced too,
	the way `nix-instantiate --eval --strict` would.
	"""
	if report is None: report = Report()
	env = Env(script_dir)
	report.info("Evaluating program from", script_dir)
	root = delay(env, body)
	try:
		value = recursive_force(root) if deep else force(root)
	except EvalError as ex:
		report.evaluation_failed(ex)
		return None
	except RecursionError:
		report.evaluation_failed(EvalError(INFINITE_RECURSION, "Evaluation nested too deeply."))
		return None
	report.info("Result:", show(value))
	return value
