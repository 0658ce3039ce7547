"""
A run-time kernel for the Nix expression language.

A compiler turns Nix source into Python calls against the names exported
here: value constructors, operators, attribute-set construction, scopes,
and lambdas. Nothing here parses anything.
"""
from .errors import EvalError
from .types import NixValue
from .evaluator import Thunk, force, delay
from .values import (
	Int, Float, Bool, TRUE, FALSE, Null, NULL, Str, Path, List, Attrset, EMPTY_ATTRSET,
	Lambda, Primitive, param_lambda, pattern_lambda,
	to_path, type_of, recursive_force,
)
from .environment import Env, with_scope
from .attrsets import attrset, let_in, has, select, update
from .operators import (
	neg, add, sub, mul, div,
	and_, or_, implication, not_,
	eq, neq, lt, le, gt, ge,
	concat, apply, interpolate,
)
from .builtins import BUILTINS
from .render import show
