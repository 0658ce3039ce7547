import io
import unittest
from unittest import mock

from nixrt import (
	Env, Thunk, Int, Float, Str, Path, List, TRUE, NULL, BUILTINS,
	attrset, let_in, param_lambda, apply, sub, eq, to_path, show,
)
from nixrt.executive import run_program
from nixrt.diagnostics import Report, TooManyIssues
from nixrt import errors

ENV = Env("/test_base")

def countdown(n):
	def step(env):
		if eq(env.lookup("x"), Int(0)): return Int(0)
		return apply(env.lookup("f"), Thunk(env, lambda e: sub(e.lookup("x"), Int(1))))
	return lambda env: let_in(env, [(["f"], lambda e: param_lambda(e, "x", step))], lambda e: apply(e.lookup("f"), Int(n)))

class RunProgramTests(unittest.TestCase):

	def test_success(self):
		report = Report()
		value = run_program(lambda env: Int(3), "/test_base", report)
		self.assertEqual(Int(3), value)
		self.assertTrue(report.ok())

	def test_deep_forcing(self):
		inner = []
		def body(env):
			inner.append(Thunk(env, lambda e: Int(1)))
			return List(inner)
		run_program(body, "/test_base")
		self.assertTrue(inner[0].is_forced())

	def test_shallow_forcing(self):
		inner = []
		def body(env):
			inner.append(Thunk(env, lambda e: Int(1)))
			return List(inner)
		value = run_program(body, "/test_base", deep=False)
		self.assertIsInstance(value, List)
		self.assertFalse(inner[0].is_forced())

	def test_failure_is_reported(self):
		report = Report()
		self.assertIsNone(run_program(lambda env: env.lookup("nowhere"), "/test_base", report))
		self.assertTrue(report.sick())
		self.assertEqual(errors.UNBOUND_VAR, report.issues[0].kind)

	def test_deep_failure_is_reported(self):
		report = Report()
		body = lambda env: List([Int(1), Thunk(env, lambda e: e.lookup("nowhere"))])
		self.assertIsNone(run_program(body, "/test_base", report))
		self.assertEqual(errors.UNBOUND_VAR, report.issues[0].kind)

	def test_stack_overflow_is_infinite_recursion(self):
		def body(env): raise RecursionError()
		report = Report()
		self.assertIsNone(run_program(body, "/test_base", report))
		self.assertEqual(errors.INFINITE_RECURSION, report.issues[0].kind)

	def test_long_tail_recursion(self):
		report = Report()
		self.assertEqual(Int(0), run_program(countdown(3000), "/test_base", report))
		self.assertTrue(report.ok())

	def test_program_sees_its_directory(self):
		value = run_program(lambda env: to_path(env, "./a"), "/test_base")
		self.assertEqual(Path("/test_base/a"), value)
		with self.assertRaises(ValueError):
			run_program(lambda env: Int(1), "relative")

	def test_verbose_goes_to_stderr(self):
		with mock.patch("sys.stderr", new_callable=io.StringIO) as err:
			run_program(lambda env: Int(3), "/test_base", Report(verbose=1))
		self.assertIn("Result: 3", err.getvalue())
		with mock.patch("sys.stderr", new_callable=io.StringIO) as err:
			run_program(lambda env: Int(3), "/test_base", Report())
		self.assertEqual("", err.getvalue())

class ReportTests(unittest.TestCase):

	def test_assert_no_issues(self):
		report = Report()
		report.assert_no_issues("should be fine")
		report.issue(errors.unbound_var("x"))
		with mock.patch("sys.stderr", new_callable=io.StringIO) as err:
			with self.assertRaises(AssertionError):
				report.assert_no_issues("should complain")
		self.assertIn(" * ", err.getvalue())
		self.assertIn("x", err.getvalue())

	def test_too_many_issues(self):
		report = Report(max_issues=2)
		report.issue(errors.unbound_var("x"))
		with self.assertRaises(TooManyIssues):
			report.issue(errors.unbound_var("y"))

	def test_reset(self):
		report = Report()
		report.issue(errors.unbound_var("x"))
		report.reset()
		self.assertTrue(report.ok())

class ShowTests(unittest.TestCase):

	def test_atoms(self):
		for value, text in [
			(Int(-3), "-3"),
			(Float(1.5), "1.5"),
			(TRUE, "true"),
			(NULL, "null"),
			(Str('say "hi"\n'), '"say \\"hi\\"\\n"'),
			(Str("${x}"), '"\\${x}"'),
			(Path("/a/b"), "/a/b"),
		]:
			with self.subTest(text):
				self.assertEqual(text, show(value))

	def test_containers(self):
		value = attrset(ENV, [(["b"], List([Int(2), Int(3)])), (["a"], Int(1))])
		self.assertEqual("{ a = 1; b = [ 2 3 ]; }", show(value))
		self.assertEqual("[ ]", show(List([])))
		self.assertEqual('{ "x y" = 1; }', show(attrset(ENV, [([Str("x y")], Int(1))])))

	def test_show_does_not_force(self):
		pending = Thunk(ENV, lambda e: Int(1))
		self.assertEqual("[ «thunk» ]", show(List([pending])))
		pending.force()
		self.assertEqual("[ 1 ]", show(List([pending])))

	def test_functions(self):
		self.assertEqual("«lambda»", show(param_lambda(ENV, "x", lambda e: e.lookup("x"))))
		self.assertEqual("«primop»", show(BUILTINS.get("typeOf")))

	def test_repeated(self):
		holder = []
		loop = attrset(ENV, [(["me"], lambda e: holder[0]), (["n"], Int(1))])
		holder.append(loop)
		self.assertEqual("{ me = «thunk»; n = 1; }", show(loop))
		loop.get("me").force()
		self.assertEqual("{ me = «repeated»; n = 1; }", show(loop))

if __name__ == '__main__':
	unittest.main()
