import io
import os
import re
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from numlambda.interpreter import execute
from numlambda.lang.error import (
    ErrorHandler, GenericException, IllegalCharacterError, ParseError, UnboundNameError
)
from numlambda.lang.session import Session
from numlambda.lang.shell import Shell
from numlambda.lang.values import Number
from numlambda.main import main

FIB_PROGRAM = """;; fib 5 through the Y combinator
(\\f.(\\x.f (\\v.x x v)) (\\x.f (\\v.x x v)))   ;; Y
(\\f.\\x. x < 2 ? 1 : (f (x - 1)) + (f (x - 2)))
5
"""


def strip_ansi(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def write_program(test_case, source):
    """Writes source to a temporary file and returns its path."""
    handle, path = tempfile.mkstemp(suffix=".lc")
    with os.fdopen(handle, "w", encoding="utf-8") as file:
        file.write(source)
    test_case.addCleanup(os.remove, path)
    return path


class ErrorHandlerTestCase(unittest.TestCase):

    def test_fatal(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            with ErrorHandler():
                raise ParseError(None)
        self.assertEqual(1, context.exception.code)
        self.assertIn("error: unexpected end of input", strip_ansi(stderr.getvalue()))

    def test_non_fatal(self):
        cases = {
            UnboundNameError("z"): "unknown name 'z'",
            RecursionError(): "maximum recursion depth exceeded",
            GenericException("'{}' could not be opened", "missing.lc"): "'missing.lc' could not be opened",
        }
        for case, expected in cases.items():
            stderr = io.StringIO()
            with redirect_stderr(stderr):
                with ErrorHandler(fatal=False):
                    raise case
            self.assertIn(expected, strip_ansi(stderr.getvalue()), case)

    def test_internal(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(ValueError):
            with ErrorHandler(fatal=False):
                raise ValueError("{oops}")
        self.assertIn("[internal] error: unknown error: 'ValueError: {oops}'", strip_ansi(stderr.getvalue()))

    def test_diagnose(self):
        diagnosis = strip_ansi(ErrorHandler.diagnose(IllegalCharacterError(";", 4), "1 + ; z"))
        self.assertEqual("  1 + ; z\n      ^", diagnosis)

        with self.assertRaises(ParseError) as context:
            execute(">= 2")
        diagnosis = strip_ansi(ErrorHandler.diagnose(context.exception, ">= 2"))
        self.assertEqual("  >= 2\n  ^~", diagnosis)

    def test_traceback(self):
        stderr = io.StringIO()
        handler = ErrorHandler(fatal=False)
        handler.register_file("<in>")
        handler.register_line("<in>", "1 + ; z", 3)

        with redirect_stderr(stderr):
            with handler:
                raise IllegalCharacterError(";", 4)

        output = strip_ansi(stderr.getvalue())
        self.assertIn("error: character ';' is an illegal character", output)
        self.assertIn("  1 + ; z\n      ^", output)
        self.assertEqual({"<in>": (None, None)}, handler.traceback)

    def test_warn(self):
        stderr = io.StringIO()
        handler = ErrorHandler(fatal=False)
        handler.register_file("prog.lc")
        handler.register_line("prog.lc", "1/0", 1)

        with redirect_stderr(stderr):
            handler.warn("result '{}' is not a finite number", "inf")
        self.assertIn("prog.lc:1: warning: result 'inf' is not a finite number", strip_ansi(stderr.getvalue()))


class SessionTestCase(unittest.TestCase):

    def test_preprocess_line(self):
        cases = {
            "1 + 2": ("1 + 2", False),
            "1 + 2   ": ("1 + 2", False),
            "1 + 2 ;; comment": ("1 + 2", False),
            ";; only a comment": ("", False),
            "(\\x. x": ("(\\x. x", True),
            "(x) (y": ("(x) (y", True),
            "(x))": ("(x))", False),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case), case)

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, cmd_line=False)

    def test_run_file(self):
        path = write_program(self, FIB_PROGRAM)
        sess = Session(ErrorHandler(), path, cmd_line=False)
        self.assertEqual(Number(8.0), sess.run())
        self.assertEqual([Number(8.0)], sess.results)

    def test_missing_file(self):
        sess = Session(ErrorHandler(), "does/not/exist.lc", cmd_line=False)
        self.assertRaises(GenericException, sess.run)

    def test_execute(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)
        self.assertFalse(sess.error_handler.fatal)

        self.assertEqual(Number(3.0), sess.execute("1 + 2", 1))
        self.assertEqual(Number(3.0), sess.pop())
        self.assertEqual([], sess.results)
        self.assertEqual({Session.SH_FILE: (None, None)}, sess.error_handler.traceback)

        self.assertRaises(UnboundNameError, sess.execute, "z", 2)
        self.assertEqual({Session.SH_FILE: ("z", 2)}, sess.error_handler.traceback)

    def test_show_stages(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, show_tokens=True, show_ast=True)
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            sess.execute("1+2", 1)

        output = strip_ansi(stdout.getvalue())
        self.assertIn("tokens: Identifier('1') Operator(ADD) Identifier('2')", output)
        self.assertIn("ast: Arithmetic(op='+', nodes=[", output)

    def test_warns_on_non_finite(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            sess.execute("1/0", 1)
        self.assertIn("warning: result 'inf' is not a finite number", strip_ansi(stderr.getvalue()))


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def onecmd(self, line):
        with redirect_stdout(self.stdout), redirect_stderr(self.stderr):
            return self.shell.onecmd(line)

    def test_execute(self):
        self.onecmd("1 + 2")
        self.onecmd("(\\x.\\y.x) 1 2")
        self.onecmd("2 > 1")
        self.onecmd("\\x.x")
        self.assertEqual("3\n1\ntrue\nClosure\n", self.stdout.getvalue())

    def test_continuation(self):
        self.onecmd("((\\x.x + 1)")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.onecmd("41)")
        self.assertEqual(Shell.prompt, self.shell.prompt)
        self.assertEqual("42\n", self.stdout.getvalue())

    def test_comment(self):
        self.onecmd(";; nothing to see")
        self.assertEqual("", self.stdout.getvalue())

    def test_error_does_not_exit(self):
        self.assertFalse(self.onecmd("z"))
        self.assertIn("unknown name 'z'", strip_ansi(self.stderr.getvalue()))

        self.onecmd("1 + 1")
        self.assertEqual("2\n", self.stdout.getvalue())

    def test_tokens(self):
        self.onecmd("tokens x>=1")
        self.assertEqual("Identifier('x') Operator(GTE) Identifier('1')\n", self.stdout.getvalue())

    def test_ast(self):
        self.onecmd("ast f x")
        expected = "Application(nodes=[\n    Variable(name='f'),\n    Variable(name='x')\n])\n"
        self.assertEqual(expected, self.stdout.getvalue())

    def test_exit(self):
        self.assertTrue(self.onecmd("exit"))
        self.assertTrue(self.onecmd("quit"))
        self.assertTrue(self.onecmd("EOF"))


class MainTestCase(unittest.TestCase):

    def test_file(self):
        path = write_program(self, FIB_PROGRAM)
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            self.assertEqual(0, main([path]))
        self.assertEqual("8\n", stdout.getvalue())

    def test_file_error(self):
        path = write_program(self, "1 + true\n")
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            main([path])
        self.assertEqual(1, context.exception.code)
        self.assertIn("type needed: Number, but got type Boolean", strip_ansi(stderr.getvalue()))


if __name__ == '__main__':
    unittest.main()
