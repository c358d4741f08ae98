"""
tinylisp Test Suite: REPL and File Runner
==========================================
Drives the read-loop with scripted input instead of a terminal.

Usage:
    python -m pytest tests/test_repl.py -v
"""
import sys
import os
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tinylisp.__main__ import main, run_file
from tinylisp.interpreter import Interpreter
from tinylisp.repl import ReplConfig, run_repl


def scripted(lines):
    """Return an input function that replays ``lines`` then hits EOF."""
    remaining = iter(lines)

    def fake_input(prompt: str) -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError

    return fake_input


class RecordingInterpreter(Interpreter):
    """Interpreter that keeps a copy of everything sent to ``output_fn``."""

    created = []

    def __init__(self, output_fn=None):
        super().__init__(output_fn)
        self.sent = []
        forward = self.output_fn

        def record(text):
            self.sent.append(text)
            forward(text)

        self.output_fn = record
        RecordingInterpreter.created.append(self)


class TestRepl(unittest.TestCase):

    def _session(self, lines, config=None):
        output = []
        interp = run_repl(config or ReplConfig(banner=""), scripted(lines), output.append)
        return output, interp

    def test_exit_stops_loop(self):
        output, _ = self._session(["exit", "(+ 1 2)"])
        self.assertEqual(output, [])

    def test_exit_is_trimmed(self):
        output, _ = self._session(["   exit  ", "(+ 1 2)"])
        self.assertEqual(output, [])

    def test_eof_stops_loop(self):
        output, _ = self._session(["(+ 1 2)"])
        self.assertEqual(output, ["> 3"])

    def test_bindings_persist_between_lines(self):
        output, interp = self._session(["(def x 5)", "x", "(* x 2)", "exit"])
        self.assertEqual(output, ["> 5", "> 5", "> 10"])
        self.assertIn("x", interp.bindings())

    def test_parse_error_is_reported_and_loop_continues(self):
        output, _ = self._session(["(+ 1", "(+ 1 1)"])
        self.assertTrue(output[0].startswith("> Syntax Error: Expected RPAREN but found EOF"))
        self.assertEqual(output[1], "> 2")

    def test_evaluation_error_is_printed_as_value(self):
        output, _ = self._session(["nope"])
        self.assertIn("No binding for identifier 'nope'", output[0])

    def test_division_by_zero_is_reported(self):
        output, _ = self._session(["(/ 1 0)", "(+ 2 2)"])
        self.assertTrue(output[0].startswith("> Error: ZeroDivisionError"))
        self.assertEqual(output[1], "> 4")

    def test_blank_lines_skipped(self):
        output, _ = self._session(["", "   ", "1"])
        self.assertEqual(output, ["> 1"])

    def test_blank_only_session_prints_nothing(self):
        output, interp = self._session(["", "\t", "   "])
        self.assertEqual(output, [])
        self.assertEqual(interp.bindings(), {})

    def test_values_go_through_interpreter_output(self):
        RecordingInterpreter.created.clear()
        with mock.patch("tinylisp.repl.Interpreter", RecordingInterpreter):
            output, interp = self._session(["(def x 2)", "(* x 3)"])
        self.assertIs(interp, RecordingInterpreter.created[-1])
        self.assertEqual(interp.sent, ["> 2", "> 6"])
        self.assertEqual(output, ["> 2", "> 6"])

    def test_banner(self):
        output, _ = self._session([], ReplConfig(banner="hello"))
        self.assertEqual(output, ["hello"])

    def test_custom_prompt(self):
        output, _ = self._session(["7"], ReplConfig(prompt="tl> ", banner=""))
        self.assertEqual(output, ["tl> 7"])

    def test_env_command(self):
        output, _ = self._session(["env", "(def a 1)", "env"])
        self.assertEqual(output[0], "  (no bindings)")
        self.assertEqual(output[-1], "  a = 1")

    def test_reset_drops_bindings(self):
        output, interp = self._session(["(def a 1)", "reset", "a"])
        self.assertIn("No binding", output[-1])
        self.assertEqual(interp.bindings(), {})

    def test_tokens_command(self):
        output, _ = self._session(["tokens (+ 1 2)"])
        self.assertEqual(len(output), 6)
        self.assertIn("LPAREN", output[0])
        self.assertIn("EOF", output[-1])

    def test_ast_command(self):
        output, _ = self._session(["ast (if (> 1 2) a b)"])
        self.assertEqual(output, ["  [(if (> 1 2) a b)]"])

    def test_help_command(self):
        output, _ = self._session(["help"])
        self.assertIn("(def name expr)", output[0])

    def test_keyboard_interrupt_stops_loop(self):
        def interrupt(prompt):
            raise KeyboardInterrupt

        output = []
        run_repl(ReplConfig(banner=""), interrupt, output.append)
        self.assertEqual(output, [])


class TestFileRunner(unittest.TestCase):

    def _write(self, source: str) -> str:
        fd, path = tempfile.mkstemp(suffix=".tl")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(source)
        self.addCleanup(os.remove, path)
        return path

    def test_runs_whole_file(self):
        path = self._write("(def x 3)\n(def y 4)\n(+ (* x x) (* y y))\n")
        output = []
        self.assertEqual(run_file(path, output_fn=output.append), 0)
        self.assertEqual(output, ["25"])

    def test_missing_file(self):
        output = []
        self.assertEqual(run_file("/nonexistent/prog.tl", output_fn=output.append), 1)
        self.assertIn("File not found", output[0])

    def test_parse_error_exit_code(self):
        path = self._write("(+ 1")
        output = []
        self.assertEqual(run_file(path, output_fn=output.append), 1)
        self.assertTrue(output[0].startswith("Syntax Error"))

    def test_host_error_exit_code(self):
        path = self._write("(/ 5 0)")
        output = []
        self.assertEqual(run_file(path, output_fn=output.append), 1)
        self.assertIn("ZeroDivisionError", output[0])

    def test_evaluation_error_still_succeeds(self):
        path = self._write("(+ 1 nope)")
        output = []
        self.assertEqual(run_file(path, output_fn=output.append), 0)
        self.assertIn("cannot be applied", output[0])

    def test_show_ast(self):
        path = self._write("(def x (5))")
        output = []
        run_file(path, show_ast=True, output_fn=output.append)
        self.assertEqual(output, ["[(def x (5))]"])

    def test_show_tokens(self):
        path = self._write("x")
        output = []
        run_file(path, show_tokens=True, output_fn=output.append)
        self.assertEqual(output, ["Token(IDENTIFIER, 'x', L1:1)", "Token(EOF, '', L1:2)"])

    def test_result_goes_through_interpreter_output(self):
        path = self._write("(def x 4)\n(* x x)")
        output = []
        RecordingInterpreter.created.clear()
        with mock.patch("tinylisp.__main__.Interpreter", RecordingInterpreter):
            self.assertEqual(run_file(path, output_fn=output.append), 0)
        self.assertEqual(RecordingInterpreter.created[-1].sent, ["16"])
        self.assertEqual(output, ["16"])

    def test_main_with_file(self):
        path = self._write("(if (< 1 2) 1 0)")
        self.assertEqual(main([path]), 0)


class TestExampleFiles(unittest.TestCase):
    """All example .tl files must parse and run."""

    EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "examples")

    def _run_example(self, filename: str) -> list[str]:
        output = []
        code = run_file(os.path.join(self.EXAMPLES_DIR, filename), output_fn=output.append)
        self.assertEqual(code, 0, f"{filename} failed: {output}")
        return output

    def test_arithmetic(self):
        self.assertEqual(self._run_example("arithmetic.tl"), ["10"])

    def test_closures(self):
        self.assertEqual(self._run_example("closures.tl"), ["<fn (n)>"])

    def test_errors(self):
        output = self._run_example("errors.tl")
        self.assertIn("Bool(true) and Int(1)", output[0])


if __name__ == "__main__":
    unittest.main(verbosity=2)
