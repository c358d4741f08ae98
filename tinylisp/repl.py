"""
tinylisp REPL
=============
Interactive Read-Eval-Print Loop. Each line runs through the full
pipeline against one interpreter instance, so top-level bindings
persist from line to line.
"""
from dataclasses import dataclass
from typing import Callable

from .interpreter import Interpreter
from .lexer import tokenize
from .parser import ParseError
from .values import format_value


BANNER = """tinylisp REPL v0.1.0
Type 'help' for the syntax reference, 'exit' to quit."""

HELP_TEXT = """
Forms:
  42                      integer literal
  name                    look up a binding
  (+ a b)                 also - * /  (integer division)
  (= a b)                 also > >= < <=
  (def name expr)         bind name in the current scope
  (fn (a b) body)         create a function value
  (if test then else)     only true selects 'then'

Commands:
  help          show this text
  env           list top-level bindings
  tokens <src>  show the token stream for <src>
  ast <src>     show the parsed tree for <src>
  reset         start over with a fresh interpreter
  exit          quit
"""


@dataclass
class ReplConfig:
    """Settings for one REPL session."""
    prompt: str = "> "
    exit_command: str = "exit"
    banner: str = BANNER


def run_repl(
    config: ReplConfig | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Interpreter:
    """Run the interactive loop until ``exit`` or end of input.

    Returns the interpreter in use when the loop ended.
    """
    config = config or ReplConfig()
    interp = Interpreter(output_fn=output_fn)

    if config.banner:
        output_fn(config.banner)

    while True:
        try:
            line = input_fn(config.prompt)
        except (EOFError, KeyboardInterrupt):
            break

        line = line.strip()
        if not line:
            continue

        if line == config.exit_command:
            break

        command, _, rest = line.partition(" ")

        if command == "help":
            output_fn(HELP_TEXT)
            continue

        if command == "env":
            bindings = interp.bindings()
            if bindings:
                for name, value in bindings.items():
                    output_fn(f"  {name} = {format_value(value)}")
            else:
                output_fn("  (no bindings)")
            continue

        if command == "reset":
            interp = Interpreter(output_fn=output_fn)
            output_fn("  State cleared.")
            continue

        if command == "tokens" and rest:
            for token in tokenize(rest):
                output_fn(f"  {token!r}")
            continue

        if command == "ast" and rest:
            try:
                output_fn(f"  {interp.parse(rest).to_sexpr()}")
            except ParseError as e:
                output_fn(f"{config.prompt}Syntax Error: {e}")
            continue

        try:
            interp.run_and_print(line, prefix=config.prompt)
        except ParseError as e:
            output_fn(f"{config.prompt}Syntax Error: {e}")
        except Exception as e:
            output_fn(f"{config.prompt}Error: {type(e).__name__}: {e}")

    return interp
