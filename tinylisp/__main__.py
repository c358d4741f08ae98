"""
tinylisp File Runner
====================
Execute tinylisp source files from the command line, or start the REPL.

Usage:
    python -m tinylisp                    # interactive REPL
    python -m tinylisp program.tl         # evaluate a file
    python -m tinylisp program.tl --ast   # show the parsed tree
    python -m tinylisp program.tl --tokens
"""
import argparse
import os
import sys
from typing import Callable

from .interpreter import Interpreter
from .lexer import tokenize
from .parser import ParseError
from .repl import run_repl
from .values import format_value


def run_file(
    filepath: str,
    show_tokens: bool = False,
    show_ast: bool = False,
    output_fn: Callable[[str], None] = print,
) -> int:
    """
    Execute a tinylisp source file as a single program.

    Args:
        filepath: Path to the source file
        show_tokens: Print the token stream instead of evaluating
        show_ast: Print the parsed tree instead of evaluating

    Returns:
        0 on success, 1 on error
    """
    if not os.path.exists(filepath):
        output_fn(f"Error: File not found: {filepath}")
        return 1

    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()

    if show_tokens:
        for token in tokenize(source):
            output_fn(repr(token))
        return 0

    interp = Interpreter(output_fn=output_fn)
    try:
        ast = interp.parse(source)
        if show_ast:
            output_fn(ast.to_sexpr())
            return 0
        result = interp.evaluate(ast)
    except ParseError as e:
        output_fn(f"Syntax Error: {e}")
        return 1
    except Exception as e:
        output_fn(f"Error: {type(e).__name__}: {e}")
        return 1

    interp.output_fn(format_value(result))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinylisp",
        description="tinylisp: a small Lisp-like expression language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m tinylisp\n"
            "  python -m tinylisp program.tl\n"
            "  python -m tinylisp program.tl --ast\n"
        ),
    )
    parser.add_argument("file", nargs="?", help="source file to run (omit for the REPL)")
    parser.add_argument("--tokens", action="store_true", help="print the token stream and exit")
    parser.add_argument("--ast", action="store_true", help="print the parsed tree and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.file is None:
        run_repl()
        return 0
    return run_file(args.file, show_tokens=args.tokens, show_ast=args.ast)


if __name__ == "__main__":
    sys.exit(main())
