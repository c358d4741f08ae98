"""
tinylisp Interpreter
====================
Tree-walking evaluator that executes the AST produced by the Parser.

Each AST node type maps to one ``_eval_<node_type>`` method. Evaluation
never raises for language-level problems: type mismatches, unknown names
and malformed forms all come back as ``Error`` values. Host failures
such as integer division by zero are not converted and propagate to the
caller.
"""
from typing import Callable

from .environment import Environment
from .lexer import TokenType, tokenize
from .parser import (
    ASTNode, SequenceNode, BinaryOpNode, BindNode, FunctionDefNode,
    ConditionalNode, WrappedNode, IdentifierNode, LiteralNode, Parser,
    OPERATOR_SYMBOLS,
)
from .values import Value, Error, Integer, Boolean, Sequence, Closure, format_value


def _truncating_div(a: int, b: int) -> Integer:
    # Quotient rounds toward zero; b == 0 still raises ZeroDivisionError.
    quotient = abs(a) // abs(b)
    return Integer(-quotient if (a < 0) != (b < 0) else quotient)


INTEGER_OPERATIONS: dict[TokenType, Callable[[int, int], Value]] = {
    TokenType.PLUS: lambda a, b: Integer(a + b),
    TokenType.MINUS: lambda a, b: Integer(a - b),
    TokenType.STAR: lambda a, b: Integer(a * b),
    TokenType.SLASH: _truncating_div,
    TokenType.EQ: lambda a, b: Boolean(a == b),
    TokenType.GT: lambda a, b: Boolean(a > b),
    TokenType.GTE: lambda a, b: Boolean(a >= b),
    TokenType.LT: lambda a, b: Boolean(a < b),
    TokenType.LTE: lambda a, b: Boolean(a <= b),
}

BOOLEAN_OPERATIONS: dict[TokenType, Callable[[bool, bool], Value]] = {
    TokenType.EQ: lambda a, b: Boolean(a == b),
}


def _symbol(operator: TokenType) -> str:
    return OPERATOR_SYMBOLS.get(operator, operator.name)


class Evaluator:
    """
    Stateless tree walker.

    Usage:
        result = Evaluator().evaluate(ast, env)
    """

    def evaluate(self, node: ASTNode, env: Environment) -> Value:
        """Evaluate ``node`` against ``env`` and return a Value."""
        method = f"_eval_{node.node_type.lower()}"
        evaluator = getattr(self, method, None)
        if evaluator is None:
            return Error(f"Unknown node type: {node.node_type}")
        return evaluator(node, env)

    # ─────────────────────────────────────────────────────────
    #  Structure
    # ─────────────────────────────────────────────────────────

    def _eval_sequence(self, node: SequenceNode, env: Environment) -> Value:
        """Evaluate every element in order; bindings persist between them."""
        return Sequence(self.evaluate(el, env) for el in node.elements)

    def _eval_wrapped(self, node: WrappedNode, env: Environment) -> Value:
        return self.evaluate(node.inner, env)

    # ─────────────────────────────────────────────────────────
    #  Operators
    # ─────────────────────────────────────────────────────────

    def _eval_binaryop(self, node: BinaryOpNode, env: Environment) -> Value:
        """Evaluate both operands, then dispatch on their tags.

        Error operands are not special-cased: they fall into the
        mismatched-types branch like any other pairing.
        """
        left = self.evaluate(node.left, env)
        right = self.evaluate(node.right, env)

        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._apply(INTEGER_OPERATIONS, node.operator, left, right, "Int")
        if isinstance(left, Boolean) and isinstance(right, Boolean):
            return self._apply(BOOLEAN_OPERATIONS, node.operator, left, right, "Bool")
        return Error(
            f"Operator: '{_symbol(node.operator)}' cannot be applied to arguments "
            f"of type {left!r} and {right!r}."
        )

    @staticmethod
    def _apply(table, operator: TokenType, left, right, type_name: str) -> Value:
        operation = table.get(operator)
        if operation is None:
            return Error(
                f"Operator: '{_symbol(operator)}' cannot be applied to arguments "
                f"of type {type_name} and {type_name}."
            )
        return operation(left.value, right.value)

    # ─────────────────────────────────────────────────────────
    #  Special forms
    # ─────────────────────────────────────────────────────────

    def _eval_bind(self, node: BindNode, env: Environment) -> Value:
        """(def name value): bind in the current frame, return the value."""
        if not isinstance(node.target, IdentifierNode):
            return Error(
                f"Cannot bind to '{node.target.to_sexpr()}' as it is not a valid identifier."
            )
        value = self.evaluate(node.value, env)
        return env.bind(node.target.name, value)

    def _eval_functiondef(self, node: FunctionDefNode, env: Environment) -> Value:
        """(fn (params) body): capture params, body and the defining env."""
        if not isinstance(node.params, SequenceNode):
            return Error("Expected argument list")
        names = []
        for param in node.params.elements:
            if not isinstance(param, IdentifierNode):
                return Error("Expected identifier")
            names.append(param.name)
        return Closure(params=names, body=node.body, env=env)

    def _eval_conditional(self, node: ConditionalNode, env: Environment) -> Value:
        """Only Boolean(true) selects the consequent."""
        test = self.evaluate(node.test, env)
        if isinstance(test, Boolean) and test.value:
            return self.evaluate(node.consequent, env)
        return self.evaluate(node.alternate, env)

    # ─────────────────────────────────────────────────────────
    #  Leaves
    # ─────────────────────────────────────────────────────────

    def _eval_identifier(self, node: IdentifierNode, env: Environment) -> Value:
        value = env.lookup(node.name)
        if value is None:
            return Error(
                f"No binding for identifier '{node.name}' found in the current scope."
            )
        return value

    def _eval_literal(self, node: LiteralNode, env: Environment) -> Value:
        return Integer(node.value)


def evaluate(node: ASTNode, env: Environment) -> Value:
    """Evaluate ``node`` against ``env``."""
    return Evaluator().evaluate(node, env)


class Interpreter:
    """
    One interpreter instance: a top-level environment and a parser that
    live as long as the instance does. Bindings made by one ``run`` call
    are visible to the next.

    Usage:
        interp = Interpreter()
        interp.run("(def x 5)")
        interp.run("x")          # Seq([Int(5)])
    """

    def __init__(self, output_fn: Callable[[str], None] | None = None):
        self.env = Environment()
        self.parser = Parser()
        self.evaluator = Evaluator()
        self.output_fn = output_fn or (lambda s: print(s))

    def parse(self, source: str) -> SequenceNode:
        """Tokenize and parse ``source``. Raises ParseError."""
        return self.parser.parse(tokenize(source))

    def evaluate(self, node: ASTNode) -> Value:
        """Evaluate an already-parsed tree in the top-level environment."""
        return self.evaluator.evaluate(node, self.env)

    def run(self, source: str) -> Value:
        """Run the full pipeline on ``source``."""
        return self.evaluate(self.parse(source))

    def run_and_print(self, source: str, prefix: str = "") -> Value:
        """Run ``source`` and send ``prefix`` plus its display form to ``output_fn``."""
        result = self.run(source)
        self.output_fn(f"{prefix}{format_value(result)}")
        return result

    def bindings(self) -> dict[str, Value]:
        """Return a copy of the top-level bindings."""
        return dict(self.env.items())
