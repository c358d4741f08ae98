"""
tinylisp Parser
===============
Greedy recursive-descent parser that builds an Abstract Syntax Tree (AST)
from the token stream produced by the Lexer.

Grammar:
    Program      ::= Expr*
    Expr         ::= Literal | Identifier | '(' Form ')'
    Form         ::= BinaryOp | Bind | FnDef | Conditional | Expr
    BinaryOp     ::= Operator Expr Expr
    Bind         ::= 'def' Identifier Expr
    FnDef        ::= 'fn' '(' Identifier* ')' Expr
    Conditional  ::= 'if' Expr Expr Expr

At every choice point the first alternative that parses wins. A failed
alternative restores the cursor before the next one is tried, and
nothing is backtracked once an alternative has succeeded. The first
error that no alternative can recover from aborts the whole parse.
"""
from dataclasses import dataclass, field

from .lexer import Token, TokenType


# ─────────────────────────────────────────────────────────────
#  AST Node Types
# ─────────────────────────────────────────────────────────────

OPERATOR_SYMBOLS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.EQ: "=",
    TokenType.GT: ">",
    TokenType.GTE: ">=",
    TokenType.LT: "<",
    TokenType.LTE: "<=",
}

BINARY_OPERATORS = tuple(OPERATOR_SYMBOLS)


@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    node_type: str = ""
    line: int = 0
    col: int = 0

    def to_sexpr(self) -> str:
        raise NotImplementedError


@dataclass
class SequenceNode(ASTNode):
    """A block of expressions evaluated in order."""
    elements: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "Sequence"

    def to_sexpr(self) -> str:
        return "[" + " ".join(el.to_sexpr() for el in self.elements) + "]"


@dataclass
class BinaryOpNode(ASTNode):
    """An operator applied to two operands: (+ a b)."""
    operator: TokenType = TokenType.PLUS
    left: ASTNode | None = None
    right: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "BinaryOp"

    @property
    def symbol(self) -> str:
        return OPERATOR_SYMBOLS.get(self.operator, self.operator.name)

    def to_sexpr(self) -> str:
        return f"({self.symbol} {self.left.to_sexpr()} {self.right.to_sexpr()})"


@dataclass
class BindNode(ASTNode):
    """A def form: (def name value)."""
    target: ASTNode | None = None
    value: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "Bind"

    def to_sexpr(self) -> str:
        return f"(def {self.target.to_sexpr()} {self.value.to_sexpr()})"


@dataclass
class FunctionDefNode(ASTNode):
    """A fn form: (fn (a b) body). ``params`` is a SequenceNode."""
    params: ASTNode | None = None
    body: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "FunctionDef"

    def to_sexpr(self) -> str:
        if isinstance(self.params, SequenceNode):
            params = "(" + " ".join(p.to_sexpr() for p in self.params.elements) + ")"
        else:
            params = self.params.to_sexpr()
        return f"(fn {params} {self.body.to_sexpr()})"


@dataclass
class ConditionalNode(ASTNode):
    """An if form: (if test consequent alternate)."""
    test: ASTNode | None = None
    consequent: ASTNode | None = None
    alternate: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "Conditional"

    def to_sexpr(self) -> str:
        return (
            f"(if {self.test.to_sexpr()} {self.consequent.to_sexpr()} "
            f"{self.alternate.to_sexpr()})"
        )


@dataclass
class WrappedNode(ASTNode):
    """A parenthesized plain expression: (x), ((+ 1 2))."""
    inner: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "Wrapped"

    def to_sexpr(self) -> str:
        return f"({self.inner.to_sexpr()})"


@dataclass
class IdentifierNode(ASTNode):
    """A reference to a named binding."""
    name: str = ""

    def __post_init__(self):
        self.node_type = "Identifier"

    def to_sexpr(self) -> str:
        return self.name


@dataclass
class LiteralNode(ASTNode):
    """An integer literal."""
    value: int = 0

    def __post_init__(self):
        self.node_type = "Literal"

    def to_sexpr(self) -> str:
        return str(self.value)


# ─────────────────────────────────────────────────────────────
#  Parse Errors
# ─────────────────────────────────────────────────────────────

class ParseError(SyntaxError):
    """Raised when the token stream does not match the grammar."""

    def __init__(self, message: str = "unknown parse error"):
        super().__init__(message)


class UnexpectedSymbol(ParseError):
    """A required token kind did not match the token found."""

    def __init__(self, expected: TokenType, actual: TokenType, line: int = 0, col: int = 0):
        self.expected = expected
        self.actual = actual
        self.line = line
        self.col = col
        super().__init__(
            f"Expected {expected.name} but found {actual.name} at line {line}, col {col}"
        )


# ─────────────────────────────────────────────────────────────
#  Parser
# ─────────────────────────────────────────────────────────────

class Parser:
    """
    Recursive-descent parser for tinylisp source.

    Usage:
        parser = Parser()
        ast = parser.parse(tokens)

    The same instance may parse any number of token lists; each call
    resets the cursor.
    """

    def __init__(self, tokens: list[Token] | None = None):
        self.tokens: list[Token] = tokens or []
        self.pos = 0

    def parse(self, tokens: list[Token] | None = None) -> SequenceNode:
        """Parse a token list into a SequenceNode.

        Raises ParseError on the first unrecoverable error.
        """
        if tokens is not None:
            self.tokens = tokens
        self.pos = 0
        return self._parse_program()

    # ─────────────────────────────────────────────────────────
    #  Cursor helpers
    # ─────────────────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        if self.tokens:
            last = self.tokens[-1]
            return Token(TokenType.EOF, "", last.line, last.col)
        return Token(TokenType.EOF, "", 1, 1)

    def _at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _advance(self) -> Token:
        token = self._current()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def _expect(self, token_type: TokenType) -> Token:
        return self._expect_any((token_type,))

    def _expect_any(self, token_types: tuple[TokenType, ...]) -> Token:
        if not token_types:
            raise ParseError()
        token = self._current()
        if token.type in token_types:
            return self._advance()
        raise UnexpectedSymbol(token_types[-1], token.type, token.line, token.col)

    def _attempt(self, rule):
        """Run ``rule``; on ParseError restore the cursor and return None."""
        saved = self.pos
        try:
            return rule()
        except ParseError:
            self.pos = saved
            return None

    # ─────────────────────────────────────────────────────────
    #  Grammar rules
    # ─────────────────────────────────────────────────────────

    def _parse_program(self) -> SequenceNode:
        """Program ::= Expr*"""
        first = self._current()
        program = SequenceNode(line=first.line, col=first.col)
        while not self._at_end():
            program.elements.append(self._parse_expr())
        return program

    def _parse_expr(self) -> ASTNode:
        """Expr ::= Literal | Identifier | '(' Form ')'"""
        base = self._attempt(self._parse_base)
        if base is not None:
            return base

        self._expect(TokenType.LPAREN)
        form = self._parse_form()
        self._expect(TokenType.RPAREN)
        return form

    def _parse_form(self) -> ASTNode:
        """Form ::= BinaryOp | Bind | FnDef | Conditional | Expr"""
        for rule in (self._parse_binary_op, self._parse_bind,
                     self._parse_fn_def, self._parse_conditional):
            node = self._attempt(rule)
            if node is not None:
                return node

        token = self._current()
        inner = self._parse_expr()
        return WrappedNode(inner=inner, line=token.line, col=token.col)

    def _parse_binary_op(self) -> BinaryOpNode:
        """BinaryOp ::= Operator Expr Expr"""
        op = self._expect_any(BINARY_OPERATORS)
        left = self._parse_expr()
        right = self._parse_expr()
        return BinaryOpNode(
            operator=op.type, left=left, right=right,
            line=op.line, col=op.col,
        )

    def _parse_bind(self) -> BindNode:
        """Bind ::= 'def' Identifier Expr"""
        keyword = self._expect(TokenType.KW_DEF)
        target = self._parse_identifier()
        value = self._parse_expr()
        return BindNode(target=target, value=value, line=keyword.line, col=keyword.col)

    def _parse_fn_def(self) -> FunctionDefNode:
        """FnDef ::= 'fn' '(' Identifier* ')' Expr"""
        keyword = self._expect(TokenType.KW_FN)
        open_paren = self._expect(TokenType.LPAREN)
        params = SequenceNode(line=open_paren.line, col=open_paren.col)
        while self._current().type == TokenType.IDENTIFIER:
            params.elements.append(self._parse_identifier())
        self._expect(TokenType.RPAREN)
        body = self._parse_expr()
        return FunctionDefNode(params=params, body=body, line=keyword.line, col=keyword.col)

    def _parse_conditional(self) -> ConditionalNode:
        """Conditional ::= 'if' Expr Expr Expr"""
        keyword = self._expect(TokenType.KW_IF)
        test = self._parse_expr()
        consequent = self._parse_expr()
        alternate = self._parse_expr()
        return ConditionalNode(
            test=test, consequent=consequent, alternate=alternate,
            line=keyword.line, col=keyword.col,
        )

    def _parse_base(self) -> ASTNode:
        literal = self._attempt(self._parse_literal)
        if literal is not None:
            return literal
        return self._parse_identifier()

    def _parse_identifier(self) -> IdentifierNode:
        token = self._expect(TokenType.IDENTIFIER)
        return IdentifierNode(name=token.value, line=token.line, col=token.col)

    def _parse_literal(self) -> LiteralNode:
        token = self._expect(TokenType.NUMBER)
        return LiteralNode(value=int(token.value), line=token.line, col=token.col)


def parse(tokens: list[Token]) -> SequenceNode:
    """Parse a token list with a fresh Parser."""
    return Parser().parse(tokens)
