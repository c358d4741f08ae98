"""
tinylisp Lexer
==============
Tokenizes tinylisp source code into a stream of typed tokens.
Handles parentheses, arithmetic/comparison operators, integer and
string literals, keywords and identifiers.

The lexer never fails: unknown characters are dropped, an unterminated
string runs to the end of the input, and the token list always ends
with an EOF token.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """All token types in the tinylisp language."""
    # Delimiters
    LPAREN      = auto()   # (
    RPAREN      = auto()   # )

    # Arithmetic operators
    PLUS        = auto()   # +
    MINUS       = auto()   # -
    STAR        = auto()   # *
    SLASH       = auto()   # /

    # Comparison operators
    EQ          = auto()   # =
    GT          = auto()   # >
    GTE         = auto()   # >=
    LT          = auto()   # <
    LTE         = auto()   # <=

    # Literals
    NUMBER      = auto()   # 42
    STRING      = auto()   # "..."
    IDENTIFIER  = auto()   # variable names

    # Keywords
    KW_DEF      = auto()   # def
    KW_FN       = auto()   # fn
    KW_IF       = auto()   # if

    # Special
    EOF         = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the tinylisp source."""
    type: TokenType
    value: str
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


SINGLE_CHAR_TOKENS = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "=": TokenType.EQ,
}

# '>' and '<' take an optional trailing '='
COMPARISON_TOKENS = {
    ">": (TokenType.GT, TokenType.GTE),
    "<": (TokenType.LT, TokenType.LTE),
}

KEYWORDS = {
    "def": TokenType.KW_DEF,
    "fn": TokenType.KW_FN,
    "if": TokenType.KW_IF,
}

DIGITS = frozenset("0123456789")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


class Lexer:
    """
    Tokenizes tinylisp source code.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _read_run(self, allowed: frozenset) -> str:
        chars = []
        while self._current() is not None and self._current() in allowed:
            chars.append(self._advance())
        return "".join(chars)

    def _read_number(self) -> Token:
        """Read an unsigned integer literal."""
        start_line, start_col = self.line, self.col
        return Token(TokenType.NUMBER, self._read_run(DIGITS), start_line, start_col)

    def _read_identifier(self) -> Token:
        """Read an identifier or keyword."""
        start_line, start_col = self.line, self.col
        word = self._read_run(LETTERS | DIGITS)
        token_type = KEYWORDS.get(word, TokenType.IDENTIFIER)
        return Token(token_type, word, start_line, start_col)

    def _read_string(self) -> Token:
        """Read a double-quoted string literal.

        No escapes. A missing closing quote consumes the rest of the input.
        """
        start_line, start_col = self.line, self.col
        self._advance()  # consume opening "
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == '"':
                break
            chars.append(ch)
        return Token(TokenType.STRING, "".join(chars), start_line, start_col)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source into a list of tokens."""
        tokens = list(self._iter_tokens())
        tokens.append(Token(TokenType.EOF, "", self.line, self.col))
        return tokens

    def _iter_tokens(self) -> Iterator[Token]:
        """Generate tokens one at a time."""
        while self.pos < len(self.source):
            ch = self._current()

            if ch.isspace():
                self._advance()
                continue

            if ch in DIGITS:
                yield self._read_number()
                continue

            if ch in LETTERS:
                yield self._read_identifier()
                continue

            if ch == '"':
                yield self._read_string()
                continue

            if ch in COMPARISON_TOKENS:
                line, col = self.line, self.col
                plain, or_equal = COMPARISON_TOKENS[ch]
                self._advance()
                if self._current() == "=":
                    self._advance()
                    yield Token(or_equal, ch + "=", line, col)
                else:
                    yield Token(plain, ch, line, col)
                continue

            if ch in SINGLE_CHAR_TOKENS:
                yield Token(SINGLE_CHAR_TOKENS[ch], ch, self.line, self.col)
                self._advance()
                continue

            # Unknown character: dropped without a token
            self._advance()


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source``; always ends with an EOF token."""
    return Lexer(source).tokenize()
