# tinylisp: a small Lisp-like expression language
"""
tinylisp: tokenizer, recursive-descent parser and tree-walking
evaluator for a Lisp-like expression language.
"""
from .lexer import Lexer, Token, TokenType, tokenize
from .parser import (
    Parser, ParseError, UnexpectedSymbol, parse,
    ASTNode, SequenceNode, BinaryOpNode, BindNode, FunctionDefNode,
    ConditionalNode, WrappedNode, IdentifierNode, LiteralNode,
)
from .environment import Environment
from .values import (
    Value, Error, Integer, Boolean, String, Sequence, Closure, format_value,
)
from .interpreter import Evaluator, Interpreter, evaluate

__version__ = "0.1.0"
__all__ = [
    "Lexer", "Token", "TokenType", "tokenize",
    "Parser", "ParseError", "UnexpectedSymbol", "parse",
    "ASTNode", "SequenceNode", "BinaryOpNode", "BindNode", "FunctionDefNode",
    "ConditionalNode", "WrappedNode", "IdentifierNode", "LiteralNode",
    "Environment",
    "Value", "Error", "Integer", "Boolean", "String", "Sequence", "Closure",
    "format_value",
    "Evaluator", "Interpreter", "evaluate",
]
