"""bloodbath public API."""

from .environment import Environment
from .errors import (
    BloodbathError,
    ExpectedDigit,
    ExpectedExpression,
    ExpectedIdentifier,
    LexError,
    NestingTooDeep,
    ParseError,
    ReadingFailed,
    UnexpectedBrace,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
    UnterminatedCompoundExpression,
)
from .evaluator import Session, default_environment, evaluate, reduce
from .lexer import FloatConstant, Identifier, IntegerConstant, Token, tokenize
from .values import NOOP, Float, Function, Integer, Noop, Value, ValueKind, is_truthy, kind_of, render

__all__ = [
    "evaluate",
    "reduce",
    "tokenize",
    "Session",
    "Environment",
    "default_environment",
    "Token",
    "Identifier",
    "IntegerConstant",
    "FloatConstant",
    "Value",
    "Noop",
    "NOOP",
    "Integer",
    "Float",
    "Function",
    "ValueKind",
    "kind_of",
    "is_truthy",
    "render",
    "BloodbathError",
    "LexError",
    "UnexpectedEndOfInput",
    "ExpectedDigit",
    "UnexpectedCharacter",
    "ParseError",
    "ReadingFailed",
    "ExpectedExpression",
    "ExpectedIdentifier",
    "UnterminatedCompoundExpression",
    "UnexpectedBrace",
    "NestingTooDeep",
]
