"""Structured error types for the lexer and the parser/evaluator."""

from __future__ import annotations


class BloodbathError(Exception):
    """Base class for structured bloodbath errors."""


class LexError(BloodbathError):
    """Malformed source text; the whole line is abandoned."""


class UnexpectedEndOfInput(LexError):
    def __str__(self) -> str:
        return "Unexpected end of input"


class ExpectedDigit(LexError):
    def __init__(self, char: str) -> None:
        super().__init__(char)
        self.char = char

    def __str__(self) -> str:
        return f"Expected a digit, got {self.char!r}"


class UnexpectedCharacter(LexError):
    def __init__(self, char: str) -> None:
        super().__init__(char)
        self.char = char

    def __str__(self) -> str:
        return f"Unexpected character: {self.char!r}"


class ParseError(BloodbathError):
    """Failure while building or reducing an expression."""


class ReadingFailed(ParseError):
    """Wraps a lexer failure raised while evaluating a whole line."""

    def __init__(self, error: LexError) -> None:
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return str(self.error)


class ExpectedExpression(ParseError):
    def __init__(self, context: str) -> None:
        super().__init__(context)
        self.context = context

    def __str__(self) -> str:
        return self.context


class ExpectedIdentifier(ParseError):
    def __init__(self, context: str) -> None:
        super().__init__(context)
        self.context = context

    def __str__(self) -> str:
        return self.context


class UnterminatedCompoundExpression(ParseError):
    def __str__(self) -> str:
        return "Compound expression is missing its closing `}`"


class UnexpectedBrace(ParseError):
    def __init__(self, brace: str = "}") -> None:
        super().__init__(brace)
        self.brace = brace

    def __str__(self) -> str:
        return f"Unexpected brace {self.brace!r}"


class NestingTooDeep(ParseError):
    """The line nests deeper than the interpreter's recursion limit allows."""

    def __str__(self) -> str:
        return "Expression is nested too deeply"
