"""Arity-directed parser.

How many sub-expressions an identifier consumes is not fixed by the grammar:
it is the ``argument_count`` of the Function currently bound to that name in
the live environment. Rebinding a verb therefore changes how later input
parses, and the parser cannot run without an :class:`Environment`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .ast import Call, Compound, Constant, Expr, If, Set, Variable
from .environment import Environment
from .errors import ExpectedExpression, ExpectedIdentifier, UnexpectedBrace, UnterminatedCompoundExpression
from .lexer import CLOSE_BRACE, OPEN_BRACE, FloatConstant, Identifier, IntegerConstant, Token, tokenize
from .values import NOOP, Float, Function, Integer

NOOP_KEYWORD: Final[str] = "noop"
IDENTITY_KEYWORD: Final[str] = "identity"
SET_KEYWORD: Final[str] = "set"
IF_KEYWORD: Final[str] = "if"
THEN_KEYWORD: Final[str] = "then"
ELSE_KEYWORD: Final[str] = "else"

_IDENTITY_USAGE: Final[str] = "`identity` must be followed by a constant or a variable name"
_SET_USAGE: Final[str] = "`set` must be followed by a variable name and the variable's new value"


def _is_word(tok: Token | None, word: str) -> bool:
    return isinstance(tok, Identifier) and tok.text == word


def _is_brace(tok: Token) -> bool:
    return isinstance(tok, Identifier) and tok.text in (OPEN_BRACE, CLOSE_BRACE)


def _literal(tok: IntegerConstant | FloatConstant) -> Constant:
    if isinstance(tok, IntegerConstant):
        return Constant(Integer(tok.value))
    return Constant(Float(tok.value))


@dataclass
class Parser:
    tokens: list[Token]
    env: Environment
    index: int = 0

    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def _peek(self) -> Token | None:
        if self.at_end():
            return None
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def parse_expression(self, context: str = "Expected an expression") -> Expr:
        """Consume exactly one expression, raising ExpectedExpression(context) if none is left."""
        if self.at_end():
            raise ExpectedExpression(context)

        tok = self._advance()
        if isinstance(tok, (IntegerConstant, FloatConstant)):
            return _literal(tok)

        name = tok.text
        if name == CLOSE_BRACE:
            raise UnexpectedBrace(name)
        if name == OPEN_BRACE:
            return self._parse_compound()
        if name == NOOP_KEYWORD:
            return Constant(NOOP)
        if name == IDENTITY_KEYWORD:
            return self._parse_identity()
        if name == SET_KEYWORD:
            return self._parse_set()
        if name == IF_KEYWORD:
            return self._parse_if()
        return self._parse_name(name)

    def _parse_identity(self) -> Expr:
        if self.at_end():
            raise ExpectedExpression(_IDENTITY_USAGE)

        tok = self._advance()
        if isinstance(tok, (IntegerConstant, FloatConstant)):
            return _literal(tok)
        if _is_brace(tok):
            raise UnexpectedBrace(tok.text)
        if tok.text == NOOP_KEYWORD:
            return Constant(NOOP)
        # Never applied, even when the binding is a Function.
        return Variable(tok.text)

    def _parse_set(self) -> Expr:
        tok = self._peek()
        if not isinstance(tok, Identifier) or _is_brace(tok):
            raise ExpectedIdentifier(_SET_USAGE)
        self._advance()
        value = self.parse_expression(_SET_USAGE)
        return Set(name=tok.text, value=value)

    def _parse_if(self) -> Expr:
        condition = self.parse_expression("`if` must be followed by a condition")

        if not _is_word(self._peek(), THEN_KEYWORD):
            raise ExpectedIdentifier("Expected `then` after the condition of `if`")
        self._advance()
        then_branch = self.parse_expression("Expected an expression after `then`")

        else_branch = None
        if _is_word(self._peek(), ELSE_KEYWORD):
            self._advance()
            else_branch = self.parse_expression("Expected an expression after `else`")

        return If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def _parse_compound(self) -> Expr:
        items: list[Expr] = []
        while True:
            tok = self._peek()
            if tok is None:
                raise UnterminatedCompoundExpression()
            if _is_word(tok, CLOSE_BRACE):
                self._advance()
                return Compound(items=tuple(items))
            items.append(self.parse_expression())

    def _parse_name(self, name: str) -> Expr:
        # The lookup auto-vivifies, so even a name that turns out to be a plain
        # variable is bound after this point.
        bound = self.env.get(name)
        if not isinstance(bound, Function):
            return Variable(name)

        arguments: list[Expr] = []
        for count in range(bound.argument_count):
            context = f"Expected {bound.argument_count} arguments after `{name}`, got {count}"
            arguments.append(self.parse_expression(context))
        return Call(function=bound, arguments=tuple(arguments))


def parse(source: str, env: Environment) -> tuple[Expr, ...]:
    """Parse every top-level expression of *source* without evaluating any of them.

    Arity is resolved against *env* as it stands before the call, so a ``set``
    inside *source* does not affect how the rest of *source* parses here. Use
    :func:`bloodbath.evaluator.evaluate` for the interleaved behaviour.
    """
    parser = Parser(tokens=tokenize(source), env=env)
    expressions: list[Expr] = []
    while not parser.at_end():
        expressions.append(parser.parse_expression())
    return tuple(expressions)
