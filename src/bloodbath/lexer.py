"""Tokenization of a single line of source text."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Final, Union

from .errors import ExpectedDigit, UnexpectedCharacter, UnexpectedEndOfInput
from .values import wrap_int64


@dataclass(frozen=True)
class Identifier:
    text: str


@dataclass(frozen=True)
class IntegerConstant:
    value: int


@dataclass(frozen=True)
class FloatConstant:
    value: float


Token = Union[Identifier, IntegerConstant, FloatConstant]

OPEN_BRACE: Final[str] = "{"
CLOSE_BRACE: Final[str] = "}"

_SEPARATORS: Final[frozenset[str]] = frozenset(" \t\n\r")
_BRACES: Final[frozenset[str]] = frozenset(OPEN_BRACE + CLOSE_BRACE)
_DIGITS: Final[frozenset[str]] = frozenset(string.digits)
_IDENTIFIER_PUNCTUATION: Final[str] = "!#$%&'()*+,-./:<=>?@\\^_`|~"
_IDENTIFIER_CHARS: Final[frozenset[str]] = frozenset(
    string.ascii_letters + string.digits + _IDENTIFIER_PUNCTUATION
)


def is_identifier_char(ch: str) -> bool:
    return ch in _IDENTIFIER_CHARS


def _ends_token(ch: str) -> bool:
    return ch in _SEPARATORS or ch in _BRACES


def _starts_number(source: str, i: int) -> bool:
    ch = source[i]
    if ch in _DIGITS:
        return True
    return ch == "-" and i + 1 < len(source) and source[i + 1] in _DIGITS


def _scan_digits(source: str, start: int, *, stop_at_dot: bool) -> tuple[int, int, int]:
    """Accumulate decimal digits until a token boundary.

    Returns ``(magnitude, digit_count, end)``.
    """
    i = start
    magnitude = 0
    while i < len(source) and not _ends_token(source[i]):
        ch = source[i]
        if stop_at_dot and ch == ".":
            break
        if ch not in _DIGITS:
            raise ExpectedDigit(ch)
        magnitude = magnitude * 10 + (ord(ch) - ord("0"))
        i += 1
    return magnitude, i - start, i


def _scan_number(source: str, start: int) -> tuple[Token, int]:
    i = start
    sign = 1
    if source[i] == "-":
        sign = -1
        i += 1

    whole, _, i = _scan_digits(source, i, stop_at_dot=True)

    if i >= len(source) or source[i] != ".":
        return IntegerConstant(wrap_int64(sign * whole)), i

    i += 1
    if i >= len(source):
        raise UnexpectedEndOfInput()

    fractional, digits, i = _scan_digits(source, i, stop_at_dot=False)
    divisor = 10**digits
    return FloatConstant(sign * (wrap_int64(whole) + fractional / divisor)), i


def _scan_identifier(source: str, start: int) -> tuple[Token, int]:
    i = start
    while i < len(source) and not _ends_token(source[i]):
        if not is_identifier_char(source[i]):
            raise UnexpectedCharacter(source[i])
        i += 1
    return Identifier(source[start:i]), i


def tokenize(source: str) -> list[Token]:
    """Split *source* into tokens, preserving source order.

    Braces are emitted as single-character identifiers so the parser can
    recognise compound expressions; they also terminate any adjacent token.
    """
    tokens: list[Token] = []
    i = 0

    while i < len(source):
        ch = source[i]

        if ch in _SEPARATORS:
            i += 1
            continue

        if ch in _BRACES:
            tokens.append(Identifier(ch))
            i += 1
            continue

        if _starts_number(source, i):
            token, i = _scan_number(source, i)
        else:
            token, i = _scan_identifier(source, i)
        tokens.append(token)

    return tokens
