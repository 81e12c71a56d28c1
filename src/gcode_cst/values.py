"""
Field values and the value parser.

A field's value is picked from its lexical shape alone:

    X100      Integer(100)
    X-100     Rational(-100)
    X-12.5    Rational(-25/2)
    X3.       Rational(3)
    X.5       Rational(1/2)
    X"abc"    String("abc")

Numbers are exact. Fractional digits ``d`` of length ``n`` contribute
``d / 10**n`` and the sign applies to the sum of both parts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Protocol, Tuple, Type, Union

from typing_extensions import TypeAlias

from .errors import (
    ChecksumRangeError,
    IntegerFormatError,
    ParseError,
    RationalFormatError,
)
from .span import Span

_DIGITS_RE = re.compile(r"[0-9]+")

CHECKSUM_MAX = 0xFF


@dataclass(frozen=True)
class Integer:
    """Unsigned whole number written without sign or decimal point."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Rational:
    """Any numeric literal written with a sign, a decimal point, or both."""

    value: Fraction

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class String:
    value: str

    def __str__(self) -> str:
        return self.value


Value: TypeAlias = Union[Integer, Rational, String]
RawValue: TypeAlias = Tuple[str, ...]


class Fragment(Protocol):
    """A lexical fragment with its own span (``lark.Token`` satisfies this)."""

    value: str
    start_pos: int
    end_pos: int


def fragment_span(fragment: Fragment) -> Span:
    return Span(fragment.start_pos, fragment.end_pos)


def parse_digits(fragment: Fragment, error: Type[ParseError], what: str) -> int:
    """Parse an ASCII digit run, reporting failures at the run's own span."""
    text = fragment.value
    if _DIGITS_RE.fullmatch(text) is None:
        raise error(f"invalid {what} {text!r}", fragment_span(fragment), fragment)
    return int(text)


def parse_number(
    minus: Optional[Fragment],
    integer: Optional[Fragment],
    dot: Optional[Fragment],
    fraction: Optional[Fragment],
) -> Tuple[Value, RawValue]:
    """Build a numeric value and its raw fragments from the pieces of a field.

    ``fraction`` may only be present after ``dot``. A shape with neither sign
    nor dot is an ``Integer``; every other shape is a ``Rational``.
    """
    if integer is None and fraction is None:
        raise ValueError("a number needs an integer or a fractional digit run")

    if minus is None and dot is None:
        assert integer is not None
        return Integer(parse_digits(integer, IntegerFormatError, "integer")), (integer.value,)

    raw: list[str] = []
    whole = 0
    part = Fraction(0)

    if minus is not None:
        raw.append(minus.value)

    if integer is not None:
        whole = parse_digits(integer, RationalFormatError, "integer part")
        raw.append(integer.value)

    if dot is not None:
        raw.append(dot.value)
        if fraction is None:
            raw.append("")
        else:
            digits = parse_digits(fraction, RationalFormatError, "fractional part")
            part = Fraction(digits, 10 ** len(fraction.value))
            raw.append(fraction.value)

    value = whole + part
    if minus is not None:
        value = -value

    return Rational(Fraction(value)), tuple(raw)


def parse_string(literal: Fragment) -> Tuple[Value, RawValue]:
    """Strip the quotes off a string literal."""
    text = literal.value
    return String(text[1:-1]), (text,)


def parse_checksum(digits: Fragment) -> int:
    """Parse checksum digits and narrow them to one byte."""
    value = parse_digits(digits, IntegerFormatError, "checksum")
    if value > CHECKSUM_MAX:
        raise ChecksumRangeError(
            f"checksum {value} does not fit in a byte",
            fragment_span(digits),
            digits,
        )
    return value
