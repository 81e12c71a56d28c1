"""Exception hierarchy shared by the lexer, parser and value parser."""

from __future__ import annotations

from typing import Optional

from .span import Span


class GcodeError(Exception):
    """Base error carrying the source span it applies to."""

    def __init__(self, message: str, span: Span):
        self.message = message
        self.span = span
        super().__init__(f"{message} at {span}")


class LexError(GcodeError):
    """Lexical analysis error"""

    def __init__(self, message: str, pos: int, line: int, column: int, width: int = 1):
        self.line = line
        self.column = column
        super().__init__(message, Span(pos, pos + width))

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, col {self.column}"


class ParseError(GcodeError):
    """Unexpected or missing token"""

    def __init__(self, message: str, span: Span, token: Optional[object] = None):
        self.token = token
        super().__init__(message, span)


class IntegerFormatError(ParseError):
    """A digit run expected to be a plain integer could not be parsed."""


class ChecksumRangeError(IntegerFormatError):
    """Checksum digits parse as an integer but do not fit in one byte."""


class RationalFormatError(ParseError):
    """A component of a signed or fractional literal could not be parsed."""
