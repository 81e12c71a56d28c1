"""Lossless parser for NC programs (G-code dialect)."""

from .api import parse_file, parse_line, parse_snippet
from .errors import (
    ChecksumRangeError,
    GcodeError,
    IntegerFormatError,
    LexError,
    ParseError,
    RationalFormatError,
)
from .lexer import tokenize
from .nodes import (
    Checksum,
    Comment,
    Document,
    Field,
    File,
    InlineComment,
    Line,
    Newline,
    Snippet,
    Whitespace,
)
from .printer import pretty, to_source
from .span import Span
from .token_types import TT, Tok
from .values import Integer, Rational, String, Value

__all__ = [
    "Checksum",
    "ChecksumRangeError",
    "Comment",
    "Document",
    "Field",
    "File",
    "GcodeError",
    "InlineComment",
    "Integer",
    "IntegerFormatError",
    "LexError",
    "Line",
    "Newline",
    "ParseError",
    "Rational",
    "RationalFormatError",
    "Snippet",
    "Span",
    "String",
    "TT",
    "Tok",
    "Value",
    "Whitespace",
    "parse_file",
    "parse_line",
    "parse_snippet",
    "pretty",
    "to_source",
    "tokenize",
]
