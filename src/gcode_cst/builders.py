"""
Node builders: turn the parser's Lark tree into typed, immutable nodes.

Each grammar production has a transformer method here. Token callbacks wrap
trivia and comments; rule callbacks run the value parser for fields, assemble
lines, and stitch lines into documents.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from lark import Token, Transformer, Tree, v_args
from lark.exceptions import VisitError

from .nodes import (
    Checksum,
    Comment,
    Field,
    File,
    InlineComment,
    Line,
    LineItem,
    Newline,
    Snippet,
    Whitespace,
)
from .span import Span
from .values import Value, RawValue, parse_checksum, parse_number, parse_string

logger = logging.getLogger(__name__)


def _span(meta) -> Span:
    return Span(meta.start_pos, meta.end_pos)


def trailing_trivia(items: Sequence[LineItem]) -> Tuple[Optional[Whitespace], Tuple[InlineComment, ...]]:
    """Split out the whitespace run and inline comments after the last significant item."""
    tail_start = 0
    for idx, item in enumerate(items):
        if isinstance(item, (Field, Checksum, Comment)):
            tail_start = idx + 1

    tail = items[tail_start:]
    whitespace = next((item for item in tail if isinstance(item, Whitespace)), None)
    inline = tuple(item for item in tail if isinstance(item, InlineComment))
    return whitespace, inline


def drop_blank_last_line(last_line: Line) -> Optional[Line]:
    """A final line holding nothing but whitespace is treated as absent."""
    if last_line.is_blank:
        return None
    return last_line


class NodeBuilder(Transformer):
    """Build nodes bottom-up from a parse tree produced by parser.Parser."""

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def WHITESPACE(self, tok: Token) -> Whitespace:
        return Whitespace(tok.value, tok.start_pos)

    def INLINE_COMMENT(self, tok: Token) -> InlineComment:
        return InlineComment(tok.value, tok.start_pos)

    def COMMENT(self, tok: Token) -> Comment:
        return Comment(tok.value, tok.start_pos)

    def NEWLINE(self, tok: Token) -> Newline:
        return Newline(tok.value, tok.start_pos)

    def PERCENT(self, tok: Token) -> bool:
        return True

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def _field(self, meta, letters: Token, value: Tuple[Value, RawValue]) -> Field:
        inner, raw = value
        return Field(letters.value, inner, raw, _span(meta))

    @v_args(meta=True, inline=True)
    def field_integer(self, meta, letters, integer):
        return self._field(meta, letters, parse_number(None, integer, None, None))

    @v_args(meta=True, inline=True)
    def field_negative(self, meta, letters, minus, integer):
        return self._field(meta, letters, parse_number(minus, integer, None, None))

    @v_args(meta=True, inline=True)
    def field_decimal(self, meta, letters, minus, integer, dot, fraction):
        return self._field(meta, letters, parse_number(minus, integer, dot, fraction))

    @v_args(meta=True, inline=True)
    def field_fraction(self, meta, letters, minus, dot, fraction):
        return self._field(meta, letters, parse_number(minus, None, dot, fraction))

    @v_args(meta=True, inline=True)
    def field_string(self, meta, letters, string):
        return self._field(meta, letters, parse_string(string))

    @v_args(meta=True, inline=True)
    def checksum(self, meta, star, digits):
        return Checksum(parse_checksum(digits), _span(meta))

    # ------------------------------------------------------------------
    # Lines and documents
    # ------------------------------------------------------------------

    @v_args(meta=True)
    def line(self, meta, items: List[LineItem]) -> Line:
        items = tuple(items)
        whitespace, inline = trailing_trivia(items)
        return Line(
            fields=tuple(item for item in items if isinstance(item, Field)),
            checksum=next((item for item in items if isinstance(item, Checksum)), None),
            comment=next((item for item in items if isinstance(item, Comment)), None),
            whitespace=whitespace,
            inline_comment=inline,
            span=_span(meta),
            items=items,
        )

    def lines(self, children) -> Tuple[Tuple[Line, Newline], ...]:
        return tuple(zip(children[0::2], children[1::2]))

    @v_args(meta=True, inline=True)
    def file(self, meta, start_percent, lines, last_line, end_percent) -> File:
        logger.debug("assembling file with %d terminated lines", len(lines))
        return File(
            start_percent=bool(start_percent),
            lines=lines,
            last_line=drop_blank_last_line(last_line),
            end_percent=bool(end_percent),
            span=_span(meta),
        )

    @v_args(meta=True, inline=True)
    def snippet(self, meta, lines, last_line) -> Snippet:
        logger.debug("assembling snippet with %d terminated lines", len(lines))
        return Snippet(
            lines=lines,
            last_line=drop_blank_last_line(last_line),
            span=_span(meta),
        )


def build(tree: Tree):
    """Run the node builder, surfacing the original error of a failed callback."""
    try:
        return NodeBuilder().transform(tree)
    except VisitError as exc:
        raise exc.orig_exc from None
