"""
Recursive Descent Parser for NC programs

Structure:
- Lexer: Token stream from source (or any caller-supplied token iterable)
- Parser: Recursive descent over lines and fields
- Tree: Lark Tree/Token parse tree, one label per grammar production,
  turned into typed nodes by builders.NodeBuilder

Grammar (informal):

    file     : PERCENT? (line NEWLINE)* line PERCENT? EOF
    snippet  : (line NEWLINE)* line EOF
    line     : trivia* (field trivia*)* (checksum trivia*)? (COMMENT trivia*)?
    trivia   : WHITESPACE | INLINE_COMMENT
    checksum : STAR INTEGER
    field    : LETTERS INTEGER                           -> field_integer
             | LETTERS MINUS INTEGER                     -> field_negative
             | LETTERS MINUS? INTEGER DOT INTEGER?       -> field_decimal
             | LETTERS MINUS? DOT INTEGER                -> field_fraction
             | LETTERS STRING                            -> field_string
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Union

from lark import Token, Tree
from lark.tree import Meta

from .errors import ParseError
from .span import Span
from .token_types import TT, Tok

logger = logging.getLogger(__name__)

ParseNode = Union[Tree, Token]

_TRIVIA = (TT.WHITESPACE, TT.INLINE_COMMENT)
_LINE_END = (TT.NEWLINE, TT.PERCENT, TT.EOF)

# ============================================================================
# Parser
# ============================================================================

def to_lark_token(tok: Tok) -> Token:
    """Convert a lexer token into a Lark token with start/end offsets."""
    return Token(
        tok.type.name,
        tok.value,
        start_pos=tok.pos,
        line=tok.line,
        column=tok.column,
        end_pos=tok.end,
    )


def _meta(start: int, end: int) -> Meta:
    meta = Meta()
    meta.empty = False
    meta.start_pos = start
    meta.end_pos = end
    return meta


def _describe(tok: Tok) -> str:
    if tok.type == TT.EOF:
        return "end of input"
    if tok.type == TT.NEWLINE:
        return "end of line"
    return f"{tok.type.name} {tok.value!r}"


class Parser:
    """
    Recursive descent parser for NC programs.

    Tokens are pulled lazily, so a LexError raised by a streaming tokenizer
    propagates unchanged out of the parse call that reached it.
    """

    def __init__(self, tokens: Iterable[Tok]):
        self.tokens: Iterator[Tok] = iter(tokens)
        self.last_end = 0
        self.current = self._pull()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def _pull(self) -> Tok:
        tok = next(self.tokens, None)
        if tok is None:
            # Caller-supplied streams may omit the EOF token
            return Tok(TT.EOF, '', self.last_end)
        return tok

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if prev.type != TT.EOF:
            self.last_end = prev.end
            self.current = self._pull()
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> Optional[Token]:
        """Consume and return the current token if it matches"""
        if self.check(*types):
            return to_lark_token(self.advance())
        return None

    def expect(self, token_type: TT, message: Optional[str] = None) -> Token:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {_describe(self.current)}"
            raise self.error(msg)
        return to_lark_token(self.advance())

    def error(self, message: str, tok: Optional[Tok] = None) -> ParseError:
        tok = tok or self.current
        return ParseError(message, Span(tok.pos, tok.end), tok)

    # ========================================================================
    # Documents
    # ========================================================================

    def parse_file(self) -> Tree:
        """Parse a whole program, with optional % delimiters"""
        start = self.current.pos
        start_percent = self.match(TT.PERCENT)
        lines, last_line = self.parse_lines()
        end_percent = self.match(TT.PERCENT)
        end = self.expect_eof()
        return Tree('file', [start_percent, lines, last_line, end_percent], _meta(start, end))

    def parse_snippet(self) -> Tree:
        """Parse a bare run of lines"""
        start = self.current.pos
        lines, last_line = self.parse_lines()
        end = self.expect_eof()
        return Tree('snippet', [lines, last_line], _meta(start, end))

    def parse_lines(self):
        start = self.current.pos
        pairs: List[ParseNode] = []

        while True:
            line = self.parse_line()
            newline = self.match(TT.NEWLINE)
            if newline is None:
                break
            pairs.append(line)
            pairs.append(newline)

        end = line.meta.start_pos
        return Tree('lines', pairs, _meta(start, end)), line

    def expect_eof(self) -> int:
        if not self.check(TT.EOF):
            raise self.error(f"Unexpected {_describe(self.current)}")
        return self.current.pos

    # ========================================================================
    # Lines
    # ========================================================================

    def parse_line(self) -> Tree:
        """
        Parse the items of one line, stopping before its terminator.

        Order: fields, then an optional checksum, then an optional comment,
        with trivia allowed anywhere in between.
        """
        items: List[ParseNode] = []
        seen_checksum = False
        seen_comment = False
        start = self.current.pos

        while not self.check(*_LINE_END):
            tok = self.current

            if self.check(*_TRIVIA):
                items.append(to_lark_token(self.advance()))
            elif self.check(TT.LETTERS):
                if seen_checksum or seen_comment:
                    raise self.error(f"Field {tok.value!r} after the end of the line's fields")
                items.append(self.parse_field())
            elif self.check(TT.STAR):
                if seen_checksum:
                    raise self.error("Duplicate checksum")
                if seen_comment:
                    raise self.error("Checksum after comment")
                items.append(self.parse_checksum())
                seen_checksum = True
            elif self.check(TT.COMMENT):
                items.append(to_lark_token(self.advance()))
                seen_comment = True
            else:
                raise self.error(f"Unexpected {_describe(tok)}")

        end = self.last_end if items else start
        return Tree('line', items, _meta(start, end))

    def parse_checksum(self) -> Tree:
        star = self.expect(TT.STAR)
        digits = self.expect(TT.INTEGER, "Expected checksum digits after '*'")
        return Tree('checksum', [star, digits], _meta(star.start_pos, digits.end_pos))

    # ========================================================================
    # Fields
    # ========================================================================

    def parse_field(self) -> Tree:
        """
        Parse a letter-prefixed value.

        The value must follow the letters directly; the first token that
        cannot continue the value ends the field.
        """
        letters_tok = self.current
        letters = self.expect(TT.LETTERS)

        string = self.match(TT.STRING)
        if string is not None:
            return self._field('field_string', [letters, string])

        minus = self.match(TT.MINUS)
        integer = self.match(TT.INTEGER)

        if integer is not None:
            dot = self.match(TT.DOT)
            if dot is not None:
                fraction = self.match(TT.INTEGER)
                return self._field('field_decimal', [letters, minus, integer, dot, fraction])
            if minus is not None:
                return self._field('field_negative', [letters, minus, integer])
            return self._field('field_integer', [letters, integer])

        dot = self.match(TT.DOT)
        if dot is not None:
            fraction = self.expect(TT.INTEGER, "Expected digits after '.'")
            return self._field('field_fraction', [letters, minus, dot, fraction])

        if minus is not None:
            raise self.error(f"Expected digits after '-', got {_describe(self.current)}")
        raise self.error(f"Field {letters.value!r} has no value", letters_tok)

    def _field(self, label: str, children: List[Optional[Token]]) -> Tree:
        first = children[0]
        last = next(child for child in reversed(children) if child is not None)
        return Tree(label, children, _meta(first.start_pos, last.end_pos))


def parse_tokens(tokens: Iterable[Tok], start: str = 'file') -> Tree:
    """Parse a token stream to a Lark parse tree rooted at ``start``."""
    parser = Parser(tokens)

    if start == 'file':
        tree = parser.parse_file()
    elif start == 'snippet':
        tree = parser.parse_snippet()
    elif start == 'line':
        tree = parser.parse_line()
        parser.expect_eof()
    else:
        raise ValueError(f"unknown start rule {start!r}")

    logger.debug("parsed %s spanning %d..%d", start, tree.meta.start_pos, tree.meta.end_pos)
    return tree


def parse_source(source: str, start: str = 'file') -> Tree:
    """
    Parse NC source text to a Lark parse tree.

    Args:
        source: Program text
        start: 'file', 'snippet' or 'line'
    """
    from .lexer import Lexer

    return parse_tokens(Lexer(source).stream(), start=start)
