"""
Lexer for NC programs (G-code dialect)

Tokenizes program text into a stream of classified tokens.

Features:
- Single-pass tokenization, available eagerly (tokenize) or lazily (stream)
- Lossless: every character of the source belongs to exactly one token
- Position tracking: UTF-8 byte offset, line and column (in characters)
"""

from typing import Iterator, List

from .errors import LexError
from .token_types import TT, Tok

__all__ = ["Lexer", "LexError", "TT", "Tok", "tokenize"]

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    NC program lexer.

    Nothing is skipped: whitespace runs, comments and line terminators are
    emitted as tokens so the parser can keep them on the tree.
    """

    # Single-character punctuation
    PUNCTUATION = {
        '.': TT.DOT,
        '*': TT.STAR,
        '-': TT.MINUS,
        '%': TT.PERCENT,
    }

    def __init__(self, source: str):
        self.source = source
        # Character index into source, and the matching UTF-8 byte offset
        self.pos = 0
        self.offset = 0
        self.line = 1
        self.column = 1
        # Start of the token being scanned
        self.tok_pos = 0
        self.tok_line = 1
        self.tok_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        return list(self.stream())

    def stream(self) -> Iterator[Tok]:
        """Yield tokens one at a time; errors surface when reached."""
        while self.pos < len(self.source):
            yield self.scan_token()

        self.mark()
        yield self.make(TT.EOF, '')

    def scan_token(self) -> Tok:
        """Scan next token"""
        self.mark()
        ch = self.peek()

        if ch in ('\n', '\r'):
            return self.scan_newline()

        if ch in (' ', '\t'):
            return self.scan_whitespace()

        if ch == ';':
            return self.scan_comment()

        if ch == '(':
            return self.scan_inline_comment()

        if ch == '"':
            return self.scan_string()

        if ch.isascii() and ch.isdigit():
            return self.scan_run(TT.INTEGER, _is_digit)

        if ch.isascii() and ch.isalpha():
            return self.scan_run(TT.LETTERS, _is_letter)

        token_type = self.PUNCTUATION.get(ch)
        if token_type is not None:
            return self.make(token_type, self.advance())

        raise self.error(f"Unexpected character {ch!r}")

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_newline(self) -> Tok:
        """Scan newline: CRLF, LF or a lone CR"""
        if self.peek() == '\r' and self.peek(1) == '\n':
            value = self.advance(2)
        else:
            value = self.advance()

        tok = self.make(TT.NEWLINE, value)
        self.line += 1
        self.column = 1
        return tok

    def scan_whitespace(self) -> Tok:
        return self.scan_run(TT.WHITESPACE, lambda ch: ch in (' ', '\t'))

    def scan_comment(self) -> Tok:
        """Scan comment until end of line"""
        return self.scan_run(TT.COMMENT, lambda ch: ch not in ('\n', '\r'))

    def scan_inline_comment(self) -> Tok:
        """Scan inline comment: (...) on a single line"""
        value = self.scan_delimited(')')
        if value is None:
            raise self.error("Unterminated inline comment")
        return self.make(TT.INLINE_COMMENT, value)

    def scan_string(self) -> Tok:
        """Scan string literal: "..." on a single line"""
        value = self.scan_delimited('"')
        if value is None:
            raise self.error("Unterminated string")
        return self.make(TT.STRING, value)

    def scan_delimited(self, closer: str):
        """Consume an opener, content and ``closer``; None if the line ends first."""
        end = self.pos + 1
        while end < len(self.source) and self.source[end] not in (closer, '\n', '\r'):
            end += 1

        if end >= len(self.source) or self.source[end] != closer:
            return None

        return self.advance(end + 1 - self.pos)

    def scan_run(self, token_type: TT, accept) -> Tok:
        end = self.pos
        while end < len(self.source) and accept(self.source[end]):
            end += 1
        return self.make(token_type, self.advance(end - self.pos))

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        self.pos += len(result)
        self.offset += len(result.encode("utf-8"))
        self.column += len(result)
        return result

    def mark(self) -> None:
        self.tok_pos = self.offset
        self.tok_line = self.line
        self.tok_column = self.column

    def make(self, token_type: TT, value: str) -> Tok:
        """Build a token starting at the last mark"""
        return Tok(
            type=token_type,
            value=value,
            pos=self.tok_pos,
            line=self.tok_line,
            column=self.tok_column,
        )

    def error(self, message: str) -> LexError:
        """Error located at the character the current token starts with."""
        width = len(self.peek().encode("utf-8")) if self.pos < len(self.source) else 1
        return LexError(message, self.tok_pos, self.tok_line, self.tok_column, width)


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
