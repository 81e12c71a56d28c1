"""
Concrete syntax tree nodes.

Every node is immutable and carries enough of the original text to rebuild
the source it was parsed from. Trivia (whitespace, inline comments) is kept
alongside the significant items of a line instead of being thrown away.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from typing_extensions import TypeAlias

from .span import Span
from .values import RawValue, Value


@dataclass(frozen=True)
class _Trivia:
    inner: str
    position: int

    @property
    def span(self) -> Span:
        return Span(self.position, self.position + len(self.inner.encode("utf-8")))


@dataclass(frozen=True)
class Whitespace(_Trivia):
    pass


@dataclass(frozen=True)
class Newline(_Trivia):
    pass


@dataclass(frozen=True)
class Comment(_Trivia):
    """A ``;`` comment running to the end of the line."""

    @property
    def body(self) -> str:
        return self.inner[1:]


@dataclass(frozen=True)
class InlineComment(_Trivia):
    """A parenthesised comment that may sit between fields."""

    @property
    def body(self) -> str:
        return self.inner[1:-1]


@dataclass(frozen=True)
class Field:
    letters: str
    value: Value
    raw_value: RawValue
    span: Span

    @property
    def text(self) -> str:
        return self.letters + "".join(self.raw_value)


@dataclass(frozen=True)
class Checksum:
    inner: int
    span: Span


LineItem: TypeAlias = Union[Field, Checksum, Comment, InlineComment, Whitespace]


@dataclass(frozen=True)
class Line:
    """One physical line, without its terminator.

    ``items`` holds every child in source order. The other attributes are
    views over it: the significant items, plus the whitespace run and inline
    comments trailing the last significant item.
    """

    fields: Tuple[Field, ...]
    checksum: Optional[Checksum]
    comment: Optional[Comment]
    whitespace: Optional[Whitespace]
    inline_comment: Tuple[InlineComment, ...]
    span: Span
    items: Tuple[LineItem, ...] = ()

    @property
    def is_blank(self) -> bool:
        """True when nothing but whitespace is left on the line."""
        return not (self.fields or self.checksum or self.comment or self.inline_comment)


@dataclass(frozen=True)
class Document:
    """Lines shared by both document kinds: terminated pairs, then an optional last line."""

    lines: Tuple[Tuple[Line, Newline], ...]
    last_line: Optional[Line]
    span: Span

    def iter_lines(self):
        for line, _ in self.lines:
            yield line
        if self.last_line is not None:
            yield self.last_line


@dataclass(frozen=True)
class Snippet(Document):
    """A bare run of lines, parsed without program delimiters."""


@dataclass(frozen=True)
class File(Document):
    """A whole program, optionally bracketed by ``%`` markers."""

    start_percent: bool = False
    end_percent: bool = False


Node: TypeAlias = Union[LineItem, Newline, Line, Document]
