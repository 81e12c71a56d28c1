"""
Token Types for the G-code parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - one per lexical class of an NC program line"""

    # Layout
    NEWLINE = auto()
    WHITESPACE = auto()

    # Punctuation
    DOT = auto()
    STAR = auto()  # checksum marker
    MINUS = auto()
    PERCENT = auto()  # program delimiter

    # Literals
    STRING = auto()
    INTEGER = auto()
    LETTERS = auto()

    # Comments
    INLINE_COMMENT = auto()  # (...)
    COMMENT = auto()  # ; to end of line

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Tok:
    """Token with position info

    ``pos`` and ``end`` are UTF-8 byte offsets; ``column`` counts characters.
    """

    type: TT
    value: str
    pos: int = 0
    line: int = 1
    column: int = 1

    @property
    def end(self) -> int:
        return self.pos + len(self.value.encode("utf-8"))

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
