from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from gcode_cst.api import parse_file, parse_line, parse_snippet
from gcode_cst.errors import (
    ChecksumRangeError,
    GcodeError,
    IntegerFormatError,
    LexError,
    ParseError,
    RationalFormatError,
)
from gcode_cst.nodes import Field, Line
from gcode_cst.token_types import TT, Tok

TokenSpec = Tuple[TT, str]


def make_tokens(specs: Sequence[TokenSpec], eof: bool = True) -> List[Tok]:
    """Lay hand-classified tokens end to end, as a tokenizer would emit them."""
    tokens: List[Tok] = []
    pos = 0
    for token_type, value in specs:
        tokens.append(Tok(token_type, value, pos, 1, pos + 1))
        pos += len(value.encode("utf-8"))
    if eof:
        tokens.append(Tok(TT.EOF, "", pos, 1, pos + 1))
    return tokens


def source_of(tokens: Iterable[Tok]) -> str:
    return "".join(tok.value for tok in tokens)


def only_field(source: str) -> Field:
    """Parse a one-field line and return the field."""
    line = parse_line(source)
    assert len(line.fields) == 1, f"expected one field in {source!r}, got {line.fields!r}"
    return line.fields[0]


def line_items(line: Line) -> List[str]:
    """Node kinds of a line's items, in order."""
    return [type(item).__name__ for item in line.items]
