"""Entry points: source text (or a token stream) in, typed tree out."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .builders import build
from .lexer import Lexer
from .nodes import File, Line, Snippet
from .parser import parse_tokens
from .token_types import Tok

logger = logging.getLogger(__name__)


def _parse(source: str, tokens: Optional[Iterable[Tok]], start: str):
    if tokens is None:
        tokens = Lexer(source).stream()

    logger.debug("parsing %s from %d characters", start, len(source))
    return build(parse_tokens(tokens, start=start))


def parse_file(source: str, tokens: Optional[Iterable[Tok]] = None) -> File:
    """
    Parse a whole program, optionally wrapped in ``%`` markers.

    Args:
        source: Program text
        tokens: Token stream to parse instead of tokenizing ``source``
    """
    return _parse(source, tokens, 'file')


def parse_snippet(source: str, tokens: Optional[Iterable[Tok]] = None) -> Snippet:
    """Parse a fragment of lines that carries no program delimiters."""
    return _parse(source, tokens, 'snippet')


def parse_line(source: str, tokens: Optional[Iterable[Tok]] = None) -> Line:
    """Parse exactly one line; a line terminator is an error."""
    return _parse(source, tokens, 'line')

