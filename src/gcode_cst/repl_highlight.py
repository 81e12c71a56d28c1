"""prompt_toolkit lexer for live G-code syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import Lexer as GcodeLexer, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "command": "bold ansicyan",
    "word": "ansiblue",
    "number": "ansimagenta",
    "string": "ansigreen",
    "checksum": "ansiyellow",
    "delimiter": "bold ansiyellow",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.INTEGER: "number",
    TT.DOT: "number",
    TT.MINUS: "number",
    TT.STRING: "string",
    TT.STAR: "checksum",
    TT.PERCENT: "delimiter",
    TT.COMMENT: "comment",
    TT.INLINE_COMMENT: "comment",
}

# Letters that name a command rather than a parameter.
_COMMAND_LETTERS = {"G", "M", "T", "O", "N"}


def _group(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]

    if tok.type == TT.LETTERS:
        return "command" if tok.value.upper() in _COMMAND_LETTERS else "word"

    # Checksum digits share the marker's colour.
    if tok.type == TT.INTEGER and idx > 0 and tokens[idx - 1].type == TT.STAR:
        return "checksum"

    return _TT_GROUP.get(tok.type, "")


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = GcodeLexer(text).tokenize()
    except LexError as exc:
        # Style the good prefix as plain text and flag the rest.
        pos = exc.column - 1
        return [("", text[:pos]), (GROUP_STYLE["error"], text[pos:])]

    result: StyleAndTextTuples = []
    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF or not tok.value:
            continue
        style = GROUP_STYLE.get(_group(tokens, i), "")
        result.append((style, tok.value))

    return result if result else [("", text)]


class GcodeHighlighter(Lexer):
    """prompt_toolkit Lexer that highlights NC source using the package lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
