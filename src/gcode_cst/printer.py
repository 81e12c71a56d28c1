"""Rebuild source text from nodes, and render readable tree dumps."""

from __future__ import annotations

from typing import List

from .nodes import (
    Checksum,
    Comment,
    Document,
    Field,
    File,
    InlineComment,
    Line,
    Newline,
    Node,
    Whitespace,
)


def to_source(node: Node) -> str:
    """Return the text ``node`` was parsed from.

    Lines reproduce their source span exactly. Documents do too, except for a
    whitespace-only final line, which parsing does not keep.
    """
    if isinstance(node, Field):
        return node.text
    if isinstance(node, Checksum):
        # Leading zeros are implied by the width of the span
        width = len(node.span) - 1
        return f"*{node.inner:0{width}d}"
    if isinstance(node, (Whitespace, Comment, InlineComment, Newline)):
        return node.inner
    if isinstance(node, Line):
        return "".join(to_source(item) for item in node.items)
    if isinstance(node, Document):
        return _document_source(node)

    raise TypeError(f"not a syntax node: {node!r}")


def _document_source(doc: Document) -> str:
    parts: List[str] = []
    percent = isinstance(doc, File)

    if percent and doc.start_percent:
        parts.append("%")

    for line, newline in doc.lines:
        parts.append(to_source(line))
        parts.append(newline.inner)

    if doc.last_line is not None:
        parts.append(to_source(doc.last_line))

    if percent and doc.end_percent:
        parts.append("%")

    return "".join(parts)


def pretty(node: Node, indent: str = "  ") -> str:
    """Return an indented, one-node-per-line rendering of ``node``."""
    return "\n".join(_pretty(node, 0, indent)) + "\n"


def _pretty(node: Node, level: int, indent: str) -> List[str]:
    pad = indent * level

    if isinstance(node, Field):
        kind = type(node.value).__name__.lower()
        return [f"{pad}field {node.letters} {kind} {node.value} @{node.span}"]
    if isinstance(node, Checksum):
        return [f"{pad}checksum {node.inner} @{node.span}"]
    if isinstance(node, (Whitespace, Comment, InlineComment, Newline)):
        label = _snake(type(node).__name__)
        return [f"{pad}{label} {node.inner!r} @{node.span}"]
    if isinstance(node, Line):
        out = [f"{pad}line @{node.span}"]
        for item in node.items:
            out.extend(_pretty(item, level + 1, indent))
        return out
    if isinstance(node, Document):
        head = type(node).__name__.lower()
        if isinstance(node, File):
            flags = [name for name in ("start_percent", "end_percent") if getattr(node, name)]
            if flags:
                head += " " + " ".join(flags)
        out = [f"{pad}{head} @{node.span}"]
        for line, newline in node.lines:
            out.extend(_pretty(line, level + 1, indent))
            out.extend(_pretty(newline, level + 1, indent))
        if node.last_line is not None:
            out.extend(_pretty(node.last_line, level + 1, indent))
        return out

    raise TypeError(f"not a syntax node: {node!r}")


def _snake(name: str) -> str:
    out = []
    for idx, ch in enumerate(name):
        if ch.isupper() and idx:
            out.append("_")
        out.append(ch.lower())
    return "".join(out)
