from __future__ import annotations

import logging
import os
from typing import List

from .errors import GcodeError

DEBUG_PY_TRACE_ENV = "GCODE_CST_DEBUG_PY_TRACE"
LOG_LEVEL_ENV = "GCODE_CST_LOG_LEVEL"

_TRUTHY = ("1", "true", "yes", "on")


def debug_py_trace_enabled() -> bool:
    """Whether front-ends should print Python tracebacks for errors."""
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in _TRUTHY


def log_level_from_env(default: int = logging.WARNING) -> int:
    """Resolve GCODE_CST_LOG_LEVEL (a level name or number) to a logging level."""
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    return default


def line_bounds(source: str, pos: int) -> tuple[int, int, int]:
    """Return (line_number, line_start, line_end) for the line holding byte offset ``pos``."""
    data = source.encode("utf-8")
    pos = min(max(pos, 0), len(data))
    start = pos
    while start > 0 and data[start - 1] not in b"\r\n":
        start -= 1
    end = pos
    while end < len(data) and data[end] not in b"\r\n":
        end += 1

    line_no = 1
    idx = 0
    while idx < start:
        ch = data[idx:idx + 1]
        if ch == b"\r" and data[idx + 1:idx + 2] == b"\n":
            idx += 1
        if ch in (b"\r", b"\n"):
            line_no += 1
        idx += 1
    return line_no, start, end


def render_diagnostic(source: str, error: GcodeError) -> str:
    """Format ``error`` with its source line and a caret underline of its span."""
    span = error.span
    data = source.encode("utf-8")
    line_no, start, end = line_bounds(source, span.start)

    text = data[start:end].decode("utf-8")
    prefix = data[start:span.start].decode("utf-8")
    # Spans may run past the line (or past the end of input)
    marked = data[span.start:max(span.start, min(span.end, end))].decode("utf-8")
    column = len(prefix) + 1
    width = max(1, len(marked))

    gutter = f"{line_no} | "
    lines: List[str] = [
        f"error: {error.message}",
        f"  --> line {line_no}, col {column}",
        gutter + text,
        " " * (len(gutter) + column - 1) + "^" * width,
    ]
    return "\n".join(lines)
