from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .api import parse_file, parse_snippet
from .errors import GcodeError
from .nodes import Document, File
from .printer import pretty, to_source
from .utils import debug_py_trace_enabled, log_level_from_env, render_diagnostic

logger = logging.getLogger(__name__)


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    Input is decoded as UTF-8 without newline translation.
    """

    if arg is None or arg == "-":
        return sys.stdin.buffer.read().decode("utf-8")

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_bytes().decode("utf-8")

    return arg


def summarize(doc: Document) -> str:
    lines = list(doc.iter_lines())
    fields = sum(len(line.fields) for line in lines)
    checksums = sum(1 for line in lines if line.checksum is not None)
    kind = type(doc).__name__.lower()
    return f"{kind}: {len(lines)} lines, {fields} fields, {checksums} checksums"


def run(source: str, snippet: bool = False) -> Document:
    if snippet:
        return parse_snippet(source)
    return parse_file(source)


def _build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gcode-cst",
        description="Parse an NC program into a lossless syntax tree.",
    )
    ap.add_argument("source", nargs="?", help="Path, '-' for stdin, or literal program text")
    ap.add_argument("--snippet", action="store_true", help="Parse as a fragment without %% delimiters")
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--tree", action="store_true", help="Print the syntax tree")
    mode.add_argument("--echo", action="store_true", help="Print the source rebuilt from the tree")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Log parser activity")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    level = log_level_from_env()
    if args.verbose:
        level = logging.INFO if args.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    source = _load_source(args.source)

    try:
        doc = run(source, snippet=args.snippet)
    except GcodeError as exc:
        logger.info("parse failed: %s", exc)
        print(render_diagnostic(source, exc), file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
        return 1

    if args.tree:
        sys.stdout.write(pretty(doc))
    elif args.echo:
        sys.stdout.write(to_source(doc))
    else:
        print(summarize(doc))

    if isinstance(doc, File) and doc.start_percent != doc.end_percent:
        logger.warning("program has only one of its %r delimiters", "%")

    return 0


if __name__ == "__main__":
    sys.exit(main())
