"""Interactive REPL for inspecting G-code parse trees, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .api import parse_snippet
from .errors import GcodeError
from .printer import pretty, to_source
from .repl_highlight import GcodeHighlighter
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled, render_diagnostic

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/echo": ("Toggle printing the rebuilt source under each tree", "[on|off]"),
}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class ReplState:
    def __init__(self) -> None:
        self.echo = False


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _toggle(arg: str, current: bool) -> bool | None:
    """Resolve an on/off argument; empty toggles, anything else is None."""
    arg = arg.lower()
    if arg in _ON:
        return True
    if arg in _OFF:
        return False
    if arg == "":
        return not current
    return None


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        enabled = _toggle(arg, debug_py_trace_enabled())
        if enabled is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        if enabled:
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)

        state_name = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_name}")
        return True

    if cmd == "/echo":
        enabled = _toggle(arg, state.echo)
        if enabled is None:
            print("Usage: /echo [on|off]", file=sys.stderr)
            return True

        state.echo = enabled
        print(f"Echo: {'on' if enabled else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def evaluate(text: str, state: ReplState) -> str:
    """Parse ``text`` as a snippet and render the output shown for it."""
    doc = parse_snippet(text)
    out = pretty(doc)
    if state.echo:
        out += to_source(doc) + "\n"
    return out


def repl() -> None:
    """Interactive read-parse-print loop with prompt_toolkit."""
    state = ReplState()
    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        lines = buf.text.split("\n")

        # Single line, or an empty last line of a block => accept.
        if len(lines) == 1 and not buf.text.endswith("\\"):
            buf.validate_and_handle()
            return

        if lines[-1].strip() == "":
            buf.text = "\n".join(lines[:-1])
            buf.cursor_position = len(buf.text)
            buf.validate_and_handle()
            return

        buf.insert_text("\n")

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=GcodeHighlighter(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("gcode-cst repl: Ctrl-D to exit, / for commands, end a line with \\ for more lines")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        # A trailing backslash only asks for a continuation line.
        text = text[:-1] if text.endswith("\\") else text
        text = text.replace("\\\n", "\n")

        try:
            sys.stdout.write(evaluate(text, state))
        except GcodeError as exc:
            print(render_diagnostic(text, exc), file=sys.stderr)
            if debug_py_trace_enabled():
                print("\nPython traceback:", file=sys.stderr)
                print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")


def main() -> None:
    repl()


if __name__ == "__main__":
    main()
