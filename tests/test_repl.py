from __future__ import annotations

import pytest
from prompt_toolkit.document import Document

from gcode_cst.repl import ReplState, _normalize, evaluate, handle_slash
from gcode_cst.repl_highlight import GROUP_STYLE, GcodeHighlighter, highlight_line
from gcode_cst.utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled
from tests.support.harness import ParseError


def test_highlight_groups() -> None:
    assert highlight_line("G1 X-1.5 *12 ;c") == [
        (GROUP_STYLE["command"], "G"),
        (GROUP_STYLE["number"], "1"),
        ("", " "),
        (GROUP_STYLE["word"], "X"),
        (GROUP_STYLE["number"], "-"),
        (GROUP_STYLE["number"], "1"),
        (GROUP_STYLE["number"], "."),
        (GROUP_STYLE["number"], "5"),
        ("", " "),
        (GROUP_STYLE["checksum"], "*"),
        (GROUP_STYLE["checksum"], "12"),
        ("", " "),
        (GROUP_STYLE["comment"], ";c"),
    ]


def test_highlight_marks_lex_error_tail() -> None:
    assert highlight_line("G1 X#1") == [("", "G1 X"), (GROUP_STYLE["error"], "#1")]


def test_highlight_empty_line() -> None:
    assert highlight_line("") == [("", "")]


def test_highlighter_lines() -> None:
    get_line = GcodeHighlighter().lex_document(Document('%\nM117 P"x"'))

    assert get_line(0) == [(GROUP_STYLE["delimiter"], "%")]
    assert get_line(1)[-1] == (GROUP_STYLE["string"], '"x"')
    assert get_line(5) == [("", "")]


def test_evaluate_prints_tree() -> None:
    state = ReplState()
    assert evaluate("G0", state) == (
        "snippet @0..2\n"
        "  line @0..2\n"
        "    field G integer 0 @0..2\n"
    )


def test_evaluate_with_echo() -> None:
    state = ReplState()
    state.echo = True
    out = evaluate("G0 (a)\nX1", state)
    assert out.endswith("G0 (a)\nX1\n")


def test_evaluate_raises_parse_errors() -> None:
    with pytest.raises(ParseError):
        evaluate("X", ReplState())


def test_echo_command(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()

    assert handle_slash("/echo", state)
    assert state.echo
    assert handle_slash("/echo off", state)
    assert not state.echo
    assert handle_slash("/echo maybe", state)
    assert not state.echo

    captured = capsys.readouterr()
    assert captured.out == "Echo: on\nEcho: off\n"
    assert "Usage: /echo" in captured.err


def test_py_traceback_command(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)
    state = ReplState()

    assert handle_slash("/py-traceback on", state)
    assert debug_py_trace_enabled()
    assert handle_slash("/py-traceback", state)
    assert not debug_py_trace_enabled()

    assert capsys.readouterr().out == "Python traceback: on\nPython traceback: off\n"


def test_non_commands_fall_through(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()

    assert not handle_slash("G0 X1", state)
    assert handle_slash("/nope", state)
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("G0\u200b X1\ufeff") == "G0 X1"


def test_highlight_error_after_non_ascii_text() -> None:
    assert highlight_line("(Ø) #1") == [("", "(Ø) "), (GROUP_STYLE["error"], "#1")]
