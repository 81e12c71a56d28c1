from __future__ import annotations

import pytest

from gcode_cst.nodes import Checksum, Comment, Field, InlineComment, Whitespace
from gcode_cst.span import Span
from gcode_cst.values import Integer
from tests.support.harness import ParseError, line_items, parse_line


def test_inline_comment_between_fields_is_kept_in_place() -> None:
    line = parse_line("G1 (note) X1")

    assert line_items(line) == [
        "Field", "Whitespace", "InlineComment", "Whitespace", "Field",
    ]
    assert [f.letters for f in line.fields] == ["G", "X"]

    comment = line.items[2]
    assert isinstance(comment, InlineComment)
    assert comment.inner == "(note)"
    assert comment.body == "note"
    assert comment.position == 3
    assert line.items[1] == Whitespace(" ", 2)
    assert line.items[3] == Whitespace(" ", 9)

    # Only trivia after the last field counts as trailing
    assert line.whitespace is None
    assert line.inline_comment == ()


def test_full_line_shape() -> None:
    line = parse_line("N10 G1 X1.5 *57 ; move (fast)")

    assert [f.letters for f in line.fields] == ["N", "G", "X"]
    assert line.checksum == Checksum(57, Span(12, 15))
    assert line.comment == Comment("; move (fast)", 16)
    assert line.comment.body == " move (fast)"
    assert line.span == Span(0, 29)


def test_trailing_whitespace_and_inline_comments() -> None:
    line = parse_line("G0 X1 \t(a)(b) ")

    assert line.whitespace == Whitespace(" \t", 5)
    assert line.inline_comment == (InlineComment("(a)", 7), InlineComment("(b)", 10))
    assert line_items(line)[-1] == "Whitespace"
    assert line.span == Span(0, 14)


def test_trivia_only_line() -> None:
    line = parse_line("  (just a note)")

    assert line.fields == ()
    assert line.whitespace == Whitespace("  ", 0)
    assert line.inline_comment == (InlineComment("(just a note)", 2),)
    assert not line.is_blank


def test_leading_trivia_is_not_trailing() -> None:
    line = parse_line(" (a) G0")

    assert line_items(line) == ["Whitespace", "InlineComment", "Whitespace", "Field"]
    assert line.whitespace is None
    assert line.inline_comment == ()


def test_comment_then_trailing_nothing() -> None:
    line = parse_line("G0;x")

    assert line.comment == Comment(";x", 2)
    assert line.whitespace is None


def test_empty_line() -> None:
    line = parse_line("")

    assert line.items == ()
    assert line.is_blank
    assert line.span == Span(0, 0)


def test_whitespace_only_line_is_blank() -> None:
    line = parse_line("   ")

    assert line.is_blank
    assert line.whitespace == Whitespace("   ", 0)


def test_packed_fields() -> None:
    line = parse_line("G1X2Y-3.5")

    assert [f.text for f in line.fields] == ["G1", "X2", "Y-3.5"]
    assert [f.value for f in line.fields][:2] == [Integer(1), Integer(2)]


def test_checksum_only() -> None:
    line = parse_line("*0")
    assert line.checksum == Checksum(0, Span(0, 2))
    assert line.fields == ()


def test_children_inside_line_span() -> None:
    line = parse_line("  N1 G1 (x) X-.5*9 ;c")

    for item in line.items:
        assert line.span.contains(item.span)


def test_items_are_in_source_order() -> None:
    line = parse_line("G1 (a) X1 (b) *3 (c) ;d")
    positions = [item.span.start for item in line.items]
    assert positions == sorted(positions)
    assert isinstance(line.items[-1], Comment)


@pytest.mark.parametrize(
    "source, message, span",
    [
        pytest.param("*1 X1", "after the end of the line's fields", Span(3, 4), id="field-after-checksum"),
        pytest.param("G0 *1 *2", "Duplicate checksum", Span(6, 7), id="second-checksum"),
        pytest.param("X", "has no value", Span(0, 1), id="letters-at-end"),
        pytest.param("X 10", "has no value", Span(0, 1), id="space-before-value"),
        # The bundled lexer never hands over a non-digit fractional run: "a"
        # starts a new field, so the failure is the missing value after it
        pytest.param("X1.a", "has no value", Span(3, 4), id="letters-after-dot"),
        pytest.param("X-", "Expected digits after '-'", Span(2, 2), id="dangling-minus"),
        pytest.param("X-.", "Expected digits after '.'", Span(3, 3), id="dangling-dot"),
        pytest.param("*", "Expected checksum digits", Span(1, 1), id="checksum-without-digits"),
        pytest.param("G0 %", "Unexpected PERCENT", Span(3, 4), id="percent-mid-line"),
        pytest.param("G0 12", "Unexpected INTEGER", Span(3, 5), id="stray-digits"),
        pytest.param("G0 .", "Unexpected DOT", Span(3, 4), id="stray-dot"),
        pytest.param("G0\nG1", "Unexpected end of line", Span(2, 3), id="newline-in-line"),
    ],
)
def test_line_errors(source: str, message: str, span: Span) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_line(source)

    err = exc_info.value
    assert message in err.message
    assert err.span == span


def test_fields_are_field_nodes() -> None:
    line = parse_line("M3 S1000")
    assert all(isinstance(f, Field) for f in line.fields)
    assert line.fields[1].value == Integer(1000)


def test_spans_count_bytes_after_non_ascii_comment() -> None:
    source = "(Ø drill) X1 ; 90°\n"
    line = parse_line(source.rstrip("\n"))
    data = source.encode("utf-8")

    field = line.fields[0]
    assert field.span == Span(11, 13)
    assert data[field.span.start:field.span.end] == b"X1"
    assert field.span.slice(source) == "X1"
    assert line.items[0].span == Span(0, 10)
    assert line.comment.span == Span(14, 20)
    assert line.span == Span(0, len(data) - 1)
