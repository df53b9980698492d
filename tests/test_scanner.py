from __future__ import annotations

from typing import List

from so_long_engine.buffer import BufferDocument, CommentSyntax, skip_comments_forward
from so_long_engine.engine import detect_long_line

HASH = CommentSyntax(line_starts=("#",))
C_STYLE = CommentSyntax(line_starts=("//",), blocks=(("/*", "*/"),))


class CountingDocument(BufferDocument):
    """Records every row read through ``get_line``."""

    def get_line(self, index: int) -> str:
        self.__dict__.setdefault("reads", []).append(index)
        return BufferDocument.get_line(self, index)

    @property
    def reads(self) -> List[int]:
        return self.__dict__.get("reads", [])


def make_document(*lines: str) -> BufferDocument:
    return BufferDocument.from_lines(lines)


def test_short_lines_are_not_detected() -> None:
    document = make_document(*(["x" * 10] * 6))

    assert detect_long_line(document, 5, 250) is False


def test_first_line_over_threshold_is_detected() -> None:
    document = make_document("x" * 300, "short")

    assert detect_long_line(document, 5, 250) is True


def test_line_equal_to_threshold_is_not_excessive() -> None:
    document = make_document("x" * 250)

    assert detect_long_line(document, 5, 250) is False


def test_long_line_past_the_window_is_ignored() -> None:
    document = CountingDocument.from_lines(["x" * 10] * 5 + ["x" * 1000])

    assert detect_long_line(document, 5, 250) is False
    assert max(document.reads) == 4


def test_scan_stops_at_first_long_line() -> None:
    document = CountingDocument.from_lines(["short", "x" * 500] + ["y" * 10] * 20)

    assert detect_long_line(document, 5, 250) is True
    assert max(document.reads) == 1


def test_empty_buffer_is_never_long() -> None:
    assert detect_long_line(BufferDocument.from_text(""), 5, 0) is False
    assert detect_long_line(BufferDocument.from_text("\n\n\n"), 5, 0) is False


def test_fewer_lines_than_window() -> None:
    document = BufferDocument.from_text("a\nb\n")

    assert detect_long_line(document, 50, 250) is False
    assert detect_long_line(document, 50, 0) is True


def test_zero_window_returns_false_without_reading() -> None:
    document = CountingDocument.from_lines(["x" * 1000])

    assert detect_long_line(document, 0, 10) is False
    assert document.reads == []


def test_zero_threshold_flags_any_non_empty_line() -> None:
    assert detect_long_line(make_document("", "", "a"), 5, 0) is True


def test_leading_comments_are_skipped() -> None:
    document = make_document("# " + "c" * 400, "", "import os", "print(os)")

    assert detect_long_line(document, 5, 250, syntax=HASH) is False
    assert detect_long_line(document, 5, 250) is True


def test_window_counts_from_first_code_line() -> None:
    comments = ["# header"] * 10
    document = make_document(*comments, "a = 1", "b = 2", "c" * 300)

    assert detect_long_line(document, 3, 250, syntax=HASH) is True
    assert detect_long_line(document, 2, 250, syntax=HASH) is False


def test_first_line_is_measured_from_the_skip_point() -> None:
    document = make_document("    " + "x" * 10)

    assert detect_long_line(document, 1, 10) is False
    assert detect_long_line(document, 1, 9) is True


def test_block_comment_spanning_lines_is_skipped() -> None:
    document = make_document("/* licence", " * " + "x" * 500, " */", "var a = 1;")

    assert detect_long_line(document, 5, 250, syntax=C_STYLE) is False


def test_custom_skip_primitive_is_used() -> None:
    document = make_document("x" * 300, "short")

    def skip_first_line(doc: BufferDocument, syntax: object) -> tuple[int, int]:
        del doc, syntax
        return (1, 0)

    assert detect_long_line(document, 5, 250, skip=skip_first_line) is False


def test_skip_comments_forward_positions() -> None:
    assert skip_comments_forward(make_document("", "  # c", "  x"), HASH) == (2, 2)
    assert skip_comments_forward(make_document("/* a */ b"), C_STYLE) == (0, 8)
    assert skip_comments_forward(make_document("/* open", "still"), C_STYLE) == (1, 5)
    assert skip_comments_forward(make_document("# only"), None) == (0, 0)
