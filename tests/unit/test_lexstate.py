"""Tests for the line scanner."""

from tantrums.analysis.lexstate import (
    EscapeSequence,
    LexState,
    Region,
    StringLiteral,
    scan_document,
    scan_line,
    strip_line,
)


class TestStrings:
    """Test string literal tracking."""

    def test_terminated_string(self) -> None:
        """Test that a closed literal is recorded with its quotes."""
        line = scan_line('x = "abc";')

        assert line.strings == (StringLiteral(4, 9, True),)
        assert line.stripped == 'x = "   ";'
        assert not line.has_unterminated_string

    def test_unterminated_string_runs_to_end_of_line(self) -> None:
        """Test that an open literal ends at the line length."""
        line = scan_line('x = "abc')

        assert line.strings == (StringLiteral(4, 8, False),)
        assert line.has_unterminated_string

    def test_unterminated_string_does_not_carry_over(self) -> None:
        """Test that the next line starts outside any string."""
        lines = scan_document(['x = "abc', "y = 1;"])

        assert lines[0].end_state == LexState()
        assert lines[1].stripped == "y = 1;"
        assert lines[1].strings == ()

    def test_escaped_quote_does_not_close(self) -> None:
        """Test that a backslash-quote pair stays inside the literal."""
        line = scan_line(r's = "a\"b";')

        assert line.strings == (StringLiteral(4, 10, True),)
        assert line.escapes == (EscapeSequence(6, '"'),)

    def test_escape_positions(self) -> None:
        """Test that escape sequences report the backslash column."""
        line = scan_line(r's = "a\qb";')

        assert line.escapes == (EscapeSequence(6, "q"),)

    def test_trailing_backslash(self) -> None:
        """Test that a backslash at end of line yields an empty escape."""
        line = scan_line('s = "abc\\')

        assert line.escapes == (EscapeSequence(8, ""),)
        assert line.has_unterminated_string

    def test_string_content_is_blanked_but_keeps_columns(self) -> None:
        """Test that stripped text has the same length as the raw text."""
        text = 'print("(oops") ;'
        line = scan_line(text)

        assert len(line.stripped) == len(text)
        assert "(" not in line.stripped[7:13]


class TestComments:
    """Test comment tracking."""

    def test_line_comment(self) -> None:
        """Test that a line comment is blanked and captured."""
        line = scan_line('y = 1; // note "q"')

        assert line.stripped.rstrip() == "y = 1;"
        assert line.comment == '// note "q"'
        assert line.strings == ()
        assert line.region_at(7) == Region.LINE_COMMENT

    def test_comment_marker_inside_string(self) -> None:
        """Test that // inside a literal does not start a comment."""
        line = scan_line('s = "http://x";')

        assert line.comment == ""
        assert line.stripped.endswith('";')

    def test_block_comment_spans_lines(self) -> None:
        """Test that block comment state carries to the next line."""
        lines = scan_document(["a = 1; /* start", "still */ b = 2;"])

        assert lines[0].end_state.in_block_comment
        assert lines[0].stripped.rstrip() == "a = 1;"
        assert lines[1].stripped == "        " + " b = 2;"
        assert not lines[1].end_state.in_block_comment

    def test_block_comment_hides_quotes(self) -> None:
        """Test that quotes inside a block comment open no string."""
        line = scan_line('/* "not a string */ x = 1;')

        assert line.strings == ()
        assert line.stripped.strip() == "x = 1;"

    def test_region_past_end_is_code(self) -> None:
        """Test that columns past the end of a line are code."""
        line = scan_line("x")

        assert line.region_at(10) == Region.CODE


class TestStripLine:
    """Test the single-line convenience wrapper."""

    def test_strip_line(self) -> None:
        """Test that strip_line blanks literals and comments."""
        assert strip_line('f("a, b"); // c') == 'f("    ");     '
