"""Tests for diagnostic records and rendering."""

from tantrums.utils.diagnostics import (
    Diagnostic,
    Severity,
    levenshtein_distance,
    sort_key,
    suggest_similar,
)


def _diagnostic(**overrides) -> Diagnostic:
    fields = {
        "line": 1,
        "start_col": 4,
        "end_col": 10,
        "message": "'add' expects 2 arg(s) but got 1.",
        "severity": Severity.ERROR,
        "code": "E0101",
        "name": "wrong-argument-count",
    }
    fields.update(overrides)
    return Diagnostic(**fields)


class TestDiagnostic:
    """Test the diagnostic record."""

    def test_str_is_one_based(self) -> None:
        """Test the compact single-line form."""
        assert str(_diagnostic()) == "2:5: error[E0101]: 'add' expects 2 arg(s) but got 1."

    def test_to_dict(self) -> None:
        """Test the JSON form keeps 0-based positions."""
        data = _diagnostic(suggestion="check the call").to_dict()

        assert data["line"] == 1
        assert data["start_col"] == 4
        assert data["severity"] == "error"
        assert data["suggestion"] == "check the call"

    def test_is_error(self) -> None:
        """Test the severity shortcut."""
        assert _diagnostic().is_error
        assert not _diagnostic(severity=Severity.WARNING).is_error

    def test_zero_width_length(self) -> None:
        """Test that zero-width spans still have length one for display."""
        assert _diagnostic(start_col=5, end_col=5).length == 1

    def test_render(self) -> None:
        """Test the Rust-style terminal layout."""
        source = "tantrum add(a, b) { return a + b; }\n    add(1);"
        rendered = _diagnostic(suggestion="pass 2 arguments").render(
            source, "main.42AHH", use_color=False
        )
        lines = rendered.split("\n")

        assert lines[0] == "error[E0101]: 'add' expects 2 arg(s) but got 1."
        assert lines[1] == "  --> main.42AHH:2:5"
        assert lines[3] == "  2 |     add(1);"
        assert lines[4] == "    |     ^^^^^^"
        assert lines[-1] == "   = help: pass 2 arguments"

    def test_sort_key(self) -> None:
        """Test ordering by line then column."""
        later = _diagnostic(line=3, start_col=0)
        earlier = _diagnostic(line=1, start_col=9)
        assert sorted([later, earlier], key=sort_key) == [earlier, later]


class TestSuggestions:
    """Test name similarity helpers."""

    def test_levenshtein(self) -> None:
        """Test edit distances."""
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_suggest_similar(self) -> None:
        """Test that the closest candidates come first."""
        assert suggest_similar("prnt", ["print", "input", "len"]) == ["print"]
        assert suggest_similar("zzz", ["print", "input"]) == []
