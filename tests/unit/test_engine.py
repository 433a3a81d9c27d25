"""Tests for the analysis pass."""

import pytest

from tantrums import analyze_source
from tantrums.analysis import rules
from tantrums.analysis.context import Mode, Reporter, detect_mode
from tantrums.analysis.engine import Analyzer, split_lines
from tantrums.analysis.lexstate import scan_document
from tantrums.analysis.rules import LintConfiguration
from tantrums.utils.diagnostics import Severity
from tantrums.utils.errors import AnalysisError


class TestAnalyzer:
    """Test full passes over documents."""

    def test_clean_program(self, clean_program) -> None:
        """Test that a well-formed program yields no findings."""
        assert analyze_source(clean_program) == []

    def test_empty_document(self) -> None:
        """Test that an empty document yields no findings."""
        assert analyze_source("") == []

    def test_idempotent(self, clean_program) -> None:
        """Test that the same text always yields the same diagnostics."""
        source = clean_program + "\nint unused = 1;\nfoo(1)\nx = (2;"
        analyzer = Analyzer()

        first = analyzer.analyze(source)
        assert first
        assert analyzer.analyze(source) == first
        assert Analyzer().analyze(source) == first

    def test_crlf_line_endings(self) -> None:
        """Test that CRLF documents are split like LF ones."""
        diagnostics = analyze_source("x = 1\r\ny = 2;\r\nprint(x + y);\r\n")
        semicolons = [d for d in diagnostics if d.name == "missing-semicolon"]

        assert len(semicolons) == 1
        assert (semicolons[0].line, semicolons[0].start_col) == (0, 5)

    def test_configuration_levels(self) -> None:
        """Test that configured levels change severity or drop findings."""
        config = LintConfiguration()
        config.deny("missing-semicolon")
        diagnostics = analyze_source("x = 1\nprint(x);", config)
        assert [d.severity for d in diagnostics if d.name == "missing-semicolon"] == [
            Severity.ERROR
        ]

        config.allow("missing-semicolon")
        diagnostics = analyze_source("x = 1\nprint(x);", config)
        assert not [d for d in diagnostics if d.name == "missing-semicolon"]

    def test_in_source_directive(self) -> None:
        """Test that a comment directive applies to its document only."""
        analyzer = Analyzer()
        source = "// tantrums: allow(unused-variable)\nint x = 5;"

        assert not [d for d in analyzer.analyze(source) if d.name == "unused-variable"]
        assert [d.name for d in analyzer.analyze("int x = 5;")] == ["unused-variable"]

    def test_check_failure(self) -> None:
        """Test that a failing check abandons the pass with an AnalysisError."""

        def check_explodes(ctx, report) -> None:
            raise RuntimeError("kaboom")

        analyzer = Analyzer(checks=[check_explodes])

        with pytest.raises(AnalysisError) as excinfo:
            analyzer.analyze("x = 1;")

        assert excinfo.value.check == "check_explodes"
        assert str(excinfo.value) == "check 'check_explodes' failed: kaboom"
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_analysis_error_fields(self) -> None:
        """Test that an AnalysisError carries only the check and the path."""
        error = AnalysisError("boom", check="check_conditions", path="a.42AHH")

        assert (error.message, error.check, error.path) == ("boom", "check_conditions", "a.42AHH")
        assert not hasattr(error, "line")
        assert str(error) == "[a.42AHH] check 'check_conditions' failed: boom"

    def test_custom_check_list(self) -> None:
        """Test that an analyzer runs only the checks it was given."""

        def check_every_line(ctx, report) -> None:
            for line in ctx.lines:
                report.emit(rules.EMPTY_BLOCK, line.index, 0, 0)

        diagnostics = Analyzer(checks=[check_every_line]).analyze("a\nb")
        assert [d.line for d in diagnostics] == [0, 1]


class TestSplitLines:
    """Test line splitting."""

    def test_mixed_endings(self) -> None:
        """Test LF and CRLF in one document."""
        assert split_lines("a\r\nb\nc") == ["a", "b", "c"]

    def test_trailing_newline(self) -> None:
        """Test that a trailing newline yields a final empty line."""
        assert split_lines("a\n") == ["a", ""]


class TestMode:
    """Test mode detection."""

    def test_default(self) -> None:
        """Test that documents without a directive use both."""
        assert detect_mode(scan_document(["x = 1;"])) == Mode.BOTH

    def test_first_valid_wins(self) -> None:
        """Test that the first valid directive selects the mode."""
        lines = scan_document(["#mode bogus;", "#mode dynamic;", "#mode static;"])
        assert detect_mode(lines) == Mode.DYNAMIC

    def test_context(self, context) -> None:
        """Test that the context carries the mode."""
        ctx = context("#mode dynamic;\nx = 1;")

        assert ctx.mode == Mode.DYNAMIC
        assert not ctx.checks_types


class TestReporter:
    """Test diagnostic emission."""

    def test_allowed_rule_is_dropped(self) -> None:
        """Test that allowed rules produce nothing."""
        config = LintConfiguration()
        config.allow("division-by-zero")
        reporter = Reporter(config)
        reporter.emit(rules.DIVISION_BY_ZERO, 0, 1, 2)

        assert reporter.diagnostics == []

    def test_emit(self) -> None:
        """Test that a diagnostic carries the rule's identity and message."""
        reporter = Reporter()
        reporter.emit(rules.UNFREED_ALLOCATION, 3, 4, 5, "p")
        diagnostic = reporter.diagnostics[0]

        assert (diagnostic.line, diagnostic.start_col, diagnostic.end_col) == (3, 4, 5)
        assert diagnostic.code == "W0404"
        assert diagnostic.name == "unfreed-allocation"
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.suggestion == "call free(p) once the pointer is no longer needed"

    def test_suggestion_override(self) -> None:
        """Test that an explicit suggestion replaces the rule's own."""
        reporter = Reporter()
        reporter.emit(rules.UNDEFINED_FUNCTION, 0, 0, 3, "foo", suggestion="did you mean 'for'?")

        assert reporter.diagnostics[0].suggestion == "did you mean 'for'?"
