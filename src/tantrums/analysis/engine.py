"""
One full analysis pass over a Tantrums document.

The pass is a pure function of the document text: split into lines, scan,
collect symbols, run every check, and return the diagnostics in order. It
performs no I/O and keeps no state between calls.

Example:
    analyzer = Analyzer()
    for diagnostic in analyzer.analyze(source):
        print(diagnostic)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Optional

from tantrums.analysis.checks import CHECKS, Check
from tantrums.analysis.context import AnalysisContext, Reporter, detect_mode
from tantrums.analysis.lexstate import scan_document
from tantrums.analysis.rules import LintConfiguration
from tantrums.analysis.symbols import SymbolCollector
from tantrums.utils.diagnostics import Diagnostic
from tantrums.utils.errors import AnalysisError

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split document text on ``\\n`` or ``\\r\\n``."""
    return _LINE_BREAK.split(text)


class Analyzer:
    """
    Runs the rule set over documents.

    Args:
        config: Rule levels and policies; in-source directives are layered
            on top of it per document
        checks: The checks to run, in order (defaults to the full rule set)
    """

    def __init__(
        self,
        config: Optional[LintConfiguration] = None,
        checks: Optional[Sequence[Check]] = None,
    ) -> None:
        self.config = config or LintConfiguration()
        self.checks: tuple[Check, ...] = tuple(checks) if checks is not None else CHECKS

    def build_context(self, text: str) -> AnalysisContext:
        """Scan a document and collect its symbols without running any check."""
        lines = tuple(scan_document(split_lines(text)))
        symbols = SymbolCollector().collect(lines)
        comments = [line.comment for line in lines if line.comment]
        return AnalysisContext(
            lines=lines,
            symbols=symbols,
            config=self.config.with_directives(comments),
            mode=detect_mode(lines),
        )

    def analyze(self, text: str) -> list[Diagnostic]:
        """
        Run one full pass.

        Args:
            text: Full document text

        Returns:
            Diagnostics, grouped by check in rule-set order

        Raises:
            AnalysisError: If a check fails unexpectedly; no partial list is
                returned in that case
        """
        try:
            ctx = self.build_context(text)
        except Exception as exc:
            raise AnalysisError(str(exc) or type(exc).__name__, check="collect") from exc

        reporter = Reporter(ctx.config)
        for check in self.checks:
            try:
                check(ctx, reporter)
            except Exception as exc:
                raise AnalysisError(str(exc) or type(exc).__name__, check=check.__name__) from exc

        logger.debug(
            "Analyzed %d line(s) in %s mode: %d diagnostic(s)",
            len(ctx.lines),
            ctx.mode.value,
            len(reporter.diagnostics),
        )
        return reporter.diagnostics


def analyze_source(text: str, config: Optional[LintConfiguration] = None) -> list[Diagnostic]:
    """
    Analyze Tantrums source code.

    This is a convenience function that runs one pass with a fresh Analyzer.

    Args:
        text: Tantrums source code string
        config: Optional lint configuration

    Returns:
        List of diagnostics found
    """
    return Analyzer(config).analyze(text)
