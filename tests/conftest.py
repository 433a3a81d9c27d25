"""
Pytest configuration and shared fixtures for Tantrums tests.
"""

import textwrap

import pytest

from tantrums.analysis.context import AnalysisContext
from tantrums.analysis.engine import Analyzer
from tantrums.analysis.lexstate import ScannedLine, scan_document
from tantrums.analysis.rules import LintConfiguration
from tantrums.analysis.symbols import SymbolCollector, SymbolTable
from tantrums.utils.diagnostics import Diagnostic


def _dedent(source: str) -> str:
    return textwrap.dedent(source).strip("\n")


@pytest.fixture
def scan():
    """Fixture to scan source text into lines."""

    def _scan(source: str) -> list[ScannedLine]:
        return scan_document(_dedent(source).split("\n"))

    return _scan


@pytest.fixture
def collect(scan):
    """Fixture to build the symbol table of a document."""

    def _collect(source: str) -> SymbolTable:
        return SymbolCollector().collect(scan(source))

    return _collect


@pytest.fixture
def context():
    """Fixture to build the analysis context of a document."""

    def _context(source: str, config: LintConfiguration | None = None) -> AnalysisContext:
        return Analyzer(config).build_context(_dedent(source))

    return _context


@pytest.fixture
def analyze():
    """Fixture to run a full analysis pass over dedented source."""

    def _analyze(source: str, config: LintConfiguration | None = None) -> list[Diagnostic]:
        return Analyzer(config).analyze(_dedent(source))

    return _analyze


@pytest.fixture
def lint(analyze):
    """Fixture to analyze source and keep the findings of one rule."""

    def _lint(
        source: str, rule: str, config: LintConfiguration | None = None
    ) -> list[Diagnostic]:
        return [d for d in analyze(source, config) if d.name == rule or d.code == rule]

    return _lint


@pytest.fixture
def clean_program() -> str:
    """A program that triggers no rule."""
    return _dedent(
        """
        #mode both;

        // Greets and adds.
        tantrum int add(int a, int b) {
            return a + b;
        }

        tantrum void greet(string name) {
            print("Hello, " + name);
        }

        tantrum main() {
            int total = add(1, 2);
            list items = [1, 2, 3];
            for item in items {
                total = total + item;
            }
            if (total > 5) {
                greet("big");
            } else {
                greet("small");
            }
            print(total);
        }
        """
    )
