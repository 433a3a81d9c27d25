"""
Inputs shared by every check during one analysis pass, and the reporter
checks emit through.

The context is read-only: checks consume the scanned lines and the symbol
table but never change them, so no check can influence another.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tantrums.analysis.lexstate import ScannedLine
from tantrums.analysis.rules import LintConfiguration, LintLevel, LintRule
from tantrums.analysis.symbols import ScopeTree, SymbolTable
from tantrums.utils.diagnostics import Diagnostic

MODE_DIRECTIVE = re.compile(r"^#mode\s+(static|dynamic|both)\s*;?\s*$")


class Mode(Enum):
    """Typing discipline selected by a ``#mode`` directive."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    BOTH = "both"


def detect_mode(lines: Sequence[ScannedLine]) -> Mode:
    """Return the mode named by the first valid directive, BOTH if there is none."""
    for line in lines:
        match = MODE_DIRECTIVE.match(line.stripped.strip())
        if match:
            return Mode(match.group(1))
    return Mode.BOTH


@dataclass(frozen=True)
class AnalysisContext:
    """
    Everything a check may look at.

    Attributes:
        lines: Scanned lines of the document
        symbols: Functions, variables and the scope tree
        config: Effective configuration for this document
        mode: Mode selected by the document's directive
    """

    lines: tuple[ScannedLine, ...]
    symbols: SymbolTable
    config: LintConfiguration = field(default_factory=LintConfiguration)
    mode: Mode = Mode.BOTH

    @property
    def scopes(self) -> ScopeTree:
        return self.symbols.scopes

    @property
    def checks_types(self) -> bool:
        """Type compatibility is not enforced under ``#mode dynamic;``."""
        return self.mode != Mode.DYNAMIC

    def source_text(self) -> str:
        """The whole document as written, joined with ``\\n``."""
        return "\n".join(line.text for line in self.lines)

    def code_text(self) -> str:
        """The whole document with string bodies and comments blanked."""
        return "\n".join(line.stripped for line in self.lines)


class Reporter:
    """
    Collects diagnostics for one pass.

    Applies the configured level of each rule: allowed rules are dropped,
    the rest are stamped with the severity their level maps to.
    """

    def __init__(self, config: Optional[LintConfiguration] = None) -> None:
        self.config = config or LintConfiguration()
        self.diagnostics: list[Diagnostic] = []

    def emit(
        self,
        rule: LintRule,
        line: int,
        start: int,
        end: int,
        *format_args: object,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Emit a diagnostic if the rule is enabled.

        Args:
            rule: The rule being violated
            line: 0-based line index
            start: Start column
            end: End column (exclusive)
            format_args: Arguments to format into the rule message
            suggestion: Fix hint overriding the rule's own
        """
        level = self.config.get_level(rule)
        if level == LintLevel.ALLOW:
            return

        suggestion_text = suggestion
        if suggestion_text is None and rule.suggestion:
            try:
                suggestion_text = rule.suggestion.format(*format_args)
            except (IndexError, KeyError):
                suggestion_text = rule.suggestion

        self.diagnostics.append(
            Diagnostic(
                line=line,
                start_col=start,
                end_col=max(start, end),
                message=rule.format(*format_args),
                severity=level.severity,
                code=rule.code,
                name=rule.name,
                suggestion=suggestion_text,
            )
        )
