"""
Diagnostic records for Tantrums analysis.

A diagnostic is produced once by the engine and never mutated afterwards.
Hosts convert it to their own representation (LSP, JSON) or render it for a
terminal in a Rust-like layout:

    error[E0101]: 'add' expects 2 arg(s) but got 1.
      --> example.42AHH:7:5
       |
     7 |     add(1);
       |     ^^^^^^
       |
       = help: did you mean 'add'?

Positions are 0-based internally; rendering converts them to 1-based.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Severity
# =============================================================================


class Severity(Enum):
    """Severity of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"

    def color_code(self) -> str:
        """Get ANSI color code for this severity."""
        colors = {
            Severity.ERROR: "\033[91m",  # Red
            Severity.WARNING: "\033[93m",  # Yellow
        }
        return colors.get(self, "")


# =============================================================================
# Diagnostic
# =============================================================================


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    A single finding on one line of a document.

    Attributes:
        line: 0-based line index
        start_col: 0-based start column
        end_col: 0-based end column (exclusive)
        message: Human-readable message
        severity: ERROR or WARNING
        code: Code of the rule that produced it (e.g., "E0101")
        name: Name of that rule (e.g., "wrong-argument-count")
        suggestion: Optional fix hint
    """

    line: int
    start_col: int
    end_col: int
    message: str
    severity: Severity
    code: str = ""
    name: str = ""
    suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    @property
    def length(self) -> int:
        return max(1, self.end_col - self.start_col)

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.start_col + 1}: {self.severity.value}[{self.code}]: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable mapping (positions stay 0-based)."""
        return {
            "line": self.line,
            "start_col": self.start_col,
            "end_col": self.end_col,
            "severity": self.severity.value,
            "code": self.code,
            "name": self.name,
            "message": self.message,
            "suggestion": self.suggestion,
        }

    def render(self, source_code: str, filename: str = "<input>", use_color: bool = True) -> str:
        """
        Render this diagnostic as a formatted string.

        Args:
            source_code: The document text the diagnostic refers to
            filename: Name shown on the location line
            use_color: Whether to use ANSI color codes

        Returns:
            A formatted multi-line string representation
        """
        lines: list[str] = []
        source_lines = source_code.splitlines()

        # Color helpers
        reset = "\033[0m" if use_color else ""
        bold = "\033[1m" if use_color else ""
        level_color = self.severity.color_code() if use_color else ""
        blue = "\033[94m" if use_color else ""
        green = "\033[92m" if use_color else ""

        # Header line: error[E0101]: 'add' expects 2 arg(s) but got 1.
        lines.append(
            f"{level_color}{bold}{self.severity.value}[{self.code}]{reset}: "
            f"{bold}{self.message}{reset}"
        )
        lines.append(f"  {blue}-->{reset} {filename}:{self.line + 1}:{self.start_col + 1}")

        if 0 <= self.line < len(source_lines):
            source_line = source_lines[self.line]
            line_num_str = f"{self.line + 1:3}"
            gutter = " " * len(line_num_str)
            lines.append(f"{gutter} {blue}|{reset}")
            lines.append(f"{blue}{line_num_str} |{reset} {source_line}")

            # Zero-width spans (end of line) still get one caret
            padding = " " * self.start_col
            underline = "^" * self.length
            lines.append(f"{gutter} {blue}|{reset} {padding}{level_color}{underline}{reset}")
            lines.append(f"{gutter} {blue}|{reset}")

        if self.suggestion:
            lines.append(f"   {blue}={reset} {green}help:{reset} {self.suggestion}")

        return "\n".join(lines)


def sort_key(diagnostic: Diagnostic) -> tuple[int, int]:
    """Order diagnostics by position."""
    return (diagnostic.line, diagnostic.start_col)


# =============================================================================
# String Similarity (Levenshtein Distance)
# =============================================================================


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string
        s2: Second string

    Returns:
        The edit distance as an integer
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    # Use two rows for space efficiency
    previous_row = list(range(len(s2) + 1))

    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def suggest_similar(
    name: str,
    candidates: list[str],
    max_distance: int = 2,
    max_suggestions: int = 3,
) -> list[str]:
    """
    Find similar names from a list of candidates, closest first.

    Useful for "did you mean?" hints on undefined names.
    """
    scored = []
    for candidate in candidates:
        if abs(len(candidate) - len(name)) > max_distance:
            continue
        distance = levenshtein_distance(name.lower(), candidate.lower())
        if distance <= max_distance:
            scored.append((candidate, distance))

    # Sort by distance (closest first), then alphabetically for ties
    scored.sort(key=lambda x: (x[1], x[0]))

    return [candidate for candidate, _ in scored[:max_suggestions]]


__all__ = [
    "Severity",
    "Diagnostic",
    "sort_key",
    "levenshtein_distance",
    "suggest_similar",
]
