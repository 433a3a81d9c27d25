"""
Error types for the Tantrums tooling.

Checks never raise on ambiguous source text; they skip. These exceptions
cover the remaining failures: bad configuration, and faults inside the
analysis engine itself.
"""

from typing import Optional


class TantrumsError(Exception):
    """Base exception for all Tantrums tooling errors."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.path:
            return f"[{self.path}] {self.message}"
        return self.message


class ConfigError(TantrumsError):
    """Raised when a configuration file or option is invalid."""

    pass


class AnalysisError(TantrumsError):
    """
    Raised when a check fails unexpectedly during an analysis pass.

    The pass is abandoned as a whole; no partial diagnostic list is returned.

    Attributes:
        check: Name of the check that failed
    """

    def __init__(
        self,
        message: str,
        check: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        self.check = check
        super().__init__(message, path)

    def _format_message(self) -> str:
        parts = []
        if self.path:
            parts.append(f"[{self.path}]")
        if self.check:
            parts.append(f"check '{self.check}' failed:")
        parts.append(self.message)
        return " ".join(parts)
