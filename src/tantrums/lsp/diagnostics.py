"""
Diagnostic conversion for the Tantrums LSP.

This module converts engine diagnostics into LSP-compatible diagnostic
messages for display in editors.
"""

from lsprotocol import types

from tantrums.utils.diagnostics import Diagnostic, Severity

SOURCE = "tantrums"

SEVERITY_MAP = {
    Severity.ERROR: types.DiagnosticSeverity.Error,
    Severity.WARNING: types.DiagnosticSeverity.Warning,
}

# Rules whose findings editors may render faded out
UNNECESSARY_RULES = frozenset({"unused-variable", "unreachable-code"})


def _get_diagnostic_tags(diagnostic: Diagnostic) -> list[types.DiagnosticTag]:
    tags: list[types.DiagnosticTag] = []
    if diagnostic.name in UNNECESSARY_RULES:
        tags.append(types.DiagnosticTag.Unnecessary)
    return tags


def to_lsp_diagnostic(diagnostic: Diagnostic) -> types.Diagnostic:
    """
    Convert one engine diagnostic.

    Positions are already 0-based on both sides. The rule's suggestion, if
    any, is appended to the message as a hint.
    """
    message = diagnostic.message
    if diagnostic.suggestion:
        message = f"{message}\n\nhint: {diagnostic.suggestion}"

    return types.Diagnostic(
        range=types.Range(
            start=types.Position(line=diagnostic.line, character=diagnostic.start_col),
            end=types.Position(line=diagnostic.line, character=diagnostic.end_col),
        ),
        message=message,
        severity=SEVERITY_MAP[diagnostic.severity],
        source=SOURCE,
        code=diagnostic.code,
        tags=_get_diagnostic_tags(diagnostic) or None,
    )


def to_lsp_diagnostics(diagnostics: list[Diagnostic]) -> list[types.Diagnostic]:
    """Convert the diagnostics of one pass, keeping their order."""
    return [to_lsp_diagnostic(d) for d in diagnostics]
