"""
Tantrums - heuristic static analysis for the Tantrums teaching language.

Finds syntax and semantic problems in ``.42AHH`` source files line by line,
without a compiler front end, and reports them as diagnostics to the
command line or to an editor through the language server.
"""

from tantrums.analysis import Analyzer, DiagnosticStore, LintConfiguration, analyze_source
from tantrums.utils.diagnostics import Diagnostic, Severity

__version__ = "0.2.0"
__all__ = [
    "analyze_source",
    "Analyzer",
    "DiagnosticStore",
    "LintConfiguration",
    "Diagnostic",
    "Severity",
]
