"""
Tantrums Utilities Package.

Diagnostic records and error types shared by the engine and its hosts.
"""

from tantrums.utils.diagnostics import (
    Diagnostic,
    Severity,
    levenshtein_distance,
    sort_key,
    suggest_similar,
)
from tantrums.utils.errors import (
    AnalysisError,
    ConfigError,
    TantrumsError,
)

__all__ = [
    # Errors
    "TantrumsError",
    "ConfigError",
    "AnalysisError",
    # Diagnostics
    "Severity",
    "Diagnostic",
    "sort_key",
    # String similarity utilities
    "levenshtein_distance",
    "suggest_similar",
]
