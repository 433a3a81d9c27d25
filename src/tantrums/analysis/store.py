"""
Per-document diagnostic store.

The store owns the current diagnostic set of every open document. Each
update runs one full pass and replaces the set as a unit; nothing is patched
incrementally. Results are keyed by document version so a pass over older
text never overwrites the result for newer text, whatever order the passes
finish in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from tantrums.analysis.engine import Analyzer
from tantrums.utils.diagnostics import Diagnostic
from tantrums.utils.errors import AnalysisError

logger = logging.getLogger(__name__)


@dataclass
class DocumentDiagnostics:
    """The published result for one document."""

    uri: str
    version: Optional[int] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


class DiagnosticStore:
    """
    Diagnostics per document URI.

    Entries are created on first update and removed by ``clear`` when the
    document closes.

    Example:
        store = DiagnosticStore()
        diagnostics = store.update("file:///a.42AHH", text, version=3)
    """

    def __init__(self, analyzer: Optional[Analyzer] = None) -> None:
        self.analyzer = analyzer or Analyzer()
        self._documents: dict[str, DocumentDiagnostics] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, uri: str) -> list[Diagnostic]:
        """Return the current diagnostics for a document (empty if unknown)."""
        entry = self._documents.get(uri)
        return list(entry.diagnostics) if entry else []

    def version(self, uri: str) -> Optional[int]:
        entry = self._documents.get(uri)
        return entry.version if entry else None

    def is_stale(self, uri: str, version: Optional[int]) -> bool:
        """Check whether a result for ``version`` would be older than the stored one."""
        current = self.version(uri)
        return version is not None and current is not None and version < current

    def update(self, uri: str, text: str, version: Optional[int] = None) -> list[Diagnostic]:
        """
        Analyze a document and store the result.

        Args:
            uri: Document identifier
            text: Full current text
            version: Document version; None always replaces

        Returns:
            The document's diagnostics after the update. A stale version or
            an analysis fault leaves the previous set in place and returns it.
        """
        if self.is_stale(uri, version):
            logger.debug("Discarding stale analysis of %s (version %s)", uri, version)
            return self.get(uri)

        try:
            diagnostics = self.analyzer.analyze(text)
        except AnalysisError:
            logger.exception("Analysis failed for %s; keeping previous diagnostics", uri)
            return self.get(uri)

        # Another update may have landed while this one was running
        if self.is_stale(uri, version):
            logger.debug("Discarding stale analysis of %s (version %s)", uri, version)
            return self.get(uri)

        self._documents[uri] = DocumentDiagnostics(uri, version, diagnostics)
        return list(diagnostics)

    def clear(self, uri: str) -> None:
        """Forget a document (on close)."""
        self._documents.pop(uri, None)

    def clear_all(self) -> None:
        self._documents.clear()
