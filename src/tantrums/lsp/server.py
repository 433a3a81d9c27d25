"""
Tantrums Language Server Protocol (LSP) Server.

This module implements an LSP server for the Tantrums language using pygls
(Python Language Server). It keeps the diagnostics of every open Tantrums
document current:

- Document synchronization (open, change, save, close)
- Diagnostics (errors, warnings), republished after every full pass

Usage:
    # Start the server in stdio mode (for IDE integration)
    tantrums-lsp

    # Start in TCP mode (for debugging)
    tantrums-lsp --tcp --port 2087
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from tantrums import __version__
from tantrums.analysis.engine import Analyzer
from tantrums.analysis.store import DiagnosticStore
from tantrums.config import load_configuration
from tantrums.language import FILE_EXTENSIONS, LANGUAGE_ID
from tantrums.lsp.diagnostics import to_lsp_diagnostics
from tantrums.utils.errors import ConfigError

logger = logging.getLogger("tantrums-lsp")


def is_tantrums_document(uri: str, language_id: Optional[str] = None) -> bool:
    """Check whether a document is Tantrums source, by language id or file suffix."""
    if language_id == LANGUAGE_ID:
        return True
    path = unquote(urlparse(uri).path) or uri
    return path.lower().endswith(tuple(ext.lower() for ext in FILE_EXTENSIONS))


class TantrumsLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for Tantrums.

    Every open/change/save runs one full analysis pass through the
    diagnostic store and publishes the resulting set, replacing whatever was
    published before for that document.
    """

    def __init__(self, store: Optional[DiagnosticStore] = None) -> None:
        """Initialize the Tantrums language server."""
        super().__init__(
            name="tantrums-lsp",
            version=f"v{__version__}",
        )

        # Current diagnostics per document URI
        self.store = store or DiagnosticStore()

        # Register all handlers
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register all LSP notification handlers."""
        # pygls sets attributes on handlers; bound methods reject them
        # Document synchronization
        @self.feature(types.TEXT_DOCUMENT_DID_OPEN)
        def did_open(params: types.DidOpenTextDocumentParams) -> None:
            self._on_did_open(params)

        @self.feature(types.TEXT_DOCUMENT_DID_CHANGE)
        def did_change(params: types.DidChangeTextDocumentParams) -> None:
            self._on_did_change(params)

        @self.feature(types.TEXT_DOCUMENT_DID_SAVE)
        def did_save(params: types.DidSaveTextDocumentParams) -> None:
            self._on_did_save(params)

        @self.feature(types.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(params: types.DidCloseTextDocumentParams) -> None:
            self._on_did_close(params)

    def _analyze_and_publish(self, uri: str, text: str, version: Optional[int] = None) -> None:
        """Run a pass over ``text`` and publish the document's current set."""
        diagnostics = self.store.update(uri, text, version)
        self._publish_diagnostics(uri, to_lsp_diagnostics(diagnostics), self.store.version(uri))

    def _publish_diagnostics(
        self,
        uri: str,
        diagnostics: list[types.Diagnostic],
        version: Optional[int] = None,
    ) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics, version=version)
        )

    def _current_text(self, uri: str) -> Optional[str]:
        document = self.workspace.get_text_document(uri)
        return document.source if document is not None else None

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        if not is_tantrums_document(document.uri, document.language_id):
            return
        logger.info("Document opened: %s", document.uri)

        self._analyze_and_publish(document.uri, document.text, document.version)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri
        if uri not in self.store and not is_tantrums_document(uri):
            return

        # Get the current document text
        text = self._current_text(uri)
        if text is None:
            return

        logger.debug("Document changed: %s", uri)
        self._analyze_and_publish(uri, text, params.text_document.version)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        """Handle document save notification."""
        uri = params.text_document.uri
        if uri not in self.store and not is_tantrums_document(uri):
            return
        logger.info("Document saved: %s", uri)

        text = params.text if params.text is not None else self._current_text(uri)
        if text is not None:
            self._analyze_and_publish(uri, text, self.store.version(uri))

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        if uri not in self.store:
            return
        logger.info("Document closed: %s", uri)

        self.store.clear(uri)

        # Clear diagnostics
        self._publish_diagnostics(uri, [])


def create_server(config_path: Optional[Path] = None) -> TantrumsLanguageServer:
    """
    Create and configure a Tantrums language server instance.

    Raises:
        ConfigError: If the configuration file is invalid
    """
    config = load_configuration(config_path, search_from=Path.cwd())
    server = TantrumsLanguageServer(DiagnosticStore(Analyzer(config)))

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("Tantrums Language Server initialized successfully")

    return server


def main() -> None:
    """
    Main entry point for the Tantrums language server.

    Starts the server in stdio mode for IDE integration.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="Tantrums Language Server",
        prog="tantrums-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (default: nearest tantrums.toml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        server = create_server(args.config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(2) from e

    if args.tcp:
        logger.info("Starting Tantrums LSP in TCP mode on %s:%s", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting Tantrums LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
