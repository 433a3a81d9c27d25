"""
Tantrums Language Server Protocol (LSP) implementation.

This package publishes the analysis engine's diagnostics to editors for
every open Tantrums document (language id ``tantrums`` or a ``.42AHH``
file). Hover, completion and run commands are left to the editor extension.

Usage:
    # Start the LSP server (stdio mode)
    tantrums-lsp

    # Or run as a module
    python -m tantrums.lsp
"""

from tantrums.lsp.server import TantrumsLanguageServer, create_server, main

__all__ = [
    "TantrumsLanguageServer",
    "create_server",
    "main",
]
