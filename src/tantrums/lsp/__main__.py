"""
Entry point for running the Tantrums LSP server as a module.

Usage:
    python -m tantrums.lsp
    python -m tantrums.lsp --tcp --port 2087
"""

from tantrums.lsp.server import main

if __name__ == "__main__":
    main()
