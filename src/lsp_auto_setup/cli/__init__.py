"""Command line interface for LSP Auto Setup."""
