"""Core LSP Auto Setup functionality."""
