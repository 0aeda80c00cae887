"""Test suite for LSP Auto Setup."""
