"""
Eligibility rules for automatic activation.

A server is skipped when the user excluded it or when it is known to be
deprecated upstream. The check runs before any configuration merge or
executable probe.
"""

from typing import AbstractSet

# Servers superseded or removed upstream
DEPRECATED_SERVERS: frozenset = frozenset({
    "typst_lsp",
    "ruff_lsp",
    "bufls",
})


def should_skip(
    identifier: str,
    exclude: AbstractSet[str],
    deprecated: AbstractSet[str] = DEPRECATED_SERVERS,
) -> bool:
    """
    Check if a server should be skipped.

    Args:
        identifier: Server identifier
        exclude: Servers the user excluded from auto-setup
        deprecated: Deprecated servers

    Returns:
        True if the server must not be activated
    """
    return identifier in exclude or identifier in deprecated
