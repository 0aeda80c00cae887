"""CLI command modules."""

from .cache import cache_commands
from .scan import scan_commands

__all__ = [
    'cache_commands',
    'scan_commands',
]
