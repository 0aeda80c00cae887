"""Utility modules for LSP Auto Setup."""

from lsp_auto_setup.utils.logging import get_logger, setup_logging
from lsp_auto_setup.utils.config import Config, get_config, resolve_config

__all__ = [
    "get_logger",
    "setup_logging",
    "Config",
    "get_config",
    "resolve_config",
]
