"""
LSP Auto Setup - activate language servers whose executables are installed.

Scans a registry of known server definitions, skips excluded and
deprecated servers, merges user overrides into the default configuration
and activates every server whose command is found on PATH. The list of
discovered servers is cached on disk to avoid rescanning.
"""

__version__ = "1.0.0"
__description__ = "Automatic language server setup based on available executables"

# Public API
from lsp_auto_setup.core.cache import CacheStore
from lsp_auto_setup.core.exceptions import LspAutoSetupError
from lsp_auto_setup.core.models import ClearCacheResult, SetupReport
from lsp_auto_setup.core.orchestrator import AutoSetup, setup

__all__ = [
    "__version__",
    "__description__",
    "AutoSetup",
    "CacheStore",
    "ClearCacheResult",
    "LspAutoSetupError",
    "SetupReport",
    "setup",
]
