"""
Registry scanning.

Locates the server definition registry among the host's search paths and
enumerates the identifiers of the servers it defines.
"""

import os
from typing import List, Optional, Sequence

from lsp_auto_setup.core.exceptions import RegistryNotFoundError
from lsp_auto_setup.core.interfaces import HostEnvironment
from lsp_auto_setup.utils.logging import get_logger

logger = get_logger(__name__)


def find_registry_path(search_paths: Sequence[str], marker: str) -> Optional[str]:
    """First search path whose name ends with ``marker``."""
    for path in search_paths:
        if path.rstrip("/\\").endswith(marker):
            return path
    return None


def require_registry_path(environment: HostEnvironment, marker: str) -> str:
    """
    Locate the registry or fail.

    Raises:
        RegistryNotFoundError: If no search path matches ``marker``
    """
    path = find_registry_path(list(environment.search_paths()), marker)
    if path is None:
        raise RegistryNotFoundError(
            f"{marker} not found in search paths",
            error_code="REGISTRY_NOT_FOUND",
            details={"marker": marker},
        )
    return path


def identifier_from_filename(name: str) -> str:
    """Strip the extension from a definition file name."""
    return os.path.splitext(name)[0]


def scan_registry(environment: HostEnvironment, configs_path: str) -> List[str]:
    """
    Enumerate server identifiers in the registry.

    Args:
        environment: Host environment providing directory listing
        configs_path: Directory holding one definition file per server

    Returns:
        Identifiers in listing order; non-file entries are ignored
    """
    identifiers = []
    for name, entry_type in environment.list_dir(configs_path):
        if entry_type != "file":
            continue
        identifiers.append(identifier_from_filename(name))

    logger.debug(f"Found {len(identifiers)} server definitions in {configs_path}")
    return identifiers
