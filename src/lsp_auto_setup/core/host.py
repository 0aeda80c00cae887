"""
Local implementations of the host collaborators.

Used when running outside an editor, e.g. by the command line interface
and in tests: directory listing and PATH lookups on the local machine, a
registry reading default configurations from JSON or TOML files, and an
in-process detach event bus.
"""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import toml

from lsp_auto_setup.core.interfaces import DetachCallback
from lsp_auto_setup.core.models import DetachEvent
from lsp_auto_setup.utils.logging import get_logger

logger = get_logger(__name__)

SEARCH_PATHS_ENV = "LSP_AUTO_SETUP_SEARCH_PATHS"


class LocalEnvironment:
    """Host environment backed by the local filesystem and PATH."""

    def __init__(self, search_paths: Optional[Sequence[Union[str, Path]]] = None):
        """
        Initialize local environment.

        Args:
            search_paths: Paths searched for the registry; read from
                ``LSP_AUTO_SETUP_SEARCH_PATHS`` when omitted
        """
        self._search_paths = [str(p) for p in search_paths] if search_paths is not None else None

    def search_paths(self) -> List[str]:
        if self._search_paths is not None:
            return list(self._search_paths)
        raw = os.environ.get(SEARCH_PATHS_ENV, "")
        return [p for p in raw.split(os.pathsep) if p]

    def list_dir(self, path: str) -> Iterator[Tuple[str, str]]:
        """Yield ``(name, type)`` pairs; a missing directory yields nothing."""
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug(f"Cannot list {path}: {e}")
            return

        for entry in entries:
            if entry.is_symlink():
                entry_type = "link"
            elif entry.is_file():
                entry_type = "file"
            elif entry.is_dir():
                entry_type = "directory"
            else:
                entry_type = "other"
            yield entry.name, entry_type

    def is_executable(self, command: str) -> bool:
        return shutil.which(command) is not None


class FileRegistry:
    """Reads default server configurations from ``<id>.json`` or ``<id>.toml``."""

    def __init__(self, configs_path: Union[str, Path]):
        self.configs_path = Path(configs_path)

    def get_default_config(self, identifier: str) -> Optional[Mapping[str, Any]]:
        json_path = self.configs_path / f"{identifier}.json"
        toml_path = self.configs_path / f"{identifier}.toml"

        try:
            if json_path.is_file():
                data = json.loads(json_path.read_text(encoding="utf-8"))
            elif toml_path.is_file():
                data = toml.load(toml_path)
            else:
                return None
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read default config of {identifier}: {e}")
            return None

        if not isinstance(data, dict):
            return None

        default_config = data.get("default_config", data)
        if not isinstance(default_config, dict):
            logger.warning(f"Default config of {identifier} is not a table, ignoring it")
            return None
        return default_config


class DetachEventBus:
    """In-process source of buffer-detach events."""

    def __init__(self):
        self._subscribers: Dict[int, DetachCallback] = {}
        self._next_id = 0

    def subscribe(self, callback: DetachCallback) -> Callable[[], None]:
        token = self._next_id
        self._next_id += 1
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def publish(self, client_id: int, buffer_id: int) -> None:
        """Deliver a detach event to every subscriber in order."""
        event = DetachEvent(client_id=client_id, buffer_id=buffer_id)
        for callback in list(self._subscribers.values()):
            callback(event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
