"""
In-memory stand-ins for the host collaborators.

Lets the decision logic run without an editor: a fixed directory listing
and PATH, a dict-backed registry, and an activation service that records
what it was asked to do.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

REGISTRY_ROOT = "/plugins/nvim-lspconfig"
CONFIGS_PATH = REGISTRY_ROOT + "/lua/lspconfig/configs"


class FakeEnvironment:
    """Host environment with a fixed directory listing and PATH."""

    def __init__(
        self,
        entries: Sequence[Tuple[str, str]] = (),
        executables: Sequence[str] = (),
        search_paths: Sequence[str] = ("/usr/share/nvim/runtime", REGISTRY_ROOT),
    ):
        self.entries = list(entries)
        self.executables = set(executables)
        self._search_paths = list(search_paths)
        self.listed: List[str] = []
        self.probed: List[str] = []

    def search_paths(self) -> List[str]:
        return list(self._search_paths)

    def list_dir(self, path: str):
        self.listed.append(path)
        return iter(self.entries)

    def is_executable(self, command: str) -> bool:
        self.probed.append(command)
        return command in self.executables


class FakeRegistry:
    """Registry of default configurations held in a dict."""

    def __init__(self, defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        self.defaults = defaults or {}
        self.lookups: List[str] = []

    def get_default_config(self, identifier: str) -> Optional[Mapping[str, Any]]:
        self.lookups.append(identifier)
        return self.defaults.get(identifier)


class FakeClient:
    """Running client with a mutable set of attached buffers."""

    def __init__(self, identifier: str, attached_buffers: Optional[Set[int]]):
        self.identifier = identifier
        self.attached_buffers = attached_buffers


class FakeActivation:
    """Activation service recording every call."""

    def __init__(self, clients: Optional[Dict[int, FakeClient]] = None):
        self.clients = clients or {}
        self.activations: List[Set[str]] = []
        self.settings: Dict[str, Dict[str, Any]] = {}
        self.stopped: List[int] = []

    def activate(self, identifiers: Set[str], settings: Mapping[str, Dict[str, Any]]) -> None:
        self.activations.append(set(identifiers))
        self.settings.update(settings)

    def stop(self, client_id: int) -> None:
        self.stopped.append(client_id)

    def get_client_by_id(self, client_id: int) -> Optional[FakeClient]:
        return self.clients.get(client_id)

    @property
    def activated(self) -> Set[str]:
        result: Set[str] = set()
        for identifiers in self.activations:
            result |= identifiers
        return result


class ManualScheduler:
    """Collects deferred callbacks until ``run_pending`` is called."""

    def __init__(self):
        self.pending: List[Tuple[Any, Tuple[Any, ...]]] = []

    def __call__(self, callback, *args) -> None:
        self.pending.append((callback, args))

    def run_pending(self) -> List[Any]:
        pending, self.pending = self.pending, []
        return [callback(*args) for callback, args in pending]
