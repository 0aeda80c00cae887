"""
Interfaces of the host collaborators.

The host editor provides the activation service, the registry of default
server configurations, filesystem and PATH primitives, and the detach
event source. Only the members listed here are used.
"""

from typing import (
    Any, Callable, Dict, Iterable, Mapping, Optional, Protocol, Sequence, Set,
    Tuple, runtime_checkable,
)

from lsp_auto_setup.core.models import DetachEvent


@runtime_checkable
class Client(Protocol):
    """A running server client."""

    identifier: str
    attached_buffers: Optional[Set[int]]


@runtime_checkable
class ActivationService(Protocol):
    """Starts and stops server clients."""

    def activate(self, identifiers: Set[str], settings: Mapping[str, Dict[str, Any]]) -> None: ...

    def stop(self, client_id: int) -> None: ...

    def get_client_by_id(self, client_id: int) -> Optional[Client]: ...


@runtime_checkable
class ServerRegistry(Protocol):
    """Catalog of default server configurations."""

    def get_default_config(self, identifier: str) -> Optional[Mapping[str, Any]]: ...


@runtime_checkable
class HostEnvironment(Protocol):
    """Filesystem and PATH primitives of the host."""

    def list_dir(self, path: str) -> Iterable[Tuple[str, str]]: ...

    def is_executable(self, command: str) -> bool: ...

    def search_paths(self) -> Sequence[str]: ...


DetachCallback = Callable[[DetachEvent], None]


@runtime_checkable
class DetachEventSource(Protocol):
    """Delivers buffer-detach notifications."""

    def subscribe(self, callback: DetachCallback) -> Callable[[], None]: ...
