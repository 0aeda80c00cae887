"""
Stopping servers that no buffer uses any more.

Detach handling is two-phase: the raw event only schedules a check, and
the check inspects the client's attached buffers once the event source
has finished removing the detaching buffer from its own bookkeeping.
"""

import asyncio
from typing import Any, Callable, Optional

from lsp_auto_setup.core.exceptions import ConfigError
from lsp_auto_setup.core.interfaces import ActivationService, DetachEventSource
from lsp_auto_setup.core.models import DetachEvent, StopPolicy
from lsp_auto_setup.utils.logging import get_logger

logger = get_logger(__name__)

Scheduler = Callable[..., Any]


class IdleStopMonitor:
    """Stops a client when its last buffer detaches."""

    def __init__(
        self,
        activation: ActivationService,
        policy: StopPolicy,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Initialize idle-stop monitor.

        Args:
            activation: Service owning the running clients
            policy: Which servers may be stopped
            scheduler: Called as ``scheduler(callback, event)`` to defer the check;
                ``call_soon`` of the event loop running at ``start`` when omitted
        """
        self.activation = activation
        self.policy = policy
        self._scheduler = scheduler
        self._schedule: Optional[Scheduler] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self, source: DetachEventSource) -> None:
        """
        Subscribe to detach events, replacing any previous subscription.

        Raises:
            ConfigError: If no scheduler was given and no event loop is running
        """
        self.close()
        if self._scheduler is not None:
            self._schedule = self._scheduler
        else:
            try:
                self._schedule = asyncio.get_running_loop().call_soon
            except RuntimeError:
                raise ConfigError(
                    "Stopping unused servers needs a running event loop or a scheduler",
                    error_code="NO_EVENT_LOOP",
                ) from None
        self._unsubscribe = source.subscribe(self.on_detach)
        logger.debug("Stopping unused servers on detach")

    def close(self) -> None:
        """Stop listening for detach events."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def active(self) -> bool:
        """Whether the monitor is subscribed to detach events."""
        return self._unsubscribe is not None

    def on_detach(self, event: DetachEvent) -> None:
        """Defer the check until the event source has updated its buffers."""
        try:
            self._schedule(self.check, event)
        except RuntimeError as e:
            logger.error(f"Failed to schedule stop check for client {event.client_id}: {e}")

    def check(self, event: DetachEvent) -> bool:
        """
        Stop the client if no other buffer is attached to it.

        Args:
            event: The detach that triggered the check

        Returns:
            True if a stop was requested
        """
        client = self.activation.get_client_by_id(event.client_id)
        if client is None or client.attached_buffers is None:
            return False

        if client.identifier in self.policy.exclude:
            return False

        # Still in use by another buffer
        for buffer_id in client.attached_buffers:
            if buffer_id != event.buffer_id:
                return False

        logger.debug(f"Stopping {client.identifier}, no buffer attached")
        self.activation.stop(event.client_id)
        return True
