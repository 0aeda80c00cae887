"""
Automatic server activation.

Coordinates the cache, the registry scan, the eligibility rules and the
configuration merge, and hands every server whose executable is available
to the activation service.
"""

import os
from typing import AbstractSet, Any, Dict, Iterable, Mapping, Optional, Union

from lsp_auto_setup.core.cache import CacheStore
from lsp_auto_setup.core.eligibility import DEPRECATED_SERVERS, should_skip
from lsp_auto_setup.core.exceptions import ConfigError, RegistryNotFoundError, ServerConfigError
from lsp_auto_setup.core.idle_stop import IdleStopMonitor, Scheduler
from lsp_auto_setup.core.interfaces import (
    ActivationService, DetachEventSource, HostEnvironment, ServerRegistry,
)
from lsp_auto_setup.core.merger import resolve
from lsp_auto_setup.core.models import SetupReport
from lsp_auto_setup.core.registry import require_registry_path, scan_registry
from lsp_auto_setup.utils.config import Config, resolve_config
from lsp_auto_setup.utils.logging import get_logger

logger = get_logger(__name__)

# Monitor started by the last setup() call
_monitor: Optional[IdleStopMonitor] = None


class AutoSetup:
    """Decides which servers to activate and activates them."""

    def __init__(
        self,
        config: Config,
        registry: ServerRegistry,
        environment: HostEnvironment,
        activation: ActivationService,
        cache_store: Optional[CacheStore] = None,
        deprecated: AbstractSet[str] = DEPRECATED_SERVERS,
    ):
        """
        Initialize automatic setup.

        Args:
            config: Resolved configuration
            registry: Source of default server configurations
            environment: Host filesystem and PATH primitives
            activation: Service that starts servers
            cache_store: Server cache (a new store when omitted)
            deprecated: Servers never activated
        """
        self.config = config
        self.registry = registry
        self.environment = environment
        self.activation = activation
        self.cache_store = cache_store or CacheStore()
        self.deprecated = deprecated

    def run(self) -> SetupReport:
        """
        Activate every eligible server whose executable is available.

        Returns:
            Report of what happened to each server

        Raises:
            RegistryNotFoundError: If the registry is not in the search paths
        """
        registry_path = require_registry_path(self.environment, self.config.registry.marker)

        report = SetupReport()
        settings: Dict[str, Dict[str, Any]] = {}

        cached = self.cache_store.read(self.config.cache)
        if cached is not None:
            report.from_cache = True
            self._process(cached.servers, report, settings)
        else:
            configs_path = os.path.join(registry_path, self.config.registry.configs_dir)
            discovered = scan_registry(self.environment, configs_path)
            self._process(discovered, report, settings)
            report.discovered = list(discovered)

        if settings:
            self.activation.activate(set(settings), settings)

        if not report.from_cache:
            report.cache_written = self.cache_store.write(report.discovered, self.config.cache)

        logger.debug(f"Setup finished: {report}")
        return report

    def _process(
        self,
        identifiers: Iterable[str],
        report: SetupReport,
        settings: Dict[str, Dict[str, Any]],
    ) -> None:
        for identifier in identifiers:
            if should_skip(identifier, self.config.exclude, self.deprecated):
                report.skipped.append(identifier)
                continue

            try:
                resolved = resolve(
                    identifier,
                    self._default_config(identifier),
                    self.config.server_config.get(identifier),
                )
            except ServerConfigError as e:
                logger.error(str(e), extra={"server": identifier})
                report.failed.append(identifier)
                continue

            if resolved.command_path and self.environment.is_executable(resolved.command_path):
                settings[identifier] = resolved.settings
                report.activated.append(identifier)
            else:
                report.unavailable.append(identifier)

    def _default_config(self, identifier: str) -> Optional[Mapping[str, Any]]:
        try:
            return self.registry.get_default_config(identifier)
        except Exception as e:
            raise ServerConfigError(
                identifier,
                f"failed to read default configuration: {e}",
                error_code="REGISTRY_LOOKUP_FAILED",
            ) from e


def setup(
    opts: Union[Config, Mapping[str, Any], None] = None,
    *,
    registry: ServerRegistry,
    environment: HostEnvironment,
    activation: ActivationService,
    detach_events: Optional[DetachEventSource] = None,
    cache_store: Optional[CacheStore] = None,
    scheduler: Optional[Scheduler] = None,
    defaults: Optional[Config] = None,
) -> Optional[SetupReport]:
    """
    Set up servers automatically based on available executables.

    Args:
        opts: User options, merged over ``defaults``
        registry: Source of default server configurations
        environment: Host filesystem and PATH primitives
        activation: Service that starts and stops servers
        detach_events: Source of detach events for stopping unused servers
        cache_store: Server cache
        scheduler: Defers detach handling (the running event loop by default)
        defaults: Base configuration

    Returns:
        Setup report, or None if the registry could not be found
    """
    global _monitor

    config = resolve_config(opts, defaults)

    if _monitor is not None:
        _monitor.close()
        _monitor = None

    policy = config.stop_policy
    if policy.enabled and detach_events is not None:
        monitor = IdleStopMonitor(activation, policy, scheduler)
        try:
            monitor.start(detach_events)
        except ConfigError as e:
            logger.error(e.message)
        else:
            _monitor = monitor

    try:
        return AutoSetup(config, registry, environment, activation, cache_store).run()
    except RegistryNotFoundError as e:
        logger.error(e.message)
        return None
