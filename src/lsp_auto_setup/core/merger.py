"""
Configuration merging for individual servers.

Combines a server's default configuration from the registry with the
user's override function and extracts the command whose executable
decides whether the server is activated.
"""

from typing import Any, Mapping, Optional

from lsp_auto_setup.core.exceptions import ServerConfigError
from lsp_auto_setup.core.models import InvalidTransform, ResolvedConfig, ServerTransform


def extract_command_path(settings: Mapping[str, Any]) -> Optional[str]:
    """
    Get the executable named by a ``cmd`` setting.

    A list yields its first element, a string is taken as is. Anything
    else, including an empty list, yields None.
    """
    cmd = settings.get("cmd")
    if isinstance(cmd, str):
        return cmd or None
    if isinstance(cmd, (list, tuple)) and cmd and isinstance(cmd[0], str):
        return cmd[0] or None
    return None


def resolve(
    identifier: str,
    default_config: Optional[Mapping[str, Any]],
    transform: Optional[ServerTransform] = None,
) -> ResolvedConfig:
    """
    Resolve the final configuration of a server.

    Args:
        identifier: Server identifier
        default_config: Default configuration from the registry, if any
        transform: User override for this server, if any

    Returns:
        Merged settings and the command path to probe

    Raises:
        ServerConfigError: If the default is not a mapping, or the override
            is not callable, raises, or does not return a mapping
    """
    if default_config is not None and not isinstance(default_config, Mapping):
        raise ServerConfigError(
            identifier,
            f"default configuration is {type(default_config).__name__}, expected a mapping",
            error_code="INVALID_DEFAULT_CONFIG",
            details={"type": type(default_config).__name__},
        )

    settings = dict(default_config or {})

    if transform is not None:
        if isinstance(transform, InvalidTransform):
            raise ServerConfigError(
                identifier,
                "`server_config` must be a function that returns a mapping",
                error_code="INVALID_SERVER_CONFIG",
                details={"type": transform.type_name},
            )

        try:
            override = transform(dict(settings))
        except Exception as e:
            raise ServerConfigError(
                identifier,
                f"`server_config` function raised {type(e).__name__}: {e}",
                error_code="SERVER_CONFIG_FAILED",
            ) from e

        if override is None:
            override = {}
        if not isinstance(override, Mapping):
            raise ServerConfigError(
                identifier,
                f"`server_config` function returned {type(override).__name__}, expected a mapping",
                error_code="INVALID_SERVER_CONFIG",
            )

        settings.update(override)

    return ResolvedConfig(
        command_path=extract_command_path(settings),
        settings=settings,
    )
