"""
Configuration management for LSP Auto Setup.

Provides hierarchical configuration loading with validation using Pydantic.
Options passed to ``setup()`` are merged over TOML files and environment
variables by ``resolve_config``.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Union

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from lsp_auto_setup.core.exceptions import ConfigError
from lsp_auto_setup.core.models import ServerTransform, StopPolicy, to_transform
from lsp_auto_setup.utils.logging import get_logger

logger = get_logger(__name__)

CACHE_FILE_NAME = "servers.json"
DEFAULT_TTL = 60 * 60 * 24 * 7


def default_cache_path() -> str:
    """Cache directory under the host's cache home."""
    cache_home = os.environ.get("XDG_CACHE_HOME") or os.path.join("~", ".cache")
    return os.path.join(cache_home, "lsp-auto-setup")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = Field(default=True, description="Enable logging completely")
    level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    format_type: str = Field(default="text", description="Log format (text/json)")
    file: Optional[str] = Field(default=None, description="Log file path")
    enable_rich: bool = Field(default=True, description="Enable Rich console output")

    @field_validator("level", "console_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        """Validate format type."""
        if v not in ["text", "json"]:
            raise ValueError(f"Invalid format type: {v}")
        return v


class CacheConfig(BaseModel):
    """Server cache configuration."""

    enable: bool = Field(default=True, description="Cache discovered servers")
    ttl: int = Field(default=DEFAULT_TTL, description="Cache TTL in seconds")
    path: str = Field(default_factory=default_cache_path, description="Cache directory")

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """Validate TTL."""
        if v <= 0:
            raise ValueError("Cache TTL must be positive")
        return v

    def get_cache_dir(self) -> Path:
        """Get the expanded cache directory."""
        return Path(os.path.expanduser(self.path))

    def get_cache_file(self) -> Path:
        """Get the cache file path."""
        return self.get_cache_dir() / CACHE_FILE_NAME


class StopUnusedServersConfig(BaseModel):
    """Configuration for stopping servers without attached buffers."""

    enable: bool = Field(default=True, description="Stop servers with no attached buffer")
    exclude: Set[str] = Field(default_factory=set, description="Servers never stopped")

    def to_policy(self) -> StopPolicy:
        return StopPolicy(enabled=self.enable, exclude=set(self.exclude))


class RegistryConfig(BaseModel):
    """Location of the server definition registry."""

    marker: str = Field(
        default="nvim-lspconfig",
        description="Suffix identifying the registry among the search paths"
    )
    configs_dir: str = Field(
        default="lua/lspconfig/configs",
        description="Directory of server definitions, relative to the registry"
    )


class Config(BaseSettings):
    """Main configuration class."""

    server_config: Dict[str, ServerTransform] = Field(
        default_factory=dict,
        description="Per-server functions receiving the default config and returning overrides"
    )
    exclude: Set[str] = Field(default_factory=set, description="Servers never auto-activated")

    cache: CacheConfig = Field(default_factory=CacheConfig)
    stop_unused_servers: StopUnusedServersConfig = Field(default_factory=StopUnusedServersConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "LSP_AUTO_SETUP_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @field_validator("server_config", mode="before")
    @classmethod
    def validate_server_config(cls, v: Any) -> Any:
        """Classify each entry as callable or invalid at load time."""
        if not isinstance(v, Mapping):
            raise ValueError("server_config must be a mapping of server name to function")
        return {name: to_transform(value) for name, value in v.items()}

    @field_validator("stop_unused_servers", mode="before")
    @classmethod
    def validate_stop_unused_servers(cls, v: Any) -> Any:
        """Accept a bare boolean as the ``enable`` flag."""
        if isinstance(v, bool):
            return {"enable": v}
        return v

    @property
    def stop_policy(self) -> StopPolicy:
        return self.stop_unused_servers.to_policy()

    def get_log_file(self) -> Optional[Path]:
        """Get log file path."""
        if self.logging.file:
            return Path(os.path.expanduser(self.logging.file))
        return None


def _as_dict(options: Union[Config, Mapping[str, Any], None]) -> Dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, Config):
        return dict(options)
    if isinstance(options, Mapping):
        return dict(options)
    raise ConfigError(f"Options must be a mapping, got {type(options).__name__}")


def _section(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        return dict(value)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, bool):
        return {"enable": value}
    return {}


def resolve_config(
    options: Union[Config, Mapping[str, Any], None],
    defaults: Union[Config, Mapping[str, Any], None] = None,
) -> Config:
    """
    Resolve user options against defaults.

    Top-level keys supplied by the user replace the defaults. The nested
    ``cache``, ``stop_unused_servers``, ``registry`` and ``logging`` sections
    are merged key by key so a partial section keeps the remaining defaults.

    Args:
        options: User options
        defaults: Base configuration (``Config()`` when omitted)

    Returns:
        Fully resolved configuration

    Raises:
        ConfigError: If the merged options fail validation
    """
    user = _as_dict(options)
    merged = _as_dict(defaults if defaults is not None else Config())

    for key, value in user.items():
        if key in ("cache", "stop_unused_servers", "registry", "logging") and key in merged:
            section = _section(merged[key])
            section.update(_section(value))
            merged[key] = section
        else:
            merged[key] = value

    try:
        return Config(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid options: {e}", details={"errors": e.errors()}) from e


class ConfigManager:
    """Configuration manager with hierarchical loading."""

    def __init__(self):
        self._config: Optional[Config] = None

    def load_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        """
        Load configuration from multiple sources.

        Args:
            config_files: List of configuration files to load
            **overrides: Configuration overrides

        Returns:
            Loaded configuration
        """
        if self._config is not None:
            return self._config

        if config_files is None:
            config_files = [
                "/etc/lsp-auto-setup/config.toml",
                "~/.config/lsp-auto-setup/config.toml",
                "./.lsp-auto-setup.toml",
            ]

        config_data: Dict[str, Any] = {}

        for config_file in config_files:
            file_path = Path(os.path.expanduser(str(config_file)))
            if file_path.exists():
                try:
                    file_data = toml.load(file_path)
                    config_data = _merge_sections(config_data, file_data)
                    logger.debug(f"Loaded configuration from {file_path}")
                except (OSError, toml.TomlDecodeError) as e:
                    logger.warning(f"Failed to load config from {file_path}: {e}")

        config_data = _merge_sections(config_data, overrides)

        try:
            self._config = Config(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}", details={"errors": e.errors()}) from e

        return self._config

    def get_config(self) -> Config:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self, **overrides: Any) -> Config:
        """Reload configuration."""
        self._config = None
        return self.load_config(**overrides)


def _merge_sections(base: Dict[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in update.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            section = dict(result[key])
            section.update(value)
            result[key] = section
        else:
            result[key] = value
    return result


# Global configuration manager
_config_manager = ConfigManager()

# Convenience functions
load_config = _config_manager.load_config
get_config = _config_manager.get_config
reload_config = _config_manager.reload_config
