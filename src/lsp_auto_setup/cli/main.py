"""
Main CLI interface for LSP Auto Setup.

Provides maintenance commands for the server cache and a dry-run scan of
a local server registry, using Click with Rich output.
"""

from typing import Optional

import click
from rich.console import Console

from lsp_auto_setup import __version__
from lsp_auto_setup.cli.commands import cache_commands, scan_commands
from lsp_auto_setup.core.cache import CacheStore
from lsp_auto_setup.utils.config import CacheConfig, Config, get_config, resolve_config
from lsp_auto_setup.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


class CLIContext:
    """CLI context for passing state between commands."""
    
    def __init__(self):
        self.config: Optional[Config] = None
        self.cache_store: Optional[CacheStore] = None
        
    def get_config(self) -> Config:
        """Get loaded configuration."""
        if self.config is None:
            self.config = get_config()
        return self.config
    
    def get_cache_config(self, path: Optional[str] = None) -> CacheConfig:
        """Get cache configuration, optionally for another directory."""
        config = self.get_config()
        if path:
            config = resolve_config({"cache": {"path": path}}, config)
        return config.cache
        
    def get_cache_store(self) -> CacheStore:
        """Get cache store instance."""
        if self.cache_store is None:
            self.cache_store = CacheStore()
        return self.cache_store


# Global CLI context
cli_context = CLIContext()


@click.group()
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug logging"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.version_option(version=__version__, prog_name="LSP Auto Setup")
def cli(debug: bool, verbose: bool):
    """
    Automatically set up language servers whose executables are installed.

    Inspect and clear the cache of discovered servers, or preview which
    servers a registry would activate.
    """
    config = cli_context.get_config()
    log_config = config.logging

    # Flags override the configured levels
    flag_level = "DEBUG" if debug else "INFO" if verbose else None
    setup_logging(
        enabled=log_config.enabled,
        level=flag_level or log_config.level,
        console_level=flag_level or log_config.console_level,
        log_file=config.get_log_file(),
        format_type=log_config.format_type,
        enable_rich=log_config.enable_rich,
        force=True,
    )


def register_commands():
    """Register all CLI commands."""
    for cmd in cache_commands(cli_context):
        cli.add_command(cmd)
    
    for cmd in scan_commands(cli_context):
        cli.add_command(cmd)


# Register all commands
register_commands()


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
