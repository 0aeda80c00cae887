"""
Cache inspection and maintenance commands for LSP Auto Setup CLI.
"""

import sys
import time
from datetime import datetime, timedelta
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from lsp_auto_setup.cli.helpers import handle_errors
from lsp_auto_setup.core.models import ClearCacheResult

console = Console()


def cache_commands(cli_context):
    """Add cache commands to the CLI."""
    
    @click.command(name="clear-cache")
    @click.option("--path", type=click.Path(file_okay=False), help="Cache directory")
    @handle_errors
    def clear_cache(path: Optional[str]):
        """Delete the cached list of discovered servers."""
        cache_config = cli_context.get_cache_config(path)
        result = cli_context.get_cache_store().clear(cache_config)
        
        if result is ClearCacheResult.NOT_FOUND:
            console.print("[yellow]Cache does not exist[/yellow]")
        elif result is ClearCacheResult.CLEARED:
            console.print("[green]Cache cleared[/green]")
        else:
            console.print(
                f"[red]Error while clearing cache: {cache_config.get_cache_file()}[/red]"
            )
            sys.exit(1)
    
    @click.command(name="show-cache")
    @click.option("--path", type=click.Path(file_okay=False), help="Cache directory")
    @handle_errors
    def show_cache(path: Optional[str]):
        """Show the cached list of discovered servers."""
        cache_config = cli_context.get_cache_config(path)
        record = cli_context.get_cache_store().read(cache_config)
        
        if record is None:
            console.print("[yellow]No valid cache[/yellow]")
            console.print(f"[dim]Cache file: {cache_config.get_cache_file()}[/dim]")
            return
        
        written = datetime.fromtimestamp(record.timestamp)
        remaining = timedelta(seconds=int(cache_config.ttl - (time.time() - record.timestamp)))
        
        table = Table(title=f"Cached servers ({len(record.servers)})")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Server", style="cyan")
        for index, server in enumerate(record.servers, 1):
            table.add_row(str(index), server)
        
        console.print(table)
        console.print(f"Written: [cyan]{written:%Y-%m-%d %H:%M:%S}[/cyan]")
        console.print(f"Expires in: [cyan]{remaining}[/cyan]")
    
    return [clear_cache, show_cache]
