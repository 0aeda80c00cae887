"""
Dry-run scan command for LSP Auto Setup CLI.
"""

import os
from typing import Any, Dict, List, Mapping, Set, Tuple

import click
from rich.console import Console
from rich.table import Table

from lsp_auto_setup.cli.helpers import handle_errors
from lsp_auto_setup.core.host import FileRegistry, LocalEnvironment
from lsp_auto_setup.core.orchestrator import AutoSetup
from lsp_auto_setup.core.registry import require_registry_path
from lsp_auto_setup.utils.config import resolve_config

console = Console()


class DryRunActivation:
    """Activation service that only records what would be started."""
    
    def __init__(self):
        self.activated: Set[str] = set()
    
    def activate(self, identifiers: Set[str], settings: Mapping[str, Dict[str, Any]]) -> None:
        self.activated.update(identifiers)
    
    def stop(self, client_id: int) -> None:
        pass
    
    def get_client_by_id(self, client_id: int) -> None:
        return None


def scan_commands(cli_context):
    """Add scan commands to the CLI."""
    
    @click.command()
    @click.option(
        "--search-path", "-s",
        "search_paths",
        multiple=True,
        type=click.Path(exists=True, file_okay=False),
        help="Directory searched for the server registry (repeatable)"
    )
    @click.option("--exclude", "-e", multiple=True, help="Server to exclude (repeatable)")
    @handle_errors
    def scan(search_paths: Tuple[str, ...], exclude: Tuple[str, ...]):
        """Show which servers would be activated, without activating them."""
        base = cli_context.get_config()
        config = resolve_config(
            {"exclude": set(base.exclude) | set(exclude), "cache": {"enable": False}},
            base,
        )
        
        environment = LocalEnvironment(search_paths or None)
        registry_path = require_registry_path(environment, config.registry.marker)
        registry = FileRegistry(os.path.join(registry_path, config.registry.configs_dir))
        
        activation = DryRunActivation()
        report = AutoSetup(config, registry, environment, activation).run()
        
        rows: List[Tuple[str, str]] = []
        rows += [(name, "[green]activate[/green]") for name in report.activated]
        rows += [(name, "[dim]skipped[/dim]") for name in report.skipped]
        rows += [(name, "[yellow]executable not found[/yellow]") for name in report.unavailable]
        rows += [(name, "[red]configuration error[/red]") for name in report.failed]
        
        table = Table(title=f"Servers in {registry_path}")
        table.add_column("Server", style="cyan")
        table.add_column("Decision")
        for name, decision in sorted(rows):
            table.add_row(name, decision)
        
        console.print(table)
        console.print(f"[bold]{report}[/bold]")
    
    return [scan]
