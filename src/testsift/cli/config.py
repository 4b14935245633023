"""testsift config command - show the loaded configuration."""

import json

import click
from rich.console import Console
from rich.table import Table

from testsift.config.loader import load_configuration
from testsift.core.errors import ConfigError


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def config_command(as_json: bool) -> None:
    """Show configuration loaded from testsift.properties.

    The file is found by searching from the current directory toward the
    filesystem root, unless TESTSIFT_PROPERTIES names it explicitly.
    """
    try:
        store = load_configuration()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(store.as_dict(), indent=2))
        return

    console = Console()
    if store.is_empty():
        console.print("[yellow]No configuration[/yellow] - no testsift.properties found")
        return

    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in store.items():
        table.add_row(key, value)
    console.print(table)
