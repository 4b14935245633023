"""testsift discover command - compute and show the working set."""

import json
import re

import click
from rich.console import Console
from rich.table import Table

from testsift.config.loader import load_configuration
from testsift.core.errors import ConfigError, ScanError
from testsift.discovery.classpath import ClasspathScanner
from testsift.discovery.units import DEFAULT_TEST_MODULE_PATTERN, DiscoveryUnit, discover
from testsift.filtering.loader import FilterEngine


def _make_working_set_table(units: list[DiscoveryUnit]) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Class", style="cyan")
    table.add_column("Tags", style="magenta")
    table.add_column("Methods")
    for unit in units:
        table.add_row(unit.name, ", ".join(sorted(unit.tags)), ", ".join(sorted(unit.methods)))
    return table


@click.command()
@click.option("--classpath", default=None, help="Classpath override (os.pathsep-separated)")
@click.option(
    "--module-regex",
    default=DEFAULT_TEST_MODULE_PATTERN.pattern,
    show_default=True,
    help="Only import modules whose full name matches this regex",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def discover_command(classpath: str | None, module_regex: str, as_json: bool) -> None:
    """Scan the classpath, apply configured filters and show the working set."""
    try:
        module_pattern = re.compile(module_regex)
    except re.error as e:
        raise click.BadParameter(str(e), param_hint="--module-regex") from e

    try:
        configuration = load_configuration()
        discovered = discover(
            ClasspathScanner(classpath),
            name_filter=lambda name: module_pattern.fullmatch(name) is not None,
        )
        working = FilterEngine(configuration).working_set(discovered)
    except (ConfigError, ScanError) as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        payload = {
            "discovered": len(discovered),
            "working_set": [unit.to_dict() for unit in working],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console = Console()
    console.print(f"[bold]{len(working)}[/bold] of {len(discovered)} classes selected")
    if working:
        console.print(_make_working_set_table(working))
