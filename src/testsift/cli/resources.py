"""testsift resources command - list classpath resources matching a pattern."""

import json

import click

from testsift.core.errors import ArgumentError, ScanError
from testsift.discovery.classpath import ClasspathScanner


@click.command()
@click.argument("pattern")
@click.option("--classpath", default=None, help="Classpath override (os.pathsep-separated)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def resources_command(pattern: str, classpath: str | None, as_json: bool) -> None:
    """List resources whose name fully matches PATTERN (a regex)."""
    scanner = ClasspathScanner(classpath)
    try:
        found = scanner.find_resources(pattern)
    except ArgumentError as e:
        raise click.BadParameter(e.message, param_hint="PATTERN") from e
    except ScanError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps([r.uri for r in found], indent=2))
        return
    for resource in found:
        click.echo(resource.uri)
