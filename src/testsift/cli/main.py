"""testsift CLI."""

import click

from testsift import __version__
from testsift.cli.config import config_command
from testsift.cli.discover import discover_command
from testsift.cli.resources import resources_command
from testsift.config.settings import load_settings
from testsift.core.errors import ConfigError
from testsift.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="testsift")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging (overrides TESTSIFT_LOG_LEVEL)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """testsift - test discovery and selection."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    try:
        level = "DEBUG" if verbose else load_settings().log_level
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    configure_logging(level=level)


cli.add_command(config_command, name="config")
cli.add_command(resources_command, name="resources")
cli.add_command(discover_command, name="discover")


if __name__ == "__main__":
    cli()
