"""ccview CLI - ccv command."""

import click

from ccview import __version__
from ccview.cli.resolve import resolve_command
from ccview.cli.spec import spec_command
from ccview.config.models import LoggingConfig
from ccview.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="ccv")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ccview - offline config spec resolution for ClearCase views."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    # Commands switch to the view's logging settings once they are loaded
    configure_logging(LoggingConfig(level="WARNING"), verbose=verbose)


cli.add_command(spec_command, name="spec")
cli.add_command(resolve_command, name="resolve")


if __name__ == "__main__":
    cli()
