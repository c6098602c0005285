"""CLI utilities."""

from pathlib import Path

import click

from ccview.clearcase import ConfigSpec, parse_config_spec
from ccview.clearcase.errors import ClearCaseError
from ccview.config import CCViewConfig, load_config
from ccview.core.errors import ConfigError
from ccview.core.logging import configure_logging


def resolve_view_root(view_root: Path | None) -> Path:
    """Absolute view root; the current directory when not given."""
    return (view_root or Path.cwd()).resolve()


def load_settings(view_root: Path) -> CCViewConfig:
    """Load configuration for the view and apply its logging outputs.

    Raises:
        click.ClickException: If the configuration is invalid
    """
    try:
        settings = load_config(view_root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    ctx = click.get_current_context(silent=True)
    verbose = bool(ctx and ctx.obj and ctx.obj.get("verbose"))
    configure_logging(settings.logging, verbose=verbose)
    return settings


def read_config_spec(spec_file: Path, view_root: Path) -> ConfigSpec:
    """Parse a saved config spec file against ``view_root``.

    Raises:
        click.ClickException: If the file cannot be parsed
    """
    try:
        return parse_config_spec(spec_file.read_text(encoding="utf-8"), view_root.as_posix())
    except ClearCaseError as e:
        raise click.ClickException(str(e)) from e
