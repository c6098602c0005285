"""ccv resolve command - resolve an element version offline."""

import json
from collections.abc import Iterable, Sequence
from pathlib import Path

import click

from ccview.cli.utils import load_settings, read_config_spec, resolve_view_root
from ccview.clearcase import ClearCaseError, ListingError, ViewConnection, ViewPath
from ccview.clearcase._internal import parse_vtree_line
from ccview.clearcase.models import DirectoryChild, VersionDescription, VersionEntry
from ccview.core.errors import describe_error


class SavedTreeListing:
    """Listing that answers version queries from a saved ``lsvtree`` output."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._entries = [entry for line in lines if line.strip() and (entry := parse_vtree_line(line))]

    def list_versions(self, element_path: str, *, is_directory: bool) -> list[VersionEntry]:
        return list(self._entries)

    def list_children(self, directory_with_version: str) -> list[DirectoryChild]:
        raise ListingError("list children", "not available offline")

    def describe(self, version_path: str, *, is_directory: bool) -> VersionDescription:
        raise ListingError("describe", "not available offline")

    def list_history(self, path: str, options: Sequence[str]) -> Iterable[str]:
        raise ListingError("list history", "not available offline")


@click.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("vtree_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("element")
@click.option(
    "--view-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="View root the load rules are relative to (default: current directory)",
)
@click.option("--directory", is_flag=True, help="ELEMENT is a directory")
@click.option("--dynamic", is_flag=True, help="Treat the view as dynamic (ignore load rules)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def resolve_command(
    spec_file: Path,
    vtree_file: Path,
    element: str,
    view_root: Path | None,
    directory: bool,
    dynamic: bool,
    as_json: bool,
) -> None:
    """Print the version of ELEMENT selected by SPEC_FILE.

    VTREE_FILE holds the saved version tree listing of ELEMENT
    (``lsvtree -all`` output). ELEMENT may be relative to the view root.
    """
    root = resolve_view_root(view_root)
    settings = load_settings(root)
    spec = read_config_spec(spec_file, root).with_dynamic_view(dynamic)
    listing = SavedTreeListing(vtree_file.read_text(encoding="utf-8").splitlines())
    connection = ViewConnection(ViewPath(root.as_posix()), spec, listing, settings=settings.clearcase)

    element_path = element if element.startswith("/") else f"{root.as_posix()}/{element}"
    try:
        version = connection.get_last_version(element_path, is_file=not directory)
    except ClearCaseError as e:
        if as_json:
            click.echo(json.dumps({"element": element_path, "error": describe_error(e)}))
            raise SystemExit(1) from e
        raise click.ClickException(str(e)) from e

    whole_name = version.whole_name if version is not None else None
    if as_json:
        click.echo(json.dumps({"element": element_path, "version": whole_name}))
    elif whole_name is None:
        click.echo(f"{element_path}: no version selected")
    else:
        click.echo(f"{element_path}@@{whole_name}")
