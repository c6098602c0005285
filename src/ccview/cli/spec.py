"""ccv spec command - show a parsed config spec."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ccview.cli.utils import load_settings, read_config_spec, resolve_view_root
from ccview.clearcase import ConfigSpec


def _make_rules_table(spec: ConfigSpec) -> Table:
    table = Table(title="Element rules", show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("scope", style="cyan")
    table.add_column("pattern")
    table.add_column("selector", style="green")
    table.add_column("mkbranch", style="yellow")
    for index, rule in enumerate(spec.standard_rules, start=1):
        table.add_row(
            str(index),
            rule.scope.value,
            rule.scope_pattern,
            rule.version_selector,
            rule.mkbranch or "",
        )
    return table


@click.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--view-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="View root the load rules are relative to (default: current directory)",
)
def spec_command(spec_file: Path, view_root: Path | None) -> None:
    """Parse SPEC_FILE and print its rules.

    Shows load rules, element rules, whether any selector is label based
    and the primary branches named by the rules.
    """
    root = resolve_view_root(view_root)
    load_settings(root)
    spec = read_config_spec(spec_file, root)
    console = Console(soft_wrap=True)

    if spec.load_rules:
        console.print("[bold]Load rules[/bold]")
        for rule in spec.load_rules:
            console.print(f"  [cyan]•[/cyan] {rule.directory}")
    else:
        console.print("[yellow]No load rules[/yellow]")

    console.print(_make_rules_table(spec))
    console.print(f"Label based: {'yes' if spec.has_label_based_version_selector else 'no'}")
    console.print(f"Branches: {', '.join(spec.branches) or '-'}")
