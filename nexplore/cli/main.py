"""nexplore CLI — browse HDF5 / NeXus files from the terminal.

Commands:
    nexplore info <file>              Show file summary
    nexplore tree <file>              Print the group/dataset tree
    nexplore show <file> <index>...   Show one entity in detail
    nexplore find <file> <pattern>    Find entities by name
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import click
from rich.console import Console
from rich.filesize import decimal
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nexplore import __version__
from nexplore.errors import NexploreError
from nexplore.utils.schema import ChunkedLayout, DatasetInfo, FileInfo, GroupInfo

console = Console()


def _setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("nexplore")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_or_exit(file: Path) -> FileInfo:
    from nexplore import load

    try:
        return load(file)
    except NexploreError as e:
        console.print(f"[red]Error opening {escape(str(file))}: {escape(str(e))}[/red]")
        raise SystemExit(1)


def _parse_index(parts: tuple[str, ...]) -> list[int]:
    """Accept ``0 1 2`` as well as ``0.1.2``."""
    index = []
    for part in parts:
        for piece in part.split("."):
            if not piece:
                continue
            try:
                index.append(int(piece))
            except ValueError:
                raise click.BadParameter(f"'{piece}' is not an integer", param_hint="INDEX")
    return index


def _count(entities: tuple) -> tuple[int, int]:
    groups = datasets = 0
    for entity in entities:
        if isinstance(entity, GroupInfo):
            groups += 1
            sub_groups, sub_datasets = _count(entity.entities)
            groups += sub_groups
            datasets += sub_datasets
        else:
            datasets += 1
    return groups, datasets


@click.group()
@click.version_option(version=__version__, prog_name="nexplore")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """nexplore — explore HDF5 and NeXus files.

    Every entity is addressed by its index path, as printed by `tree`.
    """
    _setup_logging(verbose)


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
def info(file: Path) -> None:
    """Show file summary."""
    file_info = _load_or_exit(file)

    console.print()
    console.print(Panel.fit(
        f"[bold]{escape(file_info.name)}[/bold]",
        subtitle=escape(str(file)),
    ))

    meta_table = Table(show_header=False, box=None, padding=(0, 2))
    meta_table.add_column("Key", style="dim")
    meta_table.add_column("Value")

    groups, datasets = _count(file_info.entities)
    meta_table.add_row("Size", f"{decimal(file_info.size)} ({file_info.size} bytes)")
    meta_table.add_row("Groups", str(groups))
    meta_table.add_row("Datasets", str(datasets))
    meta_table.add_row("Top level", escape(", ".join(e.name for e in file_info.entities)))

    console.print(meta_table)
    console.print()


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--depth", "-d", type=click.IntRange(min=1), default=None,
              help="Deepest level to print (default: all)")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Dump the loaded tree as JSON")
def tree(file: Path, depth: int | None, as_json: bool) -> None:
    """Print the group/dataset tree with index paths."""
    from nexplore.view import to_rich_tree

    file_info = _load_or_exit(file)

    if as_json:
        click.echo(file_info.to_json())
        return

    title = f"{file_info.name} ({decimal(file_info.size)})"
    console.print(to_rich_tree(title, file_info.to_view_nodes(), max_depth=depth))


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.argument("index", nargs=-1)
def show(file: Path, index: tuple[str, ...]) -> None:
    """Show one entity in detail.

    INDEX is an index path such as `0 2` or `0.2`.
    """
    file_info = _load_or_exit(file)
    path = _parse_index(index)

    try:
        entity = file_info.entity(path)
    except NexploreError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value")

    table.add_row("Name", escape(entity.name))
    table.add_row("Link", str(entity.link_kind))
    if isinstance(entity, GroupInfo):
        table.add_row("Kind", "Group")
        table.add_row("Children", str(len(entity.entities)))
        if entity.cyclic:
            table.add_row("Note", "[yellow]links back to an ancestor group[/yellow]")
    elif isinstance(entity, DatasetInfo):
        table.add_row("Kind", "Dataset")
        table.add_row("Shape", str(entity.shape))
        table.add_row("Type", escape(str(entity.dtype_descr)))
        layout = entity.layout_info
        table.add_row("Layout", layout.kind.capitalize())
        if isinstance(layout, ChunkedLayout):
            table.add_row("Chunks", str(layout.chunk_shape))
            filters = ", ".join(str(f) for f in layout.filters) or "none"
            table.add_row("Filters", escape(filters))

    console.print()
    console.print(Panel(table, title=".".join(str(i) for i in path)))

    if entity.attrs:
        attrs_table = Table(title="Attributes")
        attrs_table.add_column("Name")
        attrs_table.add_column("Value")
        for name, value in entity.attrs.items():
            attrs_table.add_row(escape(name), escape(value))
        console.print(attrs_table)
    console.print()


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.argument("pattern")
@click.option("--ignore-case", "-i", is_flag=True, default=False, help="Case-insensitive match")
def find(file: Path, pattern: str, ignore_case: bool) -> None:
    """Find entities whose name matches a regular expression."""
    from nexplore.navigate import find as run_find

    file_info = _load_or_exit(file)
    try:
        matches = run_find(file_info, pattern, ignore_case=ignore_case)
    except re.error as e:
        raise click.BadParameter(str(e), param_hint="PATTERN")

    if not matches:
        console.print(f"[yellow]No entities match '{escape(pattern)}'[/yellow]")
        return

    table = Table(title=f"Matches ({len(matches)})")
    table.add_column("Index")
    table.add_column("Path")
    table.add_column("Kind")
    for index_path, name_path, entity in matches:
        kind = "Group" if isinstance(entity, GroupInfo) else "Dataset"
        table.add_row(
            ".".join(str(i) for i in index_path),
            escape("/" + "/".join(name_path)),
            kind,
        )
    console.print(table)


if __name__ == "__main__":
    cli()
