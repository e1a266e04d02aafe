"""CLI interface for Heritage."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .logging import get_logger

app = typer.Typer(
    name="heritage",
    help="Family graph tools: dates, legacy migration and chart layout",
    add_completion=False,
)
console = Console()
logger = get_logger("heritage.cli")


def get_config():
    """Load configuration from environment (and a local .env file)."""
    from dotenv import load_dotenv

    from .config import load_config
    from .logging import configure_logging

    load_dotenv()
    config = load_config()
    configure_logging(config.log_level)
    return config


def _read_json(path: Path):
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path.name} is not valid JSON: {e}[/red]")
        raise typer.Exit(1)


def _load_graph(path: Path):
    from .migration import migrate_to_new_format

    graph = migrate_to_new_format(_read_json(path))
    logger.debug("graph_loaded", path=str(path), people=len(graph.people), unions=len(graph.unions))
    return graph


def _require_person(graph, person_id: str):
    person = graph.get_person(person_id)
    if person is None:
        console.print(f"[red]Error: Person not found: {person_id}[/red]")
        raise typer.Exit(1)
    return person


def _write_json(data, output: Path) -> None:
    with open(output, "w") as f:
        json.dump(data, f, indent=2)
    console.print(f"[green]Saved to {output}[/green]")


def _print_layout(result, title: str) -> None:
    table = Table(title=title)
    table.add_column("Gen", justify="right")
    table.add_column("Kind")
    table.add_column("ID")
    table.add_column("Label")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")

    for node in sorted(result.nodes, key=lambda n: (n.generation, n.y, n.x)):
        label = node.data.get("name", "") if node.kind.value == "person" else node.data.get("unionType", "")
        if node.is_focus:
            label = f"[bold]{label}[/bold]"
        table.add_row(
            str(node.generation),
            node.kind.value,
            node.id,
            label,
            f"{node.x:.0f}",
            f"{node.y:.0f}",
        )

    console.print(table)
    console.print(f"[dim]{len(result.nodes)} nodes, {len(result.edges)} edges[/dim]")


@app.command("parse-date")
def parse_date(
    text: str = typer.Argument(..., help="Free-text date, e.g. 'c. 1850' or '15 Mar 1850'"),
    offset: str = typer.Option(None, "--offset", help="Resolve an offset such as +4d from the parsed date"),
):
    """Parse a genealogical date and show how it is stored."""
    from .dates import format_date, parse_date_string, resolve_offset

    get_config()
    value = parse_date_string(text)
    if offset:
        value = resolve_offset(offset, value)

    table = Table(title="Parsed Date")
    table.add_column("Kind")
    table.add_column("Display")
    table.add_row(value.kind.value, format_date(value))
    console.print(table)
    console.print_json(data=value.model_dump(mode="json"))


@app.command()
def migrate(
    input_path: Path = typer.Argument(..., help="Family file in any supported format"),
    output: Path = typer.Argument(..., help="Where to write the current-format file"),
):
    """Convert a legacy chart file to the people/unions format."""
    from .migration import detect_format

    get_config()
    data = _read_json(input_path)
    fmt = detect_format(data)
    if fmt == "unknown":
        console.print(f"[yellow]Unrecognized format in {input_path.name}; writing an empty graph[/yellow]")

    graph = _load_graph(input_path)
    _write_json(graph.to_json_dict(), output)
    console.print(
        Panel(
            f"Format: {fmt}\nPeople: {len(graph.people)}\nUnions: {len(graph.unions)}",
            title="Migrated",
        )
    )


@app.command()
def relatives(
    file_path: Path = typer.Argument(..., help="Family file"),
    person_id: str = typer.Argument(..., help="Person ID"),
):
    """List a person's parents, spouses, siblings and children."""
    from .dates import format_lifespan
    from .relationships import get_children_ids, get_parent_ids, get_sibling_ids, get_spouse_ids

    get_config()
    graph = _load_graph(file_path)
    person = _require_person(graph, person_id)

    table = Table(title=f"Relatives of {person.full_name or person.id}")
    table.add_column("Relation")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Dates")

    groups = [
        ("parent", get_parent_ids(graph, person_id)),
        ("spouse", get_spouse_ids(graph, person_id)),
        ("sibling", get_sibling_ids(graph, person_id)),
        ("child", get_children_ids(graph, person_id)),
    ]
    count = 0
    for relation, ids in groups:
        for relative_id in ids:
            relative = graph.get_person(relative_id)
            if relative is None:
                table.add_row(relation, relative_id, "[dim](missing)[/dim]", "")
            else:
                table.add_row(
                    relation,
                    relative.id,
                    relative.full_name,
                    format_lifespan(relative.birth_date, relative.death_date),
                )
            count += 1

    if count == 0:
        console.print(f"[yellow]No relatives recorded for {person_id}[/yellow]")
        return
    console.print(table)


@app.command()
def pedigree(
    file_path: Path = typer.Argument(..., help="Family file"),
    person_id: str = typer.Argument(..., help="Focus person ID"),
    grandparents: bool = typer.Option(True, "--grandparents/--no-grandparents", help="Show grandparents"),
    children: bool = typer.Option(True, "--children/--no-children", help="Show children"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the layout as JSON"),
):
    """Lay out the pedigree chart around a person."""
    from .layout import PedigreeOptions, compute_pedigree_layout

    config = get_config()
    graph = _load_graph(file_path)
    _require_person(graph, person_id)

    options = PedigreeOptions(show_grandparents=grandparents, show_children=children)
    result = compute_pedigree_layout(graph, person_id, options, config.pedigree)

    if output:
        _write_json(result.to_dict(), output)
    else:
        _print_layout(result, f"Pedigree of {person_id}")


@app.command()
def descendants(
    file_path: Path = typer.Argument(..., help="Family file"),
    person_id: str = typer.Argument(..., help="Root person ID"),
    max_depth: int = typer.Option(None, "--max-depth", "-d", min=0, help="Generations to show"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the layout as JSON"),
):
    """Lay out the descendants chart of a person."""
    from .layout import DescendantOptions, compute_descendants_layout

    config = get_config()
    graph = _load_graph(file_path)
    _require_person(graph, person_id)

    depth = config.max_depth if max_depth is None else max_depth
    options = DescendantOptions(max_depth=depth)
    result = compute_descendants_layout(graph, person_id, options, config.descendants)

    if output:
        _write_json(result.to_dict(), output)
    else:
        _print_layout(result, f"Descendants of {person_id}")


if __name__ == "__main__":
    app()
