"""Command-line interface for Passage Graph."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from passage_graph import __version__
from passage_graph.models import Story
from passage_graph.observability import configure_logging

console = Console()

# Status for commands that may write HTML to stdout
err_console = Console(stderr=True)


def _load(path: str) -> Story:
    from passage_graph.ingest.loader import load_archive

    try:
        return load_archive(Path(path))
    except ValueError as e:
        err_console.print(f"[red]✗[/red] {e}")
        raise SystemExit(1) from e


def _write(story: Story, output: str | None) -> None:
    html = story.publish()

    if output:
        Path(output).write_text(html + "\n", encoding="utf-8")
        err_console.print(f"[green]✓[/green] Wrote {output}")
    else:
        click.echo(html)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Passage Graph - inspect and tidy the links and layout of story passages."""
    configure_logging(verbose)


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--internal", is_flag=True, help="Only show links to other passages")
def links(path: str, internal: bool) -> None:
    """List the links in every passage of a published story."""
    story = _load(path)

    table = Table(title=story.name)
    table.add_column("Passage", style="cyan")
    table.add_column("Links", style="green")

    for passage in story.passages:
        table.add_row(passage.name, ", ".join(passage.links(internal_only=internal)))

    console.print(table)


@main.command()
@click.argument("path", type=click.Path(exists=True))
def check(path: str) -> None:
    """Report duplicate names, broken links, unreachable and overlapping passages."""
    from passage_graph.graph import broken_links, suggest_passage_name, unreachable_passages
    from passage_graph.layout import find_overlaps

    story = _load(path)
    problems = 0

    console.print(f"[bold]Checking:[/bold] {story.name}")
    console.print(f"[dim]{len(story.passages):,} passages[/dim]\n")

    seen: dict[str, str] = {}
    for passage in story.passages:
        key = passage.name.lower()
        if key in seen:
            problems += 1
            console.print(f"[red]Duplicate name:[/red] {passage.name} (also {seen[key]})")
        else:
            seen[key] = passage.name

    for name, targets in broken_links(story).items():
        for target in targets:
            problems += 1
            suggestion = suggest_passage_name(story, target)
            hint = f" [dim](did you mean {suggestion}?)[/dim]" if suggestion else ""
            console.print(f"[red]Broken link:[/red] {name} -> {target}{hint}")

    for name in unreachable_passages(story):
        problems += 1
        console.print(f"[yellow]Unreachable:[/yellow] {name}")

    for a, b in find_overlaps(story.passages):
        problems += 1
        console.print(f"[yellow]Overlapping:[/yellow] {a.name} / {b.name}")

    if problems:
        console.print(f"\n[bold red]{problems} problem(s) found[/bold red]")
        raise SystemExit(1)

    console.print("[green]✓[/green] No problems found")


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), help="Output file (defaults to stdout)")
@click.option("--passes", default=10, show_default=True, help="Maximum tidy passes")
def tidy(path: str, output: str | None, passes: int) -> None:
    """Move overlapping passages apart and republish the story."""
    from passage_graph.layout import find_overlaps
    from passage_graph.layout import tidy as tidy_layout

    story = _load(path)
    moves = tidy_layout(story.passages, max_passes=passes)
    remaining = len(find_overlaps(story.passages))

    err_console.print(f"[green]✓[/green] {moves:,} move(s), {remaining:,} overlap(s) left")
    _write(story, output)


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.argument("old")
@click.argument("new")
@click.option("--output", "-o", type=click.Path(), help="Output file (defaults to stdout)")
def rename(path: str, old: str, new: str, output: str | None) -> None:
    """Rename a passage and update every link to it."""
    story = _load(path)
    passage = story.passage_named(old)

    if passage is None:
        err_console.print(f"[red]✗[/red] No passage named {old!r}")
        raise SystemExit(1)

    error = passage.rename(new)
    if error:
        err_console.print(f"[red]✗[/red] {error}")
        raise SystemExit(1)

    _write(story, output)
