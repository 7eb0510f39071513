"""CLI interface for headliner."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from headliner.assembler import Aggregator
from headliner.config import load_config, merge_cli_overrides
from headliner.sources import get_configured_fetchers
from headliner.topics import normalize_title

app = typer.Typer(
    name="headliner",
    help="Aggregate trending tech headlines from Reddit, Hacker News and news feeds.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from headliner import __version__

        console.print(f"headliner {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress at INFO level."),
    ] = False,
) -> None:
    """Headliner - balanced, deduplicated, trending-aware headlines."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a headliner TOML config file."),
]


@app.command()
def fetch(
    config_path: ConfigOption = None,
    target: Annotated[
        Optional[int],
        typer.Option("--target", "-n", min=1, help="Number of items to assemble."),
    ] = None,
    query: Annotated[
        Optional[str],
        typer.Option("--query", "-q", help="Override the news search query."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print items as JSON instead of a table."),
    ] = False,
) -> None:
    """Run one aggregation cycle and print the result."""
    config = merge_cli_overrides(
        load_config(config_path), target_count=target, search_query=query
    )
    result = Aggregator.from_config(config).assemble()

    if as_json:
        payload = [item.model_dump(mode="json") for item in result.items]
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"{len(result.items)} headlines")
    table.add_column("#", justify="right")
    table.add_column("Source")
    table.add_column("Trend", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    for n, item in enumerate(result.items, start=1):
        trend = f"x{item.trending_count}" if item.trending else ""
        table.add_row(str(n), item.source_name, trend, str(item.weighted_score), item.title)
    console.print(table)

    if result.is_short:
        console.print(
            f"[yellow]Only {len(result.items)} of {result.target_count} "
            "items were available.[/yellow]"
        )
    for err in result.report.errors:
        console.print(f"[red]{err.source}[/red] ({err.error_type}): {err.message}")


@app.command()
def sources(config_path: ConfigOption = None) -> None:
    """List the configured sources and their quotas."""
    config = load_config(config_path)
    table = Table(title="Configured sources")
    table.add_column("Source")
    table.add_column("Kind")
    table.add_column("Quota", justify="right")
    for fetcher in get_configured_fetchers(config):
        table.add_row(fetcher.name, fetcher.kind.value, str(fetcher.quota))
    console.print(table)
    console.print(
        f"Target {config.aggregator.target_count}, total quota {config.total_quota}"
    )


@app.command()
def normalize(
    titles: Annotated[list[str], typer.Argument(help="Titles to normalize.")],
) -> None:
    """Print the topic signature of each title."""
    for title in titles:
        typer.echo(f"{normalize_title(title)!r}  <-  {title}")


if __name__ == "__main__":
    app()
