import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fuzzrank.config import PERSIST_KEYS, Config, get_config, load_user_settings, save_user_settings
from fuzzrank.constants import CATEGORY_TRUNCATE, TITLE_TRUNCATE
from fuzzrank.logging import configure_logging, uvicorn_log_config
from fuzzrank.records import RecordFileError, load_records
from fuzzrank.search import DispatchError, Record, SearchRequest, SearchWorker

console = Console()


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx):
    """fuzzrank - fuzzy listing search"""
    try:
        ctx.ensure_object(dict)
        ctx.obj["config"] = get_config()
    except ValueError as e:
        # Only fail if we're running a command that needs config
        ctx.obj["config_error"] = str(e)

    if ctx.invoked_subcommand is None:
        console.print("[bold]fuzzrank[/bold] - fuzzy listing search\n")
        console.print("Run [cyan]fuzzrank search FILE QUERY[/cyan] to rank records from a JSON file.")
        console.print("\nUse [cyan]fuzzrank --help[/cyan] for all commands.")


def _require_config(ctx) -> Config:
    if "config_error" in ctx.obj:
        console.print(f"[red]Error:[/red] {escape(ctx.obj['config_error'])}")
        raise SystemExit(1)
    return ctx.obj["config"]


@main.command()
@click.pass_context
def status(ctx):
    """Show effective configuration."""
    config = _require_config(ctx)

    console.print("[bold]fuzzrank status[/bold]")
    console.print()
    console.print(
        f"Weights: title={config.title_weight} description={config.description_weight} "
        f"category={config.category_weight}"
    )
    console.print(f"Threshold: {config.threshold}")
    console.print(f"Worker mode: {config.worker_mode.value}")
    console.print(f"Records file: [cyan]{config.records_path or '-'}[/cyan]")


def _truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


async def _search(config: Config, request: SearchRequest):
    async with SearchWorker(config=config.ranking, mode=config.worker_mode) as worker:
        return await worker.search(request)


@main.command()
@click.argument("records_file", type=click.Path(path_type=Path))
@click.argument("query", nargs=-1)
@click.option("--threshold", type=click.FloatRange(0, 1), default=None, help="Minimum relevance (0-1)")
@click.pass_context
def search(ctx, records_file: Path, query: tuple[str, ...], threshold: float | None):
    """Rank records from a JSON file against QUERY."""
    config = _require_config(ctx)
    configure_logging(config.log_level)

    try:
        records = load_records(records_file)
    except RecordFileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    request = SearchRequest(records=records, query=" ".join(query), threshold=threshold)
    try:
        response = asyncio.run(_search(config, request))
    except DispatchError as e:
        console.print(f"[red]Search failed:[/red] {e}")
        raise SystemExit(1)

    if not response.total_results:
        console.print("[dim]No matches.[/dim]")
        return

    table = Table(title=f"{response.total_results} of {len(records)} records")
    table.add_column("#", justify="right", style="dim")
    table.add_column("id")
    table.add_column("title", style="bold")
    table.add_column("category", style="cyan")
    for rank, payload in enumerate(response.results, 1):
        record = Record.from_payload(payload)
        table.add_row(
            str(rank),
            str(payload.get("id", "")),
            _truncate(record.title, TITLE_TRUNCATE),
            _truncate(record.category, CATEGORY_TRUNCATE),
        )
    console.print(table)


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx, host: str, port: int, reload: bool):
    """Start the fuzzrank API server."""
    config = _require_config(ctx)
    configure_logging(config.log_level)

    import uvicorn

    console.print(f"[bold]fuzzrank server[/bold] starting on http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    console.print()

    uvicorn.run(
        "fuzzrank.server.app:app",
        host=host,
        port=port,
        reload=reload,
        log_config=uvicorn_log_config(config.log_level),
    )


@main.group(name="config")
def config_group():
    """Read and persist settings in ~/.fuzzrank/settings.json."""


@config_group.command("set")
@click.argument("key", type=click.Choice(sorted(PERSIST_KEYS)))
@click.argument("value")
def config_set(key: str, value: str):
    """Persist KEY=VALUE after validating it."""
    settings = load_user_settings()
    settings[key] = value
    try:
        validated = Config(**{k: settings[k] for k in PERSIST_KEYS if k in settings})
    except ValueError as e:
        console.print(f"[red]Invalid {key}:[/red] {escape(str(e))}")
        raise SystemExit(1)

    settings[key] = validated.model_dump(mode="json")[key]
    save_user_settings(settings)
    console.print(f"{key} = [cyan]{settings[key]}[/cyan]")


if __name__ == "__main__":
    main()
