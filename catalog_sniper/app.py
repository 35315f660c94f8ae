"""Typer CLI entrypoint for catalog-sniper."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigLocator, ConfigRepository
from .engine import CatalogDocument
from .errors import StorageReadError
from .infra import FileBlobStore
from .logging_conf import configure_logging, log_file_path, tail_log
from .orchestrator import Orchestrator, RunReport

app = typer.Typer(
    help="catalog-sniper: incremental catalog collector",
    no_args_is_help=True,
    rich_markup_mode=None,
)
source_app = typer.Typer(name="source", help="Configured API sources.", no_args_is_help=True)
target_app = typer.Typer(name="target", help="Persisted target documents.", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Log inspection.", no_args_is_help=True)

app.add_typer(source_app, name="source")
app.add_typer(target_app, name="target")
app.add_typer(log_app, name="log")

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    verbose: bool = False


def build_state(verbose: bool, config_path: Path | None = None) -> AppState:
    locator = ConfigLocator()
    configure_logging(verbose=verbose, log_dir=locator.logs_dir)
    repository = ConfigRepository(locator, config_path=config_path)
    return AppState(repository=repository, verbose=verbose)


def build_orchestrator(state: AppState) -> Orchestrator:
    return Orchestrator(state.repository)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _render_report(report: RunReport) -> Table:
    table = Table(title=f"Run results · {report.duration:.2f}s", box=box.SIMPLE_HEAD)
    table.add_column("Target", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Total", justify="right")
    table.add_column("New", style="green", justify="right")
    table.add_column("Duplicates", style="yellow", justify="right")
    table.add_column("Incomplete sources", style="red", overflow="fold")
    for target, result in report.results.items():
        table.add_row(
            target,
            "saved" if result.success else "save failed",
            str(result.total_count),
            str(result.new_total),
            str(result.duplicate_total),
            ", ".join(result.failed_sources) or "-",
        )
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to a YAML/JSON configuration file."
    ),
) -> None:
    ctx.obj = build_state(verbose, config)


@app.command("run", help="Fetch every source and merge new items into its target document.")
def run(
    ctx: typer.Context,
    target: Optional[List[str]] = typer.Option(
        None, "--target", "-t", help="Only process this target (repeatable)."
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Print a one-line summary only."),
) -> None:
    state = _get_state(ctx)
    logger = configure_logging(state.verbose).bind(component="cli")
    try:
        orchestrator = build_orchestrator(state)
        report = orchestrator.run(targets=target or None)
    except Exception as exc:  # noqa: BLE001
        logger.exception("run_failed", error=str(exc))
        console.print(f"catalog-sniper error: {exc}", style="red")
        raise typer.Exit(code=1) from exc

    for failed in report.failed_targets:
        logger.error("target_save_failed", target=failed)
    if quiet:
        summary = ", ".join(
            f"{name}: {result.total_count} items ({result.new_total} new)"
            for name, result in report.results.items()
        )
        console.print(summary or "No targets processed.")
    else:
        console.print(_render_report(report))
    if report.ok:
        logger.info("run_succeeded")
    else:
        logger.warning("run_completed_with_errors", failed=report.failed_targets)
        raise typer.Exit(code=1)


@source_app.command("list", help="Show configured API sources.")
def source_list(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = state.repository.load_global_config()
    if not config.sources:
        console.print("No sources configured.", style="yellow")
        raise typer.Exit(code=0)
    table = Table(title=f"Sources · {len(config.sources)}", box=box.SIMPLE_HEAD)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Target", style="green", no_wrap=True)
    table.add_column("Enabled")
    table.add_column("Params", overflow="fold")
    for source in config.sources:
        params = " ".join(f"{key}={value}" for key, value in source.params.items())
        table.add_row(source.name, source.output_file, "yes" if source.enabled else "no", params or "-")
    console.print(table)


@target_app.command("show", help="Summarise a persisted target document.")
def target_show(ctx: typer.Context, key: str = typer.Argument(..., help="Target file, e.g. emotedata.json.")) -> None:
    state = _get_state(ctx)
    store = FileBlobStore(state.repository.resolved_outputs_dir())
    try:
        raw = store.load(key)
        if raw is None:
            console.print(f"Target `{key}` has not been written yet.", style="yellow")
            raise typer.Exit(code=1)
        document = CatalogDocument.from_bytes(raw, key=key)
    except (StorageReadError, ValueError) as exc:
        console.print(f"Target `{key}` is unreadable: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    table = Table(title=key, box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Total items", str(document.total_items))
    table.add_row("Records", str(len(document.data)))
    table.add_row("Last update", document.last_update or "-")
    console.print(table)


@log_app.command("show", help="Show the most recent log lines.")
def log_show(
    ctx: typer.Context,
    tail: int = typer.Option(100, "--tail", help="Number of lines to show."),
) -> None:
    state = _get_state(ctx)
    lines = tail_log(log_file_path(state.repository.locator.logs_dir), tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    console.print("".join(lines), end="", markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
