"""Typer command that runs a spreadsheet import."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from folder_import.config.credentials import ConfigurationError
from folder_import.entities import ImportReport, ImportStats, Outcome, RecordResult
from folder_import.importer import InputFileError, build_resolver, import_records, read_records, resolve_input_path

from .common import console, fail, get_state

_OUTCOME_STYLES = {
    Outcome.CREATED: "green",
    Outcome.EXISTS: "cyan",
    Outcome.CACHED: "cyan",
    Outcome.FAILED: "red",
    Outcome.SKIPPED: "yellow",
}

_SUMMARY_ROWS = (
    ("Total Processed", "processed"),
    ("Newly Created", "created"),
    ("Already Exists", "already_exists"),
    ("Failed", "failed"),
    ("Skipped", "skipped"),
    ("Derived paths", "derived_paths"),
    ("Anomalies", "anomalies"),
)


def _record_line(result: RecordResult) -> str:
    style = _OUTCOME_STYLES[result.outcome]
    line = (
        f"Row {result.record.row_number}: {result.record.describe()} "
        f"[{style}]{result.outcome.value}[/{style}]"
    )
    if result.message:
        line += f" ({result.message})"
    return line


def render_summary(report: ImportReport) -> Table:
    title = "Import Summary (dry run)" if report.dry_run else "Import Summary"
    table = Table(title=title)
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    counters = report.stats.as_dict()
    for label, key in _SUMMARY_ROWS:
        table.add_row(label, str(counters[key]))
    return table


def import_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Spreadsheet (.xlsx, .xls or .csv) with brand/model line columns."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Read and validate the file without calling the remote APIs.",
    ),
) -> None:
    """Create the brand > model line > sub-model line folders listed in FILE."""

    state = get_state(ctx)
    settings = state.settings

    try:
        source = resolve_input_path(file, settings)
        records = read_records(source, settings.policies.columns)
    except InputFileError as exc:
        raise fail(str(exc)) from exc

    console.print(f"Found {len(records)} rows to process in {source.name}")
    resolver = None
    if dry_run:
        console.print("[yellow]DRY RUN MODE - no changes will be made[/yellow]")
    else:
        try:
            resolver = build_resolver(settings)
        except ConfigurationError as exc:
            raise fail(str(exc)) from exc

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Importing", total=len(records))

        def on_record(result: RecordResult, stats: ImportStats) -> None:
            progress.advance(task)
            if state.verbose or result.outcome is Outcome.FAILED:
                progress.console.print(_record_line(result))

        report = import_records(
            records,
            settings=settings,
            dry_run=dry_run,
            resolver=resolver,
            on_record=on_record,
            run_id=state.run_id,
        )

    console.print(render_summary(report))
    if report.stats.derived_paths:
        console.print(
            f"[yellow]{report.stats.derived_paths} record(s) used a derived path because the "
            "search index had not caught up; check the log for details.[/yellow]"
        )


__all__ = ["import_command", "render_summary"]
