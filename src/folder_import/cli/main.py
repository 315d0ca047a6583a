"""Primary Typer application wiring the folder import CLI."""

from __future__ import annotations

from typing import Any, List, Optional

import typer
from rich.table import Table

from . import diagnostics, importing
from .common import CLIError, configure_state, console, parse_override


class ImportTyper(typer.Typer):
    """Typer app that reports :class:`CLIError` as a one-line message with exit code 2."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        try:
            return super().__call__(*args, **kwargs)
        except CLIError as exc:
            exit_ = handle_cli_error(exc)
            if kwargs.get("standalone_mode", True):
                raise SystemExit(exit_.exit_code) from exc
            raise exit_ from exc


app = ImportTyper(
    add_completion=False,
    help="""
    Import brand, model line and sub-model line folders from a spreadsheet,
    and inspect the folder search index.
    """.strip(),
    no_args_is_help=True,
)


def handle_cli_error(exception: CLIError) -> typer.Exit:
    """Render ``CLIError`` messages without stack traces."""

    console.print(f"[bold red]Error:[/bold red] {exception}")
    return typer.Exit(code=2)


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        "-e",
        help="Active configuration environment (development, testing, production).",
        show_default=False,
    ),
    override: List[str] = typer.Option(  # noqa: B008 - Typer callback signature
        [],
        "--override",
        "-o",
        metavar="KEY=VALUE",
        help="Configuration override in dotted.key=value notation (repeatable).",
    ),
    run_id: Optional[str] = typer.Option(
        None,
        "--run-id",
        help="Explicit run identifier used in log lines; defaults to a generated value.",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit per-record lines and debug logging.",
    ),
) -> None:
    """Configure shared CLI state prior to executing subcommands."""

    overrides = [parse_override(item) for item in override]
    configure_state(
        ctx,
        environment=environment,
        overrides=overrides,
        run_id=run_id,
        verbose=verbose,
    )

    if verbose:
        state = ctx.obj
        table = Table(title="CLI Context", show_header=False, box=None)
        table.add_row("Environment", state.environment)
        table.add_row("Run ID", state.run_id)
        table.add_row("Policy version", state.settings.policy_version)
        console.print(table)


app.command("import")(importing.import_command)
app.add_typer(diagnostics.app, name="inspect", help="Search index diagnostics")
