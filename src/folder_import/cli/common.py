"""Shared helpers used across the folder import CLI modules."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, MutableMapping
from uuid import uuid4

import typer
from pydantic import ValidationError
from rich.console import Console

from folder_import.config.settings import Settings
from folder_import.utils.logging import configure_logging, get_logger

console = Console()
_LOGGER = get_logger(module=__name__)


class CLIError(RuntimeError):
    """Exception raised for user-facing CLI errors."""


@dataclass(slots=True)
class CLIState:
    """State object attached to ``typer.Context`` for downstream commands."""

    settings: Settings
    overrides: Dict[str, Any]
    environment: str
    run_id: str
    verbose: bool


def _merge_dict(dest: MutableMapping[str, Any], src: Mapping[str, Any]) -> None:
    for key, value in src.items():
        if isinstance(value, Mapping) and isinstance(dest.get(key), MutableMapping):
            _merge_dict(dest[key], value)  # type: ignore[index]
        elif isinstance(value, Mapping):
            dest[key] = dict(value)
        else:
            dest[key] = value


def parse_override(argument: str) -> Dict[str, Any]:
    """Parse dotted ``key=value`` overrides into nested dictionaries."""

    if "=" not in argument:
        raise typer.BadParameter("Overrides must be expressed as dotted.key=value")
    dotted, value = argument.split("=", 1)
    cursor: MutableMapping[str, Any] = {}
    current = cursor
    segments = [segment.strip() for segment in dotted.split(".") if segment.strip()]
    if not segments:
        raise typer.BadParameter("Override keys must not be empty")
    for segment in segments[:-1]:
        nested: Dict[str, Any] = {}
        current[segment] = nested
        current = nested
    try:
        parsed_value = json.loads(value)
    except json.JSONDecodeError:
        parsed_value = value
    current[segments[-1]] = parsed_value
    return cursor


def merge_overrides(overrides: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge override dictionaries using deep semantics."""

    result: Dict[str, Any] = {}
    for override in overrides:
        _merge_dict(result, override)
    return result


def resolve_settings(environment: str | None, overrides: Dict[str, Any]) -> Settings:
    """Construct :class:`Settings` with environment and overrides applied."""

    payload = dict(overrides)
    if environment:
        payload["environment"] = environment
    try:
        return Settings(**payload)
    except ValidationError as exc:
        raise CLIError(f"Invalid configuration: {exc}") from exc


def configure_state(
    ctx: typer.Context,
    *,
    environment: str | None,
    overrides: Iterable[Dict[str, Any]],
    run_id: str | None,
    verbose: bool,
) -> None:
    """Populate ``ctx.obj`` with :class:`CLIState` and initialise logging."""

    merged = merge_overrides(overrides)
    settings = resolve_settings(environment, merged)
    configure_logging(settings, level="DEBUG" if verbose else "WARNING")
    resolved_run_id = run_id or f"import-{uuid4().hex[:8]}"
    _LOGGER.debug("CLI state configured", environment=settings.environment, run_id=resolved_run_id)
    ctx.obj = CLIState(
        settings=settings,
        overrides=merged,
        environment=settings.environment,
        run_id=resolved_run_id,
        verbose=verbose,
    )


def get_state(ctx: typer.Context) -> CLIState:
    """Return the previously configured :class:`CLIState`."""

    if ctx.obj is None:
        raise CLIError("CLI context is not initialised")
    if not isinstance(ctx.obj, CLIState):  # pragma: no cover
        raise CLIError("Unexpected CLI context payload")
    return ctx.obj


def fail(message: str, *, code: int = 1) -> typer.Exit:
    """Print ``message`` as an error and return the exit to raise."""

    console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(code=code)
