"""Diagnostics against the search index and the remote schemas."""

from __future__ import annotations

from typing import Iterable, Optional

import typer
from rich.table import Table

from folder_import.config.credentials import ConfigurationError, load_discovery_credentials, load_write_credentials
from folder_import.config.settings import Settings
from folder_import.entities import FolderNode
from folder_import.remote import (
    DiscoveryClient,
    GraphQLTransport,
    RemoteApiError,
    build_discovery_transport,
    build_write_transport,
)
from folder_import.remote.models import TypeIntrospectionVariables, type_introspection_operation

from .common import CLIError, console, fail, get_state

app = typer.Typer(help="Query the folder search index and introspect the remote schemas.")

_APIS = ("discovery", "write")


def build_transport(settings: Settings, api: str) -> GraphQLTransport:
    """Build a transport for ``api`` from the environment credentials."""

    if api == "discovery":
        return build_discovery_transport(load_discovery_credentials(), settings.policies)
    if api == "write":
        return build_write_transport(load_write_credentials(), settings.policies)
    raise CLIError(f"Unknown API '{api}'; expected one of: {', '.join(_APIS)}")


def build_discovery_client(settings: Settings) -> DiscoveryClient:
    return DiscoveryClient(build_transport(settings, "discovery"), policy=settings.policies.discovery)


def _discovery_or_exit(settings: Settings) -> DiscoveryClient:
    try:
        return build_discovery_client(settings)
    except ConfigurationError as exc:
        raise fail(str(exc)) from exc


def _nodes_table(nodes: Iterable[FolderNode], *, title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Shape")
    table.add_column("Path")
    for node in nodes:
        table.add_row(node.id, node.name, node.shape or "", node.path or "")
    return table


@app.command("search")
def search_command(
    ctx: typer.Context,
    term: str = typer.Argument(..., help="Search term."),
    shape: Optional[str] = typer.Option(None, "--shape", help="Restrict hits to this shape identifier."),
) -> None:
    """List folders matching TERM."""

    state = get_state(ctx)
    client = _discovery_or_exit(state.settings)
    nodes = client.search_by_term(term, shape)
    if not nodes:
        console.print(f"No folders found for '{term}'")
        return
    console.print(_nodes_table(nodes, title=f"Search results for '{term}'"))


@app.command("find")
def find_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exact folder name."),
    shape: str = typer.Option(..., "--shape", help="Shape identifier of the folder."),
    parent: Optional[str] = typer.Option(None, "--parent", help="Only accept folders below this path."),
) -> None:
    """Look up one folder the way the importer does."""

    state = get_state(ctx)
    client = _discovery_or_exit(state.settings)
    node = client.find_node(name, shape, parent)
    if node is None:
        raise fail(f"No {shape} folder named '{name}'" + (f" below {parent}" if parent else ""))
    console.print(_nodes_table([node], title="Folder"))


@app.command("resolve-path")
def resolve_path_command(
    ctx: typer.Context,
    node_id: str = typer.Argument(..., metavar="ID", help="Folder identifier."),
) -> None:
    """Print the path of the folder with identifier ID."""

    state = get_state(ctx)
    client = _discovery_or_exit(state.settings)
    path = client.resolve_path_by_id(node_id)
    if path is None:
        raise fail(f"No path found for identifier '{node_id}'")
    console.print(path)


@app.command("schema")
def schema_command(
    ctx: typer.Context,
    type_name: str = typer.Argument(..., metavar="TYPE", help="GraphQL type name, e.g. Query or FolderMutations."),
    api: str = typer.Option("discovery", "--api", help="Which API to introspect: discovery or write."),
) -> None:
    """Show the fields of a GraphQL object or input type."""

    state = get_state(ctx)
    if api not in _APIS:
        raise CLIError(f"Unknown API '{api}'; expected one of: {', '.join(_APIS)}")
    try:
        transport = build_transport(state.settings, api)
    except ConfigurationError as exc:
        raise fail(str(exc)) from exc

    try:
        data = transport.run(type_introspection_operation(), TypeIntrospectionVariables(name=type_name))
    except RemoteApiError as exc:
        raise fail(str(exc)) from exc
    finally:
        transport.close()

    introspected = data.introspected
    if introspected is None:
        raise fail(f"Type '{type_name}' is not defined by the {api} API")

    table = Table(title=f"{introspected.name or type_name} ({api})")
    table.add_column("Field")
    table.add_column("Type")
    table.add_column("Arguments")
    for field in (introspected.fields or []) + (introspected.input_fields or []):
        arguments = ", ".join(f"{arg.name}: {arg.type.display_name}" for arg in field.args)
        field_type = field.type.display_name if field.type is not None else ""
        table.add_row(field.name, field_type, arguments)
    console.print(table)


__all__ = ["app", "build_discovery_client", "build_transport"]
