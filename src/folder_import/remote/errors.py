"""Exception hierarchy for the remote GraphQL APIs."""

from __future__ import annotations

from typing import Any, List, Mapping


class RemoteApiError(RuntimeError):
    """Base class for failures talking to either remote API."""

    def __init__(self, message: str, *, api: str = "graphql", operation: str | None = None) -> None:
        super().__init__(message)
        self.api = api
        self.operation = operation


class TransportError(RemoteApiError):
    """Network failure, HTTP error status, or a body that is not a GraphQL response."""

    def __init__(
        self,
        message: str,
        *,
        api: str = "graphql",
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, api=api, operation=operation)
        self.status_code = status_code


class GraphQLResponseError(RemoteApiError):
    """The server answered with a non-empty ``errors`` array."""

    def __init__(
        self,
        errors: List[Mapping[str, Any]],
        *,
        api: str = "graphql",
        operation: str | None = None,
    ) -> None:
        messages = [str(error.get("message", error)) for error in errors] or ["unknown error"]
        super().__init__(f"GraphQL error: {'; '.join(messages)}", api=api, operation=operation)
        self.errors = list(errors)


class ResponseShapeError(RemoteApiError):
    """The ``data`` payload does not match the operation's response model."""


class NodeCreationError(RemoteApiError):
    """The write API rejected or failed a create mutation."""


__all__ = [
    "GraphQLResponseError",
    "NodeCreationError",
    "RemoteApiError",
    "ResponseShapeError",
    "TransportError",
]
