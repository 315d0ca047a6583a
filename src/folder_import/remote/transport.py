"""Blocking GraphQL-over-HTTP transport shared by both remote APIs."""

from __future__ import annotations

from typing import Any, Dict, Mapping, TypeVar

import requests
from pydantic import BaseModel
from requests.exceptions import RequestException

from ..utils.logging import get_logger
from .errors import GraphQLResponseError, TransportError
from .models import GraphQLRequest, Operation

ResponseT = TypeVar("ResponseT", bound=BaseModel)

_DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class GraphQLTransport:
    """POST GraphQL requests to a single endpoint with static auth headers."""

    def __init__(
        self,
        endpoint: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
        api_name: str = "graphql",
    ) -> None:
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self.api_name = api_name
        self._headers = {**_DEFAULT_HEADERS, **dict(headers or {})}
        self._session = session or requests.Session()
        self._logger = get_logger(component="transport", api=api_name)

    def execute(self, request: GraphQLRequest) -> Dict[str, Any]:
        """Send ``request`` and return its ``data`` object."""

        operation = request.operation_name
        try:
            response = self._session.post(
                self.endpoint,
                json=request.to_payload(),
                headers=self._headers,
                timeout=self.timeout_seconds,
            )
        except RequestException as exc:
            raise TransportError(
                f"{self.api_name} request failed: {exc}",
                api=self.api_name,
                operation=operation,
            ) from exc

        status_code = response.status_code
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                f"{self.api_name} returned a non-JSON body (HTTP {status_code})",
                api=self.api_name,
                operation=operation,
                status_code=status_code,
            ) from exc
        finally:
            response.close()

        if not isinstance(body, dict):
            raise TransportError(
                f"{self.api_name} returned a non-object body (HTTP {status_code})",
                api=self.api_name,
                operation=operation,
                status_code=status_code,
            )

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [{"message": str(errors)}]
            raise GraphQLResponseError(
                [error if isinstance(error, dict) else {"message": str(error)} for error in errors],
                api=self.api_name,
                operation=operation,
            )

        if status_code >= 400:
            raise TransportError(
                f"{self.api_name} responded with HTTP {status_code}",
                api=self.api_name,
                operation=operation,
                status_code=status_code,
            )

        data = body.get("data")
        if not isinstance(data, dict):
            raise TransportError(
                f"{self.api_name} response is missing a data object",
                api=self.api_name,
                operation=operation,
                status_code=status_code,
            )

        self._logger.debug("GraphQL request completed", operation=operation, status_code=status_code)
        return data

    def run(self, operation: Operation[ResponseT], variables: BaseModel | None = None) -> ResponseT:
        """Execute ``operation`` and validate the response into its model."""

        data = self.execute(operation.request(variables))
        return operation.parse(data)

    def close(self) -> None:
        self._session.close()


__all__ = ["GraphQLTransport"]
