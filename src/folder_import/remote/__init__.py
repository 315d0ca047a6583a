"""Remote API package exports."""

from __future__ import annotations

from typing import Tuple

import requests

from ..config.credentials import DiscoveryCredentials, RemoteCredentials, WriteApiCredentials
from ..config.policies import Policies
from .discovery import DiscoveryClient
from .errors import (
    GraphQLResponseError,
    NodeCreationError,
    RemoteApiError,
    ResponseShapeError,
    TransportError,
)
from .transport import GraphQLTransport
from .writer import WriteClient


def build_discovery_transport(
    credentials: DiscoveryCredentials,
    policies: Policies,
    *,
    session: requests.Session | None = None,
) -> GraphQLTransport:
    return GraphQLTransport(
        credentials.api_url,
        headers=credentials.headers(),
        timeout_seconds=policies.timing.request_timeout_seconds,
        session=session,
        api_name="discovery",
    )


def build_write_transport(
    credentials: WriteApiCredentials,
    policies: Policies,
    *,
    session: requests.Session | None = None,
) -> GraphQLTransport:
    return GraphQLTransport(
        credentials.api_url,
        headers=credentials.headers(),
        timeout_seconds=policies.timing.request_timeout_seconds,
        session=session,
        api_name="write",
    )


def build_remote_clients(
    policies: Policies,
    credentials: RemoteCredentials,
    *,
    session: requests.Session | None = None,
) -> Tuple[DiscoveryClient, WriteClient]:
    """Construct the discovery and write clients wired according to policy settings."""

    discovery = DiscoveryClient(
        build_discovery_transport(credentials.discovery, policies, session=session),
        policy=policies.discovery,
    )
    writer = WriteClient(
        build_write_transport(credentials.write, policies, session=session),
        discovery,
        tenant_id=credentials.write.tenant_id,
        policy=policies.write,
    )
    return discovery, writer


__all__ = [
    "DiscoveryClient",
    "GraphQLResponseError",
    "GraphQLTransport",
    "NodeCreationError",
    "RemoteApiError",
    "ResponseShapeError",
    "TransportError",
    "WriteClient",
    "build_discovery_transport",
    "build_remote_clients",
    "build_write_transport",
]
