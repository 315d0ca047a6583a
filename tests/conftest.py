"""Shared fixtures wiring the clients to the in-memory GraphQL fake."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from folder_import.config.policies import Policies
from folder_import.config.settings import Settings
from folder_import.hierarchy import HierarchyResolver
from folder_import.remote import DiscoveryClient, GraphQLTransport, WriteClient

from fakes import DISCOVERY_URL, TENANT_ID, WRITE_URL, FakeCrystallize


@pytest.fixture()
def fake_api() -> FakeCrystallize:
    return FakeCrystallize()


@pytest.fixture()
def policies() -> Policies:
    return Policies()


@pytest.fixture()
def discovery(fake_api: FakeCrystallize, policies: Policies) -> DiscoveryClient:
    transport = GraphQLTransport(
        DISCOVERY_URL,
        headers={"X-Crystallize-Static-Auth-Token": "static"},
        session=fake_api,
        api_name="discovery",
    )
    return DiscoveryClient(transport, policy=policies.discovery)


@pytest.fixture()
def writer(fake_api: FakeCrystallize, discovery: DiscoveryClient, policies: Policies) -> WriteClient:
    transport = GraphQLTransport(
        WRITE_URL,
        headers={"X-Crystallize-Access-Token-Id": "id", "X-Crystallize-Access-Token-Secret": "secret"},
        session=fake_api,
        api_name="write",
    )
    return WriteClient(transport, discovery, tenant_id=TENANT_ID, policy=policies.write)


@pytest.fixture()
def sleeps(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    recorded: List[float] = []
    monkeypatch.setattr("time.sleep", recorded.append)
    return recorded


@pytest.fixture()
def resolver(discovery: DiscoveryClient, writer: WriteClient, policies: Policies, sleeps) -> HierarchyResolver:
    return HierarchyResolver(
        discovery,
        writer,
        shapes=policies.shapes,
        settle_delay_seconds=1.0,
    )


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="testing",
        paths={"data_dir": tmp_path / "data", "logs_dir": tmp_path / "logs"},
    )
