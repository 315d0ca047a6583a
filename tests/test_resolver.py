"""Tests for get-or-create resolution of the three-level hierarchy."""

from __future__ import annotations

from typing import List

from folder_import.entities import ImportRecord, Level, Outcome, PathCache, PathSource
from folder_import.hierarchy import HierarchyResolver
from folder_import.remote import DiscoveryClient, GraphQLTransport, WriteClient

from fakes import DISCOVERY_URL, TENANT_ID, WRITE_URL, FakeCrystallize, FakeResponse


def _record(brand: str = "Acme", model_line: str = "Pro", sub_model_line: str = "Pro X") -> ImportRecord:
    return ImportRecord(row_number=2, brand=brand, model_line=model_line, sub_model_line=sub_model_line)


def _fresh_resolver(fake_api: FakeCrystallize) -> HierarchyResolver:
    discovery = DiscoveryClient(GraphQLTransport(DISCOVERY_URL, session=fake_api, api_name="discovery"))
    writer = WriteClient(
        GraphQLTransport(WRITE_URL, session=fake_api, api_name="write"),
        discovery,
        tenant_id=TENANT_ID,
    )
    return HierarchyResolver(discovery, writer, settle_delay_seconds=0)


def test_end_to_end_creates_three_levels(
    resolver: HierarchyResolver, fake_api: FakeCrystallize, sleeps: List[float]
) -> None:
    result = resolver.ensure_hierarchy(_record(), PathCache())

    assert result.outcome is Outcome.CREATED
    assert result.leaf_path == "/acme/pro/pro-x"
    assert [level.outcome for level in result.levels] == [Outcome.CREATED] * 3
    assert [level.path for level in result.levels] == ["/acme", "/acme/pro", "/acme/pro/pro-x"]
    assert all(level.path_source is PathSource.DISCOVERY for level in result.levels)
    assert len(fake_api.operations("CreateFolder")) == 3
    assert [folder.shape for folder in fake_api.folders] == ["merk", "modellijn", "sub-modellijn"]
    assert sleeps == [1.0, 1.0, 1.0]


def test_second_run_is_idempotent(fake_api: FakeCrystallize, sleeps: List[float]) -> None:
    first = _fresh_resolver(fake_api).ensure_hierarchy(_record(), PathCache())
    assert first.outcome is Outcome.CREATED

    second = _fresh_resolver(fake_api).ensure_hierarchy(_record(), PathCache())

    assert second.outcome is Outcome.EXISTS
    assert [level.outcome for level in second.levels] == [Outcome.EXISTS] * 3
    assert second.leaf_path == "/acme/pro/pro-x"
    assert len(fake_api.operations("CreateFolder")) == 3


def test_cache_short_circuits_remote_calls(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    cache = PathCache()
    resolver.ensure_hierarchy(_record(), cache)
    calls_after_first = len(fake_api.calls)

    result = resolver.ensure_hierarchy(_record(sub_model_line="Pro X"), cache)

    assert [level.outcome for level in result.levels] == [Outcome.CACHED] * 3
    assert result.outcome is Outcome.EXISTS
    assert len(fake_api.calls) == calls_after_first


def test_siblings_share_resolved_parents(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    cache = PathCache()
    resolver.ensure_hierarchy(_record(sub_model_line="Pro X"), cache)

    result = resolver.ensure_hierarchy(_record(sub_model_line="Pro Y"), cache)

    assert [level.outcome for level in result.levels] == [Outcome.CACHED, Outcome.CACHED, Outcome.CREATED]
    assert result.leaf_path == "/acme/pro/pro-y"
    assert len(fake_api.operations("CreateFolder")) == 4


def test_model_lines_resolve_under_their_own_brand(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.add_folder("Globex", "merk", "/globex")
    fake_api.add_folder("Pro", "modellijn", "/globex/pro")

    result = resolver.ensure(Level.MODEL_LINE, "Pro", "/acme", PathCache())

    assert result.outcome is Outcome.CREATED
    assert result.path == "/acme/pro"
    assert fake_api.folder_at("/acme/pro") is not None


def test_existing_folder_under_parent_is_reused(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.add_folder("Pro", "modellijn", "/acme/pro")
    cache = PathCache()

    result = resolver.ensure(Level.MODEL_LINE, "Pro", "/acme", cache)

    assert result.outcome is Outcome.EXISTS
    assert result.path == "/acme/pro"
    assert cache.get(Level.MODEL_LINE, "Pro", "/acme") == "/acme/pro"
    assert fake_api.operations("CreateFolder") == []


def test_stale_index_falls_back_to_derived_path(
    resolver: HierarchyResolver, fake_api: FakeCrystallize, sleeps: List[float]
) -> None:
    fake_api.stale_search = True

    result = resolver.ensure_hierarchy(_record(brand="Älvsbyhus AB"), PathCache())

    assert result.outcome is Outcome.CREATED
    assert result.leaf_path == "/alvsbyhus-ab/pro/pro-x"
    assert result.used_derived_path
    assert not result.had_anomaly
    assert all(level.path_source is PathSource.DERIVED for level in result.levels)


def test_malformed_path_after_create_is_replaced(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    fake_api.malformed_paths = True
    cache = PathCache()

    result = resolver.ensure(Level.BRAND, "Acme", "/", cache)

    assert result.outcome is Outcome.CREATED
    assert result.path == "/acme"
    assert result.anomaly
    assert cache.get(Level.BRAND, "Acme", "/") == "/acme"


def test_malformed_path_on_existing_folder_is_replaced(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.malformed_paths = True

    result = resolver.ensure(Level.BRAND, "Acme", "/", PathCache())

    assert result.outcome is Outcome.EXISTS
    assert result.path == "/acme"
    assert result.anomaly
    assert result.path_source is PathSource.DERIVED


def test_malformed_model_line_path_after_create_is_flagged(
    resolver: HierarchyResolver, fake_api: FakeCrystallize
) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.malformed_paths = True

    result = resolver.ensure(Level.MODEL_LINE, "Pro", "/acme", PathCache())

    assert result.outcome is Outcome.CREATED
    assert result.path == "/acme/pro"
    assert result.anomaly
    assert result.path_source is PathSource.DERIVED


def test_existing_model_line_with_malformed_path_is_not_duplicated(
    resolver: HierarchyResolver, fake_api: FakeCrystallize
) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.add_folder("Pro", "modellijn", "/acme/pro")
    fake_api.malformed_paths = True

    result = resolver.ensure(Level.MODEL_LINE, "Pro", "/acme", PathCache())

    assert result.outcome is Outcome.EXISTS
    assert result.path == "/acme/pro"
    assert result.anomaly
    assert fake_api.operations("CreateFolder") == []
    assert [folder.path for folder in fake_api.folders].count("/acme/pro") == 1


def test_existing_sub_model_line_with_malformed_path_is_not_duplicated(
    resolver: HierarchyResolver, fake_api: FakeCrystallize
) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.add_folder("Pro", "modellijn", "/acme/pro")
    fake_api.add_folder("Pro X", "sub-modellijn", "/acme/pro/pro-x")
    fake_api.malformed_paths = True

    result = resolver.ensure(Level.SUB_MODEL_LINE, "Pro X", "/acme/pro", PathCache())

    assert result.outcome is Outcome.EXISTS
    assert result.path == "/acme/pro/pro-x"
    assert result.anomaly
    assert fake_api.operations("CreateFolder") == []


def test_malformed_model_line_under_other_brand_is_not_reused(
    resolver: HierarchyResolver, fake_api: FakeCrystallize
) -> None:
    fake_api.add_folder("Acme", "merk", "/acme")
    fake_api.add_folder("Globex", "merk", "/globex")
    fake_api.add_folder("Pro", "modellijn", "/globex/pro")
    fake_api.malformed_paths = True

    result = resolver.ensure(Level.MODEL_LINE, "Pro", "/acme", PathCache())

    assert result.outcome is Outcome.CREATED
    assert result.path == "/acme/pro"
    assert fake_api.folder_at("/acme/pro") is not None


def test_identifier_parent_is_resolved_to_path(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    brand = fake_api.add_folder("Acme", "merk", "/acme")

    result = resolver.ensure(Level.MODEL_LINE, "Pro", f"{brand.id}-nl-published", PathCache())

    assert result.outcome is Outcome.CREATED
    assert result.path == "/acme/pro"


def test_unresolvable_identifier_parent_fails(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    result = resolver.ensure(Level.MODEL_LINE, "Pro", "no-such-id", PathCache())

    assert result.outcome is Outcome.FAILED
    assert fake_api.operations("CreateFolder") == []


def test_failed_level_aborts_remaining_levels(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    fake_api.fail_operations["CreateFolder"] = FakeResponse({"errors": [{"message": "Shape not found"}]})

    result = resolver.ensure_hierarchy(_record(), PathCache())

    assert result.outcome is Outcome.FAILED
    assert len(result.levels) == 1
    assert result.levels[0].level is Level.BRAND
    assert "Shape not found" in result.error
    assert result.leaf_path is None


def test_unverified_creates_use_derived_paths(discovery: DiscoveryClient, writer: WriteClient, sleeps) -> None:
    resolver = HierarchyResolver(discovery, writer, verify_created_paths=False)

    result = resolver.ensure_hierarchy(_record(), PathCache())

    assert result.leaf_path == "/acme/pro/pro-x"
    assert all(level.path_source is PathSource.DERIVED for level in result.levels)
    assert sleeps == []
