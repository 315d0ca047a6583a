"""Tests for the sequential import driver."""

from __future__ import annotations

from typing import List

import pytest

from folder_import.config.policies import ImporterPolicy, TimingPolicy
from folder_import.entities import ImportRecord, Outcome, PathCache
from folder_import.hierarchy import HierarchyResolver
from folder_import.importer import ImportDriver, import_records

from fakes import FakeCrystallize


def _records() -> List[ImportRecord]:
    return [
        ImportRecord(row_number=2, brand="Acme", model_line="Pro", sub_model_line="Pro X"),
        ImportRecord(row_number=3, brand="Acme", model_line="", sub_model_line="Pro Y"),
        ImportRecord(row_number=4, brand="Acme", model_line="Pro", sub_model_line="Pro Z"),
    ]


def test_invalid_record_does_not_stop_the_run(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    report = ImportDriver(resolver, timing=TimingPolicy(record_delay_seconds=0)).run(_records())

    stats = report.stats
    assert stats.processed == 3
    assert stats.skipped == 1
    assert stats.created == 2
    assert stats.failed == 0
    assert [result.outcome for result in report.results] == [Outcome.CREATED, Outcome.SKIPPED, Outcome.CREATED]
    assert report.results[1].message == "Missing model-line"
    assert fake_api.folder_at("/acme/pro/pro-z") is not None
    assert len(fake_api.operations("CreateFolder")) == 4


def test_rerun_counts_existing_folders(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    driver = ImportDriver(resolver, timing=TimingPolicy(record_delay_seconds=0))
    driver.run(_records())

    second = driver.run(_records())

    assert second.stats.created == 0
    assert second.stats.already_exists == 2
    assert second.stats.skipped == 1
    assert len(fake_api.operations("CreateFolder")) == 4


def test_dry_run_never_calls_remote(fake_api: FakeCrystallize) -> None:
    report = ImportDriver(None, dry_run=True).run(_records())

    assert report.dry_run
    assert report.stats.created == 2
    assert report.stats.skipped == 1
    assert fake_api.calls == []


def test_driver_requires_resolver_for_live_runs() -> None:
    with pytest.raises(ValueError):
        ImportDriver(None)


def test_unexpected_error_is_isolated_to_its_record(resolver: HierarchyResolver, monkeypatch) -> None:
    original = resolver.ensure_hierarchy

    def flaky(record: ImportRecord, cache: PathCache):
        if record.row_number == 2:
            raise RuntimeError("unexpected")
        return original(record, cache)

    monkeypatch.setattr(resolver, "ensure_hierarchy", flaky)

    report = ImportDriver(resolver, timing=TimingPolicy(record_delay_seconds=0)).run(_records())

    assert report.stats.failed == 1
    assert report.stats.created == 1
    assert report.has_failures
    assert report.results[0].message == "unexpected"


def test_record_delay_and_callback(resolver: HierarchyResolver, sleeps: List[float]) -> None:
    seen: List[int] = []
    driver = ImportDriver(
        resolver,
        timing=TimingPolicy(record_delay_seconds=0.1),
        policy=ImporterPolicy(progress_interval=1),
        on_record=lambda result, stats: seen.append(stats.processed),
    )

    driver.run(_records())

    assert seen == [1, 2, 3]
    assert sleeps.count(0.1) == 2


def test_derived_paths_are_counted(resolver: HierarchyResolver, fake_api: FakeCrystallize) -> None:
    fake_api.stale_search = True

    report = ImportDriver(resolver, timing=TimingPolicy(record_delay_seconds=0)).run(_records()[:1])

    assert report.stats.created == 1
    assert report.stats.derived_paths == 1
    assert report.stats.anomalies == 0


def test_import_records_uses_settings_timing(settings, resolver: HierarchyResolver, sleeps: List[float]) -> None:
    report = import_records(_records()[:1], settings=settings, resolver=resolver, run_id="run-1")

    assert report.stats.created == 1
    assert 0.1 not in sleeps
