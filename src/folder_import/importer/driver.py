"""Sequential import loop: validate, resolve, tally."""

from __future__ import annotations

import time
from typing import Callable, Iterable, Sequence

from ..config.policies import ImporterPolicy, TimingPolicy
from ..entities import (
    ImportRecord,
    ImportReport,
    ImportStats,
    Outcome,
    PathCache,
    RecordResult,
)
from ..hierarchy import HierarchyResolver
from ..utils.logging import get_logger, logging_context

RecordCallback = Callable[[RecordResult, ImportStats], None]

_OUTCOME_COUNTERS = {
    Outcome.CREATED: "created",
    Outcome.EXISTS: "already_exists",
    Outcome.CACHED: "already_exists",
    Outcome.FAILED: "failed",
    Outcome.SKIPPED: "skipped",
}


class ImportDriver:
    """Process records one at a time and keep the run's counters.

    The driver owns the run's :class:`PathCache` and :class:`ImportStats`.
    A failure in one record never stops the run. In dry-run mode no remote
    call is made and every valid record is reported as created.
    """

    def __init__(
        self,
        resolver: HierarchyResolver | None,
        *,
        dry_run: bool = False,
        timing: TimingPolicy | None = None,
        policy: ImporterPolicy | None = None,
        on_record: RecordCallback | None = None,
    ) -> None:
        if resolver is None and not dry_run:
            raise ValueError("A hierarchy resolver is required unless running in dry-run mode")
        self._resolver = resolver
        self._dry_run = dry_run
        self._timing = timing or TimingPolicy()
        self._policy = policy or ImporterPolicy()
        self._on_record = on_record
        self._logger = get_logger(component="importer", dry_run=dry_run)

    def run(self, records: Iterable[ImportRecord], *, run_id: str = "-") -> ImportReport:
        rows: Sequence[ImportRecord] = list(records)
        stats = ImportStats()
        cache = PathCache()
        report = ImportReport(stats=stats, dry_run=self._dry_run)

        with logging_context(run_id=run_id):
            self._logger.info("Starting import", records=len(rows))
            for record in rows:
                with logging_context(row=record.row_number):
                    result = self.process(record, cache)
                self._tally(stats, result)
                report.results.append(result)
                if self._on_record is not None:
                    self._on_record(result, stats)
                if stats.processed % self._policy.progress_interval == 0:
                    self._logger.info("Import progress", total=len(rows), **stats.as_dict())
            self._logger.info("Import finished", cached_paths=len(cache), **stats.as_dict())
        return report

    def process(self, record: ImportRecord, cache: PathCache) -> RecordResult:
        missing = record.missing_fields()
        if missing:
            self._logger.warning("Missing required data; skipping row", row=record.row_number, missing=missing)
            return RecordResult(
                record=record,
                outcome=Outcome.SKIPPED,
                message=f"Missing {', '.join(missing)}",
            )

        if self._dry_run:
            self._logger.info("Would create", row=record.row_number, chain=record.describe())
            return RecordResult(record=record, outcome=Outcome.CREATED, message="dry run")

        try:
            hierarchy = self._resolver.ensure_hierarchy(record, cache)
        except Exception as exc:  # noqa: BLE001
            self._logger.exception("Row processing failed", row=record.row_number, chain=record.describe())
            result = RecordResult(record=record, outcome=Outcome.FAILED, message=str(exc))
        else:
            result = RecordResult(
                record=record,
                outcome=hierarchy.outcome,
                hierarchy=hierarchy,
                message=hierarchy.leaf_path or hierarchy.error,
            )
        time.sleep(self._timing.record_delay_seconds)
        return result

    def _tally(self, stats: ImportStats, result: RecordResult) -> None:
        stats.increment("processed")
        stats.increment(_OUTCOME_COUNTERS[result.outcome])
        hierarchy = result.hierarchy
        if hierarchy is not None:
            if hierarchy.used_derived_path:
                stats.increment("derived_paths")
            if hierarchy.had_anomaly:
                stats.increment("anomalies")


__all__ = ["ImportDriver", "RecordCallback"]
