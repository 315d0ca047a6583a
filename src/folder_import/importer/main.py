"""Entry points for running an import end-to-end."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..config.credentials import RemoteCredentials, load_credentials
from ..config.settings import Settings, get_settings
from ..entities import ImportRecord, ImportReport
from ..hierarchy import HierarchyResolver
from ..remote import DiscoveryClient, WriteClient, build_remote_clients
from ..utils.logging import get_logger
from .driver import ImportDriver, RecordCallback
from .reader import InputFileError, read_records

_LOGGER = get_logger(module=__name__)


def resolve_input_path(path: str | Path, settings: Settings | None = None) -> Path:
    """Locate ``path`` as given, or relative to the configured data directory."""

    settings = settings or get_settings()
    candidate = Path(path).expanduser()
    if candidate.exists() or candidate.is_absolute():
        return candidate.resolve()
    fallback = Path(settings.paths.data_dir) / candidate
    if fallback.exists():
        return fallback.resolve()
    raise InputFileError(f"File not found: {candidate} (also looked in {settings.paths.data_dir})")


def build_resolver(
    settings: Settings,
    *,
    discovery: DiscoveryClient | None = None,
    writer: WriteClient | None = None,
    credentials: RemoteCredentials | None = None,
) -> HierarchyResolver:
    """Wire the resolver, building the remote clients from credentials when not supplied."""

    policies = settings.policies
    if discovery is None or writer is None:
        built_discovery, built_writer = build_remote_clients(policies, credentials or load_credentials())
        discovery = discovery or built_discovery
        writer = writer or built_writer
    return HierarchyResolver(
        discovery,
        writer,
        shapes=policies.shapes,
        settle_delay_seconds=policies.timing.settle_delay_seconds,
        verify_created_paths=policies.importer.verify_created_paths,
    )


def import_records(
    records: Sequence[ImportRecord],
    *,
    settings: Settings | None = None,
    dry_run: bool = False,
    resolver: HierarchyResolver | None = None,
    on_record: RecordCallback | None = None,
    run_id: str = "-",
) -> ImportReport:
    settings = settings or get_settings()
    if resolver is None and not dry_run:
        resolver = build_resolver(settings)
    driver = ImportDriver(
        resolver,
        dry_run=dry_run,
        timing=settings.policies.timing,
        policy=settings.policies.importer,
        on_record=on_record,
    )
    return driver.run(records, run_id=run_id)


def run_import(
    path: str | Path,
    *,
    settings: Settings | None = None,
    dry_run: bool = False,
    resolver: HierarchyResolver | None = None,
    on_record: RecordCallback | None = None,
    run_id: str = "-",
) -> ImportReport:
    """Read ``path`` and import every record; input errors abort before any remote call."""

    settings = settings or get_settings()
    source = resolve_input_path(path, settings)
    records = read_records(source, settings.policies.columns)
    _LOGGER.info("Read input file", file=str(source), records=len(records), dry_run=dry_run)
    return import_records(
        records,
        settings=settings,
        dry_run=dry_run,
        resolver=resolver,
        on_record=on_record,
        run_id=run_id,
    )


__all__ = ["build_resolver", "import_records", "resolve_input_path", "run_import"]
