"""Spreadsheet ingestion for folder import records."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import polars as pl
from loguru import logger

from ..config.policies import ColumnPolicy
from ..entities import ImportRecord
from ..utils.helpers import clean_cell

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls", ".xlsb", ".ods"}
CSV_SUFFIXES = {".csv", ".txt"}

# Spreadsheet row of the first data row; the header occupies row 1.
_FIRST_DATA_ROW = 2


class InputFileError(RuntimeError):
    """Raised when the input file is missing, unreadable, or holds no data rows."""


def load_dataframe(path: Path) -> pl.DataFrame:
    """Load the first sheet (or the CSV body) with every column read as text."""

    if not path.exists():
        raise InputFileError(f"File not found: {path}")
    if not path.is_file():
        raise InputFileError(f"Not a file: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in CSV_SUFFIXES:
            frame = pl.read_csv(path, infer_schema=False)
        elif suffix in EXCEL_SUFFIXES:
            frame = pl.read_excel(path, sheet_id=1, infer_schema_length=0)
        else:
            raise InputFileError(f"Unsupported input format '{suffix or path.name}'")
    except InputFileError:
        raise
    except Exception as exc:  # noqa: BLE001 - engine-specific parse errors
        raise InputFileError(f"Failed to read {path.name}: {exc}") from exc

    logger.debug("Loaded input sheet", file=str(path), row_count=frame.height, columns=frame.columns)
    return frame


def normalize_headers(frame: pl.DataFrame) -> pl.DataFrame:
    """Lower-case and trim header names; later duplicates keep their original name."""

    renames: Dict[str, str] = {}
    seen: set[str] = set()
    for column in frame.columns:
        normalized = column.strip().lower()
        if normalized in seen or (normalized != column and normalized in frame.columns):
            continue
        seen.add(normalized)
        if normalized != column:
            renames[column] = normalized
    return frame.rename(renames) if renames else frame


def records_from_frame(frame: pl.DataFrame, columns: ColumnPolicy | None = None) -> List[ImportRecord]:
    """Convert rows to :class:`ImportRecord`, dropping rows with all three fields empty."""

    columns = columns or ColumnPolicy()
    frame = normalize_headers(frame)
    mapping = columns.as_mapping()
    missing = [header for header in mapping.values() if header not in frame.columns]
    if missing:
        logger.warning("Input is missing expected headers", missing=missing, columns=frame.columns)

    records: List[ImportRecord] = []
    dropped = 0
    for index, row in enumerate(frame.iter_rows(named=True)):
        values = {field_name: clean_cell(row.get(header)) for field_name, header in mapping.items()}
        if not any(values.values()):
            dropped += 1
            continue
        records.append(ImportRecord(row_number=index + _FIRST_DATA_ROW, **values))

    logger.info("Parsed import records", records=len(records), dropped_empty=dropped)
    return records


def read_records(path: str | Path, columns: ColumnPolicy | None = None) -> List[ImportRecord]:
    """Read ``path`` into import records; an input without data rows is an error."""

    source = Path(path)
    frame = load_dataframe(source)
    records = records_from_frame(frame, columns)
    if not records:
        raise InputFileError(f"No data rows found in {source.name}")
    return records


__all__ = [
    "InputFileError",
    "load_dataframe",
    "normalize_headers",
    "read_records",
    "records_from_frame",
]
