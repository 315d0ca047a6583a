"""Spreadsheet import pipeline public API."""

from __future__ import annotations

from .driver import ImportDriver
from .main import build_resolver, import_records, resolve_input_path, run_import
from .reader import InputFileError, load_dataframe, read_records, records_from_frame

__all__ = [
    "ImportDriver",
    "InputFileError",
    "build_resolver",
    "import_records",
    "load_dataframe",
    "read_records",
    "records_from_frame",
    "resolve_input_path",
    "run_import",
]
