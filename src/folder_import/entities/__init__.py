"""Domain entities for the folder importer."""

from .core import (
    LEVELS,
    FolderNode,
    HierarchyResult,
    ImportRecord,
    ImportReport,
    ImportStats,
    Level,
    LevelResult,
    Outcome,
    PathCache,
    PathCacheKey,
    PathSource,
    RecordResult,
)

__all__ = [
    "LEVELS",
    "FolderNode",
    "HierarchyResult",
    "ImportRecord",
    "ImportReport",
    "ImportStats",
    "Level",
    "LevelResult",
    "Outcome",
    "PathCache",
    "PathCacheKey",
    "PathSource",
    "RecordResult",
]
