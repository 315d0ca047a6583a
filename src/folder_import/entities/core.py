"""Core domain entities shared by the remote clients, resolver, and driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..utils.paths import parent_of


class Level(str, Enum):
    """The three folder levels, ordered from the root down."""

    BRAND = "brand"
    MODEL_LINE = "model_line"
    SUB_MODEL_LINE = "sub_model_line"

    @property
    def label(self) -> str:
        return self.value.replace("_", "-")


LEVELS: tuple[Level, ...] = (Level.BRAND, Level.MODEL_LINE, Level.SUB_MODEL_LINE)


class Outcome(str, Enum):
    CREATED = "created"
    EXISTS = "exists"
    CACHED = "cached"
    FAILED = "failed"
    SKIPPED = "skipped"


class PathSource(str, Enum):
    """Where a resolved path came from."""

    DISCOVERY = "discovery"
    CACHE = "cache"
    DERIVED = "derived"


class FolderNode(BaseModel):
    """A folder observed through either remote API.

    ``id`` is stripped of any locale/publication suffix and can be used as a
    parent reference; ``raw_id`` keeps the identifier exactly as returned.
    The write API does not return paths, so ``path`` is optional.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(default="")
    shape: Optional[str] = Field(default=None)
    path: Optional[str] = Field(default=None)
    parent_path: Optional[str] = Field(default=None)
    raw_id: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def _derive_parent_path(self) -> "FolderNode":
        if self.parent_path is None and self.path is not None:
            object.__setattr__(self, "parent_path", parent_of(self.path))
        if self.raw_id is None:
            object.__setattr__(self, "raw_id", self.id)
        return self


class ImportRecord(BaseModel):
    """One spreadsheet row describing a brand > model line > sub-model line chain."""

    row_number: int = Field(default=0, ge=0, description="Spreadsheet row, the header being row 1.")
    brand: str = Field(default="")
    model_line: str = Field(default="")
    sub_model_line: str = Field(default="")

    def name_for(self, level: Level) -> str:
        return getattr(self, level.value).strip()

    def missing_fields(self) -> List[str]:
        return [level.label for level in LEVELS if not self.name_for(level)]

    @property
    def is_valid(self) -> bool:
        return not self.missing_fields()

    def describe(self) -> str:
        return " > ".join(self.name_for(level) or "?" for level in LEVELS)


class PathCacheKey(NamedTuple):
    level: Level
    name: str
    parent_path: str


class PathCache:
    """Run-scoped mapping of ``(level, name, parent_path)`` to a resolved path.

    Entries are never evicted during a run. The cache only saves remote calls;
    another process may still create a duplicate behind its back.
    """

    def __init__(self) -> None:
        self._entries: Dict[PathCacheKey, str] = {}

    @staticmethod
    def key(level: Level, name: str, parent_path: str) -> PathCacheKey:
        return PathCacheKey(level, name, parent_path)

    def get(self, level: Level, name: str, parent_path: str) -> str | None:
        return self._entries.get(self.key(level, name, parent_path))

    def store(self, level: Level, name: str, parent_path: str, path: str) -> None:
        self._entries[self.key(level, name, parent_path)] = path

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PathCacheKey]:
        return iter(self._entries)

    def clear(self) -> None:
        self._entries.clear()


@dataclass(slots=True)
class LevelResult:
    """Outcome of ensuring a single folder level."""

    level: Level
    name: str
    outcome: Outcome
    path: str | None = None
    path_source: PathSource | None = None
    anomaly: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not Outcome.FAILED


@dataclass(slots=True)
class HierarchyResult:
    """Per-record result of walking all three levels."""

    levels: List[LevelResult] = field(default_factory=list)

    @property
    def outcome(self) -> Outcome:
        if len(self.levels) < len(LEVELS) or any(not level.succeeded for level in self.levels):
            return Outcome.FAILED
        if self.levels[-1].outcome is Outcome.CREATED:
            return Outcome.CREATED
        return Outcome.EXISTS

    @property
    def leaf_path(self) -> str | None:
        if self.outcome is Outcome.FAILED:
            return None
        return self.levels[-1].path

    @property
    def used_derived_path(self) -> bool:
        return any(level.path_source is PathSource.DERIVED for level in self.levels)

    @property
    def had_anomaly(self) -> bool:
        return any(level.anomaly for level in self.levels)

    @property
    def error(self) -> str | None:
        for level in self.levels:
            if level.error:
                return level.error
        return None


@dataclass(slots=True)
class ImportStats:
    """Monotonic counters for one import run."""

    processed: int = 0
    created: int = 0
    already_exists: int = 0
    failed: int = 0
    skipped: int = 0
    derived_paths: int = 0
    anomalies: int = 0

    def increment(self, counter: str, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("Import counters never decrease")
        if counter not in self.as_dict():
            raise KeyError(f"Unknown import counter: {counter}")
        setattr(self, counter, getattr(self, counter) + amount)

    def as_dict(self) -> Dict[str, int]:
        return {
            "processed": self.processed,
            "created": self.created,
            "already_exists": self.already_exists,
            "failed": self.failed,
            "skipped": self.skipped,
            "derived_paths": self.derived_paths,
            "anomalies": self.anomalies,
        }


@dataclass(slots=True)
class RecordResult:
    record: ImportRecord
    outcome: Outcome
    hierarchy: HierarchyResult | None = None
    message: str | None = None


@dataclass(slots=True)
class ImportReport:
    """Stats plus per-record results of a finished run."""

    stats: ImportStats
    results: List[RecordResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def has_failures(self) -> bool:
        return self.stats.failed > 0


__all__ = [
    "FolderNode",
    "HierarchyResult",
    "ImportRecord",
    "ImportReport",
    "ImportStats",
    "LEVELS",
    "Level",
    "LevelResult",
    "Outcome",
    "PathCache",
    "PathCacheKey",
    "PathSource",
    "RecordResult",
]
