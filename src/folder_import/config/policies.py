"""Policy models governing remote calls, timing, and spreadsheet layout."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShapePolicy(BaseModel):
    """Shape identifiers assigned to each hierarchy level."""

    brand: str = Field(default="merk", min_length=1)
    model_line: str = Field(default="modellijn", min_length=1)
    sub_model_line: str = Field(default="sub-modellijn", min_length=1)


class ColumnPolicy(BaseModel):
    """Spreadsheet header names, matched case-insensitively after trimming."""

    brand: str = Field(default="merk", min_length=1)
    model_line: str = Field(default="modellijn", min_length=1)
    sub_model_line: str = Field(default="sub-modellijn", min_length=1)

    @field_validator("brand", "model_line", "sub_model_line")
    @classmethod
    def _normalize_header(cls, value: str) -> str:
        return value.strip().lower()

    def as_mapping(self) -> Dict[str, str]:
        """Return ``{record_field: header}`` pairs."""

        return {
            "brand": self.brand,
            "model_line": self.model_line,
            "sub_model_line": self.sub_model_line,
        }


class DiscoveryPolicy(BaseModel):
    """Settings for the read-only search index."""

    language: str = Field(default="nl", min_length=2)
    search_limit: int = Field(default=20, ge=1, le=100)
    term_search_limit: int = Field(default=10, ge=1, le=100)
    id_suffix_pattern: str = Field(default=r"-[a-z]{2}-published$", min_length=1)

    @field_validator("id_suffix_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"id_suffix_pattern is not a valid regular expression: {exc}") from exc
        return value


class WritePolicy(BaseModel):
    """Settings for the authoritative mutation API."""

    language: str = Field(default="nl", min_length=2)
    publish_languages: List[str] = Field(default_factory=lambda: ["nl", "en"])
    disable_component_validation: bool = Field(default=False)

    @field_validator("publish_languages", mode="before")
    @classmethod
    def _normalize_languages(cls, value: List[str]) -> List[str]:
        return [code.strip().lower() for code in value if code and code.strip()]


class TimingPolicy(BaseModel):
    """Fixed delays and timeouts for the sequential import loop."""

    request_timeout_seconds: float = Field(default=30.0, gt=0.0)
    settle_delay_seconds: float = Field(default=1.0, ge=0.0)
    record_delay_seconds: float = Field(default=0.1, ge=0.0)


class ImporterPolicy(BaseModel):
    """Behaviour of the import driver and the hierarchy resolver."""

    progress_interval: int = Field(default=50, ge=1)
    verify_created_paths: bool = Field(
        default=True,
        description="Re-query discovery after a create to obtain the authoritative path.",
    )


class Policies(BaseModel):
    """Aggregate of every policy section."""

    model_config = ConfigDict(extra="forbid")

    policy_version: str = Field(default="1")
    shapes: ShapePolicy = Field(default_factory=ShapePolicy)
    columns: ColumnPolicy = Field(default_factory=ColumnPolicy)
    discovery: DiscoveryPolicy = Field(default_factory=DiscoveryPolicy)
    write: WritePolicy = Field(default_factory=WritePolicy)
    timing: TimingPolicy = Field(default_factory=TimingPolicy)
    importer: ImporterPolicy = Field(default_factory=ImporterPolicy)


def load_policies(data: Mapping[str, Any] | None) -> Policies:
    """Validate a raw mapping into :class:`Policies`."""

    return Policies.model_validate(dict(data or {}))


__all__ = [
    "ColumnPolicy",
    "DiscoveryPolicy",
    "ImporterPolicy",
    "Policies",
    "ShapePolicy",
    "TimingPolicy",
    "WritePolicy",
    "load_policies",
]
