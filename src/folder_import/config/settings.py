"""Configuration management built on top of the policy primitives."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .policies import Policies, load_policies

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"
ENV_OVERRIDE_PREFIX = "FOLDER_IMPORT_SETTINGS__"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries."""

    result = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _apply_env_overrides(base: Dict[str, Any]) -> Dict[str, Any]:
    """Apply overrides from FOLDER_IMPORT_SETTINGS__* environment variables."""

    result = dict(base)
    for key, value in os.environ.items():
        if not key.startswith(ENV_OVERRIDE_PREFIX):
            continue
        path = key[len(ENV_OVERRIDE_PREFIX) :].lower().split("__")
        cursor = result
        for part in path[:-1]:
            existing = cursor.get(part)
            if not isinstance(existing, dict):
                existing = {}
            cursor[part] = dict(existing)
            cursor = cursor[part]
        cursor[path[-1]] = value
    return result


class PathsConfig(BaseModel):
    """Filesystem locations used by the importer.

    Relative input files that do not exist in the working directory are looked
    up under ``data_dir``.
    """

    data_dir: Path = Field(default=PROJECT_ROOT / "data")
    logs_dir: Path = Field(default=PROJECT_ROOT / "logs")

    def ensure_exists(self) -> None:
        for field_name in type(self).model_fields:
            path = Path(getattr(self, field_name))
            if not path.is_absolute():
                path = PROJECT_ROOT / path
            path.mkdir(parents=True, exist_ok=True)
            object.__setattr__(self, field_name, path)


class Settings(BaseSettings):
    """Primary configuration object for the importer.

    Precedence (highest first): explicit kwargs or CLI overrides, environment
    variables prefixed with ``FOLDER_IMPORT_`` for top-level fields, nested
    overrides via ``FOLDER_IMPORT_SETTINGS__`` variables, environment-specific
    YAML (e.g. ``production.yaml``), ``default.yaml``, and the class defaults.
    Remote credentials live in :mod:`folder_import.config.credentials`.
    """

    model_config = SettingsConfigDict(
        env_prefix="FOLDER_IMPORT_",
        validate_assignment=True,
        extra="ignore",
    )

    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Active runtime environment",
    )
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    create_dirs: bool = Field(
        default=True,
        description="Create the directories declared in `paths` during initialisation.",
    )
    policies: Policies

    @model_validator(mode="before")
    @classmethod
    def _bootstrap_from_files(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Load YAML files and merge with provided overrides."""

        config_dir = Path(values.get("config_dir") or DEFAULT_CONFIG_DIR)
        environment = values.get("environment") or os.getenv("FOLDER_IMPORT_ENV", "development")
        base_config = _load_yaml_file(config_dir / "default.yaml")
        env_config = _load_yaml_file(config_dir / f"{environment}.yaml")
        merged = _deep_merge(base_config, env_config)
        hydrated = _apply_env_overrides(merged)

        combined = _deep_merge(hydrated, {k: v for k, v in values.items() if v is not None})
        combined.setdefault("environment", environment)

        policies_data = combined.pop("policies", None)
        if isinstance(policies_data, Policies):
            combined["policies"] = policies_data
            return combined
        combined["policies"] = load_policies(policies_data)
        return combined

    @model_validator(mode="after")
    def _ensure_paths(self) -> "Settings":
        if self.create_dirs:
            self.paths.ensure_exists()
        return self

    @property
    def policy_version(self) -> str:
        return self.policies.policy_version

    @property
    def log_file(self) -> Path:
        return Path(self.paths.logs_dir) / "folder_import.log"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a singleton settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings", "PathsConfig", "PROJECT_ROOT"]
