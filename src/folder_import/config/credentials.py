"""Remote API endpoints and credentials loaded from the environment."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when required remote configuration is missing or invalid."""


def _require_secret(value: SecretStr) -> SecretStr:
    if not value.get_secret_value().strip():
        raise ValueError("must not be blank")
    return value


class DiscoveryCredentials(BaseSettings):
    """Endpoint and static token for the search index."""

    model_config = SettingsConfigDict(env_prefix="CRYSTALLIZE_DISCOVERY_", extra="ignore")

    api_url: str = Field(..., min_length=1)
    access_token: SecretStr

    @field_validator("access_token")
    @classmethod
    def token_present(cls, value: SecretStr) -> SecretStr:
        return _require_secret(value)

    def headers(self) -> dict[str, str]:
        return {"X-Crystallize-Static-Auth-Token": self.access_token.get_secret_value()}


class WriteApiCredentials(BaseSettings):
    """Endpoint, token pair, and tenant for the mutation API."""

    model_config = SettingsConfigDict(env_prefix="CRYSTALLIZE_PIM_", extra="ignore")

    api_url: str = Field(..., min_length=1)
    access_token_id: SecretStr
    access_token_secret: SecretStr
    tenant_id: str = Field(..., min_length=1)

    @field_validator("access_token_id", "access_token_secret")
    @classmethod
    def tokens_present(cls, value: SecretStr) -> SecretStr:
        return _require_secret(value)

    def headers(self) -> dict[str, str]:
        return {
            "X-Crystallize-Access-Token-Id": self.access_token_id.get_secret_value(),
            "X-Crystallize-Access-Token-Secret": self.access_token_secret.get_secret_value(),
        }


@dataclass(slots=True)
class RemoteCredentials:
    discovery: DiscoveryCredentials
    write: WriteApiCredentials


def _missing_variables(exc: ValidationError, prefix: str) -> list[str]:
    names = []
    for error in exc.errors():
        location = error.get("loc") or ()
        if location:
            names.append(f"{prefix}{str(location[0]).upper()}")
    return sorted(set(names))


def load_discovery_credentials() -> DiscoveryCredentials:
    try:
        return DiscoveryCredentials()
    except ValidationError as exc:
        missing = _missing_variables(exc, "CRYSTALLIZE_DISCOVERY_")
        raise ConfigurationError(
            f"Discovery API configuration is incomplete; set {', '.join(missing)}"
        ) from exc


def load_write_credentials() -> WriteApiCredentials:
    try:
        return WriteApiCredentials()
    except ValidationError as exc:
        missing = _missing_variables(exc, "CRYSTALLIZE_PIM_")
        raise ConfigurationError(
            f"Write API configuration is incomplete; set {', '.join(missing)}"
        ) from exc


def load_credentials() -> RemoteCredentials:
    """Read both credential groups, failing fast on the first incomplete one."""

    return RemoteCredentials(
        discovery=load_discovery_credentials(),
        write=load_write_credentials(),
    )


__all__ = [
    "ConfigurationError",
    "DiscoveryCredentials",
    "RemoteCredentials",
    "WriteApiCredentials",
    "load_credentials",
    "load_discovery_credentials",
    "load_write_credentials",
]
