"""Configuration utilities for the folder importer."""

from .credentials import (
    ConfigurationError,
    DiscoveryCredentials,
    RemoteCredentials,
    WriteApiCredentials,
    load_credentials,
    load_discovery_credentials,
    load_write_credentials,
)
from .policies import (
    ColumnPolicy,
    DiscoveryPolicy,
    ImporterPolicy,
    Policies,
    ShapePolicy,
    TimingPolicy,
    WritePolicy,
    load_policies,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "Policies",
    "load_policies",
    "ShapePolicy",
    "ColumnPolicy",
    "DiscoveryPolicy",
    "WritePolicy",
    "TimingPolicy",
    "ImporterPolicy",
    "ConfigurationError",
    "DiscoveryCredentials",
    "WriteApiCredentials",
    "RemoteCredentials",
    "load_credentials",
    "load_discovery_credentials",
    "load_write_credentials",
]
