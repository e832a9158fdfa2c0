"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .snapshot import SnapshotSourceConfig, get_snapshot_source_config

__all__ = [
    "ConfigurationError",
    "MissingConfigurationError",
    "ResilienceConfig",
    "RetryPolicy",
    "SnapshotSourceConfig",
    "configure_logging",
    "get_snapshot_source_config",
    "optional_env_var",
    "require_env_vars",
]
