"""Snapshot source configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig

SNAPSHOT_PATH = "/api/admin/supabase/snapshot"
SNAPSHOT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class SnapshotSourceConfig:
    """Where the admin snapshot is fetched from and how to authenticate."""

    base_url: str
    resilience: ResilienceConfig
    admin_token: str | None = None

    @property
    def snapshot_url(self) -> str:
        return self.base_url.rstrip("/") + SNAPSHOT_PATH


def get_snapshot_source_config(
    *,
    base_url: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> SnapshotSourceConfig:
    """Build the snapshot source config, falling back to ``CLIENTELE_*`` variables."""

    if base_url is None:
        base_url = require_env_vars(("CLIENTELE_SNAPSHOT_URL",))["CLIENTELE_SNAPSHOT_URL"]
    if not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"Snapshot URL must be http(s): {base_url}")

    timeout = optional_float_env_var("CLIENTELE_HTTP_TIMEOUT")
    if timeout is not None and timeout <= 0:
        raise ConfigurationError("CLIENTELE_HTTP_TIMEOUT must be positive")

    return SnapshotSourceConfig(
        base_url=base_url,
        admin_token=optional_env_var("CLIENTELE_ADMIN_TOKEN"),
        resilience=resilience
        or ResilienceConfig(
            name="admin-snapshot",
            timeout_seconds=timeout or SNAPSHOT_TIMEOUT_SECONDS,
        ),
    )
