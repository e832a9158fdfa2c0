"""HTTP fetcher for the admin snapshot endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from clientele.adapters.http_resilience import ResilientClient
from clientele.config import SnapshotSourceConfig, get_snapshot_source_config
from clientele.domain.model import Collection, Snapshot, SnapshotShapeError

from .schema import ErrorResponse, SnapshotPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from clientele.config import ResilienceConfig
    from clientele.domain.ports.fetching import SnapshotFetcher

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class SnapshotFetchError(RuntimeError):
    """Raised when the snapshot endpoint answers with an application-level error."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class HttpSnapshotFetcher:
    """Fetch the snapshot over HTTP, asking only for the tables aggregation reads."""

    config: SnapshotSourceConfig = field(default_factory=get_snapshot_source_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, *, collections: Sequence[Collection] | None = None) -> Snapshot:
        return asyncio.run(self._fetch_snapshot_async(collections or tuple(Collection)))

    def _resilience(self) -> ResilienceConfig:
        resilience = self.config.resilience
        if self.config.admin_token is None:
            return resilience
        return replace(resilience, bearer_token=self.config.admin_token)

    async def _fetch_snapshot_async(self, collections: Sequence[Collection]) -> Snapshot:
        params = httpx.QueryParams(
            {"tables": ",".join(collection.table_name for collection in collections)}
        )
        async with self.client_factory(self._resilience()) as client:
            response = await client.get(self.config.snapshot_url, params=params)

        payload = _decode_json(response)
        if isinstance(payload, dict) and "error" in payload:
            error_payload = ErrorResponse.model_validate(payload)
            log.error(f"Snapshot endpoint error {error_payload.error}: {error_payload.message}")
            raise SnapshotFetchError(
                error_payload.message or error_payload.error, code=error_payload.error
            )
        response.raise_for_status()

        try:
            snapshot_payload = SnapshotPayload.model_validate(payload)
        except ValidationError as exc:
            raise SnapshotShapeError(f"Malformed snapshot payload: {exc}") from exc

        log.info(
            "Fetched snapshot: source=%s generated_at=%s tables=%s",
            snapshot_payload.source,
            snapshot_payload.generated_at,
            len(snapshot_payload.tables),
        )
        return Snapshot.from_tables(
            table.model_dump(include={"name", "rows"}) for table in snapshot_payload.tables
        )


def _decode_json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        response.raise_for_status()
        raise SnapshotFetchError(
            f"Snapshot endpoint returned non-JSON body (HTTP {response.status_code})"
        ) from None


if TYPE_CHECKING:
    _fetcher_check: SnapshotFetcher = HttpSnapshotFetcher()
