"""Pydantic models describing the admin snapshot endpoint and the CLI output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from clientele.domain.model import CustomerAggregate


class SnapshotBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ColumnPayload(SnapshotBaseModel):
    name: str
    type: str = "unknown"
    nullable: bool = False
    required: bool = False


class TablePayload(SnapshotBaseModel):
    name: str
    columns: list[ColumnPayload] = Field(default_factory=list[ColumnPayload])
    row_count: int | None = Field(default=None, alias="rowCount")
    rows: list[dict[str, Any]] = Field(default_factory=list[dict[str, Any]])

    @field_validator("rows", mode="before")
    @classmethod
    def _null_rows_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class SnapshotPayload(SnapshotBaseModel):
    source: str | None = None
    generated_at: str | None = Field(default=None, alias="generatedAt")
    tables: list[TablePayload]


class ErrorResponse(SnapshotBaseModel):
    error: str
    message: str | None = None


class CustomerPayload(BaseModel):
    """Serialized customer aggregate, camelCase like the admin customers view."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    name: str
    phone: str
    email: str
    ip_address: str
    browser: str
    created_at: str
    updated_at: str
    last_order_at: str
    last_seen_at: str
    last_page: str
    logged_in: bool | None
    addresses: list[str]
    sources: list[str]

    @classmethod
    def from_aggregate(cls, aggregate: CustomerAggregate) -> CustomerPayload:
        return cls(
            user_id=aggregate.identity_key,
            name=aggregate.name,
            phone=aggregate.phone,
            email=aggregate.email,
            ip_address=aggregate.ip_address,
            browser=aggregate.browser,
            created_at=aggregate.created_at,
            updated_at=aggregate.updated_at,
            last_order_at=aggregate.last_order_at,
            last_seen_at=aggregate.last_seen_at,
            last_page=aggregate.last_page,
            logged_in=aggregate.logged_in,
            addresses=list(aggregate.addresses),
            sources=[source.value for source in aggregate.sources],
        )
