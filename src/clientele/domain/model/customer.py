"""Canonical customer aggregate and the partial patches that build it."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Final, TypeAlias

from .enums import SourceTag

if TYPE_CHECKING:
    from collections.abc import Mapping

ScalarValue: TypeAlias = "str | bool | None"


@dataclass(frozen=True, slots=True, kw_only=True)
class CustomerAggregate:
    """Merged view of one real-world customer for a single aggregation run."""

    identity_key: str
    name: str = ""
    phone: str = ""
    email: str = ""
    ip_address: str = ""
    browser: str = ""
    created_at: str = ""
    updated_at: str = ""
    last_order_at: str = ""
    last_seen_at: str = ""
    last_page: str = ""
    logged_in: bool | None = None
    addresses: tuple[str, ...] = ()
    sources: tuple[SourceTag, ...] = ()

    @property
    def is_anonymous(self) -> bool:
        """No phone, no email and nothing but telemetry behind it."""

        if self.phone.strip() or self.email.strip():
            return False
        return all(source is SourceTag.TELEMETRY for source in self.sources)


LIST_FIELDS: Final[frozenset[str]] = frozenset({"addresses", "sources"})
SCALAR_FIELDS: Final[frozenset[str]] = frozenset(
    f.name for f in fields(CustomerAggregate) if f.name not in LIST_FIELDS | {"identity_key"}
)


@dataclass(frozen=True, slots=True, kw_only=True)
class CustomerPatch:
    """Contribution of one source row (or one reduced identity) to an aggregate.

    ``values`` holds only the scalar fields this source carries; those overwrite
    whatever the aggregate had. Fields a source does not carry are left alone.
    """

    identity_key: str
    source: SourceTag
    values: Mapping[str, ScalarValue] = field(default_factory=dict["str", "ScalarValue"])
    addresses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        unknown = set(self.values) - SCALAR_FIELDS
        if unknown:
            raise ValueError(f"Unknown aggregate fields in patch: {', '.join(sorted(unknown))}")
