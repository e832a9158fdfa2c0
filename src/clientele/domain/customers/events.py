"""Reduce the telemetry event stream into per-identity current-state facts.

Two independent reductions run over the same events, both keyed by
user id -> phone -> email -> IP:

- presence: the latest event per identity (when/where/what page)
- auth: the latest login/logout event per identity

Both share one replacement rule (``supersedes``). The first event seen for an
identity is kept unconditionally, even if its timestamp cannot be parsed. After
that an incoming event wins only with a parsable timestamp that is not older
than the kept one; a kept event with an unparsable timestamp loses to the first
parsable one. An incoming unparsable timestamp never replaces anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from clientele.domain.model import AuthEventType, CustomerPatch, SourceTag

from .identity import ContactKind, ContactPoints, derive_identity_key
from .structured import coerce_mapping
from .values import carried, first_text, parse_timestamp, pick_text, safe_text

if TYPE_CHECKING:
    from collections.abc import Iterable

    from clientele.domain.model import Row

_EVENT_IDENTITY_PRIORITY: Final = (
    ContactKind.USER_ID,
    ContactKind.PHONE,
    ContactKind.EMAIL,
    ContactKind.IP,
)

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class TelemetryEvent:
    """One telemetry row with its metadata already interpreted."""

    identity_key: str
    at: str | None
    event_type: str
    ip_address: str | None = None
    browser: str | None = None
    page: str | None = None

    @classmethod
    def from_row(cls, row: Row) -> TelemetryEvent:
        meta = coerce_mapping(row.get("meta"))
        ip_address = pick_text(meta, "ipAddress", "ip")
        contacts = ContactPoints(
            user_id=first_text(row, "user_id", "userId"),
            phone=safe_text(row.get("phone")),
            email=safe_text(row.get("email")),
            ip=ip_address or "",
        )
        return cls(
            identity_key=derive_identity_key(contacts, _EVENT_IDENTITY_PRIORITY),
            at=pick_text(row, "at"),
            event_type=safe_text(row.get("type")),
            ip_address=ip_address,
            browser=pick_text(meta, "browser"),
            page=pick_text(meta, "screen", "path", "url"),
        )


@dataclass(frozen=True, slots=True)
class PresenceFact:
    """Latest event context; ``None`` marks a field the event did not have."""

    at: str | None
    ip_address: str | None
    browser: str | None
    page: str | None


@dataclass(frozen=True, slots=True)
class AuthFact:
    type: AuthEventType
    at: str | None


@dataclass(slots=True)
class EventReduction:
    """Result of folding the event stream, in first-seen identity order."""

    presence: dict[str, PresenceFact] = field(default_factory=dict["str", "PresenceFact"])
    auth: dict[str, AuthFact] = field(default_factory=dict["str", "AuthFact"])

    def to_patches(self) -> tuple[CustomerPatch, ...]:
        """One telemetry patch per identity with a presence fact."""

        patches: list[CustomerPatch] = []
        for identity_key, presence in self.presence.items():
            auth = self.auth.get(identity_key)
            logged_in = None if auth is None else auth.type is AuthEventType.LOGIN
            patches.append(
                CustomerPatch(
                    identity_key=identity_key,
                    source=SourceTag.TELEMETRY,
                    values={
                        **carried(
                            last_seen_at=presence.at,
                            ip_address=presence.ip_address,
                            browser=presence.browser,
                            last_page=presence.page,
                        ),
                        "logged_in": logged_in,
                    },
                )
            )
        return tuple(patches)


def supersedes(current_at: str | None, incoming_at: str | None) -> bool:
    """Whether an event stamped ``incoming_at`` replaces a kept one stamped ``current_at``."""

    incoming = parse_timestamp(incoming_at)
    if incoming is None:
        return False
    current = parse_timestamp(current_at)
    return current is None or incoming >= current


def reduce_events(rows: Iterable[Row]) -> EventReduction:
    reduction = EventReduction()
    unparsable = 0
    for row in rows:
        event = TelemetryEvent.from_row(row)
        if parse_timestamp(event.at) is None:
            unparsable += 1

        kept = reduction.presence.get(event.identity_key)
        if kept is None or supersedes(kept.at, event.at):
            reduction.presence[event.identity_key] = PresenceFact(
                at=event.at,
                ip_address=event.ip_address,
                browser=event.browser,
                page=event.page,
            )

        auth_type = AuthEventType.from_event_type(event.event_type)
        if auth_type is None:
            continue
        kept_auth = reduction.auth.get(event.identity_key)
        if kept_auth is None or supersedes(kept_auth.at, event.at):
            reduction.auth[event.identity_key] = AuthFact(type=auth_type, at=event.at)

    if unparsable:
        log.warning("%s telemetry event(s) carried an unparsable timestamp", unparsable)
    log.debug(
        "Reduced telemetry: identities=%s with_auth=%s",
        len(reduction.presence),
        len(reduction.auth),
    )
    return reduction
