from __future__ import annotations

import logging

import pytest

from clientele.domain.customers import AuthFact, PresenceFact, TelemetryEvent, reduce_events
from clientele.domain.customers.events import supersedes
from clientele.domain.model import AuthEventType, SourceTag
from tests.helpers.rows import event_row


def test_event_reads_structured_meta() -> None:
    event = TelemetryEvent.from_row(
        event_row(
            user_id="u1",
            meta={"ipAddress": "1.2.3.4", "browser": "Chrome", "path": "/checkout"},
        )
    )

    assert event.identity_key == "u1"
    assert event.ip_address == "1.2.3.4"
    assert event.browser == "Chrome"
    assert event.page == "/checkout"


def test_event_reparses_meta_given_as_json_string() -> None:
    event = TelemetryEvent.from_row(
        event_row(meta='{"ip": "5.6.7.8", "screen": "Home", "url": "https://x"}')
    )

    assert event.identity_key == "user_5.6.7.8"
    assert event.page == "Home"


@pytest.mark.parametrize("meta", ["{broken", "plain text", "[1, 2]", 42])
def test_malformed_meta_is_treated_as_empty(meta: object) -> None:
    event = TelemetryEvent.from_row(event_row(meta=meta))

    assert event.identity_key == "user_unknown"
    assert event.ip_address is None
    assert event.browser is None
    assert event.page is None


def test_event_identity_prefers_phone_then_email_over_ip() -> None:
    by_phone = TelemetryEvent.from_row(
        event_row(phone="999-000-1111", email="a@example.com", meta={"ip": "1.2.3.4"})
    )
    by_email = TelemetryEvent.from_row(event_row(email="A@Example.com", meta={"ip": "1.2.3.4"}))

    assert by_phone.identity_key == "user_9990001111"
    assert by_email.identity_key == "user_a@example.com"


def test_presence_keeps_latest_event_per_identity() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", at="2024-01-02T09:00:00Z", meta={"path": "/a"}),
            event_row(user_id="u1", at="2024-01-03T09:00:00Z", meta={"path": "/b"}),
            event_row(user_id="u1", at="2024-01-01T09:00:00Z", meta={"path": "/c"}),
        ]
    )

    assert reduction.presence["u1"].page == "/b"
    assert reduction.presence["u1"].at == "2024-01-03T09:00:00Z"


def test_presence_equal_timestamps_prefer_later_event() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", at="2024-01-02T09:00:00Z", meta={"path": "/first"}),
            event_row(user_id="u1", at="2024-01-02T09:00:00+00:00", meta={"path": "/second"}),
        ]
    )

    assert reduction.presence["u1"].page == "/second"


def test_unparsable_first_event_is_replaced_by_valid_later_one() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", at="yesterday-ish", meta={"path": "/broken"}),
            event_row(user_id="u1", at="2024-01-02T09:00:00Z", meta={"path": "/valid"}),
        ]
    )

    assert reduction.presence["u1"] == PresenceFact(
        at="2024-01-02T09:00:00Z", ip_address=None, browser=None, page="/valid"
    )


def test_unparsable_later_event_never_replaces_valid_one() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", at="2024-01-02T09:00:00Z", meta={"path": "/valid"}),
            event_row(user_id="u1", at="not-a-date", meta={"path": "/broken"}),
        ]
    )

    assert reduction.presence["u1"].page == "/valid"


def test_unparsable_only_event_is_still_retained() -> None:
    reduction = reduce_events([event_row(user_id="u1", at="", meta={"path": "/only"})])

    assert reduction.presence["u1"].page == "/only"


def test_supersedes_rules() -> None:
    assert supersedes("2024-01-01T00:00:00Z", "2024-01-01T00:00:00Z")
    assert supersedes("garbage", "2024-01-01T00:00:00Z")
    assert supersedes(None, "2024-01-01T00:00:00Z")
    assert not supersedes("2024-01-02T00:00:00Z", "2024-01-01T00:00:00Z")
    assert not supersedes("garbage", "also garbage")
    assert not supersedes("2024-01-01T00:00:00Z", None)


def test_auth_tracks_latest_login_or_logout_only() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", type="auth_login", at="2024-01-01T09:00:00Z"),
            event_row(user_id="u1", type="LOGOUT", at="2024-01-02T09:00:00Z"),
            event_row(user_id="u1", type="page_view", at="2024-01-03T09:00:00Z"),
        ]
    )

    assert reduction.auth["u1"] == AuthFact(type=AuthEventType.LOGOUT, at="2024-01-02T09:00:00Z")
    assert reduction.presence["u1"].at == "2024-01-03T09:00:00Z"


def test_auth_reduction_is_independent_of_presence() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", type="page_view", at="2024-01-05T09:00:00Z"),
            event_row(user_id="u1", type="login", at="2024-01-01T09:00:00Z"),
        ]
    )

    assert reduction.presence["u1"].at == "2024-01-05T09:00:00Z"
    assert reduction.auth["u1"].type is AuthEventType.LOGIN


def test_patches_map_auth_fact_to_tri_state_login() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="in", type="login", meta={"ip": "1.1.1.1", "browser": "Safari"}),
            event_row(user_id="out", type="logout"),
            event_row(user_id="unknown", type="page_view"),
        ]
    )

    patches = {patch.identity_key: patch for patch in reduction.to_patches()}

    assert patches["in"].values == {
        "last_seen_at": "2024-01-02T09:00:00Z",
        "ip_address": "1.1.1.1",
        "browser": "Safari",
        "logged_in": True,
    }
    assert patches["out"].values["logged_in"] is False
    assert patches["unknown"].values["logged_in"] is None
    assert all(patch.source is SourceTag.TELEMETRY for patch in patches.values())


def test_anonymous_events_cluster_on_placeholder_identity() -> None:
    reduction = reduce_events([event_row(), event_row(at="2024-02-01T00:00:00Z")])

    assert list(reduction.presence) == ["user_unknown"]


def test_unparsable_timestamps_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        reduce_events([event_row(user_id="u1", at="soon")])

    assert "unparsable timestamp" in caplog.text


def test_out_of_range_offset_timestamp_counts_as_unparsable() -> None:
    reduction = reduce_events(
        [
            event_row(user_id="u1", at="0001-01-01T00:00:00+05:00", meta={"path": "/edge"}),
            event_row(user_id="u1", at="2024-01-02T09:00:00Z", meta={"path": "/valid"}),
            event_row(user_id="u1", at="9999-12-31T23:00:00-05:00", meta={"path": "/late"}),
        ]
    )

    assert reduction.presence["u1"].page == "/valid"
