"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceTag(StrEnum):
    """Marker recording which input collection contributed to an aggregate."""

    PROFILE = "profile"
    BEHAVIOR = "behavior"
    DELIVERY_ORDER = "delivery-order"
    RIDE_BOOKING = "ride-booking"
    BOOKING = "booking"
    TELEMETRY = "telemetry"


class Collection(StrEnum):
    """Snapshot collections the aggregation reads, by their admin alias."""

    PROFILES = "userProfiles"
    BEHAVIOR_SIGNALS = "userSignals"
    BOOKINGS = "travelBookings"
    RIDE_BOOKINGS = "cabBookings"
    DELIVERY_ORDERS = "foodOrders"
    TELEMETRY_EVENTS = "securityEvents"

    @property
    def table_name(self) -> str:
        """Storage table backing this collection."""

        return _TABLE_BY_COLLECTION[self]

    @classmethod
    def from_name(cls, name: str) -> Collection | None:
        """Resolve an admin alias or a storage table name; ``None`` if unrecognized."""

        try:
            return cls(name)
        except ValueError:
            return _COLLECTION_BY_TABLE.get(name)


_TABLE_BY_COLLECTION: dict[Collection, str] = {
    Collection.PROFILES: "ev_user_profiles",
    Collection.BEHAVIOR_SIGNALS: "ev_user_behavior_profiles",
    Collection.BOOKINGS: "ev_bookings",
    Collection.RIDE_BOOKINGS: "ev_cab_bookings",
    Collection.DELIVERY_ORDERS: "ev_food_orders",
    Collection.TELEMETRY_EVENTS: "ev_analytics_events",
}
_COLLECTION_BY_TABLE: dict[str, Collection] = {
    table: collection for collection, table in _TABLE_BY_COLLECTION.items()
}


class AuthEventType(StrEnum):
    LOGIN = "login"
    LOGOUT = "logout"

    @classmethod
    def from_event_type(cls, raw: str) -> AuthEventType | None:
        """Map a telemetry event type to an auth type, accepting ``auth_`` prefixed names."""

        lowered = raw.strip().lower()
        return _AUTH_EVENT_TYPES.get(lowered)


_AUTH_EVENT_TYPES: dict[str, AuthEventType] = {
    "login": AuthEventType.LOGIN,
    "auth_login": AuthEventType.LOGIN,
    "logout": AuthEventType.LOGOUT,
    "auth_logout": AuthEventType.LOGOUT,
}
