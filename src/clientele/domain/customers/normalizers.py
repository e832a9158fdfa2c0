"""Per-collection normalizers projecting rows into customer patches.

Each normalizer reads only the fields its collection is known to carry and
returns one ``CustomerPatch``. Field names are looked up in snake_case first,
then camelCase, since both spellings occur in stored rows. A patch carries a
field whenever the row has it, even blank; fields the row lacks are omitted so
they leave the aggregate untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Final, TypeAlias

from clientele.domain.model import Collection, CustomerPatch, SourceTag

from .identity import ContactKind, ContactPoints, derive_identity_key
from .structured import coerce_mapping
from .values import carried, first_text, pick_text, safe_text, unique_strings

if TYPE_CHECKING:
    from clientele.domain.model import Row

SourceNormalizer: TypeAlias = "Callable[[Row], CustomerPatch]"

_ID_THEN_PHONE: Final = (ContactKind.USER_ID, ContactKind.PHONE)
_ID_PHONE_EMAIL: Final = (ContactKind.USER_ID, ContactKind.PHONE, ContactKind.EMAIL)


def _user_id(row: Row) -> str:
    return first_text(row, "user_id", "userId")


def _identity(row: Row, *, user_id: str, priority: Sequence[ContactKind]) -> str:
    contacts = ContactPoints(
        user_id=user_id,
        phone=safe_text(row.get("phone")),
        email=safe_text(row.get("email")),
    )
    return derive_identity_key(contacts, priority)


def normalize_profile(row: Row) -> CustomerPatch:
    return CustomerPatch(
        identity_key=_identity(row, user_id=safe_text(row.get("id")), priority=_ID_THEN_PHONE),
        source=SourceTag.PROFILE,
        values=carried(
            name=pick_text(row, "name"),
            phone=pick_text(row, "phone"),
            email=pick_text(row, "email"),
            ip_address=pick_text(row, "ip_address", "ipAddress"),
            browser=pick_text(row, "browser"),
            created_at=pick_text(row, "created_at", "createdAt"),
            updated_at=pick_text(row, "updated_at", "updatedAt"),
        ),
    )


def _saved_addresses(row: Row) -> tuple[str, ...]:
    for name in ("location_mobility", "locationMobility"):
        saved = coerce_mapping(row.get(name)).get("savedAddresses")
        if isinstance(saved, Sequence) and not isinstance(saved, str):
            return unique_strings(saved)
    return ()


def normalize_behavior(row: Row) -> CustomerPatch:
    """Behavior signals are always keyed by an explicit user id."""

    user_id = _user_id(row) or safe_text(row.get("id"))
    return CustomerPatch(
        identity_key=derive_identity_key(ContactPoints(user_id=user_id), (ContactKind.USER_ID,)),
        source=SourceTag.BEHAVIOR,
        values=carried(
            name=pick_text(row, "name"),
            phone=pick_text(row, "phone"),
            email=pick_text(row, "email"),
        ),
        addresses=_saved_addresses(row),
    )


def normalize_delivery_order(row: Row) -> CustomerPatch:
    address = first_text(row, "delivery_address", "deliveryAddress")
    return CustomerPatch(
        identity_key=_identity(row, user_id=_user_id(row), priority=_ID_PHONE_EMAIL),
        source=SourceTag.DELIVERY_ORDER,
        values=carried(
            name=pick_text(row, "user_name", "userName"),
            phone=pick_text(row, "phone"),
            email=pick_text(row, "email"),
            last_order_at=pick_text(row, "order_time", "orderTime"),
        ),
        addresses=unique_strings((address,)),
    )


def normalize_ride_booking(row: Row) -> CustomerPatch:
    pickup = first_text(row, "pickup_location", "pickupLocation")
    drop = first_text(row, "drop_location", "dropLocation")
    return CustomerPatch(
        identity_key=_identity(row, user_id=_user_id(row), priority=_ID_THEN_PHONE),
        source=SourceTag.RIDE_BOOKING,
        values=carried(
            name=pick_text(row, "user_name", "userName"),
            phone=pick_text(row, "phone"),
            last_order_at=pick_text(row, "created_at", "createdAt"),
        ),
        addresses=unique_strings((pickup, drop)),
    )


def normalize_booking(row: Row) -> CustomerPatch:
    return CustomerPatch(
        identity_key=_identity(row, user_id=_user_id(row), priority=_ID_PHONE_EMAIL),
        source=SourceTag.BOOKING,
        values=carried(
            name=pick_text(row, "user_name", "userName"),
            phone=pick_text(row, "phone"),
            email=pick_text(row, "email"),
        ),
    )


ROW_NORMALIZERS: Final[dict[SourceTag, tuple[Collection, SourceNormalizer]]] = {
    SourceTag.PROFILE: (Collection.PROFILES, normalize_profile),
    SourceTag.BEHAVIOR: (Collection.BEHAVIOR_SIGNALS, normalize_behavior),
    SourceTag.DELIVERY_ORDER: (Collection.DELIVERY_ORDERS, normalize_delivery_order),
    SourceTag.RIDE_BOOKING: (Collection.RIDE_BOOKINGS, normalize_ride_booking),
    SourceTag.BOOKING: (Collection.BOOKINGS, normalize_booking),
}


def normalize_rows(rows: Sequence[Row], normalizer: SourceNormalizer) -> tuple[CustomerPatch, ...]:
    return tuple(normalizer(row) for row in rows)
