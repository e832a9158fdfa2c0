from __future__ import annotations

from clientele.domain.customers.normalizers import (
    normalize_behavior,
    normalize_booking,
    normalize_delivery_order,
    normalize_profile,
    normalize_ride_booking,
)
from clientele.domain.model import SourceTag
from tests.helpers.rows import delivery_order_row, profile_row, ride_booking_row


def test_profile_uses_id_and_accepts_camel_case_fields() -> None:
    patch = normalize_profile(
        profile_row(
            email="asha@example.com",
            ipAddress="10.0.0.1",
            browser="Firefox",
            createdAt="2023-12-01T00:00:00Z",
            updated_at="2023-12-05T00:00:00Z",
        )
    )

    assert patch.identity_key == "u1"
    assert patch.source is SourceTag.PROFILE
    assert patch.values == {
        "name": "Asha",
        "phone": "9990001111",
        "email": "asha@example.com",
        "ip_address": "10.0.0.1",
        "browser": "Firefox",
        "created_at": "2023-12-01T00:00:00Z",
        "updated_at": "2023-12-05T00:00:00Z",
    }
    assert patch.addresses == ()


def test_profile_without_id_falls_back_to_phone() -> None:
    patch = normalize_profile({"name": "Ravi", "phone": "+91 88800 02222"})

    assert patch.identity_key == "user_918880002222"


def test_profile_ignores_email_for_identity() -> None:
    patch = normalize_profile({"email": "ravi@example.com"})

    assert patch.identity_key == "user_unknown"


def test_profile_omits_fields_the_row_lacks() -> None:
    patch = normalize_profile({"id": "u1", "name": ""})

    assert patch.values == {"name": ""}


def test_behavior_reads_saved_addresses_from_nested_structure() -> None:
    patch = normalize_behavior(
        {
            "userId": "u1",
            "location_mobility": {"savedAddresses": ["12 Hill Rd", " 12 Hill Rd ", "", "Office"]},
        }
    )

    assert patch.identity_key == "u1"
    assert patch.source is SourceTag.BEHAVIOR
    assert patch.addresses == ("12 Hill Rd", "Office")


def test_behavior_accepts_json_encoded_location_mobility() -> None:
    patch = normalize_behavior(
        {"user_id": "u1", "locationMobility": '{"savedAddresses": ["Market St"]}'}
    )

    assert patch.addresses == ("Market St",)


def test_behavior_without_user_id_is_unknown_even_with_phone() -> None:
    patch = normalize_behavior({"phone": "9990001111", "location_mobility": "not json"})

    assert patch.identity_key == "user_unknown"
    assert patch.addresses == ()


def test_delivery_order_projects_address_and_order_time() -> None:
    patch = normalize_delivery_order(delivery_order_row(userName="Asha"))

    assert patch.identity_key == "u1"
    assert patch.source is SourceTag.DELIVERY_ORDER
    assert patch.addresses == ("12 Hill Rd",)
    assert patch.values == {"name": "Asha", "last_order_at": "2024-01-01T10:00:00Z"}


def test_delivery_order_falls_back_to_phone_then_email() -> None:
    by_phone = normalize_delivery_order({"phone": "999 000 1111", "email": "a@example.com"})
    by_email = normalize_delivery_order({"email": "A@Example.com"})

    assert by_phone.identity_key == "user_9990001111"
    assert by_email.identity_key == "user_a@example.com"


def test_delivery_order_without_address_contributes_none() -> None:
    patch = normalize_delivery_order({"user_id": "u1", "deliveryAddress": "   "})

    assert patch.addresses == ()


def test_ride_booking_uses_pickup_and_drop_and_creation_time() -> None:
    patch = normalize_ride_booking(ride_booking_row())

    assert patch.source is SourceTag.RIDE_BOOKING
    assert patch.addresses == ("Airport", "12 Hill Rd")
    assert patch.values == {"last_order_at": "2024-01-03T08:00:00Z"}


def test_ride_booking_deduplicates_identical_pickup_and_drop() -> None:
    patch = normalize_ride_booking(
        ride_booking_row(pickup_location="Airport", drop_location="Airport")
    )

    assert patch.addresses == ("Airport",)


def test_ride_booking_ignores_email_for_identity() -> None:
    patch = normalize_ride_booking({"email": "a@example.com", "pickupLocation": "Airport"})

    assert patch.identity_key == "user_unknown"


def test_booking_contributes_contacts_but_no_addresses() -> None:
    patch = normalize_booking(
        {"email": "Ravi@Example.com", "user_name": "Ravi", "address": "Ignored Rd"}
    )

    assert patch.identity_key == "user_ravi@example.com"
    assert patch.source is SourceTag.BOOKING
    assert patch.values == {"name": "Ravi", "email": "Ravi@Example.com"}
    assert patch.addresses == ()
