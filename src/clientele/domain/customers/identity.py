"""Identity key derivation.

A key is taken from the first usable contact in a caller-supplied priority
order. An explicit user id is used verbatim; phone, email and IP are
normalized and prefixed. Different contact kinds for the same person are not
unified: a phone-derived key and an email-derived key are distinct identities
unless a user id ties the rows together.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

IDENTITY_PREFIX: Final[str] = "user_"
UNKNOWN_IDENTITY: Final[str] = f"{IDENTITY_PREFIX}unknown"

_NON_DIGITS = re.compile(r"\D+")


class ContactKind(StrEnum):
    USER_ID = "user_id"
    PHONE = "phone"
    EMAIL = "email"
    IP = "ip"


@dataclass(frozen=True, slots=True, kw_only=True)
class ContactPoints:
    """Raw contact values projected from one record."""

    user_id: str = ""
    phone: str = ""
    email: str = ""
    ip: str = ""

    def get(self, kind: ContactKind) -> str:
        return getattr(self, kind.value)


def normalize_phone(phone: str) -> str:
    digits = _NON_DIGITS.sub("", phone)
    return digits or phone.strip().lower()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_ip(ip: str) -> str:
    return ip.strip().lower()


_NORMALIZERS: Final[dict[ContactKind, Callable[[str], str]]] = {
    ContactKind.PHONE: normalize_phone,
    ContactKind.EMAIL: normalize_email,
    ContactKind.IP: normalize_ip,
}


def derive_identity_key(contacts: ContactPoints, priority: Sequence[ContactKind]) -> str:
    """Return the identity key for ``contacts``, never failing.

    Records without any usable contact all land on ``UNKNOWN_IDENTITY``.
    """

    for kind in priority:
        raw = contacts.get(kind).strip()
        if not raw:
            continue
        if kind is ContactKind.USER_ID:
            return raw
        normalized = _NORMALIZERS[kind](raw)
        if normalized:
            return f"{IDENTITY_PREFIX}{normalized}"
    return UNKNOWN_IDENTITY
