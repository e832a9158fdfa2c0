"""Field coercion helpers shared by the normalizers and the event reducer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Final

EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)


def safe_text(value: object) -> str:
    """Render a scalar row value as text; absent and nested values become ``""``."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def first_text(row: Mapping[str, object], *names: str) -> str:
    """Return the first non-empty text among ``names`` (snake_case spelled first)."""

    for name in names:
        text = safe_text(row.get(name))
        if text:
            return text
    return ""


def unique_strings(values: Iterable[object]) -> tuple[str, ...]:
    """Trim, drop blanks and de-duplicate while keeping first-occurrence order."""

    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        text = safe_text(value).strip()
        if not text or text in seen:
            continue
        seen.add(text)
        out.append(text)
    return tuple(out)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into aware UTC, or ``None`` when absent or unparsable."""

    normalized = (value or "").strip()
    if not normalized:
        return None
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        # offset pushes the instant outside the datetime range
        return None


def pick_text(row: Mapping[str, object], *names: str) -> str | None:
    """Like ``first_text`` but ``None`` when the row has none of ``names`` at all.

    A present key with a blank or null value yields ``""``, which still counts as
    data the row carries.
    """

    present = [name for name in names if name in row]
    if not present:
        return None
    return first_text(row, *present)


def carried(**values: str | None) -> dict[str, str]:
    """Keep only the fields a record actually had (``None`` marks a missing one)."""

    return {name: value for name, value in values.items() if value is not None}
