"""Loosely-typed nested structures found inside rows.

Telemetry ``meta`` and behavior ``location_mobility`` arrive either as a nested
mapping, as a JSON string holding one, or not at all. ``coerce_mapping`` is the
single place that turns any of these into a mapping; everything it cannot
interpret becomes an empty mapping.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from logging import getLogger
from types import MappingProxyType
from typing import Final

EMPTY: Final[Mapping[str, object]] = MappingProxyType({})

log = getLogger(__name__)


def coerce_mapping(raw: object) -> Mapping[str, object]:
    if isinstance(raw, Mapping):
        return raw
    if not isinstance(raw, str):
        return EMPTY
    text = raw.strip()
    if not text.startswith(("{", "[")):
        return EMPTY
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        log.debug("Discarding malformed structured value: %.60s", text)
        return EMPTY
    if isinstance(parsed, Mapping):
        return parsed
    return EMPTY
