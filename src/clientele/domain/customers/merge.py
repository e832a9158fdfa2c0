"""Fold customer patches into aggregates in a fixed source order.

Scalars carried by a patch overwrite unconditionally, blanks included, so the
result depends on which source is applied last. List fields only ever grow:
the incoming sequence is appended and de-duplicated, keeping first occurrence.
"""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING, Final

from clientele.domain.model import CustomerAggregate, SourceTag

from .values import unique_strings

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from clientele.domain.model import CustomerPatch

SOURCE_ORDER: Final[tuple[SourceTag, ...]] = (
    SourceTag.PROFILE,
    SourceTag.BEHAVIOR,
    SourceTag.DELIVERY_ORDER,
    SourceTag.RIDE_BOOKING,
    SourceTag.BOOKING,
    SourceTag.TELEMETRY,
)

log = getLogger(__name__)


def merge_patch(existing: CustomerAggregate | None, patch: CustomerPatch) -> CustomerAggregate:
    base = existing or CustomerAggregate(identity_key=patch.identity_key)
    if base.identity_key != patch.identity_key:
        raise ValueError(
            f"Cannot merge patch for {patch.identity_key!r} into {base.identity_key!r}"
        )
    return replace(
        base,
        **patch.values,
        addresses=unique_strings((*base.addresses, *patch.addresses)),
        sources=tuple(dict.fromkeys((*base.sources, patch.source))),
    )


def fold_patches(
    patches_by_source: Mapping[SourceTag, Sequence[CustomerPatch]],
) -> dict[str, CustomerAggregate]:
    """Apply every patch, source by source in ``SOURCE_ORDER``, to a fresh mapping.

    Callers may build the per-source patch lists in any order (or in parallel);
    application order is fixed here.
    """

    aggregates: dict[str, CustomerAggregate] = {}
    for source in SOURCE_ORDER:
        patches = patches_by_source.get(source, ())
        for patch in patches:
            if patch.source is not source:
                raise ValueError(
                    f"Patch from {patch.source.value} filed under {source.value}"
                )
            aggregates[patch.identity_key] = merge_patch(
                aggregates.get(patch.identity_key), patch
            )
        log.debug("Applied %s %s patch(es)", len(patches), source.value)
    return aggregates
