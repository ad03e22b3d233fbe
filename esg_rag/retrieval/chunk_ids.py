"""Helpers for ``<doc-id>_<ordinal>`` chunk identifiers."""

from __future__ import annotations

import re
from typing import Set

_ORDINAL_SUFFIX = re.compile(r"_(\d+)$")


def parse_ordinal(chunk_id: str) -> int:
    """Return the trailing ``_<digits>`` ordinal of ``chunk_id``, or 0."""
    match = _ORDINAL_SUFFIX.search(chunk_id or "")
    return int(match.group(1)) if match else 0


def neighbor_ids(chunk_id: str, radius: int) -> Set[str]:
    """Sibling ids within ``radius`` ordinals of ``chunk_id``, excluding itself.

    Ordinals are clamped at zero. Ids without an ordinal suffix have no
    neighbors.
    """
    if radius <= 0:
        return set()
    match = _ORDINAL_SUFFIX.search(chunk_id or "")
    if not match:
        return set()
    ordinal = int(match.group(1))
    prefix = chunk_id[: match.start() + 1]
    siblings = {
        f"{prefix}{position}"
        for position in range(max(0, ordinal - radius), ordinal + radius + 1)
    }
    siblings.discard(chunk_id)
    return siblings
