"""Directory-level totals over a ledger snapshot."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from .normalization import normalize_prefix

logger = logging.getLogger(__name__)

TOTAL_LABEL = "total"


def aggregate(
    files: Mapping[str, int], prefixes: Optional[Iterable[str]] = None
) -> dict[str, int]:
    """Sum ledger seconds overall and for every configured directory prefix.

    Groups are keyed by the prefix exactly as configured and may overlap; a
    file counts towards every prefix it starts with.
    """
    result = {TOTAL_LABEL: sum(files.values())}
    for raw in prefixes or ():
        if raw == TOTAL_LABEL:
            logger.warning("Skipping aggregation directory %r; the label is reserved.", raw)
            continue
        prefix = normalize_prefix(raw)
        result[raw] = sum(
            seconds for identity, seconds in files.items() if identity.startswith(prefix)
        )
    return result
