"""Literal substitution of remote URLs with local asset paths."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Tuple

logger = logging.getLogger("cdn_localize")


def order_by_length(keys: Iterable[str]) -> List[str]:
    """Sort keys longest first so no key is replaced inside a longer one."""
    return sorted(keys, key=len, reverse=True)


def rewrite_document(document: str, associations: Mapping[str, str]) -> Tuple[str, int]:
    """Replace every occurrence of each key with its local path.

    Returns the rewritten text and the number of occurrences substituted.
    """
    if not associations:
        return document, 0
    updated = document
    total = 0
    for key in order_by_length(associations):
        if not key:
            continue
        count = updated.count(key)
        if not count:
            continue
        updated = updated.replace(key, associations[key])
        total += count
        logger.info("Replaced URL: %s -> %s", key, associations[key])
    return updated, total
