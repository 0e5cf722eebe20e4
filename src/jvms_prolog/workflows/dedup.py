"""Drop versions whose extracted spec repeats an earlier version's text.

Two policies exist and they are not equivalent:

- ``adjacent``: compare with the last kept spec only, so a text that comes
  back after a different one is kept again ([A, A, B, B, A] -> [A, B, A]).
- ``global``: compare with every kept spec ([A, A, B, B, A] -> [A, B]).

Both run after all fetches have joined, over results sorted by version.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Set, TypeVar

from .extractor_config import DEDUP_ADJACENT, DEDUP_GLOBAL, DEDUP_POLICIES

logger = logging.getLogger(__name__)

T = TypeVar("T")


def deduplicate_adjacent(items: Iterable[T], key: Callable[[T], object]) -> List[T]:
    kept: List[T] = []
    prev: Optional[object] = None
    has_prev = False
    for item in items:
        value = key(item)
        if has_prev and value == prev:
            continue
        kept.append(item)
        prev = value
        has_prev = True
    return kept


def deduplicate_global(items: Iterable[T], key: Callable[[T], object]) -> List[T]:
    kept: List[T] = []
    seen: Set[object] = set()
    for item in items:
        value = key(item)
        if value in seen:
            continue
        seen.add(value)
        kept.append(item)
    return kept


def deduplicate(results, keep_duplicates: bool = False, policy: str = DEDUP_ADJACENT):
    """Return the VersionSpec results to write, in ascending version order."""

    if policy not in DEDUP_POLICIES:
        raise ValueError(f"Unknown dedup policy {policy!r}; expected one of {', '.join(DEDUP_POLICIES)}")
    ordered = sorted(results, key=lambda r: r.version)
    if keep_duplicates:
        return ordered
    if policy == DEDUP_GLOBAL:
        kept = deduplicate_global(ordered, key=lambda r: r.spec)
    else:
        kept = deduplicate_adjacent(ordered, key=lambda r: r.spec)
    kept_versions = {r.version for r in kept}
    for result in ordered:
        if result.version not in kept_versions:
            logger.debug("version %s duplicates a kept spec (%s); skipped", result.version, policy)
    return kept


__all__ = [
    "deduplicate",
    "deduplicate_adjacent",
    "deduplicate_global",
]
