"""Locate the verifier section of a JVMS chapter 4 page and pull its listings."""

from __future__ import annotations

import html as html_lib
import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from .corrections import correct, matching_correction
from .extractor_config import (
    LISTING_SELECTOR,
    NON_PROLOG_MARKERS,
    SECTION_SELECTOR,
    TRAILING_APPENDIX_BLOCKS,
    VERIFIER_ANCHOR,
)

logger = logging.getLogger(__name__)


class SectionNotFoundError(ValueError):
    """The page was fetched but has no section anchored at the verifier chapter."""


@dataclass(frozen=True, slots=True)
class ListingExtraction:
    text: str
    blocks: int


def _section_selector(anchor: str) -> str:
    return f'{SECTION_SELECTOR}:has(a[name="{anchor}"], [id="{anchor}"])'


def find_verifier_section(soup: BeautifulSoup, anchor: str = VERIFIER_ANCHOR) -> Tag:
    section = soup.select_one(_section_selector(anchor))
    if section is None:
        raise SectionNotFoundError(f"no {SECTION_SELECTOR} containing anchor {anchor!r}")
    return section


def listing_text(node: Tag) -> str:
    """Rendered text of a listing with line breaks kept and the ends trimmed."""

    return node.get_text().strip()


def select_rule_blocks(
    blocks: Sequence[str],
    *,
    trailing: int = TRAILING_APPENDIX_BLOCKS,
    markers: Iterable[str] = NON_PROLOG_MARKERS,
) -> List[str]:
    """Drop the trailing appendix listings and any non-Prolog diagram."""

    markers = tuple(markers)
    kept = list(blocks[: max(0, len(blocks) - trailing)])
    return [block for block in kept if not any(marker in block for marker in markers)]


def extract_spec(
    html: str,
    apply_corrections: bool = True,
    *,
    anchor: str = VERIFIER_ANCHOR,
) -> ListingExtraction:
    """Return the newline-joined verifier listings of a chapter 4 page.

    Raises SectionNotFoundError when the page has no verifier section. A
    section without listings yields an empty text.
    """

    soup = BeautifulSoup(html, "lxml")
    section = find_verifier_section(soup, anchor)
    raw_blocks = [listing_text(node) for node in section.select(LISTING_SELECTOR)]
    rule_blocks = select_rule_blocks(raw_blocks)

    corrected: List[str] = []
    for block in rule_blocks:
        block = html_lib.unescape(block)
        if apply_corrections:
            hit = matching_correction(block)
            if hit is not None:
                logger.debug("erratum %s (%s) applied", hit.name, hit.section)
        corrected.append(correct(block, apply_corrections))

    logger.debug(
        "section %s: %d listings, %d kept",
        anchor,
        len(raw_blocks),
        len(corrected),
    )
    return ListingExtraction(text="\n".join(corrected), blocks=len(corrected))


__all__ = [
    "ListingExtraction",
    "SectionNotFoundError",
    "extract_spec",
    "find_verifier_section",
    "listing_text",
    "select_rule_blocks",
]
