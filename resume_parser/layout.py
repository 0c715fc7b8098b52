"""
Layout Reconstruction
=====================
Rebuilds the block structure of a resume from the flat per-page output of
the layout extractor.

Pipeline:
    RawPage → (Separators, TextFragments) → Groups per page →
    page-break merge → one ordered sequence of Groups

A group is every fragment sitting above the same horizontal rule. Text
below the last rule of a page forms the TAIL group, which usually
continues on the next page and is stitched onto it.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import unquote

from .models import (
    TAIL,
    Group,
    RawFragment,
    RawPage,
    Separator,
    TextFragment,
)

logger = logging.getLogger(__name__)

# The first fragments of each page are the rendered "Page N of M" header
PAGE_HEADER_FRAGMENTS = 2


# ─── Collectors ───────────────────────────────────────────────────────────────


def collect_separators(page: RawPage, page_index: int) -> list[Separator]:
    """Horizontal rules of a page, in the order the extractor gave them."""
    return [Separator(y=y, page_index=page_index) for y in page.separators]


def decode_text(raw: str) -> str:
    """Percent-decode and trim extractor text."""
    return unquote(raw).strip()


def is_bold_fragment(fragment: RawFragment) -> bool:
    """Bold flag of the dominant run (most characters, first one on ties)."""
    if not fragment.runs:
        return False
    dominant = max(fragment.runs, key=lambda run: len(unquote(run.text)))
    return dominant.bold


def collect_fragments(
    page: RawPage,
    page_index: int,
    header_count: int = PAGE_HEADER_FRAGMENTS,
) -> list[TextFragment]:
    """
    Decoded text fragments of a page, without the page-number header.

    Args:
        page: Raw page from the extractor.
        page_index: 0-based page index.
        header_count: Number of leading fragments to discard.

    Returns:
        TextFragments in extractor order.
    """
    fragments = []
    for raw in page.fragments[header_count:]:
        text = decode_text("".join(run.text for run in raw.runs))
        fragments.append(TextFragment(
            text=text,
            y=raw.y,
            bold=is_bold_fragment(raw),
            page_index=page_index,
        ))
    return fragments


# ─── Grouping ─────────────────────────────────────────────────────────────────


def group_sort_key(group: Group) -> tuple[int, int]:
    """Numeric indices ascending, TAIL after all of them."""
    if group.is_tail:
        return (1, 0)
    return (0, group.index)


def _separator_index(fragment: TextFragment, separators: list[Separator]) -> Optional[int]:
    for idx, separator in enumerate(separators):
        if fragment.y < separator.y:
            return idx
    return TAIL


def build_groups(
    separators: list[Separator],
    fragments: list[TextFragment],
    page_index: int,
) -> list[Group]:
    """
    Assign every fragment of a page to the first separator below it.

    Separators are scanned in the given order; the first one whose y
    exceeds the fragment's y wins. Fragments with no separator below
    them go to the TAIL group.

    Returns:
        The page's groups ordered by group_sort_key.
    """
    groups: dict[Optional[int], Group] = {}
    for fragment in fragments:
        key = _separator_index(fragment, separators)
        if key not in groups:
            groups[key] = Group(index=key, page_index=page_index)
        groups[key].fragments.append(fragment)

    return sorted(groups.values(), key=group_sort_key)


def _find_group(groups: list[Group], index: Optional[int]) -> Optional[Group]:
    for group in groups:
        if group.index == index:
            return group
    return None


def merge_page_breaks(pages: list[list[Group]]) -> list[list[Group]]:
    """
    Stitch each page's TAIL group onto the next page.

    The TAIL fragments are prepended to the next page's index-0 group, or
    to its TAIL group when it has no index-0 group. Boundaries are handled
    in page order, so a block spanning several pages is carried all the
    way through.

    Returns:
        New per-page group lists; the input is left untouched.
    """
    merged = [[g.model_copy(deep=True) for g in page] for page in pages]

    for i in range(1, len(merged)):
        previous, current = merged[i - 1], merged[i]
        tail = _find_group(previous, TAIL)
        if tail is None:
            continue

        target = _find_group(current, 0) or _find_group(current, TAIL)
        if target is None:
            continue

        logger.debug(
            f"Merging {len(tail.fragments)} fragments from page {i} "
            f"into group {'TAIL' if target.is_tail else target.index} "
            f"of page {i + 1}"
        )
        target.fragments[:0] = tail.fragments
        previous.remove(tail)

    return merged


def sequence_groups(pages: list[list[Group]]) -> list[Group]:
    """Flatten per-page groups into one reading-order sequence."""
    sequence: list[Group] = []
    for page in pages:
        sequence.extend(sorted(page, key=group_sort_key))
    return sequence


def build_layout(
    raw_pages: list[RawPage],
    header_count: int = PAGE_HEADER_FRAGMENTS,
) -> list[Group]:
    """
    Run the whole layout reconstruction over the extractor output.

    Args:
        raw_pages: Pages as delivered by the layout extractor.
        header_count: Leading fragments to drop on each page.

    Returns:
        Ordered sequence of groups across all pages.
    """
    pages: list[list[Group]] = []
    for page_index, raw_page in enumerate(raw_pages):
        separators = collect_separators(raw_page, page_index)
        fragments = collect_fragments(raw_page, page_index, header_count)
        groups = build_groups(separators, fragments, page_index)
        logger.debug(
            f"Page {page_index + 1}: {len(separators)} separators, "
            f"{len(fragments)} fragments, {len(groups)} groups"
        )
        pages.append(groups)

    return sequence_groups(merge_page_breaks(pages))
