"""
Section Classifier
==================
Recognises resume sections by the first fragment (the head) of each group.
Only "Summary" and "Experience" are of interest; every other group is
dropped.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import ClassifiedSection, Group, SectionKind

logger = logging.getLogger(__name__)

SUMMARY_LABEL = "Summary"
EXPERIENCE_LABEL = "Experience"


def classify_group(
    group: Group,
    summary_label: str = SUMMARY_LABEL,
    experience_label: str = EXPERIENCE_LABEL,
) -> Optional[ClassifiedSection]:
    """Classify a group by exact match of its head; None for empty groups."""
    head = group.head
    if head is None:
        return None

    if head == summary_label:
        kind = SectionKind.SUMMARY
    elif head == experience_label:
        kind = SectionKind.EXPERIENCE
    else:
        kind = SectionKind.UNKNOWN

    return ClassifiedSection(kind=kind, head=head, fragments=group.fragments[1:])


def classify_groups(
    groups: list[Group],
    summary_label: str = SUMMARY_LABEL,
    experience_label: str = EXPERIENCE_LABEL,
) -> list[ClassifiedSection]:
    """Classify every group, keeping only recognised sections in order."""
    sections = []
    for group in groups:
        section = classify_group(group, summary_label, experience_label)
        if section is None:
            continue
        if section.kind == SectionKind.UNKNOWN:
            logger.debug(f"Ignoring group with head {section.head!r}")
            continue
        sections.append(section)
    return sections


def collect_sections(
    sections: list[ClassifiedSection],
) -> dict[SectionKind, ClassifiedSection]:
    """Index sections by kind. A later section of the same kind wins."""
    found: dict[SectionKind, ClassifiedSection] = {}
    for section in sections:
        if section.kind in found:
            logger.warning(
                f"Duplicate {section.kind.value} section, keeping the later one"
            )
        found[section.kind] = section
    return found


def summary_text(section: ClassifiedSection) -> str:
    """Summary body lines joined with newlines."""
    return "\n".join(section.body)
