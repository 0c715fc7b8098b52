"""
Data Models
===========
Pydantic models for the raw page structure produced by the layout
extractor and for the structured resume output.
All output models are serializable to JSON.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

# Group index used for text below the last separator on a page
TAIL = None


# ─── Enums ────────────────────────────────────────────────────────────────────


class SectionKind(str, Enum):
    """Resume sections recognised by their head label."""
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    UNKNOWN = "unknown"


# ─── Raw Page Models (layout extractor output) ────────────────────────────────


class TextRun(BaseModel):
    """A styled run of text inside a fragment. Text is percent-encoded."""
    text: str
    bold: bool = False


class RawFragment(BaseModel):
    """A positioned piece of text as delivered by the layout extractor."""
    runs: list[TextRun] = Field(default_factory=list)
    y: float


class RawPage(BaseModel):
    """
    A single page of the layout extractor output.
    Separators are the y coordinates of horizontal rules, top to bottom.
    """
    separators: list[float] = Field(default_factory=list)
    fragments: list[RawFragment] = Field(default_factory=list)


# ─── Layout Models ────────────────────────────────────────────────────────────


class TextFragment(BaseModel):
    """A decoded, trimmed text fragment."""
    model_config = ConfigDict(frozen=True)

    text: str
    y: float
    bold: bool = False
    page_index: int = Field(ge=0)


class Separator(BaseModel):
    """A horizontal rule bounding a block of text on a page."""
    model_config = ConfigDict(frozen=True)

    y: float
    page_index: int = Field(ge=0)


class Group(BaseModel):
    """
    Fragments sitting above the same separator on a page.
    ``index`` is the separator position, or TAIL (None) for the text
    below the last separator.
    """
    index: Optional[int] = TAIL
    page_index: int = Field(ge=0)
    fragments: list[TextFragment] = Field(default_factory=list)

    @property
    def is_tail(self) -> bool:
        return self.index is TAIL

    @property
    def head(self) -> Optional[str]:
        if not self.fragments:
            return None
        return self.fragments[0].text


class ClassifiedSection(BaseModel):
    """A group recognised by its head label."""
    kind: SectionKind
    head: str
    fragments: list[TextFragment] = Field(
        default_factory=list,
        description="Fragments following the head, in reading order",
    )

    @computed_field
    @property
    def body(self) -> list[str]:
        return [f.text for f in self.fragments]


# ─── Output Models ────────────────────────────────────────────────────────────


class Position(BaseModel):
    """A single employment position from the Experience section."""
    title: str
    company: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    summary: str = ""


class ParsedDocument(BaseModel):
    """
    Complete output of a parse run.
    ``positions`` is never empty on a successful parse.
    """
    summary: Optional[str] = None
    positions: list[Position] = Field(default_factory=list)
