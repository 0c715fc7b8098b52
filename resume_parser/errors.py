"""
Parser Errors
=============
Every failure of a parse run is raised as a ResumeParseError subclass.
Unparsable dates are not errors; they degrade to None.
"""

from __future__ import annotations


class ResumeParseError(Exception):
    """Base class for all resume parsing failures."""


class ExtractionError(ResumeParseError):
    """The layout extractor could not read the PDF."""


class NoPositionsFoundError(ResumeParseError):
    """No position could be parsed from the document."""

    def __init__(self, message: str = "No positions have been found"):
        super().__init__(message)


class StructuralParseError(ResumeParseError):
    """The Experience section does not follow the header/date/bullets layout."""

    def __init__(self, message: str, line: str | None = None):
        super().__init__(message)
        self.line = line
