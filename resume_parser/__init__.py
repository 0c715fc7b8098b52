"""
Resume PDF Parser
=================
Turns a LinkedIn-style resume PDF into a summary and a list of positions.

Architecture:
    - Block Extractor: Reads positioned text and horizontal rules per page
    - Layout: Groups text between rules and stitches groups across pages
    - Sections: Recognises the Summary and Experience groups by their head
    - State Machine: Reads positions (title, company, dates, bullets)
    - Dates: Canonicalises free-text dates to the first of the month, UTC

Version: 1.0.0
"""

__version__ = "1.0.0"

from .engine import ParserConfig, ParserEngine, parse  # noqa: E402
from .errors import (  # noqa: E402
    ExtractionError,
    NoPositionsFoundError,
    ResumeParseError,
    StructuralParseError,
)
from .models import ParsedDocument, Position  # noqa: E402

__all__ = [
    "ExtractionError",
    "NoPositionsFoundError",
    "ParsedDocument",
    "ParserConfig",
    "ParserEngine",
    "Position",
    "ResumeParseError",
    "StructuralParseError",
    "__version__",
    "parse",
]
