"""
State Machine Parser
====================
Deterministic state machine reading the Experience section of a resume
into Position entities.

The Experience body is a sequence of blocks:

    Title  at  Company          (bold, may wrap onto two lines)
    Jan 2020  -  Present
    (2 years 3 months)          (optional)
    bullet line
    bullet line
    ...
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional

from .dates import normalize_date
from .errors import StructuralParseError
from .models import Position, TextFragment

logger = logging.getLogger(__name__)

# ─── Template Separators ──────────────────────────────────────────────────────

# Double-space padding is part of the template and must match exactly
JOB_SEPARATOR = "  at  "
DATE_SEPARATOR = "  -  "

# Matches "(1 year 2 months)", "3 years", "less than a year"
DURATION_PATTERN = re.compile(
    r"^\(?\s*(?:less than a year"
    r"|\d+\s+(?:years?|yrs?|months?|mos?)(?:\s+\d+\s+(?:months?|mos?))?)"
    r"\s*\)?$",
    re.IGNORECASE,
)


def is_duration_line(text: str) -> bool:
    if re.search(r"\b\d{4}\b", text):
        return False
    return bool(DURATION_PATTERN.match(text.strip()))


def merge_bold_lines(fragments: list[TextFragment]) -> list[str]:
    """
    Join runs of adjacent bold fragments into single lines.

    Position headers are the only bold lines in the Experience section and
    may wrap, so consecutive bold fragments are one logical line.
    """
    lines: list[str] = []
    previous: Optional[TextFragment] = None
    for fragment in fragments:
        if previous is not None and previous.bold and fragment.bold:
            lines[-1] = f"{lines[-1]} {fragment.text}"
        else:
            lines.append(fragment.text)
        previous = fragment
    return lines


class ParserState(Enum):
    """Whether a position is open for bullet lines."""
    NO_ACTIVE_POSITION = "NO_ACTIVE_POSITION"
    ACTIVE_POSITION = "ACTIVE_POSITION"


class PositionParser:
    """
    Finite State Machine that transforms the Experience section into
    an ordered list of Position entities.
    """

    def __init__(
        self,
        job_separator: str = JOB_SEPARATOR,
        date_separator: str = DATE_SEPARATOR,
        skip_duration_lines: bool = True,
    ):
        self.job_separator = job_separator
        self.date_separator = date_separator
        self.skip_duration_lines = skip_duration_lines
        self.reset()

    def reset(self):
        """Reset the state machine for a fresh parsing run."""
        self.state = ParserState.NO_ACTIVE_POSITION
        self.current_position: Optional[Position] = None
        self.current_summary: list[str] = []
        self.positions: list[Position] = []

    def is_header(self, line: str) -> bool:
        """Headers are recognised purely by the job separator."""
        return self.job_separator in line

    def parse(self, fragments: list[TextFragment]) -> list[Position]:
        """
        Parse Experience fragments into positions.

        Raises:
            StructuralParseError: If a bullet line comes before any header,
                or a header is not followed by a date line.
        """
        self.reset()
        lines = merge_bold_lines(fragments)

        i = 0
        while i < len(lines):
            line = lines[i]

            if self.is_header(line):
                if i + 1 >= len(lines):
                    raise StructuralParseError(
                        f"Position header without a date line: {line!r}",
                        line=line,
                    )
                self._start_new_position(line, lines[i + 1])
                i += 2

                if (
                    self.skip_duration_lines
                    and i < len(lines)
                    and is_duration_line(lines[i])
                ):
                    logger.debug(f"Skipping duration line {lines[i]!r}")
                    i += 1
                continue

            self._append_text(line)
            i += 1

        if self.current_position:
            self._finalize_position()

        return self.positions

    def _start_new_position(self, header: str, date_line: str):
        """Finalize previous and start fresh state."""
        if self.current_position:
            self._finalize_position()

        parts = [part.strip() for part in header.split(self.job_separator)]
        title, company = parts[0], parts[1]

        dates = [part.strip() for part in date_line.split(self.date_separator)]
        start_date = normalize_date(dates[0])
        end_date = normalize_date(dates[1]) if len(dates) > 1 else None

        logger.info(f"Detected position {title!r} at {company!r}")

        self.current_position = Position(
            title=title,
            company=company,
            start_date=start_date,
            end_date=end_date,
        )
        self.current_summary = []
        self.state = ParserState.ACTIVE_POSITION

    def _append_text(self, text: str):
        """Append a bullet line to the active position."""
        if self.state != ParserState.ACTIVE_POSITION:
            raise StructuralParseError(
                f"Line outside of any position: {text!r}",
                line=text,
            )
        self.current_summary.append(text)

    def _finalize_position(self):
        """Join the summary buffer and store the position."""
        position = self.current_position
        position.summary = "\n".join(self.current_summary)
        self.positions.append(position)

        self.current_position = None
        self.current_summary = []
        self.state = ParserState.NO_ACTIVE_POSITION
