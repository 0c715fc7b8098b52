"""
Date Normalizer
===============
Parses free-text resume dates ("Jan 2020", "2020-03-15", "March 3, 2020")
and reports them at month granularity: the first day of the month,
midnight, UTC. Anything dateutil cannot read ("Present", "") is None.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def _default_datetime() -> datetime:
    # Missing fields fall back to January 1st, never to today's day,
    # so "Feb 2021" parsed on the 30th does not overflow.
    return datetime.combine(date.today().replace(month=1, day=1), time())


def normalize_date(text: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Normalize a free-text date to the start of its month in UTC.

    Args:
        text: Date string as printed on the resume, or a datetime
            that only needs canonicalising.

    Returns:
        A timezone-aware datetime on day 1 at 00:00:00 UTC,
        or None if the text is not a date.
    """
    if text is None:
        return None

    if isinstance(text, datetime):
        parsed = text
    else:
        value = text.strip()
        if not value:
            return None

        try:
            parsed = date_parser.parse(value, default=_default_datetime())
        except (date_parser.ParserError, ValueError, OverflowError):
            logger.debug(f"Unparsable date: {value!r}")
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)

    return datetime(parsed.year, parsed.month, 1, tzinfo=timezone.utc)
