# src/calendar/dates.py — v1
"""Calendar date parsing.

Extracted dates arrive as YYYY-MM-DD, MM-DD or M/D strings; the short
forms take the configured default year (current year when unset).
"""

from __future__ import annotations

import logging
import re
from datetime import date

logger = logging.getLogger(__name__)

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_MONTH_DAY_RE = re.compile(r"^(\d{2})-(\d{2})$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})$")


def parse_event_date(raw: str | None, default_year: int | None = None) -> date | None:
    """Parse an extracted calendar date; None for TBD, blank or unparseable values."""
    if raw is None:
        return None
    value = raw.strip()
    if not value or value.lower() == "tbd":
        return None

    year = default_year or date.today().year
    iso = _ISO_RE.match(value)
    short = _MONTH_DAY_RE.match(value) or _SLASH_RE.match(value)
    try:
        if iso:
            return date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        if short:
            return date(year, int(short.group(1)), int(short.group(2)))
    except ValueError:
        logger.warning("Invalid calendar date: %s", raw)
        return None

    logger.warning("Could not parse calendar date: %s", raw)
    return None
