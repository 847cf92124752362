"""Header timestamp parsing and formatting.

Two header suffix forms are understood: a daily-note link with an optional
``HH:MM`` time (``[[2025-07-05]] 14:30``) and the legacy ``DD/MM/YYYY``.
Anything else leaves the timestamp unset; parsing never raises.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
LEGACY_DATE_FORMAT = "%d/%m/%Y"
HEADER_SEPARATOR = "|"

_LINK_TIMESTAMP_RE = re.compile(r"^\[\[(?P<date>[^\]|]+?)(?:\|[^\]]*)?\]\](?:\s+(?P<time>\d{1,2}:\d{2}))?$")
_LEGACY_TIMESTAMP_RE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$")


def parse_timestamp(text: str, date_format: str = DEFAULT_DATE_FORMAT) -> datetime | None:
    """Decode a header timestamp suffix, returning ``None`` when unrecognized.

    ``date_format`` is the strftime pattern of the linked daily-note name.
    The ISO form is always accepted as well so documents stay readable after
    the configured format changes.
    """
    candidate = text.strip()
    if not candidate:
        return None

    match = _LINK_TIMESTAMP_RE.match(candidate)
    if match is not None:
        date_text = match.group("date").strip()
        time_text = match.group("time")
        formats = [date_format] if date_format == DEFAULT_DATE_FORMAT else [date_format, DEFAULT_DATE_FORMAT]
        for fmt in formats:
            try:
                parsed = datetime.strptime(date_text, fmt)
            except ValueError:
                continue
            if time_text is None:
                return parsed
            try:
                clock = datetime.strptime(time_text, TIME_FORMAT)
            except ValueError:
                logger.debug("Ignoring unparseable time %r in header timestamp %r", time_text, text)
                return parsed
            return parsed.replace(hour=clock.hour, minute=clock.minute)
        logger.debug("Unrecognized daily-note date %r in header timestamp", date_text)
        return None

    if _LEGACY_TIMESTAMP_RE.match(candidate):
        try:
            return datetime.strptime(candidate, LEGACY_DATE_FORMAT)
        except ValueError:
            logger.debug("Invalid legacy date %r in header timestamp", candidate)
            return None

    logger.debug("Unrecognized header timestamp %r", candidate)
    return None


def split_header(text: str, date_format: str = DEFAULT_DATE_FORMAT) -> tuple[str, datetime | None]:
    """Split header text after ``[!comment]`` into ``(name, timestamp)``.

    The name is cut at the first separator whether or not the suffix decodes.
    """
    if HEADER_SEPARATOR not in text:
        return text.strip(), None
    name, _sep, suffix = text.partition(HEADER_SEPARATOR)
    return name.strip(), parse_timestamp(suffix, date_format)


def format_timestamp(moment: datetime, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Render ``moment`` in the preferred ``[[date]] HH:MM`` header form."""
    return f"[[{moment.strftime(date_format)}]] {moment.strftime(TIME_FORMAT)}"


def sanitize_name(name: str) -> str:
    """Make an author label safe to embed in a header line."""
    cleaned = " ".join(name.replace(HEADER_SEPARATOR, "/").split())
    return cleaned or "Anonymous"
