"""Date formats exchanged across the collaborator boundary.

``DATE_FORMAT`` (``DD-MM-YYYY``) is a compatibility constant: the ``date``
check, the CLI and the dashboard all use it, and it is never negotiated
per call.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

DATE_FORMAT = "%d-%m-%Y"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# strptime alone accepts "1-1-2024"; the boundary format is strictly two-digit.
_DATE_SHAPE = re.compile(r"\d{2}-\d{2}-\d{4}")


def format_date(value: date | datetime) -> str:
    return value.strftime(DATE_FORMAT)


def is_valid_date(text: str) -> bool:
    """True when *text* is a real calendar date in ``DD-MM-YYYY`` form."""
    if not _DATE_SHAPE.fullmatch(text):
        return False
    try:
        datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        return False
    return True


def parse_time_input(text: str, *, now: datetime | None = None) -> str:
    """Turn user input into a ``DD-MM-YYYY`` date string.

    - ``""`` -> today
    - ``"+N"`` / ``"-N"`` -> now plus/minus N minutes
    - anything else must already be a valid ``DD-MM-YYYY`` date

    Raises ValueError for anything else.
    """
    text = text.strip()
    current = now or datetime.now()
    if not text:
        return format_date(current)
    if text[0] in "+-":
        sign = 1 if text[0] == "+" else -1
        try:
            minutes = int(text[1:])
        except ValueError:
            msg = f"Invalid minutes offset: {text!r}"
            raise ValueError(msg) from None
        if minutes < 0:
            msg = f"Invalid minutes offset: {text!r}"
            raise ValueError(msg)
        return format_date(current + sign * timedelta(minutes=minutes))
    if not is_valid_date(text):
        msg = f"Invalid date {text!r}: expected DD-MM-YYYY"
        raise ValueError(msg)
    return text
