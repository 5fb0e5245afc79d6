"""
Date normalization for holidays.

Holidays are day-granular and pinned to India Standard Time: a bare
"YYYY-MM-DD" means midnight at +05:30 on that day, whatever the server's
own timezone is. Everything else goes through ISO-8601 parsing as-is.
"""
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Tuple

IST = timezone(timedelta(hours=5, minutes=30), "IST")

DATE_ONLY_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def ist_midnight(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=IST)


def _parse_string(value: str) -> Optional[datetime]:
    if DATE_ONLY_RE.fullmatch(value):
        try:
            return ist_midnight(int(value[:4]), int(value[5:7]), int(value[8:10]))
        except ValueError:
            return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # No offset given: read it as server-local time
        parsed = parsed.astimezone()
    return parsed


def _in_utc_range(value: datetime) -> bool:
    """Whether the instant can be expressed in UTC, which is how it is stored."""
    try:
        value.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return False
    return True


def parse_date(value: Any) -> Optional[datetime]:
    """
    Normalize a date-like value to an aware datetime, or None if it is not a date.

    Instants that fall outside the UTC calendar (e.g. 0001-01-01 IST) count as
    unparseable.

    - "YYYY-MM-DD" strings and ``date`` objects: midnight IST of that day.
    - other strings: ISO-8601; an explicit offset is trusted, a naive value is local time.
    - ``datetime``: kept (naive values are local time).
    - int / float: epoch milliseconds.
    """
    try:
        parsed = _parse(value)
    except (OverflowError, OSError):
        return None
    if parsed is None or not _in_utc_range(parsed):
        return None
    return parsed


def _parse(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.astimezone()
    if isinstance(value, date):
        return ist_midnight(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        return _parse_string(value)
    return None


def year_of(value: datetime) -> int:
    """Calendar year of an instant, as seen in IST."""
    return value.astimezone(IST).year


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    """First and last instant (inclusive) of a calendar month in IST."""
    start = ist_midnight(year, month, 1)
    if not _in_utc_range(start):
        raise ValueError(f"{year}-{month:02d} is outside the storable range")
    if month == 12:
        following = ist_midnight(year + 1, 1, 1)
    else:
        following = ist_midnight(year, month + 1, 1)
    return start, following - timedelta(microseconds=1)

