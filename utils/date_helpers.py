"""
utils/date_helpers.py
---------------------
Calendar helpers shared by the recurring engine, analytics and budgets.

All due-date math works on day-granularity ``date`` objects. "Today" is
read in exactly one place (`today()`), and every service accepts an
explicit reference date so callers and tests can pin it.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from utils.errors import ValidationError

FREQUENCIES = ("daily", "weekly", "monthly", "yearly")

DateLike = Union[date, datetime]


def today() -> date:
    """Return the current local day (no time component)."""
    return date.today()


def truncate_day(value: DateLike) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_interval(start: date, frequency: str, interval: int = 1) -> date:
    """
    Step ``start`` forward by ``interval`` units of ``frequency``.

    Month and year steps clamp to the last valid day of the target month
    (Jan 31 + 1 month = Feb 28/29, Feb 29 + 1 year = Feb 28).

    Raises:
        ValueError: If the frequency is unknown.
    """
    if frequency == "daily":
        return start + relativedelta(days=interval)
    if frequency == "weekly":
        return start + relativedelta(days=7 * interval)
    if frequency == "monthly":
        return start + relativedelta(months=interval)
    if frequency == "yearly":
        return start + relativedelta(years=interval)
    raise ValueError(f"Unknown frequency: {frequency!r}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    first = date(year, month, 1)
    last = first + relativedelta(months=1, days=-1)
    return first, last


def previous_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) of the month before the given one."""
    prev = date(year, month, 1) - relativedelta(months=1)
    return prev.year, prev.month


def parse_date(value) -> date:
    """
    Parse an ISO date (``YYYY-MM-DD``). A full ISO timestamp, as sent by
    browsers (``2024-01-15T00:00:00.000Z``), is accepted and its time part
    dropped; anything else after the date is rejected.

    Raises:
        ValidationError: If the value is not a valid date.
    """
    if isinstance(value, (date, datetime)):
        return truncate_day(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid date: {value!r}")
    text = value.strip()
    try:
        day = date.fromisoformat(text[:10])
        isoparse(text)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid date: {value!r}") from e
    return day


def parse_optional_date(value) -> Optional[date]:
    """Like `parse_date`, but empty values become None."""
    if value is None or value == "":
        return None
    return parse_date(value)


@dataclass(frozen=True)
class DateRange:
    """
    Optional inclusive date window.

    The start bound begins at 00:00:00 of ``start``; the end bound covers
    the whole ``end`` day up to 23:59:59.999999. Either side may be open.
    """
    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def from_strings(cls, start: Optional[str], end: Optional[str]) -> "DateRange":
        return cls(parse_optional_date(start), parse_optional_date(end))

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateRange":
        first, last = month_bounds(year, month)
        return cls(first, last)

    def start_at(self) -> Optional[datetime]:
        if self.start is None:
            return None
        return datetime.combine(self.start, time.min)

    def end_at(self) -> Optional[datetime]:
        if self.end is None:
            return None
        return datetime.combine(self.end, time.max)

    def contains(self, value: DateLike) -> bool:
        day = truncate_day(value)
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def is_open(self) -> bool:
        return self.start is None and self.end is None
