"""Date bucketing, ISO week numbers and column labels. No Qt in here."""

import datetime
import logging
import math
from enum import Enum

logger = logging.getLogger(__name__)


class Granularity(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def rank(self):
        return _RANK[self]


_RANK = {
    Granularity.DAY: 0,
    Granularity.WEEK: 1,
    Granularity.MONTH: 2,
    Granularity.YEAR: 3,
}


def to_date(value) -> datetime.date:
    """Strip the time of day from a datetime; plain dates pass through."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    raise TypeError(f"expected a date or datetime, got {type(value).__name__}")


def bucket_start(value, granularity: Granularity) -> datetime.date:
    """Return the canonical first day of the period containing ``value``."""
    d = to_date(value)
    if granularity is Granularity.WEEK:
        return d - datetime.timedelta(days=d.weekday())
    if granularity is Granularity.MONTH:
        return d.replace(day=1)
    if granularity is Granularity.YEAR:
        return datetime.date(d.year, 1, 1)
    return d


def bucket(dates, granularity: Granularity) -> list:
    """Aggregate ``dates`` into one representative date per column.

    Day granularity is the identity. Week, month and year keep one entry per
    distinct period start (Monday, the 1st, Jan 1), sorted ascending.
    """
    if granularity is Granularity.DAY:
        return list(dates)

    starts = {bucket_start(d, granularity) for d in dates}
    return sorted(starts)


def iso_week_number(value) -> int:
    """ISO-8601 week number: weeks start Monday, week 1 holds the first Thursday."""
    d = to_date(value)
    thursday = d + datetime.timedelta(days=4 - d.isoweekday())
    days_since_jan1 = (thursday - datetime.date(thursday.year, 1, 1)).days
    return math.ceil((days_since_jan1 + 1) / 7)


def label(value, granularity: Granularity) -> str:
    """Short column header text."""
    d = to_date(value)
    if granularity is Granularity.WEEK:
        return f"W{iso_week_number(d)}"
    if granularity is Granularity.MONTH:
        return d.strftime("%b")
    if granularity is Granularity.YEAR:
        return str(d.year)
    return str(d.day)


def tooltip_label(value, granularity: Granularity) -> str:
    """Long, descriptive text for hover tooltips."""
    d = to_date(value)
    if granularity is Granularity.WEEK:
        start = bucket_start(d, Granularity.WEEK)
        end = start + datetime.timedelta(days=6)
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"
    if granularity is Granularity.MONTH:
        return f"{d:%B} {d.year}"
    if granularity is Granularity.YEAR:
        return str(d.year)
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def available_years(dates, years=None, today=None) -> list:
    """Years the navigation may move between; never empty."""
    if years:
        return sorted(set(years))
    if dates:
        return sorted({to_date(d).year for d in dates})
    today = today or datetime.date.today()
    logger.debug("No dates supplied, falling back to %d", today.year)
    return [today.year]


def index_of_date(dates, value):
    """Index of the first entry on the same calendar day, or None."""
    target = to_date(value)
    for index, d in enumerate(dates):
        if to_date(d) == target:
            return index
    return None
