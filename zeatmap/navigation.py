"""
Navigation state for the heatmap: which month/year/day/week the view is on.

Every move produces a target cursor and a scroll request. The target only
becomes the observable cursor once the scroller reports the animation has
finished, so labels never run ahead of what is on screen.
"""

import datetime
import logging

from .bucketing import (
    Granularity,
    available_years,
    bucket,
    bucket_start,
    index_of_date,
    iso_week_number,
    to_date,
)

logger = logging.getLogger(__name__)

SCROLL_DURATION_MS = 250


class NavigationCursor:
    def __init__(self, month, year, day_index=0, week_index=0, week_number=1):
        self.month = month
        self.year = year
        self.day_index = day_index
        self.week_index = week_index
        self.week_number = week_number

    def copy(self, **changes):
        values = {
            "month": self.month,
            "year": self.year,
            "day_index": self.day_index,
            "week_index": self.week_index,
            "week_number": self.week_number,
        }
        values.update(changes)
        return NavigationCursor(**values)

    def __eq__(self, other):
        if not isinstance(other, NavigationCursor):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        return (
            f"NavigationCursor(month={self.month}, year={self.year}, "
            f"day_index={self.day_index}, week_index={self.week_index}, "
            f"week_number={self.week_number})"
        )


class ScrollRequest:
    """A pixel offset to animate to, and the cursor to commit afterwards."""

    def __init__(self, offset, target, duration_ms=SCROLL_DURATION_MS):
        self.offset = offset
        self.target = target
        self.duration_ms = duration_ms

    def __repr__(self):
        return f"ScrollRequest(offset={self.offset}, target={self.target!r})"


class NavigationController:
    """
    Owns the navigation cursor and every operation that moves it.

    ``scroller`` is anything with ``animate_to(offset, duration_ms,
    on_finished) -> bool`` and ``cancel()``. ``animate_to`` returns False
    when the scroll surface is not laid out yet; the request is then kept
    until ``resume()``. Without a scroller requests settle immediately.

    No operation raises for empty dates, unknown dates or out of range
    steps; they fall back to the first date or do nothing.
    """

    def __init__(self, dates, granularity=Granularity.DAY, years=None,
                 selected_year=None, cell_size=30, column_gap=8, today=None,
                 month_rollover=True, on_year_changed=None, on_settled=None,
                 scroller=None):
        self.today = today or datetime.date.today
        self.granularity = granularity
        self.cell_size = cell_size
        self.column_gap = column_gap
        self.month_rollover = month_rollover
        self.on_year_changed = on_year_changed
        self.on_settled = on_settled
        self.scroller = scroller
        self.last_request = None

        self._dates = list(dates)
        self._explicit_years = years
        self._buckets = {}
        self._pending = None
        self._deferred = None
        self._disposed = False

        self.available_years = available_years(self._dates, years, self.today())
        self.cursor = self._initial_cursor(selected_year)
        logger.debug("Navigation starts at %r over %d dates", self.cursor, len(self._dates))

    # -- derived data ---------------------------------------------------

    @property
    def dates(self):
        return self._dates

    @property
    def current_month(self):
        return self.cursor.month

    @property
    def current_year(self):
        return self.cursor.year

    @property
    def is_animating(self):
        return self._pending is not None

    @property
    def has_deferred(self):
        return self._deferred is not None

    def buckets(self, granularity=None):
        """Column dates for ``granularity`` (the active one by default)."""
        return self._bucket_entry(granularity or self.granularity)[0]

    def _bucket_entry(self, granularity):
        entry = self._buckets.get(granularity)
        if entry is None:
            columns = bucket(self._dates, granularity)
            if granularity is Granularity.DAY:
                positions = None
            else:
                positions = {start: i for i, start in enumerate(columns)}
            entry = (columns, positions)
            self._buckets[granularity] = entry
        return entry

    def _column_for(self, date_index):
        columns, positions = self._bucket_entry(self.granularity)
        if positions is None:
            return date_index
        return positions.get(bucket_start(self._dates[date_index], self.granularity), 0)

    def _indices_for(self, date_index):
        d = to_date(self._dates[date_index])
        week = bucket_start(d, Granularity.WEEK)
        _, positions = self._bucket_entry(Granularity.WEEK)
        return {
            "month": d.month,
            "year": d.year,
            "day_index": date_index,
            "week_index": positions.get(week, 0),
            "week_number": iso_week_number(week),
        }

    def _first_date_in(self, start, granularity):
        for index, d in enumerate(self._dates):
            if bucket_start(d, granularity) == start:
                return index
        return 0

    def _destination(self):
        """Where the view is heading: the in-flight target, else the cursor."""
        if self._pending is not None:
            return self._pending.target
        return self.cursor

    # -- initial state --------------------------------------------------

    def _initial_year(self, preferred):
        years = self.available_years
        now = self.today()
        if preferred is not None and preferred in years:
            return preferred
        if now.year in years:
            return now.year
        return years[0]

    def _locate_today(self):
        now = to_date(self.today())
        day_index = index_of_date(self._dates, now)
        if day_index is None:
            day_index = 0

        weeks = self.buckets(Granularity.WEEK)
        iso_key = tuple(now.isocalendar())[:2]
        week_index = None
        for index, week in enumerate(weeks):
            if tuple(week.isocalendar())[:2] == iso_key:
                week_index = index
                break

        if week_index is not None:
            week_number = iso_week_number(now)
        else:
            week_index = 0
            week_number = iso_week_number(weeks[0]) if weeks else iso_week_number(now)
        return {"day_index": day_index, "week_index": week_index, "week_number": week_number}

    def _initial_cursor(self, selected_year):
        year = self._initial_year(selected_year)
        return NavigationCursor(self.today().month, year, **self._locate_today())

    # -- scroll coordination --------------------------------------------

    def _request_scroll(self, column, target):
        if self._disposed:
            return None

        offset = column * (self.cell_size + self.column_gap)
        request = ScrollRequest(offset, target)
        self.last_request = request
        self._pending = request
        self._deferred = None

        if self.scroller is None:
            self._settle(request)
        elif not self.scroller.animate_to(offset, request.duration_ms,
                                          lambda: self._settle(request)):
            logger.debug("Scroll surface not ready, deferring offset %s", offset)
            self._deferred = request
        return request

    def _settle(self, request):
        # A newer request replaced this one while it was animating.
        if self._disposed or request is not self._pending:
            return
        self._pending = None
        self._commit(request.target)

    def _commit(self, target):
        previous_year = self.cursor.year
        self.cursor = target
        if target.year != previous_year:
            self._notify_year(target.year)
        if self.on_settled:
            self.on_settled(self.cursor)

    def _notify_year(self, year):
        logger.debug("Year changed to %d", year)
        if self.on_year_changed:
            self.on_year_changed(year)

    def resume(self):
        """Replay a request that was deferred because nothing could scroll yet."""
        request = self._deferred
        if request is None or self.scroller is None or self._disposed:
            return False
        self._deferred = None
        if not self.scroller.animate_to(request.offset, request.duration_ms,
                                        lambda: self._settle(request)):
            self._deferred = request
            return False
        return True

    def dispose(self):
        self._disposed = True
        self._pending = None
        self._deferred = None
        if self.scroller is not None:
            self.scroller.cancel()

    # -- operations -----------------------------------------------------

    def goto_month(self, month, year):
        if not self._dates:
            logger.debug("goto_month(%d, %d) ignored, no dates", month, year)
            return None

        date_index = 0
        for index, d in enumerate(self._dates):
            if d.month == month and d.year == year:
                date_index = index
                break

        dest = self._destination()
        if year not in self.available_years:
            # Stay on a year the host can select
            year = dest.year
        indices = self._indices_for(date_index)
        indices.update(month=month, year=year)
        target = dest.copy(**indices)
        return self._request_scroll(self._column_for(date_index), target)

    def goto_date(self, value):
        index = index_of_date(self._dates, value)
        if index is None:
            return None
        return self._goto_index(index)

    def _goto_index(self, date_index):
        target = self._destination().copy(**self._indices_for(date_index))
        return self._request_scroll(self._column_for(date_index), target)

    def previous_month(self):
        dest = self._destination()
        if dest.month > 1:
            return self.goto_month(dest.month - 1, dest.year)
        if self.month_rollover and dest.year - 1 in self.available_years:
            return self.goto_month(12, dest.year - 1)
        return None

    def next_month(self):
        dest = self._destination()
        if dest.month < 12:
            return self.goto_month(dest.month + 1, dest.year)
        if self.month_rollover and dest.year + 1 in self.available_years:
            return self.goto_month(1, dest.year + 1)
        return None

    def previous_day(self):
        return self._step_day(-1)

    def next_day(self):
        return self._step_day(1)

    def _step_day(self, step):
        if self.granularity is not Granularity.DAY:
            return None
        index = self._destination().day_index + step
        if not 0 <= index < len(self._dates):
            return None
        return self._goto_index(index)

    def previous_week(self):
        return self._step_week(-1)

    def next_week(self):
        return self._step_week(1)

    def _step_week(self, step):
        if self.granularity is not Granularity.WEEK:
            return None
        weeks = self.buckets(Granularity.WEEK)
        index = self._destination().week_index + step
        if not 0 <= index < len(weeks):
            return None
        return self._goto_index(self._first_date_in(weeks[index], Granularity.WEEK))

    def previous_year(self):
        year = self._destination().year
        earlier = [y for y in self.available_years if y < year]
        if not earlier:
            return None
        return self.set_year(earlier[-1])

    def next_year(self):
        year = self._destination().year
        later = [y for y in self.available_years if y > year]
        if not later:
            return None
        return self.set_year(later[0])

    def set_year(self, year):
        if year not in self.available_years or year == self._destination().year:
            return None
        previous_year = self.cursor.year
        self.cursor = self.cursor.copy(year=year, month=1)
        if year != previous_year:
            self._notify_year(year)
        return self.goto_month(1, year)

    def goto_current_period(self):
        now = self.today()
        if now.year in self.available_years:
            return self.goto_month(now.month, now.year)
        return self.goto_month(now.month, self.cursor.year)

    def previous(self):
        return {
            Granularity.DAY: self.previous_day,
            Granularity.WEEK: self.previous_week,
            Granularity.MONTH: self.previous_month,
            Granularity.YEAR: self.previous_year,
        }[self.granularity]()

    def next(self):
        return {
            Granularity.DAY: self.next_day,
            Granularity.WEEK: self.next_week,
            Granularity.MONTH: self.next_month,
            Granularity.YEAR: self.next_year,
        }[self.granularity]()

    def sync_to_offset(self, offset):
        """Commit the cursor to the column under ``offset`` without scrolling."""
        columns = self.buckets()
        if not columns or self._disposed:
            return None
        stride = self.cell_size + self.column_gap
        column = min(max(int(round(offset / stride)), 0), len(columns) - 1)
        if self.granularity is Granularity.DAY:
            date_index = column
        else:
            date_index = self._first_date_in(columns[column], self.granularity)

        self._pending = None
        self._deferred = None
        self._commit(self.cursor.copy(**self._indices_for(date_index)))
        return column

    # -- host data changes ----------------------------------------------

    def set_dates(self, dates, years=None, rescroll=True):
        """Swap in new dates. With ``rescroll=False`` the caller scrolls once its grid is resized."""
        self._dates = list(dates)
        if years is not None:
            self._explicit_years = years
        self._buckets.clear()
        self._pending = None
        self._deferred = None
        self.available_years = available_years(self._dates, self._explicit_years, self.today())

        year = self._initial_year(self.cursor.year)
        self._commit(self.cursor.copy(year=year, **self._locate_today()))
        if not rescroll:
            return None
        return self.goto_month(self.cursor.month, self.cursor.year)

    def set_granularity(self, granularity, rescroll=True):
        if granularity is self.granularity:
            return None
        self.granularity = granularity
        self._pending = None
        self._deferred = None
        if not rescroll:
            return None
        return self.goto_month(self.cursor.month, self.cursor.year)

    # -- affordances ----------------------------------------------------

    @property
    def has_previous(self):
        return self._can_step(-1)

    @property
    def has_next(self):
        return self._can_step(1)

    def _can_step(self, step):
        dest = self._destination()
        if self.granularity is Granularity.DAY:
            return 0 <= dest.day_index + step < len(self._dates)
        if self.granularity is Granularity.WEEK:
            return 0 <= dest.week_index + step < len(self.buckets(Granularity.WEEK))
        if self.granularity is Granularity.YEAR:
            if step < 0:
                return any(y < dest.year for y in self.available_years)
            return any(y > dest.year for y in self.available_years)
        return self._can_step_month(dest, step)

    def _can_step_month(self, dest, step):
        if not self._dates:
            return False
        here = (dest.year, dest.month)
        if step < 0:
            first = to_date(self._dates[0])
            if here <= (first.year, first.month):
                return False
            return dest.month > 1 or (self.month_rollover and dest.year - 1 in self.available_years)
        last = to_date(self._dates[-1])
        if here >= (last.year, last.month):
            return False
        return dest.month < 12 or (self.month_rollover and dest.year + 1 in self.available_years)

    def period_label(self):
        """Header text for where the cursor currently is."""
        if self.granularity is Granularity.WEEK:
            return f"Week {self.cursor.week_number}"
        if self.granularity is Granularity.YEAR:
            return str(self.cursor.year)
        return datetime.date(self.cursor.year, self.cursor.month, 1).strftime("%B")

    def step_name(self):
        return self.granularity.value
