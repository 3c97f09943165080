"""
Business-day arithmetic under CPC art. 219 / 224.

A business day is Monday to Friday and not in the HolidaySet of its own calendar
year for the requested state. Deadline counting excludes the start day, includes
the landing day, and rolls forward when the landing day is not a business day.

Usage:
    calendar = BusinessCalendar(provider)
    due = await calendar.compute_deadline(date(2026, 3, 10), 15, state="PR")
    left = await calendar.business_days_until(due, state="PR")
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Union

from app.core.exceptions import InvalidArgumentError
from app.core.validators import normalize_uf
from app.services.deadlines.holidays import HolidayProvider, HolidaySet

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

DateLike = Union[date, datetime]


def to_day(value: DateLike) -> date:
    """Drop the time of day (midnight normalization)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def is_weekend(day: DateLike) -> bool:
    return to_day(day).weekday() >= 5


def _check_day_count(days: object) -> int:
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidArgumentError(
            "Número de dias deve ser um inteiro", details={"days": repr(days)}
        )
    if days < 0:
        raise InvalidArgumentError(
            "Número de dias não pode ser negativo", details={"days": days}
        )
    return days


class _HolidayLookup:
    """Fetches each distinct year's HolidaySet once for the duration of one computation."""

    def __init__(self, provider: HolidayProvider, state: Optional[str]) -> None:
        self.provider = provider
        self.state = state
        self._years: dict[int, HolidaySet] = {}

    async def is_business_day(self, day: date) -> bool:
        if day.weekday() >= 5:
            return False
        holidays = self._years.get(day.year)
        if holidays is None:
            holidays = await self.provider.get_holidays(day.year, self.state)
            self._years[day.year] = holidays
        return day not in holidays


class BusinessCalendar:
    """Deadline arithmetic over an injected HolidayProvider."""

    def __init__(self, provider: HolidayProvider) -> None:
        self.provider = provider

    def _lookup(self, state: Optional[str]) -> _HolidayLookup:
        return _HolidayLookup(self.provider, normalize_uf(state))

    async def is_business_day(self, day: DateLike, state: Optional[str] = None) -> bool:
        return await self._lookup(state).is_business_day(to_day(day))

    async def next_business_day(self, day: DateLike, state: Optional[str] = None) -> date:
        """The given day if it is a business day, otherwise the first one after it."""
        lookup = self._lookup(state)
        current = to_day(day)
        while not await lookup.is_business_day(current):
            current += ONE_DAY
        return current

    async def compute_deadline(
        self, start: DateLike, business_days: int, state: Optional[str] = None
    ) -> date:
        """
        Landing date of a deadline of `business_days` business days counted from `start`.

        The start day never counts. Zero days yields next_business_day(start).
        Raises InvalidArgumentError for negative or non-integer day counts.
        """
        remaining = _check_day_count(business_days)
        lookup = self._lookup(state)
        current = to_day(start)

        while remaining > 0:
            current += ONE_DAY
            if await lookup.is_business_day(current):
                remaining -= 1

        while not await lookup.is_business_day(current):
            current += ONE_DAY

        logger.debug(
            "compute_deadline start=%s days=%s uf=%s -> %s",
            to_day(start), business_days, lookup.state, current,
        )
        return current

    async def subtract_business_days(
        self, day: DateLike, business_days: int, state: Optional[str] = None
    ) -> date:
        """Walk backwards until `business_days` business days have been passed."""
        remaining = _check_day_count(business_days)
        lookup = self._lookup(state)
        current = to_day(day)
        while remaining > 0:
            current -= ONE_DAY
            if await lookup.is_business_day(current):
                remaining -= 1
        return current

    async def business_days_until(
        self,
        target: DateLike,
        state: Optional[str] = None,
        *,
        today: Optional[DateLike] = None,
    ) -> int:
        """
        Business days between today and `target`, today excluded.

        Positive means days remaining, negative means days overdue, 0 when
        `target` is today.
        """
        start = to_day(today) if today is not None else date.today()
        end = to_day(target)
        if start == end:
            return 0

        forward = end > start
        low, high = (start, end) if forward else (end, start)

        lookup = self._lookup(state)
        count = 0
        cursor = low + ONE_DAY
        while cursor <= high:
            if await lookup.is_business_day(cursor):
                count += 1
            cursor += ONE_DAY

        return count if forward else -count
