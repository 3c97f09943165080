"""Tests for the holiday calendar and its providers."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from app.services.cache import CacheService
from app.services.deadlines import DatabaseHolidayProvider, HolidaySet, StaticHolidayProvider
from app.services.deadlines.holidays import ComputedHolidayProvider, easter_sunday, national_holidays, state_holidays


@pytest.mark.parametrize("year,expected", [
    (2024, date(2024, 3, 31)),
    (2025, date(2025, 4, 20)),
    (2026, date(2026, 4, 5)),
    (2027, date(2027, 3, 28)),
])
def test_easter_sunday(year, expected):
    assert easter_sunday(year) == expected


def test_national_holidays_2026():
    days = {d for d, _ in national_holidays(2026)}
    assert len(days) == 13
    assert {date(2026, 2, 16), date(2026, 2, 17), date(2026, 4, 3), date(2026, 6, 4)} <= days
    assert date(2026, 11, 20) in days


def test_national_holidays_are_sorted():
    holidays = national_holidays(2027)
    assert holidays == sorted(holidays)


def test_state_holidays():
    assert [d for d, _ in state_holidays(2026, "sp")] == [date(2026, 1, 25), date(2026, 7, 9)]
    assert state_holidays(2026, "RJ") == []
    assert state_holidays(2026, None) == []


def test_holiday_set_membership_and_iso():
    hs = HolidaySet(year=2026, state="PR", dates=frozenset({date(2026, 12, 25), date(2026, 1, 1)}))
    assert date(2026, 1, 1) in hs
    assert date(2026, 1, 2) not in hs
    assert len(hs) == 2
    assert hs.to_iso() == ["2026-01-01", "2026-12-25"]
    assert HolidaySet.from_iso(2026, "PR", hs.to_iso()) == hs


@pytest.mark.asyncio
async def test_static_provider_filters_by_year_and_state():
    provider = StaticHolidayProvider(
        national=[date(2026, 1, 1), date(2027, 1, 1)],
        by_state={"pr": [date(2026, 12, 19)]},
    )
    national = await provider.get_holidays(2026)
    assert national.dates == frozenset({date(2026, 1, 1)})
    assert national.state is None

    parana = await provider.get_holidays(2026, "PR")
    assert parana.dates == frozenset({date(2026, 1, 1), date(2026, 12, 19)})
    assert parana.state == "PR"


@pytest.mark.asyncio
async def test_static_provider_blank_state_is_national():
    provider = StaticHolidayProvider(national=[date(2026, 1, 1)], by_state={"SP": [date(2026, 7, 9)]})
    assert (await provider.get_holidays(2026, "  ")).dates == frozenset({date(2026, 1, 1)})


@pytest.mark.asyncio
async def test_computed_provider_adds_state_dates():
    provider = ComputedHolidayProvider()
    sp = await provider.get_holidays(2026, "SP")
    assert date(2026, 1, 25) in sp
    assert len(sp) == 15


# --------------- DatabaseHolidayProvider ---------------

@pytest.mark.asyncio
async def test_database_provider_reads_and_caches(holiday_repository, fake_cache):
    provider = DatabaseHolidayProvider(holiday_repository, cache=fake_cache)

    first = await provider.get_holidays(2026, "sp")
    second = await provider.get_holidays(2026, "SP")

    assert first == second
    assert date(2026, 7, 9) in first
    assert holiday_repository.calls == [(2026, "SP")]
    assert "holidays:2026:SP" in fake_cache.store


@pytest.mark.asyncio
async def test_database_provider_national_key(holiday_repository, fake_cache):
    provider = DatabaseHolidayProvider(holiday_repository, cache=fake_cache)
    holidays = await provider.get_holidays(2026)
    assert date(2026, 7, 9) not in holidays
    assert fake_cache.store["holidays:2026:ALL"] == holidays.to_iso()


@pytest.mark.asyncio
async def test_database_provider_cache_hit_skips_repository():
    repository = AsyncMock()
    cache = AsyncMock(spec=CacheService)
    cache.get = AsyncMock(return_value=["2026-01-01"])

    provider = DatabaseHolidayProvider(repository, cache=cache)
    holidays = await provider.get_holidays(2026, "PR")

    assert holidays.dates == frozenset({date(2026, 1, 1)})
    cache.get.assert_awaited_once_with("holidays:2026:PR")
    repository.list_dates.assert_not_called()


@pytest.mark.asyncio
async def test_database_provider_uses_configured_ttl():
    repository = AsyncMock()
    repository.list_dates = AsyncMock(return_value=[date(2026, 1, 1)])
    cache = AsyncMock(spec=CacheService)
    cache.get = AsyncMock(return_value=None)

    provider = DatabaseHolidayProvider(repository, cache=cache, ttl=60)
    await provider.get_holidays(2026)

    cache.set.assert_awaited_once_with("holidays:2026:ALL", ["2026-01-01"], ttl=60)


@pytest.mark.asyncio
async def test_database_provider_clear_cache(holiday_repository, fake_cache):
    provider = DatabaseHolidayProvider(holiday_repository, cache=fake_cache)
    await provider.get_holidays(2026)
    await provider.get_holidays(2027, "SP")

    assert await provider.clear_cache() == 2
    assert fake_cache.store == {}

    await provider.get_holidays(2026)
    assert holiday_repository.calls[-1] == (2026, None)


@pytest.mark.asyncio
async def test_database_provider_propagates_repository_errors(fake_cache):
    repository = AsyncMock()
    repository.list_dates = AsyncMock(side_effect=RuntimeError("db down"))
    provider = DatabaseHolidayProvider(repository, cache=fake_cache)
    with pytest.raises(RuntimeError):
        await provider.get_holidays(2026)
