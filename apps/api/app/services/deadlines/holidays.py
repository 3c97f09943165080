"""
Holiday calendar: the non-business dates (beyond weekends) for a year and state.

Providers:
    DatabaseHolidayProvider: holidays table, cached in Redis per (year, UF)
    ComputedHolidayProvider: national calendar + known state holidays, no I/O
    StaticHolidayProvider  : explicit dates (tests, local development)
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Protocol

from app.config import settings
from app.core.validators import normalize_uf
from app.services.cache import CacheService

logger = logging.getLogger(__name__)

CACHE_PREFIX = "holidays"


@dataclass(frozen=True)
class HolidaySet:
    """Immutable set of holiday dates for one (year, state) pair."""

    year: int
    state: Optional[str]
    dates: frozenset[date]

    def __contains__(self, day: object) -> bool:
        return day in self.dates

    def __len__(self) -> int:
        return len(self.dates)

    def to_iso(self) -> list[str]:
        return sorted(d.isoformat() for d in self.dates)

    @classmethod
    def from_iso(cls, year: int, state: Optional[str], values: Iterable[str]) -> "HolidaySet":
        return cls(year=year, state=state, dates=frozenset(date.fromisoformat(v) for v in values))


class HolidayProvider(Protocol):
    async def get_holidays(self, year: int, state: Optional[str] = None) -> HolidaySet: ...


class HolidayRepository(Protocol):
    async def list_dates(self, year: int, state: Optional[str]) -> list[date]: ...


# --------------- Brazilian calendar ---------------

NATIONAL_FIXED: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Confraternização Universal"),
    (4, 21, "Tiradentes"),
    (5, 1, "Dia do Trabalho"),
    (9, 7, "Independência do Brasil"),
    (10, 12, "Nossa Senhora Aparecida"),
    (11, 2, "Finados"),
    (11, 15, "Proclamação da República"),
    (11, 20, "Dia da Consciência Negra"),
    (12, 25, "Natal"),
)

# Offsets in days from Easter Sunday
NATIONAL_MOVABLE: tuple[tuple[int, str], ...] = (
    (-48, "Carnaval (segunda-feira)"),
    (-47, "Carnaval (terça-feira)"),
    (-2, "Sexta-feira Santa"),
    (60, "Corpus Christi"),
)

STATE_FIXED: Mapping[str, tuple[tuple[int, int, str], ...]] = {
    "SP": ((1, 25, "Aniversário de São Paulo"), (7, 9, "Revolução Constitucionalista")),
    "PR": ((12, 19, "Emancipação do Paraná"),),
    "TO": ((10, 5, "Criação do Estado do Tocantins"), (9, 8, "Nossa Senhora da Natividade")),
    "MA": ((7, 28, "Adesão do Maranhão à Independência"),),
}


def easter_sunday(year: int) -> date:
    """Gregorian Easter (anonymous computus)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def national_holidays(year: int) -> list[tuple[date, str]]:
    easter = easter_sunday(year)
    holidays = [(date(year, month, day), name) for month, day, name in NATIONAL_FIXED]
    holidays += [(easter + timedelta(days=offset), name) for offset, name in NATIONAL_MOVABLE]
    return sorted(holidays)


def state_holidays(year: int, uf: Optional[str]) -> list[tuple[date, str]]:
    uf = normalize_uf(uf)
    if uf is None:
        return []
    return sorted((date(year, month, day), name) for month, day, name in STATE_FIXED.get(uf, ()))


# --------------- Providers ---------------

class ComputedHolidayProvider:
    """National + known state holidays computed on the fly."""

    async def get_holidays(self, year: int, state: Optional[str] = None) -> HolidaySet:
        uf = normalize_uf(state)
        dates = {d for d, _ in national_holidays(year)}
        dates.update(d for d, _ in state_holidays(year, uf))
        return HolidaySet(year=year, state=uf, dates=frozenset(dates))


class StaticHolidayProvider:
    """Fixed holiday dates. `by_state` dates apply only to that UF, on top of `national`."""

    def __init__(
        self,
        national: Iterable[date] = (),
        by_state: Optional[Mapping[str, Iterable[date]]] = None,
    ) -> None:
        self._national = frozenset(national)
        self._by_state = {
            normalize_uf(uf): frozenset(days) for uf, days in (by_state or {}).items()
        }

    async def get_holidays(self, year: int, state: Optional[str] = None) -> HolidaySet:
        uf = normalize_uf(state)
        pool = self._national | self._by_state.get(uf, frozenset()) if uf else self._national
        return HolidaySet(year=year, state=uf, dates=frozenset(d for d in pool if d.year == year))


class DatabaseHolidayProvider:
    """Holidays from the database, cached per (year, UF) for HOLIDAY_CACHE_TTL_SECONDS."""

    def __init__(
        self,
        repository: HolidayRepository,
        cache: Optional[CacheService] = None,
        ttl: Optional[int] = None,
    ) -> None:
        self.repository = repository
        self.cache = cache or CacheService()
        self.ttl = ttl if ttl is not None else settings.HOLIDAY_CACHE_TTL_SECONDS

    @staticmethod
    def cache_key(year: int, state: Optional[str]) -> str:
        return f"{CACHE_PREFIX}:{year}:{state or 'ALL'}"

    async def get_holidays(self, year: int, state: Optional[str] = None) -> HolidaySet:
        uf = normalize_uf(state)
        key = self.cache_key(year, uf)

        cached = await self.cache.get(key)
        if cached is not None:
            return HolidaySet.from_iso(year, uf, cached)

        logger.debug("Holiday cache miss for %s", key)
        dates = await self.repository.list_dates(year, uf)
        holidays = HolidaySet(year=year, state=uf, dates=frozenset(dates))
        await self.cache.set(key, holidays.to_iso(), ttl=self.ttl)
        return holidays

    async def clear_cache(self) -> int:
        """Drop every cached holiday set (after seeding or editing holidays)."""
        return await self.cache.invalidate_pattern(f"{CACHE_PREFIX}:*")
