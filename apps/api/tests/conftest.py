"""Pytest fixtures for API tests."""

import fnmatch
import os
from datetime import date
from typing import Optional

os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.auth import create_access_token
from app.core.rbac import Role
from app.core.team_permissions import TeamMemberRecord, TeamRole
from app.dependencies import get_catalog_repository, get_holiday_provider, get_team_member_repository
from app.main import app
from app.services.deadlines import DatabaseHolidayProvider, InMemoryCatalogRepository
from app.services.deadlines.holidays import national_holidays

TEST_TENANT_ID = "00000000-0000-0000-0000-000000000001"
TEST_USER_ID = "00000000-0000-0000-0000-000000000002"

# Team: socio -> senior -> (pleno, paralegal); pleno -> estagiario
MEMBER_SOCIO = "m-socio"
MEMBER_SENIOR = "m-senior"
MEMBER_PLENO = "m-pleno"
MEMBER_PARALEGAL = "m-paralegal"
MEMBER_ESTAGIARIO = "m-estagiario"


class InMemoryTeamMemberRepository:
    def __init__(self, members: list[TeamMemberRecord]) -> None:
        self.members = {m.id: m for m in members}
        self.lookups: list[str] = []

    async def find_member_by_id(self, member_id: str) -> Optional[TeamMemberRecord]:
        self.lookups.append(member_id)
        return self.members.get(member_id)


class InMemoryHolidayRepository:
    def __init__(self, national: list[date], by_state: Optional[dict[str, list[date]]] = None) -> None:
        self.national = national
        self.by_state = by_state or {}
        self.calls: list[tuple[int, Optional[str]]] = []

    async def list_dates(self, year: int, state: Optional[str]) -> list[date]:
        self.calls.append((year, state))
        days = list(self.national)
        if state:
            days += self.by_state.get(state, [])
        return [d for d in days if d.year == year]


class FakeCache:
    """Dict-backed stand-in for CacheService."""

    def __init__(self) -> None:
        self.store: dict[str, object] = {}

    async def get(self, key: str):
        return self.store.get(key)

    async def set(self, key: str, value, ttl: int = 300) -> bool:
        self.store[key] = value
        return True

    async def invalidate_pattern(self, pattern: str) -> int:
        keys = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for k in keys:
            del self.store[k]
        return len(keys)


def make_team() -> InMemoryTeamMemberRepository:
    return InMemoryTeamMemberRepository([
        TeamMemberRecord(MEMBER_SOCIO, TeamRole.SOCIO),
        TeamMemberRecord(MEMBER_SENIOR, TeamRole.ADVOGADO_SENIOR, manager_id=MEMBER_SOCIO),
        TeamMemberRecord(MEMBER_PLENO, TeamRole.ADVOGADO_PLENO, manager_id=MEMBER_SENIOR),
        TeamMemberRecord(MEMBER_PARALEGAL, TeamRole.PARALEGAL, manager_id=MEMBER_SENIOR),
        TeamMemberRecord(MEMBER_ESTAGIARIO, TeamRole.ESTAGIARIO, manager_id=MEMBER_PLENO),
    ])


def make_token(role, member_id: Optional[str] = None, **extra) -> str:
    data = {
        "sub": TEST_USER_ID,
        "tenant_id": TEST_TENANT_ID,
        "email": "test@jrclaw.com.br",
        "member_id": member_id,
        **extra,
    }
    if role is not None:
        data["role"] = role
    return create_access_token(data)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def team_repository() -> InMemoryTeamMemberRepository:
    return make_team()


@pytest.fixture
def holiday_repository() -> InMemoryHolidayRepository:
    return InMemoryHolidayRepository(
        national=[d for year in range(2025, 2028) for d, _ in national_holidays(year)],
        by_state={"SP": [date(2026, 7, 9)]},
    )


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture(autouse=True)
def override_dependencies(team_repository, holiday_repository, fake_cache):
    """Route every data dependency to in-memory fakes; no database or Redis needed."""
    app.dependency_overrides[get_holiday_provider] = lambda: DatabaseHolidayProvider(
        holiday_repository, cache=fake_cache
    )
    app.dependency_overrides[get_catalog_repository] = lambda: InMemoryCatalogRepository()
    app.dependency_overrides[get_team_member_repository] = lambda: team_repository
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    """Unauthenticated async HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_token() -> str:
    """Generate a valid ADMIN JWT token for testing."""
    return make_token(Role.ADMIN, member_id=MEMBER_SOCIO)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Authorization headers with valid JWT."""
    return bearer(auth_token)


@pytest.fixture
async def auth_client(auth_token: str):
    """Authenticated async HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers=bearer(auth_token),
    ) as ac:
        yield ac


@pytest.fixture
def headers_for():
    """Build Authorization headers for a role (and optional team member id)."""
    def _headers(role, member_id: Optional[str] = None, **extra) -> dict[str, str]:
        return bearer(make_token(role, member_id=member_id, **extra))
    return _headers
