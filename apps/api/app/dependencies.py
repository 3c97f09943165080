from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user, get_current_user_optional, get_tenant_id, require_permission
from app.db.repositories import SqlDeadlineCatalogRepository, SqlHolidayRepository, SqlTeamMemberRepository
from app.db.session import get_db
from app.services.cache import CacheService
from app.services.deadlines import BusinessCalendar, DatabaseHolidayProvider, DeadlineCalculator


def get_holiday_provider(db: AsyncSession = Depends(get_db)) -> DatabaseHolidayProvider:
    return DatabaseHolidayProvider(SqlHolidayRepository(db), cache=CacheService())


def get_business_calendar(
    provider: DatabaseHolidayProvider = Depends(get_holiday_provider),
) -> BusinessCalendar:
    return BusinessCalendar(provider)


def get_catalog_repository(db: AsyncSession = Depends(get_db)) -> SqlDeadlineCatalogRepository:
    return SqlDeadlineCatalogRepository(db)


def get_deadline_calculator(
    calendar: BusinessCalendar = Depends(get_business_calendar),
    catalog: SqlDeadlineCatalogRepository = Depends(get_catalog_repository),
) -> DeadlineCalculator:
    return DeadlineCalculator(calendar, catalog)


def get_team_member_repository(
    db: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
) -> SqlTeamMemberRepository:
    return SqlTeamMemberRepository(db, tenant_id=tenant_id)


__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "get_tenant_id",
    "require_permission",
    "get_db",
    "get_holiday_provider",
    "get_business_calendar",
    "get_catalog_repository",
    "get_deadline_calculator",
    "get_team_member_repository",
]
