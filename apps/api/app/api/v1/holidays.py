from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel

from app.api.v1.helpers import uf_query
from app.core.rbac import Permission
from app.core.validators import MAX_CALENDAR_YEAR, MIN_CALENDAR_YEAR
from app.dependencies import get_holiday_provider, require_permission
from app.services.deadlines import DatabaseHolidayProvider

router = APIRouter(prefix="/holidays", tags=["holidays"])


class HolidayListResponse(BaseModel):
    year: int
    uf: Optional[str] = None
    dates: list[date]
    total: int


@router.get("/{year}", response_model=HolidayListResponse)
async def list_holidays(
    year: int = Path(..., ge=MIN_CALENDAR_YEAR, le=MAX_CALENDAR_YEAR),
    uf: Optional[str] = Depends(uf_query),
    user: dict = Depends(require_permission(Permission.CALENDAR_READ)),
    provider: DatabaseHolidayProvider = Depends(get_holiday_provider),
):
    holidays = await provider.get_holidays(year, uf)
    return HolidayListResponse(
        year=year, uf=holidays.state, dates=sorted(holidays.dates), total=len(holidays)
    )


@router.delete("/cache")
async def clear_holiday_cache(
    user: dict = Depends(require_permission(Permission.SETTINGS_UPDATE)),
    provider: DatabaseHolidayProvider = Depends(get_holiday_provider),
):
    removed = await provider.clear_cache()
    return {"invalidated": removed}
