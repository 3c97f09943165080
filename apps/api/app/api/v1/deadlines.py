import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.v1.helpers import check_calendar_date, resolve_uf, uf_query
from app.core.rbac import Permission
from app.core.validators import MAX_DEADLINE_DAYS
from app.dependencies import get_business_calendar, get_deadline_calculator, require_permission
from app.services.deadlines import (
    BusinessCalendar,
    CatalogEntry,
    DeadlineCalcInput,
    DeadlineCalcResult,
    DeadlineCalculator,
    DeadlineCategory,
    PartyRole,
    PieceType,
    SuggestedDeadline,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/deadlines", tags=["deadlines"])

can_read_deadlines = require_permission(Permission.DEADLINES_READ)


class BusinessDayResponse(BaseModel):
    day: date
    uf: Optional[str] = None
    is_business_day: bool


class NextBusinessDayResponse(BaseModel):
    day: date
    uf: Optional[str] = None
    next_business_day: date


class AddBusinessDaysResponse(BaseModel):
    start: date
    days: int
    uf: Optional[str] = None
    due_date: date


class BusinessDaysUntilResponse(BaseModel):
    day: date
    today: date
    uf: Optional[str] = None
    business_days: int


def _with_default_uf(data: DeadlineCalcInput) -> DeadlineCalcInput:
    if data.uf is None:
        uf = resolve_uf(None)
        if uf:
            return data.model_copy(update={"uf": uf})
    return data


@router.post("/calculate", response_model=DeadlineCalcResult)
async def calculate_deadline(
    data: DeadlineCalcInput,
    user: dict = Depends(can_read_deadlines),
    calculator: DeadlineCalculator = Depends(get_deadline_calculator),
):
    return await calculator.calculate(_with_default_uf(data))


@router.post("/simulate", response_model=DeadlineCalcResult)
async def simulate_deadline(
    data: DeadlineCalcInput,
    user: dict = Depends(can_read_deadlines),
    calculator: DeadlineCalculator = Depends(get_deadline_calculator),
):
    return await calculator.simulate(_with_default_uf(data))


@router.get("/catalog", response_model=list[CatalogEntry])
async def list_catalog(
    category: Optional[DeadlineCategory] = None,
    user: dict = Depends(can_read_deadlines),
    calculator: DeadlineCalculator = Depends(get_deadline_calculator),
):
    return await calculator.get_type_catalog(category)


@router.get("/suggestions", response_model=list[SuggestedDeadline])
async def suggested_deadlines(
    piece_type: PieceType,
    party_role: Optional[PartyRole] = None,
    user: dict = Depends(can_read_deadlines),
    calculator: DeadlineCalculator = Depends(get_deadline_calculator),
):
    return await calculator.get_suggested_deadlines(piece_type, party_role)


@router.get("/business-day", response_model=BusinessDayResponse)
async def check_business_day(
    day: date = Query(..., alias="date"),
    uf: Optional[str] = Depends(uf_query),
    user: dict = Depends(can_read_deadlines),
    calendar: BusinessCalendar = Depends(get_business_calendar),
):
    check_calendar_date(day, "date")
    return BusinessDayResponse(
        day=day, uf=uf, is_business_day=await calendar.is_business_day(day, uf)
    )


@router.get("/next-business-day", response_model=NextBusinessDayResponse)
async def next_business_day(
    day: date = Query(..., alias="date"),
    uf: Optional[str] = Depends(uf_query),
    user: dict = Depends(can_read_deadlines),
    calendar: BusinessCalendar = Depends(get_business_calendar),
):
    check_calendar_date(day, "date")
    return NextBusinessDayResponse(
        day=day, uf=uf, next_business_day=await calendar.next_business_day(day, uf)
    )


@router.get("/add-business-days", response_model=AddBusinessDaysResponse)
async def add_business_days(
    start: date,
    days: int = Query(..., le=MAX_DEADLINE_DAYS),
    uf: Optional[str] = Depends(uf_query),
    user: dict = Depends(can_read_deadlines),
    calendar: BusinessCalendar = Depends(get_business_calendar),
):
    check_calendar_date(start, "start")
    due = await calendar.compute_deadline(start, days, uf)
    return AddBusinessDaysResponse(start=start, days=days, uf=uf, due_date=due)


@router.get("/business-days-until", response_model=BusinessDaysUntilResponse)
async def business_days_until(
    day: date = Query(..., alias="date"),
    uf: Optional[str] = Depends(uf_query),
    user: dict = Depends(can_read_deadlines),
    calendar: BusinessCalendar = Depends(get_business_calendar),
):
    check_calendar_date(day, "date")
    today = date.today()
    remaining = await calendar.business_days_until(day, uf, today=today)
    return BusinessDaysUntilResponse(day=day, today=today, uf=uf, business_days=remaining)
