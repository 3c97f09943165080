from app.services.deadlines.business_days import BusinessCalendar, to_day
from app.services.deadlines.calculator import DeadlineCalculator
from app.services.deadlines.catalog import DEFAULT_CATALOG, DEFAULT_TRIGGERS, InMemoryCatalogRepository
from app.services.deadlines.holidays import (
    ComputedHolidayProvider,
    DatabaseHolidayProvider,
    HolidayProvider,
    HolidaySet,
    StaticHolidayProvider,
)
from app.services.deadlines.models import (
    CatalogEntry,
    CountingType,
    DeadlineCalcInput,
    DeadlineCalcResult,
    DeadlineCategory,
    DeadlineStartMethod,
    PartyRole,
    PieceTrigger,
    PieceType,
    SuggestedDeadline,
)

__all__ = [
    "BusinessCalendar",
    "to_day",
    "DeadlineCalculator",
    "DEFAULT_CATALOG",
    "DEFAULT_TRIGGERS",
    "InMemoryCatalogRepository",
    "ComputedHolidayProvider",
    "DatabaseHolidayProvider",
    "HolidayProvider",
    "HolidaySet",
    "StaticHolidayProvider",
    "CatalogEntry",
    "CountingType",
    "DeadlineCalcInput",
    "DeadlineCalcResult",
    "DeadlineCategory",
    "DeadlineStartMethod",
    "PartyRole",
    "PieceTrigger",
    "PieceType",
    "SuggestedDeadline",
]
