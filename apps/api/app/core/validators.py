"""
Brazilian jurisdiction validators for Pydantic field_validator usage.
"""

from datetime import date
from typing import Optional


BRAZILIAN_UFS = frozenset({
    "AC", "AL", "AM", "AP", "BA", "CE", "DF", "ES", "GO", "MA", "MG", "MS", "MT", "PA",
    "PB", "PE", "PI", "PR", "RJ", "RN", "RO", "RR", "RS", "SC", "SE", "SP", "TO",
})


def normalize_uf(value: Optional[str]) -> Optional[str]:
    """Upper-case and trim a state code; empty means national-only (None)."""
    if value is None:
        return None
    v = value.strip().upper()
    return v or None


def validate_uf(value: Optional[str]) -> Optional[str]:
    """Validate a 2-letter Brazilian state code (UF). Accepts any case."""
    v = normalize_uf(value)
    if v is None:
        return None
    if v not in BRAZILIAN_UFS:
        raise ValueError(
            f"UF inválida: '{value}'. Esperado um dos 27 códigos de estado (ex.: SP, PR, MA)."
        )
    return v


# Calendar window served by the holiday tables and the business-day engine.
MIN_CALENDAR_YEAR = 1900
MAX_CALENDAR_YEAR = 2200
MAX_DEADLINE_DAYS = 3650


def validate_calendar_date(value: Optional[date]) -> Optional[date]:
    """Reject dates outside MIN_CALENDAR_YEAR..MAX_CALENDAR_YEAR."""
    if value is None:
        return None
    if not MIN_CALENDAR_YEAR <= value.year <= MAX_CALENDAR_YEAR:
        raise ValueError(
            f"Data fora do calendário suportado ({MIN_CALENDAR_YEAR}-{MAX_CALENDAR_YEAR}): {value.isoformat()}"
        )
    return value
