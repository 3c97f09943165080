"""
Shared query-parameter helpers for the calendar endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import Query

from app.config import settings
from app.core.exceptions import ValidationError
from app.core.validators import validate_calendar_date, validate_uf


def resolve_uf(value: Optional[str]) -> Optional[str]:
    """Validated UF, falling back to settings.DEFAULT_UF when none was given."""
    try:
        uf = validate_uf(value)
    except ValueError as e:
        raise ValidationError(str(e), details={"uf": value})
    return uf if uf is not None else validate_uf(settings.DEFAULT_UF)


def uf_query(uf: Optional[str] = Query(None, description="Estado (UF), ex.: PR")) -> Optional[str]:
    return resolve_uf(uf)


def check_calendar_date(value: date, field: str) -> date:
    try:
        return validate_calendar_date(value)
    except ValueError as e:
        raise ValidationError(str(e), details={field: value.isoformat()})
