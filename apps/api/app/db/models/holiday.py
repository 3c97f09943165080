import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class HolidayKind(str, Enum):
    NACIONAL = "NACIONAL"
    ESTADUAL = "ESTADUAL"
    MUNICIPAL = "MUNICIPAL"
    FORENSE = "FORENSE"


class Holiday(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A non-business day. Rows without a UF apply everywhere, the others only to their UF."""

    __tablename__ = "holidays"
    __table_args__ = (UniqueConstraint("date", "kind", "uf", "municipality"),)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default=HolidayKind.NACIONAL.value)
    uf: Mapped[Optional[str]] = mapped_column(String(2), nullable=True, index=True)
    municipality: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    legal_basis: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
