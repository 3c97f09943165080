from typing import Optional

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Tenant(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A law firm. Every user, team member and deadline belongs to exactly one."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    default_uf: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    settings: Mapped[Optional[dict]] = mapped_column(JSONB, default=dict)

    users = relationship("User", back_populates="tenant", lazy="selectin")
