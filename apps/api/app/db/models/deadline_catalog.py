from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class DeadlineTypeCatalog(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "deadline_type_catalog"

    type: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    short_name: Mapped[str] = mapped_column(String(60), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    legal_basis: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    default_days: Mapped[int] = mapped_column(Integer, nullable=False)
    counting_type: Mapped[str] = mapped_column(String(20), nullable=False, default="DIAS_UTEIS")
    is_extendable: Mapped[bool] = mapped_column(Boolean, default=False)
    is_fatal: Mapped[bool] = mapped_column(Boolean, default=False)
    double_for_public_entity: Mapped[bool] = mapped_column(Boolean, default=True)
    double_for_defensoria: Mapped[bool] = mapped_column(Boolean, default=True)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default="#6B7280")
    icon: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class DeadlinePieceTrigger(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A received piece type that opens (or suggests) a catalog deadline."""

    __tablename__ = "deadline_piece_trigger"
    __table_args__ = (UniqueConstraint("piece_type", "deadline_type", "target_role"),)

    piece_type: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    deadline_type: Mapped[str] = mapped_column(
        String(50), ForeignKey("deadline_type_catalog.type"), nullable=False
    )
    target_role: Mapped[str] = mapped_column(String(20), nullable=False)
    trigger_description: Mapped[str] = mapped_column(String(255), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    is_suggestion: Mapped[bool] = mapped_column(Boolean, default=True)
