import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models.base import Base, TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin


class TeamMember(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """Membership in the team-management module, with a single direct manager."""

    __tablename__ = "team_members"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, unique=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # app.core.team_permissions.TeamRole
    role: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    manager_member_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("team_members.id"), nullable=True, index=True
    )

    user = relationship("User", back_populates="team_member")
    manager = relationship("TeamMember", remote_side="TeamMember.id", back_populates="subordinates")
    subordinates = relationship("TeamMember", back_populates="manager")
