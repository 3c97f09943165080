"""
SQLAlchemy-backed implementations of the repository protocols used by the
engines (team permissions, holiday calendar, deadline catalog).
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.team_permissions import TeamMemberRecord, TeamRole
from app.db.models import DeadlinePieceTrigger, DeadlineTypeCatalog, Holiday, HolidayKind, TeamMember
from app.services.deadlines.models import CatalogEntry, DeadlineCategory, PartyRole, PieceTrigger, PieceType


def _as_uuid(value: object) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class SqlTeamMemberRepository:
    def __init__(self, session: AsyncSession, tenant_id: Optional[str] = None) -> None:
        self.session = session
        self.tenant_id = _as_uuid(tenant_id) if tenant_id else None

    async def find_member_by_id(self, member_id: str) -> Optional[TeamMemberRecord]:
        pk = _as_uuid(member_id)
        if pk is None:
            return None

        stmt = select(TeamMember.id, TeamMember.role, TeamMember.manager_member_id).where(
            TeamMember.id == pk
        )
        if self.tenant_id is not None:
            stmt = stmt.where(TeamMember.tenant_id == self.tenant_id)

        row = (await self.session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return TeamMemberRecord(
            id=str(row.id),
            role=TeamRole.parse(row.role),
            manager_id=str(row.manager_member_id) if row.manager_member_id else None,
        )


class SqlHolidayRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_dates(self, year: int, state: Optional[str]) -> list[date]:
        """Holidays of `year` without a UF (national, forense), plus the state's own when given."""
        scope = or_(Holiday.kind == HolidayKind.NACIONAL.value, Holiday.uf.is_(None))
        if state:
            scope = or_(scope, Holiday.uf == state)

        stmt = (
            select(Holiday.date)
            .where(Holiday.date >= date(year, 1, 1), Holiday.date <= date(year, 12, 31))
            .where(scope)
            .distinct()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SqlDeadlineCatalogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, deadline_type: str) -> Optional[CatalogEntry]:
        result = await self.session.execute(
            select(DeadlineTypeCatalog).where(
                DeadlineTypeCatalog.type == deadline_type,
                DeadlineTypeCatalog.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return CatalogEntry.model_validate(row) if row else None

    async def list_active(self, category: Optional[DeadlineCategory] = None) -> list[CatalogEntry]:
        stmt = select(DeadlineTypeCatalog).where(DeadlineTypeCatalog.is_active.is_(True))
        if category is not None:
            stmt = stmt.where(DeadlineTypeCatalog.category == DeadlineCategory(category).value)
        stmt = stmt.order_by(DeadlineTypeCatalog.category, DeadlineTypeCatalog.sort_order)
        result = await self.session.execute(stmt)
        return [CatalogEntry.model_validate(row) for row in result.scalars().all()]

    async def list_triggers(
        self, piece_type: PieceType, party_role: Optional[PartyRole] = None
    ) -> list[PieceTrigger]:
        stmt = (
            select(DeadlinePieceTrigger)
            .where(DeadlinePieceTrigger.piece_type == PieceType(piece_type).value)
            .order_by(DeadlinePieceTrigger.is_default.desc(), DeadlinePieceTrigger.deadline_type)
        )
        if party_role is not None:
            stmt = stmt.where(
                DeadlinePieceTrigger.target_role.in_([PartyRole(party_role).value, PartyRole.AMBOS.value])
            )
        result = await self.session.execute(stmt)
        return [PieceTrigger.model_validate(row) for row in result.scalars().all()]
