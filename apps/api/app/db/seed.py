"""Seed the database with initial data for development."""

import asyncio
import logging
import uuid
from datetime import date

from sqlalchemy import delete

from app.core.rbac import Role
from app.core.security import hash_password
from app.core.team_permissions import TeamRole
from app.db.models import (
    DeadlinePieceTrigger,
    DeadlineTypeCatalog,
    Holiday,
    HolidayKind,
    TeamMember,
    Tenant,
    User,
)
from app.db.session import AsyncSessionLocal
from app.services.deadlines.catalog import DEFAULT_CATALOG, DEFAULT_TRIGGERS
from app.services.deadlines.holidays import STATE_FIXED, national_holidays, state_holidays

logger = logging.getLogger("jrclaw")

DEMO_TENANT_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
HOLIDAY_YEARS = range(2024, 2028)

# (email, name, role, team role, manager email)
DEMO_USERS = (
    ("admin@demo.jrclaw.com.br", "Administrador Demo", Role.ADMIN, TeamRole.SOCIO, None),
    ("socio@demo.jrclaw.com.br", "Dra. Helena Prado", Role.SOCIO, TeamRole.SOCIO, None),
    ("senior@demo.jrclaw.com.br", "Dr. João Silva", Role.ADVOGADO, TeamRole.ADVOGADO_SENIOR, "socio@demo.jrclaw.com.br"),
    ("advogado@demo.jrclaw.com.br", "Dra. Marina Costa", Role.ADVOGADO, TeamRole.ADVOGADO_PLENO, "senior@demo.jrclaw.com.br"),
    ("paralegal@demo.jrclaw.com.br", "Carlos Souza", Role.ADVOGADO, TeamRole.PARALEGAL, "senior@demo.jrclaw.com.br"),
    ("estagiario@demo.jrclaw.com.br", "Ana Lima", Role.ESTAGIARIO, TeamRole.ESTAGIARIO, "advogado@demo.jrclaw.com.br"),
)

FORENSE_FIXED = ((12, 8, "Dia da Justiça", "Lei 5.010/66"),)


def holiday_rows() -> list[Holiday]:
    rows = []
    for year in HOLIDAY_YEARS:
        for day, name in national_holidays(year):
            rows.append(Holiday(date=day, name=name, kind=HolidayKind.NACIONAL.value))
        for month, day, name, basis in FORENSE_FIXED:
            rows.append(Holiday(
                date=date(year, month, day), name=name,
                kind=HolidayKind.FORENSE.value, legal_basis=basis,
            ))
        for uf in STATE_FIXED:
            for day, name in state_holidays(year, uf):
                rows.append(Holiday(date=day, name=name, kind=HolidayKind.ESTADUAL.value, uf=uf))
    return rows


def trigger_rows() -> list[DeadlinePieceTrigger]:
    return [DeadlinePieceTrigger(**t.model_dump(mode="json")) for t in DEFAULT_TRIGGERS]


async def seed():
    async with AsyncSessionLocal() as session:
        tenant = Tenant(id=DEMO_TENANT_ID, name="Escritório Demo", slug="demo", default_uf="PR")
        session.add(tenant)
        await session.flush()

        members: dict[str, TeamMember] = {}
        for email, name, role, team_role, manager_email in DEMO_USERS:
            user = User(
                tenant_id=tenant.id,
                email=email,
                name=name,
                role=role.value,
                hashed_password=hash_password("demo1234"),
                is_active=True,
            )
            session.add(user)
            await session.flush()

            manager = members.get(manager_email) if manager_email else None
            member = TeamMember(
                tenant_id=tenant.id,
                user_id=user.id,
                name=name,
                role=team_role.value,
                manager_member_id=manager.id if manager else None,
            )
            session.add(member)
            await session.flush()
            members[email] = member

        await session.execute(delete(Holiday))
        holidays = holiday_rows()
        session.add_all(holidays)

        await session.execute(delete(DeadlinePieceTrigger))
        await session.execute(delete(DeadlineTypeCatalog))
        session.add_all(
            DeadlineTypeCatalog(**entry.model_dump(mode="json"), sort_order=i)
            for i, entry in enumerate(DEFAULT_CATALOG)
        )
        await session.flush()
        triggers = trigger_rows()
        session.add_all(triggers)

        await session.commit()
        logger.info(
            "Seed data created: %d users, %d holidays, %d deadline types, %d piece triggers",
            len(DEMO_USERS), len(holidays), len(DEFAULT_CATALOG), len(triggers),
        )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
