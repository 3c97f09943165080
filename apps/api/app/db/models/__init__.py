from app.db.models.base import Base
from app.db.models.tenant import Tenant
from app.db.models.user import User
from app.db.models.team_member import TeamMember
from app.db.models.holiday import Holiday, HolidayKind
from app.db.models.deadline_catalog import DeadlinePieceTrigger, DeadlineTypeCatalog

__all__ = [
    "Base",
    "Tenant",
    "User",
    "TeamMember",
    "Holiday",
    "HolidayKind",
    "DeadlineTypeCatalog",
    "DeadlinePieceTrigger",
]
