"""
Team Management permissions: a dual-role model layered on top of RBAC.

A user has one primary Role (ADMIN | SOCIO | ADVOGADO | ESTAGIARIO) and at most
one TeamRole inside the team-management module. Access rules:

  - ADMIN / SOCIO primary role: full access.
  - TeamRole SOCIO: full access, whatever the primary role.
  - ADVOGADO + ADVOGADO_SENIOR: standard lawyer set plus manager visibility.
  - ADVOGADO + PARALEGAL / ADMINISTRATIVO / ESTAGIARIO: restricted set.
  - ADVOGADO with any other team role (or none): standard lawyer set.
  - Everyone else, unknown roles included: restricted set.

Manager checks read the single-hop TeamMember.manager_member_id edge through
an injected TeamMemberRepository.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union

from app.core.rbac import Role

logger = logging.getLogger(__name__)


class TeamRole(str, Enum):
    SOCIO = "SOCIO"
    ADVOGADO_SENIOR = "ADVOGADO_SENIOR"
    ADVOGADO_PLENO = "ADVOGADO_PLENO"
    ADVOGADO_JUNIOR = "ADVOGADO_JUNIOR"
    ESTAGIARIO = "ESTAGIARIO"
    PARALEGAL = "PARALEGAL"
    ADMINISTRATIVO = "ADMINISTRATIVO"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Union["TeamRole", str, None]) -> Optional["TeamRole"]:
        """None stays None (no team role); unrecognized strings become UNKNOWN."""
        if value is None or isinstance(value, cls):
            return value
        if not str(value).strip():
            return None
        try:
            return cls(str(value))
        except ValueError:
            return cls.UNKNOWN


class TeamPermission(str, Enum):
    VIEW_FULL_PANEL = "VIEW_FULL_PANEL"
    VIEW_TEAM_OKRS = "VIEW_TEAM_OKRS"
    VIEW_TEAM_KPIS = "VIEW_TEAM_KPIS"
    CREATE_360_CYCLE = "CREATE_360_CYCLE"
    VIEW_360_RESULTS_TEAM = "VIEW_360_RESULTS_TEAM"
    SCHEDULE_1ON1_AS_MANAGER = "SCHEDULE_1ON1_AS_MANAGER"
    CREATE_SURVEY = "CREATE_SURVEY"
    VIEW_SURVEY_RESULTS = "VIEW_SURVEY_RESULTS"
    SEND_CLIENT_NPS = "SEND_CLIENT_NPS"
    VIEW_CLIENT_NPS = "VIEW_CLIENT_NPS"
    MANAGE_COMPLAINTS = "MANAGE_COMPLAINTS"
    VIEW_WELLBEING_DASHBOARD = "VIEW_WELLBEING_DASHBOARD"
    VIEW_OWN_DATA = "VIEW_OWN_DATA"
    GIVE_FEEDBACK = "GIVE_FEEDBACK"
    RESPOND_SURVEY = "RESPOND_SURVEY"
    SUBMIT_COMPLAINT = "SUBMIT_COMPLAINT"
    GIVE_RECOGNITION = "GIVE_RECOGNITION"
    WELLBEING_CHECKIN = "WELLBEING_CHECKIN"


TP = TeamPermission

FULL_PERMISSIONS: tuple[TeamPermission, ...] = tuple(TeamPermission)

# Stacked on top of ADVOGADO_BASE_PERMISSIONS for ADVOGADO_SENIOR.
SENIOR_EXTRA_PERMISSIONS: tuple[TeamPermission, ...] = (
    TP.VIEW_FULL_PANEL,
    TP.VIEW_TEAM_OKRS,
    TP.VIEW_TEAM_KPIS,
    TP.VIEW_360_RESULTS_TEAM,
    TP.SCHEDULE_1ON1_AS_MANAGER,
    TP.VIEW_SURVEY_RESULTS,
    TP.VIEW_CLIENT_NPS,
    TP.VIEW_WELLBEING_DASHBOARD,
)

ADVOGADO_BASE_PERMISSIONS: tuple[TeamPermission, ...] = (
    TP.VIEW_OWN_DATA,
    TP.GIVE_FEEDBACK,
    TP.RESPOND_SURVEY,
    TP.SUBMIT_COMPLAINT,
    TP.GIVE_RECOGNITION,
    TP.WELLBEING_CHECKIN,
)

RESTRICTED_PERMISSIONS: tuple[TeamPermission, ...] = (
    TP.VIEW_OWN_DATA,
    TP.RESPOND_SURVEY,
    TP.SUBMIT_COMPLAINT,
    TP.GIVE_RECOGNITION,
    TP.WELLBEING_CHECKIN,
)

SENIOR_PERMISSIONS: tuple[TeamPermission, ...] = tuple(
    dict.fromkeys(ADVOGADO_BASE_PERMISSIONS + SENIOR_EXTRA_PERMISSIONS)
)

_FULL_ACCESS_ROLES = frozenset({Role.ADMIN, Role.SOCIO})
_SUPPORT_TEAM_ROLES = frozenset({TeamRole.ESTAGIARIO, TeamRole.PARALEGAL, TeamRole.ADMINISTRATIVO})
_MANAGER_TEAM_ROLES = frozenset({TeamRole.ADVOGADO_SENIOR, TeamRole.SOCIO})


@dataclass(frozen=True)
class TeamMemberRecord:
    id: str
    role: Optional[TeamRole]
    manager_id: Optional[str] = None


class TeamMemberRepository(Protocol):
    async def find_member_by_id(self, member_id: str) -> Optional[TeamMemberRecord]: ...


def get_team_permissions(
    primary_role: Union[Role, str, None],
    team_role: Union[TeamRole, str, None] = None,
) -> list[TeamPermission]:
    role = Role.parse(primary_role)
    team = TeamRole.parse(team_role)

    if role in _FULL_ACCESS_ROLES:
        return list(FULL_PERMISSIONS)

    if team is TeamRole.SOCIO:
        return list(FULL_PERMISSIONS)

    if role is Role.ADVOGADO:
        if team is TeamRole.ADVOGADO_SENIOR:
            return list(SENIOR_PERMISSIONS)
        # Support roles under an ADVOGADO account are demoted, not given the lawyer set.
        if team in _SUPPORT_TEAM_ROLES:
            return list(RESTRICTED_PERMISSIONS)
        return list(ADVOGADO_BASE_PERMISSIONS)

    return list(RESTRICTED_PERMISSIONS)


def has_team_permission(
    primary_role: Union[Role, str, None],
    team_role: Union[TeamRole, str, None],
    permission: Union[TeamPermission, str],
) -> bool:
    try:
        perm = TeamPermission(permission)
    except ValueError:
        return False
    return perm in get_team_permissions(primary_role, team_role)


async def is_manager_of(
    manager_id: Optional[str],
    subordinate_id: Optional[str],
    repository: TeamMemberRepository,
) -> bool:
    """True when manager_id is the direct manager of subordinate_id. Single hop only."""
    if not manager_id or not subordinate_id or manager_id == subordinate_id:
        return False

    subordinate = await repository.find_member_by_id(subordinate_id)
    if subordinate is None:
        return False
    return subordinate.manager_id == manager_id


async def can_view_member_data(
    viewer_role: Union[Role, str, None],
    viewer_member_id: Optional[str],
    target_member_id: Optional[str],
    repository: TeamMemberRepository,
) -> bool:
    """Whether a viewer may see another member's OKRs, KPIs, feedbacks and wellbeing data."""
    role = Role.parse(viewer_role)
    if role in _FULL_ACCESS_ROLES:
        return True

    if viewer_member_id == target_member_id:
        return True

    if not viewer_member_id:
        return False

    viewer = await repository.find_member_by_id(viewer_member_id)
    if viewer is None:
        return False

    if role is Role.ADVOGADO and viewer.role in _MANAGER_TEAM_ROLES:
        return await is_manager_of(viewer_member_id, target_member_id, repository)

    logger.debug(
        "Member data access denied: viewer=%s role=%s team_role=%s target=%s",
        viewer_member_id, role.value, viewer.role, target_member_id,
    )
    return False
