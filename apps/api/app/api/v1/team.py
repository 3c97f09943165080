import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.exceptions import ForbiddenError
from app.core.rbac import Permission, Role, has_permission
from app.core.team_permissions import (
    TeamMemberRepository,
    TeamPermission,
    TeamRole,
    can_view_member_data,
    get_team_permissions,
)
from app.dependencies import get_current_user, get_team_member_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team", tags=["team"])


class TeamPermissionsResponse(BaseModel):
    role: Role
    team_role: Optional[TeamRole] = None
    permissions: list[TeamPermission]


class CanViewResponse(BaseModel):
    viewer_id: str
    target_id: str
    allowed: bool


@router.get("/permissions", response_model=TeamPermissionsResponse)
async def team_permissions(
    user: dict = Depends(get_current_user),
    repository: TeamMemberRepository = Depends(get_team_member_repository),
):
    """The caller's team role is read from their TeamMember record, never from the request."""
    role = Role.parse(user["role"])
    member_id = user.get("member_id")
    member = await repository.find_member_by_id(member_id) if member_id else None
    team_role = member.role if member else None
    return TeamPermissionsResponse(
        role=role,
        team_role=team_role,
        permissions=get_team_permissions(role, team_role),
    )


@router.get("/members/{viewer_id}/can-view/{target_id}", response_model=CanViewResponse)
async def can_view(
    viewer_id: str,
    target_id: str,
    user: dict = Depends(get_current_user),
    repository: TeamMemberRepository = Depends(get_team_member_repository),
):
    """Evaluated with the caller's primary role; other viewers need users:read."""
    role = Role.parse(user["role"])
    if viewer_id != user.get("member_id") and not has_permission(role, Permission.USERS_READ):
        raise ForbiddenError(
            "Só é possível consultar o próprio acesso",
            details={"viewer_id": viewer_id},
        )

    allowed = await can_view_member_data(role, viewer_id, target_id, repository)
    return CanViewResponse(viewer_id=viewer_id, target_id=target_id, allowed=allowed)
