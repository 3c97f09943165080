from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.rbac import Role, get_permissions, role_level
from app.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


class PermissionsResponse(BaseModel):
    role: Role
    level: int
    permissions: list[str]


@router.get("/me/permissions", response_model=PermissionsResponse)
async def my_permissions(user: dict = Depends(get_current_user)):
    role = Role.parse(user["role"])
    return PermissionsResponse(
        role=role,
        level=role_level(role),
        permissions=sorted(p.value for p in get_permissions(role)),
    )
