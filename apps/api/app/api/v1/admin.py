import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import create_access_token, get_current_user_optional
from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.rbac import Permission, Role, has_permission
from app.core.security import hash_password, verify_password
from app.core.validators import validate_uf
from app.db.models import TeamMember, Tenant, User
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

SELF_SERVICE_ROLE = Role.ESTAGIARIO


class TenantCreate(BaseModel):
    name: str
    slug: str
    default_uf: Optional[str] = None

    _validate_uf = field_validator("default_uf", mode="before")(validate_uf)


class UserRegister(BaseModel):
    email: str
    name: str
    password: str
    tenant_slug: str
    role: Role = Role.ESTAGIARIO
    oab_number: Optional[str] = None

    @field_validator("role")
    @classmethod
    def _known_role(cls, value: Role) -> Role:
        if value is Role.UNKNOWN:
            raise ValueError("Papel inválido")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str
    tenant_slug: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    tenant_id: str
    user_id: str
    role: Role


async def _issue_token(db: AsyncSession, user: User) -> TokenResponse:
    member_id = await db.scalar(select(TeamMember.id).where(TeamMember.user_id == user.id))
    role = Role.parse(user.role)
    token = create_access_token(
        data={
            "sub": str(user.id),
            "tenant_id": str(user.tenant_id),
            "role": role,
            "email": user.email,
            "member_id": str(member_id) if member_id else None,
        }
    )
    return TokenResponse(
        access_token=token, tenant_id=str(user.tenant_id), user_id=str(user.id), role=role
    )


@router.post("/tenants", status_code=201)
async def create_tenant(
    data: TenantCreate,
    db: AsyncSession = Depends(get_db),
):
    existing = await db.execute(select(Tenant).where(Tenant.slug == data.slug))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Tenant slug already exists")

    tenant = Tenant(name=data.name, slug=data.slug, default_uf=data.default_uf)
    db.add(tenant)
    await db.flush()

    return {"id": str(tenant.id), "name": tenant.name, "slug": tenant.slug}


@router.post("/register", response_model=TokenResponse)
async def register_user(
    data: UserRegister,
    db: AsyncSession = Depends(get_db),
    caller: dict = Depends(get_current_user_optional),
):
    """
    Self-service sign-up always yields an ESTAGIARIO account. Any other role
    must be granted by a caller holding users:create in the same tenant.
    """
    granting = data.role is not SELF_SERVICE_ROLE
    if granting and not has_permission(caller["role"], Permission.USERS_CREATE):
        logger.info(
            "Role grant refused: caller=%s role=%s requested=%s",
            caller["id"], Role.parse(caller["role"]).value, data.role.value,
        )
        raise ForbiddenError(
            "Permissão insuficiente para atribuir papel",
            details={"required": [Permission.USERS_CREATE.value], "requested_role": data.role.value},
        )

    result = await db.execute(select(Tenant).where(Tenant.slug == data.tenant_slug))
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise NotFoundError("Escritório", data.tenant_slug)

    if granting and caller["tenant_id"] != str(tenant.id):
        raise ForbiddenError("Papel só pode ser atribuído no próprio escritório")

    existing = await db.execute(
        select(User).where(User.tenant_id == tenant.id, User.email == data.email)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(
        tenant_id=tenant.id,
        email=data.email,
        name=data.name,
        hashed_password=hash_password(data.password),
        role=data.role.value,
        oab_number=data.oab_number,
    )
    db.add(user)
    await db.flush()

    return await _issue_token(db, user)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Tenant).where(Tenant.slug == data.tenant_slug))
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    result = await db.execute(
        select(User).where(User.tenant_id == tenant.id, User.email == data.email)
    )
    user = result.scalar_one_or_none()
    if not user or not user.hashed_password or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return await _issue_token(db, user)
