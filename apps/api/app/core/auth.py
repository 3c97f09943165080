from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import ForbiddenError
from app.core.rbac import Permission, Role, has_all_permissions

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"

GUEST_USER = {
    "id": "guest",
    "tenant_id": "__public__",
    "role": Role.UNKNOWN,
    "email": "",
    "member_id": None,
}


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    role = to_encode.get("role")
    if isinstance(role, Role):
        to_encode["role"] = role.value
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.JWT_EXPIRES_HOURS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def _user_from_payload(payload: dict) -> Optional[dict]:
    user_id = payload.get("sub")
    tenant_id = payload.get("tenant_id")
    if not user_id or not tenant_id:
        return None
    return {
        "id": user_id,
        "tenant_id": tenant_id,
        # Missing or unrecognized roles carry no permissions.
        "role": Role.parse(payload.get("role")),
        "email": payload.get("email", ""),
        "member_id": payload.get("member_id"),
    }


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user = _user_from_payload(payload)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> dict:
    """Returns authenticated user if token present, otherwise guest user."""
    if credentials is None:
        return GUEST_USER
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return GUEST_USER
    return _user_from_payload(payload) or GUEST_USER


def get_tenant_id(user: dict = Depends(get_current_user)) -> str:
    return user["tenant_id"]


def require_permission(*permissions: Union[Permission, str]):
    """
    Dependency factory: the current user's role must hold every listed permission.

    Usage:
        @router.get("/holidays/{year}")
        async def list_holidays(user: dict = Depends(require_permission(Permission.CALENDAR_READ))):
            ...
    """
    required = [Permission(p) for p in permissions]

    async def _check(user: dict = Depends(get_current_user)) -> dict:
        role = Role.parse(user.get("role"))
        if not has_all_permissions(role, required):
            logger.info(
                "Permission denied: user=%s role=%s required=%s",
                user.get("id"), role.value, [p.value for p in required],
            )
            raise ForbiddenError(
                "Permissão insuficiente",
                details={"required": [p.value for p in required], "role": role.value},
            )
        return user

    return _check


def token_tenant_id(request: Request) -> Optional[str]:
    """tenant_id from a correctly signed bearer token, expired or not; None otherwise."""
    auth = request.headers.get("authorization", "")
    if not auth.startswith("Bearer "):
        return None
    try:
        payload = jwt.decode(
            auth[7:], settings.SECRET_KEY, algorithms=[ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError:
        return None
    return payload.get("tenant_id") or None
