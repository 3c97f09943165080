"""
Per-tenant rate limiter using SlowAPI.

Requests carrying a readable bearer token are bucketed by tenant_id; everything
else falls back to the remote address.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings
from app.core.auth import token_tenant_id


def _tenant_key_func(request: Request) -> str:
    tid = token_tenant_id(request)
    if tid:
        return f"tenant:{tid}"
    return get_remote_address(request)


limiter = Limiter(key_func=_tenant_key_func, default_limits=[settings.RATE_LIMIT_DEFAULT])
