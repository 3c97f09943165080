"""
RBAC: Role-Based Access Control for the whole application.

Hierarchy: ADMIN > SOCIO > ADVOGADO > ESTAGIARIO
Each role inherits every permission of the roles below it. Unrecognized role
strings resolve to Role.UNKNOWN, which holds no permissions at all.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Union


class Role(str, Enum):
    ADMIN = "ADMIN"
    SOCIO = "SOCIO"
    ADVOGADO = "ADVOGADO"
    ESTAGIARIO = "ESTAGIARIO"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Union["Role", str, None]) -> "Role":
        if isinstance(value, cls):
            return value
        if not value:
            return cls.UNKNOWN
        try:
            return cls(str(value))
        except ValueError:
            return cls.UNKNOWN


class Permission(str, Enum):
    CASES_READ = "cases:read"
    CASES_CREATE = "cases:create"
    CASES_UPDATE = "cases:update"
    CASES_DELETE = "cases:delete"
    PROJECTS_READ = "projects:read"
    PROJECTS_CREATE = "projects:create"
    PROJECTS_UPDATE = "projects:update"
    PROJECTS_DELETE = "projects:delete"
    PERSONS_READ = "persons:read"
    PERSONS_CREATE = "persons:create"
    PERSONS_UPDATE = "persons:update"
    PERSONS_DELETE = "persons:delete"
    DOCUMENTS_READ = "documents:read"
    DOCUMENTS_CREATE = "documents:create"
    DOCUMENTS_UPDATE = "documents:update"
    DOCUMENTS_DELETE = "documents:delete"
    FINANCIAL_READ = "financial:read"
    FINANCIAL_CREATE = "financial:create"
    FINANCIAL_UPDATE = "financial:update"
    FINANCIAL_DELETE = "financial:delete"
    FINANCIAL_REPORTS = "financial:reports"
    DEADLINES_READ = "deadlines:read"
    DEADLINES_CREATE = "deadlines:create"
    DEADLINES_UPDATE = "deadlines:update"
    DEADLINES_DELETE = "deadlines:delete"
    CALENDAR_READ = "calendar:read"
    CALENDAR_CREATE = "calendar:create"
    CALENDAR_UPDATE = "calendar:update"
    CALENDAR_DELETE = "calendar:delete"
    USERS_READ = "users:read"
    USERS_CREATE = "users:create"
    USERS_UPDATE = "users:update"
    USERS_DELETE = "users:delete"
    SETTINGS_READ = "settings:read"
    SETTINGS_UPDATE = "settings:update"
    AUDIT_READ = "audit:read"
    LGPD_EXPORT = "lgpd:export"
    LGPD_DELETE = "lgpd:delete"
    PORTAL_MANAGE = "portal:manage"
    REPORTS_READ = "reports:read"
    REPORTS_CREATE = "reports:create"
    WHATSAPP_READ = "whatsapp:read"
    WHATSAPP_SEND = "whatsapp:send"
    MONITORING_READ = "monitoring:read"
    MONITORING_MANAGE = "monitoring:manage"
    RECOVERY_READ = "recovery:read"
    RECOVERY_MANAGE = "recovery:manage"

    @property
    def resource(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def action(self) -> str:
        return self.value.split(":", 1)[1]


P = Permission

ROLE_LEVEL: Mapping[Role, int] = MappingProxyType({
    Role.ADMIN: 100,
    Role.SOCIO: 75,
    Role.ADVOGADO: 50,
    Role.ESTAGIARIO: 25,
})

# Direct grants only; inheritance is resolved below.
ROLE_PERMISSIONS: Mapping[Role, tuple[Permission, ...]] = MappingProxyType({
    Role.ESTAGIARIO: (
        P.CASES_READ,
        P.PROJECTS_READ,
        P.PERSONS_READ,
        P.DOCUMENTS_READ, P.DOCUMENTS_CREATE,
        P.DEADLINES_READ,
        P.CALENDAR_READ, P.CALENDAR_CREATE,
        P.REPORTS_READ,
        P.WHATSAPP_READ,
        P.MONITORING_READ,
        P.RECOVERY_READ,
    ),
    Role.ADVOGADO: (
        P.CASES_CREATE, P.CASES_UPDATE,
        P.PROJECTS_CREATE, P.PROJECTS_UPDATE,
        P.PERSONS_CREATE, P.PERSONS_UPDATE,
        P.DOCUMENTS_UPDATE,
        P.FINANCIAL_READ,
        P.DEADLINES_CREATE, P.DEADLINES_UPDATE,
        P.CALENDAR_UPDATE,
        P.REPORTS_CREATE,
        P.WHATSAPP_SEND,
        P.MONITORING_MANAGE,
        P.RECOVERY_MANAGE,
    ),
    Role.SOCIO: (
        P.CASES_DELETE,
        P.PROJECTS_DELETE,
        P.PERSONS_DELETE,
        P.DOCUMENTS_DELETE,
        P.FINANCIAL_CREATE, P.FINANCIAL_UPDATE, P.FINANCIAL_REPORTS,
        P.DEADLINES_DELETE,
        P.CALENDAR_DELETE,
        P.USERS_READ,
        P.SETTINGS_READ,
        P.AUDIT_READ,
        P.PORTAL_MANAGE,
        P.LGPD_EXPORT,
    ),
    Role.ADMIN: (
        P.FINANCIAL_DELETE,
        P.USERS_CREATE, P.USERS_UPDATE, P.USERS_DELETE,
        P.SETTINGS_UPDATE,
        P.LGPD_DELETE,
    ),
})


def _effective(role: Role) -> frozenset[Permission]:
    level = ROLE_LEVEL[role]
    perms: set[Permission] = set()
    for other, other_level in ROLE_LEVEL.items():
        if other_level <= level:
            perms.update(ROLE_PERMISSIONS[other])
    return frozenset(perms)


_EFFECTIVE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = MappingProxyType(
    {role: _effective(role) for role in ROLE_LEVEL}
)


def _parse_permission(permission: Union[Permission, str]) -> Permission | None:
    if isinstance(permission, Permission):
        return permission
    try:
        return Permission(permission)
    except ValueError:
        return None


def role_level(role: Union[Role, str, None]) -> int:
    """Numeric level of a role; 0 for anything unrecognized."""
    return ROLE_LEVEL.get(Role.parse(role), 0)


def get_permissions(role: Union[Role, str, None]) -> frozenset[Permission]:
    """All permissions of a role, inherited ones included."""
    return _EFFECTIVE_PERMISSIONS.get(Role.parse(role), frozenset())


def has_permission(role: Union[Role, str, None], permission: Union[Permission, str]) -> bool:
    perm = _parse_permission(permission)
    if perm is None:
        return False
    return perm in get_permissions(role)


def has_all_permissions(
    role: Union[Role, str, None], permissions: Iterable[Union[Permission, str]]
) -> bool:
    return all(has_permission(role, p) for p in permissions)


def has_any_permission(
    role: Union[Role, str, None], permissions: Iterable[Union[Permission, str]]
) -> bool:
    return any(has_permission(role, p) for p in permissions)


def is_role_at_least(role: Union[Role, str, None], minimum_role: Union[Role, str]) -> bool:
    minimum = ROLE_LEVEL.get(Role.parse(minimum_role))
    if minimum is None:
        return False
    return role_level(role) >= minimum
