"""Tests for the team-management permission layer."""

import pytest

from app.core.rbac import Role
from app.core.team_permissions import (
    ADVOGADO_BASE_PERMISSIONS,
    FULL_PERMISSIONS,
    RESTRICTED_PERMISSIONS,
    SENIOR_EXTRA_PERMISSIONS,
    TeamPermission,
    TeamRole,
    can_view_member_data,
    get_team_permissions,
    has_team_permission,
    is_manager_of,
)

# Mirrors the team built by conftest.make_team()
MEMBER_SOCIO = "m-socio"
MEMBER_SENIOR = "m-senior"
MEMBER_PLENO = "m-pleno"
MEMBER_PARALEGAL = "m-paralegal"
MEMBER_ESTAGIARIO = "m-estagiario"


def test_permission_set_sizes():
    assert len(FULL_PERMISSIONS) == 18
    assert len(ADVOGADO_BASE_PERMISSIONS) == 6
    assert len(SENIOR_EXTRA_PERMISSIONS) == 8
    assert len(RESTRICTED_PERMISSIONS) == 5
    assert set(RESTRICTED_PERMISSIONS) < set(ADVOGADO_BASE_PERMISSIONS)


@pytest.mark.parametrize("role", [Role.ADMIN, Role.SOCIO, "ADMIN"])
@pytest.mark.parametrize("team_role", [None, TeamRole.ESTAGIARIO, "BOGUS"])
def test_admin_and_socio_get_everything(role, team_role):
    assert get_team_permissions(role, team_role) == list(FULL_PERMISSIONS)


def test_team_socio_gets_everything():
    assert get_team_permissions(Role.ADVOGADO, TeamRole.SOCIO) == list(FULL_PERMISSIONS)
    assert get_team_permissions(Role.ESTAGIARIO, "SOCIO") == list(FULL_PERMISSIONS)


def test_senior_advogado_gets_base_plus_extra():
    perms = get_team_permissions(Role.ADVOGADO, TeamRole.ADVOGADO_SENIOR)
    assert len(perms) == len(set(perms)) == 14
    assert set(perms) == set(ADVOGADO_BASE_PERMISSIONS) | set(SENIOR_EXTRA_PERMISSIONS)
    assert TeamPermission.VIEW_WELLBEING_DASHBOARD in perms
    assert TeamPermission.CREATE_SURVEY not in perms


@pytest.mark.parametrize("team_role", [None, TeamRole.ADVOGADO_PLENO, TeamRole.ADVOGADO_JUNIOR, "BOGUS"])
def test_advogado_defaults_to_base(team_role):
    assert get_team_permissions(Role.ADVOGADO, team_role) == list(ADVOGADO_BASE_PERMISSIONS)


@pytest.mark.parametrize("team_role", [TeamRole.PARALEGAL, TeamRole.ADMINISTRATIVO, TeamRole.ESTAGIARIO])
def test_advogado_in_support_role_is_demoted(team_role):
    perms = get_team_permissions(Role.ADVOGADO, team_role)
    assert perms == list(RESTRICTED_PERMISSIONS)
    assert TeamPermission.GIVE_FEEDBACK not in perms


@pytest.mark.parametrize("role", [Role.ESTAGIARIO, Role.UNKNOWN, "advogado", None])
def test_everyone_else_is_restricted(role):
    assert get_team_permissions(role, TeamRole.ADVOGADO_SENIOR) == list(RESTRICTED_PERMISSIONS)


def test_has_team_permission():
    assert has_team_permission(Role.ADVOGADO, TeamRole.ADVOGADO_SENIOR, TeamPermission.VIEW_TEAM_OKRS)
    assert not has_team_permission(Role.ADVOGADO, None, "VIEW_TEAM_OKRS")
    assert not has_team_permission(Role.ADMIN, None, "NOT_A_PERMISSION")


def test_team_role_parse():
    assert TeamRole.parse("PARALEGAL") is TeamRole.PARALEGAL
    assert TeamRole.parse("paralegal") is TeamRole.UNKNOWN
    assert TeamRole.parse("") is None
    assert TeamRole.parse(None) is None


# --------------- manager edges ---------------

@pytest.mark.asyncio
async def test_is_manager_of_direct_report(team_repository):
    assert await is_manager_of(MEMBER_SENIOR, MEMBER_PLENO, team_repository)
    assert await is_manager_of(MEMBER_SENIOR, MEMBER_PARALEGAL, team_repository)


@pytest.mark.asyncio
async def test_is_manager_of_is_single_hop(team_repository):
    # senior -> pleno -> estagiario
    assert not await is_manager_of(MEMBER_SENIOR, MEMBER_ESTAGIARIO, team_repository)


@pytest.mark.asyncio
async def test_is_manager_of_is_not_reflexive_or_reversed(team_repository):
    assert not await is_manager_of(MEMBER_SENIOR, MEMBER_SENIOR, team_repository)
    assert not await is_manager_of(MEMBER_PLENO, MEMBER_SENIOR, team_repository)


@pytest.mark.asyncio
async def test_is_manager_of_unknown_member(team_repository):
    assert not await is_manager_of(MEMBER_SENIOR, "m-ghost", team_repository)
    assert not await is_manager_of(None, MEMBER_PLENO, team_repository)


# --------------- can_view_member_data ---------------

@pytest.mark.asyncio
@pytest.mark.parametrize("role", [Role.ADMIN, Role.SOCIO])
async def test_full_access_roles_see_everyone(team_repository, role):
    assert await can_view_member_data(role, MEMBER_ESTAGIARIO, MEMBER_SOCIO, team_repository)
    assert team_repository.lookups == []


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [Role.ESTAGIARIO, Role.ADVOGADO, Role.UNKNOWN, "BOGUS"])
async def test_self_access_always_allowed(team_repository, role):
    assert await can_view_member_data(role, MEMBER_PARALEGAL, MEMBER_PARALEGAL, team_repository)


@pytest.mark.asyncio
async def test_senior_sees_direct_reports(team_repository):
    assert await can_view_member_data(Role.ADVOGADO, MEMBER_SENIOR, MEMBER_PLENO, team_repository)
    # one read for the viewer, one for the target's manager edge
    assert team_repository.lookups == [MEMBER_SENIOR, MEMBER_PLENO]


@pytest.mark.asyncio
async def test_senior_does_not_see_indirect_reports(team_repository):
    assert not await can_view_member_data(Role.ADVOGADO, MEMBER_SENIOR, MEMBER_ESTAGIARIO, team_repository)


@pytest.mark.asyncio
async def test_pleno_manager_without_senior_role_is_denied(team_repository):
    # pleno is the estagiario's manager but lacks a manager team role
    assert not await can_view_member_data(Role.ADVOGADO, MEMBER_PLENO, MEMBER_ESTAGIARIO, team_repository)


@pytest.mark.asyncio
async def test_estagiario_primary_role_cannot_use_team_role(team_repository):
    assert not await can_view_member_data(Role.ESTAGIARIO, MEMBER_SENIOR, MEMBER_PLENO, team_repository)


@pytest.mark.asyncio
async def test_unknown_viewer_is_denied(team_repository):
    assert not await can_view_member_data(Role.ADVOGADO, "m-ghost", MEMBER_PLENO, team_repository)
    assert not await can_view_member_data(Role.ADVOGADO, None, MEMBER_PLENO, team_repository)
