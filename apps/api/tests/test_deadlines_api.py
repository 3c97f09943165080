"""Tests for the deadline and holiday endpoints."""

from datetime import date

import pytest

from app.core.rbac import Role


@pytest.mark.asyncio
async def test_calculate_requires_auth(client):
    resp = await client.post("/api/v1/deadlines/calculate", json={})
    assert resp.status_code in (401, 403)


@pytest.mark.asyncio
async def test_calculate_contestacao(client, headers_for):
    resp = await client.post(
        "/api/v1/deadlines/calculate",
        headers=headers_for(Role.ESTAGIARIO),
        json={"deadline_type": "CPC-001", "start_method": "DATA_FIXA", "start_date": "2026-03-02"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["due_date"] == "2026-03-23"
    assert data["effective_days"] == 15
    assert data["calculation_log"][0]["step"] == 1


@pytest.mark.asyncio
async def test_simulate_uses_state_holidays(client, headers_for):
    body = {"deadline_type": "CPC-015", "start_method": "DATA_FIXA", "start_date": "2026-07-08"}
    national = await client.post("/api/v1/deadlines/simulate", headers=headers_for(Role.ADVOGADO), json=body)
    sp = await client.post(
        "/api/v1/deadlines/simulate", headers=headers_for(Role.ADVOGADO), json={**body, "uf": "sp"}
    )
    assert national.json()["due_date"] == "2026-07-15"
    assert sp.json()["due_date"] == "2026-07-16"


@pytest.mark.asyncio
async def test_calculate_unknown_type_is_404(client, headers_for):
    resp = await client.post(
        "/api/v1/deadlines/calculate",
        headers=headers_for(Role.ADMIN),
        json={"deadline_type": "XYZ", "start_method": "DATA_FIXA", "start_date": "2026-03-02"},
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_calculate_missing_start_date_is_invalid_argument(client, headers_for):
    resp = await client.post(
        "/api/v1/deadlines/calculate",
        headers=headers_for(Role.ADMIN),
        json={"deadline_type": "CPC-001", "start_method": "INTIMACAO_PESSOAL"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_ARGUMENT"


@pytest.mark.asyncio
async def test_calculate_rejects_bad_uf(client, headers_for):
    resp = await client.post(
        "/api/v1/deadlines/calculate",
        headers=headers_for(Role.ADMIN),
        json={"deadline_type": "CPC-001", "start_method": "DATA_FIXA", "start_date": "2026-03-02", "uf": "ZZ"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [None, "UNKNOWN", "admin"])
async def test_roles_without_permissions_are_forbidden(client, headers_for, role):
    resp = await client.get("/api/v1/deadlines/catalog", headers=headers_for(role))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_catalog_by_category(client, headers_for):
    resp = await client.get(
        "/api/v1/deadlines/catalog", params={"category": "JUIZ"}, headers=headers_for(Role.ESTAGIARIO)
    )
    assert resp.status_code == 200
    types = {e["type"] for e in resp.json()}
    assert types == {"CPC-026", "CPC-027"}


@pytest.mark.asyncio
async def test_business_day_endpoint(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/business-day", params={"date": "2026-04-21"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"day": "2026-04-21", "uf": None, "is_business_day": False}


@pytest.mark.asyncio
async def test_next_business_day_endpoint(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/next-business-day", params={"date": "2026-02-14"}, headers=auth_headers
    )
    assert resp.json()["next_business_day"] == "2026-02-18"


@pytest.mark.asyncio
async def test_add_business_days_endpoint(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/add-business-days",
        params={"start": "2026-07-08", "days": 1, "uf": "SP"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["due_date"] == "2026-07-10"
    assert resp.json()["uf"] == "SP"


@pytest.mark.asyncio
async def test_add_negative_business_days_is_invalid_argument(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/add-business-days",
        params={"start": "2026-03-02", "days": -3},
        headers=auth_headers,
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_ARGUMENT"


@pytest.mark.asyncio
async def test_unknown_uf_query_is_rejected(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/business-day", params={"date": "2026-03-02", "uf": "XX"}, headers=auth_headers
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_business_days_until_today_is_zero(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/business-days-until",
        params={"date": date.today().isoformat()},
        headers=auth_headers,
    )
    assert resp.json()["business_days"] == 0


@pytest.mark.asyncio
async def test_add_business_days_rejects_huge_counts(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/add-business-days",
        params={"start": "2026-03-02", "days": 10_000_000},
        headers=auth_headers,
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_add_business_days_accepts_upper_bound(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/add-business-days",
        params={"start": "2026-03-02", "days": 3650},
        headers=auth_headers,
    )
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_add_business_days_rejects_start_near_date_max(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/add-business-days",
        params={"start": "9999-12-30", "days": 5},
        headers=auth_headers,
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["details"] == {"start": "9999-12-30"}


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["business-day", "next-business-day", "business-days-until"])
async def test_far_dates_are_rejected(client, auth_headers, path):
    resp = await client.get(f"/api/v1/deadlines/{path}", params={"date": "5000-01-01"}, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_calculate_rejects_out_of_range_input(client, auth_headers):
    far_start = {"deadline_type": "CPC-001", "start_method": "DATA_FIXA", "start_date": "9999-12-30"}
    resp = await client.post("/api/v1/deadlines/calculate", headers=auth_headers, json=far_start)
    assert resp.status_code == 422

    huge_days = {**far_start, "start_date": "2026-03-02", "custom_days": 10_000_000}
    resp = await client.post("/api/v1/deadlines/calculate", headers=auth_headers, json=huge_days)
    assert resp.status_code == 422


# --------------- suggestions ---------------

@pytest.mark.asyncio
async def test_suggestions_for_citacao(client, headers_for):
    resp = await client.get(
        "/api/v1/deadlines/suggestions",
        params={"piece_type": "CITACAO"},
        headers=headers_for(Role.ESTAGIARIO),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [s["deadline_type"] for s in data] == ["CPC-001", "CPC-003"]
    first = data[0]
    assert first["is_default"] is True
    assert first["target_role"] == "REU"
    assert first["display_name"] == "Contestação"
    assert first["default_days"] == 15
    assert first["legal_basis"] == "Art. 335 CPC"
    assert first["color"].startswith("#")
    assert first["icon"] == "file-text"


@pytest.mark.asyncio
async def test_suggestions_filtered_by_party(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/suggestions",
        params={"piece_type": "CITACAO", "party_role": "AUTOR"},
        headers=auth_headers,
    )
    assert resp.json() == []


@pytest.mark.asyncio
async def test_suggestions_reject_unknown_piece(client, auth_headers):
    resp = await client.get(
        "/api/v1/deadlines/suggestions", params={"piece_type": "BILHETE"}, headers=auth_headers
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_suggestions_require_deadlines_read(client, headers_for):
    resp = await client.get(
        "/api/v1/deadlines/suggestions", params={"piece_type": "SENTENCA"}, headers=headers_for(None)
    )
    assert resp.status_code == 403


# --------------- holidays ---------------

@pytest.mark.asyncio
async def test_list_holidays_for_state(client, headers_for, holiday_repository):
    resp = await client.get("/api/v1/holidays/2026", params={"uf": "sp"}, headers=headers_for(Role.ESTAGIARIO))
    assert resp.status_code == 200
    data = resp.json()
    assert data["uf"] == "SP"
    assert data["total"] == 14
    assert "2026-07-09" in data["dates"]
    assert data["dates"] == sorted(data["dates"])


@pytest.mark.asyncio
async def test_list_holidays_requires_calendar_read(client, headers_for):
    resp = await client.get("/api/v1/holidays/2026", headers=headers_for("GUEST"))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_clear_holiday_cache_admin_only(client, headers_for, fake_cache):
    await client.get("/api/v1/holidays/2026", headers=headers_for(Role.ADMIN))

    denied = await client.delete("/api/v1/holidays/cache", headers=headers_for(Role.SOCIO))
    assert denied.status_code == 403

    resp = await client.delete("/api/v1/holidays/cache", headers=headers_for(Role.ADMIN))
    assert resp.status_code == 200
    assert resp.json() == {"invalidated": 1}
    assert fake_cache.store == {}
