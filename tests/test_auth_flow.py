from __future__ import annotations

import pytest

from propdocs.config import settings
from propdocs.services.auth import AuthService, SessionClaims


@pytest.mark.integration
def test_login_sets_cookie_and_me_returns_tenant(client, tenant):
    try:
        response = client.post(
            "/auth/login",
            json={"email": str(settings.demo_email), "password": settings.demo_password},
        )
        assert response.status_code == 200
        assert response.json()["tenant_id"] == tenant
        assert settings.cookie_name in response.cookies

        me = client.get("/auth/me")
        assert me.status_code == 200
        assert me.json() == {
            "email": str(settings.demo_email),
            "tenant": {"id": tenant, "name": "Stadsgården Fastigheter AB"},
        }
    finally:
        client.cookies.clear()


@pytest.mark.integration
def test_login_is_case_insensitive_on_email(client, tenant):
    try:
        response = client.post(
            "/auth/login",
            json={"email": str(settings.demo_email).upper(), "password": settings.demo_password},
        )
        assert response.status_code == 200
    finally:
        client.cookies.clear()


@pytest.mark.integration
def test_login_rejects_wrong_password(client, tenant):
    response = client.post(
        "/auth/login",
        json={"email": str(settings.demo_email), "password": "fel"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Fel email eller lösenord"
    assert settings.cookie_name not in response.cookies


@pytest.mark.integration
def test_logout_clears_cookie(client, auth_context):
    response = client.post("/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"status": "logged_out"}
    assert "Max-Age=0" in response.headers["set-cookie"]


@pytest.mark.integration
def test_session_for_unknown_tenant_is_rejected(client, tenant):
    token = AuthService().issue_session_token(SessionClaims(email="someone@example.com", tenant_id=4242))
    client.cookies.set(settings.cookie_name, token)
    try:
        response = client.get("/auth/me")
    finally:
        client.cookies.clear()
    assert response.status_code == 401


def test_session_token_round_trip_and_tampering():
    service = AuthService()
    token = service.issue_session_token(SessionClaims(email="demo@fastighet.se", tenant_id=1))

    assert service.claims_from_token(token) == SessionClaims(email="demo@fastighet.se", tenant_id=1)
    assert service.claims_from_token(token + "x") is None
    assert service.claims_from_token("") is None
