from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from fastapi import HTTPException, Request, Response, status

from ..config import settings
from ..db.session import SessionFactory
from ..models import Tenant
from ..services.auth import AuthService


@dataclass
class AuthContext:
    email: str
    tenant: Tenant

    @property
    def tenant_id(self) -> int:
        return self.tenant.id


def require_auth(request: Request) -> AuthContext:
    raw_token = request.cookies.get(settings.cookie_name)
    with SessionFactory() as db:
        row = AuthService(db).session_tenant(raw_token or "")
        if not row:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

        claims, tenant = row
        request.state.user_email = claims.email
        request.state.tenant_id = str(tenant.id)
        # detach objects before session closes
        db.expunge_all()
        return AuthContext(email=claims.email, tenant=tenant)


def attach_session_cookie(response: Response, raw_token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=raw_token,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
        domain=settings.cookie_domain,
        path="/",
        max_age=int(timedelta(hours=settings.session_ttl_hours).total_seconds()),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.cookie_name,
        domain=settings.cookie_domain,
        path="/",
    )
