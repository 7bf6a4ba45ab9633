from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, EmailStr

from ..dependencies.auth import AuthContext, attach_session_cookie, clear_session_cookie, require_auth
from ..models import Tenant
from ..services.auth import AuthError, AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SessionPayload(BaseModel):
    email: str
    tenant: dict


def _serialize_tenant(tenant: Tenant) -> dict:
    return {"id": tenant.id, "name": tenant.name}


@router.post("/login")
def login(payload: LoginRequest, response: Response) -> dict:
    service = AuthService()
    try:
        claims = service.authenticate(payload.email, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    attach_session_cookie(response, service.issue_session_token(claims))
    return {"status": "logged_in", "email": claims.email, "tenant_id": claims.tenant_id}


@router.get("/me")
def get_current_user(context: AuthContext = Depends(require_auth)) -> SessionPayload:
    return SessionPayload(email=context.email, tenant=_serialize_tenant(context.tenant))


@router.post("/logout")
def logout(response: Response) -> dict:
    clear_session_cookie(response)
    return {"status": "logged_out"}
