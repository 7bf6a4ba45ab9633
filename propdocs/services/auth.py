from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Tenant

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


@dataclass
class SessionClaims:
    email: str
    tenant_id: int


class AuthService:
    def __init__(self, db: Session | None = None) -> None:
        self.db = db
        self.serializer = URLSafeTimedSerializer(settings.session_secret, salt="session")

    # --- Login -----------------------------------------------------------
    def authenticate(self, email: str, password: str) -> SessionClaims:
        normalized_email = email.strip().lower()
        email_ok = secrets.compare_digest(normalized_email, str(settings.demo_email).lower())
        password_ok = secrets.compare_digest(password.encode("utf-8"), settings.demo_password.encode("utf-8"))
        if not (email_ok and password_ok):
            logger.info("login_failed email=%s", normalized_email)
            raise AuthError("Fel email eller lösenord")

        logger.info("user_login email=%s tenant_id=%s", normalized_email, settings.demo_tenant_id)
        return SessionClaims(email=normalized_email, tenant_id=settings.demo_tenant_id)

    # --- Session tokens --------------------------------------------------
    def issue_session_token(self, claims: SessionClaims) -> str:
        return self.serializer.dumps({"email": claims.email, "tenant_id": claims.tenant_id})

    def claims_from_token(self, raw_token: str) -> Optional[SessionClaims]:
        if not raw_token:
            return None
        try:
            payload = self.serializer.loads(raw_token, max_age=settings.session_ttl_hours * 3600)
        except SignatureExpired:
            logger.info("session_expired")
            return None
        except BadSignature:
            return None

        try:
            return SessionClaims(email=str(payload["email"]), tenant_id=int(payload["tenant_id"]))
        except (KeyError, TypeError, ValueError):
            return None

    def session_tenant(self, raw_token: str) -> Optional[tuple[SessionClaims, Tenant]]:
        claims = self.claims_from_token(raw_token)
        if claims is None or self.db is None:
            return None
        tenant = self.db.get(Tenant, claims.tenant_id)
        if tenant is None:
            return None
        return claims, tenant
