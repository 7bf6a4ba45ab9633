#!/usr/bin/env python
"""Mint a signed session cookie for manual testing against a running API."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))

from propdocs.config import settings
from propdocs.services.auth import AuthService, SessionClaims


def create_session(email: str, tenant_id: int) -> str:
    raw_token = AuthService().issue_session_token(SessionClaims(email=email.strip().lower(), tenant_id=tenant_id))

    print("User:", email)
    print("Tenant:", tenant_id)
    print("Session valid for (hours):", settings.session_ttl_hours)
    print("\nPaste this cookie into your browser's dev tools:")
    print(f"{settings.cookie_name}={raw_token}")
    return raw_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a session cookie for local testing")
    parser.add_argument("--email", default=str(settings.demo_email), help="Email recorded in the session")
    parser.add_argument("--tenant-id", type=int, default=settings.demo_tenant_id, help="Tenant to act as")
    args = parser.parse_args()

    create_session(args.email, args.tenant_id)


if __name__ == "__main__":
    main()
