from __future__ import annotations

import os
import pathlib
import sys
import tempfile
from typing import Iterator

import pytest

ROOT_DIR = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

_DB_DIR = tempfile.mkdtemp(prefix="propdocs-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{pathlib.Path(_DB_DIR) / 'test.sqlite'}"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ.pop("REQUIRED_DOCUMENT_TYPES", None)
os.environ.pop("DOCUMENT_STALE_AFTER_YEARS", None)

from fastapi.testclient import TestClient

from propdocs.config import settings
from propdocs.db.session import SessionLocal, get_engine
from propdocs.dependencies.compliance import get_reference_year
from propdocs.main import app
from propdocs.models import Building, Tenant
from propdocs.models.base import Base
from propdocs.services.auth import AuthService, SessionClaims

REFERENCE_YEAR = 2024


@pytest.fixture(scope="session", autouse=True)
def database_schema() -> Iterator[None]:
    """Create the schema once for the whole run on a throwaway SQLite file."""
    engine = get_engine()
    Base.metadata.create_all(engine)
    yield
    SessionLocal.remove()
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def cleanup_database() -> Iterator[None]:
    """Delete every row after each test to keep isolation."""
    yield
    SessionLocal.remove()
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
    SessionLocal.remove()


@pytest.fixture(scope="session")
def client() -> Iterator[TestClient]:
    """Provide a FastAPI TestClient instance."""
    with TestClient(app) as _client:
        yield _client


@pytest.fixture(autouse=True)
def fixed_reference_year() -> Iterator[int]:
    """Pin the gap analysis to a known year so findings do not drift with the calendar."""
    app.dependency_overrides[get_reference_year] = lambda: REFERENCE_YEAR
    try:
        yield REFERENCE_YEAR
    finally:
        app.dependency_overrides.pop(get_reference_year, None)


@pytest.fixture()
def seeded() -> None:
    """Load the demo tenant with its three buildings and their documents."""
    from seed import run_seed

    run_seed()


@pytest.fixture()
def tenant() -> int:
    with SessionLocal() as session:
        existing = session.get(Tenant, settings.demo_tenant_id)
        if existing is None:
            session.add(Tenant(id=settings.demo_tenant_id, name="Stadsgården Fastigheter AB"))
            session.commit()
    return settings.demo_tenant_id


@pytest.fixture()
def other_tenant_building() -> int:
    """A building owned by a tenant the demo user does not belong to."""
    with SessionLocal() as session:
        other = Tenant(id=99, name="Annan Förvaltning AB")
        session.add(other)
        session.flush()
        building = Building(tenant_id=other.id, name="Lager Granen", address="Granvägen 1, Borås")
        session.add(building)
        session.commit()
        return building.id


@pytest.fixture()
def auth_context(client: TestClient, tenant: int) -> Iterator[dict[str, object]]:
    """Attach a signed session cookie for the demo tenant to the client."""
    token = AuthService().issue_session_token(
        SessionClaims(email=str(settings.demo_email), tenant_id=tenant)
    )
    client.cookies.set(settings.cookie_name, token)
    try:
        yield {"email": str(settings.demo_email), "tenant_id": tenant, "token": token}
    finally:
        client.cookies.clear()
