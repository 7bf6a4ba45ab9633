from __future__ import annotations

import logging
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from propdocs.db.session import SessionLocal
from propdocs.models import Building, Document, DocumentStatusEnum, Tenant

logger = logging.getLogger(__name__)

TENANT_PAYLOAD = {"id": 1, "name": "Stadsgården Fastigheter AB"}

BUILDINGS_PAYLOAD: list[dict[str, Any]] = [
    {"id": 1, "name": "Skola Björken", "address": "Björkgatan 12, Göteborg"},
    {"id": 2, "name": "Kontor Eken", "address": "Ekallén 4, Göteborg"},
    {"id": 3, "name": "Bostäder Lönnen", "address": "Lönnvägen 9, Göteborg"},
]

# (building_id, document_type, status, year, slug)
DOCUMENTS_PAYLOAD: list[tuple[int, str, str, int, str]] = [
    (1, "ritning", "ersatt", 2016, "skolan"),
    (1, "ritning", "ersatt", 2018, "skolan"),
    (1, "ritning", "gällande", 2021, "skolan"),
    (1, "OVK", "ersatt", 2014, "skolan"),
    (1, "OVK", "ersatt", 2017, "skolan"),
    (1, "OVK", "gällande", 2020, "skolan"),
    (1, "brandskydd", "osäker", 2019, "skolan"),
    (1, "brandskydd", "gällande", 2021, "skolan"),
    (1, "service", "ersatt", 2019, "skolan"),
    (1, "service", "gällande", 2022, "skolan"),
    (2, "ritning", "ersatt", 2012, "kontor"),
    (2, "ritning", "ersatt", 2016, "kontor"),
    (2, "ritning", "gällande", 2020, "kontor"),
    (2, "OVK", "gällande", 2015, "kontor"),
    (2, "OVK", "osäker", 2019, "kontor"),
    (2, "brandskydd", "gällande", 2018, "kontor"),
    (2, "brandskydd", "gällande", 2022, "kontor"),
    (2, "service", "ersatt", 2019, "kontor"),
    (2, "service", "osäker", 2021, "kontor"),
    (3, "ritning", "gällande", 2014, "bostad"),
    (3, "ritning", "osäker", 2019, "bostad"),
    (3, "brandskydd", "ersatt", 2016, "bostad"),
    (3, "brandskydd", "gällande", 2020, "bostad"),
    (3, "service", "ersatt", 2018, "bostad"),
    (3, "service", "gällande", 2023, "bostad"),
]


def seed_filename(document_type: str, slug: str, year: int) -> str:
    return f"{document_type.lower()}-{slug}-{year}.pdf"


def seed_tenant(session) -> Tenant:
    tenant = session.get(Tenant, TENANT_PAYLOAD["id"])
    if tenant is None:
        tenant = Tenant(id=TENANT_PAYLOAD["id"], name=TENANT_PAYLOAD["name"])
        session.add(tenant)
    tenant.name = TENANT_PAYLOAD["name"]
    session.flush()
    return tenant


def seed_buildings(session, tenant: Tenant) -> None:
    for payload in BUILDINGS_PAYLOAD:
        building = session.get(Building, payload["id"])
        if building is None:
            building = Building(id=payload["id"], tenant_id=tenant.id, name=payload["name"], address=payload["address"])
            session.add(building)
        building.name = payload["name"]
        building.address = payload["address"]
        building.tenant_id = tenant.id
    session.flush()


def seed_documents(session) -> int:
    created = 0
    for building_id, document_type, status, year, slug in DOCUMENTS_PAYLOAD:
        filename = seed_filename(document_type, slug, year)
        document = (
            session.query(Document)
            .filter(Document.building_id == building_id, Document.filename == filename)
            .one_or_none()
        )
        if document is None:
            document = Document(building_id=building_id, filename=filename)
            session.add(document)
            created += 1
        document.document_type = document_type
        document.status = DocumentStatusEnum(status)
        document.year = year
        document.file_url = f"/docs/{filename}"
    session.flush()
    return created


def run_seed() -> int:
    session = SessionLocal()
    try:
        tenant = seed_tenant(session)
        seed_buildings(session, tenant)
        created = seed_documents(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    logger.info("Seed applied for tenant %s (new documents=%s)", TENANT_PAYLOAD["id"], created)
    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_seed()
