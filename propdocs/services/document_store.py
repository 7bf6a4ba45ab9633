from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..models.buildings import Building
from ..models.documents import Document, DocumentStatusEnum


@dataclass
class DocumentFilters:
    document_type: Optional[str] = None
    status: Optional[DocumentStatusEnum] = None
    year: Optional[int] = None

    def as_query(self) -> dict[str, str]:
        return {
            "type": self.document_type or "",
            "status": self.status.value if self.status else "",
            "year": str(self.year) if self.year is not None else "",
        }


class DocumentStore:
    """Tenant-scoped reads of buildings and their documents."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # --- Buildings -------------------------------------------------------
    def list_buildings(self, tenant_id: int, search: str | None = None) -> list[Building]:
        query = self.db.query(Building).filter(Building.tenant_id == tenant_id)
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.filter(or_(Building.name.ilike(pattern), Building.address.ilike(pattern)))
        return query.order_by(Building.name.asc(), Building.id.asc()).all()

    def get_building(self, tenant_id: int, building_id: int) -> Optional[Building]:
        return (
            self.db.query(Building)
            .filter(Building.id == building_id, Building.tenant_id == tenant_id)
            .one_or_none()
        )

    # --- Documents -------------------------------------------------------
    def fetch_documents_by_building_and_type(self, building_id: int, document_type: str) -> list[Document]:
        return (
            self.db.query(Document)
            .filter(Document.building_id == building_id, Document.document_type == document_type)
            .order_by(Document.year.desc(), Document.id.asc())
            .all()
        )

    def documents_by_type(self, building_id: int, document_types: Iterable[str]) -> dict[str, list[Document]]:
        return {
            document_type: self.fetch_documents_by_building_and_type(building_id, document_type)
            for document_type in document_types
        }

    def list_documents(self, building_id: int, filters: DocumentFilters | None = None) -> list[Document]:
        filters = filters or DocumentFilters()
        query = self.db.query(Document).filter(Document.building_id == building_id)
        if filters.document_type:
            query = query.filter(Document.document_type == filters.document_type)
        if filters.status:
            query = query.filter(Document.status == filters.status)
        if filters.year is not None:
            query = query.filter(Document.year == filters.year)
        return query.order_by(Document.document_type.asc(), Document.year.desc(), Document.id.asc()).all()

    def available_years(self, building_id: int) -> list[int]:
        rows = (
            self.db.query(Document.year)
            .filter(Document.building_id == building_id)
            .distinct()
            .order_by(Document.year.desc())
            .all()
        )
        return [row[0] for row in rows]

    def get_document(self, tenant_id: int, document_id: int) -> Optional[Document]:
        return (
            self.db.query(Document)
            .join(Building, Building.id == Document.building_id)
            .options(joinedload(Document.building))
            .filter(Document.id == document_id, Building.tenant_id == tenant_id)
            .one_or_none()
        )
