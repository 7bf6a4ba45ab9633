from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..dependencies.auth import AuthContext, require_auth
from ..dependencies.compliance import get_reference_year, get_required_document_types, get_stale_after_years
from ..dependencies.db import get_db
from ..models.buildings import Building
from ..services.building_report import build_gap_report
from ..services.document_store import DocumentFilters, DocumentStore
from ..services.gaps import RequiredDocumentType
from .documents import parse_status, serialize_document

router = APIRouter()


def serialize_building(building: Building) -> Dict[str, Any]:
    return {
        "id": building.id,
        "name": building.name,
        "address": building.address,
    }


def _parse_year(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid year") from exc


def _get_building_or_404(store: DocumentStore, *, tenant_id: int, building_id: int) -> Building:
    building = store.get_building(tenant_id, building_id)
    if building is None:
        raise HTTPException(status_code=404, detail="Byggnaden hittades inte")
    return building


@router.get("/buildings")
def list_buildings(
    search: str | None = Query(default=None),
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
):
    term = (search or "").strip()
    buildings = DocumentStore(db).list_buildings(context.tenant_id, term)
    return {
        "items": [serialize_building(building) for building in buildings],
        "search": term,
    }


@router.get("/buildings/{building_id}")
def get_building(
    building_id: int,
    document_type: str | None = Query(default=None, alias="type"),
    status: str | None = Query(default=None),
    year: str | None = Query(default=None),
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
    reference_year: int = Depends(get_reference_year),
    required_types: list[RequiredDocumentType] = Depends(get_required_document_types),
    stale_after_years: int = Depends(get_stale_after_years),
):
    store = DocumentStore(db)
    building = _get_building_or_404(store, tenant_id=context.tenant_id, building_id=building_id)

    filters = DocumentFilters(
        document_type=(document_type or "").strip() or None,
        status=parse_status(status),
        year=_parse_year(year),
    )
    documents = store.list_documents(building.id, filters)

    report = build_gap_report(
        store,
        building.id,
        required_types,
        reference_year,
        stale_after_years=stale_after_years,
    )

    return {
        "building": serialize_building(building),
        "filters": filters.as_query(),
        "documents": [serialize_document(document) for document in documents],
        "gaps": [finding.as_dict() for finding in report.findings],
        "compliant": report.is_compliant,
        "reference_year": report.reference_year,
        "required_types": [{"key": item.key, "label": item.display_label} for item in report.required_types],
        "available_years": store.available_years(building.id),
    }


@router.get("/buildings/{building_id}/gaps")
def get_building_gaps(
    building_id: int,
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
    reference_year: int = Depends(get_reference_year),
    required_types: list[RequiredDocumentType] = Depends(get_required_document_types),
    stale_after_years: int = Depends(get_stale_after_years),
):
    store = DocumentStore(db)
    building = _get_building_or_404(store, tenant_id=context.tenant_id, building_id=building_id)
    report = build_gap_report(
        store,
        building.id,
        required_types,
        reference_year,
        stale_after_years=stale_after_years,
    )
    return {"building": serialize_building(building), **report.as_dict()}
