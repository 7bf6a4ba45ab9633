from __future__ import annotations

import io
import logging
import os
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..config import settings
from ..dependencies.auth import AuthContext, require_auth
from ..dependencies.db import get_db
from ..models.documents import Document, DocumentStatusEnum
from ..models.events import Event
from ..services.document_store import DocumentStore
from ..services.labels import status_label
from ..services.metrics import record_document_uploaded
from ..services.storage import get_storage_service, storage_key_from_url

logger = logging.getLogger(__name__)

router = APIRouter()


def sanitize_filename(filename: str) -> str:
    name = os.path.basename(filename or "document")
    name = re.sub(r"[^A-Za-z0-9._-]", "_", name)
    return name[:100] or "document"


def parse_status(value: str | None) -> Optional[DocumentStatusEnum]:
    if value is None or not value.strip():
        return None
    try:
        return DocumentStatusEnum.parse(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid status") from exc


def serialize_document(document: Document, *, include_building: bool = False) -> Dict[str, Any]:
    status = document.status.value if isinstance(document.status, DocumentStatusEnum) else document.status
    payload: Dict[str, Any] = {
        "id": document.id,
        "filename": document.filename,
        "document_type": document.document_type,
        "building_id": document.building_id,
        "status": status,
        "status_label": status_label(document.status),
        "year": document.year,
        "uploaded_at": document.uploaded_at.isoformat() if document.uploaded_at else None,
        "file_url": document.file_url,
        "download_path": f"/documents/{document.id}/download",
    }
    if include_building and document.building is not None:
        payload["building_name"] = document.building.name
    return payload


def _get_document_or_404(db: Session, *, tenant_id: int, document_id: int) -> Document:
    document = DocumentStore(db).get_document(tenant_id, document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Dokumentet hittades inte")
    return document


@router.get("/documents/{document_id}")
def get_document(
    document_id: int,
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
):
    document = _get_document_or_404(db, tenant_id=context.tenant_id, document_id=document_id)
    return serialize_document(document, include_building=True)


@router.get("/documents/{document_id}/download")
def download_document(
    document_id: int,
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
):
    document = _get_document_or_404(db, tenant_id=context.tenant_id, document_id=document_id)
    key = storage_key_from_url(document.file_url)
    if key is None:
        raise HTTPException(status_code=404, detail="Filen finns inte i lagringen")

    try:
        iterator, metadata = get_storage_service().open_stream(key)
    except RuntimeError as exc:
        logger.warning("document_download_failed document_id=%s key=%s", document.id, key, exc_info=True)
        raise HTTPException(status_code=404, detail="Filen finns inte i lagringen") from exc

    headers = {"Content-Disposition": f'attachment; filename="{document.filename}"'}
    if metadata.get("content_length") is not None:
        headers["Content-Length"] = str(metadata["content_length"])
    return StreamingResponse(iterator(), media_type=metadata["content_type"], headers=headers)


class UpdateDocumentPayload(BaseModel):
    status: str


@router.patch("/documents/{document_id}")
def update_document(
    document_id: int,
    payload: UpdateDocumentPayload = Body(...),
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
):
    document = _get_document_or_404(db, tenant_id=context.tenant_id, document_id=document_id)
    new_status = parse_status(payload.status)
    if new_status is None:
        raise HTTPException(status_code=400, detail="Invalid status")

    previous = document.status
    if previous == new_status:
        return serialize_document(document, include_building=True)

    document.status = new_status
    db.add(
        Event(
            tenant_id=context.tenant_id,
            building_id=document.building_id,
            document_id=document.id,
            type="status_changed",
            data={
                "from": previous.value if isinstance(previous, DocumentStatusEnum) else previous,
                "to": new_status.value,
                "by": context.email,
            },
        )
    )
    db.commit()
    db.refresh(document)

    logger.info(
        "document_status_changed document_id=%s tenant_id=%s status=%s",
        document.id,
        context.tenant_id,
        new_status.value,
    )
    return serialize_document(document, include_building=True)


@router.post("/documents/upload")
def upload_document(
    building_id: int = Form(...),
    document_type: str = Form(...),
    status: str = Form(DocumentStatusEnum.CURRENT.value),
    year: int = Form(..., ge=1800, le=2200),
    file: Optional[UploadFile] = File(None),
    context: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="Ingen fil mottagen")

    building = DocumentStore(db).get_building(context.tenant_id, building_id)
    if building is None:
        raise HTTPException(status_code=404, detail="Byggnaden hittades inte")

    document_type = document_type.strip()
    if not document_type:
        raise HTTPException(status_code=400, detail="Document type required")
    document_status = parse_status(status) or DocumentStatusEnum.CURRENT

    sanitized_name = sanitize_filename(file.filename)
    total_bytes = 0
    buffer = io.BytesIO()
    try:
        while True:
            chunk = file.file.read(1024 * 1024)
            if not chunk:
                break
            total_bytes += len(chunk)
            if total_bytes > settings.max_upload_bytes:
                raise HTTPException(status_code=400, detail="File too large.")
            buffer.write(chunk)
    finally:
        file.file.close()

    if total_bytes == 0:
        raise HTTPException(status_code=400, detail="Ingen fil mottagen")

    storage = get_storage_service()
    try:
        stored_file = storage.upload_fileobj(
            context.tenant_id,
            building.id,
            buffer,
            filename=sanitized_name,
            content_type=file.content_type or "application/octet-stream",
        )
    except RuntimeError as exc:
        logger.exception("Document upload to storage failed")
        raise HTTPException(status_code=502, detail="Upload failed.") from exc

    try:
        document = Document(
            filename=sanitized_name,
            document_type=document_type,
            building_id=building.id,
            status=document_status,
            year=year,
            file_url=stored_file.file_url,
        )
        db.add(document)
        db.flush()
        db.add(
            Event(
                tenant_id=context.tenant_id,
                building_id=building.id,
                document_id=document.id,
                type="upload",
                data={
                    "filename": sanitized_name,
                    "bytes": total_bytes,
                    "storage_key": stored_file.key,
                    "by": context.email,
                },
            )
        )
        db.commit()
        db.refresh(document)
    except Exception:
        db.rollback()
        try:
            storage.delete(stored_file.key)
        except RuntimeError:  # pragma: no cover - best effort
            logger.warning("Failed to delete stored file after database error", exc_info=True)
        raise

    record_document_uploaded(context.tenant_id)
    logger.info(
        "document_uploaded document_id=%s building_id=%s tenant_id=%s type=%s year=%s",
        document.id,
        building.id,
        context.tenant_id,
        document_type,
        year,
    )

    return {
        "message": "Fil uppladdad",
        "filename": sanitized_name,
        "url": stored_file.file_url,
        "document": serialize_document(document),
    }
