from __future__ import annotations

from datetime import datetime, timezone

from ..config import settings
from ..services.gaps import RequiredDocumentType, required_types_from_keys


def get_reference_year() -> int:
    """Year the gap analysis is evaluated against; overridden in tests."""
    return datetime.now(timezone.utc).year


def get_required_document_types() -> list[RequiredDocumentType]:
    return required_types_from_keys(settings.required_document_types)


def get_stale_after_years() -> int:
    return settings.document_stale_after_years
