from __future__ import annotations

from typing import Any

from ..models.documents import DocumentStatusEnum

STATUS_LABELS: dict[DocumentStatusEnum, str] = {
    DocumentStatusEnum.CURRENT: "✅ Gällande",
    DocumentStatusEnum.UNCERTAIN: "⚠️ Osäker",
    DocumentStatusEnum.SUPERSEDED: "❌ Ersatt",
}


def status_label(status: Any) -> Any:
    """Display label for a document status; unknown values are returned as given."""
    if isinstance(status, DocumentStatusEnum):
        return STATUS_LABELS[status]
    if isinstance(status, str):
        try:
            return STATUS_LABELS[DocumentStatusEnum(status)]
        except ValueError:
            return status
    return status
