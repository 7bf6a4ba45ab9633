from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from ..config import DEFAULT_STALE_AFTER_YEARS
from ..models.documents import DocumentStatusEnum

STALE_AFTER_YEARS = DEFAULT_STALE_AFTER_YEARS


class GapSeverityEnum(str, Enum):
    MISSING = "missing"
    STALE = "stale"
    UNCERTAIN = "uncertain"


class ClassifiableDocument(Protocol):
    """Anything with an effective year and a human-assigned status (ORM rows included)."""

    year: int
    status: Any


@dataclass(frozen=True)
class GapFinding:
    document_type: str
    severity: GapSeverityEnum
    message: str

    def as_dict(self) -> dict[str, str]:
        return {
            "document_type": self.document_type,
            "severity": self.severity.value,
            "message": self.message,
        }


def latest_document(documents: Sequence[ClassifiableDocument]) -> Optional[ClassifiableDocument]:
    """Return the document with the highest year.

    Ties go to the earliest document in input order, so callers that pass rows
    ordered by (year desc, id) get the lowest id among the newest.
    """
    if not documents:
        return None
    return max(documents, key=lambda document: document.year)


def _is_uncertain(document: ClassifiableDocument) -> bool:
    return document.status == DocumentStatusEnum.UNCERTAIN


def evaluate(
    document_type: str,
    documents: Sequence[ClassifiableDocument],
    reference_year: int,
    *,
    label: str | None = None,
    stale_after_years: int = STALE_AFTER_YEARS,
) -> list[GapFinding]:
    """Classify the documentation of one type for one building.

    Args:
        document_type: Type tag the documents were grouped by.
        documents: Every document of that type for the building, unfiltered.
        reference_year: The year "now" is evaluated against.
        label: Display form of the type used in messages. Defaults to the
            upper-cased type tag.
        stale_after_years: Age in years at which the newest document is stale.

    Returns:
        Zero, one or two findings. A missing finding is always alone; stale and
        uncertain are checked independently and may both be reported, in that
        order.
    """
    display = label or document_type.upper()

    if not documents:
        return [
            GapFinding(
                document_type=document_type,
                severity=GapSeverityEnum.MISSING,
                message=f"{display} saknas",
            )
        ]

    findings: list[GapFinding] = []

    latest = latest_document(documents)
    if reference_year - latest.year >= stale_after_years:
        findings.append(
            GapFinding(
                document_type=document_type,
                severity=GapSeverityEnum.STALE,
                message=f"Senaste {display} är äldre än {stale_after_years} år",
            )
        )

    if len(documents) > 1 and any(_is_uncertain(document) for document in documents):
        findings.append(
            GapFinding(
                document_type=document_type,
                severity=GapSeverityEnum.UNCERTAIN,
                message=f"Flera {display} – osäkert vilken som gäller",
            )
        )

    return findings
