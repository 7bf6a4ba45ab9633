from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..models.documents import Document
from .classification import STALE_AFTER_YEARS, GapFinding
from .document_store import DocumentStore
from .gaps import RequiredDocumentType, RequiredTypes, aggregate
from .metrics import record_gap_findings

logger = logging.getLogger(__name__)


@dataclass
class GapReport:
    building_id: int
    reference_year: int
    required_types: List[RequiredDocumentType]
    documents_by_type: Dict[str, List[Document]] = field(default_factory=dict)
    findings: List[GapFinding] = field(default_factory=list)

    @property
    def is_compliant(self) -> bool:
        return not self.findings

    def as_dict(self) -> dict[str, Any]:
        return {
            "building_id": self.building_id,
            "reference_year": self.reference_year,
            "compliant": self.is_compliant,
            "required_types": [
                {"key": item.key, "label": item.display_label} for item in self.required_types
            ],
            "document_counts": {key: len(rows) for key, rows in self.documents_by_type.items()},
            "gaps": [finding.as_dict() for finding in self.findings],
        }


def build_gap_report(
    store: DocumentStore,
    building_id: int,
    required_types: RequiredTypes,
    reference_year: int,
    *,
    stale_after_years: int = STALE_AFTER_YEARS,
) -> GapReport:
    """Fetch every document of each required type and classify the gaps.

    The documents are fetched unfiltered: list filters chosen by the user never
    reach the gap analysis.
    """
    descriptors = [RequiredDocumentType.coerce(item) for item in required_types]
    documents_by_type = store.documents_by_type(building_id, [item.key for item in descriptors])

    findings = aggregate(
        documents_by_type,
        reference_year,
        descriptors,
        stale_after_years=stale_after_years,
    )
    record_gap_findings(findings)

    logger.info(
        "gap_report building_id=%s reference_year=%s findings=%s",
        building_id,
        reference_year,
        len(findings),
    )

    return GapReport(
        building_id=building_id,
        reference_year=reference_year,
        required_types=descriptors,
        documents_by_type=documents_by_type,
        findings=findings,
    )
