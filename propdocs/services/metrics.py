from __future__ import annotations

from typing import Iterable

from prometheus_client import Counter

from .classification import GapFinding


GAP_FINDINGS_COUNTER = Counter(
    "pd_gap_findings_total",
    "Gap findings reported per document type and severity",
    ["document_type", "severity"],
)

GAP_REPORTS_COUNTER = Counter(
    "pd_gap_reports_total",
    "Gap reports computed, split by whether the building was fully documented",
    ["compliant"],
)

DOCUMENTS_UPLOADED_COUNTER = Counter(
    "pd_documents_uploaded_total",
    "Documents uploaded per tenant",
    ["tenant_id"],
)


def _tenant_label(tenant_id: int | None) -> str:
    return str(tenant_id) if tenant_id is not None else "unknown"


def record_gap_findings(findings: Iterable[GapFinding]) -> None:
    count = 0
    for finding in findings:
        GAP_FINDINGS_COUNTER.labels(
            document_type=finding.document_type,
            severity=finding.severity.value,
        ).inc()
        count += 1
    GAP_REPORTS_COUNTER.labels(compliant="true" if count == 0 else "false").inc()


def record_document_uploaded(tenant_id: int | None) -> None:
    DOCUMENTS_UPLOADED_COUNTER.labels(tenant_id=_tenant_label(tenant_id)).inc()
