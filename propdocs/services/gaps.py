from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence, Union

from .classification import STALE_AFTER_YEARS, ClassifiableDocument, GapFinding, evaluate

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when the aggregator input does not cover every required document type."""


@dataclass(frozen=True)
class RequiredDocumentType:
    key: str
    label: str = ""

    @property
    def display_label(self) -> str:
        return self.label or self.key.upper()

    @classmethod
    def coerce(cls, value: Union["RequiredDocumentType", str]) -> "RequiredDocumentType":
        if isinstance(value, RequiredDocumentType):
            return value
        return cls(key=value)


RequiredTypes = Sequence[Union[RequiredDocumentType, str]]


def required_types_from_keys(keys: Iterable[str]) -> list[RequiredDocumentType]:
    return [RequiredDocumentType(key=key) for key in keys]


def aggregate(
    documents_by_type: Mapping[str, Sequence[ClassifiableDocument]],
    reference_year: int,
    required_types: RequiredTypes,
    *,
    stale_after_years: int = STALE_AFTER_YEARS,
) -> list[GapFinding]:
    """Run the classification for every required type and flatten the findings.

    Findings follow the order of ``required_types``. Types present in
    ``documents_by_type`` but not required are ignored. An empty list means the
    building is fully documented.

    Raises:
        ConfigurationError: If a required type has no entry in ``documents_by_type``.
    """
    descriptors = [RequiredDocumentType.coerce(item) for item in required_types]

    missing_keys = [item.key for item in descriptors if item.key not in documents_by_type]
    if missing_keys:
        raise ConfigurationError(
            f"No document list supplied for required type(s): {', '.join(missing_keys)}"
        )

    findings: list[GapFinding] = []
    for descriptor in descriptors:
        findings.extend(
            evaluate(
                descriptor.key,
                documents_by_type[descriptor.key],
                reference_year,
                label=descriptor.display_label,
                stale_after_years=stale_after_years,
            )
        )

    logger.debug(
        "gaps_aggregated types=%s findings=%s reference_year=%s",
        len(descriptors),
        len(findings),
        reference_year,
    )
    return findings
