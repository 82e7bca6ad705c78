"""
SOQL Runtime Enricher

Regrades query detections from per-query occurrence counts. Telemetry
identifies a query as ``<ClassName>.<ext>.<line>``; a detection matches a
record when one of the identifiers rebuilt from its class name and line
number is exactly equal to the record's.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern, SeveritySource
from apexscan.runtime.enrichers.base import BaseRuntimeEnricher, format_number
from apexscan.runtime.models import ClassRuntimeData, SOQLRuntimeData
from apexscan.runtime.severity_calculator import (
    DEFAULT_SOQL_THRESHOLDS,
    SOQLSeverityThresholds,
    from_occurrence_count,
)
from apexscan.shared.infrastructure.config import settings
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class SOQLRuntimeEnricher(BaseRuntimeEnricher):
    """Occurrence-keyed enricher for SOQL antipatterns."""

    def __init__(
        self,
        thresholds: SOQLSeverityThresholds = DEFAULT_SOQL_THRESHOLDS,
        extensions: Optional[Sequence[str]] = None,
    ):
        self.thresholds = thresholds
        self.extensions = list(extensions or settings.runtime_identifier_extensions)

    def get_antipattern_types(self) -> List[AntipatternType]:
        return [AntipatternType.SOQL_NO_WHERE_LIMIT, AntipatternType.SOQL_UNUSED_FIELDS]

    def expected_identifiers(self, class_name: str, line_number: int) -> List[str]:
        return [f"{class_name}.{ext}.{line_number}" for ext in self.extensions]

    def enrich(
        self,
        detections: List[DetectedAntipattern],
        class_runtime_data: ClassRuntimeData,
        class_name: str,
    ) -> List[DetectedAntipattern]:
        if not class_runtime_data.soql_runtime_data:
            return list(detections)

        by_identifier: Dict[str, SOQLRuntimeData] = {
            record.unique_query_identifier: record
            for record in class_runtime_data.soql_runtime_data
        }

        enriched = []
        matched = 0
        for detection in detections:
            record = next(
                (
                    by_identifier[identifier]
                    for identifier in self.expected_identifiers(class_name, detection.line_number)
                    if identifier in by_identifier
                ),
                None,
            )
            if record is None:
                enriched.append(detection)
                continue

            matched += 1
            enriched.append(replace(
                detection,
                severity=from_occurrence_count(record.representative_count, self.thresholds),
                severity_source=SeveritySource.RUNTIME,
                entrypoints_impacted_by_method=self._format_metrics(record),
            ))

        logger.debug(
            "soql_runtime_enrichment",
            class_name=class_name,
            detections=len(detections),
            matched=matched,
        )
        return enriched

    @staticmethod
    def _format_metrics(record: SOQLRuntimeData) -> str:
        return (
            f"Query executed {record.representative_count} times, "
            f"total execution time: {format_number(record.total_query_execution_time)}ms"
        )
