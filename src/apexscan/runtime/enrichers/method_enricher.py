"""
Method Runtime Enricher

Regrades detections from the CPU time of the entrypoints reaching their
enclosing method (matched case-insensitively by name).
"""

from dataclasses import replace
from typing import List

from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern, SeveritySource
from apexscan.runtime.enrichers.base import BaseRuntimeEnricher
from apexscan.runtime.models import ClassRuntimeData, EntrypointData
from apexscan.runtime.severity_calculator import (
    DEFAULT_METHOD_THRESHOLDS,
    MethodSeverityThresholds,
    from_cpu_time,
)
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

TOP_ENTRYPOINTS = 3


class MethodRuntimeEnricher(BaseRuntimeEnricher):
    """Method-keyed enricher for antipatterns whose cost is per call."""

    def __init__(self, thresholds: MethodSeverityThresholds = DEFAULT_METHOD_THRESHOLDS):
        self.thresholds = thresholds

    def get_antipattern_types(self) -> List[AntipatternType]:
        return [AntipatternType.GGD]

    def enrich(
        self,
        detections: List[DetectedAntipattern],
        class_runtime_data: ClassRuntimeData,
        class_name: str,
    ) -> List[DetectedAntipattern]:
        if not class_runtime_data.methods:
            return list(detections)

        enriched = []
        for detection in detections:
            runtime = class_runtime_data.find_method(detection.method_name) if detection.method_name else None
            if runtime is None or not runtime.entrypoints:
                enriched.append(detection)
                continue

            enriched.append(replace(
                detection,
                severity=from_cpu_time(runtime.entrypoints, self.thresholds),
                severity_source=SeveritySource.RUNTIME,
                entrypoints_impacted_by_method=self._format_entrypoints(runtime.entrypoints),
            ))

        logger.debug("method_runtime_enrichment", class_name=class_name, detections=len(detections))
        return enriched

    @staticmethod
    def _format_entrypoints(entrypoints: List[EntrypointData]) -> str:
        top = sorted(entrypoints, key=lambda e: e.sum_cpu_time, reverse=True)[:TOP_ENTRYPOINTS]
        names = ", ".join(e.entrypoint_name for e in top)
        total_cpu = sum(e.sum_cpu_time for e in entrypoints) / 1000
        total_db = sum(e.sum_db_time for e in entrypoints) / 1000
        return f"Top entrypoints: {names}. Total CPU: {total_cpu:.1f}s, Total DB: {total_db:.1f}s"
