"""
Base Runtime Enricher

Abstract base for enrichers that regrade detections from production
telemetry.
"""

from abc import ABC, abstractmethod
from typing import List

from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern
from apexscan.runtime.models import ClassRuntimeData


class BaseRuntimeEnricher(ABC):
    """
    Base class for runtime enrichers.

    Enrichers never mutate their input: matched detections are replaced by
    copies carrying the runtime severity, ``severity_source=RUNTIME`` and a
    human-readable note; unmatched detections are returned as they are.
    """

    @abstractmethod
    def get_antipattern_types(self) -> List[AntipatternType]:
        """Antipattern kinds this enricher can grade."""
        pass

    @abstractmethod
    def enrich(
        self,
        detections: List[DetectedAntipattern],
        class_runtime_data: ClassRuntimeData,
        class_name: str,
    ) -> List[DetectedAntipattern]:
        """Return a new list with matched detections regraded."""
        pass

    def supports(self, antipattern_type: AntipatternType) -> bool:
        return antipattern_type in self.get_antipattern_types()


def format_number(value: float) -> str:
    """Render telemetry numbers without a spurious ``.0``."""
    return str(int(value)) if float(value).is_integer() else str(value)
