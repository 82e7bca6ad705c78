"""
Base Recommender Class

Abstract base for recommenders turning detections into fix bundles.
"""

from abc import ABC, abstractmethod
from typing import List

from apexscan.antipatterns.types import AntipatternResult, AntipatternType, DetectedAntipattern


class BaseRecommender(ABC):
    """
    Base class for recommenders.

    ``recommend`` groups detections under the kind's fix instruction and
    gives each detection a chance to gain a ``code_after`` rewrite.
    """

    antipattern_type: AntipatternType

    def get_antipattern_type(self) -> AntipatternType:
        return self.antipattern_type

    @abstractmethod
    def get_fix_instruction(self) -> str:
        """Guidance text shared by all detections of this kind."""
        pass

    def recommend(self, detections: List[DetectedAntipattern]) -> AntipatternResult:
        return AntipatternResult(
            antipattern_type=self.antipattern_type,
            fix_instruction=self.get_fix_instruction(),
            detected_instances=[self.apply(detection) for detection in detections],
        )

    def apply(self, detection: DetectedAntipattern) -> DetectedAntipattern:
        """Attach a rewrite to a detection (static recommenders leave it unchanged)."""
        return detection
