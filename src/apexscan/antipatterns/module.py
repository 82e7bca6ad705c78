"""
Antipattern Module

Couples one detector with an optional recommender and an optional runtime
enricher under a single antipattern kind.
"""

from typing import Optional

from apexscan.antipatterns.detectors.base import BaseDetector
from apexscan.antipatterns.fix_instructions import default_fix_instruction
from apexscan.antipatterns.recommenders.base import BaseRecommender
from apexscan.antipatterns.types import AntipatternResult, AntipatternType
from apexscan.runtime.enrichers.base import BaseRuntimeEnricher
from apexscan.runtime.models import ClassRuntimeData
from apexscan.shared.domain.exceptions import ConfigurationError
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class AntipatternModule:
    """
    One antipattern kind: detect → enrich → recommend.

    Raises:
        ConfigurationError: If the recommender or enricher does not handle
            the detector's antipattern kind
    """

    def __init__(
        self,
        detector: BaseDetector,
        recommender: Optional[BaseRecommender] = None,
        runtime_enricher: Optional[BaseRuntimeEnricher] = None,
    ):
        antipattern_type = detector.get_antipattern_type()

        if recommender is not None and recommender.get_antipattern_type() != antipattern_type:
            raise ConfigurationError(
                f"Recommender type mismatch: detector is {antipattern_type.value}, "
                f"recommender is {recommender.get_antipattern_type().value}",
                context={"detector": detector.__class__.__name__, "recommender": recommender.__class__.__name__},
            )

        if runtime_enricher is not None and not runtime_enricher.supports(antipattern_type):
            raise ConfigurationError(
                f"Runtime enricher {runtime_enricher.__class__.__name__} does not support {antipattern_type.value}",
                context={"supported": [t.value for t in runtime_enricher.get_antipattern_types()]},
            )

        self.detector = detector
        self.recommender = recommender
        self.runtime_enricher = runtime_enricher

    @property
    def antipattern_type(self) -> AntipatternType:
        return self.detector.get_antipattern_type()

    def scan(
        self,
        class_name: str,
        source: str,
        runtime_data: Optional[ClassRuntimeData] = None,
    ) -> AntipatternResult:
        """
        Scan one class for this module's antipattern.

        Args:
            class_name: Apex class or trigger name
            source: Raw source text
            runtime_data: Telemetry for the class, if any

        Returns:
            AntipatternResult (possibly with no instances)
        """
        detections = self.detector.detect(class_name, source)

        if self.runtime_enricher is not None and runtime_data is not None and detections:
            detections = self.runtime_enricher.enrich(detections, runtime_data, class_name)

        if self.recommender is not None:
            return self.recommender.recommend(detections)

        return AntipatternResult(
            antipattern_type=self.antipattern_type,
            fix_instruction=default_fix_instruction(self.antipattern_type),
            detected_instances=detections,
        )
