"""
Runtime enricher registry.

Maps antipattern kinds to the enricher grading them. One enricher may
serve several kinds (the SOQL enricher covers every query antipattern).
"""

from typing import Dict, List, Optional

from apexscan.antipatterns.types import AntipatternType
from apexscan.runtime.enrichers.base import BaseRuntimeEnricher
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class RuntimeEnricherRegistry:
    """Kind → enricher lookup, built explicitly per scan setup."""

    def __init__(self) -> None:
        self._enrichers: Dict[AntipatternType, BaseRuntimeEnricher] = {}

    def register(self, enricher: BaseRuntimeEnricher) -> None:
        """Register an enricher for every kind it declares."""
        for antipattern_type in enricher.get_antipattern_types():
            self._enrichers[antipattern_type] = enricher
        logger.debug(
            "runtime_enricher_registered",
            enricher=enricher.__class__.__name__,
            types=[t.value for t in enricher.get_antipattern_types()],
        )

    def get(self, antipattern_type: AntipatternType) -> Optional[BaseRuntimeEnricher]:
        return self._enrichers.get(antipattern_type)

    def has(self, antipattern_type: AntipatternType) -> bool:
        return antipattern_type in self._enrichers

    def get_registered_types(self) -> List[AntipatternType]:
        return list(self._enrichers)

    def __len__(self) -> int:
        return len(self._enrichers)
