"""
Antipattern Registry

Holds one module per antipattern kind and runs them all over a class.
Registries are plain values built by the caller. There is no process-wide
instance.
"""

from typing import Dict, List, Optional

from apexscan.antipatterns.fix_instructions import default_fix_instruction
from apexscan.antipatterns.module import AntipatternModule
from apexscan.antipatterns.types import AntipatternResult, AntipatternType, ScanResult
from apexscan.runtime.enrichers.base import BaseRuntimeEnricher
from apexscan.runtime.models import ClassRuntimeData
from apexscan.runtime.registry import RuntimeEnricherRegistry
from apexscan.shared.domain.exceptions import ConfigurationError
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class AntipatternRegistry:
    """Kind → module registry with fail-isolated scanning."""

    def __init__(self, enricher_registry: Optional[RuntimeEnricherRegistry] = None):
        self._modules: Dict[AntipatternType, AntipatternModule] = {}
        self.enricher_registry = enricher_registry or RuntimeEnricherRegistry()

    def register(self, module: AntipatternModule, replace: bool = False) -> None:
        """
        Register a module (and its enricher) under its antipattern kind.

        Raises:
            ConfigurationError: If the kind is already registered and
                ``replace`` is False
        """
        antipattern_type = module.antipattern_type
        if antipattern_type in self._modules and not replace:
            raise ConfigurationError(
                f"Module already registered for {antipattern_type.value}",
                context={"antipattern_type": antipattern_type.value},
            )

        self._modules[antipattern_type] = module
        if module.runtime_enricher is not None:
            self.enricher_registry.register(module.runtime_enricher)

        logger.debug(
            "antipattern_module_registered",
            antipattern_type=antipattern_type.value,
            has_recommender=module.recommender is not None,
            has_enricher=module.runtime_enricher is not None,
        )

    def get_module(self, antipattern_type: AntipatternType) -> Optional[AntipatternModule]:
        return self._modules.get(antipattern_type)

    def has_module(self, antipattern_type: AntipatternType) -> bool:
        return antipattern_type in self._modules

    def get_all_modules(self) -> List[AntipatternModule]:
        return list(self._modules.values())

    def get_antipattern_types(self) -> List[AntipatternType]:
        return list(self._modules)

    def get_runtime_enricher(self, antipattern_type: AntipatternType) -> Optional[BaseRuntimeEnricher]:
        return self.enricher_registry.get(antipattern_type)

    def scan_all(
        self,
        class_name: str,
        source: str,
        runtime_data: Optional[ClassRuntimeData] = None,
    ) -> ScanResult:
        """
        Run every registered module over one class.

        A module that raises yields an empty result for its kind; the other
        kinds are still scanned.
        """
        results: List[AntipatternResult] = []

        for antipattern_type, module in self._modules.items():
            try:
                results.append(module.scan(class_name, source, runtime_data))
            except Exception as e:
                logger.error(
                    "antipattern_module_failed",
                    antipattern_type=antipattern_type.value,
                    class_name=class_name,
                    error=str(e),
                    exc_info=True,
                )
                results.append(AntipatternResult(
                    antipattern_type=antipattern_type,
                    fix_instruction=default_fix_instruction(antipattern_type),
                ))

        scan_result = ScanResult(class_name=class_name, antipattern_results=results)
        logger.info(
            "class_scan_completed",
            class_name=class_name,
            modules=len(results),
            total_issues=scan_result.total_issues,
            runtime_data=runtime_data is not None,
        )
        return scan_result

    def __len__(self) -> int:
        return len(self._modules)
