"""
Default registry wiring.

Builds the standard set of modules. The SOQL enricher instance is shared by
both query modules.
"""

from typing import Optional

from apexscan.ast.providers.apex_provider import ApexASTProvider
from apexscan.antipatterns.detectors.ggd_detector import GGDDetector
from apexscan.antipatterns.detectors.soql_no_where_limit_detector import SOQLNoWhereLimitDetector
from apexscan.antipatterns.detectors.soql_unused_fields_detector import SOQLUnusedFieldsDetector
from apexscan.antipatterns.module import AntipatternModule
from apexscan.antipatterns.recommenders.soql_unused_fields_recommender import SOQLUnusedFieldsRecommender
from apexscan.antipatterns.recommenders.static_recommenders import (
    GGDRecommender,
    SOQLNoWhereLimitRecommender,
)
from apexscan.antipatterns.registry import AntipatternRegistry
from apexscan.runtime.enrichers.method_enricher import MethodRuntimeEnricher
from apexscan.runtime.enrichers.soql_enricher import SOQLRuntimeEnricher
from apexscan.runtime.severity_calculator import MethodSeverityThresholds, SOQLSeverityThresholds
from apexscan.shared.infrastructure.config import Settings, settings as default_settings


def build_default_registry(config: Optional[Settings] = None) -> AntipatternRegistry:
    """
    Build a registry with every known antipattern module.

    Args:
        config: Settings supplying thresholds (defaults to the global settings)

    Returns:
        New AntipatternRegistry
    """
    config = config or default_settings
    provider = ApexASTProvider()

    soql_enricher = SOQLRuntimeEnricher(
        thresholds=SOQLSeverityThresholds.from_settings(config),
        extensions=config.runtime_identifier_extensions,
    )
    method_enricher = MethodRuntimeEnricher(thresholds=MethodSeverityThresholds.from_settings(config))

    registry = AntipatternRegistry()
    registry.register(AntipatternModule(
        GGDDetector(provider),
        GGDRecommender(),
        method_enricher,
    ))
    registry.register(AntipatternModule(
        SOQLNoWhereLimitDetector(provider),
        SOQLNoWhereLimitRecommender(),
        soql_enricher,
    ))
    registry.register(AntipatternModule(
        SOQLUnusedFieldsDetector(provider, proximity_lines=config.assignment_proximity_lines),
        SOQLUnusedFieldsRecommender(),
        soql_enricher,
    ))
    return registry
