"""Runtime enrichers correlating telemetry records with detections."""

from apexscan.runtime.enrichers.base import BaseRuntimeEnricher
from apexscan.runtime.enrichers.method_enricher import MethodRuntimeEnricher
from apexscan.runtime.enrichers.soql_enricher import SOQLRuntimeEnricher

__all__ = [
    "BaseRuntimeEnricher",
    "MethodRuntimeEnricher",
    "SOQLRuntimeEnricher",
]
