"""
Antipattern Detectors

One detector class per antipattern kind.
"""

from apexscan.antipatterns.detectors.base import BaseDetector, SourceContext
from apexscan.antipatterns.detectors.ggd_detector import GGDDetector
from apexscan.antipatterns.detectors.soql_no_where_limit_detector import SOQLNoWhereLimitDetector
from apexscan.antipatterns.detectors.soql_unused_fields_detector import SOQLUnusedFieldsDetector

__all__ = [
    "BaseDetector",
    "SourceContext",
    "GGDDetector",
    "SOQLNoWhereLimitDetector",
    "SOQLUnusedFieldsDetector",
]
