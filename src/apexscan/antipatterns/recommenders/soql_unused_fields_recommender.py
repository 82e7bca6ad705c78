"""
SOQL Unused Fields Recommender

Proposes the query with its unused fields removed. A rewrite is only
produced when it cannot change behavior: the result must not escape
field-level reads (returned, class member, passed whole) and the query must
not nest sub-queries. Removing every projected item is never proposed.
Otherwise ``code_after`` is the empty string and the detection keeps its
guidance.
"""

from dataclasses import replace

from apexscan.antipatterns.fix_instructions import SOQL_UNUSED_FIELDS_FIX_INSTRUCTIONS
from apexscan.antipatterns.recommenders.base import BaseRecommender
from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern, QueryProjectionMetadata
from apexscan.shared.infrastructure.logging import get_logger
from apexscan.soql.parser import SOQLQuery

logger = get_logger(__name__)


class SOQLUnusedFieldsRecommender(BaseRecommender):
    """Rewrites SELECT lists without their unused fields."""

    antipattern_type = AntipatternType.SOQL_UNUSED_FIELDS

    def get_fix_instruction(self) -> str:
        return SOQL_UNUSED_FIELDS_FIX_INSTRUCTIONS

    def apply(self, detection: DetectedAntipattern) -> DetectedAntipattern:
        return replace(detection, code_after=self.rewrite(detection))

    def rewrite(self, detection: DetectedAntipattern) -> str:
        metadata = detection.metadata
        if not isinstance(metadata, QueryProjectionMetadata) or not metadata.unused_fields:
            return ""

        if not metadata.is_rewrite_safe:
            logger.debug(
                "soql_rewrite_skipped",
                class_name=detection.class_name,
                line_number=detection.line_number,
                is_returned=metadata.is_returned,
                is_class_member=metadata.is_class_member,
                complete_usage=metadata.complete_usage_detected,
                nested=metadata.has_nested_queries,
            )
            return ""

        return SOQLQuery(detection.code_before).rewrite(metadata.unused_fields)
