"""
Static recommenders.

Kinds whose fix depends on surrounding design (caching a describe, choosing
a filter) get guidance text only, never a rewrite.
"""

from apexscan.antipatterns.fix_instructions import (
    GGD_FIX_INSTRUCTIONS,
    SOQL_NO_WHERE_LIMIT_FIX_INSTRUCTIONS,
)
from apexscan.antipatterns.recommenders.base import BaseRecommender
from apexscan.antipatterns.types import AntipatternType


class GGDRecommender(BaseRecommender):
    """Guidance for Schema.getGlobalDescribe() calls."""

    antipattern_type = AntipatternType.GGD

    def get_fix_instruction(self) -> str:
        return GGD_FIX_INSTRUCTIONS


class SOQLNoWhereLimitRecommender(BaseRecommender):
    """Guidance for unfiltered, unbounded queries."""

    antipattern_type = AntipatternType.SOQL_NO_WHERE_LIMIT

    def get_fix_instruction(self) -> str:
        return SOQL_NO_WHERE_LIMIT_FIX_INSTRUCTIONS
