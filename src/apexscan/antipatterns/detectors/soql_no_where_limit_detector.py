"""
SOQL No WHERE/LIMIT Detector

Detects inline SOQL whose outer query has neither a WHERE nor a LIMIT
clause and can therefore return every row of the object. Clauses inside
parenthesized sub-queries do not count. CRITICAL inside a loop, HIGH
otherwise.
"""

from typing import List

from apexscan.ast.application.apex_ast_utils import enclosing_loop, get_queries
from apexscan.ast.domain.models import ApexNode
from apexscan.antipatterns.detectors.base import BaseDetector, SourceContext
from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern, Severity
from apexscan.runtime.severity_calculator import static_severity
from apexscan.soql.parser import SOQLQuery


class SOQLNoWhereLimitDetector(BaseDetector):
    """Detector for unfiltered, unbounded SOQL queries."""

    antipattern_type = AntipatternType.SOQL_NO_WHERE_LIMIT

    def detect_ast(self, context: SourceContext, ast_root: ApexNode) -> List[DetectedAntipattern]:
        detections = []
        for node in get_queries(ast_root):
            query = SOQLQuery(node.attributes["text"])
            if not query.is_valid or query.has_where or query.has_limit:
                continue

            detections.append(DetectedAntipattern(
                class_name=context.class_name,
                line_number=node.start_line,
                code_before=query.text,
                severity=static_severity(
                    enclosing_loop(node) is not None,
                    in_loop=Severity.CRITICAL,
                    otherwise=Severity.HIGH,
                ),
                method_name=self.method_name_of(node),
            ))
        return detections

    def detect_regex(self, context: SourceContext) -> List[DetectedAntipattern]:
        """Query boundaries are unreliable without a tree; report nothing."""
        return []
