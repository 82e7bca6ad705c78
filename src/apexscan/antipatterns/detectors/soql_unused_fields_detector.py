"""
SOQL Unused Fields Detector

Detects inline SOQL that projects fields the code never reads. Each query
is bound to the variable receiving its result (declarator, assignment
target, or the for-each variable when the query is the loop's iterable);
the code after the query is then handed to the usage tracker.

Queries that are not bound to a variable are skipped: there is nothing to
track reads against. Returned, class-member and wholly-used results are
still reported (the recommender will not rewrite them).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from apexscan.analysis.usage_tracker import track_usage
from apexscan.ast.application.apex_ast_utils import (
    enclosing_method,
    enclosing_type,
    field_names,
    get_queries,
    local_names,
    outermost_loop,
)
from apexscan.ast.domain.enums import ApexNodeKind
from apexscan.ast.domain.models import ApexNode
from apexscan.ast.providers.apex_provider import ApexASTProvider
from apexscan.antipatterns.detectors.base import BaseDetector, SourceContext
from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern, Severity
from apexscan.runtime.severity_calculator import static_severity
from apexscan.shared.infrastructure.config import settings
from apexscan.shared.infrastructure.logging import get_logger
from apexscan.soql.parser import SOQLQuery

logger = get_logger(__name__)


@dataclass(frozen=True)
class QueryBinding:
    """Variable receiving a query result."""

    variable: str
    line: int
    is_class_member: bool = False
    is_loop_variable: bool = False


class SOQLUnusedFieldsDetector(BaseDetector):
    """Detector for SOQL projections with unread fields."""

    antipattern_type = AntipatternType.SOQL_UNUSED_FIELDS

    def __init__(self, provider: Optional[ApexASTProvider] = None, proximity_lines: Optional[int] = None):
        super().__init__(provider)
        self.proximity_lines = (
            settings.assignment_proximity_lines if proximity_lines is None else proximity_lines
        )

    def detect_ast(self, context: SourceContext, ast_root: ApexNode) -> List[DetectedAntipattern]:
        queries = get_queries(ast_root)
        detections = []

        for node in queries:
            query = SOQLQuery(node.attributes["text"])
            if not query.is_valid or not query.candidate_items:
                continue

            binding = self.resolve_binding(node)
            if binding is None:
                logger.debug("soql_unassigned_skipped", class_name=context.class_name, line_number=node.start_line)
                continue

            scope = enclosing_method(node) or enclosing_type(node) or ast_root
            # Inside a loop, earlier reads in the body see the previous iteration's result.
            loop = outermost_loop(node)
            scan_start = loop.location.start_offset if loop is not None else node.location.end_offset
            rest_of_scope = context.normalized[scan_start:scope.location.end_offset]
            later_queries = [
                other.text(context.normalized)
                for other in queries
                if other is not node
                and other.location.start_offset >= scan_start
                and scope.location.contains(other.location.start_offset)
            ]
            in_loop = loop is not None

            metadata = track_usage(
                query,
                binding.variable,
                rest_of_scope,
                later_queries,
                is_class_member=binding.is_class_member,
                is_in_loop=in_loop,
            )
            if not 0 < len(metadata.unused_fields) < len(metadata.original_fields):
                continue

            detections.append(DetectedAntipattern(
                class_name=context.class_name,
                line_number=node.start_line,
                code_before=query.text,
                severity=static_severity(in_loop, Severity.HIGH, Severity.MEDIUM),
                method_name=self.method_name_of(node),
                metadata=metadata,
            ))

        return detections

    def detect_regex(self, context: SourceContext) -> List[DetectedAntipattern]:
        """Variable binding needs the tree; report nothing."""
        return []

    def resolve_binding(self, query_node: ApexNode) -> Optional[QueryBinding]:
        """
        Find the variable a query result is bound to.

        A query iterated by a for-each loop binds to the loop variable.
        Otherwise the query must be (part of) the value of a declarator or
        an assignment starting at most ``proximity_lines`` lines earlier.
        """
        expression = query_node.parent
        holder = expression.parent if expression is not None else None
        if holder is None:
            return None

        if holder.kind == ApexNodeKind.ENHANCED_FOR_STATEMENT and expression.attributes.get("role") == "iterable":
            return QueryBinding(variable=holder.name, line=holder.start_line, is_loop_variable=True)

        if holder.kind == ApexNodeKind.VARIABLE_DECLARATOR:
            binding = QueryBinding(
                variable=holder.name,
                line=holder.start_line,
                is_class_member=holder.parent is not None and holder.parent.kind == ApexNodeKind.FIELD_DECLARATION,
            )
        elif holder.kind == ApexNodeKind.EXPRESSION_STATEMENT and holder.attributes.get("assignment_target"):
            target = holder.attributes["assignment_target"]
            binding = QueryBinding(
                variable=target,
                line=holder.start_line,
                is_class_member=(
                    holder.attributes.get("target_qualifier") == "this"
                    or self._is_type_field(holder, target)
                ),
            )
        else:
            return None

        if query_node.start_line - binding.line > self.proximity_lines:
            return None
        return binding

    @staticmethod
    def _is_type_field(node: ApexNode, name: str) -> bool:
        lowered = name.lower()
        return lowered in field_names(enclosing_type(node)) and lowered not in local_names(enclosing_method(node))
