"""
Antipattern Detection Types

Data types for detections and grouped scan results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from apexscan.shared.domain.base_model import BaseDomainModel


class AntipatternType(Enum):
    """Antipattern kinds the engine knows how to detect."""

    GGD = "GGD"
    SOQL_NO_WHERE_LIMIT = "SOQL_NO_WHERE_LIMIT"
    SOQL_UNUSED_FIELDS = "SOQL_UNUSED_FIELDS"


class Severity(Enum):
    """
    Severity levels.

    Static detection grades with medium/high/critical; runtime telemetry
    grades with minor/major/critical.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
    MINOR = "minor"
    MAJOR = "major"


class SeveritySource(Enum):
    """Where a detection's severity came from."""

    STATIC = "static"
    RUNTIME = "runtime"


@dataclass
class QueryProjectionMetadata(BaseDomainModel):
    """Usage analysis of a query's projected fields."""

    original_fields: List[str]
    unused_fields: List[str]
    assigned_variable: Optional[str]
    is_in_loop: bool = False
    is_returned: bool = False
    is_class_member: bool = False
    has_nested_queries: bool = False
    used_in_later_queries: List[str] = field(default_factory=list)
    complete_usage_detected: bool = False

    @property
    def is_rewrite_safe(self) -> bool:
        """A rewrite may only be proposed when nothing outside field reads can see the record."""
        return not (
            self.is_returned
            or self.is_class_member
            or self.complete_usage_detected
            or self.has_nested_queries
        )


@dataclass
class DetectedAntipattern(BaseDomainModel):
    """A single antipattern instance found in a class."""

    class_name: str
    line_number: int
    code_before: str
    severity: Severity
    severity_source: SeveritySource = SeveritySource.STATIC
    method_name: Optional[str] = None
    code_after: Optional[str] = None
    entrypoints_impacted_by_method: Optional[str] = None
    metadata: Optional[Any] = None

    @property
    def problematic_code(self) -> str:
        return self.code_before


@dataclass
class AntipatternResult(BaseDomainModel):
    """Detections of one kind plus the guidance that applies to all of them."""

    antipattern_type: AntipatternType
    fix_instruction: str
    detected_instances: List[DetectedAntipattern] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return len(self.detected_instances) > 0


@dataclass
class ScanResult(BaseDomainModel):
    """All antipattern results for one class."""

    class_name: str
    antipattern_results: List[AntipatternResult] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return sum(len(result.detected_instances) for result in self.antipattern_results)

    def get_result(self, antipattern_type: AntipatternType) -> Optional[AntipatternResult]:
        return next(
            (r for r in self.antipattern_results if r.antipattern_type == antipattern_type),
            None,
        )
