"""
Severity Calculator.

Pure functions grading detections either from runtime telemetry
(occurrence counts, entrypoint CPU time) or from static structure.
Thresholds are plain parameters; defaults come from settings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from apexscan.antipatterns.types import Severity
from apexscan.runtime.models import EntrypointData
from apexscan.shared.infrastructure.config import Settings, settings

_IDENTIFIER_LINE_RE = re.compile(r"\.(\d+)$")


@dataclass(frozen=True)
class SOQLSeverityThresholds:
    """Occurrence-count thresholds (strictly greater than)."""

    critical_threshold: int = 10_000_000
    major_threshold: int = 1_000

    @classmethod
    def from_settings(cls, config: Settings = settings) -> SOQLSeverityThresholds:
        return cls(
            critical_threshold=config.soql_critical_occurrence_count,
            major_threshold=config.soql_major_occurrence_count,
        )


@dataclass(frozen=True)
class MethodSeverityThresholds:
    """Average CPU time above which a method is critical."""

    critical_avg_cpu_time: float = 2000

    @classmethod
    def from_settings(cls, config: Settings = settings) -> MethodSeverityThresholds:
        return cls(critical_avg_cpu_time=config.method_critical_avg_cpu_time)


DEFAULT_SOQL_THRESHOLDS = SOQLSeverityThresholds()
DEFAULT_METHOD_THRESHOLDS = MethodSeverityThresholds()


def from_occurrence_count(
    count: int,
    thresholds: SOQLSeverityThresholds = DEFAULT_SOQL_THRESHOLDS,
) -> Severity:
    """
    Grade a query by how often it runs in production.

    Args:
        count: Representative occurrence count
        thresholds: Critical/major cut-offs

    Returns:
        CRITICAL above the critical threshold, MAJOR above the major one, else MINOR
    """
    if count > thresholds.critical_threshold:
        return Severity.CRITICAL
    if count > thresholds.major_threshold:
        return Severity.MAJOR
    return Severity.MINOR


def from_cpu_time(
    entrypoints: Sequence[EntrypointData],
    thresholds: MethodSeverityThresholds = DEFAULT_METHOD_THRESHOLDS,
) -> Severity:
    """
    Grade a method by the entrypoints that reach it.

    Args:
        entrypoints: Entrypoint timings for the method
        thresholds: CPU cut-off

    Returns:
        MINOR with no entrypoints, CRITICAL if any average CPU time is
        above the threshold, else MAJOR
    """
    if not entrypoints:
        return Severity.MINOR
    if any(e.avg_cpu_time > thresholds.critical_avg_cpu_time for e in entrypoints):
        return Severity.CRITICAL
    return Severity.MAJOR


def static_severity(
    is_in_loop: bool,
    in_loop: Severity = Severity.HIGH,
    otherwise: Severity = Severity.MEDIUM,
) -> Severity:
    """Structural fallback: a loop multiplies the cost of the construct."""
    return in_loop if is_in_loop else otherwise


def parse_line_number_from_identifier(identifier: str) -> Optional[int]:
    """
    Extract the line number from ``<ClassName>.<ext>.<line>``.

    Example:
        >>> parse_line_number_from_identifier("AccountService.cls.79")
        79
    """
    match = _IDENTIFIER_LINE_RE.search(identifier or "")
    return int(match.group(1)) if match else None
