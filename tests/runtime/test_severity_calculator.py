"""
Tests for apexscan.runtime.severity_calculator
"""

import pytest

from apexscan.antipatterns.types import Severity
from apexscan.runtime.models import EntrypointData
from apexscan.runtime.severity_calculator import (
    MethodSeverityThresholds,
    SOQLSeverityThresholds,
    from_cpu_time,
    from_occurrence_count,
    parse_line_number_from_identifier,
    static_severity,
)
from apexscan.shared.infrastructure.config import Settings


def entrypoint(name="ep", avg_cpu=0, sum_cpu=0):
    return EntrypointData(entrypoint_name=name, avg_cpu_time=avg_cpu, sum_cpu_time=sum_cpu)


class TestOccurrenceCount:
    """Strictly-greater-than thresholds."""

    @pytest.mark.parametrize("count,expected", [
        (0, Severity.MINOR),
        (1_000, Severity.MINOR),
        (1_001, Severity.MAJOR),
        (10_000_000, Severity.MAJOR),
        (10_000_001, Severity.CRITICAL),
        (15_000_000, Severity.CRITICAL),
    ])
    def test_default_thresholds(self, count, expected):
        assert from_occurrence_count(count) == expected

    def test_custom_thresholds(self):
        thresholds = SOQLSeverityThresholds(critical_threshold=100, major_threshold=10)
        assert from_occurrence_count(11, thresholds) == Severity.MAJOR
        assert from_occurrence_count(101, thresholds) == Severity.CRITICAL

    def test_from_settings(self):
        config = Settings(soql_critical_occurrence_count=50, soql_major_occurrence_count=5)
        thresholds = SOQLSeverityThresholds.from_settings(config)
        assert thresholds == SOQLSeverityThresholds(critical_threshold=50, major_threshold=5)


class TestCpuTime:

    def test_no_entrypoints_is_minor(self):
        assert from_cpu_time([]) == Severity.MINOR

    def test_any_entrypoint_above_threshold_is_critical(self):
        assert from_cpu_time([entrypoint(avg_cpu=100), entrypoint(avg_cpu=2500)]) == Severity.CRITICAL

    def test_threshold_is_exclusive(self):
        assert from_cpu_time([entrypoint(avg_cpu=2000)]) == Severity.MAJOR

    def test_custom_threshold(self):
        thresholds = MethodSeverityThresholds(critical_avg_cpu_time=50)
        assert from_cpu_time([entrypoint(avg_cpu=51)], thresholds) == Severity.CRITICAL

    def test_from_settings(self):
        config = Settings(method_critical_avg_cpu_time=750)
        assert MethodSeverityThresholds.from_settings(config).critical_avg_cpu_time == 750


class TestStaticSeverity:

    def test_defaults(self):
        assert static_severity(True) == Severity.HIGH
        assert static_severity(False) == Severity.MEDIUM

    def test_custom_levels(self):
        assert static_severity(True, Severity.CRITICAL, Severity.HIGH) == Severity.CRITICAL
        assert static_severity(False, Severity.CRITICAL, Severity.HIGH) == Severity.HIGH


class TestIdentifierLineNumber:

    @pytest.mark.parametrize("identifier,expected", [
        ("AccountService.cls.79", 79),
        ("AccountTrigger.trigger.3", 3),
        ("AccountService.cls", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, identifier, expected):
        assert parse_line_number_from_identifier(identifier) == expected
