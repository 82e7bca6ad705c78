"""
Tests for apexscan.antipatterns.detectors.soql_no_where_limit_detector
"""

import pytest

from apexscan.antipatterns.detectors.soql_no_where_limit_detector import SOQLNoWhereLimitDetector
from apexscan.antipatterns.types import AntipatternType, Severity


@pytest.fixture
def detector():
    return SOQLNoWhereLimitDetector()


def wrap(body):
    return "public class C {\n    void run() {\n" + body + "\n    }\n}"


class TestSOQLNoWhereLimitDetector:

    def test_antipattern_type(self, detector):
        assert detector.get_antipattern_type() == AntipatternType.SOQL_NO_WHERE_LIMIT

    def test_returned_unbounded_query(self, detector, account_service_source):
        detections = detector.detect("AccountService", account_service_source)
        assert len(detections) == 1
        detection = detections[0]
        assert detection.line_number == 19
        assert detection.code_before == "[SELECT Id, Name FROM Account]"
        assert detection.severity == Severity.HIGH
        assert detection.method_name == "loadAll"

    def test_query_in_loop_is_critical(self, detector):
        source = wrap(
            "        for (Id i : ids) {\n"
            "            List<Lead> leads = [SELECT Id FROM Lead];\n"
            "        }"
        )
        detections = detector.detect("C", source)
        assert detections[0].severity == Severity.CRITICAL
        assert detections[0].line_number == 4

    def test_for_each_iterable_is_not_in_its_loop(self, detector):
        source = wrap("        for (Lead l : [SELECT Id FROM Lead]) { }")
        assert detector.detect("C", source)[0].severity == Severity.HIGH

    @pytest.mark.parametrize("query", [
        "[SELECT Id FROM Lead WHERE IsConverted = false]",
        "[SELECT Id FROM Lead LIMIT 100]",
        "[select id from lead where id = :x limit 1]",
    ])
    def test_filtered_or_bounded_queries_pass(self, detector, query):
        assert detector.detect("C", wrap("        List<Lead> l = " + query + ";")) == []

    def test_sub_query_clauses_do_not_count(self, detector):
        query = "[SELECT Id, (SELECT Id FROM Contacts WHERE Email != null LIMIT 1) FROM Account]"
        detections = detector.detect("C", wrap("        List<Account> a = " + query + ";"))
        assert len(detections) == 1
        assert detections[0].code_before == query

    def test_keywords_inside_strings_do_not_count(self, detector):
        query = "[SELECT Id FROM Lead ORDER BY Name]"
        source = wrap("        String s = 'WHERE x LIMIT 1';\n        List<Lead> l = " + query + ";")
        assert len(detector.detect("C", source)) == 1

    def test_multiline_query(self, detector):
        source = wrap(
            "        List<Lead> l = [\n"
            "            SELECT Id, Name\n"
            "            FROM Lead\n"
            "        ];"
        )
        detections = detector.detect("C", source)
        assert detections[0].line_number == 3

    def test_sosl_ignored(self, detector):
        source = wrap("        List<List<SObject>> r = [FIND 'acme' IN ALL FIELDS RETURNING Account];")
        assert detector.detect("C", source) == []

    def test_unparseable_source_reports_nothing(self, detector):
        source = "public class C {\n    void run() {\n        List<Lead> l = [SELECT Id FROM Lead];\n"
        assert detector.detect("C", source) == []
