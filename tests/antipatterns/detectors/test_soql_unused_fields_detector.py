"""
Tests for apexscan.antipatterns.detectors.soql_unused_fields_detector

Covers:
1. Variable binding (declarator, assignment, for-each, proximity)
2. Class-member detection
3. Reporting rules (partial use only)
"""

import pytest

from apexscan.antipatterns.detectors.soql_unused_fields_detector import SOQLUnusedFieldsDetector
from apexscan.antipatterns.types import AntipatternType, QueryProjectionMetadata, Severity
from apexscan.ast.application.apex_ast_utils import get_queries


@pytest.fixture
def detector():
    return SOQLUnusedFieldsDetector()


def wrap(body):
    return "public class C {\n    public void run() {\n" + body + "\n    }\n}"


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------


class TestBinding:
    """Which variable receives the query result."""

    def test_declarator(self, detector, account_service_source):
        detections = detector.detect("AccountService", account_service_source)
        assert len(detections) == 1
        detection = detections[0]
        assert detection.line_number == 7
        assert detection.method_name == "getPrimaryName"
        assert detection.severity == Severity.MEDIUM
        assert detection.code_before == "[SELECT Id, Name, Phone FROM Account WHERE Id = :accountId LIMIT 1]"
        assert isinstance(detection.metadata, QueryProjectionMetadata)
        assert detection.metadata.assigned_variable == "acc"
        assert detection.metadata.unused_fields == ["Phone"]

    def test_assignment(self, detector):
        source = wrap(
            "        List<Account> accs;\n"
            "        accs = [SELECT Id, Name, Phone FROM Account LIMIT 10];\n"
            "        System.debug(accs[0].Phone);"
        )
        detections = detector.detect("C", source)
        assert detections[0].metadata.assigned_variable == "accs"
        assert detections[0].metadata.unused_fields == ["Name"]

    def test_for_each_loop_variable(self, detector):
        source = wrap(
            "        for (Contact c : [SELECT Id, LastName, Email FROM Contact WHERE Email != null]) {\n"
            "            System.debug(c.Email);\n"
            "        }"
        )
        detections = detector.detect("C", source)
        assert detections[0].metadata.assigned_variable == "c"
        assert detections[0].metadata.unused_fields == ["LastName"]
        assert detections[0].severity == Severity.MEDIUM

    def test_multiline_initializer_within_proximity(self, detector):
        source = wrap(
            "        Account acc =\n"
            "            [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "        System.debug(acc.Name);"
        )
        assert detector.detect("C", source)[0].metadata.unused_fields == ["Phone"]

    def test_initializer_beyond_proximity_skipped(self):
        source = wrap(
            "        Account acc =\n"
            "\n"
            "\n"
            "\n"
            "            [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "        System.debug(acc.Name);"
        )
        assert SOQLUnusedFieldsDetector().detect("C", source) == []
        assert len(SOQLUnusedFieldsDetector(proximity_lines=5).detect("C", source)) == 1

    def test_unassigned_query_skipped(self, detector):
        source = wrap("        System.debug([SELECT Id, Name FROM Account LIMIT 1]);")
        assert detector.detect("C", source) == []

    def test_resolve_binding_none_for_return(self, detector, parse, account_service_source):
        queries = get_queries(parse(account_service_source))
        assert detector.resolve_binding(queries[1]) is None
        binding = detector.resolve_binding(queries[0])
        assert binding.variable == "acc"
        assert binding.line == 7
        assert not binding.is_class_member


class TestClassMembers:
    """Results stored on the type are reported but flagged."""

    def test_field_initializer(self, detector):
        source = (
            "public class C {\n"
            "    private Account cached = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "    public String name() { return cached.Name; }\n"
            "}"
        )
        detections = detector.detect("C", source)
        assert detections[0].line_number == 2
        assert detections[0].method_name is None
        assert detections[0].metadata.is_class_member
        assert detections[0].metadata.unused_fields == ["Phone"]

    def test_this_qualified_assignment(self, detector):
        source = (
            "public class C {\n"
            "    private List<Account> rows;\n"
            "    public void load() {\n"
            "        this.rows = [SELECT Id, Name, Phone FROM Account LIMIT 5];\n"
            "        System.debug(this.rows[0].Name);\n"
            "    }\n"
            "}"
        )
        detection = detector.detect("C", source)[0]
        assert detection.metadata.assigned_variable == "rows"
        assert detection.metadata.is_class_member

    def test_unqualified_field_assignment(self, detector):
        source = (
            "public class C {\n"
            "    private List<Account> rows;\n"
            "    public void load() {\n"
            "        rows = [SELECT Id, Name, Phone FROM Account LIMIT 5];\n"
            "        System.debug(rows[0].Name);\n"
            "    }\n"
            "}"
        )
        assert detector.detect("C", source)[0].metadata.is_class_member

    def test_local_shadowing_field(self, detector):
        source = (
            "public class C {\n"
            "    private List<Account> rows;\n"
            "    public void load() {\n"
            "        List<Account> rows;\n"
            "        rows = [SELECT Id, Name, Phone FROM Account LIMIT 5];\n"
            "        System.debug(rows[0].Name);\n"
            "    }\n"
            "}"
        )
        assert not detector.detect("C", source)[0].metadata.is_class_member


# ---------------------------------------------------------------------------
# Reporting rules
# ---------------------------------------------------------------------------


class TestReporting:

    def test_antipattern_type(self, detector):
        assert detector.get_antipattern_type() == AntipatternType.SOQL_UNUSED_FIELDS

    def test_all_fields_used(self, detector):
        source = wrap(
            "        Account acc = [SELECT Id, Name FROM Account LIMIT 1];\n"
            "        System.debug(acc.Name);"
        )
        assert detector.detect("C", source) == []

    def test_nothing_read_at_all_not_reported(self, detector):
        source = wrap("        Account acc = [SELECT Name, Phone FROM Account LIMIT 1];")
        assert detector.detect("C", source) == []

    def test_only_id_projected(self, detector):
        source = wrap("        Account acc = [SELECT Id FROM Account LIMIT 1];")
        assert detector.detect("C", source) == []

    def test_in_loop_is_high(self, detector):
        source = wrap(
            "        for (Id i : ids) {\n"
            "            Account acc = [SELECT Id, Name, Phone FROM Account WHERE Id = :i];\n"
            "            System.debug(acc.Name);\n"
            "        }"
        )
        detection = detector.detect("C", source)[0]
        assert detection.severity == Severity.HIGH
        assert detection.metadata.is_in_loop

    def test_returned_result_still_reported(self, detector):
        source = wrap(
            "        Account acc = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "        System.debug(acc.Name);\n"
            "        return acc;"
        )
        detection = detector.detect("C", source)[0]
        assert detection.metadata.is_returned
        assert not detection.metadata.is_rewrite_safe

    def test_reads_after_method_end_ignored(self, detector):
        source = (
            "public class C {\n"
            "    public void a() {\n"
            "        Account acc = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "        System.debug(acc.Name);\n"
            "    }\n"
            "    public void b(Account acc) {\n"
            "        System.debug(acc.Phone);\n"
            "    }\n"
            "}"
        )
        assert detector.detect("C", source)[0].metadata.unused_fields == ["Phone"]

    def test_later_query_bind(self, detector):
        source = wrap(
            "        Account acc = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "        List<Contact> cs = [SELECT Id FROM Contact WHERE Phone = :acc.Phone];\n"
            "        System.debug(cs);"
        )
        detection = detector.detect("C", source)[0]
        assert detection.metadata.used_in_later_queries == ["Phone"]
        assert detection.metadata.unused_fields == ["Name"]

    def test_unparseable_source_reports_nothing(self, detector):
        source = "public class C {\n    Account acc = [SELECT Id, Name FROM Account LIMIT 1];\n"
        assert detector.detect("C", source) == []

    def test_safe_navigation_read_is_used(self, detector):
        source = wrap(
            "        Account acc = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "        System.debug(acc?.Name);\n"
            "        System.debug(acc.Phone);"
        )
        assert detector.detect("C", source) == []

    def test_comment_in_select_list(self, detector):
        source = wrap(
            "        Account acc = [SELECT Id, /* shown */ Name, Phone FROM Account LIMIT 1];\n"
            "        System.debug(acc.Name);"
        )
        detection = detector.detect("C", source)[0]
        assert detection.metadata.original_fields == ["Id", "Name", "Phone"]
        assert detection.metadata.unused_fields == ["Phone"]


class TestLoopBodies:
    """A query inside a loop is read by the whole loop body."""

    def test_read_before_query_in_loop_body(self, detector):
        source = wrap(
            "        Account prev;\n"
            "        for (Integer i = 0; i < 3; i++) {\n"
            "            if (prev != null) System.debug(prev.Phone);\n"
            "            prev = [SELECT Id, Name, Phone, Website FROM Account LIMIT 1];\n"
            "            System.debug(prev.Name);\n"
            "        }"
        )
        detection = detector.detect("C", source)[0]
        assert detection.metadata.unused_fields == ["Website"]
        assert detection.metadata.is_in_loop
        assert detection.severity == Severity.HIGH

    def test_all_fields_read_across_iterations(self, detector):
        source = wrap(
            "        Account prev;\n"
            "        for (Integer i = 0; i < 3; i++) {\n"
            "            if (prev != null) System.debug(prev.Phone);\n"
            "            prev = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "            System.debug(prev.Name);\n"
            "        }"
        )
        assert detector.detect("C", source) == []

    def test_reads_before_loop_still_ignored(self, detector):
        source = wrap(
            "        Account prev;\n"
            "        System.debug(prev.Phone);\n"
            "        while (true) {\n"
            "            prev = [SELECT Id, Name, Phone FROM Account LIMIT 1];\n"
            "            System.debug(prev.Name);\n"
            "        }"
        )
        assert detector.detect("C", source)[0].metadata.unused_fields == ["Phone"]
