"""
Tests for apexscan.ast.providers.apex_provider
"""

from apexscan.ast.domain.enums import ApexNodeKind, ParseStatus


class TestApexASTProvider:
    """Parse results never raise."""

    def test_success(self, provider, account_service_source):
        result = provider.parse(account_service_source)
        assert result.is_success()
        assert result.has_tree
        assert result.ast_root.kind == ApexNodeKind.COMPILATION_UNIT
        assert not result.has_errors()
        assert result.parse_time_ms >= 0

    def test_structural_error_is_failed(self, provider):
        result = provider.parse("public class Broken {\n    void a() {\n}")
        assert result.status == ParseStatus.FAILED
        assert result.ast_root is None
        assert not result.has_tree
        assert result.errors[0].severity == "error"

    def test_comment_swallowing_closing_brace_fails(self, provider):
        result = provider.parse("public class Foo {\n    /* dangling\n}")
        assert result.status == ParseStatus.FAILED

    def test_unterminated_comment_after_body_fails(self, provider):
        result = provider.parse("public class Foo { }\n/* dangling")
        assert result.status == ParseStatus.FAILED
        assert result.errors[0].line >= 1

    def test_syntax_error_location(self, provider):
        result = provider.parse("public class Foo {\n    void a() {\n        Integer x = ;\n    }\n}")
        assert result.status == ParseStatus.FAILED
        assert result.errors[0].line >= 2

    def test_empty_source(self, provider):
        result = provider.parse("")
        assert result.is_success()
        assert result.ast_root.children == []

    def test_none_source(self, provider):
        assert provider.parse(None).is_success()

    def test_deep_nesting_fails_gracefully(self, provider):
        depth = 5000
        source = "public class Deep { void run() " + "{ " * depth + "}" * depth + " }"
        result = provider.parse(source)
        assert result.status in (ParseStatus.SUCCESS, ParseStatus.FAILED)

    def test_parser_reused(self, provider):
        provider.parse("public class A { }")
        parser = provider._parser
        provider.parse("public class B { }")
        assert provider._parser is parser

    def test_provider_name(self, provider):
        assert provider.name == "tree-sitter-apex"

    def test_to_json(self, provider):
        data = provider.parse("public class Broken {").to_json()
        assert data["status"] == "failed"
        assert data["errors"][0]["severity"] == "error"
        assert "parseTimeMs" in data
