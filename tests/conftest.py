"""Shared test fixtures for apexscan test suite."""

import pytest


ACCOUNT_SERVICE = '''
public with sharing class AccountService {
    private static final Integer MAX_ROWS = 200;
    private List<Account> cachedAccounts;

    public String getPrimaryName(Id accountId) {
        Account acc = [SELECT Id, Name, Phone FROM Account WHERE Id = :accountId LIMIT 1];
        return acc.Name;
    }

    public void describeAll(List<String> objectNames) {
        for (String objectName : objectNames) {
            Schema.SObjectType t = Schema.getGlobalDescribe().get(objectName);
            System.debug(t);
        }
    }

    public List<Account> loadAll() {
        return [SELECT Id, Name FROM Account];
    }
}
'''


@pytest.fixture
def account_service_source():
    """Apex class with one instance of each antipattern."""
    return ACCOUNT_SERVICE


@pytest.fixture
def provider():
    """Apex AST provider."""
    from apexscan.ast.providers.apex_provider import ApexASTProvider

    return ApexASTProvider()


@pytest.fixture
def parse(provider):
    """Parse source and return the AST root (fails the test on a parse error)."""

    def _parse(source):
        result = provider.parse(source)
        assert result.has_tree, result.errors
        return result.ast_root

    return _parse


@pytest.fixture
def default_registry():
    """Registry with every antipattern module."""
    from apexscan.antipatterns.factory import build_default_registry

    return build_default_registry()


@pytest.fixture
def make_detection():
    """Factory for DetectedAntipattern instances."""
    from apexscan.antipatterns.types import DetectedAntipattern, Severity

    def _make(line_number=10, method_name="run", severity=Severity.MEDIUM, **kwargs):
        kwargs.setdefault("class_name", "AccountService")
        kwargs.setdefault("code_before", "Schema.getGlobalDescribe();")
        return DetectedAntipattern(
            line_number=line_number,
            method_name=method_name,
            severity=severity,
            **kwargs,
        )

    return _make
