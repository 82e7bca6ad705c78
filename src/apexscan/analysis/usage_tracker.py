"""
Field usage tracking for SOQL results.

Given the variable a query result is bound to and the code that runs after
the query, decides which projected fields are actually read. Reads are
followed through for-each aliases, indexed access and bind expressions of
later queries. Whole-record hand-offs (return, call arguments, insert,
dynamic field access) are flagged as complete usage, which makes removing
any field unsafe.

All text passed in is expected to be normalized (comments and string
literals blanked) so that quoted text never counts as a read.
"""

from __future__ import annotations

import re
from typing import Iterable

from apexscan.antipatterns.types import QueryProjectionMetadata
from apexscan.soql.parser import SOQLQuery
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

_THIS = r"(?:this\s*\.\s*)?"
_QUALIFIER = r"(?<![\w.])" + _THIS
_ACCESSOR = r"(?:\s*\[[^\[\]]*\]|\s*\??\.\s*get\s*\([^()]*\))?"
_PATH = r"\s*\??\.\s*([A-Za-z_]\w*(?:\s*\??\.\s*[A-Za-z_]\w*)*)"
_ASSIGNMENT_RE = re.compile(r"\s*=(?!=)")
_DML_KEEPING_ID = r"(?:update|delete|upsert|undelete|merge)"
_WHOLE_RECORD_METHODS = r"(?:getSObject|getSObjects|getPopulatedFieldsAsMap|clone|deepClone)"


def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


def field_matches_path(field: str, path: str) -> bool:
    """
    Check whether reading ``path`` on a record reads ``field``.

    ``acc.Name.length()`` reads ``Name``; ``con.Account`` reads the
    relationship behind ``Account.Name``.
    """
    f = field.lower()
    p = re.sub(r"[\s?]+", "", path).lower()
    return p == f or p.startswith(f + ".") or f.startswith(p + ".")


class FieldUsageTracker:
    """
    Tracks how one variable is used in a piece of (normalized) code.

    Example:
        >>> tracker = FieldUsageTracker("accs", "for (Account a : accs) { x = a.Name; }")
        >>> tracker.names
        ['accs', 'a']
    """

    def __init__(self, variable: str, text: str):
        self.variable = variable
        self.text = text
        self.names = [variable] + [a for a in self.find_loop_aliases() if a.lower() != variable.lower()]

    def find_loop_aliases(self) -> list[str]:
        """Loop variables of ``for (T x : variable)`` (and ``variable.values()``)."""
        pattern = _compile(
            r"\bfor\s*\(\s*(?:final\s+)?[\w.<>,\s\[\]]+?\s+(\w+)\s*:\s*"
            + _THIS
            + re.escape(self.variable)
            + r"(?:\s*\.\s*values\s*\(\s*\))?\s*\)"
        )
        aliases: list[str] = []
        for match in pattern.finditer(self.text):
            if match.group(1) not in aliases:
                aliases.append(match.group(1))
        return aliases

    def find_read_paths(self) -> list[str]:
        """Member paths read on the variable or its aliases (assignment targets excluded)."""
        paths: list[str] = []
        for name in self.names:
            pattern = _compile(_QUALIFIER + re.escape(name) + r"\b" + _ACCESSOR + _PATH)
            for match in pattern.finditer(self.text):
                if _ASSIGNMENT_RE.match(self.text, match.end()):
                    continue
                paths.append(match.group(1))
        return paths

    def detect_complete_usage(self) -> bool:
        """
        Check whether a whole record (or the whole list) leaves field-level reads.

        Size checks, null checks, for-each iteration, bind variables and
        update/delete/upsert DML only need the record identity and do not count.
        """
        text = self._strip_identity_only_usages()
        for name in self.names:
            n = re.escape(name)
            patterns = [
                _QUALIFIER + n + r"\s*[;,)]",
                _QUALIFIER + n + r"\s*\[[^\[\]]*\]\s*[;,)]",
                _QUALIFIER + n + r"\s*\??\.\s*get\s*\([^()]*\)(?!\s*\??\.)",
                _QUALIFIER + n + r"\s*\??\.\s*" + _WHOLE_RECORD_METHODS + r"\s*\(",
                r"\binsert\s+" + _QUALIFIER + n + r"\b",
            ]
            if any(_compile(p).search(text) for p in patterns):
                return True
        return False

    def _strip_identity_only_usages(self) -> str:
        text = self.text
        for name in self.names:
            n = re.escape(name)
            for pattern in (
                r"\bfor\s*\([^:;()]*:\s*" + _THIS + n
                + r"(?:\s*\.\s*values\s*\(\s*\))?\s*\)",
                _QUALIFIER + n + r"\s*\??\.\s*(?:isEmpty|size)\s*\(\s*\)",
                _QUALIFIER + n + r"\s*[!=]=\s*null\b",
                r"\bnull\s*[!=]=\s*" + _QUALIFIER + n + r"\b",
                r":\s*" + n + r"\b(?!\s*\??[.\[])",
                r"\b" + _DML_KEEPING_ID + r"\s+" + n + r"\b(?!\s*\??[.\[])",
                r"\bDatabase\s*\.\s*" + _DML_KEEPING_ID + r"\s*\(\s*" + n + r"\b(?!\s*\??[.\[])",
            ):
                text = _compile(pattern).sub(" ", text)
        return text

    def is_returned(self) -> bool:
        """``return variable;`` or ``return variable[i];``."""
        pattern = _compile(
            r"\breturn\s+" + _THIS + re.escape(self.variable) + r"\s*(?:\[[^\[\]]*\])?\s*;"
        )
        return bool(pattern.search(self.text))

    def find_bind_paths(self, queries: Iterable[str]) -> list[str]:
        """Paths of ``:variable.Field`` bind expressions in other queries."""
        paths: list[str] = []
        for query_text in queries:
            for name in self.names:
                pattern = _compile(r":\s*" + _THIS + re.escape(name) + r"\b" + _ACCESSOR + _PATH)
                paths.extend(match.group(1) for match in pattern.finditer(query_text))
        return paths


def track_usage(
    query: SOQLQuery,
    assigned_variable: str,
    rest_of_method_text: str,
    later_queries: Iterable[str] = (),
    *,
    is_class_member: bool = False,
    is_in_loop: bool = False,
) -> QueryProjectionMetadata:
    """
    Compute which projected fields of ``query`` are never read.

    Args:
        query: Parsed query whose result is tracked
        assigned_variable: Variable holding the result (or the for-each variable)
        rest_of_method_text: Normalized code following the query
        later_queries: Normalized text of later queries in the same method
        is_class_member: Whether the variable is a field of the enclosing type
        is_in_loop: Whether the query runs inside a loop

    Returns:
        QueryProjectionMetadata with ``unused_fields`` in SELECT order
    """
    tracker = FieldUsageTracker(assigned_variable, rest_of_method_text)
    read_paths = tracker.find_read_paths()
    bind_paths = tracker.find_bind_paths(later_queries)
    candidates = query.candidate_items

    used_in_later = [
        item.name for item in candidates
        if any(field_matches_path(item.name, path) for path in bind_paths)
    ]
    unused = [
        item.name for item in candidates
        if item.name not in used_in_later
        and not any(field_matches_path(item.name, path) for path in read_paths)
    ]

    metadata = QueryProjectionMetadata(
        original_fields=query.field_names,
        unused_fields=unused,
        assigned_variable=assigned_variable,
        is_in_loop=is_in_loop,
        is_returned=tracker.is_returned(),
        is_class_member=is_class_member,
        has_nested_queries=query.has_nested_subquery,
        used_in_later_queries=used_in_later,
        complete_usage_detected=tracker.detect_complete_usage(),
    )

    logger.debug(
        "field_usage_tracked",
        variable=assigned_variable,
        aliases=tracker.names[1:],
        original=len(metadata.original_fields),
        unused=len(unused),
        complete_usage=metadata.complete_usage_detected,
    )
    return metadata
