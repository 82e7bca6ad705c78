"""
SOQL text model.

Understands just enough of an inline SOQL literal to answer the detectors'
questions: what does the outer SELECT project, does the outer query filter
or limit, does it nest sub-queries, and what does it look like with some
projected fields removed. Structure is read from a normalized copy (string
literals blanked) so that quoted text never looks like a keyword; slices
for rewriting come from the raw text, which has identical offsets.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from apexscan.shared.utils.source_normalizer import normalize_source

SYSTEM_FIELDS = frozenset({"id"})

# Wrappers that keep the wrapped field's value addressable under its own name.
_TRANSPARENT_FUNCTIONS = frozenset({"tolabel", "format", "convertcurrency"})

_SELECT_RE = re.compile(r"\bselect\b", re.IGNORECASE)
_FROM_RE = re.compile(r"\bfrom\b", re.IGNORECASE)
_WHERE_RE = re.compile(r"\bwhere\b", re.IGNORECASE)
_LIMIT_RE = re.compile(r"\blimit\b", re.IGNORECASE)
_TYPEOF_RE = re.compile(r"\btypeof\b", re.IGNORECASE)
_END_RE = re.compile(r"\bend\b", re.IGNORECASE)
_FUNCTION_RE = re.compile(r"^(\w+)\s*\((.*)\)$", re.DOTALL)
_COUNT_RE = re.compile(r"^count\s*\(", re.IGNORECASE)


@dataclass(frozen=True)
class SelectItem:
    """
    One entry of the outer SELECT list.

    ``name`` is what Apex code reads the value as: the alias if one is
    given, the field path for plain or wrapped fields, or the expression
    text itself for aggregates.
    """

    name: str
    expression: str
    raw: str
    start: int
    end: int
    is_aggregate: bool = False
    is_subquery: bool = False
    is_typeof: bool = False

    @property
    def is_system_field(self) -> bool:
        return self.name.lower() in SYSTEM_FIELDS or bool(_COUNT_RE.match(self.expression))


class SOQLQuery:
    """
    Parsed view of an inline SOQL literal (with or without brackets).

    Example:
        >>> query = SOQLQuery("[SELECT Id, Name FROM Account LIMIT 1]")
        >>> query.field_names
        ['Id', 'Name']
    """

    def __init__(self, text: str):
        self.text = text
        self.normalized = normalize_source(text)

        select = _SELECT_RE.search(self.normalized)
        self.select_end = select.end() if select else -1
        self.from_start = self._find_top_level_from() if select else -1
        self.items: list[SelectItem] = self._split_items() if self.is_valid else []

    @property
    def is_valid(self) -> bool:
        return self.select_end >= 0 and self.from_start >= 0

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def _find_top_level_from(self) -> int:
        depth = 0
        text = self.normalized
        i = self.select_end
        while i < len(text):
            ch = text[i]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            elif depth == 0:
                match = _FROM_RE.match(text, i)
                if match and (i == 0 or not (text[i - 1].isalnum() or text[i - 1] == "_")):
                    return i
            i += 1
        return -1

    def _split_items(self) -> list[SelectItem]:
        text = self.normalized
        spans: list[tuple[int, int]] = []
        depth = 0
        start = self.select_end
        i = self.select_end

        while i < self.from_start:
            ch = text[i]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            elif depth == 0 and _TYPEOF_RE.match(text, i):
                end = _END_RE.search(text, i, self.from_start)
                if end:
                    i = end.end()
                    continue
            elif ch == "," and depth == 0:
                spans.append((start, i))
                start = i + 1
            i += 1
        spans.append((start, self.from_start))

        items = []
        for begin, end in spans:
            raw = self.text[begin:end]
            if not self.normalized[begin:end].strip():
                continue
            lead = len(raw) - len(raw.lstrip())
            trail = len(raw.rstrip())
            items.append(self._make_item(begin + lead, begin + trail))
        return items

    def _make_item(self, start: int, end: int) -> SelectItem:
        raw = self.text[start:end]
        segment = self.normalized[start:end]

        # Comments around the item stay in ``raw`` but are not part of what it reads.
        code_start = start + len(segment) - len(segment.lstrip())
        code_end = start + len(segment.rstrip())
        code = self.text[code_start:code_end]
        norm = self.normalized[code_start:code_end]

        if norm.startswith("("):
            return SelectItem(name=code, expression=code, raw=raw, start=start, end=end, is_subquery=True)

        if _TYPEOF_RE.match(norm):
            parts = norm.split()
            name = parts[1] if len(parts) > 1 else code
            return SelectItem(name=name, expression=code, raw=raw, start=start, end=end, is_typeof=True)

        expression, alias = self._split_alias(code, norm)
        name = alias or expression
        is_aggregate = False

        function = _FUNCTION_RE.match(expression)
        if function:
            if function.group(1).lower() in _TRANSPARENT_FUNCTIONS:
                name = alias or function.group(2).strip()
            else:
                is_aggregate = True

        return SelectItem(
            name=re.sub(r"\s+", "", name),
            expression=expression,
            raw=raw,
            start=start,
            end=end,
            is_aggregate=is_aggregate,
        )

    @staticmethod
    def _split_alias(raw: str, norm: str) -> tuple[str, str | None]:
        """Split ``expr [AS] alias`` where the alias follows the last top-level token."""
        if norm.endswith(")"):
            return raw, None
        close = norm.rfind(")")
        tail = norm[close + 1:] if close >= 0 else norm
        tokens = tail.split()
        if close < 0 and len(tokens) < 2:
            return raw, None
        if close >= 0 and not tokens:
            return raw, None

        alias = tokens[-1]
        expression = raw[:len(norm.rstrip()) - len(alias)].rstrip()
        if expression.lower().endswith(" as") or expression.lower() == "as":
            expression = expression[:-2].rstrip()
        return expression, alias

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def field_names(self) -> list[str]:
        """Projected names in SELECT order, sub-queries excluded."""
        return [item.name for item in self.items if not item.is_subquery]

    @property
    def candidate_items(self) -> list[SelectItem]:
        """Items eligible for unused-field analysis (no sub-queries, no system fields)."""
        return [item for item in self.items if not item.is_subquery and not item.is_system_field]

    @property
    def has_nested_subquery(self) -> bool:
        return len(_SELECT_RE.findall(self.normalized)) > 1

    def _outer_tail(self) -> str:
        """Text from FROM onward with parenthesized content blanked."""
        if not self.is_valid:
            return ""
        out = []
        depth = 0
        for ch in self.normalized[self.from_start:]:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                out.append(" ")
                continue
            out.append(" " if depth > 0 else ch)
        return "".join(out)

    @property
    def has_where(self) -> bool:
        return bool(_WHERE_RE.search(self._outer_tail()))

    @property
    def has_limit(self) -> bool:
        return bool(_LIMIT_RE.search(self._outer_tail()))

    @property
    def from_clause(self) -> str:
        """Raw text from the outer FROM to the end, byte for byte."""
        return self.text[self.from_start:] if self.is_valid else ""

    def rewrite(self, unused_fields: Iterable[str]) -> str:
        """
        Return the query with ``unused_fields`` dropped from the outer SELECT.

        Kept items retain their original text; everything from FROM onward
        is untouched. Returns ``""`` when the query nests sub-queries or when
        no projected item would remain.
        """
        if not self.is_valid or not self.items or self.has_nested_subquery:
            return ""

        unused = {name.lower() for name in unused_fields}
        kept = [item for item in self.items if item.name.lower() not in unused]
        if not kept:
            return ""

        first, last = self.items[0], self.items[-1]
        return self.text[:first.start] + ", ".join(item.raw for item in kept) + self.text[last.end:]
