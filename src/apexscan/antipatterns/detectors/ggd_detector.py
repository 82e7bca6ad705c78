"""
Schema.getGlobalDescribe() Detector

Detects direct calls to ``Schema.getGlobalDescribe()``, which loads the
describe of every SObject in the org. Calls inside a loop repeat that cost
on every iteration and are graded HIGH; other calls are MEDIUM.

The call itself is found on the normalized text (so commented-out calls and
string literals never match). Loop and method context come from the
syntax tree, or from a brace scan when the source does not parse.
"""

import re
from typing import List, Optional, Tuple

from apexscan.ast.application.apex_ast_utils import enclosing_loop, node_at
from apexscan.ast.domain.models import ApexNode
from apexscan.antipatterns.detectors.base import BaseDetector, SourceContext
from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern, Severity
from apexscan.runtime.severity_calculator import static_severity
from apexscan.shared.utils.source_normalizer import line_of_offset

GGD_PATTERN = re.compile(r"\bSchema\s*\.\s*getGlobalDescribe\s*\(", re.IGNORECASE)

_LOOP_KEYWORDS = frozenset({"for", "while"})
_CONTROL_KEYWORDS = frozenset({"if", "for", "while", "catch", "switch", "when", "new", "runas"})
_WORD_BEFORE_RE = re.compile(r"(\w+)\s*$")


class GGDDetector(BaseDetector):
    """Detector for Schema.getGlobalDescribe() calls."""

    antipattern_type = AntipatternType.GGD

    def detect_ast(self, context: SourceContext, ast_root: ApexNode) -> List[DetectedAntipattern]:
        detections = []
        for match in GGD_PATTERN.finditer(context.normalized):
            node = node_at(ast_root, match.start())
            detections.append(self._build(
                context,
                match.start(),
                in_loop=enclosing_loop(node) is not None,
                method_name=self.method_name_of(node),
            ))
        return detections

    def detect_regex(self, context: SourceContext) -> List[DetectedAntipattern]:
        detections = []
        for match in GGD_PATTERN.finditer(context.normalized):
            in_loop, method_name = scan_enclosing_blocks(context.normalized, match.start())
            detections.append(self._build(context, match.start(), in_loop, method_name))
        return detections

    def _build(
        self,
        context: SourceContext,
        offset: int,
        in_loop: bool,
        method_name: Optional[str],
    ) -> DetectedAntipattern:
        line_number = line_of_offset(context.normalized, offset)
        return DetectedAntipattern(
            class_name=context.class_name,
            line_number=line_number,
            code_before=self.get_line(context.lines, line_number),
            severity=static_severity(in_loop, Severity.HIGH, Severity.MEDIUM),
            method_name=method_name,
        )


def scan_enclosing_blocks(text: str, offset: int) -> Tuple[bool, Optional[str]]:
    """
    Walk outward through the ``{`` blocks enclosing ``offset``.

    Returns whether any of them is a loop body and the name of the nearest
    enclosing method. Works on normalized text without a syntax tree.
    """
    in_loop = False
    method_name: Optional[str] = None
    depth = 0

    for i in range(offset - 1, -1, -1):
        ch = text[i]
        if ch == "}":
            depth += 1
        elif ch == "{":
            if depth > 0:
                depth -= 1
                continue
            keyword, has_parens = _block_header(text, i)
            if (keyword in _LOOP_KEYWORDS and has_parens) or keyword == "do":
                in_loop = True
            elif has_parens and keyword and keyword not in _CONTROL_KEYWORDS and method_name is None:
                method_name = keyword

    return in_loop, method_name


def _block_header(text: str, brace: int) -> Tuple[Optional[str], bool]:
    """Return the word introducing the block at ``brace`` and whether a ``(...)`` follows it."""
    j = brace - 1
    while j >= 0 and text[j].isspace():
        j -= 1
    if j < 0:
        return None, False

    has_parens = text[j] == ")"
    if has_parens:
        depth = 0
        while j >= 0:
            if text[j] == ")":
                depth += 1
            elif text[j] == "(":
                depth -= 1
                if depth == 0:
                    break
            j -= 1
        end = j
    else:
        end = j + 1

    match = _WORD_BEFORE_RE.search(text, 0, max(end, 0))
    return (match.group(1).lower() if match else None), has_parens
