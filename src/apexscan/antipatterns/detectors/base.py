"""
Base Detector Class

Abstract base for all antipattern detectors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from apexscan.ast.application import apex_ast_utils
from apexscan.ast.domain.models import ApexNode
from apexscan.ast.providers.apex_provider import ApexASTProvider
from apexscan.antipatterns.types import AntipatternType, DetectedAntipattern
from apexscan.shared.infrastructure.logging import get_logger
from apexscan.shared.utils.source_normalizer import normalize_source

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceContext:
    """One class under analysis: raw text, normalized text and lines."""

    class_name: str
    source: str
    normalized: str
    lines: List[str]

    @classmethod
    def build(cls, class_name: str, source: str) -> SourceContext:
        return cls(
            class_name=class_name,
            source=source,
            normalized=normalize_source(source),
            lines=source.splitlines(),
        )


class BaseDetector(ABC):
    """
    Base class for antipattern detectors.

    ``detect`` never raises: malformed source yields an empty list and
    unexpected failures are logged and swallowed at this boundary.
    """

    antipattern_type: AntipatternType

    def __init__(self, provider: Optional[ApexASTProvider] = None):
        self.provider = provider or ApexASTProvider()

    def get_antipattern_type(self) -> AntipatternType:
        return self.antipattern_type

    @abstractmethod
    def detect_ast(self, context: SourceContext, ast_root: ApexNode) -> List[DetectedAntipattern]:
        """Detect antipatterns using the Apex syntax tree."""
        pass

    @abstractmethod
    def detect_regex(self, context: SourceContext) -> List[DetectedAntipattern]:
        """Detect antipatterns on normalized text (fallback when parsing fails)."""
        pass

    def detect(self, class_name: str, source: str) -> List[DetectedAntipattern]:
        """Detect antipatterns using the AST if the source parses, else regex."""
        if not source or not source.strip():
            return []

        try:
            context = SourceContext.build(class_name, source)
            result = self.provider.parse(source)
            if result.has_tree:
                return self.detect_ast(context, result.ast_root)

            logger.debug(
                "ast_unavailable_using_fallback",
                detector=self.__class__.__name__,
                class_name=class_name,
                errors=[e.message for e in result.errors],
            )
            return self.detect_regex(context)
        except Exception as e:
            logger.warning(
                "detector_failed",
                detector=self.__class__.__name__,
                class_name=class_name,
                error=str(e),
            )
            return []

    @staticmethod
    def get_line(lines: List[str], line_num: int) -> str:
        """Get a line from the file (1-indexed)."""
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1].strip()
        return ""

    @staticmethod
    def method_name_of(node: ApexNode) -> Optional[str]:
        method = apex_ast_utils.enclosing_method(node)
        return method.name if method else None
