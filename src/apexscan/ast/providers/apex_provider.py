"""
Apex AST provider.

Front door of the syntax tree adapter: parses Apex source with the
tree-sitter Apex grammar and always returns a ParseResult, never an
exception.
"""

import time

from tree_sitter_language_pack import get_parser

from apexscan.ast.domain.enums import ParseStatus
from apexscan.ast.domain.models import ParseError, ParseResult
from apexscan.ast.providers.apex_tree_builder import ApexTreeBuilder
from apexscan.shared.domain.exceptions import ApexParseError
from apexscan.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ApexASTProvider:
    """
    Tree-sitter Apex parser wrapper with timing and error capture.

    Status semantics:
    - SUCCESS: clean parse
    - PARTIAL: syntax errors confined to query literals, tree available
    - FAILED: syntax error anywhere else, no tree
    """

    name = "tree-sitter-apex"

    def __init__(self) -> None:
        self._parser = None

    def parse(self, source_code: str) -> ParseResult:
        """
        Parse Apex source code.

        Args:
            source_code: Apex class, trigger or anonymous Apex text

        Returns:
            ParseResult with AST and any errors
        """
        source = source_code or ""
        start_time = time.perf_counter()

        if self._parser is None:
            self._parser = get_parser("apex")

        try:
            tree = self._parser.parse(bytes(source, "utf8"))
            builder = ApexTreeBuilder(source)
            root = builder.build(tree.root_node)
        except ApexParseError as e:
            parse_time_ms = (time.perf_counter() - start_time) * 1000
            logger.debug("apex_parse_failed", error=str(e), line=e.line, column=e.column)
            return ParseResult(
                status=ParseStatus.FAILED,
                errors=[ParseError(message=str(e), line=e.line, column=e.column)],
                parse_time_ms=parse_time_ms,
            )
        except RecursionError:
            parse_time_ms = (time.perf_counter() - start_time) * 1000
            logger.warning("apex_parse_too_deep", source_length=len(source))
            return ParseResult(
                status=ParseStatus.FAILED,
                errors=[ParseError(message="Nesting too deep to parse")],
                parse_time_ms=parse_time_ms,
            )

        parse_time_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "apex_parse_completed",
            nodes=sum(1 for _ in root.walk()),
            warnings=len(builder.warnings),
            parse_time_ms=round(parse_time_ms, 2),
        )

        return ParseResult(
            status=ParseStatus.PARTIAL if builder.warnings else ParseStatus.SUCCESS,
            ast_root=root,
            errors=builder.warnings,
            parse_time_ms=parse_time_ms,
        )
