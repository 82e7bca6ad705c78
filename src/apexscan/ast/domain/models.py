"""
AST domain models.

Tree representation of an Apex compilation unit. Nodes carry their kind,
an optional name, source span and kind-specific attributes, plus a parent
link so that detectors can ask structural questions ("is this call inside a
loop?") by walking up instead of re-scanning text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from apexscan.ast.domain.enums import ApexNodeKind, ParseStatus
from apexscan.shared.domain.base_model import BaseDomainModel


@dataclass(frozen=True)
class SourceLocation:
    """
    Source span of a node.

    Lines and columns are 1-indexed; offsets are 0-indexed into the source
    text with ``end_offset`` exclusive.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_offset: int
    end_offset: int

    def contains(self, offset: int) -> bool:
        """Check if an offset falls inside the span."""
        return self.start_offset <= offset < self.end_offset


@dataclass(eq=False)
class ApexNode:
    """
    Apex syntax tree node.

    Attributes by kind:
    - TYPE_DECLARATION: ``type_kind``, ``sobject`` (triggers)
    - FIELD_DECLARATION / LOCAL_VARIABLE_DECLARATION: ``type``, ``is_static``
    - METHOD_DECLARATION: ``parameters``, ``return_type``, ``is_constructor``
    - ENHANCED_FOR_STATEMENT: ``type``; ``name`` is the loop variable
    - DML_STATEMENT: ``name`` is the operation (insert, update...)
    - EXPRESSION_STATEMENT: ``assignment_target``, ``target_qualifier``
    - EXPRESSION: ``role`` (initializer, iterable, condition...)
    - QUERY: ``text``, ``query_language``
    """

    kind: ApexNodeKind
    location: SourceLocation
    name: str | None = None
    children: list[ApexNode] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)
    parent: ApexNode | None = field(default=None, repr=False)

    def add_child(self, child: ApexNode) -> ApexNode:
        """Attach a child node and set its parent link."""
        child.parent = self
        self.children.append(child)
        return child

    def walk(self) -> Iterator[ApexNode]:
        """Iterate over this node and its descendants (pre-order)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_nodes(self, kind: ApexNodeKind) -> list[ApexNode]:
        """
        Find all nodes of a specific kind (recursive, document order).

        Args:
            kind: Kind of nodes to find

        Returns:
            List of matching nodes
        """
        return [node for node in self.walk() if node.kind == kind]

    def find_by_name(self, name: str) -> list[ApexNode]:
        """Find all nodes with a specific name (case-insensitive)."""
        lowered = name.lower()
        return [node for node in self.walk() if node.name and node.name.lower() == lowered]

    def ancestors(self) -> Iterator[ApexNode]:
        """Iterate over parents, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def enclosing(self, kinds: Iterable[ApexNodeKind]) -> ApexNode | None:
        """Return the nearest ancestor whose kind is in ``kinds``."""
        wanted = frozenset(kinds)
        for node in self.ancestors():
            if node.kind in wanted:
                return node
        return None

    def text(self, source: str) -> str:
        """Slice the node's text out of the source it was parsed from."""
        return source[self.location.start_offset:self.location.end_offset]

    @property
    def start_line(self) -> int:
        return self.location.start_line


@dataclass
class ParseError(BaseDomainModel):
    """Parse error information."""

    message: str
    line: int = 0
    column: int = 0
    severity: str = "error"  # error, warning


@dataclass
class ParseResult(BaseDomainModel):
    """
    Result of an Apex parse.

    ``ast_root`` is set for SUCCESS and PARTIAL parses and None on FAILED.
    """

    status: ParseStatus
    ast_root: ApexNode | None = None
    errors: list[ParseError] = field(default_factory=list)
    parse_time_ms: float = 0.0

    def is_success(self) -> bool:
        """Check if parsing was successful."""
        return self.status == ParseStatus.SUCCESS

    def is_partial(self) -> bool:
        """Check if parsing was partial (has errors but AST available)."""
        return self.status == ParseStatus.PARTIAL

    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    @property
    def has_tree(self) -> bool:
        return self.ast_root is not None and self.status != ParseStatus.FAILED
