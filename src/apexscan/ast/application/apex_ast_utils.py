"""
Structural queries over the Apex syntax tree.

Detectors ask "which loop encloses this call?" or "is this name a class
field?" through these helpers instead of scanning text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from apexscan.ast.domain.enums import LOOP_KINDS, ApexNodeKind, TypeDeclarationKind
from apexscan.ast.domain.models import ApexNode
from apexscan.ast.providers.apex_provider import ApexASTProvider


@dataclass
class ApexClassInfo:
    """Summary of the outermost type in a compilation unit."""

    name: str | None
    type_kind: TypeDeclarationKind | None
    method_names: list[str] = field(default_factory=list)
    field_names: list[str] = field(default_factory=list)
    query_count: int = 0
    loop_count: int = 0


def get_methods(root: ApexNode) -> list[ApexNode]:
    """All method, constructor and property accessor declarations."""
    return root.find_nodes(ApexNodeKind.METHOD_DECLARATION)


def get_loops(root: ApexNode) -> list[ApexNode]:
    """All for, for-each, while and do-while statements."""
    return [node for node in root.walk() if node.kind in LOOP_KINDS]


def get_queries(root: ApexNode, query_language: str | None = "SOQL") -> list[ApexNode]:
    """Inline query literals, optionally filtered by language (SOQL/SOSL)."""
    queries = root.find_nodes(ApexNodeKind.QUERY)
    if query_language is None:
        return queries
    return [q for q in queries if q.attributes.get("query_language") == query_language]


def get_dml_statements(root: ApexNode) -> list[ApexNode]:
    """DML statements (insert, update, delete, upsert, undelete, merge)."""
    return root.find_nodes(ApexNodeKind.DML_STATEMENT)


def node_at(root: ApexNode, offset: int) -> ApexNode:
    """Return the deepest node whose span contains ``offset``."""
    node = root
    while True:
        child = next((c for c in node.children if c.location.contains(offset)), None)
        if child is None:
            return node
        node = child


def enclosing_loop(node: ApexNode) -> ApexNode | None:
    """
    Nearest loop executing ``node`` repeatedly.

    The iterable of a for-each loop is evaluated once, so a node inside it
    is not considered to be inside that loop (outer loops still count).
    """
    child = node
    for ancestor in node.ancestors():
        if ancestor.kind in LOOP_KINDS and not _is_iterable_of(child, ancestor):
            return ancestor
        child = ancestor
    return None


def outermost_loop(node: ApexNode) -> ApexNode | None:
    """Outermost loop executing ``node`` repeatedly (same iterable rule as enclosing_loop)."""
    outermost = None
    loop = enclosing_loop(node)
    while loop is not None:
        outermost = loop
        loop = enclosing_loop(loop)
    return outermost


def _is_iterable_of(child: ApexNode, loop: ApexNode) -> bool:
    return (
        loop.kind == ApexNodeKind.ENHANCED_FOR_STATEMENT
        and child.kind == ApexNodeKind.EXPRESSION
        and child.attributes.get("role") == "iterable"
    )


def enclosing_method(node: ApexNode) -> ApexNode | None:
    return node.enclosing([ApexNodeKind.METHOD_DECLARATION])


def enclosing_type(node: ApexNode) -> ApexNode | None:
    return node.enclosing([ApexNodeKind.TYPE_DECLARATION])


def field_names(type_node: ApexNode | None) -> set[str]:
    """Lower-cased names of fields and properties declared directly in a type."""
    if type_node is None:
        return set()
    return {
        declarator.name.lower()
        for member in type_node.children
        if member.kind == ApexNodeKind.FIELD_DECLARATION
        for declarator in member.children
        if declarator.kind == ApexNodeKind.VARIABLE_DECLARATOR and declarator.name
    }


def local_names(method: ApexNode | None) -> set[str]:
    """Lower-cased parameters, local variables and loop variables of a method."""
    if method is None:
        return set()
    names = {name.lower() for name in method.attributes.get("parameters", [])}
    for node in method.walk():
        if node.kind == ApexNodeKind.LOCAL_VARIABLE_DECLARATION:
            names.update(d.name.lower() for d in node.children if d.kind == ApexNodeKind.VARIABLE_DECLARATOR)
        elif node.kind == ApexNodeKind.ENHANCED_FOR_STATEMENT and node.name:
            names.add(node.name.lower())
    return names


def get_class_info(root: ApexNode) -> ApexClassInfo:
    """Summarize the first type declared in the unit (or the anonymous block)."""
    type_node = next((c for c in root.children if c.kind == ApexNodeKind.TYPE_DECLARATION), None)
    scope = type_node or root
    return ApexClassInfo(
        name=type_node.name if type_node else None,
        type_kind=type_node.attributes.get("type_kind") if type_node else None,
        method_names=[m.name for m in get_methods(scope) if m.name],
        field_names=sorted(field_names(type_node)),
        query_count=len(get_queries(scope, None)),
        loop_count=len(get_loops(scope)),
    )


def is_valid_apex(source: str) -> bool:
    """Check whether the source parses to a usable tree."""
    return ApexASTProvider().parse(source).has_tree
