"""
Tree-sitter to ApexNode conversion.

Walks the concrete syntax tree produced by the tree-sitter Apex grammar and
folds it into the closed set of ApexNode kinds the detectors query. Only
statement and declaration structure is kept; expressions become opaque
EXPRESSION spans whose children are the query literals inside them.

Syntax errors outside query literals raise ApexParseError. Errors inside a
query literal are collected as warnings and the tree is still returned.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import Any, Iterator

from apexscan.ast.domain.enums import ApexNodeKind, TypeDeclarationKind
from apexscan.ast.domain.models import ApexNode, ParseError, SourceLocation
from apexscan.shared.domain.exceptions import ApexParseError

_TYPE_DECLARATIONS = {
    "class_declaration": TypeDeclarationKind.CLASS,
    "interface_declaration": TypeDeclarationKind.INTERFACE,
    "enum_declaration": TypeDeclarationKind.ENUM,
    "trigger_declaration": TypeDeclarationKind.TRIGGER,
}

_LOOPS = {
    "while_statement": ApexNodeKind.WHILE_STATEMENT,
    "do_statement": ApexNodeKind.DO_WHILE_STATEMENT,
}

_SIMPLE_STATEMENTS = {
    "throw_statement": "throw",
    "break_statement": "break",
    "continue_statement": "continue",
}

_COMMENTS = frozenset({"line_comment", "block_comment"})
_STATIC_RE = re.compile(r"\bstatic\b", re.IGNORECASE)
_WORD_RE = re.compile(r"[A-Za-z]+")


class ApexTreeBuilder:
    """
    Build an ApexNode tree from a tree-sitter parse of ``source``.

    Offsets in the result are character offsets into ``source``; tree-sitter
    reports byte offsets into its UTF-8 encoding.
    """

    def __init__(self, source: str):
        self.source = source
        self.warnings: list[ParseError] = []
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]
        self._char_offsets: list[int] | None = None
        if not source.isascii():
            offsets = []
            for index, char in enumerate(source):
                offsets.extend([index] * len(char.encode("utf-8")))
            offsets.append(len(source))
            self._char_offsets = offsets

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def _offset(self, byte_offset: int) -> int:
        if self._char_offsets is None:
            return byte_offset
        return self._char_offsets[byte_offset]

    def _position(self, offset: int) -> tuple[int, int]:
        line = bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1] + 1

    def _span(self, start: int, end: int) -> SourceLocation:
        start_line, start_column = self._position(start)
        end_line, end_column = self._position(end)
        return SourceLocation(start_line, start_column, end_line, end_column, start, end)

    def _location(self, node: Any, last: Any = None) -> SourceLocation:
        last = last or node
        return self._span(self._offset(node.start_byte), self._offset(last.end_byte))

    def _text(self, node: Any) -> str:
        return self.source[self._offset(node.start_byte):self._offset(node.end_byte)]

    def _make(self, kind: ApexNodeKind, node: Any, name: str | None = None, **attributes) -> ApexNode:
        return ApexNode(kind=kind, location=self._location(node), name=name, attributes=attributes)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def build(self, root: Any) -> ApexNode:
        """Convert the tree-sitter root node into a COMPILATION_UNIT."""
        if root.has_error:
            self._check_errors(root)

        unit = ApexNode(kind=ApexNodeKind.COMPILATION_UNIT, location=self._span(0, len(self.source)))
        for child in _named(root):
            if child.type in _TYPE_DECLARATIONS:
                unit.add_child(self._type_declaration(child))
            elif child.type == "method_declaration":
                unit.add_child(self._method(child))
            else:
                _add(unit, self._statement(child))
        return unit

    def _check_errors(self, root: Any) -> None:
        first_error: ApexParseError | None = None
        for node in _error_nodes(root):
            line, column = self._position(self._offset(node.start_byte))
            message = f"Missing '{node.type}'" if node.is_missing else "Syntax error"
            if _inside_query(node):
                self.warnings.append(
                    ParseError(message=f"{message} in query", line=line, column=column, severity="warning")
                )
            elif first_error is None:
                first_error = ApexParseError(message, line=line, column=column)

        if first_error is None and not self.warnings:
            first_error = ApexParseError("Syntax error", line=1, column=1)
        if first_error is not None:
            raise first_error

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _type_declaration(self, node: Any) -> ApexNode:
        type_kind = _TYPE_DECLARATIONS[node.type]
        attributes: dict[str, Any] = {"type_kind": type_kind}
        if type_kind == TypeDeclarationKind.TRIGGER:
            attributes["sobject"] = self._field_text(node, "object")

        declaration = self._make(
            ApexNodeKind.TYPE_DECLARATION, node, name=self._field_text(node, "name"), **attributes
        )
        body = node.child_by_field_name("body")
        if body is None or type_kind == TypeDeclarationKind.ENUM:
            return declaration

        if type_kind == TypeDeclarationKind.TRIGGER:
            block = _first_of(body, "block")
            declaration.add_child(self._block(block or body))
            return declaration

        for member in _named(body):
            self._member(declaration, member)
        return declaration

    def _member(self, declaration: ApexNode, node: Any) -> None:
        kind = node.type
        if kind in _TYPE_DECLARATIONS:
            declaration.add_child(self._type_declaration(node))
        elif kind in ("method_declaration", "constructor_declaration"):
            declaration.add_child(self._method(node))
        elif kind in ("field_declaration", "constant_declaration"):
            declaration.add_child(self._field_declaration(node))
        elif kind == "static_initializer":
            block = _first_of(node, "block")
            if block is not None:
                declaration.add_child(self._block(block))
        elif kind == "block":
            declaration.add_child(self._block(node))

    def _method(self, node: Any) -> ApexNode:
        is_constructor = node.type == "constructor_declaration"
        method = self._make(
            ApexNodeKind.METHOD_DECLARATION,
            node,
            name=self._field_text(node, "name"),
            parameters=self._parameters(node.child_by_field_name("parameters")),
            return_type=None if is_constructor else self._field_text(node, "type"),
            is_constructor=is_constructor,
            is_static=self._is_static(node),
        )
        body = node.child_by_field_name("body")
        if body is not None:
            method.add_child(self._block(body))
        return method

    def _parameters(self, node: Any) -> list[str]:
        if node is None:
            return []
        return [
            self._field_text(parameter, "name")
            for parameter in _named(node)
            if parameter.type == "formal_parameter"
        ]

    def _field_declaration(self, node: Any) -> ApexNode:
        type_text = self._field_text(node, "type")
        is_static = self._is_static(node)
        accessors = _first_of(node, "accessor_list")

        declaration = self._make(ApexNodeKind.FIELD_DECLARATION, node, type=type_text, is_static=is_static)
        if accessors is not None:
            declaration.attributes["is_property"] = True

        names = []
        for declarator in node.children_by_field_name("declarator"):
            names.append(self._field_text(declarator, "name"))
            declaration.add_child(self._declarator(declarator))

        if accessors is not None:
            for accessor in _named(accessors):
                if accessor.type != "accessor_declaration":
                    continue
                body = accessor.child_by_field_name("body") or _first_of(accessor, "block")
                if body is None:
                    continue
                keyword = accessor.child_by_field_name("accessor")
                word = self._text(keyword) if keyword is not None else _leading_accessor(self._text(accessor))
                method = self._make(
                    ApexNodeKind.METHOD_DECLARATION,
                    accessor,
                    name=names[0] if names else None,
                    accessor=word.lower(),
                    parameters=["value"] if word.lower() == "set" else [],
                    return_type=type_text,
                    is_constructor=False,
                    is_static=is_static,
                )
                method.add_child(self._block(body))
                declaration.add_child(method)
        return declaration

    def _local_declaration(self, node: Any) -> ApexNode:
        declaration = self._make(
            ApexNodeKind.LOCAL_VARIABLE_DECLARATION,
            node,
            type=self._field_text(node, "type"),
            is_static=self._is_static(node),
        )
        for declarator in node.children_by_field_name("declarator"):
            declaration.add_child(self._declarator(declarator))
        return declaration

    def _declarator(self, node: Any) -> ApexNode:
        declarator = self._make(ApexNodeKind.VARIABLE_DECLARATOR, node, name=self._field_text(node, "name"))
        _add(declarator, self._expression(node.child_by_field_name("value"), "initializer"))
        return declarator

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _block(self, node: Any) -> ApexNode:
        block = self._make(ApexNodeKind.BLOCK, node)
        for child in _named(node):
            _add(block, self._statement(child))
        return block

    def _statement(self, node: Any) -> ApexNode | None:
        if node is None:
            return None

        kind = node.type
        if kind in ("block", "constructor_body"):
            return self._block(node)
        if kind == "local_variable_declaration":
            return self._local_declaration(node)
        if kind == "expression_statement":
            return self._expression_statement(node)
        if kind == "explicit_constructor_invocation":
            statement = self._make(ApexNodeKind.EXPRESSION_STATEMENT, node, assignment_target=None, target_qualifier=None)
            _add(statement, self._expression(node, "statement"))
            return statement
        if kind == "if_statement":
            return self._if(node)
        if kind == "for_statement":
            return self._for(node)
        if kind == "enhanced_for_statement":
            return self._enhanced_for(node)
        if kind in _LOOPS:
            return self._loop(node)
        if kind == "try_statement":
            return self._try(node)
        if kind == "switch_expression":
            return self._switch(node)
        if kind == "return_statement":
            statement = self._make(ApexNodeKind.RETURN_STATEMENT, node)
            _add(statement, self._expression(_first_named(node), "return"))
            return statement
        if kind in _SIMPLE_STATEMENTS:
            statement = self._make(ApexNodeKind.SIMPLE_STATEMENT, node, name=_SIMPLE_STATEMENTS[kind])
            _add(statement, self._expression(_first_named(node), "operand"))
            return statement
        if kind == "run_as_statement":
            return self._run_as(node)
        if kind == "dml_expression":
            return self._dml(node, node)
        return None

    def _expression_statement(self, node: Any) -> ApexNode:
        expression = _first_named(node)
        if expression is not None and expression.type == "dml_expression":
            return self._dml(node, expression)
        if expression is not None and expression.type == "switch_expression":
            return self._switch(expression)

        target: str | None = None
        qualifier: str | None = None
        value = expression
        if expression is not None and expression.type == "assignment_expression":
            operator = expression.child_by_field_name("operator")
            left = expression.child_by_field_name("left")
            if operator is not None and self._text(operator).strip() == "=" and left is not None:
                if left.type == "identifier":
                    target = self._text(left)
                elif left.type == "field_access":
                    obj = left.child_by_field_name("object")
                    name = left.child_by_field_name("field")
                    if obj is not None and obj.type == "this" and name is not None:
                        target, qualifier = self._text(name), "this"
            if target is not None:
                value = expression.child_by_field_name("right")

        statement = self._make(
            ApexNodeKind.EXPRESSION_STATEMENT,
            node,
            assignment_target=target,
            target_qualifier=qualifier,
        )
        _add(statement, self._expression(value, "assignment" if target else "statement"))
        return statement

    def _dml(self, node: Any, expression: Any) -> ApexNode:
        match = _WORD_RE.match(self._text(expression))
        statement = self._make(ApexNodeKind.DML_STATEMENT, node, name=match.group(0).lower() if match else None)
        operands = [
            child for child in _named(expression)
            if child.type not in ("dml_type", "dml_security_mode")
        ]
        if operands:
            _add(statement, self._expression(operands[0], "operand", operands[-1]))
        return statement

    def _if(self, node: Any) -> ApexNode:
        statement = self._make(ApexNodeKind.IF_STATEMENT, node)
        _add(statement, self._expression(_unwrap(node.child_by_field_name("condition")), "condition"))
        _add(statement, self._statement(node.child_by_field_name("consequence")))
        _add(statement, self._statement(node.child_by_field_name("alternative")))
        return statement

    def _for(self, node: Any) -> ApexNode:
        loop = self._make(ApexNodeKind.FOR_STATEMENT, node)
        inits = node.children_by_field_name("init")
        if inits and inits[0].type == "local_variable_declaration":
            loop.add_child(self._local_declaration(inits[0]))
        elif inits:
            _add(loop, self._expression(inits[0], "init", inits[-1]))
        _add(loop, self._expression(node.child_by_field_name("condition"), "condition"))
        updates = node.children_by_field_name("update")
        if updates:
            _add(loop, self._expression(updates[0], "update", updates[-1]))
        _add(loop, self._statement(node.child_by_field_name("body")))
        return loop

    def _enhanced_for(self, node: Any) -> ApexNode:
        loop = self._make(
            ApexNodeKind.ENHANCED_FOR_STATEMENT,
            node,
            name=self._field_text(node, "name"),
            type=self._field_text(node, "type"),
        )
        _add(loop, self._expression(node.child_by_field_name("value"), "iterable"))
        _add(loop, self._statement(node.child_by_field_name("body")))
        return loop

    def _loop(self, node: Any) -> ApexNode:
        loop = self._make(_LOOPS[node.type], node)
        condition = self._expression(_unwrap(node.child_by_field_name("condition")), "condition")
        body = self._statement(node.child_by_field_name("body"))
        if node.type == "do_statement":
            _add(loop, body)
            _add(loop, condition)
        else:
            _add(loop, condition)
            _add(loop, body)
        return loop

    def _try(self, node: Any) -> ApexNode:
        statement = self._make(ApexNodeKind.TRY_STATEMENT, node)
        _add(statement, self._statement(node.child_by_field_name("body")))
        for clause in _named(node):
            if clause.type in ("catch_clause", "finally_clause"):
                block = clause.child_by_field_name("body") or _first_of(clause, "block")
                _add(statement, self._statement(block))
        return statement

    def _switch(self, node: Any) -> ApexNode:
        statement = self._make(ApexNodeKind.SWITCH_STATEMENT, node)
        _add(statement, self._expression(node.child_by_field_name("condition"), "condition"))
        body = node.child_by_field_name("body")
        if body is not None:
            for rule in _named(body):
                block = _first_of(rule, "block")
                if block is not None:
                    statement.add_child(self._block(block))
        return statement

    def _run_as(self, node: Any) -> ApexNode:
        statement = self._make(ApexNodeKind.SIMPLE_STATEMENT, node, name="runas")
        _add(statement, self._expression(_unwrap(node.child_by_field_name("user")), "operand"))
        block = _first_of(node, "block")
        if block is not None:
            statement.add_child(self._block(block))
        return statement

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self, node: Any, role: str, last: Any = None) -> ApexNode | None:
        """Opaque expression span holding the query literals found inside it."""
        if node is None:
            return None
        expression = ApexNode(
            kind=ApexNodeKind.EXPRESSION,
            location=self._location(node, last),
            attributes={"role": role},
        )
        for query in _queries(node, last):
            expression.add_child(self._query(query))
        return expression

    def _query(self, node: Any) -> ApexNode:
        start = self._offset(node.start_byte)
        end = self._offset(node.end_byte)

        # Widen to the enclosing brackets when the grammar leaves them out.
        if not self.source.startswith("[", start):
            before = self.source[:start].rstrip()
            if before.endswith("["):
                start = len(before) - 1
        if not self.source[:end].endswith("]"):
            after = self.source[end:]
            stripped = after.lstrip()
            if stripped.startswith("]"):
                end += len(after) - len(stripped) + 1

        text = self.source[start:end]
        language = "SOSL" if text[1:].lstrip().lower().startswith("find") else "SOQL"
        return ApexNode(
            kind=ApexNodeKind.QUERY,
            location=self._span(start, end),
            attributes={"text": text, "query_language": language},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _field_text(self, node: Any, field_name: str) -> str | None:
        child = node.child_by_field_name(field_name)
        return self._text(child) if child is not None else None

    def _is_static(self, node: Any) -> bool:
        modifiers = _first_of(node, "modifiers")
        return modifiers is not None and bool(_STATIC_RE.search(self._text(modifiers)))


def _add(parent: ApexNode, child: ApexNode | None) -> None:
    if child is not None:
        parent.add_child(child)


def _named(node: Any) -> list[Any]:
    return [child for child in node.named_children if child.type not in _COMMENTS]


def _first_named(node: Any) -> Any:
    children = _named(node)
    return children[0] if children else None


def _first_of(node: Any, node_type: str) -> Any:
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def _unwrap(node: Any) -> Any:
    """Drop the parentheses around a condition."""
    if node is not None and node.type == "parenthesized_expression":
        inner = _first_named(node)
        return inner if inner is not None else node
    return node


def _leading_accessor(text: str) -> str:
    words = [word.lower() for word in _WORD_RE.findall(text)]
    return next((word for word in words if word in ("get", "set")), "get")


def _queries(node: Any, last: Any = None) -> Iterator[Any]:
    """Query literals under ``node`` (and its siblings up to ``last``), outermost only."""
    nodes = [node]
    if last is not None and last is not node:
        sibling = node.next_named_sibling
        while sibling is not None:
            nodes.append(sibling)
            if sibling is last:
                break
            sibling = sibling.next_named_sibling

    stack = list(reversed(nodes))
    while stack:
        current = stack.pop()
        if current.type == "query_expression":
            yield current
            continue
        stack.extend(reversed(current.named_children))


def _error_nodes(root: Any) -> Iterator[Any]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            yield node
            if node.is_missing:
                continue
        if node.has_error or node.is_error:
            stack.extend(reversed(node.children))


def _inside_query(node: Any) -> bool:
    parent = node.parent
    while parent is not None:
        if parent.type == "query_expression":
            return True
        parent = parent.parent
    return False
