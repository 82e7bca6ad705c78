"""
AST domain enums.

The tree builder emits a closed set of node kinds; detectors query the tree
by kind instead of by grammar-specific node names.
"""

from enum import Enum


class ApexNodeKind(Enum):
    """Node kinds produced by the tree builder."""

    COMPILATION_UNIT = "compilation_unit"
    TYPE_DECLARATION = "type_declaration"
    FIELD_DECLARATION = "field_declaration"
    METHOD_DECLARATION = "method_declaration"
    BLOCK = "block"
    LOCAL_VARIABLE_DECLARATION = "local_variable_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    FOR_STATEMENT = "for_statement"
    ENHANCED_FOR_STATEMENT = "enhanced_for_statement"
    WHILE_STATEMENT = "while_statement"
    DO_WHILE_STATEMENT = "do_while_statement"
    IF_STATEMENT = "if_statement"
    TRY_STATEMENT = "try_statement"
    SWITCH_STATEMENT = "switch_statement"
    RETURN_STATEMENT = "return_statement"
    DML_STATEMENT = "dml_statement"
    EXPRESSION_STATEMENT = "expression_statement"
    SIMPLE_STATEMENT = "simple_statement"
    EXPRESSION = "expression"
    QUERY = "query"


LOOP_KINDS = frozenset({
    ApexNodeKind.FOR_STATEMENT,
    ApexNodeKind.ENHANCED_FOR_STATEMENT,
    ApexNodeKind.WHILE_STATEMENT,
    ApexNodeKind.DO_WHILE_STATEMENT,
})

# Kinds that open a variable scope.
SCOPE_KINDS = frozenset({
    ApexNodeKind.BLOCK,
    ApexNodeKind.METHOD_DECLARATION,
    ApexNodeKind.TYPE_DECLARATION,
    ApexNodeKind.COMPILATION_UNIT,
}) | LOOP_KINDS


class TypeDeclarationKind(Enum):
    """Flavour of an Apex type declaration."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    TRIGGER = "trigger"


class ParseStatus(Enum):
    """Outcome of a parse."""

    SUCCESS = "success"
    PARTIAL = "partial"  # Syntax errors confined to query literals, tree still usable
    FAILED = "failed"
