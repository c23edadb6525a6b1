"""
Syntax tree schema shared by the parser, the pattern engine and the
generator.
"""

from jstidy.core.schema.nodes import (
    PLACEHOLDER_TYPES,
    STATEMENT_SEQUENCES,
    Comment,
    Declaration,
    Expression,
    ExpressionPlaceholder,
    GenericPlaceholder,
    Node,
    Pattern,
    Program,
    Statement,
    StatementList,
    StatementPlaceholder,
)

__all__ = [
    "PLACEHOLDER_TYPES",
    "STATEMENT_SEQUENCES",
    "Comment",
    "Declaration",
    "Expression",
    "ExpressionPlaceholder",
    "GenericPlaceholder",
    "Node",
    "Pattern",
    "Program",
    "Statement",
    "StatementList",
    "StatementPlaceholder",
]
