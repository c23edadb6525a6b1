"""Pattern engine: compile, match and fill code templates.

A pattern is ordinary JavaScript in which some identifiers are placeholders:

- ``placeholder<N>``: any identifier; binds its name
- ``statement<N>;``: any statement; ``statement<N>.multiLine;`` only accepts
  compound statements (conditionals, loops, blocks, ...)
- ``expression<N>``: any expression; ``expression<N>.orDeclaration`` also
  accepts a variable declaration (e.g. the head of a ``for...of`` loop)

Key concepts:
- compile(): turn a snippet into a pattern tree
- matches(): structural match of a pattern against a node, producing Bindings
- fill(): instantiate a template with Bindings to create a concrete tree

Example:
    >>> pattern = compile("expression1 && expression2;")
    >>> bindings = matches(pattern, parse("a && b();").body[0])
    >>> sorted(bindings)
    ['expression1', 'expression2']
    >>> fill("if (expression1) expression2;", bindings).type
    'IfStatement'
"""

import copy
import re
from dataclasses import fields
from typing import Any, Collection, Dict, Optional, Union

from jstidy.core.errors import MissingBindingError, PatternCompileError
from jstidy.core.schema.nodes import (
    Expression,
    ExpressionPlaceholder,
    ExpressionStatement,
    GenericPlaceholder,
    Identifier,
    MemberExpression,
    Node,
    Statement,
    StatementList,
    StatementPlaceholder,
    VariableDeclaration,
)
from jstidy.core.traverse import iter_child_fields, replace, same_tree

Bindings = Dict[str, Any]
"""Mapping from placeholder key to bound value.

Generic placeholders bind a name (str), statement and expression placeholders
bind a node::

    {"placeholder1": "sum", "expression1": Identifier(name="a")}
"""

PatternSource = Union[str, Node]

MULTI_LINE_KINDS = frozenset({
    "IfStatement",
    "ForStatement",
    "ForInStatement",
    "ForOfStatement",
    "WhileStatement",
    "DoWhileStatement",
    "SwitchStatement",
    "TryStatement",
    "LabeledStatement",
    "FunctionDeclaration",
    "ClassDeclaration",
})
"""Statement kinds that print over more than one line.

A ``statement<N>.multiLine`` placeholder only accepts these kinds. Blocks are
left out: they are braced already.
"""

_GENERIC_RE = re.compile(r"^placeholder(\d+)$")
_STATEMENT_RE = re.compile(r"^statement(\d+)$")
_EXPRESSION_RE = re.compile(r"^expression(\d+)$")

_STATEMENT_MODIFIERS = {"multiLine": "expect_multi_line"}
_EXPRESSION_MODIFIERS = {"orDeclaration": "allow_declarations"}


def compile(source: str) -> Node:
    """Compile a pattern snippet into a pattern tree.

    A single statement compiles to that statement, a bare expression (no
    trailing semicolon) to the expression and several statements to a
    StatementList.

    Args:
        source: JavaScript snippet using the placeholder conventions

    Returns:
        Pattern tree

    Raises:
        PatternCompileError: If the snippet is empty or uses an unknown
            placeholder modifier

    Example:
        >>> compile("statement1.multiLine;")
        StatementPlaceholder(index=1, expect_multi_line=True)
        >>> compile("x = 2").type
        'AssignmentExpression'
    """
    from jstidy.js.parser import parse

    body = parse(source).body
    if not body:
        raise PatternCompileError("Pattern is empty", source)

    if len(body) > 1:
        tree: Node = StatementList(body=body)
    else:
        tree = body[0]
        if isinstance(tree, ExpressionStatement) and not source.rstrip().endswith(";"):
            tree = tree.expression

    def enter(node: Node, parent: Optional[Node]) -> Optional[Node]:
        return _placeholder_for(node, source)

    return replace(tree, enter=enter)


def _modifier_of(node: Node, pattern: "re.Pattern"):
    """Return ``(index, modifier)`` for ``name`` or ``name.modifier`` nodes."""
    if isinstance(node, Identifier):
        found = pattern.match(node.name)
        return (int(found.group(1)), None) if found else None
    if isinstance(node, MemberExpression) and not node.computed and isinstance(node.object, Identifier):
        found = pattern.match(node.object.name)
        if found and isinstance(node.property, Identifier):
            return int(found.group(1)), node.property.name
    return None


def _placeholder_for(node: Node, source: str) -> Optional[Node]:
    if isinstance(node, ExpressionStatement):
        found = _modifier_of(node.expression, _STATEMENT_RE)
        if found is not None:
            index, modifier = found
            placeholder = StatementPlaceholder(index)
            if modifier is not None:
                if modifier not in _STATEMENT_MODIFIERS:
                    raise PatternCompileError(
                        f"Unknown statement placeholder modifier: {modifier}", source
                    )
                setattr(placeholder, _STATEMENT_MODIFIERS[modifier], True)
            return placeholder

    found = _modifier_of(node, _EXPRESSION_RE)
    if found is not None:
        index, modifier = found
        placeholder = ExpressionPlaceholder(index)
        if modifier is not None:
            if modifier not in _EXPRESSION_MODIFIERS:
                raise PatternCompileError(
                    f"Unknown expression placeholder modifier: {modifier}", source
                )
            setattr(placeholder, _EXPRESSION_MODIFIERS[modifier], True)
        return placeholder

    if isinstance(node, MemberExpression) and _modifier_of(node, _STATEMENT_RE) is not None:
        raise PatternCompileError(
            f"Statement placeholder modifier outside statement position: "
            f"{node.object.name}.{node.property.name}",
            source,
        )

    if isinstance(node, Identifier):
        found = _GENERIC_RE.match(node.name)
        if found:
            return GenericPlaceholder(int(found.group(1)))
    return None


def _as_pattern(value: PatternSource) -> Node:
    return compile(value) if isinstance(value, str) else value


# ============================================================================
# Matching
# ============================================================================


def matches(
    pattern: PatternSource,
    node: Node,
    multi_line_kinds: Optional[Collection[str]] = None,
) -> Optional[Bindings]:
    """Match ``node`` against ``pattern``.

    Both trees are walked in lockstep. Placeholders bind the corresponding
    part of ``node``; a placeholder used several times must bind equal values
    everywhere. Neither input is modified.

    Args:
        pattern: Pattern tree, or snippet source to compile
        node: Concrete node to test
        multi_line_kinds: Statement kinds accepted by ``.multiLine``
            placeholders (default: MULTI_LINE_KINDS)

    Returns:
        Bindings if the node matches, None otherwise

    Example:
        >>> matches("function placeholder1() {}", parse("function f() {}").body[0])
        {'placeholder1': 'f'}
    """
    kinds = MULTI_LINE_KINDS if multi_line_kinds is None else multi_line_kinds
    bindings: Bindings = {}
    if _match(_as_pattern(pattern), node, bindings, kinds):
        return bindings
    return None


def _bind(bindings: Bindings, key: str, value: Any) -> bool:
    if key in bindings:
        return same_tree(bindings[key], value)
    bindings[key] = value
    return True


def _match(pattern: Node, node: Node, bindings: Bindings, kinds: Collection[str]) -> bool:
    if isinstance(pattern, GenericPlaceholder):
        if not isinstance(node, Identifier):
            return False
        return _bind(bindings, pattern.key, node.name)

    if isinstance(pattern, StatementPlaceholder):
        if not isinstance(node, Statement):
            return False
        if pattern.expect_multi_line and node.type not in kinds:
            return False
        return _bind(bindings, pattern.key, node)

    if isinstance(pattern, ExpressionPlaceholder):
        allowed = isinstance(node, Expression) or (
            pattern.allow_declarations and isinstance(node, VariableDeclaration)
        )
        if not allowed:
            return False
        return _bind(bindings, pattern.key, node)

    if type(pattern) is not type(node):
        return False

    for name, expected in iter_child_fields(pattern):
        if not _match_value(expected, getattr(node, name), bindings, kinds):
            return False
    return True


def _match_value(expected: Any, actual: Any, bindings: Bindings, kinds: Collection[str]) -> bool:
    if isinstance(expected, Node):
        return isinstance(actual, Node) and _match(expected, actual, bindings, kinds)
    if isinstance(expected, list):
        if not isinstance(actual, list) or len(expected) != len(actual):
            return False
        return all(
            _match_value(item, other, bindings, kinds)
            for item, other in zip(expected, actual)
        )
    if expected is None or actual is None:
        return expected is actual
    return expected == actual


# ============================================================================
# Filling
# ============================================================================


def fill(template: PatternSource, bindings: Bindings) -> Node:
    """Instantiate ``template`` with ``bindings``.

    Produces a fresh tree: generic placeholders become identifiers carrying
    the bound name, statement and expression placeholders become copies of the
    bound nodes.

    Args:
        template: Template tree, or snippet source to compile
        bindings: Values for every placeholder the template uses

    Returns:
        Concrete tree owning independent nodes

    Raises:
        MissingBindingError: If the template uses a placeholder that has no
            value in ``bindings``

    Example:
        >>> fill("placeholder1(expression1)", {"placeholder1": "f", "expression1": Identifier("x")})
        CallExpression(callee=Identifier(name='f'), arguments=[Identifier(name='x')], optional=False)
    """
    return _fill(_as_pattern(template), bindings)


def _lookup(bindings: Bindings, key: str) -> Any:
    if key not in bindings:
        raise MissingBindingError(key, bindings.keys())
    return bindings[key]


def _fill(node: Node, bindings: Bindings) -> Node:
    if isinstance(node, GenericPlaceholder):
        name = _lookup(bindings, node.key)
        if not isinstance(name, str):
            raise TypeError(f"Placeholder '{node.key}' must be bound to a name, got {type(name).__name__}")
        return Identifier(name)
    if isinstance(node, (StatementPlaceholder, ExpressionPlaceholder)):
        return copy.deepcopy(_lookup(bindings, node.key))

    values = {f.name: _fill_value(getattr(node, f.name), bindings) for f in fields(node)}
    return type(node)(**values)


def _fill_value(value: Any, bindings: Bindings) -> Any:
    if isinstance(value, Node):
        return _fill(value, bindings)
    if isinstance(value, list):
        return [_fill_value(item, bindings) for item in value]
    return copy.deepcopy(value)
