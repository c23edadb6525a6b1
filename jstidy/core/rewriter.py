"""Rewrite driver: apply a rule table across a tree in one traversal.

For every node (the root excepted), on the way down:
1. an expression statement wrapping a comma expression becomes a
   StatementList of one expression statement per element
2. otherwise the first rule whose pattern matches is filled and replaces the
   node; traversal continues into the replacement's children
3. a FunctionDeclaration replaced by a FunctionDeclaration gets a
   collision-free name, and every reference to the original is renamed

On the way up, StatementList containers are spliced into the enclosing
statement sequence, or turned into a block where a single statement is
expected.

One call is one pass: a rewrite can expose new matches above the rewritten
node, so callers that want a fixed point re-run the driver (see
jstidy.core.controller.normalize).
"""

import logging
from typing import Collection, Dict, Iterable, List, Optional

from jstidy.core.patterns import MULTI_LINE_KINDS, fill, matches
from jstidy.core.rules import RewriteRule, default_rules
from jstidy.core.schema.nodes import (
    STATEMENT_SEQUENCES,
    BlockStatement,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    Node,
    SequenceExpression,
    StatementList,
)
from jstidy.core.scope import ScopeManager, analyze, rename_variable
from jstidy.core.traverse import replace, same_tree

logger = logging.getLogger(__name__)

SEQUENCE_EXPANSION = "sequence-statement"
"""Statistics key for comma-expression statements split into statements."""


class Rewriter:
    """Applies an ordered rule table to syntax trees.

    Attributes:
        rules: Rule table, tried in order for every node
        multi_line_kinds: Statement kinds accepted by ``.multiLine`` placeholders
        stats: Number of applications per rule name, accumulated over all
               rewrite() calls; a match whose replacement equals the
               matched node is not an application

    Example:
        >>> tree = parse("a && b();")
        >>> rewriter = Rewriter()
        >>> rewriter.rewrite(tree)
        >>> generate(tree)
        'if (a)\\n  b();\\n'
        >>> rewriter.stats
        {'and-statement': 1}
    """

    def __init__(
        self,
        rules: Optional[Iterable[RewriteRule]] = None,
        multi_line_kinds: Optional[Collection[str]] = None,
    ):
        self.rules: List[RewriteRule] = default_rules() if rules is None else list(rules)
        self.multi_line_kinds = (
            MULTI_LINE_KINDS if multi_line_kinds is None else frozenset(multi_line_kinds)
        )
        self.stats: Dict[str, int] = {}

    def rewrite(self, tree: Node) -> None:
        """Rewrite ``tree`` in place (one pass).

        Args:
            tree: Program to rewrite; the root itself is never replaced

        Raises:
            ScopeError: If a rewritten declaration has no binding in the
                scope graph
            MissingBindingError: If a replacement uses a placeholder its
                pattern does not bind
        """
        _RewritePass(self, tree).run()

    def record(self, name: str) -> None:
        self.stats[name] = self.stats.get(name, 0) + 1

    @property
    def total_applications(self) -> int:
        return sum(self.stats.values())


class _RewritePass:
    """State of a single traversal."""

    def __init__(self, rewriter: Rewriter, tree: Node):
        self.rewriter = rewriter
        self.tree = tree
        self._scopes: Optional[ScopeManager] = None

    def run(self) -> None:
        replace(self.tree, enter=self.enter, leave=self.leave)

    def scopes(self) -> ScopeManager:
        if self._scopes is None:
            self._scopes = analyze(self.tree)
        return self._scopes

    def enter(self, node: Node, parent: Optional[Node]) -> Optional[Node]:
        if parent is None:
            return None

        if isinstance(node, ExpressionStatement) and isinstance(node.expression, SequenceExpression):
            result = _expand_sequence(node)
            self._applied(SEQUENCE_EXPANSION, node)
            return result

        for rule in self.rewriter.rules:
            bindings = matches(rule.pattern, node, self.rewriter.multi_line_kinds)
            if bindings is None:
                continue
            result = fill(rule.replacement, bindings)
            if same_tree(result, node):
                # Already in canonical form.
                return None
            if isinstance(node, FunctionDeclaration) and isinstance(result, FunctionDeclaration):
                self.rename_declaration(node, result)
            result.leading_comments = node.leading_comments + result.leading_comments
            result.trailing_comments = result.trailing_comments + node.trailing_comments
            self._applied(rule.name, node)
            return result
        return None

    def leave(self, node: Node, parent: Optional[Node]) -> Optional[Node]:
        field_name = STATEMENT_SEQUENCES.get(node.type)
        if field_name is not None:
            _splice(getattr(node, field_name))

        if isinstance(node, StatementList) and parent is not None and parent.type not in STATEMENT_SEQUENCES:
            block = BlockStatement(body=node.body)
            block.leading_comments = node.leading_comments
            block.trailing_comments = node.trailing_comments
            return block
        return None

    def rename_declaration(self, original: FunctionDeclaration, result: FunctionDeclaration) -> None:
        """Give ``result`` a free name and rename the original binding to it."""
        if not isinstance(result.id, Identifier):
            return
        manager = self.scopes()
        variable = manager.declared_variable(original)
        canonical = result.id.name

        if variable.name == canonical:
            logger.debug(f"'{canonical}' already has its canonical name")
            return

        suffix = 0
        name = canonical
        while name != variable.name and not manager.is_name_available(variable, name):
            suffix += 1
            name = f"{canonical}{suffix}"

        if name != variable.name:
            rename_variable(variable, name)
        result.id.name = name

    def _applied(self, name: str, node: Node) -> None:
        self.rewriter.record(name)
        self._scopes = None
        logger.debug(f"Applied '{name}' to {node.type}")


def _expand_sequence(statement: ExpressionStatement) -> StatementList:
    statements: List[Node] = [
        ExpressionStatement(expression) for expression in statement.expression.expressions
    ]
    statements[0].leading_comments = list(statement.leading_comments)
    statements[-1].trailing_comments = list(statement.trailing_comments)
    return StatementList(body=statements)


def _splice(statements: List[Node]) -> None:
    """Replace StatementList entries by their contents, in place."""
    i = 0
    while i < len(statements):
        item = statements[i]
        if isinstance(item, StatementList):
            _move_comments(item)
            statements[i:i + 1] = item.body
            continue
        i += 1


def _move_comments(container: StatementList) -> None:
    if not container.body:
        return
    container.body[0].leading_comments = container.leading_comments + container.body[0].leading_comments
    container.body[-1].trailing_comments = container.body[-1].trailing_comments + container.trailing_comments
