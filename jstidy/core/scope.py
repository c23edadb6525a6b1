"""Scope analysis and variable renaming.

analyze() builds an explicit scope graph for a tree: every declaration is a
Variable owned by the Scope it is bound in, and every identifier used as a
value is a Reference resolved to its Variable (or left unresolved, i.e.
global). The graph is a snapshot: it refers to the nodes of the analyzed tree
and must be rebuilt after the tree's structure changes.

Scoping follows script (sloppy mode) rules:
- ``var`` and function declarations are hoisted to the nearest function (or
  global) scope, so a function declared in a block is visible after it
- ``let``/``const``/``class`` declarations are bound in the enclosing block
- parameters live in the function scope; a named function expression gets an
  extra scope holding its own name
- ``catch`` parameters, ``for`` heads with ``let``/``const`` and ``switch``
  bodies get their own scopes

Example:
    >>> tree = parse("function f() {} f();")
    >>> manager = analyze(tree)
    >>> rename_variable(manager.global_scope.set["f"], "g")
    >>> generate(tree)
    'function g() {}\\ng();\\n'
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from jstidy.core.errors import ScopeError
from jstidy.core.schema.nodes import (
    ArrayPattern,
    ArrowFunctionExpression,
    AssignmentPattern,
    BlockStatement,
    BreakStatement,
    CatchClause,
    ClassDeclaration,
    ClassExpression,
    ContinueStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    LabeledStatement,
    MemberExpression,
    MetaProperty,
    MethodDefinition,
    Node,
    ObjectPattern,
    Property,
    PropertyDefinition,
    RestElement,
    StatementList,
    SwitchStatement,
    VariableDeclaration,
)
from jstidy.core.traverse import child_nodes, recursion_limit

logger = logging.getLogger(__name__)

_FUNCTION_TYPES = (FunctionDeclaration, FunctionExpression, ArrowFunctionExpression)
_CLASS_TYPES = (ClassDeclaration, ClassExpression)


@dataclass(eq=False)
class Reference:
    """Use of an identifier as a value.

    Attributes:
        identifier: The Identifier node
        scope: Scope the identifier occurs in
        resolved: Variable it refers to, None for globals
    """

    identifier: Identifier
    scope: "Scope"
    resolved: Optional["Variable"] = None


@dataclass(eq=False)
class Variable:
    """Binding declared in a scope.

    Attributes:
        name: Current name of the binding
        scope: Scope the binding belongs to
        identifiers: Identifier nodes that declare it
        references: References resolved to it
    """

    name: str
    scope: "Scope"
    identifiers: List[Identifier] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)


class Scope:
    """Lexical scope.

    Attributes:
        kind: One of global, function, function-expression-name, class,
              block, catch, for, switch
        block: Node that created the scope
        upper: Enclosing scope (None for the global scope)
        children: Directly nested scopes
        set: Variables declared here, by name
        references: References occurring directly in this scope
        through: References that leave this scope unresolved
    """

    def __init__(self, kind: str, block: Node, upper: Optional["Scope"]):
        self.kind = kind
        self.block = block
        self.upper = upper
        self.children: List["Scope"] = []
        self.set: Dict[str, Variable] = {}
        self.references: List[Reference] = []
        self.through: List[Reference] = []
        if upper is not None:
            upper.children.append(self)

    @property
    def variables(self) -> List[Variable]:
        return list(self.set.values())

    def __repr__(self) -> str:
        return f"Scope(kind={self.kind!r}, block={self.block.type}, names={sorted(self.set)})"


class ScopeManager:
    """Scope graph of one tree."""

    def __init__(
        self,
        global_scope: Scope,
        scopes: List[Scope],
        by_block: Dict[int, Scope],
        by_identifier: Dict[int, Variable],
    ):
        self.global_scope = global_scope
        self.scopes = scopes
        self._by_block = by_block
        self._by_identifier = by_identifier

    def acquire(self, node: Node) -> Optional[Scope]:
        """Return the scope created by ``node`` (function, block, ...)."""
        return self._by_block.get(id(node))

    def find_variable(self, identifier: Identifier) -> Optional[Variable]:
        """Return the variable an identifier declares or refers to."""
        return self._by_identifier.get(id(identifier))

    def declared_variable(self, declaration: Node) -> Variable:
        """Return the variable bound by a named declaration.

        Raises:
            ScopeError: If the declaration is not part of the analyzed tree
        """
        name = getattr(declaration, "id", None)
        variable = self.find_variable(name) if isinstance(name, Identifier) else None
        if variable is None:
            raise ScopeError(f"No binding found for {declaration.type}", declaration)
        return variable

    def is_name_available(self, variable: Variable, name: str) -> bool:
        """Check whether ``variable`` can be renamed to ``name``.

        A name is unavailable when it is already declared in the variable's
        scope, when a reference inside that scope resolves to an outer binding
        (or a global) of that name, or when a scope between one of the
        variable's references and its declaration declares that name.
        """
        scope = variable.scope
        if name in scope.set:
            return False
        if any(ref.identifier.name == name for ref in scope.through):
            return False
        for ref in variable.references:
            current = ref.scope
            while current is not None and current is not scope:
                if name in current.set:
                    return False
                current = current.upper
        return True


def analyze(tree: Node) -> ScopeManager:
    """Build the scope graph of ``tree``.

    Args:
        tree: Program (or any statement) to analyze

    Returns:
        ScopeManager for the tree
    """
    with recursion_limit():
        return _Analyzer().run(tree)


def rename_variable(variable: Variable, new_name: str) -> None:
    """Rename a variable, its declarations and all references to it.

    Args:
        variable: Variable from a ScopeManager
        new_name: Name to give it
    """
    old_name = variable.name
    for identifier in variable.identifiers:
        identifier.name = new_name
    for ref in variable.references:
        ref.identifier.name = new_name

    scope = variable.scope
    if scope.set.get(old_name) is variable:
        del scope.set[old_name]
    scope.set[new_name] = variable
    variable.name = new_name
    logger.debug(
        f"Renamed '{old_name}' to '{new_name}' "
        f"({len(variable.identifiers)} declarations, {len(variable.references)} references)"
    )


def binding_identifiers(target: Optional[Node]) -> List[Identifier]:
    """Return the identifiers a binding pattern declares."""
    if target is None:
        return []
    if isinstance(target, Identifier):
        return [target]
    if isinstance(target, ObjectPattern):
        found: List[Identifier] = []
        for prop in target.properties:
            found.extend(binding_identifiers(prop.value if isinstance(prop, Property) else prop))
        return found
    if isinstance(target, ArrayPattern):
        found = []
        for element in target.elements:
            found.extend(binding_identifiers(element))
        return found
    if isinstance(target, AssignmentPattern):
        return binding_identifiers(target.left)
    if isinstance(target, RestElement):
        return binding_identifiers(target.argument)
    return []


def _flatten(statements: List[Node]) -> List[Node]:
    flat: List[Node] = []
    for statement in statements:
        if isinstance(statement, StatementList):
            flat.extend(_flatten(statement.body))
        else:
            flat.append(statement)
    return flat


class _Analyzer:
    def __init__(self):
        self.scopes: List[Scope] = []
        self.by_block: Dict[int, Scope] = {}
        self.by_identifier: Dict[int, Variable] = {}
        self.references: List[Reference] = []

    def run(self, tree: Node) -> ScopeManager:
        scope = self.new_scope("global", tree, None)
        body = getattr(tree, "body", None)
        statements = body if isinstance(body, list) else [tree]
        self.declare_vars(scope, StatementList(statements))
        self.declare_lexical(scope, statements)
        for statement in statements:
            self.visit(statement, scope)
        self.resolve()
        return ScopeManager(scope, self.scopes, self.by_block, self.by_identifier)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def new_scope(self, kind: str, block: Node, upper: Optional[Scope]) -> Scope:
        scope = Scope(kind, block, upper)
        self.scopes.append(scope)
        self.by_block[id(block)] = scope
        return scope

    def declare(self, scope: Scope, identifier: Identifier) -> None:
        variable = scope.set.get(identifier.name)
        if variable is None:
            variable = Variable(identifier.name, scope)
            scope.set[identifier.name] = variable
        variable.identifiers.append(identifier)
        self.by_identifier[id(identifier)] = variable

    def declare_pattern(self, scope: Scope, target: Optional[Node]) -> None:
        for identifier in binding_identifiers(target):
            self.declare(scope, identifier)

    def declare_vars(self, scope: Scope, node: Node) -> None:
        """Hoist ``var`` and function declarations under ``node`` into ``scope``."""
        for child in child_nodes(node):
            if isinstance(child, FunctionDeclaration):
                if child.id is not None:
                    self.declare(scope, child.id)
                continue
            if isinstance(child, _FUNCTION_TYPES + _CLASS_TYPES):
                continue
            if isinstance(child, VariableDeclaration) and child.kind == "var":
                for declarator in child.declarations:
                    self.declare_pattern(scope, declarator.id)
            self.declare_vars(scope, child)

    def declare_lexical(self, scope: Scope, statements: List[Node]) -> None:
        """Bind block-scoped declarations of a statement list in ``scope``."""
        for statement in _flatten(statements):
            if isinstance(statement, VariableDeclaration) and statement.kind != "var":
                for declarator in statement.declarations:
                    self.declare_pattern(scope, declarator.id)
            elif isinstance(statement, ClassDeclaration) and statement.id is not None:
                self.declare(scope, statement.id)

    def declaration_head(self, scope: Scope, node: Node, head: Optional[Node]) -> Scope:
        """Open a scope for ``for`` heads declaring ``let``/``const``."""
        if isinstance(head, VariableDeclaration) and head.kind != "var":
            scope = self.new_scope("for", node, scope)
            for declarator in head.declarations:
                self.declare_pattern(scope, declarator.id)
        return scope

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def reference(self, identifier: Identifier, scope: Scope) -> None:
        ref = Reference(identifier, scope)
        scope.references.append(ref)
        self.references.append(ref)

    def visit_pattern_defaults(self, target: Optional[Node], scope: Scope) -> None:
        """Visit the expressions inside a binding pattern, not its bindings."""
        if target is None or isinstance(target, Identifier):
            return
        if isinstance(target, ObjectPattern):
            for prop in target.properties:
                if isinstance(prop, Property):
                    if prop.computed:
                        self.visit(prop.key, scope)
                    self.visit_pattern_defaults(prop.value, scope)
                else:
                    self.visit_pattern_defaults(prop, scope)
        elif isinstance(target, ArrayPattern):
            for element in target.elements:
                self.visit_pattern_defaults(element, scope)
        elif isinstance(target, AssignmentPattern):
            self.visit_pattern_defaults(target.left, scope)
            self.visit(target.right, scope)
        elif isinstance(target, RestElement):
            self.visit_pattern_defaults(target.argument, scope)
        else:
            self.visit(target, scope)

    def visit(self, node: Optional[Node], scope: Scope) -> None:
        if node is None:
            return
        if isinstance(node, Identifier):
            self.reference(node, scope)
        elif isinstance(node, _FUNCTION_TYPES):
            self.visit_function(node, scope)
        elif isinstance(node, _CLASS_TYPES):
            self.visit_class(node, scope)
        elif isinstance(node, BlockStatement):
            inner = self.new_scope("block", node, scope)
            self.declare_lexical(inner, node.body)
            for statement in node.body:
                self.visit(statement, inner)
        elif isinstance(node, VariableDeclaration):
            for declarator in node.declarations:
                self.visit_pattern_defaults(declarator.id, scope)
                self.visit(declarator.init, scope)
        elif isinstance(node, ForStatement):
            inner = self.declaration_head(scope, node, node.init)
            for child in (node.init, node.test, node.update, node.body):
                self.visit(child, inner)
        elif isinstance(node, (ForInStatement, ForOfStatement)):
            self.visit(node.right, scope)
            inner = self.declaration_head(scope, node, node.left)
            self.visit(node.left, inner)
            self.visit(node.body, inner)
        elif isinstance(node, CatchClause):
            inner = self.new_scope("catch", node, scope)
            self.declare_pattern(inner, node.param)
            self.visit_pattern_defaults(node.param, inner)
            self.visit(node.body, inner)
        elif isinstance(node, SwitchStatement):
            self.visit(node.discriminant, scope)
            inner = self.new_scope("switch", node, scope)
            for case in node.cases:
                self.declare_lexical(inner, case.consequent)
            for case in node.cases:
                self.visit(case, inner)
        elif isinstance(node, MemberExpression):
            self.visit(node.object, scope)
            if node.computed:
                self.visit(node.property, scope)
        elif isinstance(node, (Property, MethodDefinition, PropertyDefinition)):
            if node.computed:
                self.visit(node.key, scope)
            self.visit(node.value, scope)
        elif isinstance(node, LabeledStatement):
            self.visit(node.body, scope)
        elif isinstance(node, (BreakStatement, ContinueStatement, MetaProperty)):
            return
        else:
            for child in child_nodes(node):
                self.visit(child, scope)

    def visit_function(self, node: Node, scope: Scope) -> None:
        upper = scope
        if isinstance(node, FunctionExpression) and node.id is not None:
            upper = self.new_scope("function-expression-name", node, scope)
            self.declare(upper, node.id)
        inner = self.new_scope("function", node, upper)
        for param in node.params:
            self.declare_pattern(inner, param)
        if isinstance(node.body, BlockStatement):
            self.by_block[id(node.body)] = inner
            self.declare_vars(inner, node.body)
            self.declare_lexical(inner, node.body.body)
        for param in node.params:
            self.visit_pattern_defaults(param, inner)
        if isinstance(node.body, BlockStatement):
            for statement in node.body.body:
                self.visit(statement, inner)
        else:
            self.visit(node.body, inner)

    def visit_class(self, node: Node, scope: Scope) -> None:
        self.visit(node.super_class, scope)
        inner = scope
        if isinstance(node, ClassExpression) and node.id is not None:
            inner = self.new_scope("class", node, scope)
            self.declare(inner, node.id)
        for member in node.body.body:
            self.visit(member, inner)

    def resolve(self) -> None:
        for ref in self.references:
            name = ref.identifier.name
            current: Optional[Scope] = ref.scope
            while current is not None:
                variable = current.set.get(name)
                if variable is not None:
                    ref.resolved = variable
                    variable.references.append(ref)
                    self.by_identifier[id(ref.identifier)] = variable
                    break
                current.through.append(ref)
                current = current.upper
