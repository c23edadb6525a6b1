"""Syntax tree node kinds.

This module defines the closed set of node kinds that the pattern engine, the
rewrite driver and the JavaScript collaborators operate on. Kinds follow the
ESTree naming used by JavaScript tooling (``IfStatement``, ``CallExpression``,
...), with snake_case field names.

Every kind is a dataclass. Fields hold scalars, a single child node, a list of
child nodes (``None`` marks an array hole) or ``None``. Fields declared with
``compare=False`` are metadata (comments, literal spelling): they are ignored
by equality and by pattern matching.

Three additional leaf kinds only appear in patterns:

- GenericPlaceholder: binds an identifier's name (``placeholder<N>``)
- StatementPlaceholder: binds a statement (``statement<N>``)
- ExpressionPlaceholder: binds an expression (``expression<N>``)

StatementList is the transient multi-statement container: it holds several
statements until the rewrite driver splices them into the enclosing block.
"""

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Union


@dataclass
class Comment:
    """Source comment attached to a node.

    Attributes:
        text: Comment text including its delimiters (``// ...`` or ``/* ... */``)
    """

    text: str

    @property
    def is_line(self) -> bool:
        return self.text.startswith("//")


@dataclass
class Node:
    """Base class of all node kinds.

    ``type`` is the kind name and always equals the class name.
    """

    type: ClassVar[str] = "Node"

    leading_comments: List[Comment] = field(
        default_factory=list, compare=False, repr=False, kw_only=True
    )
    trailing_comments: List[Comment] = field(
        default_factory=list, compare=False, repr=False, kw_only=True
    )

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.type = cls.__name__


class Statement(Node):
    """Node that may appear in statement position."""


class Declaration(Statement):
    """Statement that introduces a binding."""


class Expression(Node):
    """Node that may appear in expression position."""


class Pattern(Expression):
    """Binding/assignment target (destructuring)."""


# ============================================================================
# Program and statements
# ============================================================================


@dataclass
class Program(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class StatementList(Statement):
    """Transient container for several statements awaiting flattening."""

    body: List[Node] = field(default_factory=list)


@dataclass
class ExpressionStatement(Statement):
    expression: Node


@dataclass
class BlockStatement(Statement):
    body: List[Node] = field(default_factory=list)


@dataclass
class EmptyStatement(Statement):
    pass


@dataclass
class DebuggerStatement(Statement):
    pass


@dataclass
class IfStatement(Statement):
    test: Node
    consequent: Node
    alternate: Optional[Node] = None


@dataclass
class WhileStatement(Statement):
    test: Node
    body: Node


@dataclass
class DoWhileStatement(Statement):
    body: Node
    test: Node


@dataclass
class ForStatement(Statement):
    init: Optional[Node]
    test: Optional[Node]
    update: Optional[Node]
    body: Node


@dataclass
class ForInStatement(Statement):
    left: Node
    right: Node
    body: Node


@dataclass
class ForOfStatement(Statement):
    left: Node
    right: Node
    body: Node
    is_await: bool = False


@dataclass
class ReturnStatement(Statement):
    argument: Optional[Node] = None


@dataclass
class BreakStatement(Statement):
    label: Optional[Node] = None


@dataclass
class ContinueStatement(Statement):
    label: Optional[Node] = None


@dataclass
class ThrowStatement(Statement):
    argument: Node


@dataclass
class TryStatement(Statement):
    block: Node
    handler: Optional[Node] = None
    finalizer: Optional[Node] = None


@dataclass
class CatchClause(Node):
    param: Optional[Node]
    body: Node


@dataclass
class SwitchStatement(Statement):
    discriminant: Node
    cases: List[Node] = field(default_factory=list)


@dataclass
class SwitchCase(Node):
    """``case test:`` clause; ``test`` is None for ``default:``."""

    test: Optional[Node]
    consequent: List[Node] = field(default_factory=list)


@dataclass
class LabeledStatement(Statement):
    label: Node
    body: Node


@dataclass
class VariableDeclaration(Declaration):
    kind: str
    declarations: List[Node] = field(default_factory=list)


@dataclass
class VariableDeclarator(Node):
    id: Node
    init: Optional[Node] = None


@dataclass
class FunctionDeclaration(Declaration):
    id: Optional[Node]
    params: List[Node]
    body: Node
    generator: bool = False
    is_async: bool = False


@dataclass
class ClassDeclaration(Declaration):
    id: Optional[Node]
    super_class: Optional[Node]
    body: Node


@dataclass
class ClassBody(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class MethodDefinition(Node):
    """Class method; ``kind`` is one of constructor, method, get, set."""

    key: Node
    value: Node
    kind: str = "method"
    computed: bool = False
    static: bool = False


@dataclass
class PropertyDefinition(Node):
    """Class field (``static x = 1;``)."""

    key: Node
    value: Optional[Node] = None
    computed: bool = False
    static: bool = False


# ============================================================================
# Expressions
# ============================================================================


@dataclass
class Identifier(Pattern):
    name: str


@dataclass
class Literal(Expression):
    """Literal value.

    ``kind`` is one of number, string, boolean, null, regex, bigint. ``value``
    is the Python value (int/float, str, bool, None, ``(pattern, flags)`` for
    regexes, int for bigints). ``raw`` keeps the original spelling and is
    ignored by equality.
    """

    kind: str
    value: Union[int, float, str, bool, None, tuple]
    raw: Optional[str] = field(default=None, compare=False)


@dataclass
class TemplateLiteral(Expression):
    quasis: List[Node] = field(default_factory=list)
    expressions: List[Node] = field(default_factory=list)


@dataclass
class TemplateElement(Node):
    """Raw text chunk of a template literal (escapes kept as written)."""

    raw: str


@dataclass
class TaggedTemplateExpression(Expression):
    tag: Node
    quasi: Node


@dataclass
class ThisExpression(Expression):
    pass


@dataclass
class Super(Node):
    pass


@dataclass
class MetaProperty(Expression):
    """``new.target``."""

    meta: Node
    property: Node


@dataclass
class ArrayExpression(Expression):
    elements: List[Optional[Node]] = field(default_factory=list)


@dataclass
class ObjectExpression(Expression):
    properties: List[Node] = field(default_factory=list)


@dataclass
class Property(Node):
    """Object literal entry; ``kind`` is one of init, get, set."""

    key: Node
    value: Node
    kind: str = "init"
    computed: bool = False
    shorthand: bool = False
    method: bool = False


@dataclass
class SpreadElement(Node):
    argument: Node


@dataclass
class FunctionExpression(Expression):
    id: Optional[Node]
    params: List[Node]
    body: Node
    generator: bool = False
    is_async: bool = False


@dataclass
class ArrowFunctionExpression(Expression):
    """Arrow function; ``body`` is an expression or a BlockStatement."""

    params: List[Node]
    body: Node
    is_async: bool = False


@dataclass
class ClassExpression(Expression):
    id: Optional[Node]
    super_class: Optional[Node]
    body: Node


@dataclass
class UnaryExpression(Expression):
    operator: str
    argument: Node


@dataclass
class UpdateExpression(Expression):
    operator: str
    argument: Node
    prefix: bool


@dataclass
class BinaryExpression(Expression):
    operator: str
    left: Node
    right: Node


@dataclass
class LogicalExpression(Expression):
    operator: str
    left: Node
    right: Node


@dataclass
class AssignmentExpression(Expression):
    operator: str
    left: Node
    right: Node


@dataclass
class ConditionalExpression(Expression):
    test: Node
    consequent: Node
    alternate: Node


@dataclass
class CallExpression(Expression):
    callee: Node
    arguments: List[Node] = field(default_factory=list)
    optional: bool = False


@dataclass
class NewExpression(Expression):
    callee: Node
    arguments: List[Node] = field(default_factory=list)


@dataclass
class MemberExpression(Expression):
    object: Node
    property: Node
    computed: bool = False
    optional: bool = False


@dataclass
class SequenceExpression(Expression):
    expressions: List[Node] = field(default_factory=list)


@dataclass
class YieldExpression(Expression):
    argument: Optional[Node] = None
    delegate: bool = False


@dataclass
class AwaitExpression(Expression):
    argument: Node


# ============================================================================
# Destructuring patterns
# ============================================================================


@dataclass
class ObjectPattern(Pattern):
    properties: List[Node] = field(default_factory=list)


@dataclass
class ArrayPattern(Pattern):
    elements: List[Optional[Node]] = field(default_factory=list)


@dataclass
class AssignmentPattern(Pattern):
    left: Node
    right: Node


@dataclass
class RestElement(Pattern):
    argument: Node


# ============================================================================
# Pattern leaves
# ============================================================================


@dataclass
class GenericPlaceholder(Expression):
    """Matches any identifier and binds its name."""

    index: int

    @property
    def key(self) -> str:
        return f"placeholder{self.index}"


@dataclass
class StatementPlaceholder(Statement):
    """Matches a statement; with ``expect_multi_line`` only compound ones."""

    index: int
    expect_multi_line: bool = False

    @property
    def key(self) -> str:
        return f"statement{self.index}"


@dataclass
class ExpressionPlaceholder(Expression):
    """Matches an expression; with ``allow_declarations`` also a declaration."""

    index: int
    allow_declarations: bool = False

    @property
    def key(self) -> str:
        return f"expression{self.index}"


PLACEHOLDER_TYPES = (GenericPlaceholder, StatementPlaceholder, ExpressionPlaceholder)

# Nodes whose list field holds a statement sequence that StatementList
# containers are spliced into.
STATEMENT_SEQUENCES = {
    "Program": "body",
    "BlockStatement": "body",
    "StatementList": "body",
    "SwitchCase": "consequent",
}
