"""JavaScript code generator.

Prints a tree back to source text. The output is canonical: formatting of the
input is not preserved, only its semantics and comments. Parentheses are
derived from operator precedence, so trees built by filling templates (which
carry no parentheses) print correctly::

    >>> generate(fill("if (!expression1) expression2;", bindings))
    'if (!(b < 0))\\n  f();\\n'

Two brace styles are supported:
- ``expand``: opening braces on their own line (the default)
- ``collapse``: opening braces at the end of the header line
"""

import math
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from jstidy.core.schema import nodes as n
from jstidy.core.traverse import recursion_limit

BRACE_STYLES = ("expand", "collapse")
QUOTE_STYLES = {"double": '"', "single": "'"}


@dataclass
class GeneratorOptions:
    """Output formatting options.

    Attributes:
        indent: Spaces per indentation level
        quotes: String quote style, ``double`` or ``single``
        brace_style: ``expand`` or ``collapse``
    """

    indent: int = 2
    quotes: str = "double"
    brace_style: str = "expand"

    def __post_init__(self):
        if self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")
        if self.quotes not in QUOTE_STYLES:
            raise ValueError(f"quotes must be one of {sorted(QUOTE_STYLES)}, got {self.quotes!r}")
        if self.brace_style not in BRACE_STYLES:
            raise ValueError(f"brace_style must be one of {list(BRACE_STYLES)}, got {self.brace_style!r}")


class Precedence:
    SEQUENCE = 0
    YIELD = 1
    ASSIGNMENT = 1
    CONDITIONAL = 2
    ARROW_FUNCTION = 2
    COALESCE = 3
    LOGICAL_OR = 4
    LOGICAL_AND = 5
    BITWISE_OR = 6
    BITWISE_XOR = 7
    BITWISE_AND = 8
    EQUALITY = 9
    RELATIONAL = 10
    BITWISE_SHIFT = 11
    ADDITIVE = 12
    MULTIPLICATIVE = 13
    EXPONENTIATION = 14
    UNARY = 15
    POSTFIX = 16
    CALL = 18
    NEW = 19
    TAGGED_TEMPLATE = 20
    MEMBER = 21
    PRIMARY = 22


BINARY_PRECEDENCE = {
    "??": Precedence.COALESCE,
    "||": Precedence.LOGICAL_OR,
    "&&": Precedence.LOGICAL_AND,
    "|": Precedence.BITWISE_OR,
    "^": Precedence.BITWISE_XOR,
    "&": Precedence.BITWISE_AND,
    "==": Precedence.EQUALITY,
    "!=": Precedence.EQUALITY,
    "===": Precedence.EQUALITY,
    "!==": Precedence.EQUALITY,
    "<": Precedence.RELATIONAL,
    ">": Precedence.RELATIONAL,
    "<=": Precedence.RELATIONAL,
    ">=": Precedence.RELATIONAL,
    "in": Precedence.RELATIONAL,
    "instanceof": Precedence.RELATIONAL,
    "<<": Precedence.BITWISE_SHIFT,
    ">>": Precedence.BITWISE_SHIFT,
    ">>>": Precedence.BITWISE_SHIFT,
    "+": Precedence.ADDITIVE,
    "-": Precedence.ADDITIVE,
    "*": Precedence.MULTIPLICATIVE,
    "/": Precedence.MULTIPLICATIVE,
    "%": Precedence.MULTIPLICATIVE,
    "**": Precedence.EXPONENTIATION,
}

_PRECEDENCE_BY_TYPE = {
    "SequenceExpression": Precedence.SEQUENCE,
    "YieldExpression": Precedence.YIELD,
    "AssignmentExpression": Precedence.ASSIGNMENT,
    "ArrowFunctionExpression": Precedence.ARROW_FUNCTION,
    "ConditionalExpression": Precedence.CONDITIONAL,
    "UnaryExpression": Precedence.UNARY,
    "AwaitExpression": Precedence.UNARY,
    "CallExpression": Precedence.CALL,
    "NewExpression": Precedence.NEW,
    "TaggedTemplateExpression": Precedence.TAGGED_TEMPLATE,
    "MemberExpression": Precedence.MEMBER,
}

# Expression statements that would otherwise parse as something else.
_STATEMENT_START = re.compile(r"^(function\b|async\s+function\b|class\b|\{|let\s*\[)")

_STRING_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def generate(tree: n.Node, options: Optional[GeneratorOptions] = None) -> str:
    """Print a tree as JavaScript source.

    Args:
        tree: Program, statement or expression to print
        options: Formatting options (default: GeneratorOptions())

    Returns:
        Source text; programs and statements end with a newline

    Raises:
        ValueError: If the tree contains a node that cannot be printed in
            its position
    """
    generator = _Generator(options or GeneratorOptions())
    with recursion_limit():
        if isinstance(tree, n.Program):
            generator.program(tree)
        elif isinstance(tree, n.Statement):
            generator.statement(tree)
        else:
            return generator.expr(tree, Precedence.SEQUENCE)
    return generator.output()


def quote_string(value: str, quote: str = '"') -> str:
    """Return ``value`` as a JavaScript string literal."""
    out: List[str] = []
    for ch in value:
        if ch == quote:
            out.append("\\" + ch)
        elif ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            out.append(f"\\x{ord(ch):02x}")
        elif "\ud800" <= ch <= "\udfff":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return quote + "".join(out) + quote


def number_text(value) -> str:
    """Spell a number the way JavaScript would accept it back."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def precedence_of(node: n.Node) -> int:
    if isinstance(node, (n.BinaryExpression, n.LogicalExpression)):
        return BINARY_PRECEDENCE[node.operator]
    if isinstance(node, n.UpdateExpression):
        return Precedence.UNARY if node.prefix else Precedence.POSTFIX
    return _PRECEDENCE_BY_TYPE.get(node.type, Precedence.PRIMARY)


def _dangling_if(statement: n.Node) -> bool:
    """True if an ``else`` after ``statement`` would bind to an inner ``if``."""
    while True:
        if isinstance(statement, n.IfStatement):
            if statement.alternate is None:
                return True
            statement = statement.alternate
        elif isinstance(statement, (n.WhileStatement, n.ForStatement, n.ForInStatement,
                                    n.ForOfStatement, n.LabeledStatement)):
            statement = statement.body
        else:
            return False


def _contains_call(node: n.Node) -> bool:
    while isinstance(node, (n.MemberExpression, n.TaggedTemplateExpression)):
        node = node.object if isinstance(node, n.MemberExpression) else node.tag
    return isinstance(node, n.CallExpression)


def _mixes_coalesce(operator: str, operand: n.Node) -> bool:
    if not isinstance(operand, n.LogicalExpression):
        return False
    return (operator == "??") != (operand.operator == "??")


class _Generator:
    def __init__(self, options: GeneratorOptions):
        self.options = options
        self.quote = QUOTE_STYLES[options.quotes]
        self.collapse = options.brace_style == "collapse"
        self.level = 0
        self.lines: List[str] = []

    # ------------------------------------------------------------------
    # Output buffer
    # ------------------------------------------------------------------

    def output(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""

    def pad(self) -> str:
        return " " * (self.options.indent * self.level)

    @contextmanager
    def indented(self) -> Iterator[None]:
        self.level += 1
        try:
            yield
        finally:
            self.level -= 1

    def emit(self, text: str, join: bool = False) -> None:
        """Add a line; with ``join`` append it to the previous line instead."""
        if join and self.lines:
            self.lines[-1] += " " + text
        else:
            self.lines.append(self.pad() + text)

    def capture(self, produce: Callable[[], None]) -> List[str]:
        saved = self.lines
        self.lines = []
        try:
            produce()
            return self.lines
        finally:
            self.lines = saved

    def braced(self, header: str, produce: Callable[[], None]) -> str:
        """Return ``header`` followed by a braced body emitted by ``produce``."""
        with self.indented():
            inner = self.capture(produce)
        if not inner:
            return f"{header} {{}}" if header else "{}"
        body = "{\n" + "\n".join(inner) + "\n" + self.pad() + "}"
        if not header:
            return body
        if self.collapse:
            return f"{header} {body}"
        return f"{header}\n{self.pad()}{body}"

    def block(self, header: str, block: n.Node, leading: bool = True) -> str:
        def produce():
            if leading:
                for comment in block.leading_comments:
                    self.emit(comment.text)
            for statement in block.body:
                self.statement(statement)
            for comment in block.trailing_comments:
                self.emit(comment.text)

        return self.braced(header, produce)

    def trailing(self, comments: List[n.Comment]) -> None:
        for i, comment in enumerate(comments):
            self.emit(comment.text, join=i == 0 and "\n" not in comment.text)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def program(self, node: n.Program) -> None:
        for statement in node.body:
            self.statement(statement)
        for comment in node.trailing_comments:
            self.emit(comment.text)

    def statement(self, node: n.Node) -> None:
        handler = getattr(self, f"_stmt_{node.type}", None)
        if handler is None:
            raise ValueError(f"Cannot generate {node.type} in statement position")
        for comment in node.leading_comments:
            self.emit(comment.text)
        handler(node)
        if not isinstance(node, n.BlockStatement):
            self.trailing(node.trailing_comments)

    def clause(self, header: str, body: n.Node, join: bool = False) -> None:
        """Emit a compound statement header with its body."""
        if isinstance(body, n.BlockStatement):
            self.emit(self.block(header, body), join)
        elif isinstance(body, n.EmptyStatement) and not (body.leading_comments or body.trailing_comments):
            self.emit(header + ";", join)
        else:
            self.emit(header, join)
            with self.indented():
                self.statement(body)

    def declaration(self, node: n.VariableDeclaration, no_in: bool = False) -> str:
        parts = []
        for declarator in node.declarations:
            text = self.expr(declarator.id, Precedence.ASSIGNMENT)
            if declarator.init is not None:
                text += " = " + self.expr(declarator.init, Precedence.ASSIGNMENT, no_in)
            parts.append(text)
        return f"{node.kind} " + ", ".join(parts)

    def for_target(self, node: n.Node) -> str:
        if isinstance(node, n.VariableDeclaration):
            return self.declaration(node)
        return self.expr(node, Precedence.CALL)

    def _stmt_ExpressionStatement(self, node):
        text = self.expr(node.expression, Precedence.SEQUENCE)
        if _STATEMENT_START.match(text):
            text = f"({text})"
        self.emit(text + ";")

    def _stmt_StatementList(self, node):
        for statement in node.body:
            self.statement(statement)

    def _stmt_BlockStatement(self, node):
        self.emit(self.block("", node, leading=False))

    def _stmt_EmptyStatement(self, node):
        self.emit(";")

    def _stmt_DebuggerStatement(self, node):
        self.emit("debugger;")

    def _stmt_VariableDeclaration(self, node):
        self.emit(self.declaration(node) + ";")

    def _stmt_ReturnStatement(self, node):
        if node.argument is None:
            self.emit("return;")
        else:
            self.emit(f"return {self.expr(node.argument, Precedence.SEQUENCE)};")

    def _stmt_ThrowStatement(self, node):
        self.emit(f"throw {self.expr(node.argument, Precedence.SEQUENCE)};")

    def _stmt_BreakStatement(self, node):
        self.emit(f"break {node.label.name};" if node.label is not None else "break;")

    def _stmt_ContinueStatement(self, node):
        self.emit(f"continue {node.label.name};" if node.label is not None else "continue;")

    def _stmt_LabeledStatement(self, node):
        self.emit(f"{node.label.name}:")
        self.statement(node.body)

    def _stmt_IfStatement(self, node):
        self.if_statement(node, "", False)

    def if_statement(self, node: n.IfStatement, prefix: str, join: bool) -> None:
        consequent = node.consequent
        if node.alternate is not None and _dangling_if(consequent):
            consequent = n.BlockStatement(body=[consequent])
        self.clause(f"{prefix}if ({self.expr(node.test, Precedence.SEQUENCE)})", consequent, join)

        alternate = node.alternate
        if alternate is None:
            return
        join_else = self.collapse and isinstance(consequent, n.BlockStatement)
        if isinstance(alternate, n.IfStatement) and not alternate.leading_comments:
            self.if_statement(alternate, "else ", join_else)
            self.trailing(alternate.trailing_comments)
        else:
            self.clause("else", alternate, join_else)

    def _stmt_WhileStatement(self, node):
        self.clause(f"while ({self.expr(node.test, Precedence.SEQUENCE)})", node.body)

    def _stmt_DoWhileStatement(self, node):
        self.clause("do", node.body)
        join = self.collapse and isinstance(node.body, n.BlockStatement)
        self.emit(f"while ({self.expr(node.test, Precedence.SEQUENCE)});", join)

    def _stmt_ForStatement(self, node):
        if isinstance(node.init, n.VariableDeclaration):
            init = self.declaration(node.init, no_in=True)
        elif node.init is not None:
            init = self.expr(node.init, Precedence.SEQUENCE, no_in=True)
        else:
            init = ""
        test = " " + self.expr(node.test, Precedence.SEQUENCE) if node.test is not None else ""
        update = " " + self.expr(node.update, Precedence.SEQUENCE) if node.update is not None else ""
        self.clause(f"for ({init};{test};{update})", node.body)

    def _stmt_ForInStatement(self, node):
        header = f"for ({self.for_target(node.left)} in {self.expr(node.right, Precedence.SEQUENCE)})"
        self.clause(header, node.body)

    def _stmt_ForOfStatement(self, node):
        keyword = "for await" if node.is_await else "for"
        header = f"{keyword} ({self.for_target(node.left)} of {self.expr(node.right, Precedence.ASSIGNMENT)})"
        self.clause(header, node.body)

    def _stmt_TryStatement(self, node):
        self.emit(self.block("try", node.block))
        if node.handler is not None:
            handler = node.handler
            header = "catch"
            if handler.param is not None:
                header = f"catch ({self.expr(handler.param, Precedence.ASSIGNMENT)})"
            self.emit(self.block(header, handler.body), join=self.collapse)
        if node.finalizer is not None:
            self.emit(self.block("finally", node.finalizer), join=self.collapse)

    def _stmt_SwitchStatement(self, node):
        def produce():
            for case in node.cases:
                for comment in case.leading_comments:
                    self.emit(comment.text)
                if case.test is None:
                    self.emit("default:")
                else:
                    self.emit(f"case {self.expr(case.test, Precedence.SEQUENCE)}:")
                with self.indented():
                    for statement in case.consequent:
                        self.statement(statement)
                    for comment in case.trailing_comments:
                        self.emit(comment.text)

        self.emit(self.braced(f"switch ({self.expr(node.discriminant, Precedence.SEQUENCE)})", produce))

    def _stmt_FunctionDeclaration(self, node):
        self.emit(self.function_text(node))

    def _stmt_ClassDeclaration(self, node):
        self.emit(self.class_text(node))

    def _stmt_StatementPlaceholder(self, node):
        suffix = ".multiLine" if node.expect_multi_line else ""
        self.emit(f"{node.key}{suffix};")

    # ------------------------------------------------------------------
    # Functions and classes
    # ------------------------------------------------------------------

    def params(self, params: List[n.Node]) -> str:
        return ", ".join(self.expr(param, Precedence.ASSIGNMENT) for param in params)

    def function_text(self, node) -> str:
        head = "async " if node.is_async else ""
        head += "function*" if node.generator else "function"
        if node.id is not None:
            head += " " + self.expr(node.id, Precedence.PRIMARY)
        return self.block(f"{head}({self.params(node.params)})", node.body)

    def method_text(self, prefix: str, key: str, function: n.Node) -> str:
        head = prefix
        if function.is_async:
            head += "async "
        if function.generator:
            head += "*"
        return self.block(f"{head}{key}({self.params(function.params)})", function.body)

    def property_key(self, key: n.Node, computed: bool) -> str:
        if computed:
            return f"[{self.expr(key, Precedence.ASSIGNMENT)}]"
        return self.expr(key, Precedence.PRIMARY)

    def class_text(self, node) -> str:
        head = "class"
        if node.id is not None:
            head += " " + self.expr(node.id, Precedence.PRIMARY)
        if node.super_class is not None:
            head += " extends " + self.expr(node.super_class, Precedence.CALL)

        def produce():
            for member in node.body.body:
                for comment in member.leading_comments:
                    self.emit(comment.text)
                self.emit(self.class_member(member))
            for comment in node.body.trailing_comments:
                self.emit(comment.text)

        return self.braced(head, produce)

    def class_member(self, member: n.Node) -> str:
        prefix = "static " if member.static else ""
        key = self.property_key(member.key, member.computed)
        if isinstance(member, n.PropertyDefinition):
            text = prefix + key
            if member.value is not None:
                text += " = " + self.expr(member.value, Precedence.ASSIGNMENT)
            return text + ";"
        if member.kind in ("get", "set"):
            prefix += member.kind + " "
        return self.method_text(prefix, key, member.value)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def expr(self, node: n.Node, precedence: int, no_in: bool = False, force: bool = False) -> str:
        """Print an expression, parenthesized if it binds looser than ``precedence``.

        ``no_in`` marks a ``for`` initializer, where a bare ``in`` operator
        would be read as a ``for...in`` head.
        """
        handler = getattr(self, f"_expr_{node.type}", None)
        if handler is None:
            raise ValueError(f"Cannot generate {node.type} in expression position")
        in_operator = isinstance(node, n.BinaryExpression) and node.operator == "in"
        wrap = force or precedence_of(node) < precedence or (no_in and in_operator)
        text = handler(node, no_in and not wrap)
        return f"({text})" if wrap else text

    def _expr_Identifier(self, node, no_in):
        return node.name

    def _expr_Literal(self, node, no_in):
        kind = node.kind
        if kind == "string":
            return quote_string(node.value, self.quote)
        if kind == "boolean":
            return "true" if node.value else "false"
        if kind == "null":
            return "null"
        if kind == "regex":
            pattern, flags = node.value
            return f"/{pattern}/{flags}"
        if kind == "bigint":
            return node.raw or f"{node.value}n"
        return node.raw or number_text(node.value)

    def _expr_ThisExpression(self, node, no_in):
        return "this"

    def _expr_Super(self, node, no_in):
        return "super"

    def _expr_MetaProperty(self, node, no_in):
        return f"{node.meta.name}.{node.property.name}"

    def _expr_TemplateLiteral(self, node, no_in):
        parts = ["`"]
        for i, quasi in enumerate(node.quasis):
            parts.append(quasi.raw)
            if i < len(node.expressions):
                parts.append("${" + self.expr(node.expressions[i], Precedence.SEQUENCE) + "}")
        parts.append("`")
        return "".join(parts)

    def _expr_TaggedTemplateExpression(self, node, no_in):
        return self.expr(node.tag, Precedence.CALL) + self.expr(node.quasi, Precedence.PRIMARY)

    def _expr_ArrayExpression(self, node, no_in):
        items = ["" if element is None else self.expr(element, Precedence.ASSIGNMENT) for element in node.elements]
        text = ", ".join(items)
        if node.elements and node.elements[-1] is None:
            text += ","
        return f"[{text}]"

    _expr_ArrayPattern = _expr_ArrayExpression

    def _expr_ObjectExpression(self, node, no_in):
        if not node.properties:
            return "{}"
        last = len(node.properties) - 1
        with self.indented():
            lines = [
                self.pad() + self.property(prop) + ("," if i < last else "")
                for i, prop in enumerate(node.properties)
            ]
        return "{\n" + "\n".join(lines) + "\n" + self.pad() + "}"

    def _expr_ObjectPattern(self, node, no_in):
        return "{" + ", ".join(self.property(prop) for prop in node.properties) + "}"

    def _expr_Property(self, node, no_in):
        return self.property(node)

    def property(self, prop: n.Node) -> str:
        if isinstance(prop, (n.SpreadElement, n.RestElement)):
            return "..." + self.expr(prop.argument, Precedence.ASSIGNMENT)
        key = self.property_key(prop.key, prop.computed)
        if prop.kind in ("get", "set"):
            return self.method_text(prop.kind + " ", key, prop.value)
        if prop.method:
            return self.method_text("", key, prop.value)
        if prop.shorthand and isinstance(prop.key, n.Identifier):
            value = prop.value
            if isinstance(value, n.AssignmentPattern):
                value = value.left
            if isinstance(value, n.Identifier) and value.name == prop.key.name:
                return self.expr(prop.value, Precedence.ASSIGNMENT)
        return f"{key}: {self.expr(prop.value, Precedence.ASSIGNMENT)}"

    def _expr_SpreadElement(self, node, no_in):
        return "..." + self.expr(node.argument, Precedence.ASSIGNMENT)

    _expr_RestElement = _expr_SpreadElement

    def _expr_AssignmentPattern(self, node, no_in):
        return f"{self.expr(node.left, Precedence.CALL)} = {self.expr(node.right, Precedence.ASSIGNMENT)}"

    def _expr_FunctionExpression(self, node, no_in):
        return self.function_text(node)

    def _expr_ArrowFunctionExpression(self, node, no_in):
        head = ("async " if node.is_async else "") + f"({self.params(node.params)}) =>"
        if isinstance(node.body, n.BlockStatement):
            return self.block(head, node.body)
        body = self.expr(node.body, Precedence.ASSIGNMENT, no_in)
        if body.startswith("{"):
            body = f"({body})"
        return f"{head} {body}"

    def _expr_ClassExpression(self, node, no_in):
        return self.class_text(node)

    def _expr_UnaryExpression(self, node, no_in):
        operator = node.operator
        argument = self.expr(node.argument, Precedence.UNARY)
        if operator.isalpha():
            return f"{operator} {argument}"
        if operator in ("+", "-") and argument.startswith(operator):
            return f"{operator} {argument}"
        return operator + argument

    def _expr_UpdateExpression(self, node, no_in):
        if node.prefix:
            return node.operator + self.expr(node.argument, Precedence.UNARY)
        return self.expr(node.argument, Precedence.POSTFIX) + node.operator

    def _expr_BinaryExpression(self, node, no_in):
        operator = node.operator
        precedence = BINARY_PRECEDENCE[operator]
        if operator == "**":
            left = self.expr(
                node.left, precedence + 1, no_in,
                force=isinstance(node.left, (n.UnaryExpression, n.AwaitExpression)),
            )
            right = self.expr(node.right, precedence, no_in)
        else:
            left = self.expr(node.left, precedence, no_in, force=_mixes_coalesce(operator, node.left))
            right = self.expr(node.right, precedence + 1, no_in, force=_mixes_coalesce(operator, node.right))
        return f"{left} {operator} {right}"

    _expr_LogicalExpression = _expr_BinaryExpression

    def _expr_AssignmentExpression(self, node, no_in):
        left = self.expr(node.left, Precedence.CALL)
        return f"{left} {node.operator} {self.expr(node.right, Precedence.ASSIGNMENT, no_in)}"

    def _expr_ConditionalExpression(self, node, no_in):
        test = self.expr(node.test, Precedence.COALESCE, no_in)
        consequent = self.expr(node.consequent, Precedence.ASSIGNMENT, no_in)
        alternate = self.expr(node.alternate, Precedence.ASSIGNMENT, no_in)
        return f"{test} ? {consequent} : {alternate}"

    def _expr_SequenceExpression(self, node, no_in):
        return ", ".join(self.expr(e, Precedence.ASSIGNMENT, no_in) for e in node.expressions)

    def arguments(self, arguments: List[n.Node]) -> str:
        return ", ".join(self.expr(argument, Precedence.ASSIGNMENT) for argument in arguments)

    def _expr_CallExpression(self, node, no_in):
        callee = self.expr(node.callee, Precedence.CALL)
        chain = "?." if node.optional else ""
        return f"{callee}{chain}({self.arguments(node.arguments)})"

    def _expr_NewExpression(self, node, no_in):
        callee = self.expr(node.callee, Precedence.NEW, force=_contains_call(node.callee))
        return f"new {callee}({self.arguments(node.arguments)})"

    def _expr_MemberExpression(self, node, no_in):
        obj = self.expr(node.object, Precedence.CALL)
        if node.computed:
            chain = "?." if node.optional else ""
            return f"{obj}{chain}[{self.expr(node.property, Precedence.SEQUENCE)}]"
        if isinstance(node.object, n.Literal) and node.object.kind == "number" and obj.isdigit():
            obj = f"({obj})"
        return f"{obj}{'?.' if node.optional else '.'}{node.property.name}"

    def _expr_YieldExpression(self, node, no_in):
        keyword = "yield*" if node.delegate else "yield"
        if node.argument is None:
            return keyword
        return f"{keyword} {self.expr(node.argument, Precedence.YIELD, no_in)}"

    def _expr_AwaitExpression(self, node, no_in):
        return "await " + self.expr(node.argument, Precedence.UNARY)

    def _expr_GenericPlaceholder(self, node, no_in):
        return node.key

    def _expr_ExpressionPlaceholder(self, node, no_in):
        return node.key + (".orDeclaration" if node.allow_declarations else "")
