"""JavaScript parser built on tree-sitter.

tree-sitter produces a concrete syntax tree that keeps every token. This
module converts it into the node kinds of ``jstidy.core.schema.nodes``:
parentheses disappear, escapes in strings are decoded, ``for (let x of y)``
heads become VariableDeclarations and comments are attached to statements.

Example:
    >>> program = parse("if (a) b();")
    >>> program.body[0].type
    'IfStatement'
"""

import logging
from typing import List, Optional, Tuple

try:
    import tree_sitter_javascript
    from tree_sitter import Language, Parser
except ImportError as e:
    raise ImportError(
        "tree-sitter is required. Install with: pip install tree-sitter tree-sitter-javascript"
    ) from e

from jstidy.core.errors import ParseError, UnsupportedSyntaxError
from jstidy.core.schema import nodes as n
from jstidy.core.traverse import recursion_limit

logger = logging.getLogger(__name__)

_parser: Optional[Parser] = None

_COMMENT_TYPES = ("comment", "html_comment", "hash_bang_line")

# Containers whose comments are attached by their own statement-list handling.
_COMMENT_BOUNDARIES = ("statement_block", "class_body", "switch_body")

_LOGICAL_OPERATORS = ("&&", "||", "??")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


def get_parser() -> Parser:
    """Return the shared tree-sitter parser for JavaScript."""
    global _parser
    if _parser is None:
        _parser = Parser(Language(tree_sitter_javascript.language()))
        logger.debug("Loaded tree-sitter JavaScript grammar")
    return _parser


def parse(source: str) -> n.Program:
    """Parse JavaScript source text into a Program node.

    Args:
        source: Script source text

    Returns:
        Program node owning the converted tree

    Raises:
        ParseError: If the source contains syntax errors
        UnsupportedSyntaxError: If the source uses syntax outside the node set
    """
    data = source.encode("utf-8")
    tree = get_parser().parse(data)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        row, column = bad.start_point if bad is not None else root.start_point
        raise ParseError("Syntax error", row + 1, column + 1)
    with recursion_limit():
        return _Converter(data).program(root)


def _first_error(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def decode_escape(sequence: str) -> str:
    """Decode one JavaScript escape sequence (including its backslash)."""
    body = sequence[1:]
    head = body[:1]
    if head in ("\n", "\r", "\u2028", "\u2029"):
        return ""
    if head == "x":
        return chr(int(body[1:3], 16))
    if head == "u":
        if body[1:2] == "{":
            return chr(int(body[2:-1], 16))
        return chr(int(body[1:5], 16))
    if head.isdigit() and all(c in "01234567" for c in body):
        return chr(int(body, 8))
    return _SIMPLE_ESCAPES.get(head, body)


def number_value(raw: str) -> Tuple[str, object]:
    """Return ``(kind, value)`` for a numeric literal spelling."""
    text = raw.replace("_", "")
    lower = text.lower()
    if lower.endswith("n"):
        return "bigint", int(text[:-1], 0)
    if lower.startswith(("0x", "0o", "0b")):
        return "number", int(text, 0)
    if len(text) > 1 and text[0] == "0" and text.isdigit():
        if all(c in "01234567" for c in text):
            return "number", int(text, 8)
        return "number", int(text, 10)
    if "." in lower or "e" in lower:
        return "number", float(text)
    return "number", int(text)


def _join_surrogates(value: str) -> str:
    if not any("\ud800" <= c <= "\udfff" for c in value):
        return value
    try:
        return value.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        # Lone surrogates stay as decoded.
        return value


class _Converter:
    """Converts one tree-sitter tree into nodes."""

    def __init__(self, source: bytes):
        self.source = source

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def text(self, node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def unsupported(self, node) -> UnsupportedSyntaxError:
        row, column = node.start_point
        return UnsupportedSyntaxError(
            f"Unsupported syntax: {node.type}", node.type, row + 1, column + 1
        )

    @staticmethod
    def named(node) -> list:
        return [c for c in node.named_children if c.type not in _COMMENT_TYPES]

    def field(self, node, name: str):
        child = node.child_by_field_name(name)
        if child is None:
            raise self.unsupported(node)
        return child

    def comment(self, node) -> n.Comment:
        return n.Comment(self.text(node).rstrip())

    def inner_comments(self, node) -> List[n.Comment]:
        """Collect comments inside ``node`` that no statement list claims."""
        found: List[n.Comment] = []
        pending = list(reversed(node.children))
        while pending:
            child = pending.pop()
            if child.type in _COMMENT_TYPES:
                found.append(self.comment(child))
            elif child.type not in _COMMENT_BOUNDARIES:
                pending.extend(reversed(child.children))
        return found

    def statements(self, children) -> Tuple[List[n.Node], List[n.Comment]]:
        """Convert a run of statement nodes, attaching comments.

        A comment starting on the line a statement ends on trails that
        statement; other comments lead the next statement.

        Returns:
            Tuple of (statements, comments left over after the last statement
            when there is no statement to carry them)
        """
        body: List[n.Node] = []
        pending: List[n.Comment] = []
        last_row = -1
        for child in children:
            if child.type in _COMMENT_TYPES:
                if body and not pending and child.start_point[0] == last_row:
                    body[-1].trailing_comments.append(self.comment(child))
                else:
                    pending.append(self.comment(child))
                continue
            if not child.is_named:
                continue
            statement = self.statement(child)
            statement.leading_comments = pending + statement.leading_comments
            if child.type not in _COMMENT_BOUNDARIES:
                statement.trailing_comments.extend(self.inner_comments(child))
            pending = []
            last_row = child.end_point[0]
            body.append(statement)
        if pending and body:
            body[-1].trailing_comments.extend(pending)
            pending = []
        return body, pending

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def program(self, root) -> n.Program:
        body, dangling = self.statements(root.children)
        return n.Program(body=body, trailing_comments=dangling)

    def statement(self, node) -> n.Node:
        handler = getattr(self, f"_stmt_{node.type}", None)
        if handler is None:
            raise self.unsupported(node)
        return handler(node)

    def _stmt_expression_statement(self, node):
        return n.ExpressionStatement(self.expression(self.named(node)[0]))

    def _stmt_variable_declaration(self, node):
        return self.declaration(node, "var")

    def _stmt_lexical_declaration(self, node):
        return self.declaration(node, self.text(self.field(node, "kind")))

    def declaration(self, node, kind: str) -> n.VariableDeclaration:
        declarators = []
        for child in self.named(node):
            if child.type != "variable_declarator":
                continue
            value = child.child_by_field_name("value")
            declarators.append(n.VariableDeclarator(
                id=self.pattern(self.field(child, "name")),
                init=self.expression(value) if value is not None else None,
            ))
        return n.VariableDeclaration(kind=kind, declarations=declarators)

    def _stmt_statement_block(self, node):
        body, dangling = self.statements(node.children)
        return n.BlockStatement(body=body, trailing_comments=dangling)

    def block(self, node) -> n.BlockStatement:
        if node.type != "statement_block":
            raise self.unsupported(node)
        return self._stmt_statement_block(node)

    def _stmt_empty_statement(self, node):
        return n.EmptyStatement()

    def _stmt_debugger_statement(self, node):
        return n.DebuggerStatement()

    def _stmt_if_statement(self, node):
        alternative = node.child_by_field_name("alternative")
        alternate = None
        if alternative is not None:
            alternate = self.statement(self.named(alternative)[0])
        return n.IfStatement(
            test=self.expression(self.field(node, "condition")),
            consequent=self.statement(self.field(node, "consequence")),
            alternate=alternate,
        )

    def _stmt_while_statement(self, node):
        return n.WhileStatement(
            test=self.expression(self.field(node, "condition")),
            body=self.statement(self.field(node, "body")),
        )

    def _stmt_do_statement(self, node):
        return n.DoWhileStatement(
            body=self.statement(self.field(node, "body")),
            test=self.expression(self.field(node, "condition")),
        )

    def _for_clause(self, parts) -> Optional[n.Node]:
        named = [p for p in parts if p.is_named and p.type not in _COMMENT_TYPES]
        if not named:
            return None
        part = named[0]
        if part.type == "empty_statement":
            return None
        if part.type == "variable_declaration":
            return self.declaration(part, "var")
        if part.type == "lexical_declaration":
            return self.declaration(part, self.text(self.field(part, "kind")))
        if part.type == "expression_statement":
            return self.expression(self.named(part)[0])
        return self.expression(part)

    def _stmt_for_statement(self, node):
        return n.ForStatement(
            init=self._for_clause(node.children_by_field_name("initializer")),
            test=self._for_clause(node.children_by_field_name("condition")),
            update=self._for_clause(node.children_by_field_name("increment")),
            body=self.statement(self.field(node, "body")),
        )

    def _stmt_for_in_statement(self, node):
        tokens = [c.type for c in node.children if not c.is_named]
        left = self.pattern(self.field(node, "left"))
        kind = node.child_by_field_name("kind")
        if kind is not None:
            value = node.child_by_field_name("value")
            left = n.VariableDeclaration(
                kind=self.text(kind),
                declarations=[n.VariableDeclarator(
                    id=left,
                    init=self.expression(value) if value is not None else None,
                )],
            )
        right = self.expression(self.field(node, "right"))
        body = self.statement(self.field(node, "body"))
        if "of" in tokens:
            return n.ForOfStatement(left=left, right=right, body=body, is_await="await" in tokens)
        return n.ForInStatement(left=left, right=right, body=body)

    def _stmt_return_statement(self, node):
        named = self.named(node)
        return n.ReturnStatement(self.expression(named[0]) if named else None)

    def _stmt_throw_statement(self, node):
        return n.ThrowStatement(self.expression(self.named(node)[0]))

    def _label(self, node):
        label = node.child_by_field_name("label")
        return n.Identifier(self.text(label)) if label is not None else None

    def _stmt_break_statement(self, node):
        return n.BreakStatement(self._label(node))

    def _stmt_continue_statement(self, node):
        return n.ContinueStatement(self._label(node))

    def _stmt_labeled_statement(self, node):
        return n.LabeledStatement(
            label=n.Identifier(self.text(self.field(node, "label"))),
            body=self.statement(self.field(node, "body")),
        )

    def _stmt_try_statement(self, node):
        handler = node.child_by_field_name("handler")
        finalizer = node.child_by_field_name("finalizer")
        catch = None
        if handler is not None:
            parameter = handler.child_by_field_name("parameter")
            catch = n.CatchClause(
                param=self.pattern(parameter) if parameter is not None else None,
                body=self.block(self.field(handler, "body")),
            )
        return n.TryStatement(
            block=self.block(self.field(node, "body")),
            handler=catch,
            finalizer=self.block(self.field(finalizer, "body")) if finalizer is not None else None,
        )

    def _stmt_switch_statement(self, node):
        cases: List[n.Node] = []
        pending: List[n.Comment] = []
        for child in self.field(node, "body").children:
            if child.type in _COMMENT_TYPES:
                pending.append(self.comment(child))
            elif child.type in ("switch_case", "switch_default"):
                case = self._switch_case(child)
                case.leading_comments = pending
                pending = []
                cases.append(case)
        if pending and cases:
            cases[-1].trailing_comments.extend(pending)
        return n.SwitchStatement(
            discriminant=self.expression(self.field(node, "value")),
            cases=cases,
        )

    def _switch_case(self, node) -> n.SwitchCase:
        test = None
        if node.type == "switch_case":
            test = self.expression(self.field(node, "value"))
        colon = next(i for i, c in enumerate(node.children) if c.type == ":")
        consequent, dangling = self.statements(node.children[colon + 1:])
        return n.SwitchCase(test=test, consequent=consequent, trailing_comments=dangling)

    def _stmt_function_declaration(self, node):
        return self.function(node, n.FunctionDeclaration)

    def _stmt_generator_function_declaration(self, node):
        return self.function(node, n.FunctionDeclaration)

    def _stmt_class_declaration(self, node):
        return self.class_(node, n.ClassDeclaration)

    # ------------------------------------------------------------------
    # Functions and classes
    # ------------------------------------------------------------------

    def params(self, node) -> List[n.Node]:
        return [self.pattern(child) for child in self.named(node)]

    def function(self, node, cls):
        tokens = [c.type for c in node.children if not c.is_named]
        name = node.child_by_field_name("name")
        return cls(
            id=n.Identifier(self.text(name)) if name is not None else None,
            params=self.params(self.field(node, "parameters")),
            body=self.block(self.field(node, "body")),
            generator="*" in tokens,
            is_async="async" in tokens,
        )

    def class_(self, node, cls):
        name = node.child_by_field_name("name")
        super_class = None
        members: List[n.Node] = []
        for child in node.children:
            if child.type == "class_heritage":
                super_class = self.expression(self.named(child)[0])
            elif child.type == "decorator":
                raise self.unsupported(child)
        pending: List[n.Comment] = []
        for child in self.field(node, "body").children:
            if child.type in _COMMENT_TYPES:
                pending.append(self.comment(child))
                continue
            if child.type == "method_definition":
                member = self._method_definition(child)
            elif child.type == "field_definition":
                member = self._field_definition(child)
            elif child.is_named:
                raise self.unsupported(child)
            else:
                continue
            member.leading_comments = pending
            pending = []
            members.append(member)
        return cls(
            id=n.Identifier(self.text(name)) if name is not None else None,
            super_class=super_class,
            body=n.ClassBody(body=members, trailing_comments=pending),
        )

    def _modifiers(self, node, name) -> List[str]:
        words: List[str] = []
        for child in node.children:
            if child.start_byte >= name.start_byte:
                break
            if child.type == "decorator":
                raise self.unsupported(child)
            words.extend(self.text(child).split())
        return words

    def property_key(self, node) -> Tuple[n.Node, bool]:
        if node.type == "computed_property_name":
            return self.expression(self.named(node)[0]), True
        if node.type in ("string", "number"):
            return self.expression(node), False
        return n.Identifier(self.text(node)), False

    def _method_function(self, node, words) -> n.FunctionExpression:
        return n.FunctionExpression(
            id=None,
            params=self.params(self.field(node, "parameters")),
            body=self.block(self.field(node, "body")),
            generator="*" in words,
            is_async="async" in words,
        )

    def _method_definition(self, node) -> n.MethodDefinition:
        name = self.field(node, "name")
        words = self._modifiers(node, name)
        key, computed = self.property_key(name)
        kind = "method"
        if "get" in words:
            kind = "get"
        elif "set" in words:
            kind = "set"
        static = "static" in words
        if kind == "method" and not static and not computed and getattr(key, "name", None) == "constructor":
            kind = "constructor"
        return n.MethodDefinition(
            key=key,
            value=self._method_function(node, words),
            kind=kind,
            computed=computed,
            static=static,
        )

    def _field_definition(self, node) -> n.PropertyDefinition:
        name = self.field(node, "property")
        key, computed = self.property_key(name)
        value = node.child_by_field_name("value")
        return n.PropertyDefinition(
            key=key,
            value=self.expression(value) if value is not None else None,
            computed=computed,
            static="static" in self._modifiers(node, name),
        )

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def expression(self, node) -> n.Node:
        handler = getattr(self, f"_expr_{node.type}", None)
        if handler is None:
            raise self.unsupported(node)
        return handler(node)

    def _expr_parenthesized_expression(self, node):
        return self.expression(self.named(node)[0])

    def _expr_identifier(self, node):
        return n.Identifier(self.text(node))

    _expr_undefined = _expr_identifier
    _expr_property_identifier = _expr_identifier
    _expr_shorthand_property_identifier = _expr_identifier
    _expr_private_property_identifier = _expr_identifier

    def _expr_this(self, node):
        return n.ThisExpression()

    def _expr_super(self, node):
        return n.Super()

    def _expr_true(self, node):
        return n.Literal("boolean", True, "true")

    def _expr_false(self, node):
        return n.Literal("boolean", False, "false")

    def _expr_null(self, node):
        return n.Literal("null", None, "null")

    def _expr_number(self, node):
        raw = self.text(node)
        kind, value = number_value(raw)
        return n.Literal(kind, value, raw)

    def _expr_string(self, node):
        parts: List[str] = []
        for child in node.children:
            if child.type == "string_fragment":
                parts.append(self.text(child))
            elif child.type == "escape_sequence":
                parts.append(decode_escape(self.text(child)))
        return n.Literal("string", _join_surrogates("".join(parts)), self.text(node))

    def _expr_regex(self, node):
        flags = node.child_by_field_name("flags")
        pattern = self.text(self.field(node, "pattern"))
        return n.Literal(
            "regex",
            (pattern, self.text(flags) if flags is not None else ""),
            self.text(node),
        )

    def _expr_template_string(self, node):
        quasis: List[n.Node] = []
        expressions: List[n.Node] = []
        start = node.start_byte + 1
        for child in node.children:
            if child.type == "template_substitution":
                quasis.append(n.TemplateElement(self.source[start:child.start_byte].decode("utf-8")))
                expressions.append(self.expression(self.named(child)[0]))
                start = child.end_byte
        quasis.append(n.TemplateElement(self.source[start:node.end_byte - 1].decode("utf-8")))
        return n.TemplateLiteral(quasis=quasis, expressions=expressions)

    def _elements(self, node, convert) -> List[Optional[n.Node]]:
        elements: List[Optional[n.Node]] = []
        expect_element = True
        for child in node.children[1:-1]:
            if child.type == ",":
                if expect_element:
                    elements.append(None)
                expect_element = True
            elif child.is_named and child.type not in _COMMENT_TYPES:
                elements.append(convert(child))
                expect_element = False
        return elements

    def _expr_array(self, node):
        return n.ArrayExpression(elements=self._elements(node, self.expression))

    def _expr_spread_element(self, node):
        return n.SpreadElement(self.expression(self.named(node)[0]))

    def _expr_object(self, node):
        properties: List[n.Node] = []
        for child in self.named(node):
            if child.type == "pair":
                key, computed = self.property_key(self.field(child, "key"))
                properties.append(n.Property(
                    key=key,
                    value=self.expression(self.field(child, "value")),
                    computed=computed,
                ))
            elif child.type == "shorthand_property_identifier":
                name = self.text(child)
                properties.append(n.Property(
                    key=n.Identifier(name), value=n.Identifier(name), shorthand=True
                ))
            elif child.type == "spread_element":
                properties.append(self._expr_spread_element(child))
            elif child.type == "method_definition":
                name = self.field(child, "name")
                words = self._modifiers(child, name)
                key, computed = self.property_key(name)
                kind = "get" if "get" in words else "set" if "set" in words else "init"
                properties.append(n.Property(
                    key=key,
                    value=self._method_function(child, words),
                    kind=kind,
                    computed=computed,
                    method=kind == "init",
                ))
            else:
                raise self.unsupported(child)
        return n.ObjectExpression(properties=properties)

    def _expr_function_expression(self, node):
        return self.function(node, n.FunctionExpression)

    _expr_function = _expr_function_expression
    _expr_generator_function = _expr_function_expression

    def _expr_arrow_function(self, node):
        tokens = [c.type for c in node.children if not c.is_named]
        parameter = node.child_by_field_name("parameter")
        if parameter is not None:
            params = [n.Identifier(self.text(parameter))]
        else:
            params = self.params(self.field(node, "parameters"))
        body = self.field(node, "body")
        return n.ArrowFunctionExpression(
            params=params,
            body=self.block(body) if body.type == "statement_block" else self.expression(body),
            is_async="async" in tokens,
        )

    def _expr_class(self, node):
        return self.class_(node, n.ClassExpression)

    def _expr_meta_property(self, node):
        meta, _, prop = self.text(node).partition(".")
        return n.MetaProperty(n.Identifier(meta.strip()), n.Identifier(prop.strip()))

    def _expr_unary_expression(self, node):
        return n.UnaryExpression(
            operator=self.text(self.field(node, "operator")),
            argument=self.expression(self.field(node, "argument")),
        )

    def _expr_update_expression(self, node):
        return n.UpdateExpression(
            operator=self.text(self.field(node, "operator")),
            argument=self.pattern(self.field(node, "argument")),
            prefix=node.children[0].type in ("++", "--"),
        )

    def _expr_binary_expression(self, node):
        # Chains like a + b + c nest to the left; walk the spine iteratively
        # so long concatenations do not exhaust the stack.
        spine = []
        while node.type == "binary_expression":
            spine.append(node)
            node = self.field(node, "left")
        result = self.expression(node)
        for link in reversed(spine):
            operator = self.text(self.field(link, "operator"))
            cls = n.LogicalExpression if operator in _LOGICAL_OPERATORS else n.BinaryExpression
            result = cls(
                operator=operator,
                left=result,
                right=self.expression(self.field(link, "right")),
            )
        return result

    def _expr_assignment_expression(self, node):
        return n.AssignmentExpression(
            operator="=",
            left=self.pattern(self.field(node, "left")),
            right=self.expression(self.field(node, "right")),
        )

    def _expr_augmented_assignment_expression(self, node):
        return n.AssignmentExpression(
            operator=self.text(self.field(node, "operator")),
            left=self.pattern(self.field(node, "left")),
            right=self.expression(self.field(node, "right")),
        )

    def _expr_ternary_expression(self, node):
        return n.ConditionalExpression(
            test=self.expression(self.field(node, "condition")),
            consequent=self.expression(self.field(node, "consequence")),
            alternate=self.expression(self.field(node, "alternative")),
        )

    def _expr_sequence_expression(self, node):
        expressions: List[n.Node] = []
        pending = [node]
        while pending:
            current = pending.pop()
            if current.type == "sequence_expression":
                pending.extend(reversed(self.named(current)))
            else:
                expressions.append(self.expression(current))
        return n.SequenceExpression(expressions=expressions)

    def _arguments(self, node) -> List[n.Node]:
        return [self.expression(child) for child in self.named(node)]

    def _expr_call_expression(self, node):
        function = self.field(node, "function")
        if function.type == "import":
            raise self.unsupported(function)
        arguments = self.field(node, "arguments")
        callee = self.expression(function)
        if arguments.type == "template_string":
            return n.TaggedTemplateExpression(tag=callee, quasi=self.expression(arguments))
        return n.CallExpression(
            callee=callee,
            arguments=self._arguments(arguments),
            optional=node.child_by_field_name("optional_chain") is not None,
        )

    def _expr_new_expression(self, node):
        arguments = node.child_by_field_name("arguments")
        return n.NewExpression(
            callee=self.expression(self.field(node, "constructor")),
            arguments=self._arguments(arguments) if arguments is not None else [],
        )

    def _expr_member_expression(self, node):
        obj = self.field(node, "object")
        if obj.type == "import":
            raise self.unsupported(obj)
        return n.MemberExpression(
            object=self.expression(obj),
            property=n.Identifier(self.text(self.field(node, "property"))),
            computed=False,
            optional=node.child_by_field_name("optional_chain") is not None,
        )

    def _expr_subscript_expression(self, node):
        return n.MemberExpression(
            object=self.expression(self.field(node, "object")),
            property=self.expression(self.field(node, "index")),
            computed=True,
            optional=node.child_by_field_name("optional_chain") is not None,
        )

    def _expr_yield_expression(self, node):
        tokens = [c.type for c in node.children if not c.is_named]
        named = self.named(node)
        return n.YieldExpression(
            argument=self.expression(named[0]) if named else None,
            delegate="*" in tokens,
        )

    def _expr_await_expression(self, node):
        return n.AwaitExpression(self.expression(self.named(node)[0]))

    # ------------------------------------------------------------------
    # Binding and assignment targets
    # ------------------------------------------------------------------

    def pattern(self, node) -> n.Node:
        """Convert a binding or assignment target."""
        kind = node.type
        if kind in ("identifier", "shorthand_property_identifier_pattern", "undefined"):
            return n.Identifier(self.text(node))
        if kind == "parenthesized_expression":
            return self.pattern(self.named(node)[0])
        if kind in ("object_pattern", "object"):
            return self._object_pattern(node)
        if kind in ("array_pattern", "array"):
            return n.ArrayPattern(elements=self._elements(node, self.pattern))
        if kind in ("assignment_pattern", "assignment_expression"):
            return n.AssignmentPattern(
                left=self.pattern(self.field(node, "left")),
                right=self.expression(self.field(node, "right")),
            )
        if kind in ("rest_pattern", "spread_element"):
            return n.RestElement(self.pattern(self.named(node)[0]))
        return self.expression(node)

    def _object_pattern(self, node) -> n.ObjectPattern:
        properties: List[n.Node] = []
        for child in self.named(node):
            kind = child.type
            if kind in ("pair_pattern", "pair"):
                key, computed = self.property_key(self.field(child, "key"))
                properties.append(n.Property(
                    key=key,
                    value=self.pattern(self.field(child, "value")),
                    computed=computed,
                ))
            elif kind in ("shorthand_property_identifier_pattern", "shorthand_property_identifier"):
                name = self.text(child)
                properties.append(n.Property(
                    key=n.Identifier(name), value=n.Identifier(name), shorthand=True
                ))
            elif kind == "object_assignment_pattern":
                left = self.pattern(self.field(child, "left"))
                value = n.AssignmentPattern(left=left, right=self.expression(self.field(child, "right")))
                if isinstance(left, n.Identifier):
                    properties.append(n.Property(
                        key=n.Identifier(left.name), value=value, shorthand=True
                    ))
                else:
                    raise self.unsupported(child)
            elif kind in ("rest_pattern", "spread_element"):
                properties.append(n.RestElement(self.pattern(self.named(child)[0])))
            else:
                raise self.unsupported(child)
        return n.ObjectPattern(properties=properties)
