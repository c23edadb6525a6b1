"""Tests for the rewrite driver."""

from jstidy.core.rewriter import SEQUENCE_EXPANSION, Rewriter
from jstidy.core.rules import RewriteRule
from jstidy.js.generator import generate
from jstidy.js.parser import parse

INTEROP_HELPER = "function _interop(e) { return e && e.__esModule ? e : { default: e }; }\n"


def rewrite(code, rewriter=None):
    tree = parse(code)
    (rewriter or Rewriter()).rewrite(tree)
    return generate(tree)


class TestExpressionRules:
    """Tests for literal and expression-statement rules."""

    def test_boolean_literals(self):
        """Test that minified booleans are spelled out."""
        assert rewrite("x = !1;") == "x = false;\n"
        assert rewrite("if (!0) f();") == "if (true)\n  f();\n"

    def test_void_zero(self):
        """Test that void 0 becomes undefined."""
        assert rewrite("x = void 0;") == "x = undefined;\n"

    def test_and_statement(self):
        """Test that a guarded call becomes an if."""
        assert rewrite("a && b();") == "if (a)\n  b();\n"

    def test_or_statement(self):
        """Test that a fallback call becomes a negated if."""
        assert rewrite("a || b();") == "if (!a)\n  b();\n"

    def test_conditional_statement(self):
        """Test that a conditional statement becomes if/else."""
        assert rewrite("a ? b() : c();") == "if (a)\n  b();\nelse\n  c();\n"

    def test_negation_is_parenthesized(self):
        """Test that a negated binary test keeps its meaning."""
        assert rewrite("a < 0 || b();") == "if (!(a < 0))\n  b();\n"

    def test_traversal_continues_into_replacement(self):
        """Test that rules apply inside a freshly inserted subtree."""
        assert rewrite("a && (b || c());") == "if (a)\n  if (!b)\n    c();\n"

    def test_expressions_in_other_positions_untouched(self):
        """Test that statement rules only match statements."""
        assert rewrite("x = a && b();") == "x = a && b();\n"


class TestSequences:
    """Tests for comma-expression statements."""

    def test_sequence_statement_is_split(self):
        """Test that a comma statement becomes several statements."""
        rewriter = Rewriter()
        assert rewrite("a(), b(), c();", rewriter) == "a();\nb();\nc();\n"
        assert rewriter.stats == {SEQUENCE_EXPANSION: 1}

    def test_sequence_in_single_statement_position(self):
        """Test that a split body is wrapped in a block."""
        assert rewrite("if (x) a(), b();") == "if (x)\n{\n  a();\n  b();\n}\n"

    def test_sequence_in_switch_case(self):
        """Test that a split statement is spliced into a case."""
        assert rewrite("switch (x) { case 1: a(), b(); }") == (
            "switch (x)\n{\n  case 1:\n    a();\n    b();\n}\n"
        )

    def test_sequence_comments(self):
        """Test that comments move to the first and last statements."""
        assert rewrite("// first\na(), b(); // last\n") == "// first\na();\nb(); // last\n"

    def test_nested_split(self):
        """Test that a split inside a rewritten statement is braced."""
        assert rewrite("a && (b(), c());") == "if (a)\n{\n  b();\n  c();\n}\n"


class TestBraces:
    """Tests for the brace rules."""

    def test_nested_if(self):
        """Test that an if guarding another if gets braces.

        Only the outer body is braced: the inner if's body is an expression
        statement, which never counts as multi-line, so ``y;`` stays unbraced
        even on later passes.
        """
        assert rewrite("if (cond) if (x) y;") == "if (cond)\n{\n  if (x)\n    y;\n}\n"

    def test_simple_body_left_alone(self):
        """Test that a single-line body keeps no braces."""
        assert rewrite("if (a) b();") == "if (a)\n  b();\n"

    def test_if_with_else_left_alone(self):
        """Test that if/else is not braced by the if rule."""
        assert rewrite("if (a) for (;;) b(); else c();") == (
            "if (a)\n  for (;;)\n    b();\nelse\n  c();\n"
        )

    def test_while(self):
        """Test while loops."""
        assert rewrite("while (a) if (b) c();") == "while (a)\n{\n  if (b)\n    c();\n}\n"

    def test_do_while(self):
        """Test do/while loops."""
        assert rewrite("do if (a) b(); while (c);") == "do\n{\n  if (a)\n    b();\n}\nwhile (c);\n"

    def test_for(self):
        """Test classic for loops."""
        assert rewrite("for (i = 0; i < n; i++) if (i) f();") == (
            "for (i = 0; i < n; i++)\n{\n  if (i)\n    f();\n}\n"
        )

    def test_for_of_with_declaration(self):
        """Test for...of loops declaring their variable."""
        assert rewrite("for (const x of xs) if (x) f(x);") == (
            "for (const x of xs)\n{\n  if (x)\n    f(x);\n}\n"
        )

    def test_custom_multi_line_kinds(self):
        """Test restricting which statements count as compound."""
        rewriter = Rewriter(multi_line_kinds=["IfStatement"])
        assert rewrite("while (a) for (;;) b();", rewriter) == "while (a)\n  for (;;)\n    b();\n"


class TestInteropHelper:
    """Tests for canonical helper naming."""

    def test_helper_and_references_renamed(self):
        """Test that the helper and its call sites get the canonical name."""
        tree = parse(INTEROP_HELPER + "var m = _interop(require(\"m\"));")
        Rewriter().rewrite(tree)
        helper, declaration = tree.body
        assert helper.id.name == "_interopRequireDefault"
        assert helper.params[0].name == "obj"
        assert declaration.declarations[0].init.callee.name == "_interopRequireDefault"

    def test_name_collision_gets_suffix(self):
        """Test that a taken canonical name is suffixed."""
        tree = parse("var _interopRequireDefault = 1;\n" + INTEROP_HELPER + "_interop(x);")
        Rewriter().rewrite(tree)
        assert tree.body[1].id.name == "_interopRequireDefault1"
        assert tree.body[2].expression.callee.name == "_interopRequireDefault1"
        assert tree.body[0].declarations[0].id.name == "_interopRequireDefault"

    def test_canonical_helper_kept(self):
        """Test that a helper with the canonical name is not renamed."""
        code = (
            "function _interopRequireDefault(obj) { return obj && obj.__esModule ? obj : { default: obj }; }\n"
            "_interopRequireDefault(x);"
        )
        tree = parse(code)
        rewriter = Rewriter()
        rewriter.rewrite(tree)
        assert tree == parse(code)
        assert rewriter.stats == {}

    def test_second_helper_next_to_canonical_one(self):
        """Test that a duplicate helper is suffixed, leaving the canonical one alone."""
        tree = parse(
            "function _interopRequireDefault(obj) { return obj && obj.__esModule ? obj : { default: obj }; }\n"
            + INTEROP_HELPER
            + "_interopRequireDefault(a);\n_interop(b);"
        )
        rewriter = Rewriter()
        rewriter.rewrite(tree)
        assert tree.body[0].id.name == "_interopRequireDefault"
        assert tree.body[1].id.name == "_interopRequireDefault1"
        assert tree.body[2].expression.callee.name == "_interopRequireDefault"
        assert tree.body[3].expression.callee.name == "_interopRequireDefault1"
        assert rewriter.stats == {"interop-require-default": 1}

    def test_helper_declared_in_block(self):
        """Test that calls after the block follow a helper declared inside it."""
        tree = parse("if (x) {\n" + INTEROP_HELPER + "}\n_interop(1);")
        Rewriter().rewrite(tree)
        assert tree.body[0].consequent.body[0].id.name == "_interopRequireDefault"
        assert tree.body[1].expression.callee.name == "_interopRequireDefault"

    def test_helper_inside_function(self):
        """Test renaming a helper declared in a nested scope."""
        tree = parse("function outer() {\n" + INTEROP_HELPER + "return _interop(y);\n}\n_interop(z);")
        Rewriter().rewrite(tree)
        outer = tree.body[0]
        assert outer.body.body[0].id.name == "_interopRequireDefault"
        assert outer.body.body[1].argument.callee.name == "_interopRequireDefault"
        # The global call refers to a different binding.
        assert tree.body[1].expression.callee.name == "_interop"


class TestRewriter:
    """Tests for rule tables, statistics and comments."""

    def test_stats_accumulate(self):
        """Test that statistics are kept across calls."""
        rewriter = Rewriter()
        rewrite("x = !1; y = !1;", rewriter)
        assert rewriter.stats == {"not-one": 2}
        rewrite("a && b();", rewriter)
        assert rewriter.stats == {"not-one": 2, "and-statement": 1}
        assert rewriter.total_applications == 3

    def test_custom_rules(self):
        """Test a custom rule table without the built-in rules."""
        rewriter = Rewriter([RewriteRule.from_source("double-not", "!!expression1", "Boolean(expression1)")])
        assert rewrite("x = !!a; a && b();", rewriter) == "x = Boolean(a);\na && b();\n"

    def test_first_match_wins(self):
        """Test that rules are tried in table order."""
        rewriter = Rewriter([
            RewriteRule.from_source("first", "!1", "false"),
            RewriteRule.from_source("second", "!1", "0"),
        ])
        assert rewrite("x = !1;", rewriter) == "x = false;\n"
        assert rewriter.stats == {"first": 1}

    def test_comments_follow_replacement(self):
        """Test that a rewritten statement keeps its comments."""
        assert rewrite("// note\na && b(); // done\n") == "// note\nif (a)\n  b(); // done\n"

    def test_no_match_leaves_tree_unchanged(self):
        """Test that code without idioms is untouched."""
        code = "function f(a) { return a + 1; }"
        tree = parse(code)
        rewriter = Rewriter()
        rewriter.rewrite(tree)
        assert tree == parse(code)
        assert rewriter.stats == {}
