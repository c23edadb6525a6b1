"""Tests for the node schema."""

import copy

from jstidy.core.schema import STATEMENT_SEQUENCES, StatementList
from jstidy.core.schema.nodes import (
    BlockStatement,
    Comment,
    ExpressionPlaceholder,
    ExpressionStatement,
    GenericPlaceholder,
    Identifier,
    Literal,
    Statement,
    StatementPlaceholder,
    SwitchCase,
)


class TestNodes:
    """Tests for node kinds."""

    def test_type_is_class_name(self):
        """Test that every kind reports its class name."""
        assert Identifier("a").type == "Identifier"
        assert StatementList().type == "StatementList"
        assert BlockStatement().type == "BlockStatement"

    def test_structural_equality(self):
        """Test that nodes compare by value."""
        assert ExpressionStatement(Identifier("a")) == ExpressionStatement(Identifier("a"))
        assert ExpressionStatement(Identifier("a")) != ExpressionStatement(Identifier("b"))

    def test_metadata_ignored(self):
        """Test that comments and literal spelling do not affect equality."""
        commented = Identifier("a", leading_comments=[Comment("// x")])
        assert commented == Identifier("a")
        assert Literal("number", 255, "0xff") == Literal("number", 255, "255")

    def test_literal_kind_compared(self):
        """Test that literal kinds are part of equality."""
        assert Literal("boolean", True) != Literal("number", 1)

    def test_deepcopy_is_independent(self):
        """Test that copies share no nodes."""
        original = BlockStatement(body=[ExpressionStatement(Identifier("a"))])
        clone = copy.deepcopy(original)
        clone.body[0].expression.name = "b"
        assert original.body[0].expression.name == "a"

    def test_comment_kind(self):
        """Test line and block comments."""
        assert Comment("// x").is_line
        assert not Comment("/* x */").is_line


class TestPlaceholders:
    """Tests for placeholder kinds."""

    def test_keys(self):
        """Test placeholder binding keys."""
        assert GenericPlaceholder(1).key == "placeholder1"
        assert StatementPlaceholder(2).key == "statement2"
        assert ExpressionPlaceholder(3).key == "expression3"

    def test_statement_placeholder_is_statement(self):
        """Test that statement placeholders sit in statement position."""
        assert isinstance(StatementPlaceholder(1), Statement)


class TestStatementSequences:
    """Tests for the statement sequence table."""

    def test_sequences(self):
        """Test which kinds hold statement sequences."""
        assert STATEMENT_SEQUENCES["BlockStatement"] == "body"
        assert STATEMENT_SEQUENCES["SwitchCase"] == "consequent"
        assert "IfStatement" not in STATEMENT_SEQUENCES
        assert SwitchCase(test=None).consequent == []
