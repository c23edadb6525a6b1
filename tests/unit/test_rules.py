"""Tests for rewrite rules and YAML rule sets."""

import tempfile
from pathlib import Path

import pytest

from jstidy.core.errors import RuleSetError
from jstidy.core.patterns import compile
from jstidy.core.rules import (
    DEFAULT_RULE_SOURCES,
    RewriteRule,
    default_rules,
    load_rules,
    rules_to_yaml,
)


def write_rule_set(directory, text):
    path = Path(directory) / "rules.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestDefaultRules:
    """Tests for the built-in rule table."""

    def test_order(self):
        """Test that the built-in rules come in priority order."""
        assert [rule.name for rule in default_rules()] == [
            "not-one",
            "not-zero",
            "void-zero",
            "and-statement",
            "or-statement",
            "conditional-statement",
            "if-braces",
            "while-braces",
            "do-while-braces",
            "for-braces",
            "for-in-braces",
            "for-of-braces",
            "interop-require-default",
        ]

    def test_rules_are_compiled(self):
        """Test that every rule carries compiled trees and its sources."""
        for rule, (name, pattern, replacement) in zip(default_rules(), DEFAULT_RULE_SOURCES):
            assert rule.name == name
            assert rule.pattern == compile(pattern)
            assert rule.replacement == compile(replacement)
            assert rule.pattern_source == pattern

    def test_fresh_list(self):
        """Test that callers may modify the returned table."""
        rules = default_rules()
        rules.clear()
        assert len(default_rules()) == len(DEFAULT_RULE_SOURCES)

    def test_from_source(self):
        """Test compiling a single rule."""
        rule = RewriteRule.from_source("double-not", "!!expression1", "Boolean(expression1)")
        assert rule.pattern.type == "UnaryExpression"
        assert rule.replacement.type == "CallExpression"
        assert rule.replacement_source == "Boolean(expression1)"


class TestLoadRules:
    """Tests for load_rules()."""

    def test_load(self):
        """Test loading a well-formed rule set."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, (
                "rules:\n"
                "  - name: double-not\n"
                "    pattern: \"!!expression1\"\n"
                "    replacement: \"Boolean(expression1)\"\n"
                "  - pattern: \"expression1 === void 0\"\n"
                "    replacement: \"expression1 === undefined\"\n"
            ))
            rules = load_rules(path)

        assert [rule.name for rule in rules] == ["double-not", "rule-2"]
        assert rules[0].pattern == compile("!!expression1")

    def test_missing_file(self):
        """Test that a missing file raises RuleSetError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = str(Path(tmpdir) / "absent.yaml")
            with pytest.raises(RuleSetError) as exc_info:
                load_rules(path)
        assert exc_info.value.path == path

    def test_invalid_yaml(self):
        """Test that malformed YAML raises RuleSetError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, "rules: [unclosed\n")
            with pytest.raises(RuleSetError, match="Invalid YAML"):
                load_rules(path)

    def test_missing_rules_list(self):
        """Test that the top level must hold a rules list."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, "other: 1\n")
            with pytest.raises(RuleSetError, match="'rules' list"):
                load_rules(path)

    def test_entry_not_mapping(self):
        """Test that every entry must be a mapping."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, "rules:\n  - just a string\n")
            with pytest.raises(RuleSetError, match="not a mapping"):
                load_rules(path)

    def test_missing_replacement(self):
        """Test that entries need both snippets."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, "rules:\n  - name: broken\n    pattern: \"a;\"\n")
            with pytest.raises(RuleSetError, match="missing: replacement"):
                load_rules(path)

    def test_pattern_does_not_compile(self):
        """Test that compile errors are reported as RuleSetError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, (
                "rules:\n"
                "  - name: bad\n"
                "    pattern: \"statement1.sometimes;\"\n"
                "    replacement: \"statement1;\"\n"
            ))
            with pytest.raises(RuleSetError, match="'bad' does not compile"):
                load_rules(path)

    def test_pattern_does_not_parse(self):
        """Test that a snippet with a syntax error is reported as RuleSetError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, (
                "rules:\n"
                "  - name: unfinished\n"
                "    pattern: \"if (\"\n"
                "    replacement: \"x;\"\n"
            ))
            with pytest.raises(RuleSetError, match="'unfinished' does not compile"):
                load_rules(path)

    def test_replacement_uses_unsupported_syntax(self):
        """Test that module syntax in a snippet is reported as RuleSetError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_rule_set(tmpdir, (
                "rules:\n"
                "  - name: module\n"
                "    pattern: \"x;\"\n"
                "    replacement: \"import y from 'y';\"\n"
            ))
            with pytest.raises(RuleSetError, match="'module' does not compile"):
                load_rules(path)


class TestRulesToYaml:
    """Tests for rules_to_yaml()."""

    def test_dump_loads_back(self):
        """Test that a dumped rule set is accepted by load_rules()."""
        text = rules_to_yaml(default_rules())
        assert "interop-require-default" in text

        with tempfile.TemporaryDirectory() as tmpdir:
            rules = load_rules(write_rule_set(tmpdir, text))

        assert [rule.name for rule in rules] == [rule.name for rule in default_rules()]
        assert [rule.pattern_source for rule in rules] == [source[1] for source in DEFAULT_RULE_SOURCES]

    def test_empty_table(self):
        """Test dumping an empty table."""
        assert rules_to_yaml([]).strip() == "rules: []"
