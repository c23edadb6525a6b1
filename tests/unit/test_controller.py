"""Tests for the fixed-point controller."""

import tempfile

from jstidy.core.controller import normalize, normalize_source
from jstidy.core.rewriter import Rewriter
from jstidy.js.generator import GeneratorOptions, generate
from jstidy.js.parser import parse


class TestNormalize:
    """Tests for normalize()."""

    def test_stops_at_fixed_point(self):
        """Test that the pass count includes the unchanged final pass."""
        tree = parse("a ? b() : (c(), d());")
        assert normalize(tree) == 2
        assert generate(tree) == "if (a)\n  b();\nelse\n{\n  c();\n  d();\n}\n"

    def test_unchanged_tree_takes_one_pass(self):
        """Test that code without idioms needs a single pass."""
        assert normalize(parse("f();")) == 1

    def test_outer_rule_after_inner_rewrite(self):
        """Test that a later pass braces what an earlier pass produced."""
        tree = parse("a && (b || c());")
        assert normalize(tree) == 3
        assert generate(tree) == "if (a)\n{\n  if (!b)\n    c();\n}\n"

    def test_max_passes(self):
        """Test that the pass bound is honored."""
        tree = parse("a && (b || c());")
        assert normalize(tree, max_passes=1) == 1
        assert generate(tree) == "if (a)\n  if (!b)\n    c();\n"

    def test_max_passes_at_least_one(self):
        """Test that a non-positive bound still runs one pass."""
        tree = parse("x = !1;")
        assert normalize(tree, max_passes=0) == 1
        assert generate(tree) == "x = false;\n"

    def test_shared_rewriter_stats(self):
        """Test that a caller-provided rewriter collects statistics."""
        rewriter = Rewriter()
        normalize(parse("x = !0;"), rewriter)
        assert rewriter.stats == {"not-zero": 1}

    def test_renamed_helper_is_stable(self):
        """Test that helper renaming reaches a fixed point."""
        tree = parse(
            "function _interop(e) { return e && e.__esModule ? e : { default: e }; }\n"
            "_interop(x);"
        )
        assert normalize(tree) == 2
        assert tree.body[0].id.name == "_interopRequireDefault"


class TestNormalizeSource:
    """Tests for normalize_source()."""

    def test_source_to_source(self):
        """Test the text-in, text-out entry point."""
        options = GeneratorOptions(brace_style="collapse")
        assert normalize_source("if (a) if (b) c(), d();", max_passes=10, options=options) == (
            "if (a) {\n  if (b) {\n    c();\n    d();\n  }\n}\n"
        )

    def test_max_passes_from_environment(self, monkeypatch):
        """Test that the pass bound falls back to the environment."""
        with tempfile.TemporaryDirectory() as tmpdir:
            monkeypatch.chdir(tmpdir)
            monkeypatch.setenv("JSTIDY_REWRITE_MAX_PASSES", "1")
            assert normalize_source("a && (b || c());") == "if (a)\n  if (!b)\n    c();\n"
