"""Integration tests for the jstidy command line."""

import json
import tempfile
from pathlib import Path

from ruamel.yaml import YAML

from jstidy.cli.main import main


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestRewriteCommand:
    """Tests for 'jstidy rewrite'."""

    def test_rewrite_directory(self, capsys):
        """Test mirroring a directory of scripts."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "src" / "app.js", "a && b();")
            write(root / "src" / "lib" / "util.js", "x = !1;")
            config = str(root / "jstidy.json")

            code = main(["rewrite", str(root / "src"), "--out", str(root / "out"), "--config", config])

            assert code == 0
            assert (root / "out" / "app.js").read_text() == "if (a)\n  b();\n"
            assert (root / "out" / "lib" / "util.js").read_text() == "x = false;\n"

        output = capsys.readouterr().out
        assert "Rewrote 2 file(s), 0 failed" in output
        assert "and-statement: 1" in output
        assert "not-one: 1" in output

    def test_brace_style_flag(self):
        """Test choosing collapsed braces on the command line."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "main.js", "if (a) if (b) c();")

            code = main([
                "rewrite", str(root / "main.js"),
                "--out", str(root / "out"),
                "--brace-style", "collapse",
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 0
            assert (root / "out" / "main.js").read_text() == "if (a) {\n  if (b)\n    c();\n}\n"

    def test_config_file(self):
        """Test that formatting defaults come from the config file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "main.js", "a || b();")
            write(root / "jstidy.json", json.dumps({"output": {"indent": 4}}))

            code = main([
                "rewrite", str(root / "main.js"),
                "--out", str(root / "out"),
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 0
            assert (root / "out" / "main.js").read_text() == "if (!a)\n    b();\n"

    def test_single_pass(self):
        """Test limiting the rewrite to one pass."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "main.js", "a && (b || c());")

            code = main([
                "rewrite", str(root / "main.js"),
                "--out", str(root / "out"),
                "--single-pass",
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 0
            assert (root / "out" / "main.js").read_text() == "if (a)\n  if (!b)\n    c();\n"

    def test_custom_rules_only(self):
        """Test a project rule set without the built-in rules."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "main.js", "x = !!a; y = !1;")
            write(root / "rules.yaml", (
                "rules:\n"
                "  - name: double-not\n"
                "    pattern: \"!!expression1\"\n"
                "    replacement: \"Boolean(expression1)\"\n"
            ))

            code = main([
                "rewrite", str(root / "main.js"),
                "--out", str(root / "out"),
                "--rules", str(root / "rules.yaml"),
                "--no-default-rules",
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 0
            assert (root / "out" / "main.js").read_text() == "x = Boolean(a);\ny = !1;\n"

    def test_broken_script_is_reported(self, capsys):
        """Test that one bad file does not stop the others."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "src" / "bad.js", "function (")
            write(root / "src" / "good.js", "a && b();")

            code = main([
                "rewrite", str(root / "src"),
                "--out", str(root / "out"),
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 1
            assert (root / "out" / "good.js").exists()
            assert not (root / "out" / "bad.js").exists()

        captured = capsys.readouterr()
        assert "bad.js" in captured.err
        assert "Rewrote 1 file(s), 1 failed" in captured.out

    def test_missing_input(self, capsys):
        """Test that a missing input path fails."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            code = main([
                "rewrite", str(root / "absent.js"),
                "--out", str(root / "out"),
                "--config", str(root / "jstidy.json"),
            ])

        assert code == 1
        assert "Input not found" in capsys.readouterr().err

    def test_invalid_rule_set(self, capsys):
        """Test that a malformed rule set aborts before rewriting."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "main.js", "a();")
            write(root / "rules.yaml", "rules: nope\n")

            code = main([
                "rewrite", str(root / "main.js"),
                "--out", str(root / "out"),
                "--rules", str(root / "rules.yaml"),
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 1
            assert not (root / "out").exists()

        assert "Error:" in capsys.readouterr().err

    def test_normalized_file_reports_no_rules(self, capsys):
        """Test that an already normalized helper is not counted as rewritten."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "main.js", (
                "function _interopRequireDefault(obj) { return obj && obj.__esModule ? obj : { default: obj }; }\n"
            ))

            code = main([
                "rewrite", str(root / "main.js"),
                "--out", str(root / "out"),
                "--config", str(root / "jstidy.json"),
            ])

            assert code == 0

        output = capsys.readouterr().out
        assert "Rewrote 1 file(s), 0 failed" in output
        assert "interop-require-default" not in output


class TestRulesCommand:
    """Tests for 'jstidy rules'."""

    def test_list(self, capsys):
        """Test listing the built-in rules."""
        with tempfile.TemporaryDirectory() as tmpdir:
            code = main(["rules", "--config", str(Path(tmpdir) / "jstidy.json")])

        assert code == 0
        output = capsys.readouterr().out
        assert " 1. not-one" in output
        assert "   => false" in output
        assert "13. interop-require-default" in output

    def test_yaml(self, capsys):
        """Test dumping the rules as a YAML rule set."""
        with tempfile.TemporaryDirectory() as tmpdir:
            code = main(["rules", "--yaml", "--config", str(Path(tmpdir) / "jstidy.json")])

        assert code == 0
        data = YAML(typ="safe").load(capsys.readouterr().out)
        assert [rule["name"] for rule in data["rules"]][:3] == ["not-one", "not-zero", "void-zero"]
        assert data["rules"][0]["pattern"] == "!1"

    def test_rule_that_does_not_parse(self, capsys):
        """Test that a rule with a syntax error is reported, not raised."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write(root / "rules.yaml", (
                "rules:\n"
                "  - name: unfinished\n"
                "    pattern: \"if (\"\n"
                "    replacement: \"x;\"\n"
            ))

            code = main(["rules", "--rules", str(root / "rules.yaml"), "--config", str(root / "jstidy.json")])

        assert code == 1
        assert "'unfinished' does not compile" in capsys.readouterr().err


class TestMain:
    """Tests for the entry point itself."""

    def test_no_command(self, capsys):
        """Test that running without a command prints help."""
        assert main([]) == 1
        assert "usage: jstidy" in capsys.readouterr().out
