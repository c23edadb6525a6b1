"""Tests for script file helpers."""

import tempfile
from pathlib import Path

import pytest

from jstidy.core.errors import ParseError
from jstidy.js.generator import GeneratorOptions
from jstidy.js.parser import parse
from jstidy.js.scripts import iter_scripts, read_script, save_script


class TestReadSave:
    """Tests for read_script() and save_script()."""

    def test_read(self):
        """Test reading and parsing a script."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "a.js"
            path.write_text("var s = \"é\";\n", encoding="utf-8")
            tree = read_script(path)
        assert tree.body[0].declarations[0].init.value == "é"

    def test_read_invalid(self):
        """Test that a broken script raises ParseError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.js"
            path.write_text("function (", encoding="utf-8")
            with pytest.raises(ParseError):
                read_script(path)

    def test_save_creates_directories(self):
        """Test that missing parent directories are created."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "out" / "nested" / "a.js"
            save_script(parse("if (a) { b(); }"), target, GeneratorOptions(brace_style="collapse"))
            assert target.read_text(encoding="utf-8") == "if (a) {\n  b();\n}\n"


class TestIterScripts:
    """Tests for iter_scripts()."""

    def test_single_file(self):
        """Test that a file yields itself."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "main.js"
            path.write_text("a();")
            assert list(iter_scripts(path)) == [(path, Path("main.js"))]

    def test_directory(self):
        """Test walking a directory for scripts."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "lib").mkdir()
            (root / "b.js").write_text("b();")
            (root / "lib" / "a.cjs").write_text("a();")
            (root / "notes.txt").write_text("not a script")
            found = [relative for _, relative in iter_scripts(root)]
        assert found == [Path("b.js"), Path("lib/a.cjs")]
