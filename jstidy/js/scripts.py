"""Reading and writing script files.

All files are UTF-8. Saving creates missing parent directories, so a whole
tree of scripts can be mirrored into a fresh output directory.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from jstidy.core.schema.nodes import Program
from jstidy.js.generator import GeneratorOptions, generate
from jstidy.js.parser import parse

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SCRIPT_SUFFIXES = (".js", ".cjs")


def ensure_parent_dir_exists(path: PathLike) -> None:
    """Create the parent directories of ``path`` if they are missing."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def read_script(path: PathLike) -> Program:
    """Read and parse a script file.

    Args:
        path: Path to the script

    Returns:
        Parsed Program

    Raises:
        OSError: If the file cannot be read
        ParseError: If the file is not valid JavaScript
    """
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()
    logger.debug(f"Read {len(source)} characters from {path}")
    return parse(source)


def save_script(tree: Program, path: PathLike, options: Optional[GeneratorOptions] = None) -> None:
    """Generate source for ``tree`` and write it to ``path``.

    Args:
        tree: Program to save
        path: Destination file; parent directories are created
        options: Formatting options (default: GeneratorOptions())
    """
    text = generate(tree, options)
    ensure_parent_dir_exists(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.debug(f"Wrote {len(text)} characters to {path}")


def iter_scripts(path: PathLike) -> Iterator[Tuple[Path, Path]]:
    """Yield ``(file, relative path)`` for the scripts under ``path``.

    A file yields itself with its bare name as relative path; a directory is
    walked recursively for files with a script suffix, in sorted order.
    """
    root = Path(path)
    if root.is_file():
        yield root, Path(root.name)
        return
    for candidate in sorted(root.rglob("*")):
        if candidate.is_file() and candidate.suffix in SCRIPT_SUFFIXES:
            yield candidate, candidate.relative_to(root)
