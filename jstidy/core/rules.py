"""Rewrite rules and rule tables.

A rule pairs a compiled pattern with a replacement template. The rewrite
driver tries the rules of a table in order; the first match wins.

Rule tables come from two places:
- default_rules(): the built-in table for transpiler/minifier output
- load_rules(): YAML rule-set files, e.g. ``.jstidy-rules.yaml``::

      rules:
        - name: double-not
          pattern: "!!expression1;"
          replacement: "Boolean(expression1);"

This allows teams to share project-specific normalizations as
git-committable files next to the code they apply to.
"""

import io
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Sequence, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from jstidy.core.errors import PatternCompileError, ParseError, RuleSetError, UnsupportedSyntaxError
from jstidy.core.patterns import compile
from jstidy.core.schema.nodes import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    """Compiled rewrite rule.

    Attributes:
        name: Short identifier used in statistics and logs
        pattern: Compiled pattern tree
        replacement: Compiled replacement template
        pattern_source: Snippet the pattern was compiled from
        replacement_source: Snippet the replacement was compiled from
    """

    name: str
    pattern: Node
    replacement: Node
    pattern_source: str = ""
    replacement_source: str = ""

    @classmethod
    def from_source(cls, name: str, pattern: str, replacement: str) -> "RewriteRule":
        """Compile a rule from its two snippets.

        Raises:
            PatternCompileError: If either snippet does not compile
        """
        return cls(
            name=name,
            pattern=compile(pattern),
            replacement=compile(replacement),
            pattern_source=pattern,
            replacement_source=replacement,
        )


DEFAULT_RULE_SOURCES: Tuple[Tuple[str, str, str], ...] = (
    ("not-one", "!1", "false"),
    ("not-zero", "!0", "true"),
    ("void-zero", "void 0", "undefined"),
    ("and-statement", "expression1 && expression2;", "if (expression1) expression2;"),
    ("or-statement", "expression1 || expression2;", "if (!expression1) expression2;"),
    (
        "conditional-statement",
        "expression1 ? expression2 : expression3;",
        "if (expression1) expression2; else expression3;",
    ),
    ("if-braces", "if (expression1) statement1.multiLine;", "if (expression1) { statement1; }"),
    ("while-braces", "while (expression1) statement1.multiLine;", "while (expression1) { statement1; }"),
    (
        "do-while-braces",
        "do statement1.multiLine; while (expression1);",
        "do { statement1; } while (expression1);",
    ),
    (
        "for-braces",
        "for (expression1.orDeclaration; expression2; expression3) statement1.multiLine;",
        "for (expression1; expression2; expression3) { statement1; }",
    ),
    (
        "for-in-braces",
        "for (expression1.orDeclaration in expression2) statement1.multiLine;",
        "for (expression1 in expression2) { statement1; }",
    ),
    (
        "for-of-braces",
        "for (expression1.orDeclaration of expression2) statement1.multiLine;",
        "for (expression1 of expression2) { statement1; }",
    ),
    (
        "interop-require-default",
        "function placeholder1(placeholder2) { "
        "return placeholder2 && placeholder2.__esModule ? placeholder2 : { default: placeholder2 }; }",
        "function _interopRequireDefault(obj) { "
        "return obj && obj.__esModule ? obj : { default: obj }; }",
    ),
)
"""Built-in rules as ``(name, pattern, replacement)`` snippets, in priority order."""


@lru_cache(maxsize=None)
def _compiled_default_rules() -> Tuple[RewriteRule, ...]:
    rules = tuple(RewriteRule.from_source(*source) for source in DEFAULT_RULE_SOURCES)
    logger.debug(f"Compiled {len(rules)} default rules")
    return rules


def default_rules() -> List[RewriteRule]:
    """Return the built-in rule table.

    Rules are compiled once and shared; callers get a fresh list they may
    extend or reorder.
    """
    return list(_compiled_default_rules())


def _create_yaml_instance() -> YAML:
    """Create ruamel.yaml instance for rule-set files.

    Returns:
        YAML instance using block style and no line wrapping, so long
        snippets stay on one line
    """
    yaml = YAML()
    yaml.width = 4096
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


def load_rules(path: str) -> List[RewriteRule]:
    """Load a rule set from a YAML file.

    Args:
        path: Path to the rule-set file

    Returns:
        Compiled rules in file order

    Raises:
        RuleSetError: If the file is missing, is not valid YAML, or an entry
            lacks a name, pattern or replacement, or does not compile

    Example:
        >>> rules = load_rules(".jstidy-rules.yaml")
        >>> [rule.name for rule in rules]
        ['double-not']
    """
    file_path = Path(path)
    if not file_path.exists():
        raise RuleSetError(f"Rule set not found: {path}", path)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = _create_yaml_instance().load(f)
    except YAMLError as e:
        raise RuleSetError(f"Invalid YAML in rule set: {e}", path) from e

    entries = data.get("rules") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise RuleSetError("Rule set must contain a 'rules' list", path)

    rules: List[RewriteRule] = []
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise RuleSetError(f"Rule #{position} is not a mapping", path)
        missing = [key for key in ("pattern", "replacement") if not entry.get(key)]
        if missing:
            raise RuleSetError(f"Rule #{position} is missing: {', '.join(missing)}", path)

        name = str(entry.get("name") or f"rule-{position}")
        try:
            rules.append(RewriteRule.from_source(name, str(entry["pattern"]), str(entry["replacement"])))
        except (PatternCompileError, ParseError, UnsupportedSyntaxError) as e:
            raise RuleSetError(f"Rule '{name}' does not compile: {e}", path) from e

    logger.info(f"Loaded {len(rules)} rules from {path}")
    return rules


def rules_to_yaml(rules: Sequence[RewriteRule]) -> str:
    """Dump rules as a YAML rule set that load_rules() accepts."""
    data = {
        "rules": [
            {
                "name": rule.name,
                "pattern": rule.pattern_source,
                "replacement": rule.replacement_source,
            }
            for rule in rules
        ]
    }
    stream = io.StringIO()
    _create_yaml_instance().dump(data, stream)
    return stream.getvalue()
