"""Exceptions raised by the pattern engine, the driver and its collaborators."""

from typing import Any, Iterable, List, Optional


class PatternCompileError(Exception):
    """Raised when a pattern snippet cannot be compiled.

    This covers unknown placeholder modifiers (``statement1.unknown``) and
    empty snippets. It is a defect in a rule definition, not a runtime
    condition.

    Attributes:
        message: Description of the failure
        source: The snippet being compiled (optional)
    """

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class MissingBindingError(Exception):
    """Raised when a template references a placeholder that is not bound.

    Attributes:
        key: Placeholder key that was looked up (e.g. ``"expression2"``)
        available: Keys present in the bindings
    """

    def __init__(self, key: str, available: Iterable[str]) -> None:
        self.key = key
        self.available: List[str] = sorted(available)
        super().__init__(
            f"Placeholder '{key}' not found in bindings. Available: {self.available}"
        )


class ScopeError(Exception):
    """Raised when a declaration cannot be located in the scope graph.

    Every declaration belongs to some scope, so this is an invariant
    violation rather than a recoverable condition.

    Attributes:
        message: Description of the failure
        node: The node that could not be resolved (optional)
    """

    def __init__(self, message: str, node: Optional[Any] = None) -> None:
        super().__init__(message)
        self.node = node


class ParseError(Exception):
    """Raised when source text is not syntactically valid.

    Attributes:
        message: Description of the failure
        line: 1-based line of the first error (optional)
        column: 1-based column of the first error (optional)
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class UnsupportedSyntaxError(ParseError):
    """Raised when the source uses syntax outside the supported node set.

    Attributes:
        node_type: Concrete syntax node type that was rejected
    """

    def __init__(
        self,
        message: str,
        node_type: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message, line, column)
        self.node_type = node_type


class RuleSetError(Exception):
    """Raised when a rule-set file is malformed.

    Attributes:
        message: Description of the failure
        path: Path of the rule-set file (optional)
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
