"""
Core language-agnostic components for jstidy.

This package contains the node schema, the pattern engine, the rule table,
the rewrite driver and the scope analyzer it uses for safe renaming.
"""

__all__ = []
