"""
jstidy: JavaScript normalizer

Rewrites machine-generated or minified JavaScript into a canonical,
human-readable form. Structural idioms are matched in the syntax tree with
code templates and rewritten to equivalent, clearer constructs.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
