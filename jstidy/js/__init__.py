"""
JavaScript front and back end: tree-sitter based parser, code generator and
script file helpers.
"""

__all__ = []
