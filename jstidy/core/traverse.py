"""Generic tree traversal with node replacement.

The rewrite driver and the collaborators walk trees through these helpers
instead of per-kind code:

- iter_child_fields: (field name, value) pairs of a node's compared fields
- child_nodes: direct child nodes in field order
- walk: pre-order iterator over a whole tree
- same_tree: structural equality that does not recurse
- recursion_limit: scoped interpreter recursion limit for deep trees
- replace: depth-first traversal with pre-order replacement and a
  post-order hook
"""

import sys
from contextlib import contextmanager
from dataclasses import fields
from typing import Any, Callable, Iterator, List, Optional, Tuple

from jstidy.core.schema.nodes import Node

Visitor = Callable[[Node, Optional[Node]], Optional[Node]]

# Enough for the recursive passes over chains several thousand levels deep.
DEEP_RECURSION_LIMIT = 50000


def iter_child_fields(node: Node) -> Iterator[Tuple[str, Any]]:
    """Yield ``(name, value)`` for every field that takes part in equality.

    Metadata fields (comments, literal spelling) are skipped.
    """
    for f in fields(node):
        if f.compare:
            yield f.name, getattr(node, f.name)


def child_nodes(node: Node) -> List[Node]:
    """Return the direct child nodes of ``node`` in field order."""
    children: List[Node] = []
    for _, value in iter_child_fields(node):
        if isinstance(value, Node):
            children.append(value)
        elif isinstance(value, list):
            children.extend(item for item in value if isinstance(item, Node))
    return children


def walk(root: Node) -> Iterator[Node]:
    """Iterate over ``root`` and all its descendants in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(child_nodes(node)))


def same_tree(a: Any, b: Any) -> bool:
    """Compare two trees (or field values) like ``a == b``, iteratively.

    Dataclass equality recurses once per level, which overflows the stack on
    deep trees such as long operator chains. Metadata fields are ignored, as
    they are by ``==``.
    """
    stack = [(a, b)]
    while stack:
        left, right = stack.pop()
        if isinstance(left, Node):
            if type(left) is not type(right):
                return False
            for name, value in iter_child_fields(left):
                stack.append((value, getattr(right, name)))
        elif isinstance(left, list):
            if not isinstance(right, list) or len(left) != len(right):
                return False
            stack.extend(zip(left, right))
        elif left != right:
            return False
    return True


@contextmanager
def recursion_limit(limit: int = DEEP_RECURSION_LIMIT) -> Iterator[None]:
    """Raise the interpreter recursion limit to at least ``limit`` for a block."""
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def replace(root: Node, enter: Optional[Visitor] = None, leave: Optional[Visitor] = None) -> Node:
    """Traverse ``root`` depth-first, allowing nodes to be replaced.

    ``enter(node, parent)`` runs before a node's children are visited. When it
    returns a node, that node takes the original's place in its parent right
    away and traversal continues into the *replacement's* children.

    ``leave(node, parent)`` runs after the children have been visited. It may
    mutate the node (e.g. splice a statement list) or return a replacement.

    The tree stays connected from the root while traversal is in progress, so
    a visitor may inspect the whole tree (e.g. analyze scopes).

    Args:
        root: Tree to traverse (mutated in place)
        enter: Optional pre-order visitor
        leave: Optional post-order visitor

    Returns:
        The root after traversal (a replacement if a visitor replaced it)
    """
    with recursion_limit():
        return _visit(_enter(root, None, enter), None, enter, leave)


def _enter(node: Node, parent: Optional[Node], enter: Optional[Visitor]) -> Node:
    if enter is not None:
        result = enter(node, parent)
        if result is not None:
            return result
    return node


def _visit(node: Node, parent: Optional[Node], enter: Optional[Visitor], leave: Optional[Visitor]) -> Node:
    for name, value in iter_child_fields(node):
        if isinstance(value, Node):
            child = _enter(value, node, enter)
            if child is not value:
                setattr(node, name, child)
            new_value = _visit(child, node, enter, leave)
            if new_value is not child:
                setattr(node, name, new_value)
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, Node):
                    child = _enter(item, node, enter)
                    if child is not item:
                        value[i] = child
                    new_item = _visit(child, node, enter, leave)
                    if new_item is not child:
                        value[i] = new_item

    if leave is not None:
        result = leave(node, parent)
        if result is not None:
            node = result
    return node
