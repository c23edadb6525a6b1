"""Controller for running the rewrite driver to a fixed point.

This module provides the main entry points for normalizing source:
- normalize: re-run a Rewriter over a tree until it stops changing
- normalize_source: parse, normalize and generate in one call
"""

import copy
import logging
from typing import Optional

from jstidy.core.config import get_config_value
from jstidy.core.rewriter import Rewriter
from jstidy.core.schema.nodes import Node
from jstidy.core.traverse import recursion_limit, same_tree

logger = logging.getLogger(__name__)

DEFAULT_MAX_PASSES = 10


def normalize(tree: Node, rewriter: Optional[Rewriter] = None, max_passes: int = DEFAULT_MAX_PASSES) -> int:
    """Rewrite ``tree`` in place until a pass leaves it unchanged.

    A single driver pass can expose new matches (e.g. braces added to an
    inner statement let an outer rule match), so the driver is re-invoked
    while the tree keeps changing, at most ``max_passes`` times.

    Args:
        tree: Program to normalize
        rewriter: Driver to use (default: Rewriter with the default rules)
        max_passes: Upper bound on driver invocations (at least 1)

    Returns:
        Number of passes run

    Example:
        >>> tree = parse("a ? b() : (c(), d());")
        >>> normalize(tree)
        2
    """
    if rewriter is None:
        rewriter = Rewriter()
    max_passes = max(1, max_passes)

    with recursion_limit():
        for passes in range(1, max_passes + 1):
            before = copy.deepcopy(tree)
            rewriter.rewrite(tree)
            if same_tree(tree, before):
                logger.debug(f"Fixed point reached after {passes} pass(es)")
                return passes

    logger.warning(f"Tree still changing after {max_passes} passes, stopping")
    return max_passes


def normalize_source(source: str, rewriter: Optional[Rewriter] = None, max_passes: Optional[int] = None, options=None) -> str:
    """Normalize JavaScript source text.

    Args:
        source: Program text
        rewriter: Driver to use (default: Rewriter with the default rules)
        max_passes: Pass bound (default: rewrite.max_passes from config, 10)
        options: GeneratorOptions for the output

    Returns:
        Normalized program text

    Raises:
        ParseError: If the source does not parse
    """
    from jstidy.js.generator import generate
    from jstidy.js.parser import parse

    if max_passes is None:
        max_passes = int(get_config_value(["rewrite", "max_passes"], DEFAULT_MAX_PASSES))

    with recursion_limit():
        tree = parse(source)
        normalize(tree, rewriter, max_passes)
        return generate(tree, options)
