"""Evaluates selectors against a tree.

Candidates are visited in document order (pre-order, depth first) and
every candidate is tested against the whole selector expression. Matches
are collected in the order they are visited, so the result is in document
order no matter which combinator matched.
"""

from __future__ import annotations

import logging
from typing import Any

from .matchset import MatchSet
from .node import iter_descendants
from .selector import Selector

logger = logging.getLogger(__name__)


def check_limit(limit: int | None) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise TypeError(f"limit must be an int or None, got {type(limit).__name__}")
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")


def evaluate(scope: Any, selector: Selector, recursive: bool = True, limit: int | None = None) -> MatchSet:
    """
    Find the nodes below `scope` that match `selector`.

    The scope node itself is never a candidate. Structural combinators only
    consult nodes inside the subtree rooted at `scope`.

    Args:
        scope: The node to search from (usually a document root)
        selector: The selector to evaluate
        recursive: Search all descendants (True) or only direct children
        limit: Stop as soon as this many matches are found

    Returns:
        A MatchSet, which is the first `limit` matches of the unlimited search

    Raises:
        StructuralFaultError: If the tree contains a cycle
    """
    if not isinstance(selector, Selector):
        raise TypeError(f"Expected a Selector, got {type(selector).__name__}")
    check_limit(limit)
    if limit == 0:
        return MatchSet()

    results: list[Any] = []
    visited = 0
    for candidate in iter_descendants(scope, recursive=recursive):
        visited += 1
        if selector.matches(candidate, scope):
            results.append(candidate)
            if limit is not None and len(results) >= limit:
                break

    logger.debug("Evaluated %r: visited %d nodes, %d matches", selector, visited, len(results))
    return MatchSet(results)


def matches(node: Any, selector: Selector) -> bool:
    """
    Check if a node matches a selector.

    Structural combinators may look all the way up to the tree root.
    """
    if not isinstance(selector, Selector):
        raise TypeError(f"Expected a Selector, got {type(selector).__name__}")
    return selector.matches(node)
