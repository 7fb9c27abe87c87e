"""Aggregate sizes and descendant counts.

Directory sizes are recursive sums memoized on the node the first time
they are asked for. The tree is immutable once built, so a memoized value
is never invalidated. Children that carry an error contribute nothing, and
the first such error is reported next to the partial sum so the caller can
decide whether to show an "unknown size" placeholder.
"""

from typing import Optional, Tuple

from ..config import TreeOptions
from ..errors import DepthExceeded, NotAccessibleError
from .node import TreeNode


def aggregate_size_with_error(node: TreeNode) -> Tuple[int, Optional[NotAccessibleError]]:
    """Return the recursive size of node and the first error below it.

    Args:
        node: File or directory node

    Returns:
        Tuple of (size in bytes, error or None). The size is the sum of
        every reachable file; unreadable parts are left out.
    """
    if not node.is_dir:
        return node.size, node.error
    if node._aggregate_size is not None:
        return node._aggregate_size, node._aggregate_error

    # Iterative post-order walk: deep trees must not hit the recursion limit
    stack = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if current._aggregate_size is not None:
            continue
        if not expanded:
            stack.append((current, True))
            for child in current.children:
                if child.error is None and child.is_dir and child._aggregate_size is None:
                    stack.append((child, False))
            continue

        size = 0
        error = current.error
        for child in current.children:
            if child.error is not None:
                error = error or child.error
                continue
            if child.is_dir:
                size += child._aggregate_size
                error = error or child._aggregate_error
            else:
                size += child.size
        current._aggregate_size = size
        current._aggregate_error = error

    return node._aggregate_size, node._aggregate_error


def aggregate_size(node: TreeNode) -> int:
    """Return the recursive size of node in bytes, ignoring errors."""
    size, _ = aggregate_size_with_error(node)
    return size


def node_size(node: TreeNode) -> int:
    """Own size for files, aggregate size for directories."""
    if not node.is_dir:
        return node.size
    return aggregate_size(node)


def direct_children(node: TreeNode) -> Tuple[int, int]:
    """Count the direct directories and files of node."""
    dirs = sum(1 for child in node.children if child.is_container)
    return dirs, len(node.children) - dirs


def child_slots(node: TreeNode) -> int:
    """Render slots taken by node's direct children.

    A directory takes two slots (itself and its eventual summary line),
    anything else takes one.
    """
    dirs, files = direct_children(node)
    return 2 * dirs + files


def recursive_children(node: TreeNode, options: TreeOptions) -> int:
    """Count every entry below node.

    A directory at or beyond a fixed depth limit was never listed (unless
    sizes were requested); it counts as one entry, the same as a leaf.
    """
    try:
        return _count(node, options)
    except DepthExceeded:
        return 1


def _count(node: TreeNode, options: TreeOptions) -> int:
    if not options.show_size and 0 < options.max_depth <= node.depth:
        raise DepthExceeded(node.path)

    total = len(node.children)
    for child in node.children:
        if child.error is not None or not child.is_container:
            continue
        try:
            total += _count(child, options)
        except DepthExceeded:
            total += 1
    return total
