"""Sibling ordering for lstree.

Every ordering is a sort key. The active SortKind is resolved once into a
single key function; the directories-first modifier wraps it and the
reverse flag inverts the final order. Keys always end with the name (or
listing index for SortKind.NONE), so the order is total: sorting is stable,
deterministic and reversing yields exactly the reverse sequence.
"""

import re
from typing import Any, Callable, List, Tuple

from ..config import SortKind, TreeOptions
from .node import TreeNode
from .sizes import node_size

SortKey = Callable[[TreeNode], Tuple[Any, ...]]

_DIGITS = re.compile(r'(\d+)')


def version_key(name: str) -> Tuple[Any, ...]:
    """Split a name into text and integer runs for natural ordering.

    ``"file10"`` sorts after ``"file9"``. Text parts sit at even
    positions and integers at odd ones, so keys of any two names compare
    without mixing types.
    """
    parts = _DIGITS.split(name)
    return tuple(int(part) if i % 2 else part for i, part in enumerate(parts))


def _by_name(node: TreeNode) -> Tuple[Any, ...]:
    return (node.name,)


def _by_version(node: TreeNode) -> Tuple[Any, ...]:
    return (version_key(node.name), node.name)


def _by_mod_time(node: TreeNode) -> Tuple[Any, ...]:
    return (node.mtime, node.name)


def _by_status_change_time(node: TreeNode) -> Tuple[Any, ...]:
    # Providers without a status change time report the mtime instead
    return (node.ctime or node.mtime, node.name)


def _by_size(node: TreeNode) -> Tuple[Any, ...]:
    return (node_size(node), node.name)


def _by_listing(node: TreeNode) -> Tuple[Any, ...]:
    return (node.index, node.name)


_KEYS = {
    SortKind.NONE: _by_listing,
    SortKind.NAME: _by_name,
    SortKind.VERSION: _by_version,
    SortKind.MOD_TIME: _by_mod_time,
    SortKind.STATUS_CHANGE_TIME: _by_status_change_time,
    SortKind.SIZE: _by_size,
}


def dirs_first(key: SortKey) -> SortKey:
    """Wrap a key so directories come before files of the same parent."""
    def wrapped(node: TreeNode) -> Tuple[Any, ...]:
        return (not node.is_dir,) + key(node)
    return wrapped


class Comparator:
    """The ordering of one invocation, resolved once from the options."""

    def __init__(self, options: TreeOptions):
        key = _KEYS.get(options.sort, _by_name)
        if options.dirs_first:
            key = dirs_first(key)
        self.key: SortKey = key
        self.reverse = options.reverse
        self.kind = options.sort

    def sort(self, children: List[TreeNode]) -> None:
        """Reorder children in place."""
        children.sort(key=self.key, reverse=self.reverse)

    def sorted_children(self, node: TreeNode) -> List[TreeNode]:
        """Return node's children, sorting them on first access only."""
        if not node.sorted:
            self.sort(node.children)
            node.sorted = True
        return node.children
