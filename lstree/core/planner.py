"""Adaptive render planning for lstree.

With automatic depth, printing every descendant of a huge tree floods the
terminal. The planner hands each directory a cutoff budget of render
slots (a file costs one slot, a directory two: itself plus its eventual
summary line). A directory whose children cost more than the budget it
received is collapsed into one summary line that carries the true
recursive entry count.

Plans are made top-down while printing, because a directory's budget
depends on what its ancestors already spent.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from ..config import TreeOptions
from .node import TreeNode
from .sizes import child_slots, recursive_children

# Half a standard terminal
SMALL_DIRECTORY = 12
SCREEN_LINES = 24


@dataclass(frozen=True)
class Plan:
    """What the printer should do after printing a directory's own line.

    Attributes:
        expand: Print the children
        cutoff: Budget handed down to each child (0 = not computed yet)
        summary: Recursive entry count to print instead of the children
    """
    expand: bool
    cutoff: int = 0
    summary: Optional[int] = None


STOP = Plan(expand=False)


def reduce_next_children(slots: int) -> int:
    """Initial budget for the level below a directory with this many slots.

    Grows with the number of direct children, but sub-linearly, so very
    wide directories still get collapsed. Tiny directories get a floor
    large enough to show a screenful.
    """
    if slots < SMALL_DIRECTORY:
        return SCREEN_LINES - slots
    if slots < 24:
        return 8
    if slots < 50:
        return 18
    if slots < 100:
        return SCREEN_LINES
    if slots < 200:
        return 2 * SCREEN_LINES
    if slots < 300:
        return 3 * SCREEN_LINES
    if slots < 400:
        return 4 * SCREEN_LINES
    return (slots // 400) * 4 * SCREEN_LINES


class RenderPlanner:
    """Decides, per directory, whether and how far to expand it."""

    def __init__(self, options: TreeOptions):
        self.options = options

    def next_level_cutoff(self, node: TreeNode, cutoff: int) -> int:
        """Spread a budget over the child directories of node.

        Child directories are bucketed by their own slot count and the
        largest per-child allowance is found for which the buckets at or
        below it still fit into the budget. Small directories do not
        starve large ones this way.

        Args:
            node: Directory whose children are about to be printed
            cutoff: Budget available for the next level

        Returns:
            Per-child budget, at least 1
        """
        used: Counter = Counter()
        for child in node.children:
            child = self._skip_single_chain(child)
            if child is None or not child.is_container:
                continue
            slots = child_slots(child)
            if slots > cutoff:
                continue
            used[slots] += slots

        total = 0
        for slots in sorted(used):
            total += used[slots]
            if total > cutoff:
                return max(slots - 1, 1)
        return max(cutoff, 1)

    def plan(self, node: TreeNode, cutoff: int) -> Plan:
        """Plan the expansion of node given the budget it was handed.

        Args:
            node: Node whose line has just been printed
            cutoff: Budget from the parent (0 at the first automatic level)

        Returns:
            The Plan for node's children
        """
        options = self.options
        automatic = options.auto_depth

        if 0 < options.max_depth <= node.depth:
            # Only reachable with children when sizes forced a full build.
            # A single level stays a single level: no summary lines.
            if not options.show_size or options.max_depth == 1:
                return STOP
            automatic = True
            cutoff = 1

        if not automatic:
            return Plan(expand=True, cutoff=cutoff)

        if cutoff == 0:
            budget = reduce_next_children(child_slots(node))
            return Plan(expand=True, cutoff=self.next_level_cutoff(node, budget))

        if node.is_container:
            slots = child_slots(node)
            if slots > cutoff or (node.children and not options.auto_depth):
                return Plan(expand=False,
                            summary=recursive_children(node, options))
            cutoff = 1 if slots >= cutoff else cutoff - slots

        return Plan(expand=True, cutoff=cutoff)

    def _skip_single_chain(self, node: TreeNode) -> Optional[TreeNode]:
        """Follow single-child chains the way joined lines will show them.

        Returns None for nodes that cannot need a budget (no children,
        or a single child when joining is off).
        """
        if not self.options.join_single_child_dirs:
            return node if len(node.children) > 1 else None
        while len(node.children) <= 1:
            if not node.children:
                return None
            node = node.children[0]
        return node
