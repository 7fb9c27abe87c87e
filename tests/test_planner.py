"""Tests for the adaptive render planner."""

import pytest

from lstree.config import AUTO_DEPTH, TreeOptions
from lstree.core.planner import STOP, Plan, RenderPlanner, reduce_next_children

from .helpers import dir_node, file_node


def files(count, prefix="f"):
    return [file_node(f"{prefix}{i}") for i in range(count)]


class TestReduceNextChildren:
    """The initial budget step function."""

    @pytest.mark.parametrize("slots,budget", [
        (0, 24),
        (5, 19),
        (11, 13),
        (12, 8),
        (23, 8),
        (24, 18),
        (49, 18),
        (50, 24),
        (99, 24),
        (100, 48),
        (250, 72),
        (350, 96),
        (400, 96),
        (850, 192),
    ])
    def test_step_values(self, slots, budget):
        assert reduce_next_children(slots) == budget

    def test_budget_never_negative(self):
        assert all(reduce_next_children(n) > 0 for n in range(0, 5000, 7))


class TestNextLevelCutoff:
    """Spreading a budget over child directories."""

    def test_budget_passes_through_when_everything_fits(self):
        root = dir_node("root", [dir_node("a", files(2)), dir_node("b", files(3))], depth=0)
        planner = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH))
        assert planner.next_level_cutoff(root, 20) == 20

    def test_allowance_shrinks_to_fit(self):
        root = dir_node("root", [
            dir_node("a", files(2)),
            dir_node("b", files(4)),
            dir_node("c", files(6)),
        ], depth=0)
        planner = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH))
        # 2 + 4 fit into 8, adding 6 does not: largest allowance is 5
        assert planner.next_level_cutoff(root, 8) == 5

    def test_directories_larger_than_budget_are_ignored(self):
        root = dir_node("root", [dir_node("big", files(50)), dir_node("small", files(2))],
                        depth=0)
        planner = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH))
        assert planner.next_level_cutoff(root, 10) == 10

    def test_cutoff_is_at_least_one(self):
        root = dir_node("root", [dir_node("a", files(1) + files(1, "g"))], depth=0)
        planner = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH))
        assert planner.next_level_cutoff(root, 0) == 1

    def test_single_child_chains_are_followed_when_joining(self):
        chain = dir_node("a", [dir_node("b", files(6))])
        root = dir_node("root", [chain, dir_node("c", files(3))], depth=0)

        joined = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH, join_single_child_dirs=True))
        plain = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH))
        # Joined: buckets 3 and 6 do not both fit into 7
        assert joined.next_level_cutoff(root, 7) == 5
        # Not joined: a has a single child and needs no budget
        assert plain.next_level_cutoff(root, 7) == 7


class TestPlan:
    """Per-directory decisions."""

    def test_unlimited_depth_always_expands(self):
        node = dir_node("root", files(500), depth=0)
        plan = RenderPlanner(TreeOptions()).plan(node, 0)
        assert plan.expand
        assert plan.summary is None

    def test_first_automatic_level_computes_budget(self):
        node = dir_node("root", [dir_node("a", files(3))] + files(2), depth=0)
        plan = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH)).plan(node, 0)
        # 4 slots -> budget 20, a (3 slots) fits
        assert plan == Plan(expand=True, cutoff=20)

    def test_directory_over_budget_is_summarized(self):
        node = dir_node("a", [dir_node("sub", files(4))] + files(10))
        plan = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH)).plan(node, 5)
        assert not plan.expand
        assert plan.summary == 15

    def test_directory_within_budget_passes_remainder(self):
        node = dir_node("a", files(3))
        planner = RenderPlanner(TreeOptions(max_depth=AUTO_DEPTH))
        assert planner.plan(node, 10) == Plan(expand=True, cutoff=7)
        assert planner.plan(node, 3) == Plan(expand=True, cutoff=1)

    def test_fixed_depth_without_sizes_stops(self):
        node = dir_node("a", files(3), depth=2)
        assert RenderPlanner(TreeOptions(max_depth=2)).plan(node, 0) is STOP

    def test_fixed_depth_one_with_sizes_stops(self):
        node = dir_node("a", files(3), depth=1)
        options = TreeOptions(max_depth=1, show_bytes=True)
        assert RenderPlanner(options).plan(node, 0) is STOP

    def test_fixed_depth_with_sizes_summarizes(self):
        node = dir_node("b", files(1), depth=2)
        plan = RenderPlanner(TreeOptions(max_depth=2, show_bytes=True)).plan(node, 0)
        assert plan.summary == 1

    def test_fixed_depth_with_sizes_skips_empty_directories(self):
        node = dir_node("b", depth=2)
        plan = RenderPlanner(TreeOptions(max_depth=2, show_bytes=True)).plan(node, 0)
        assert plan.summary is None

    def test_above_fixed_depth_expands(self):
        node = dir_node("a", files(30), depth=1)
        plan = RenderPlanner(TreeOptions(max_depth=3)).plan(node, 0)
        assert plan.expand and plan.summary is None
