"""Core tree engine of lstree.

Build phase:  Visitor (concurrent, per-root TraversalContext)
Print phase:  Printer -> Comparator, sizes, RenderPlanner (sequential)
"""

from .node import Metadata, TreeNode
from .provider import FileSystemProvider
from .collector import ChildCollector, ChildResult
from .visitor import POOL_WEIGHT, TASK_WEIGHT, TraversalContext, Visitor
from .sizes import (
    aggregate_size,
    aggregate_size_with_error,
    child_slots,
    direct_children,
    node_size,
    recursive_children,
)
from .sorting import Comparator, version_key
from .planner import Plan, RenderPlanner, reduce_next_children
from .printer import Printer, format_report

__all__ = [
    'Metadata',
    'TreeNode',
    'FileSystemProvider',
    'ChildCollector',
    'ChildResult',
    'POOL_WEIGHT',
    'TASK_WEIGHT',
    'TraversalContext',
    'Visitor',
    'aggregate_size',
    'aggregate_size_with_error',
    'child_slots',
    'direct_children',
    'node_size',
    'recursive_children',
    'Comparator',
    'version_key',
    'Plan',
    'RenderPlanner',
    'reduce_next_children',
    'Printer',
    'format_report',
]
