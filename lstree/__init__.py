"""lstree - annotated directory trees.

lstree walks a filesystem subtree concurrently, builds an in-memory tree,
and prints it with optional property columns, sorting, filtering and an
adaptive depth that keeps huge trees readable.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from lstree import TreeOptions, render_tree
    print(render_tree("src", TreeOptions(show_bytes=True), report=True))
━━━━━━━━━━━━━━━━━━━━━━━━━━

The engine is provider based: pass any FileSystemProvider (for example
lstree.testing.MemoryFileSystem) to run against a synthetic tree.
"""

__version__ = "0.3.0"

from .config import AUTO_DEPTH, UNLIMITED_DEPTH, SortKind, TreeOptions
from .errors import (
    CollectErrors,
    DepthExceeded,
    NotAccessibleError,
    PatternError,
    TreeError,
)
from .core import (
    Comparator,
    FileSystemProvider,
    Metadata,
    Printer,
    RenderPlanner,
    TreeNode,
    Visitor,
    aggregate_size,
)
from .adapters import LocalFileSystem
from .api import TreeResult, build_tree, print_trees, render_tree

__all__ = [
    "__version__",
    "AUTO_DEPTH",
    "UNLIMITED_DEPTH",
    "SortKind",
    "TreeOptions",
    "CollectErrors",
    "DepthExceeded",
    "NotAccessibleError",
    "PatternError",
    "TreeError",
    "Comparator",
    "FileSystemProvider",
    "Metadata",
    "Printer",
    "RenderPlanner",
    "TreeNode",
    "Visitor",
    "aggregate_size",
    "LocalFileSystem",
    "TreeResult",
    "build_tree",
    "print_trees",
    "render_tree",
]
