"""High-level API for lstree.

Simple functional entry points that wire a provider, a Visitor and a
Printer together for the common cases. The command line front end is
built on ``print_trees``.
"""

import io
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, TextIO

from .adapters.filesystem import LocalFileSystem
from .config import TreeOptions
from .core.node import TreeNode
from .core.printer import Printer, format_report
from .core.provider import FileSystemProvider
from .core.sizes import node_size
from .core.visitor import ErrorCallback, Visitor

logger = logging.getLogger(__name__)


@dataclass
class TreeResult:
    """Outcome of building one or more trees."""
    root: Optional[TreeNode] = None
    dirs: int = 0
    files: int = 0
    size: int = 0

    def add(self, other: 'TreeResult') -> None:
        self.dirs += other.dirs
        self.files += other.files
        self.size += other.size


def build_tree(
    path: str,
    options: Optional[TreeOptions] = None,
    provider: Optional[FileSystemProvider] = None,
    on_error: Optional[ErrorCallback] = None,
) -> TreeResult:
    """Build the in-memory tree rooted at path.

    Args:
        path: Root path, used verbatim as the root's display name
        options: Options of this invocation (defaults to TreeOptions())
        provider: Filesystem provider (defaults to the local disk)
        on_error: Called with every contained node error

    Returns:
        TreeResult with the root node, its counts and its total size

    Example:
        >>> result = build_tree("src", TreeOptions(show_bytes=True))
        >>> print(result.dirs, result.files, result.size)
    """
    options = options or TreeOptions()
    provider = provider or LocalFileSystem()
    root = TreeNode.new_root(path)
    dirs, files = Visitor(provider, options, on_error=on_error).visit(root)
    return TreeResult(root=root, dirs=dirs, files=files, size=node_size(root))


def render_tree(
    path: str,
    options: Optional[TreeOptions] = None,
    provider: Optional[FileSystemProvider] = None,
    report: bool = False,
) -> str:
    """Build and print one tree into a string.

    Args:
        path: Root path
        options: Options of this invocation
        provider: Filesystem provider (defaults to the local disk)
        report: Append the directory/file/size report line

    Returns:
        The rendered text
    """
    out = io.StringIO()
    print_trees([path], options, out=out, provider=provider, report=report)
    return out.getvalue()


def print_trees(
    paths: Iterable[str],
    options: Optional[TreeOptions] = None,
    out: Optional[TextIO] = None,
    provider: Optional[FileSystemProvider] = None,
    report: bool = True,
    on_error: Optional[ErrorCallback] = None,
) -> TreeResult:
    """Build and print every root in turn, then the report line.

    Each root is an independent traversal with its own worker pool and
    visited-paths set.

    Returns:
        Totals over all roots (root is left unset)
    """
    options = options or TreeOptions()
    provider = provider or LocalFileSystem()
    visitor = Visitor(provider, options, on_error=on_error)
    printer = Printer(provider, options, out=out, visitor=visitor)
    totals = TreeResult()
    for path in paths:
        root = TreeNode.new_root(path)
        dirs, files = visitor.visit(root)
        result = TreeResult(root=root, dirs=dirs, files=files, size=node_size(root))
        logger.debug("Built %s: %d directories, %d files", path, dirs, files)
        totals.add(result)
        printer.print(root)
    if report:
        printer.out.write(format_report(options, totals.dirs, totals.files, totals.size) + "\n")
    return totals
