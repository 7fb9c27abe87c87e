"""Tree printing for lstree.

The Printer walks a built tree depth first and writes one line per visible
node: optional property columns, tree glyphs, and the decorated name. It
sorts each directory on first access, computes sizes on demand, and asks
the RenderPlanner how far to expand every directory. Printing is strictly
sequential: line order is the output.
"""

import io
import logging
import os
import stat
import sys
import time
from dataclasses import dataclass
from typing import List, Optional, TextIO, Tuple

from .. import colors
from ..config import TreeOptions
from ..owners import group_name, user_name
from .formatting import format_count, format_size, unknown_size
from .node import Metadata, TreeNode
from .planner import RenderPlanner
from .provider import FileSystemProvider
from .sizes import aggregate_size_with_error
from .sorting import Comparator
from .visitor import Visitor

logger = logging.getLogger(__name__)

INDENT_MID = "┣━ "
INDENT_LAST = "┗━ "
INDENT_BAR = "┃ "
INDENT_SPACE = "  "
SUMMARY = "┖┄ "

RECURSIVE_MARK = " [recursive, not followed]"
MTIME_FORMAT = "%Y-%m-%d %H:%M"


@dataclass
class ColumnWidths:
    """Widest value of each aligned column anywhere in the tree."""
    inode: int = 0
    device: int = 0
    owner: int = 0
    group: int = 0


def _digits(number: int) -> int:
    return len(str(number)) if number > 0 else 0


def stat_ids(node: TreeNode) -> Optional[Tuple[int, int, int, int]]:
    """Read (inode, device, uid, gid) from the provider's raw stat handle.

    Returns:
        The ids, or None when the provider supplied no raw handle
    """
    raw = node.metadata.raw if node.metadata is not None else None
    try:
        return raw.st_ino, raw.st_dev, raw.st_uid, raw.st_gid
    except AttributeError:
        return None


def classify_suffix(metadata: Optional[Metadata]) -> str:
    """Type indicator appended by the classify option."""
    if metadata is None:
        return ""
    mode = metadata.mode
    if stat.S_ISDIR(mode):
        return "/"
    if stat.S_ISLNK(mode):
        return "@"
    if stat.S_ISSOCK(mode):
        return "="
    if stat.S_ISFIFO(mode):
        return "|"
    if metadata.is_executable:
        return "*"
    return ""


class Printer:
    """Writes a built tree as indented, decorated text.

    Example:
        printer = Printer(provider, options, out=sys.stdout)
        printer.print(root)
    """

    def __init__(self,
                 provider: FileSystemProvider,
                 options: TreeOptions,
                 out: Optional[TextIO] = None,
                 visitor: Optional[Visitor] = None):
        """Initialize the printer.

        Args:
            provider: Used for symlink targets and following links
            options: Immutable options of this invocation
            out: Output stream (defaults to stdout)
            visitor: Visitor used to expand followed symlinks
        """
        self.provider = provider
        self.options = options
        self.out = out if out is not None else sys.stdout
        self.visitor = visitor or Visitor(provider, options)
        self.comparator = Comparator(options)
        self.planner = RenderPlanner(options)

    def print(self, root: TreeNode) -> None:
        """Print root and everything below it."""
        widths = self.measure(root)
        self._print(root, "", "", 0, widths)

    def render(self, root: TreeNode) -> str:
        """Return the printed tree as a string."""
        out, self.out = self.out, io.StringIO()
        try:
            self.print(root)
            return self.out.getvalue()
        finally:
            self.out = out

    def measure(self, root: TreeNode) -> ColumnWidths:
        """Walk the whole tree once to find the aligned column widths."""
        options = self.options
        widths = ColumnWidths()
        stack = [root]
        while stack:
            node = stack.pop()
            stack.extend(node.children)
            ids = stat_ids(node)
            if ids is None:
                continue
            inode, device, uid, gid = ids
            if options.show_inodes:
                widths.inode = max(widths.inode, _digits(inode))
            if options.show_device:
                widths.device = max(widths.device, _digits(device))
            if options.show_owner:
                widths.owner = max(widths.owner, len(self._owner(uid)))
            if options.show_group:
                widths.group = max(widths.group, len(self._group(gid)))
        return widths

    def properties(self, node: TreeNode, widths: ColumnWidths) -> List[str]:
        """Formatted property columns of node, in display order."""
        options = self.options
        props = []
        ids = stat_ids(node)
        if ids is not None and options.show_inodes:
            props.append(str(ids[0]).rjust(widths.inode))
        if ids is not None and options.show_device:
            props.append(str(ids[1]).rjust(widths.device))
        if options.show_mode:
            props.append(stat.filemode(node.metadata.mode))
        if ids is not None and options.show_owner:
            props.append(self._owner(ids[2]).ljust(widths.owner))
        if ids is not None and options.show_group:
            props.append(self._group(ids[3]).ljust(widths.group))
        if options.show_size:
            if not node.is_dir:
                props.append(format_size(options, node.size))
            else:
                size, error = aggregate_size_with_error(node)
                if error is not None and size <= 0:
                    props.append(unknown_size(options))
                else:
                    props.append(format_size(options, size))
        if options.show_mod_time:
            props.append(time.strftime(MTIME_FORMAT, time.localtime(node.mtime)))
        return props

    def _print(self, node: TreeNode, indentc: str, indentn: str,
               cutoff: int, widths: ColumnWidths) -> None:
        options = self.options
        out = self.out

        if node.error is not None:
            out.write(f"{indentc}{node.path} [{node.error.reason}]\n")
            return

        props = self.properties(node, widths)
        if len(props) == 1:
            prefix = f"{props[0]} "
        elif props:
            prefix = f"[{' '.join(props)}] "
        else:
            prefix = ""

        if node.depth == 0 or options.full_path:
            name = self._decorate(node, node.path)
        else:
            name = self._decorate(node, node.name)
        node, name = self._join_single(node, name)
        if options.classify:
            name += classify_suffix(node.metadata)
        if node.is_symlink:
            name = self._annotate_symlink(node, name)

        out.write(f"{prefix}{indentc}{name}\n")

        plan = self.planner.plan(node, cutoff)
        if plan.summary is not None:
            count = format_count(plan.summary)
            out.write(f"{' ' * len(prefix)}{indentn}{SUMMARY}[{count} file(s)]\n")
            return
        if not plan.expand:
            return

        children = self.comparator.sorted_children(node)
        last = len(children) - 1
        for i, child in enumerate(children):
            if options.no_indent:
                child_indent, add = "", ""
            elif i == last:
                child_indent, add = indentn + INDENT_LAST, INDENT_SPACE
            else:
                child_indent, add = indentn + INDENT_MID, INDENT_BAR
            self._print(child, child_indent, indentn + add, plan.cutoff, widths)

    def _decorate(self, node: TreeNode, text: str) -> str:
        if self.options.quote_names:
            text = f'"{text}"'
        if self.options.colorize:
            text = colors.colorize(text, node.metadata,
                                   broken_link=node.is_symlink and self._is_broken(node))
        return text

    def _join_single(self, node: TreeNode, name: str) -> Tuple[TreeNode, str]:
        """Collapse a chain of single-child directories into one name.

        Columns other than size would describe only the first entry of
        the chain, so joining is off whenever one of them is shown.
        """
        options = self.options
        if (not options.join_single_child_dirs or options.has_columns
                or options.full_path):
            return node, name
        while len(node.children) == 1:
            nxt = node.children[0]
            if nxt.error is not None:
                break
            name = os.path.join(name, self._decorate(nxt, nxt.name))
            node = nxt
        return node, name

    def _annotate_symlink(self, node: TreeNode, name: str) -> str:
        provider = self.provider
        try:
            shown = provider.read_link(node.path)
        except OSError:
            shown = node.path
        try:
            target_path = provider.real_path(node.path)
        except OSError:
            target_path = shown
        try:
            target = provider.stat(target_path)
        except OSError:
            target = None

        if self.options.colorize and target is not None:
            shown = colors.colorize(shown, target)
        name = f"{name} -> {shown}"

        if self.options.follow_links and target is not None and target.is_dir:
            if not self.visitor.follow_symlink(node, target_path):
                name += RECURSIVE_MARK
        return name

    def _is_broken(self, node: TreeNode) -> bool:
        try:
            self.provider.real_path(node.path)
        except OSError:
            return True
        return False

    def _owner(self, uid: int) -> str:
        return str(uid) if self.options.numeric_ids else user_name(uid)

    def _group(self, gid: int) -> str:
        return str(gid) if self.options.numeric_ids else group_name(gid)


def format_report(options: TreeOptions, dirs: int, files: int, size: int) -> str:
    """The trailing summary line printed after all trees.

    Returns:
        Text such as ``\\n2 directories, 3 files, 60 size`` (no newline)
    """
    report = f"\n{format_count(dirs)} directories"
    if not options.dirs_only:
        report += f", {format_count(files)} files"
    if options.show_human_size:
        report += f", {format_size(options, size)} size"
    elif options.show_bytes:
        report += f", {format_count(size)} size"
    return report
