"""Concurrent tree building for lstree.

The Visitor expands a root TreeNode into the full in-memory tree. Provider
calls run in worker threads through ``asyncio.to_thread``; child visits are
fanned out as tasks admitted by a bounded semaphore. A child that cannot get
a permit right away is visited inline by the caller instead of waiting, so
fan-out is capped without any risk of the pool starving itself.

Symlink following needs exclusive access to the visited-paths set and is
therefore always run without the pool.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Pattern, Set, Tuple

from ..config import TreeOptions
from ..errors import NotAccessibleError
from .collector import ChildCollector, ChildResult
from .node import Metadata, TreeNode
from .provider import FileSystemProvider

logger = logging.getLogger(__name__)

# Total pool weight and the weight of one child visit
POOL_WEIGHT = 64
TASK_WEIGHT = 2

BACKUP_SUFFIXES = ('~', '.bak')

ErrorCallback = Callable[[TreeNode, NotAccessibleError], None]


class TraversalContext:
    """Coordination state of one root traversal.

    Created by the Visitor for every top-level visit and passed explicitly
    through the recursion. It is never shared between roots and never
    stored on the user-facing options.

    Attributes:
        pooled: True when child visits may run as concurrent tasks
        semaphore: Admission control for worker tasks
        collector: Single writer of children lists while pooled
        include/exclude: Compiled name patterns (None = no filtering)
    """

    def __init__(self, options: TreeOptions, pool_weight: int = POOL_WEIGHT):
        self.pooled = not options.follow_links and pool_weight >= TASK_WEIGHT
        self.include: Optional[Pattern] = options.compile_include()
        self.exclude: Optional[Pattern] = options.compile_exclude()
        self.semaphore: Optional[asyncio.Semaphore] = None
        self.collector: Optional[ChildCollector] = None
        self.workers: Set[asyncio.Task] = set()
        self.spawned = 0
        self.inline = 0
        if self.pooled:
            self.semaphore = asyncio.Semaphore(pool_weight // TASK_WEIGHT)
            self.collector = ChildCollector(maxsize=pool_weight)

    async def try_acquire(self) -> bool:
        """Take a worker permit if one is free, never waiting for one."""
        if self.semaphore is None or self.semaphore.locked():
            return False
        # An unlocked semaphore grants the permit without suspending
        await self.semaphore.acquire()
        return True

    def release(self) -> None:
        if self.semaphore is not None:
            self.semaphore.release()

    def spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self.workers.add(task)
        task.add_done_callback(self.workers.discard)
        self.spawned += 1

    async def join(self) -> Tuple[int, int]:
        """Wait for every worker, then drain the collector.

        Returns:
            Tuple of (directories, files) gathered by the collector
        """
        while self.workers:
            await asyncio.gather(*list(self.workers))
        if self.collector is None:
            return 0, 0
        return await self.collector.close()


class Visitor:
    """Builds the in-memory tree for one root and counts its entries.

    Example:
        visitor = Visitor(LocalFileSystem(), TreeOptions())
        root = TreeNode.new_root("/srv/data")
        dirs, files = visitor.visit(root)
    """

    def __init__(self,
                 provider: FileSystemProvider,
                 options: TreeOptions,
                 on_error: Optional[ErrorCallback] = None,
                 pool_weight: int = POOL_WEIGHT):
        """Initialize the visitor.

        Args:
            provider: Source of metadata and directory listings
            options: Immutable options of this invocation
            on_error: Called with every node error that gets contained
            pool_weight: Total worker pool weight (below TASK_WEIGHT
                disables concurrent visits)
        """
        self.provider = provider
        self.options = options
        self.on_error = on_error
        self.pool_weight = pool_weight

    def visit(self, node: TreeNode) -> Tuple[int, int]:
        """Populate node and its subtree, blocking until done.

        The root itself is never counted as a directory.

        Returns:
            Tuple of (directories, files) below node
        """
        return asyncio.run(self.visit_async(node))

    async def visit_async(self, node: TreeNode) -> Tuple[int, int]:
        """Async version of visit for callers already inside a loop."""
        ctx = TraversalContext(self.options, self.pool_weight)
        if ctx.collector is not None:
            ctx.collector.start()
        dirs, files = await self._visit(node, ctx)
        # The build phase must be complete before anything is printed
        more_dirs, more_files = await ctx.join()
        if ctx.pooled:
            logger.debug("Visited %s: %d pooled, %d inline child visits",
                         node.path, ctx.spawned, ctx.inline)
        return dirs + more_dirs, files + more_files

    def follow_symlink(self, node: TreeNode, target_path: str) -> bool:
        """Expand a symlink to a directory as if it were the directory.

        The canonical target is checked against the visited-paths set
        first; a target that was already entered is not descended into.

        Args:
            node: The symlink node, already built and printed as a link
            target_path: Fully resolved target of the link

        Returns:
            False if the target was already visited (a cycle), else True
        """
        if node.visited is None:
            node.visited = set()
        target = TreeNode(target_path, depth=node.depth, index=node.index,
                          visited=node.visited)
        if target.identifier() in node.visited:
            logger.debug("Not following %s: %s already visited", node.path, target_path)
            return False
        self.visit_blocking(target)
        node.children = target.children
        node.followed = True
        return True

    def visit_blocking(self, node: TreeNode) -> Tuple[int, int]:
        """Like visit, but also callable while an event loop is running.

        A running loop cannot be re-entered, so the traversal then runs on
        its own loop in a worker thread and this call waits for it.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self.visit(node)
        with ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(self.visit, node).result()

    async def _visit(self, node: TreeNode, ctx: TraversalContext) -> Tuple[int, int]:
        options = self.options
        try:
            node.metadata = await self._stat(node.path)
        except OSError as e:
            self._contain(node, e, "stat")
            return 0, 0

        if not node.metadata.is_dir:
            return 0, 1

        dirs, files = 0, 0
        if node.depth != 0:
            dirs += 1

        if options.follow_links and node.visited is not None:
            node.visited.add(node.identifier())

        # Sizes need the whole subtree, whatever the depth limit says
        if not options.show_size and 0 < options.max_depth <= node.depth:
            return dirs, files

        try:
            names = await asyncio.to_thread(self.provider.list_names, node.path)
        except OSError as e:
            self._contain(node, e, "list")
            return dirs, files

        for index, name in enumerate(names):
            if self._excluded_by_name(name):
                continue

            if ctx.pooled and await ctx.try_acquire():
                ctx.spawn(self._pooled_child(node, name, index, ctx))
                continue

            child, d, f = await self._new_child(node, name, index, ctx)
            if child is None:
                continue
            if ctx.collector is not None:
                ctx.inline += 1
                await ctx.collector.submit(ChildResult(node, child, d, f))
                continue
            node.children.append(child)
            dirs, files = dirs + d, files + f

        return dirs, files

    async def _pooled_child(self, node: TreeNode, name: str, index: int,
                            ctx: TraversalContext) -> None:
        try:
            child, d, f = await self._new_child(node, name, index, ctx)
            if child is not None:
                await ctx.collector.submit(ChildResult(node, child, d, f))
        finally:
            ctx.release()

    async def _new_child(self, node: TreeNode, name: str, index: int,
                         ctx: TraversalContext):
        child = node.new_child(name, index)
        d, f = await self._visit(child, ctx)
        if child.error is None and not child.is_dir:
            # Directories are never dropped by name: they may hold matches
            if self.options.dirs_only:
                return None, 0, 0
            if ctx.include is not None and not ctx.include.search(name):
                return None, 0, 0
            if ctx.exclude is not None and ctx.exclude.search(name):
                return None, 0, 0
        return child, d, f

    def _excluded_by_name(self, name: str) -> bool:
        if not self.options.all and name.startswith('.'):
            return True
        return name.endswith(BACKUP_SUFFIXES)

    async def _stat(self, path: str) -> Metadata:
        return await asyncio.to_thread(self.provider.stat, path)

    def _contain(self, node: TreeNode, error: OSError, operation: str) -> None:
        node.error = NotAccessibleError.from_os_error(node.path, error, operation)
        logger.debug("Cannot %s %s: %s", operation, node.path, node.error.reason)
        if self.on_error is not None:
            self.on_error(node, node.error)
