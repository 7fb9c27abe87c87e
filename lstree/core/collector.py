"""Single-writer collection of visited children.

During a pooled traversal many workers finish child visits concurrently.
None of them touches a parent's children list directly: each result is
queued and one collector task appends it and keeps the running counts.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Tuple

from .node import TreeNode


@dataclass
class ChildResult:
    """A visited child waiting to be attached to its parent."""
    parent: TreeNode
    child: TreeNode
    dirs: int = 0
    files: int = 0


class ChildCollector:
    """Drains ChildResults and appends them to their parents.

    The collector is the only writer of ``children`` for every node
    expanded while it is running, so the lists need no lock. Counts of
    every collected child are summed and returned by ``close``.
    """

    def __init__(self, maxsize: int = 0):
        """Initialize collector with empty state.

        Args:
            maxsize: Queue bound; producers wait when it is full
        """
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dirs = 0
        self.files = 0
        self.collected = 0
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the draining task on the running loop."""
        self._task = asyncio.create_task(self._drain())

    async def submit(self, result: ChildResult) -> None:
        await self.queue.put(result)

    async def close(self) -> Tuple[int, int]:
        """Stop after the queued results are drained.

        Must only be called once every producer has finished.

        Returns:
            Tuple of (directories, files) accumulated from all results
        """
        await self.queue.put(None)
        if self._task is not None:
            await self._task
        return self.dirs, self.files

    async def _drain(self) -> None:
        while True:
            result = await self.queue.get()
            if result is None:
                break
            result.parent.children.append(result.child)
            self.dirs += result.dirs
            self.files += result.files
            self.collected += 1
