"""TreeNode model for lstree.

A TreeNode is one filesystem entry in the in-memory tree. It is created
with only a path and a depth, populated once by the Visitor, and after the
build phase only touched by the two one-time caches of the print phase:
the sorted flag and the memoized aggregate size.
"""

import os
import stat
from dataclasses import dataclass
from typing import Any, List, Optional, Set

from ..errors import NotAccessibleError


@dataclass(frozen=True)
class Metadata:
    """Per-path metadata returned by a FileSystemProvider.

    ``raw`` is the provider specific stat handle (an ``os.stat_result``
    for the local filesystem). Inode, device, uid and gid are read from
    it when present.
    """
    name: str
    size: int = 0
    mode: int = 0
    mtime: float = 0.0
    ctime: float = 0.0
    raw: Any = None

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self.mode)

    @property
    def is_executable(self) -> bool:
        return stat.S_ISREG(self.mode) and bool(self.mode & 0o111)

    @classmethod
    def from_stat(cls, name: str, st: os.stat_result) -> 'Metadata':
        """Build metadata from an ``os.stat_result``."""
        return cls(
            name=name,
            size=st.st_size,
            mode=st.st_mode,
            mtime=st.st_mtime,
            ctime=st.st_ctime,
            raw=st,
        )


class TreeNode:
    """One file or directory in the tree.

    Exactly one of ``metadata`` and ``error`` describes the outcome of the
    stat call. A directory whose listing failed has both: its metadata and
    the listing error. A node with an error never has children.

    Attributes:
        path: Path as given (root) or joined from the parent path
        depth: 0 for the root, parent depth + 1 otherwise
        index: Position of the name in the parent's listing
        children: Child nodes, filled by the Visitor
        followed: True for a symlink expanded as its target directory
        visited: Canonical directory paths entered while following
            symlinks, shared by every node of one root traversal
    """

    def __init__(self,
                 path: str,
                 depth: int = 0,
                 index: int = 0,
                 visited: Optional[Set[str]] = None):
        self.path = path
        self.depth = depth
        self.index = index
        self.metadata: Optional[Metadata] = None
        self.error: Optional[NotAccessibleError] = None
        self.children: List['TreeNode'] = []
        self.visited = visited
        self.followed = False
        self.sorted = False
        self._aggregate_size: Optional[int] = None
        self._aggregate_error: Optional[NotAccessibleError] = None

    @classmethod
    def new_root(cls, path: str) -> 'TreeNode':
        """Create the root node of an independent traversal."""
        return cls(path, depth=0, visited=set())

    def new_child(self, name: str, index: int = 0) -> 'TreeNode':
        """Create an unvisited child node sharing this node's visited set."""
        return TreeNode(os.path.join(self.path, name),
                        depth=self.depth + 1,
                        index=index,
                        visited=self.visited)

    @property
    def name(self) -> str:
        if self.metadata is not None:
            return self.metadata.name
        return os.path.basename(self.path.rstrip(os.sep)) or self.path

    @property
    def is_dir(self) -> bool:
        return self.metadata is not None and self.metadata.is_dir

    @property
    def is_symlink(self) -> bool:
        return self.metadata is not None and self.metadata.is_symlink

    @property
    def is_container(self) -> bool:
        """True for directories and for symlinks expanded like one."""
        return self.is_dir or self.followed

    @property
    def size(self) -> int:
        """Own size in bytes (0 when the stat failed)."""
        return self.metadata.size if self.metadata is not None else 0

    @property
    def mtime(self) -> float:
        return self.metadata.mtime if self.metadata is not None else 0.0

    @property
    def ctime(self) -> float:
        return self.metadata.ctime if self.metadata is not None else 0.0

    def identifier(self) -> str:
        """Return the canonical absolute path as unique identifier."""
        return os.path.normpath(os.path.abspath(self.path))

    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        state = "error" if self.error else ("dir" if self.is_dir else "file")
        return f"TreeNode(path={self.path!r}, depth={self.depth}, {state})"
