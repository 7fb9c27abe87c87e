"""Test fixtures for lstree consumers.

MemoryFileSystem is a FileSystemProvider over a synthetic tree described
with plain dictionaries. It supports symlinks and injected stat/listing
failures, which makes error handling and cycle detection testable without
touching the disk or depending on the privileges of the test runner.
"""

import errno
import itertools
import os
import posixpath
import stat
import threading
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Union

from ..core.node import Metadata
from ..core.provider import FileSystemProvider

DIR_MODE = stat.S_IFDIR | 0o755
FILE_MODE = stat.S_IFREG | 0o644
LINK_MODE = stat.S_IFLNK | 0o777
MAX_SYMLINK_HOPS = 40


@dataclass
class File:
    """A regular file in a synthetic tree."""
    size: int = 0
    mode: int = FILE_MODE
    mtime: float = 0.0
    ctime: Optional[float] = None
    uid: int = 0
    gid: int = 0


@dataclass
class Symlink:
    """A symlink; relative targets resolve against the link's directory."""
    target: str
    mtime: float = 0.0


@dataclass
class _Dir:
    names: List[str] = field(default_factory=list)
    mtime: float = 0.0
    uid: int = 0
    gid: int = 0


# A tree layout maps names to: dict (directory), int (file size),
# str/bytes (file contents), File or Symlink.
TreeLayout = Dict[str, Any]


class MemoryFileSystem(FileSystemProvider):
    """In-memory provider built from a nested dictionary.

    Example:
        fs = MemoryFileSystem({
            "root": {
                "a.txt": 10,
                "sub": {"b.txt": File(size=20, mtime=5.0)},
                "loop": Symlink(".."),
            }
        })
        fs.deny_listing("/root/sub")

    All paths are POSIX style and rooted at ``/``; relative paths are
    taken relative to ``/``.
    """

    def __init__(self, tree: Optional[TreeLayout] = None, device: int = 1):
        self.device = device
        self._entries: Dict[str, Union[File, Symlink, _Dir]] = {'/': _Dir()}
        self._inodes: Dict[str, int] = {'/': 1}
        self._next_inode = itertools.count(2)
        self._stat_errors: Dict[str, OSError] = {}
        self._list_errors: Dict[str, OSError] = {}
        self._lock = threading.Lock()
        self.stat_calls = 0
        self.list_calls = 0
        if tree:
            self.add('/', tree)

    # Building

    def add(self, parent: str, tree: TreeLayout) -> None:
        """Add the entries of a tree layout below an existing directory."""
        parent = self._norm(parent)
        directory = self._entries[parent]
        if not isinstance(directory, _Dir):
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), parent)
        for name, value in tree.items():
            path = posixpath.join(parent, name)
            if path not in self._entries:
                directory.names.append(name)
            self._inodes[path] = next(self._next_inode)
            if isinstance(value, dict):
                self._entries[path] = _Dir()
                self.add(path, value)
            elif isinstance(value, (File, Symlink)):
                self._entries[path] = value
            elif isinstance(value, int):
                self._entries[path] = File(size=value)
            elif isinstance(value, (str, bytes)):
                self._entries[path] = File(size=len(value))
            else:
                raise TypeError(f"unsupported tree layout for {path!r}: {value!r}")

    def deny_listing(self, path: str) -> None:
        """Make list_names(path) fail with PermissionError."""
        path = self._norm(path)
        self._list_errors[path] = PermissionError(
            errno.EACCES, os.strerror(errno.EACCES), path)

    def deny_stat(self, path: str) -> None:
        """Make stat(path) fail with PermissionError."""
        path = self._norm(path)
        self._stat_errors[path] = PermissionError(
            errno.EACCES, os.strerror(errno.EACCES), path)

    def set_dir_mtime(self, path: str, mtime: float) -> None:
        directory = self._entries[self._norm(path)]
        if isinstance(directory, _Dir):
            directory.mtime = mtime

    # FileSystemProvider

    def stat(self, path: str) -> Metadata:
        with self._lock:
            self.stat_calls += 1
        norm = self._norm(path)
        if norm in self._stat_errors:
            raise self._stat_errors[norm]
        resolved = self._resolve(norm, follow_last=False)
        entry = self._entries[resolved]
        raw = SimpleNamespace(st_ino=self._inodes[resolved], st_dev=self.device,
                              st_uid=getattr(entry, 'uid', 0),
                              st_gid=getattr(entry, 'gid', 0))
        name = posixpath.basename(norm) or norm
        if isinstance(entry, _Dir):
            return Metadata(name=name, size=4096, mode=DIR_MODE,
                            mtime=entry.mtime, ctime=entry.mtime, raw=raw)
        if isinstance(entry, Symlink):
            return Metadata(name=name, size=len(entry.target), mode=LINK_MODE,
                            mtime=entry.mtime, ctime=entry.mtime, raw=raw)
        ctime = entry.ctime if entry.ctime is not None else entry.mtime
        return Metadata(name=name, size=entry.size, mode=entry.mode,
                        mtime=entry.mtime, ctime=ctime, raw=raw)

    def list_names(self, path: str) -> List[str]:
        with self._lock:
            self.list_calls += 1
        norm = self._norm(path)
        if norm in self._list_errors:
            raise self._list_errors[norm]
        resolved = self._resolve(norm, follow_last=True)
        entry = self._entries[resolved]
        if not isinstance(entry, _Dir):
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        return list(entry.names)

    def read_link(self, path: str) -> str:
        resolved = self._resolve(self._norm(path), follow_last=False)
        entry = self._entries[resolved]
        if not isinstance(entry, Symlink):
            raise OSError(errno.EINVAL, os.strerror(errno.EINVAL), path)
        return entry.target

    def real_path(self, path: str) -> str:
        return self._resolve(self._norm(path), follow_last=True)

    # Internals

    @staticmethod
    def _norm(path: str) -> str:
        return posixpath.normpath(posixpath.join('/', path))

    def _resolve(self, path: str, follow_last: bool, hops: int = 0) -> str:
        parts = [p for p in path.split('/') if p]
        current = '/'
        for i, part in enumerate(parts):
            candidate = posixpath.join(current, part)
            entry = self._entries.get(candidate)
            if entry is None:
                raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
            last = i == len(parts) - 1
            if isinstance(entry, Symlink) and (follow_last or not last):
                if hops >= MAX_SYMLINK_HOPS:
                    raise OSError(errno.ELOOP, os.strerror(errno.ELOOP), path)
                target = self._norm(posixpath.join(current, entry.target))
                current = self._resolve(target, True, hops + 1)
            elif not last and not isinstance(entry, _Dir):
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
            else:
                current = candidate
        return current
