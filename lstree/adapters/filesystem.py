"""Local filesystem provider for lstree.

Backs the FileSystemProvider interface with the operating system:
``os.lstat`` for metadata and ``os.listdir`` for directory listings.
"""

import errno
import os
from pathlib import Path
from typing import List

from ..core.node import Metadata
from ..core.provider import FileSystemProvider


class LocalFileSystem(FileSystemProvider):
    """Provider for the local disk.

    Stat calls never follow the final symlink, so a symlink is reported as
    a symlink and only expanded when the printer is asked to follow links.
    """

    def stat(self, path: str) -> Metadata:
        st = os.lstat(path)
        name = os.path.basename(os.path.normpath(path)) or path
        return Metadata.from_stat(name, st)

    def list_names(self, path: str) -> List[str]:
        return os.listdir(path)

    def read_link(self, path: str) -> str:
        return os.readlink(path)

    def real_path(self, path: str) -> str:
        try:
            return str(Path(path).resolve(strict=True))
        except RuntimeError as e:
            # Older interpreters report symlink loops as RuntimeError
            raise OSError(errno.ELOOP, os.strerror(errno.ELOOP), path) from e

    def __repr__(self) -> str:
        return "LocalFileSystem()"
