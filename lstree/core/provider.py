"""FileSystemProvider abstraction for lstree.

The provider is the only way the core reaches a filesystem. Keeping it
behind this interface lets the same Visitor and Printer run against the
local disk or a synthetic tree built in memory for tests.
"""

from abc import ABC, abstractmethod
from typing import List

from .node import Metadata


class FileSystemProvider(ABC):
    """Abstract capability for reading a filesystem tree.

    Implementations raise ``OSError`` subclasses (``FileNotFoundError``,
    ``PermissionError``, ...) on failure. The Visitor turns those into
    NotAccessibleError values stored on the node; providers never need to
    know about nodes.

    Providers are called from worker threads during the build phase and
    must therefore be safe for concurrent reads.
    """

    @abstractmethod
    def stat(self, path: str) -> Metadata:
        """Return metadata for path without following a final symlink.

        Args:
            path: Path to the entry

        Returns:
            Metadata for the entry itself (lstat semantics)

        Raises:
            OSError: If the entry is missing or cannot be inspected
        """
        pass

    @abstractmethod
    def list_names(self, path: str) -> List[str]:
        """Return the names of the entries in a directory.

        Args:
            path: Directory path

        Returns:
            Entry names in provider order (no ``.`` or ``..``)

        Raises:
            OSError: If the directory cannot be read
        """
        pass

    def read_link(self, path: str) -> str:
        """Return the literal target of a symlink.

        Raises:
            OSError: If path is not a symlink or cannot be read
        """
        raise OSError(f"{self.__class__.__name__} does not support symlinks")

    def real_path(self, path: str) -> str:
        """Return path with every symlink resolved.

        Raises:
            OSError: If the path cannot be resolved
        """
        raise OSError(f"{self.__class__.__name__} does not support symlinks")
