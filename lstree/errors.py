"""
Error types and error collection for lstree.

Per-node filesystem failures never abort a traversal. They are wrapped in a
NotAccessibleError, stored on the node that failed and rendered inline by
the printer. The remaining types are signals for the user-facing layers.
"""

import errno
import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class TreeError(Exception):
    """Base class for every error raised by lstree."""


class NotAccessibleError(TreeError):
    """
    A stat or directory listing was denied or failed.

    Wraps the originating OSError and keeps a short, human readable reason
    that the printer shows in brackets next to the entry.
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None,
                 operation: str = "stat"):
        self.path = path
        self.cause = cause
        self.operation = operation
        super().__init__(f"{operation} {path}: {self.reason}")

    @property
    def reason(self) -> str:
        """Short message without the path, e.g. ``Permission denied``."""
        cause = self.cause
        if isinstance(cause, OSError):
            if cause.strerror:
                return cause.strerror
            if cause.errno:
                return errno.errorcode.get(cause.errno, str(cause.errno))
        if cause is not None and str(cause):
            return str(cause)
        return "not accessible"

    @classmethod
    def from_os_error(cls, path: str, error: OSError,
                      operation: str = "stat") -> "NotAccessibleError":
        return cls(path, error, operation)


class PatternError(TreeError, ValueError):
    """A user supplied include/exclude pattern could not be compiled."""

    def __init__(self, pattern: str, cause: Optional[BaseException] = None):
        self.pattern = pattern
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"invalid pattern {pattern!r}{detail}")


class DepthExceeded(TreeError):
    """Raised by the recursive descendant counter when it hits the depth cap."""


class CollectErrors:
    """
    Error callback that records every contained error.

    Pass an instance as ``on_error`` to the Visitor to inspect failures
    after a traversal without changing how the tree is rendered.

    Example:
        errors = CollectErrors()
        Visitor(provider, options, on_error=errors).visit(root)
        for path in errors.skipped_paths:
            ...
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the collector.

        Args:
            verbose: If True, log a warning for every recorded error
        """
        self.errors: List[NotAccessibleError] = []
        self.verbose = verbose

    def __call__(self, node: Any, error: NotAccessibleError) -> None:
        self.errors.append(error)
        if self.verbose:
            logger.warning("Skipping inaccessible path '%s': %s", error.path, error.reason)

    @property
    def skipped_paths(self) -> List[str]:
        return [e.path for e in self.errors]

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        permission = sum(1 for e in self.errors if isinstance(e.cause, PermissionError))
        missing = sum(1 for e in self.errors if isinstance(e.cause, FileNotFoundError))
        return {
            'total_errors': len(self.errors),
            'permission_errors': permission,
            'missing_errors': missing,
            'other_errors': len(self.errors) - permission - missing,
            'skipped_paths': self.skipped_paths,
        }
