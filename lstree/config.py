"""Configuration system for lstree.

This module defines the immutable options record that drives one
invocation: what to list, which property columns to show, how siblings
are ordered and how the tree is drawn.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Pattern

from .errors import PatternError

logger = logging.getLogger(__name__)


class SortKind(Enum):
    """Primary ordering of siblings.

    Exactly one ordering is active at a time. Directories-first and
    reversal are applied on top of it as separate decorators.
    """
    NONE = "none"                   # Provider listing order
    NAME = "name"                   # Codepoint order of names (default)
    VERSION = "version"             # Numeric runs compared as integers
    SIZE = "size"                   # Aggregate size
    MOD_TIME = "mtime"              # Last modification time
    STATUS_CHANGE_TIME = "ctime"    # Last status change time

    @classmethod
    def parse(cls, name: Optional[str]) -> 'SortKind':
        """Map a command line sort name to a SortKind.

        Args:
            name: One of name, version, size, mtime, ctime (or None).
                Listing order has no name here; it is selected with -U.

        Returns:
            The matching SortKind, NAME when name is empty

        Raises:
            ValueError: If the name is not a known ordering
        """
        if not name:
            return cls.NAME
        for kind in cls:
            if kind is not cls.NONE and kind.value == name:
                return kind
        raise ValueError(
            f"sort type '{name}' not valid, should be one of: "
            "name,version,size,mtime,ctime"
        )


# Depth sentinels for TreeOptions.max_depth
UNLIMITED_DEPTH = 0
AUTO_DEPTH = -1


@dataclass(frozen=True)
class TreeOptions:
    """Complete configuration for building and printing one tree.

    The record is immutable and shared by every component for the
    duration of one invocation. Traversal coordination state (worker
    pool, collector queue, visited paths) is deliberately not part of it;
    see lstree.core.visitor.TraversalContext.
    """

    # Listing
    all: bool = False                       # Include hidden entries
    dirs_only: bool = False
    full_path: bool = False
    ignore_case: bool = False
    follow_links: bool = False
    max_depth: int = UNLIMITED_DEPTH        # 0 unlimited, >0 fixed, <0 automatic
    include_pattern: Optional[str] = None
    exclude_pattern: Optional[str] = None

    # File properties
    show_bytes: bool = False
    show_human_size: bool = False
    show_mode: bool = False
    show_owner: bool = False
    show_group: bool = False
    show_mod_time: bool = False
    quote_names: bool = False
    show_inodes: bool = False
    show_device: bool = False
    numeric_ids: bool = False

    # Sorting
    sort: SortKind = SortKind.NAME
    dirs_first: bool = False
    reverse: bool = False

    # Graphics
    no_indent: bool = False
    colorize: bool = False
    join_single_child_dirs: bool = False
    classify: bool = False

    @property
    def show_size(self) -> bool:
        """True when any size column (bytes or human) is requested."""
        return self.show_bytes or self.show_human_size

    @property
    def auto_depth(self) -> bool:
        return self.max_depth < 0

    @property
    def has_columns(self) -> bool:
        """True when a column that makes joined lines misleading is shown."""
        return (self.show_inodes or self.show_device or self.show_mode
                or self.show_owner or self.show_group or self.show_mod_time)

    def compile_include(self) -> Optional[Pattern]:
        """Compile the include pattern, None when unset or malformed."""
        return self._compile_or_none(self.include_pattern)

    def compile_exclude(self) -> Optional[Pattern]:
        """Compile the exclude pattern, None when unset or malformed."""
        return self._compile_or_none(self.exclude_pattern)

    def compile_pattern(self, pattern: str) -> Pattern:
        """Compile a user pattern honouring ignore_case.

        Raises:
            PatternError: If the pattern is not a valid regular expression
        """
        flags = re.IGNORECASE if self.ignore_case else 0
        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise PatternError(pattern, e) from e

    def _compile_or_none(self, pattern: Optional[str]) -> Optional[Pattern]:
        if not pattern:
            return None
        try:
            return self.compile_pattern(pattern)
        except PatternError as e:
            # A malformed pattern means no filtering, not a failed run
            logger.warning("%s; filtering disabled", e)
            return None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.sort, SortKind):
            errors.append(f"sort must be a SortKind, got {self.sort!r}")

        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            errors.append(f"max_depth must be an integer, got {self.max_depth!r}")

        # Malformed patterns are not listed: they degrade to no filtering

        return errors
