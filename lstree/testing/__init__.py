"""Testing utilities for lstree and its consumers."""

from .fixtures import File, MemoryFileSystem, Symlink

__all__ = ['File', 'MemoryFileSystem', 'Symlink']
