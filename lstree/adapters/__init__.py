"""Filesystem providers shipped with lstree."""

from .filesystem import LocalFileSystem

__all__ = ['LocalFileSystem']
