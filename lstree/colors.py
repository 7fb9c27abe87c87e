"""
ANSI colorization of entry names.

A port of the default dircolors rules: file extensions first, then the
entry type. Extension matching ignores case.
"""

import os
import stat
from typing import Optional

from .core.node import Metadata

ESCAPE = "\x1b"
RESET = 0

WINDOWS_EXECUTABLES = frozenset({".bat", ".btm", ".cmd", ".com", ".dll", ".exe"})

ARCHIVES = frozenset({
    ".tar", ".tgz", ".arc", ".arj", ".taz", ".lha", ".lz4", ".lzh", ".lzma",
    ".tlz", ".txz", ".tzo", ".t7z", ".zip", ".z", ".dz", ".gz", ".lrz", ".lz",
    ".lzo", ".xz", ".zst", ".tzst", ".bz2", ".bz", ".tbz", ".tbz2", ".tz",
    ".deb", ".rpm", ".jar", ".war", ".ear", ".sar", ".rar", ".alz", ".ace",
    ".zoo", ".cpio", ".7z", ".rz", ".cab", ".wim", ".swm", ".dwm", ".esd",
})

IMAGES = frozenset({
    ".jpg", ".jpeg", ".mjpg", ".mjpeg", ".gif", ".bmp", ".pbm", ".pgm", ".ppm",
    ".tga", ".xbm", ".xpm", ".tif", ".tiff", ".png", ".svg", ".svgz", ".mng",
    ".pcx", ".mov", ".mpg", ".mpeg", ".m2v", ".mkv", ".webm", ".webp", ".ogm",
    ".mp4", ".m4v", ".mp4v", ".vob", ".qt", ".nuv", ".wmv", ".asf", ".rm",
    ".rmvb", ".flc", ".avi", ".fli", ".flv", ".gl", ".dl", ".xcf", ".xwd",
    ".yuv", ".cgm", ".emf", ".ogv", ".ogx",
})

AUDIO = frozenset({
    ".aac", ".au", ".flac", ".m4a", ".mid", ".midi", ".mka", ".mp3", ".mpc",
    ".ogg", ".ra", ".wav", ".oga", ".opus", ".spx", ".xspf",
})


def style_for(metadata: Optional[Metadata], broken_link: bool = False) -> Optional[str]:
    """Return the SGR parameters for an entry, None for plain text."""
    if metadata is None:
        return None
    ext = os.path.splitext(metadata.name)[1].lower()
    mode = metadata.mode
    if ext in WINDOWS_EXECUTABLES:
        return "1;32"
    if ext in ARCHIVES:
        return "1;31"
    if ext in IMAGES:
        return "1;35"
    if ext in AUDIO:
        return "1;36"
    if stat.S_ISDIR(mode):
        return "1;34"
    if stat.S_ISFIFO(mode):
        return "40;33"
    if stat.S_ISSOCK(mode):
        return "40;1;35"
    if stat.S_ISBLK(mode) or stat.S_ISCHR(mode):
        return "40;1;33"
    if stat.S_ISLNK(mode):
        return "40;1;31" if broken_link else "1;36"
    if mode & 0o111:
        return "1;32"
    return None


def colorize(text: str, metadata: Optional[Metadata], broken_link: bool = False) -> str:
    """Wrap text in the color of the entry described by metadata."""
    style = style_for(metadata, broken_link)
    if style is None:
        return text
    return f"{ESCAPE}[{style}m{text}{ESCAPE}[{RESET}m"
