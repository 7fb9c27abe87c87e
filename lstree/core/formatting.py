"""Number formatting shared by the printer and the report line."""

import locale

from ..config import TreeOptions

_UNITS = "KMGTPE"

BYTES_WIDTH = 11
HUMAN_WIDTH = 4
UNKNOWN_BYTES = "?" * BYTES_WIDTH
UNKNOWN_HUMAN = "?" * HUMAN_WIDTH


def format_count(number: int) -> str:
    """Format a count with the digit grouping of the current locale."""
    return locale.format_string("%d", number, grouping=True)


def format_bytes(size: int) -> str:
    """Short human readable size: ``60``, ``4.0K``, ``12M``."""
    if size < 1024:
        return str(max(size, 0))
    value = float(size)
    for unit in _UNITS:
        value /= 1024
        if value < 1024 or unit == _UNITS[-1]:
            break
    if round(value, 1) < 10:
        return f"{value:.1f}{unit}"
    return f"{int(round(value))}{unit}"


def format_size(options: TreeOptions, size: int) -> str:
    """Format a size column value, padded to the column width."""
    if options.show_human_size:
        return format_bytes(size).rjust(HUMAN_WIDTH)
    return str(size).rjust(BYTES_WIDTH)


def unknown_size(options: TreeOptions) -> str:
    return UNKNOWN_HUMAN if options.show_human_size else UNKNOWN_BYTES
