"""Tests for size and count formatting."""

import pytest

from lstree.config import TreeOptions
from lstree.core.formatting import format_bytes, format_count, format_size, unknown_size


@pytest.mark.parametrize("size,text", [
    (0, "0"),
    (60, "60"),
    (1023, "1023"),
    (1024, "1.0K"),
    (1536, "1.5K"),
    (4096, "4.0K"),
    (10 * 1024, "10K"),
    (12 * 1024 ** 2, "12M"),
    (3 * 1024 ** 3, "3.0G"),
])
def test_format_bytes(size, text):
    assert format_bytes(size) == text


def test_format_size_widths():
    assert format_size(TreeOptions(show_bytes=True), 60) == "         60"
    assert format_size(TreeOptions(show_human_size=True), 60) == "  60"
    # Human readable wins when both are requested
    assert format_size(TreeOptions(show_bytes=True, show_human_size=True), 4096) == "4.0K"


def test_unknown_size_placeholders():
    assert unknown_size(TreeOptions(show_bytes=True)) == "?" * 11
    assert unknown_size(TreeOptions(show_human_size=True)) == "????"


def test_format_count_small_numbers():
    assert format_count(0) == "0"
    assert format_count(42) == "42"
