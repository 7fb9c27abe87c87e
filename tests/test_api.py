"""Tests for the high-level API."""

import io

import pytest

from lstree import TreeOptions, build_tree, print_trees, render_tree
from lstree.errors import CollectErrors
from lstree.testing import MemoryFileSystem


@pytest.fixture
def fs():
    return MemoryFileSystem({
        "one": {"a.txt": 10, "b.txt": 20, "c.txt": 30},
        "two": {"sub": {"x": 5}, "y": 1},
    })


class TestBuildTree:
    """build_tree results."""

    def test_counts_and_size(self, fs):
        result = build_tree("/one", TreeOptions(), provider=fs)
        assert (result.dirs, result.files, result.size) == (0, 3, 60)
        assert sorted(c.name for c in result.root.children) == ["a.txt", "b.txt", "c.txt"]

    def test_default_options(self, fs):
        result = build_tree("/two", provider=fs)
        assert (result.dirs, result.files, result.size) == (1, 2, 6)

    def test_errors_reach_callback(self, fs):
        fs.deny_listing("/two/sub")
        errors = CollectErrors()
        result = build_tree("/two", provider=fs, on_error=errors)
        assert errors.skipped_paths == ["/two/sub"]
        assert result.size == 1


class TestRenderTree:
    """Rendering to a string."""

    def test_without_report(self, fs):
        assert render_tree("/one", provider=fs) == (
            "/one\n"
            "┣━ a.txt\n"
            "┣━ b.txt\n"
            "┗━ c.txt\n"
        )

    def test_with_report(self, fs):
        text = render_tree("/one", TreeOptions(show_bytes=True), provider=fs, report=True)
        assert text.endswith("\n\n0 directories, 3 files, 60 size\n")


class TestPrintTrees:
    """Several roots in one invocation."""

    def test_roots_printed_in_order_with_one_report(self, fs):
        out = io.StringIO()
        totals = print_trees(["/one", "/two"], TreeOptions(), out=out, provider=fs)

        lines = out.getvalue().splitlines()
        assert lines[0] == "/one"
        assert lines.index("/two") == 4
        assert lines[-1] == "1 directories, 5 files"
        assert sum(1 for line in lines if "directories" in line) == 1
        assert (totals.dirs, totals.files, totals.size) == (1, 5, 66)

    def test_no_report(self, fs):
        out = io.StringIO()
        print_trees(["/one"], out=out, provider=fs, report=False)
        assert "directories" not in out.getvalue()
