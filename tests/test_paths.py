"""
Tests for the vfskit.paths module.

This module tests:
- resolve(): absolute/relative handling, '.', '..' and separator collapsing
- Root confinement of '..'
- Normalization idempotence
- Path helpers (parent, basename, ancestors, ordering)
"""

import pytest

from vfskit import paths


# =============================================================================
# resolve() Tests
# =============================================================================

class TestResolve:
    """Tests for resolving raw paths against a working directory."""

    @pytest.mark.parametrize(
        "raw, cwd, expected",
        [
            ("/", "/", "/"),
            ("", "/", "/"),
            ("", "/work", "/work"),
            (".", "/work", "/work"),
            ("docs", "/", "/docs"),
            ("docs", "/work", "/work/docs"),
            ("/docs", "/work", "/docs"),
            ("./a/./b/", "/", "/a/b"),
            ("a//b///c", "/", "/a/b/c"),
            ("//a", "/", "/a"),
            ("a/../b", "/", "/b"),
            ("..", "/work/src", "/work"),
            ("../docs/./a.txt", "/work/src", "/work/docs/a.txt"),
        ],
    )
    def test_resolution(self, raw, cwd, expected):
        assert paths.resolve(raw, cwd) == expected

    def test_dotdot_at_root_is_noop(self):
        assert paths.resolve("..", "/") == "/"
        assert paths.resolve("/../../..", "/work") == "/"

    def test_cannot_climb_above_root(self):
        """Excess '..' segments are absorbed at the root."""
        assert paths.resolve("../../../etc/passwd", "/work") == "/etc/passwd"

    def test_trailing_separator_removed(self):
        assert paths.resolve("/docs/", "/") == "/docs"

    def test_unicode_segments(self):
        assert paths.resolve("документы/файл.txt", "/") == "/документы/файл.txt"

    @pytest.mark.parametrize(
        "raw",
        ["", ".", "..", "a/b/../c", "/x/./y//", "../../q", "a/./../../b/c/."],
    )
    def test_idempotence(self, raw):
        cwd = "/work/src"
        once = paths.resolve(raw, cwd)

        assert paths.resolve(once, cwd) == once
        assert ".." not in paths.parts(once)
        assert "." not in paths.parts(once)

    def test_normalize_uses_root(self):
        assert paths.normalize("a/../b") == "/b"


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    """Tests for the small path helpers."""

    def test_parts_and_depth(self):
        assert paths.parts("/") == ()
        assert paths.parts("/a/b") == ("a", "b")
        assert paths.depth("/") == 0
        assert paths.depth("/a/b/c") == 3

    def test_parent(self):
        assert paths.parent("/") == "/"
        assert paths.parent("/a") == "/"
        assert paths.parent("/a/b") == "/a"

    def test_basename_and_join(self):
        assert paths.basename("/a/b.txt") == "b.txt"
        assert paths.join("/", "a") == "/a"
        assert paths.join("/a", "b") == "/a/b"

    def test_is_within(self):
        assert paths.is_within("/a/b", "/a")
        assert paths.is_within("/a", "/a")
        assert paths.is_within("/a", "/")
        assert not paths.is_within("/ab", "/a")
        assert not paths.is_within("/a", "/a/b")

    def test_ancestors_root_first(self):
        assert paths.ancestors("/") == []
        assert paths.ancestors("/a") == ["/"]
        assert paths.ancestors("/a/b/c") == ["/", "/a", "/a/b"]

    def test_sort_key_gives_preorder(self):
        unsorted = ["/a b", "/a/z", "/a", "/b", "/a/c/d", "/a/c"]

        ordered = sorted(unsorted, key=paths.sort_key)

        assert ordered == ["/a", "/a/c", "/a/c/d", "/a/z", "/a b", "/b"]
