"""
Tests for the vfskit.backends.memory module.

This module tests:
- MemoryFS tree operations through the FsBackend contract
- Unsupported host-only capabilities
- Cleanup and scoped teardown
"""

import pytest

from vfskit import (
    AlreadyExistsError,
    EntryKind,
    FsBackend,
    InvalidPathError,
    MemoryFS,
    NotADirError,
    NotAFileError,
    NotFoundError,
    UnsupportedError,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fs():
    with MemoryFS() as instance:
        yield instance


# =============================================================================
# Identity Tests
# =============================================================================

class TestIdentity:
    """Tests for root identity and contract membership."""

    def test_is_a_backend(self, fs):
        assert isinstance(fs, FsBackend)

    def test_root_is_opaque_and_unique(self):
        first, second = MemoryFS(), MemoryFS()

        assert first.root().startswith("mem://")
        assert first.root() != second.root()

    def test_initial_cwd(self, fs):
        assert fs.cwd() == "/"
        assert fs.exists("/")
        assert fs.is_dir("/")

    @pytest.mark.parametrize("operation", ["to_host", "add", "forget"])
    def test_host_only_operations_unsupported(self, fs, operation):
        with pytest.raises(UnsupportedError) as exc_info:
            getattr(fs, operation)("/a")

        assert exc_info.value.operation == operation
        assert exc_info.value.error_code == "UNSUPPORTED"


# =============================================================================
# Tree Operation Tests
# =============================================================================

class TestTreeOperations:
    """Tests for navigation, creation, content and removal."""

    def test_mkdir_and_cd(self, fs):
        fs.mkdir("/a/b")

        fs.cd("a")
        fs.cd("b")

        assert fs.cwd() == "/a/b"
        fs.cd("../../..")
        assert fs.cwd() == "/"

    def test_cd_errors(self, fs):
        fs.mkfile("/f.txt")

        with pytest.raises(NotFoundError):
            fs.cd("/missing")
        with pytest.raises(NotADirError):
            fs.cd("/f.txt")
        assert fs.cwd() == "/"

    def test_mkdir_existing_directory_is_noop(self, fs):
        fs.mkfile("/a/keep.txt")

        fs.mkdir("/a")

        assert fs.is_file("/a/keep.txt")

    def test_mkdir_over_file(self, fs):
        fs.mkfile("/f")

        with pytest.raises(AlreadyExistsError):
            fs.mkdir("/f")
        with pytest.raises(NotADirError):
            fs.mkdir("/f/sub")

    def test_mkfile_creates_parents(self, fs):
        fs.mkfile("/a/b/c.txt", b"x")

        assert fs.is_dir("/a")
        assert fs.is_dir("/a/b")
        assert fs.is_file("/a/b/c.txt")

    def test_mkfile_existing(self, fs):
        fs.mkfile("/f")

        with pytest.raises(AlreadyExistsError):
            fs.mkfile("/f")
        with pytest.raises(AlreadyExistsError):
            fs.mkfile("/")

    def test_content_round_trip(self, fs):
        fs.mkfile("/f", b"initial")

        fs.write("/f", b"replaced")
        assert fs.read("/f") == b"replaced"

        fs.append("/f", b"-a")
        fs.append("/f", "-b")
        assert fs.read("/f") == b"replaced-a-b"

    def test_read_returns_a_copy(self, fs):
        fs.mkfile("/f", b"abc")

        data = fs.read("/f")
        fs.append("/f", b"d")

        assert data == b"abc"

    def test_content_errors(self, fs):
        fs.mkdir("/d")

        with pytest.raises(NotFoundError):
            fs.read("/missing")
        with pytest.raises(NotFoundError):
            fs.write("/missing", b"x")
        with pytest.raises(NotAFileError):
            fs.append("/d", b"x")
        assert not fs.exists("/missing")

    def test_rm(self, fs):
        fs.mkfile("/a/b/c.txt")
        fs.cd("/a/b")

        fs.rm("/a")

        assert not fs.exists("/a")
        assert fs.cwd() == "/"

    def test_rm_errors(self, fs):
        with pytest.raises(NotFoundError):
            fs.rm("/missing")
        with pytest.raises(InvalidPathError):
            fs.rm("/")
        with pytest.raises(InvalidPathError):
            fs.rm("")


# =============================================================================
# Listing Tests
# =============================================================================

class TestListing:
    """Tests for ls and tree on the memory backend."""

    def test_ls(self, fs):
        fs.mkfile("/b.txt")
        fs.mkdir("/a")
        fs.mkfile("/a/nested.txt")

        assert [(e.path, e.kind) for e in fs.ls("/")] == [
            ("/a", EntryKind.DIRECTORY),
            ("/b.txt", EntryKind.FILE),
        ]

    def test_tree_preorder_and_restartable(self, fs):
        fs.mkfile("/project/main.py")
        fs.mkfile("/project/tests/test_main.py")
        fs.mkdir("/project/docs")

        listing = fs.tree("/")
        expected = [
            "/project",
            "/project/docs",
            "/project/main.py",
            "/project/tests",
            "/project/tests/test_main.py",
        ]

        assert listing.paths() == expected
        assert listing.paths() == expected

    def test_listing_follows_recreated_directory(self, fs):
        fs.mkdir("/d")
        listing = fs.ls("/d")
        subtree = fs.tree("/d")

        fs.rm("/d")
        assert listing.paths() == []
        assert subtree.paths() == []

        fs.mkdir("/d")
        fs.mkfile("/d/x")

        assert listing.paths() == ["/d/x"]
        assert subtree.paths() == ["/d/x"]

    def test_listing_errors(self, fs):
        fs.mkfile("/f")

        with pytest.raises(NotFoundError):
            fs.ls("/missing")
        with pytest.raises(NotADirError):
            fs.tree("/f")


# =============================================================================
# Cleanup Tests
# =============================================================================

class TestCleanup:
    """Tests for cleanup and teardown."""

    def test_cleanup_empties_tree(self, fs):
        fs.mkfile("/a/b.txt")
        fs.mkfile("/c.txt")
        fs.cd("/a")

        removed = fs.cleanup()

        assert removed[0] == "/a/b.txt"
        assert set(removed) == {"/a", "/a/b.txt", "/c.txt"}
        assert list(fs.ls("/")) == []
        assert fs.cwd() == "/"
        assert fs.cleanup() == []

    def test_close_discards_tree(self):
        with MemoryFS() as fs:
            fs.mkfile("/a.txt")

        assert not fs.exists("/a.txt")
