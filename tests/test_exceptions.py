"""
Tests for the vfskit.exceptions module.

This module tests:
- VfsError base class context and formatting
- Error codes of the specialized exceptions
- Translation of host OSErrors into the taxonomy
"""

import errno

import pytest

from vfskit.backends.host import host_errors
from vfskit.exceptions import (
    AlreadyExistsError,
    AlreadyManagedError,
    InvalidPathError,
    InvalidRootError,
    NotADirError,
    NotAFileError,
    NotFoundError,
    NotManagedError,
    PermissionDeniedError,
    UnderlyingError,
    UnsupportedError,
    VfsError,
)


# =============================================================================
# VfsError Tests
# =============================================================================

class TestVfsError:
    """Tests for the base VfsError class."""

    def test_basic_creation(self):
        error = VfsError("Something went wrong")

        assert "Something went wrong" in str(error)
        assert error.error_code == "VFS_ERROR"

    def test_with_path_and_suggestion(self):
        error = VfsError("boom", path="/a", suggestion="try again")

        assert error.path == "/a"
        assert str(error) == "[VFS_ERROR] boom (try again)"

    def test_to_dict(self):
        error = NotFoundError("/missing", context={"op": "read"})

        result = error.to_dict()

        assert result["error_type"] == "NotFoundError"
        assert result["error_code"] == "NOT_FOUND"
        assert result["path"] == "/missing"
        assert result["context"] == {"op": "read"}
        assert "timestamp" in result


# =============================================================================
# Specialized Error Tests
# =============================================================================

class TestSpecializedErrors:
    """Tests for error codes and default messages."""

    @pytest.mark.parametrize(
        "error_class, code",
        [
            (NotFoundError, "NOT_FOUND"),
            (AlreadyExistsError, "ALREADY_EXISTS"),
            (NotADirError, "NOT_A_DIRECTORY"),
            (NotAFileError, "NOT_A_FILE"),
            (AlreadyManagedError, "ALREADY_MANAGED"),
            (NotManagedError, "NOT_MANAGED"),
            (InvalidPathError, "INVALID_PATH"),
        ],
    )
    def test_path_errors_name_the_path(self, error_class, code):
        error = error_class("/some/path")

        assert isinstance(error, VfsError)
        assert error.error_code == code
        assert error.path == "/some/path"
        assert "/some/path" in str(error)

    def test_invalid_root(self):
        error = InvalidRootError("rel/path")

        assert error.root == "rel/path"
        assert error.context["root"] == "rel/path"

    def test_unsupported(self):
        error = UnsupportedError("add", "MemoryFS", path="/a")

        assert error.context == {"operation": "add", "backend": "MemoryFS"}
        assert "MemoryFS does not support add()" in str(error)

    def test_underlying_keeps_errno(self):
        os_error = OSError(errno.ENOSPC, "No space left on device")

        error = UnderlyingError("/big.bin", os_error=os_error)

        assert error.os_error is os_error
        assert error.context["errno"] == errno.ENOSPC
        assert error.context["errno_name"] == "ENOSPC"
        assert "No space left on device" in str(error)

    def test_permission_denied_is_underlying(self):
        error = PermissionDeniedError("/secret")

        assert isinstance(error, UnderlyingError)
        assert error.error_code == "PERMISSION_DENIED"


# =============================================================================
# Host Error Translation Tests
# =============================================================================

class TestHostErrors:
    """Tests for the OSError translation context manager."""

    @pytest.mark.parametrize(
        "raised, expected",
        [
            (FileNotFoundError(errno.ENOENT, "missing"), NotFoundError),
            (FileExistsError(errno.EEXIST, "exists"), AlreadyExistsError),
            (NotADirectoryError(errno.ENOTDIR, "not dir"), NotADirError),
            (IsADirectoryError(errno.EISDIR, "is dir"), NotAFileError),
            (PermissionError(errno.EACCES, "denied"), PermissionDeniedError),
            (OSError(errno.EIO, "io"), UnderlyingError),
        ],
    )
    def test_translation(self, raised, expected):
        with pytest.raises(expected) as exc_info:
            with host_errors("/p"):
                raise raised

        assert exc_info.value.path == "/p"
        assert exc_info.value.__cause__ is raised

    def test_non_os_errors_pass_through(self):
        with pytest.raises(KeyError):
            with host_errors("/p"):
                raise KeyError("x")
