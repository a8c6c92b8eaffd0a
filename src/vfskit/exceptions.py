"""
Virtual Filesystem Exception Hierarchy

This module defines the error taxonomy shared by every vfskit backend. Each
error carries the offending internal path plus optional context, so callers
can react to the precise kind of failure instead of parsing messages.

The hierarchy is designed to:
1. Give each failure mode its own type (not found, already exists, ...)
2. Always name the internal VFS path involved
3. Wrap host I/O failures without losing the original exception
"""

import errno as errno_codes
import time
from typing import Any, Dict, Optional


class VfsError(Exception):
    """
    Base exception class for all vfskit errors.

    Attributes:
        error_code: Unique error code for programmatic handling
        path: Internal VFS path the error refers to (if applicable)
        timestamp: When the error occurred
        context: Additional context information
        suggestion: Suggested fix or next steps (if applicable)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "VFS_ERROR",
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        """
        Initialize a VFS error.

        Args:
            message: Technical error message
            error_code: Unique error code for programmatic handling
            path: Internal path the failure refers to
            context: Additional context information
            suggestion: Suggested fix or next steps
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.path = path
        self.timestamp = time.time()
        self.context = context or {}
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "path": self.path,
            "timestamp": self.timestamp,
            "context": self.context,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        parts = [f"[{self.error_code}]", self.message]
        if self.suggestion:
            parts.append(f"({self.suggestion})")
        return " ".join(parts)


# =============================================================================
# PATH STATE ERRORS
# =============================================================================


class NotFoundError(VfsError):
    """Raised when nothing visible exists at the requested path."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"{path} does not exist",
            error_code=kwargs.pop("error_code", "NOT_FOUND"),
            path=path,
            **kwargs,
        )


class AlreadyExistsError(VfsError):
    """Raised when a create operation targets an occupied path."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"path already exists: {path}",
            error_code=kwargs.pop("error_code", "ALREADY_EXISTS"),
            path=path,
            **kwargs,
        )


class NotADirError(VfsError):
    """Raised when a directory was expected but a file was found."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"{path} is not a directory",
            error_code=kwargs.pop("error_code", "NOT_A_DIRECTORY"),
            path=path,
            **kwargs,
        )


class NotAFileError(VfsError):
    """Raised when a file was expected but a directory was found."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"{path} is a directory",
            error_code=kwargs.pop("error_code", "NOT_A_FILE"),
            path=path,
            **kwargs,
        )


class InvalidPathError(VfsError):
    """Raised for paths an operation refuses, e.g. removing the root."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"invalid path: {path!r}",
            error_code=kwargs.pop("error_code", "INVALID_PATH"),
            path=path,
            **kwargs,
        )


# =============================================================================
# OWNERSHIP ERRORS
# =============================================================================


class AlreadyManagedError(VfsError):
    """Raised when adopting a path the ledger already tracks."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"{path} is already managed by the VFS",
            error_code=kwargs.pop("error_code", "ALREADY_MANAGED"),
            path=path,
            **kwargs,
        )


class NotManagedError(VfsError):
    """Raised when forgetting a path the ledger does not track."""

    def __init__(self, path: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"{path} is not tracked by the VFS",
            error_code=kwargs.pop("error_code", "NOT_MANAGED"),
            path=path,
            **kwargs,
        )


# =============================================================================
# BACKEND ERRORS
# =============================================================================


class InvalidRootError(VfsError):
    """Raised when a host-backed VFS cannot use the requested root."""

    def __init__(self, root: Any, message: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or {}
        context.setdefault("root", str(root))
        super().__init__(
            message or f"invalid root: {root}",
            error_code=kwargs.pop("error_code", "INVALID_ROOT"),
            context=context,
            **kwargs,
        )
        self.root = root


class UnsupportedError(VfsError):
    """Raised when a backend lacks a capability of the contract."""

    def __init__(
        self,
        operation: str,
        backend: str,
        path: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or {}
        context.update({"operation": operation, "backend": backend})
        super().__init__(
            f"{backend} does not support {operation}()",
            error_code=kwargs.pop("error_code", "UNSUPPORTED"),
            path=path,
            context=context,
            **kwargs,
        )
        self.operation = operation
        self.backend = backend


class UnderlyingError(VfsError):
    """
    Raised when the host filesystem reports a failure the taxonomy has no
    dedicated kind for (disk full, I/O error, ...).

    The original OSError is kept in ``os_error`` and chained as ``__cause__``.
    """

    def __init__(
        self,
        path: str,
        os_error: Optional[OSError] = None,
        message: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or {}
        if os_error is not None:
            context.setdefault("errno", os_error.errno)
            if os_error.errno is not None:
                context.setdefault(
                    "errno_name", errno_codes.errorcode.get(os_error.errno)
                )
        if message is None:
            detail = os_error.strerror if os_error is not None else None
            message = f"host operation failed for {path}: {detail or os_error}"
        super().__init__(
            message,
            error_code=kwargs.pop("error_code", "UNDERLYING"),
            path=path,
            context=context,
            **kwargs,
        )
        self.os_error = os_error


class PermissionDeniedError(UnderlyingError):
    """Raised when the host refuses access to a path."""

    def __init__(
        self,
        path: str,
        os_error: Optional[OSError] = None,
        message: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(
            path,
            os_error=os_error,
            message=message or f"access denied: {path}",
            error_code=kwargs.pop("error_code", "PERMISSION_DENIED"),
            **kwargs,
        )
