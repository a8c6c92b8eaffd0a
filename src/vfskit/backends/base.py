"""
Abstract capability contract for VFS backends.

Every backend exposes the same operation set. Paths passed to any operation
are internal VFS paths (relative to the current working directory or
absolute from '/'); the only host-facing values are ``root()`` and
``to_host()``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Union

from .. import paths
from ..data_models import DirListing
from ..exceptions import UnsupportedError

logger = logging.getLogger(__name__)

Content = Union[bytes, bytearray, memoryview, str]


def as_bytes(content: Optional[Content]) -> bytes:
    """Coerce accepted content types to bytes; str is encoded as UTF-8."""
    if content is None:
        return b""
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise TypeError(f"content must be bytes or str, got {type(content).__name__}")


class FsBackend(ABC):
    """
    Operation set every filesystem backend must implement.

    Backends are context managers: leaving a ``with`` block calls
    ``close()``, whether the block returned normally or raised.
    """

    # ========== Identity ==========

    @abstractmethod
    def root(self) -> Any:
        """Fixed root identity (host path, or an opaque identity)."""

    @abstractmethod
    def cwd(self) -> str:
        """Current working directory as an absolute internal path."""

    def to_host(self, path: str):
        """Host location for an internal path."""
        raise UnsupportedError("to_host", type(self).__name__, path=path)

    # ========== Navigation & queries ==========

    @abstractmethod
    def cd(self, path: str) -> None:
        """
        Change the current working directory.

        Raises:
            NotFoundError: Nothing exists at ``path``
            NotADirError: ``path`` is a file
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """True if ``path`` exists in the VFS. Never raises."""

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """True if ``path`` is a directory. Never raises."""

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """True if ``path`` is a regular file. Never raises."""

    @abstractmethod
    def ls(self, path: str = ".") -> DirListing:
        """
        Immediate children of a directory.

        Errors are raised eagerly; entries are produced lazily.
        """

    @abstractmethod
    def tree(self, path: str = ".") -> DirListing:
        """All descendants of a directory, in pre-order. The start is excluded."""

    # ========== Mutations ==========

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create a directory and any missing ancestors."""

    @abstractmethod
    def mkfile(self, path: str, content: Optional[Content] = None) -> None:
        """Create a new file, creating missing parent directories."""

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Entire content of a file."""

    @abstractmethod
    def write(self, path: str, content: Content) -> None:
        """Replace the content of an existing file. Never creates files."""

    @abstractmethod
    def append(self, path: str, content: Content) -> None:
        """Append to an existing file. Never creates files."""

    @abstractmethod
    def rm(self, path: str) -> None:
        """Remove a file, or a directory recursively."""

    def add(self, path: str) -> None:
        """Adopt an existing artifact into the VFS."""
        raise UnsupportedError("add", type(self).__name__, path=path)

    def forget(self, path: str) -> None:
        """Stop tracking an artifact without touching its data."""
        raise UnsupportedError("forget", type(self).__name__, path=path)

    @abstractmethod
    def cleanup(self) -> List[str]:
        """Delete every managed artifact. Returns the removed internal paths."""

    @abstractmethod
    def close(self) -> None:
        """Release the instance's resources. Idempotent."""

    # ========== Scoped acquisition ==========

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ========== Helpers ==========

    def _resolve(self, path: str) -> str:
        return paths.resolve(path, self.cwd())

    def _fallback_cwd(self, cwd: str) -> str:
        """Nearest directory at or above ``cwd`` that is still a directory."""
        candidate = cwd
        while not paths.is_root(candidate) and not self.is_dir(candidate):
            candidate = paths.parent(candidate)
        if candidate != cwd:
            logger.debug(f"Working directory {cwd} vanished; falling back to {candidate}")
        return candidate
