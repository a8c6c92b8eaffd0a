"""
vfskit - Virtual filesystems for Python

A uniform interface for creating, reading, writing and removing files and
directories on interchangeable storage: a confined host directory
(``HostFS``) or an in-memory tree (``MemoryFS``).

Key ideas:
- Safety: host operations never leave the declared root, and cleanup only
  deletes what the VFS created or was explicitly told to adopt
- Testability: swap in MemoryFS to exercise filesystem code without disk I/O

Example:
    >>> from vfskit import MemoryFS
    >>> with MemoryFS() as fs:
    ...     fs.mkfile("/docs/note.txt", b"Hello")
    ...     fs.read("/docs/note.txt")
    b'Hello'

License: Apache-2.0
"""

__version__ = "0.1.0"

from .backends import FsBackend, HostFS, MemoryFS
from .config import HostFSConfig
from .data_models import DirEntry, DirListing, EntryKind, LedgerEntry, Origin
from .exceptions import (
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
from .ledger import OwnershipLedger
from .paths import normalize, resolve
from .utils import init_vfs_logging

__all__ = [
    # Version
    "__version__",
    # Backends
    "FsBackend",
    "HostFS",
    "MemoryFS",
    "HostFSConfig",
    # Data models
    "DirEntry",
    "DirListing",
    "EntryKind",
    "LedgerEntry",
    "Origin",
    "OwnershipLedger",
    # Paths
    "resolve",
    "normalize",
    # Errors
    "VfsError",
    "NotFoundError",
    "AlreadyExistsError",
    "NotADirError",
    "NotAFileError",
    "AlreadyManagedError",
    "NotManagedError",
    "InvalidRootError",
    "InvalidPathError",
    "UnsupportedError",
    "UnderlyingError",
    "PermissionDeniedError",
    # Logging
    "init_vfs_logging",
]
