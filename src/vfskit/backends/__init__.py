"""Storage backends implementing the FsBackend contract."""

from .base import FsBackend
from .host import HostFS
from .memory import MemoryDir, MemoryFile, MemoryFS

__all__ = ["FsBackend", "HostFS", "MemoryFS", "MemoryDir", "MemoryFile"]
