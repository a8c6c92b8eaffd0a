"""
Data models shared by the VFS backends.

This module defines the value types returned by listing operations and
stored in the ownership ledger.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List

from . import paths


class EntryKind(str, Enum):
    """Kind of a filesystem artifact."""
    FILE = "file"
    DIRECTORY = "directory"


class Origin(str, Enum):
    """How an artifact came under VFS control."""
    CREATED = "created"  # Explicit mkdir/mkfile target
    IMPLICIT = "implicit"  # Missing ancestor created on the way to a target
    ADOPTED = "adopted"  # Pre-existing host artifact brought in with add()


@dataclass(frozen=True)
class DirEntry:
    """A single result of ls() or tree()."""
    path: str
    kind: EntryKind

    @property
    def name(self) -> str:
        return paths.basename(self.path)

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class LedgerEntry:
    """
    Ownership record for one managed internal path.

    ``owned`` distinguishes artifacts this instance brought into existence
    from adopted ones whose prior existence predates the VFS.
    """
    path: str
    kind: EntryKind
    origin: Origin

    @property
    def owned(self) -> bool:
        return self.origin is not Origin.ADOPTED

    @property
    def depth(self) -> int:
        return paths.depth(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "path": self.path,
            "kind": self.kind.value,
            "origin": self.origin.value,
        }


class DirListing:
    """
    Lazy, restartable sequence of directory entries.

    Nothing is computed until iteration starts, and every new iteration
    recomputes the entries from the backend's current state.
    """

    def __init__(self, path: str, producer: Callable[[], Iterable[DirEntry]]):
        self.path = path
        self._producer = producer

    def __iter__(self) -> Iterator[DirEntry]:
        return iter(self._producer())

    def paths(self) -> List[str]:
        return [entry.path for entry in self]

    def __repr__(self) -> str:
        return f"DirListing(path='{self.path}')"
