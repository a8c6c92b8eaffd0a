"""
Ownership ledger for host-backed filesystems.

The ledger records exactly which internal paths are managed by a VFS
instance, either because the instance created them or because the caller
adopted them. It is the only source of truth for cleanup: anything not in
the ledger is never deleted by teardown.

Besides managed entries, the ledger derives *visibility*: the root, every
managed path and every ancestor directory of a managed path are visible.
Ancestors are counted, not stored, so a pre-existing directory that merely
contains an adopted file stays visible without ever becoming managed.
"""

import logging
from typing import Dict, Iterator, List, Optional

from . import paths
from .data_models import DirEntry, EntryKind, LedgerEntry, Origin

logger = logging.getLogger(__name__)


class OwnershipLedger:
    """Per-instance record of managed internal paths."""

    def __init__(self) -> None:
        self._entries: Dict[str, LedgerEntry] = {}
        # ancestor path -> number of managed entries strictly below it
        self._ancestor_refs: Dict[str, int] = {}

    # ========== Recording ==========

    def record(self, path: str, kind: EntryKind, origin: Origin) -> LedgerEntry:
        """
        Mark ``path`` as managed.

        Re-recording a managed path replaces its entry.

        Raises:
            ValueError: If ``path`` is the root or lies below a managed file
        """
        if paths.is_root(path):
            raise ValueError("the root is never a ledger entry")
        for ancestor in paths.ancestors(path):
            existing = self._entries.get(ancestor)
            if existing is not None and existing.kind is EntryKind.FILE:
                raise ValueError(f"cannot record {path}: {ancestor} is a file")

        entry = LedgerEntry(path=path, kind=kind, origin=origin)
        if path not in self._entries:
            for ancestor in paths.ancestors(path):
                self._ancestor_refs[ancestor] = self._ancestor_refs.get(ancestor, 0) + 1
        self._entries[path] = entry
        logger.debug(f"Ledger: recorded {path} ({kind.value}, {origin.value})")
        return entry

    def release(self, path: str) -> Optional[LedgerEntry]:
        """Drop the entry at ``path``. Returns it, or None if untracked."""
        entry = self._entries.pop(path, None)
        if entry is None:
            return None
        for ancestor in paths.ancestors(path):
            remaining = self._ancestor_refs[ancestor] - 1
            if remaining:
                self._ancestor_refs[ancestor] = remaining
            else:
                del self._ancestor_refs[ancestor]
        logger.debug(f"Ledger: released {path}")
        return entry

    def release_tree(self, path: str) -> List[LedgerEntry]:
        """Drop the entry at ``path`` and every entry below it."""
        doomed = [p for p in self._entries if paths.is_within(p, path)]
        return [self.release(p) for p in doomed]

    def clear(self) -> None:
        self._entries.clear()
        self._ancestor_refs.clear()

    # ========== Queries ==========

    def get(self, path: str) -> Optional[LedgerEntry]:
        return self._entries.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        for path in sorted(self._entries, key=paths.sort_key):
            yield self._entries[path]

    def has_descendants(self, path: str) -> bool:
        if paths.is_root(path):
            return bool(self._entries)
        return path in self._ancestor_refs

    def descendants(self, path: str) -> List[LedgerEntry]:
        """Managed entries strictly below ``path``, in pre-order."""
        return [e for e in self if e.path != path and paths.is_within(e.path, path)]

    def deepest_first(self) -> List[LedgerEntry]:
        """Entries in cleanup order: deepest paths first."""
        return sorted(
            self._entries.values(),
            key=lambda e: (e.depth, paths.sort_key(e.path)),
            reverse=True,
        )

    def is_visible(self, path: str) -> bool:
        return (
            paths.is_root(path)
            or path in self._entries
            or path in self._ancestor_refs
        )

    def kind_of(self, path: str) -> Optional[EntryKind]:
        """Kind of a visible path, or None if the path is not visible."""
        entry = self._entries.get(path)
        if entry is not None:
            return entry.kind
        if paths.is_root(path) or path in self._ancestor_refs:
            return EntryKind.DIRECTORY
        return None

    def children(self, path: str) -> List[DirEntry]:
        """Visible immediate children of ``path``, sorted by name."""
        found = {
            p for p in self._visible_paths() if p != path and paths.parent(p) == path
        }
        return [DirEntry(p, self.kind_of(p)) for p in sorted(found, key=paths.sort_key)]

    def walk(self, path: str) -> List[DirEntry]:
        """Every visible path strictly below ``path``, in pre-order."""
        found = {
            p for p in self._visible_paths() if p != path and paths.is_within(p, path)
        }
        return [DirEntry(p, self.kind_of(p)) for p in sorted(found, key=paths.sort_key)]

    def snapshot(self) -> Dict[str, LedgerEntry]:
        return dict(self._entries)

    def _visible_paths(self) -> List[str]:
        return list(self._entries) + list(self._ancestor_refs)

    def __repr__(self) -> str:
        return f"OwnershipLedger(entries={len(self._entries)})"
