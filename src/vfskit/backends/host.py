"""Host-backed virtual filesystem confined to a root directory.

Internal paths are always POSIX paths rooted at '/', mapped onto a host
directory. The VFS only sees what its ownership ledger tracks: artifacts it
created, artifacts the caller adopted with ``add()``, their ancestor
directories and the root. Pre-existing host data stays invisible and is
never touched by cleanup.

Example:
    >>> with HostFS(Path("/tmp/my_vfs")) as fs:
    ...     fs.mkdir("/docs")
    ...     fs.mkfile("/docs/note.txt", b"Hello")
    ...     fs.read("/docs/note.txt")
    b'Hello'
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from pydantic import ValidationError

from .. import paths
from ..config import HostFSConfig
from ..data_models import DirListing, EntryKind, Origin
from ..exceptions import (
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
    VfsError,
)
from ..ledger import OwnershipLedger
from .base import Content, FsBackend, as_bytes

logger = logging.getLogger(__name__)


@contextmanager
def host_errors(path: str) -> Iterator[None]:
    """Translate host OSErrors raised inside the block into VFS errors."""
    try:
        yield
    except FileNotFoundError as exc:
        raise NotFoundError(path, message=f"{path} does not exist on the host") from exc
    except FileExistsError as exc:
        raise AlreadyExistsError(path) from exc
    except NotADirectoryError as exc:
        raise NotADirError(path) from exc
    except IsADirectoryError as exc:
        raise NotAFileError(path) from exc
    except PermissionError as exc:
        raise PermissionDeniedError(path, os_error=exc) from exc
    except OSError as exc:
        raise UnderlyingError(path, os_error=exc) from exc


class HostFS(FsBackend):
    """
    A virtual filesystem mapped onto a real host directory.

    Usage notes:
    - Symlinks are never followed by removal; ``rm()`` removes the link.
    - Permissions are not adjusted; the root must be writable.
    - Not thread-safe; two instances on overlapping roots are unsupported.
    """

    def __init__(
        self,
        root: Union[str, Path, None] = None,
        auto_clean: bool = True,
        check_permissions: bool = True,
        allow_symlink_escape: bool = False,
        config: Optional[HostFSConfig] = None,
    ) -> None:
        """
        Initialize the host-backed filesystem.

        Args:
            root: Absolute host directory; created (with missing ancestors)
                  if it does not exist
            auto_clean: Delete managed artifacts on teardown
            check_permissions: Verify the root is writable and traversable
            allow_symlink_escape: If True, allow host paths that reach
                                  outside the root through symlinks
            config: Complete configuration (overrides the other arguments)

        Raises:
            InvalidRootError: The root is relative, empty, not a directory or
                              below a file
            PermissionDeniedError: The root is not accessible
        """
        self._closed = True

        if config is None:
            try:
                config = HostFSConfig(
                    root=root,
                    auto_clean=auto_clean,
                    check_permissions=check_permissions,
                    allow_symlink_escape=allow_symlink_escape,
                )
            except ValidationError as exc:
                reason = exc.errors()[0].get("msg", str(exc))
                raise InvalidRootError(root, message=f"invalid root {root!r}: {reason}") from exc

        self.config = config
        self._root = config.root
        self._auto_clean = config.auto_clean
        self._cwd = paths.ROOT
        self._ledger = OwnershipLedger()
        self._created_root_parents: List[Path] = []

        if os.path.lexists(self._root) and not self._root.is_dir():
            raise InvalidRootError(self._root, message=f"{self._root} is not a directory")

        if not self._root.exists():
            self._make_root()

        if config.check_permissions and not os.access(self._root, os.W_OK | os.X_OK):
            self._discard_created_root()
            raise PermissionDeniedError(str(self._root), message=f"Access denied: {self._root}")

        self._real_root = self._root.resolve()
        self._closed = False
        logger.info(
            f"HostFS ready at {self._root} (auto_clean={self._auto_clean}, "
            f"created {len(self._created_root_parents)} root dirs)",
            extra={"vfs_root": str(self._root)},
        )

    @classmethod
    def from_config(cls, config: HostFSConfig) -> "HostFS":
        return cls(config=config)

    def _make_root(self) -> None:
        """Create the root and missing ancestors, remembering each one created."""
        missing: List[Path] = []
        probe = self._root
        while not probe.exists():
            missing.append(probe)
            probe = probe.parent
        missing.reverse()

        try:
            for directory in missing:
                with host_errors(str(directory)):
                    directory.mkdir()
                self._created_root_parents.append(directory)
        except NotADirError as exc:
            self._discard_created_root()
            raise InvalidRootError(
                self._root, message=f"{self._root}: {exc.path} is not a directory"
            ) from exc
        except VfsError:
            self._discard_created_root()
            raise

    def _discard_created_root(self) -> None:
        """Undo root creation after a failed construction."""
        try:
            self._remove_created_root_parents()
        except VfsError as exc:
            logger.warning(f"Could not remove created root directories of {self._root}: {exc}")
        self._created_root_parents.clear()

    # ========== Configuration & introspection ==========

    @property
    def auto_clean(self) -> bool:
        return self._auto_clean

    def set_auto_clean(self, clean: bool) -> None:
        """If true, managed artifacts are removed on teardown."""
        self._auto_clean = clean

    @property
    def ledger(self) -> OwnershipLedger:
        return self._ledger

    @property
    def created_root_parents(self) -> List[Path]:
        return list(self._created_root_parents)

    def is_managed(self, path: str) -> bool:
        return self._resolve(path) in self._ledger

    # ========== Identity ==========

    def root(self) -> Path:
        return self._root

    def cwd(self) -> str:
        return self._cwd

    def to_host(self, path: str) -> Path:
        """
        Host path equivalent to an internal path.

        Normalization has already removed every '..', so the result is the
        root or one of its descendants.
        """
        inner = self._resolve(path)
        return self._root.joinpath(*paths.parts(inner))

    def _host_path(self, inner: str, follow: bool = False) -> Path:
        """
        Host path for ``inner``, refusing locations that symlinks already
        present under the root send outside of it.

        The directory holding the target is always resolved. With ``follow``
        the target itself is resolved too, for operations that act on what a
        link points to rather than on the link.

        Raises:
            InvalidPathError: The resolved location escapes the root
        """
        host = self.to_host(inner)
        if paths.is_root(inner) or self.config.allow_symlink_escape:
            return host
        candidate = (host if follow else host.parent).resolve(strict=False)
        try:
            candidate.relative_to(self._real_root)
        except ValueError as exc:
            raise InvalidPathError(
                inner,
                message=f"{inner} resolves outside the root: {candidate}",
                context={"host_path": str(candidate)},
            ) from exc
        return host

    # ========== Navigation & queries ==========

    def cd(self, path: str) -> None:
        target = self._resolve(path)
        self._require_dir(target)
        self._cwd = target

    def exists(self, path: str) -> bool:
        return self._ledger.is_visible(self._resolve(path))

    def is_dir(self, path: str) -> bool:
        return self._ledger.kind_of(self._resolve(path)) is EntryKind.DIRECTORY

    def is_file(self, path: str) -> bool:
        return self._ledger.kind_of(self._resolve(path)) is EntryKind.FILE

    def ls(self, path: str = ".") -> DirListing:
        inner = self._resolve(path)
        self._require_dir(inner)
        return DirListing(inner, lambda: self._ledger.children(inner))

    def tree(self, path: str = ".") -> DirListing:
        inner = self._resolve(path)
        self._require_dir(inner)
        return DirListing(inner, lambda: self._ledger.walk(inner))

    # ========== Creation ==========

    def mkdir(self, path: str) -> None:
        """
        Create a directory and all missing ancestors.

        An already visible directory is left as is.

        Raises:
            AlreadyExistsError: ``path`` is a file, or exists on the host
                                without being managed
            NotADirError: An ancestor is a file
        """
        inner = self._resolve(path)
        kind = self._ledger.kind_of(inner)
        if kind is EntryKind.FILE:
            raise AlreadyExistsError(inner, message=f"{inner} already exists as a file")
        if kind is EntryKind.DIRECTORY:
            logger.debug(f"mkdir: {inner} already exists")
            return
        self._create_dirs(inner, Origin.CREATED)

    def mkfile(self, path: str, content: Optional[Content] = None) -> None:
        """
        Create a new file, creating missing parent directories first.

        Raises:
            AlreadyExistsError: Something already exists at ``path``
            NotADirError: An ancestor is a file
        """
        inner = self._resolve(path)
        if self._ledger.kind_of(inner) is not None:
            raise AlreadyExistsError(inner)
        data = as_bytes(content)

        parent = paths.parent(inner)
        if self._ledger.kind_of(parent) is not EntryKind.DIRECTORY:
            self._create_dirs(parent, Origin.IMPLICIT)

        host = self._host_path(inner)
        self._refuse_unmanaged(inner, host)
        with host_errors(inner):
            handle = open(host, "xb")
        self._ledger.record(inner, EntryKind.FILE, Origin.CREATED)
        with host_errors(inner), handle:
            handle.write(data)
        logger.debug(f"mkfile: {inner} ({len(data)} bytes)")

    def _create_dirs(self, target: str, origin: Origin) -> None:
        """Create every non-visible directory from the root down to ``target``."""
        missing = []
        for candidate in paths.ancestors(target) + [target]:
            kind = self._ledger.kind_of(candidate)
            if kind is EntryKind.FILE:
                raise NotADirError(
                    candidate, message=f"{candidate} is not a directory (creating {target})"
                )
            if kind is None:
                missing.append(candidate)

        hosts = [(directory, self._host_path(directory)) for directory in missing]
        for directory, host in hosts:
            self._refuse_unmanaged(directory, host)

        for directory, host in hosts:
            with host_errors(directory):
                host.mkdir()
            self._ledger.record(
                directory,
                EntryKind.DIRECTORY,
                origin if directory == target else Origin.IMPLICIT,
            )
            logger.debug(f"mkdir: {directory}")

    @staticmethod
    def _refuse_unmanaged(inner: str, host: Path) -> None:
        if os.path.lexists(host):
            raise AlreadyExistsError(
                inner,
                message=f"{inner} exists on the host but is not managed by the VFS",
                suggestion="adopt it with add() first",
            )

    # ========== Content ==========

    def read(self, path: str) -> bytes:
        inner = self._resolve(path)
        self._require_file(inner)
        with host_errors(inner):
            return self._host_path(inner, follow=True).read_bytes()

    def write(self, path: str, content: Content) -> None:
        inner = self._resolve(path)
        self._require_file(inner)
        data = as_bytes(content)
        # r+b never creates the host file
        host = self._host_path(inner, follow=True)
        with host_errors(inner), open(host, "r+b") as handle:
            handle.write(data)
            handle.truncate()

    def append(self, path: str, content: Content) -> None:
        inner = self._resolve(path)
        self._require_file(inner)
        data = as_bytes(content)
        host = self._host_path(inner, follow=True)
        with host_errors(inner), open(host, "r+b") as handle:
            handle.seek(0, os.SEEK_END)
            handle.write(data)

    # ========== Removal ==========

    def rm(self, path: str) -> None:
        """
        Remove a file, or a directory and everything below it on the host.

        Artifacts are removed deepest first and released from the ledger one
        by one, so a host failure leaves the ledger matching the disk.

        Raises:
            InvalidPathError: ``path`` is empty or resolves to the root
            NotFoundError: Nothing visible exists at ``path``
        """
        if not str(path):
            raise InvalidPathError("", message="invalid path: empty")
        inner = self._resolve(path)
        if paths.is_root(inner):
            raise InvalidPathError(inner, message="invalid path: the root cannot be removed")
        if not self._ledger.is_visible(inner):
            raise NotFoundError(inner)

        try:
            self._remove_host_tree(inner, self._host_path(inner))
            # Entries whose host artifact had already vanished
            self._ledger.release_tree(inner)
        finally:
            self._cwd = self._fallback_cwd(self._cwd)
        logger.debug(f"rm: {inner}")

    def _remove_host_tree(self, inner: str, host: Path) -> None:
        if not os.path.lexists(host):
            self._ledger.release(inner)
            return
        if host.is_dir() and not host.is_symlink():
            with host_errors(inner):
                children = sorted(host.iterdir())
            for child in children:
                self._remove_host_tree(paths.join(inner, child.name), child)
            with host_errors(inner):
                host.rmdir()
        else:
            with host_errors(inner):
                host.unlink()
        self._ledger.release(inner)

    # ========== Ownership ==========

    def add(self, path: str) -> None:
        """
        Adopt an existing host artifact into the VFS.

        Directories are adopted with all their descendants. Nothing is
        copied or moved; adopted artifacts are deleted by cleanup like
        created ones.

        Raises:
            InvalidPathError: ``path`` resolves to the root
            NotFoundError: Nothing exists at the host location
            AlreadyManagedError: ``path`` is already tracked
            NotADirError: An ancestor is a managed file
            InvalidPathError: The host location lies outside the root
        """
        inner = self._resolve(path)
        if paths.is_root(inner):
            raise InvalidPathError(inner, message="invalid path: the root cannot be adopted")
        if inner in self._ledger:
            raise AlreadyManagedError(inner)
        for ancestor in paths.ancestors(inner):
            if self._ledger.kind_of(ancestor) is EntryKind.FILE:
                raise NotADirError(
                    ancestor, message=f"{ancestor} is not a directory (adopting {inner})"
                )
        host = self._host_path(inner)
        if not os.path.lexists(host):
            raise NotFoundError(inner, message=f"No such file or directory: {inner}")
        self._adopt(inner, host)
        logger.debug(f"add: {inner}")

    def _adopt(self, inner: str, host: Path) -> None:
        is_dir = host.is_dir() and not host.is_symlink()
        if inner not in self._ledger:
            self._ledger.record(
                inner, EntryKind.DIRECTORY if is_dir else EntryKind.FILE, Origin.ADOPTED
            )
        if is_dir:
            with host_errors(inner):
                children = sorted(host.iterdir())
            for child in children:
                self._adopt(paths.join(inner, child.name), child)

    def forget(self, path: str) -> None:
        """
        Stop tracking ``path`` (and everything below it) without touching
        host data.

        Raises:
            InvalidPathError: ``path`` resolves to the root
            NotManagedError: Nothing is tracked at or below ``path``
        """
        inner = self._resolve(path)
        if paths.is_root(inner):
            raise InvalidPathError(inner, message="cannot forget root directory")
        released = self._ledger.release_tree(inner)
        if not released:
            raise NotManagedError(inner)
        self._cwd = self._fallback_cwd(self._cwd)
        logger.debug(f"forget: {inner} ({len(released)} entries)")

    # ========== Teardown ==========

    def cleanup(self) -> List[str]:
        """
        Delete every managed artifact from the host, deepest first.

        Directories still holding unmanaged content (e.g. forgotten files)
        are kept, and so are entries a symlink now places outside the root.
        The root itself is never removed. A host failure aborts the pass;
        entries processed before it stay released.

        Returns:
            Internal paths actually removed from the host
        """
        removed: List[str] = []
        try:
            for entry in self._ledger.deepest_first():
                if self._remove_managed(entry.path):
                    removed.append(entry.path)
                self._ledger.release(entry.path)
        finally:
            self._cwd = self._fallback_cwd(self._cwd)

        if removed:
            logger.debug(f"cleanup: removed {len(removed)} artifacts")
        return removed

    def _remove_managed(self, inner: str) -> bool:
        """Delete one managed artifact. Returns False when it is left in place."""
        try:
            host = self._host_path(inner)
        except InvalidPathError as exc:
            logger.warning(
                f"Keeping {inner}: {exc.message}", extra={"vfs_root": str(self._root)}
            )
            return False
        if not os.path.lexists(host):
            return False
        if host.is_dir() and not host.is_symlink():
            with host_errors(inner):
                occupied = any(host.iterdir())
            if occupied:
                logger.warning(
                    f"Keeping {inner}: it still holds unmanaged content",
                    extra={"vfs_root": str(self._root)},
                )
                return False
            with host_errors(inner):
                host.rmdir()
        else:
            with host_errors(inner):
                host.unlink()
        return True

    def close(self) -> None:
        """
        Tear the instance down.

        With auto-clean on, managed artifacts are deleted, then the root
        directories created at construction are removed if empty. With it
        off, only the in-memory bookkeeping is released.
        """
        if self._closed:
            return
        if self._auto_clean:
            self.cleanup()
            self._remove_created_root_parents()
        else:
            logger.info(
                f"Auto-clean disabled; leaving {len(self._ledger)} managed artifacts in place",
                extra={"vfs_root": str(self._root)},
            )
        self._ledger.clear()
        self._created_root_parents.clear()
        self._cwd = paths.ROOT
        self._closed = True

    def _remove_created_root_parents(self) -> None:
        for directory in reversed(self._created_root_parents):
            if not directory.exists():
                continue
            with host_errors(str(directory)):
                occupied = any(directory.iterdir())
            if occupied:
                # Its own parents cannot be empty either
                logger.warning(
                    f"Keeping created root directory {directory}: not empty",
                    extra={"vfs_root": str(self._root)},
                )
                return
            with host_errors(str(directory)):
                directory.rmdir()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        try:
            self.close()
        except Exception as exc:
            logger.warning(f"Teardown of HostFS at {self._root} failed: {exc}")

    # ========== Helpers ==========

    def _require_dir(self, inner: str) -> None:
        kind = self._ledger.kind_of(inner)
        if kind is None:
            raise NotFoundError(inner)
        if kind is EntryKind.FILE:
            raise NotADirError(inner)

    def _require_file(self, inner: str) -> None:
        kind = self._ledger.kind_of(inner)
        if kind is None:
            raise NotFoundError(inner)
        if kind is EntryKind.DIRECTORY:
            raise NotAFileError(inner)

    def __repr__(self) -> str:
        return f"HostFS(root='{self._root}', cwd='{self._cwd}', managed={len(self._ledger)})"
