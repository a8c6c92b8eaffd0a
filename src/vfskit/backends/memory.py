"""In-memory virtual filesystem.

The whole tree lives in process memory and is owned by the instance, so
there is no ledger: teardown simply empties the tree.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .. import paths
from ..data_models import DirEntry, DirListing, EntryKind
from ..exceptions import (
    AlreadyExistsError,
    InvalidPathError,
    NotADirError,
    NotAFileError,
    NotFoundError,
    UnsupportedError,
)
from .base import Content, FsBackend, as_bytes

logger = logging.getLogger(__name__)


@dataclass
class MemoryFile:
    content: bytearray = field(default_factory=bytearray)


@dataclass
class MemoryDir:
    children: Dict[str, Union["MemoryDir", MemoryFile]] = field(default_factory=dict)


Node = Union[MemoryDir, MemoryFile]


class MemoryFS(FsBackend):
    """
    A virtual filesystem stored entirely in memory.

    ``add()``, ``forget()`` and ``to_host()`` have no meaning here and raise
    UnsupportedError.
    """

    def __init__(self) -> None:
        self._tree = MemoryDir()
        self._cwd = paths.ROOT
        self._identity = f"mem://{id(self):x}"

    def root(self) -> str:
        return self._identity

    def cwd(self) -> str:
        return self._cwd

    def to_host(self, path: str):
        raise UnsupportedError("to_host", "MemoryFS", path=self._resolve(path))

    # ========== Tree access ==========

    def _lookup(self, inner: str) -> Optional[Node]:
        node: Node = self._tree
        for part in paths.parts(inner):
            if not isinstance(node, MemoryDir):
                return None
            node = node.children.get(part)
            if node is None:
                return None
        return node

    def _dir_at(self, inner: str) -> MemoryDir:
        node = self._lookup(inner)
        if node is None:
            raise NotFoundError(inner)
        if not isinstance(node, MemoryDir):
            raise NotADirError(inner)
        return node

    def _file_at(self, inner: str) -> MemoryFile:
        node = self._lookup(inner)
        if node is None:
            raise NotFoundError(inner)
        if not isinstance(node, MemoryFile):
            raise NotAFileError(inner)
        return node

    def _ensure_dirs(self, inner: str) -> MemoryDir:
        """Walk to ``inner``, creating missing directories on the way."""
        node = self._tree
        built = paths.ROOT
        for part in paths.parts(inner):
            built = paths.join(built, part)
            child = node.children.get(part)
            if child is None:
                child = node.children[part] = MemoryDir()
                logger.debug(f"mkdir: {built}")
            elif not isinstance(child, MemoryDir):
                raise NotADirError(built, message=f"{built} is not a directory (creating {inner})")
            node = child
        return node

    @staticmethod
    def _kind(node: Node) -> EntryKind:
        return EntryKind.DIRECTORY if isinstance(node, MemoryDir) else EntryKind.FILE

    def _walk(self, inner: str, node: MemoryDir) -> Iterator[Tuple[str, Node]]:
        for name in sorted(node.children):
            child = node.children[name]
            child_path = paths.join(inner, name)
            yield child_path, child
            if isinstance(child, MemoryDir):
                yield from self._walk(child_path, child)

    # ========== Navigation & queries ==========

    def cd(self, path: str) -> None:
        target = self._resolve(path)
        self._dir_at(target)
        self._cwd = target

    def exists(self, path: str) -> bool:
        return self._lookup(self._resolve(path)) is not None

    def is_dir(self, path: str) -> bool:
        return isinstance(self._lookup(self._resolve(path)), MemoryDir)

    def is_file(self, path: str) -> bool:
        return isinstance(self._lookup(self._resolve(path)), MemoryFile)

    def ls(self, path: str = ".") -> DirListing:
        inner = self._resolve(path)
        self._dir_at(inner)

        def produce() -> List[DirEntry]:
            directory = self._lookup(inner)
            if not isinstance(directory, MemoryDir):
                return []
            return [
                DirEntry(paths.join(inner, name), self._kind(directory.children[name]))
                for name in sorted(directory.children)
            ]

        return DirListing(inner, produce)

    def tree(self, path: str = ".") -> DirListing:
        inner = self._resolve(path)
        self._dir_at(inner)

        def produce() -> Iterator[DirEntry]:
            directory = self._lookup(inner)
            if isinstance(directory, MemoryDir):
                for child_path, node in self._walk(inner, directory):
                    yield DirEntry(child_path, self._kind(node))

        return DirListing(inner, produce)

    # ========== Mutations ==========

    def mkdir(self, path: str) -> None:
        inner = self._resolve(path)
        if isinstance(self._lookup(inner), MemoryFile):
            raise AlreadyExistsError(inner, message=f"{inner} already exists as a file")
        self._ensure_dirs(inner)

    def mkfile(self, path: str, content: Optional[Content] = None) -> None:
        inner = self._resolve(path)
        if self._lookup(inner) is not None:
            raise AlreadyExistsError(inner)
        data = as_bytes(content)
        parent = self._ensure_dirs(paths.parent(inner))
        parent.children[paths.basename(inner)] = MemoryFile(bytearray(data))
        logger.debug(f"mkfile: {inner} ({len(data)} bytes)")

    def read(self, path: str) -> bytes:
        return bytes(self._file_at(self._resolve(path)).content)

    def write(self, path: str, content: Content) -> None:
        self._file_at(self._resolve(path)).content = bytearray(as_bytes(content))

    def append(self, path: str, content: Content) -> None:
        self._file_at(self._resolve(path)).content.extend(as_bytes(content))

    def rm(self, path: str) -> None:
        if not str(path):
            raise InvalidPathError("", message="invalid path: empty")
        inner = self._resolve(path)
        if paths.is_root(inner):
            raise InvalidPathError(inner, message="invalid path: the root cannot be removed")
        if self._lookup(inner) is None:
            raise NotFoundError(inner)
        parent = self._dir_at(paths.parent(inner))
        del parent.children[paths.basename(inner)]
        self._cwd = self._fallback_cwd(self._cwd)
        logger.debug(f"rm: {inner}")

    def cleanup(self) -> List[str]:
        """Empty the tree, keeping the root. Returns removed paths, deepest first."""
        removed = [p for p, _ in self._walk(paths.ROOT, self._tree)]
        removed.sort(key=lambda p: (paths.depth(p), paths.sort_key(p)), reverse=True)
        self._tree.children.clear()
        self._cwd = paths.ROOT
        return removed

    def close(self) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        return f"MemoryFS(root='{self._identity}', cwd='{self._cwd}')"
