"""Internal path model.

Internal paths are POSIX-style strings rooted at '/'. They never touch the
host filesystem: every function here is pure and total, so resolution can be
reasoned about (and tested) without any I/O.

Example:
    >>> resolve("../docs/./a.txt", "/work/src")
    '/work/docs/a.txt'
    >>> resolve("../../../etc", "/work")
    '/etc'
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List, Tuple

ROOT = "/"


def resolve(raw_path: str, cwd: str = ROOT) -> str:
    """Resolve a raw internal path against a working directory.

    Absolute paths ignore ``cwd``. '.' segments and empty segments are
    dropped, '..' pops one segment and is a no-op at the root, so the result
    can never climb above '/'.

    Args:
        raw_path: Path as given by the caller (relative or absolute)
        cwd: Absolute internal working directory

    Returns:
        Absolute, normalized internal path
    """
    raw = str(raw_path)
    candidate = PurePosixPath(raw) if raw else PurePosixPath(".")
    combined = candidate if raw.startswith(ROOT) else PurePosixPath(cwd) / candidate

    normalized: List[str] = []
    for part in combined.parts:
        # PurePosixPath keeps a leading '//' as its own anchor
        if part == "." or not part.strip("/"):
            continue
        if part == "..":
            if normalized:
                normalized.pop()
            continue
        normalized.append(part)

    return ROOT + "/".join(normalized)


def normalize(path: str) -> str:
    """Normalize a path as if it were resolved from the root."""
    return resolve(path, ROOT)


def parts(path: str) -> Tuple[str, ...]:
    """Segments of a normalized path; the root has none."""
    if path == ROOT:
        return ()
    return tuple(path[1:].split("/"))


def depth(path: str) -> int:
    return len(parts(path))


def is_root(path: str) -> bool:
    return path == ROOT


def parent(path: str) -> str:
    """Parent of a normalized path. The root is its own parent."""
    if path == ROOT:
        return ROOT
    head, _, _ = path.rpartition("/")
    return head or ROOT


def basename(path: str) -> str:
    return path.rpartition("/")[2]


def join(base: str, name: str) -> str:
    return f"{base.rstrip('/')}/{name}"


def is_within(path: str, ancestor: str) -> bool:
    """True if ``path`` equals ``ancestor`` or lies below it."""
    if ancestor == ROOT or path == ancestor:
        return True
    return path.startswith(ancestor + "/")


def ancestors(path: str) -> List[str]:
    """Proper ancestors of ``path``, root first."""
    result = [ROOT] if path != ROOT else []
    built = ""
    for part in parts(path)[:-1]:
        built = f"{built}/{part}"
        result.append(built)
    return result


def sort_key(path: str) -> Tuple[str, ...]:
    # Comparing segment tuples yields pre-order: a directory sorts right
    # before its own contents.
    return parts(path)
