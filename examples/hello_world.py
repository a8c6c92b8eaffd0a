"""
Hello World walkthrough for vfskit.

Creates a host-backed VFS under the system temp directory, writes two files,
reads them back and lets teardown remove everything the VFS created.
"""

import logging
import tempfile
from pathlib import Path

from vfskit import HostFS, init_vfs_logging


def main() -> None:
    init_vfs_logging(level=logging.INFO)

    root = Path(tempfile.gettempdir()) / "my_vfs"
    print(f"VFS root: {root}")

    # Creates the root on the host and remembers it as created
    with HostFS(root) as fs:
        # Creates <root>/docs and records /docs as managed
        fs.mkdir("/docs")
        fs.cd("docs")

        # Relative names land in the working directory...
        fs.mkfile("first.txt", b"Hello")
        assert fs.exists("first.txt")

        # ...absolute ones start from the VFS root
        fs.mkfile("/second.txt", b"World")
        assert fs.exists("/second.txt")

        fs.cd("..")
        first = fs.read("/docs/first.txt")
        second = fs.read("/second.txt")
        print(f"{first.decode()}, {second.decode()}!")

        for entry in fs.tree("/"):
            print(f"  {'d' if entry.is_dir else 'f'} {entry.path}")

    # Leaving the block removed every managed artifact, and the root too if
    # the VFS created it.
    # Use HostFS(root, auto_clean=False) to keep them.
    print(f"Root still exists: {root.exists()}")


if __name__ == "__main__":
    main()
