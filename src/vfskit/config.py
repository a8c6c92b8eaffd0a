"""
Configuration for host-backed virtual filesystems.
"""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HostFSConfig(BaseModel):
    """
    Pydantic schema for validating host-backed VFS construction parameters.

    The root is normalized lexically (no symlink resolution) so the same
    configuration always maps to the same host location.
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(
        ..., description="Absolute host directory the VFS is confined to"
    )
    auto_clean: bool = Field(
        True,
        description="Delete managed artifacts (and created root parents) on teardown",
    )
    check_permissions: bool = Field(
        True, description="Verify the root is writable and traversable on startup"
    )
    allow_symlink_escape: bool = Field(
        False,
        description="Allow host paths that reach outside the root through symlinks",
    )

    @field_validator("root", mode="before")
    @classmethod
    def validate_root(cls, value):
        """Reject empty or relative roots and normalize the rest."""
        text = os.fspath(value) if isinstance(value, (str, os.PathLike)) else value
        if not isinstance(text, str):
            raise ValueError(f"root must be a path, got {type(value).__name__}")
        if not text:
            raise ValueError("invalid root path: empty")
        if not os.path.isabs(text):
            raise ValueError(f"the root path must be absolute: {text}")
        return Path(os.path.normpath(text))
