"""Exceptions raised by the directory walker."""

from __future__ import annotations

from pathlib import Path


class WalkError(Exception):
    """Base class for walker errors."""


class ExhaustionError(WalkError, LookupError):
    """`DirWalker.next()` was called after the last file was delivered."""


class NotNestedError(WalkError, ValueError):
    """A path given to `DirWalker.relative_path()` is not nested below the root."""

    def __init__(self, file: Path, root: Path) -> None:
        self.file: Path = file
        self.root: Path = root
        super().__init__(f"The file '{file}' is not nested below the base directory '{root}'")
