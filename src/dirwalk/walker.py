"""
DirWalker — lazy, breadth-first enumeration of the files below a directory.

The walker is an external iterator: `has_next()` / `next()` pull one file at a
time, expanding directories only as far as needed to produce the next file.
Directories are traversed but never returned.

Usage::

    walker = DirWalker("build/classes")
    while walker.has_next():
        f = walker.next()
        print(walker.relative_path(f))
"""

from __future__ import annotations

import logging
import os
from collections import deque
from pathlib import Path

from dirwalk.errors import ExhaustionError, NotNestedError

log = logging.getLogger(__name__)


class DirWalker:
    """
    Walks a directory hierarchy from a root directory, discovering files.

    Nothing is read at construction time. The first `has_next()` or `next()`
    lists the root; after that, queued directories are expanded front to back
    whenever the file buffer runs dry. A directory that cannot be listed
    (missing, unreadable, not a directory) contributes no entries.

    Not thread-safe. Not restartable: once drained, a walker stays drained.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root: Path = Path(root)
        # Path("") means ".", but an empty root names no directory at all.
        self._root_is_empty: bool = os.fspath(root) == ""
        # Discovered files not yet handed out, in listing order.
        self._pending_files: deque[Path] = deque()
        # Discovered directories not yet listed (FIFO).
        self._pending_dirs: deque[Path] = deque()
        self._started: bool = False

    @property
    def root(self) -> Path:
        """The directory this walker was started for."""
        return self._root

    def has_next(self) -> bool:
        """True if another file is available. May list directories to find out."""
        self._fill()
        return bool(self._pending_files)

    def next(self) -> Path:
        """
        Remove and return the next file.

        Raises `ExhaustionError` when every file has already been returned.
        """
        self._fill()
        if not self._pending_files:
            raise ExhaustionError(f"No more files below '{self._root}'")
        return self._pending_files.popleft()

    def relative_path(self, file: str | os.PathLike[str]) -> str:
        """
        Return the path of `file` relative to the root, e.g. `a/b/c/D.class`.

        The comparison is lexical: path components of `file` must start with
        the components of the root. Nothing is resolved against the filesystem,
        so `..`, symlinks and case folding are not taken into account. Pass
        paths produced by this walker.
        """
        path = Path(file)
        try:
            relative = path.relative_to(self._root)
        except ValueError:
            raise NotNestedError(path, self._root) from None
        if not relative.parts:
            # The root itself has no name below the root.
            raise NotNestedError(path, self._root)
        return str(relative)

    def __iter__(self) -> DirWalker:
        return self

    def __next__(self) -> Path:
        try:
            return self.next()
        except ExhaustionError:
            raise StopIteration from None

    def __repr__(self) -> str:
        return (
            f"DirWalker(root={str(self._root)!r}, started={self._started}, "
            f"pending_files={len(self._pending_files)}, pending_dirs={len(self._pending_dirs)})"
        )

    def _fill(self) -> None:
        """Prime on first use, then expand queued directories until a file turns up."""
        if not self._started:
            self._started = True
            if self._root_is_empty:
                log.debug("Treating empty root path as an empty directory")
            else:
                self._expand(self._root)
        while not self._pending_files and self._pending_dirs:
            self._expand(self._pending_dirs.popleft())

    def _expand(self, directory: Path) -> None:
        """List `directory`, queueing subdirectories and buffering files."""
        try:
            with os.scandir(directory) as it:
                entries = [(entry.name, entry.is_dir()) for entry in it]
        except OSError as e:
            log.debug("Treating unlistable directory as empty: %s (%s)", directory, e)
            return

        for name, is_dir in entries:
            child = directory / name
            if is_dir:
                self._pending_dirs.append(child)
            else:
                self._pending_files.append(child)
