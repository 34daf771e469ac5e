"""
Packaging of directory trees into zip archives.

Each root is drained through its own `DirWalker`; the walker's relative paths
become archive entry names. The walker only discovers paths, all file contents
are read here.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pathspec
from strif import atomic_output_file

from dirwalk.defaults import DEFAULT_COMPRESSION, DEFAULT_EXCLUDES
from dirwalk.ignore import IGNORE_FILE_NAME, compile_patterns, load_ignore_file
from dirwalk.walker import DirWalker

log = logging.getLogger(__name__)

COMPRESSION_METHODS: dict[str, int] = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
}


@dataclass
class PackageResult:
    """Outcome of `package_directories()`: the archive and what went into it."""

    output: Path
    entries: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _exclude_spec(root: Path, exclude: Sequence[str] | None) -> pathspec.PathSpec:
    """Combine the exclusion patterns with the root's `.dirwalkignore`, if any."""
    patterns = list(exclude) if exclude is not None else list(DEFAULT_EXCLUDES)
    spec = compile_patterns(patterns)
    tool_ignore = load_ignore_file(root)
    if tool_ignore is not None:
        spec = pathspec.PathSpec([*spec.patterns, *tool_ignore.patterns])
    return spec


def _walk_entries(
    root: Path, exclude: Sequence[str] | None
) -> tuple[list[tuple[Path, str]], list[str]]:
    """Drain a walker over `root`, returning `(file, entry_name)` pairs and skipped names."""
    spec = _exclude_spec(root, exclude)
    kept: list[tuple[Path, str]] = []
    skipped: list[str] = []
    walker = DirWalker(root)
    while walker.has_next():
        file = walker.next()
        name = Path(walker.relative_path(file)).as_posix()
        if name == IGNORE_FILE_NAME or spec.match_file(name):
            skipped.append(name)
        elif not file.is_file():
            # Dangling symlinks, sockets, fifos: nothing to read.
            log.debug("Skipping %s: not a regular file", file)
            skipped.append(name)
        else:
            kept.append((file, name))
    return kept, skipped


def list_entries(root: str | Path, exclude: Sequence[str] | None = None) -> list[str]:
    """
    Archive entry names for every file below `root`, in walker order.

    `exclude=None` applies `DEFAULT_EXCLUDES`; a list replaces them.
    """
    kept, _ = _walk_entries(Path(root), exclude)
    return [name for _, name in kept]


def package_directories(
    roots: Sequence[str | Path],
    output: str | Path,
    exclude: Sequence[str] | None = None,
    compression: str = DEFAULT_COMPRESSION,
) -> PackageResult:
    """
    Write every file below `roots` into the zip archive `output`.

    Entries are named by their path relative to their root. When two roots
    produce the same name, the first one wins and the later file is skipped.
    The archive itself is never packaged, even if it lies inside a root.
    """
    if compression not in COMPRESSION_METHODS:
        raise ValueError(
            f"Unknown compression: {compression!r} (expected one of {sorted(COMPRESSION_METHODS)})"
        )

    output = Path(output)
    resolved_output = output.resolve()
    result = PackageResult(output=output)

    # Plan everything before writing, so the partial archive is never walked.
    plan: list[tuple[Path, str]] = []
    seen: set[str] = set()
    for raw_root in roots:
        root = Path(raw_root)
        kept, skipped = _walk_entries(root, exclude)
        result.skipped.extend(skipped)
        for file, name in kept:
            if name in seen or file.resolve() == resolved_output:
                log.debug("Skipping %s from %s", name, root)
                result.skipped.append(name)
                continue
            seen.add(name)
            plan.append((file, name))

    with atomic_output_file(output, make_parents=True) as tmp_path:
        with zipfile.ZipFile(tmp_path, "w", compression=COMPRESSION_METHODS[compression]) as zf:
            for file, name in plan:
                zf.write(file, arcname=name)
                result.entries.append(name)

    log.info("Wrote %d entries to %s", len(result.entries), output)
    return result
