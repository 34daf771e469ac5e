"""Exclusion patterns and `.dirwalkignore` handling using pathspec."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pathspec

IGNORE_FILE_NAME = ".dirwalkignore"


def compile_patterns(patterns: Iterable[str]) -> pathspec.PathSpec:
    """Compile gitignore-style patterns, skipping blanks and comments."""
    lines = [line for line in patterns if line.strip() and not line.strip().startswith("#")]
    return pathspec.PathSpec.from_lines("gitignore", lines)


def load_ignore_file(root: Path) -> pathspec.PathSpec | None:
    """
    Read `.dirwalkignore` at the top of `root` and return a compiled `PathSpec`,
    or `None` if the file doesn't exist or has no patterns.
    """
    ignore_file = root / IGNORE_FILE_NAME
    if not ignore_file.is_file():
        return None
    spec = compile_patterns(ignore_file.read_text().splitlines())
    if not spec.patterns:
        return None
    return spec
