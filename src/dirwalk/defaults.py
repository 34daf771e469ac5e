"""
Default exclusion patterns for packaging.

These patterns use gitignore syntax and are matched against archive entry
names (paths relative to the scanned root). Directory patterns end with `/`.
"""

from __future__ import annotations

DEFAULT_EXCLUDES: list[str] = [
    # Python
    "__pycache__/",
    "*.pyc",
    "*.pyo",
    # OS litter
    ".DS_Store",
    "Thumbs.db",
    # Editor swap files
    "*.swp",
    "*~",
]

DEFAULT_COMPRESSION = "deflated"
