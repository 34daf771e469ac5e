"""
Lazy, breadth-first discovery of the files below a directory, plus packaging
of the discovered files into zip archives.

Usage::

    from dirwalk import DirWalker

    walker = DirWalker("build/classes")
    for f in walker:
        print(walker.relative_path(f))
"""

from dirwalk.errors import ExhaustionError, NotNestedError, WalkError
from dirwalk.handler import HandlerInit
from dirwalk.packager import PackageResult, list_entries, package_directories
from dirwalk.walker import DirWalker

__all__ = [
    "DirWalker",
    "ExhaustionError",
    "HandlerInit",
    "NotNestedError",
    "PackageResult",
    "WalkError",
    "list_entries",
    "package_directories",
]
